from __future__ import annotations
from pathlib import Path
from typing import Optional, Union

def package_dir() -> Path:
    # src/monstercr
    return Path(__file__).resolve().parent.parent

def content_dir(override: Optional[Union[str, Path]] = None) -> Path:
    """Directory holding monsters/; the bundled statblocks unless overridden."""
    if override:
        return Path(override).expanduser()
    return package_dir() / "content"
