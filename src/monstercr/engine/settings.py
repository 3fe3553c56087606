from __future__ import annotations
from pathlib import Path
from pydantic import BaseModel, Field
from typing import Optional

from .combat import CombatSettings

SETTINGS_PATH = Path.home() / ".monstercr" / "settings.json"

class AppSettings(BaseModel):
    combat: CombatSettings = Field(default_factory=CombatSettings)
    content_dir: Optional[str] = None  # None = bundled statblocks
    rng_seed: Optional[int] = None     # None = fresh entropy per roll

def load_settings(path: Optional[Path] = None) -> AppSettings:
    path = path or SETTINGS_PATH
    if path.exists():
        return AppSettings.model_validate_json(path.read_text(encoding="utf-8"))
    s = AppSettings()
    save_settings(s, path)
    return s

def save_settings(s: AppSettings, path: Optional[Path] = None) -> None:
    path = path or SETTINGS_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(s.model_dump_json(indent=2), encoding="utf-8")
