from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

import yaml
from pydantic import TypeAdapter, field_validator

from .challenge import CR, cr_from_real
from .creature import BaseCreature

logger = logging.getLogger(__name__)

class Statblock(BaseCreature):
    """A BaseCreature as authored in content files, with an id and optional declared CR."""
    id: str
    cr: Optional[CR] = None

    @field_validator("cr", mode="before")
    @classmethod
    def _numeric_cr(cls, v):
        # YAML reads `cr: 2` as an int and `cr: 0.25` as a float
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return cr_from_real(v)
        return v

    def to_creature(self) -> BaseCreature:
        return BaseCreature(**{k: getattr(self, k) for k in BaseCreature.model_fields})

StatblockAdapter = TypeAdapter(Statblock)

def load_file(path: Path) -> dict:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in [".yaml", ".yml"]:
        return yaml.safe_load(text) or {}
    return json.loads(text)

def iter_files(root: Path, exts: Tuple[str, ...] = (".json", ".yaml", ".yml")) -> Iterable[Path]:
    if not root.exists():
        return []
    return sorted(p for p in root.rglob("*") if p.is_file() and p.suffix.lower() in exts)

@dataclass
class Bestiary:
    monsters: Dict[str, Statblock]

    def get(self, mid: str) -> Statblock:
        return self.monsters[mid]

    def ids(self) -> list[str]:
        return sorted(self.monsters)

def load_bestiary(base_dir: Path) -> Bestiary:
    monsters: Dict[str, Statblock] = {}
    for fp in iter_files(base_dir / "monsters"):
        logger.debug("loading statblock %s", fp)
        sb = StatblockAdapter.validate_python(load_file(fp))
        if sb.id in monsters:
            raise RuntimeError(f"Duplicate monster id {sb.id} in {fp}")
        monsters[sb.id] = sb
    return Bestiary(monsters=monsters)
