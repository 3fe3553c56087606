from __future__ import annotations
from typing import Iterator, Literal, Tuple, Union
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .dice import Die
from ..util.numbers import clamp_nonneg

class Ability(str, Enum):
    STR = "str"
    DEX = "dex"
    CON = "con"
    INT = "int"
    WIS = "wis"
    CHA = "cha"

ABILITY_ORDER: Tuple[Ability, ...] = tuple(Ability)

_ALIASES = {"strength": "str", "dexterity": "dex", "constitution": "con",
            "intelligence": "int", "wisdom": "wis", "charisma": "cha"}

def ability_of(name: Union[Ability, str]) -> Ability:
    if isinstance(name, Ability):
        return name
    s = str(name).lower()
    return Ability(_ALIASES.get(s, s))

def score_to_mod(score: int) -> int:
    return (score - 10) // 2

class Abilities(BaseModel):
    """Six ability values (scores or modifiers), indexable by Ability or by name."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    str_: int = Field(10, alias="str")
    dex: int = 10
    con: int = 10
    int_: int = Field(10, alias="int")
    wis: int = 10
    cha: int = 10

    def get(self, name: Union[Ability, str]) -> int:
        ab = ability_of(name)
        key = "str_" if ab is Ability.STR else ("int_" if ab is Ability.INT else ab.value)
        return getattr(self, key)

    def __getitem__(self, name: Union[Ability, str]) -> int:
        return self.get(name)

    def items(self) -> Iterator[Tuple[Ability, int]]:
        for ab in ABILITY_ORDER:
            yield ab, self.get(ab)

    def map(self, func) -> "Abilities":
        return Abilities(**{ab.value: func(v) for ab, v in self.items()})

    def mods(self) -> "Abilities":
        """Treat these values as scores and return the matching modifiers."""
        return self.map(score_to_mod)

class Size(str, Enum):
    TINY = "Tiny"
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"
    HUGE = "Huge"
    GARGANTUAN = "Gargantuan"

    def hit_die(self) -> Die:
        return SIZE_TO_HIT_DIE[self]

SIZE_TO_HIT_DIE = {
    Size.TINY: Die(4), Size.SMALL: Die(6), Size.MEDIUM: Die(8),
    Size.LARGE: Die(10), Size.HUGE: Die(12), Size.GARGANTUAN: Die(20),
}

ACKindName = Literal["normal", "unarmored_defense", "armor", "armor_dex", "natural"]

class ACKind(BaseModel):
    """How a creature's armor class is derived (scraped from Monster Manual statblocks)."""
    model_config = ConfigDict(frozen=True)

    kind: ACKindName = "normal"
    value: int = 0

    @model_validator(mode="after")
    def _validate(self):
        if self.kind in {"armor", "armor_dex", "natural"} and self.value <= 0:
            raise ValueError(f"ac kind '{self.kind}' requires a positive value")
        return self

    def armor_class(self, mods: Abilities) -> int:
        if self.kind == "normal":
            return clamp_nonneg(10 + mods.dex)
        if self.kind == "unarmored_defense":
            return clamp_nonneg(10 + mods.dex + mods.con)
        if self.kind == "armor_dex":
            return clamp_nonneg(self.value + mods.dex)
        return self.value
