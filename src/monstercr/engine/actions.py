from __future__ import annotations
from typing import List, Literal, Optional, Union
from typing_extensions import Annotated
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .damage import DamageRoll
from .models import Abilities, Ability
from .space import Area
from ..util.numbers import clamp_nonneg

AttackKind = Literal["melee", "ranged", "special"]

def kind_modifier(kind: AttackKind, mods: Abilities) -> int:
    """The ability modifier a kind of attack rolls with (PHB p. 195)."""
    if kind == "melee":
        return mods.str_
    if kind == "ranged":
        return mods.dex
    return 0

# -----------------------------
# Saving throws

class AbilitySave(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["ability"] = "ability"
    ability: Ability

    def modifier(self, mods: Abilities) -> int:
        return mods[self.ability]

class DeathSave(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["death"] = "death"

    def modifier(self, mods: Abilities) -> int:
        return 0

SaveKind = Annotated[Union[AbilitySave, DeathSave], Field(discriminator="kind")]

class GrantedDC(BaseModel):
    """DC granted by one of the attacker's abilities: 8 + proficiency + modifier.
    Most monsters leave this implicit (dragons breathe with Con, frighten with Cha)."""
    model_config = ConfigDict(frozen=True)
    kind: Literal["granted"] = "granted"
    ability: Ability

    def def_class(self, mods: Abilities, prof: int) -> int:
        return clamp_nonneg(8 + prof + mods[self.ability])

class ExactDC(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["exactly"] = "exactly"
    dc: int = Field(10, ge=0)

    def def_class(self, mods: Abilities, prof: int) -> int:
        return self.dc

SavingDC = Annotated[Union[GrantedDC, ExactDC], Field(discriminator="kind")]

class ReducesDamage(BaseModel):
    """On a successful save, damage is multiplied by `factor` (0.5 = half damage)."""
    model_config = ConfigDict(frozen=True)
    kind: Literal["reduces_damage"] = "reduces_damage"
    factor: float = Field(0.5, ge=0.0)

SaveEffect = ReducesDamage  # the only effect modelled so far

class Save(BaseModel):
    model_config = ConfigDict(frozen=True)
    save_kind: SaveKind
    dc: SavingDC = Field(default_factory=ExactDC)
    effect: SaveEffect = Field(default_factory=ReducesDamage)

# -----------------------------
# Targets and uses

class ExactTargets(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["exactly"] = "exactly"
    count: int = Field(1, ge=0)

class AreaTargets(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["area"] = "area"
    area: Area

Target = Annotated[Union[ExactTargets, AreaTargets], Field(discriminator="kind")]

class Indefinite(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["indefinite"] = "indefinite"

class PerDay(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["per_day"] = "per_day"
    count: int = Field(1, ge=0)

class Recharge(BaseModel):
    """Ready again on a roll of `value` or higher on a d`sides`; "Recharge 5-6" is value=5, sides=6."""
    model_config = ConfigDict(frozen=True)
    kind: Literal["recharge"] = "recharge"
    value: int = Field(6, ge=1)
    sides: int = Field(6, ge=1)

Uses = Annotated[Union[Indefinite, PerDay, Recharge], Field(discriminator="kind")]

# -----------------------------
# Attacks and actions

class Attack(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: AttackKind = "melee"
    save: Optional[Save] = None
    target: Target = Field(default_factory=ExactTargets)
    dmg_rolls: List[DamageRoll] = Field(default_factory=list)
    dmg_bonus: int = 0  # added to the first entry of dmg_rolls
    to_hit_bonus: int = 0
    finesse: bool = False
    proficient: bool = False
    range: int = Field(5, ge=0)

    def modifier(self, mods: Abilities, prof: int) -> int:
        """The to-hit modifier (PHB p. 194)."""
        if self.kind == "special":
            ability_term = 0
        elif self.finesse:
            ability_term = max(kind_modifier("melee", mods), kind_modifier("ranged", mods))
        else:
            ability_term = kind_modifier(self.kind, mods)
        return self.to_hit_bonus + (prof if self.proficient else 0) + ability_term

class Action(BaseModel):
    """A single Attack, or a Multiattack when it carries more than one."""
    model_config = ConfigDict(frozen=True)

    name: str
    attacks: List[Attack] = Field(default_factory=list)
    uses: Uses = Field(default_factory=Indefinite)

    @model_validator(mode="after")
    def _validate(self):
        if not self.attacks:
            raise ValueError(f"action '{self.name}' must have at least one attack")
        return self

    @property
    def is_multiattack(self) -> bool:
        return len(self.attacks) > 1

# Free-function forms of the descriptive accessors

def to_hit_modifier(attack: Attack, attacker_mods: Abilities, proficiency: int) -> int:
    return attack.modifier(attacker_mods, proficiency)

def save_dc(save: Save, attacker_mods: Abilities, proficiency: int) -> int:
    return save.dc.def_class(attacker_mods, proficiency)

def save_roll_modifier(save: Save, defender_mods: Abilities) -> int:
    return save.save_kind.modifier(defender_mods)
