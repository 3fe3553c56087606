from __future__ import annotations
from typing import List, Set
from pydantic import BaseModel, ConfigDict, Field

from .actions import Action
from .challenge import CR, proficiency_bonus
from .damage import DamageKind
from .dice import Const, Plus, Times
from .models import Abilities, ACKind, Size
from ..util.numbers import clamp_nonneg

class BaseCreature(BaseModel):
    """A creature without a CR or proficiency bonus; those take real effort to compute."""
    model_config = ConfigDict(frozen=True)

    name: str = "creature"
    ascores: Abilities = Field(default_factory=Abilities)
    ac_kind: ACKind = Field(default_factory=ACKind)
    actions: List[Action] = Field(default_factory=list)
    size: Size = Size.MEDIUM
    hit_dice: int = Field(1, ge=0)
    immunities: Set[DamageKind] = Field(default_factory=set)
    resistances: Set[DamageKind] = Field(default_factory=set)
    vulnerabilities: Set[DamageKind] = Field(default_factory=set)

    def damage_factor(self, kind: DamageKind) -> float:
        # Immunity wins outright; resistance and vulnerability compose.
        if kind in self.immunities:
            return 0.0
        fac = 1.0
        if kind in self.resistances:
            fac *= 0.5
        if kind in self.vulnerabilities:
            fac *= 2.0
        return fac

    def mods(self) -> Abilities:
        return self.ascores.mods()

    def armor_class(self) -> int:
        return self.ac_kind.armor_class(self.mods())

    def hit_point_expr(self) -> Times:
        return Times(self.hit_dice, Plus(self.size.hit_die(), Const(self.mods().con)))

    def expected_hit_points(self) -> int:
        return clamp_nonneg(self.hit_point_expr().expected())

    def with_cr(self, cr: CR) -> "Creature":
        """Fix a CR for this creature. Nothing checks that it is accurate, and it feeds
        the proficiency bonus used by every calculation downstream."""
        return Creature(base=self, cr=cr)

class Creature(BaseModel):
    """A BaseCreature with a cached CR (and so a proficiency bonus)."""
    model_config = ConfigDict(frozen=True)

    base: BaseCreature
    cr: CR

    @property
    def name(self) -> str:
        return self.base.name

    def damage_factor(self, kind: DamageKind) -> float:
        return self.base.damage_factor(kind)

    def mods(self) -> Abilities:
        return self.base.mods()

    def armor_class(self) -> int:
        return self.base.armor_class()

    def expected_hit_points(self) -> int:
        return self.base.expected_hit_points()

    def prof_bonus(self) -> int:
        return proficiency_bonus(self.cr)

def damage_factor(defender: BaseCreature | Creature, kind: DamageKind) -> float:
    return defender.damage_factor(kind)
