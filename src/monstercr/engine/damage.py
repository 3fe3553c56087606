from __future__ import annotations
import random
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict

from .dice import DiceExpr, DiceRoll
from ..util.numbers import clamp_nonneg

class DamageKind(str, Enum):
    ACID = "acid"
    BLUDGEONING = "bludgeoning"
    COLD = "cold"
    FIRE = "fire"
    FORCE = "force"
    LIGHTNING = "lightning"
    NECROTIC = "necrotic"
    PIERCING = "piercing"
    POISON = "poison"
    PSYCHIC = "psychic"
    RADIANT = "radiant"
    SLASHING = "slashing"
    THUNDER = "thunder"

@dataclass(frozen=True)
class Damage:
    amount: int
    kind: DamageKind

class DamageRoll(BaseModel):
    """One damage roll of an attack; attacks usually carry one per damage kind."""
    model_config = ConfigDict(frozen=True)

    expr: DiceExpr
    kind: DamageKind

    def expected(self) -> float:
        return self.expr.expected()

    def roll(self, rng: random.Random) -> Tuple[Damage, DiceRoll]:
        dr = self.expr.roll(rng)
        return Damage(clamp_nonneg(dr.value()), self.kind), dr

    def __str__(self) -> str:
        return f"{self.expr} {self.kind.value}"

def roll_to_damage(expr: DiceExpr, kind: DamageKind, rng: random.Random) -> Tuple[Damage, DiceRoll]:
    return DamageRoll(expr=expr, kind=kind).roll(rng)
