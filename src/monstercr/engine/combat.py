from __future__ import annotations
import logging
from typing import List, Literal, Union
from typing_extensions import Annotated
from pydantic import BaseModel, ConfigDict, Field

from .actions import Action, AreaTargets, Attack, ExactTargets
from .creature import Creature
from .damage import Damage
from .dice import D20
from ..util.numbers import clamp_nonneg

logger = logging.getLogger(__name__)

# -----------------------------
# Settings

class ExactDensity(BaseModel):
    """Exactly `count` targets are caught in any area; the DMG (p. 278) implies 2."""
    model_config = ConfigDict(frozen=True)
    kind: Literal["exactly"] = "exactly"
    count: int = Field(2, ge=0)

class PerAreaDensity(BaseModel):
    """Targets per square foot; 0.04 is one target per 5' square."""
    model_config = ConfigDict(frozen=True)
    kind: Literal["density"] = "density"
    per_area: float = Field(0.04, ge=0.0)

AreaEffectDensity = Annotated[Union[ExactDensity, PerAreaDensity], Field(discriminator="kind")]

class NeverRecharge(BaseModel):
    # The DMG's exemplar white dragon breathes once over three rounds (p. 278)
    model_config = ConfigDict(frozen=True)
    kind: Literal["never"] = "never"

class AfterPassProbability(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["after_pass_probability"] = "after_pass_probability"
    probability: float = Field(0.5, gt=0.0, le=1.0)

RechargeModel = Annotated[Union[NeverRecharge, AfterPassProbability], Field(discriminator="kind")]

class CombatSettings(BaseModel):
    effect_density: AreaEffectDensity = Field(default_factory=ExactDensity)
    recharge_model: RechargeModel = Field(default_factory=NeverRecharge)
    rounds: int = Field(3, ge=1)  # rounds averaged for CR damage (DMG p. 278)

# -----------------------------
# Attacker/defender pair

class CombatPair:
    """
    One attacker against a (representative) defender. Cheap and stateless: build one
    per query and throw it away.
    """

    def __init__(self, attacker: Creature, defender: Creature, settings: CombatSettings | None = None):
        self.attacker = attacker
        self.defender = defender
        self.settings = settings or CombatSettings()

    def expected_targets(self, atk: Attack) -> int:
        target = atk.target
        if isinstance(target, ExactTargets):
            return target.count
        assert isinstance(target, AreaTargets)
        density = self.settings.effect_density
        if isinstance(density, ExactDensity):
            return density.count
        return int(density.per_area * target.area.floor_area())

    def expected_single_damage_rolls(self, atk: Attack) -> List[Damage]:
        out: List[Damage] = []
        for idx, dr in enumerate(atk.dmg_rolls):
            scaled = int(max(0.0, dr.expected() * self.defender.damage_factor(dr.kind)))
            bonus = atk.dmg_bonus if idx == 0 else 0
            out.append(Damage(clamp_nonneg(scaled + bonus), dr.kind))
        return out

    def expected_single_damage_sum(self, atk: Attack) -> int:
        return sum(d.amount for d in self.expected_single_damage_rolls(atk))

    def expected_single_damage(self, atk: Attack) -> int:
        # The flat bonus is already inside the first roll; adding it again here is the
        # calibrated behavior and is kept on purpose (see DESIGN.md).
        dmg = self.expected_single_damage_sum(atk) + atk.dmg_bonus
        if atk.save is not None:
            dc = atk.save.dc.def_class(self.attacker.mods(), self.attacker.prof_bonus())
            sm = atk.save.save_kind.modifier(self.defender.mods())
            p_pass = D20.prob_pass(dc - sm)
            dmg = int(p_pass * (dmg * atk.save.effect.factor) + (1.0 - p_pass) * dmg)
            logger.debug("save DC %d vs %+d: p_pass=%.3f -> %d", dc, sm, p_pass, dmg)
        return clamp_nonneg(dmg)

    def expected_damage(self, atk: Attack) -> int:
        return self.expected_single_damage(atk) * self.expected_targets(atk)

    def expected_action_damage(self, action: Action) -> int:
        total = sum(self.expected_damage(atk) for atk in action.attacks)
        logger.debug("%s: %s expects %d damage", self.attacker.name, action.name, total)
        return total

    def attack_modifier(self, atk: Attack) -> int:
        return atk.modifier(self.attacker.mods(), self.attacker.prof_bonus())

    def expected_hit_ac(self, atk: Attack) -> int:
        """The AC an average d20 roll just reaches with this attack; a balance heuristic."""
        return clamp_nonneg(D20.expected() + self.attack_modifier(atk))
