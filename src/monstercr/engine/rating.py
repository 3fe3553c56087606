from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from . import challenge
from .actions import Action, PerDay, Recharge
from .challenge import CR, cr_from_expected_round_damage, cr_from_hit_points, cr_from_real
from .combat import CombatPair, CombatSettings, NeverRecharge, RechargeModel
from .creature import BaseCreature, Creature
from .dice import Die

logger = logging.getLogger(__name__)

@dataclass
class PlannedRound:
    round: int
    action: Optional[str]  # None when nothing was ready
    damage: int

class Rating(BaseModel):
    name: str
    hit_points: int
    armor_class: int
    damage_per_round: int
    attack_bonus: Optional[int] = None
    uses_save_dc: bool = False
    defensive_cr: CR
    offensive_cr: CR
    cr: CR
    plan: List[str] = Field(default_factory=list)
    logs: List[str] = Field(default_factory=list)

def recharge_delay(uses: Recharge, model: RechargeModel, rounds: int) -> Optional[int]:
    """
    Rounds until a spent recharge ability counts as ready again, or None if it never
    comes back within `rounds`. Under AfterPassProbability(p) that is the smallest k
    with 1 - (1 - q)^k >= p, where q is the chance of one recharge roll.
    """
    if isinstance(model, NeverRecharge):
        return None
    q = Die(uses.sides).prob_pass(uses.value)
    if q <= 0.0:
        return None
    for k in range(1, rounds + 1):
        if 1.0 - (1.0 - q) ** k >= model.probability:
            return k
    return None

def plan_rounds(pair: CombatPair, actions: Sequence[Action], rounds: int,
                recharge_model: RechargeModel) -> List[PlannedRound]:
    """Greedy plan: each round, use the ready action with the highest expected damage."""
    damages = [pair.expected_action_damage(a) for a in actions]
    remaining: Dict[int, int] = {i: a.uses.count for i, a in enumerate(actions) if isinstance(a.uses, PerDay)}
    ready_at: Dict[int, Optional[int]] = {i: 0 for i in range(len(actions))}
    plan: List[PlannedRound] = []
    for r in range(rounds):
        best: Optional[int] = None
        for i in range(len(actions)):
            at = ready_at[i]
            if at is None or at > r:
                continue
            if remaining.get(i, 1) <= 0:
                continue
            if best is None or damages[i] > damages[best]:
                best = i
        if best is None:
            plan.append(PlannedRound(r + 1, None, 0))
            continue
        act = actions[best]
        plan.append(PlannedRound(r + 1, act.name, damages[best]))
        if isinstance(act.uses, PerDay):
            remaining[best] -= 1
        elif isinstance(act.uses, Recharge):
            delay = recharge_delay(act.uses, recharge_model, rounds)
            ready_at[best] = None if delay is None else r + delay
    return plan

def expected_round_damage(plan: Sequence[PlannedRound]) -> int:
    if not plan:
        return 0
    return sum(p.damage for p in plan) // len(plan)

def _best_action(pair: CombatPair, actions: Sequence[Action]) -> Optional[Action]:
    best: Optional[Action] = None
    best_dmg = -1
    for a in actions:
        dmg = pair.expected_action_damage(a)
        if dmg > best_dmg:
            best, best_dmg = a, dmg
    return best

def _steps(actual: int, expected: int) -> int:
    # one CR step per two points of difference, truncated toward zero
    return int((actual - expected) / 2)

def reference_defender(cr: CR) -> Creature:
    return BaseCreature(name="reference defender").with_cr(cr)

def rate(base: BaseCreature, settings: Optional[CombatSettings] = None, *,
         cr: Optional[CR] = None, defender: Optional[Creature] = None) -> Rating:
    """
    Derive a CR the way the DMG (pp. 274-275) does:
      1) Defensive: CR for expected HP, shifted by AC against the expected AC of that CR
      2) Offensive: CR for expected damage per round, shifted by the attack bonus
         (or save DC) against the expected value for that CR
      3) Final: the average of the two, rounded up to a defined level
    `cr` is the provisional CR that sets the proficiency bonus; without it the
    HP-based CR is used.
    """
    settings = settings or CombatSettings()
    logs: List[str] = []

    hp = base.expected_hit_points()
    ac = base.armor_class()
    hp_cr = cr_from_hit_points(hp)
    provisional = cr or hp_cr
    attacker = base.with_cr(provisional)
    pair = CombatPair(attacker, defender or reference_defender(provisional), settings)
    logs.append(f"[CR] {base.name}: provisional CR {provisional.value} (prof +{attacker.prof_bonus()})")

    # Defensive
    ac_target = challenge.expected_ac(hp_cr)
    def_cr = hp_cr.shift(_steps(ac, ac_target))
    logs.append(f"[CR] HP {hp} ({base.hit_point_expr()}) -> CR {hp_cr.value}")
    logs.append(f"[CR] AC {ac} vs expected {ac_target} -> defensive CR {def_cr.value}")

    # Offensive
    plan = plan_rounds(pair, base.actions, settings.rounds, settings.recharge_model)
    dpr = expected_round_damage(plan)
    dmg_cr = cr_from_expected_round_damage(dpr)
    for p in plan:
        logs.append(f"[CR] round {p.round}: {p.action or '(nothing ready)'} for {p.damage}")
    logs.append(f"[CR] damage/round {dpr} over {settings.rounds} rounds -> CR {dmg_cr.value}")

    bonus: Optional[int] = None
    uses_dc = False
    off_cr = dmg_cr
    best = _best_action(pair, base.actions)
    if best is not None:
        atk = best.attacks[0]
        if atk.save is not None:
            uses_dc = True
            bonus = atk.save.dc.def_class(attacker.mods(), attacker.prof_bonus())
            target = challenge.save_dc(dmg_cr)
            label = "save DC"
        else:
            bonus = pair.attack_modifier(atk)
            target = challenge.to_hit_bonus(dmg_cr)
            label = "attack bonus"
        off_cr = dmg_cr.shift(_steps(bonus, target))
        logs.append(f"[CR] {label} {bonus} ({best.name}) vs expected {target} -> offensive CR {off_cr.value}")
    else:
        logs.append("[CR] no actions; offensive CR from damage only")

    final = cr_from_real((def_cr.real + off_cr.real) / 2)
    logs.append(f"[CR] final CR {final.value}")
    logger.debug("rated %s: def=%s off=%s final=%s", base.name, def_cr.value, off_cr.value, final.value)

    return Rating(
        name=base.name, hit_points=hp, armor_class=ac, damage_per_round=dpr,
        attack_bonus=bonus, uses_save_dc=uses_dc,
        defensive_cr=def_cr, offensive_cr=off_cr, cr=final,
        plan=[f"{p.round}: {p.action or '-'} ({p.damage})" for p in plan],
        logs=logs,
    )
