import pytest
from monstercr.engine.actions import (
    AbilitySave, Action, AreaTargets, Attack, DeathSave, ExactDC, ExactTargets, GrantedDC, ReducesDamage, Save,
)
from monstercr.engine.challenge import CR
from monstercr.engine.combat import CombatPair, CombatSettings, ExactDensity, PerAreaDensity
from monstercr.engine.creature import BaseCreature
from monstercr.engine.damage import Damage, DamageKind, DamageRoll
from monstercr.engine.dice import Die, Times
from monstercr.engine.models import Abilities, Size
from monstercr.engine.space import Cube

SLASHING = DamageKind.SLASHING
FIRE = DamageKind.FIRE

def greatsword(**kw) -> Attack:
    fields = dict(kind="melee", proficient=True, to_hit_bonus=0,
                  dmg_rolls=[DamageRoll(expr=Times(2, Die(6)), kind=SLASHING)], dmg_bonus=3)
    fields.update(kw)
    return Attack(**fields)

@pytest.fixture
def attacker():
    base = BaseCreature(name="brute", ascores=Abilities(con=14), size=Size.MEDIUM, hit_dice=8)
    return base.with_cr(CR.CR2)

def pair_against(attacker, settings=None, **defender_fields) -> CombatPair:
    defender = BaseCreature(name="target", **defender_fields).with_cr(CR.CR2)
    return CombatPair(attacker, defender, settings or CombatSettings())

# --- end to end ---

def test_end_to_end_reference_numbers(attacker):
    pair = pair_against(attacker)
    atk = greatsword()
    assert attacker.prof_bonus() == 2
    assert attacker.expected_hit_points() == 52
    assert pair.expected_single_damage_rolls(atk) == [Damage(10, SLASHING)]
    assert pair.expected_single_damage_sum(atk) == 10
    # the flat bonus lands twice: once in the first roll, once on the total
    assert pair.expected_single_damage(atk) == 13
    assert pair.expected_damage(atk) == 13

def test_bonus_only_on_first_roll(attacker):
    atk = greatsword(dmg_rolls=[
        DamageRoll(expr="2d6", kind=SLASHING),
        DamageRoll(expr="1d8", kind=FIRE),
    ])
    pair = pair_against(attacker)
    assert pair.expected_single_damage_rolls(atk) == [Damage(10, SLASHING), Damage(4, FIRE)]
    assert pair.expected_single_damage(atk) == 17

def test_resistance_and_immunity(attacker):
    atk = greatsword()
    assert pair_against(attacker, resistances={SLASHING}).expected_single_damage(atk) == 3 + 3 + 3
    assert pair_against(attacker, vulnerabilities={SLASHING}).expected_single_damage(atk) == 14 + 3 + 3
    immune = pair_against(attacker, immunities={SLASHING})
    assert immune.expected_single_damage_rolls(atk) == [Damage(3, SLASHING)]
    assert immune.expected_single_damage(atk) == 6

def test_negative_bonus_clamps(attacker):
    atk = greatsword(dmg_rolls=[DamageRoll(expr="1d4", kind=SLASHING)], dmg_bonus=-10)
    pair = pair_against(attacker)
    assert pair.expected_single_damage_rolls(atk) == [Damage(0, SLASHING)]
    assert pair.expected_single_damage(atk) == 0

# --- saving throws ---

def breath(**kw) -> Attack:
    fields = dict(
        kind="special",
        target=AreaTargets(area=Cube(length=10)),
        save=Save(save_kind=AbilitySave(ability="dex"), dc=GrantedDC(ability="con"),
                  effect=ReducesDamage(factor=0.5)),
        dmg_rolls=[DamageRoll(expr="10d8", kind=DamageKind.COLD)],
    )
    fields.update(kw)
    return Attack(**fields)

@pytest.fixture
def dragon():
    return BaseCreature(name="dragon", ascores=Abilities(con=18), size=Size.LARGE, hit_dice=14).with_cr(CR.CR6)

def test_save_halves_on_success(dragon):
    # DC 8 + 3 + 4 = 15 against +0: p_pass = 0.3
    pair = pair_against(dragon)
    assert pair.expected_single_damage(breath()) == 38

def test_defender_save_modifier_matters(dragon):
    pair = pair_against(dragon, ascores=Abilities(dex=14))
    assert pair.expected_single_damage(breath()) == 36

def test_death_save_and_exact_dc(dragon):
    atk = breath(save=Save(save_kind=DeathSave(), dc=ExactDC(dc=11), effect=ReducesDamage(factor=0.0)))
    # p_pass = 0.5, success negates
    assert pair_against(dragon, ascores=Abilities(dex=20)).expected_single_damage(atk) == 22

def test_area_targets_use_density(dragon):
    atk = breath()
    assert pair_against(dragon).expected_targets(atk) == 2
    assert pair_against(dragon).expected_damage(atk) == 76
    three = CombatSettings(effect_density=ExactDensity(count=3))
    assert pair_against(dragon, three).expected_targets(atk) == 3
    dense = CombatSettings(effect_density=PerAreaDensity(per_area=0.25))
    assert pair_against(dragon, dense).expected_targets(atk) == 25

def test_exact_targets_ignore_density(dragon):
    atk = breath(target=ExactTargets(count=4))
    dense = CombatSettings(effect_density=PerAreaDensity(per_area=0.25))
    assert pair_against(dragon, dense).expected_targets(atk) == 4

# --- to-hit ---

def test_attack_modifier_and_breakeven_ac(attacker):
    pair = pair_against(attacker)
    atk = greatsword()
    assert pair.attack_modifier(atk) == 2
    assert pair.expected_hit_ac(atk) == 12

def test_breakeven_ac_with_finesse():
    nimble = BaseCreature(ascores=Abilities(dex=18)).with_cr(CR.CR1)
    pair = CombatPair(nimble, BaseCreature().with_cr(CR.CR1))
    assert pair.expected_hit_ac(greatsword(finesse=True)) == 16

def test_breakeven_ac_clamps():
    feeble = BaseCreature(ascores=Abilities(str=1)).with_cr(CR.CR0)
    pair = CombatPair(feeble, BaseCreature().with_cr(CR.CR0))
    assert pair.expected_hit_ac(greatsword(proficient=False, to_hit_bonus=-10)) == 0

def test_multiattack_sums_attacks(attacker):
    action = Action(name="Multiattack", attacks=[greatsword(), greatsword()])
    assert pair_against(attacker).expected_action_damage(action) == 26
