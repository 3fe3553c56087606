import math
import pytest
from monstercr.engine.challenge import (
    CR, CR_LEVELS, cr_from_expected_round_damage, cr_from_hit_points, cr_from_real,
    expected_ac, proficiency_bonus, real_value, save_dc, to_hit_bonus,
)

def test_level_count_and_order():
    assert CR_LEVELS[0] is CR.CR0
    assert CR_LEVELS[-1] is CR.CR30
    assert [c.value for c in CR_LEVELS[:5]] == ["0", "1/8", "1/4", "1/2", "1"]
    assert list(CR_LEVELS) == sorted(reversed(CR_LEVELS))
    assert CR.CR2 < CR.CR10
    assert CR.CR1_8 < CR.CR1 <= CR.CR1
    assert CR.CR30 > CR.CR29 >= CR.CR29

def test_real_values():
    assert real_value(CR.CR0) == 0.0
    assert real_value(CR.CR1_8) == 0.125
    assert real_value(CR.CR1_4) == 0.25
    assert real_value(CR.CR1_2) == 0.5
    assert CR.CR17.real == 17.0

def test_from_real_round_trips_every_level():
    for cr in CR_LEVELS:
        assert cr_from_real(cr.real) is cr
        assert CR.from_real(cr.real) is cr

@pytest.mark.parametrize("x,cr", [
    (-1.0, CR.CR0), (0.1, CR.CR1_8), (0.2, CR.CR1_4), (0.3, CR.CR1_2),
    (1.5, CR.CR2), (29.5, CR.CR30), (31.0, CR.CR30), (math.nan, CR.CR30),
])
def test_from_real_rounds_up(x, cr):
    assert cr_from_real(x) is cr

def test_shift_clamps():
    assert CR.CR1.shift(-5) is CR.CR0
    assert CR.CR29.shift(3) is CR.CR30
    assert CR.CR1_2.shift(1) is CR.CR1
    assert CR.CR4.shift(0) is CR.CR4

@pytest.mark.parametrize("cr,pb", [
    (CR.CR0, 2), (CR.CR4, 2), (CR.CR5, 3), (CR.CR8, 3), (CR.CR9, 4), (CR.CR13, 5),
    (CR.CR17, 6), (CR.CR21, 7), (CR.CR25, 8), (CR.CR28, 8), (CR.CR29, 9), (CR.CR30, 9),
])
def test_proficiency_bonus(cr, pb):
    assert proficiency_bonus(cr) == pb

@pytest.mark.parametrize("cr,ac", [
    (CR.CR1_2, 13), (CR.CR3, 13), (CR.CR4, 14), (CR.CR5, 15), (CR.CR8, 16),
    (CR.CR10, 17), (CR.CR13, 18), (CR.CR17, 19), (CR.CR30, 19),
])
def test_expected_ac(cr, ac):
    assert expected_ac(cr) == ac

@pytest.mark.parametrize("cr,bonus", [
    (CR.CR2, 3), (CR.CR3, 4), (CR.CR4, 5), (CR.CR5, 6), (CR.CR8, 7), (CR.CR11, 8),
    (CR.CR16, 9), (CR.CR17, 10), (CR.CR21, 11), (CR.CR24, 12), (CR.CR27, 13), (CR.CR30, 14),
])
def test_to_hit_bonus(cr, bonus):
    assert to_hit_bonus(cr) == bonus

@pytest.mark.parametrize("cr,dc", [
    (CR.CR0, 13), (CR.CR4, 14), (CR.CR5, 15), (CR.CR8, 16), (CR.CR11, 17), (CR.CR13, 18),
    (CR.CR17, 19), (CR.CR21, 20), (CR.CR24, 21), (CR.CR27, 22), (CR.CR30, 23),
])
def test_save_dc(cr, dc):
    assert save_dc(cr) == dc

def test_tables_are_monotonic():
    for fn in (proficiency_bonus, expected_ac, to_hit_bonus, save_dc):
        outs = [fn(cr) for cr in CR_LEVELS]
        assert outs == sorted(outs)

@pytest.mark.parametrize("hp,cr", [
    (0, CR.CR0), (6, CR.CR0), (7, CR.CR1_8), (35, CR.CR1_8), (36, CR.CR1_4),
    (52, CR.CR1_2), (133, CR.CR5), (355, CR.CR19), (356, CR.CR20),
    (805, CR.CR29), (806, CR.CR30), (900, CR.CR30),
])
def test_cr_from_hit_points(hp, cr):
    assert cr_from_hit_points(hp) is cr

@pytest.mark.parametrize("dmg,cr", [
    (0, CR.CR0), (1, CR.CR0), (2, CR.CR1_8), (14, CR.CR1), (15, CR.CR2),
    (60, CR.CR9), (122, CR.CR19), (123, CR.CR20), (302, CR.CR29), (303, CR.CR30),
])
def test_cr_from_expected_round_damage(dmg, cr):
    assert cr_from_expected_round_damage(dmg) is cr
