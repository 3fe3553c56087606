from __future__ import annotations
from enum import Enum
from typing import Sequence, Tuple

class CR(str, Enum):
    """Challenge rating, totally ordered from CR 0 to CR 30 (DMG p. 274)."""
    CR0 = "0"
    CR1_8 = "1/8"
    CR1_4 = "1/4"
    CR1_2 = "1/2"
    CR1 = "1"
    CR2 = "2"
    CR3 = "3"
    CR4 = "4"
    CR5 = "5"
    CR6 = "6"
    CR7 = "7"
    CR8 = "8"
    CR9 = "9"
    CR10 = "10"
    CR11 = "11"
    CR12 = "12"
    CR13 = "13"
    CR14 = "14"
    CR15 = "15"
    CR16 = "16"
    CR17 = "17"
    CR18 = "18"
    CR19 = "19"
    CR20 = "20"
    CR21 = "21"
    CR22 = "22"
    CR23 = "23"
    CR24 = "24"
    CR25 = "25"
    CR26 = "26"
    CR27 = "27"
    CR28 = "28"
    CR29 = "29"
    CR30 = "30"

    @property
    def ordinal(self) -> int:
        return CR_LEVELS.index(self)

    @property
    def real(self) -> float:
        return real_value(self)

    @classmethod
    def from_real(cls, x: float) -> "CR":
        return cr_from_real(x)

    def shift(self, steps: int) -> "CR":
        i = min(max(self.ordinal + steps, 0), len(CR_LEVELS) - 1)
        return CR_LEVELS[i]

    # str's lexical comparisons would order "10" before "2"
    def __lt__(self, other):
        if not isinstance(other, CR):
            return NotImplemented
        return self.real < other.real

    def __le__(self, other):
        if not isinstance(other, CR):
            return NotImplemented
        return self.real <= other.real

    def __gt__(self, other):
        if not isinstance(other, CR):
            return NotImplemented
        return self.real > other.real

    def __ge__(self, other):
        if not isinstance(other, CR):
            return NotImplemented
        return self.real >= other.real

CR_LEVELS: Tuple[CR, ...] = tuple(CR)

_REAL = {
    CR.CR0: 0.0, CR.CR1_8: 0.125, CR.CR1_4: 0.25, CR.CR1_2: 0.5,
    **{CR(str(n)): float(n) for n in range(1, 31)},
}

def real_value(cr: CR) -> float:
    return _REAL[cr]

def cr_from_real(x: float) -> CR:
    """Round up to the next defined level; anything past 29 (or NaN) is CR 30."""
    for cr in CR_LEVELS[:-1]:
        if x <= _REAL[cr]:
            return cr
    return CR.CR30

# DMG p. 274. (exclusive upper bound on CR, output); last entry is the fallback.
PROFICIENCY_TABLE: Tuple[Tuple[float, int], ...] = (
    (5, 2), (9, 3), (13, 4), (17, 5), (21, 6), (25, 7), (29, 8),
)
PROFICIENCY_MAX = 9

AC_TABLE: Tuple[Tuple[float, int], ...] = (
    (4, 13), (5, 14), (8, 15), (10, 16), (13, 17), (17, 18),
)
AC_MAX = 19

TO_HIT_TABLE: Tuple[Tuple[float, int], ...] = (
    (3, 3), (4, 4), (5, 5), (8, 6), (11, 7), (16, 8), (17, 9), (21, 10), (24, 11), (27, 12), (30, 13),
)
TO_HIT_MAX = 14

SAVE_DC_TABLE: Tuple[Tuple[float, int], ...] = (
    (4, 13), (5, 14), (8, 15), (11, 16), (13, 17), (17, 18), (21, 19), (24, 20), (27, 21), (30, 22),
)
SAVE_DC_MAX = 23

# Inclusive upper bounds, paired in order with CR_LEVELS; past the last bound is CR 30.
HP_THRESHOLDS: Tuple[int, ...] = (
    6, 35, 49, 70, 85, 100, 115, 130, 145, 160, 175, 190, 205, 220, 235, 250, 265,
    280, 295, 310, 325, 340, 355, 400, 445, 490, 535, 580, 625, 670, 715, 760, 805,
)
DAMAGE_THRESHOLDS: Tuple[int, ...] = (
    1, 3, 5, 8, 14, 20, 26, 32, 38, 44, 50, 56, 62, 68, 74, 80, 86,
    92, 98, 104, 110, 116, 122, 140, 158, 176, 194, 212, 230, 248, 266, 284, 302,
)

def _below(table: Sequence[Tuple[float, int]], fallback: int, cr: CR) -> int:
    x = real_value(cr)
    for bound, out in table:
        if x < bound:
            return out
    return fallback

def _at_most(thresholds: Sequence[int], value: int) -> CR:
    for bound, cr in zip(thresholds, CR_LEVELS):
        if value <= bound:
            return cr
    return CR.CR30

def proficiency_bonus(cr: CR) -> int:
    return _below(PROFICIENCY_TABLE, PROFICIENCY_MAX, cr)

def expected_ac(cr: CR) -> int:
    return _below(AC_TABLE, AC_MAX, cr)

def to_hit_bonus(cr: CR) -> int:
    """Expected to-hit bonus across any attack, ability modifier and proficiency included."""
    return _below(TO_HIT_TABLE, TO_HIT_MAX, cr)

def save_dc(cr: CR) -> int:
    return _below(SAVE_DC_TABLE, SAVE_DC_MAX, cr)

def cr_from_hit_points(hp: int) -> CR:
    return _at_most(HP_THRESHOLDS, hp)

def cr_from_expected_round_damage(dmg: int) -> CR:
    return _at_most(DAMAGE_THRESHOLDS, dmg)
