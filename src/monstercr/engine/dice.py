from __future__ import annotations
import random
import re
from dataclasses import dataclass
from typing import Any, Optional, Protocol, Tuple, runtime_checkable

from pydantic_core import core_schema

class UnsupportedDistribution(NotImplementedError):
    """Raised when an exact cumulative probability is asked of a compound expression."""

@runtime_checkable
class HasExpectation(Protocol):
    def expected(self) -> float: ...

class DiceExpr:
    """
    An immutable dice expression tree: Die, Times, Plus, Const.
    Subtrees may be shared between parents; nodes are never copied.
    """

    def roll(self, rng: random.Random) -> "DiceRoll":
        raise NotImplementedError

    def expected(self) -> float:
        raise NotImplementedError

    def bounds(self) -> Tuple[int, int]:
        raise NotImplementedError

    def cum_prob(self, i: int) -> float:
        """P(X <= i). Exact for Die and Const only; compound shapes raise."""
        raise UnsupportedDistribution(
            f"cumulative probability of '{self}' is not supported; query a single die or constant"
        )

    def prob_pass(self, check: int) -> float:
        """P(X >= check), i.e. a roll "at or over". Inherits cum_prob's limits."""
        return 1.0 - self.cum_prob(check - 1)

    # pydantic: accept notation strings, ints, or existing nodes (kept by identity)
    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            coerce_dice,
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )

    @classmethod
    def __get_pydantic_json_schema__(cls, schema: Any, handler: Any) -> dict:
        return {"anyOf": [{"type": "string"}, {"type": "integer"}], "examples": ["2d6+3", "d20", 4]}

@dataclass(frozen=True)
class Die(DiceExpr):
    sides: int

    def roll(self, rng: random.Random) -> "DieRoll":
        return DieRoll(self, rng.randint(1, self.sides))

    def expected(self) -> float:
        return (1 + self.sides) / 2

    def bounds(self) -> Tuple[int, int]:
        return 1, self.sides

    def cum_prob(self, i: int) -> float:
        if i <= 0:
            return 0.0
        if i >= self.sides:
            return 1.0
        return i / self.sides

    def __str__(self) -> str:
        return f"d{self.sides}"

@dataclass(frozen=True)
class Times(DiceExpr):
    count: int
    term: DiceExpr

    def roll(self, rng: random.Random) -> "TimesRoll":
        return TimesRoll(self.count, self.term, tuple(self.term.roll(rng) for _ in range(self.count)))

    def expected(self) -> float:
        return self.count * self.term.expected()

    def bounds(self) -> Tuple[int, int]:
        lo, hi = self.term.bounds()
        return self.count * lo, self.count * hi

    def __str__(self) -> str:
        if isinstance(self.term, Die):
            return f"{self.count}d{self.term.sides}"
        return f"{self.count}*({self.term})"

@dataclass(frozen=True)
class Plus(DiceExpr):
    left: DiceExpr
    right: DiceExpr

    def roll(self, rng: random.Random) -> "PlusRoll":
        return PlusRoll(self.left, self.right, self.left.roll(rng), self.right.roll(rng))

    def expected(self) -> float:
        return self.left.expected() + self.right.expected()

    def bounds(self) -> Tuple[int, int]:
        llo, lhi = self.left.bounds()
        rlo, rhi = self.right.bounds()
        return llo + rlo, lhi + rhi

    def __str__(self) -> str:
        if isinstance(self.right, Const) and self.right.value < 0:
            return f"{self.left}-{-self.right.value}"
        return f"{self.left}+{self.right}"

@dataclass(frozen=True)
class Const(DiceExpr):
    value: int

    def roll(self, rng: random.Random) -> "ConstRoll":
        return ConstRoll(self.value)

    def expected(self) -> float:
        return float(self.value)

    def bounds(self) -> Tuple[int, int]:
        return self.value, self.value

    def cum_prob(self, i: int) -> float:
        return 0.0 if i < self.value else 1.0

    def __str__(self) -> str:
        return str(self.value)

D20 = Die(20)

# ------- rolls -------
class DiceRoll:
    """
    A realized sample of a DiceExpr, keeping every intermediate die. Composite rolls
    hold references to the sub-expressions they sampled, so expr() rebuilds the
    originating expression without copying it.
    """

    def value(self) -> int:
        raise NotImplementedError

    def expr(self) -> DiceExpr:
        raise NotImplementedError

@dataclass(frozen=True)
class DieRoll(DiceRoll):
    die: Die
    result: int

    def value(self) -> int:
        return self.result

    def expr(self) -> DiceExpr:
        return self.die

@dataclass(frozen=True)
class TimesRoll(DiceRoll):
    count: int
    term: DiceExpr
    rolls: Tuple[DiceRoll, ...]

    def value(self) -> int:
        return sum(r.value() for r in self.rolls)

    def expr(self) -> DiceExpr:
        return Times(self.count, self.term)

@dataclass(frozen=True)
class PlusRoll(DiceRoll):
    left: DiceExpr
    right: DiceExpr
    left_roll: DiceRoll
    right_roll: DiceRoll

    def value(self) -> int:
        return self.left_roll.value() + self.right_roll.value()

    def expr(self) -> DiceExpr:
        return Plus(self.left, self.right)

@dataclass(frozen=True)
class ConstRoll(DiceRoll):
    result: int

    def value(self) -> int:
        return self.result

    def expr(self) -> DiceExpr:
        return Const(self.result)

def die_results(dr: DiceRoll) -> list[int]:
    """Flatten a roll into its individual die faces, left to right."""
    if isinstance(dr, DieRoll):
        return [dr.result]
    if isinstance(dr, TimesRoll):
        return [v for r in dr.rolls for v in die_results(r)]
    if isinstance(dr, PlusRoll):
        return die_results(dr.left_roll) + die_results(dr.right_roll)
    return []

# ------- module-level helpers -------
def roll(expr: DiceExpr, rng: random.Random) -> DiceRoll:
    return expr.roll(rng)

def expected(x: HasExpectation) -> float:
    return x.expected()

def cum_prob(expr: DiceExpr, i: int) -> float:
    return expr.cum_prob(i)

def prob_pass(expr: DiceExpr, check: int) -> float:
    return expr.prob_pass(check)

# ------- notation -------
_TERM_RE = re.compile(r"([+-]?)(?:(\d*)d(\d+)|(\d+))")

def parse_dice(notation: str) -> DiceExpr:
    """
    Parse dice notation such as "d20", "2d6", "8d10+16" or "1d8+2d6-1".
    Terms are folded left to right into Plus nodes; only constants may be subtracted.
    """
    s = str(notation).strip().lower().replace(" ", "")
    if not s:
        raise ValueError("empty dice notation")
    out: Optional[DiceExpr] = None
    pos = 0
    while pos < len(s):
        m = _TERM_RE.match(s, pos)
        if not m or m.end() == pos:
            raise ValueError(f"Invalid dice notation: {notation!r}")
        sign, count, sides, const = m.groups()
        if pos > 0 and not sign:
            raise ValueError(f"Invalid dice notation: {notation!r}")
        if sides is not None:
            if sign == "-":
                raise ValueError(f"cannot subtract dice in {notation!r}")
            if int(sides) < 1:
                raise ValueError(f"die must have at least one side in {notation!r}")
            die = Die(int(sides))
            term: DiceExpr = die if not count else Times(int(count), die)
        else:
            term = Const(-int(const) if sign == "-" else int(const))
        out = term if out is None else Plus(out, term)
        pos = m.end()
    assert out is not None
    return out

def coerce_dice(v: Any) -> DiceExpr:
    if isinstance(v, DiceExpr):
        return v
    if isinstance(v, bool):
        raise ValueError("dice expression cannot be a boolean")
    if isinstance(v, int):
        return Const(v)
    if isinstance(v, str):
        return parse_dice(v)
    raise ValueError(f"cannot interpret {v!r} as a dice expression")
