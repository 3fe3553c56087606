from __future__ import annotations

def clamp_nonneg(x: int | float) -> int:
    """Truncate toward zero, then floor negatives to 0 (damage, HP and AC are never negative)."""
    i = int(x)
    return i if i > 0 else 0
