"""Decimal helpers shared by balances and progress calculations."""

from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Quantize to two fraction digits."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def percent_of(part: Decimal, whole: Decimal, cap: int = 100) -> int:
    """Whole-number percentage, rounded half up and clamped to [0, cap]."""
    if whole <= 0:
        return 0
    pct = (Decimal(part) / Decimal(whole) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return max(0, min(int(pct), cap))
