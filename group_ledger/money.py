"""
Money helpers.

Amounts enter as floats and are summed as exact decimals, so long expense
histories do not accumulate floating point drift. Rounding to two places
(half away from zero) happens only when a result is handed back.
"""
from decimal import Decimal, ROUND_HALF_UP


CENT = Decimal("0.01")
ZERO = Decimal("0")
SPLIT_TOLERANCE = 0.01


def to_decimal(amount) -> Decimal:
    """Exact decimal for a float amount, without rounding."""
    if isinstance(amount, Decimal):
        return amount
    return Decimal(str(amount))


def quantize(amount: Decimal) -> float:
    """Round an exact amount to two decimals, half away from zero."""
    return float(to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP))


def to_cents(amount: float) -> int:
    """Convert an amount to integer cents, rounding half away from zero."""
    return int(to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP) * 100)


def from_cents(cents: int) -> float:
    """Convert integer cents back to a two-decimal amount."""
    return float(Decimal(cents) / 100)


def round_money(amount: float) -> float:
    """Round an amount to two decimals, half away from zero."""
    return quantize(to_decimal(amount))
