"""Currency helpers - Decimal amounts quantized to cents"""

from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")


def quantize_money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def to_cents(value: Decimal) -> int:
    """Decimal currency amount to integer cents (half-up)"""
    return int(quantize_money(value) * 100)


def from_cents(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(CENT)
