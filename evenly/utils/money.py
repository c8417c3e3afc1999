"""Money rounding utilities"""

from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")


def round_money(amount: float) -> float:
    """Round to 2 decimal places, halves away from zero (2.675 -> 2.68)"""
    return float(Decimal(repr(amount)).quantize(CENT, rounding=ROUND_HALF_UP))


def line_total(items) -> float:
    """Sum of price * quantity across items"""
    return sum(item.price * item.quantity for item in items)
