"""Half-up rounding used for every reported number.

The built-in `round` rounds halves to even (2.5 -> 2, 4.5 -> 4). Reported
values round half away from zero instead.
"""

from decimal import Decimal, ROUND_HALF_UP


def round_half_up(value: float, digits: int = 0) -> float:
    """Round `value` to `digits` decimals, halves away from zero."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_int(value: float) -> int:
    """Round to the nearest whole number, halves away from zero."""
    return int(round_half_up(value, 0))
