"""Utility helpers for calculator modules."""

from __future__ import annotations

import math
import sys
from decimal import ROUND_HALF_UP, Decimal, localcontext

from dutchtax.backend.exceptions import TaxCalculationError

FLOAT_EPSILON = sys.float_info.epsilon
RATE_PRECISION = 5
# Enough significant digits to quantize the largest finite float
_DECIMAL_PRECISION = sys.float_info.max_10_exp + 2 * RATE_PRECISION


def _round_half_up(value: float, places: int) -> float:
    if not math.isfinite(value):
        raise TaxCalculationError(f"Cannot round non-finite amount: {value}")
    quantum = Decimal(1).scaleb(-places)
    with localcontext() as context:
        context.prec = _DECIMAL_PRECISION
        # ``repr`` yields the shortest decimal that round-trips, so 1.005 rounds
        # to 1.01 rather than to the binary neighbour below it.
        rounded = float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))
    # Adding 0.0 turns -0.0 into 0.0
    return rounded + 0.0


def round_currency(value: float) -> float:
    """Round monetary amounts to two decimals, halves away from zero."""

    return _round_half_up(value, 2)


def round_rate(value: float) -> float:
    """Round rate values to five decimals."""

    return _round_half_up(value, RATE_PRECISION)


def format_percentage(value: float) -> str:
    """Return a human-readable percentage label for ``value``."""

    percentage = round(value * 100, 3)
    if float(int(percentage)) == percentage:
        return f"{int(percentage)}%"
    return f"{percentage:.3f}".rstrip("0") + "%"
