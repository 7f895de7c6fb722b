"""Numeric helpers shared by the profit and recommendation engines.

Every ratio in the business assistant goes through :func:`safe_div` so that
no ``NaN`` / ``Infinity`` ever reaches a payload.
"""
from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

MONEY_QUANT = Decimal("0.01")


def to_decimal(value, default="0") -> Decimal:
    if value is None:
        return Decimal(default)
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (TypeError, ValueError, InvalidOperation):
        return Decimal(default)


def quantize_money(value) -> Decimal:
    return to_decimal(value).quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def to_float(value, default: float = 0.0) -> float:
    """Coerce to a finite float; anything else becomes ``default``."""
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(result):
        return default
    return result


def safe_div(num, den, default: float = 0.0) -> float:
    """Divide, returning ``default`` for a zero / missing / non-finite denominator."""
    n = to_float(num)
    d = to_float(den)
    if not d:
        return default
    return n / d


def round2(value) -> float:
    # Half-up like the UI expects, not banker's rounding.
    return float(Decimal(str(to_float(value))).quantize(MONEY_QUANT, rounding=ROUND_HALF_UP))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def finite_or_default(value, default):
    """Return ``value`` as a number when finite, else ``default``."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    if isinstance(default, int) and not isinstance(default, bool) and number.is_integer():
        return int(number)
    return number
