"""
Display formatting for report numbers.

Counts are shown comma-grouped with up to three fraction digits, rates as a
percentage with one decimal.  Both round half away from zero on the exact
binary value, and both turn missing or non-finite input into zero.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Optional

_MAX_FRACTION_DIGITS = 3


def _is_renderable(value: Optional[float]) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value)


def _round_half_up(value: float, places: int, shift: int = 0) -> Decimal:
    # Enough precision for any finite double, shifted, plus the fraction digits
    with localcontext() as ctx:
        ctx.prec = 400
        return Decimal(value).scaleb(shift).quantize(
            Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP
        )


def format_number(value: Optional[float]) -> str:
    """``1234567`` → ``"1,234,567"``; ``0.12345`` → ``"0.123"``."""
    if not _is_renderable(value):
        return "0"

    rounded = _round_half_up(float(value), _MAX_FRACTION_DIGITS)
    if rounded == 0:
        return "0"

    text = format(rounded, ",f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_percent(value: Optional[float]) -> str:
    """``0.1234`` → ``"12.3%"``."""
    if not _is_renderable(value):
        return "0.0%"

    scaled = float(value) * 100
    if math.isfinite(scaled):
        rounded = _round_half_up(scaled, 1)
    else:
        rounded = _round_half_up(float(value), 1, shift=2)
    if rounded == 0:
        rounded = abs(rounded)
    return f"{rounded:f}%"
