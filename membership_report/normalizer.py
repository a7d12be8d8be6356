"""
Cell Normalization Layer.

Turns the raw text of a pasted cell into something the table can hold.
Unlike a strict parser nothing here fails: a cell that does not hold a
number becomes ``0.0``.

Value transformations applied (in order):
1. Remove thousands-separator commas
2. Strip leading / trailing whitespace
3. Take the longest leading decimal number (``"1,234명"`` → ``1234``)
4. Substitute ``0.0`` for empty, unparsable, NaN or infinite results
"""

from __future__ import annotations

import math
import re
from typing import Any, Optional

from membership_report.logging_setup import get_logger

logger = get_logger("normalizer")


class CellNormalizer:
    """Stateless cell normaliser.  All methods are pure functions."""

    # Leading decimal number: sign, digits with optional fraction (or a bare
    # fraction), optional exponent.
    _LEADING_NUMBER_RE = re.compile(
        r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?"
    )

    _LEADING_DIGITS_RE = re.compile(r"^[+-]?\d+")

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def normalize_value(self, raw: Any) -> float:
        """Parse a numeric cell, degrading to ``0.0``.

        Handles:
        * Comma-grouped numbers: ``"1,234,567"``
        * Trailing units or notes: ``"1,234명"``, ``"12.5%"``
        * Already-numeric inputs (int / float)

        Returns
        -------
        float
            Always finite.
        """
        if raw is None:
            return 0.0

        if isinstance(raw, bool):
            return float(raw)

        if isinstance(raw, (int, float)):
            value = float(raw)
            return value if math.isfinite(value) else 0.0

        if not isinstance(raw, str):
            logger.debug("normalize_value: unexpected type %s → 0", type(raw).__name__)
            return 0.0

        text = raw.replace(",", "").strip()
        m = self._LEADING_NUMBER_RE.match(text)
        if not m:
            if text:
                logger.debug("normalize_value: %r is not numeric → 0", raw)
            return 0.0

        value = float(m.group(0))
        if not math.isfinite(value):
            logger.debug("normalize_value: %r overflows → 0", raw)
            return 0.0
        return value

    @staticmethod
    def normalize_row_name(raw: str) -> str:
        """Row names are compared exactly after trimming."""
        return raw.strip()

    def normalize_index(self, raw: Optional[str]) -> Optional[int]:
        """Parse the leading integer of a 1-based column index.

        ``"3"`` → 3, ``" 2abc"`` → 2; ``None``, ``""`` or ``"x"`` → ``None``.
        """
        if raw is None:
            return None
        m = self._LEADING_DIGITS_RE.match(raw.strip())
        if not m:
            return None
        return int(m.group(0))
