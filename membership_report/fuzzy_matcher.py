"""
Row-Name Suggestion Layer.

Row lookups are exact; a template row that is missing from the paste simply
resolves to zero.  To help explain an all-zero column this layer uses
``rapidfuzz`` to find the parsed row name closest to a missing one, e.g.
``"NE Books (모바일)"`` for a template that asks for ``"NE Books(모바일)"``.
Suggestions are reported, never substituted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from rapidfuzz import fuzz, process, utils

from membership_report.logging_setup import get_logger

logger = get_logger("fuzzy_matcher")


@dataclass
class RowSuggestion:
    """A parsed row name that resembles a missing one."""

    missing_row: str
    suggested_row: str
    score: float  # 0–100


class RowNameMatcher:
    """Fuzzy-match a missing row name against the parsed row names.

    Parameters
    ----------
    row_names:
        Row names present in the parsed table.
    threshold:
        Minimum ``token_sort_ratio`` score for a suggestion.
    """

    def __init__(self, row_names: Iterable[str], threshold: float = 80.0) -> None:
        self._threshold = threshold

        self._targets: list[str] = list(dict.fromkeys(row_names))

    def suggest(self, missing_row: str) -> Optional[RowSuggestion]:
        """Best parsed row name for *missing_row*, or ``None`` below threshold."""
        if not missing_row or not self._targets:
            return None

        # default_process drops case and punctuation, so "A (B)" and "A(B)"
        # compare equal; token_sort_ratio ignores word order.
        result = process.extractOne(
            missing_row,
            self._targets,
            scorer=fuzz.token_sort_ratio,
            processor=utils.default_process,
        )
        if result is None:
            return None

        best_name, best_score, _ = result
        if best_score < self._threshold:
            logger.debug(
                "Closest row to %r is %r (%.1f), below threshold %.1f",
                missing_row,
                best_name,
                best_score,
                self._threshold,
            )
            return None

        suggestion = RowSuggestion(
            missing_row=missing_row,
            suggested_row=best_name,
            score=best_score,
        )
        logger.info(
            "Row %r missing; closest parsed row is %r (score=%.1f)",
            missing_row,
            suggestion.suggested_row,
            best_score,
        )
        return suggestion

    def suggest_batch(self, missing_rows: List[str]) -> dict[str, Optional[RowSuggestion]]:
        """Suggest for several rows.  Returns ``{row: suggestion}``."""
        return {row: self.suggest(row) for row in missing_rows}
