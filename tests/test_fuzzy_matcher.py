"""
Unit tests for the RowNameMatcher.
"""

from __future__ import annotations

import pytest

from membership_report.fuzzy_matcher import RowNameMatcher

ROWS = ["Site A (mobile)", "Site B", "Other Service"]


@pytest.fixture
def matcher() -> RowNameMatcher:
    return RowNameMatcher(ROWS, threshold=80.0)


class TestSuggest:
    def test_spacing_and_case_ignored(self, matcher: RowNameMatcher) -> None:
        result = matcher.suggest("site a(Mobile)")
        assert result is not None
        assert result.suggested_row == "Site A (mobile)"
        assert result.score >= 95.0

    def test_word_order_ignored(self, matcher: RowNameMatcher) -> None:
        result = matcher.suggest("Service Other")
        assert result is not None
        assert result.suggested_row == "Other Service"

    def test_no_match_below_threshold(self, matcher: RowNameMatcher) -> None:
        assert matcher.suggest("Completely Unrelated Thing") is None

    def test_empty_inputs(self, matcher: RowNameMatcher) -> None:
        assert matcher.suggest("") is None
        assert RowNameMatcher([]).suggest("Site B") is None

    def test_batch(self, matcher: RowNameMatcher) -> None:
        results = matcher.suggest_batch(["Site  B", "zzz"])
        assert results["Site  B"] is not None
        assert results["Site  B"].suggested_row == "Site B"
        assert results["zzz"] is None
