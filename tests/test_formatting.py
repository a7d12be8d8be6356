"""
Unit tests for display formatting.
"""

from __future__ import annotations

from membership_report.formatting import format_number, format_percent


class TestFormatNumber:
    def test_grouping(self) -> None:
        assert format_number(1_234_567) == "1,234,567"

    def test_whole_float(self) -> None:
        assert format_number(1000.0) == "1,000"

    def test_fraction(self) -> None:
        assert format_number(1.5) == "1.5"

    def test_three_fraction_digits(self) -> None:
        assert format_number(0.12345) == "0.123"

    def test_half_up(self) -> None:
        assert format_number(0.0625) == "0.063"

    def test_negative(self) -> None:
        assert format_number(-2500) == "-2,500"

    def test_tiny_is_zero(self) -> None:
        assert format_number(0.0004) == "0"
        assert format_number(-0.0) == "0"

    def test_missing_and_non_finite(self) -> None:
        assert format_number(None) == "0"
        assert format_number(float("nan")) == "0"
        assert format_number(float("inf")) == "0"


class TestFormatPercent:
    def test_one_decimal(self) -> None:
        assert format_percent(0.1234) == "12.3%"

    def test_zero(self) -> None:
        assert format_percent(0) == "0.0%"
        assert format_percent(-0.0) == "0.0%"

    def test_whole(self) -> None:
        assert format_percent(1) == "100.0%"

    def test_half_up(self) -> None:
        assert format_percent(0.0625) == "6.3%"
        assert format_percent(-0.0625) == "-6.3%"

    def test_non_finite(self) -> None:
        assert format_percent(float("nan")) == "0.0%"
        assert format_percent(float("inf")) == "0.0%"
        assert format_percent(None) == "0.0%"

    def test_huge_finite_rate(self) -> None:
        text = format_percent(1e307)
        assert text.endswith(".0%")
        assert len(text) > 300
        assert format_percent(-1e307).startswith("-")
