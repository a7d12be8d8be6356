"""
Unit tests for the RateCalculator.
"""

from __future__ import annotations

import math

import pytest

from membership_report.rate_calculator import RateCalculator, safe_divide
from membership_report.schema import MemberCounts


@pytest.fixture
def calculator() -> RateCalculator:
    return RateCalculator()


class TestSafeDivide:
    def test_plain(self) -> None:
        assert safe_divide(1, 2) == 0.5

    def test_zero_denominator(self) -> None:
        assert safe_divide(1, 0) == 0.0
        assert safe_divide(0, 0) == 0.0

    def test_missing_operand(self) -> None:
        assert safe_divide(None, 1) == 0.0
        assert safe_divide(1, None) == 0.0

    def test_custom_default(self) -> None:
        assert safe_divide(1, 0, default=-1.0) == -1.0


class TestRates:
    def test_dormancy_rate(self, calculator: RateCalculator) -> None:
        assert calculator.dormancy_rate(1000, 800) == pytest.approx(0.2)

    def test_withdrawal_rate(self, calculator: RateCalculator) -> None:
        assert calculator.withdrawal_rate(900, 50, 50) == pytest.approx(0.1)

    def test_net_churn_rate(self, calculator: RateCalculator) -> None:
        assert calculator.net_churn_rate(900, 50, 50) == pytest.approx(0.05)

    def test_new_signup_rate(self, calculator: RateCalculator) -> None:
        assert calculator.new_signup_rate(1000, 30) == pytest.approx(0.03)


class TestZeroGuards:
    @pytest.mark.parametrize("other", [0, 500, -3])
    def test_zero_total(self, calculator: RateCalculator, other: float) -> None:
        assert calculator.dormancy_rate(0, other) == 0.0
        assert calculator.new_signup_rate(0, other) == 0.0

    def test_zero_withdrawal_base(self, calculator: RateCalculator) -> None:
        assert calculator.withdrawal_rate(0, 0, 0) == 0.0
        assert calculator.net_churn_rate(0, 0, 0) == 0.0
        # base cancels out to zero
        assert calculator.withdrawal_rate(10, -10, 0) == 0.0

    def test_empty_counts_give_zero_rates(self, calculator: RateCalculator) -> None:
        rates = calculator.compute(MemberCounts())
        for value in rates.to_dict().values():
            assert value == 0.0
            assert not math.isnan(value)


class TestCompute:
    def test_all_rates(self, calculator: RateCalculator) -> None:
        counts = MemberCounts(
            total=2000, active=1600, dormant_withdrawals=10,
            self_withdrawals=90, admin_withdrawals=3, new_signups=75,
        )
        rates = calculator.compute(counts)
        assert rates.dormancy_rate == pytest.approx(0.2)
        assert rates.withdrawal_rate == pytest.approx(100 / 2100)
        assert rates.net_churn_rate == pytest.approx(90 / 2100)
        assert rates.new_signup_rate == pytest.approx(0.0375)

    def test_same_formula_on_summed_counts(self, calculator: RateCalculator) -> None:
        a = MemberCounts(total=1000, active=800, new_signups=50)
        b = MemberCounts(total=3000, active=1800, new_signups=225)
        rates = calculator.compute(a + b)
        assert rates.dormancy_rate == pytest.approx(1400 / 4000)
        assert rates.new_signup_rate == pytest.approx(275 / 4000)
