"""
Membership Rate Calculator.

Computes the four report rates from member counts.  The same formulas are
used for a single site, a section subtotal and the grand total; callers
only change which ``MemberCounts`` they pass in.

    dormancy rate    = (① - ②) / ①
    withdrawal rate  = (④ + ⑤) / (① + ④ + ⑤)
    net churn rate   = ⑤ / (① + ④ + ⑤)
    new-signup rate  = ⑧ / ①

① total members, ② active members, ④ dormant-account withdrawals,
⑤ self-initiated withdrawals, ⑧ new signups.  A zero denominator gives 0.
"""

from __future__ import annotations

import math
from typing import Dict, Optional

from membership_report.schema import MemberCounts, RateSet


def safe_divide(
    numerator: Optional[float],
    denominator: Optional[float],
    default: float = 0.0,
) -> float:
    """Divide, returning *default* for missing input, zero or non-finite results."""
    if numerator is None or denominator is None:
        return default
    if denominator == 0:
        return default
    result = numerator / denominator
    if math.isnan(result) or math.isinf(result):
        return default
    return result


class RateCalculator:
    """Calculate membership rates from member counts."""

    FORMULAS: Dict[str, str] = {
        "dormancy_rate": "(①-②)/①",
        "withdrawal_rate": "(④+⑤)/(①+④+⑤)",
        "net_churn_rate": "⑤/(①+④+⑤)",
        "new_signup_rate": "⑧/①",
    }

    @staticmethod
    def dormancy_rate(total: float, active: float) -> float:
        return safe_divide(total - active, total)

    @staticmethod
    def withdrawal_rate(
        total: float, dormant_withdrawals: float, self_withdrawals: float
    ) -> float:
        base = total + dormant_withdrawals + self_withdrawals
        return safe_divide(dormant_withdrawals + self_withdrawals, base)

    @staticmethod
    def net_churn_rate(
        total: float, dormant_withdrawals: float, self_withdrawals: float
    ) -> float:
        base = total + dormant_withdrawals + self_withdrawals
        return safe_divide(self_withdrawals, base)

    @staticmethod
    def new_signup_rate(total: float, new_signups: float) -> float:
        return safe_divide(new_signups, total)

    def compute(self, counts: MemberCounts) -> RateSet:
        """All four rates for one aggregation level."""
        return RateSet(
            dormancy_rate=self.dormancy_rate(counts.total, counts.active),
            withdrawal_rate=self.withdrawal_rate(
                counts.total, counts.dormant_withdrawals, counts.self_withdrawals
            ),
            net_churn_rate=self.net_churn_rate(
                counts.total, counts.dormant_withdrawals, counts.self_withdrawals
            ),
            new_signup_rate=self.new_signup_rate(counts.total, counts.new_signups),
        )
