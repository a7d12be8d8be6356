"""
Membership Report — pasted member-count tables to weekly report figures.

Recovers a table from tab-separated text copied out of the membership
reporting tool and computes the report's counts, subtotals, grand totals
and rates (dormancy, withdrawal, net churn, new signup).

Recovery is best-effort by policy: malformed cells become 0, unknown rows
and columns resolve to 0, and a zero denominator gives a rate of 0.
"""

__version__ = "1.0.0"
__author__ = "Membership Report Team"

from membership_report.pipeline import MembershipReportPipeline  # noqa: F401
