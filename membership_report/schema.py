"""
Data models carried through the report pipeline.

Defines the recovered table, the resolver's answer type, the member counts
and rates computed from it, and the report structure handed to the
presentation layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Parsed input
# ---------------------------------------------------------------------------

@dataclass
class ParsedTable:
    """A table recovered from pasted report text.

    ``rows`` maps a trimmed row name to its values in original column order.
    Insertion order is preserved; a repeated row name keeps its first
    position but carries the values of its last occurrence.
    """

    period: str = ""
    headers: List[str] = field(default_factory=list)
    rows: Dict[str, List[float]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def cell(self, name: str, index: int) -> float:
        """Zero-based cell access; anything out of range is 0."""
        values = self.rows.get(name)
        if values is None or index < 0 or index >= len(values):
            return 0.0
        return values[index]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period": self.period,
            "headers": list(self.headers),
            "rows": {name: list(values) for name, values in self.rows.items()},
        }

    def to_dataframe(self) -> Any:
        """Return the rows as a pandas DataFrame (one row per row name).

        Ragged rows are padded with 0 so every row has the same width.
        """
        try:
            import pandas as pd  # noqa: F811
        except ImportError as exc:
            raise ImportError(
                "pandas is required to use to_dataframe"
            ) from exc

        width = max((len(v) for v in self.rows.values()), default=0)
        columns = [
            self.headers[i] if i < len(self.headers) else f"col{i + 1}"
            for i in range(width)
        ]
        data = [
            list(values) + [0.0] * (width - len(values))
            for values in self.rows.values()
        ]
        return pd.DataFrame(data, index=list(self.rows.keys()), columns=columns)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Resolution:
    """The value of a metric path plus a human-readable derivation."""

    value: float
    detail: str

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "detail": self.detail}


# ---------------------------------------------------------------------------
# Member counts and rates
# ---------------------------------------------------------------------------

class CountIndex(int, Enum):
    """1-based column positions of the member-count export."""

    TOTAL = 1  # all members, dormant included
    ACTIVE = 2  # members excluding dormant accounts
    DORMANT_WITHDRAWALS = 3
    SELF_WITHDRAWALS = 4
    ADMIN_WITHDRAWALS = 5
    NEW_SIGNUPS = 6


@dataclass(frozen=True)
class MemberCounts:
    """Counts at one aggregation level: a site, a subtotal or a grand total."""

    total: float = 0.0
    active: float = 0.0
    dormant_withdrawals: float = 0.0
    self_withdrawals: float = 0.0
    admin_withdrawals: float = 0.0
    new_signups: float = 0.0

    def __add__(self, other: "MemberCounts") -> "MemberCounts":
        if not isinstance(other, MemberCounts):
            return NotImplemented
        return MemberCounts(
            total=self.total + other.total,
            active=self.active + other.active,
            dormant_withdrawals=self.dormant_withdrawals + other.dormant_withdrawals,
            self_withdrawals=self.self_withdrawals + other.self_withdrawals,
            admin_withdrawals=self.admin_withdrawals + other.admin_withdrawals,
            new_signups=self.new_signups + other.new_signups,
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "total": self.total,
            "active": self.active,
            "dormant_withdrawals": self.dormant_withdrawals,
            "self_withdrawals": self.self_withdrawals,
            "admin_withdrawals": self.admin_withdrawals,
            "new_signups": self.new_signups,
        }


@dataclass(frozen=True)
class RateSet:
    dormancy_rate: float = 0.0
    withdrawal_rate: float = 0.0
    net_churn_rate: float = 0.0
    new_signup_rate: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "dormancy_rate": self.dormancy_rate,
            "withdrawal_rate": self.withdrawal_rate,
            "net_churn_rate": self.net_churn_rate,
            "new_signup_rate": self.new_signup_rate,
        }


# ---------------------------------------------------------------------------
# Report structure
# ---------------------------------------------------------------------------

@dataclass
class MetricRow:
    """One line of a report section: a value per column plus its aggregates."""

    key: str
    label: str
    is_percent: bool
    values: List[float] = field(default_factory=list)
    subtotal: float = 0.0
    grand_total: Optional[float] = None
    formula: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "key": self.key,
            "label": self.label,
            "is_percent": self.is_percent,
            "values": list(self.values),
            "subtotal": self.subtotal,
        }
        if self.grand_total is not None:
            d["grand_total"] = self.grand_total
        if self.formula is not None:
            d["formula"] = self.formula
        return d


@dataclass
class ReportSection:
    """A block of the report covering one column set."""

    title: str
    subtotal_label: str
    columns: List[str] = field(default_factory=list)
    counts: List[MemberCounts] = field(default_factory=list)
    subtotal_counts: MemberCounts = field(default_factory=MemberCounts)
    grand_total_counts: Optional[MemberCounts] = None
    rows: List[MetricRow] = field(default_factory=list)

    def metric(self, key: str) -> MetricRow:
        for row in self.rows:
            if row.key == key:
                return row
        raise KeyError(key)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "title": self.title,
            "subtotal_label": self.subtotal_label,
            "columns": list(self.columns),
            "subtotal_counts": self.subtotal_counts.to_dict(),
            "rows": [r.to_dict() for r in self.rows],
        }
        if self.grand_total_counts is not None:
            d["grand_total_counts"] = self.grand_total_counts.to_dict()
        return d


@dataclass
class MembershipReport:
    """Everything the presentation layer needs to lay out the report."""

    period: str
    report_month: str
    week_label: str
    sections: List[ReportSection] = field(default_factory=list)
    preview: Dict[str, List[float]] = field(default_factory=dict)

    @property
    def title(self) -> str:
        return f"사이트별 회원 현황 _ {self.report_month}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "period": self.period,
            "report_month": self.report_month,
            "week_label": self.week_label,
            "sections": [s.to_dict() for s in self.sections],
            "preview": {k: list(v) for k, v in self.preview.items()},
        }


@dataclass
class PipelineOutput:
    """Aggregate result of a full pipeline run."""

    table: ParsedTable
    report: MembershipReport
    validation_warnings: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.table.is_empty

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "table": self.table.to_dict(),
            "report": self.report.to_dict(),
            "validation_warnings": list(self.validation_warnings),
        }
