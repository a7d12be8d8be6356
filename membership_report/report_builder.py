"""
Report Builder.

Assembles the weekly membership report from a parsed table: for each
column set, the per-site counts and rates, the section subtotal and (for
the last section) the grand total across sections.  The result is plain
data; layout and styling belong to whoever renders it.

Also serialises a finished report to JSON, CSV and an Excel workbook.
"""

from __future__ import annotations

import csv
import json
import math
import re
from datetime import date
from io import BytesIO, StringIO
from pathlib import Path
from typing import IO, Any, Dict, List, Optional, Sequence, Tuple, Union

from openpyxl import Workbook
from openpyxl.styles import Font

from membership_report.config import ReportConfig
from membership_report.formatting import format_number, format_percent
from membership_report.logging_setup import get_logger
from membership_report.metric_path import SumRef, parse_path
from membership_report.rate_calculator import RateCalculator
from membership_report.resolver import MetricResolver
from membership_report.schema import (
    MemberCounts,
    MembershipReport,
    MetricRow,
    ParsedTable,
    RateSet,
    ReportSection,
)

logger = get_logger("report_builder")

# (key, label, is_percent) in display order.  Count keys name a
# ``MemberCounts`` field, rate keys a ``RateSet`` field.
METRIC_ROWS: Tuple[Tuple[str, str, bool], ...] = (
    ("total", "전체 가입회원수_휴면회원포함 (명)", False),
    ("active", "전체 가입유효회원수_휴면회원제외 (명)", False),
    ("dormancy_rate", "휴면 회원률 (%)", True),
    ("dormant_withdrawals", "휴면계정 탈퇴회원수 (명)", False),
    ("self_withdrawals", "본인 탈퇴회원수 (명)", False),
    ("withdrawal_rate", "탈퇴율 (%)", True),
    ("net_churn_rate", "순수 이탈률 (%)", True),
    ("new_signups", "신규 가입회원 수 (명)", False),
    ("new_signup_rate", "신규 가입률 (%)", True),
)

# Start of the period: "2024.01.01", "2024-01-01", "2024/1/1" or a bare
# month such as "2026.02", which counts as its 1st day
_DATE_RE = re.compile(r"^(\d{4})\s*[.\-/]\s*(\d{1,2})(?:\s*[.\-/]\s*(\d{1,2}))?")


def _period_start(period: str) -> str:
    return period.split("~")[0].strip()


def _week_of_month(text: str) -> Optional[int]:
    m = _DATE_RE.match(text)
    if not m:
        return None
    try:
        day = date(int(m.group(1)), int(m.group(2)), int(m.group(3) or 1)).day
    except ValueError:
        return None
    return math.ceil(day / 7)


def _column_label(template: str) -> str:
    ref = parse_path(template)
    if isinstance(ref, SumRef):
        return "+".join(r.row for r in ref.refs)
    return ref.row


class ReportBuilder:
    """Builds and serialises the membership report.

    Parameters
    ----------
    config:
        Column sets and labels of the report.
    """

    def __init__(
        self,
        config: Optional[ReportConfig] = None,
        calculator: Optional[RateCalculator] = None,
    ) -> None:
        self._config = config or ReportConfig()
        self._calculator = calculator or RateCalculator()

    # ------------------------------------------------------------------ #
    # Assembly
    # ------------------------------------------------------------------ #

    def build(self, table: ParsedTable) -> MembershipReport:
        """Compute every report value from *table*."""
        resolver = MetricResolver(table)
        cfg = self._config

        section_a = self._build_section(
            resolver, cfg.group_a_title, "소계 (A)", cfg.group_a_columns
        )
        section_b = self._build_section(
            resolver,
            cfg.group_b_title,
            "소계 (B)",
            cfg.group_b_columns,
            grand_total_with=section_a.subtotal_counts,
        )

        start = _period_start(table.period) or cfg.default_report_month
        week = _week_of_month(start)

        report = MembershipReport(
            period=table.period,
            report_month=start[:7].replace("-", ".", 1),
            week_label=f"{week}주차" if week else "실적",
            sections=[section_a, section_b],
            preview=self.preview(table),
        )
        logger.info(
            "Report built — month=%s, week=%s, sections=%d",
            report.report_month,
            report.week_label,
            len(report.sections),
        )
        return report

    def preview(self, table: ParsedTable) -> Dict[str, List[float]]:
        """The leading values of every row, padded with 0 to the preview width."""
        width = self._config.preview_width
        return {
            name: [table.cell(name, i) for i in range(width)]
            for name in table.rows
        }

    def _build_section(
        self,
        resolver: MetricResolver,
        title: str,
        subtotal_label: str,
        templates: Sequence[str],
        grand_total_with: Optional[MemberCounts] = None,
    ) -> ReportSection:
        counts = [resolver.counts(t) for t in templates]
        subtotal = resolver.subtotal_counts(templates)
        grand = subtotal + grand_total_with if grand_total_with is not None else None

        rates = [self._calculator.compute(c) for c in counts]
        subtotal_rates = self._calculator.compute(subtotal)
        grand_rates = self._calculator.compute(grand) if grand is not None else None

        rows = [
            MetricRow(
                key=key,
                label=label,
                is_percent=is_percent,
                values=[self._pick(key, c, r) for c, r in zip(counts, rates)],
                subtotal=self._pick(key, subtotal, subtotal_rates),
                grand_total=(
                    self._pick(key, grand, grand_rates) if grand is not None else None
                ),
                formula=self._calculator.FORMULAS.get(key),
            )
            for key, label, is_percent in METRIC_ROWS
        ]

        return ReportSection(
            title=title,
            subtotal_label=subtotal_label,
            columns=[_column_label(t) for t in templates],
            counts=counts,
            subtotal_counts=subtotal,
            grand_total_counts=grand,
            rows=rows,
        )

    @staticmethod
    def _pick(key: str, counts: MemberCounts, rates: RateSet) -> float:
        if hasattr(rates, key):
            return getattr(rates, key)
        return getattr(counts, key)

    # ------------------------------------------------------------------ #
    # Serialisation
    # ------------------------------------------------------------------ #

    @staticmethod
    def to_json(report: MembershipReport, indent: int = 2) -> str:
        """Serialise the report to a JSON string."""
        return json.dumps(report.to_dict(), indent=indent, ensure_ascii=False)

    @staticmethod
    def to_csv_string(report: MembershipReport) -> str:
        """Serialise the report sections to CSV text with display formatting."""
        buf = StringIO()
        writer = csv.writer(buf)
        writer.writerow([report.title])
        writer.writerow([report.week_label, report.period])
        for section in report.sections:
            writer.writerow([])
            writer.writerow(ReportBuilder._header_row(section))
            for row in section.rows:
                fmt = format_percent if row.is_percent else format_number
                line = [row.label] + [fmt(v) for v in row.values] + [fmt(row.subtotal)]
                if row.grand_total is not None:
                    line.append(fmt(row.grand_total))
                writer.writerow(line)
        return buf.getvalue()

    @staticmethod
    def build_workbook(
        report: MembershipReport, table: Optional[ParsedTable] = None
    ) -> Workbook:
        """One sheet per report section, plus the parsed rows when given."""
        wb = Workbook()
        wb.remove(wb.active)
        bold = Font(bold=True)

        for section in report.sections:
            ws = wb.create_sheet(title=section.subtotal_label)
            ws.append([report.title])
            ws.append([report.week_label, report.period])
            ws.append([section.title])
            ws.append(ReportBuilder._header_row(section))
            for cell in ws[ws.max_row]:
                cell.font = bold
            for row in section.rows:
                values = list(row.values) + [row.subtotal]
                if row.grand_total is not None:
                    values.append(row.grand_total)
                ws.append([row.label] + values)
                number_format = "0.0%" if row.is_percent else "#,##0"
                for cell in ws[ws.max_row][1:]:
                    cell.number_format = number_format
            ws["A1"].font = Font(bold=True, size=14)

        if table is not None:
            ws = wb.create_sheet(title="원본")
            ws.append(["구분"] + list(table.headers))
            for name, values in table.rows.items():
                ws.append([name] + list(values))

        return wb

    @staticmethod
    def to_xlsx(
        report: MembershipReport,
        dest: Union[str, Path, IO[bytes], None] = None,
        table: Optional[ParsedTable] = None,
    ) -> Any:
        """Write the workbook to *dest*; without *dest* return the bytes."""
        wb = ReportBuilder.build_workbook(report, table)
        if dest is None:
            buf = BytesIO()
            wb.save(buf)
            return buf.getvalue()
        if isinstance(dest, (str, Path)):
            dest = Path(dest)
            wb.save(dest)
            logger.info("Report workbook written to %s", dest)
            return dest
        wb.save(dest)
        return dest

    @staticmethod
    def _header_row(section: ReportSection) -> List[str]:
        header = ["구분"] + list(section.columns) + [section.subtotal_label]
        if section.grand_total_counts is not None:
            header.append("총계 (A+B)")
        return header
