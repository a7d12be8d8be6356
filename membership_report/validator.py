"""
Validation Layer.

Post-build diagnostics for a report.  Parsing and resolution never fail, so
a paste from the wrong screen produces a report full of zeros rather than
an error.  These checks say why, without changing any value.

Checks performed
----------------
1. **Empty table** — no data rows were recovered.
2. **Missing period** — no ``조회기간`` line above the header.
3. **Missing rows** — a report column names a row the paste does not have;
   a near-miss row name is suggested when one exists.
4. **All-zero sections** — every value of a report section is zero.
"""

from __future__ import annotations

from typing import List

from membership_report.config import ReportConfig, ValidationConfig
from membership_report.fuzzy_matcher import RowNameMatcher
from membership_report.logging_setup import get_logger
from membership_report.metric_path import SumRef, parse_path
from membership_report.schema import MembershipReport, ParsedTable

logger = get_logger("validator")


class ValidationReport:
    """Accumulates warnings during a validation pass."""

    def __init__(self) -> None:
        self.warnings: list[str] = []

    @property
    def is_clean(self) -> bool:
        return len(self.warnings) == 0

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)
        logger.warning("Validation WARNING: %s", msg)


class ReportValidator:
    """Validates a parsed table against the report it produced.

    Parameters
    ----------
    config:
        Suggestion threshold and behaviour flags.
    report_config:
        The column sets whose row names are checked.
    """

    def __init__(
        self,
        config: ValidationConfig,
        report_config: ReportConfig,
    ) -> None:
        self._config = config
        self._report_config = report_config

    def validate(
        self, table: ParsedTable, report: MembershipReport
    ) -> ValidationReport:
        """Run all checks and return a ``ValidationReport``."""
        result = ValidationReport()
        if table.is_empty:
            result.add_warning("No data rows recognised in the pasted text")
            return result

        self._check_period(table, result)
        self._check_missing_rows(table, result)
        self._check_all_zero(report, result)
        return result

    # ------------------------------------------------------------------ #
    # Individual checks
    # ------------------------------------------------------------------ #

    @staticmethod
    def _check_period(table: ParsedTable, result: ValidationReport) -> None:
        if not table.period:
            result.add_warning("Query period not found; report month falls back to default")

    def _check_missing_rows(
        self, table: ParsedTable, result: ValidationReport
    ) -> None:
        """Every row a report column refers to should exist in the paste."""
        matcher = RowNameMatcher(
            table.rows.keys(), threshold=self._config.suggestion_threshold
        )
        templates = (
            list(self._report_config.group_a_columns)
            + list(self._report_config.group_b_columns)
        )
        for name in self._referenced_rows(templates):
            if name in table.rows:
                continue
            suggestion = matcher.suggest(name)
            if suggestion is not None:
                result.add_warning(
                    f"Row '{name}' not found; did you mean "
                    f"'{suggestion.suggested_row}'? (score={suggestion.score:.1f})"
                )
            else:
                result.add_warning(f"Row '{name}' not found; its columns count as 0")

    def _check_all_zero(
        self, report: MembershipReport, result: ValidationReport
    ) -> None:
        if not self._config.warn_on_all_zero:
            return
        for section in report.sections:
            if all(
                v == 0
                for counts in section.counts
                for v in counts.to_dict().values()
            ):
                result.add_warning(
                    f"Every value in section '{section.title}' is 0; "
                    "check that the pasted table is the member-count export"
                )

    @staticmethod
    def _referenced_rows(templates: List[str]) -> List[str]:
        names: List[str] = []
        for template in templates:
            ref = parse_path(template)
            refs = ref.refs if isinstance(ref, SumRef) else (ref,)
            for r in refs:
                if r.row not in names:
                    names.append(r.row)
        return names
