"""
Pipeline Orchestrator.

The central entry point that wires together every layer:

    Pasted Text  →  Table Parser  →  Metric Resolver / Rate Calculator
                 →  Report Builder  →  Validator  →  Output

Usage
-----
>>> from membership_report.pipeline import MembershipReportPipeline
>>> from membership_report.config import PipelineConfig
>>>
>>> pipe = MembershipReportPipeline(PipelineConfig())
>>> output = pipe.build_report(pasted_text)
>>> print(output.to_dict()["report"]["title"])
"""

from __future__ import annotations

from typing import Any, Optional, Union

from membership_report.config import PipelineConfig
from membership_report.logging_setup import configure_logging, get_logger
from membership_report.normalizer import CellNormalizer
from membership_report.report_builder import ReportBuilder
from membership_report.resolver import MetricResolver, PathLike
from membership_report.schema import ParsedTable, PipelineOutput, Resolution
from membership_report.text_parser import TableParser
from membership_report.validator import ReportValidator

logger = get_logger("pipeline")

TextOrTable = Union[str, bytes, ParsedTable]


class ReportInputError(ValueError):
    """The submitted input is not report text."""


class MembershipReportPipeline:
    """Orchestrates parsing, metric resolution and report assembly.

    Parameters
    ----------
    config:
        All tuneable knobs.  Defaults match the weekly member-count export.
    """

    def __init__(self, config: Optional[PipelineConfig] = None) -> None:
        self._config = config or PipelineConfig()

        # Bootstrap logging before anything else
        configure_logging(level=self._config.log_level, log_file=self._config.log_file)

        # Construct layers
        self._parser = TableParser(
            config=self._config.parser, normalizer=CellNormalizer()
        )
        self._builder = ReportBuilder(config=self._config.report)
        self._validator = ReportValidator(
            config=self._config.validation, report_config=self._config.report
        )

        logger.info(
            "Pipeline initialised — sections=%d/%d columns, suggestion_threshold=%.1f",
            len(self._config.report.group_a_columns),
            len(self._config.report.group_b_columns),
            self._config.validation.suggestion_threshold,
        )

    @property
    def config(self) -> PipelineConfig:
        return self._config

    @property
    def builder(self) -> ReportBuilder:
        return self._builder

    # ------------------------------------------------------------------ #
    # Entry points
    # ------------------------------------------------------------------ #

    def parse(self, text: Union[str, bytes]) -> ParsedTable:
        """Recover the table from pasted text."""
        return self._parser.parse(self._check_text(text))

    def resolve(self, source: TextOrTable, path: PathLike) -> Resolution:
        """Resolve one metric path against pasted text or a parsed table."""
        return MetricResolver(self._as_table(source)).resolve(path)

    def build_report(self, source: TextOrTable) -> PipelineOutput:
        """Parse (if needed), build the report and run the diagnostics."""
        table = self._as_table(source)
        report = self._builder.build(table)
        validation = self._validator.validate(table, report)

        logger.info(
            "Pipeline complete — rows=%d, warnings=%d",
            len(table.rows),
            len(validation.warnings),
        )
        return PipelineOutput(
            table=table,
            report=report,
            validation_warnings=validation.warnings,
        )

    # ------------------------------------------------------------------ #
    # Input handling
    # ------------------------------------------------------------------ #

    def _as_table(self, source: TextOrTable) -> ParsedTable:
        if isinstance(source, ParsedTable):
            return source
        return self.parse(source)

    @staticmethod
    def _check_text(text: Any) -> str:
        """Accept ``str`` or UTF-8 ``bytes``; anything else is rejected."""
        if isinstance(text, str):
            return text
        if isinstance(text, bytes):
            try:
                return text.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise ReportInputError(
                    f"Input is not UTF-8 text: {exc.reason}"
                ) from exc
        raise ReportInputError(
            f"Expected pasted report text, got {type(text).__name__}"
        )
