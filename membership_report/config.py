"""
Configuration module for Membership Report.

All tuneable parameters — markers, heuristics, report layout, thresholds —
live here.  Nothing is hard-coded in parsing or metric modules.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class ParserConfig:
    """Controls how pasted report text is recovered into a table."""

    # Substring that marks the metadata line holding the query period
    period_marker: str = "조회기간"

    # First cell of the header line; also never accepted as a row name
    header_sentinel: str = "구분"

    # Lines starting with this are visual separators, not data
    separator_prefix: str = "---"

    delimiter: str = "\t"

    # Header continuation: a tab-free line shorter than this (or starting
    # with ``continuation_prefix``) is folded into the header line.
    continuation_max_length: int = 20
    continuation_prefix: str = "("


GROUP_A_COLUMNS: Tuple[str, ...] = (
    "NE Books/1",
    "NE Books(모바일)/1",
    "NE Tutor/1+NE Tutor(클래스카드)/1",
    "NE Tutor(모바일)/1",
    "NELT/1",
    "Build&Grow 국문/1",
    "Build&Grow 국문 (모바일)/1",
    "NE Teacher/1",
    "NE Teacher(모바일)/1",
    "NE TextBook/1",
)

GROUP_B_COLUMNS: Tuple[str, ...] = (
    "NE Times/1",
    "NE Times(모바일)/1",
    "TomatoClass/1",
    "TomatoClass(모바일)/1",
    "기타/1",
)

PREVIEW_HEADERS: Tuple[str, ...] = (
    "전체 가입회원수",
    "전체 가입유효회원",
    "휴면계정 탈퇴회원",
    "본인탈퇴",
    "관리자탈퇴",
    "신규가입",
)


@dataclass(frozen=True)
class ReportConfig:
    """Layout of the weekly membership report."""

    group_a_columns: Tuple[str, ...] = GROUP_A_COLUMNS
    group_b_columns: Tuple[str, ...] = GROUP_B_COLUMNS

    group_a_title: str = "교재 및 온라인 서비스 / 교과서"
    group_b_title: str = "기타 사업"

    # Used for the report title when the period cannot be read
    default_report_month: str = "2026.02"

    # Labels of the leading values shown per row in the input preview
    preview_headers: Tuple[str, ...] = PREVIEW_HEADERS

    @property
    def preview_width(self) -> int:
        return len(self.preview_headers)


@dataclass(frozen=True)
class ValidationConfig:
    """Controls the post-build diagnostics."""

    # Minimum rapidfuzz score (0–100) before a near-miss row name is
    # suggested for a missing template row.
    suggestion_threshold: float = 80.0

    # Warn when every value of a report section resolves to zero
    warn_on_all_zero: bool = True


@dataclass(frozen=True)
class PipelineConfig:
    """Top-level configuration aggregating all sub-configs."""

    parser: ParserConfig = field(default_factory=ParserConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)

    log_level: int = logging.INFO

    # Optional path for a file handler next to the console handler
    log_file: Optional[str] = None
