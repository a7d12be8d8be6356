#!/usr/bin/env python3
"""
Example: Membership Report Pipeline Demo.

Parses a sample paste from the member-count screen, resolves a few metric
paths and prints the report sections with display formatting.

Run from the project root:
    python -m membership_report.examples.run_example
"""

from __future__ import annotations

import logging

from membership_report.config import PipelineConfig
from membership_report.formatting import format_number, format_percent
from membership_report.pipeline import MembershipReportPipeline

SAMPLE_PASTE = "\n".join([
    "사이트별 회원 현황",
    "조회기간: 2024.01.08 ~ 2024.01.14",
    "구분\t전체 가입회원수\t전체 가입유효회원\t휴면계정 탈퇴회원\t본인탈퇴\t관리자탈퇴\t신규가입",
    "(명)",
    "-----------------------------------------",
    "NE Books\t120,000\t90,000\t300\t120\t0\t800",
    "NE Books(모바일)\t80,000\t70,000\t100\t80\t0\t600",
    "NE Tutor\t30,000\t25,000\t50\t20\t1\t150",
    "NE Tutor(클래스카드)\t5,000\t4,800\t0\t5\t0\t90",
    "NE Tutor(모바일)\t12,000\t11,000\t10\t8\t0\t70",
    "NELT\t8,000\t7,500\t5\t3\t0\t40",
    "Build&Grow 국문\t4,000\t3,000\t12\t4\t0\t20",
    "Build&Grow 국문 (모바일)\t2,000\t1,800\t2\t1\t0\t10",
    "NE Teacher\t60,000\t45,000\t200\t30\t2\t300",
    "NE Teacher(모바일)\t9,000\t8,500\t15\t5\t0\t45",
    "NE TextBook\t15,000\t2,000\t400\t10\t0\t0",
    "NE Times\t40,000\t30,000\t90\t25\t0\t210",
    "NE Times(모바일)\t20,000\t18,000\t30\t12\t0\t130",
    "TomatoClass\t7,000\t6,000\t8\t6\t0\t35",
    "TomatoClass(모바일)\t3,000\t2,900\t1\t2\t0\t15",
    "기타\t1,500\t300\t20\t1\t0\t",
])


# ======================================================================
# Helper
# ======================================================================

def print_section(title: str) -> None:
    width = 72
    print("\n" + "=" * width)
    print(f"  {title}")
    print("=" * width)


# ======================================================================
# Demos
# ======================================================================

def demo_parse(pipeline: MembershipReportPipeline) -> None:
    print_section("DEMO 1 — Parsed Table")

    table = pipeline.parse(SAMPLE_PASTE)
    print(f"  Period  : {table.period}")
    print(f"  Headers : {table.headers}")
    for name, values in table.rows.items():
        print(f"    {name:28s} {' '.join(format_number(v) for v in values)}")


def demo_resolve(pipeline: MembershipReportPipeline) -> None:
    print_section("DEMO 2 — Metric Paths")

    table = pipeline.parse(SAMPLE_PASTE)
    for path in ("NE Books/1", "NE Tutor/1+NE Tutor(클래스카드)/1", "NE Books/99"):
        resolution = pipeline.resolve(table, path)
        print(f"  {path:36s} → {resolution.detail}")


def demo_report(pipeline: MembershipReportPipeline) -> None:
    print_section("DEMO 3 — Report")

    output = pipeline.build_report(SAMPLE_PASTE)
    report = output.report
    print(f"  {report.title}  [{report.week_label}]  {report.period}")

    for section in report.sections:
        print(f"\n  {section.title}")
        for row in section.rows:
            fmt = format_percent if row.is_percent else format_number
            cells = [fmt(row.subtotal)]
            if row.grand_total is not None:
                cells.append(fmt(row.grand_total))
            print(f"    {row.label:36s} {section.subtotal_label}={cells[0]:>10s}"
                  + (f"  총계={cells[1]:>10s}" if len(cells) > 1 else ""))

    print(f"\n  ⚠ Warnings : {len(output.validation_warnings)}")
    for warning in output.validation_warnings:
        print(f"    - {warning}")


# ======================================================================
# Main
# ======================================================================

def main() -> None:
    pipeline = MembershipReportPipeline(
        PipelineConfig(log_level=logging.WARNING)  # Quieter for demo output
    )

    demo_parse(pipeline)
    demo_resolve(pipeline)
    demo_report(pipeline)

    print("\n" + "=" * 72)
    print("  All demos complete.")
    print("=" * 72)


if __name__ == "__main__":
    main()
