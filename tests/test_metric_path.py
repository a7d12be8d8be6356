"""
Unit tests for metric path parsing.
"""

from __future__ import annotations

from membership_report.metric_path import (
    SingleRef,
    SumRef,
    parse_path,
    parse_ref,
    with_index,
)


class TestParsePath:
    def test_single(self) -> None:
        assert parse_path("NE Books/1") == SingleRef(row="NE Books", index=1)

    def test_composite(self) -> None:
        ref = parse_path("NE Tutor/1+NE Tutor(클래스카드)/1")
        assert ref == SumRef(refs=(
            SingleRef(row="NE Tutor", index=1),
            SingleRef(row="NE Tutor(클래스카드)", index=1),
        ))

    def test_parts_trimmed(self) -> None:
        ref = parse_path(" A /2 + B/3 ")
        assert ref == SumRef(refs=(SingleRef("A", 2), SingleRef("B", 3)))

    def test_parsed_ref_passes_through(self) -> None:
        ref = SingleRef("A", 4)
        assert parse_path(ref) is ref


class TestParseRef:
    def test_missing_index(self) -> None:
        assert parse_ref("A") == SingleRef("A", None)

    def test_non_numeric_index(self) -> None:
        assert parse_ref("A/x").index is None

    def test_extra_slash(self) -> None:
        assert parse_ref("A/B/2") == SingleRef("A", None)


class TestOffset:
    def test_one_based(self) -> None:
        assert SingleRef("A", 1).offset == 0
        assert SingleRef("A", 6).offset == 5

    def test_unusable(self) -> None:
        assert SingleRef("A", 0).offset is None
        assert SingleRef("A", -1).offset is None
        assert SingleRef("A", None).offset is None


class TestWithIndex:
    def test_single(self) -> None:
        assert with_index("NELT/1", 4) == SingleRef("NELT", 4)

    def test_every_part_of_a_sum(self) -> None:
        ref = with_index("A/1+B/1", 3)
        assert str(ref) == "A/3+B/3"

    def test_str_roundtrip(self) -> None:
        assert str(parse_path("NE Books(모바일)/2")) == "NE Books(모바일)/2"
