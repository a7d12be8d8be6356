"""
Metric path expressions.

A report cell names the value it shows with a short path::

    path := ref ('+' ref)*
    ref  := rowName '/' positiveInteger

``"NE Books/1"`` is the first value of the ``NE Books`` row;
``"NE Tutor/1+NE Tutor(클래스카드)/1"`` is the sum of two such values.
Paths are parsed once into ``SingleRef`` / ``SumRef`` objects and evaluated
by the resolver.  Parsing is lenient: a malformed index is kept as ``None``
and later evaluates to zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from membership_report.normalizer import CellNormalizer

_normalizer = CellNormalizer()


@dataclass(frozen=True)
class SingleRef:
    """One cell: a row name and a 1-based column index."""

    row: str
    index: Optional[int]

    @property
    def offset(self) -> Optional[int]:
        """Zero-based position, or ``None`` when the index is unusable."""
        if self.index is None or self.index < 1:
            return None
        return self.index - 1

    def with_index(self, index: int) -> "SingleRef":
        return SingleRef(row=self.row, index=index)

    def __str__(self) -> str:
        return f"{self.row}/{'' if self.index is None else self.index}"


@dataclass(frozen=True)
class SumRef:
    """The sum of several single references."""

    refs: Tuple[SingleRef, ...]

    def with_index(self, index: int) -> "SumRef":
        return SumRef(refs=tuple(r.with_index(index) for r in self.refs))

    def __str__(self) -> str:
        return "+".join(str(r) for r in self.refs)


MetricRef = Union[SingleRef, SumRef]


def parse_ref(expr: str) -> SingleRef:
    """Parse a single ``rowName/index`` reference.

    Everything before the first ``/`` is the row name; the leading digits
    after it are the index.
    """
    name, sep, rest = expr.partition("/")
    index = _normalizer.normalize_index(rest) if sep else None
    return SingleRef(row=name.strip(), index=index)


def parse_path(expr: Union[str, MetricRef]) -> MetricRef:
    """Parse *expr* into a reference; already-parsed references pass through."""
    if isinstance(expr, (SingleRef, SumRef)):
        return expr
    if "+" in expr:
        return SumRef(refs=tuple(parse_ref(part.strip()) for part in expr.split("+")))
    return parse_ref(expr)


def with_index(expr: Union[str, MetricRef], index: int) -> MetricRef:
    """Point every column index of *expr* at *index*.

    Report templates are written against column 1; this rewrites them for
    the other member-count columns.
    """
    return parse_path(expr).with_index(index)
