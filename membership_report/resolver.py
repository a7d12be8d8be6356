"""
Metric Resolver.

Evaluates metric paths (see ``metric_path``) against a ``ParsedTable``.
Resolution is a pure function of the table: nothing is cached and nothing
raises.  An unknown row, a malformed index or an index past the end of a
row all resolve to 0.

Usage
-----
>>> from membership_report.text_parser import parse_table
>>> table = parse_table("구분\\tA\\nNE Books\\t1,000\\nNE Times\\t250")
>>> MetricResolver(table).resolve("NE Books/1+NE Times/1").detail
'NE Books: 1,000 + NE Times: 250 = 1,250'
"""

from __future__ import annotations

from typing import Iterable, Sequence, Union

from membership_report.formatting import format_number
from membership_report.logging_setup import get_logger
from membership_report.metric_path import MetricRef, SingleRef, SumRef, parse_path
from membership_report.schema import CountIndex, MemberCounts, ParsedTable, Resolution

logger = get_logger("resolver")

PathLike = Union[str, MetricRef]


class MetricResolver:
    """Resolve metric paths against one parsed table.

    Parameters
    ----------
    table:
        The table produced by ``TableParser.parse``.
    """

    def __init__(self, table: ParsedTable) -> None:
        self._table = table

    @property
    def table(self) -> ParsedTable:
        return self._table

    # ------------------------------------------------------------------ #
    # Single paths
    # ------------------------------------------------------------------ #

    def resolve(self, path: PathLike) -> Resolution:
        """Return the value of *path* with a readable derivation."""
        ref = parse_path(path)

        if isinstance(ref, SumRef):
            parts = [(r.row, self._cell(r)) for r in ref.refs]
            total = sum(v for _, v in parts)
            terms = " + ".join(f"{name}: {format_number(v)}" for name, v in parts)
            return Resolution(value=total, detail=f"{terms} = {format_number(total)}")

        value = self._cell(ref)
        return Resolution(value=value, detail=f"{ref.row}: {format_number(value)}")

    def value(self, path: PathLike) -> float:
        """Numeric value of *path*, without the derivation."""
        return self.resolve(path).value

    # ------------------------------------------------------------------ #
    # Aggregates
    # ------------------------------------------------------------------ #

    def subtotal(self, templates: Iterable[PathLike], index: int) -> float:
        """Sum of every template re-pointed at column *index*."""
        return sum(self.value(parse_path(t).with_index(index)) for t in templates)

    def grand_total(
        self, template_sets: Iterable[Iterable[PathLike]], index: int
    ) -> float:
        """Sum of the subtotals of several column sets at column *index*."""
        return sum(self.subtotal(templates, index) for templates in template_sets)

    def counts(self, path: PathLike) -> MemberCounts:
        """Member counts (columns 1–6, see ``CountIndex``) for one template path."""
        ref = parse_path(path)
        return MemberCounts(*(self.value(ref.with_index(int(i))) for i in CountIndex))

    def subtotal_counts(self, templates: Sequence[PathLike]) -> MemberCounts:
        """Member counts summed over a column set."""
        return MemberCounts(*(self.subtotal(templates, int(i)) for i in CountIndex))

    # ------------------------------------------------------------------ #
    # Internal
    # ------------------------------------------------------------------ #

    def _cell(self, ref: SingleRef) -> float:
        offset = ref.offset
        if offset is None:
            logger.debug("Unusable column index in %r → 0", str(ref))
            return 0.0
        if ref.row not in self._table.rows:
            logger.debug("Unknown row %r → 0", ref.row)
            return 0.0
        return self._table.cell(ref.row, offset)


def resolve(table: ParsedTable, path: PathLike) -> Resolution:
    return MetricResolver(table).resolve(path)


def resolve_value(table: ParsedTable, path: PathLike) -> float:
    return MetricResolver(table).value(path)
