"""
Pasted Report Table Parser.

Recovers a table from text copied out of the membership reporting tool.
The paste is tab-separated but otherwise loose:

- An optional metadata line carries the query period (``조회기간: ...``)
- The header line starts with the row-name sentinel (``구분``) and may wrap
  onto following lines when a column label contains a line break
- Separator lines (``---``), blank lines and stray notes are mixed in
- Numbers carry thousands-separator commas; some cells are empty or text

The parser never raises.  Whatever cannot be understood is skipped or
becomes zero, and an empty input gives an empty table.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple, Union

from membership_report.config import ParserConfig
from membership_report.logging_setup import get_logger
from membership_report.normalizer import CellNormalizer
from membership_report.schema import ParsedTable

logger = get_logger("text_parser")

_LINE_SPLIT_RE = re.compile(r"\r?\n")


class TableParser:
    """Parse pasted tab-separated report text into a ``ParsedTable``.

    The metadata, header and row passes share a single line cursor: the
    period is only looked for above the header, and rows only below it.

    Parameters
    ----------
    config:
        Markers and heuristics.  Defaults match the membership export.
    normalizer:
        Cell normaliser; a fresh one is created when omitted.
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        normalizer: Optional[CellNormalizer] = None,
    ) -> None:
        self._config = config or ParserConfig()
        self._normalizer = normalizer or CellNormalizer()

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def parse(self, raw_text: Union[str, bytes, None]) -> ParsedTable:
        """Parse *raw_text* and return the recovered table."""
        text = self._coerce_text(raw_text)
        lines = _LINE_SPLIT_RE.split(text)
        table = ParsedTable()

        cursor, period = self._scan_period(lines)
        table.period = period

        cursor, headers = self._scan_header(lines, cursor)
        table.headers = headers

        skipped = self._parse_rows(lines, cursor, table)

        logger.info(
            "Parsed table — period=%r, headers=%d, rows=%d, skipped_lines=%d",
            table.period,
            len(table.headers),
            len(table.rows),
            skipped,
        )
        return table

    # ------------------------------------------------------------------ #
    # Passes
    # ------------------------------------------------------------------ #

    def _scan_period(self, lines: List[str]) -> Tuple[int, str]:
        """Find the period line above the header.

        Returns the cursor to continue from and the period text.  When no
        period line precedes the header the cursor stays at the top.
        """
        sentinel = self._config.header_sentinel
        for idx, raw in enumerate(lines):
            line = raw.strip()
            if line.startswith(sentinel):
                break
            if self._config.period_marker in line:
                _, _, after = line.partition(":")
                return idx + 1, after.strip()

        logger.info("No %r line above the header; period left empty",
                    self._config.period_marker)
        return 0, ""

    def _scan_header(self, lines: List[str], start: int) -> Tuple[int, List[str]]:
        """Find the header line and fold wrapped continuation lines into it.

        Returns the cursor of the first data line and the header labels
        (row-name column excluded).  Without a header the cursor is
        returned unchanged.
        """
        sentinel = self._config.header_sentinel
        for idx in range(start, len(lines)):
            line = lines[idx].strip()
            if not line.startswith(sentinel):
                continue

            header_line = line
            nxt = idx + 1
            while nxt < len(lines) and self._is_header_continuation(lines[nxt]):
                header_line += " " + lines[nxt].strip()
                nxt += 1

            if nxt > idx + 1:
                logger.debug("Header wrapped over %d extra line(s)", nxt - idx - 1)

            fields = header_line.split(self._config.delimiter)[1:]
            return nxt, [f.strip() for f in fields]

        logger.info("No header line starting with %r; reading rows from line %d",
                    sentinel, start + 1)
        return start, []

    def _parse_rows(self, lines: List[str], start: int, table: ParsedTable) -> int:
        """Read data rows into *table*; returns the number of skipped lines."""
        skipped = 0
        for idx in range(start, len(lines)):
            line = lines[idx].strip()
            if not line:
                continue
            if line.startswith(self._config.separator_prefix):
                logger.debug("Line %d: separator skipped", idx + 1)
                continue

            parts = line.split(self._config.delimiter)
            if len(parts) < 2:
                logger.debug("Line %d: not a table row: %r", idx + 1, line[:40])
                skipped += 1
                continue

            name = self._normalizer.normalize_row_name(parts[0])
            if not name or name == self._config.header_sentinel:
                skipped += 1
                continue

            if name in table.rows:
                logger.debug("Line %d: row %r repeated; later values win", idx + 1, name)

            table.rows[name] = [self._normalizer.normalize_value(p) for p in parts[1:]]
        return skipped

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _is_header_continuation(self, raw: str) -> bool:
        line = raw.strip()
        if not line or self._config.delimiter in line:
            return False
        return (
            line.startswith(self._config.continuation_prefix)
            or len(line) < self._config.continuation_max_length
        )

    @staticmethod
    def _coerce_text(raw_text: Union[str, bytes, None]) -> str:
        if raw_text is None:
            return ""
        if isinstance(raw_text, bytes):
            text = raw_text.decode("utf-8", errors="replace")
        else:
            text = str(raw_text)
        # Clipboard exports may start with a byte-order mark
        return text.lstrip("\ufeff")


def parse_table(raw_text: Union[str, bytes, None],
                config: Optional[ParserConfig] = None) -> ParsedTable:
    """Convenience: parse with a one-off ``TableParser``."""
    return TableParser(config=config).parse(raw_text)
