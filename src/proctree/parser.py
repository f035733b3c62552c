"""Parser for the tabular output of ``ps``.

The parser is a two-state machine. The first line it sees is the header,
every following line is a data row with exactly as many whitespace separated
fields as the header. Only the last field may contain whitespace, which is
why the command line column has to be the last one requested from ``ps``.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import Enum

from proctree.errors import HeaderError, RowShapeError
from proctree.models import Record


class ParserState(str, Enum):
    """States of the table parser."""

    AWAITING_HEADER = "awaiting_header"
    READING_ROWS = "reading_rows"


def non_empty_lines(lines: Iterable[str]) -> Iterator[str]:
    """Strip surrounding whitespace from each line and skip blank ones."""
    for line in lines:
        line = line.strip()
        if line:
            yield line


class TableParser:
    """Incremental parser turning header plus rows into records.

    Feed trimmed, non-empty lines one at a time with ``feed()``. The first
    line fixes the column names, each later line is converted into a Record.

    Attributes:
        state: Current parser state
        header: Column names, empty until the header is read
        records: Records parsed so far
    """

    def __init__(self) -> None:
        self.state = ParserState.AWAITING_HEADER
        self.header: list[str] = []
        self.records: list[Record] = []
        self._line_number = 0

    def feed(self, line: str) -> None:
        """Consume one line.

        Raises:
            HeaderError: If the header has fewer than two columns
            RowShapeError: If a data line does not match the header width
        """
        self._line_number += 1

        if self.state is ParserState.AWAITING_HEADER:
            self._read_header(line)
        else:
            self._read_row(line)

    def _read_header(self, line: str) -> None:
        header = line.split()
        if len(header) < 2:
            raise HeaderError(header)

        self.header = header
        self.state = ParserState.READING_ROWS

    def _read_row(self, line: str) -> None:
        width = len(self.header)
        # numeric columns are right-aligned, so rows may start with spaces
        fields = line.strip().split(maxsplit=width - 1)

        if len(fields) != width:
            raise RowShapeError(fields, width, self._line_number)

        self.records.append(dict(zip(self.header, fields)))


def parse_table(lines: Iterable[str]) -> list[Record]:
    """Parse a whole table.

    Args:
        lines: Trimmed, non-empty lines, header first (see ``non_empty_lines``)

    Returns:
        One record per data line; empty if there are no data lines
    """
    parser = TableParser()
    for line in lines:
        parser.feed(line)
    return parser.records
