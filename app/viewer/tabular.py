"""Quote-aware parser for comma-delimited statement exports.

One record per non-blank line. Inside double quotes a comma is literal and a
doubled quote stands for one quote character. Fields are kept verbatim.
"""

import re
from dataclasses import dataclass, field

from app.documents.exceptions import FormatError

DELIMITER = ","
QUOTE = '"'
LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class TabularData:
    """Parsed table: the first record is the header, the rest are data rows."""

    header: list[str]
    rows: list[list[str]] = field(default_factory=list)

    @property
    def column_count(self) -> int:
        return len(self.header)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def display_rows(self) -> list[list[str]]:
        """Rows fitted to the header width: short rows padded, long rows cut."""
        width = len(self.header)
        return [(row + [""] * width)[:width] for row in self.rows]

    def summary(self) -> str:
        rows = "row" if self.row_count == 1 else "rows"
        columns = "column" if self.column_count == 1 else "columns"
        return f"Showing {self.row_count} {rows} • {self.column_count} {columns}"


def parse(text: str) -> TabularData:
    """Parse delimited text into a header and data rows.

    Raises:
        FormatError: if the text holds no non-blank line.
    """
    lines = [line for line in LINE_BREAK.split(text) if line.strip()]
    if not lines:
        raise FormatError("CSV file is empty")
    records = [_parse_record(line) for line in lines]
    return TabularData(header=records[0], rows=records[1:])


def _parse_record(line: str) -> list[str]:
    fields: list[str] = []
    current: list[str] = []
    quoted = False
    i = 0
    while i < len(line):
        char = line[i]
        if quoted:
            if char == QUOTE:
                if i + 1 < len(line) and line[i + 1] == QUOTE:
                    current.append(QUOTE)
                    i += 1
                else:
                    quoted = False
            else:
                current.append(char)
        elif char == QUOTE:
            quoted = True
        elif char == DELIMITER:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1
    fields.append("".join(current))
    return fields


def serialize(table: TabularData) -> str:
    """Write a table back as delimited text that ``parse`` reads identically.

    Raises:
        FormatError: if a field contains a line break, which has no
            single-line representation.
    """
    return "\n".join(_serialize_record(record) for record in [table.header, *table.rows])


def _serialize_record(record: list[str]) -> str:
    line = DELIMITER.join(_serialize_field(value) for value in record)
    if not line.strip():
        # A blank line would be skipped on parse; force every field quoted.
        line = DELIMITER.join(_quote(value) for value in record)
    return line


def _serialize_field(value: str) -> str:
    if LINE_BREAK.search(value):
        raise FormatError("Field contains a line break")
    if DELIMITER in value or QUOTE in value:
        return _quote(value)
    return value


def _quote(value: str) -> str:
    return QUOTE + value.replace(QUOTE, QUOTE * 2) + QUOTE
