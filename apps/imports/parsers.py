"""
CSV batch parsing

Turns uploaded text into row mappings. Structural problems (broken
quoting, no header, no data) fail the whole batch before any row is
reconciled; everything else is left to the per-row validators.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass


class ImportParseError(Exception):
    """The batch cannot be read as CSV at all."""


@dataclass(frozen=True)
class RawRow:
    """One data row: its 1-based position and trimmed cell values."""
    number: int
    values: dict[str, str]

    def get(self, column: str) -> str:
        return self.values.get(column, '')


def decode_upload(content: bytes | str) -> str:
    if isinstance(content, str):
        return content
    try:
        # utf-8-sig drops the BOM spreadsheet tools prepend
        return content.decode('utf-8-sig')
    except UnicodeDecodeError as exc:
        raise ImportParseError("File must be UTF-8 encoded CSV.") from exc


def parse_csv(content: bytes | str) -> list[RawRow]:
    """
    Parse a CSV batch into trimmed rows

    Header names are trimmed and lower-cased; blank lines and rows whose
    cells are all empty are skipped. Raises ImportParseError on malformed
    quoting or when the batch holds no data rows.
    """
    text = decode_upload(content)
    reader = csv.reader(io.StringIO(text, newline=''), strict=True)

    try:
        header: list[str] | None = None
        rows: list[RawRow] = []
        for cells in reader:
            if not any(cell.strip() for cell in cells):
                continue
            if header is None:
                header = [cell.strip().lower() for cell in cells]
                continue
            values = {
                column: cells[index].strip() if index < len(cells) else ''
                for index, column in enumerate(header)
                if column
            }
            rows.append(RawRow(number=len(rows) + 1, values=values))
    except csv.Error as exc:
        raise ImportParseError(f"Malformed CSV at line {reader.line_num}: {exc}") from exc

    if header is None:
        raise ImportParseError("The file is empty.")
    if not rows:
        raise ImportParseError("The file has a header but no data rows.")
    return rows
