from __future__ import annotations

import re

_A1_PATTERN = re.compile(r"^[A-Za-z]{1,3}[1-9][0-9]*$")
_COLUMN_LABEL_PATTERN = re.compile(r"^[A-Za-z]{1,3}$")
_R1C1_PATTERN = re.compile(r"^(?:[Rr][0-9]*(?:[Cc][0-9]*)?|[Cc][0-9]*)$")
_PLAIN_SHEET_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_.]*$")


def split_a1(value: str) -> tuple[str, int]:
    """Split A1 notation into normalized (column_label, row_index)."""
    if not _A1_PATTERN.match(value):
        raise ValueError(f"Invalid cell reference: {value}")
    idx = 0
    for index, char in enumerate(value):
        if char.isdigit():
            idx = index
            break
    column = value[:idx].upper()
    row = int(value[idx:])
    return column, row


def column_label_to_index(label: str) -> int:
    """Convert Excel-style column label (A/AA) to 1-based index."""
    normalized = label.strip().upper()
    if not _COLUMN_LABEL_PATTERN.match(normalized):
        raise ValueError(f"Invalid column label: {label}")
    index = 0
    for char in normalized:
        index = index * 26 + (ord(char) - ord("A") + 1)
    return index


def column_index_to_label(index: int) -> str:
    """Convert 1-based column index to Excel-style column label."""
    if index < 1:
        raise ValueError("Column index must be positive.")
    chunks: list[str] = []
    current = index
    while current > 0:
        current -= 1
        chunks.append(chr(ord("A") + (current % 26)))
        current //= 26
    return "".join(reversed(chunks))


def column_letter(col: int) -> str:
    """Convert a zero-based column index to letters (0 -> A, 26 -> AA)."""
    if col < 0:
        raise ValueError(f"Column index must not be negative: {col}")
    return column_index_to_label(col + 1)


def column_offset(label: str) -> int:
    """Convert column letters back to a zero-based column index."""
    return column_label_to_index(label) - 1


def cell_ref(row: int, col: int) -> str:
    """Build an A1 reference from a 1-based row and a zero-based column."""
    return f"{column_letter(col)}{row}"


def absolute_column_range(sheet: str, col: int, first_row: int, last_row: int) -> str:
    """Build a sheet-qualified absolute single-column range.

    Args:
        sheet: Sheet name. Quoted unless it is a plain identifier that cannot be
            read as a cell reference.
        col: Zero-based column index.
        first_row: First 1-based row.
        last_row: Last 1-based row.

    Returns:
        Range text such as ``Lists!$A$2:$A$3``.
    """
    letter = column_letter(col)
    prefix = sheet
    if _needs_quotes(sheet):
        prefix = "'" + sheet.replace("'", "''") + "'"
    return f"{prefix}!${letter}${first_row}:${letter}${last_row}"


def _needs_quotes(sheet: str) -> bool:
    """Return True when a sheet name must be quoted inside a formula."""
    if not _PLAIN_SHEET_PATTERN.match(sheet):
        return True
    return bool(_A1_PATTERN.match(sheet) or _R1C1_PATTERN.match(sheet))
