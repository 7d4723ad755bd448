"""
Row-set transforms.

Each transform takes a list of rows and returns a new list; the input rows
are never mutated. Transforms that report an effect size return
``(rows, count)``.
"""

from __future__ import annotations

import re
from typing import List, Optional, Sequence, Tuple

from .parse import Row
from .rules import SIGNATURE_SEPARATOR

_NUMBER = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def _is_blank(cell: Optional[str]) -> bool:
    return cell is None or cell.strip() == ""


def is_numeric_like(cell: Optional[str]) -> bool:
    """
    True when the cell reads as a decimal number.

    Surrounding whitespace is tolerated. Sign, fraction and exponent are
    accepted ("-1", "3.", ".5", "1e3"). Empty and blank strings are not
    numeric, and neither are words such as "nan" or "inf".
    """
    if cell is None:
        return False
    return _NUMBER.fullmatch(cell.strip()) is not None


def row_signature(row: Sequence[Optional[str]]) -> str:
    """Trimmed, lowercased cells joined into a single comparison key."""
    return SIGNATURE_SEPARATOR.join((cell or "").strip().lower() for cell in row)


def remove_empty_rows(rows: List[Row]) -> Tuple[List[Row], int]:
    """Drop rows whose cells are all blank. A row without cells is blank too."""
    kept = [row for row in rows if not all(_is_blank(cell) for cell in row)]
    return kept, len(rows) - len(kept)


def remove_duplicates(rows: List[Row]) -> Tuple[List[Row], int]:
    """
    Keep the first row of every signature, drop the rest.

    Matching ignores case and surrounding whitespace; the kept row is the
    original, not its normalized form.
    """
    seen = set()
    unique: List[Row] = []
    dropped = 0

    for row in rows:
        key = row_signature(row)
        if key in seen:
            dropped += 1
            continue
        seen.add(key)
        unique.append(row)

    return unique, dropped


def trim_whitespace(rows: List[Row]) -> Tuple[List[Row], int]:
    """Trim every cell; the count is cells changed, not rows."""
    cells_fixed = 0
    trimmed_rows: List[Row] = []

    for row in rows:
        trimmed: Row = []
        for cell in row:
            if cell is None:
                trimmed.append(cell)
                continue
            stripped = cell.strip()
            if stripped != cell:
                cells_fixed += 1
            trimmed.append(stripped)
        trimmed_rows.append(trimmed)

    return trimmed_rows, cells_fixed


def standardize_case(rows: List[Row], headers: Optional[List[str]] = None) -> List[Row]:
    # headers are unused: every column gets the same rule
    return [
        [cell.lower() if cell and not is_numeric_like(cell) else cell for cell in row]
        for row in rows
    ]
