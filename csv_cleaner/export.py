"""
Serialization of a table back to delimited text.

Cells are joined as is: values containing the delimiter or a newline are not
quoted or escaped.
"""

from __future__ import annotations

from typing import List, Optional, Sequence
from urllib.parse import quote

from .rules import CLEANED_SUFFIX, DEFAULT_DELIMITER, EXPORT_LINE_TERMINATOR, SUPPORTED_EXTENSIONS


def _join(cells: Sequence[Optional[str]], delimiter: str) -> str:
    return delimiter.join("" if cell is None else cell for cell in cells)


def serialize_csv(
    rows: List[List[Optional[str]]],
    headers: List[str],
    delimiter: str = DEFAULT_DELIMITER,
) -> str:
    lines = [_join(headers, delimiter)]
    lines.extend(_join(row, delimiter) for row in rows)
    return EXPORT_LINE_TERMINATOR.join(lines)


def cleaned_filename(file_name: str) -> str:
    """``sales.csv`` -> ``sales-cleaned.csv``; other names just get the suffix."""
    for ext in SUPPORTED_EXTENSIONS:
        if file_name.lower().endswith(ext):
            return file_name[: -len(ext)] + CLEANED_SUFFIX
    return file_name + CLEANED_SUFFIX


def content_disposition(file_name: str) -> str:
    """
    Attachment header value for a download name.

    Header values must be latin-1, so non-ASCII names are sent as an
    RFC 5987 ``filename*`` next to an ASCII ``filename`` fallback.
    """
    fallback = file_name.encode("ascii", errors="replace").decode("ascii")
    fallback = fallback.replace("?", "_").replace('"', "_").replace("\\", "_")

    quoted = quote(file_name)
    if quoted == file_name:
        return f'attachment; filename="{fallback}"'
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quoted}"
