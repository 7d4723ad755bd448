"""
Decoding and tokenizing of uploaded delimited text.

Responsibilities:
- encoding detection + decoding to str
- delimiter detection (semicolon or comma)
- header / data row tokenization

Splitting is naive: there is no quote or escape handling, so a delimiter
inside a quoted value splits the value.
"""

from __future__ import annotations

import re
from typing import List, NamedTuple, Optional

from charset_normalizer import from_bytes

from .rules import DEFAULT_DELIMITER, SEMICOLON_DELIMITER

Row = List[Optional[str]]

_LINE_BREAK = re.compile(r"\r?\n")


class ParsedTable(NamedTuple):
    headers: List[str]
    rows: List[Row]
    delimiter: str


def decode_bytes(raw: bytes) -> tuple[str, str]:
    """
    Decode uploaded bytes to text.

    Rules:
    - Detect encoding best-effort via charset-normalizer.
    - A leading UTF-8 BOM is stripped.
    - If decode fails, fall back to UTF-8, then to the best guess with
      replacement characters so parsing can always continue.

    Returns the text and the encoding actually used.
    """
    match = from_bytes(raw).best()
    decode_used = match.encoding if match is not None else "utf-8"

    if raw.startswith(b"\xef\xbb\xbf") and (decode_used.lower().replace("-", "_") in ("utf_8", "utf8")):
        decode_used = "utf-8-sig"

    try:
        return raw.decode(decode_used), decode_used
    except (UnicodeDecodeError, LookupError):
        pass

    try:
        return raw.decode("utf-8-sig"), "utf-8-sig"
    except UnicodeDecodeError:
        # Last resort: keep going with replacement characters
        return raw.decode("utf-8", errors="replace"), "utf-8"


def detect_delimiter(line: str) -> str:
    """Semicolon if the line contains one, comma otherwise."""
    return SEMICOLON_DELIMITER if SEMICOLON_DELIMITER in line else DEFAULT_DELIMITER


def _split(line: str, delimiter: str) -> List[str]:
    return [cell.strip() for cell in line.split(delimiter)]


def parse_csv(text: str) -> ParsedTable:
    """
    Split text into a header row and data rows.

    Blank and whitespace-only lines are dropped. The first remaining line is
    the header and decides the delimiter for the whole file. Every cell is
    trimmed. Rows are not padded or truncated to the header width.

    Leading blank lines are skipped before the delimiter is chosen, so
    ``"\\na;b\\n1;2"`` splits on semicolons rather than falling back to
    comma because the literal first line is empty.

    Never raises; text without any usable line gives an empty table.
    """
    lines = [line for line in _LINE_BREAK.split(text or "") if line.strip()]
    if not lines:
        return ParsedTable(headers=[], rows=[], delimiter=DEFAULT_DELIMITER)

    delimiter = detect_delimiter(lines[0])
    headers = _split(lines[0], delimiter)
    rows: List[Row] = [_split(line, delimiter) for line in lines[1:]]

    return ParsedTable(headers=headers, rows=rows, delimiter=delimiter)
