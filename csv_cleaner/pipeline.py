"""
Cleaning pipeline.

Transforms run in a fixed order whatever order the options were toggled in:

    remove_empty_rows -> remove_duplicates -> trim_whitespace -> standardize_case

Duplicate detection normalizes cells internally, so trimmed and untrimmed
copies of a row are still caught even though trimming runs afterwards.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .models import CleaningOptions, CleaningStats
from .parse import Row
from .transforms import remove_duplicates, remove_empty_rows, standardize_case, trim_whitespace

logger = logging.getLogger(__name__)


def clean(
    rows: List[Row],
    headers: List[str],
    options: Optional[CleaningOptions] = None,
) -> Tuple[List[Row], CleaningStats]:
    """
    Apply the enabled transforms to ``rows`` and collect their counts.

    ``rows`` is left untouched; skipped transforms report zero. Any exception
    raised by a transform propagates as is.
    """
    options = options or CleaningOptions()
    stats = CleaningStats(rows_before=len(rows))
    cleaned = list(rows)

    if options.remove_empty_rows:
        cleaned, stats.empty_rows_removed = remove_empty_rows(cleaned)

    if options.remove_duplicates:
        cleaned, stats.duplicates_removed = remove_duplicates(cleaned)

    if options.trim_whitespace:
        cleaned, stats.whitespace_fixed = trim_whitespace(cleaned)

    if options.standardize_case:
        cleaned = standardize_case(cleaned, headers)

    stats.rows_after = len(cleaned)
    logger.debug(f"Cleaned {stats.rows_before} -> {stats.rows_after} rows: {stats.model_dump()}")
    return cleaned, stats
