"""
In-memory cleaning sessions.

A session holds one uploaded table twice: ``original`` is never changed and
every cleaning run starts from it; ``current`` is replaced by each successful
run and is what gets previewed and exported.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from .errors import SessionNotFoundError
from .export import cleaned_filename, serialize_csv
from .models import CleaningOptions, CleaningStats, TablePreview
from .parse import ParsedTable, Row
from .pipeline import clean

logger = logging.getLogger(__name__)


@dataclass
class CleaningSession:
    file_name: str
    headers: List[str]
    original: List[Row]
    delimiter: str
    encoding: str = "utf-8"
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    current: List[Row] = field(default_factory=list)
    last_stats: Optional[CleaningStats] = None

    def __post_init__(self):
        self.original = [list(row) for row in self.original]
        if not self.current:
            self.current = [list(row) for row in self.original]

    @classmethod
    def from_parsed(cls, file_name: str, parsed: ParsedTable, encoding: str = "utf-8") -> "CleaningSession":
        return cls(
            file_name=file_name,
            headers=parsed.headers,
            original=parsed.rows,
            delimiter=parsed.delimiter,
            encoding=encoding,
        )

    def apply(self, options: Optional[CleaningOptions] = None) -> CleaningStats:
        """
        Re-run cleaning on the original table.

        ``current`` and ``last_stats`` only change when the whole run
        succeeds; a failing transform leaves them as they were.
        """
        options = options or CleaningOptions()
        try:
            cleaned, stats = clean(self.original, self.headers, options)
        except Exception:
            logger.exception(f"Cleaning failed for session {self.session_id}")
            raise

        self.current = cleaned
        self.last_stats = stats
        logger.info(
            f"Session {self.session_id}: {stats.duplicates_removed} duplicates and "
            f"{stats.empty_rows_removed} empty rows removed, {stats.rows_after} rows after cleaning"
        )
        return stats

    def preview(self, limit: int, search: Optional[str] = None) -> TablePreview:
        """
        First ``limit`` rows of the current table.

        With ``search``, only rows with a cell containing the term (ignoring
        case) are kept before the cap, and ``total_rows`` counts those.
        """
        rows = self.current
        if search:
            term = search.lower()
            rows = [row for row in rows if any(cell is not None and term in cell.lower() for cell in row)]

        return TablePreview(
            headers=self.headers,
            rows=rows[:limit],
            total_rows=len(rows),
            truncated=len(rows) > limit,
            search=search or None,
        )

    def export(self) -> str:
        return serialize_csv(self.current, self.headers, self.delimiter)

    @property
    def export_filename(self) -> str:
        return cleaned_filename(self.file_name)


class SessionStore:
    """
    Thread-safe, bounded map of session id to session.

    Past ``max_sessions`` the least recently used session is dropped, and a
    session not touched for ``ttl_seconds`` expires.

    Usage:
        store = SessionStore(max_sessions=32, ttl_seconds=3600)
        session = store.add(CleaningSession.from_parsed("data.csv", parse_csv(text)))
        store.get(session.session_id).apply(CleaningOptions())
        store.delete(session.session_id)
    """

    def __init__(
        self,
        max_sessions: Optional[int] = None,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_sessions = max_sessions
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._sessions: "OrderedDict[str, CleaningSession]" = OrderedDict()
        self._last_used: Dict[str, float] = {}
        self._lock = threading.Lock()

    def _discard(self, session_id: str, reason: str) -> None:
        self._sessions.pop(session_id, None)
        self._last_used.pop(session_id, None)
        logger.info(f"Session {session_id} {reason}")

    def _expire(self, now: float) -> None:
        if self.ttl_seconds is None:
            return
        stale = [sid for sid, used in self._last_used.items() if now - used > self.ttl_seconds]
        for sid in stale:
            self._discard(sid, "expired")

    def add(self, session: CleaningSession) -> CleaningSession:
        with self._lock:
            now = self._clock()
            self._expire(now)
            self._sessions[session.session_id] = session
            self._last_used[session.session_id] = now
            if self.max_sessions is not None:
                while len(self._sessions) > self.max_sessions:
                    oldest = next(iter(self._sessions))
                    self._discard(oldest, "evicted")
        logger.info(f"Session {session.session_id} created for {session.file_name} ({len(session.original)} rows)")
        return session

    def get(self, session_id: str) -> CleaningSession:
        with self._lock:
            now = self._clock()
            self._expire(now)
            session = self._sessions.get(session_id)
            if session is not None:
                self._sessions.move_to_end(session_id)
                self._last_used[session_id] = now
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def delete(self, session_id: str) -> None:
        with self._lock:
            if session_id not in self._sessions:
                raise SessionNotFoundError(session_id)
            self._discard(session_id, "discarded")

    def __len__(self) -> int:
        with self._lock:
            self._expire(self._clock())
            return len(self._sessions)
