import pytest

from csv_cleaner import session as session_module
from csv_cleaner.errors import SessionNotFoundError
from csv_cleaner.models import CleaningOptions
from csv_cleaner.parse import parse_csv
from csv_cleaner.session import CleaningSession, SessionStore


def _session(text="Name;City\nAlice;NYC\nalice;nyc\n;\nBob;LA\n"):
    return CleaningSession.from_parsed("people.csv", parse_csv(text))


def test_new_session_starts_with_original_rows():
    s = _session()
    assert s.delimiter == ";"
    assert s.current == s.original
    assert s.current is not s.original
    assert s.last_stats is None


def test_apply_always_starts_from_original():
    s = _session()
    first = s.apply(CleaningOptions())
    assert s.current == [["Alice", "NYC"], ["Bob", "LA"]]

    # turning dedup off brings the duplicate back
    second = s.apply(CleaningOptions(remove_duplicates=False))
    assert s.current == [["Alice", "NYC"], ["alice", "nyc"], ["Bob", "LA"]]
    assert second.duplicates_removed == 0

    third = s.apply(CleaningOptions())
    assert third == first
    assert len(s.original) == 4


def test_failed_apply_leaves_current_table(monkeypatch):
    s = _session()
    stats = s.apply(CleaningOptions())
    before = [list(row) for row in s.current]

    def broken(*args, **kwargs):
        raise ValueError("bad row")

    monkeypatch.setattr(session_module, "clean", broken)
    with pytest.raises(ValueError, match="bad row"):
        s.apply(CleaningOptions(standardize_case=True))

    assert s.current == before
    assert s.last_stats == stats


def test_export_uses_parse_delimiter_and_preview_caps_rows():
    s = _session()
    s.apply(CleaningOptions(standardize_case=True))
    assert s.export() == "Name;City\nalice;nyc\nbob;la"
    assert s.export_filename == "people-cleaned.csv"

    preview = s.preview(1)
    assert preview.rows == [["alice", "nyc"]]
    assert preview.total_rows == 2
    assert preview.truncated


def test_store_lifecycle():
    store = SessionStore()
    s = store.add(_session())
    assert store.get(s.session_id) is s
    assert len(store) == 1

    store.delete(s.session_id)
    assert len(store) == 0
    with pytest.raises(SessionNotFoundError):
        store.get(s.session_id)
    with pytest.raises(SessionNotFoundError):
        store.delete(s.session_id)


def test_preview_search_filters_before_cap():
    s = CleaningSession.from_parsed("people.csv", parse_csv("Name,City\nAlice,NYC\nBob,LA\nalicia,Boston\nCarl\n"))
    s.current.append(["Zed", None])

    preview = s.preview(1, search="ALI")
    assert preview.rows == [["Alice", "NYC"]]
    assert preview.total_rows == 2
    assert preview.truncated
    assert preview.search == "ALI"

    # ragged row with a single cell
    assert s.preview(10, search="carl").rows == [["Carl"]]
    # None cells never match and never raise
    assert s.preview(10, search="zed").rows == [["Zed", None]]
    assert s.preview(10, search="nowhere").total_rows == 0


def test_preview_without_search_returns_everything():
    s = _session()
    assert s.preview(100, search="").total_rows == 4
    assert s.preview(100).search is None


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_store_evicts_least_recently_used():
    store = SessionStore(max_sessions=2)
    first = store.add(_session())
    second = store.add(_session())
    store.get(first.session_id)
    third = store.add(_session())

    assert len(store) == 2
    assert store.get(first.session_id) is first
    assert store.get(third.session_id) is third
    with pytest.raises(SessionNotFoundError):
        store.get(second.session_id)


def test_store_expires_idle_sessions():
    clock = FakeClock()
    store = SessionStore(ttl_seconds=60, clock=clock)
    idle = store.add(_session())
    active = store.add(_session())

    clock.now = 50
    store.get(active.session_id)
    clock.now = 100

    assert store.get(active.session_id) is active
    with pytest.raises(SessionNotFoundError):
        store.get(idle.session_id)
    assert len(store) == 1
