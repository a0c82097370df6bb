from datetime import datetime, timedelta, timezone

from auranode.models import PanelUser
from auranode.sessions import Session, SessionStore


USER = PanelUser(id=7, email="alex@example.com", username="alex")


def test_set_get_destroy():
    store = SessionStore()
    session_id = store.new_session_id()

    store.set(session_id, USER)
    assert store.get(session_id) == USER

    store.destroy(session_id)
    assert store.get(session_id) is None


def test_destroy_unknown_session_is_noop():
    store = SessionStore()
    store.destroy("missing")
    store.destroy(None)


def test_session_ids_are_unique():
    store = SessionStore()
    assert store.new_session_id() != store.new_session_id()


def test_load_returns_explicit_session():
    store = SessionStore()
    store.set("abc", USER)

    assert store.load("abc") == Session(session_id="abc", user=USER)
    assert store.load("other") is None
    assert store.load(None) is None


def test_expired_sessions_read_as_absent(monkeypatch):
    store = SessionStore(ttl=timedelta(minutes=5))
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    monkeypatch.setattr(store, "_now", lambda: start)
    store.set("abc", USER)

    monkeypatch.setattr(store, "_now", lambda: start + timedelta(minutes=4))
    assert store.get("abc") == USER

    # Access slides the expiry forward.
    monkeypatch.setattr(store, "_now", lambda: start + timedelta(minutes=8))
    assert store.get("abc") == USER

    monkeypatch.setattr(store, "_now", lambda: start + timedelta(minutes=14))
    assert store.get("abc") is None


def test_cookie_max_age_matches_ttl():
    assert SessionStore(ttl=timedelta(hours=2)).cookie_max_age == 7200


def test_set_purges_expired_sessions(monkeypatch):
    store = SessionStore(ttl=timedelta(minutes=5))
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    monkeypatch.setattr(store, "_now", lambda: start)
    store.set("first", USER)
    store.set("second", USER)

    monkeypatch.setattr(store, "_now", lambda: start + timedelta(minutes=6))
    store.set("third", USER)

    assert list(store._sessions) == ["third"]
