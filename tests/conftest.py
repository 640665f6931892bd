import pytest

from models import Defaults, Event, Player, Session, Store


def make_event(event_id, players, sessions, participation=None, date="2026-10-01"):
    """Build an event from (id, name) and (id, cost, host_id) tuples."""
    return Event(
        id=event_id,
        event_name=f"Game {event_id}",
        date=date,
        players=[Player(id=pid, name=name) for pid, name in players],
        sessions=[Session(id=sid, name=sid, cost=cost, host_id=host) for sid, cost, host in sessions],
        participation=participation or {},
    )


@pytest.fixture
def event_factory():
    """Return the event builder."""
    return make_event


@pytest.fixture
def hosted_event():
    """One 300 session hosted by Alice, everyone at full weight."""
    return make_event(
        "e1",
        [("a", "Alice"), ("b", "Bob"), ("c", "Carol")],
        [("s1", 300.0, "a")],
        {"s1": {"a": 1.0, "b": 1.0, "c": 1.0}},
    )


@pytest.fixture
def two_session_event():
    """Two sessions with different hosts and a half-weight player."""
    return make_event(
        "e2",
        [("a", "Alice"), ("b", "Bob"), ("c", "Carol"), ("d", "Dan")],
        [("s1", 200.0, "a"), ("s2", 200.0, "b")],
        {
            "s1": {"a": 1.0, "b": 1.0, "c": 0.5, "d": 1.0},
            "s2": {"b": 1.0, "c": 1.0, "d": 0.5},
        },
    )


@pytest.fixture
def store():
    """Empty store with a small template."""
    return Store(defaults=Defaults(
        cost=200.0,
        player_names=["Alice", "Bob", "Carol"],
        session_names=["15:00 - 16:00", "16:00 - 17:00"],
    ))


@pytest.fixture
def home_dir(tmp_path, monkeypatch):
    """Point the app directory at a temp folder."""
    monkeypatch.setenv("VOLLEYSPLIT_HOME", str(tmp_path / "home"))
    return tmp_path / "home"
