"""
Event, roster and session operations for VolleySplit
"""
from __future__ import annotations
import logging
from typing import List, Optional

from computations import paid_key
from exceptions import (
    DuplicatePlayerError,
    UnknownEventError,
    UnknownPlayerError,
    UnknownSessionError,
    ValidationError,
)
from models import DEFAULT_SESSION_COST, Defaults, Event, Payment, Player, Session, Store
from participation import cycle_weight, drop_player, drop_session, set_weight
from utils import generate_id, today_str

logger = logging.getLogger(__name__)


def _require_name(name: str, what: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError(f"{what} name required.")
    return name


def create_event(store: Store, name: str, date: Optional[str] = None, copy_roster: bool = False) -> Event:
    """
    Create an event from the store defaults and put it first in the list.
    With copy_roster, players are copied (with fresh ids) from the most recent event.
    """
    name = _require_name(name, "Event")
    defaults = store.defaults
    sessions = [Session(id=generate_id(), name=n, cost=float(defaults.cost)) for n in defaults.session_names]
    if not sessions:
        sessions = [Session(id=generate_id(), name="Session 1", cost=float(defaults.cost))]

    if copy_roster and store.events:
        names = [p.name for p in store.events[0].players]
    else:
        names = list(defaults.player_names)

    event = Event(
        id=generate_id(),
        event_name=name,
        date=date or today_str(),
        default_cost=float(defaults.cost),
        players=[Player(id=generate_id(), name=n) for n in names],
        sessions=sessions,
    )
    store.events.insert(0, event)
    logger.info("Created event %s (%s) with %d players", event.id, name, len(event.players))
    return event


def find_event(store: Store, event_id: str) -> Event:
    for e in store.events:
        if e.id == event_id:
            return e
    raise UnknownEventError(f"No event with id {event_id!r}")


def delete_event(store: Store, event_id: str) -> None:
    event = find_event(store, event_id)
    store.events.remove(event)
    prefix = f"{event_id}_"
    store.paid_status = {k: v for k, v in store.paid_status.items() if not k.startswith(prefix)}
    logger.info("Deleted event %s", event_id)


def add_player(event: Event, name: str) -> Player:
    name = _require_name(name, "Player")
    if any(p.name.lower() == name.lower() for p in event.players):
        raise DuplicatePlayerError(f"Player {name!r} already exists.")
    player = Player(id=generate_id(), name=name)
    event.players.append(player)
    logger.info("Event %s: added player %s", event.id, name)
    return player


def remove_player(event: Event, player_id: str) -> None:
    """Remove a player with their weights; sessions they hosted lose their host"""
    player = event.player_by_id(player_id)
    if player is None:
        raise UnknownPlayerError(f"No player with id {player_id!r}")
    event.players.remove(player)
    drop_player(event.participation, player_id)
    for s in event.sessions:
        if s.host_id == player_id:
            s.host_id = None
            logger.info("Event %s: session %s no longer has a host", event.id, s.name)
    logger.info("Event %s: removed player %s", event.id, player.name)


def add_session(event: Event, name: str, cost: Optional[float] = None) -> Session:
    name = _require_name(name, "Session")
    if cost is None:
        cost = event.default_cost or DEFAULT_SESSION_COST
    if cost < 0:
        raise ValidationError("Cost must be non-negative.")
    session = Session(id=generate_id(), name=name, cost=float(cost))
    event.sessions.append(session)
    logger.info("Event %s: added session %s (%.2f)", event.id, name, session.cost)
    return session


def _require_session(event: Event, session_id: str) -> Session:
    session = event.session_by_id(session_id)
    if session is None:
        raise UnknownSessionError(f"No session with id {session_id!r}")
    return session


def remove_session(event: Event, session_id: str) -> None:
    session = _require_session(event, session_id)
    event.sessions.remove(session)
    drop_session(event.participation, session_id)
    logger.info("Event %s: removed session %s", event.id, session.name)


def set_session_cost(event: Event, session_id: str, cost: float) -> None:
    session = _require_session(event, session_id)
    if cost < 0:
        raise ValidationError("Cost must be non-negative.")
    session.cost = float(cost)


def set_host(event: Event, session_id: str, player_id: Optional[str]) -> None:
    """Mark who advanced the session cost; None clears the host"""
    session = _require_session(event, session_id)
    if player_id is not None and event.player_by_id(player_id) is None:
        raise UnknownPlayerError(f"No player with id {player_id!r}")
    session.host_id = player_id


def toggle_paid(store: Store, event_id: str, player_name: str) -> bool:
    key = paid_key(event_id, player_name)
    store.paid_status[key] = not store.paid_status.get(key, False)
    return store.paid_status[key]


def record_payment(store: Store, player_name: str, amount: float, date: Optional[str] = None) -> Payment:
    player_name = _require_name(player_name, "Player")
    if amount <= 0:
        raise ValidationError("Payment amount must be positive.")
    payment = Payment(id=generate_id(), player_name=player_name, amount=float(amount), date=date or today_str())
    store.payments.append(payment)
    logger.info("Recorded payment of %.2f from %s", payment.amount, player_name)
    return payment


def find_player(event: Event, key: str) -> Player:
    """Look a player up by id, then by case-insensitive name"""
    player = event.player_by_id(key)
    if player is not None:
        return player
    for p in event.players:
        if p.name.lower() == key.strip().lower():
            return p
    raise UnknownPlayerError(f"No player {key!r} in event {event.id}")


def find_session(event: Event, key: str) -> Session:
    """Look a session up by id, then by name"""
    session = event.session_by_id(key)
    if session is not None:
        return session
    for s in event.sessions:
        if s.name == key.strip():
            return s
    raise UnknownSessionError(f"No session {key!r} in event {event.id}")


def set_player_weight(event: Event, session_id: str, player_id: str, weight: float) -> None:
    _require_session(event, session_id)
    if event.player_by_id(player_id) is None:
        raise UnknownPlayerError(f"No player with id {player_id!r}")
    set_weight(event.participation, session_id, player_id, weight)


def tap_weight(event: Event, session_id: str, player_id: str) -> float:
    """Matrix tap: 0 -> 1 -> 0.5 -> 0"""
    _require_session(event, session_id)
    if event.player_by_id(player_id) is None:
        raise UnknownPlayerError(f"No player with id {player_id!r}")
    return cycle_weight(event.participation, session_id, player_id)


def set_defaults(
    store: Store,
    cost: Optional[float] = None,
    player_names: Optional[List[str]] = None,
    session_names: Optional[List[str]] = None,
) -> Defaults:
    """Update the template used by create_event; None leaves a field as is"""
    defaults = store.defaults
    if cost is not None:
        if cost < 0:
            raise ValidationError("Cost must be non-negative.")
        defaults.cost = float(cost)
    if player_names is not None:
        names: List[str] = []
        for n in (n.strip() for n in player_names):
            if n and n.lower() not in {m.lower() for m in names}:
                names.append(n)
        defaults.player_names = names
    if session_names is not None:
        defaults.session_names = [n.strip() for n in session_names if n.strip()]
    logger.info("Defaults: cost %.2f, %d players, %d sessions",
                defaults.cost, len(defaults.player_names), len(defaults.session_names))
    return defaults
