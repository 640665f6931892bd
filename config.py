"""
Configuration and data loading/saving for VolleySplit
"""
from __future__ import annotations
import json
import logging
import os

from models import DEFAULT_SESSION_COST, Defaults, Event, Payment, Player, Session, Store
from utils import app_dir

logger = logging.getLogger(__name__)

STORE_FILE = "store.json"
DEFAULTS_FILE = "defaults.json"

BUILTIN_SESSION_NAMES = ["15:00 - 16:00", "16:00 - 17:00"]


def load_defaults(path: str) -> Defaults:
    """Load event template from JSON file"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return Defaults(session_names=list(BUILTIN_SESSION_NAMES))
    return dict_to_defaults(data)


def get_default_store() -> Store:
    """Create an empty store with defaults loaded from the app directory"""
    return Store(defaults=load_defaults(os.path.join(app_dir(), DEFAULTS_FILE)))


def default_store_path() -> str:
    return os.path.join(app_dir(), STORE_FILE)


def defaults_to_dict(d: Defaults) -> dict:
    return {"cost": d.cost, "playerNames": list(d.player_names), "sessionNames": list(d.session_names)}


def dict_to_defaults(d: dict) -> Defaults:
    return Defaults(
        cost=float(d.get("cost", DEFAULT_SESSION_COST)),
        player_names=list(d.get("playerNames", [])),
        session_names=list(d.get("sessionNames", BUILTIN_SESSION_NAMES)),
    )


def event_to_dict(e: Event) -> dict:
    return {
        "id": e.id,
        "eventName": e.event_name,
        "date": e.date,
        "defaultCost": e.default_cost,
        "players": [{"id": p.id, "name": p.name} for p in e.players],
        "sessions": [
            {"id": s.id, "name": s.name, "cost": s.cost, **({"hostId": s.host_id} if s.host_id else {})}
            for s in e.sessions
        ],
        "participation": {sid: dict(row) for sid, row in e.participation.items() if row},
    }


def dict_to_event(d: dict) -> Event:
    participation = {}
    for sid, row in (d.get("participation") or {}).items():
        # zero weights are never kept in memory
        row = {pid: float(w) for pid, w in row.items() if float(w) != 0}
        if row:
            participation[sid] = row
    return Event(
        id=d["id"],
        event_name=d.get("eventName", ""),
        date=d.get("date", ""),
        default_cost=float(d.get("defaultCost", DEFAULT_SESSION_COST)),
        players=[Player(id=p["id"], name=p["name"]) for p in d.get("players", [])],
        sessions=[
            Session(id=s["id"], name=s["name"], cost=float(s.get("cost", 0.0)), host_id=s.get("hostId"))
            for s in d.get("sessions", [])
        ],
        participation=participation,
    )


def store_to_dict(store: Store) -> dict:
    """Convert Store object to dictionary for JSON serialization"""
    return {
        "version": store.version,
        "events": [event_to_dict(e) for e in store.events],
        "payments": [
            {"id": p.id, "playerName": p.player_name, "amount": p.amount, "date": p.date}
            for p in store.payments
        ],
        "defaults": defaults_to_dict(store.defaults),
        "paidStatus": dict(store.paid_status),
    }


def dict_to_store(d: dict) -> Store:
    """Convert dictionary from JSON to Store object"""
    payments = [
        Payment(id=p["id"], player_name=p["playerName"], amount=float(p["amount"]), date=p.get("date", ""))
        for p in d.get("payments", [])
    ]
    return Store(
        version=d.get("version", 1),
        events=[dict_to_event(e) for e in d.get("events", [])],
        payments=payments,
        defaults=dict_to_defaults(d.get("defaults", {})),
        paid_status={k: bool(v) for k, v in d.get("paidStatus", {}).items()},
    )


def load_store(path: str) -> Store:
    """Read the store from disk; a missing file gives a fresh store"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.info("No store at %s, starting empty", path)
        return get_default_store()
    store = dict_to_store(data)
    logger.info("Loaded %d events from %s", len(store.events), path)
    return store


def save_store(store: Store, path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(store_to_dict(store), f, ensure_ascii=False, indent=2)
    logger.info("Saved %d events to %s", len(store.events), path)
