"""
Data models for VolleySplit
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional

# session_id -> {player_id: weight}; only nonzero weights are stored
Participation = Dict[str, Dict[str, float]]

DEFAULT_SESSION_COST = 200.0


@dataclass
class Player:
    """Roster entry, scoped to one event"""
    id: str
    name: str


@dataclass
class Session:
    """Time slot with a fixed court cost"""
    id: str
    name: str
    cost: float
    host_id: Optional[str] = None  # player who advanced the cost


@dataclass
class Event:
    """One match day: roster, sessions and who played what"""
    id: str
    event_name: str
    date: str  # YYYY-MM-DD
    default_cost: float = DEFAULT_SESSION_COST
    players: List[Player] = field(default_factory=list)
    sessions: List[Session] = field(default_factory=list)
    participation: Participation = field(default_factory=dict)

    def player_by_id(self, player_id: str) -> Optional[Player]:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def session_by_id(self, session_id: str) -> Optional[Session]:
        for s in self.sessions:
            if s.id == session_id:
                return s
        return None


@dataclass
class Payment:
    """Settlement recorded outside the ledger, linked by player name"""
    id: str
    player_name: str
    amount: float
    date: str


@dataclass(frozen=True)
class Transfer:
    """Debtor pays creditor"""
    debtor: str
    creditor: str
    amount: float

    def to_dict(self) -> dict:
        return {"from": self.debtor, "to": self.creditor, "amount": self.amount}


@dataclass
class Defaults:
    """Template applied to newly created events"""
    cost: float = DEFAULT_SESSION_COST
    player_names: List[str] = field(default_factory=list)
    session_names: List[str] = field(default_factory=list)


@dataclass
class Store:
    """Complete persisted state"""
    events: List[Event] = field(default_factory=list)
    payments: List[Payment] = field(default_factory=list)
    defaults: Defaults = field(default_factory=Defaults)
    paid_status: Dict[str, bool] = field(default_factory=dict)  # "<event_id>_<player_name>" -> paid
    version: int = 1
