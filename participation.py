"""
Sparse participation matrix: session -> player -> weight
"""
from __future__ import annotations
from typing import Dict

from exceptions import InvalidWeightError
from models import Participation

WEIGHT_LEVELS = (0.0, 0.5, 1.0)

# tapping a matrix cell walks through the levels in this order
_NEXT_WEIGHT = {0.0: 1.0, 1.0: 0.5, 0.5: 0.0}


def get_weight(participation: Participation, session_id: str, player_id: str) -> float:
    """Stored weight, or 0 when there is no entry"""
    return float(participation.get(session_id, {}).get(player_id, 0.0))


def set_weight(participation: Participation, session_id: str, player_id: str, weight: float) -> None:
    """Store a weight; zero removes the entry instead of storing it"""
    weight = float(weight)
    if weight not in WEIGHT_LEVELS:
        raise InvalidWeightError(f"Weight must be one of {WEIGHT_LEVELS}, got {weight}")
    if weight == 0:
        row = participation.get(session_id)
        if row is None:
            return
        row.pop(player_id, None)
        if not row:
            del participation[session_id]
        return
    participation.setdefault(session_id, {})[player_id] = weight


def cycle_weight(participation: Participation, session_id: str, player_id: str) -> float:
    """Advance 0 -> 1 -> 0.5 -> 0 and return the new weight"""
    current = get_weight(participation, session_id, player_id)
    nxt = _NEXT_WEIGHT.get(current, 0.0)
    set_weight(participation, session_id, player_id, nxt)
    return nxt


def session_weights(participation: Participation, session_id: str) -> Dict[str, float]:
    """Copy of one session's row"""
    return dict(participation.get(session_id, {}))


def drop_session(participation: Participation, session_id: str) -> None:
    participation.pop(session_id, None)


def drop_player(participation: Participation, player_id: str) -> None:
    for session_id in list(participation):
        row = participation[session_id]
        row.pop(player_id, None)
        if not row:
            del participation[session_id]
