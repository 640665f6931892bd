"""
CSV export and import of an event's participation matrix
"""
from __future__ import annotations
import csv
import logging

from exceptions import InvalidWeightError, ValidationError
from models import Event
from participation import WEIGHT_LEVELS, get_weight, set_weight
from utils import safe_float

logger = logging.getLogger(__name__)

FIXED_COLUMNS = ["session", "cost", "host"]


def _weight_cell(weight: float) -> str:
    if weight == 0:
        return ""
    return "1" if weight == 1 else str(weight)


def export_participation_csv(event: Event, filepath: str) -> None:
    """
    Export one event's matrix to CSV file
    CSV columns: session, cost, host, <one column per player name>
    """
    names = {p.id: p.name for p in event.players}
    with open(filepath, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(FIXED_COLUMNS + [p.name for p in event.players])
        for s in event.sessions:
            writer.writerow(
                [s.name, s.cost, names.get(s.host_id, "")]
                + [_weight_cell(get_weight(event.participation, s.id, p.id)) for p in event.players]
            )


def _parse_weight(raw: str, player_name: str, session_name: str) -> float:
    raw = raw.strip()
    try:
        weight = float(raw) if raw else 0.0
    except ValueError:
        raise InvalidWeightError(f"Bad weight {raw!r} for {player_name} in {session_name}") from None
    if weight not in WEIGHT_LEVELS:
        raise InvalidWeightError(f"Weight for {player_name} in {session_name} must be one of {WEIGHT_LEVELS}, got {weight}")
    return weight


def import_participation_csv(event: Event, filepath: str) -> int:
    """
    Apply a matrix CSV to an event, matching sessions and players by name.
    Weights, costs and hosts of matched sessions are replaced; unknown names are skipped.
    The whole file is validated before the event is touched.
    Returns the number of sessions updated.
    """
    sessions = {s.name: s for s in event.sessions}
    players = {p.name: p for p in event.players}
    staged = []  # (session, cost, host_id, {player_id: weight})

    # utf-8-sig drops the BOM spreadsheet tools put in front of the header
    with open(filepath, 'r', newline='', encoding='utf-8-sig') as f:
        reader = csv.reader(f)
        header = next(reader, None)
        if header is None:
            raise ValidationError(f"{filepath} is empty.")
        if [h.strip().lower() for h in header[:len(FIXED_COLUMNS)]] != FIXED_COLUMNS:
            raise ValidationError(f"CSV header must start with {', '.join(FIXED_COLUMNS)}.")

        # player columns are positional, so a player called "host" cannot shadow a fixed column
        player_columns = []
        for idx, col in enumerate(header[len(FIXED_COLUMNS):], start=len(FIXED_COLUMNS)):
            player = players.get(col.strip())
            if player is None:
                logger.warning("Event %s: CSV column %r is not on the roster, skipped", event.id, col)
                continue
            player_columns.append((idx, player))

        for row in reader:
            if not any(cell.strip() for cell in row):
                continue
            row = row + [""] * (len(header) - len(row))
            session = sessions.get(row[0].strip())
            if session is None:
                logger.warning("Event %s: CSV session %r not found, skipped", event.id, row[0])
                continue

            cost = safe_float(row[1], session.cost)
            if cost < 0:
                raise ValidationError(f"Negative cost {cost} for {session.name}.")
            host_name = row[2].strip()
            host = players.get(host_name)
            if host_name and host is None:
                logger.warning("Event %s: CSV host %r not on the roster, host cleared", event.id, host_name)

            weights = {
                player.id: _parse_weight(row[idx], player.name, session.name)
                for idx, player in player_columns
            }
            staged.append((session, cost, host.id if host else None, weights))

    for session, cost, host_id, weights in staged:
        session.cost = cost
        session.host_id = host_id
        for player_id, weight in weights.items():
            set_weight(event.participation, session.id, player_id, weight)

    logger.info("Event %s: imported %d sessions from %s", event.id, len(staged), filepath)
    return len(staged)
