"""
Fee allocation and debt settlement for VolleySplit
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Tuple

from models import Event, Payment, Session, Store, Transfer
from participation import session_weights
from utils import normalize_name

logger = logging.getLogger(__name__)

# balances closer to zero than this are treated as settled
SETTLED_EPSILON = 0.1


@dataclass
class EventSummary:
    """Per-player totals for one event"""
    charges: Dict[str, float]
    balances: Dict[str, float]
    grand_total: float


@dataclass
class LedgerRow:
    """Amount a player owes for one event, with its paid flag"""
    event_id: str
    player_name: str
    amount: float
    paid: bool


def is_settled(amount: float) -> bool:
    return abs(amount) < SETTLED_EPSILON


def allocate_session_cost(session: Session, weights: Mapping[str, float]) -> Dict[str, float]:
    """
    Split one session's cost in proportion to attendance weight.
    A session nobody attended charges everyone 0; its cost is left unallocated.
    """
    charges = {p: 0.0 for p in weights}
    total_weight = sum(w for w in weights.values() if w > 0)
    if total_weight <= 0:
        if session.cost:
            logger.debug("Session %s has no attendance, %.2f left unallocated", session.id, session.cost)
        return charges
    unit_cost = float(session.cost) / total_weight
    for p, w in weights.items():
        if w > 0:
            charges[p] = w * unit_cost
    return charges


def host_credits(sessions: Iterable[Session]) -> Dict[str, float]:
    """Credit each host with the full cost of every session they paid for"""
    credits: Dict[str, float] = {}
    for s in sessions:
        if s.host_id:
            credits[s.host_id] = credits.get(s.host_id, 0.0) + float(s.cost)
    return credits


def compute_event_charges(event: Event) -> Dict[str, float]:
    """Total allocated charge per player id across the event's sessions"""
    charges = {p.id: 0.0 for p in event.players}
    roster = set(charges)
    for s in event.sessions:
        # weights of players no longer on the roster do not count
        weights = {pid: w for pid, w in session_weights(event.participation, s.id).items() if pid in roster}
        for pid, amount in allocate_session_cost(s, weights).items():
            charges[pid] += amount
    return charges


def compute_event_balances(event: Event) -> Dict[str, float]:
    """
    Net position per player id: hosted costs minus allocated charges.
    Positive -> should receive; negative -> should pay.
    """
    balances = {pid: -charge for pid, charge in compute_event_charges(event).items()}
    for pid, credit in host_credits(event.sessions).items():
        if pid not in balances:
            logger.warning("Event %s: host %s is not on the roster, credit of %.2f ignored", event.id, pid, credit)
            continue
        balances[pid] += credit
    return balances


def event_summary(event: Event) -> EventSummary:
    charges = compute_event_charges(event)
    return EventSummary(
        charges=charges,
        balances=compute_event_balances(event),
        grand_total=sum(charges.values()),
    )


def total_paid_by_name(payments: Iterable[Payment]) -> Dict[str, float]:
    paid: Dict[str, float] = {}
    for pay in payments:
        name = normalize_name(pay.player_name)
        paid[name] = paid.get(name, 0.0) + float(pay.amount)
    return paid


def aggregate_across_events(events: Iterable[Event], payments: Iterable[Payment] = ()) -> Dict[str, float]:
    """
    Combine event balances by player name, then apply recorded payments.
    Player ids are per event, so the trimmed name is the join key; two people
    sharing a name are merged.
    """
    totals: Dict[str, float] = {}
    for event in events:
        names = {p.id: normalize_name(p.name) for p in event.players}
        for pid, balance in compute_event_balances(event).items():
            name = names[pid]
            totals[name] = totals.get(name, 0.0) + balance
    # a payment reduces what the player still owes
    for name, paid in total_paid_by_name(payments).items():
        totals[name] = totals.get(name, 0.0) + paid
    return totals


def settle_debts(balances: Mapping[str, float]) -> List[Transfer]:
    """
    Greedy settlement: largest debtor pays largest creditor until one side runs out.
    net>0 creditor; net<0 debtor. Balances within SETTLED_EPSILON of zero are ignored.
    """
    creditors = [[p, v] for p, v in balances.items() if v > SETTLED_EPSILON]
    debtors = [[p, -v] for p, v in balances.items() if v < -SETTLED_EPSILON]
    # sorted() is stable, so ties keep input order
    creditors = sorted(creditors, key=lambda x: x[1], reverse=True)
    debtors = sorted(debtors, key=lambda x: x[1], reverse=True)

    transfers: List[Transfer] = []
    i = j = 0
    while i < len(debtors) and j < len(creditors):
        debtor, creditor = debtors[i], creditors[j]
        amount = min(debtor[1], creditor[1])
        transfers.append(Transfer(debtor[0], creditor[0], amount))
        debtor[1] -= amount
        creditor[1] -= amount
        if debtor[1] < SETTLED_EPSILON:
            i += 1
        if creditor[1] < SETTLED_EPSILON:
            j += 1

    logger.debug("Settled %d debtors / %d creditors with %d transfers", len(debtors), len(creditors), len(transfers))
    return transfers


def settlement_plan(store: Store) -> Tuple[Dict[str, float], List[Transfer]]:
    """Cross-event balances by name and the transfers that clear them"""
    balances = aggregate_across_events(store.events, store.payments)
    return balances, settle_debts(balances)


def event_ledger_rows(event: Event, paid_status: Mapping[str, bool]) -> List[LedgerRow]:
    """Amount due per player for one event, skipping players with nothing to pay"""
    charges = compute_event_charges(event)
    rows = []
    for p in event.players:
        amount = charges[p.id]
        if is_settled(amount):
            continue
        rows.append(LedgerRow(
            event_id=event.id,
            player_name=p.name,
            amount=amount,
            paid=bool(paid_status.get(paid_key(event.id, p.name), False)),
        ))
    return rows


def paid_key(event_id: str, player_name: str) -> str:
    return f"{event_id}_{player_name}"


def sort_events_by_date(events: Iterable[Event]) -> List[Event]:
    """Most recent first"""
    return sorted(events, key=lambda e: e.date, reverse=True)
