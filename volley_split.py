"""
VolleySplit command line
- Split each session's court fee between the players who attended, by weight.
- Net out what session hosts already paid and print who should pay whom.

Run:
  volley-split new-event "Sunday game" --copy-roster
  volley-split weight EVENT_ID "15:00 - 16:00" Alice 0.5
  volley-split host EVENT_ID "15:00 - 16:00" Alice
  volley-split summary
  volley-split settle
  volley-split export-excel report.xlsx

Players and sessions can be given by id or by name.

Dependencies:
  pip install openpyxl
"""
from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional

from computations import event_ledger_rows, event_summary, settlement_plan, sort_events_by_date
from config import default_store_path, load_store, save_store
from csv_handler import export_participation_csv, import_participation_csv
from excel_export import export_excel
from exceptions import LedgerError
from models import Event, Store
from participation import WEIGHT_LEVELS
from roster import (
    add_player,
    add_session,
    create_event,
    delete_event,
    find_event,
    find_player,
    find_session,
    record_payment,
    remove_player,
    remove_session,
    set_defaults,
    set_host,
    set_player_weight,
    set_session_cost,
    tap_weight,
    toggle_paid,
)
from utils import fmt_money

logger = logging.getLogger(__name__)


def _print_event(store: Store, event: Event) -> None:
    summary = event_summary(event)
    print(f"{event.date}  {event.event_name}  total {fmt_money(summary.grand_total)}")
    rows = {r.player_name: r for r in event_ledger_rows(event, store.paid_status)}
    for p in event.players:
        row = rows.get(p.name)
        if row is None:
            continue
        status = "paid" if row.paid else "due"
        print(f"  {p.name:<20} {fmt_money(row.amount):>10}  {status:<4}  net {fmt_money(summary.balances[p.id])}")


def cmd_events(store: Store, args) -> int:
    events = sort_events_by_date(store.events)
    if not events:
        print("No events.")
    for e in events:
        print(f"{e.id}  {e.date}  {e.event_name}  ({len(e.players)} players, {len(e.sessions)} sessions)")
    return 0


def cmd_summary(store: Store, args) -> int:
    if args.event_id:
        _print_event(store, find_event(store, args.event_id))
        return 0
    events = sort_events_by_date(store.events)
    if not events:
        print("No events.")
    for e in events:
        _print_event(store, e)
    return 0


def cmd_settle(store: Store, args) -> int:
    balances, transfers = settlement_plan(store)
    print("Balances:")
    for name in sorted(balances):
        print(f"  {name:<20} {fmt_money(balances[name]):>10}")
    print("Transfers:")
    if not transfers:
        print("  none")
    for t in transfers:
        print(f"  {t.debtor} -> {t.creditor}: {fmt_money(t.amount)}")
    return 0


def cmd_new_event(store: Store, args) -> int:
    event = create_event(store, args.name, args.date, copy_roster=args.copy_roster)
    print(event.id)
    return 0


def cmd_delete_event(store: Store, args) -> int:
    delete_event(store, args.event_id)
    return 0


def cmd_add_player(store: Store, args) -> int:
    player = add_player(find_event(store, args.event_id), args.name)
    print(player.id)
    return 0


def cmd_remove_player(store: Store, args) -> int:
    event = find_event(store, args.event_id)
    remove_player(event, find_player(event, args.player).id)
    return 0


def cmd_add_session(store: Store, args) -> int:
    session = add_session(find_event(store, args.event_id), args.name, args.cost)
    print(session.id)
    return 0


def cmd_remove_session(store: Store, args) -> int:
    event = find_event(store, args.event_id)
    remove_session(event, find_session(event, args.session).id)
    return 0


def cmd_cost(store: Store, args) -> int:
    event = find_event(store, args.event_id)
    set_session_cost(event, find_session(event, args.session).id, args.cost)
    return 0


def cmd_weight(store: Store, args) -> int:
    event = find_event(store, args.event_id)
    set_player_weight(event, find_session(event, args.session).id, find_player(event, args.player).id, args.weight)
    return 0


def cmd_tap(store: Store, args) -> int:
    event = find_event(store, args.event_id)
    weight = tap_weight(event, find_session(event, args.session).id, find_player(event, args.player).id)
    print(f"{weight:g}")
    return 0


def cmd_host(store: Store, args) -> int:
    event = find_event(store, args.event_id)
    player_id = find_player(event, args.player).id if args.player else None
    set_host(event, find_session(event, args.session).id, player_id)
    return 0


def cmd_pay(store: Store, args) -> int:
    record_payment(store, args.name, args.amount, args.date)
    return 0


def cmd_toggle_paid(store: Store, args) -> int:
    event = find_event(store, args.event_id)
    paid = toggle_paid(store, event.id, find_player(event, args.player).name)
    print("paid" if paid else "due")
    return 0


def cmd_defaults(store: Store, args) -> int:
    d = set_defaults(store, args.cost, args.players, args.sessions)
    print(f"cost: {fmt_money(d.cost)}")
    print(f"players: {', '.join(d.player_names)}")
    print(f"sessions: {', '.join(d.session_names)}")
    return 0


def cmd_export_excel(store: Store, args) -> int:
    export_excel(store, args.path)
    print(f"Exported: {args.path}")
    return 0


def cmd_export_csv(store: Store, args) -> int:
    export_participation_csv(find_event(store, args.event_id), args.path)
    print(f"Exported: {args.path}")
    return 0


def cmd_import_csv(store: Store, args) -> int:
    n = import_participation_csv(find_event(store, args.event_id), args.path)
    print(f"Imported {n} sessions.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="volley-split", description="Court fee splitting ledger")
    ap.add_argument("--store", default=None, help="Store JSON (default: app directory)")
    ap.add_argument("-v", "--verbose", action="count", default=0, help="-v info, -vv debug")
    sub = ap.add_subparsers(dest="command", required=True)

    def command(name, func, help_text, saves=False):
        p = sub.add_parser(name, help=help_text)
        p.set_defaults(func=func, saves=saves)
        return p

    command("events", cmd_events, "List events with their ids")

    p = command("summary", cmd_summary, "Per-event fees")
    p.add_argument("event_id", nargs="?")

    command("settle", cmd_settle, "Balances and transfers across all events")

    p = command("new-event", cmd_new_event, "Create an event from the defaults", saves=True)
    p.add_argument("name")
    p.add_argument("--date", default=None, help="YYYY-MM-DD (default: today)")
    p.add_argument("--copy-roster", action="store_true", help="Reuse the players of the latest event")

    p = command("delete-event", cmd_delete_event, "Delete an event", saves=True)
    p.add_argument("event_id")

    p = command("add-player", cmd_add_player, "Add a player to an event", saves=True)
    p.add_argument("event_id")
    p.add_argument("name")

    p = command("remove-player", cmd_remove_player, "Remove a player and their weights", saves=True)
    p.add_argument("event_id")
    p.add_argument("player")

    p = command("add-session", cmd_add_session, "Add a session to an event", saves=True)
    p.add_argument("event_id")
    p.add_argument("name")
    p.add_argument("--cost", type=float, default=None)

    p = command("remove-session", cmd_remove_session, "Remove a session and its weights", saves=True)
    p.add_argument("event_id")
    p.add_argument("session")

    p = command("cost", cmd_cost, "Set a session's cost", saves=True)
    p.add_argument("event_id")
    p.add_argument("session")
    p.add_argument("cost", type=float)

    p = command("weight", cmd_weight, "Set a player's weight in a session", saves=True)
    p.add_argument("event_id")
    p.add_argument("session")
    p.add_argument("player")
    p.add_argument("weight", type=float, choices=WEIGHT_LEVELS)

    p = command("tap", cmd_tap, "Cycle a weight 0 -> 1 -> 0.5 -> 0", saves=True)
    p.add_argument("event_id")
    p.add_argument("session")
    p.add_argument("player")

    p = command("host", cmd_host, "Set who paid for a session (omit player to clear)", saves=True)
    p.add_argument("event_id")
    p.add_argument("session")
    p.add_argument("player", nargs="?")

    p = command("pay", cmd_pay, "Record a payment by player name", saves=True)
    p.add_argument("name")
    p.add_argument("amount", type=float)
    p.add_argument("--date", default=None)

    p = command("toggle-paid", cmd_toggle_paid, "Flip a player's paid mark for an event", saves=True)
    p.add_argument("event_id")
    p.add_argument("player")

    p = command("defaults", cmd_defaults, "Show or change the new-event template", saves=True)
    p.add_argument("--cost", type=float, default=None)
    p.add_argument("--players", nargs="*", default=None)
    p.add_argument("--sessions", nargs="*", default=None)

    p = command("export-excel", cmd_export_excel, "Write an Excel report")
    p.add_argument("path")

    p = command("export-csv", cmd_export_csv, "Write one event's matrix as CSV")
    p.add_argument("event_id")
    p.add_argument("path")

    p = command("import-csv", cmd_import_csv, "Apply a matrix CSV to an event", saves=True)
    p.add_argument("event_id")
    p.add_argument("path")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application"""
    args = build_parser().parse_args(argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    args.store = args.store or default_store_path()
    try:
        store = load_store(args.store)
        status = args.func(store, args)
        if args.saves and status == 0:
            save_store(store, args.store)
        return status
    except (LedgerError, OSError, ValueError) as ex:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {ex}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
