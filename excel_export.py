"""
Excel export functionality for VolleySplit
"""
from __future__ import annotations
import logging
import re
from typing import Dict, Set

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from models import Event, Store
from computations import (
    allocate_session_cost,
    compute_event_charges,
    host_credits,
    settlement_plan,
    sort_events_by_date,
    total_paid_by_name,
)
from participation import session_weights
from utils import normalize_name

logger = logging.getLogger(__name__)

_BAD_TITLE_CHARS = re.compile(r"[\[\]:*?/\\]")


def _style_header(ws, row=1):
    """Apply header styling to worksheet row"""
    header_font = Font(bold=True, color="FFFFFF")
    fill = PatternFill("solid", fgColor="4F81BD")
    align = Alignment(horizontal="center", vertical="center")
    thin = Side(style="thin", color="A0A0A0")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    for cell in ws[row]:
        cell.font = header_font
        cell.fill = fill
        cell.alignment = align
        cell.border = border


def _autosize_columns(ws, min_width=10, max_width=45):
    """Auto-size columns based on content"""
    for col in range(1, ws.max_column + 1):
        letter = get_column_letter(col)
        max_len = 0
        for cell in ws[letter]:
            if cell.value is None:
                continue
            max_len = max(max_len, len(str(cell.value)))
        ws.column_dimensions[letter].width = max(min_width, min(max_width, max_len + 2))


def _sheet_title(event: Event, used: Set[str]) -> str:
    """Excel titles: max 31 chars, no []:*?/\\ and unique per workbook"""
    base = _BAD_TITLE_CHARS.sub("-", f"{event.date} {event.event_name}").strip()[:31] or "Event"
    title, n = base, 2
    while title.lower() in used:
        suffix = f" ({n})"
        title = base[:31 - len(suffix)] + suffix
        n += 1
    used.add(title.lower())
    return title


def _write_event_sheet(wb: Workbook, event: Event, title: str) -> None:
    """Matrix of weights per session, followed by each player's charge"""
    ws = wb.create_sheet(title)
    players = event.players
    names = {p.id: p.name for p in players}
    headers = ["session", "cost", "host"] + [p.name for p in players] + [f"{p.name} due" for p in players]
    ws.append(headers)
    _style_header(ws, 1)
    ws.freeze_panes = "D2"

    roster = set(names)
    for s in event.sessions:
        weights = {pid: w for pid, w in session_weights(event.participation, s.id).items() if pid in roster}
        charges = allocate_session_cost(s, weights)
        row = [s.name, s.cost, names.get(s.host_id, "")]
        row += [weights.get(p.id) for p in players]
        row += [charges.get(p.id, 0.0) for p in players]
        ws.append(row)

    if event.sessions:
        ws.append(["TOTALS"] + [""] * (len(headers) - 1))
        trow = ws.max_row
        ws.cell(trow, 1).font = Font(bold=True)
        ws.cell(trow, 2).value = f"=SUM(B2:B{trow - 1})"
        start_col = 4 + len(players)  # first due column
        for i in range(len(players)):
            letter = get_column_letter(start_col + i)
            ws.cell(trow, start_col + i).value = f"=SUM({letter}2:{letter}{trow - 1})"

    for r in range(2, ws.max_row + 1):
        ws.cell(r, 2).number_format = "0.0"
        for c in range(4 + len(players), 4 + 2 * len(players)):
            ws.cell(r, c).number_format = "0.0"
    _autosize_columns(ws)


def _name_totals(store: Store) -> Dict[str, Dict[str, float]]:
    """charged / hosted per player name across all events"""
    out: Dict[str, Dict[str, float]] = {}
    for event in store.events:
        names = {p.id: normalize_name(p.name) for p in event.players}
        for pid, charge in compute_event_charges(event).items():
            out.setdefault(names[pid], {"charged": 0.0, "hosted": 0.0})["charged"] += charge
        for pid, credit in host_credits(event.sessions).items():
            if pid in names:
                out.setdefault(names[pid], {"charged": 0.0, "hosted": 0.0})["hosted"] += credit
    return out


def export_excel(store: Store, filepath: str) -> None:
    """
    Export store to Excel file with multiple sheets:
    - One matrix sheet per event (most recent first)
    - Summary sheet
    - Transfers sheet
    """
    wb = Workbook()
    # remove default sheet
    wb.remove(wb.active)

    used: Set[str] = {"summary", "transfers"}
    for event in sort_events_by_date(store.events):
        _write_event_sheet(wb, event, _sheet_title(event, used))

    # Summary sheet
    balances, transfers = settlement_plan(store)
    totals = _name_totals(store)
    paid = total_paid_by_name(store.payments)
    ws = wb.create_sheet("Summary")
    ws.append(["Player", "Charged", "Hosted", "Paid", "Balance"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for name in sorted(balances):
        t = totals.get(name, {"charged": 0.0, "hosted": 0.0})
        ws.append([name, t["charged"], t["hosted"], paid.get(name, 0.0), balances[name]])
    for r in range(2, ws.max_row + 1):
        for c in range(2, 6):
            ws.cell(r, c).number_format = "0.0"
    _autosize_columns(ws)

    # Transfers sheet
    ws = wb.create_sheet("Transfers")
    ws.append(["From (Debtor)", "To (Creditor)", "Amount"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for t in transfers:
        ws.append([t.debtor, t.creditor, t.amount])
    for r in range(2, ws.max_row + 1):
        ws.cell(r, 3).number_format = "0.0"
    _autosize_columns(ws)

    wb.save(filepath)
    logger.info("Exported %d events to %s", len(store.events), filepath)
