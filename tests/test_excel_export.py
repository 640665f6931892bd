import pytest
from openpyxl import load_workbook

from excel_export import export_excel
from models import Payment, Store


@pytest.fixture
def workbook(tmp_path, hosted_event, two_session_event):
    hosted_event.date = "2026-09-01"
    store = Store(events=[hosted_event, two_session_event], payments=[Payment("p1", "Carol", 10.0, "")])
    path = str(tmp_path / "report.xlsx")
    export_excel(store, path)
    return load_workbook(path)


def test_sheets(workbook):
    assert workbook.sheetnames == ["2026-10-01 Game e2", "2026-09-01 Game e1", "Summary", "Transfers"]


def test_event_sheet(workbook):
    ws = workbook["2026-09-01 Game e1"]
    header = [c.value for c in ws[1]]
    assert header == ["session", "cost", "host", "Alice", "Bob", "Carol", "Alice due", "Bob due", "Carol due"]
    assert [c.value for c in ws[2]][:7] == ["s1", 300, "Alice", 1, 1, 1, 100]
    assert ws.cell(3, 1).value == "TOTALS"
    assert ws.cell(3, 7).value == "=SUM(G2:G2)"


def test_summary(workbook):
    ws = workbook["Summary"]
    rows = {r[0]: r[1:] for r in ws.iter_rows(min_row=2, values_only=True)}
    assert set(rows) == {"Alice", "Bob", "Carol", "Dan"}
    charged, hosted, paid, balance = rows["Carol"]
    assert hosted == 0
    assert paid == 10
    assert balance == pytest.approx(-100.0 - (200.0 / 3.5 * 0.5 + 80.0) + 10.0)
    assert charged == pytest.approx(100.0 + 200.0 / 3.5 * 0.5 + 80.0)


def test_transfers(workbook):
    ws = workbook["Transfers"]
    assert [c.value for c in ws[1]] == ["From (Debtor)", "To (Creditor)", "Amount"]
    rows = list(ws.iter_rows(min_row=2, values_only=True))
    assert rows
    assert all(to in ("Alice", "Bob") for _, to, _ in rows)
