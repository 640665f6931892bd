import pytest

from config import load_store, save_store
from models import Store
from volley_split import main


@pytest.fixture
def store_path(tmp_path, home_dir, hosted_event):
    path = str(tmp_path / "store.json")
    save_store(Store(events=[hosted_event], paid_status={"e1_Bob": True}), path)
    return path


def test_settle(store_path, capsys):
    assert main(["--store", store_path, "settle"]) == 0
    out = capsys.readouterr().out
    assert "Alice" in out and "200.0" in out
    assert "Bob -> Alice: 100.0" in out
    assert "Carol -> Alice: 100.0" in out


def test_summary(store_path, capsys):
    assert main(["--store", store_path, "summary"]) == 0
    out = capsys.readouterr().out
    assert "Game e1" in out and "total 300.0" in out
    bob = next(line for line in out.splitlines() if "Bob" in line)
    assert "paid" in bob


def test_unknown_event_reports_error(store_path, capsys):
    assert main(["--store", store_path, "summary", "missing"]) == 1
    assert "missing" in capsys.readouterr().err


def test_csv_round_trip_through_cli(store_path, tmp_path):
    csv_path = str(tmp_path / "e1.csv")
    assert main(["--store", store_path, "export-csv", "e1", csv_path]) == 0
    text = open(csv_path, encoding="utf-8").read().replace("s1,300.0,Alice,1,1,1", "s1,300.0,Alice,1,1,0.5")
    with open(csv_path, "w", encoding="utf-8") as f:
        f.write(text)
    assert main(["--store", store_path, "import-csv", "e1", csv_path]) == 0
    assert load_store(store_path).events[0].participation["s1"]["c"] == 0.5


def test_export_excel(store_path, tmp_path):
    path = tmp_path / "report.xlsx"
    assert main(["--store", store_path, "export-excel", str(path)]) == 0
    assert path.exists()


def run(args, capsys):
    """Run the CLI and return its stdout."""
    assert main(args) == 0
    return capsys.readouterr().out


def test_build_a_ledger_from_scratch(tmp_path, home_dir, capsys):
    path = str(tmp_path / "fresh.json")
    base = ["--store", path]
    run(base + ["defaults", "--cost", "300", "--players", "Alice", "Bob", "Carol", "--sessions", "Court A"], capsys)
    event_id = run(base + ["new-event", "Sunday", "--date", "2026-10-18"], capsys).strip()

    for name in ("Alice", "Bob", "Carol"):
        run(base + ["weight", event_id, "Court A", name, "1"], capsys)
    run(base + ["host", event_id, "Court A", "alice"], capsys)

    store = load_store(path)
    event = store.events[0]
    assert event.id == event_id
    assert event.sessions[0].cost == 300.0
    assert event.sessions[0].host_id == event.players[0].id
    out = run(base + ["settle"], capsys)
    assert "Bob -> Alice: 100.0" in out and "Carol -> Alice: 100.0" in out


def test_roster_and_session_commands(store_path, capsys):
    base = ["--store", store_path]
    dan_id = run(base + ["add-player", "e1", "Dan"], capsys).strip()
    late_id = run(base + ["add-session", "e1", "Late", "--cost", "80"], capsys).strip()
    assert run(base + ["tap", "e1", "Late", "Dan"], capsys).strip() == "1"
    run(base + ["cost", "e1", "s1", "150"], capsys)
    run(base + ["remove-player", "e1", "Bob"], capsys)

    event = load_store(store_path).events[0]
    assert [p.name for p in event.players] == ["Alice", "Carol", "Dan"]
    assert event.participation[late_id] == {dan_id: 1.0}
    assert event.sessions[0].cost == 150.0
    assert "b" not in event.participation["s1"]

    run(base + ["remove-session", "e1", "Late"], capsys)
    run(base + ["host", "e1", "s1"], capsys)
    event = load_store(store_path).events[0]
    assert [s.id for s in event.sessions] == ["s1"]
    assert event.sessions[0].host_id is None


def test_pay_and_toggle_paid(store_path, capsys):
    base = ["--store", store_path]
    run(base + ["pay", "Carol", "100", "--date", "2026-10-18"], capsys)
    assert run(base + ["toggle-paid", "e1", "Bob"], capsys).strip() == "due"

    store = load_store(store_path)
    assert [(p.player_name, p.amount) for p in store.payments] == [("Carol", 100.0)]
    assert store.paid_status == {"e1_Bob": False}
    assert "Carol -> Alice" not in run(base + ["settle"], capsys)


def test_weight_outside_levels_is_rejected(store_path, capsys):
    with pytest.raises(SystemExit):
        main(["--store", store_path, "weight", "e1", "s1", "Bob", "0.3"])


def test_failed_command_does_not_save(store_path, capsys):
    assert main(["--store", store_path, "add-player", "e1", "alice"]) == 1
    assert "already exists" in capsys.readouterr().err
    assert [p.name for p in load_store(store_path).events[0].players] == ["Alice", "Bob", "Carol"]


def test_events_and_delete(store_path, capsys):
    base = ["--store", store_path]
    assert "e1" in run(base + ["events"], capsys)
    run(base + ["delete-event", "e1"], capsys)
    assert load_store(store_path).events == []
