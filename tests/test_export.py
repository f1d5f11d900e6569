"""Tests für Anzeige-Formate, Terminal-Renderer und die Kommandozeile."""

import json
from datetime import date, datetime
from pathlib import Path

from click.testing import CliRunner
from rich.table import Table

from config.defaults import default_engine_config
from engine.formatting import (
    format_day,
    format_hour,
    format_short_date,
    format_time,
    slot_time_label,
    slot_time_range,
    week_label,
)
from engine.occurrences import preview_weeks
from export.helpers import format_cell, slot_color, time_options
from export.tui_renderer import (
    DAY_HEADERS,
    build_table,
    render_day_rows,
    render_month_rows,
    render_preview_rows,
    render_repeat_summary,
    render_slot_rows,
    render_week_row,
)
from main import cli
from models.slot import new_any_time_slot, new_dated_slot, new_weekday_slot


def _week_slots() -> list:
    return [
        new_dated_slot(datetime(2024, 1, 1, 6), datetime(2024, 1, 1, 8),
                       slot_id="a", title="Morning Session"),
        new_dated_slot(datetime(2024, 1, 5, 22), datetime(2024, 1, 6, 1),
                       slot_id="late", title="Late Night"),
        new_weekday_slot("Monday", "18:00", end_time="20:00", slot_id="t",
                         label="Evening Template"),
    ]


# ─── FORMATE ──────────────────────────────────────────────────────────────────

class TestFormatting:
    def test_format_time_12h(self):
        assert format_time(0, 0) == "12:00 AM"
        assert format_time(6, 5) == "6:05 AM"
        assert format_time(12, 30) == "12:30 PM"
        assert format_time(23, 0) == "11:00 PM"

    def test_format_hour(self):
        assert format_hour(5) == "5 AM"
        assert format_hour(13) == "1 PM"

    def test_dates(self):
        assert format_short_date(date(2024, 1, 8)) == "Jan 8"
        assert format_day(datetime(2024, 1, 8, 9)) == "Mon, Jan 8"
        assert week_label(date(2024, 1, 8)) == "Jan 8 – Jan 14"
        assert week_label(date(2024, 12, 30), with_year=True) == "Dec 30 – Jan 5, 2025"

    def test_slot_labels(self):
        slots = _week_slots()
        assert slot_time_range(slots[0]) == "6:00 AM – 8:00 AM"
        assert slot_time_label(slots[0]) == "Mon 6:00 AM – 8:00 AM"
        assert slot_time_label(slots[1]) == "Fri, Jan 5 10:00 PM → Sat, Jan 6 1:00 AM"
        assert slot_time_label(new_any_time_slot()) == "Any Time"


# ─── HELFER ───────────────────────────────────────────────────────────────────

class TestHelpers:
    def test_time_options_default_grid(self):
        """Standardraster: 5:00 AM … 11:30 PM im 30-Minuten-Takt."""
        options = time_options(default_engine_config().calendar)
        assert options[0] == ("5:00 AM", 5, 0)
        assert options[-1] == ("11:30 PM", 23, 30)
        assert len(options) == 19 * 2

    def test_format_cell_limit(self):
        slots = [
            new_dated_slot(datetime(2024, 1, 1, h), datetime(2024, 1, 1, h + 1),
                           slot_id=str(h), title=f"K{h}")
            for h in range(6, 11)
        ]
        cell = format_cell(slots)
        assert cell.splitlines() == ["6:00 AM K6", "7:00 AM K7", "8:00 AM K8", "+2 more"]
        assert format_cell([]) == ""

    def test_slot_color(self):
        slots = _week_slots()
        own = new_dated_slot(datetime(2024, 1, 1, 6), datetime(2024, 1, 1, 7),
                             slot_id="c", color="cyan")
        assert slot_color(own, slots) == "cyan"
        assert slot_color(slots[0], slots) != slot_color(slots[1], slots)


# ─── RENDERER ─────────────────────────────────────────────────────────────────

class TestRenderer:
    def test_slot_rows(self):
        rows = render_slot_rows(_week_slots())
        assert rows[0][0] == "[magenta]a[/magenta]"
        assert rows[0][1:] == ["dated", "Morning Session", "Mon 6:00 AM – 8:00 AM", "class"]
        assert rows[2][1] == "weekday"

    def test_day_rows_by_date(self):
        """Samstag zeigt nur den Late-Night-Slot, mit Ende am Folgetag markiert."""
        rows = render_day_rows(_week_slots(), date(2024, 1, 5))
        assert [r[4] for r in rows] == ["late"]
        assert rows[0][1] == "1:00 AM (Sat, Jan 6)"
        assert [r[4] for r in render_day_rows(_week_slots(), date(2024, 1, 6))] == ["late"]

    def test_day_rows_by_weekday(self):
        rows = render_day_rows(_week_slots(), "Monday")
        assert [r[4] for r in rows] == ["a", "t"]

    def test_day_rows_any_time(self):
        rows = render_day_rows([new_any_time_slot(slot_id="x")], "Thursday")
        assert rows[0][:2] == ["All day", ""]

    def test_week_row(self):
        row = render_week_row(_week_slots(), date(2024, 1, 3))
        assert len(row) == len(DAY_HEADERS) == 7
        assert "Morning Session" in row[0]
        assert "Late Night" in row[4] and "Late Night" in row[5]
        assert "Evening Template" not in row[0]

    def test_week_row_template(self):
        row = render_week_row(_week_slots())
        assert "Evening Template" in row[0]

    def test_month_rows(self):
        rows = render_month_rows(_week_slots(), 2024, 1)
        assert rows[0][0] == "Jan 1 – Jan 7"
        assert rows[0][1] == "1 (1)"
        assert rows[0][6] == "6 (1)"
        assert len(rows) == 5

    def test_preview_rows(self):
        preview = preview_weeks(_week_slots(), date(2024, 1, 1), date(2024, 1, 14),
                                excluded_occurrence_ids={"preview-1-late"})
        rows = render_preview_rows(preview)
        assert rows[0][0] == "1: Jan 8 – Jan 14"
        assert rows[1][0] == ""
        assert "ausgeschlossen" in rows[1][5]

    def test_repeat_summary(self):
        sources = _week_slots()[:2]
        lines = render_repeat_summary(sources, 3, 5)
        assert lines[0] == "2 Slot(s) × 3 Woche(n) → 5 neue Slots"
        assert lines[1] == "  • Morning Session (Mon 6:00 AM – 8:00 AM)"
        assert len(lines) == 3

    def test_build_table(self):
        table = build_table("Titel", ["A", "B"], [["1", "2"]])
        assert isinstance(table, Table)
        assert table.row_count == 1


# ─── KOMMANDOZEILE ────────────────────────────────────────────────────────────

class TestCli:
    def test_generate_and_list(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["generate", "--week", "2024-01-01"])
            assert result.exit_code == 0, result.output
            assert Path("output/slots.json").exists()

            result = runner.invoke(cli, ["slot", "list"])
            assert result.exit_code == 0
            assert "d1" in result.output

    def test_repeat_preview_json_does_not_commit(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            runner.invoke(cli, ["generate", "--week", "2024-01-01"])
            result = runner.invoke(cli, ["repeat", "2024-01-01", "2024-01-14",
                                         "--json", "--skip", "d3"])
            assert result.exit_code == 0, result.output
            data = json.loads(result.stdout)
            assert data[0]["weekNumber"] == 1
            assert [o["id"] for o in data[0]["occurrences"]] == ["preview-1-d1", "preview-1-d2"]

            stored = json.loads(Path("output/slots.json").read_text(encoding="utf-8"))
            assert len(stored["slots"]) == 3

    def test_repeat_commit(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            runner.invoke(cli, ["generate", "--week", "2024-01-01"])
            result = runner.invoke(cli, ["repeat", "2024-01-01", "2024-01-21", "--commit",
                                         "--skip-occurrence", "preview-2-d3"])
            assert result.exit_code == 0, result.output
            stored = json.loads(Path("output/slots.json").read_text(encoding="utf-8"))
            assert len(stored["slots"]) == 3 + 5

    def test_repeat_same_week_is_error(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            runner.invoke(cli, ["generate", "--week", "2024-01-01"])
            result = runner.invoke(cli, ["repeat", "2024-01-01", "2024-01-05"])
            assert result.exit_code == 1
            assert "NoOccurrencesError" in result.output

    def test_remove_unknown_slot(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            runner.invoke(cli, ["generate"])
            result = runner.invoke(cli, ["slot", "remove", "gibt-es-nicht"])
            assert result.exit_code == 1
            assert "NotFoundError" in result.output

    def test_add_weekday_wraparound_rejected(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["slot", "add-weekday", "Friday", "18:00", "08:00",
                                         "--end-day", "Monday"])
            assert result.exit_code == 1
            assert "InvalidRangeError" in result.output
            assert not Path("output/slots.json").exists()

    def test_add_and_remove_dated(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["slot", "add-dated", "2024-03-01 18:00",
                                         "2024-03-01 20:00", "--title", "Boxing"])
            assert result.exit_code == 0, result.output
            result = runner.invoke(cli, ["day", "2024-03-01"])
            assert "Boxing" in result.output
            result = runner.invoke(cli, ["slot", "remove", "s1"])
            assert result.exit_code == 0
            result = runner.invoke(cli, ["day", "2024-03-01"])
            assert "keine Slots" in result.output

    def test_add_dated_default_duration(self):
        """Ohne Ende gilt die Standarddauer (60 min)."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["slot", "add-dated", "2024-03-01 18:00"])
            assert result.exit_code == 0, result.output
            stored = json.loads(Path("output/slots.json").read_text(encoding="utf-8"))
            assert stored["slots"][0]["end_date"] == "2024-03-01T19:00:00"

    def test_month_invalid_is_clean_error(self):
        """Monat 13 wird als Eingabefehler gemeldet, nicht als Traceback."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["month", "2024-13"])
            assert result.exit_code == 1
            assert isinstance(result.exception, SystemExit)
            assert "Ungültiger Monat" in result.output

    def test_repeat_json_commit_stays_json(self):
        """--json --commit: Ausgabe bleibt parsebares JSON, Slots werden übernommen."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            runner.invoke(cli, ["generate", "--week", "2024-01-01"])
            result = runner.invoke(cli, ["repeat", "2024-01-01", "2024-01-14",
                                         "--json", "--commit"])
            assert result.exit_code == 0, result.output
            data = json.loads(result.stdout)
            assert len(data[0]["occurrences"]) == 3
            stored = json.loads(Path("output/slots.json").read_text(encoding="utf-8"))
            assert len(stored["slots"]) == 6

    def test_repeat_shows_summary(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            runner.invoke(cli, ["generate", "--week", "2024-01-01"])
            result = runner.invoke(cli, ["repeat", "2024-01-01", "2024-01-21",
                                         "--skip", "d3"])
            assert result.exit_code == 0, result.output
            assert "2 Slot(s) × 2 Woche(n) → 4 neue Slots" in result.output


# ─── SLOT BEARBEITEN ──────────────────────────────────────────────────────────

def _stored_slots() -> dict:
    stored = json.loads(Path("output/slots.json").read_text(encoding="utf-8"))
    return {s["id"]: s for s in stored["slots"]}


class TestSlotEdit:
    def test_reschedule_dated(self):
        """Neuer Zeitraum: ID, Position und Titel bleiben erhalten."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            runner.invoke(cli, ["generate", "--week", "2024-01-01"])
            result = runner.invoke(cli, ["slot", "edit", "d1",
                                         "--start", "2024-01-02 07:00",
                                         "--end", "2024-01-02 09:30"])
            assert result.exit_code == 0, result.output
            slots = _stored_slots()
            assert list(slots) == ["d1", "d2", "d3"]
            assert slots["d1"]["start_date"] == "2024-01-02T07:00:00"
            assert slots["d1"]["end_date"] == "2024-01-02T09:30:00"
            assert slots["d1"]["title"] == "Morning Session"

    def test_reschedule_only_end(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            runner.invoke(cli, ["generate", "--week", "2024-01-01"])
            result = runner.invoke(cli, ["slot", "edit", "d1", "--end", "2024-01-01 07:00"])
            assert result.exit_code == 0, result.output
            slots = _stored_slots()
            assert slots["d1"]["start_date"] == "2024-01-01T06:00:00"
            assert slots["d1"]["end_date"] == "2024-01-01T07:00:00"

    def test_reversed_dated_range_rejected(self):
        """Ende vor Beginn → InvalidRangeError, Datei unverändert."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            runner.invoke(cli, ["generate", "--week", "2024-01-01"])
            before = _stored_slots()
            result = runner.invoke(cli, ["slot", "edit", "d1",
                                         "--start", "2024-01-02 10:00",
                                         "--end", "2024-01-02 09:00"])
            assert result.exit_code == 1
            assert "InvalidRangeError" in result.output
            assert _stored_slots()["d1"] == before["d1"]

    def test_dated_to_weekday(self):
        """--day/--from/--to machen aus einem Termin eine Wochenvorlage."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            runner.invoke(cli, ["generate", "--week", "2024-01-01"])
            result = runner.invoke(cli, ["slot", "edit", "d2", "--day", "Tuesday",
                                         "--from", "07:00", "--to", "08:15"])
            assert result.exit_code == 0, result.output
            d2 = _stored_slots()["d2"]
            assert d2["mode"] == "weekday"
            assert (d2["start_day"], d2["start_hour"]) == ("Tuesday", 7)
            assert (d2["end_day"], d2["end_hour"], d2["end_minute"]) == ("Tuesday", 8, 15)
            assert d2["title"] == "Evening Session"

    def test_weekday_wraparound_rejected(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            runner.invoke(cli, ["generate", "--mode", "weekday"])
            result = runner.invoke(cli, ["slot", "edit", "4", "--day", "Friday",
                                         "--end-day", "Monday", "--from", "18:00",
                                         "--to", "08:00"])
            assert result.exit_code == 1
            assert "InvalidRangeError" in result.output

    def test_mixed_options_rejected(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            runner.invoke(cli, ["generate", "--week", "2024-01-01"])
            result = runner.invoke(cli, ["slot", "edit", "d1", "--day", "Monday",
                                         "--start", "2024-01-01 06:00"])
            assert result.exit_code == 1
            assert "schließen sich aus" in result.output
