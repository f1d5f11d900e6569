"""Wochenplan-Engine — Haupt-CLI.

Verwendung:
  python main.py config init                     Standard-Konfiguration anlegen
  python main.py config show                     Konfiguration anzeigen
  python main.py config edit                     Konfiguration bearbeiten
  python main.py generate                        Beispielwoche erzeugen
  python main.py slot list                       Alle Slots auflisten
  python main.py slot add-dated <von> [bis]      Datierten Slot anlegen
  python main.py slot add-weekday <tag> <von> <bis>  Wochentag-Slot anlegen
  python main.py slot any-time                   "Any Time"-Slot anlegen
  python main.py slot edit <id>                  Slot ändern (Texte, Zeitraum)
  python main.py slot remove <id>                Slot löschen
  python main.py day <datum|wochentag>           Tagesagenda
  python main.py week [datum]                    Wochenansicht
  python main.py month [JJJJ-MM]                 Monatsraster
  python main.py repeat <woche> <bis>            Woche wiederholen (Vorschau / --commit)
"""

import json
import logging
import sys
from datetime import date, datetime, timedelta
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich import box

from models.errors import ScheduleError

console = Console()

DATE_FORMATS = ["%Y-%m-%d"]
DATETIME_FORMATS = ["%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M"]


def _load_config():
    """Lädt die Konfiguration (oder Defaults, wenn noch keine existiert)."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    try:
        return mgr, mgr.load_or_default()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)


def _open_store(config):
    """Lädt den Wochenplan aus der Slot-Datei (leer, wenn sie fehlt)."""
    from data.slot_file import SlotFile
    from engine.store import ScheduleStore

    path = Path(config.data_file)
    prefix = config.repeat.default_batch_prefix
    if not path.exists():
        return path, ScheduleStore(batch_prefix=prefix)
    return path, SlotFile.load_json(path).to_store(batch_prefix=prefix)


def _save_store(store, path: Path) -> None:
    from data.slot_file import SlotFile
    SlotFile.from_store(store).save_json(path)


def _abort(e: ScheduleError):
    console.print(f"[red bold]{type(e).__name__}:[/red bold] {e}")
    sys.exit(1)


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen oder bearbeiten."""


@cmd_config.command("init")
@click.option("--force", is_flag=True, default=False,
              help="Bestehende Konfiguration überschreiben.")
def config_init(force: bool):
    """Legt die Standard-Konfiguration als YAML an."""
    from config.defaults import default_engine_config
    from config.manager import ConfigManager

    mgr = ConfigManager()
    if not mgr.first_run_check() and not force:
        console.print(
            "[yellow]Eine Konfiguration existiert bereits.[/yellow]\n"
            "Verwenden Sie [bold]--force[/bold] zum Überschreiben."
        )
        return
    mgr.save(default_engine_config())


@cmd_config.command("show")
def config_show():
    """Zeigt die aktuelle Konfiguration an."""
    from export.helpers import time_options

    mgr, config = _load_config()

    console.print(Panel(
        f"[bold]{config.gym_name}[/bold]  |  Daten: {config.data_file}",
        title="Konfiguration",
        border_style="cyan",
    ))

    cc = config.calendar
    rc = config.repeat
    table = Table(box=box.ROUNDED)
    table.add_column("Parameter", style="bold")
    table.add_column("Wert")
    table.add_row("Tagesraster", f"{cc.day_start_hour:02d}:00 – {cc.day_end_hour:02d}:00")
    table.add_row("Takt", f"{cc.time_step_minutes} min")
    options = time_options(cc)
    table.add_row("Zeit-Optionen", f"{options[0][0]} … {options[-1][0]} ({len(options)})")
    table.add_row("Max. Folgewochen", str(rc.max_weeks))
    table.add_row("Vorschau-Präfix", rc.preview_prefix)
    table.add_row("Batch-Präfix", rc.default_batch_prefix)
    table.add_row("Slot-Typ (Default)", config.slots.default_slot_type.value)
    table.add_row("Dauer (Default)", f"{config.slots.default_duration_minutes} min")
    table.add_row("Log-Level", config.log_level)
    console.print(table)


@cmd_config.command("edit")
def config_edit():
    """Interaktive Bearbeitung der Konfiguration."""
    mgr, config = _load_config()
    mgr.edit_interactive(config)


# ─── GENERATE ─────────────────────────────────────────────────────────────────

@click.command("generate")
@click.option("--mode", type=click.Choice(["dated", "weekday", "sample"]), default="dated",
              help="dated: Beispieltermine, weekday: Wochenvorlage, sample: volle Zufallswoche.")
@click.option("--week", "week_of", type=click.DateTime(DATE_FORMATS), default=None,
              help="Woche der Beispieltermine (Standard: aktuelle Woche).")
@click.option("--seed", type=int, default=42, help="Seed für --mode sample.")
def cmd_generate(mode: str, week_of, seed: int):
    """Schreibt Beispiel-Slots in die Slot-Datei (überschreibt sie)."""
    from config.defaults import default_dated_slots, default_weekday_slots
    from data.sample_data import SampleDataGenerator
    from engine.store import ScheduleStore

    mgr, config = _load_config()
    week = week_of.date() if week_of else None
    if mode == "weekday":
        slots = default_weekday_slots()
    elif mode == "sample":
        slots = SampleDataGenerator(config, seed=seed).generate_week(week)
    else:
        slots = default_dated_slots(week)

    store = ScheduleStore(slots)
    path = Path(config.data_file)
    _save_store(store, path)
    console.print(f"[green]✓[/green] {len(store)} Slots geschrieben: {path}")


# ─── SLOT ─────────────────────────────────────────────────────────────────────

@click.group("slot")
def cmd_slot():
    """Slots anlegen, ändern, löschen und auflisten."""


@cmd_slot.command("list")
def slot_list():
    """Listet alle Slots in Einfügereihenfolge auf."""
    from export.tui_renderer import build_table, render_slot_rows

    mgr, config = _load_config()
    path, store = _open_store(config)
    if not len(store):
        console.print("[dim]Keine Slots vorhanden.[/dim]")
        return
    console.print(build_table(
        f"Slots ({len(store)})", ["ID", "Modus", "Titel", "Zeit", "Typ"],
        render_slot_rows(store.all()),
    ))


@cmd_slot.command("add-dated")
@click.argument("start", type=click.DateTime(DATETIME_FORMATS))
@click.argument("end", type=click.DateTime(DATETIME_FORMATS), required=False)
@click.option("--title", "-t", default="", help="Titel des Termins.")
@click.option("--type", "slot_type", type=click.Choice(["class", "pt"]), default=None)
@click.option("--description", default=None)
@click.option("--notes", default=None)
def slot_add_dated(start: datetime, end: datetime, title: str, slot_type, description, notes):
    """Legt einen datierten Slot an (Format: "JJJJ-MM-TT HH:MM").

    Ohne END gilt die konfigurierte Standarddauer.
    """
    from models.slot import SlotType, new_dated_slot

    mgr, config = _load_config()
    if end is None:
        end = start + timedelta(minutes=config.slots.default_duration_minutes)
    path, store = _open_store(config)
    try:
        slot = store.add(new_dated_slot(
            start, end, title=title or None,
            slot_type=SlotType(slot_type) if slot_type else config.slots.default_slot_type,
            description=description, notes=notes,
        ))
    except ScheduleError as e:
        _abort(e)
    _save_store(store, path)
    console.print(f"[green]✓[/green] Slot angelegt: {slot.id}")


@cmd_slot.command("add-weekday")
@click.argument("day")
@click.argument("start_time")
@click.argument("end_time")
@click.option("--end-day", default=None, help="Endtag, falls abweichend.")
@click.option("--label", "-l", default="", help="Bezeichnung.")
def slot_add_weekday(day: str, start_time: str, end_time: str, end_day, label: str):
    """Legt einen Wochentag-Slot an (z.B. "Monday 06:00 08:00")."""
    from models.slot import new_weekday_slot

    mgr, config = _load_config()
    path, store = _open_store(config)
    try:
        slot = store.add(new_weekday_slot(
            day, start_time, end_day or day, end_time, label=label or None,
            slot_type=config.slots.default_slot_type,
        ))
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except ScheduleError as e:
        _abort(e)
    _save_store(store, path)
    console.print(f"[green]✓[/green] Slot angelegt: {slot.id}")


@cmd_slot.command("any-time")
def slot_any_time():
    """Legt den "Any Time"-Slot (Mo 05:00 → So 23:00) an."""
    from models.slot import new_any_time_slot

    mgr, config = _load_config()
    path, store = _open_store(config)
    slot = store.add(new_any_time_slot())
    _save_store(store, path)
    console.print(f"[green]✓[/green] Slot angelegt: {slot.id}")


@cmd_slot.command("edit")
@click.argument("slot_id")
@click.option("--title", default=None)
@click.option("--label", default=None)
@click.option("--description", default=None)
@click.option("--notes", default=None)
@click.option("--start", type=click.DateTime(DATETIME_FORMATS), default=None,
              help="Neuer Beginn (macht den Slot zum datierten Slot).")
@click.option("--end", type=click.DateTime(DATETIME_FORMATS), default=None,
              help="Neues Ende eines datierten Slots.")
@click.option("--day", default=None, help="Neuer Wochentag (macht den Slot zur Vorlage).")
@click.option("--end-day", default=None, help="Neuer Endtag einer Vorlage.")
@click.option("--from", "from_time", default=None, help="Neue Startzeit HH:MM einer Vorlage.")
@click.option("--to", "to_time", default=None, help="Neue Endzeit HH:MM einer Vorlage.")
def slot_edit(slot_id: str, title, label, description, notes,
              start, end, day, end_day, from_time, to_time):
    """Ändert einen Slot: Texte und/oder Zeitraum.

    --start/--end verlegen den Slot auf feste Termine, --day/--end-day/--from/--to
    auf Wochentage. ID und Position im Plan bleiben erhalten.
    """
    from models.slot import DatedSlot, new_dated_slot, new_weekday_slot

    mgr, config = _load_config()
    path, store = _open_store(config)
    changes = {k: v for k, v in {
        "title": title, "label": label, "description": description, "notes": notes,
    }.items() if v is not None}
    reschedule_dated = start is not None or end is not None
    reschedule_weekday = any(v is not None for v in (day, end_day, from_time, to_time))
    if reschedule_dated and reschedule_weekday:
        console.print("[red]--start/--end und --day/--end-day/--from/--to "
                      "schließen sich aus.[/red]")
        sys.exit(1)

    try:
        current = store.get(slot_id)
        fields = dict(
            title=current.title, label=current.label, description=current.description,
            notes=current.notes, slot_type=current.slot_type, color=current.color,
        )
        fields.update(changes)
        if reschedule_dated:
            if start is None:
                if not isinstance(current, DatedSlot):
                    console.print("[red]Vorlage → Termin: --start ist erforderlich.[/red]")
                    sys.exit(1)
                start = current.start_date
            if end is None:
                end = (current.end_date if isinstance(current, DatedSlot)
                       else start + timedelta(minutes=config.slots.default_duration_minutes))
            replacement = new_dated_slot(start, end, **fields)
        elif reschedule_weekday:
            replacement = new_weekday_slot(
                day or current.start_day,
                from_time or (current.start_hour, current.start_minute),
                end_day or day or current.end_day,
                to_time or (current.end_hour, current.end_minute),
                **fields,
            )
        else:
            replacement = current.model_copy(update=changes)
        store.update(slot_id, replacement)
    except ScheduleError as e:
        _abort(e)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)
    _save_store(store, path)
    console.print(f"[green]✓[/green] Slot {slot_id} aktualisiert.")


@cmd_slot.command("remove")
@click.argument("slot_id")
def slot_remove(slot_id: str):
    """Löscht einen Slot per ID."""
    mgr, config = _load_config()
    path, store = _open_store(config)
    try:
        store.remove(slot_id)
    except ScheduleError as e:
        _abort(e)
    _save_store(store, path)
    console.print(f"[green]✓[/green] Slot {slot_id} gelöscht.")


# ─── DAY / WEEK / MONTH ───────────────────────────────────────────────────────

@click.command("day")
@click.argument("value")
@click.option("--templates", is_flag=True, default=False,
              help="Wochenvorlagen bei Datumsabfrage einbeziehen.")
def cmd_day(value: str, templates: bool):
    """Tagesagenda für ein Datum (JJJJ-MM-TT) oder einen Wochentag."""
    from engine.formatting import format_day
    from export.tui_renderer import build_table, render_day_rows
    from models.weekday import Weekday

    mgr, config = _load_config()
    path, store = _open_store(config)
    try:
        day = date.fromisoformat(value)
        title = format_day(day)
    except ValueError:
        try:
            day = Weekday.parse(value)
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            sys.exit(1)
        title = day.value

    rows = render_day_rows(store.all(), day, include_templates=templates)
    if not rows:
        console.print(f"[dim]{title}: keine Slots.[/dim]")
        return
    console.print(build_table(
        f"{title} — {len(rows)} Slot{'s' if len(rows) != 1 else ''}",
        ["Beginn", "Ende", "Titel", "Typ", "ID"], rows,
    ))


@click.command("week")
@click.argument("week_of", type=click.DateTime(DATE_FORMATS), required=False)
@click.option("--template", is_flag=True, default=False,
              help="Wochenvorlage (Wochentag-Slots) statt Kalenderwoche anzeigen.")
def cmd_week(week_of, template: bool):
    """Wochenansicht Mo … So."""
    from engine.formatting import week_label
    from export.tui_renderer import DAY_HEADERS, build_table, render_week_row
    from models.weekday import start_of_week

    mgr, config = _load_config()
    path, store = _open_store(config)
    if template:
        title = "Wochenvorlage"
        row = render_week_row(store.all())
    else:
        d = week_of.date() if week_of else date.today()
        title = week_label(start_of_week(d), with_year=True)
        row = render_week_row(store.all(), d)
    console.print(build_table(title, DAY_HEADERS, [row]))


@click.command("month")
@click.argument("month", required=False)
def cmd_month(month):
    """Monatsraster mit Anzahl Slots pro Tag (JJJJ-MM, Standard: aktueller Monat)."""
    from export.tui_renderer import DAY_HEADERS, build_table, render_month_rows

    mgr, config = _load_config()
    path, store = _open_store(config)
    if month:
        try:
            year, mon = (int(p) for p in month.split("-"))
            first = date(year, mon, 1)
        except ValueError:
            console.print(f"[red]Ungültiger Monat (erwartet JJJJ-MM): {month}[/red]")
            sys.exit(1)
    else:
        first = date.today().replace(day=1)
        year, mon = first.year, first.month
    title = first.strftime("%B %Y")
    console.print(build_table(title, ["Woche"] + DAY_HEADERS,
                              render_month_rows(store.all(), year, mon)))


# ─── REPEAT ───────────────────────────────────────────────────────────────────

@click.command("repeat")
@click.argument("week", type=click.DateTime(DATE_FORMATS))
@click.argument("until", type=click.DateTime(DATE_FORMATS))
@click.option("--skip", "skip_ids", multiple=True,
              help="Quell-Slot-ID, die gar nicht wiederholt wird (mehrfach möglich).")
@click.option("--skip-occurrence", "skip_occurrences", multiple=True,
              help="Einzelnes Vorkommen ausschließen, z.B. preview-1-d1 (mehrfach möglich).")
@click.option("--commit", is_flag=True, default=False,
              help="Vorkommen übernehmen statt nur anzeigen.")
@click.option("--json", "as_json", is_flag=True, default=False,
              help="Vorschau als JSON ausgeben.")
def cmd_repeat(week, until, skip_ids, skip_occurrences, commit: bool, as_json: bool):
    """Wiederholt die Woche von WEEK wöchentlich bis einschließlich UNTIL.

    Mit --json bleibt die Ausgabe reines JSON (auch zusammen mit --commit).
    """
    from engine.formatting import week_label
    from engine.occurrences import OccurrenceIds, calendar_weeks_between, preview_weeks
    from export.tui_renderer import build_table, render_preview_rows, render_repeat_summary

    mgr, config = _load_config()
    path, store = _open_store(config)
    ids = OccurrenceIds(config.repeat.preview_prefix)
    week_start = week.date()
    horizon = until.date()

    try:
        preview = preview_weeks(
            store.all(), week_start, horizon, skip_ids, skip_occurrences,
            max_weeks=config.repeat.max_weeks, ids=ids,
        )
        total = sum(pw.included_count for pw in preview)
        if as_json:
            click.echo(json.dumps([pw.to_dict() for pw in preview], indent=2,
                                  ensure_ascii=False))
        else:
            skipped = set(skip_ids)
            sources = [s for s in store.slots_in_week(week_start) if s.id not in skipped]
            console.print(Panel(
                "\n".join(render_repeat_summary(
                    sources, calendar_weeks_between(week_start, horizon), total,
                )),
                title="Zusammenfassung",
                border_style="cyan",
            ))
            console.print(build_table(
                f"Wiederholung {week_label(week_start)} → {horizon.isoformat()} "
                f"({total} Slots)",
                ["Woche", "ID", "Titel", "Tag", "Zeit", "Status"],
                render_preview_rows(preview),
            ))
        if not commit:
            return
        added = store.repeat_week(
            week_start, horizon, skip_ids, skip_occurrences,
            max_weeks=config.repeat.max_weeks, ids=ids,
        )
    except ScheduleError as e:
        _abort(e)

    _save_store(store, path)
    if not as_json:
        console.print(
            f"[green]✓[/green] {len(added)} Slots über {len(preview)} Woche(n) hinzugefügt."
        )


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Debug-Logging.")
def cli(verbose: bool):
    """Wochenplan-Engine für Kurse, PT-Pakete und Mitgliedschaften."""
    from config.manager import ConfigManager
    try:
        level = ConfigManager().load_or_default().log_level
    except ValueError:
        level = "INFO"
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main():
    """Einstiegspunkt."""
    cli()


# Befehle registrieren
cli.add_command(cmd_config)
cli.add_command(cmd_generate)
cli.add_command(cmd_slot)
cli.add_command(cmd_day)
cli.add_command(cmd_week)
cli.add_command(cmd_month)
cli.add_command(cmd_repeat)


if __name__ == "__main__":
    main()
