"""Gemeinsamer Renderer für die Terminal-Anzeige von Wochenplänen.

Die render_*-Funktionen liefern reine Tabellenzeilen (list[list[str]]),
build_table() baut daraus eine Rich-Tabelle.
"""

from datetime import date
from typing import TYPE_CHECKING, Optional, Union

from rich import box
from rich.table import Table

from engine.formatting import format_day, format_time, slot_time_label, week_label
from engine.resolver import month_weeks, slots_for_date, slots_for_weekday, week_dates
from export.helpers import format_cell, slot_color
from models.slot import DatedSlot, Slot
from models.weekday import Weekday

if TYPE_CHECKING:
    from engine.occurrences import PreviewWeek


DAY_HEADERS = [d.short for d in Weekday]


def render_slot_rows(slots: list[Slot]) -> list[list[str]]:
    """Eine Zeile pro Slot: [ID, Modus, Titel, Zeit, Typ]."""
    rows = []
    for s in slots:
        color = slot_color(s, slots)
        rows.append([
            f"[{color}]{s.id or '—'}[/{color}]",
            s.mode,
            s.display_title,
            slot_time_label(s),
            s.slot_type.value,
        ])
    return rows


def render_day_rows(slots: list[Slot], day: Union[date, Weekday, str],
                    include_templates: bool = False) -> list[list[str]]:
    """Tagesagenda: [Beginn, Ende, Titel, Typ, ID].

    `day` als Datum → Überlappungs-Abfrage, als Wochentag → Rang-Abfrage.
    Der "Any Time"-Sentinel erscheint als "All day".
    """
    if isinstance(day, date):
        matches = slots_for_date(slots, day, include_templates=include_templates)
    else:
        matches = slots_for_weekday(slots, day)

    rows = []
    for s in matches:
        if getattr(s, "is_any_time", False):
            start, end = "All day", ""
        else:
            start = format_time(s.start_hour, s.start_minute)
            end = format_time(s.end_hour, s.end_minute)
            if isinstance(s, DatedSlot) and s.start_date.date() != s.end_date.date():
                end = f"{end} ({format_day(s.end_date)})"
        rows.append([start, end, s.display_title, s.slot_type.value, s.id or "—"])
    return rows


def render_week_row(slots: list[Slot], week_of: Optional[date] = None) -> list[str]:
    """Eine Zeile mit sieben Zellen (Mo … So).

    Mit Datum: datierte Slots der Kalenderwoche. Ohne Datum: Wochenvorlage
    über die Wochentage.
    """
    if week_of is None:
        return [format_cell(slots_for_weekday(slots, d)) for d in Weekday]
    return [format_cell(slots_for_date(slots, d)) for d in week_dates(week_of)]


def render_month_rows(slots: list[Slot], year: int, month: int) -> list[list[str]]:
    """Monatsraster: pro Woche [Wochenlabel, Mo … So] mit "Tag (Anzahl)"."""
    rows = []
    for week in month_weeks(year, month):
        cells = [week_label(week[0])]
        for d in week:
            n = len(slots_for_date(slots, d))
            text = str(d.day) if d.month == month else f"[dim]{d.day}[/dim]"
            cells.append(f"{text} ({n})" if n else text)
        rows.append(cells)
    return rows


def render_repeat_summary(sources: list[Slot], total_weeks: int, new_count: int) -> list[str]:
    """Kurzfassung vor der Wochenliste: "N Slot(s) × M Woche(n) → K neue Slots" + Quell-Slots."""
    lines = [f"{len(sources)} Slot(s) × {total_weeks} Woche(n) → {new_count} neue Slots"]
    for s in sources:
        lines.append(f"  • {s.display_title} ({slot_time_label(s)})")
    return lines


def render_preview_rows(preview: list["PreviewWeek"]) -> list[list[str]]:
    """Vorschau pro Woche: [Woche, Vorkommens-ID, Titel, Tag, Zeit, Status]."""
    rows = []
    for pw in preview:
        for i, occ in enumerate(pw.occurrences):
            label = f"{pw.week_number}: {pw.week_label}" if i == 0 else ""
            status = "[dim]ausgeschlossen[/dim]" if occ.excluded else "[green]✓[/green]"
            rows.append([label, occ.id, occ.title, occ.day, occ.time, status])
    return rows


def build_table(title: str, headers: list[str], rows: list[list[str]]) -> Table:
    """Rich-Tabelle aus Kopfzeile und Zeilen."""
    table = Table(title=title, box=box.ROUNDED, show_lines=True)
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*row)
    return table
