"""Tages-Auflösung: Welche Slots gelten an einem Wochentag bzw. Datum?

Zwei Abfragen:
- slots_for_weekday: Rangvergleich über die feste Ordnung Mo=0 … So=6.
  Bekannte Einschränkung: kein Wrap-around (Fr → Mo wird schon beim
  Anlegen abgelehnt, siehe WeekdaySlot).
- slots_for_date: Überlappung geschlossener Intervalle mit dem Tagesfenster
  [00:00:00, 23:59:59.999999].

Rückgaben sind aufsteigend nach Beginn sortiert; sorted() ist stabil, gleiche
Startzeiten behalten die Einfügereihenfolge.
"""

import calendar
from datetime import date, datetime, timedelta
from typing import Iterable, Union

from models.slot import DatedSlot, Slot, WeekdaySlot
from models.weekday import Weekday, as_date, day_end, day_start, start_of_week


def _weekday_slot_covers(slot: WeekdaySlot, day: Weekday) -> bool:
    return slot.start_day.rank <= day.rank <= slot.end_day.rank


def _dated_slot_covers_weekday(slot: DatedSlot, day: Weekday) -> bool:
    first = slot.start_date.date()
    last = slot.end_date.date()
    if (last - first).days >= 6:
        return True
    d = first
    while d <= last:
        if Weekday.of(d) == day:
            return True
        d += timedelta(days=1)
    return False


def slot_covers_weekday(slot: Slot, day: Union[Weekday, str]) -> bool:
    """True wenn der Slot am Wochentag `day` aktiv ist.

    Bei datierten Slots haben die Daten Vorrang: geprüft werden die
    Kalendertage zwischen Beginn und Ende.
    """
    day = Weekday.parse(day)
    if isinstance(slot, DatedSlot):
        return _dated_slot_covers_weekday(slot, day)
    return _weekday_slot_covers(slot, day)


def slot_overlaps_date(slot: DatedSlot, day: Union[date, datetime]) -> bool:
    """Geschlossene Intervall-Überlappung: NOT (Tagesbeginn > Ende OR Beginn > Tagesende)."""
    return not (day_start(day) > slot.end_date or slot.start_date > day_end(day))


def slots_for_weekday(slots: Iterable[Slot], day: Union[Weekday, str]) -> list[Slot]:
    """Alle Slots, die am Wochentag aktiv sind, sortiert nach Startzeit."""
    day = Weekday.parse(day)
    matches = [s for s in slots if slot_covers_weekday(s, day)]
    return sorted(matches, key=lambda s: (s.start_hour, s.start_minute))


def slots_for_date(
    slots: Iterable[Slot],
    day: Union[date, datetime],
    include_templates: bool = False,
) -> list[Slot]:
    """Alle Slots, die das Datum berühren, sortiert nach Beginn.

    Wochenvorlagen (WeekdaySlot) haben kein Datum und werden nur mit
    include_templates=True berücksichtigt (dann über den Wochentag des Datums).
    """
    d = as_date(day)
    weekday = Weekday.of(d)

    def start_of(slot: Slot) -> datetime:
        if isinstance(slot, DatedSlot):
            return slot.start_date
        return datetime(d.year, d.month, d.day, slot.start_hour, slot.start_minute)

    matches: list[Slot] = []
    for s in slots:
        if isinstance(s, DatedSlot):
            if slot_overlaps_date(s, d):
                matches.append(s)
        elif include_templates and _weekday_slot_covers(s, weekday):
            matches.append(s)
    return sorted(matches, key=start_of)


# ─── Wochen- und Monatsraster ─────────────────────────────────────────────────

def week_dates(value: Union[date, datetime]) -> list[date]:
    """Die 7 Daten (Mo … So) der Woche, in der `value` liegt."""
    monday = start_of_week(value)
    return [monday + timedelta(days=i) for i in range(7)]


def week_bounds(week_start: Union[date, datetime]) -> tuple[datetime, datetime]:
    """(Montag 00:00, Sonntag 23:59:59.999999) der Woche."""
    monday = start_of_week(week_start)
    return day_start(monday), day_end(monday + timedelta(days=6))


def slots_in_week(slots: Iterable[Slot], week_start: Union[date, datetime]) -> list[DatedSlot]:
    """Datierte Slots, deren Beginn in der Woche liegt (Quellmenge fürs Wiederholen).

    Reihenfolge bleibt die des Eingangs.
    """
    lo, hi = week_bounds(week_start)
    return [
        s for s in slots
        if isinstance(s, DatedSlot) and lo <= s.start_date <= hi
    ]


def month_weeks(year: int, month: int) -> list[list[date]]:
    """Kalenderraster eines Monats: Wochenzeilen Mo … So.

    Enthält die angrenzenden Tage des Vor- und Folgemonats, damit jede Zeile
    vollständig ist.
    """
    first = date(year, month, 1)
    last = date(year, month, calendar.monthrange(year, month)[1])
    cursor = start_of_week(first)
    grid_end = start_of_week(last) + timedelta(days=6)
    weeks: list[list[date]] = []
    while cursor <= grid_end:
        weeks.append([cursor + timedelta(days=i) for i in range(7)])
        cursor += timedelta(days=7)
    return weeks
