"""Anzeige-Formate für Uhrzeiten, Tage und Wochen (12h-Format wie im Kalender)."""

from datetime import date, datetime, timedelta
from typing import Union

from models.slot import DatedSlot, Slot
from models.weekday import as_date


def format_time(hour: int, minute: int) -> str:
    """13, 5 → "1:05 PM"."""
    h = hour % 12 or 12
    ampm = "AM" if hour < 12 else "PM"
    return f"{h}:{minute:02d} {ampm}"


def format_hour(hour: int) -> str:
    """13 → "1 PM"."""
    h = hour % 12 or 12
    ampm = "AM" if hour < 12 else "PM"
    return f"{h} {ampm}"


def format_short_date(value: Union[date, datetime]) -> str:
    """"Jan 8" (ohne führende Null, plattformunabhängig)."""
    d = as_date(value)
    return f"{d:%b} {d.day}"


def format_day(value: Union[date, datetime]) -> str:
    """"Mon, Jan 8"."""
    d = as_date(value)
    return f"{d:%a}, {format_short_date(d)}"


def week_label(week_start: Union[date, datetime], with_year: bool = False) -> str:
    """"Jan 8 – Jan 14" bzw. mit Jahr "Jan 8 – Jan 14, 2024"."""
    start = as_date(week_start)
    end = start + timedelta(days=6)
    label = f"{format_short_date(start)} – {format_short_date(end)}"
    return f"{label}, {end.year}" if with_year else label


def slot_time_range(slot: Slot) -> str:
    """"6:00 AM – 8:00 AM"."""
    return (f"{format_time(slot.start_hour, slot.start_minute)} – "
            f"{format_time(slot.end_hour, slot.end_minute)}")


def slot_time_label(slot: Slot) -> str:
    """Kurzbeschreibung eines Slots für Listen.

    "Any Time" | "Mon 6:00 AM – 8:00 AM" | "Fri 10:00 PM → Sat 1:00 AM"
    """
    if getattr(slot, "is_any_time", False):
        return "Any Time"
    start = format_time(slot.start_hour, slot.start_minute)
    end = format_time(slot.end_hour, slot.end_minute)
    if isinstance(slot, DatedSlot) and slot.start_date.date() != slot.end_date.date():
        return f"{format_day(slot.start_date)} {start} → {format_day(slot.end_date)} {end}"
    if slot.start_day == slot.end_day:
        return f"{slot.start_day.short} {start} – {end}"
    return f"{slot.start_day.short} {start} → {slot.end_day.short} {end}"
