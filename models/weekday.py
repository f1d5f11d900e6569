"""Wochentage in fester Reihenfolge (Montag … Sonntag) + Datums-Helfer."""

from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Union


class Weekday(str, Enum):
    """Wochentag. Die Reihenfolge der Definition ist der Rang (0=Montag, 6=Sonntag)."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @property
    def rank(self) -> int:
        """Position in der Woche (0=Montag)."""
        return _ORDER.index(self)

    @property
    def short(self) -> str:
        """Abgekürzter Name ("Mon", "Tue", ...)."""
        return self.value[:3]

    @classmethod
    def of(cls, day: Union[date, datetime]) -> "Weekday":
        """Wochentag eines Datums."""
        return _ORDER[day.weekday()]

    @classmethod
    def parse(cls, value: Union[str, "Weekday"]) -> "Weekday":
        """Akzeptiert "Monday", "mon", "Mo" (auch deutsche Kürzel)."""
        if isinstance(value, Weekday):
            return value
        key = value.strip().lower()
        if key in _ALIASES:
            return _ALIASES[key]
        raise ValueError(f"Unbekannter Wochentag: {value!r}")


_ORDER: list[Weekday] = list(Weekday)

_GERMAN_SHORT = ["mo", "di", "mi", "do", "fr", "sa", "so"]

_ALIASES: dict[str, Weekday] = {}
for _d in _ORDER:
    _ALIASES[_d.value.lower()] = _d
    _ALIASES[_d.short.lower()] = _d
for _short, _d in zip(_GERMAN_SHORT, _ORDER):
    _ALIASES.setdefault(_short, _d)


def rank(day: Union[str, Weekday]) -> int:
    """Rang eines Wochentags in der festen Ordnung Montag=0 … Sonntag=6."""
    return Weekday.parse(day).rank


# ─── Datums-Helfer ────────────────────────────────────────────────────────────

def as_date(value: Union[date, datetime]) -> date:
    """Reduziert datetime auf das Kalenderdatum."""
    return value.date() if isinstance(value, datetime) else value


def day_start(value: Union[date, datetime]) -> datetime:
    """00:00:00 des Tages."""
    return datetime.combine(as_date(value), time.min)


def day_end(value: Union[date, datetime]) -> datetime:
    """23:59:59.999999 des Tages (geschlossenes Intervall)."""
    return datetime.combine(as_date(value), time.max)


def start_of_week(value: Union[date, datetime]) -> date:
    """Montag der Woche, in der das Datum liegt."""
    d = as_date(value)
    return d - timedelta(days=d.weekday())
