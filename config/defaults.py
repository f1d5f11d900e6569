from datetime import date, datetime, timedelta
from typing import Optional

from config.schema import CalendarConfig, EngineConfig, RepeatConfig, SlotDefaults
from models.slot import (
    DatedSlot,
    SlotType,
    WeekdaySlot,
    new_dated_slot,
    new_weekday_slot,
)
from models.weekday import start_of_week


# Farbpalette für Slots (Index des Slots in der Liste, zyklisch)
SLOT_COLORS: list[str] = [
    "magenta",
    "blue",
    "green",
    "yellow",
    "purple",
    "red",
]


def default_engine_config() -> EngineConfig:
    """Standard-Konfiguration: Raster 05:00–23:00 im 30-Minuten-Takt, max. 104 Wochen."""
    return EngineConfig(
        gym_name="Muster-Studio",
        calendar=CalendarConfig(day_start_hour=5, day_end_hour=23, time_step_minutes=30),
        repeat=RepeatConfig(max_weeks=104, preview_prefix="preview"),
        slots=SlotDefaults(default_slot_type=SlotType.CLASS, default_duration_minutes=60),
    )


def default_weekday_slots() -> list[WeekdaySlot]:
    """Beispiel-Wochenvorlage einer Mitgliedschaft.

    Mo 06:00–08:00  Morning Session
    Mo 18:00–20:00  Evening Session
    Mi 06:00–08:00  Morning Session
    Fr 17:00–19:30  Afternoon Session
    """
    return [
        new_weekday_slot("Monday", "06:00", "Monday", "08:00",
                         slot_id="1", label="Morning Session"),
        new_weekday_slot("Monday", "18:00", "Monday", "20:00",
                         slot_id="2", label="Evening Session"),
        new_weekday_slot("Wednesday", "06:00", "Wednesday", "08:00",
                         slot_id="3", label="Morning Session"),
        new_weekday_slot("Friday", "17:00", "Friday", "19:30",
                         slot_id="4", label="Afternoon Session"),
    ]


def default_dated_slots(week_of: Optional[date] = None) -> list[DatedSlot]:
    """Beispiel-Termine in der Woche von `week_of` (Standard: heute).

    Mo 06:00–08:00  Morning Session (class)
    Mi 18:00–20:00  Evening Session (class)
    Fr 17:00–19:30  PT Session      (pt)
    """
    monday = start_of_week(week_of or date.today())

    def make(day_idx: int, sh: int, sm: int, eh: int, em: int,
             title: str, slot_id: str, slot_type: SlotType) -> DatedSlot:
        d = monday + timedelta(days=day_idx)
        return new_dated_slot(
            datetime(d.year, d.month, d.day, sh, sm),
            datetime(d.year, d.month, d.day, eh, em),
            slot_id=slot_id, title=title, slot_type=slot_type,
        )

    return [
        make(0, 6, 0, 8, 0, "Morning Session", "d1", SlotType.CLASS),
        make(2, 18, 0, 20, 0, "Evening Session", "d2", SlotType.CLASS),
        make(4, 17, 0, 19, 30, "PT Session", "d3", SlotType.PT),
    ]
