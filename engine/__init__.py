"""Wochenplan-Engine: Tages-Auflösung, Wiederholung und Slot-Store."""

from .resolver import (
    month_weeks,
    slots_for_date,
    slots_for_weekday,
    slots_in_week,
    week_bounds,
    week_dates,
)
from .occurrences import (
    DEFAULT_IDS,
    Occurrence,
    OccurrenceIds,
    PreviewWeek,
    calendar_weeks_between,
    generate_occurrences,
    occurrence_id,
    preview_weeks,
    project_occurrences,
)
from .store import ScheduleStore, StoreRegistry

__all__ = [
    "slots_for_weekday",
    "slots_for_date",
    "slots_in_week",
    "week_dates",
    "week_bounds",
    "month_weeks",
    "OccurrenceIds",
    "DEFAULT_IDS",
    "Occurrence",
    "PreviewWeek",
    "occurrence_id",
    "calendar_weeks_between",
    "project_occurrences",
    "generate_occurrences",
    "preview_weeks",
    "ScheduleStore",
    "StoreRegistry",
]
