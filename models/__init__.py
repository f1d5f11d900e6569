from models.weekday import Weekday, rank
from models.slot import (
    DatedSlot,
    Slot,
    SlotType,
    WeekdaySlot,
    new_any_time_slot,
    new_dated_slot,
    new_weekday_slot,
)
from models.errors import (
    DuplicateIdError,
    EmptySelectionError,
    HorizonTooFarError,
    InvalidRangeError,
    NoOccurrencesError,
    NotFoundError,
    ScheduleError,
)

__all__ = [
    "Weekday",
    "rank",
    "Slot",
    "SlotType",
    "WeekdaySlot",
    "DatedSlot",
    "new_weekday_slot",
    "new_dated_slot",
    "new_any_time_slot",
    "ScheduleError",
    "InvalidRangeError",
    "NoOccurrencesError",
    "EmptySelectionError",
    "HorizonTooFarError",
    "NotFoundError",
    "DuplicateIdError",
]
