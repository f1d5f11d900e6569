"""Datenmodell für einen Zeitslot im Wochenplan (Pydantic v2).

Ein Slot hat genau einen von zwei Adressierungsmodi:

- WeekdaySlot: an Wochentage gebunden (Vorlage "jede Woche", z.B. Mitgliedschaften)
- DatedSlot:   an absolute Zeitpunkte gebunden (konkreter Kurs-/PT-Termin)

Slot ist die getaggte Vereinigung beider Typen (Feld "mode" als Diskriminator).
"""

from datetime import datetime, time, timedelta
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

from models.errors import InvalidRangeError
from models.weekday import Weekday

# "Any Time"-Sentinel: deckt das komplette Tagesraster der Woche ab
ANY_TIME_LABEL = "Any Time"
ANY_TIME_START = (Weekday.MONDAY, 5, 0)
ANY_TIME_END = (Weekday.SUNDAY, 23, 0)


class SlotType(str, Enum):
    CLASS = "class"
    PT = "pt"


class _SlotBase(BaseModel):
    """Gemeinsame, rein beschreibende Felder beider Slot-Arten."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: Optional[str] = None          # wird vom Store vergeben, danach unveränderlich
    label: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    slot_type: SlotType = SlotType.CLASS
    color: Optional[str] = None       # nur Darstellung

    @property
    def display_title(self) -> str:
        """Anzeigename: title, sonst label, sonst "Untitled"."""
        return self.title or self.label or "Untitled"

    def with_id(self, slot_id: str):
        """Kopie mit neuer ID."""
        return self.model_copy(update={"id": slot_id})


class WeekdaySlot(_SlotBase):
    """An Wochentage gebundener Slot (wiederkehrende Wochenvorlage)."""

    mode: Literal["weekday"] = "weekday"
    start_day: Weekday
    start_hour: int = Field(ge=0, le=23)
    start_minute: int = Field(0, ge=0, le=59)
    end_day: Weekday
    end_hour: int = Field(ge=0, le=23)
    end_minute: int = Field(0, ge=0, le=59)

    @field_validator("start_day", "end_day", mode="before")
    @classmethod
    def _parse_day(cls, v):
        return Weekday.parse(v) if isinstance(v, str) else v

    @property
    def start_key(self) -> tuple[int, int, int]:
        return (self.start_day.rank, self.start_hour, self.start_minute)

    @property
    def end_key(self) -> tuple[int, int, int]:
        return (self.end_day.rank, self.end_hour, self.end_minute)

    @property
    def is_any_time(self) -> bool:
        """True für den Sentinel "Any Time" (Mo 05:00 → So 23:00)."""
        return (
            self.label == ANY_TIME_LABEL
            and (self.start_day, self.start_hour, self.start_minute) == ANY_TIME_START
            and (self.end_day, self.end_hour, self.end_minute) == ANY_TIME_END
        )

    @property
    def spans_days(self) -> bool:
        return self.start_day != self.end_day

    @model_validator(mode="after")
    def _check_range(self):
        # Kein Wrap-around über das Wochenende (z.B. Fr → Mo): wird abgelehnt.
        if self.is_any_time:
            return self
        if self.start_key > self.end_key:
            raise InvalidRangeError(
                f"Beginn {self.start_day.value} {self.start_hour:02d}:{self.start_minute:02d} "
                f"liegt nach Ende {self.end_day.value} {self.end_hour:02d}:{self.end_minute:02d}"
            )
        return self


class DatedSlot(_SlotBase):
    """An absolute (naive, lokale) Zeitpunkte gebundener Slot."""

    mode: Literal["dated"] = "dated"
    start_date: datetime
    end_date: datetime

    @field_validator("start_date", "end_date")
    @classmethod
    def _require_naive(cls, v: datetime) -> datetime:
        if v.tzinfo is not None:
            raise ValueError("Zeitpunkte müssen naiv (lokale Wanduhrzeit) sein")
        return v

    @model_validator(mode="after")
    def _check_range(self):
        if self.start_date > self.end_date:
            raise InvalidRangeError(
                f"Beginn {self.start_date.isoformat()} liegt nach Ende "
                f"{self.end_date.isoformat()}"
            )
        return self

    # Wochentag-Felder werden aus den Daten abgeleitet
    @property
    def start_day(self) -> Weekday:
        return Weekday.of(self.start_date)

    @property
    def end_day(self) -> Weekday:
        return Weekday.of(self.end_date)

    @property
    def start_hour(self) -> int:
        return self.start_date.hour

    @property
    def start_minute(self) -> int:
        return self.start_date.minute

    @property
    def end_hour(self) -> int:
        return self.end_date.hour

    @property
    def end_minute(self) -> int:
        return self.end_date.minute

    def shifted(self, weeks: int, slot_id: Optional[str] = None) -> "DatedSlot":
        """Kopie um `weeks` Wochen verschoben. N×7 Tage erhalten den Wochentag."""
        delta = timedelta(weeks=weeks)
        return self.model_copy(update={
            "id": slot_id,
            "start_date": self.start_date + delta,
            "end_date": self.end_date + delta,
        })


Slot = Annotated[Union[WeekdaySlot, DatedSlot], Field(discriminator="mode")]

SlotListAdapter = TypeAdapter(list[Slot])


# ─── Konstruktoren ────────────────────────────────────────────────────────────

TimeLike = Union[time, str, tuple[int, int]]


def parse_time(value: TimeLike) -> tuple[int, int]:
    """Wandelt time / "HH:MM" / (h, m) in ein (Stunde, Minute)-Tupel um."""
    if isinstance(value, time):
        return value.hour, value.minute
    if isinstance(value, tuple):
        return int(value[0]), int(value[1])
    parts = value.strip().split(":")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Ungültige Uhrzeit (erwartet HH:MM): {value!r}")
    return int(parts[0]), int(parts[1])


def new_weekday_slot(
    day: Union[Weekday, str],
    start_time: TimeLike,
    end_day: Union[Weekday, str, None] = None,
    end_time: Optional[TimeLike] = None,
    *,
    slot_id: Optional[str] = None,
    label: Optional[str] = None,
    title: Optional[str] = None,
    description: Optional[str] = None,
    notes: Optional[str] = None,
    slot_type: SlotType = SlotType.CLASS,
    color: Optional[str] = None,
) -> WeekdaySlot:
    """Erzeugt einen Wochentag-Slot. Ohne end_day endet der Slot am selben Tag.

    Raises:
        InvalidRangeError: wenn Beginn nach Ende liegt (auch Wrap-around Fr → Mo).
    """
    sh, sm = parse_time(start_time)
    eh, em = parse_time(end_time) if end_time is not None else (sh, sm)
    return WeekdaySlot(
        id=slot_id,
        start_day=Weekday.parse(day),
        start_hour=sh,
        start_minute=sm,
        end_day=Weekday.parse(end_day if end_day is not None else day),
        end_hour=eh,
        end_minute=em,
        label=label,
        title=title,
        description=description,
        notes=notes,
        slot_type=slot_type,
        color=color,
    )


def new_any_time_slot(slot_id: Optional[str] = None,
                      color: Optional[str] = None) -> WeekdaySlot:
    """Erzeugt den "Any Time"-Sentinel (Mo 05:00 → So 23:00)."""
    s_day, s_h, s_m = ANY_TIME_START
    e_day, e_h, e_m = ANY_TIME_END
    return new_weekday_slot(
        s_day, (s_h, s_m), e_day, (e_h, e_m),
        slot_id=slot_id, label=ANY_TIME_LABEL, color=color,
    )


def new_dated_slot(
    start: datetime,
    end: datetime,
    *,
    slot_id: Optional[str] = None,
    title: Optional[str] = None,
    label: Optional[str] = None,
    description: Optional[str] = None,
    notes: Optional[str] = None,
    slot_type: SlotType = SlotType.CLASS,
    color: Optional[str] = None,
) -> DatedSlot:
    """Erzeugt einen datierten Slot. label übernimmt title, wenn nicht gesetzt.

    Raises:
        InvalidRangeError: wenn start nach end liegt.
    """
    return DatedSlot(
        id=slot_id,
        start_date=start,
        end_date=end,
        title=title,
        label=label if label is not None else title,
        description=description,
        notes=notes,
        slot_type=slot_type,
        color=color,
    )
