"""Testdaten-Generator für Wochenpläne.

Erzeugt eine realistisch gefüllte Woche mit Kursen und PT-Terminen im
konfigurierten Tagesraster. Mit festem Seed reproduzierbar.

Eingebaute Sonderfälle:
  1. Später Kurs, der über Mitternacht in den Folgetag reicht
  2. Zwei Kurse mit identischer Startzeit (prüft stabile Sortierung)
"""

import random
from datetime import date, datetime, timedelta
from typing import Optional

from config.schema import EngineConfig
from models.slot import DatedSlot, SlotType, new_dated_slot
from models.weekday import start_of_week

# ─── Kurs-Kataloge ────────────────────────────────────────────────────────────

_CLASS_TITLES = [
    "HIIT", "Yoga Flow", "Spinning", "Pilates", "Boxing Basics",
    "Functional Training", "Zumba", "Mobility", "Kettlebell", "CrossFit",
]

_PT_TITLES = [
    "PT Session", "PT Assessment", "PT Follow-up",
]

_DURATIONS_MIN = [45, 60, 60, 90]


class SampleDataGenerator:
    """Generiert eine Beispielwoche auf Basis der EngineConfig."""

    def __init__(self, config: EngineConfig, seed: Optional[int] = None) -> None:
        self.config = config
        self.rng = random.Random(seed)
        self._counter = 0

    def _next_id(self) -> str:
        self._counter += 1
        return f"g{self._counter}"

    def _random_start(self, day: date, duration_min: int) -> datetime:
        """Zufälliger Beginn im Raster, so dass das Ende noch im Tagesraster liegt."""
        cc = self.config.calendar
        step = cc.time_step_minutes
        first = cc.day_start_hour * 60
        last = cc.day_end_hour * 60 - duration_min
        options = list(range(first, max(first, last) + 1, step))
        minutes = self.rng.choice(options)
        return datetime(day.year, day.month, day.day) + timedelta(minutes=minutes)

    def _make(self, day: date, title: str, slot_type: SlotType) -> DatedSlot:
        duration = self.rng.choice(_DURATIONS_MIN)
        start = self._random_start(day, duration)
        return new_dated_slot(
            start, start + timedelta(minutes=duration),
            slot_id=self._next_id(), title=title, slot_type=slot_type,
            description=f"{title} ({duration} min)",
        )

    def generate_week(self, week_of: Optional[date] = None,
                      classes_per_day: int = 2, pt_sessions: int = 3) -> list[DatedSlot]:
        """Erzeugt die Slots einer Woche (Mo–Sa Kurse, PT verteilt über Mo–Fr)."""
        monday = start_of_week(week_of or date.today())
        slots: list[DatedSlot] = []

        for offset in range(6):
            day = monday + timedelta(days=offset)
            for title in self.rng.sample(_CLASS_TITLES, classes_per_day):
                slots.append(self._make(day, title, SlotType.CLASS))

        for _ in range(pt_sessions):
            day = monday + timedelta(days=self.rng.randrange(5))
            slots.append(self._make(day, self.rng.choice(_PT_TITLES), SlotType.PT))

        # Sonderfall 1: Late-Night-Kurs Fr 22:00 → Sa 01:00
        friday = monday + timedelta(days=4)
        late = datetime(friday.year, friday.month, friday.day, 22, 0)
        slots.append(new_dated_slot(
            late, late + timedelta(hours=3),
            slot_id=self._next_id(), title="Late Night Open Gym",
        ))

        # Sonderfall 2: zwei Kurse mit gleicher Startzeit am Dienstag
        tuesday = monday + timedelta(days=1)
        same = datetime(tuesday.year, tuesday.month, tuesday.day, 12, 0)
        for title in ("Core Express", "Stretch Express"):
            slots.append(new_dated_slot(
                same, same + timedelta(minutes=30),
                slot_id=self._next_id(), title=title,
            ))

        return slots
