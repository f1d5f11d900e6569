"""ScheduleStore – maßgebliche, geordnete Slot-Sammlung eines Wochenplans.

Jede Schreiboperation läuft unter einem Lock und ersetzt die interne Liste
als Ganzes; Leser sehen nie eine halb geänderte Liste. Lesezugriffe liefern
Kopien (Snapshots).
"""

import itertools
import logging
import threading
from datetime import date, datetime
from typing import Collection, Iterable, Iterator, Optional, Union

from engine.occurrences import DEFAULT_IDS, OccurrenceIds, generate_occurrences
from engine.resolver import slots_for_date, slots_for_weekday, slots_in_week
from models.errors import DuplicateIdError, NotFoundError
from models.slot import DatedSlot, Slot
from models.weekday import Weekday

logger = logging.getLogger(__name__)


class ScheduleStore:
    """Verwaltet die Slots eines Wochenplans (anlegen, ändern, löschen per ID)."""

    def __init__(self, slots: Iterable[Slot] = (), id_prefix: str = "s",
                 batch_prefix: str = "rep") -> None:
        self._lock = threading.Lock()
        self._slots: list[Slot] = []
        self._id_prefix = id_prefix
        self._batch_prefix = batch_prefix
        self._counter = itertools.count(1)
        self._batches = itertools.count(1)
        if slots:
            self.add_batch(slots)

    # ─── ID-Vergabe ───

    def _next_id(self, taken: set[str]) -> str:
        while True:
            candidate = f"{self._id_prefix}{next(self._counter)}"
            if candidate not in taken:
                return candidate

    def _next_batch(self, taken: set[str]) -> str:
        # Batch-Präfix darf mit keiner vorhandenen ID kollidieren
        while True:
            batch = f"{self._batch_prefix}{next(self._batches)}"
            if not any(i.startswith(batch + "-") for i in taken):
                return batch

    def _assign_ids(self, slots: Iterable[Slot], taken: set[str]) -> list[Slot]:
        result: list[Slot] = []
        for slot in slots:
            if slot.id is None:
                slot = slot.with_id(self._next_id(taken))
            elif slot.id in taken:
                raise DuplicateIdError(slot.id)
            taken.add(slot.id)
            result.append(slot)
        return result

    # ─── Schreiben ───

    def add(self, slot: Slot) -> Slot:
        """Fügt einen Slot an. Ohne ID wird eine eindeutige ID vergeben.

        Raises:
            DuplicateIdError: wenn die mitgegebene ID schon existiert.
        """
        return self.add_batch([slot])[0]

    def add_batch(self, slots: Iterable[Slot]) -> list[Slot]:
        """Fügt mehrere Slots atomar an: entweder alle oder keiner."""
        with self._lock:
            taken = {s.id for s in self._slots}
            added = self._assign_ids(slots, taken)
            self._slots = self._slots + added
        logger.debug(f"ScheduleStore: {len(added)} Slot(s) hinzugefügt")
        return added

    def update(self, slot_id: str, slot: Slot) -> Slot:
        """Ersetzt den Slot mit `slot_id` an gleicher Position (ID bleibt erhalten).

        Raises:
            NotFoundError: unbekannte ID.
        """
        with self._lock:
            for idx, existing in enumerate(self._slots):
                if existing.id == slot_id:
                    updated = slot.with_id(slot_id)
                    new_list = list(self._slots)
                    new_list[idx] = updated
                    self._slots = new_list
                    return updated
        raise NotFoundError(slot_id)

    def remove(self, slot_id: str) -> Slot:
        """Entfernt den Slot und gibt ihn zurück.

        Raises:
            NotFoundError: unbekannte ID.
        """
        with self._lock:
            for existing in self._slots:
                if existing.id == slot_id:
                    self._slots = [s for s in self._slots if s.id != slot_id]
                    return existing
        raise NotFoundError(slot_id)

    # ─── Lesen ───

    def get(self, slot_id: str) -> Slot:
        for s in self._slots:
            if s.id == slot_id:
                return s
        raise NotFoundError(slot_id)

    def all(self) -> list[Slot]:
        """Snapshot aller Slots in Einfügereihenfolge."""
        return list(self._slots)

    def slots_for_weekday(self, day: Union[Weekday, str]) -> list[Slot]:
        return slots_for_weekday(self._slots, day)

    def slots_for_date(self, day: Union[date, datetime],
                       include_templates: bool = False) -> list[Slot]:
        return slots_for_date(self._slots, day, include_templates)

    def slots_in_week(self, week_start: Union[date, datetime]) -> list[DatedSlot]:
        return slots_in_week(self._slots, week_start)

    # ─── Wiederholen ───

    def repeat_week(
        self,
        week_start: Union[date, datetime],
        horizon: Union[date, datetime],
        excluded_source_ids: Collection[str] = (),
        excluded_occurrence_ids: Collection[str] = (),
        *,
        max_weeks: Optional[int] = None,
        ids: OccurrenceIds = DEFAULT_IDS,
    ) -> list[DatedSlot]:
        """Erzeugt die Vorkommen der Quellwoche und übernimmt sie in einem Batch.

        Jede Übernahme bekommt ein eigenes Batch-Präfix, damit wiederholtes
        Wiederholen derselben Woche keine ID-Kollision erzeugt.
        """
        snapshot = self.all()
        batch = self._next_batch({s.id for s in snapshot})
        new_slots = generate_occurrences(
            snapshot, week_start, horizon,
            excluded_source_ids, excluded_occurrence_ids,
            max_weeks=max_weeks, batch=batch, ids=ids,
        )
        added = self.add_batch(new_slots)
        logger.info(f"ScheduleStore: {len(added)} wiederholte Slot(s) übernommen (Batch {batch})")
        return added

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[Slot]:
        return iter(self.all())

    def __contains__(self, slot_id: object) -> bool:
        return any(s.id == slot_id for s in self._slots)

    def __repr__(self) -> str:
        return f"ScheduleStore({len(self._slots)} slots)"


class StoreRegistry:
    """Ein ScheduleStore pro Besitzer (z.B. Studio / Filiale).

    Schreibzugriffe werden damit pro Besitzer serialisiert.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._stores: dict[str, ScheduleStore] = {}

    def get(self, owner: str) -> ScheduleStore:
        """Store des Besitzers; wird beim ersten Zugriff angelegt."""
        with self._lock:
            store = self._stores.get(owner)
            if store is None:
                store = ScheduleStore()
                self._stores[owner] = store
            return store

    def owners(self) -> list[str]:
        with self._lock:
            return sorted(self._stores)

    def drop(self, owner: str) -> bool:
        """Entfernt den Store. Gibt True zurück wenn einer existierte."""
        with self._lock:
            return self._stores.pop(owner, None) is not None
