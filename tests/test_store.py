"""Tests für ScheduleStore, StoreRegistry und die Slot-Datei."""

import threading
from datetime import date, datetime

import pytest

from data.slot_file import SlotFile
from engine.store import ScheduleStore, StoreRegistry
from models.errors import (
    DuplicateIdError,
    EmptySelectionError,
    NoOccurrencesError,
    NotFoundError,
)
from models.slot import DatedSlot, WeekdaySlot, new_dated_slot, new_weekday_slot


def _slot(day: int, hour: int, slot_id=None, title=None) -> DatedSlot:
    return new_dated_slot(datetime(2024, 1, day, hour), datetime(2024, 1, day, hour + 1),
                          slot_id=slot_id, title=title)


# ─── CRUD ─────────────────────────────────────────────────────────────────────

class TestScheduleStoreCrud:
    def test_add_assigns_id(self):
        """Ohne ID vergibt der Store eine eindeutige ID."""
        store = ScheduleStore()
        a = store.add(_slot(1, 6))
        b = store.add(_slot(1, 8))
        assert a.id and b.id and a.id != b.id
        assert [s.id for s in store.all()] == [a.id, b.id]

    def test_add_keeps_given_id(self):
        store = ScheduleStore()
        assert store.add(_slot(1, 6, slot_id="x")).id == "x"
        assert "x" in store

    def test_generated_id_skips_taken(self):
        store = ScheduleStore([_slot(1, 6, slot_id="s1")])
        assert store.add(_slot(1, 8)).id != "s1"

    def test_duplicate_id_rejected(self):
        store = ScheduleStore([_slot(1, 6, slot_id="x")])
        with pytest.raises(DuplicateIdError):
            store.add(_slot(2, 6, slot_id="x"))
        assert len(store) == 1

    def test_update_in_place(self):
        """update ersetzt an gleicher Position und behält die ID."""
        store = ScheduleStore([_slot(1, 6, "a"), _slot(1, 8, "b"), _slot(1, 10, "c")])
        replacement = _slot(2, 12, slot_id="ignored", title="Neu")
        updated = store.update("b", replacement)
        assert updated.id == "b"
        assert [s.id for s in store.all()] == ["a", "b", "c"]
        assert store.get("b").title == "Neu"

    def test_update_can_switch_mode(self):
        store = ScheduleStore([_slot(1, 6, "a")])
        store.update("a", new_weekday_slot("Monday", "06:00", end_time="07:00"))
        assert isinstance(store.get("a"), WeekdaySlot)

    def test_update_unknown_raises(self):
        store = ScheduleStore([_slot(1, 6, "a")])
        with pytest.raises(NotFoundError) as exc:
            store.update("nope", _slot(1, 7))
        assert exc.value.slot_id == "nope"
        assert store.get("a").start_date.hour == 6

    def test_remove(self):
        store = ScheduleStore([_slot(1, 6, "a"), _slot(1, 8, "b")])
        removed = store.remove("a")
        assert removed.id == "a"
        assert [s.id for s in store.all()] == ["b"]

    def test_remove_unknown_raises(self):
        store = ScheduleStore()
        with pytest.raises(NotFoundError):
            store.remove("nope")

    def test_all_returns_snapshot(self):
        store = ScheduleStore([_slot(1, 6, "a")])
        snapshot = store.all()
        store.add(_slot(1, 8, "b"))
        assert len(snapshot) == 1
        snapshot.clear()
        assert len(store) == 2


# ─── ATOMARITÄT ───────────────────────────────────────────────────────────────

class TestAtomicBatch:
    def test_batch_all_or_nothing(self):
        """Ein Duplikat im Batch → keiner der Slots wird übernommen."""
        store = ScheduleStore([_slot(1, 6, "a")])
        with pytest.raises(DuplicateIdError):
            store.add_batch([_slot(2, 6, "n1"), _slot(2, 8, "a"), _slot(2, 10, "n2")])
        assert [s.id for s in store.all()] == ["a"]

    def test_duplicate_within_batch(self):
        store = ScheduleStore()
        with pytest.raises(DuplicateIdError):
            store.add_batch([_slot(2, 6, "d"), _slot(2, 8, "d")])
        assert len(store) == 0

    def test_concurrent_adds(self):
        """Parallele Schreiber verlieren keine Slots und erzeugen keine Doppel-IDs."""
        store = ScheduleStore()

        def worker():
            for _ in range(50):
                store.add(_slot(3, 9))

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        ids = [s.id for s in store.all()]
        assert len(ids) == 200
        assert len(set(ids)) == 200


# ─── WIEDERHOLEN ──────────────────────────────────────────────────────────────

class TestRepeatWeek:
    def _store(self) -> ScheduleStore:
        return ScheduleStore([
            _slot(1, 6, "a", "Morning"),
            _slot(3, 18, "b", "Evening"),
        ])

    def test_commits_occurrences(self):
        store = self._store()
        added = store.repeat_week(date(2024, 1, 1), date(2024, 1, 21))
        assert len(added) == 4
        assert len(store) == 6
        assert store.slots_for_date(date(2024, 1, 15))[0].title == "Morning"

    def test_repeat_twice_no_id_collision(self):
        """Zweite Übernahme derselben Woche bekommt ein neues Batch-Präfix."""
        store = self._store()
        first = store.repeat_week(date(2024, 1, 1), date(2024, 1, 8))
        second = store.repeat_week(date(2024, 1, 1), date(2024, 1, 8))
        assert first[0].id != second[0].id
        assert len(store) == 4

    def test_batch_prefix_configurable(self):
        store = ScheduleStore([_slot(1, 6, "a")], batch_prefix="kopie")
        added = store.repeat_week(date(2024, 1, 1), date(2024, 1, 8))
        assert [s.id for s in added] == ["kopie1-1-a"]

    def test_exclusions_forwarded(self):
        store = self._store()
        added = store.repeat_week(date(2024, 1, 1), date(2024, 1, 21),
                                  excluded_source_ids=["b"],
                                  excluded_occurrence_ids=["preview-2-a"])
        assert [s.start_date.day for s in added] == [8]

    def test_error_leaves_store_untouched(self):
        store = self._store()
        with pytest.raises(EmptySelectionError):
            store.repeat_week(date(2024, 1, 1), date(2024, 2, 1),
                              excluded_source_ids=["a", "b"])
        with pytest.raises(NoOccurrencesError):
            store.repeat_week(date(2024, 1, 1), date(2024, 1, 1))
        assert len(store) == 2

    def test_resolver_passthroughs(self):
        store = ScheduleStore([
            _slot(1, 6, "a"),
            new_weekday_slot("Tuesday", "07:00", end_time="08:00", slot_id="t"),
        ])
        assert [s.id for s in store.slots_for_weekday("Monday")] == ["a"]
        assert [s.id for s in store.slots_for_weekday("Tuesday")] == ["t"]
        assert [s.id for s in store.slots_in_week(date(2024, 1, 3))] == ["a"]


# ─── REGISTRY ─────────────────────────────────────────────────────────────────

class TestStoreRegistry:
    def test_one_store_per_owner(self):
        reg = StoreRegistry()
        berlin = reg.get("berlin")
        assert reg.get("berlin") is berlin
        assert reg.get("hamburg") is not berlin
        assert reg.owners() == ["berlin", "hamburg"]

    def test_drop(self):
        reg = StoreRegistry()
        reg.get("berlin").add(_slot(1, 6))
        assert reg.drop("berlin")
        assert not reg.drop("berlin")
        assert len(reg.get("berlin")) == 0


# ─── SLOT-DATEI ───────────────────────────────────────────────────────────────

class TestSlotFile:
    def test_save_and_load(self, tmp_path):
        """Gemischte Slot-Arten überstehen Speichern und Laden."""
        store = ScheduleStore([
            _slot(1, 6, "a", "Morning"),
            new_weekday_slot("Friday", "17:00", end_time="19:30", slot_id="w", label="Fr"),
        ])
        path = tmp_path / "sub" / "slots.json"
        SlotFile.from_store(store).save_json(path)

        loaded = SlotFile.load_json(path)
        assert loaded.created_at is not None
        restored = loaded.to_store()
        assert [s.id for s in restored.all()] == ["a", "w"]
        assert isinstance(restored.get("a"), DatedSlot)
        assert isinstance(restored.get("w"), WeekdaySlot)
        assert restored.get("w").end_minute == 30

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            SlotFile.load_json(tmp_path / "fehlt.json")
