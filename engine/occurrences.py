"""Wiederholung einer Quellwoche über mehrere Folgewochen (Occurrence-Generator).

Ablauf:
  1. Kalenderwochen zwischen Quellwoche und Enddatum zählen (Montag-basiert).
  2. Quell-Slots der Woche sammeln, ausgeschlossene Quell-IDs entfernen.
  3. Für jede Woche w = 1..N und jeden Quell-Slot: Daten um w Wochen
     verschieben, alles nach dem Enddatum verwerfen (Teilwoche am Ende ist
     gewollt), einzeln ausgeschlossene Vorkommen überspringen.

Zwei Ausschluss-Ebenen:
  - excluded_source_ids:     "diesen Slot gar nicht wiederholen"
  - excluded_occurrence_ids: "alles wiederholen außer diesem einen Vorkommen"
    (z.B. Feiertag). Die Vorkommens-ID ist eine reine Funktion von
    (Woche, Quell-ID), daher passen Vorschau und Übernahme zusammen.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Collection, Iterable, Optional, Union

from engine.formatting import format_day, slot_time_range, week_label
from engine.resolver import slots_in_week
from models.errors import EmptySelectionError, HorizonTooFarError, NoOccurrencesError
from models.slot import DatedSlot, Slot
from models.weekday import day_end, start_of_week

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime]


class OccurrenceIds:
    """Kodierung der deterministischen Vorkommens-IDs.

    occurrence_id(w, id) wird für Vorschau und Ausschluss verwendet,
    commit_id(w, id, batch) für die tatsächlich übernommenen Slots.
    Alternative Kodierungen: Unterklasse bilden und an den Generator übergeben.
    """

    def __init__(self, preview_prefix: str = "preview"):
        self.preview_prefix = preview_prefix

    def occurrence_id(self, week: int, source_id: str) -> str:
        return f"{self.preview_prefix}-{week}-{source_id}"

    def commit_id(self, week: int, source_id: str, batch: str) -> str:
        return f"{batch}-{week}-{source_id}"


DEFAULT_IDS = OccurrenceIds()


def occurrence_id(week: int, source_id: str) -> str:
    """Vorkommens-ID mit der Standard-Kodierung ("preview-{w}-{id}")."""
    return DEFAULT_IDS.occurrence_id(week, source_id)


@dataclass(frozen=True)
class Occurrence:
    """Ein berechnetes Vorkommen eines Quell-Slots in Woche `week`."""

    week: int
    source_id: str
    occurrence_id: str
    slot: DatedSlot


# ─── Wochenarithmetik ─────────────────────────────────────────────────────────

def calendar_weeks_between(start: DateLike, end: DateLike) -> int:
    """Anzahl Montags-Wochengrenzen zwischen zwei Daten (negativ wenn end < start)."""
    return (start_of_week(end) - start_of_week(start)).days // 7


def normalize_horizon(horizon: DateLike) -> datetime:
    """Enddatum inklusiv: ein reines Datum zählt bis 23:59:59.999999."""
    if isinstance(horizon, datetime):
        return horizon
    return day_end(horizon)


# ─── Projektion ───────────────────────────────────────────────────────────────

def _project(
    slots: Iterable[Slot],
    week_start: DateLike,
    horizon: DateLike,
    excluded_source_ids: Collection[str],
    max_weeks: Optional[int],
    batch: str,
    ids: OccurrenceIds,
) -> tuple[int, list[Occurrence]]:
    """Alle Kandidaten inkl. einzeln ausgeschlossener Vorkommen."""
    monday = start_of_week(week_start)
    limit = normalize_horizon(horizon)

    total_weeks = calendar_weeks_between(monday, limit)
    if total_weeks <= 0:
        raise NoOccurrencesError(
            f"Enddatum {limit.date().isoformat()} muss mindestens eine Woche "
            f"nach der Quellwoche ({monday.isoformat()}) liegen."
        )
    if max_weeks is not None and total_weeks > max_weeks:
        raise HorizonTooFarError(total_weeks, max_weeks)

    excluded = set(excluded_source_ids)
    sources = [s for s in slots_in_week(slots, monday) if s.id not in excluded]
    if not sources:
        raise EmptySelectionError("Keine Slots zum Wiederholen ausgewählt.")
    for s in sources:
        if s.id is None:
            raise ValueError("Quell-Slot ohne ID kann nicht wiederholt werden")

    candidates: list[Occurrence] = []
    for w in range(1, total_weeks + 1):
        for src in sources:
            new_start = src.start_date + timedelta(weeks=w)
            if new_start > limit:
                continue
            candidates.append(Occurrence(
                week=w,
                source_id=src.id,
                occurrence_id=ids.occurrence_id(w, src.id),
                slot=src.shifted(w, ids.commit_id(w, src.id, batch)),
            ))
    return total_weeks, candidates


def project_occurrences(
    slots: Iterable[Slot],
    week_start: DateLike,
    horizon: DateLike,
    excluded_source_ids: Collection[str] = (),
    excluded_occurrence_ids: Collection[str] = (),
    *,
    max_weeks: Optional[int] = None,
    batch: str = "rep",
    ids: OccurrenceIds = DEFAULT_IDS,
) -> list[Occurrence]:
    """Berechnet alle Vorkommen der Quellwoche bis einschließlich `horizon`.

    Args:
        slots: Slot-Sammlung; verwendet werden nur datierte Slots, deren
            Beginn in der Woche von `week_start` liegt.
        week_start: Montag der Quellwoche (andere Tage werden auf Montag normalisiert).
        horizon: Inklusive Obergrenze für den Beginn eines Vorkommens.
        excluded_source_ids: Quell-Slots, die gar nicht wiederholt werden.
        excluded_occurrence_ids: Einzelne Vorkommens-IDs (siehe occurrence_id).
        max_weeks: Optionales Limit; Überschreitung → HorizonTooFarError.
        batch: Präfix für die Commit-IDs der erzeugten Slots.
        ids: ID-Kodierung.

    Raises:
        NoOccurrencesError: horizon liegt nicht nach der Quellwoche.
        EmptySelectionError: nach Ausschluss kein Quell-Slot übrig.
        HorizonTooFarError: mehr als max_weeks Wochen angefragt.
    """
    skip = set(excluded_occurrence_ids)
    total_weeks, candidates = _project(
        slots, week_start, horizon, excluded_source_ids, max_weeks, batch, ids
    )
    result = [o for o in candidates if o.occurrence_id not in skip]
    logger.info(
        f"Wiederholung ab {start_of_week(week_start).isoformat()}: "
        f"{len(result)} Vorkommen über {total_weeks} Woche(n) "
        f"({len(candidates) - len(result)} einzeln ausgeschlossen)"
    )
    return result


def generate_occurrences(
    slots: Iterable[Slot],
    week_start: DateLike,
    horizon: DateLike,
    excluded_source_ids: Collection[str] = (),
    excluded_occurrence_ids: Collection[str] = (),
    *,
    max_weeks: Optional[int] = None,
    batch: str = "rep",
    ids: OccurrenceIds = DEFAULT_IDS,
) -> list[DatedSlot]:
    """Wie project_occurrences, liefert aber nur die neuen Slots (noch nicht gespeichert)."""
    return [
        o.slot for o in project_occurrences(
            slots, week_start, horizon, excluded_source_ids, excluded_occurrence_ids,
            max_weeks=max_weeks, batch=batch, ids=ids,
        )
    ]


# ─── Vorschau pro Woche ───────────────────────────────────────────────────────

@dataclass
class PreviewEntry:
    """Ein Vorkommen in der Vorschau."""

    id: str
    title: str
    day: str
    time: str
    source_id: str
    excluded: bool = False


@dataclass
class PreviewWeek:
    """Alle Vorkommen einer Folgewoche."""

    week_number: int
    week_label: str
    occurrences: list[PreviewEntry] = field(default_factory=list)

    @property
    def included_count(self) -> int:
        return sum(1 for o in self.occurrences if not o.excluded)

    def to_dict(self) -> dict:
        return {
            "weekNumber": self.week_number,
            "weekLabel": self.week_label,
            "occurrences": [
                {
                    "id": o.id,
                    "title": o.title,
                    "day": o.day,
                    "time": o.time,
                    "sourceId": o.source_id,
                    "excluded": o.excluded,
                }
                for o in self.occurrences
            ],
        }


def preview_weeks(
    slots: Iterable[Slot],
    week_start: DateLike,
    horizon: DateLike,
    excluded_source_ids: Collection[str] = (),
    excluded_occurrence_ids: Collection[str] = (),
    *,
    max_weeks: Optional[int] = None,
    ids: OccurrenceIds = DEFAULT_IDS,
) -> list[PreviewWeek]:
    """Vorschau gruppiert nach Woche.

    Einzeln ausgeschlossene Vorkommen bleiben sichtbar (excluded=True), damit
    sie in der Oberfläche wieder aktiviert werden können. Wochen ohne
    Vorkommen entfallen.
    """
    skip = set(excluded_occurrence_ids)
    monday = start_of_week(week_start)
    _, candidates = _project(
        slots, monday, horizon, excluded_source_ids, max_weeks, "preview", ids
    )

    weeks: dict[int, PreviewWeek] = {}
    for occ in candidates:
        pw = weeks.get(occ.week)
        if pw is None:
            pw = PreviewWeek(
                week_number=occ.week,
                week_label=week_label(monday + timedelta(weeks=occ.week)),
            )
            weeks[occ.week] = pw
        pw.occurrences.append(PreviewEntry(
            id=occ.occurrence_id,
            title=occ.slot.display_title,
            day=format_day(occ.slot.start_date),
            time=slot_time_range(occ.slot),
            source_id=occ.source_id,
            excluded=occ.occurrence_id in skip,
        ))
    return [weeks[w] for w in sorted(weeks)]
