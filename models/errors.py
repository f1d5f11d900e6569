"""Fehlerklassen der Wochenplan-Engine.

Alle Fehler erben von ScheduleError, damit Aufrufer (CLI, Batch-Jobs)
gezielt verzweigen können. Keine ValueError-Unterklassen, damit Pydantic
sie aus Validatoren unverändert durchreicht.
"""


class ScheduleError(Exception):
    """Basisklasse aller Engine-Fehler."""


class InvalidRangeError(ScheduleError):
    """Beginn liegt nach dem Ende (außerhalb des "Any Time"-Sentinels)."""


class NoOccurrencesError(ScheduleError):
    """Enddatum liegt nicht mindestens eine Kalenderwoche nach der Quellwoche."""


class EmptySelectionError(ScheduleError):
    """Nach dem Ausschluss bleibt kein Quell-Slot zum Wiederholen übrig."""


class HorizonTooFarError(ScheduleError):
    """Angefragter Zeitraum überschreitet das konfigurierte Wochen-Limit."""

    def __init__(self, total_weeks: int, max_weeks: int):
        self.total_weeks = total_weeks
        self.max_weeks = max_weeks
        super().__init__(
            f"{total_weeks} Wochen angefragt, erlaubt sind höchstens {max_weeks}."
        )


class NotFoundError(ScheduleError):
    """update/remove auf eine unbekannte Slot-ID."""

    def __init__(self, slot_id: str):
        self.slot_id = slot_id
        super().__init__(f"Slot nicht gefunden: {slot_id}")


class DuplicateIdError(ScheduleError):
    """Slot-ID existiert bereits im Store."""

    def __init__(self, slot_id: str):
        self.slot_id = slot_id
        super().__init__(f"Slot-ID bereits vergeben: {slot_id}")
