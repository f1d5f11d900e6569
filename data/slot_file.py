"""SlotFile: Slot-Liste eines Wochenplans als JSON-Datei (für die CLI).

Die Engine selbst persistiert nichts; diese Datei ist nur der Ablageort der
Kommandozeile zwischen zwei Aufrufen.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from engine.store import ScheduleStore
from models.slot import Slot


class SlotFile(BaseModel):
    """Gespeicherter Wochenplan: Slots in Einfügereihenfolge + Metadaten."""

    slots: list[Slot] = []
    owner: str = "default"
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    data_version: str = "1.0"

    @classmethod
    def from_store(cls, store: ScheduleStore, owner: str = "default") -> "SlotFile":
        return cls(slots=store.all(), owner=owner)

    def to_store(self, batch_prefix: str = "rep") -> ScheduleStore:
        """Baut einen ScheduleStore mit den gespeicherten Slots auf."""
        return ScheduleStore(self.slots, batch_prefix=batch_prefix)

    def save_json(self, path: Path) -> None:
        """Speichert den Wochenplan als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        now = datetime.now(timezone.utc)
        updated = self.model_copy(update={
            "modified_at": now,
            "created_at": self.created_at or now,
        })
        with open(path, "w", encoding="utf-8") as f:
            f.write(updated.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "SlotFile":
        """Lädt einen Wochenplan aus einer JSON-Datei."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())
