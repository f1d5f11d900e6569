from typing import Literal

from pydantic import BaseModel, Field, model_validator

from models.slot import SlotType


# ─── KALENDER-RASTER ───

class CalendarConfig(BaseModel):
    """Sichtbares Tagesraster des Kalenders und Zeit-Auswahl im Formular."""
    # Erste auswählbare Stunde des Tages
    day_start_hour: int = Field(5, ge=0, le=23,
        description="Erste Stunde im Raster")
    # Letzte auswählbare Stunde des Tages
    day_end_hour: int = Field(23, ge=0, le=23,
        description="Letzte Stunde im Raster")
    # Abstand der Zeit-Optionen in Minuten
    time_step_minutes: int = Field(30, ge=5, le=60,
        description="Abstand der Zeit-Optionen (Minuten)")
    # Wochenbeginn ist fest Montag (Wochenzählung und Raster hängen daran)
    week_starts_on: Literal["Monday"] = Field("Monday",
        description="Erster Tag der Woche")

    @model_validator(mode='after')
    def validate_day_window(self):
        """Prüfe dass das Tagesraster nicht leer ist und der Takt die Stunde teilt."""
        if self.day_start_hour >= self.day_end_hour:
            raise ValueError(
                f"day_start_hour ({self.day_start_hour}) muss vor "
                f"day_end_hour ({self.day_end_hour}) liegen")
        if 60 % self.time_step_minutes != 0:
            raise ValueError(
                f"time_step_minutes ({self.time_step_minutes}) muss 60 teilen")
        return self


# ─── WIEDERHOLUNG ───

class RepeatConfig(BaseModel):
    """Grenzen und ID-Präfixe für das Wiederholen einer Woche."""
    # Obergrenze für die Anzahl Folgewochen (104 = zwei Jahre)
    max_weeks: int = Field(104, ge=1, le=520,
        description="Max. Folgewochen pro Wiederholung")
    # Präfix der Vorschau-IDs ("preview-{woche}-{quell_id}")
    preview_prefix: str = Field("preview",
        description="Präfix der Vorschau-/Ausschluss-IDs")
    # Präfix der Übernahme-Batches ("rep1-{woche}-{quell_id}", "rep2-…")
    default_batch_prefix: str = Field("rep", min_length=1,
        description="Präfix der übernommenen Vorkommens-IDs")


# ─── SLOT-DEFAULTS ───

class SlotDefaults(BaseModel):
    """Standardwerte für neu angelegte Slots."""
    # Art neuer Slots (class / pt)
    default_slot_type: SlotType = Field(SlotType.CLASS)
    # Dauer, wenn beim Anlegen kein Ende angegeben wird
    default_duration_minutes: int = Field(60, ge=5, le=24 * 60,
        description="Standarddauer in Minuten")


# ─── GESAMT-CONFIG ───

class EngineConfig(BaseModel):
    """Gesamtkonfiguration der Wochenplan-Engine."""
    # Name des Studios / der Filiale (nur Anzeige)
    gym_name: str = Field("Muster-Studio",
        description="Name des Studios")
    # Kalender-Raster
    calendar: CalendarConfig = Field(default_factory=CalendarConfig)
    # Wiederholungs-Einstellungen
    repeat: RepeatConfig = Field(default_factory=RepeatConfig)
    # Defaults für neue Slots
    slots: SlotDefaults = Field(default_factory=SlotDefaults)
    # Datei, in der die CLI die Slots ablegt
    data_file: str = Field("output/slots.json",
        description="Pfad der Slot-Datei")
    # Log-Level der CLI
    log_level: str = Field("INFO",
        description="DEBUG / INFO / WARNING / ERROR")
