"""Gemeinsame Hilfsfunktionen für die Terminal-Ausgabe."""

from config.defaults import SLOT_COLORS
from config.schema import CalendarConfig
from engine.formatting import format_time
from models.slot import Slot


# ─── Zeit-Auswahl ─────────────────────────────────────────────────────────────

def time_options(cc: CalendarConfig) -> list[tuple[str, int, int]]:
    """Alle wählbaren Uhrzeiten als (Label, Stunde, Minute).

    Von day_start_hour:00 bis einschließlich day_end_hour:(60 - Takt),
    im Standardraster also 5:00 AM … 11:30 PM.
    """
    options: list[tuple[str, int, int]] = []
    for h in range(cc.day_start_hour, cc.day_end_hour + 1):
        for m in range(0, 60, cc.time_step_minutes):
            options.append((format_time(h, m), h, m))
    return options


# ─── Farbe ────────────────────────────────────────────────────────────────────

def slot_color(slot: Slot, all_slots: list[Slot]) -> str:
    """Rich-Farbe eines Slots: eigene Farbe, sonst zyklisch nach Listenposition."""
    if slot.color:
        return slot.color
    try:
        idx = next(i for i, s in enumerate(all_slots) if s.id == slot.id)
    except StopIteration:
        idx = 0
    return SLOT_COLORS[idx % len(SLOT_COLORS)]


# ─── Zelleninhalt-Formatierung ────────────────────────────────────────────────

def format_cell(slots: list[Slot], limit: int = 3) -> str:
    """Kurzliste für eine Kalenderzelle: bis zu `limit` Einträge, dann "+N more"."""
    if not slots:
        return ""
    lines = [
        f"{format_time(s.start_hour, s.start_minute)} {s.display_title}"
        for s in slots[:limit]
    ]
    if len(slots) > limit:
        lines.append(f"+{len(slots) - limit} more")
    return "\n".join(lines)
