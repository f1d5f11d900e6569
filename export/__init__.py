"""Export-Modul: Terminal-Darstellung (Rich) für Wochenpläne."""

from export.tui_renderer import (
    build_table,
    render_day_rows,
    render_month_rows,
    render_preview_rows,
    render_repeat_summary,
    render_slot_rows,
    render_week_row,
)

__all__ = [
    "build_table",
    "render_day_rows",
    "render_month_rows",
    "render_preview_rows",
    "render_repeat_summary",
    "render_slot_rows",
    "render_week_row",
]
