"""Konfigurationsmanager: Laden, Speichern, Validieren und interaktives Bearbeiten.

Nutzt ruamel.yaml für YAML-Serialisierung mit Kommentaren.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.defaults import default_engine_config
from config.schema import CalendarConfig, EngineConfig, RepeatConfig

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML-KOMMENTAR-AUFBAU ───

_YAML_HEADER = f"""\
# ============================================
# Wochenplan-Engine — Konfiguration
# Version: 1.0
# Erstellt: {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "calendar": (
        "Kalender-Raster",
        "Sichtbare Stunden und Takt der Zeit-Auswahl.",
    ),
    "repeat": (
        "Wiederholung",
        "max_weeks begrenzt, wie weit eine Woche in die Zukunft kopiert werden darf.",
    ),
    "slots": (
        "Slot-Defaults",
        None,
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "engine_config.yaml"

    def __init__(self, path: Optional[Path] = None) -> None:
        if path is not None:
            self.DEFAULT_CONFIG = Path(path)

    def first_run_check(self) -> bool:
        """Gibt True zurück wenn noch keine Config existiert (Erstaufruf)."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> EngineConfig:
        """Lade Config aus YAML. Validiert automatisch via Pydantic."""
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {target}\n"
                f"Führen Sie 'python main.py config init' aus."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            return EngineConfig.model_validate(dict(raw or {}))
        except Exception as e:
            raise ValueError(
                f"Konfigurationsdatei ungültig: {target}\n"
                f"Pydantic-Fehler: {e}"
            ) from e

    def load_or_default(self) -> EngineConfig:
        """Wie load(), fällt aber ohne Datei auf die Standard-Konfiguration zurück."""
        if self.first_run_check():
            return default_engine_config()
        return self.load()

    # ─── Speichern ───

    def save(self, config: EngineConfig, path: Optional[Path] = None) -> None:
        """Speichere Config als YAML mit deutschen Kommentaren."""
        target = path or self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(data, f)

        console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")

    def _build_commented_yaml(self, config: EngineConfig) -> CommentedMap:
        """Baut die YAML-Struktur mit Kommentaren auf."""
        raw = json.loads(config.model_dump_json())
        cm = CommentedMap(raw)

        for field, (label, comment) in _SECTION_COMMENTS.items():
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )

        repeat_map = CommentedMap(cm["repeat"])
        repeat_map.yaml_add_eol_comment("Wochen", "max_weeks")
        cm["repeat"] = repeat_map

        return cm

    # ─── Interaktives Bearbeiten ───

    def edit_interactive(self, config: EngineConfig) -> EngineConfig:
        """Interaktives Bearbeitungsmenü für die Konfiguration."""
        while True:
            console.print()
            console.print(Panel(
                "[bold]Konfiguration bearbeiten[/bold]",
                border_style="cyan",
            ))
            console.print("  [bold]1.[/bold] Kalender-Raster")
            console.print("  [bold]2.[/bold] Wiederholung")
            console.print("  [bold]0.[/bold] Speichern & Zurück")

            choice = Prompt.ask("\nAuswahl", default="0")

            if choice == "1":
                config = config.model_copy(
                    update={"calendar": self._edit_calendar(config.calendar)}
                )
            elif choice == "2":
                config = config.model_copy(
                    update={"repeat": self._edit_repeat(config.repeat)}
                )
            elif choice == "0":
                self.save(config)
                break
            else:
                console.print("[yellow]Ungültige Auswahl.[/yellow]")

        return config

    def _edit_calendar(self, cc: CalendarConfig) -> CalendarConfig:
        """Tagesraster interaktiv anpassen. Ungültige Eingaben werden erneut abgefragt."""
        while True:
            start = IntPrompt.ask("Erste Stunde", default=cc.day_start_hour)
            end = IntPrompt.ask("Letzte Stunde", default=cc.day_end_hour)
            step = IntPrompt.ask("Takt (Minuten)", default=cc.time_step_minutes)
            try:
                return CalendarConfig.model_validate({
                    **cc.model_dump(),
                    "day_start_hour": start,
                    "day_end_hour": end,
                    "time_step_minutes": step,
                })
            except ValidationError as e:
                console.print(f"[yellow]Ungültiges Tagesraster:[/yellow] {escape(str(e))}")

    def _edit_repeat(self, rc: RepeatConfig) -> RepeatConfig:
        """Wiederholungs-Limit interaktiv anpassen. Ungültige Eingaben werden erneut abgefragt."""
        while True:
            max_weeks = IntPrompt.ask("Max. Folgewochen", default=rc.max_weeks)
            try:
                return RepeatConfig.model_validate({**rc.model_dump(), "max_weeks": max_weeks})
            except ValidationError as e:
                console.print(f"[yellow]Ungültiges Wochen-Limit:[/yellow] {escape(str(e))}")
