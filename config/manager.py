"""Lesen und Schreiben der Förderplan-Konfiguration (YAML via ruamel.yaml).

Die Datei trägt Abschnittskommentare, damit sie sich von Hand pflegen lässt.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.defaults import default_app_config
from config.schema import AppConfig

logger = logging.getLogger(__name__)
console = Console()

yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


_FILE_BANNER = (
    "# ============================================\n"
    "# Förderplan — Konfiguration\n"
    "# Geschrieben am {stamp}\n"
    "# ============================================\n"
)

# Kommentar über dem jeweiligen Schlüssel
_KEY_NOTES = {
    "day_names": "Wochentage ab Montag. Verfügbarkeiten der Lehrkräfte verwenden diese Namen.",
    "ban_days": "Sperrdauer in Tagen, nachdem ein Schüler nicht erschienen ist.",
    "allow_overlapping_slots": "false = überlappende aktive Zeitslots werden abgelehnt.",
    "default_time_slots": "Startraster; spätere Änderungen erfolgen über 'slots'-Befehle.",
}


class ConfigManager:
    """Verwaltet eine Konfigurationsdatei (Standard: config/foerder_config.yaml)."""

    DEFAULT_CONFIG = Path("config") / "foerder_config.yaml"

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else self.DEFAULT_CONFIG

    def first_run_check(self) -> bool:
        """True solange noch keine Konfigurationsdatei angelegt wurde."""
        return not self.path.exists()

    def load(self) -> AppConfig:
        if not self.path.exists():
            raise FileNotFoundError(
                f"Keine Konfiguration unter {self.path}. "
                f"Bitte zuerst 'python main.py setup' ausführen."
            )
        with open(self.path, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            config = AppConfig.model_validate(dict(raw or {}))
        except ValidationError as e:
            raise ValueError(f"Konfiguration {self.path} ist ungültig:\n{e}") from e
        logger.debug(f"Konfiguration aus {self.path} geladen")
        return config

    def load_or_default(self) -> AppConfig:
        """Wie load(); ohne Datei gilt die Standard-Konfiguration."""
        if self.first_run_check():
            logger.debug("Keine Konfigurationsdatei, verwende Standardwerte")
            return default_app_config()
        return self.load()

    def save(self, config: AppConfig) -> Path:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tree = CommentedMap(json.loads(config.model_dump_json()))
        for key, note in _KEY_NOTES.items():
            if key in tree:
                tree.yaml_set_comment_before_after_key(key, before=f"\n{note}")

        with open(self.path, "w", encoding="utf-8") as f:
            f.write(_FILE_BANNER.format(stamp=date.today().isoformat()) + "\n")
            yaml.dump(tree, f)

        console.print(f"[green]✓[/green] Konfiguration gespeichert: {self.path}")
        return self.path

    def edit_interactive(self, config: AppConfig) -> AppConfig:
        """Fragt Schulname, Sperrdauer und Slot-Überlappung ab."""
        console.print(Panel("[bold]Konfiguration bearbeiten[/bold]", border_style="cyan"))
        answers = {
            "school_name": Prompt.ask("Name der Schule", default=config.school_name),
            "ban_days": IntPrompt.ask("Sperrdauer nach Nicht-Erscheinen (Tage)",
                                      default=config.ban_days),
            "allow_overlapping_slots": Confirm.ask("Überlappende Zeitslots zulassen?",
                                                   default=config.allow_overlapping_slots),
        }
        return AppConfig.model_validate({**config.model_dump(), **answers})
