"""JSON-Ablage für den Datenbestand.

Je Bestand eine Datei unter base_dir:

    foerderstunden.json   Förderstunden
    lehrkraefte.json      Lehrkräfte
    schueler.json         Schüler
    zeitslots.json        Zeitslots

Dazu Sicherung und Wiederherstellung als einzelne JSON-Datei.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, TypeVar

from pydantic import TypeAdapter, ValidationError

from config.defaults import default_time_slots
from config.schema import SlotDefinition
from models.school_data import SchoolData
from models.session import Session
from models.student import Student
from models.teacher import Teacher
from models.timeslot import TimeSlot
from scheduling.timeslots import TimeSlotRegistry
from scheduling.weeks import utc_now

logger = logging.getLogger(__name__)

T = TypeVar("T")

BACKUP_VERSION = "1.0"
REQUIRED_BACKUP_KEYS = ("sessions", "teachers", "students")


class StorageError(Exception):
    """Gespeicherte Daten oder Sicherungsdatei sind fehlerhaft."""


_ADAPTERS: dict[str, TypeAdapter] = {
    "sessions":   TypeAdapter(list[Session]),
    "teachers":   TypeAdapter(list[Teacher]),
    "students":   TypeAdapter(list[Student]),
    "time_slots": TypeAdapter(list[TimeSlot]),
}


class JsonStore:
    FILES = {
        "sessions":   "foerderstunden.json",
        "teachers":   "lehrkraefte.json",
        "students":   "schueler.json",
        "time_slots": "zeitslots.json",
    }

    def __init__(
        self,
        base_dir: Path,
        default_slots: Optional[list[SlotDefinition]] = None,
    ) -> None:
        self.base_dir = Path(base_dir)
        self.default_slots = default_slots

    def path_for(self, collection: str) -> Path:
        return self.base_dir / self.FILES[collection]

    # ─── Einzelne Bestände ───

    def _load(self, collection: str) -> list:
        path = self.path_for(collection)
        if not path.exists():
            return []
        try:
            items = _ADAPTERS[collection].validate_json(path.read_bytes())
        except ValidationError as e:
            raise StorageError(f"Datei {path} ist fehlerhaft:\n{e}") from e
        logger.debug(f"{len(items)} Einträge aus {path} geladen")
        return items

    def _save(self, collection: str, items: list) -> None:
        path = self.path_for(collection)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(_ADAPTERS[collection].dump_json(items, indent=2))
        logger.debug(f"{len(items)} Einträge nach {path} gespeichert")

    def load_sessions(self) -> list[Session]:
        return self._load("sessions")

    def save_sessions(self, sessions: list[Session]) -> None:
        self._save("sessions", sessions)

    def load_teachers(self) -> list[Teacher]:
        return self._load("teachers")

    def save_teachers(self, teachers: list[Teacher]) -> None:
        self._save("teachers", teachers)

    def load_students(self) -> list[Student]:
        return self._load("students")

    def save_students(self, students: list[Student]) -> None:
        self._save("students", students)

    def load_time_slots(self) -> list[TimeSlot]:
        """Lädt die Zeitslots. Ohne Datei wird das Standard-Raster angelegt."""
        if not self.path_for("time_slots").exists():
            definitions = self.default_slots or default_time_slots()
            slots = TimeSlotRegistry.from_definitions(definitions).slots
            self.save_time_slots(slots)
            logger.info(f"Standard-Zeitslots angelegt ({len(slots)} Slots)")
            return slots
        return self._load("time_slots")

    def save_time_slots(self, slots: list[TimeSlot]) -> None:
        self._save("time_slots", slots)

    # ─── Gesamtbestand ───

    def load(self) -> SchoolData:
        return SchoolData(
            teachers=self.load_teachers(),
            students=self.load_students(),
            sessions=self.load_sessions(),
            time_slots=self.load_time_slots(),
        )

    def save_all(self, data: SchoolData) -> None:
        self.save_teachers(data.teachers)
        self.save_students(data.students)
        self.save_sessions(data.sessions)
        self.save_time_slots(data.time_slots)

    def clear(self) -> None:
        """Löscht alle gespeicherten Bestände (die Zeitslots eingeschlossen)."""
        for collection in self.FILES:
            path = self.path_for(collection)
            if path.exists():
                path.unlink()
        logger.warning(f"Alle Daten in {self.base_dir} gelöscht")

    # ─── Sicherung ───

    def export_backup(self, path: Path, data: Optional[SchoolData] = None) -> Path:
        """Schreibt alle Bestände in eine einzelne JSON-Sicherungsdatei."""
        data = data or self.load()
        document: dict[str, Any] = {
            key: json.loads(_ADAPTERS[key].dump_json(getattr(data, key)))
            for key in _ADAPTERS
        }
        document["export_date"] = utc_now().isoformat()
        document["version"] = BACKUP_VERSION

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(document, f, ensure_ascii=False, indent=2)
        logger.info(f"Sicherung geschrieben: {path}")
        return path

    def import_backup(self, path: Path) -> SchoolData:
        """Liest eine Sicherung ein und ersetzt damit den gespeicherten Bestand.

        sessions, teachers und students sind Pflicht; fehlen die Zeitslots,
        bleiben die bisherigen erhalten.
        """
        path = Path(path)
        if not path.exists():
            raise StorageError(f"Sicherungsdatei nicht gefunden: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except json.JSONDecodeError as e:
            raise StorageError(f"Sicherungsdatei ist kein gültiges JSON: {e}") from e

        if not isinstance(document, dict):
            raise StorageError("Sicherungsdatei hat kein gültiges Format.")
        missing = [k for k in REQUIRED_BACKUP_KEYS if k not in document]
        if missing:
            raise StorageError(
                f"Sicherungsdatei unvollständig, es fehlt: {', '.join(missing)}"
            )

        try:
            restored = {
                key: _ADAPTERS[key].validate_python(document[key])
                for key in _ADAPTERS if key in document
            }
        except ValidationError as e:
            raise StorageError(f"Sicherungsdatei enthält ungültige Daten:\n{e}") from e

        if "time_slots" not in restored:
            restored["time_slots"] = self.load_time_slots()

        data = SchoolData(**restored)
        self.save_all(data)
        logger.info(
            f"Sicherung {path} eingespielt (Version {document.get('version', '?')})"
        )
        return data
