"""Beispieldaten für den ersten Start.

Zwei Lehrkräfte (Mathematik, Physik) und zwei Schüler, damit die Oberfläche
sofort ausprobiert werden kann. Die Verfügbarkeiten werden aus den aktiven
Zeitslots gewählt, damit sie zum Slot-Vokabular passen.
"""

from typing import Optional, Sequence

from config.defaults import WEEKDAY_NAMES
from models.school_data import SchoolData
from models.student import Student
from models.teacher import Teacher
from models.timeslot import TimeSlot

# (Wochentag-Index, Slot-Index im aktiven Raster)
_AHMET_SLOTS = [(0, 0), (0, 1), (1, 2), (1, 6), (2, 0), (2, 5)]
_AYSE_SLOTS = [(0, 3), (0, 7), (3, 1), (3, 8)]

_STUDENTS = [
    ("1", "Ali Veli", "9-A", "001"),
    ("2", "Fatma Yılmaz", "10-B", "002"),
]


class SampleDataGenerator:
    """Erzeugt den Beispiel-Datenbestand für ein gegebenes Zeitslot-Raster."""

    def __init__(
        self, time_slots: list[TimeSlot], day_names: Optional[Sequence[str]] = None
    ) -> None:
        self.time_slots = time_slots
        self.day_names = list(day_names or WEEKDAY_NAMES)
        active = sorted((s for s in time_slots if s.is_active), key=lambda s: s.start_time)
        self._labels = [s.label for s in active]

    def _hours(self, picks: list[tuple[int, int]]) -> dict[str, list[str]]:
        """Übersetzt (Tag, Slot-Index) in available_hours; zu große Indizes entfallen."""
        hours: dict[str, list[str]] = {}
        for day_idx, slot_idx in picks:
            if slot_idx >= len(self._labels):
                continue
            hours.setdefault(self.day_names[day_idx], []).append(self._labels[slot_idx])
        return hours

    def teachers(self) -> list[Teacher]:
        return [
            Teacher(id="1", name="Ahmet Hoca", subject="Mathematik",
                    email="ahmet@schule.de", available_hours=self._hours(_AHMET_SLOTS)),
            Teacher(id="2", name="Ayşe Öğretmen", subject="Physik",
                    email="ayse@schule.de", available_hours=self._hours(_AYSE_SLOTS)),
        ]

    def students(self) -> list[Student]:
        return [
            Student(id=sid, name=name, class_name=cls, student_number=number)
            for sid, name, cls, number in _STUDENTS
        ]

    def generate(self) -> SchoolData:
        return SchoolData(
            teachers=self.teachers(),
            students=self.students(),
            sessions=[],
            time_slots=list(self.time_slots),
        )

    def print_summary(self, data: SchoolData) -> None:
        """Gibt eine Rich-Tabelle mit den erzeugten Beispieldaten aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title="Beispieldaten", box=box.ROUNDED)
        table.add_column("Kategorie", style="bold cyan")
        table.add_column("Name")
        table.add_column("Details")

        for t in data.teachers:
            table.add_row("Lehrkraft", t.name,
                          f"{t.subject}, {t.weekly_slot_count} Slots/Woche")
        for s in data.students:
            table.add_row("Schüler", s.name, f"Klasse {s.class_name}, Nr. {s.student_number}")

        console.print(table)
