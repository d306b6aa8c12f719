"""Nachträgliche Konsistenzprüfung des Datenbestands.

Die Buchungsregeln werden nur beim Anlegen einer Förderstunde erzwungen.
Importierte Sicherungen, gelöschte Lehrkräfte oder geänderte Zeitslots
können den Bestand trotzdem inkonsistent machen; diese Prüfung findet das.
"""

from collections import Counter, defaultdict
from typing import Literal

from pydantic import BaseModel

from models.school_data import SchoolData
from scheduling.timeslots import TimeSlotRegistry
from scheduling.weeks import week_year


class IntegrityIssue(BaseModel):
    """Ein einzelner Befund."""

    severity: Literal["error", "warning"]
    check: str           # z.B. "teacher_double_booking"
    description: str
    entity: str          # session_id / student_id / slot_id


class IntegrityReport(BaseModel):
    """Ergebnis der Konsistenzprüfung."""

    issues: list[IntegrityIssue]
    is_consistent: bool       # True wenn keine Errors (Warnings ok)

    def by_check(self, check: str) -> list[IntegrityIssue]:
        return [i for i in self.issues if i.check == check]

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        errors = [i for i in self.issues if i.severity == "error"]
        warnings = [i for i in self.issues if i.severity == "warning"]

        status = (
            "[bold green]✓ KONSISTENT[/bold green]"
            if self.is_consistent
            else "[bold red]✗ INKONSISTENZEN GEFUNDEN[/bold red]"
        )
        lines = [status, f"Fehler: {len(errors)} | Warnungen: {len(warnings)}"]
        console.print(Panel("\n".join(lines), title="Datenprüfung", border_style="cyan"))

        if not self.issues:
            console.print("[dim]Keine Auffälligkeiten gefunden.[/dim]")
            return

        table = Table(box=box.ROUNDED, show_lines=True)
        table.add_column("Typ", width=8)
        table.add_column("Prüfung", width=26)
        table.add_column("Objekt", width=14)
        table.add_column("Beschreibung")

        for i in self.issues:
            color = "red" if i.severity == "error" else "yellow"
            table.add_row(
                f"[{color}]{i.severity.upper()}[/{color}]",
                i.check,
                i.entity,
                i.description,
            )
        console.print(table)


class IntegrityChecker:
    """Prüft einen SchoolData-Stand auf Verletzungen der Buchungsregeln."""

    def check(self, data: SchoolData) -> IntegrityReport:
        issues: list[IntegrityIssue] = []

        issues.extend(self._check_double_booking(data, "teacher"))
        issues.extend(self._check_double_booking(data, "student"))
        issues.extend(self._check_weekly_limit(data))
        issues.extend(self._check_references(data))
        issues.extend(self._check_student_numbers(data))
        issues.extend(self._check_slots(data))
        issues.extend(self._check_week_ids(data))

        has_errors = any(i.severity == "error" for i in issues)
        return IntegrityReport(issues=issues, is_consistent=not has_errors)

    # ── Einzelne Prüfungen ────────────────────────────────────────────────────

    def _check_double_booking(self, data: SchoolData, role: str) -> list[IntegrityIssue]:
        """Niemand darf zur selben Zeit zwei Förderstunden haben."""
        attr = f"{role}_id"
        groups: dict[tuple, list[str]] = defaultdict(list)
        for s in data.sessions:
            groups[(getattr(s, attr), s.date, s.time_slot)].append(s.id)

        label = "Lehrkraft" if role == "teacher" else "Schüler"
        issues = []
        for (person_id, day, slot), ids in groups.items():
            if len(ids) > 1:
                issues.append(IntegrityIssue(
                    severity="error",
                    check=f"{role}_double_booking",
                    description=(
                        f"{label} {person_id} hat am {day:%d.%m.%Y} um {slot} "
                        f"{len(ids)} Förderstunden: {', '.join(ids)}"
                    ),
                    entity=person_id,
                ))
        return issues

    def _check_weekly_limit(self, data: SchoolData) -> list[IntegrityIssue]:
        """Höchstens eine Förderstunde pro Schüler, Fach und Woche."""
        groups: dict[tuple, list[str]] = defaultdict(list)
        for s in data.sessions:
            groups[(s.student_id, s.subject, s.week_year)].append(s.id)

        return [
            IntegrityIssue(
                severity="error",
                check="weekly_limit",
                description=(
                    f"Schüler {student_id} hat in {week} {len(ids)} Förderstunden "
                    f"in {subject}"
                ),
                entity=student_id,
            )
            for (student_id, subject, week), ids in groups.items()
            if len(ids) > 1
        ]

    def _check_references(self, data: SchoolData) -> list[IntegrityIssue]:
        """Förderstunden, deren Lehrkraft oder Schüler gelöscht wurde."""
        teacher_ids = {t.id for t in data.teachers}
        student_ids = {s.id for s in data.students}
        issues = []
        for s in data.sessions:
            if s.teacher_id not in teacher_ids:
                issues.append(IntegrityIssue(
                    severity="warning", check="unknown_teacher", entity=s.id,
                    description=f"Lehrkraft {s.teacher_id} existiert nicht mehr",
                ))
            if s.student_id not in student_ids:
                issues.append(IntegrityIssue(
                    severity="warning", check="unknown_student", entity=s.id,
                    description=f"Schüler {s.student_id} existiert nicht mehr",
                ))
        return issues

    def _check_student_numbers(self, data: SchoolData) -> list[IntegrityIssue]:
        counts = Counter(s.student_number for s in data.students)
        return [
            IntegrityIssue(
                severity="error", check="duplicate_student_number", entity=number,
                description=f"Schülernummer {number} ist {n}-mal vergeben",
            )
            for number, n in counts.items() if n > 1
        ]

    def _check_slots(self, data: SchoolData) -> list[IntegrityIssue]:
        """Überlappende aktive Slots und Förderstunden in unbekannten Slots."""
        issues = []
        registry = TimeSlotRegistry(data.time_slots)
        for a, b in registry.find_overlaps():
            issues.append(IntegrityIssue(
                severity="warning", check="overlapping_slots", entity=a.id,
                description=f"Zeitslot {a.label} überschneidet sich mit {b.label}",
            ))

        known = {ts.label for ts in data.time_slots}
        for s in data.sessions:
            if s.time_slot not in known:
                issues.append(IntegrityIssue(
                    severity="warning", check="unknown_slot", entity=s.id,
                    description=f"Zeitslot {s.time_slot} ist nicht (mehr) angelegt",
                ))
        return issues

    def _check_week_ids(self, data: SchoolData) -> list[IntegrityIssue]:
        """Gespeicherte Wochen-Kennung passt nicht zum Datum."""
        return [
            IntegrityIssue(
                severity="warning", check="week_id_mismatch", entity=s.id,
                description=(
                    f"Woche {s.week_year} gespeichert, Datum {s.date:%d.%m.%Y} "
                    f"liegt in {week_year(s.date)}"
                ),
            )
            for s in data.sessions
            if s.week_year != week_year(s.date)
        ]
