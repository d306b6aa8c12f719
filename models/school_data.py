"""SchoolData: Vollständiger Datenbestand (Lehrkräfte, Schüler, Förderstunden, Zeitslots).

Alle ändernden Methoden geben einen neuen SchoolData-Stand zurück und lassen
den bisherigen unverändert (Snapshot rein, Snapshot raus).
"""

import uuid
from collections import Counter
from typing import Optional

from pydantic import BaseModel

from models.session import Session, SessionStatus
from models.student import Student
from models.teacher import Teacher
from models.timeslot import TimeSlot


class EntityError(ValueError):
    """Verletzung einer Bestandsregel (doppelte Schülernummer, unbekannte id, ...)."""


def new_id() -> str:
    """Erzeugt eine neue, eindeutige Kennung."""
    return uuid.uuid4().hex[:12]


class SchoolData(BaseModel):
    """Der komplette Datenbestand, aus dem alle Abfragen beantwortet werden."""

    teachers: list[Teacher] = []
    students: list[Student] = []
    sessions: list[Session] = []
    time_slots: list[TimeSlot] = []

    # ─── Abfragen ───

    def get_teacher(self, teacher_id: str) -> Optional[Teacher]:
        return next((t for t in self.teachers if t.id == teacher_id), None)

    def get_student(self, student_id: str) -> Optional[Student]:
        return next((s for s in self.students if s.id == student_id), None)

    def get_session(self, session_id: str) -> Optional[Session]:
        return next((s for s in self.sessions if s.id == session_id), None)

    def find_teacher_by_name(self, term: str) -> Optional[Teacher]:
        """Erste Lehrkraft, deren Name term enthält (ohne Groß-/Kleinschreibung)."""
        term = term.lower()
        return next((t for t in self.teachers if term in t.name.lower()), None)

    def find_student_by_name(self, term: str) -> Optional[Student]:
        term = term.lower()
        return next((s for s in self.students if term in s.name.lower()), None)

    def search_students(self, term: str) -> list[Student]:
        """Suche über Name, Klasse und Schülernummer."""
        term = term.strip().lower()
        if not term:
            return list(self.students)
        return [
            s for s in self.students
            if term in s.name.lower()
            or term in s.class_name.lower()
            or term in s.student_number.lower()
        ]

    def sessions_for_teacher(self, teacher_id: str) -> list[Session]:
        return [s for s in self.sessions if s.teacher_id == teacher_id]

    def sessions_for_student(self, student_id: str) -> list[Session]:
        return [s for s in self.sessions if s.student_id == student_id]

    # ─── Lehrkräfte ───

    def add_teacher(self, teacher: Teacher) -> "SchoolData":
        if self.get_teacher(teacher.id) is not None:
            raise EntityError(f"Lehrkraft mit id '{teacher.id}' existiert bereits.")
        return self.model_copy(update={"teachers": [*self.teachers, teacher]})

    def update_teacher(self, teacher_id: str, **fields) -> "SchoolData":
        current = self.get_teacher(teacher_id)
        if current is None:
            raise EntityError(f"Unbekannte Lehrkraft: {teacher_id}")
        updated = Teacher.model_validate({**current.model_dump(), **fields, "id": teacher_id})
        return self.model_copy(update={
            "teachers": [updated if t.id == teacher_id else t for t in self.teachers]
        })

    def remove_teacher(self, teacher_id: str) -> "SchoolData":
        """Entfernt die Lehrkraft. Bestehende Förderstunden bleiben erhalten."""
        if self.get_teacher(teacher_id) is None:
            raise EntityError(f"Unbekannte Lehrkraft: {teacher_id}")
        return self.model_copy(update={
            "teachers": [t for t in self.teachers if t.id != teacher_id]
        })

    # ─── Schüler ───

    def _check_student_number(self, number: str, ignore_id: Optional[str] = None) -> None:
        for s in self.students:
            if s.student_number == number and s.id != ignore_id:
                raise EntityError(
                    f"Schülernummer {number} ist bereits an {s.name} vergeben."
                )

    def add_student(self, student: Student) -> "SchoolData":
        if self.get_student(student.id) is not None:
            raise EntityError(f"Schüler mit id '{student.id}' existiert bereits.")
        self._check_student_number(student.student_number)
        return self.model_copy(update={"students": [*self.students, student]})

    def update_student(self, student_id: str, **fields) -> "SchoolData":
        current = self.get_student(student_id)
        if current is None:
            raise EntityError(f"Unbekannter Schüler: {student_id}")
        updated = Student.model_validate({**current.model_dump(), **fields, "id": student_id})
        self._check_student_number(updated.student_number, ignore_id=student_id)
        return self.model_copy(update={
            "students": [updated if s.id == student_id else s for s in self.students]
        })

    def remove_student(self, student_id: str) -> "SchoolData":
        if self.get_student(student_id) is None:
            raise EntityError(f"Unbekannter Schüler: {student_id}")
        return self.model_copy(update={
            "students": [s for s in self.students if s.id != student_id]
        })

    # ─── Zähler ───

    def refresh_counters(self) -> "SchoolData":
        """Berechnet die zwischengespeicherten total_sessions-Zähler neu."""
        by_teacher = Counter(s.teacher_id for s in self.sessions)
        by_student = Counter(s.student_id for s in self.sessions)
        return self.model_copy(update={
            "teachers": [
                t.model_copy(update={"total_sessions": by_teacher.get(t.id, 0)})
                for t in self.teachers
            ],
            "students": [
                s.model_copy(update={"total_sessions": by_student.get(s.id, 0)})
                for s in self.students
            ],
        })

    # ─── Übersicht ───

    def summary(self) -> str:
        """Kurze Übersicht über den Datenbestand."""
        status_counts = Counter(s.status for s in self.sessions)
        active_slots = sum(1 for ts in self.time_slots if ts.is_active)
        lines = [
            f"Lehrkräfte: {len(self.teachers)} "
            f"({len({t.subject for t in self.teachers})} Fächer)",
            f"Schüler: {len(self.students)}",
            f"Förderstunden: {len(self.sessions)} "
            f"(geplant {status_counts.get(SessionStatus.SCHEDULED, 0)}, "
            f"abgeschlossen {status_counts.get(SessionStatus.COMPLETED, 0)}, "
            f"nicht erschienen {status_counts.get(SessionStatus.ABSENT, 0)})",
            f"Zeitslots: {len(self.time_slots)} ({active_slots} aktiv)",
        ]
        return "\n".join(lines)
