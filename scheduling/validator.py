"""Prüfung und Anlage neuer Förderstunden.

Die Prüfungen laufen in fester Reihenfolge; die erste fehlschlagende
Prüfung bestimmt den Ablehnungsgrund:

1. Lehrkraft und Schüler existieren            → NOT_FOUND
2. Schüler ist nicht gesperrt                  → BANNED
3. Keine Stunde im selben Fach in der Woche    → WEEKLY_LIMIT_EXCEEDED
4. Lehrkraft ist im Slot verfügbar             → TEACHER_UNAVAILABLE
5. Lehrkraft ist im Slot noch frei             → TEACHER_DOUBLE_BOOKED
6. Schüler ist im Slot noch frei               → STUDENT_DOUBLE_BOOKED

Ablehnungen sind Werte (ValidationResult), keine Ausnahmen. Eine abgelehnte
Anfrage verändert keinen Zustand.
"""

import logging
from datetime import date, datetime
from enum import Enum
from typing import Optional, Sequence

from pydantic import BaseModel

from models.school_data import new_id
from models.session import Session, SessionStatus
from models.student import Student
from models.teacher import Teacher
from scheduling.availability import is_available
from scheduling.bans import is_banned
from scheduling.conflicts import (
    find_student_conflict,
    find_teacher_conflict,
    find_weekly_subject_conflict,
)
from scheduling.weeks import utc_now, week_year, weekday_name

logger = logging.getLogger(__name__)


class RejectionReason(str, Enum):
    NOT_FOUND = "not_found"
    BANNED = "banned"
    WEEKLY_LIMIT_EXCEEDED = "weekly_limit_exceeded"
    TEACHER_UNAVAILABLE = "teacher_unavailable"
    TEACHER_DOUBLE_BOOKED = "teacher_double_booked"
    STUDENT_DOUBLE_BOOKED = "student_double_booked"


class ValidationResult(BaseModel):
    """Ergebnis einer Buchungsprüfung."""

    valid: bool
    reason: Optional[RejectionReason] = None
    message: str = ""
    ban_end_date: Optional[datetime] = None          # nur bei BANNED
    conflicting_session: Optional[Session] = None    # bei Wochen- und Doppelbuchung

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def reject(cls, reason: RejectionReason, message: str, **extra) -> "ValidationResult":
        logger.info(f"Buchung abgelehnt ({reason.value}): {message}")
        return cls(valid=False, reason=reason, message=message, **extra)


def _as_date(on_date: date) -> date:
    return on_date.date() if isinstance(on_date, datetime) else on_date


def validate_assignment(
    teacher_id: str,
    student_id: str,
    subject: Optional[str],
    time_slot: str,
    on_date: date,
    teachers: list[Teacher],
    students: list[Student],
    sessions: list[Session],
    now: Optional[datetime] = None,
    day_names: Optional[Sequence[str]] = None,
) -> ValidationResult:
    """Prüft, ob (Lehrkraft, Schüler, Slot, Datum) gebucht werden darf.

    Das Fach ergibt sich immer aus der Lehrkraft. Ein abweichend übergebenes
    subject wird ignoriert und nur protokolliert.
    """
    on_date = _as_date(on_date)
    teacher = next((t for t in teachers if t.id == teacher_id), None)
    student = next((s for s in students if s.id == student_id), None)

    if teacher is None or student is None:
        return ValidationResult.reject(
            RejectionReason.NOT_FOUND,
            "Lehrkraft oder Schüler nicht gefunden!",
        )

    if subject and subject != teacher.subject:
        logger.warning(
            f"Fach '{subject}' passt nicht zu {teacher.name} ({teacher.subject}) – "
            f"es gilt das Fach der Lehrkraft."
        )
    subject = teacher.subject

    if is_banned(student, now):
        return ValidationResult.reject(
            RejectionReason.BANNED,
            f"{student.name} ist bis {student.ban_end_date:%d.%m.%Y} für alle "
            f"Förderstunden gesperrt!",
            ban_end_date=student.ban_end_date,
        )

    weekly = find_weekly_subject_conflict(student.id, subject, on_date, sessions)
    if weekly is not None:
        return ValidationResult.reject(
            RejectionReason.WEEKLY_LIMIT_EXCEEDED,
            f"{student.name} hat diese Woche bereits eine Förderstunde in {subject}! "
            f"({weekly.date:%d.%m.%Y} {weekly.time_slot})",
            conflicting_session=weekly,
        )

    day_name = weekday_name(on_date, day_names)
    if not is_available(teacher, day_name, time_slot):
        return ValidationResult.reject(
            RejectionReason.TEACHER_UNAVAILABLE,
            f"{teacher.name} ist am {day_name} um {time_slot} nicht verfügbar!",
        )

    clash = find_teacher_conflict(teacher.id, time_slot, on_date, sessions)
    if clash is not None:
        return ValidationResult.reject(
            RejectionReason.TEACHER_DOUBLE_BOOKED,
            f"{teacher.name} gibt zu dieser Zeit bereits eine andere Förderstunde!",
            conflicting_session=clash,
        )

    clash = find_student_conflict(student.id, time_slot, on_date, sessions)
    if clash is not None:
        return ValidationResult.reject(
            RejectionReason.STUDENT_DOUBLE_BOOKED,
            f"{student.name} hat zu dieser Zeit bereits eine andere Förderstunde!",
            conflicting_session=clash,
        )

    return ValidationResult.ok()


def create_session(
    teacher: Teacher,
    student: Student,
    time_slot: str,
    on_date: date,
    notes: str = "",
    now: Optional[datetime] = None,
    session_id: Optional[str] = None,
) -> Session:
    """Baut die neue Förderstunde. Nur nach erfolgreicher Prüfung aufrufen."""
    on_date = _as_date(on_date)
    return Session(
        id=session_id or new_id(),
        teacher_id=teacher.id,
        student_id=student.id,
        date=on_date,
        time_slot=time_slot,
        subject=teacher.subject,
        week_year=week_year(on_date),
        status=SessionStatus.SCHEDULED,
        created_at=now or utc_now(),
        notes=notes,
    )


def book_session(
    teacher_id: str,
    student_id: str,
    time_slot: str,
    on_date: date,
    teachers: list[Teacher],
    students: list[Student],
    sessions: list[Session],
    notes: str = "",
    now: Optional[datetime] = None,
    day_names: Optional[Sequence[str]] = None,
) -> tuple[ValidationResult, list[Session]]:
    """Prüft und legt an. Gibt (Ergebnis, neuer Förderstunden-Bestand) zurück.

    Bei Ablehnung ist der zurückgegebene Bestand der unveränderte Eingabe-Bestand.
    """
    result = validate_assignment(
        teacher_id, student_id, None, time_slot, on_date,
        teachers, students, sessions, now=now, day_names=day_names,
    )
    if not result.valid:
        return result, sessions

    teacher = next(t for t in teachers if t.id == teacher_id)
    student = next(s for s in students if s.id == student_id)
    session = create_session(teacher, student, time_slot, on_date, notes=notes, now=now)
    logger.info(
        f"Förderstunde {session.id} angelegt: {student.name} bei {teacher.name} "
        f"({session.subject}) am {session.date:%d.%m.%Y} {session.time_slot}"
    )
    return result, [*sessions, session]
