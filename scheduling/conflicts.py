"""Konfliktprüfung gegen den bestehenden Förderstunden-Bestand.

Drei unabhängige Prüfungen, jeweils ein linearer Durchlauf über alle
Förderstunden. Die find_*-Varianten liefern die kollidierende Förderstunde
für Fehlermeldungen, die *_free-Prädikate nur das Ergebnis.
"""

from datetime import date
from typing import Optional

from models.session import Session
from scheduling.weeks import week_year


def find_teacher_conflict(
    teacher_id: str, time_slot: str, on_date: date, sessions: list[Session]
) -> Optional[Session]:
    """Förderstunde derselben Lehrkraft im selben Slot am selben Kalendertag."""
    return next(
        (
            s for s in sessions
            if s.teacher_id == teacher_id
            and s.time_slot == time_slot
            and s.same_day(on_date)
        ),
        None,
    )


def find_student_conflict(
    student_id: str, time_slot: str, on_date: date, sessions: list[Session]
) -> Optional[Session]:
    """Förderstunde desselben Schülers im selben Slot am selben Kalendertag."""
    return next(
        (
            s for s in sessions
            if s.student_id == student_id
            and s.time_slot == time_slot
            and s.same_day(on_date)
        ),
        None,
    )


def find_weekly_subject_conflict(
    student_id: str, subject: str, on_date: date, sessions: list[Session]
) -> Optional[Session]:
    """Förderstunde desselben Schülers im selben Fach in derselben Woche.

    Verglichen wird mit dem gespeicherten week_year der bestehenden Stunden,
    unabhängig von Lehrkraft, Tag und Status.
    """
    target_week = week_year(on_date)
    return next(
        (
            s for s in sessions
            if s.student_id == student_id
            and s.subject == subject
            and s.week_year == target_week
        ),
        None,
    )


def teacher_free(
    teacher_id: str, time_slot: str, on_date: date, sessions: list[Session]
) -> bool:
    return find_teacher_conflict(teacher_id, time_slot, on_date, sessions) is None


def student_free(
    student_id: str, time_slot: str, on_date: date, sessions: list[Session]
) -> bool:
    return find_student_conflict(student_id, time_slot, on_date, sessions) is None


def weekly_subject_free(
    student_id: str, subject: str, on_date: date, sessions: list[Session]
) -> bool:
    """Kernregel: höchstens eine Förderstunde pro Schüler, Fach und Woche."""
    return find_weekly_subject_conflict(student_id, subject, on_date, sessions) is None


def sessions_in_slot(
    on_date: date, time_slot: str, sessions: list[Session]
) -> list[Session]:
    """Alle Förderstunden eines Slots an einem Tag (für die Wochenansicht)."""
    return [s for s in sessions if s.same_day(on_date) and s.time_slot == time_slot]
