"""Statusübergänge einer Förderstunde.

scheduled → completed   (keine Nebenwirkung)
scheduled → absent      (sperrt den Schüler, siehe bans.py)

completed und absent sind Endzustände. Notizen dürfen in jedem Status
bearbeitet werden; Löschen ist in jedem Status möglich und hebt eine bereits
verhängte Sperre nicht auf.
"""

import logging
from datetime import datetime
from typing import Optional

from config.defaults import BAN_DAYS
from models.session import Session, SessionStatus
from models.student import Student
from scheduling.bans import ban_student

logger = logging.getLogger(__name__)


class SessionNotFoundError(LookupError):
    """Keine Förderstunde mit dieser id."""


class SessionTransitionError(ValueError):
    """Statusübergang aus einem Endzustand heraus."""


def _get(session_id: str, sessions: list[Session]) -> Session:
    session = next((s for s in sessions if s.id == session_id), None)
    if session is None:
        raise SessionNotFoundError(f"Förderstunde '{session_id}' nicht gefunden.")
    return session


def _transition(
    session_id: str, target: SessionStatus, sessions: list[Session]
) -> tuple[Session, list[Session]]:
    session = _get(session_id, sessions)
    if session.status.is_terminal:
        raise SessionTransitionError(
            f"Förderstunde {session_id} ist bereits '{session.status_label}' – "
            f"kein Wechsel nach '{target.value}' möglich."
        )
    updated = session.model_copy(update={"status": target})
    return updated, [updated if s.id == session_id else s for s in sessions]


def mark_completed(session_id: str, sessions: list[Session]) -> list[Session]:
    _, result = _transition(session_id, SessionStatus.COMPLETED, sessions)
    logger.info(f"Förderstunde {session_id} abgeschlossen")
    return result


def mark_absent(
    session_id: str,
    sessions: list[Session],
    students: list[Student],
    now: Optional[datetime] = None,
    ban_days: int = BAN_DAYS,
) -> tuple[list[Session], list[Student]]:
    """Markiert Nicht-Erscheinen und sperrt den Schüler in einem Schritt.

    Beide Bestände werden gemeinsam zurückgegeben. Ist der Schüler unbekannt,
    wird SessionNotFoundError ausgelöst und keiner der Bestände verändert.
    """
    session = _get(session_id, sessions)
    student = next((s for s in students if s.id == session.student_id), None)
    if student is None:
        raise SessionNotFoundError(
            f"Schüler '{session.student_id}' der Förderstunde {session_id} nicht gefunden."
        )

    _, new_sessions = _transition(session_id, SessionStatus.ABSENT, sessions)
    banned = ban_student(student, now=now, days=ban_days)
    new_students = [banned if s.id == student.id else s for s in students]
    return new_sessions, new_students


def update_notes(session_id: str, notes: str, sessions: list[Session]) -> list[Session]:
    session = _get(session_id, sessions)
    updated = session.model_copy(update={"notes": notes})
    return [updated if s.id == session_id else s for s in sessions]


def delete_session(session_id: str, sessions: list[Session]) -> list[Session]:
    """Entfernt die Förderstunde unabhängig vom Status."""
    _get(session_id, sessions)
    logger.info(f"Förderstunde {session_id} gelöscht")
    return [s for s in sessions if s.id != session_id]
