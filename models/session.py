"""Datenmodell für eine Förderstunde (Pydantic v2)."""

from datetime import date, datetime, timezone
from enum import Enum

from pydantic import BaseModel, field_validator


class SessionStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    ABSENT = "absent"

    @property
    def is_terminal(self) -> bool:
        """Abgeschlossen und Nicht erschienen sind Endzustände."""
        return self is not SessionStatus.SCHEDULED


STATUS_LABELS: dict[SessionStatus, str] = {
    SessionStatus.SCHEDULED: "Geplant",
    SessionStatus.COMPLETED: "Abgeschlossen",
    SessionStatus.ABSENT: "Nicht erschienen",
}


class Session(BaseModel):
    """Eine gebuchte Förderstunde.

    Verweist per id auf Lehrkraft und Schüler (keine Rückverweise).
    week_year wird beim Anlegen aus date berechnet und danach nie neu berechnet.
    """

    id: str
    teacher_id: str
    student_id: str
    date: date
    time_slot: str                 # Label des Zeitslots, z.B. "09:30-10:10"
    subject: str                   # Immer das Fach der Lehrkraft
    week_year: str                 # "2024-W10"
    status: SessionStatus = SessionStatus.SCHEDULED
    created_at: datetime
    notes: str = ""

    @field_validator("created_at")
    @classmethod
    def _as_utc(cls, v: datetime) -> datetime:
        # Zeitpunkte ohne Offset gelten als UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def status_label(self) -> str:
        return STATUS_LABELS[self.status]

    def same_day(self, other: date) -> bool:
        """Vergleich auf Kalendertag-Ebene."""
        return self.date == other
