"""Datenmodell für eine Schülerin / einen Schüler (Pydantic v2)."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, field_validator


class Student(BaseModel):
    """Repräsentiert eine Schülerin / einen Schüler.

    is_banned + ban_end_date bilden ein zeitlich begrenztes Sperrfenster.
    Ob die Sperre aktuell greift, entscheidet scheduling.bans.is_banned()
    bei jedem Aufruf neu; das Flag wird nach Ablauf nicht zurückgesetzt.
    """

    id: str
    name: str
    class_name: str                          # "9-A", "10-B"
    student_number: str                      # Eindeutig über alle Schüler
    is_banned: bool = False
    ban_end_date: Optional[datetime] = None
    total_sessions: int = 0                  # Cache, nicht maßgeblich

    @field_validator("name", "class_name", "student_number")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = str(v).strip()
        if not v:
            raise ValueError("Name, Klasse und Schülernummer sind Pflichtfelder.")
        return v

    @field_validator("ban_end_date")
    @classmethod
    def _as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        # Zeitpunkte ohne Offset gelten als UTC
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v
