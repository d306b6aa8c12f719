"""Datenmodell für eine Lehrkraft (Pydantic v2)."""

from pydantic import BaseModel, field_validator


class Teacher(BaseModel):
    """Repräsentiert eine Lehrkraft, die Förderstunden in genau einem Fach gibt."""

    id: str
    name: str                                     # "Ahmet Yılmaz"
    subject: str                                  # Genau ein Fach
    email: str = ""
    available_hours: dict[str, list[str]] = {}    # Wochentag → ["09:30-10:10", ...]
    total_sessions: int = 0                       # Cache, nicht maßgeblich

    @field_validator("name", "subject")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name und Fach dürfen nicht leer sein.")
        return v

    def slots_on(self, weekday_name: str) -> list[str]:
        """Freigegebene Zeitslots für einen Wochentag (leer wenn nicht gepflegt)."""
        return list(self.available_hours.get(weekday_name, []))

    @property
    def weekly_slot_count(self) -> int:
        """Anzahl freigegebener Slots über die ganze Woche."""
        return sum(len(slots) for slots in self.available_hours.values())
