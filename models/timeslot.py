"""Datenmodell für einen buchbaren Zeitslot im Tagesraster (Pydantic v2)."""

import re

from pydantic import BaseModel, field_validator, model_validator

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def to_minutes(hhmm: str) -> int:
    """Wandelt "HH:MM" in Minuten seit Mitternacht um."""
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def parse_slot_label(label: str) -> tuple[str, str]:
    """Zerlegt "09:30-10:10" in ("09:30", "10:10")."""
    start, sep, end = label.strip().partition("-")
    if not sep or not _TIME_RE.match(start) or not _TIME_RE.match(end):
        raise ValueError(f"Ungültiger Zeitslot '{label}' (erwartet HH:MM-HH:MM)")
    return start, end


class TimeSlot(BaseModel):
    """Ein Zeitfenster, in dem Förderstunden gebucht werden können.

    Förderstunden speichern nur das Label ("09:30-10:10"), nicht die id.
    Inaktive Slots bleiben für die Historie erhalten.
    """

    id: str
    start_time: str           # "HH:MM"
    end_time: str             # "HH:MM"
    is_active: bool = True

    @field_validator("start_time", "end_time")
    @classmethod
    def _check_format(cls, v: str) -> str:
        v = v.strip()
        if not _TIME_RE.match(v):
            raise ValueError(f"Uhrzeit '{v}' hat nicht das Format HH:MM")
        return v

    @model_validator(mode="after")
    def _check_order(self):
        if to_minutes(self.start_time) >= to_minutes(self.end_time):
            raise ValueError(
                f"Beginn ({self.start_time}) muss vor dem Ende ({self.end_time}) liegen."
            )
        return self

    @property
    def label(self) -> str:
        """String-Darstellung, auf die Verfügbarkeiten und Förderstunden verweisen."""
        return f"{self.start_time}-{self.end_time}"

    @property
    def duration_minutes(self) -> int:
        return to_minutes(self.end_time) - to_minutes(self.start_time)

    def overlaps(self, other: "TimeSlot") -> bool:
        """True wenn sich die beiden Zeitfenster echt überschneiden."""
        return (
            to_minutes(self.start_time) < to_minutes(other.end_time)
            and to_minutes(other.start_time) < to_minutes(self.end_time)
        )

    def __str__(self) -> str:
        return self.label
