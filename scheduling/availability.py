"""Verfügbarkeit: Darf eine Lehrkraft an einem Wochentag in einem Slot gebucht werden?"""

from models.teacher import Teacher


def is_available(teacher: Teacher, weekday_name: str, time_slot: str) -> bool:
    """True genau dann, wenn time_slot in teacher.available_hours[weekday_name] steht.

    Reiner Nachschlag ohne Seiteneffekte; fehlender Wochentag bedeutet "nicht verfügbar".
    """
    day_slots = teacher.available_hours.get(weekday_name)
    return day_slots is not None and time_slot in day_slots


def available_teachers(
    teachers: list[Teacher], weekday_name: str, time_slot: str
) -> list[Teacher]:
    """Alle Lehrkräfte, die im gegebenen Slot verfügbar sind."""
    return [t for t in teachers if is_available(t, weekday_name, time_slot)]


def set_availability(
    teacher: Teacher, weekday_name: str, slots: list[str]
) -> Teacher:
    """Ersetzt die freigegebenen Slots eines Wochentags (Reihenfolge bleibt erhalten)."""
    unique = list(dict.fromkeys(slots))
    hours = {**teacher.available_hours, weekday_name: unique}
    return teacher.model_copy(update={"available_hours": hours})
