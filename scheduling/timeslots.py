"""Zeitslot-Registry: der geordnete Katalog buchbarer Zeitfenster.

Förderstunden speichern das Slot-Label ("09:30-10:10"), nicht die Slot-id.
Löschen oder Deaktivieren eines Slots lässt bestehende Förderstunden daher
unberührt; es wirkt nur auf neue Buchungen.
"""

import logging
from typing import Optional, Sequence

from pydantic import ValidationError

from config.defaults import WEEKDAY_NAMES
from config.schema import SlotDefinition
from models.school_data import new_id
from models.teacher import Teacher
from models.timeslot import TimeSlot, to_minutes

logger = logging.getLogger(__name__)


class TimeSlotError(ValueError):
    """Ungültige Slot-Definition oder unbekannte Slot-id."""


class TimeSlotRegistry:
    """Verwaltet die Zeitslots. Jede Änderung gibt die neue Slot-Liste zurück."""

    def __init__(
        self,
        slots: Optional[list[TimeSlot]] = None,
        reject_overlaps: bool = False,
    ) -> None:
        self._slots: list[TimeSlot] = list(slots or [])
        self.reject_overlaps = reject_overlaps

    @classmethod
    def from_definitions(
        cls, definitions: list[SlotDefinition], reject_overlaps: bool = False
    ) -> "TimeSlotRegistry":
        """Registry aus dem Standard-Raster der Konfiguration (ids 1, 2, 3, ...)."""
        slots = [
            TimeSlot(id=str(i), start_time=d.start_time, end_time=d.end_time)
            for i, d in enumerate(definitions, 1)
        ]
        return cls(slots, reject_overlaps=reject_overlaps)

    # ─── Abfragen ───

    @property
    def slots(self) -> list[TimeSlot]:
        """Alle Slots (aktiv und inaktiv), sortiert nach Beginn."""
        return sorted(self._slots, key=lambda s: to_minutes(s.start_time))

    def active_slots(self) -> list[TimeSlot]:
        return [s for s in self.slots if s.is_active]

    def active_slot_strings(self) -> list[str]:
        """Geordnete Labels aller aktiven Slots – das Vokabular für Verfügbarkeiten."""
        return [s.label for s in self.active_slots()]

    def get(self, slot_id: str) -> TimeSlot:
        slot = next((s for s in self._slots if s.id == slot_id), None)
        if slot is None:
            raise TimeSlotError(f"Zeitslot '{slot_id}' existiert nicht.")
        return slot

    def find_overlaps(self) -> list[tuple[TimeSlot, TimeSlot]]:
        """Paare aktiver Slots, die sich zeitlich überschneiden."""
        active = self.active_slots()
        pairs = []
        for i, a in enumerate(active):
            for b in active[i + 1:]:
                if a.overlaps(b):
                    pairs.append((a, b))
        return pairs

    # ─── Änderungen ───

    def _build(self, **fields) -> TimeSlot:
        try:
            return TimeSlot(**fields)
        except ValidationError as e:
            messages = "; ".join(err["msg"] for err in e.errors())
            raise TimeSlotError(messages) from e

    def _check_overlap(self, candidate: TimeSlot) -> None:
        if not self.reject_overlaps or not candidate.is_active:
            return
        for other in self._slots:
            if other.id != candidate.id and other.is_active and other.overlaps(candidate):
                raise TimeSlotError(
                    f"Zeitslot {candidate.label} überschneidet sich mit {other.label}."
                )

    def add(self, start_time: str, end_time: str) -> list[TimeSlot]:
        slot = self._build(id=new_id(), start_time=start_time, end_time=end_time,
                           is_active=True)
        self._check_overlap(slot)
        self._slots.append(slot)
        logger.info(f"Zeitslot {slot.label} hinzugefügt (id {slot.id})")
        return self.slots

    def update(self, slot_id: str, **fields) -> list[TimeSlot]:
        current = self.get(slot_id)
        merged = {**current.model_dump(), **fields, "id": slot_id}
        slot = self._build(**merged)
        self._check_overlap(slot)
        self._slots = [slot if s.id == slot_id else s for s in self._slots]
        logger.info(f"Zeitslot {slot_id} geändert: {current.label} → {slot.label}")
        return self.slots

    def delete(self, slot_id: str) -> list[TimeSlot]:
        slot = self.get(slot_id)
        self._slots = [s for s in self._slots if s.id != slot_id]
        logger.info(f"Zeitslot {slot.label} gelöscht")
        return self.slots

    def toggle(self, slot_id: str, is_active: bool) -> list[TimeSlot]:
        return self.update(slot_id, is_active=is_active)

    # ─── Verfügbarkeiten ───

    def refresh_availability(
        self, teachers: list[Teacher], day_names: Optional[Sequence[str]] = None
    ) -> list[Teacher]:
        """Stellt sicher, dass jede Lehrkraft für jeden Wochentag einen Eintrag hat.

        Fehlende Wochentage werden mit einer leeren Liste ergänzt. Es werden
        keine Slots hinzugefügt oder entfernt.
        """
        names = list(day_names or WEEKDAY_NAMES)
        refreshed = []
        for teacher in teachers:
            hours = dict(teacher.available_hours)
            for day in names:
                hours.setdefault(day, [])
            refreshed.append(teacher.model_copy(update={"available_hours": hours}))
        return refreshed
