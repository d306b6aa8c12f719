"""Sperr-Zustandsautomat für Schüler.

Zustände: aktiv ⇄ gesperrt.

- aktiv → gesperrt: ausschließlich über lifecycle.mark_absent(); die Sperre
  gilt ab dem Zeitpunkt der Markierung für ban_days Tage und für alle Fächer.
- gesperrt → aktiv: implizit. is_banned() vergleicht bei jedem Aufruf
  now < ban_end_date; das gespeicherte Flag wird dabei nicht verändert.
  Das Ergebnis wird nie zwischengespeichert.
- Administrative Entsperrung über unban_student() setzt Flag und Enddatum zurück.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from config.defaults import BAN_DAYS
from models.student import Student
from scheduling.weeks import utc_now

logger = logging.getLogger(__name__)


def is_banned(student: Student, now: Optional[datetime] = None) -> bool:
    """True solange die Sperre des Schülers zum Zeitpunkt now noch läuft."""
    if not student.is_banned or student.ban_end_date is None:
        return False
    now = now or utc_now()
    return now < student.ban_end_date


def ban_student(
    student: Student, now: Optional[datetime] = None, days: int = BAN_DAYS
) -> Student:
    """Gibt den Schüler mit einer ab now laufenden Sperre zurück."""
    now = now or utc_now()
    end = now + timedelta(days=days)
    logger.warning(f"Schüler {student.name} ({student.id}) gesperrt bis {end:%d.%m.%Y %H:%M}")
    return student.model_copy(update={"is_banned": True, "ban_end_date": end})


def unban_student(student: Student) -> Student:
    """Administrative Entsperrung."""
    logger.info(f"Sperre für {student.name} ({student.id}) aufgehoben")
    return student.model_copy(update={"is_banned": False, "ban_end_date": None})


def banned_students(
    students: list[Student], now: Optional[datetime] = None
) -> list[Student]:
    """Alle Schüler, deren Sperre zum Zeitpunkt now greift."""
    now = now or utc_now()
    return [s for s in students if is_banned(s, now)]
