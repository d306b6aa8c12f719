"""Kalender-Hilfen: Wochen-Kennung, Wochentagsnamen und Uhr."""

import math
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Sequence

from config.defaults import WEEKDAY_NAMES


def utc_now() -> datetime:
    """Aktueller Zeitpunkt (zeitzonenbewusst, UTC)."""
    return datetime.now(timezone.utc)


def monday_of(day: date) -> date:
    """Montag der Woche, in der day liegt."""
    return day - timedelta(days=day.weekday())


def week_dates(day: date) -> list[date]:
    """Die sieben Kalendertage (Mo–So) der Woche von day."""
    start = monday_of(day)
    return [start + timedelta(days=i) for i in range(7)]


def week_year(day: date) -> str:
    """Wochen-Kennung "YYYY-Www" für die Wochenregel.

    Die Wochennummer zählt montags beginnende Wochen ab dem 1. Januar des
    Kalenderjahres von day. Das Jahr ist immer das Jahr von day, auch wenn der
    Wochenmontag noch im Vorjahr liegt; eine Woche über den Jahreswechsel
    bekommt daher zwei Kennungen (z.B. "2024-W53" und "2025-W01").
    """
    if isinstance(day, datetime):
        day = day.date()
    jan1 = date(day.year, 1, 1)
    # Wochentag des 1. Januar mit Sonntag = 0 ... Samstag = 6
    jan1_offset = (jan1.weekday() + 1) % 7
    days_since_jan1 = (monday_of(day) - jan1).days
    number = math.ceil((days_since_jan1 + jan1_offset + 1) / 7)
    return f"{day.year}-W{number:02d}"


def weekday_name(day: date, day_names: Optional[Sequence[str]] = None) -> str:
    """Name des Wochentags (Montag = Index 0)."""
    names = day_names or WEEKDAY_NAMES
    return names[day.weekday()]
