"""Gemeinsamer Renderer für die Wochenansicht.

Wird von cmd_week (Rich-Tabelle) und vom PDF-Export verwendet.
"""

from datetime import date
from typing import Optional, Sequence

from models.school_data import SchoolData
from models.session import Session
from scheduling.weeks import week_dates, weekday_name


def week_grid(
    day: date,
    data: SchoolData,
    teacher_id: Optional[str] = None,
) -> dict[tuple[date, str], list[Session]]:
    """Baut {(Kalendertag, Slot-Label): [Förderstunden]} für die Woche von day."""
    days = set(week_dates(day))
    grid: dict[tuple[date, str], list[Session]] = {}
    for s in data.sessions:
        if s.date not in days:
            continue
        if teacher_id is not None and s.teacher_id != teacher_id:
            continue
        grid.setdefault((s.date, s.time_slot), []).append(s)
    return grid


def slot_rows_for_week(day: date, data: SchoolData) -> list[str]:
    """Zeilen der Wochenansicht: alle aktiven Slots plus Slots mit Förderstunden.

    Förderstunden in inzwischen gelöschten oder deaktivierten Slots bleiben
    so sichtbar.
    """
    active = [ts for ts in data.time_slots if ts.is_active]
    labels = [ts.label for ts in sorted(active, key=lambda ts: ts.start_time)]
    days = set(week_dates(day))
    extra = sorted({s.time_slot for s in data.sessions if s.date in days} - set(labels))
    return sorted(labels + extra)


def render_week_rows(
    day: date,
    data: SchoolData,
    teacher_id: Optional[str] = None,
    day_names: Optional[Sequence[str]] = None,
) -> list[list[str]]:
    """Gibt Tabellenzeilen für die Wochenansicht zurück.

    Jede Zeile: [slot_label, Mo, Di, Mi, Do, Fr, Sa, So]
    Mit teacher_id werden Schüler und Klasse gezeigt, sonst Fach und Schüler.
    Die Verfügbarkeit der Lehrkraft wird als '·' markiert, sonst '—'.
    """
    from export.helpers import format_cell

    dates = week_dates(day)
    grid = week_grid(day, data, teacher_id)
    teacher = data.get_teacher(teacher_id) if teacher_id else None
    mode = "teacher" if teacher_id else "all"

    rows: list[list[str]] = []
    for label in slot_rows_for_week(day, data):
        cells = [label]
        for d in dates:
            here = grid.get((d, label), [])
            if here:
                cells.append(format_cell(here, data.students, mode))
            elif teacher is not None and label in teacher.slots_on(weekday_name(d, day_names)):
                cells.append("·")
            else:
                cells.append("—")
        rows.append(cells)
    return rows


def week_header(day: date, day_names: Optional[Sequence[str]] = None) -> list[str]:
    """Kopfzeile: ["Zeit", "Montag 04.03.", ...]."""
    return ["Zeit"] + [
        f"{weekday_name(d, day_names)} {d:%d.%m.}" for d in week_dates(day)
    ]
