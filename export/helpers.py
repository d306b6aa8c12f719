"""Gemeinsame Hilfsfunktionen für Excel- und PDF-Export."""

from datetime import date
from typing import Optional

from models.session import Session, SessionStatus
from models.student import Student
from models.teacher import Teacher

UNKNOWN = "Unbekannt"

# ─── Farbpalette (RRGGBB, ohne #) ─────────────────────────────────────────────

COLORS: dict[str, str] = {
    "scheduled": "B3D4FF",
    "completed": "B3FFB3",
    "absent":    "FF9999",
    "free":      "F5F5F5",
    "banned":    "FFCCCC",
    "header":    "4472C4",
}

MONTH_NAMES: list[str] = [
    "Januar", "Februar", "März", "April", "Mai", "Juni",
    "Juli", "August", "September", "Oktober", "November", "Dezember",
]


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """Wandelt RRGGBB-String in (r, g, b)-Tupel um."""
    h = hex_color.lstrip("#")
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def today_str() -> str:
    """Gibt das heutige Datum als DD.MM.YYYY zurück."""
    return date.today().strftime("%d.%m.%Y")


def status_color(status: SessionStatus) -> str:
    return COLORS.get(status.value, COLORS["free"])


def safe_filename(text: str) -> str:
    """Leerzeichen und Bindestriche werden zu Unterstrichen ("Ali Veli" → "Ali_Veli")."""
    return text.strip().replace(" ", "_").replace("-", "_").replace("/", "_")


# ─── Nachschlagen ─────────────────────────────────────────────────────────────

def teacher_name(teacher_id: str, teachers: list[Teacher]) -> str:
    t = next((t for t in teachers if t.id == teacher_id), None)
    return t.name if t else UNKNOWN


def student_of(student_id: str, students: list[Student]) -> Optional[Student]:
    return next((s for s in students if s.id == student_id), None)


def sort_sessions(sessions: list[Session]) -> list[Session]:
    """Chronologisch nach Datum, dann nach Slot-Beginn."""
    return sorted(sessions, key=lambda s: (s.date, s.time_slot))


# ─── Zeilen-Aufbau ────────────────────────────────────────────────────────────

TEACHER_HEADERS = ["Datum", "Uhrzeit", "Lehrkraft", "Schüler", "Fach",
                   "Status", "Woche", "Notizen"]
STUDENT_HEADERS = ["Datum", "Uhrzeit", "Schüler", "Klasse", "Lehrkraft", "Fach",
                   "Status", "Woche", "Notizen"]


def teacher_row(
    session: Session, teachers: list[Teacher], students: list[Student]
) -> list[str]:
    """Zeile aus Sicht der Lehrkraft (Spalten wie TEACHER_HEADERS)."""
    student = student_of(session.student_id, students)
    return [
        session.date.strftime("%d.%m.%Y"),
        session.time_slot,
        teacher_name(session.teacher_id, teachers),
        student.name if student else UNKNOWN,
        session.subject,
        session.status_label,
        session.week_year,
        session.notes or "",
    ]


def student_row(
    session: Session, teachers: list[Teacher], students: list[Student]
) -> list[str]:
    """Zeile aus Sicht des Schülers (Spalten wie STUDENT_HEADERS)."""
    student = student_of(session.student_id, students)
    return [
        session.date.strftime("%d.%m.%Y"),
        session.time_slot,
        student.name if student else UNKNOWN,
        student.class_name if student else UNKNOWN,
        teacher_name(session.teacher_id, teachers),
        session.subject,
        session.status_label,
        session.week_year,
        session.notes or "",
    ]


def format_cell(sessions: list[Session], students: list[Student], mode: str = "teacher") -> str:
    """Zelleninhalt im Wochenraster.

    mode='teacher': "Schüler (Klasse)"
    mode='all':     "Fach: Schüler"
    Mehrere Förderstunden werden durch Zeilenumbrüche getrennt.
    """
    parts = []
    for s in sessions:
        student = student_of(s.student_id, students)
        name = student.name if student else UNKNOWN
        if mode == "teacher":
            cls = student.class_name if student else "?"
            parts.append(f"{name} ({cls})")
        else:
            parts.append(f"{s.subject}: {name}")
    return "\n".join(parts)
