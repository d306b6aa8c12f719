"""Auswertungen über den Förderstunden-Bestand.

Kennzahlen nach Status, Verteilung nach Lehrkraft und Fach, Monatsverlauf
und Schülerübersicht.
"""

from collections import Counter
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel

from models.school_data import SchoolData
from models.session import SessionStatus
from scheduling.bans import banned_students, is_banned
from scheduling.weeks import utc_now
from export.helpers import MONTH_NAMES


# ─── Metriken-Modelle ─────────────────────────────────────────────────────────

class TeacherStats(BaseModel):
    teacher_id: str
    name: str
    subject: str
    sessions: int


class MonthStats(BaseModel):
    year: int
    month: int
    sessions: int

    @property
    def label(self) -> str:
        return f"{MONTH_NAMES[self.month - 1][:3]} {self.year}"


class StudentStats(BaseModel):
    student_id: str
    name: str
    class_name: str
    total: int
    completed: int
    absent: int
    scheduled: int
    is_banned: bool


class StatisticsReport(BaseModel):
    """Vollständige Auswertung zu einem Stichtag."""

    total: int
    scheduled: int
    completed: int
    absent: int
    completion_rate: float              # completed / total, 0.0 ohne Förderstunden
    banned_count: int
    per_teacher: list[TeacherStats]     # absteigend nach Anzahl
    per_subject: dict[str, int]
    monthly: list[MonthStats]           # älteste zuerst
    per_student: list[StudentStats]


def _months_back(today: date, count: int) -> list[tuple[int, int]]:
    """Die letzten count Kalendermonate bis einschließlich today, älteste zuerst."""
    result = []
    year, month = today.year, today.month
    for _ in range(count):
        result.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(result))


# ─── Analyzer ─────────────────────────────────────────────────────────────────

class SessionStatistics:
    """Berechnet die Kennzahlen für einen SchoolData-Stand."""

    def __init__(self, months: int = 6) -> None:
        self.months = months

    def analyze(
        self, data: SchoolData, now: Optional[datetime] = None
    ) -> StatisticsReport:
        now = now or utc_now()
        sessions = data.sessions
        by_status = Counter(s.status for s in sessions)
        total = len(sessions)
        completed = by_status.get(SessionStatus.COMPLETED, 0)

        return StatisticsReport(
            total=total,
            scheduled=by_status.get(SessionStatus.SCHEDULED, 0),
            completed=completed,
            absent=by_status.get(SessionStatus.ABSENT, 0),
            completion_rate=round(completed / total, 4) if total else 0.0,
            banned_count=len(banned_students(data.students, now)),
            per_teacher=self.per_teacher(data),
            per_subject=self.per_subject(data),
            monthly=self.monthly(data, now.date()),
            per_student=self.per_student(data, now),
        )

    def per_teacher(self, data: SchoolData) -> list[TeacherStats]:
        counts = Counter(s.teacher_id for s in data.sessions)
        stats = [
            TeacherStats(teacher_id=t.id, name=t.name, subject=t.subject,
                         sessions=counts.get(t.id, 0))
            for t in data.teachers
        ]
        return sorted(stats, key=lambda m: (-m.sessions, m.name))

    def per_subject(self, data: SchoolData) -> dict[str, int]:
        """Förderstunden je Fach (über das gespeicherte Fach der Stunde)."""
        counts = Counter(s.subject for s in data.sessions)
        for t in data.teachers:
            counts.setdefault(t.subject, 0)
        return dict(sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])))

    def monthly(self, data: SchoolData, today: date) -> list[MonthStats]:
        counts = Counter((s.date.year, s.date.month) for s in data.sessions)
        return [
            MonthStats(year=y, month=m, sessions=counts.get((y, m), 0))
            for y, m in _months_back(today, self.months)
        ]

    def per_student(self, data: SchoolData, now: datetime) -> list[StudentStats]:
        result = []
        for st in sorted(data.students, key=lambda s: (s.class_name, s.name)):
            own = Counter(s.status for s in data.sessions if s.student_id == st.id)
            result.append(StudentStats(
                student_id=st.id,
                name=st.name,
                class_name=st.class_name,
                total=sum(own.values()),
                completed=own.get(SessionStatus.COMPLETED, 0),
                absent=own.get(SessionStatus.ABSENT, 0),
                scheduled=own.get(SessionStatus.SCHEDULED, 0),
                is_banned=is_banned(st, now),
            ))
        return result

    def print_rich(self, report: StatisticsReport) -> None:
        """Gibt die Auswertung formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()

        rate_color = (
            "green" if report.completion_rate >= 0.8
            else "yellow" if report.completion_rate >= 0.5
            else "red"
        )
        console.print(Panel(
            f"Förderstunden gesamt: [bold]{report.total}[/bold]\n"
            f"Geplant: {report.scheduled}  |  Abgeschlossen: {report.completed}  |  "
            f"Nicht erschienen: [red]{report.absent}[/red]\n"
            f"Abschlussquote: [{rate_color}]{report.completion_rate:.0%}[/{rate_color}]  |  "
            f"Gesperrte Schüler: {report.banned_count}",
            title="Auswertung",
            border_style="cyan",
        ))

        t = Table(title="Förderstunden je Lehrkraft", box=box.ROUNDED)
        t.add_column("Lehrkraft", style="bold")
        t.add_column("Fach")
        t.add_column("Stunden", justify="right")
        for m in report.per_teacher:
            t.add_row(m.name, m.subject, str(m.sessions))
        console.print(t)

        t = Table(title="Förderstunden je Fach", box=box.ROUNDED)
        t.add_column("Fach", style="bold")
        t.add_column("Stunden", justify="right")
        for subject, count in report.per_subject.items():
            t.add_row(subject, str(count))
        console.print(t)

        t = Table(title=f"Verlauf (letzte {len(report.monthly)} Monate)", box=box.ROUNDED)
        t.add_column("Monat")
        t.add_column("Stunden", justify="right")
        t.add_column("")
        peak = max((m.sessions for m in report.monthly), default=0) or 1
        for m in report.monthly:
            t.add_row(m.label, str(m.sessions), "█" * round(20 * m.sessions / peak))
        console.print(t)
