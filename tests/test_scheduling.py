"""Tests für Wochen-Kennung, Verfügbarkeit, Konfliktprüfung und Buchung."""

from datetime import date, datetime, timedelta, timezone

import pytest

from models.session import Session, SessionStatus
from models.student import Student
from models.teacher import Teacher
from scheduling import (
    RejectionReason,
    available_teachers,
    book_session,
    is_available,
    monday_of,
    set_availability,
    student_free,
    teacher_free,
    validate_assignment,
    week_dates,
    week_year,
    weekday_name,
    weekly_subject_free,
)
from scheduling.validator import create_session


MONDAY = date(2024, 3, 4)
NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


# ─── Hilfsfunktionen ──────────────────────────────────────────────────────────

def _make_teacher(
    tid: str = "t1", name: str = "Ahmet Hoca", subject: str = "Mathematik",
    hours: dict | None = None,
) -> Teacher:
    if hours is None:
        hours = {"Montag": ["09:30-10:10", "10:20-11:00"], "Dienstag": ["11:10-11:50"]}
    return Teacher(id=tid, name=name, subject=subject, available_hours=hours)


def _make_student(sid: str = "s1", name: str = "Ali Veli", cls: str = "9-A",
                  number: str = "001") -> Student:
    return Student(id=sid, name=name, class_name=cls, student_number=number)


def _make_session(
    sid: str = "x1", teacher_id: str = "t1", student_id: str = "s1",
    on: date = MONDAY, slot: str = "09:30-10:10", subject: str = "Mathematik",
    status: SessionStatus = SessionStatus.SCHEDULED,
) -> Session:
    return Session(
        id=sid, teacher_id=teacher_id, student_id=student_id, date=on,
        time_slot=slot, subject=subject, week_year=week_year(on),
        status=status, created_at=NOW,
    )


# ─── WOCHEN-KENNUNG ───────────────────────────────────────────────────────────

class TestWeekYear:
    def test_march_weeks(self):
        assert week_year(date(2024, 3, 4)) == "2024-W10"
        assert week_year(date(2024, 3, 11)) == "2024-W11"

    def test_same_id_for_whole_week(self):
        """Montag bis Sonntag derselben Woche teilen die Kennung."""
        ids = {week_year(d) for d in week_dates(MONDAY)}
        assert ids == {"2024-W10"}

    def test_datetime_input(self):
        assert week_year(datetime(2024, 3, 6, 18, 30)) == "2024-W10"

    def test_year_boundary_gives_two_ids(self):
        """Eine Woche über den Jahreswechsel hat zwei Kennungen."""
        assert week_year(date(2024, 12, 30)) == "2024-W53"
        assert week_year(date(2025, 1, 1)) == "2025-W01"

    def test_week_zero_when_year_starts_on_sunday(self):
        assert week_year(date(2023, 1, 1)) == "2023-W00"
        assert week_year(date(2023, 1, 2)) == "2023-W01"

    def test_monday_of_and_week_dates(self):
        assert monday_of(date(2024, 3, 10)) == MONDAY
        days = week_dates(date(2024, 3, 7))
        assert days[0] == MONDAY
        assert days[-1] == date(2024, 3, 10)
        assert len(days) == 7

    def test_weekday_name(self):
        assert weekday_name(MONDAY) == "Montag"
        assert weekday_name(MONDAY + timedelta(days=6)) == "Sonntag"
        english = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
        assert weekday_name(MONDAY, english) == "Mon"


# ─── VERFÜGBARKEIT ────────────────────────────────────────────────────────────

class TestAvailability:
    def test_listed_slot_is_available(self):
        assert is_available(_make_teacher(), "Montag", "09:30-10:10")

    def test_unlisted_slot_not_available(self):
        assert not is_available(_make_teacher(), "Montag", "11:10-11:50")

    def test_missing_day_not_available(self):
        assert not is_available(_make_teacher(), "Freitag", "09:30-10:10")

    def test_available_teachers(self):
        a = _make_teacher("t1")
        b = _make_teacher("t2", name="Ayşe Öğretmen", subject="Physik",
                          hours={"Montag": ["10:20-11:00"]})
        assert [t.id for t in available_teachers([a, b], "Montag", "10:20-11:00")] == ["t1", "t2"]
        assert [t.id for t in available_teachers([a, b], "Montag", "09:30-10:10")] == ["t1"]

    def test_set_availability_dedupes_and_copies(self):
        t = _make_teacher()
        updated = set_availability(t, "Freitag", ["12:00-12:40", "12:00-12:40"])
        assert updated.slots_on("Freitag") == ["12:00-12:40"]
        assert t.slots_on("Freitag") == []


# ─── KONFLIKTE ────────────────────────────────────────────────────────────────

class TestConflicts:
    def test_teacher_free_other_day(self):
        sessions = [_make_session()]
        assert not teacher_free("t1", "09:30-10:10", MONDAY, sessions)
        assert teacher_free("t1", "09:30-10:10", MONDAY + timedelta(days=7), sessions)
        assert teacher_free("t1", "10:20-11:00", MONDAY, sessions)

    def test_student_free(self):
        sessions = [_make_session()]
        assert not student_free("s1", "09:30-10:10", MONDAY, sessions)
        assert student_free("s2", "09:30-10:10", MONDAY, sessions)

    def test_weekly_subject_counts_every_status(self):
        sessions = [_make_session(status=SessionStatus.ABSENT)]
        wednesday = MONDAY + timedelta(days=2)
        assert not weekly_subject_free("s1", "Mathematik", wednesday, sessions)
        assert weekly_subject_free("s1", "Physik", wednesday, sessions)
        assert weekly_subject_free("s1", "Mathematik", MONDAY + timedelta(days=7), sessions)


# ─── BUCHUNG ──────────────────────────────────────────────────────────────────

class TestValidateAssignment:
    def setup_method(self):
        self.teachers = [
            _make_teacher(),
            _make_teacher("t2", name="Ayşe Öğretmen", subject="Physik",
                          hours={"Montag": ["09:30-10:10"], "Donnerstag": ["10:20-11:00"]}),
        ]
        self.students = [_make_student(), _make_student("s2", "Fatma Yılmaz", "10-B", "002")]

    def _validate(self, teacher_id="t1", student_id="s1", slot="09:30-10:10",
                  on=MONDAY, sessions=None, subject=None, students=None):
        return validate_assignment(
            teacher_id, student_id, subject, slot, on,
            self.teachers, students or self.students, sessions or [], now=NOW,
        )

    def test_valid_booking(self):
        result = self._validate()
        assert result.valid
        assert result.reason is None

    def test_unknown_teacher(self):
        result = self._validate(teacher_id="nope")
        assert not result.valid
        assert result.reason == RejectionReason.NOT_FOUND

    def test_unknown_student(self):
        assert self._validate(student_id="nope").reason == RejectionReason.NOT_FOUND

    def test_banned_student(self):
        banned = self.students[0].model_copy(update={
            "is_banned": True, "ban_end_date": NOW + timedelta(days=3),
        })
        result = self._validate(students=[banned, self.students[1]])
        assert result.reason == RejectionReason.BANNED
        assert result.ban_end_date == NOW + timedelta(days=3)

    def test_expired_ban_is_ignored(self):
        expired = self.students[0].model_copy(update={
            "is_banned": True, "ban_end_date": NOW - timedelta(minutes=1),
        })
        assert self._validate(students=[expired]).valid

    def test_weekly_limit_other_teacher_same_subject(self):
        other = _make_teacher("t3", name="Mathe Zwei", hours={"Mittwoch": ["09:30-10:10"]})
        self.teachers.append(other)
        sessions = [_make_session()]
        result = self._validate(teacher_id="t3", on=MONDAY + timedelta(days=2),
                                sessions=sessions)
        assert result.reason == RejectionReason.WEEKLY_LIMIT_EXCEEDED
        assert result.conflicting_session.id == "x1"

    def test_other_subject_same_week_allowed(self):
        sessions = [_make_session()]
        result = self._validate(teacher_id="t2", slot="10:20-11:00",
                                on=MONDAY + timedelta(days=3), sessions=sessions)
        assert result.valid

    def test_teacher_unavailable(self):
        result = self._validate(slot="11:10-11:50")
        assert result.reason == RejectionReason.TEACHER_UNAVAILABLE

    def test_teacher_double_booked(self):
        sessions = [_make_session(student_id="s2")]
        result = self._validate(sessions=sessions)
        assert result.reason == RejectionReason.TEACHER_DOUBLE_BOOKED

    def test_student_double_booked(self):
        sessions = [_make_session(teacher_id="t2", subject="Physik")]
        result = self._validate(sessions=sessions)
        assert result.reason == RejectionReason.STUDENT_DOUBLE_BOOKED

    def test_ban_checked_before_availability(self):
        """Reihenfolge: Sperre vor Verfügbarkeit."""
        banned = self.students[0].model_copy(update={
            "is_banned": True, "ban_end_date": NOW + timedelta(days=1),
        })
        result = self._validate(slot="11:10-11:50", students=[banned])
        assert result.reason == RejectionReason.BANNED

    def test_weekly_limit_checked_before_double_booking(self):
        """Dieselbe Buchung zweimal → Wochenregel greift zuerst."""
        result = self._validate(sessions=[_make_session()])
        assert result.reason == RejectionReason.WEEKLY_LIMIT_EXCEEDED

    def test_mismatched_subject_is_ignored(self):
        """Das Fach kommt immer von der Lehrkraft."""
        assert self._validate(subject="Physik").valid


class TestBookSession:
    def setup_method(self):
        self.teachers = [_make_teacher()]
        self.students = [_make_student()]

    def test_book_creates_session_with_teacher_subject(self):
        result, sessions = book_session(
            "t1", "s1", "09:30-10:10", MONDAY, self.teachers, self.students, [], now=NOW,
        )
        assert result.valid
        assert len(sessions) == 1
        s = sessions[0]
        assert s.subject == "Mathematik"
        assert s.week_year == "2024-W10"
        assert s.status == SessionStatus.SCHEDULED
        assert s.created_at == NOW

    def test_rejected_booking_is_idempotent(self):
        _, sessions = book_session(
            "t1", "s1", "09:30-10:10", MONDAY, self.teachers, self.students, [], now=NOW,
        )
        first, after_first = book_session(
            "t1", "s1", "09:30-10:10", MONDAY, self.teachers, self.students, sessions, now=NOW,
        )
        second, after_second = book_session(
            "t1", "s1", "09:30-10:10", MONDAY, self.teachers, self.students, after_first,
            now=NOW,
        )
        assert not first.valid and not second.valid
        assert first.reason == second.reason == RejectionReason.WEEKLY_LIMIT_EXCEEDED
        assert after_second == sessions

    def test_next_week_is_allowed_again(self):
        _, sessions = book_session(
            "t1", "s1", "09:30-10:10", MONDAY, self.teachers, self.students, [], now=NOW,
        )
        result, sessions = book_session(
            "t1", "s1", "09:30-10:10", MONDAY + timedelta(days=7),
            self.teachers, self.students, sessions, now=NOW,
        )
        assert result.valid
        assert [s.week_year for s in sessions] == ["2024-W10", "2024-W11"]

    def test_input_list_not_mutated(self):
        before: list[Session] = []
        book_session("t1", "s1", "09:30-10:10", MONDAY, self.teachers, self.students,
                     before, now=NOW)
        assert before == []

    def test_create_session_from_datetime(self):
        s = create_session(self.teachers[0], self.students[0], "09:30-10:10",
                           datetime(2024, 3, 4, 9, 30), now=NOW, session_id="fixed")
        assert s.id == "fixed"
        assert s.date == MONDAY
