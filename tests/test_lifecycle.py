"""Tests für Sperren und Statusübergänge von Förderstunden."""

from datetime import date, datetime, timedelta, timezone

import pytest

from models.session import Session, SessionStatus
from models.student import Student
from models.teacher import Teacher
from scheduling import (
    RejectionReason,
    SessionNotFoundError,
    SessionTransitionError,
    ban_student,
    banned_students,
    book_session,
    delete_session,
    is_banned,
    mark_absent,
    mark_completed,
    unban_student,
    update_notes,
)


MONDAY = date(2024, 3, 4)
T0 = datetime(2024, 3, 4, 10, 15, tzinfo=timezone.utc)


def _make_student(sid: str = "s1", number: str = "001") -> Student:
    return Student(id=sid, name="Ali Veli", class_name="9-A", student_number=number)


def _make_teacher() -> Teacher:
    return Teacher(
        id="t1", name="Ahmet Hoca", subject="Mathematik",
        available_hours={
            "Montag": ["09:30-10:10"],
            "Dienstag": ["09:30-10:10"],
        },
    )


def _booked(on: date = MONDAY) -> tuple[list[Session], list[Student]]:
    students = [_make_student()]
    _, sessions = book_session("t1", "s1", "09:30-10:10", on, [_make_teacher()],
                               students, [], now=T0)
    return sessions, students


# ─── SPERREN ──────────────────────────────────────────────────────────────────

class TestBans:
    def test_fresh_student_not_banned(self):
        assert not is_banned(_make_student(), T0)

    def test_ban_runs_fourteen_days(self):
        banned = ban_student(_make_student(), now=T0)
        assert banned.is_banned
        assert banned.ban_end_date == T0 + timedelta(days=14)
        assert is_banned(banned, T0 + timedelta(days=13, hours=23))

    def test_ban_expires_lazily(self):
        """Nach Ablauf gilt der Schüler als frei, das Flag bleibt gespeichert."""
        banned = ban_student(_make_student(), now=T0)
        later = T0 + timedelta(days=14)
        assert not is_banned(banned, later)
        assert banned.is_banned

    def test_custom_ban_days(self):
        banned = ban_student(_make_student(), now=T0, days=3)
        assert banned.ban_end_date == T0 + timedelta(days=3)

    def test_flag_without_end_date_is_not_a_ban(self):
        s = _make_student().model_copy(update={"is_banned": True})
        assert not is_banned(s, T0)

    def test_unban(self):
        cleared = unban_student(ban_student(_make_student(), now=T0))
        assert not cleared.is_banned
        assert cleared.ban_end_date is None

    def test_banned_students(self):
        a = ban_student(_make_student("s1", "001"), now=T0)
        b = _make_student("s2", "002")
        assert [s.id for s in banned_students([a, b], T0)] == ["s1"]
        assert banned_students([a, b], T0 + timedelta(days=15)) == []


# ─── STATUSÜBERGÄNGE ──────────────────────────────────────────────────────────

class TestTransitions:
    def test_complete(self):
        sessions, _ = _booked()
        result = mark_completed(sessions[0].id, sessions)
        assert result[0].status == SessionStatus.COMPLETED
        assert sessions[0].status == SessionStatus.SCHEDULED

    def test_absent_bans_student(self):
        sessions, students = _booked()
        new_sessions, new_students = mark_absent(sessions[0].id, sessions, students, now=T0)
        assert new_sessions[0].status == SessionStatus.ABSENT
        assert new_students[0].is_banned
        assert new_students[0].ban_end_date == T0 + timedelta(days=14)
        assert not students[0].is_banned

    def test_absent_blocks_every_subject(self):
        sessions, students = _booked()
        sessions, students = mark_absent(sessions[0].id, sessions, students, now=T0)
        physics = Teacher(id="t2", name="Ayşe Öğretmen", subject="Physik",
                          available_hours={"Dienstag": ["09:30-10:10"]})
        result, _ = book_session("t2", "s1", "09:30-10:10", MONDAY + timedelta(days=1),
                                 [physics], students, sessions, now=T0 + timedelta(hours=1))
        assert result.reason == RejectionReason.BANNED

    def test_booking_allowed_after_ban_expires(self):
        sessions, students = _booked()
        sessions, students = mark_absent(sessions[0].id, sessions, students, now=T0)
        later = MONDAY + timedelta(days=15)   # Dienstag, übernächste Woche
        result, _ = book_session("t1", "s1", "09:30-10:10", later, [_make_teacher()],
                                 students, sessions, now=T0 + timedelta(days=15))
        assert result.valid

    def test_terminal_states_are_final(self):
        sessions, students = _booked()
        done = mark_completed(sessions[0].id, sessions)
        with pytest.raises(SessionTransitionError):
            mark_completed(sessions[0].id, done)
        with pytest.raises(SessionTransitionError):
            mark_absent(sessions[0].id, done, students, now=T0)

    def test_absent_is_final(self):
        sessions, students = _booked()
        sessions, students = mark_absent(sessions[0].id, sessions, students, now=T0)
        with pytest.raises(SessionTransitionError):
            mark_completed(sessions[0].id, sessions)

    def test_unknown_session(self):
        with pytest.raises(SessionNotFoundError):
            mark_completed("nope", [])
        with pytest.raises(SessionNotFoundError):
            delete_session("nope", [])

    def test_absent_with_missing_student(self):
        sessions, _ = _booked()
        others = [_make_student("99")]
        with pytest.raises(SessionNotFoundError):
            mark_absent(sessions[0].id, sessions, others, now=T0)
        assert sessions[0].status == SessionStatus.SCHEDULED
        assert not others[0].is_banned

    def test_notes_editable_in_any_state(self):
        sessions, _ = _booked()
        done = mark_completed(sessions[0].id, sessions)
        noted = update_notes(sessions[0].id, "Bruchrechnung geübt", done)
        assert noted[0].notes == "Bruchrechnung geübt"
        assert noted[0].status == SessionStatus.COMPLETED

    def test_delete_keeps_ban(self):
        sessions, students = _booked()
        sessions, students = mark_absent(sessions[0].id, sessions, students, now=T0)
        remaining = delete_session(sessions[0].id, sessions)
        assert remaining == []
        assert is_banned(students[0], T0 + timedelta(days=1))

    def test_delete_frees_the_week(self):
        """Nach dem Löschen ist die Wochenregel für dieses Fach wieder frei."""
        sessions, students = _booked()
        remaining = delete_session(sessions[0].id, sessions)
        result, _ = book_session("t1", "s1", "09:30-10:10", MONDAY, [_make_teacher()],
                                 students, remaining, now=T0)
        assert result.valid
