"""Kernlogik: Zeitslots, Verfügbarkeit, Konfliktprüfung, Buchung und Sperren."""

from .weeks import week_year, weekday_name, monday_of, week_dates, utc_now
from .timeslots import TimeSlotRegistry, TimeSlotError
from .availability import is_available, available_teachers, set_availability
from .conflicts import teacher_free, student_free, weekly_subject_free
from .bans import is_banned, ban_student, unban_student, banned_students
from .validator import (
    RejectionReason,
    ValidationResult,
    validate_assignment,
    create_session,
    book_session,
)
from .lifecycle import (
    SessionNotFoundError,
    SessionTransitionError,
    mark_completed,
    mark_absent,
    update_notes,
    delete_session,
)

__all__ = [
    "week_year",
    "weekday_name",
    "monday_of",
    "week_dates",
    "utc_now",
    "TimeSlotRegistry",
    "TimeSlotError",
    "is_available",
    "available_teachers",
    "set_availability",
    "teacher_free",
    "student_free",
    "weekly_subject_free",
    "is_banned",
    "ban_student",
    "unban_student",
    "banned_students",
    "RejectionReason",
    "ValidationResult",
    "validate_assignment",
    "create_session",
    "book_session",
    "SessionNotFoundError",
    "SessionTransitionError",
    "mark_completed",
    "mark_absent",
    "update_notes",
    "delete_session",
]
