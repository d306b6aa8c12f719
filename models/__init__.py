from models.timeslot import TimeSlot
from models.teacher import Teacher
from models.student import Student
from models.session import Session, SessionStatus, STATUS_LABELS
from models.school_data import SchoolData, EntityError, new_id

__all__ = [
    "TimeSlot",
    "Teacher",
    "Student",
    "Session",
    "SessionStatus",
    "STATUS_LABELS",
    "SchoolData",
    "EntityError",
    "new_id",
]
