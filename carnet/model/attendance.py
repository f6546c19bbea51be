import datetime

from .base import WithCtime, WithTimestamps
from .enum import AttendanceStatus, Role
from .id import AttendanceRecordID, AttendanceSessionID, UserID


class AttendanceSession(WithCtime):
    """A scheduled course meeting that attendance is taken for."""

    session_id: AttendanceSessionID
    teacher_id: UserID
    class_name: str
    subject: str
    starts_at: datetime.datetime
    ends_at: datetime.datetime


class AttendanceRecord(WithTimestamps):
    record_id: AttendanceRecordID
    session_id: AttendanceSessionID
    student_id: UserID
    recorded_by: UserID
    recorded_by_role: Role

    status: AttendanceStatus = AttendanceStatus.Present
    late_minutes: int | None = None
    justification: str | None = None
