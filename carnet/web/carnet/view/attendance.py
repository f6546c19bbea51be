"""View models for attendance taking."""

from __future__ import annotations

import datetime
import typing as t

import annotated_types as ant
import pydantic as p

from carnet.model import AttendanceRecord, AttendanceRecordID, AttendanceSession, AttendanceSessionID, \
    AttendanceStatus, Role, UserID


class SessionCreateRequest(p.BaseModel):
    """Request to schedule a course session."""

    class_name: str
    subject: str
    starts_at: p.AwareDatetime
    ends_at: p.AwareDatetime

    @p.model_validator(mode="after")
    def check_order(self) -> t.Self:
        if self.ends_at <= self.starts_at:
            raise ValueError("session must end after it starts")
        return self


class RecordCreateRequest(p.BaseModel):
    """Attendance of one student for a session."""

    student_id: UserID
    status: AttendanceStatus = AttendanceStatus.Present
    late_minutes: t.Annotated[int, ant.Ge(0)] | None = None
    justification: str | None = None


class RecordUpdateRequest(p.BaseModel):
    """Request to correct an attendance record. Omitted fields are left unchanged.

    A guardian justifying an absence typically sends only ``justification``.
    """

    status: AttendanceStatus | None = None
    late_minutes: t.Annotated[int, ant.Ge(0)] | None = None
    justification: str | None = None


class RecordResponse(p.BaseModel):
    """Attendance record response."""

    record_id: AttendanceRecordID
    session_id: AttendanceSessionID
    student_id: UserID
    recorded_by: UserID
    recorded_by_role: Role
    status: AttendanceStatus
    late_minutes: int | None = None
    justification: str | None = None
    create_time: datetime.datetime
    update_time: datetime.datetime

    @classmethod
    def from_model(cls, record: AttendanceRecord) -> RecordResponse:
        return cls(**record.model_dump())


class SessionResponse(p.BaseModel):
    """Course session with the attendance taken so far."""

    session_id: AttendanceSessionID
    teacher_id: UserID
    class_name: str
    subject: str
    starts_at: datetime.datetime
    ends_at: datetime.datetime
    create_time: datetime.datetime
    records: list[RecordResponse] = []

    @classmethod
    def from_model(cls, session: AttendanceSession, records: t.Iterable[AttendanceRecord] = ()) -> SessionResponse:
        return cls(**session.model_dump(), records=[RecordResponse.from_model(r) for r in records])
