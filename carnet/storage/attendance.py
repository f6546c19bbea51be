from __future__ import annotations

import datetime
import typing as t

import sqlalchemy as sqla

from carnet.core import di, TimestampProvider
from carnet.lib import NotSet
from carnet.model import AttendanceRecord, AttendanceRecordID, AttendanceSession, AttendanceSessionID, \
    AttendanceStatus, Role, UserID

from . import Session
from .table import attendance_records, attendance_sessions
from .type import as_utc

# Sessions


def get_session(
    session_id: AttendanceSessionID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> AttendanceSession | None:
    stmt = sqla.select(attendance_sessions.__table__).where(attendance_sessions.session_id == session_id)
    row = session.execute(stmt).mappings().one_or_none()
    return AttendanceSession(**row) if row else None


def create_session(
    *,
    teacher_id: UserID,
    class_name: str,
    subject: str,
    starts_at: datetime.datetime,
    ends_at: datetime.datetime,
    session: Session = di.Provide["storage.persistent.session"],
    utcnow: TimestampProvider = di.Provide["utcnow"],
) -> AttendanceSession:
    """Schedule a course session.

    The session start is the reference point of the attendance edit windows.
    """
    starts_at, ends_at = as_utc(starts_at), as_utc(ends_at)
    if ends_at <= starts_at:
        raise ValueError("session must end after it starts")

    session_id = AttendanceSessionID()
    stmt = sqla.insert(attendance_sessions).values(
        session_id=session_id,
        teacher_id=teacher_id,
        class_name=class_name,
        subject=subject,
        starts_at=starts_at,
        ends_at=ends_at,
        create_time=utcnow(),
    )
    session.execute(stmt)
    session.flush()
    result = get_session(session_id, session=session)
    assert result is not None
    return result


# Records


def get(
    record_id: AttendanceRecordID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> AttendanceRecord | None:
    """Get an attendance record by ID."""
    stmt = sqla.select(attendance_records.__table__).where(attendance_records.record_id == record_id)
    row = session.execute(stmt).mappings().one_or_none()
    return AttendanceRecord(**row) if row else None


def find(
    *,
    session_id: AttendanceSessionID | None = None,
    student_id: UserID | None = None,
    status: AttendanceStatus | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[AttendanceRecord, ...]:
    """Find attendance records matching criteria."""
    stmt = sqla.select(attendance_records.__table__).order_by(attendance_records.create_time)
    if session_id is not None:
        stmt = stmt.where(attendance_records.session_id == session_id)
    if student_id is not None:
        stmt = stmt.where(attendance_records.student_id == student_id)
    if status is not None:
        stmt = stmt.where(attendance_records.status == status.value)
    rows = session.execute(stmt).mappings().all()
    return tuple(AttendanceRecord(**row) for row in rows)


def create(
    *,
    session_id: AttendanceSessionID,
    student_id: UserID,
    recorded_by: UserID,
    recorded_by_role: Role,
    status: AttendanceStatus = AttendanceStatus.Present,
    late_minutes: int | None = None,
    justification: str | None = None,
    session: Session = di.Provide["storage.persistent.session"],
    utcnow: TimestampProvider = di.Provide["utcnow"],
) -> AttendanceRecord:
    """Record a student's attendance for a session.

    Raises:
        sqlalchemy.exc.IntegrityError: If the student already has a record for the session
    """
    record_id = AttendanceRecordID()
    now = utcnow()
    stmt = sqla.insert(attendance_records).values(
        record_id=record_id,
        session_id=session_id,
        student_id=student_id,
        recorded_by=recorded_by,
        recorded_by_role=recorded_by_role.value,
        status=status.value,
        late_minutes=late_minutes,
        justification=justification,
        create_time=now,
        update_time=now,
    )
    session.execute(stmt)
    session.flush()
    result = get(record_id, session=session)
    assert result is not None
    return result


def update(
    record_id: AttendanceRecordID,
    *,
    status: AttendanceStatus | NotSet = NotSet(),
    late_minutes: int | None | NotSet = NotSet(),
    justification: str | None | NotSet = NotSet(),
    session: Session = di.Provide["storage.persistent.session"],
    utcnow: TimestampProvider = di.Provide["utcnow"],
) -> None:
    """Update an attendance record.

    Raises:
        KeyError: If record_id does not correspond to an attendance record
    """
    values: dict[str, t.Any] = {"update_time": utcnow()}
    if not isinstance(status, NotSet):
        values["status"] = status.value
    if not isinstance(late_minutes, NotSet):
        values["late_minutes"] = late_minutes
    if not isinstance(justification, NotSet):
        values["justification"] = justification

    stmt = sqla.update(attendance_records).where(attendance_records.record_id == record_id).values(**values)
    result = session.execute(stmt)
    if result.rowcount == 0:  # pyright: ignore[reportAttributeAccessIssue]
        raise KeyError(f"Attendance record {record_id} not found")

    session.flush()
