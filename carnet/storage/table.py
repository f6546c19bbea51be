import datetime
import decimal

from sqlalchemy import ForeignKey, func, MetaData, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, MappedAsDataclass
from sqlalchemy.types import Numeric

from carnet.model import AssignmentID, AttendanceRecordID, AttendanceSessionID, GradeID, UserID

from .type import PrefixedIDType, UTCDateTime

metadata = MetaData()


class base(MappedAsDataclass, DeclarativeBase):
    metadata = metadata
    type_annotation_map = {
        UserID: PrefixedIDType(UserID),
        GradeID: PrefixedIDType(GradeID),
        AttendanceSessionID: PrefixedIDType(AttendanceSessionID),
        AttendanceRecordID: PrefixedIDType(AttendanceRecordID),
        AssignmentID: PrefixedIDType(AssignmentID),
        datetime.datetime: UTCDateTime(),
        decimal.Decimal: Numeric(6, 2),
    }


# Users


class users(base):
    __tablename__ = "users"

    user_id: Mapped[UserID] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(unique=True)
    name: Mapped[str]
    role: Mapped[str]
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())
    update_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now(), onupdate=func.now())


# Grades


class grades(base):
    __tablename__ = "grades"

    grade_id: Mapped[GradeID] = mapped_column(primary_key=True)
    student_id: Mapped[UserID] = mapped_column(ForeignKey("users.user_id"), index=True)
    recorded_by: Mapped[UserID] = mapped_column(ForeignKey("users.user_id"))
    recorded_by_role: Mapped[str]

    subject: Mapped[str]
    value: Mapped[decimal.Decimal]
    grade_type: Mapped[str] = mapped_column(default="controle")
    scale: Mapped[decimal.Decimal] = mapped_column(default=decimal.Decimal(20))
    coefficient: Mapped[decimal.Decimal] = mapped_column(default=decimal.Decimal(1))
    comment: Mapped[str | None] = mapped_column(default=None)

    # create_time is the start of every edit window on a grade; never updated
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())
    update_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now(), onupdate=func.now())


# Attendance


class attendance_sessions(base):
    __tablename__ = "attendance_sessions"

    session_id: Mapped[AttendanceSessionID] = mapped_column(primary_key=True)
    teacher_id: Mapped[UserID] = mapped_column(ForeignKey("users.user_id"))
    class_name: Mapped[str]
    subject: Mapped[str]
    starts_at: Mapped[datetime.datetime]
    ends_at: Mapped[datetime.datetime]
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())


class attendance_records(base):
    __tablename__ = "attendance_records"
    __table_args__ = (UniqueConstraint("session_id", "student_id"),)

    record_id: Mapped[AttendanceRecordID] = mapped_column(primary_key=True)
    session_id: Mapped[AttendanceSessionID] = mapped_column(ForeignKey("attendance_sessions.session_id"))
    student_id: Mapped[UserID] = mapped_column(ForeignKey("users.user_id"))
    recorded_by: Mapped[UserID] = mapped_column(ForeignKey("users.user_id"))
    recorded_by_role: Mapped[str]

    status: Mapped[str] = mapped_column(default="present")
    late_minutes: Mapped[int | None] = mapped_column(default=None)
    justification: Mapped[str | None] = mapped_column(default=None)

    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())
    update_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now(), onupdate=func.now())


# Assignments


class assignments(base):
    __tablename__ = "assignments"

    assignment_id: Mapped[AssignmentID] = mapped_column(primary_key=True)
    assigned_by: Mapped[UserID] = mapped_column(ForeignKey("users.user_id"))
    assigned_by_role: Mapped[str]

    class_name: Mapped[str] = mapped_column(index=True)
    subject: Mapped[str]
    title: Mapped[str]
    due_at: Mapped[datetime.datetime]
    description: Mapped[str | None] = mapped_column(default=None)

    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())
    update_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now(), onupdate=func.now())
