from __future__ import annotations

import datetime
import enum

import pydantic as p

from carnet.model import Assignment, AttendanceRecord, AttendanceSession, FrozenModel, Grade, Role


class EntityKind(enum.Enum):
    Grade = "grade"
    AttendanceRecord = "attendance_record"
    Assignment = "assignment"


class DenyReason(enum.Enum):
    NoPermission = "no-permission"
    WindowExpired = "window-expired"


class EditableEntity(FrozenModel):
    """The slice of a stored record that edit permissions are decided on.

    Fields are deliberately permissive: a record read from a buggy client or
    a half-migrated row may lack timestamps or carry an unknown kind, and the
    evaluator denies such input instead of refusing to build it.
    """

    id: str
    kind: EntityKind | str | None
    create_time: datetime.datetime | None = None
    created_by_role: Role | None = None

    # alternate reference points, see PolicyRule.reference
    session_start: datetime.datetime | None = None
    due_time: datetime.datetime | None = None

    @p.field_validator("kind", mode="before")
    @classmethod
    def coerce_kind(cls, v: object) -> object:
        if isinstance(v, str):
            try:
                return EntityKind(v)
            except ValueError:
                return v
        return v

    @classmethod
    def for_grade(cls, grade: Grade) -> EditableEntity:
        return cls(
            id=str(grade.grade_id),
            kind=EntityKind.Grade,
            create_time=grade.create_time,
            created_by_role=grade.recorded_by_role,
        )

    @classmethod
    def for_attendance_record(cls, record: AttendanceRecord, session: AttendanceSession) -> EditableEntity:
        if record.session_id != session.session_id:
            raise ValueError(f"record {record.record_id} does not belong to session {session.session_id}")
        return cls(
            id=str(record.record_id),
            kind=EntityKind.AttendanceRecord,
            create_time=record.create_time,
            created_by_role=record.recorded_by_role,
            session_start=session.starts_at,
        )

    @classmethod
    def for_assignment(cls, assignment: Assignment) -> EditableEntity:
        return cls(
            id=str(assignment.assignment_id),
            kind=EntityKind.Assignment,
            create_time=assignment.create_time,
            created_by_role=assignment.assigned_by_role,
            due_time=assignment.due_at,
        )


class ActorContext(FrozenModel):
    role: Role | str
    current_time: datetime.datetime

    @p.field_validator("role", mode="before")
    @classmethod
    def coerce_role(cls, v: object) -> object:
        if isinstance(v, str):
            try:
                return Role(v)
            except ValueError:
                return v
        return v


class EditDecision(FrozenModel):
    allowed: bool
    reason: DenyReason | None = None
    remaining: datetime.timedelta | None = None
    elapsed_over_by: datetime.timedelta | None = None
    locks_at: datetime.datetime | None = None

    @classmethod
    def allow(
        cls, remaining: datetime.timedelta | None = None, locks_at: datetime.datetime | None = None
    ) -> EditDecision:
        return cls(allowed=True, remaining=remaining, locks_at=locks_at)

    @classmethod
    def deny(
        cls,
        reason: DenyReason,
        elapsed_over_by: datetime.timedelta | None = None,
        locks_at: datetime.datetime | None = None,
    ) -> EditDecision:
        return cls(allowed=False, reason=reason, elapsed_over_by=elapsed_over_by, locks_at=locks_at)
