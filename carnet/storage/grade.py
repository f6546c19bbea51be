from __future__ import annotations

import decimal
import typing as t

import sqlalchemy as sqla

from carnet.core import di, TimestampProvider
from carnet.lib import NotSet
from carnet.model import Grade, GradeID, GradeType, Role, UserID

from . import Session
from .table import grades


def get(
    grade_id: GradeID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> Grade | None:
    """Get a grade by ID."""
    stmt = sqla.select(grades.__table__).where(grades.grade_id == grade_id)
    row = session.execute(stmt).mappings().one_or_none()
    return Grade(**row) if row else None


def find(
    *,
    student_id: UserID | None = None,
    recorded_by: UserID | None = None,
    subject: str | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[Grade, ...]:
    """Find grades matching criteria, oldest first."""
    stmt = sqla.select(grades.__table__).order_by(grades.create_time)
    if student_id is not None:
        stmt = stmt.where(grades.student_id == student_id)
    if recorded_by is not None:
        stmt = stmt.where(grades.recorded_by == recorded_by)
    if subject is not None:
        stmt = stmt.where(grades.subject == subject)
    rows = session.execute(stmt).mappings().all()
    return tuple(Grade(**row) for row in rows)


def create(
    *,
    student_id: UserID,
    recorded_by: UserID,
    recorded_by_role: Role,
    subject: str,
    value: decimal.Decimal,
    grade_type: GradeType = GradeType.Test,
    scale: decimal.Decimal = decimal.Decimal(20),
    coefficient: decimal.Decimal = decimal.Decimal(1),
    comment: str | None = None,
    session: Session = di.Provide["storage.persistent.session"],
    utcnow: TimestampProvider = di.Provide["utcnow"],
) -> Grade:
    """Record a new grade.

    The creation time is taken from the injected clock and is the reference
    point of every edit window on the grade.
    """
    grade_id = GradeID()
    now = utcnow()
    stmt = sqla.insert(grades).values(
        grade_id=grade_id,
        student_id=student_id,
        recorded_by=recorded_by,
        recorded_by_role=recorded_by_role.value,
        subject=subject,
        value=value,
        grade_type=grade_type.value,
        scale=scale,
        coefficient=coefficient,
        comment=comment,
        create_time=now,
        update_time=now,
    )
    session.execute(stmt)
    session.flush()
    result = get(grade_id, session=session)
    assert result is not None
    return result


def update(
    grade_id: GradeID,
    *,
    value: decimal.Decimal | NotSet = NotSet(),
    grade_type: GradeType | NotSet = NotSet(),
    scale: decimal.Decimal | NotSet = NotSet(),
    coefficient: decimal.Decimal | NotSet = NotSet(),
    comment: str | None | NotSet = NotSet(),
    session: Session = di.Provide["storage.persistent.session"],
    utcnow: TimestampProvider = di.Provide["utcnow"],
) -> None:
    """Update a grade.

    Only ``update_time`` moves; ``create_time`` is never written here.

    Raises:
        KeyError: If grade_id does not correspond to a grade
    """
    values: dict[str, t.Any] = {"update_time": utcnow()}
    if not isinstance(value, NotSet):
        values["value"] = value
    if not isinstance(grade_type, NotSet):
        values["grade_type"] = grade_type.value
    if not isinstance(scale, NotSet):
        values["scale"] = scale
    if not isinstance(coefficient, NotSet):
        values["coefficient"] = coefficient
    if not isinstance(comment, NotSet):
        values["comment"] = comment

    stmt = sqla.update(grades).where(grades.grade_id == grade_id).values(**values)
    result = session.execute(stmt)
    if result.rowcount == 0:  # pyright: ignore[reportAttributeAccessIssue]
        raise KeyError(f"Grade {grade_id} not found")

    session.flush()


def delete(
    grade_id: GradeID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    """Delete a grade.

    Returns:
        True if a grade was deleted, False if not found
    """
    stmt = sqla.delete(grades).where(grades.grade_id == grade_id)
    result = session.execute(stmt)
    return bool(result.rowcount)  # pyright: ignore[reportUnknownArgumentType, reportAttributeAccessIssue]
