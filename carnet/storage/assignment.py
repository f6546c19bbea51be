from __future__ import annotations

import datetime
import typing as t

import sqlalchemy as sqla

from carnet.core import di, TimestampProvider
from carnet.lib import NotSet
from carnet.model import Assignment, AssignmentID, Role, UserID

from . import Session
from .table import assignments


def get(
    assignment_id: AssignmentID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> Assignment | None:
    stmt = sqla.select(assignments.__table__).where(assignments.assignment_id == assignment_id)
    row = session.execute(stmt).mappings().one_or_none()
    return Assignment(**row) if row else None


def find(
    *,
    class_name: str | None = None,
    assigned_by: UserID | None = None,
    due_after: datetime.datetime | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[Assignment, ...]:
    """Find assignments matching criteria, soonest due first."""
    stmt = sqla.select(assignments.__table__).order_by(assignments.due_at)
    if class_name is not None:
        stmt = stmt.where(assignments.class_name == class_name)
    if assigned_by is not None:
        stmt = stmt.where(assignments.assigned_by == assigned_by)
    if due_after is not None:
        stmt = stmt.where(assignments.due_at >= due_after)
    rows = session.execute(stmt).mappings().all()
    return tuple(Assignment(**row) for row in rows)


def create(
    *,
    assigned_by: UserID,
    assigned_by_role: Role,
    class_name: str,
    subject: str,
    title: str,
    due_at: datetime.datetime,
    description: str | None = None,
    session: Session = di.Provide["storage.persistent.session"],
    utcnow: TimestampProvider = di.Provide["utcnow"],
) -> Assignment:
    """Insert an assignment, stamped with the injected clock."""
    assignment_id = AssignmentID()
    now = utcnow()
    stmt = sqla.insert(assignments).values(
        assignment_id=assignment_id,
        assigned_by=assigned_by,
        assigned_by_role=assigned_by_role.value,
        class_name=class_name,
        subject=subject,
        title=title,
        description=description,
        due_at=due_at,
        create_time=now,
        update_time=now,
    )
    session.execute(stmt)
    session.flush()
    result = get(assignment_id, session=session)
    assert result is not None
    return result


def update(
    assignment_id: AssignmentID,
    *,
    title: str | NotSet = NotSet(),
    description: str | None | NotSet = NotSet(),
    due_at: datetime.datetime | NotSet = NotSet(),
    session: Session = di.Provide["storage.persistent.session"],
    utcnow: TimestampProvider = di.Provide["utcnow"],
) -> None:
    """Update an assignment.

    Moving ``due_at`` moves the end of the edit window with it. Raises
    ``KeyError`` for an unknown ``assignment_id``.
    """
    values: dict[str, t.Any] = {"update_time": utcnow()}
    if not isinstance(title, NotSet):
        values["title"] = title
    if not isinstance(description, NotSet):
        values["description"] = description
    if not isinstance(due_at, NotSet):
        values["due_at"] = due_at

    stmt = sqla.update(assignments).where(assignments.assignment_id == assignment_id).values(**values)
    result = session.execute(stmt)
    if result.rowcount == 0:  # pyright: ignore[reportAttributeAccessIssue]
        raise KeyError(f"Assignment {assignment_id} not found")

    session.flush()


def delete(
    assignment_id: AssignmentID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> bool:
    """False when there was nothing to delete."""
    stmt = sqla.delete(assignments).where(assignments.assignment_id == assignment_id)
    result = session.execute(stmt)
    return bool(result.rowcount)  # pyright: ignore[reportUnknownArgumentType, reportAttributeAccessIssue]
