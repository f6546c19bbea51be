from __future__ import annotations

import typing as t

import sqlalchemy as sqla

from carnet.core import di, TimestampProvider
from carnet.lib import NotSet
from carnet.model import Role, User, UserID

from . import Session
from .table import users


@t.overload
def get(*, user_id: UserID, session: Session = ...) -> User | None: ...


@t.overload
def get(*, email: str, session: Session = ...) -> User | None: ...


def get(
    *,
    user_id: UserID | None = None,
    email: str | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> User | None:
    """Look a user up by exactly one of ``user_id`` or ``email`` (case-insensitive)."""
    if (user_id is None) == (email is None):
        raise ValueError("exactly one of user_id or email must be given")

    stmt = sqla.select(users.__table__)
    if user_id is not None:
        stmt = stmt.where(users.user_id == user_id)
    else:
        stmt = stmt.where(users.email == email.lower())
    row = session.execute(stmt).mappings().one_or_none()
    return User(**row) if row else None


def find(
    *,
    role: Role | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[User, ...]:
    stmt = sqla.select(users.__table__).order_by(users.name)
    if role is not None:
        stmt = stmt.where(users.role == role.value)
    rows = session.execute(stmt).mappings().all()
    return tuple(User(**row) for row in rows)


def create(
    *,
    email: str,
    name: str,
    role: Role,
    session: Session = di.Provide["storage.persistent.session"],
    utcnow: TimestampProvider = di.Provide["utcnow"],
) -> User:
    user_id = UserID()
    now = utcnow()
    stmt = sqla.insert(users).values(
        user_id=user_id,
        email=email.lower(),
        name=name,
        role=role.value,
        create_time=now,
        update_time=now,
    )
    session.execute(stmt)
    session.flush()
    result = get(user_id=user_id, session=session)
    assert result is not None
    return result


def update(
    user_id: UserID,
    *,
    name: str | NotSet = NotSet(),
    role: Role | NotSet = NotSet(),
    session: Session = di.Provide["storage.persistent.session"],
    utcnow: TimestampProvider = di.Provide["utcnow"],
) -> None:
    """Raises ``KeyError`` for an unknown ``user_id``."""
    values: dict[str, t.Any] = {"update_time": utcnow()}
    if not isinstance(name, NotSet):
        values["name"] = name
    if not isinstance(role, NotSet):
        values["role"] = role.value

    stmt = sqla.update(users).where(users.user_id == user_id).values(**values)
    result = session.execute(stmt)
    if result.rowcount == 0:  # pyright: ignore[reportAttributeAccessIssue]
        raise KeyError(f"User {user_id} not found")

    session.flush()
