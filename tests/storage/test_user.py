"""Tests for carnet.storage.user module."""

from __future__ import annotations

import typing as t

import pytest
from sqlalchemy.orm import Session

from carnet.model import Role, User, UserID
from carnet.storage import user as user_storage


class TestGet(object):
    """Tests for user_storage.get()."""

    def test_get_by_user_id(self, db_session: Session, student: User) -> None:
        with db_session.begin():
            result = user_storage.get(user_id=student.user_id, session=db_session)

        assert result == student

    def test_get_by_email_is_case_insensitive(self, db_session: Session, user_factory: t.Callable[..., User]) -> None:
        """Emails are stored lowercased, so lookups match regardless of case."""
        user = user_factory(role=Role.Teacher, email="Claire.Roux@Example.org")

        with db_session.begin():
            result = user_storage.get(email="CLAIRE.ROUX@example.org", session=db_session)

        assert result is not None
        assert result.user_id == user.user_id
        assert result.email == "claire.roux@example.org"

    def test_get_nonexistent_returns_none(self, db_session: Session) -> None:
        with db_session.begin():
            assert user_storage.get(user_id=UserID(), session=db_session) is None

    def test_get_requires_exactly_one_key(self, db_session: Session, student: User) -> None:
        with pytest.raises(ValueError):
            with db_session.begin():
                user_storage.get(user_id=student.user_id, email=student.email, session=db_session)  # type: ignore[call-overload]


class TestFind(object):
    """Tests for user_storage.find()."""

    def test_find_by_role(self, db_session: Session, student: User, teacher: User, guardian: User) -> None:
        with db_session.begin():
            result = user_storage.find(role=Role.Guardian, session=db_session)

        assert [u.user_id for u in result] == [guardian.user_id]


class TestUpdate(object):
    """Tests for user_storage.update()."""

    def test_update_role(self, db_session: Session, teacher: User) -> None:
        with db_session.begin():
            user_storage.update(teacher.user_id, role=Role.Staff, session=db_session)
            result = user_storage.get(user_id=teacher.user_id, session=db_session)

        assert result is not None
        assert result.role is Role.Staff
        assert result.name == teacher.name

    def test_update_nonexistent_raises(self, db_session: Session) -> None:
        with pytest.raises(KeyError):
            with db_session.begin():
                user_storage.update(UserID(), name="Personne", session=db_session)
