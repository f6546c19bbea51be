"""Tests for carnet.storage.grade module."""

from __future__ import annotations

import decimal
import typing as t

import pytest
from sqlalchemy.orm import Session

from carnet.model import Grade, GradeID, GradeType, Role, User
from carnet.storage import grade as grade_storage

from ..conftest import EPOCH, FrozenClock


class TestGet(object):
    """Tests for grade_storage.get()."""

    def test_get_by_grade_id(self, db_session: Session, grade_factory: t.Callable[..., Grade]) -> None:
        """get() returns the grade with UTC-aware timestamps."""
        grade = grade_factory(value="15.5")

        with db_session.begin():
            result = grade_storage.get(grade.grade_id, session=db_session)

        assert result is not None
        assert result.grade_id == grade.grade_id
        assert result.value == decimal.Decimal("15.5")
        assert result.recorded_by_role is Role.Teacher
        assert result.grade_type is GradeType.Test
        assert result.create_time == EPOCH
        assert result.create_time.tzinfo is not None

    def test_get_nonexistent_returns_none(self, db_session: Session) -> None:
        """get() returns None for nonexistent grade ID."""
        with db_session.begin():
            result = grade_storage.get(GradeID(), session=db_session)

        assert result is None


class TestFind(object):
    """Tests for grade_storage.find()."""

    def test_find_by_student(
        self,
        db_session: Session,
        grade_factory: t.Callable[..., Grade],
        user_factory: t.Callable[..., User],
    ) -> None:
        """find() filters by student_id."""
        other = user_factory(role=Role.Student, name="Lucas Bernard")
        g1 = grade_factory()
        g2 = grade_factory(student_id=other.user_id)

        with db_session.begin():
            result = grade_storage.find(student_id=other.user_id, session=db_session)

        ids = {g.grade_id for g in result}
        assert g2.grade_id in ids
        assert g1.grade_id not in ids

    def test_find_by_subject(self, db_session: Session, grade_factory: t.Callable[..., Grade]) -> None:
        """find() filters by subject."""
        g1 = grade_factory(subject="Anglais")
        g2 = grade_factory(subject="Physique")

        with db_session.begin():
            result = grade_storage.find(subject="Anglais", session=db_session)

        ids = {g.grade_id for g in result}
        assert g1.grade_id in ids
        assert g2.grade_id not in ids


class TestCreate(object):
    """Tests for grade_storage.create()."""

    def test_create_stamps_clock_time(
        self,
        db_session: Session,
        clock: FrozenClock,
        student: User,
        teacher: User,
    ) -> None:
        """create() takes create_time from the injected clock."""
        clock.advance(hours=3)

        with db_session.begin():
            grade = grade_storage.create(
                student_id=student.user_id,
                recorded_by=teacher.user_id,
                recorded_by_role=Role.Teacher,
                subject="SVT",
                value=decimal.Decimal("8"),
                grade_type=GradeType.Homework,
                coefficient=decimal.Decimal("0.5"),
                comment="Travail incomplet",
                session=db_session,
            )

        assert grade.create_time == clock()
        assert grade.update_time == clock()
        assert grade.grade_type is GradeType.Homework
        assert grade.coefficient == decimal.Decimal("0.5")
        assert grade.scale == decimal.Decimal(20)
        assert grade.comment == "Travail incomplet"


class TestUpdate(object):
    """Tests for grade_storage.update()."""

    def test_update_never_moves_create_time(
        self,
        db_session: Session,
        clock: FrozenClock,
        grade_factory: t.Callable[..., Grade],
    ) -> None:
        """Editing a grade moves update_time only, so the edit window never restarts."""
        grade = grade_factory(value="10")
        clock.advance(hours=20)

        with db_session.begin():
            grade_storage.update(grade.grade_id, value=decimal.Decimal("11"), session=db_session)
            result = grade_storage.get(grade.grade_id, session=db_session)

        assert result is not None
        assert result.value == decimal.Decimal("11")
        assert result.create_time == grade.create_time
        assert result.update_time == clock()

    def test_update_clears_comment(self, db_session: Session, grade_factory: t.Callable[..., Grade]) -> None:
        """None is a value for comment; NotSet leaves fields alone."""
        grade = grade_factory()
        with db_session.begin():
            grade_storage.update(grade.grade_id, comment="À revoir", session=db_session)
            grade_storage.update(grade.grade_id, comment=None, session=db_session)
            result = grade_storage.get(grade.grade_id, session=db_session)

        assert result is not None
        assert result.comment is None
        assert result.value == grade.value

    def test_update_nonexistent_raises(self, db_session: Session) -> None:
        """update() raises KeyError for nonexistent grade."""
        with pytest.raises(KeyError):
            with db_session.begin():
                grade_storage.update(GradeID(), value=decimal.Decimal("1"), session=db_session)


class TestDelete(object):
    """Tests for grade_storage.delete()."""

    def test_delete(self, db_session: Session, grade_factory: t.Callable[..., Grade]) -> None:
        grade = grade_factory()

        with db_session.begin():
            assert grade_storage.delete(grade.grade_id, session=db_session)
            assert grade_storage.get(grade.grade_id, session=db_session) is None

    def test_delete_nonexistent(self, db_session: Session) -> None:
        with db_session.begin():
            assert not grade_storage.delete(GradeID(), session=db_session)
