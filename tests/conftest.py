"""Pytest fixtures for carnet integration tests.

Storage and API tests run against an in-memory SQLite database created from
the table metadata. Each test runs within a transaction that is rolled back
afterwards, and the container's clock is frozen so that edit windows can be
walked through deterministically.

Usage:
    def test_grade_locks(client: TestClient, clock: FrozenClock, grade_factory, auth_headers):
        grade = grade_factory()
        clock.advance(hours=49)
        response = client.patch(f"/api/grades/{grade.grade_id}", json={...}, headers=auth_headers(teacher))
        assert response.status_code == 403
"""

from __future__ import annotations

import datetime
import decimal
import os
import typing as t
from pathlib import Path

import pydantic as p
import pytest
import sqlalchemy
from dependency_injector import providers
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

import carnet
from carnet.core import CarnetContainer
from carnet.model import Assignment, AttendanceRecord, AttendanceSession, AttendanceStatus, DeploymentEnvironment, \
    Grade, Role, User
from carnet.storage import assignment as assignment_storage
from carnet.storage import attendance as attendance_storage
from carnet.storage import grade as grade_storage
from carnet.storage import user as user_storage
from carnet.storage.table import metadata

TEST_JWT_SECRET = "carnet-test-signing-key-not-for-production"

# a Monday morning, 08:00 UTC
EPOCH = datetime.datetime(2026, 3, 9, 8, 0, tzinfo=datetime.UTC)


class FrozenClock(object):
    """Stands in for the container's ``utcnow`` provider."""

    def __init__(self, now: datetime.datetime):
        self.now = now

    def __call__(self) -> datetime.datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime.datetime:
        self.now += datetime.timedelta(**kwargs)
        return self.now


def _sqlite_engine() -> sqlalchemy.Engine:
    # one shared connection, so the in-memory database survives across
    # checkouts and the TestClient's worker threads
    engine = sqlalchemy.create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # pysqlite defers BEGIN on its own, which breaks SAVEPOINT; emit it ourselves
    @sqlalchemy.event.listens_for(engine, "connect")
    def do_connect(dbapi_connection: t.Any, _: t.Any) -> None:
        dbapi_connection.isolation_level = None

    @sqlalchemy.event.listens_for(engine, "begin")
    def do_begin(conn: sqlalchemy.Connection) -> None:
        conn.exec_driver_sql("BEGIN")

    metadata.create_all(engine)
    return engine


@pytest.fixture(scope="session")
def container() -> t.Generator[CarnetContainer]:
    """One container for the whole run, booted in the test environment.

    The container is booted with the Test environment, then its engine is
    replaced with an in-memory SQLite database and its secrets with a known
    JWT signing key.
    """
    ct = CarnetContainer()
    root = Path(os.path.dirname(carnet.__file__)).parent

    CarnetContainer.boot(
        ct,
        debug=False,
        env=DeploymentEnvironment.Test,
        config_root=p.FileUrl(f"file://{root}/config"),
        override=(),
    )

    ct.storage().persistent().engine.override(providers.Object(_sqlite_engine()))
    # use dict for nested override since secrets.auth is None in the test env
    ct.secrets.override({"auth": {"jwt": p.Secret(TEST_JWT_SECRET)}})

    yield ct

    ct.shutdown_resources()


@pytest.fixture(scope="session")
def app(container: CarnetContainer) -> FastAPI:
    """Create the FastAPI application for testing."""
    from carnet.core.config.web import CarnetWebSettings
    from carnet.web.carnet.main import _create_app  # pyright: ignore[reportPrivateUsage]

    container.wire(packages=["carnet.web.carnet"])

    return _create_app(
        config=CarnetWebSettings(**container.config.web.carnet()),
        env=DeploymentEnvironment.Test,
    )


@pytest.fixture
def clock(container: CarnetContainer) -> t.Generator[FrozenClock]:
    """Freeze the container's clock at EPOCH for the duration of a test."""
    frozen = FrozenClock(EPOCH)
    container.utcnow.override(providers.Object(frozen))

    yield frozen

    container.utcnow.reset_override()


@pytest.fixture
def db_session(container: CarnetContainer, clock: FrozenClock) -> t.Generator[Session]:
    """A session bound to an outer transaction that is rolled back afterwards.

    ``session.begin()`` in the code under test opens a SAVEPOINT inside it.
    """
    engine = container.storage().persistent().engine()

    connection = engine.connect()
    transaction = connection.begin()

    session = Session(
        bind=connection,
        autobegin=False,
        join_transaction_mode="create_savepoint",
    )

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def client(app: FastAPI, container: CarnetContainer, db_session: Session) -> t.Generator[TestClient]:
    """An API client whose requests share ``db_session``."""
    container.storage().persistent().session.override(providers.Object(db_session))

    with TestClient(app) as test_client:
        yield test_client

    container.storage().persistent().session.reset_override()


# Factories


@pytest.fixture
def user_factory(db_session: Session) -> t.Callable[..., User]:
    """Factory fixture for creating users.

    Usage:
        def test_something(user_factory):
            teacher = user_factory(role=Role.Teacher)
    """

    def create_user(role: Role = Role.Student, name: str | None = None, email: str | None = None) -> User:
        name = name or f"Test {role.value.title()}"
        with db_session.begin():
            if email is None:
                email = f"{role.value}-{len(user_storage.find(session=db_session))}@example.org"
            return user_storage.create(email=email, name=name, role=role, session=db_session)

    return create_user


@pytest.fixture
def student(user_factory: t.Callable[..., User]) -> User:
    return user_factory(role=Role.Student, name="Camille Martin")


@pytest.fixture
def teacher(user_factory: t.Callable[..., User]) -> User:
    return user_factory(role=Role.Teacher, name="Mme Durand")


@pytest.fixture
def guardian(user_factory: t.Callable[..., User]) -> User:
    return user_factory(role=Role.Guardian, name="M. Martin")


@pytest.fixture
def admin(user_factory: t.Callable[..., User]) -> User:
    return user_factory(role=Role.Admin, name="Direction")


@pytest.fixture
def staff(user_factory: t.Callable[..., User]) -> User:
    return user_factory(role=Role.Staff, name="Vie scolaire")


@pytest.fixture
def grade_factory(db_session: Session, student: User, teacher: User) -> t.Callable[..., Grade]:
    """Factory fixture for grades recorded by ``teacher`` for ``student`` at the current clock time."""

    def create_grade(
        value: decimal.Decimal | str = "14.5",
        subject: str = "Mathématiques",
        student_id: t.Any = None,
        recorded_by: User | None = None,
    ) -> Grade:
        author = recorded_by or teacher
        assert isinstance(author.role, Role)
        with db_session.begin():
            return grade_storage.create(
                student_id=student_id or student.user_id,
                recorded_by=author.user_id,
                recorded_by_role=author.role,
                subject=subject,
                value=decimal.Decimal(value),
                session=db_session,
            )

    return create_grade


@pytest.fixture
def session_factory(db_session: Session, teacher: User, clock: FrozenClock) -> t.Callable[..., AttendanceSession]:
    """Factory fixture for course sessions; by default one starting at the current clock time."""

    def create_session(
        starts_at: datetime.datetime | None = None,
        duration: datetime.timedelta = datetime.timedelta(hours=1),
        class_name: str = "4eB",
        subject: str = "Histoire",
    ) -> AttendanceSession:
        starts_at = starts_at or clock()
        with db_session.begin():
            return attendance_storage.create_session(
                teacher_id=teacher.user_id,
                class_name=class_name,
                subject=subject,
                starts_at=starts_at,
                ends_at=starts_at + duration,
                session=db_session,
            )

    return create_session


@pytest.fixture
def record_factory(db_session: Session, student: User, teacher: User) -> t.Callable[..., AttendanceRecord]:
    """Factory fixture for attendance records of ``student`` taken by ``teacher``."""

    def create_record(
        course: AttendanceSession,
        status: AttendanceStatus = AttendanceStatus.Absent,
        student_id: t.Any = None,
    ) -> AttendanceRecord:
        with db_session.begin():
            return attendance_storage.create(
                session_id=course.session_id,
                student_id=student_id or student.user_id,
                recorded_by=teacher.user_id,
                recorded_by_role=Role.Teacher,
                status=status,
                session=db_session,
            )

    return create_record


@pytest.fixture
def assignment_factory(db_session: Session, teacher: User, clock: FrozenClock) -> t.Callable[..., Assignment]:
    """Factory fixture for assignments; by default due a week from the current clock time."""

    def create_assignment(
        due_at: datetime.datetime | None = None,
        class_name: str = "4eB",
        title: str = "Exercices p. 42",
    ) -> Assignment:
        with db_session.begin():
            return assignment_storage.create(
                assigned_by=teacher.user_id,
                assigned_by_role=Role.Teacher,
                class_name=class_name,
                subject="Mathématiques",
                title=title,
                due_at=due_at or clock() + datetime.timedelta(days=7),
                session=db_session,
            )

    return create_assignment


# Authentication


@pytest.fixture
def auth_headers(app: FastAPI, container: CarnetContainer) -> t.Callable[..., dict[str, str]]:
    """Build Authorization headers for a user.

    Tokens are minted by the container's JWT manager against the real clock,
    since the frozen clock would have them expire immediately.
    """

    def make_headers(user: User, role: Role | str | None = None) -> dict[str, str]:
        token = container.auth().jwt_manager().create_access_token(user.user_id, role or user.role)
        return {"Authorization": f"Bearer {token}"}

    return make_headers
