"""Tests for carnet.policy.evaluator."""

from __future__ import annotations

import datetime
import random

import pytest

from carnet.model import Role
from carnet.policy import ActorContext, DenyReason, EditableEntity, EditDecision, EntityKind, evaluate

T = datetime.datetime(2026, 1, 12, 9, 30, tzinfo=datetime.UTC)


def grade(create_time: datetime.datetime | None = T) -> EditableEntity:
    return EditableEntity(id="grade-1", kind=EntityKind.Grade, create_time=create_time, created_by_role=Role.Teacher)


def attendance(session_start: datetime.datetime | None, create_time: datetime.datetime | None) -> EditableEntity:
    return EditableEntity(
        id="attrec-1",
        kind=EntityKind.AttendanceRecord,
        create_time=create_time,
        created_by_role=Role.Teacher,
        session_start=session_start,
    )


def assignment(due_time: datetime.datetime | None) -> EditableEntity:
    return EditableEntity(
        id="assignment-1",
        kind=EntityKind.Assignment,
        create_time=T,
        created_by_role=Role.Teacher,
        due_time=due_time,
    )


def at(role: Role | str, when: datetime.datetime) -> ActorContext:
    return ActorContext(role=role, current_time=when)


class TestScenarios(object):
    """The worked examples for grades and attendance."""

    def test_teacher_just_inside_window(self) -> None:
        """Teacher at T + 47h59m may still edit, with one minute left."""
        decision = evaluate(grade(), at(Role.Teacher, T + datetime.timedelta(hours=47, minutes=59)))

        assert decision.allowed
        assert decision.reason is None
        assert decision.remaining == datetime.timedelta(minutes=1)
        assert decision.locks_at == T + datetime.timedelta(hours=48)

    def test_teacher_just_outside_window(self) -> None:
        """Teacher at T + 48h01m is refused, one minute over."""
        decision = evaluate(grade(), at(Role.Teacher, T + datetime.timedelta(hours=48, minutes=1)))

        assert not decision.allowed
        assert decision.reason is DenyReason.WindowExpired
        assert decision.elapsed_over_by == datetime.timedelta(minutes=1)
        assert decision.remaining is None

    def test_guardian_thirty_day_window(self) -> None:
        """Guardian at T + 29 days is within the 30-day window."""
        decision = evaluate(grade(), at(Role.Guardian, T + datetime.timedelta(days=29)))

        assert decision.allowed
        assert decision.remaining == datetime.timedelta(days=1)

    def test_admin_long_after(self) -> None:
        """Admin at T + 400 days overrides the window."""
        decision = evaluate(grade(), at(Role.Admin, T + datetime.timedelta(days=400)))

        assert decision == EditDecision(allowed=True)

    def test_guardian_attendance_measured_from_session_start(self) -> None:
        """A record entered 10h late is still judged from the session start."""
        s = T
        decision = evaluate(
            attendance(session_start=s, create_time=s + datetime.timedelta(hours=10)),
            at(Role.Guardian, s + datetime.timedelta(hours=47)),
        )

        assert decision.allowed
        assert decision.remaining == datetime.timedelta(hours=1)

    @pytest.mark.parametrize("elapsed", [datetime.timedelta(0), datetime.timedelta(days=3650)])
    def test_student_never_edits_grades(self, elapsed: datetime.timedelta) -> None:
        """Students have no rule for grades at any time."""
        decision = evaluate(grade(), at(Role.Student, T + elapsed))

        assert not decision.allowed
        assert decision.reason is DenyReason.NoPermission
        assert decision.elapsed_over_by is None


class TestRules(object):
    def test_teacher_assignment_open_until_due(self) -> None:
        """Teachers may edit an assignment up to and including its due date."""
        due = T + datetime.timedelta(days=7)

        before = evaluate(assignment(due), at(Role.Teacher, due - datetime.timedelta(hours=2)))
        on = evaluate(assignment(due), at(Role.Teacher, due))
        after = evaluate(assignment(due), at(Role.Teacher, due + datetime.timedelta(seconds=1)))

        assert before.allowed
        assert before.remaining == datetime.timedelta(hours=2)
        assert before.locks_at == due
        assert on.allowed
        assert not after.allowed
        assert after.reason is DenyReason.WindowExpired
        assert after.elapsed_over_by == datetime.timedelta(seconds=1)

    def test_guardian_cannot_edit_assignments(self) -> None:
        decision = evaluate(assignment(T + datetime.timedelta(days=1)), at(Role.Guardian, T))

        assert decision.reason is DenyReason.NoPermission

    def test_teacher_attendance_window(self) -> None:
        """Teachers correct attendance for 48h after the session started."""
        record = attendance(session_start=T, create_time=T)

        assert evaluate(record, at(Role.Teacher, T + datetime.timedelta(hours=48))).allowed
        assert not evaluate(record, at(Role.Teacher, T + datetime.timedelta(hours=49))).allowed

    def test_staff_attendance_unlimited(self) -> None:
        """Staff correct attendance without a deadline."""
        decision = evaluate(attendance(session_start=T, create_time=T), at(Role.Staff, T + datetime.timedelta(days=90)))

        assert decision.allowed
        assert decision.remaining is None
        assert decision.locks_at is None

    def test_staff_cannot_edit_grades(self) -> None:
        decision = evaluate(grade(), at(Role.Staff, T))

        assert decision.reason is DenyReason.NoPermission

    def test_reference_time_takes_precedence(self) -> None:
        """An explicit reference_time wins over the actor's current_time."""
        actor = at(Role.Teacher, T + datetime.timedelta(days=10))

        decision = evaluate(grade(), actor, reference_time=T + datetime.timedelta(hours=1))

        assert decision.allowed
        assert decision.remaining == datetime.timedelta(hours=47)

    def test_responsable_alias(self) -> None:
        """The legacy "responsable" label evaluates as a guardian."""
        decision = evaluate(grade(), at("responsable", T + datetime.timedelta(days=29)))

        assert decision.allowed


class TestFailClosed(object):
    def test_missing_create_time(self) -> None:
        decision = evaluate(grade(create_time=None), at(Role.Teacher, T))

        assert decision == EditDecision(allowed=False, reason=DenyReason.NoPermission)

    def test_missing_session_start(self) -> None:
        """Attendance without a session start is denied even if it has a creation time."""
        decision = evaluate(attendance(session_start=None, create_time=T), at(Role.Guardian, T))

        assert decision.reason is DenyReason.NoPermission

    def test_missing_due_time(self) -> None:
        decision = evaluate(assignment(None), at(Role.Teacher, T))

        assert decision.reason is DenyReason.NoPermission

    def test_unknown_kind(self) -> None:
        entity = EditableEntity(id="x", kind="report_card", create_time=T)

        assert entity.kind == "report_card"
        assert evaluate(entity, at(Role.Teacher, T)).reason is DenyReason.NoPermission

    def test_missing_kind(self) -> None:
        entity = EditableEntity(id="x", kind=None, create_time=T)

        assert evaluate(entity, at(Role.Admin, T)).reason is DenyReason.NoPermission

    def test_unknown_role(self) -> None:
        assert evaluate(grade(), at("principal", T)).reason is DenyReason.NoPermission

    def test_naive_timestamps_are_utc(self) -> None:
        """Naive values, as read back from stores without time zones, are taken as UTC."""
        naive = T.replace(tzinfo=None)
        decision = evaluate(grade(create_time=naive), at(Role.Teacher, T + datetime.timedelta(hours=1)))

        assert decision.allowed
        assert decision.remaining == datetime.timedelta(hours=47)

    def test_future_creation_counts_as_zero_elapsed(self) -> None:
        """A creation stamped ahead of the evaluating clock leaves the full window."""
        decision = evaluate(grade(create_time=T + datetime.timedelta(minutes=5)), at(Role.Teacher, T))

        assert decision.allowed
        assert decision.remaining == datetime.timedelta(hours=48)


class TestProperties(object):
    def test_monotonic_closing(self) -> None:
        """Once denied, a later check is never allowed again."""
        window = datetime.timedelta(hours=48)
        previous = True
        for minutes in range(0, 3 * 24 * 60, 17):
            now = T + datetime.timedelta(minutes=minutes)
            allowed = evaluate(grade(), at(Role.Teacher, now)).allowed

            assert allowed == (now <= T + window)
            assert previous or not allowed
            previous = allowed

    @pytest.mark.parametrize("kind", list(EntityKind))
    @pytest.mark.parametrize("days", [0, 1, 30, 365, 10_000])
    def test_admin_override(self, kind: EntityKind, days: int) -> None:
        entity = EditableEntity(
            id="x",
            kind=kind,
            create_time=T,
            session_start=T,
            due_time=T,
        )

        assert evaluate(entity, at(Role.Admin, T + datetime.timedelta(days=days))).allowed

    @pytest.mark.parametrize(
        ("role", "entity", "window"),
        [
            (Role.Teacher, grade(), datetime.timedelta(hours=48)),
            (Role.Guardian, grade(), datetime.timedelta(days=30)),
            (Role.Guardian, attendance(session_start=T, create_time=T), datetime.timedelta(hours=48)),
            (Role.Teacher, assignment(T), datetime.timedelta(0)),
        ],
    )
    def test_boundary_is_inclusive(self, role: Role, entity: EditableEntity, window: datetime.timedelta) -> None:
        decision = evaluate(entity, at(role, T + window))

        assert decision.allowed
        assert decision.remaining == datetime.timedelta(0)

    def test_deterministic(self) -> None:
        """Repeated evaluation of random inputs yields equal decisions."""
        rng = random.Random(20260112)
        roles: list[Role | str] = [*Role, "responsable", "principal"]
        kinds: list[EntityKind | str | None] = [*EntityKind, "report_card", None]

        def maybe_time() -> datetime.datetime | None:
            if rng.random() < 0.1:
                return None
            return T + datetime.timedelta(seconds=rng.randint(-86_400, 90 * 86_400))

        for i in range(500):
            entity = EditableEntity(
                id=f"e{i}",
                kind=rng.choice(kinds),
                create_time=maybe_time(),
                session_start=maybe_time(),
                due_time=maybe_time(),
            )
            actor = at(rng.choice(roles), T + datetime.timedelta(seconds=rng.randint(0, 120 * 86_400)))

            first = evaluate(entity, actor)
            second = evaluate(entity, actor)

            assert first == second
            assert first.allowed or first.reason is not None

    def test_attendance_ignores_recording_time(self) -> None:
        """Only the session start matters for a guardian, whenever the record was written."""
        now = T + datetime.timedelta(hours=30)
        decisions = {
            evaluate(attendance(session_start=T, create_time=T + datetime.timedelta(hours=h)), at(Role.Guardian, now))
            for h in (0, 1, 10, 29, 40)
        }

        assert len(decisions) == 1
        (decision,) = decisions
        assert decision.remaining == datetime.timedelta(hours=18)
