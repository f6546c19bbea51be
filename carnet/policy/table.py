from __future__ import annotations

import datetime
import enum
import types
import typing as t

from carnet.model import FrozenModel, Role

from .entity import EntityKind


class ReferencePoint(enum.Enum):
    Creation = "creation"
    SessionStart = "session_start"
    DueTime = "due_time"


class PolicyRule(FrozenModel):
    # None means the window never closes
    window: datetime.timedelta | None
    reference: ReferencePoint = ReferencePoint.Creation
    can_override: bool = False

    @property
    def unlimited(self) -> bool:
        return self.window is None


Override = PolicyRule(window=None, can_override=True)

_rules: dict[tuple[Role, EntityKind], PolicyRule] = {
    **{(Role.Admin, kind): Override for kind in EntityKind},
    (Role.Teacher, EntityKind.Grade): PolicyRule(window=datetime.timedelta(hours=48)),
    (Role.Teacher, EntityKind.Assignment): PolicyRule(
        window=datetime.timedelta(0),
        reference=ReferencePoint.DueTime,
    ),
    (Role.Teacher, EntityKind.AttendanceRecord): PolicyRule(
        window=datetime.timedelta(hours=48),
        reference=ReferencePoint.SessionStart,
    ),
    (Role.Guardian, EntityKind.Grade): PolicyRule(window=datetime.timedelta(days=30)),
    (Role.Guardian, EntityKind.AttendanceRecord): PolicyRule(
        window=datetime.timedelta(hours=48),
        reference=ReferencePoint.SessionStart,
    ),
    (Role.Staff, EntityKind.AttendanceRecord): PolicyRule(window=None, reference=ReferencePoint.SessionStart),
}

POLICY: t.Mapping[tuple[Role, EntityKind], PolicyRule] = types.MappingProxyType(_rules)


def lookup(role: Role | str, kind: EntityKind | str | None) -> PolicyRule | None:
    """Return the rule governing ``role`` editing records of ``kind``, if any."""
    if not isinstance(role, Role) or not isinstance(kind, EntityKind):
        return None
    return POLICY.get((role, kind))
