"""Time-windowed edit permissions for grades, attendance records and assignments."""

__all__ = [
    "ActorContext",
    "DenyReason",
    "EditDecision",
    "EditNotPermitted",
    "EditableEntity",
    "EntityKind",
    "Locale",
    "POLICY",
    "PolicyRule",
    "ReferencePoint",
    "describe_denial",
    "describe_remaining",
    "enforce",
    "evaluate",
    "lookup",
]

from .entity import ActorContext, DenyReason, EditableEntity, EditDecision, EntityKind
from .errors import EditNotPermitted
from .evaluator import evaluate
from .guard import enforce
from .notifier import describe_denial, describe_remaining, Locale
from .table import lookup, POLICY, PolicyRule, ReferencePoint
