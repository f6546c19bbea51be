from __future__ import annotations

import datetime

from .entity import ActorContext, DenyReason, EditableEntity, EditDecision
from .table import lookup, PolicyRule, ReferencePoint


def _as_utc(ts: datetime.datetime) -> datetime.datetime:
    # stores without time zone support hand back naive UTC values
    if ts.tzinfo is None:
        return ts.replace(tzinfo=datetime.UTC)
    return ts


def reference_point(entity: EditableEntity, rule: PolicyRule) -> datetime.datetime | None:
    match rule.reference:
        case ReferencePoint.Creation:
            ts = entity.create_time
        case ReferencePoint.SessionStart:
            ts = entity.session_start
        case ReferencePoint.DueTime:
            ts = entity.due_time
    return _as_utc(ts) if ts is not None else None


def evaluate(
    entity: EditableEntity,
    actor: ActorContext,
    reference_time: datetime.datetime | None = None,
) -> EditDecision:
    """Decide whether ``actor`` may edit ``entity`` right now.

    ``reference_time`` takes precedence over ``actor.current_time`` when given.
    The evaluation never reads a clock and never raises for well-formed input;
    unknown roles, unknown kinds and missing reference timestamps all deny with
    ``no-permission``.

    A window is inclusive: an edit attempted exactly when the window ends is
    still allowed.
    """
    rule = lookup(actor.role, entity.kind)
    if rule is None:
        return EditDecision.deny(DenyReason.NoPermission)

    if rule.can_override:
        return EditDecision.allow()

    start = reference_point(entity, rule)
    if start is None:
        return EditDecision.deny(DenyReason.NoPermission)

    now = _as_utc(reference_time or actor.current_time)
    elapsed = now - start
    if rule.reference is ReferencePoint.Creation and elapsed < datetime.timedelta(0):
        # creation stamped by a clock running ahead of ours
        elapsed = datetime.timedelta(0)

    if rule.unlimited:
        return EditDecision.allow()

    locks_at = start + rule.window
    if elapsed <= rule.window:
        return EditDecision.allow(remaining=rule.window - elapsed, locks_at=locks_at)
    return EditDecision.deny(DenyReason.WindowExpired, elapsed_over_by=elapsed - rule.window, locks_at=locks_at)
