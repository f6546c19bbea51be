"""Server-side enforcement of the edit-permission policy.

Client portals disable edit controls from the same decision, but that check is
advisory only: every mutating request handler must call :func:`enforce`
before committing.
"""

from __future__ import annotations

import datetime

from carnet.core.provider import LoggingProvider

from .entity import ActorContext, DenyReason, EditableEntity, EditDecision
from .errors import EditNotPermitted
from .evaluator import evaluate
from .table import lookup


def enforce(entity: EditableEntity, actor: ActorContext, reference_time: datetime.datetime | None = None) -> EditDecision:
    """Evaluate and raise :class:`EditNotPermitted` when the edit is denied."""
    logger = LoggingProvider.get_logger()
    decision = evaluate(entity, actor, reference_time)
    if decision.allowed:
        logger.debug(
            "edit permitted",
            extra={
                "entity_id": entity.id,
                "role": actor.role,
                "remaining": decision.remaining,
            },
        )
        return decision

    if decision.reason is DenyReason.NoPermission and lookup(actor.role, entity.kind) is not None:
        # a rule exists, so the denial comes from the record itself
        logger.error(
            "malformed record denied edit",
            extra={
                "entity_id": entity.id,
                "kind": entity.kind,
                "create_time": entity.create_time,
                "session_start": entity.session_start,
                "due_time": entity.due_time,
            },
        )
    else:
        logger.warning(
            "edit denied",
            extra={
                "entity_id": entity.id,
                "kind": entity.kind,
                "role": actor.role,
                "reason": decision.reason,
                "elapsed_over_by": decision.elapsed_over_by,
            },
        )
    raise EditNotPermitted(decision, entity.id)
