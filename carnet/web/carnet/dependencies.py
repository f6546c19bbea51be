"""Policy enforcement helpers shared by the mutating routes."""

import datetime

from fastapi import HTTPException, status

from carnet.auth import AuthContext
from carnet.policy import ActorContext, describe_denial, EditableEntity, EditDecision, EditNotPermitted, enforce, \
    evaluate, Locale

from .view.permission import EditDeniedDetail, PermissionResponse


def actor_for(auth: AuthContext, now: datetime.datetime) -> ActorContext:
    return ActorContext(role=auth.role, current_time=now)


def check_permission(
    entity: EditableEntity, auth: AuthContext, now: datetime.datetime, locale: Locale
) -> PermissionResponse:
    """Report the caller's edit permission without enforcing it."""
    return PermissionResponse.from_decision(evaluate(entity, actor_for(auth, now)), locale)


def enforce_edit(entity: EditableEntity, auth: AuthContext, now: datetime.datetime, locale: Locale) -> EditDecision:
    """Re-evaluate the policy before a mutation is committed.

    Raises:
        HTTPException 403: If the caller's role may not edit the record, or
            its edit window has closed
    """
    try:
        return enforce(entity, actor_for(auth, now))
    except EditNotPermitted as e:
        assert e.decision.reason is not None
        detail = EditDeniedDetail(
            entity_id=e.entity_id,
            reason=e.decision.reason,
            elapsed_over_by_seconds=(
                e.decision.elapsed_over_by.total_seconds() if e.decision.elapsed_over_by is not None else None
            ),
            locks_at=e.decision.locks_at,
            explanation=describe_denial(e.decision, locale) or "",
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail.model_dump(mode="json"),
        ) from e
