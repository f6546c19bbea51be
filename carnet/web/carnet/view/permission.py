"""View models for edit permissions."""

from __future__ import annotations

import datetime

import pydantic as p

from carnet.policy import DenyReason, describe_denial, describe_remaining, EditDecision, Locale


class PermissionResponse(p.BaseModel):
    """Whether the caller may edit a record right now, with display text."""

    allowed: bool
    reason: DenyReason | None = None
    remaining_seconds: float | None = None
    elapsed_over_by_seconds: float | None = None
    locks_at: datetime.datetime | None = None
    summary: str
    explanation: str | None = None

    @classmethod
    def from_decision(cls, decision: EditDecision, locale: Locale) -> PermissionResponse:
        return cls(
            allowed=decision.allowed,
            reason=decision.reason,
            remaining_seconds=decision.remaining.total_seconds() if decision.remaining is not None else None,
            elapsed_over_by_seconds=(
                decision.elapsed_over_by.total_seconds() if decision.elapsed_over_by is not None else None
            ),
            locks_at=decision.locks_at,
            summary=describe_remaining(decision, locale),
            explanation=describe_denial(decision, locale),
        )


class EditDeniedDetail(p.BaseModel):
    """Detail body of a 403 raised when the policy refuses a mutation."""

    entity_id: str
    reason: DenyReason
    elapsed_over_by_seconds: float | None = None
    locks_at: datetime.datetime | None = None
    explanation: str
