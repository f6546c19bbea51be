"""Exceptions for edit-permission enforcement."""

from __future__ import annotations

from .entity import EditDecision


class EditNotPermitted(Exception):
    """A mutation was attempted outside the actor's edit window."""

    def __init__(self, decision: EditDecision, entity_id: str):
        self.decision = decision
        self.entity_id = entity_id
        reason = decision.reason.value if decision.reason else "denied"
        super().__init__(f"edit of {entity_id} denied: {reason}")
