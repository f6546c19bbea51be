"""View models for assignments."""

from __future__ import annotations

import datetime

import pydantic as p

from carnet.model import Assignment, AssignmentID, Role, UserID


class AssignmentCreateRequest(p.BaseModel):
    """Request to give homework to a class."""

    class_name: str
    subject: str
    title: str
    description: str | None = None
    due_at: p.AwareDatetime


class AssignmentUpdateRequest(p.BaseModel):
    """Request to update an assignment. Omitted fields are left unchanged."""

    title: str | None = None
    description: str | None = None
    due_at: p.AwareDatetime | None = None


class AssignmentResponse(p.BaseModel):
    """Assignment details response."""

    assignment_id: AssignmentID
    assigned_by: UserID
    assigned_by_role: Role
    class_name: str
    subject: str
    title: str
    description: str | None = None
    due_at: datetime.datetime
    create_time: datetime.datetime
    update_time: datetime.datetime

    @classmethod
    def from_model(cls, assignment: Assignment) -> AssignmentResponse:
        return cls(**assignment.model_dump())


class AssignmentListResponse(p.BaseModel):
    """List of assignments response."""

    assignments: list[AssignmentResponse]
    total: int
