"""Assignment routes."""

import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from carnet.auth import AuthContext, get_current_user, require_role
from carnet.core import di, TimestampProvider
from carnet.lib import NotSet
from carnet.model import Assignment, AssignmentID, Role
from carnet.policy import EditableEntity, Locale
from carnet.storage import assignment as assignment_storage

from ..dependencies import check_permission, enforce_edit
from ..view.assignment import AssignmentCreateRequest, AssignmentListResponse, AssignmentResponse, \
    AssignmentUpdateRequest
from ..view.permission import PermissionResponse

router = APIRouter(prefix="/api/assignments", tags=["assignments"])


def _get_assignment(assignment_id: AssignmentID, session: Session) -> Assignment:
    assignment = assignment_storage.get(assignment_id, session=session)
    if assignment is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Assignment not found",
        )
    return assignment


@router.get("", operation_id="list_assignments")
@di.inject
def list_assignments(
    class_name: str | None = None,
    due_after: datetime.datetime | None = None,
    auth: AuthContext = Depends(get_current_user),
    session: Session = Depends(di.Manage["storage.persistent.session"]),
) -> AssignmentListResponse:
    """List assignments, soonest due first."""
    with session.begin():
        assignments = assignment_storage.find(class_name=class_name, due_after=due_after, session=session)

    return AssignmentListResponse(
        assignments=[AssignmentResponse.from_model(a) for a in assignments],
        total=len(assignments),
    )


@router.post("", operation_id="create_assignment", status_code=status.HTTP_201_CREATED)
@di.inject
def create_assignment(
    request: AssignmentCreateRequest,
    auth: AuthContext = Depends(require_role(Role.Teacher, Role.Admin)),
    session: Session = Depends(di.Manage["storage.persistent.session"]),
) -> AssignmentResponse:
    """Give homework to a class.

    Only teachers and administrators can create assignments.
    """
    assert isinstance(auth.role, Role)
    with session.begin():
        assignment = assignment_storage.create(
            assigned_by=auth.user.user_id,
            assigned_by_role=auth.role,
            class_name=request.class_name,
            subject=request.subject,
            title=request.title,
            description=request.description,
            due_at=request.due_at,
            session=session,
        )
    return AssignmentResponse.from_model(assignment)


@router.get("/{assignment_id}", operation_id="get_assignment")
@di.inject
def get_assignment(
    assignment_id: AssignmentID,
    auth: AuthContext = Depends(get_current_user),
    session: Session = Depends(di.Manage["storage.persistent.session"]),
) -> AssignmentResponse:
    with session.begin():
        assignment = _get_assignment(assignment_id, session)
    return AssignmentResponse.from_model(assignment)


@router.get("/{assignment_id}/permission", operation_id="get_assignment_permission")
@di.inject
def get_assignment_permission(
    assignment_id: AssignmentID,
    locale: Locale = Locale.French,
    auth: AuthContext = Depends(get_current_user),
    session: Session = Depends(di.Manage["storage.persistent.session"]),
    utcnow: TimestampProvider = Depends(di.Provide["utcnow"]),
) -> PermissionResponse:
    """Tell the caller whether they may still edit the assignment.

    Teachers lose the right once the due date has passed.
    """
    with session.begin():
        assignment = _get_assignment(assignment_id, session)
    return check_permission(EditableEntity.for_assignment(assignment), auth, utcnow(), locale)


@router.patch("/{assignment_id}", operation_id="update_assignment")
@di.inject
def update_assignment(
    assignment_id: AssignmentID,
    request: AssignmentUpdateRequest,
    locale: Locale = Locale.French,
    auth: AuthContext = Depends(get_current_user),
    session: Session = Depends(di.Manage["storage.persistent.session"]),
    utcnow: TimestampProvider = Depends(di.Provide["utcnow"]),
) -> AssignmentResponse:
    """Update an assignment until its due date passes."""
    with session.begin():
        assignment = _get_assignment(assignment_id, session)
        enforce_edit(EditableEntity.for_assignment(assignment), auth, utcnow(), locale)

        assignment_storage.update(
            assignment_id,
            title=request.title if request.title is not None else NotSet(),
            description=request.description if "description" in request.model_fields_set else NotSet(),
            due_at=request.due_at if request.due_at is not None else NotSet(),
            session=session,
        )
        updated = assignment_storage.get(assignment_id, session=session)
        assert updated is not None

    return AssignmentResponse.from_model(updated)


@router.delete("/{assignment_id}", operation_id="delete_assignment", status_code=status.HTTP_204_NO_CONTENT)
@di.inject
def delete_assignment(
    assignment_id: AssignmentID,
    locale: Locale = Locale.French,
    auth: AuthContext = Depends(get_current_user),
    session: Session = Depends(di.Manage["storage.persistent.session"]),
    utcnow: TimestampProvider = Depends(di.Provide["utcnow"]),
) -> None:
    """Delete an assignment until its due date passes."""
    with session.begin():
        assignment = _get_assignment(assignment_id, session)
        enforce_edit(EditableEntity.for_assignment(assignment), auth, utcnow(), locale)
        assignment_storage.delete(assignment_id, session=session)
