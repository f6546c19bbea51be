"""Grade routes."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from carnet.auth import AuthContext, get_current_user, require_role
from carnet.core import di, TimestampProvider
from carnet.lib import NotSet
from carnet.model import Grade, GradeID, Role, UserID
from carnet.policy import EditableEntity, Locale
from carnet.storage import grade as grade_storage
from carnet.storage import user as user_storage

from ..dependencies import check_permission, enforce_edit
from ..view.grade import GradeCreateRequest, GradeListResponse, GradeResponse, GradeUpdateRequest
from ..view.permission import PermissionResponse

router = APIRouter(prefix="/api/grades", tags=["grades"])


def _get_grade(grade_id: GradeID, auth: AuthContext, session: Session) -> Grade:
    grade = grade_storage.get(grade_id, session=session)
    if grade is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Grade not found",
        )
    if auth.role is Role.Student and grade.student_id != auth.user.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Students can only see their own grades",
        )
    return grade


@router.get("", operation_id="list_grades")
@di.inject
def list_grades(
    student_id: UserID | None = None,
    subject: str | None = None,
    auth: AuthContext = Depends(get_current_user),
    session: Session = Depends(di.Manage["storage.persistent.session"]),
) -> GradeListResponse:
    """List grades, optionally for one student.

    Students always get their own grades only.
    """
    if auth.role is Role.Student:
        if student_id is not None and student_id != auth.user.user_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Students can only see their own grades",
            )
        student_id = auth.user.user_id

    with session.begin():
        grades = grade_storage.find(student_id=student_id, subject=subject, session=session)

    return GradeListResponse(
        grades=[GradeResponse.from_model(g) for g in grades],
        total=len(grades),
    )


@router.post("", operation_id="create_grade", status_code=status.HTTP_201_CREATED)
@di.inject
def create_grade(
    request: GradeCreateRequest,
    auth: AuthContext = Depends(require_role(Role.Teacher, Role.Admin)),
    session: Session = Depends(di.Manage["storage.persistent.session"]),
) -> GradeResponse:
    """Record a grade for a student.

    Only teachers and administrators can record grades.
    """
    assert isinstance(auth.role, Role)
    with session.begin():
        student = user_storage.get(user_id=request.student_id, session=session)
        if student is None or student.role is not Role.Student:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Student not found",
            )

        grade = grade_storage.create(
            student_id=request.student_id,
            recorded_by=auth.user.user_id,
            recorded_by_role=auth.role,
            subject=request.subject,
            value=request.value,
            grade_type=request.grade_type,
            scale=request.scale,
            coefficient=request.coefficient,
            comment=request.comment,
            session=session,
        )

    return GradeResponse.from_model(grade)


@router.get("/{grade_id}", operation_id="get_grade")
@di.inject
def get_grade(
    grade_id: GradeID,
    auth: AuthContext = Depends(get_current_user),
    session: Session = Depends(di.Manage["storage.persistent.session"]),
) -> GradeResponse:
    with session.begin():
        grade = _get_grade(grade_id, auth, session)
    return GradeResponse.from_model(grade)


@router.get("/{grade_id}/permission", operation_id="get_grade_permission")
@di.inject
def get_grade_permission(
    grade_id: GradeID,
    locale: Locale = Locale.French,
    auth: AuthContext = Depends(get_current_user),
    session: Session = Depends(di.Manage["storage.persistent.session"]),
    utcnow: TimestampProvider = Depends(di.Provide["utcnow"]),
) -> PermissionResponse:
    """Tell the caller whether they may still edit the grade, and for how long."""
    with session.begin():
        grade = _get_grade(grade_id, auth, session)
    return check_permission(EditableEntity.for_grade(grade), auth, utcnow(), locale)


@router.patch("/{grade_id}", operation_id="update_grade")
@di.inject
def update_grade(
    grade_id: GradeID,
    request: GradeUpdateRequest,
    locale: Locale = Locale.French,
    auth: AuthContext = Depends(get_current_user),
    session: Session = Depends(di.Manage["storage.persistent.session"]),
    utcnow: TimestampProvider = Depends(di.Provide["utcnow"]),
) -> GradeResponse:
    """Correct a grade while the caller's edit window is open."""
    with session.begin():
        grade = _get_grade(grade_id, auth, session)
        enforce_edit(EditableEntity.for_grade(grade), auth, utcnow(), locale)

        if request.value is not None and request.value > grade.scale:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"value {request.value} exceeds scale {grade.scale}",
            )

        grade_storage.update(
            grade_id,
            value=request.value if request.value is not None else NotSet(),
            grade_type=request.grade_type if request.grade_type is not None else NotSet(),
            coefficient=request.coefficient if request.coefficient is not None else NotSet(),
            comment=request.comment if "comment" in request.model_fields_set else NotSet(),
            session=session,
        )
        updated = grade_storage.get(grade_id, session=session)
        assert updated is not None

    return GradeResponse.from_model(updated)


@router.delete("/{grade_id}", operation_id="delete_grade", status_code=status.HTTP_204_NO_CONTENT)
@di.inject
def delete_grade(
    grade_id: GradeID,
    locale: Locale = Locale.French,
    auth: AuthContext = Depends(get_current_user),
    session: Session = Depends(di.Manage["storage.persistent.session"]),
    utcnow: TimestampProvider = Depends(di.Provide["utcnow"]),
) -> None:
    """Delete a grade while the caller's edit window is open."""
    with session.begin():
        grade = _get_grade(grade_id, auth, session)
        enforce_edit(EditableEntity.for_grade(grade), auth, utcnow(), locale)
        grade_storage.delete(grade_id, session=session)
