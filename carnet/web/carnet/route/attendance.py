"""Attendance routes."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from carnet.auth import AuthContext, get_current_user, require_role
from carnet.core import di, TimestampProvider
from carnet.lib import NotSet
from carnet.model import AttendanceRecord, AttendanceRecordID, AttendanceSession, AttendanceSessionID, Role
from carnet.policy import EditableEntity, Locale
from carnet.storage import attendance as attendance_storage
from carnet.storage import user as user_storage

from ..dependencies import check_permission, enforce_edit
from ..view.attendance import RecordCreateRequest, RecordResponse, RecordUpdateRequest, SessionCreateRequest, \
    SessionResponse
from ..view.permission import PermissionResponse

router = APIRouter(prefix="/api/attendance", tags=["attendance"])

# roles that take attendance
_takers = (Role.Teacher, Role.Staff, Role.Admin)


def _get_session(session_id: AttendanceSessionID, session: Session) -> AttendanceSession:
    course = attendance_storage.get_session(session_id, session=session)
    if course is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )
    return course


def _get_record(record_id: AttendanceRecordID, session: Session) -> tuple[AttendanceRecord, AttendanceSession]:
    record = attendance_storage.get(record_id, session=session)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Attendance record not found",
        )
    return record, _get_session(record.session_id, session)


@router.post("/sessions", operation_id="create_attendance_session", status_code=status.HTTP_201_CREATED)
@di.inject
def create_session(
    request: SessionCreateRequest,
    auth: AuthContext = Depends(require_role(*_takers)),
    session: Session = Depends(di.Manage["storage.persistent.session"]),
) -> SessionResponse:
    """Schedule a course session for the calling teacher."""
    with session.begin():
        course = attendance_storage.create_session(
            teacher_id=auth.user.user_id,
            class_name=request.class_name,
            subject=request.subject,
            starts_at=request.starts_at,
            ends_at=request.ends_at,
            session=session,
        )
    return SessionResponse.from_model(course)


@router.get("/sessions/{session_id}", operation_id="get_attendance_session")
@di.inject
def get_session(
    session_id: AttendanceSessionID,
    auth: AuthContext = Depends(require_role(*_takers)),
    session: Session = Depends(di.Manage["storage.persistent.session"]),
) -> SessionResponse:
    with session.begin():
        course = _get_session(session_id, session)
        records = attendance_storage.find(session_id=session_id, session=session)
    return SessionResponse.from_model(course, records)


@router.post(
    "/sessions/{session_id}/records",
    operation_id="create_attendance_record",
    status_code=status.HTTP_201_CREATED,
)
@di.inject
def create_record(
    session_id: AttendanceSessionID,
    request: RecordCreateRequest,
    auth: AuthContext = Depends(require_role(*_takers)),
    session: Session = Depends(di.Manage["storage.persistent.session"]),
) -> RecordResponse:
    """Take a student's attendance for a session.

    Raises:
        HTTPException 409: If the student's attendance was already taken
    """
    assert isinstance(auth.role, Role)
    try:
        with session.begin():
            _get_session(session_id, session)
            student = user_storage.get(user_id=request.student_id, session=session)
            if student is None or student.role is not Role.Student:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Student not found",
                )
            record = attendance_storage.create(
                session_id=session_id,
                student_id=request.student_id,
                recorded_by=auth.user.user_id,
                recorded_by_role=auth.role,
                status=request.status,
                late_minutes=request.late_minutes,
                justification=request.justification,
                session=session,
            )
    except IntegrityError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Attendance already taken for this student; correct the existing record instead",
        ) from e
    return RecordResponse.from_model(record)


@router.get("/records/{record_id}/permission", operation_id="get_attendance_record_permission")
@di.inject
def get_record_permission(
    record_id: AttendanceRecordID,
    locale: Locale = Locale.French,
    auth: AuthContext = Depends(get_current_user),
    session: Session = Depends(di.Manage["storage.persistent.session"]),
    utcnow: TimestampProvider = Depends(di.Provide["utcnow"]),
) -> PermissionResponse:
    """Tell the caller whether they may still correct the record, and for how long.

    The window runs from the start of the course session, not from when the
    record was written.
    """
    with session.begin():
        record, course = _get_record(record_id, session)
    return check_permission(EditableEntity.for_attendance_record(record, course), auth, utcnow(), locale)


@router.patch("/records/{record_id}", operation_id="update_attendance_record")
@di.inject
def update_record(
    record_id: AttendanceRecordID,
    request: RecordUpdateRequest,
    locale: Locale = Locale.French,
    auth: AuthContext = Depends(get_current_user),
    session: Session = Depends(di.Manage["storage.persistent.session"]),
    utcnow: TimestampProvider = Depends(di.Provide["utcnow"]),
) -> RecordResponse:
    """Correct an attendance record while the caller's edit window is open."""
    with session.begin():
        record, course = _get_record(record_id, session)
        enforce_edit(EditableEntity.for_attendance_record(record, course), auth, utcnow(), locale)

        fields = request.model_fields_set
        attendance_storage.update(
            record_id,
            status=request.status if request.status is not None else NotSet(),
            late_minutes=request.late_minutes if "late_minutes" in fields else NotSet(),
            justification=request.justification if "justification" in fields else NotSet(),
            session=session,
        )
        updated = attendance_storage.get(record_id, session=session)
        assert updated is not None

    return RecordResponse.from_model(updated)
