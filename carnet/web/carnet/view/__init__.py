"""View models for the carnet web application."""

__all__ = [
    # Permission views
    "EditDeniedDetail",
    "PermissionResponse",
    # Grade views
    "GradeCreateRequest",
    "GradeListResponse",
    "GradeResponse",
    "GradeUpdateRequest",
    # Attendance views
    "RecordCreateRequest",
    "RecordResponse",
    "RecordUpdateRequest",
    "SessionCreateRequest",
    "SessionResponse",
    # Assignment views
    "AssignmentCreateRequest",
    "AssignmentListResponse",
    "AssignmentResponse",
    "AssignmentUpdateRequest",
]

from .assignment import AssignmentCreateRequest, AssignmentListResponse, AssignmentResponse, AssignmentUpdateRequest
from .attendance import RecordCreateRequest, RecordResponse, RecordUpdateRequest, SessionCreateRequest, \
    SessionResponse
from .grade import GradeCreateRequest, GradeListResponse, GradeResponse, GradeUpdateRequest
from .permission import EditDeniedDetail, PermissionResponse
