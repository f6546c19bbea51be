__all__ = [
    # Base
    "BaseModel",
    "FrozenModel",
    "WithCtime",
    "WithMtime",
    "WithTimestamps",
    # Enums
    "DeploymentEnvironment",
    # ID Types
    "UserID",
    "GradeID",
    "AttendanceSessionID",
    "AttendanceRecordID",
    "AssignmentID",
    # Users
    "User",
    "Role",
    # Grades
    "Grade",
    "GradeType",
    # Attendance
    "AttendanceSession",
    "AttendanceRecord",
    "AttendanceStatus",
    # Assignments
    "Assignment",
]

from .assignment import Assignment
from .attendance import AttendanceRecord, AttendanceSession
from .base import BaseModel, FrozenModel, WithCtime, WithMtime, WithTimestamps
from .enum import AttendanceStatus, DeploymentEnvironment, GradeType, Role
from .grade import Grade
from .id import AssignmentID, AttendanceRecordID, AttendanceSessionID, GradeID, UserID
from .user import User
