import datetime

from .base import WithTimestamps
from .enum import Role
from .id import AssignmentID, UserID


class Assignment(WithTimestamps):
    assignment_id: AssignmentID
    assigned_by: UserID
    assigned_by_role: Role

    class_name: str
    subject: str
    title: str
    description: str | None = None
    due_at: datetime.datetime
