import decimal

from .base import WithTimestamps
from .enum import GradeType, Role
from .id import GradeID, UserID


class Grade(WithTimestamps):
    grade_id: GradeID
    student_id: UserID
    recorded_by: UserID
    recorded_by_role: Role

    subject: str
    grade_type: GradeType = GradeType.Test
    value: decimal.Decimal
    # French grades are out of 20 unless recorded otherwise
    scale: decimal.Decimal = decimal.Decimal(20)
    coefficient: decimal.Decimal = decimal.Decimal(1)
    comment: str | None = None
