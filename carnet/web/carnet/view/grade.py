"""View models for grades."""

from __future__ import annotations

import datetime
import decimal
import typing as t

import annotated_types as ant
import pydantic as p

from carnet.model import Grade, GradeID, GradeType, Role, UserID

Score = t.Annotated[decimal.Decimal, ant.Ge(0), p.Field(max_digits=6, decimal_places=2)]


class GradeCreateRequest(p.BaseModel):
    """Request to record a new grade."""

    student_id: UserID
    subject: str
    value: Score
    grade_type: GradeType = GradeType.Test
    scale: t.Annotated[decimal.Decimal, ant.Gt(0)] = decimal.Decimal(20)
    coefficient: t.Annotated[decimal.Decimal, ant.Gt(0)] = decimal.Decimal(1)
    comment: str | None = None

    @p.model_validator(mode="after")
    def check_value_within_scale(self) -> t.Self:
        if self.value > self.scale:
            raise ValueError(f"value {self.value} exceeds scale {self.scale}")
        return self


class GradeUpdateRequest(p.BaseModel):
    """Request to correct a grade. Omitted fields are left unchanged."""

    value: Score | None = None
    grade_type: GradeType | None = None
    coefficient: t.Annotated[decimal.Decimal, ant.Gt(0)] | None = None
    comment: str | None = None


class GradeResponse(p.BaseModel):
    """Grade details response."""

    grade_id: GradeID
    student_id: UserID
    recorded_by: UserID
    recorded_by_role: Role
    subject: str
    grade_type: GradeType
    value: decimal.Decimal
    scale: decimal.Decimal
    coefficient: decimal.Decimal
    comment: str | None = None
    create_time: datetime.datetime
    update_time: datetime.datetime

    @classmethod
    def from_model(cls, grade: Grade) -> GradeResponse:
        return cls(**grade.model_dump())


class GradeListResponse(p.BaseModel):
    """List of grades response."""

    grades: list[GradeResponse]
    total: int
