"""Initial schema: users, grades, attendance and assignments

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""

import typing as t

from alembic import op
from sqlalchemy import func as f
from sqlalchemy.schema import Column, ForeignKey, UniqueConstraint
from sqlalchemy.types import DateTime, Integer, Numeric, String, Text

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | t.Sequence[str] | None = None
depends_on: str | t.Sequence[str] | None = None


def upgrade() -> None:
    # Users
    op.create_table(
        "users",
        Column("user_id", String(22), primary_key=True),
        Column("email", String, unique=True, nullable=False),
        Column("name", String, nullable=False),
        Column("role", String, nullable=False),
        Column("create_time", DateTime(timezone=True), server_default=f.now(), nullable=False),
        Column("update_time", DateTime(timezone=True), server_default=f.now(), nullable=False),
    )

    # Grades
    op.create_table(
        "grades",
        Column("grade_id", String(22), primary_key=True),
        Column("student_id", String(22), ForeignKey("users.user_id"), nullable=False),
        Column("recorded_by", String(22), ForeignKey("users.user_id"), nullable=False),
        Column("recorded_by_role", String, nullable=False),
        Column("subject", String, nullable=False),
        Column("value", Numeric(6, 2), nullable=False),
        Column("grade_type", String, nullable=False, server_default="controle"),
        Column("scale", Numeric(6, 2), nullable=False, server_default="20"),
        Column("coefficient", Numeric(6, 2), nullable=False, server_default="1"),
        Column("comment", Text, nullable=True),
        Column("create_time", DateTime(timezone=True), server_default=f.now(), nullable=False),
        Column("update_time", DateTime(timezone=True), server_default=f.now(), nullable=False),
    )
    op.create_index("ix_grades_student_id", "grades", ["student_id"])

    # Attendance
    op.create_table(
        "attendance_sessions",
        Column("session_id", String(22), primary_key=True),
        Column("teacher_id", String(22), ForeignKey("users.user_id"), nullable=False),
        Column("class_name", String, nullable=False),
        Column("subject", String, nullable=False),
        Column("starts_at", DateTime(timezone=True), nullable=False),
        Column("ends_at", DateTime(timezone=True), nullable=False),
        Column("create_time", DateTime(timezone=True), server_default=f.now(), nullable=False),
    )
    op.create_table(
        "attendance_records",
        Column("record_id", String(22), primary_key=True),
        Column("session_id", String(22), ForeignKey("attendance_sessions.session_id"), nullable=False),
        Column("student_id", String(22), ForeignKey("users.user_id"), nullable=False),
        Column("recorded_by", String(22), ForeignKey("users.user_id"), nullable=False),
        Column("recorded_by_role", String, nullable=False),
        Column("status", String, nullable=False, server_default="present"),
        Column("late_minutes", Integer, nullable=True),
        Column("justification", Text, nullable=True),
        Column("create_time", DateTime(timezone=True), server_default=f.now(), nullable=False),
        Column("update_time", DateTime(timezone=True), server_default=f.now(), nullable=False),
        UniqueConstraint("session_id", "student_id"),
    )

    # Assignments
    op.create_table(
        "assignments",
        Column("assignment_id", String(22), primary_key=True),
        Column("assigned_by", String(22), ForeignKey("users.user_id"), nullable=False),
        Column("assigned_by_role", String, nullable=False),
        Column("class_name", String, nullable=False),
        Column("subject", String, nullable=False),
        Column("title", String, nullable=False),
        Column("description", Text, nullable=True),
        Column("due_at", DateTime(timezone=True), nullable=False),
        Column("create_time", DateTime(timezone=True), server_default=f.now(), nullable=False),
        Column("update_time", DateTime(timezone=True), server_default=f.now(), nullable=False),
    )
    op.create_index("ix_assignments_class_name", "assignments", ["class_name"])


def downgrade() -> None:
    op.drop_index("ix_assignments_class_name", table_name="assignments")
    op.drop_table("assignments")
    op.drop_table("attendance_records")
    op.drop_table("attendance_sessions")
    op.drop_index("ix_grades_student_id", table_name="grades")
    op.drop_table("grades")
    op.drop_table("users")
