"""Route aggregation for the carnet web application."""

from fastapi import APIRouter

from . import assignment, attendance, grade

router = APIRouter()
router.include_router(grade.router)
router.include_router(attendance.router)
router.include_router(assignment.router)
