"""
Students Service Layer

Registering, listing and searching a school's students.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.students.repository import StudentRepository
from app.modules.students.schemas import (
    StudentCreate,
    StudentCreatedResponse,
    StudentListResponse,
    StudentResponse,
    StudentSearchResponse,
)

logger = logging.getLogger(__name__)


class StudentServiceError(Exception):
    """Base exception for student service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class MissingSearchCriteriaError(StudentServiceError):
    def __init__(self):
        super().__init__(
            message="Provide a student name or standard to search",
            error_code="MISSING_SEARCH_CRITERIA",
            status_code=400,
        )


class StudentNotFoundError(StudentServiceError):
    def __init__(self):
        super().__init__(
            message="Student not found",
            error_code="STUDENT_NOT_FOUND",
            status_code=404,
        )


async def register_student(
    db: AsyncSession,
    school_id: int,
    school_name: str,
    data: StudentCreate,
) -> StudentCreatedResponse:
    """Add a student to the school's register."""
    student = await StudentRepository.create(
        db,
        school_id=school_id,
        school_name=school_name,
        fields=data.model_dump(),
    )

    return StudentCreatedResponse(
        message="Student registered successfully!",
        student_id=student.id,
    )


async def list_students(db: AsyncSession, school_id: int) -> StudentListResponse:
    students = await StudentRepository.list_for_school(db, school_id)
    return StudentListResponse(
        students=[StudentResponse.model_validate(s) for s in students],
        count=len(students),
    )


async def search_students(
    db: AsyncSession,
    school_id: int,
    name: str | None = None,
    standard: str | None = None,
) -> StudentSearchResponse:
    """
    Search the school's students by name and/or standard.

    Raises:
        MissingSearchCriteriaError: If neither filter is given
        StudentNotFoundError: If nothing matches
    """
    name = name.strip() if name else None
    standard = standard.strip() if standard else None

    if not name and not standard:
        raise MissingSearchCriteriaError()

    students = await StudentRepository.search(db, school_id, name=name, standard=standard)

    if not students:
        logger.info(f"No students matched search in school {school_id}")
        raise StudentNotFoundError()

    matches = [StudentResponse.model_validate(s) for s in students]
    return StudentSearchResponse(student=matches[0], students=matches)
