"""
Student Repository

Database operations for student records. Every query is scoped by
``school_id``.
"""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.students.models import Student

logger = logging.getLogger(__name__)


def _contains_pattern(text: str) -> str:
    """LIKE pattern matching ``text`` literally as a substring."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class StudentRepository:
    """Repository for student database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        school_id: int,
        school_name: str,
        fields: dict[str, Any],
    ) -> Student:
        """
        Create a new student record.

        Args:
            db: Database session
            school_id: Owning school
            school_name: School display name
            fields: Student columns (name and the register fields)

        Returns:
            Created Student instance
        """
        student = Student(school_id=school_id, school_name=school_name, **fields)

        db.add(student)
        await db.commit()
        await db.refresh(student)

        logger.info(f"Created student: {student.id} for school {school_id}")
        return student

    @staticmethod
    async def list_for_school(db: AsyncSession, school_id: int) -> list[Student]:
        """List a school's students, newest first."""
        result = await db.execute(
            select(Student).where(Student.school_id == school_id).order_by(Student.id.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def search(
        db: AsyncSession,
        school_id: int,
        name: str | None = None,
        standard: str | None = None,
    ) -> list[Student]:
        """
        Search a school's students by case-insensitive substring match.

        Args:
            db: Database session
            school_id: Owning school
            name: Substring of the student name
            standard: Substring of the standard (class)

        Returns:
            Matching students, newest first
        """
        query = select(Student).where(Student.school_id == school_id)

        if name:
            query = query.where(Student.name.ilike(_contains_pattern(name), escape="\\"))
        if standard:
            query = query.where(Student.standard.ilike(_contains_pattern(standard), escape="\\"))

        result = await db.execute(query.order_by(Student.id.desc()))
        return list(result.scalars().all())
