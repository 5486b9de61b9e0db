"""
School Repository

Database operations for school management.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.schools.models import School

logger = logging.getLogger(__name__)


class SchoolRepository:
    """Repository for school database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        name: str,
        principal_name: str,
        principal_email: str,
        village: str,
        tehsil: str,
        district: str,
        pin_code: str,
        board_name: str,
    ) -> School:
        """
        Create a new school record.

        The caller owns the transaction; this only flushes so the new id is
        available for the school's first account.

        Args:
            db: Database session
            name: School name
            principal_name: Name of the principal
            principal_email: Email of the principal
            village: Village
            tehsil: Tehsil (sub-district)
            district: District
            pin_code: Postal PIN code
            board_name: Examination board

        Returns:
            Created School instance
        """
        school = School(
            name=name,
            principal_name=principal_name,
            principal_email=principal_email,
            village=village,
            tehsil=tehsil,
            district=district,
            pin_code=pin_code,
            board_name=board_name,
        )

        db.add(school)
        await db.flush()
        await db.refresh(school)

        logger.info(f"Created school: {school.id} - {school.name}")
        return school

    @staticmethod
    async def get_by_id(db: AsyncSession, school_id: int) -> School | None:
        """
        Get a school by id.

        Args:
            db: Database session
            school_id: School id

        Returns:
            School instance or None if not found
        """
        return await db.get(School, school_id)
