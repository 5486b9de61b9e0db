"""
Schools Service Layer

School registration and school profile lookup.

Registration creates the school and its first account (role CLERK) in one
transaction. Principal accounts are provisioned separately
(scripts/seed_principal.py).
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import hash_password
from app.modules.auth.service import validate_new_password
from app.modules.schools.repository import SchoolRepository
from app.modules.schools.schemas import (
    SchoolInfoResponse,
    SchoolRegistrationRequest,
    SchoolRegistrationResponse,
)
from app.modules.users.models import UserRole
from app.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


class SchoolServiceError(Exception):
    """Base exception for school service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class DuplicateAccountError(SchoolServiceError):
    """Raised when the username or school email is already registered."""

    def __init__(self):
        super().__init__(
            message="Username or Email already exists",
            error_code="DUPLICATE_ACCOUNT",
            status_code=409,
        )


class SchoolNotFoundError(SchoolServiceError):
    """Raised when a school does not exist."""

    def __init__(self, school_id: int | None = None):
        message = f"School {school_id} not found" if school_id else "School not found"
        super().__init__(
            message=message,
            error_code="SCHOOL_NOT_FOUND",
            status_code=404,
        )


async def register_school(
    db: AsyncSession,
    data: SchoolRegistrationRequest,
) -> SchoolRegistrationResponse:
    """
    Register a school and its first (clerk) account.

    Args:
        db: Database session
        data: Registration form

    Returns:
        SchoolRegistrationResponse with the new school id

    Raises:
        DuplicateAccountError: If the username or school email is taken
        WeakPasswordError: If the password is too short
        PasswordTooLongError: If the password exceeds what bcrypt can hash
    """
    logger.info(f"Processing registration for school: {data.school_name}")

    if await UserRepository.username_or_email_exists(db, data.username, data.school_email):
        logger.warning(f"Duplicate registration attempt for school: {data.school_name}")
        raise DuplicateAccountError()

    validate_new_password(data.password)

    try:
        school = await SchoolRepository.create(
            db,
            name=data.school_name,
            principal_name=data.principal_name,
            principal_email=data.principal_email,
            village=data.village,
            tehsil=data.tehsil,
            district=data.district,
            pin_code=data.pin_code,
            board_name=data.board_name,
        )

        account = await UserRepository.create(
            db,
            school_id=school.id,
            school_name=school.name,
            username=data.username,
            school_email=data.school_email,
            password_hash=hash_password(data.password),
            role=UserRole.CLERK,
        )

        await db.commit()
    except IntegrityError as e:
        # A concurrent registration claimed the username or email first
        await db.rollback()
        logger.warning(f"Registration lost a uniqueness race for school: {data.school_name}")
        raise DuplicateAccountError() from e

    logger.info(f"Registered school {school.id} with account {account.id}")

    return SchoolRegistrationResponse(
        message="School registered successfully!",
        school_id=school.id,
        username=account.username,
    )


async def get_school_info(db: AsyncSession, school_id: int) -> SchoolInfoResponse:
    """
    Get the profile of a school with its primary account's login details.

    Raises:
        SchoolNotFoundError: If the school does not exist
    """
    school = await SchoolRepository.get_by_id(db, school_id)

    if not school:
        raise SchoolNotFoundError(school_id)

    account = await UserRepository.get_first_for_school(db, school_id)

    info = SchoolInfoResponse.model_validate(school)
    if account:
        info.username = account.username
        info.school_email = account.school_email
    return info
