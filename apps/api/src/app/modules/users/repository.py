"""
User Repository

Database operations for school login accounts and their credentials.
"""

import logging
from datetime import datetime

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.users.models import UserAccount, UserRole

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for account database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        school_id: int,
        school_name: str,
        username: str,
        school_email: str,
        password_hash: str,
        role: UserRole = UserRole.CLERK,
    ) -> UserAccount:
        """
        Create a new account record.

        The caller owns the transaction; this only flushes.

        Args:
            db: Database session
            school_id: Owning school
            school_name: School display name
            username: Login name (unique)
            school_email: Recovery email (unique)
            password_hash: Hashed permanent password
            role: CLERK or PRINCIPAL

        Returns:
            Created UserAccount instance
        """
        user = UserAccount(
            school_id=school_id,
            school_name=school_name,
            username=username,
            school_email=school_email,
            password_hash=password_hash,
            role=role,
        )

        db.add(user)
        await db.flush()
        await db.refresh(user)

        logger.info(f"Created account: {user.id} - {user.username} ({user.role.value})")
        return user

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: int) -> UserAccount | None:
        """Get an account by id."""
        return await db.get(UserAccount, user_id)

    @staticmethod
    async def get_by_username(db: AsyncSession, username: str) -> UserAccount | None:
        """Get an account by login name."""
        result = await db.execute(select(UserAccount).where(UserAccount.username == username))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> UserAccount | None:
        """Get an account by its school email."""
        result = await db.execute(select(UserAccount).where(UserAccount.school_email == email))
        return result.scalar_one_or_none()

    @staticmethod
    async def username_or_email_exists(db: AsyncSession, username: str, email: str) -> bool:
        """
        Check whether a username or school email is already registered.

        Args:
            db: Database session
            username: Login name to check
            email: School email to check

        Returns:
            True if either is taken
        """
        result = await db.execute(
            select(UserAccount.id)
            .where(or_(UserAccount.username == username, UserAccount.school_email == email))
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def get_first_for_school(db: AsyncSession, school_id: int) -> UserAccount | None:
        """Get the earliest account registered for a school."""
        result = await db.execute(
            select(UserAccount)
            .where(UserAccount.school_id == school_id)
            .order_by(UserAccount.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def set_temp_password(
        db: AsyncSession,
        user_id: int,
        temp_password_hash: str,
        expires_at: datetime,
    ) -> None:
        """
        Store a temporary credential, replacing any previous one.

        Both fields are written in a single UPDATE.
        """
        await db.execute(
            update(UserAccount)
            .where(UserAccount.id == user_id)
            .values(temp_password_hash=temp_password_hash, temp_password_expires_at=expires_at)
        )
        await db.commit()

    @staticmethod
    async def clear_temp_password(db: AsyncSession, user_id: int) -> None:
        """Remove the temporary credential (both fields together)."""
        await db.execute(
            update(UserAccount)
            .where(UserAccount.id == user_id)
            .values(temp_password_hash=None, temp_password_expires_at=None)
        )
        await db.commit()

    @staticmethod
    async def update_password(db: AsyncSession, user_id: int, password_hash: str) -> None:
        """
        Replace the permanent password and clear any temporary credential.

        One UPDATE, so the new password and the cleared temp pair land together.
        """
        await db.execute(
            update(UserAccount)
            .where(UserAccount.id == user_id)
            .values(
                password_hash=password_hash,
                temp_password_hash=None,
                temp_password_expires_at=None,
            )
        )
        await db.commit()
