"""
User Models

Login accounts. Each account belongs to one school and carries a permanent
password plus an optional, time-limited temporary password issued by the
forgot-password flow.
"""

import enum
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Enum, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class UserRole(str, enum.Enum):
    """Account roles."""

    CLERK = "CLERK"
    PRINCIPAL = "PRINCIPAL"


class UserAccount(Base):
    """
    School login account.

    The temporary credential is a pair: ``temp_password_hash`` and
    ``temp_password_expires_at`` are always written and cleared together.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    school_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Denormalized for display; never used as a lookup key
    school_name: Mapped[str] = mapped_column(String(200), nullable=False)

    username: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    school_email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)

    password_hash: Mapped[str] = mapped_column(Text, nullable=False)

    # Temporary credential (forgot-password flow)
    temp_password_hash: Mapped[str | None] = mapped_column(Text, nullable=True)
    temp_password_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role"),
        nullable=False,
        default=UserRole.CLERK,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        CheckConstraint(
            "(temp_password_hash IS NULL) = (temp_password_expires_at IS NULL)",
            name="ck_users_temp_password_pair",
        ),
    )

    def __repr__(self) -> str:
        return f"<UserAccount(id={self.id}, username={self.username}, role={self.role.value})>"

    @property
    def has_temp_password(self) -> bool:
        return self.temp_password_hash is not None and self.temp_password_expires_at is not None
