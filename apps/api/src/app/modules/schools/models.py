"""
School Models

A school is the tenant every account, student and leaving certificate
belongs to. Its integer id is the partition key used throughout the API;
the name is kept for display only.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class School(Base):
    """
    School registered on the platform.

    Created together with its first (clerk) account at registration.
    """

    __tablename__ = "schools"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)

    # Principal
    principal_name: Mapped[str] = mapped_column(String(200), nullable=False)
    principal_email: Mapped[str] = mapped_column(String(255), nullable=False)

    # Location
    village: Mapped[str] = mapped_column(String(100), nullable=False)
    tehsil: Mapped[str] = mapped_column(String(100), nullable=False)
    district: Mapped[str] = mapped_column(String(100), nullable=False)
    pin_code: Mapped[str] = mapped_column(String(10), nullable=False)

    board_name: Mapped[str] = mapped_column(String(200), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<School(id={self.id}, name={self.name})>"
