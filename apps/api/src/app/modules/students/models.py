"""
Student Models

Student records kept by a school. The free-text fields mirror the lines of
the printed general register and leaving certificate, so dates are stored
as entered.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class Student(Base):
    """Student entered in a school's register."""

    __tablename__ = "students"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    school_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    school_name: Mapped[str] = mapped_column(String(200), nullable=False)

    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    mother_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    mother_tongue: Mapped[str | None] = mapped_column(String(100), nullable=True)
    race_caste: Mapped[str | None] = mapped_column(String(100), nullable=True)
    nationality: Mapped[str] = mapped_column(
        String(100), nullable=False, default="Indian", server_default="Indian"
    )
    birth_place: Mapped[str | None] = mapped_column(String(200), nullable=True)
    dob: Mapped[str | None] = mapped_column(String(50), nullable=True)

    last_school: Mapped[str | None] = mapped_column(String(200), nullable=True)
    date_admission: Mapped[str | None] = mapped_column(String(50), nullable=True)
    standard: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)
    progress: Mapped[str | None] = mapped_column(String(100), nullable=True)
    conduct: Mapped[str | None] = mapped_column(String(100), nullable=True)
    date_leaving: Mapped[str | None] = mapped_column(String(50), nullable=True)
    reason_leaving: Mapped[str | None] = mapped_column(Text, nullable=True)
    remark: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Student(id={self.id}, name={self.name}, standard={self.standard})>"
