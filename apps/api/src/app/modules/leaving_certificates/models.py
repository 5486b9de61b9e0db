"""
Leaving Certificate Models

A leaving certificate (LC) request moves PENDING -> APPROVED or
PENDING -> REJECTED. A student has at most one active (PENDING or APPROVED)
request at any time; the partial unique index below enforces it in the
database.
"""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, String, Text, func, text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class CertificateStatus(str, enum.Enum):
    """Status of a leaving certificate request."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


ACTIVE_STATUSES = (CertificateStatus.PENDING, CertificateStatus.APPROVED)

_ACTIVE_PREDICATE = text("status IN ('PENDING', 'APPROVED')")


class LeavingCertificate(Base):
    """Leaving certificate request for one student."""

    __tablename__ = "leaving_certificates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    student_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    school_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    school_name: Mapped[str] = mapped_column(String(200), nullable=False)

    status: Mapped[CertificateStatus] = mapped_column(
        Enum(CertificateStatus, name="certificate_status"),
        nullable=False,
        default=CertificateStatus.PENDING,
        index=True,
    )

    requested_by: Mapped[str] = mapped_column(String(100), nullable=False)
    requested_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Decision (set once, by the principal)
    approved_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index(
            "uq_leaving_certificates_active_student",
            "student_id",
            unique=True,
            postgresql_where=_ACTIVE_PREDICATE,
            sqlite_where=_ACTIVE_PREDICATE,
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<LeavingCertificate(id={self.id}, student_id={self.student_id}, "
            f"status={self.status.value})>"
        )
