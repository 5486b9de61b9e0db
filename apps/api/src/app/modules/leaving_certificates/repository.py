"""
Leaving Certificate Repository

Data access layer for leaving certificate requests.
Handles all database operations for the LC workflow.

Functions that only flush leave the transaction to the caller; the
decision update commits itself because it is a single statement.
"""

import logging
from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.leaving_certificates.models import CertificateStatus, LeavingCertificate
from app.modules.students.models import Student

logger = logging.getLogger(__name__)


# Valid status transitions. REJECTED rows are not updated in place: they are
# deleted and replaced by a fresh PENDING row on re-request.
VALID_STATUS_TRANSITIONS: dict[CertificateStatus, set[CertificateStatus]] = {
    CertificateStatus.PENDING: {
        CertificateStatus.APPROVED,
        CertificateStatus.REJECTED,
    },
    # Terminal states
    CertificateStatus.APPROVED: set(),
    CertificateStatus.REJECTED: set(),
}


class InvalidStatusTransitionError(ValueError):
    """Raised when an invalid status transition is attempted."""

    def __init__(
        self,
        current_status: CertificateStatus,
        new_status: CertificateStatus,
    ):
        self.current_status = current_status
        self.new_status = new_status
        valid_transitions = VALID_STATUS_TRANSITIONS.get(current_status, set())
        super().__init__(
            f"Invalid status transition: {current_status.value} -> {new_status.value}. "
            f"Valid transitions: {sorted(s.value for s in valid_transitions)}"
        )


def is_valid_transition(current_status: CertificateStatus, new_status: CertificateStatus) -> bool:
    return new_status in VALID_STATUS_TRANSITIONS.get(current_status, set())


async def get_student_for_update(
    db: AsyncSession,
    student_id: int,
    school_id: int,
) -> Student | None:
    """
    Load a student of the given school and lock its row.

    The lock serializes concurrent requests for the same student until the
    surrounding transaction ends.
    """
    result = await db.execute(
        select(Student)
        .where(Student.id == student_id, Student.school_id == school_id)
        .with_for_update()
    )
    return result.scalar_one_or_none()


async def get_latest_for_student(db: AsyncSession, student_id: int) -> LeavingCertificate | None:
    """Get the most recent LC request for a student."""
    result = await db.execute(
        select(LeavingCertificate)
        .where(LeavingCertificate.student_id == student_id)
        .order_by(LeavingCertificate.requested_at.desc(), LeavingCertificate.id.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def delete_rejected_for_student(db: AsyncSession, student_id: int) -> int:
    """
    Delete a student's REJECTED requests.

    Returns:
        Number of rows deleted
    """
    result = await db.execute(
        delete(LeavingCertificate).where(
            LeavingCertificate.student_id == student_id,
            LeavingCertificate.status == CertificateStatus.REJECTED,
        )
    )
    return result.rowcount


async def create(
    db: AsyncSession,
    *,
    student_id: int,
    school_id: int,
    school_name: str,
    requested_by: str,
    requested_at: datetime,
) -> LeavingCertificate:
    """
    Insert a PENDING request. The caller commits.

    Args:
        db: Database session
        student_id: Student the certificate is for
        school_id: Owning school
        school_name: School display name
        requested_by: Username of the requesting clerk
        requested_at: Request timestamp

    Returns:
        Created LeavingCertificate
    """
    certificate = LeavingCertificate(
        student_id=student_id,
        school_id=school_id,
        school_name=school_name,
        status=CertificateStatus.PENDING,
        requested_by=requested_by,
        requested_at=requested_at,
    )

    db.add(certificate)
    await db.flush()
    await db.refresh(certificate)

    return certificate


async def list_for_school(
    db: AsyncSession,
    school_id: int,
    status: CertificateStatus | None = None,
) -> list[tuple[LeavingCertificate, str, str | None]]:
    """
    List a school's LC requests joined with the student's name and standard.

    Args:
        db: Database session
        school_id: Owning school
        status: Optional status filter

    Returns:
        (certificate, student name, student standard) tuples, newest
        request first
    """
    query = (
        select(LeavingCertificate, Student.name, Student.standard)
        .join(Student, Student.id == LeavingCertificate.student_id)
        .where(LeavingCertificate.school_id == school_id)
    )

    if status:
        query = query.where(LeavingCertificate.status == status)

    query = query.order_by(LeavingCertificate.requested_at.desc(), LeavingCertificate.id.desc())

    result = await db.execute(query)
    return [(row[0], row[1], row[2]) for row in result.all()]


async def mark_decided(
    db: AsyncSession,
    lc_id: int,
    status: CertificateStatus,
    *,
    approved_by: str,
    approved_at: datetime,
    rejection_reason: str | None = None,
    school_id: int | None = None,
) -> int:
    """
    Record the principal's decision on a PENDING request.

    A single conditional UPDATE: only a row that is still PENDING changes,
    so of two concurrent decisions exactly one sees rowcount 1.

    Args:
        db: Database session
        lc_id: Certificate request id
        status: APPROVED or REJECTED
        approved_by: Username of the deciding principal
        approved_at: Decision timestamp
        rejection_reason: Reason, stored for REJECTED and cleared for APPROVED
        school_id: If given, only a request of this school is updated

    Returns:
        Number of rows updated (0 or 1)

    Raises:
        InvalidStatusTransitionError: If status is not reachable from PENDING
    """
    if not is_valid_transition(CertificateStatus.PENDING, status):
        raise InvalidStatusTransitionError(CertificateStatus.PENDING, status)

    stmt = update(LeavingCertificate).where(
        LeavingCertificate.id == lc_id,
        LeavingCertificate.status == CertificateStatus.PENDING,
    )
    if school_id is not None:
        stmt = stmt.where(LeavingCertificate.school_id == school_id)

    result = await db.execute(
        stmt.values(
            status=status,
            approved_by=approved_by,
            approved_at=approved_at,
            rejection_reason=rejection_reason if status == CertificateStatus.REJECTED else None,
        )
    )
    await db.commit()

    if result.rowcount:
        logger.info(f"LC {lc_id} marked {status.value} by {approved_by}")
    return result.rowcount


async def get_approved_with_student(
    db: AsyncSession,
    lc_id: int,
    school_id: int | None = None,
) -> tuple[LeavingCertificate, Student] | None:
    """
    Get an APPROVED request together with its student.

    Missing and not-yet-approved requests are indistinguishable (None).
    """
    query = (
        select(LeavingCertificate, Student)
        .join(Student, Student.id == LeavingCertificate.student_id)
        .where(
            LeavingCertificate.id == lc_id,
            LeavingCertificate.status == CertificateStatus.APPROVED,
        )
    )
    if school_id is not None:
        query = query.where(LeavingCertificate.school_id == school_id)

    result = await db.execute(query)
    row = result.first()
    if row is None:
        return None
    return row[0], row[1]
