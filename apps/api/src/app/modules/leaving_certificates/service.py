"""
Leaving Certificate Service Layer

Business logic for the leaving certificate (LC) workflow between the clerk
and the principal of a school.

1. Request (clerk):
   - Lock the student row and check the latest request
   - PENDING or APPROVED already -> conflict
   - REJECTED -> delete it and file a fresh PENDING request
   - Runs in one transaction; the partial unique index on active requests
     catches anything that slips past the check

2. Decision (principal):
   - Approve or reject a PENDING request with one conditional UPDATE
   - A request already decided reports "not found or already processed"

3. Issuance:
   - Only an APPROVED request renders to a PDF
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.leaving_certificates import repository
from app.modules.leaving_certificates.document import (
    build_certificate_html,
    certificate_filename,
    render_pdf,
)
from app.modules.leaving_certificates.models import (
    ACTIVE_STATUSES,
    CertificateStatus,
    LeavingCertificate,
)
from app.modules.leaving_certificates.schemas import CertificateListItem

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"


# ============================================================================
# Custom Exceptions
# ============================================================================


class CertificateServiceError(Exception):
    """Base exception for leaving certificate service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class StudentNotFoundError(CertificateServiceError):
    """Raised when the student does not exist in the caller's school."""

    def __init__(self):
        super().__init__(
            message="Student not found",
            error_code="STUDENT_NOT_FOUND",
            status_code=404,
        )


class CertificateConflictError(CertificateServiceError):
    """Raised when the student already has a PENDING or APPROVED request."""

    def __init__(self, status: CertificateStatus):
        super().__init__(
            message=f"LC already {status.value} for this student",
            error_code="LC_ALREADY_EXISTS",
            status_code=409,
        )
        self.status = status


class CertificateNotFoundOrProcessedError(CertificateServiceError):
    """Raised when a decision targets a missing or already decided request."""

    def __init__(self):
        super().__init__(
            message="LC not found or already processed",
            error_code="LC_NOT_FOUND_OR_PROCESSED",
            status_code=409,
        )


class MissingRejectionReasonError(CertificateServiceError):
    def __init__(self):
        super().__init__(
            message="A rejection reason is required",
            error_code="REJECTION_REASON_REQUIRED",
            status_code=400,
        )


class CertificateNotFoundError(CertificateServiceError):
    """Raised when no APPROVED request exists for the id."""

    def __init__(self):
        super().__init__(
            message="Approved Leaving Certificate not found",
            error_code="LC_NOT_FOUND",
            status_code=404,
        )


@dataclass(frozen=True)
class CertificateDocument:
    """A rendered certificate ready to be sent as a download."""

    filename: str
    content: bytes
    media_type: str = PDF_MEDIA_TYPE


def _utcnow() -> datetime:
    return datetime.now(UTC)


# ============================================================================
# Request
# ============================================================================


async def request_certificate(
    db: AsyncSession,
    student_id: int,
    school_id: int,
    requested_by: str,
) -> LeavingCertificate:
    """
    File a leaving certificate request for a student.

    Args:
        db: Database session
        student_id: Student the certificate is for
        school_id: Caller's school; the student must belong to it
        requested_by: Username of the requesting clerk

    Returns:
        The new PENDING LeavingCertificate

    Raises:
        StudentNotFoundError: If the student is not in the caller's school
        CertificateConflictError: If a PENDING or APPROVED request exists
    """
    logger.info(f"LC requested for student {student_id} by {requested_by}")

    student = await repository.get_student_for_update(db, student_id, school_id)
    if not student:
        await db.rollback()
        raise StudentNotFoundError()

    latest = await repository.get_latest_for_student(db, student_id)

    if latest and latest.status in ACTIVE_STATUSES:
        await db.rollback()
        logger.warning(f"LC for student {student_id} already {latest.status.value}")
        raise CertificateConflictError(latest.status)

    if latest and latest.status == CertificateStatus.REJECTED:
        removed = await repository.delete_rejected_for_student(db, student_id)
        logger.info(f"Replacing {removed} rejected LC request(s) for student {student_id}")

    try:
        certificate = await repository.create(
            db,
            student_id=student_id,
            school_id=school_id,
            school_name=student.school_name,
            requested_by=requested_by,
            requested_at=_utcnow(),
        )
        await db.commit()
    except IntegrityError as e:
        # A concurrent request for the same student won the race
        await db.rollback()
        logger.warning(f"Concurrent LC request for student {student_id} rejected")
        raise CertificateConflictError(CertificateStatus.PENDING) from e

    logger.info(f"LC {certificate.id} created for student {student_id}")
    return certificate


# ============================================================================
# Listing
# ============================================================================


def _to_list_item(certificate: LeavingCertificate, name: str, standard: str | None):
    return CertificateListItem(
        lc_id=certificate.id,
        student_id=certificate.student_id,
        status=certificate.status,
        requested_by=certificate.requested_by,
        requested_at=certificate.requested_at,
        approved_by=certificate.approved_by,
        approved_at=certificate.approved_at,
        rejection_reason=certificate.rejection_reason,
        name=name,
        standard=standard,
    )


async def list_pending(db: AsyncSession, school_id: int) -> list[CertificateListItem]:
    """PENDING requests of a school, newest first."""
    rows = await repository.list_for_school(db, school_id, status=CertificateStatus.PENDING)
    return [_to_list_item(*row) for row in rows]


async def list_all(db: AsyncSession, school_id: int) -> list[CertificateListItem]:
    """All requests of a school in any status, newest first."""
    rows = await repository.list_for_school(db, school_id)
    return [_to_list_item(*row) for row in rows]


# ============================================================================
# Decision
# ============================================================================


async def approve(
    db: AsyncSession,
    lc_id: int,
    approved_by: str,
    school_id: int | None = None,
) -> None:
    """
    Approve a PENDING request.

    Raises:
        CertificateNotFoundOrProcessedError: If the request is missing or
            no longer PENDING
    """
    updated = await repository.mark_decided(
        db,
        lc_id,
        CertificateStatus.APPROVED,
        approved_by=approved_by,
        approved_at=_utcnow(),
        school_id=school_id,
    )
    if not updated:
        raise CertificateNotFoundOrProcessedError()


async def reject(
    db: AsyncSession,
    lc_id: int,
    approved_by: str,
    rejection_reason: str | None,
    school_id: int | None = None,
) -> None:
    """
    Reject a PENDING request with a reason.

    Raises:
        MissingRejectionReasonError: If the reason is empty or blank
        CertificateNotFoundOrProcessedError: If the request is missing or
            no longer PENDING
    """
    if not rejection_reason or not rejection_reason.strip():
        raise MissingRejectionReasonError()

    updated = await repository.mark_decided(
        db,
        lc_id,
        CertificateStatus.REJECTED,
        approved_by=approved_by,
        approved_at=_utcnow(),
        rejection_reason=rejection_reason.strip(),
        school_id=school_id,
    )
    if not updated:
        raise CertificateNotFoundOrProcessedError()


# ============================================================================
# Issuance
# ============================================================================


async def render_certificate_document(
    db: AsyncSession,
    lc_id: int,
    school_id: int | None = None,
) -> CertificateDocument:
    """
    Render an APPROVED request as a PDF.

    Raises:
        CertificateNotFoundError: If the request is missing or not APPROVED
    """
    found = await repository.get_approved_with_student(db, lc_id, school_id)
    if not found:
        raise CertificateNotFoundError()

    certificate, student = found

    html = build_certificate_html(
        school_name=student.school_name,
        student_name=student.name,
        standard=student.standard,
        approved_at=certificate.approved_at,
    )
    content = await render_pdf(html)

    logger.info(f"Rendered LC {lc_id} ({len(content)} bytes)")
    return CertificateDocument(filename=certificate_filename(student.name), content=content)
