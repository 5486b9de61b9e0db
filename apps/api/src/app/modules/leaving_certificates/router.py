"""
Leaving Certificates Router

Endpoints (bearer token required; data scoped to the caller's school):
- POST /lc/request - Clerk requests an LC for a student
- GET /lc/pending - PENDING requests, newest first
- POST /lc/{lc_id}/approve - Principal approves (PRINCIPAL only)
- POST /lc/{lc_id}/reject - Principal rejects with a reason (PRINCIPAL only)
- GET /lc/all - All requests in any status, newest first
- GET /lc/{lc_id}/download - PDF of an APPROVED certificate
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_user, require_principal
from app.core.database import get_db
from app.modules.leaving_certificates import service
from app.modules.leaving_certificates.document import content_disposition
from app.modules.leaving_certificates.models import CertificateStatus
from app.modules.leaving_certificates.schemas import (
    CertificateRecordsResponse,
    CertificateRequest,
    CertificateRequestedResponse,
    DecisionResponse,
    PendingCertificatesResponse,
    RejectRequest,
)
from app.modules.leaving_certificates.service import CertificateServiceError

logger = logging.getLogger(__name__)

router = APIRouter()


def _service_error(e: CertificateServiceError) -> HTTPException:
    return HTTPException(
        status_code=e.status_code,
        detail={"error": e.error_code, "message": e.message},
    )


def _internal_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": "INTERNAL_ERROR", "message": "An unexpected error occurred."},
    )


@router.post(
    "/request",
    response_model=CertificateRequestedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request Leaving Certificate",
    responses={
        404: {"description": "Student not found"},
        409: {"description": "LC already PENDING or APPROVED for this student"},
    },
)
async def request_certificate(
    data: CertificateRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> CertificateRequestedResponse:
    """File an LC request. A previously REJECTED request is replaced."""
    try:
        certificate = await service.request_certificate(
            db, data.student_id, user.school_id, user.username
        )
    except CertificateServiceError as e:
        raise _service_error(e) from e
    except Exception as e:
        logger.exception(f"Error requesting LC for student {data.student_id}: {e}")
        raise _internal_error() from e

    return CertificateRequestedResponse(
        message="LC request sent to Principal",
        lc_id=certificate.id,
        status=certificate.status,
    )


@router.get(
    "/pending",
    response_model=PendingCertificatesResponse,
    summary="Pending Leaving Certificates",
)
async def list_pending(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> PendingCertificatesResponse:
    try:
        pending = await service.list_pending(db, user.school_id)
    except Exception as e:
        logger.exception(f"Error listing pending LCs: {e}")
        raise _internal_error() from e

    return PendingCertificatesResponse(pending=pending, count=len(pending))


@router.post(
    "/{lc_id}/approve",
    response_model=DecisionResponse,
    summary="Approve Leaving Certificate",
    responses={
        403: {"description": "Principal access required"},
        409: {"description": "LC not found or already processed"},
    },
)
async def approve_certificate(
    lc_id: int,
    db: AsyncSession = Depends(get_db),
    principal: CurrentUser = Depends(require_principal),
) -> DecisionResponse:
    try:
        await service.approve(db, lc_id, principal.username, school_id=principal.school_id)
    except CertificateServiceError as e:
        raise _service_error(e) from e
    except Exception as e:
        logger.exception(f"Error approving LC {lc_id}: {e}")
        raise _internal_error() from e

    return DecisionResponse(
        message="LC approved successfully",
        lc_id=lc_id,
        status=CertificateStatus.APPROVED,
    )


@router.post(
    "/{lc_id}/reject",
    response_model=DecisionResponse,
    summary="Reject Leaving Certificate",
    responses={
        400: {"description": "Rejection reason missing"},
        403: {"description": "Principal access required"},
        409: {"description": "LC not found or already processed"},
    },
)
async def reject_certificate(
    lc_id: int,
    data: RejectRequest,
    db: AsyncSession = Depends(get_db),
    principal: CurrentUser = Depends(require_principal),
) -> DecisionResponse:
    try:
        await service.reject(
            db,
            lc_id,
            principal.username,
            data.rejection_reason,
            school_id=principal.school_id,
        )
    except CertificateServiceError as e:
        raise _service_error(e) from e
    except Exception as e:
        logger.exception(f"Error rejecting LC {lc_id}: {e}")
        raise _internal_error() from e

    return DecisionResponse(
        message="LC rejected successfully",
        lc_id=lc_id,
        status=CertificateStatus.REJECTED,
    )


@router.get(
    "/all",
    response_model=CertificateRecordsResponse,
    summary="All Leaving Certificates",
)
async def list_all(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> CertificateRecordsResponse:
    try:
        records = await service.list_all(db, user.school_id)
    except Exception as e:
        logger.exception(f"Error listing LC records: {e}")
        raise _internal_error() from e

    return CertificateRecordsResponse(records=records, count=len(records))


@router.get(
    "/{lc_id}/download",
    summary="Download Leaving Certificate",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}},
        404: {"description": "Approved Leaving Certificate not found"},
    },
)
async def download_certificate(
    lc_id: int,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> Response:
    """Download the PDF of an APPROVED certificate."""
    try:
        document = await service.render_certificate_document(db, lc_id, user.school_id)
    except CertificateServiceError as e:
        raise _service_error(e) from e
    except Exception as e:
        logger.exception(f"Error rendering LC {lc_id}: {e}")
        raise _internal_error() from e

    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": content_disposition(document.filename)},
    )
