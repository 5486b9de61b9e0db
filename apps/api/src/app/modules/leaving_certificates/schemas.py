"""
Leaving Certificate Schemas

Pydantic schemas for the LC request/approval workflow.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from app.modules.leaving_certificates.models import CertificateStatus


class CertificateRequest(BaseModel):
    """Request body for POST /lc/request."""

    student_id: int = Field(..., gt=0)


class RejectRequest(BaseModel):
    """Request body for POST /lc/{lc_id}/reject."""

    rejection_reason: str = Field(..., max_length=2000)


class CertificateRequestedResponse(BaseModel):
    message: str
    lc_id: int
    status: CertificateStatus


class CertificateListItem(BaseModel):
    """LC request joined with the student's name and standard."""

    lc_id: int
    student_id: int
    status: CertificateStatus
    requested_by: str
    requested_at: datetime
    approved_by: str | None = None
    approved_at: datetime | None = None
    rejection_reason: str | None = None
    name: str
    standard: str | None = None


class PendingCertificatesResponse(BaseModel):
    pending: list[CertificateListItem]
    count: int


class CertificateRecordsResponse(BaseModel):
    records: list[CertificateListItem]
    count: int


class DecisionResponse(BaseModel):
    message: str
    lc_id: int
    status: CertificateStatus
