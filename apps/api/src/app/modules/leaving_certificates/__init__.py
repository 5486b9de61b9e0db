"""
Leaving Certificates Module

Request/approval workflow for student leaving certificates (LC):
- Clerk files a request (one active request per student)
- Principal approves or rejects it
- An approved certificate downloads as a PDF
"""

from app.modules.leaving_certificates.models import CertificateStatus, LeavingCertificate
from app.modules.leaving_certificates.router import router

__all__ = ["CertificateStatus", "LeavingCertificate", "router"]
