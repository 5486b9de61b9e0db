"""
Fixtures for leaving certificate tests.
"""

from unittest.mock import AsyncMock, patch

import pytest

from app.modules.leaving_certificates.models import CertificateStatus, LeavingCertificate
from app.modules.leaving_certificates.repository import is_valid_transition
from app.modules.students.models import Student

SCHOOL_ID = 3
SCHOOL_NAME = "Zilla Parishad School Wadgaon"


class InMemoryCertificateStore:
    """
    Stand-in for the repository module, backed by lists.

    Mirrors the repository's contract: conditional decisions only touch
    PENDING rows and report a rowcount.
    """

    def __init__(self):
        self.students: dict[int, Student] = {}
        self.certificates: list[LeavingCertificate] = []
        self._next_id = 1

    def add_student(self, student_id: int, name: str, standard: str, school_id: int = SCHOOL_ID):
        student = Student(
            id=student_id,
            school_id=school_id,
            school_name=SCHOOL_NAME,
            name=name,
            standard=standard,
            nationality="Indian",
        )
        self.students[student_id] = student
        return student

    def active_for(self, student_id: int) -> list[LeavingCertificate]:
        return [
            c
            for c in self.certificates
            if c.student_id == student_id
            and c.status in (CertificateStatus.PENDING, CertificateStatus.APPROVED)
        ]

    async def get_student_for_update(self, db, student_id, school_id):
        student = self.students.get(student_id)
        if student and student.school_id == school_id:
            return student
        return None

    async def get_latest_for_student(self, db, student_id):
        rows = [c for c in self.certificates if c.student_id == student_id]
        return max(rows, key=lambda c: (c.requested_at, c.id)) if rows else None

    async def delete_rejected_for_student(self, db, student_id):
        before = len(self.certificates)
        self.certificates = [
            c
            for c in self.certificates
            if not (c.student_id == student_id and c.status == CertificateStatus.REJECTED)
        ]
        return before - len(self.certificates)

    async def create(self, db, *, student_id, school_id, school_name, requested_by, requested_at):
        certificate = LeavingCertificate(
            id=self._next_id,
            student_id=student_id,
            school_id=school_id,
            school_name=school_name,
            status=CertificateStatus.PENDING,
            requested_by=requested_by,
            requested_at=requested_at,
        )
        self._next_id += 1
        self.certificates.append(certificate)
        return certificate

    async def list_for_school(self, db, school_id, status=None):
        rows = [
            c
            for c in self.certificates
            if c.school_id == school_id and (status is None or c.status == status)
        ]
        rows.sort(key=lambda c: (c.requested_at, c.id), reverse=True)
        return [
            (c, self.students[c.student_id].name, self.students[c.student_id].standard)
            for c in rows
        ]

    async def mark_decided(
        self,
        db,
        lc_id,
        status,
        *,
        approved_by,
        approved_at,
        rejection_reason=None,
        school_id=None,
    ):
        assert is_valid_transition(CertificateStatus.PENDING, status)
        for c in self.certificates:
            if c.id != lc_id or c.status != CertificateStatus.PENDING:
                continue
            if school_id is not None and c.school_id != school_id:
                continue
            c.status = status
            c.approved_by = approved_by
            c.approved_at = approved_at
            c.rejection_reason = rejection_reason if status == CertificateStatus.REJECTED else None
            return 1
        return 0

    async def get_approved_with_student(self, db, lc_id, school_id=None):
        for c in self.certificates:
            if c.id == lc_id and c.status == CertificateStatus.APPROVED:
                if school_id is not None and c.school_id != school_id:
                    return None
                return c, self.students[c.student_id]
        return None


@pytest.fixture
def store():
    """Patch the service's repository with an in-memory store."""
    fake = InMemoryCertificateStore()
    with patch("app.modules.leaving_certificates.service.repository", fake):
        yield fake


@pytest.fixture
def mock_render_pdf():
    """Patch PDF rendering; the HTML passed in is available via call_args."""
    with patch(
        "app.modules.leaving_certificates.service.render_pdf",
        new=AsyncMock(return_value=b"%PDF-1.7 test"),
    ) as render:
        yield render
