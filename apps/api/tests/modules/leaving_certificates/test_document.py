"""
Tests for certificate document layout and rendering.
"""

from datetime import UTC, datetime
from unittest.mock import patch

import pytest

from app.modules.leaving_certificates.document import (
    CERTIFICATION_TEXT,
    build_certificate_html,
    certificate_filename,
    content_disposition,
    format_approval_date,
    render_pdf,
)


class TestCertificateFilename:
    def test_single_word(self):
        assert certificate_filename("Ravi") == "Leaving_Certificate_Ravi.pdf"

    def test_whitespace_runs_collapse(self):
        assert certificate_filename("Ravi \t Kumar  Patil") == (
            "Leaving_Certificate_Ravi_Kumar_Patil.pdf"
        )


class TestContentDisposition:
    def test_ascii_name(self):
        assert content_disposition("Leaving_Certificate_Ravi.pdf") == (
            'attachment; filename="Leaving_Certificate_Ravi.pdf"; '
            "filename*=UTF-8''Leaving_Certificate_Ravi.pdf"
        )

    def test_header_value_is_latin1_encodable(self):
        value = content_disposition(certificate_filename("सई देशमुख"))
        value.encode("latin-1")
        assert "%E0%A4%B8" in value

    def test_quotes_and_semicolons_dropped_from_fallback(self):
        value = content_disposition('Leaving_Certificate_A"B;C\\D.pdf')
        assert value.startswith('attachment; filename="Leaving_Certificate_ABCD.pdf"; ')
        assert "%22" in value
        assert "%3B" in value


class TestBuildCertificateHtml:
    def _html(self, **overrides):
        fields = {
            "school_name": "Zilla Parishad School Wadgaon",
            "student_name": "Sneha Jadhav",
            "standard": "10th",
            "approved_at": datetime(2026, 4, 5, 11, 30, tzinfo=UTC),
        }
        fields.update(overrides)
        return build_certificate_html(**fields)

    def test_contains_all_sections(self):
        html = self._html()

        assert "Leaving Certificate" in html
        assert "School Name: Zilla Parishad School Wadgaon" in html
        assert "Student Name: Sneha Jadhav" in html
        assert "Standard: 10th" in html
        assert "Approved On: 05/04/2026" in html
        assert CERTIFICATION_TEXT in html
        assert "Principal / Headmaster" in html
        assert "Signature" in html

    def test_values_are_escaped(self):
        html = self._html(student_name="<script>alert(1)</script>")

        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_missing_standard(self):
        assert "Standard: </p>" in self._html(standard=None)

    def test_missing_approval_date(self):
        assert format_approval_date(None) == ""


class TestRenderPdf:
    @pytest.mark.asyncio
    async def test_runs_converter_off_loop(self):
        with patch(
            "app.modules.leaving_certificates.document._html_to_pdf",
            return_value=b"%PDF-1.7",
        ) as convert:
            content = await render_pdf("<html></html>")

        assert content == b"%PDF-1.7"
        convert.assert_called_once_with("<html></html>")
