"""
Leaving Certificate document rendering.

The certificate is laid out as HTML and converted to PDF with WeasyPrint.
"""

import asyncio
import re
from datetime import datetime
from html import escape
from urllib.parse import quote

CERTIFICATION_TEXT = (
    "This is to certify that the above student has left the school "
    "after completing all formalities."
)

_WHITESPACE = re.compile(r"\s+")
_UNSAFE_FALLBACK = re.compile(r'[^\x20-\x7e]|["\\;]')

_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>Leaving Certificate</title>
<style>
  @page {{ size: A4; margin: 50px; }}
  body {{ font-family: Helvetica, Arial, sans-serif; font-size: 12pt; }}
  h1 {{ font-size: 18pt; text-align: center; margin-bottom: 2em; }}
  .field {{ margin: 0.3em 0; }}
  .school {{ margin-bottom: 1em; }}
  .statement {{ margin-top: 2em; }}
  .signature {{ margin-top: 4em; }}
</style>
</head>
<body>
  <h1>Leaving Certificate</h1>
  <p class="field school">School Name: {school_name}</p>
  <p class="field">Student Name: {student_name}</p>
  <p class="field">Standard: {standard}</p>
  <p class="field">Approved On: {approved_on}</p>
  <p class="statement">{statement}</p>
  <div class="signature">
    <p>Principal / Headmaster</p>
    <p>Signature</p>
  </div>
</body>
</html>
"""


def certificate_filename(student_name: str) -> str:
    """Leaving_Certificate_<name>.pdf, with whitespace runs replaced by underscores."""
    return f"Leaving_Certificate_{_WHITESPACE.sub('_', student_name)}.pdf"


def content_disposition(filename: str) -> str:
    """
    Attachment header value for a possibly non-ASCII filename.

    Header values must be latin-1, so the plain ``filename`` is an ASCII
    fallback and the real name travels in ``filename*`` (RFC 5987).
    """
    fallback = _UNSAFE_FALLBACK.sub("", filename)
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


def format_approval_date(approved_at: datetime | None) -> str:
    if approved_at is None:
        return ""
    return approved_at.strftime("%d/%m/%Y")


def build_certificate_html(
    *,
    school_name: str,
    student_name: str,
    standard: str | None,
    approved_at: datetime | None,
) -> str:
    """Build the certificate HTML. All values are escaped."""
    return _TEMPLATE.format(
        school_name=escape(school_name),
        student_name=escape(student_name),
        standard=escape(standard or ""),
        approved_on=escape(format_approval_date(approved_at)),
        statement=escape(CERTIFICATION_TEXT),
    )


def _html_to_pdf(html: str) -> bytes:
    # Imported lazily: WeasyPrint loads native Pango/Cairo libraries on import
    from weasyprint import HTML

    return HTML(string=html).write_pdf()


async def render_pdf(html: str) -> bytes:
    """Render HTML to PDF bytes in a worker thread."""
    return await asyncio.to_thread(_html_to_pdf, html)
