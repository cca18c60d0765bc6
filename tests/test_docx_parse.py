"""
Test DOCX and PDF decoding.

Word documents are built in memory with python-docx; PDF tests cover signature checks,
unreadable files and the word ordering of a page.
"""

from io import BytesIO

import pytest
from docx import Document
from fastapi.testclient import TestClient

from resume_engine.core.docx_extractor import decode_docx
from resume_engine.core.errors import DecodeError
from resume_engine.core.pdf_extractor import _page_hints, decode_pdf
from resume_engine.main import app

client = TestClient(app)

DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def _docx_bytes() -> bytes:
    doc = Document()
    doc.add_paragraph("Jane Doe")
    doc.add_paragraph("jane.doe@example.com | (555) 123-4567")
    doc.add_paragraph("EXPERIENCE")
    doc.add_paragraph("Senior Software Engineer at Google Inc.")
    doc.add_paragraph("Jan 2020 - Present")
    doc.add_paragraph("SKILLS")
    table = doc.add_table(rows=1, cols=2)
    table.cell(0, 0).text = "Python"
    table.cell(0, 1).text = "Docker"

    buffer = BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def test_docx_paragraphs_then_table_cells():
    document = decode_docx(_docx_bytes())
    lines = document.text.split("\n")

    assert lines[0] == "Jane Doe"
    assert lines[-2:] == ["Python", "Docker"], f"Table cells should come last: {lines}"
    assert document.layout_hints is None


def test_docx_invalid_signature():
    with pytest.raises(DecodeError) as exc_info:
        decode_docx(b"This is not a Word document")
    assert exc_info.value.message == "Invalid Word document format"
    assert exc_info.value.suggestion


def test_docx_corrupt_zip():
    with pytest.raises(DecodeError):
        decode_docx(b"PK\x03\x04 truncated archive")


def test_docx_upload_end_to_end():
    """Uploading a DOCX returns a parsed record with the Word parser recorded."""
    response = client.post(
        "/parse",
        files={"file": ("resume.docx", _docx_bytes(), DOCX_CONTENT_TYPE)},
    )
    assert response.status_code == 200, f"Expected 200, got {response.status_code}: {response.text}"

    data = response.json()
    assert data["success"] is True
    assert data["parser_used"] == "Word Document Parser"
    assert data["record"]["personal"]["email"] == "jane.doe@example.com"
    assert data["record"]["experience"][0]["company"] == "Google Inc."
    assert [s["name"] for s in data["record"]["skills"]] == ["Python", "Docker"]


def test_pdf_invalid_signature():
    with pytest.raises(DecodeError) as exc_info:
        decode_pdf(b"<html>not a pdf</html>")
    assert exc_info.value.message == "Invalid PDF format"


def test_pdf_unreadable_body():
    with pytest.raises(DecodeError):
        decode_pdf(b"%PDF-1.4\n this is not really a pdf")


class _FakePage:
    def __init__(self, words):
        self._words = words

    def extract_words(self, **kwargs):
        return list(self._words)


def test_pdf_words_ordered_by_line_then_x():
    """Words of one visual line stay together even when their tops differ slightly."""
    page = _FakePage([
        {"text": "Doe", "top": 101.0, "x0": 60.0},
        {"text": "Engineer", "top": 130.0, "x0": 10.0},
        {"text": "Jane", "top": 100.0, "x0": 10.0},
        {"text": " ", "top": 100.0, "x0": 40.0},
    ])
    hints = _page_hints(page, page_number=1, line_tolerance=5.0)

    assert [h.value for h in hints] == ["Jane", "Doe", "Engineer"]
    assert all(h.page == 1 for h in hints)
