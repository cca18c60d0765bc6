"""
Tests for the import pipeline: upload validation, parser selection, decoding and the
review decision.
"""

import json

import pytest

from resume_engine.config import Settings
from resume_engine.core.errors import UnsupportedFormatError
from resume_engine.core.importer import (
    INVALID_RECORD_CONFIDENCE,
    JSON_PARSER,
    PDF_PARSER,
    TEXT_PARSER,
    WORD_PARSER,
    decode_plain_text,
    import_file,
    needs_review,
    parse_json,
    select_parser,
)
from resume_engine.core.resume_parser import parse


RESUME_TEXT = """Jane Doe
jane.doe@example.com | (555) 123-4567 | Austin, TX

EXPERIENCE
Senior Software Engineer at Google Inc.
Jan 2020 - Present
• Led team of 5

EDUCATION
B.S. Computer Science, University of Texas, 2016
"""


@pytest.fixture
def settings():
    return Settings(max_file_size_mb=1, review_confidence_threshold=0.7)


def test_plain_text_import(settings):
    result = import_file("resume.txt", "text/plain", RESUME_TEXT.encode("utf-8"), settings)

    assert result.success is True
    assert result.parser_used == TEXT_PARSER
    assert result.record.personal.email == "jane.doe@example.com"
    assert result.needs_review is False, f"Warnings: {result.warnings}, confidence: {result.confidence}"


def test_empty_file_rejected(settings):
    result = import_file("resume.txt", "text/plain", b"", settings)

    assert result.success is False
    assert result.record is None
    assert result.needs_review is True
    assert result.errors[0].field == "file"
    assert result.errors[0].message == "File is empty"


def test_missing_file_name_rejected(settings):
    result = import_file("", "text/plain", b"Jane Doe", settings)
    assert result.errors[0].message == "File name is missing"


def test_oversized_file_rejected():
    settings = Settings(max_file_size_mb=0.001)
    result = import_file("resume.txt", "text/plain", b"a" * 2000, settings)

    assert result.success is False
    assert result.errors[0].message == "File size exceeds 0.001MB limit"


def test_unsupported_format(settings):
    result = import_file("photo.png", "image/png", b"\x89PNG\r\n", settings)

    assert result.success is False
    assert result.parser_used is None
    assert "Unsupported file type" in result.errors[0].message
    assert ".docx" in result.errors[0].suggestion


def test_decode_failure_reports_parser(settings):
    result = import_file("resume.docx", None, b"not a zip archive", settings)

    assert result.success is False
    assert result.parser_used == WORD_PARSER
    assert result.errors[0].message == "Invalid Word document format"


def test_parser_selection():
    assert select_parser("cv.DOCX", None) == WORD_PARSER
    assert select_parser("cv", "application/pdf") == PDF_PARSER
    assert select_parser("notes.md", None) == TEXT_PARSER
    assert select_parser("cv", "text/plain; charset=utf-8") == TEXT_PARSER
    assert select_parser("resume.json", None) == JSON_PARSER
    assert select_parser("export", "application/json") == JSON_PARSER
    with pytest.raises(UnsupportedFormatError):
        select_parser("cv.doc", "application/msword")


def test_plain_text_decoding_strips_bom():
    document = decode_plain_text("\ufeffJane Doe\r\nEngineer".encode("utf-8"))
    assert document.text == "Jane Doe\nEngineer"


def test_needs_review_without_email():
    outcome = parse("Jane Doe\nEXPERIENCE\nSenior Software Engineer at Google Inc.\nJan 2020 - Present")
    assert outcome.success is True
    assert needs_review(outcome, threshold=0.0) is True


def test_needs_review_for_failed_outcome():
    assert needs_review(parse("")) is True


EXPORTED_RECORD = {
    "personal": {
        "full_name": "John Doe",
        "email": "john@example.com",
        "phone": "123-456-7890",
        "location": "New York, NY",
        "linkedin": "https://linkedin.com/in/johndoe",
        "summary": "Software engineer with 5 years experience",
    },
    "skills": [{"id": "1", "name": "JavaScript", "category": "Programming"}],
    "experience": [
        {
            "id": "1",
            "company": "Tech Corp",
            "position": "Software Engineer",
            "start_date": "2020-01",
            "end_date": "2023-01",
            "bullet_points": [{"id": "1", "text": "Built web applications"}],
        }
    ],
    "education": [{"id": "1", "school": "University of Example", "degree": "Computer Science", "graduation_year": "2020"}],
    "projects": [{"id": "1", "name": "Portfolio Website", "link": "https://johndoe.com"}],
}


class TestJsonImport:
    """Previously exported records are loaded as-is; broken files are reported, never raised."""

    def test_exported_record_round_trips(self, settings):
        raw = json.dumps(EXPORTED_RECORD).encode("utf-8")
        result = import_file("resume.json", "application/json", raw, settings)

        assert result.success is True, f"Errors: {result.errors}"
        assert result.parser_used == JSON_PARSER
        assert result.confidence == 1.0
        assert result.errors == []
        assert result.record.model_dump()["experience"][0]["company"] == "Tech Corp"
        assert result.record.skills[0].id == "1"
        assert result.needs_review is False

    def test_malformed_json(self, settings):
        result = import_file("invalid.json", "application/json", b'{ "name": "John", invalid }', settings)

        assert result.success is False
        assert result.record is None
        assert result.needs_review is True
        assert len(result.errors) == 1
        assert result.errors[0].field == "json"
        assert result.errors[0].message.startswith("Invalid JSON format")
        assert result.errors[0].severity == "error"
        assert result.errors[0].suggestion

    def test_record_that_does_not_fit_the_schema(self):
        data = dict(EXPORTED_RECORD, skills="not an array", projects=[{"link": "https://johndoe.com"}])
        outcome = parse_json(json.dumps(data).encode("utf-8"))

        assert outcome.success is False
        assert outcome.record is None
        assert outcome.confidence == INVALID_RECORD_CONFIDENCE
        fields = {e.field: e for e in outcome.errors}
        assert "skills" in fields, f"Got {list(fields)}"
        assert fields["projects[0].name"].message == "Missing required field: projects[0].name"
        assert all(e.suggestion for e in outcome.errors)

    def test_non_object_root(self):
        outcome = parse_json(json.dumps("string data").encode("utf-8"))

        assert outcome.success is False
        assert outcome.errors[0].field == "root"
        assert outcome.errors[0].message == "Data must be an object"

    def test_empty_json_file_is_rejected_before_parsing(self, settings):
        result = import_file("empty.json", "application/json", b"", settings)
        assert result.errors[0].field == "file"
        assert result.errors[0].message == "File is empty"
