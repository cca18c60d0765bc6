"""
Test the HTTP surface: health endpoints, /parse uploads, /parse/text and the error
body shape produced by the exception handlers.
"""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from resume_engine.api.exception_handlers import resume_engine_exception_handler
from resume_engine.core.errors import DecodeError, ResumeEngineError, UnsupportedFormatError
from resume_engine.main import app

client = TestClient(app)

RESUME_TEXT = """Jane Doe
jane.doe@example.com | (555) 123-4567

EXPERIENCE
Senior Software Engineer at Google Inc.
Jan 2020 - Present
• Led team of 5
"""


def test_root_and_health():
    assert client.get("/").json() == {"service": "resume-extraction-engine", "status": "running"}
    assert client.get("/health").json() == {"status": "ok"}


def test_text_upload():
    response = client.post("/parse", files={"file": ("resume.txt", RESUME_TEXT.encode("utf-8"), "text/plain")})
    assert response.status_code == 200, f"Expected 200, got {response.status_code}: {response.text}"

    data = response.json()
    assert data["success"] is True
    assert data["parser_used"] == "Plain Text Parser"
    assert data["record"]["personal"]["full_name"] == "Jane Doe"
    assert data["record"]["experience"][0]["position"] == "Senior Software Engineer"
    assert 0.0 <= data["confidence"] <= 1.0
    assert isinstance(data["needs_review"], bool)


def test_empty_upload_is_bad_request():
    response = client.post("/parse", files={"file": ("resume.txt", b"", "text/plain")})
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Empty file uploaded.", "type": "HTTPException"}


def test_unsupported_upload_is_reported_in_body():
    """Validation failures are returned as an unsuccessful result, not an HTTP error."""
    response = client.post("/parse", files={"file": ("photo.png", b"\x89PNG\r\n", "image/png")})
    assert response.status_code == 200

    data = response.json()
    assert data["success"] is False
    assert data["errors"][0]["field"] == "file"
    assert data["needs_review"] is True


def test_parse_text_endpoint():
    response = client.post("/parse/text", json={"text": RESUME_TEXT})
    assert response.status_code == 200

    data = response.json()
    assert data["success"] is True
    assert data["record"]["personal"]["email"] == "jane.doe@example.com"
    assert data["record"]["experience"][0]["company"] == "Google Inc."


def test_parse_text_with_layout_hints():
    payload = {
        "text": "",
        "layout_hints": [
            {"value": "Jane", "y": 10},
            {"value": "Doe", "y": 11},
            {"value": "jane@example.com", "y": 40},
        ],
    }
    data = client.post("/parse/text", json=payload).json()
    assert data["record"]["personal"]["full_name"] == "Jane Doe"


def test_parse_text_empty_content():
    data = client.post("/parse/text", json={"text": "   "}).json()
    assert data["success"] is False
    assert data["errors"][0]["field"] == "content"


def _error_app():
    error_app = FastAPI()
    error_app.add_exception_handler(ResumeEngineError, resume_engine_exception_handler)

    @error_app.get("/decode")
    def decode():
        raise DecodeError("Could not read PDF", suggestion="Export the PDF again")

    @error_app.get("/format")
    def unsupported():
        raise UnsupportedFormatError("Unsupported file type: image/png")

    return TestClient(error_app)


def test_exception_handler_body_and_status():
    error_client = _error_app()

    response = error_client.get("/decode")
    assert response.status_code == 422
    assert response.json() == {
        "success": False,
        "error": "Could not read PDF",
        "suggestion": "Export the PDF again",
        "type": "DecodeError",
    }

    response = error_client.get("/format")
    assert response.status_code == 415
    assert response.json()["type"] == "UnsupportedFormatError"
