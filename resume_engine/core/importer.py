"""
Import pipeline: validate upload -> pick decoder -> decode -> parse -> review decision.

JSON files hold a previously exported record and are loaded directly instead of parsed.

Validation and decoding failures never reach the extraction engine; they are returned as an
unsuccessful ImportResult with a `field="file"` error the UI can show to the user.
"""

import logging
from typing import Any, Dict, Optional, Sequence, Union

from pydantic import ValidationError

from resume_engine.config import Settings, get_settings
from resume_engine.core.docx_extractor import decode_docx
from resume_engine.core.errors import (
    DecodeError,
    FileValidationError,
    ResumeEngineError,
    UnsupportedFormatError,
)
from resume_engine.core.pdf_extractor import decode_pdf
from resume_engine.core.resume_parser import parse_document
from resume_engine.core.schemas import ImportResult, ParseError, ParseOutcome, RawDocument, ResumeRecord
from resume_engine.core.text_normalization import normalize_text

logger = logging.getLogger(__name__)


WORD_PARSER = "Word Document Parser"
PDF_PARSER = "PDF Parser"
TEXT_PARSER = "Plain Text Parser"
JSON_PARSER = "JSON Parser"

SUPPORTED_EXTENSIONS = (".docx", ".pdf", ".txt", ".md", ".json")
DOCX_CONTENT_TYPES = {"application/vnd.openxmlformats-officedocument.wordprocessingml.document"}
PDF_CONTENT_TYPES = {"application/pdf"}
TEXT_CONTENT_TYPES = {"text/plain", "text/markdown"}
JSON_CONTENT_TYPES = {"application/json"}

# A JSON file that parses but does not fit the record schema
INVALID_RECORD_CONFIDENCE = 0.3
INVALID_JSON_SUGGESTION = "Please ensure the file contains valid JSON data"
INVALID_RECORD_SUGGESTION = "Export the resume again or correct this field to match the resume record format"


def validate_upload(filename: Optional[str], raw: bytes, settings: Settings) -> None:
    if not (filename or "").strip():
        raise FileValidationError("File name is missing", suggestion="Please select a file to upload")
    if not raw:
        raise FileValidationError("File is empty", suggestion="Please upload a file that contains your resume")
    if len(raw) > settings.max_file_size_bytes:
        raise FileValidationError(
            f"File size exceeds {settings.max_file_size_mb:g}MB limit",
            suggestion="Please upload a smaller file or remove embedded images",
        )


def select_parser(filename: Optional[str], content_type: Optional[str]) -> str:
    name = (filename or "").lower()
    ctype = (content_type or "").lower().split(";")[0].strip()

    if name.endswith(".docx") or ctype in DOCX_CONTENT_TYPES:
        return WORD_PARSER
    if name.endswith(".pdf") or ctype in PDF_CONTENT_TYPES:
        return PDF_PARSER
    if name.endswith(".json") or ctype in JSON_CONTENT_TYPES:
        return JSON_PARSER
    if name.endswith((".txt", ".md")) or ctype in TEXT_CONTENT_TYPES or ctype.startswith("text/"):
        return TEXT_PARSER
    raise UnsupportedFormatError(
        f"Unsupported file type: {content_type or filename}",
        suggestion=f"Supported formats: {', '.join(SUPPORTED_EXTENSIONS)}",
    )


def decode_plain_text(raw: bytes) -> RawDocument:
    return RawDocument(text=normalize_text(raw.decode("utf-8-sig", errors="replace")))


def decode_upload(parser_used: str, raw: bytes, settings: Settings) -> RawDocument:
    if parser_used == WORD_PARSER:
        return decode_docx(raw)
    if parser_used == PDF_PARSER:
        return decode_pdf(raw, line_tolerance=settings.pdf_line_tolerance)
    return decode_plain_text(raw)


def _error_path(loc: Sequence[Union[str, int]]) -> str:
    """('experience', 0, 'company') -> 'experience[0].company'; an empty location is the root."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path or "root"


def _record_error(problem: Dict[str, Any]) -> ParseError:
    field = _error_path(problem["loc"])
    if problem["type"] == "missing":
        return ParseError(
            field=field,
            message=f"Missing required field: {field}",
            suggestion=f"Add a {problem['loc'][-1]} property to your JSON data",
        )
    message = problem["msg"] if problem["loc"] else "Data must be an object"
    return ParseError(field=field, message=message, suggestion=INVALID_RECORD_SUGGESTION)


def parse_json(raw: bytes) -> ParseOutcome:
    """
    Load a resume record that was exported as JSON.

    Malformed JSON is reported as one `field="json"` error. JSON that parses but does not
    fit the record schema fails with a low confidence and one error per invalid field.
    """
    text = raw.decode("utf-8-sig", errors="replace")
    try:
        record = ResumeRecord.model_validate_json(text)
    except ValidationError as exc:
        problems = exc.errors()
        syntax = next((p for p in problems if p["type"] == "json_invalid"), None)
        if syntax is not None:
            detail = (syntax.get("ctx") or {}).get("error", syntax["msg"])
            return ParseOutcome(
                success=False,
                errors=[ParseError(
                    field="json",
                    message=f"Invalid JSON format: {detail}",
                    suggestion=INVALID_JSON_SUGGESTION,
                )],
                original_content=text,
            )
        logger.warning(f"JSON resume does not match the record format: {len(problems)} invalid field(s)")
        return ParseOutcome(
            success=False,
            confidence=INVALID_RECORD_CONFIDENCE,
            errors=[_record_error(p) for p in problems],
            original_content=text,
        )
    return ParseOutcome(success=True, record=record, confidence=1.0, original_content=text)


def needs_review(outcome: ParseOutcome, threshold: float = 0.7) -> bool:
    if not outcome.success or outcome.record is None:
        return True
    personal = outcome.record.personal
    return (
        outcome.confidence < threshold
        or not personal.email
        or not personal.full_name
        or bool(outcome.warnings)
    )


def _failed(exc: ResumeEngineError, parser_used: Optional[str]) -> ImportResult:
    return ImportResult(
        success=False,
        errors=[ParseError(field="file", message=exc.message, severity="error", suggestion=exc.suggestion)],
        parser_used=parser_used,
        needs_review=True,
    )


def import_file(
    filename: Optional[str],
    content_type: Optional[str],
    raw: bytes,
    settings: Optional[Settings] = None,
) -> ImportResult:
    """Run one uploaded file through validation, decoding and extraction."""
    settings = settings or get_settings()
    parser_used: Optional[str] = None

    try:
        validate_upload(filename, raw, settings)
        parser_used = select_parser(filename, content_type)
        document = None if parser_used == JSON_PARSER else decode_upload(parser_used, raw, settings)
    except (FileValidationError, UnsupportedFormatError, DecodeError) as exc:
        logger.warning(f"Import of {filename!r} rejected: {exc.message}")
        return _failed(exc, parser_used)

    if document is None:
        outcome = parse_json(raw)
    else:
        outcome = parse_document(document, line_tolerance=settings.pdf_line_tolerance)
    review = needs_review(outcome, settings.review_confidence_threshold)
    logger.info(
        f"Imported {filename!r} with {parser_used}: success={outcome.success} "
        f"confidence={outcome.confidence:.2f} needs_review={review}"
    )
    return ImportResult(
        success=outcome.success,
        record=outcome.record,
        confidence=outcome.confidence,
        warnings=outcome.warnings,
        errors=outcome.errors,
        original_content=outcome.original_content,
        parser_used=parser_used,
        needs_review=review,
    )

