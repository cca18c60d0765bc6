"""
Resume extraction orchestrator.

text -> sections -> per-section extractors -> record + confidence + warnings.

parse() never raises: every extraction step runs in its own guard, so a failure in one step
leaves that part of the record empty and the rest intact. The only terminal failure is an
empty or unreadable document.
"""

import logging
from typing import Callable, List, Optional, TypeVar

from pydantic import ValidationError

from resume_engine.core.confidence_calculator import (
    BASE_CONFIDENCE,
    DEGRADED_MODE_WARNING,
    ConfidenceCalculator,
)
from resume_engine.core.classifiers import has_company_suffix
from resume_engine.core.education_parser import (
    extract_education,
    has_degree_keyword,
    is_institution_keyword,
)
from resume_engine.core.experience_extractor import extract_experience
from resume_engine.core.experience_splitter import is_job_line
from resume_engine.core.patterns import (
    CONTACT_PATTERNS,
    is_date_line,
    is_location_line,
    looks_like_achievement,
    looks_like_bullet_point,
)
from resume_engine.core.personal_parser import NAME_WINDOW, extract_personal_info
from resume_engine.core.project_parser import extract_projects
from resume_engine.core.schemas import (
    LayoutHint,
    ParseError,
    ParseOutcome,
    PersonalInfo,
    RawDocument,
    ResumeRecord,
    Section,
)
from resume_engine.core.section_segmenter import has_recognized_headers, segment_sections
from resume_engine.core.skills_parser import extract_skills
from resume_engine.core.text_normalization import normalize_text

logger = logging.getLogger(__name__)

T = TypeVar("T")

EMPTY_DOCUMENT_MESSAGE = "Document appears to be empty or unreadable"
EMPTY_DOCUMENT_SUGGESTION = (
    "Make sure the file contains selectable text. Scanned documents and images are not supported."
)
UNEXPECTED_FAILURE_MESSAGE = "Resume could not be processed"


def _guarded(step: str, fn: Callable[..., T], *args, default: T) -> T:
    try:
        return fn(*args)
    except Exception:
        logger.exception(f"{step} extraction failed; continuing with an empty result")
        return default


def _section_text(sections: List[Section], kind: str, label: Optional[str] = None) -> str:
    texts = [s.text for s in sections if s.kind == kind and (label is None or s.label == label)]
    return "\n\n".join(t for t in texts if t.strip())


def _first_paragraph(text: str) -> str:
    paragraph = []
    for line in text.split("\n"):
        if not line.strip():
            if paragraph:
                break
            continue
        paragraph.append(line.strip())
    return " ".join(paragraph)


def _fallback_scan_text(text: str, personal: PersonalInfo) -> str:
    """Full text minus the name line and contact lines, for header-less documents."""
    kept = []
    for line in text.split("\n"):
        t = line.strip()
        if personal.full_name and t == personal.full_name:
            continue
        if any(p.search(t) for p in CONTACT_PATTERNS):
            continue
        kept.append(line)
    return "\n".join(kept)


def _reads_as_job(line: str) -> bool:
    # "Associate of Arts, Foothill College" reads as a title but names a degree and a school
    if not is_job_line(line):
        return False
    return has_company_suffix(line) or not (has_degree_keyword(line) and is_institution_keyword(line))


def _names_school_or_degree(line: str) -> bool:
    return has_degree_keyword(line) or is_institution_keyword(line)


def _education_fallback_text(fallback: str) -> str:
    """
    Header-less text for the education scan: job lines, the date and location lines that
    surround them, and job bullets are dropped so they never become education entries.
    """
    lines = fallback.split("\n")
    dropped = set()
    for i, line in enumerate(lines):
        t = line.strip()
        if not t:
            continue
        if (looks_like_bullet_point(t) or looks_like_achievement(t)) and not is_institution_keyword(t):
            dropped.add(i)
        if not _reads_as_job(t):
            continue
        dropped.add(i)
        before = lines[i - 2] if i > 1 else ""
        if i > 0 and is_date_line(lines[i - 1].strip()) and not _names_school_or_degree(before):
            dropped.add(i - 1)
        j = i + 1
        while j < len(lines) and lines[j].strip():
            nxt = lines[j].strip()
            if not (is_date_line(nxt) or is_location_line(nxt) or _reads_as_job(nxt)):
                break
            dropped.add(j)
            j += 1
    return "\n".join(line for i, line in enumerate(lines) if i not in dropped)


def _empty_document_outcome(text: str) -> ParseOutcome:
    return ParseOutcome(
        success=False,
        confidence=0.0,
        errors=[ParseError(
            field="content",
            message=EMPTY_DOCUMENT_MESSAGE,
            severity="error",
            suggestion=EMPTY_DOCUMENT_SUGGESTION,
        )],
        original_content=text,
    )


def _extract(text: str) -> ParseOutcome:
    sections = _guarded("Section", segment_sections, text, default=[])
    degraded = not _guarded("Header", has_recognized_headers, text, default=False)
    if degraded:
        logger.warning("No section headers recognized; falling back to full-text extraction")

    lines = text.split("\n")
    head = "\n".join([ln for ln in lines if ln.strip()][:NAME_WINDOW])
    personal_text = head if degraded else (_section_text(sections, "personal") or head)
    personal = _guarded("Personal info", extract_personal_info, personal_text, text, default=PersonalInfo())

    if not personal.summary:
        summary_text = _section_text(sections, "unknown", label="summary")
        if summary_text:
            personal = personal.model_copy(update={"summary": _first_paragraph(summary_text)})

    experience_text = _section_text(sections, "experience")
    education_text = _section_text(sections, "education")
    if degraded:
        fallback = _fallback_scan_text(text, personal)
        experience_text = experience_text or fallback
        education_text = education_text or _education_fallback_text(fallback)

    record = ResumeRecord(
        personal=personal,
        experience=_guarded("Experience", extract_experience, experience_text, default=[]),
        education=_guarded("Education", extract_education, education_text, default=[]),
        skills=_guarded("Skills", extract_skills, _section_text(sections, "skills"), default=[]),
        projects=_guarded("Projects", extract_projects, _section_text(sections, "projects"), default=[]),
    )

    confidence = _guarded("Confidence", ConfidenceCalculator.overall, sections, record, default=BASE_CONFIDENCE)
    warnings = _guarded(
        "Warnings", ConfidenceCalculator.warnings, sections, record, degraded,
        default=[DEGRADED_MODE_WARNING] if degraded else [],
    )

    logger.debug(
        f"Parsed resume: {len(record.experience)} experience, {len(record.education)} education, "
        f"{len(record.skills)} skills, {len(record.projects)} projects, confidence={confidence:.2f}"
    )
    return ParseOutcome(
        success=True,
        record=record,
        confidence=confidence,
        warnings=warnings,
        errors=[],
        original_content=text,
    )


def parse_document(document: RawDocument, line_tolerance: float = 5.0) -> ParseOutcome:
    """Parse a decoded document. Never raises."""
    try:
        text = document.resolved_text(tolerance=line_tolerance)
    except Exception:
        logger.exception("Could not resolve document text; using raw text")
        text = normalize_text(document.text or "")

    if not text.strip():
        return _empty_document_outcome(text)

    try:
        return _extract(text)
    except Exception:
        logger.exception("Unexpected failure while extracting resume")
        return ParseOutcome(
            success=False,
            confidence=0.0,
            errors=[ParseError(field="content", message=UNEXPECTED_FAILURE_MESSAGE, severity="error")],
            original_content=text,
        )


def parse(
    text: str,
    layout_hints: Optional[List[LayoutHint]] = None,
    line_tolerance: float = 5.0,
) -> ParseOutcome:
    """
    Extract a structured resume record from plain text.

    Returns a ParseOutcome for every input, including empty, binary or adversarial text.
    """
    if not isinstance(text, str):
        text = "" if text is None else str(text)
    try:
        document = RawDocument(text=text, layout_hints=layout_hints)
    except ValidationError:
        logger.warning("Ignoring malformed layout hints")
        document = RawDocument(text=text)
    return parse_document(document, line_tolerance=line_tolerance)
