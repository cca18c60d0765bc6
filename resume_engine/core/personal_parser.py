"""
Personal / contact information extraction.

Runs over the Personal section (the lines before the first recognised header). Contact lines
are frequently packed ("Jane Doe | jane@x.com | (555) 123-4567"), so every line is also
examined segment by segment.
"""

import logging
import re
from typing import List, Optional

from resume_engine.core.classifiers import has_company_suffix, looks_like_job_title
from resume_engine.core.patterns import (
    CITY_COUNTRY_RE,
    CITY_STATE_EXACT_RE,
    CITY_STATE_RE,
    CONTACT_PATTERNS,
    EMAIL_RE,
    LINKEDIN_RE,
    PHONE_RE,
    is_location_line,
    line_contains_date,
    looks_like_bullet_point,
    search,
)
from resume_engine.core.schemas import PersonalInfo
from resume_engine.core.section_segmenter import is_header_line

logger = logging.getLogger(__name__)


NAME_WINDOW = 10
MIN_NAME_LENGTH = 3
MAX_NAME_LENGTH = 60
MIN_SUMMARY_LENGTH = 30

SEGMENT_SPLIT_RE = re.compile(r"\s*[|•·]\s*")
LOCATION_LABEL_RE = re.compile(r"^(?:location|address)\s*[:\-]\s*(.+)$", re.IGNORECASE)
SUMMARY_LABEL_RE = re.compile(
    r"^(?:professional\s+summary|career\s+summary|career\s+objective|personal\s+statement|"
    r"summary|objective|profile|about\s+me)\s*[:\-–—]\s*(.*)$",
    re.IGNORECASE,
)


def _segments(line: str) -> List[str]:
    return [s.strip() for s in SEGMENT_SPLIT_RE.split(line) if s.strip()]


def _has_contact_token(text: str) -> bool:
    return any(p.search(text) for p in CONTACT_PATTERNS)


def _words_capitalized(text: str) -> bool:
    words = [w for w in text.split() if w[0].isalpha()]
    return bool(words) and all(w[0].isupper() for w in words)


def _find_full_name(lines: List[str]) -> str:
    for idx, line in enumerate(lines[:NAME_WINDOW]):
        if is_header_line(line) or looks_like_bullet_point(line):
            continue
        for seg in _segments(line):
            if _has_contact_token(seg) or is_location_line(seg) or line_contains_date(seg) or looks_like_job_title(seg):
                continue
            if not (MIN_NAME_LENGTH <= len(seg) < MAX_NAME_LENGTH):
                continue
            if any(ch.isdigit() for ch in seg) or ":" in seg:
                continue
            if _words_capitalized(seg) or idx == 0:
                return seg
            break
    return ""


def _find_location(lines: List[str]) -> str:
    segments = [seg for line in lines for seg in _segments(line)]

    for seg in segments:
        if CITY_STATE_EXACT_RE.match(seg):
            return seg
    for seg in segments:
        if _has_contact_token(seg):
            continue
        m = search(CITY_STATE_RE, seg)
        if m:
            return m.text

    for seg in segments:
        if len(seg) > 40 or _has_contact_token(seg) or has_company_suffix(seg) or looks_like_job_title(seg):
            continue
        if CITY_COUNTRY_RE.fullmatch(seg):
            return seg

    for seg in segments:
        m = LOCATION_LABEL_RE.match(seg)
        if m:
            return m.group(1).strip()
    return ""


def _find_summary(lines: List[str]) -> str:
    for i, line in enumerate(lines):
        m = SUMMARY_LABEL_RE.match(line.strip())
        if not m:
            continue
        parts = [m.group(1).strip()] if m.group(1).strip() else []
        for follow in lines[i + 1:]:
            if not follow.strip() or is_header_line(follow):
                break
            parts.append(follow.strip())
        summary = " ".join(parts)
        if len(summary) > MIN_SUMMARY_LENGTH:
            return summary
    return ""


def _first_match(pattern, texts: List[Optional[str]]) -> str:
    for text in texts:
        m = search(pattern, text or "")
        if m:
            return m.text
    return ""


def extract_personal_info(text: str, full_text: Optional[str] = None) -> PersonalInfo:
    """
    Extract contact details from the Personal section text.

    `full_text`, when given, is searched for e-mail / phone / LinkedIn that do not appear in
    the Personal section (contact details placed in a footer).
    """
    lines = [ln.strip() for ln in (text or "").split("\n") if ln.strip()]
    sources = [text, full_text]

    info = PersonalInfo(
        full_name=_find_full_name(lines),
        email=_first_match(EMAIL_RE, sources),
        phone=_first_match(PHONE_RE, sources),
        location=_find_location(lines),
        linkedin=_first_match(LINKEDIN_RE, sources),
        summary=_find_summary((text or "").split("\n")),
    )
    logger.debug(f"Personal info: name={info.full_name!r} email={info.email!r} location={info.location!r}")
    return info
