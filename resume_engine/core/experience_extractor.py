"""
Experience block extraction.

Each raw block (one candidate job entry) goes through four independent sub-extractions:
  - date range        ordered date-shape table, then pairing of isolated dates
  - company/position  one-line "X at Y", separator line, two-line layout, single line
  - location          exact City, ST / remote / hybrid line, then looser fallbacks
  - bullet points     glyph / numbered / lettered markers, then implicit achievement lines

A failure in one block never affects the others: extract_experience() isolates every block.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from resume_engine.core.classifiers import (
    classify_company,
    classify_title,
    looks_like_compound_title,
    looks_like_job_title,
    looks_more_like_position,
)
from resume_engine.core.confidence_calculator import ConfidenceCalculator
from resume_engine.core.experience_splitter import is_job_line, split_experience_blocks
from resume_engine.core.patterns import (
    AT_LINE_RE,
    CITY_COUNTRY_RE,
    CITY_STATE_EXACT_RE,
    CITY_STATE_RE,
    COMPANY_SEPARATOR_RE,
    CONTACT_PREFIX_RE,
    DATE_SHAPES,
    EMAIL_RE,
    HYBRID_EXACT_RE,
    HYBRID_RE,
    PHONE_RE,
    PRESENT_RE,
    REMOTE_EXACT_RE,
    URL_RE,
    YEAR_RE,
    extract_bullet_text,
    find_all_dates,
    is_date_line,
    is_location_line,
    line_contains_date,
    looks_like_achievement,
    looks_like_bullet_point,
    strip_dates,
)
from resume_engine.core.schemas import (
    BlockLocation,
    BulletPoint,
    CompanyPosition,
    DateRange,
    Experience,
    ParsedExperienceBlock,
)
from resume_engine.core.section_segmenter import is_header_line

logger = logging.getLogger(__name__)


PAIRED_DATES_CONFIDENCE = 0.5
MIN_BULLET_LENGTH = 5
MAX_BULLET_LENGTH = 500
MIN_IMPLICIT_BULLET_LENGTH = 10

FIELD_TRIM = " \t-–—|•,;:"
LOCATION_TRIM = FIELD_TRIM + "()[]"

# Fallback remote detection ignores "Virtual"/"Distributed", which also appear in job titles
REMOTE_FALLBACK_RE = re.compile(r"\b(?:Remote|WFH|Work\s+from\s+home|Telecommute)\b", re.IGNORECASE)


def clean_field(value: str, chars: str = FIELD_TRIM) -> str:
    return " ".join((value or "").split()).strip(chars)


# ===== DATE RANGE =====

def extract_date_range(text: str) -> Optional[DateRange]:
    """
    First matching date shape wins (table order in patterns.DATE_SHAPES). When no range
    shape matches, the first two isolated dates of the block are paired as start/end.
    """
    for shape in DATE_SHAPES:
        m = shape.regex.search(text or "")
        if not m:
            continue
        parts = [g for g in m.groups() if g]
        if len(parts) == 4:
            start, end = f"{parts[0]} {parts[1]}", f"{parts[2]} {parts[3]}"
        elif len(parts) == 3:
            start, end = f"{parts[0]} {parts[1]}", parts[2]
        else:
            start, end = parts[0], parts[1]
        logger.debug(f"Date range via {shape.name}: {start!r} -> {end!r}")
        return DateRange(start=start, end=end, raw=m.group(0), confidence=shape.confidence)

    dates = find_all_dates(text)
    if len(dates) >= 2:
        first, second = dates[0], dates[1]
        raw = (text or "")[first.start:second.end]
        return DateRange(start=first.text, end=second.text, raw=raw, confidence=PAIRED_DATES_CONFIDENCE)
    return None


# ===== COMPANY / POSITION =====

@dataclass
class _Candidate:
    index: int
    text: str
    parts: List[str]


def _is_location_part(part: str) -> bool:
    return is_location_line(part) or bool(CITY_STATE_EXACT_RE.match(part))


def _candidate_lines(lines: List[str]) -> List[_Candidate]:
    """Lines that may carry the company or the position, with dates and location parts removed."""
    out: List[_Candidate] = []
    for i, line in enumerate(lines):
        if looks_like_bullet_point(line) or is_header_line(line):
            continue
        if EMAIL_RE.search(line) or URL_RE.search(line):
            continue

        text = strip_dates(line) if line_contains_date(line) else line.strip()
        text = clean_field(text)
        if len(text) < 2:
            continue
        if is_location_line(text) and not is_job_line(text):
            continue
        if looks_like_achievement(text) and not looks_like_job_title(text):
            continue

        parts = [clean_field(p) for p in COMPANY_SEPARATOR_RE.split(text)]
        parts = [p for p in parts if p and not _is_location_part(p)]
        if not parts:
            continue
        out.append(_Candidate(index=i, text=parts[0] if len(parts) == 1 else text, parts=parts))
    return out


def _from_at_line(cand: _Candidate) -> Optional[CompanyPosition]:
    m = AT_LINE_RE.match(cand.text)
    if not m:
        return None
    position, company = clean_field(m.group(1)), clean_field(m.group(2))
    if not position or not company:
        return None
    confidence = 0.95 if classify_title(position).is_title else 0.9
    return CompanyPosition(company=company, position=position, format="at_line", confidence=confidence)


def _from_separator_line(cand: _Candidate) -> Optional[CompanyPosition]:
    if len(cand.parts) < 2:
        return None
    first, second = cand.parts[0], cand.parts[1]
    c1, c2 = classify_company(first).is_company, classify_company(second).is_company
    t1, t2 = classify_title(first).is_title, classify_title(second).is_title

    def pair(company: str, position: str, confidence: float) -> CompanyPosition:
        return CompanyPosition(company=company, position=position, format="separator", confidence=confidence)

    if c1 and t2:
        return pair(first, second, 0.9)
    if c2 and t1:
        return pair(second, first, 0.9)
    if c1:
        return pair(first, second, 0.8)
    if c2:
        return pair(second, first, 0.8)
    if t1 and not t2:
        return pair(second, first, 0.75)
    if t2 and not t1:
        return pair(first, second, 0.75)
    if looks_more_like_position(second, first):
        return pair(first, second, 0.6)
    return pair(second, first, 0.6)


def _from_two_lines(first: str, second: str) -> CompanyPosition:
    c1, c2 = classify_company(first).is_company, classify_company(second).is_company
    t1, t2 = classify_title(first).is_title, classify_title(second).is_title

    def pair(company: str, position: str, confidence: float) -> CompanyPosition:
        return CompanyPosition(company=company, position=position, format="two_line", confidence=confidence)

    if c1 and looks_like_compound_title(second):
        return pair(first, second, 1.0)
    if c1 and t2:
        return pair(first, second, 0.9)
    if c2 and t1:
        return pair(second, first, 0.9)
    if t1 and not t2:
        return pair(second, first, 0.8)
    if t2 and not t1:
        return pair(first, second, 0.8)
    if c1:
        return pair(first, second, 0.75)
    if c2:
        return pair(second, first, 0.75)
    return pair(first, second, 0.6)


def _from_single_line(text: str) -> CompanyPosition:
    if classify_company(text).is_company:
        return CompanyPosition(company=text, position="", format="single_line", confidence=0.6)
    return CompanyPosition(company="", position=text, format="single_line", confidence=0.5)


def _resolve_company_position(lines: List[str]) -> Tuple[Optional[CompanyPosition], Set[int]]:
    """Company/position pair plus the indices of the lines it was read from."""
    candidates = _candidate_lines(lines)
    if not candidates:
        return None, set()

    for cand in candidates:
        result = _from_at_line(cand)
        if result:
            return result, {cand.index}

    for cand in candidates:
        result = _from_separator_line(cand)
        if result:
            return result, {cand.index}

    if len(candidates) >= 2:
        first, second = candidates[0], candidates[1]
        return _from_two_lines(first.text, second.text), {first.index, second.index}

    only = candidates[0]
    return _from_single_line(only.text), {only.index}


def extract_company_position(lines: List[str]) -> Optional[CompanyPosition]:
    return _resolve_company_position(lines)[0]


# ===== LOCATION =====

def _exact_location(segment: str) -> Optional[BlockLocation]:
    if CITY_STATE_EXACT_RE.match(segment):
        return BlockLocation(value=segment, type="city-state", confidence=0.95)
    if REMOTE_EXACT_RE.match(segment):
        return BlockLocation(value=segment, type="remote", confidence=0.9)
    if HYBRID_EXACT_RE.match(segment):
        return BlockLocation(value=segment, type="hybrid", confidence=0.9)
    return None


def extract_location(lines: List[str]) -> Optional[BlockLocation]:
    """
    Prefer a location token standing on its own line (or its own separated segment of a
    line); fall back to pattern matches inside other non-bullet lines.
    """
    plain = [ln.strip() for ln in lines if ln.strip() and not looks_like_bullet_point(ln)]

    for line in plain:
        if is_date_line(line):
            continue
        text = strip_dates(line) if line_contains_date(line) else line
        segments = [clean_field(s, LOCATION_TRIM) for s in COMPANY_SEPARATOR_RE.split(text)]
        for seg in [clean_field(text, LOCATION_TRIM)] + segments:
            found = _exact_location(seg)
            if found:
                return found

    for line in plain:
        if looks_like_achievement(line):
            continue
        m = CITY_STATE_RE.search(line)
        if m:
            return BlockLocation(value=m.group(0), type="city-state", confidence=0.8)
    for line in plain:
        m = REMOTE_FALLBACK_RE.search(line)
        if m:
            return BlockLocation(value=m.group(0), type="remote", confidence=0.7)
    for line in plain:
        m = HYBRID_RE.search(line)
        if m and not looks_like_achievement(line):
            return BlockLocation(value=m.group(0), type="hybrid", confidence=0.65)
    for line in plain:
        if is_job_line(line) or looks_like_achievement(line):
            continue
        m = CITY_COUNTRY_RE.search(line)
        if m:
            return BlockLocation(value=m.group(0), type="city-country", confidence=0.6)
    return None


def _strip_location(value: str, location: Optional[BlockLocation]) -> str:
    if not value or not location:
        return value
    loc = location.value
    for candidate in (f"({loc})", loc):
        if value.endswith(candidate):
            remainder = clean_field(value[: -len(candidate)])
            if remainder:
                return remainder
    return value


# ===== BULLETS =====

def _looks_like_contact(text: str) -> bool:
    return bool(CONTACT_PREFIX_RE.match(text) or EMAIL_RE.search(text) or PHONE_RE.search(text))


def extract_bullet_points(
    lines: List[str],
    position: str = "",
    header_indices: Optional[Set[int]] = None,
) -> List[BulletPoint]:
    """
    Two tiers: explicit markers (glyph, "1.", "a)") first; otherwise achievement-sounding
    lines are accepted as implicit bullets. Dates, headers and the entry's own
    company/position lines never become bullets.
    """
    header_indices = header_indices or set()
    position_key = position.strip().lower()
    bullets: List[BulletPoint] = []

    for i, line in enumerate(lines):
        t = line.strip()
        if not t or i in header_indices or is_date_line(t) or is_header_line(t):
            continue

        text = extract_bullet_text(t)
        if text is not None:
            if not (MIN_BULLET_LENGTH <= len(text) <= MAX_BULLET_LENGTH):
                continue
            if _looks_like_contact(text) or (position_key and text.lower() == position_key):
                continue
            bullets.append(BulletPoint(text=text))
            continue

        if len(t) > MIN_IMPLICIT_BULLET_LENGTH and looks_like_achievement(t) and not looks_like_job_title(t):
            bullets.append(BulletPoint(text=t))

    return bullets


# ===== BLOCK =====

def parse_experience_block(raw: str) -> ParsedExperienceBlock:
    lines = [ln.strip() for ln in (raw or "").split("\n") if ln.strip()]

    date_range = extract_date_range("\n".join(lines))
    company_position, header_indices = _resolve_company_position(lines)
    location = extract_location(lines)
    position = company_position.position if company_position else ""
    bullets = extract_bullet_points(lines, position=position, header_indices=header_indices)

    if company_position and location:
        company_position = company_position.model_copy(update={
            "company": _strip_location(company_position.company, location),
            "position": _strip_location(company_position.position, location),
        })

    confidence = ConfidenceCalculator.experience_block(date_range, company_position, location, len(bullets))
    logger.debug(
        f"Block {lines[:1]}: dates={date_range.raw if date_range else None!r} "
        f"cp={company_position.format if company_position else None} "
        f"loc={location.value if location else None!r} bullets={len(bullets)} conf={confidence:.2f}"
    )
    return ParsedExperienceBlock(
        raw=raw,
        lines=lines,
        date_range=date_range,
        company_position=company_position,
        location=location,
        bullet_points=bullets,
        confidence=confidence,
    )


def block_to_experience(block: ParsedExperienceBlock) -> Optional[Experience]:
    """Experience entry for a parsed block; None when neither company nor position survived."""
    cp = block.company_position
    company = clean_field(cp.company) if cp else ""
    position = clean_field(cp.position) if cp else ""
    if not company and not position:
        return None

    start = block.date_range.start if block.date_range else ""
    end = block.date_range.end if block.date_range else ""
    return Experience(
        company=company,
        position=position,
        location=clean_field(block.location.value, LOCATION_TRIM) if block.location else "",
        start_date=start,
        end_date=end,
        is_current=bool(PRESENT_RE.search(end)),
        bullet_points=block.bullet_points,
        confidence=block.confidence,
    )


def _start_year(experience: Experience) -> Optional[int]:
    m = YEAR_RE.search(experience.start_date or "")
    return int(m.group(1)) if m else None


def post_process_experiences(experiences: List[Experience]) -> List[Experience]:
    """Trim stray separators, drop empty entries, sort most recent first (stable)."""
    cleaned = []
    for e in experiences:
        company, position = clean_field(e.company), clean_field(e.position)
        if not company and not position:
            continue
        cleaned.append(e.model_copy(update={
            "company": company,
            "position": position,
            "location": clean_field(e.location, LOCATION_TRIM),
        }))

    def sort_key(e: Experience) -> Tuple[bool, int]:
        year = _start_year(e)
        return (year is not None, year or 0)

    return sorted(cleaned, key=sort_key, reverse=True)


def extract_experience(text: str) -> List[Experience]:
    """Split the Experience section into blocks and extract each one in isolation."""
    experiences: List[Experience] = []
    for raw in split_experience_blocks(text):
        try:
            entry = block_to_experience(parse_experience_block(raw))
        except Exception:
            logger.exception(f"Failed to extract experience block: {raw[:60]!r}")
            continue
        if entry:
            experiences.append(entry)
    return post_process_experiences(experiences)
