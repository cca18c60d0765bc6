"""
Education parsing module for extracting education entries from the Education section.

Deterministic, rule-based line scan: degree and institution keywords decide which part of a
line is the degree and which is the school, bare years become the graduation year, and
detail lines (GPA, honors, coursework) are ignored.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Pattern, Tuple

from resume_engine.core.patterns import (
    YEAR_RE,
    extract_bullet_text,
    is_location_line,
    strip_dates,
)
from resume_engine.core.schemas import Education

logger = logging.getLogger(__name__)


# ===== DEGREE KEYWORDS (Strong Signal) =====

DEGREE_KEYWORDS = {
    "bachelor of",
    "bachelor's",
    "bachelor",
    "master of",
    "master's",
    "master",
    "associate of",
    "associate's",
    "associate",
    "b.s.",
    "b.a.",
    "m.s.",
    "m.a.",
    "m.b.a.",
    "mba",
    "ph.d.",
    "ph.d",
    "phd",
    "doctorate",
    "doctoral",
    "diploma",
    "certificate",
    "bsc",
    "msc",
    "beng",
    "meng",
    "llb",
    "llm",
}

# ===== INSTITUTION KEYWORDS =====

INSTITUTION_KEYWORDS = {
    "university",
    "college",
    "institute",
    "school",
    "academy",
    "polytechnic",
}

# ===== EDUCATION-SPECIFIC DETAIL KEYWORDS =====

EDUCATION_DETAIL_KEYWORDS = {
    "major:",
    "minor:",
    "focus in",
    "concentration",
    "focus:",
    "honors:",
    "dean's list",
    "cum laude",
    "gpa",
    "scholarship",
    "award:",
    "relevant coursework",
    "coursework:",
    "thesis:",
}


def _keyword_re(keywords) -> Pattern:
    alternation = "|".join(re.escape(k) for k in sorted(keywords, key=len, reverse=True))
    return re.compile(rf"(?<![\w.])(?:{alternation})(?!\w)", re.IGNORECASE)


DEGREE_RE = _keyword_re(DEGREE_KEYWORDS)
INSTITUTION_RE = _keyword_re(INSTITUTION_KEYWORDS)
PART_SPLIT_RE = re.compile(r"\s*[,|\t]\s*|\s+[-–—]\s+")
JOINER_SPLIT_RE = re.compile(r"\s+(?:at|from)\s+", re.IGNORECASE)


def has_degree_keyword(text: str) -> bool:
    """
    Check if text contains a degree keyword (Bachelor, M.S., PhD, Certificate, ...).

    Args:
        text: Text to check

    Returns:
        True if a degree keyword is found (case-insensitive, whole word)
    """
    return bool(DEGREE_RE.search(text or ""))


def is_institution_keyword(text: str) -> bool:
    """
    Check if text contains an institution keyword (University, College, Institute, ...).

    Args:
        text: Text to check

    Returns:
        True if an institution keyword is found
    """
    return bool(INSTITUTION_RE.search(text or ""))


def is_education_detail_bullet(text: str) -> bool:
    """
    Check if a line is an education detail (GPA, honors, coursework) rather than a
    degree or institution line.
    """
    text_lower = (text or "").lower()
    return any(keyword in text_lower for keyword in EDUCATION_DETAIL_KEYWORDS)


def graduation_year(text: str) -> str:
    """Last four-digit year on the line ("2014 - 2018" -> "2018")."""
    years = YEAR_RE.findall(text or "")
    return years[-1] if years else ""


def split_degree_and_school(text: str) -> Tuple[str, str]:
    """
    Assign the parts of an education line to degree and school.

    Examples:
        "B.S. Computer Science, Stanford University" -> ("B.S. Computer Science", "Stanford University")
        "Master of Science from MIT Institute of Technology" -> ("Master of Science", "MIT Institute of Technology")
        "Harvard University" -> ("", "Harvard University")
    """
    parts = [p.strip() for p in PART_SPLIT_RE.split(text) if p and p.strip()]
    if len(parts) == 1 and has_degree_keyword(parts[0]) and is_institution_keyword(parts[0]):
        joined = [p.strip() for p in JOINER_SPLIT_RE.split(parts[0], maxsplit=1) if p.strip()]
        if len(joined) == 2:
            parts = joined

    degree = next((p for p in parts if has_degree_keyword(p)), "")
    school = next((p for p in parts if p != degree and is_institution_keyword(p)), "")
    return degree, school


@dataclass
class _EducationDraft:
    degree: str = ""
    school: str = ""
    year: str = ""

    def build(self) -> Optional[Education]:
        if not self.degree and not self.school:
            return None
        return Education(school=self.school, degree=self.degree, graduation_year=self.year)


def extract_education(text: str) -> List[Education]:
    """
    Line-scan the Education section.

    A line opens a new entry when it fills a slot (degree or school) that the open entry
    already has; otherwise it completes the open entry. The graduation year comes from the
    degree or school line itself or from the year-only line right after it. A year-only
    line with nothing before it to attach to opens a pending entry that only the next line
    can complete ("2019" over "MBA, Harvard Business School"). Entries with neither degree
    nor school are dropped.
    """
    drafts: List[_EducationDraft] = []
    current: Optional[_EducationDraft] = None
    # the previous content line belonged to `current`
    adjacent = False

    for raw_line in (text or "").split("\n"):
        line = raw_line.strip()
        if not line:
            continue
        line = extract_bullet_text(line) or line

        year = graduation_year(line)
        rest = strip_dates(line)
        rest = YEAR_RE.sub(" ", rest).strip(" ,|-–—()")
        degree, school = split_degree_and_school(rest) if rest else ("", "")

        if not degree and not school:
            if is_education_detail_bullet(line) or is_location_line(rest):
                continue
            if year and adjacent and current is not None:
                if not current.year:
                    current.year = year
            elif year:
                current = _EducationDraft(year=year)
                drafts.append(current)
                adjacent = True
                continue
            adjacent = False
            continue

        stale_year = current is not None and not adjacent and not current.degree and not current.school
        if current is None or stale_year or (degree and current.degree) or (school and current.school):
            current = _EducationDraft()
            drafts.append(current)
        if degree:
            current.degree = degree
        if school:
            current.school = school
        if year and not current.year:
            current.year = year
        adjacent = True

    entries = [e for e in (d.build() for d in drafts) if e]
    logger.debug(f"Extracted {len(entries)} education entries")
    return entries
