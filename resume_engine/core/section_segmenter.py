"""
Section segmentation.

Scans the document line by line, recognises section headers ("EXPERIENCE", "Work History:",
"Technical Skills", ...) and groups the lines in between into labelled `Section`s.

Header keywords are compared after light suffix stripping so that "Experience",
"Experiences" and "Experienced" all collapse to the same stem. Each keyword family has HEAD
words, which decide the section kind, and shares a small set of MODIFIER words
("Professional", "Work", "Technical", ...) that may qualify a head but never make a header on
their own.

The scan is a two-state machine:
  Idle       -> a header opens InSection(kind); any other non-blank line opens the implicit
                Personal section (resumes conventionally open with contact details)
  InSection  -> a header closes the open section and opens the next one; every other line,
                blank lines included, belongs to the open section
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from resume_engine.core.confidence_calculator import ConfidenceCalculator
from resume_engine.core.patterns import (
    COMPANY_SUFFIX_RE,
    EXECUTIVE_ACRONYM_RE,
    ROLE_NOUNS_RE,
    SENIORITY_PREFIX_RE,
    line_contains_date,
    looks_like_bullet_point,
)
from resume_engine.core.schemas import Section

logger = logging.getLogger(__name__)


PERSONAL_SECTION_CONFIDENCE = 0.8
MAX_HEADER_LENGTH = 50
MAX_HEADER_TOKENS = 4

# label -> (section kind, head keywords)
HEADER_FAMILIES: Dict[str, Tuple[str, Tuple[str, ...]]] = {
    "personal": ("personal", ("contact", "contacts", "information", "info", "details")),
    "experience": ("experience", (
        "experience", "experiences", "employment", "history", "internship", "internships",
        "positions",
    )),
    "education": ("education", (
        "education", "educational", "qualifications", "qualification", "training", "academics",
    )),
    "skills": ("skills", (
        "skills", "skill", "competencies", "competency", "expertise", "technologies",
        "technology", "tools", "proficiencies", "abilities",
    )),
    "projects": ("projects", ("projects", "project", "portfolio")),
    "summary": ("unknown", ("summary", "objective", "profile", "about", "statement", "overview")),
    "certifications": ("unknown", (
        "certifications", "certification", "certificates", "licenses", "license", "accreditations",
    )),
    "awards": ("unknown", ("awards", "award", "honors", "honours", "achievements", "accomplishments")),
    "languages": ("unknown", ("languages", "language")),
    "interests": ("unknown", (
        "interests", "hobbies", "hobby", "activities", "activity", "volunteer", "volunteering",
        "publications", "references",
    )),
}

MODIFIERS = (
    "professional", "work", "career", "technical", "personal", "academic", "relevant", "core",
    "key", "background", "me", "additional", "other", "selected", "industry", "executive",
)
CONNECTORS = {"and", "of", "the", "my"}

HEADER_TOKEN_RE = re.compile(r"[A-Za-z]+")
TRAILING_MARK_RE = re.compile(r"\s*[:\-–—]\s*$")
STEM_SUFFIXES = ("ing", "ed", "es", "s", "er", "ly")


def stem(word: str) -> str:
    """Light suffix stripping: one inflectional suffix, then a trailing 'e'."""
    w = word.lower()
    for suffix in STEM_SUFFIXES:
        if w.endswith(suffix) and len(w) - len(suffix) >= 3:
            w = w[: -len(suffix)]
            break
    if w.endswith("e") and len(w) > 3:
        w = w[:-1]
    return w


HEAD_STEMS: Dict[str, str] = {}
for _label, (_kind, _keywords) in HEADER_FAMILIES.items():
    for _kw in _keywords:
        HEAD_STEMS.setdefault(stem(_kw), _label)
MODIFIER_STEMS = {stem(m) for m in MODIFIERS}


@dataclass(frozen=True)
class SectionHeader:
    kind: str
    label: str
    confidence: float


def _keyword_hit(line: str, label: str) -> bool:
    lowered = line.lower()
    return any(kw in lowered for kw in HEADER_FAMILIES[label][1])


def _names_a_role(line: str, tokens: List[str]) -> bool:
    """Job titles that end in a section word ("Head of Education", "VP of Training")."""
    words = [tok for tok in tokens if stem(tok) not in MODIFIER_STEMS]
    if any(ROLE_NOUNS_RE.fullmatch(tok) or EXECUTIVE_ACRONYM_RE.fullmatch(tok) for tok in words):
        return True
    return bool(SENIORITY_PREFIX_RE.match(line)) and stem(tokens[0]) not in MODIFIER_STEMS


def detect_section_header(line: str) -> Optional[SectionHeader]:
    """
    Classify a line as a section header.

    Shape rules: shorter than 50 chars and (all caps OR at most 4 words OR a trailing
    colon/dash). Bullets, dated lines, company lines, e-mail lines and job titles
    ("Head of Education") are never headers.
    Vocabulary rules: at least one head keyword, the last word is a keyword, and at most
    one unrecognised qualifier word ("Relevant Experience", "Areas of Expertise").
    """
    t = (line or "").strip()
    if not t or len(t) >= MAX_HEADER_LENGTH:
        return None
    if looks_like_bullet_point(t) or line_contains_date(t) or "@" in t or COMPANY_SUFFIX_RE.search(t):
        return None
    if any(ch.isdigit() for ch in t):
        return None

    tokens = HEADER_TOKEN_RE.findall(t)
    if not tokens:
        return None
    if _names_a_role(t, tokens):
        return None

    has_trailing_mark = bool(TRAILING_MARK_RE.search(t))
    if not (t.isupper() or len(tokens) <= MAX_HEADER_TOKENS or has_trailing_mark):
        return None

    label = None
    unknown_words = 0
    for token in tokens:
        s = stem(token)
        if s in HEAD_STEMS:
            label = label or HEAD_STEMS[s]
        elif s not in MODIFIER_STEMS and token.lower() not in CONNECTORS:
            unknown_words += 1

    last = stem(tokens[-1])
    if label is None or unknown_words > 1 or (last not in HEAD_STEMS and last not in MODIFIER_STEMS):
        return None

    kind = HEADER_FAMILIES[label][0]
    confidence = ConfidenceCalculator.section_header(t, _keyword_hit(t, label))
    return SectionHeader(kind=kind, label=label, confidence=confidence)


def is_header_line(line: str) -> bool:
    return detect_section_header(line) is not None


def _is_skills_sublabel(open_label: Optional[str], header: SectionHeader, line: str) -> bool:
    """'Programming Languages' inside a skills section is a skill group, not a new section."""
    if open_label != "skills" or header.label != "languages":
        return False
    return any(stem(tok) not in HEAD_STEMS for tok in HEADER_TOKEN_RE.findall(line))


@dataclass
class _OpenSection:
    kind: str
    label: str
    confidence: float
    start_line: int
    lines: List[str] = field(default_factory=list)

    def close(self, end_line: int) -> Section:
        return Section(
            kind=self.kind,
            label=self.label,
            text="\n".join(self.lines).strip("\n"),
            start_line=self.start_line,
            end_line=max(self.start_line, end_line),
            confidence=self.confidence,
        )


def segment_sections(text: str) -> List[Section]:
    """Split normalized text into non-overlapping sections in document order."""
    lines = (text or "").split("\n")
    sections: List[Section] = []
    current: Optional[_OpenSection] = None

    for i, line in enumerate(lines):
        header = detect_section_header(line)
        if header and not _is_skills_sublabel(current.label if current else None, header, line):
            if current is not None:
                sections.append(current.close(i - 1))
            logger.debug(f"Section header at line {i}: {line.strip()!r} -> {header.label} ({header.confidence:.2f})")
            current = _OpenSection(header.kind, header.label, header.confidence, start_line=i)
            continue

        if current is None:
            if not line.strip():
                continue
            current = _OpenSection("personal", "personal", PERSONAL_SECTION_CONFIDENCE, start_line=i)
        current.lines.append(line)

    if current is not None:
        sections.append(current.close(len(lines) - 1))

    logger.debug(f"Segmented {len(sections)} sections: {[s.label for s in sections]}")
    return sections


def has_recognized_headers(text: str) -> bool:
    """False when the whole document would fall into the implicit Personal section."""
    return any(is_header_line(line) for line in (text or "").split("\n"))
