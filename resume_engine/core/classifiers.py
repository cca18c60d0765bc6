"""
Title / company classifiers.

Instead of bare booleans, each classifier returns the verdict together with the names of the
signals that fired, so disambiguation code can weigh several weak signals and tests can
assert on why a line was (or was not) treated as a job title or a company.

Title signals:
  role_noun          engineer, manager, director, ...
  seniority_prefix   Senior / Lead / Principal / VP ... at the start of the line
  compound_title     "<domain> <role>" pair such as "Software Engineer", "Product Manager"
  executive_acronym  CEO, CTO, VP, ...
  at_construction    "<something> at <something>" or "<something> @ <something>"
  short_line         six words or fewer (recorded, never decisive on its own)
  achievement_phrase line reads like an accomplishment sentence (vetoes the verdict)

Company signals:
  company_suffix     Inc, LLC, Corp, Technologies, ...
  title_vocabulary   role vocabulary present (vetoes the verdict)
"""

import re
from dataclasses import dataclass
from typing import Tuple

from resume_engine.core.patterns import (
    ACHIEVEMENT_PATTERNS,
    AT_LINE_RE,
    COMPANY_SUFFIX_RE,
    COMPOUND_TITLE_RE,
    EXECUTIVE_ACRONYM_RE,
    ROLE_NOUNS_RE,
    SENIORITY_PREFIX_RE,
)


DECISIVE_TITLE_SIGNALS = (
    "role_noun",
    "seniority_prefix",
    "compound_title",
    "executive_acronym",
    "at_construction",
)

# Sentences that open with an accomplishment verb are bullet text, not titles
ACHIEVEMENT_OPENING_RE = re.compile(
    r"^(?:[^\w]*)(?:achieved|accomplished|improved|increased|decreased|reduced|developed|created|"
    r"built|designed|implemented|managed|led|coordinated|optimized|streamlined|launched|automated|"
    r"migrated|mentored|drove|grew|saved|responsible|worked|collaborated|contributed|delivered|"
    r"executed|maintained|supported|partnered|spearheaded|oversaw|owned)\b",
    re.IGNORECASE,
)
MAX_TITLE_LENGTH = 100


@dataclass(frozen=True)
class TitleLikeness:
    is_title: bool
    signals: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CompanyLikeness:
    is_company: bool
    signals: Tuple[str, ...] = ()


def _is_achievement_phrase(text: str) -> bool:
    if ACHIEVEMENT_OPENING_RE.match(text):
        return True
    # Metrics (percentages, dollar amounts, counts) only appear in accomplishment text
    return any(p.search(text) for p in ACHIEVEMENT_PATTERNS[2:])


def classify_title(line: str) -> TitleLikeness:
    t = (line or "").strip()
    if not t or len(t) > MAX_TITLE_LENGTH:
        return TitleLikeness(False)

    signals = []
    if ROLE_NOUNS_RE.search(t):
        signals.append("role_noun")
    if SENIORITY_PREFIX_RE.match(t):
        signals.append("seniority_prefix")
    if COMPOUND_TITLE_RE.search(t):
        signals.append("compound_title")
    if EXECUTIVE_ACRONYM_RE.search(t):
        signals.append("executive_acronym")
    if AT_LINE_RE.match(t):
        signals.append("at_construction")
    if len(t.split()) <= 6:
        signals.append("short_line")
    if _is_achievement_phrase(t):
        signals.append("achievement_phrase")

    decisive = any(s in DECISIVE_TITLE_SIGNALS for s in signals)
    return TitleLikeness(decisive and "achievement_phrase" not in signals, tuple(signals))


def classify_company(line: str) -> CompanyLikeness:
    t = (line or "").strip()
    if not t:
        return CompanyLikeness(False)

    signals = []
    if COMPANY_SUFFIX_RE.search(t):
        signals.append("company_suffix")
    if ROLE_NOUNS_RE.search(t) or COMPOUND_TITLE_RE.search(t) or EXECUTIVE_ACRONYM_RE.search(t):
        signals.append("title_vocabulary")

    return CompanyLikeness("company_suffix" in signals and "title_vocabulary" not in signals, tuple(signals))


def looks_like_job_title(line: str) -> bool:
    return classify_title(line).is_title


def has_company_suffix(line: str) -> bool:
    return bool(COMPANY_SUFFIX_RE.search(line or ""))


def looks_like_compound_title(line: str) -> bool:
    """An unmistakable title: seniority prefix or a "<domain> <role>" pair."""
    result = classify_title(line)
    return result.is_title and (
        "seniority_prefix" in result.signals or "compound_title" in result.signals
    )


def _position_score(line: str) -> int:
    title = classify_title(line)
    score = sum(1 for s in title.signals if s in DECISIVE_TITLE_SIGNALS) if title.is_title else 0
    if classify_company(line).is_company:
        score -= 2
    return score


def looks_more_like_position(first: str, second: str) -> bool:
    """True when `first` reads more like a job title than `second` does."""
    return _position_score(first) > _position_score(second)
