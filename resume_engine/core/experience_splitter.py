"""
Experience block splitting.

Walks the Experience section line by line and decides where one job entry ends and the next
begins. Job entries are visually compact (title / company / dates / location cluster within a
few lines before bullets begin), so a short lookahead is enough to recognise an entry start.

A line starts a new entry when it looks like a job line (title-like or carrying a company
suffix) AND at least one boundary signal fires:
  date_follows      the next line carries a date (or the line after a short next line does)
  location_follows  the next line is a City, ST or remote/hybrid token
  at_separator      the line contains " at "
  two_part          the line reads "<first> - <second>"
  inline_date       the line itself carries a date

Two layouts that do not lead with a job line are also recognised:
  two_line_header   a short line followed by a title line and then a date line
                    ("Google" / "Senior Engineer" / "Jan 2020 - Present")
  date_first        a date-only line right after bullets, followed by a job line

The open block is only closed when it already looks like a complete experience; otherwise the
candidate line is absorbed, which keeps title-like bullet text from splitting an entry in two.
"""

import logging
import re
from typing import List

from resume_engine.core.classifiers import has_company_suffix, looks_like_job_title
from resume_engine.core.patterns import (
    ACHIEVEMENT_VERBS_RE,
    CITY_STATE_RE,
    EMAIL_RE,
    HYBRID_RE,
    JOB_TERMS_RE,
    REMOTE_RE,
    TWO_PART_RE,
    is_date_line,
    line_contains_date,
    looks_like_achievement,
    looks_like_bullet_point,
)

logger = logging.getLogger(__name__)


MAX_HEADER_WORDS = 8
BARE_NAME_RE = re.compile(r"^[A-Z][a-zA-Z'.-]+(?:\s+[A-Z][a-zA-Z'.-]+){1,3}$")


def is_job_line(line: str) -> bool:
    return looks_like_job_title(line) or has_company_suffix(line)


def _is_short_plain_line(line: str) -> bool:
    return (
        bool(line)
        and not looks_like_bullet_point(line)
        and not is_date_line(line)
        and not looks_like_achievement(line)
        and len(line.split()) <= MAX_HEADER_WORDS
    )


def _next_line_is_location(line: str) -> bool:
    return bool(CITY_STATE_RE.search(line) or REMOTE_RE.search(line) or HYBRID_RE.search(line))


def entry_start_signals(lines: List[str], i: int) -> List[str]:
    """Boundary signals for lines[i]; an empty list means the line is not an entry start."""
    line = lines[i]
    nxt = lines[i + 1] if i + 1 < len(lines) else ""
    after = lines[i + 2] if i + 2 < len(lines) else ""

    if looks_like_bullet_point(line):
        return []

    signals = []
    if is_job_line(line):
        if line_contains_date(nxt) or (_is_short_plain_line(nxt) and line_contains_date(after)):
            signals.append("date_follows")
        if nxt and not looks_like_bullet_point(nxt) and _next_line_is_location(nxt):
            signals.append("location_follows")
        if " at " in line.lower():
            signals.append("at_separator")
        if TWO_PART_RE.match(line):
            signals.append("two_part")
        if line_contains_date(line):
            signals.append("inline_date")
    elif _is_short_plain_line(line) and looks_like_job_title(nxt) and line_contains_date(after):
        signals.append("two_line_header")
    elif is_date_line(line) and is_job_line(nxt):
        signals.append("date_first")
    return signals


def _is_bare_identity_line(line: str) -> bool:
    t = line.strip()
    if t.upper() == "EXPERIENCE" or EMAIL_RE.fullmatch(t):
        return True
    return bool(BARE_NAME_RE.match(t)) and not is_job_line(t)


def block_looks_like_experience(block: List[str]) -> bool:
    """A block is complete enough to close: two or more lines plus some job evidence."""
    lines = [ln for ln in block if ln.strip()]
    if len(lines) < 2:
        return False
    if all(_is_bare_identity_line(ln) for ln in lines):
        return False

    text = "\n".join(lines)
    return bool(
        line_contains_date(text)
        or JOB_TERMS_RE.search(text)
        or any(looks_like_bullet_point(ln) for ln in lines)
        or ACHIEVEMENT_VERBS_RE.search(text)
    )


def _block_header_is_over(block: List[str]) -> bool:
    return bool(block) and (looks_like_bullet_point(block[-1]) or looks_like_achievement(block[-1]))


def split_experience_blocks(text: str) -> List[str]:
    """Split Experience section text into raw per-entry blocks, in document order."""
    lines = [ln.strip() for ln in (text or "").split("\n") if ln.strip()]
    blocks: List[List[str]] = []
    current: List[str] = []

    for i, line in enumerate(lines):
        signals = entry_start_signals(lines, i)
        if signals == ["date_first"] and not _block_header_is_over(current):
            signals = []

        if signals and current and block_looks_like_experience(current):
            logger.debug(f"New experience block at {line!r} (signals: {signals})")
            blocks.append(current)
            current = []
        current.append(line)

    if current:
        blocks.append(current)

    logger.debug(f"Split experience section into {len(blocks)} blocks")
    return ["\n".join(b) for b in blocks]
