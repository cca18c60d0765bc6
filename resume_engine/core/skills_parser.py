"""
Skills extraction.

Splits the Skills section on list delimiters, keeps tokens that are known technologies or
short non-sentence phrases, and categorizes each one by vocabulary membership.
"""

import logging
import re
from typing import List

from resume_engine.core.patterns import (
    PROGRAMMING_RE,
    SKILL_FILLER_PATTERNS,
    TECHNICAL_RE,
    TOOLS_RE,
)
from resume_engine.core.schemas import Skill
from resume_engine.core.section_segmenter import is_header_line

logger = logging.getLogger(__name__)


MAX_TOKEN_LENGTH = 50
MIN_FREE_TOKEN_LENGTH = 2
MAX_FREE_TOKEN_LENGTH = 30

# "Languages: Python, Go" -> "Python, Go"
LABEL_PREFIX_RE = re.compile(r"^[A-Za-z][A-Za-z &/]{1,40}:\s*")
SKILL_SPLIT_RE = re.compile(r"[,;|\n•·▪*]|\s+[-–—]\s+|^\s*-\s*", re.MULTILINE)

CATEGORY_VOCABULARY = (
    ("Programming", PROGRAMMING_RE),
    ("Tools", TOOLS_RE),
    ("Technical", TECHNICAL_RE),
)


def categorize_skill(name: str) -> str:
    for category, pattern in CATEGORY_VOCABULARY:
        if pattern.search(name):
            return category
    return "General"


def is_known_skill(token: str) -> bool:
    return any(pattern.search(token) for _, pattern in CATEGORY_VOCABULARY)


def _is_filler(token: str) -> bool:
    return any(p.search(token) for p in SKILL_FILLER_PATTERNS)


def _keep_token(token: str) -> bool:
    if not token or len(token) >= MAX_TOKEN_LENGTH or _is_filler(token):
        return False
    if is_known_skill(token):
        return True
    return MIN_FREE_TOKEN_LENGTH <= len(token) <= MAX_FREE_TOKEN_LENGTH and "  " not in token


def extract_skills(text: str) -> List[Skill]:
    """Delimited skill tokens, de-duplicated case-insensitively, in document order."""
    lines = []
    for line in (text or "").split("\n"):
        t = line.strip()
        if not t or is_header_line(t):
            continue
        lines.append(LABEL_PREFIX_RE.sub("", t))

    skills: List[Skill] = []
    seen = set()
    for raw in SKILL_SPLIT_RE.split("\n".join(lines)):
        token = raw.strip().strip(".")
        if not _keep_token(token) or token.lower() in seen:
            continue
        seen.add(token.lower())
        skills.append(Skill(name=token, category=categorize_skill(token)))

    logger.debug(f"Extracted {len(skills)} skills")
    return skills
