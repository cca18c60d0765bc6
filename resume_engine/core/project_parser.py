"""Project extraction: one project per blank-line-delimited paragraph."""

import logging
import re
from typing import List

from resume_engine.core.patterns import URL_RE, extract_bullet_text
from resume_engine.core.schemas import Project

logger = logging.getLogger(__name__)


PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")
LINK_TRAILING_PUNCT = ".,;)"


def extract_projects(text: str) -> List[Project]:
    """
    First line of each paragraph is the name, the first URL anywhere in the paragraph is
    the link, and the remaining non-URL lines are joined as the description.
    """
    projects: List[Project] = []
    for paragraph in PARAGRAPH_SPLIT_RE.split(text or ""):
        lines = [ln.strip() for ln in paragraph.split("\n") if ln.strip()]
        if not lines:
            continue

        name = extract_bullet_text(lines[0]) or lines[0]
        link_match = URL_RE.search(paragraph)
        link = link_match.group(0).rstrip(LINK_TRAILING_PUNCT) if link_match else ""

        description_lines = []
        for line in lines[1:]:
            if link and link in line:
                continue
            description_lines.append(extract_bullet_text(line) or line)

        projects.append(Project(name=name, link=link, description=" ".join(description_lines)))

    logger.debug(f"Extracted {len(projects)} projects")
    return projects
