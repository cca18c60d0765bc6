"""
Text normalization for decoded resume text.

Cleans the artifacts DOCX/PDF decoders leave behind before any pattern matching runs:
- Line endings and exotic whitespace (CRLF, tabs, NBSP, zero-width characters)
- PDF letter-spacing ("E X P E R I E N C E" -> "EXPERIENCE")
- Line reconstruction from positioned fragments (layout hints)

Normalization only removes or collapses characters; it never invents text.
"""

import re
from itertools import groupby
from typing import Iterable, List

from resume_engine.core.schemas import LayoutHint


ZERO_WIDTH_RE = re.compile(r"[\u200b\u200c\u200d\u2060\ufeff\x00]")
INLINE_SPACE_RE = re.compile(r"[\t\u00a0\u2007\u202f]")
SPACED_CHARS_RE = re.compile(r"^(?:[A-Za-z0-9@.()\-\+]\s+){2,}[A-Za-z0-9@.()\-\+]+$")


def _despace_if_needed(text: str) -> str:
    """
    Fix PDFs that extract text with spaces between characters.

    Examples:
      'E X P E R I E N C E' -> 'EXPERIENCE'
      'J O H N   D O E' -> 'JOHN DOE'   (double space is the word boundary)
      '5 5 5 . 1 2 3 . 4 5 6 7' -> '555.123.4567'
    """
    t = text.strip()
    if not t or not SPACED_CHARS_RE.match(t):
        return text

    parts = re.split(r"\s{2,}", t)
    parts = ["".join(p.split()) for p in parts]
    return " ".join(p for p in parts if p)


def normalize_text(text: str) -> str:
    """Canonical line-oriented text: '\\n' line breaks, plain spaces, letter-spacing collapsed."""
    if not text:
        return ""

    t = text.replace("\r\n", "\n").replace("\r", "\n")
    t = ZERO_WIDTH_RE.sub("", t)
    t = INLINE_SPACE_RE.sub(" ", t)

    return "\n".join(_despace_if_needed(line).rstrip() for line in t.split("\n"))


def _page_lines(hints: List[LayoutHint], tolerance: float) -> List[str]:
    lines: List[str] = []
    current: List[str] = []
    last_y = None

    for hint in hints:
        value = (hint.value or "").strip()
        if not value:
            continue
        if last_y is not None and abs(hint.y - last_y) > tolerance:
            lines.append(" ".join(current))
            current = []
        current.append(value)
        last_y = hint.y

    if current:
        lines.append(" ".join(current))
    return lines


def text_from_layout_hints(hints: Iterable[LayoutHint], tolerance: float = 5.0) -> str:
    """
    Rebuild line breaks from positioned fragments.

    Fragments keep their decoder order within a page. A new line starts whenever the
    vertical position moves by more than `tolerance` from the previous fragment; pages
    are separated by a newline.
    """
    out: List[str] = []
    for _, page_hints in groupby(hints or [], key=lambda h: h.page):
        out.extend(_page_lines(list(page_hints), tolerance))
    return "\n".join(out)
