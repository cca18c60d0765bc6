"""
Pattern library for resume extraction.

Stateless, compiled-once matchers shared by every extractor. Nothing in this module holds
per-document state, so the tables are safe to reuse across concurrent parses.

Date shapes are kept as an explicit ordered table of (name, regex, confidence); callers walk
it first-match-wins so the precedence is visible here rather than implied by call order.

Confidence weights for date shapes:
  0.9  = explicit month-name range or month-year to Present
  0.8  = quarter range
  0.7  = season range
  0.65 = bare year range
  0.6  = numeric mm/yyyy range (day/month ambiguity)
  0.5  = two isolated dates paired by position (assigned by the extractor)
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Pattern, Tuple


@dataclass(frozen=True)
class PatternMatch:
    text: str
    start: int
    end: int


@dataclass(frozen=True)
class DateShape:
    name: str
    regex: Pattern
    confidence: float


def search(pattern: Pattern, text: str) -> Optional[PatternMatch]:
    """Uniform matcher result: matched substring plus position, or None."""
    m = pattern.search(text or "")
    if not m:
        return None
    return PatternMatch(text=m.group(0), start=m.start(), end=m.end())


# ===== CONTACT =====

# Local part starts at a token boundary so long runs without "@" scan in linear time
EMAIL_RE = re.compile(r"(?<![\w.%+-])[\w.%+-]{1,64}@[\w-]+(?:\.[\w-]+)*\.[A-Za-z]{2,}")
# Handles: (555) 123-4567, 555.123.4567, +1 555 123 4567, +44 20 7946 0958
PHONE_RE = re.compile(
    r"(?<![\w/])"
    r"(?:"
        r"(?:\+?\d{1,3}[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}"
        r"|\+\d{1,3}(?:[-.\s]?\d{2,4}){2,4}"
    r")"
    r"(?![\w/])"
)
URL_RE = re.compile(
    r"(?i:https?://|www\.)[^\s<>()|,;]+"
    r"|(?<!@)\b[\w-]+(?:\.[\w-]+)*\.(?:com|io|org|net|dev|app|ai|co|me|edu|gov|tech)(?:/[^\s<>()|,;]*)?",
)
LINKEDIN_RE = re.compile(r"(?:https?://)?(?:www\.)?linkedin\.com/in/[\w-]+/?", re.IGNORECASE)
GITHUB_RE = re.compile(r"(?:https?://)?(?:www\.)?github\.com/[\w-]+", re.IGNORECASE)
CONTACT_PATTERNS = (EMAIL_RE, PHONE_RE, URL_RE, LINKEDIN_RE, GITHUB_RE)


# ===== DATES =====

MONTHS_FULL = r"January|February|March|April|May|June|July|August|September|October|November|December"
MONTHS_ABBR = r"Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sept|Sep|Oct|Nov|Dec"
MONTHS_ANY = f"{MONTHS_FULL}|{MONTHS_ABBR}"
SEASONS = r"Spring|Summer|Fall|Autumn|Winter"
PRESENT_WORDS = r"Present|Current|Ongoing|Now|Today"
RANGE_SEP = r"\s*(?:[-–—]|\bto\b)\s*"
YEAR = r"(?:19|20)\d{2}"

DATE_SHAPES: Tuple[DateShape, ...] = (
    DateShape(
        "month_name_range",
        re.compile(rf"\b({MONTHS_FULL})\.?\s+({YEAR}){RANGE_SEP}({MONTHS_FULL})\.?\s+({YEAR})\b", re.IGNORECASE),
        0.9,
    ),
    DateShape(
        "quarter_range",
        re.compile(rf"\b(Q[1-4])\s+({YEAR}){RANGE_SEP}(Q[1-4])\s+({YEAR})\b", re.IGNORECASE),
        0.8,
    ),
    DateShape(
        "month_present",
        re.compile(rf"\b({MONTHS_ANY})\.?\s+({YEAR}){RANGE_SEP}({PRESENT_WORDS})\b", re.IGNORECASE),
        0.9,
    ),
    DateShape(
        "numeric_range",
        re.compile(rf"\b(\d{{1,2}}/{YEAR}){RANGE_SEP}(\d{{1,2}}/{YEAR}|{PRESENT_WORDS})\b", re.IGNORECASE),
        0.6,
    ),
    DateShape(
        "abbrev_month_range",
        re.compile(rf"\b({MONTHS_ANY})\.?\s+({YEAR}){RANGE_SEP}({MONTHS_ANY})\.?\s+({YEAR})\b", re.IGNORECASE),
        0.9,
    ),
    DateShape(
        "season_range",
        re.compile(rf"\b({SEASONS})\s+({YEAR}){RANGE_SEP}(?:({SEASONS})\s+({YEAR})|({PRESENT_WORDS}))\b", re.IGNORECASE),
        0.7,
    ),
    DateShape(
        "year_range",
        re.compile(rf"\b({YEAR}){RANGE_SEP}({YEAR}|{PRESENT_WORDS})\b", re.IGNORECASE),
        0.65,
    ),
)

# Single date tokens (used for "line contains a date" and for pairing isolated dates)
MONTH_YEAR_RE = re.compile(rf"\b(?:{MONTHS_ANY})\.?\s+(?:{YEAR}|'\d{{2}})\b", re.IGNORECASE)
QUARTER_YEAR_RE = re.compile(rf"\bQ[1-4]\s+{YEAR}\b", re.IGNORECASE)
SEASON_YEAR_RE = re.compile(rf"\b(?:{SEASONS})\s+{YEAR}\b", re.IGNORECASE)
MM_YYYY_RE = re.compile(rf"\b\d{{1,2}}/{YEAR}\b")
FULL_DATE_RE = re.compile(r"\b\d{1,2}[-./]\d{1,2}[-./](?:\d{4}|\d{2})\b|\b\d{4}-\d{2}-\d{2}\b")
YEAR_RANGE_RE = re.compile(rf"\b{YEAR}{RANGE_SEP}(?:{YEAR}|{PRESENT_WORDS})\b", re.IGNORECASE)
YEAR_RE = re.compile(rf"\b({YEAR})\b")

DATE_TOKEN_PATTERNS: Tuple[Pattern, ...] = (
    MONTH_YEAR_RE,
    YEAR_RANGE_RE,
    QUARTER_YEAR_RE,
    MM_YYYY_RE,
    SEASON_YEAR_RE,
    FULL_DATE_RE,
)

# Isolated dates that can be paired into a start/end when no range matched
PAIRABLE_DATE_RE = re.compile(
    rf"\b(?:(?:{MONTHS_ANY})\.?\s+{YEAR}|Q[1-4]\s+{YEAR}|(?:{SEASONS})\s+{YEAR}|\d{{1,2}}/{YEAR})\b",
    re.IGNORECASE,
)
PRESENT_RE = re.compile(rf"\b(?:{PRESENT_WORDS})\b", re.IGNORECASE)


def line_contains_date(line: str) -> bool:
    return any(p.search(line or "") for p in DATE_TOKEN_PATTERNS)


def strip_dates(line: str) -> str:
    """Remove date ranges and date tokens from a line, leaving the surrounding text."""
    t = line
    for shape in DATE_SHAPES:
        t = shape.regex.sub(" ", t)
    for p in DATE_TOKEN_PATTERNS:
        t = p.sub(" ", t)
    t = re.sub(rf"\b(?:{PRESENT_WORDS})\b", " ", t, flags=re.IGNORECASE) if line_contains_date(line) else t
    return " ".join(t.split())


def is_date_line(line: str) -> bool:
    """A line whose content is essentially a date or date range."""
    if not line_contains_date(line):
        return False
    remainder = strip_dates(line)
    letters = re.sub(r"[^A-Za-z]", "", remainder)
    return len(letters) < 4


# ===== BULLETS =====

BULLET_GLYPHS = "•▪\\-→○*+·▫◦‣⁃▸▹▶▷◆◇■□▲△►▻⟩〉●➢✓"

BULLET_TEXT_PATTERNS: Tuple[Pattern, ...] = (
    re.compile(rf"^\s*[{BULLET_GLYPHS}]\s*(.+)$"),
    re.compile(r"^\s*\d{1,2}[.)]\s+(.+)$"),
    re.compile(r"^\s*[a-zA-Z][.)]\s+(.+)$"),
)

BULLET_MARKER_RE = re.compile(
    rf"^\s*(?:[{BULLET_GLYPHS}]\s+|[•▪→○·▫◦‣⁃▸▹▶▷◆◇■□▲△►▻⟩〉●➢✓]|\d{{1,2}}[.)]\s+|[a-zA-Z][.)]\s+)"
)


def extract_bullet_text(line: str) -> Optional[str]:
    """Strip a recognised bullet glyph or numbered/lettered marker; None if the line has none."""
    for pattern in BULLET_TEXT_PATTERNS:
        m = pattern.match(line or "")
        if m and m.group(1).strip():
            return m.group(1).strip()
    return None


def looks_like_bullet_point(line: str) -> bool:
    return bool(BULLET_MARKER_RE.match(line or ""))


# ===== LOCATIONS =====

US_STATES = {
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA", "HI", "ID", "IL", "IN",
    "IA", "KS", "KY", "LA", "ME", "MD", "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV",
    "NH", "NJ", "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI", "SC", "SD", "TN",
    "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY", "DC"
}

CITY_STATE_EXACT_RE = re.compile(r"^[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*,\s*[A-Z]{2}$")
CITY_STATE_RE = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*,\s*[A-Z]{2}\b(?!\.\w)")
CITY_COUNTRY_RE = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*,\s*[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\b")
REMOTE_EXACT_RE = re.compile(
    r"^(?:Remote|Virtual|WFH|Work\s+from\s+home|Distributed|Telecommute|Fully\s+Remote)$",
    re.IGNORECASE,
)
REMOTE_RE = re.compile(
    r"\b(?:Remote|Virtual|WFH|Work\s+from\s+home|Distributed|Telecommute|On-site/Remote|Remote/On-site)\b",
    re.IGNORECASE,
)
HYBRID_EXACT_RE = re.compile(r"^(?:Hybrid|Flexible)(?:\s*\(.*\))?$", re.IGNORECASE)
HYBRID_RE = re.compile(r"\b(?:Hybrid|Flexible)\b", re.IGNORECASE)


def is_location_line(line: str) -> bool:
    t = (line or "").strip()
    return bool(CITY_STATE_EXACT_RE.match(t) or REMOTE_EXACT_RE.match(t) or HYBRID_EXACT_RE.match(t))


# ===== COMPANIES =====

COMPANY_SUFFIX_RE = re.compile(
    r"\b(?:Inc|LLC|L\.L\.C|Corp|Corporation|Company|Ltd|Limited|Technologies|Solutions|Systems|"
    r"Group|Enterprises|Consulting|Services|Partners|Associates|Holdings|International|Global|"
    r"Worldwide|Agency|Org|Organization|Labs|GmbH|PLC|LLP)\b\.?",
    re.IGNORECASE,
)
# Separators between two halves of a company/position line. Hyphen, slash and @ need
# surrounding whitespace so "Full-Stack", "UI/UX" and e-mail addresses stay intact.
COMPANY_SEPARATOR_RE = re.compile(r"\s+[-/@]\s+|\s*[–—|•▪]\s*")
AT_LINE_RE = re.compile(r"^(.+?)\s+(?:at|@)\s+(.+)$", re.IGNORECASE)
TWO_PART_RE = re.compile(r"^(.+?)\s+[-–—|]\s+(.+)$")


# ===== VOCABULARY =====

ROLE_NOUNS_RE = re.compile(
    r"\b(?:engineer|developer|manager|analyst|specialist|coordinator|director|lead|intern|"
    r"consultant|architect|designer|administrator|supervisor|executive|officer|representative|"
    r"associate|assistant|scientist|programmer|technician|strategist|owner|founder|co-founder|"
    r"president|head|principal|researcher|advisor|accountant|editor|writer|teacher|instructor|"
    r"nurse|recruiter|trainee|apprentice|fellow|partner)\b",
    re.IGNORECASE,
)
SENIORITY_PREFIX_RE = re.compile(
    r"^(?:senior|sr\.?|junior|jr\.?|lead|principal|staff|associate|assistant|head|chief|"
    r"vice\s+president|vp|executive|managing|distinguished)\s+",
    re.IGNORECASE,
)
COMPOUND_TITLE_RE = re.compile(
    r"\b(?:software|web|frontend|front-end|backend|back-end|full.?stack|data|product|project|devops|"
    r"cloud|mobile|ui/ux|ux/ui|ux|ui|qa|test|security|network|systems|machine\s+learning|ml|ai|"
    r"marketing|sales|business|operations|technical|it|human\s+resources|hr|finance|"
    r"accounting|legal|program|account|engineering|research)\s+"
    r"(?:engineer|developer|manager|architect|designer|lead|director|analyst|specialist|"
    r"coordinator|scientist|consultant|executive|administrator)\b",
    re.IGNORECASE,
)
EXECUTIVE_ACRONYM_RE = re.compile(r"\b(?:CEO|CTO|CFO|COO|CMO|CIO|VP|SVP|EVP)\b")
JOB_TERMS_RE = re.compile(
    r"\b(?:engineer|developer|manager|analyst|specialist|coordinator|director|lead|company|"
    r"inc|llc|corp|at|software|senior|junior)\b",
    re.IGNORECASE,
)
ACHIEVEMENT_VERBS_RE = re.compile(
    r"\b(?:developed|managed|led|created|implemented|improved|achieved|responsible|worked|"
    r"collaborated|built|designed)\b",
    re.IGNORECASE,
)
ACHIEVEMENT_PATTERNS: Tuple[Pattern, ...] = (
    re.compile(
        r"\b(?:achieved|accomplished|improved|increased|decreased|reduced|developed|created|built|"
        r"designed|implemented|managed|led|coordinated|optimized|streamlined|launched|automated|"
        r"migrated|mentored|drove|grew|saved)\b",
        re.IGNORECASE,
    ),
    re.compile(
        r"\b(?:responsible for|worked on|collaborated|contributed|delivered|executed|maintained|supported)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b\d+(?:\.\d+)?%"),
    re.compile(r"\$[1-9]\d{0,2}(?:,\d{3})*(?:\.\d+)?(?:\s*[kKmMbB]\b)?"),
    re.compile(r"\b[1-9]\d{0,2}[kKmM]\+?(?!\w)"),
)


def looks_like_achievement(line: str) -> bool:
    t = (line or "").strip()
    return 10 < len(t) < 300 and any(p.search(t) for p in ACHIEVEMENT_PATTERNS)


CONTACT_PREFIX_RE = re.compile(r"^(?:location|address|phone|email|e-mail|contact)\b", re.IGNORECASE)


# ===== SKILLS =====

PROGRAMMING_RE = re.compile(
    r"(?<![\w+#])(?:JavaScript|TypeScript|Python|Java|C\+\+|C#|PHP|Ruby|Go|Golang|Rust|Swift|Kotlin|"
    r"Scala|Perl|R|React|Vue|Angular|Svelte|Node\.js|Node|Express|Django|Flask|FastAPI|Spring|"
    r"Laravel|Rails|Next\.js|NoSQL|MongoDB|PostgreSQL|MySQL|SQLite|Redis|GraphQL|Pandas|NumPy|"
    r"TensorFlow|PyTorch)(?![\w+#])",
    re.IGNORECASE,
)
TOOLS_RE = re.compile(
    r"\b(?:Git|GitHub|GitLab|Docker|Kubernetes|AWS|Azure|GCP|Jenkins|Terraform|Ansible|Jira|"
    r"Confluence|Figma|Sketch|Photoshop|Excel|PowerPoint|Slack|Teams|Zoom|Linux|Windows|macOS|"
    r"VS\s*Code|IntelliJ|Eclipse|Tableau|Salesforce)\b",
    re.IGNORECASE,
)
TECHNICAL_RE = re.compile(r"\b(?:HTML|CSS|SQL|XML|JSON|REST|API|APIs|CI/CD|TCP/IP|HTTP)\b", re.IGNORECASE)
SKILL_FILLER_PATTERNS: Tuple[Pattern, ...] = (
    re.compile(r"\b(?:years?|experience|proficient|familiar|knowledge)\b", re.IGNORECASE),
    re.compile(r"^(?:and|or|the|a|an)\b", re.IGNORECASE),
    re.compile(r"\d+\s*\+?\s*years?", re.IGNORECASE),
)


def find_all_dates(text: str) -> List[PatternMatch]:
    """Isolated date tokens in document order."""
    return [
        PatternMatch(text=m.group(0), start=m.start(), end=m.end())
        for m in PAIRABLE_DATE_RE.finditer(text or "")
    ]
