from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional
from uuid import uuid4


SectionKind = Literal["personal", "experience", "education", "skills", "projects", "unknown"]
LocationType = Literal["city-state", "city-country", "remote", "hybrid"]
Severity = Literal["error", "warning"]
ConfidenceScore = float  # 0.0 to 1.0


def generate_id() -> str:
    """Short synthetic identifier for list entries (the only non-deterministic output)."""
    return uuid4().hex[:9]


# ===== INPUT =====

class LayoutHint(BaseModel):
    """One positioned text fragment from a layout-aware decoder (PDF)."""
    model_config = ConfigDict(frozen=True)

    value: str
    y: float = Field(..., description="Vertical position of the fragment on its page")
    page: int = 1


class RawDocument(BaseModel):
    """Decoded document handed to the engine. Immutable."""
    model_config = ConfigDict(frozen=True)

    text: str = ""
    layout_hints: Optional[List[LayoutHint]] = None

    def resolved_text(self, tolerance: float = 5.0) -> str:
        """Normalized text, rebuilt from layout hints when the decoder supplied them."""
        from resume_engine.core.text_normalization import normalize_text, text_from_layout_hints

        if self.layout_hints:
            return normalize_text(text_from_layout_hints(self.layout_hints, tolerance=tolerance))
        return normalize_text(self.text)


# ===== INTERMEDIATE =====

class Section(BaseModel):
    kind: SectionKind
    label: str = Field(..., description="Header family that matched (e.g. 'summary' for an unknown-kind section)")
    text: str
    start_line: int
    end_line: int
    confidence: float = Field(..., ge=0.0, le=1.0)


class DateRange(BaseModel):
    start: str
    end: str
    raw: str
    confidence: float = Field(..., ge=0.0, le=1.0)


class CompanyPosition(BaseModel):
    company: str = ""
    position: str = ""
    format: str = Field(..., description="Layout strategy that produced the pair")
    confidence: float = Field(..., ge=0.0, le=1.0)


class BlockLocation(BaseModel):
    value: str
    type: LocationType
    confidence: float = Field(..., ge=0.0, le=1.0)


class BulletPoint(BaseModel):
    id: str = Field(default_factory=generate_id)
    text: str


class ParsedExperienceBlock(BaseModel):
    """One candidate job entry with its independent sub-extractions."""
    raw: str
    lines: List[str] = Field(default_factory=list)
    date_range: Optional[DateRange] = None
    company_position: Optional[CompanyPosition] = None
    location: Optional[BlockLocation] = None
    bullet_points: List[BulletPoint] = Field(default_factory=list)
    confidence: float = 0.0


# ===== RECORD =====

class PersonalInfo(BaseModel):
    full_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    summary: str = ""


class Experience(BaseModel):
    id: str = Field(default_factory=generate_id)
    company: str = ""
    position: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    is_current: bool = False
    bullet_points: List[BulletPoint] = Field(default_factory=list)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class Education(BaseModel):
    id: str = Field(default_factory=generate_id)
    school: str = ""
    degree: str = ""
    graduation_year: str = ""


class Skill(BaseModel):
    id: str = Field(default_factory=generate_id)
    name: str
    category: str = "General"


class Project(BaseModel):
    id: str = Field(default_factory=generate_id)
    name: str
    link: str = ""
    description: str = ""


class ResumeRecord(BaseModel):
    personal: PersonalInfo = Field(default_factory=PersonalInfo)
    experience: List[Experience] = Field(default_factory=list)
    education: List[Education] = Field(default_factory=list)
    skills: List[Skill] = Field(default_factory=list)
    projects: List[Project] = Field(default_factory=list)


# ===== OUTCOMES =====

class ParseError(BaseModel):
    field: str
    message: str
    severity: Severity = "error"
    suggestion: Optional[str] = None


class ParseOutcome(BaseModel):
    success: bool
    record: Optional[ResumeRecord] = None
    confidence: ConfidenceScore = Field(default=0.0, ge=0.0, le=1.0)
    warnings: List[str] = Field(default_factory=list)
    errors: List[ParseError] = Field(default_factory=list)
    original_content: Optional[str] = None


class ImportResult(BaseModel):
    """Outcome of the import pipeline: decode + parse + review decision."""
    success: bool
    record: Optional[ResumeRecord] = None
    confidence: ConfidenceScore = Field(default=0.0, ge=0.0, le=1.0)
    warnings: List[str] = Field(default_factory=list)
    errors: List[ParseError] = Field(default_factory=list)
    original_content: Optional[str] = None
    parser_used: Optional[str] = None
    needs_review: bool = True


class TextParseRequest(BaseModel):
    text: str
    layout_hints: Optional[List[LayoutHint]] = None
