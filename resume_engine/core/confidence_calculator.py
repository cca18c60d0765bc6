"""
Confidence scoring and review warnings for resume extraction.

Confidence is a calibrated trust score, not a probability: it grows with the number of
independent heuristic signals that agreed. Downstream consumers use it (together with the
warnings) to decide whether a record should be routed to manual review.

Confidence Scale:
  1.0   = Unmistakable layout (company suffix line directly above a compound title)
  0.9   = Very high confidence (explicit pattern, both sides disambiguated)
  0.8   = High confidence (one strong disambiguating signal)
  0.7   = Medium-high confidence (heuristic with good signals)
  0.6   = Medium confidence (positional guess, some uncertainty)
  0.5   = Low-medium confidence (ambiguous but extractable)
  <0.5  = Low confidence (should prompt for clarification)
"""

from typing import Dict, List, Optional

from resume_engine.core.schemas import (
    BlockLocation,
    CompanyPosition,
    DateRange,
    ResumeRecord,
    Section,
)


BASE_CONFIDENCE = 0.3
SECTION_WEIGHTS: Dict[str, float] = {
    "personal": 0.3,
    "experience": 0.3,
    "education": 0.2,
    "skills": 0.1,
    "projects": 0.1,
    "unknown": 0.1,
}
SECTION_SCALE = 0.3
COMPLETENESS_SCALE = 0.4
COMPLETENESS_MAX = 5.0
LOW_SECTION_CONFIDENCE = 0.6

DATE_WEIGHT = 0.3
COMPANY_POSITION_WEIGHT = 0.4
LOCATION_WEIGHT = 0.1
BULLET_STEP = 0.1
BULLET_CAP = 0.3
BLOCK_FLOOR = 0.1

MISSING_EMAIL_WARNING = "Email address not found - please verify contact information"
MISSING_NAME_WARNING = "Full name not detected - please check personal information"
MISSING_EXPERIENCE_WARNING = "No work experience found - please review experience section"
DEGRADED_MODE_WARNING = "No section headers recognized - extracted using full-text fallback"
EMPTY_EDUCATION_WARNING = "EDUCATION header found but no education entries parsed"
EMPTY_SKILLS_WARNING = "SKILLS header found but no skills parsed"


class ConfidenceCalculator:
    """Central place for all extraction confidence logic."""

    @staticmethod
    def section_header(line: str, keyword_hit: bool) -> float:
        """
        Confidence for an accepted section header line.

        base 0.5
          + 0.3 if a header keyword appears verbatim (not only via its stem)
          + 0.1 if the line is all caps
          + 0.1 if the line is short
        """
        t = line.strip()
        confidence = 0.5
        if keyword_hit:
            confidence += 0.3
        if t.isupper() and len(t) > 3:
            confidence += 0.1
        if len(t) < 40:
            confidence += 0.1
        return min(1.0, confidence)

    @staticmethod
    def experience_block(
        date_range: Optional[DateRange],
        company_position: Optional[CompanyPosition],
        location: Optional[BlockLocation],
        bullet_count: int,
    ) -> float:
        """
        Weighted combination of the block's sub-extractions.

        Date and company/position are the core of an entry, so their weights always count in
        the denominator; a missing core field therefore pulls the score down instead of being
        ignored. Location and bullets only count when present. Absent sub-extractions
        contribute nothing, so the score is never fabricated.
        """
        has_content = any([date_range, company_position, location, bullet_count > 0])
        if not has_content:
            return 0.0

        score = 0.0
        weights = DATE_WEIGHT + COMPANY_POSITION_WEIGHT
        if date_range:
            score += date_range.confidence * DATE_WEIGHT
        if company_position:
            score += company_position.confidence * COMPANY_POSITION_WEIGHT
        if location:
            score += location.confidence * LOCATION_WEIGHT
            weights += LOCATION_WEIGHT
        if bullet_count > 0:
            score += min(bullet_count * BULLET_STEP, BULLET_CAP)
            weights += BULLET_CAP

        return round(max(BLOCK_FLOOR, min(1.0, score / weights)), 4)

    @staticmethod
    def completeness(record: ResumeRecord) -> float:
        """
        Data-completeness points (max 5):
          email 1, phone 0.5, name 0.5, any experience 2 (+0.2 per entry with company,
          position and start date), any education 1
        """
        points = 0.0
        if record.personal.email:
            points += 1.0
        if record.personal.phone:
            points += 0.5
        if record.personal.full_name:
            points += 0.5
        if record.experience:
            points += 2.0
            points += 0.2 * sum(
                1 for e in record.experience if e.company and e.position and e.start_date
            )
        if record.education:
            points += 1.0
        return min(points, COMPLETENESS_MAX)

    @staticmethod
    def overall(sections: List[Section], record: ResumeRecord) -> float:
        confidence = BASE_CONFIDENCE
        for section in sections:
            confidence += section.confidence * SECTION_WEIGHTS.get(section.kind, 0.1) * SECTION_SCALE
        confidence += ConfidenceCalculator.completeness(record) / COMPLETENESS_MAX * COMPLETENESS_SCALE
        return round(max(0.0, min(1.0, confidence)), 4)

    @staticmethod
    def warnings(
        sections: List[Section],
        record: ResumeRecord,
        degraded: bool = False,
    ) -> List[str]:
        """Human-readable review warnings; each names the area that needs attention."""
        warnings: List[str] = []

        if not record.personal.email:
            warnings.append(MISSING_EMAIL_WARNING)
        if not record.personal.full_name:
            warnings.append(MISSING_NAME_WARNING)
        if not record.experience:
            warnings.append(MISSING_EXPERIENCE_WARNING)

        kinds = {s.kind for s in sections}
        if "education" in kinds and not record.education:
            warnings.append(EMPTY_EDUCATION_WARNING)
        if "skills" in kinds and not record.skills:
            warnings.append(EMPTY_SKILLS_WARNING)

        low = []
        for s in sections:
            if s.confidence < LOW_SECTION_CONFIDENCE and s.label not in low:
                low.append(s.label)
        if low:
            warnings.append(f"Some sections may need manual review: {', '.join(low)}")

        if degraded:
            warnings.append(DEGRADED_MODE_WARNING)

        return warnings
