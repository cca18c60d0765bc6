"""
Tests for experience block splitting and per-block extraction.

Covers the common layouts: "Title at Company", "Title | Company | Location",
company line followed by title line, and mixed bullet glyphs.
"""

from resume_engine.core import experience_extractor
from resume_engine.core.experience_extractor import (
    extract_date_range,
    extract_experience,
    parse_experience_block,
)
from resume_engine.core.experience_splitter import split_experience_blocks


def test_title_at_company_with_bullet():
    """Senior title 'at' company with a present-tense date range."""
    text = "Senior Software Engineer at Google Inc.\nJan 2020 - Present\n• Led team of 5"
    experiences = extract_experience(text)

    assert len(experiences) == 1
    exp = experiences[0]
    assert exp.company == "Google Inc."
    assert exp.position == "Senior Software Engineer"
    assert exp.start_date == "Jan 2020"
    assert exp.end_date == "Present"
    assert exp.is_current is True
    assert [b.text for b in exp.bullet_points] == ["Led team of 5"]
    assert exp.confidence >= 0.6, f"Expected confident block, got {exp.confidence}"


def test_separator_line_with_full_month_names():
    text = "Principal Engineer | Microsoft Corporation\nMarch 2019 - December 2021"
    block = parse_experience_block(text)

    assert block.company_position.company == "Microsoft Corporation"
    assert block.company_position.position == "Principal Engineer"
    assert block.company_position.format == "separator"
    assert block.date_range.start == "March 2019"
    assert block.date_range.end == "December 2021"

    exp = extract_experience(text)[0]
    assert exp.is_current is False


def test_separator_line_with_location_segment():
    """A location segment is dropped from the company/position parts and reported as location."""
    text = "Senior Engineer | Acme Inc. | Austin, TX\nJun 2018 - Dec 2019\n• Improved latency by 40%"
    exp = extract_experience(text)[0]

    assert exp.company == "Acme Inc."
    assert exp.position == "Senior Engineer"
    assert exp.location == "Austin, TX"
    assert abs(exp.confidence - 0.75) < 1e-4, f"Got {exp.confidence}"


def test_company_line_then_compound_title():
    text = "Acme Technologies\nSenior Software Engineer\nJan 2019 - Present"
    block = parse_experience_block(text)

    assert block.company_position.company == "Acme Technologies"
    assert block.company_position.position == "Senior Software Engineer"
    assert block.company_position.format == "two_line"
    assert block.company_position.confidence == 1.0


def test_entries_sorted_most_recent_first():
    text = """Junior Developer at Alpha Inc.
Jan 2014 - Dec 2016
• Built internal tools
Staff Engineer at Gamma LLC
Mar 2019 - Present
• Led platform migration
Software Engineer at Beta Corp
Feb 2017 - Feb 2019
• Shipped payments service"""

    blocks = split_experience_blocks(text)
    assert len(blocks) == 3, f"Expected 3 blocks, got {blocks}"

    companies = [e.company for e in extract_experience(text)]
    assert companies == ["Gamma LLC", "Beta Corp", "Alpha Inc."]


def test_bare_title_has_low_confidence():
    """A lone title line is kept as a position but scores near the floor."""
    experiences = extract_experience("Software Engineer")

    assert len(experiences) == 1
    assert experiences[0].position == "Software Engineer"
    assert experiences[0].company == ""
    assert experiences[0].confidence <= 0.3


def test_mixed_bullet_glyphs_keep_order():
    text = (
        "Engineer at Acme Inc.\n"
        "Jan 2020 - Present\n"
        "• Designed the billing API\n"
        "▪ Reduced costs by 20%\n"
        "- Mentored three interns\n"
        "→ Automated deployments\n"
        "○ Wrote runbooks for on-call"
    )
    exp = extract_experience(text)[0]

    assert [b.text for b in exp.bullet_points] == [
        "Designed the billing API",
        "Reduced costs by 20%",
        "Mentored three interns",
        "Automated deployments",
        "Wrote runbooks for on-call",
    ]
    assert len({b.id for b in exp.bullet_points}) == 5


def test_date_shapes():
    cases = {
        "January 2020 - March 2021": ("January 2020", "March 2021", 0.9),
        "Q1 2020 - Q3 2021": ("Q1 2020", "Q3 2021", 0.8),
        "01/2020 - 03/2022": ("01/2020", "03/2022", 0.6),
        "Summer 2019 - Fall 2020": ("Summer 2019", "Fall 2020", 0.7),
        "2016 - 2018": ("2016", "2018", 0.65),
    }
    for text, (start, end, confidence) in cases.items():
        dr = extract_date_range(text)
        assert dr is not None, f"No date range for {text!r}"
        assert (dr.start, dr.end, dr.confidence) == (start, end, confidence), f"{text!r} -> {dr}"


def test_isolated_dates_are_paired():
    dr = extract_date_range("Started Jan 2019\nLeft Mar 2021")
    assert dr.start == "Jan 2019"
    assert dr.end == "Mar 2021"
    assert dr.confidence == 0.5


def test_no_dates():
    assert extract_date_range("Software Engineer") is None


def test_failing_block_does_not_drop_others(monkeypatch):
    """A failure inside one block is logged and the remaining blocks are still returned."""
    text = """Staff Engineer at Gamma LLC
Mar 2019 - Present
• Led platform migration
Software Engineer at Beta Corp
Feb 2017 - Feb 2019
• Shipped payments service"""

    original = experience_extractor.parse_experience_block

    def flaky(raw):
        if "Beta" in raw:
            raise RuntimeError("boom")
        return original(raw)

    monkeypatch.setattr(experience_extractor, "parse_experience_block", flaky)
    experiences = extract_experience(text)

    assert [e.company for e in experiences] == ["Gamma LLC"]


def test_stray_separators_trimmed():
    exp = extract_experience("Data Analyst — Initech Inc. |\n2015 - 2017")[0]
    assert exp.company == "Initech Inc."
    assert exp.position == "Data Analyst"
