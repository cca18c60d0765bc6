"""
Unit tests for the shared pattern library and the title/company classifiers.
"""

import time

from resume_engine.core.classifiers import (
    classify_company,
    classify_title,
    looks_more_like_position,
)
from resume_engine.core.patterns import (
    DATE_SHAPES,
    EMAIL_RE,
    GITHUB_RE,
    PHONE_RE,
    URL_RE,
    extract_bullet_text,
    find_all_dates,
    is_date_line,
    is_location_line,
    looks_like_achievement,
    search,
)


class TestContactPatterns:
    """E-mail, phone and URL matchers."""

    def test_email_match_reports_position(self):
        m = search(EMAIL_RE, "Contact: jane.doe@example.com today")
        assert m is not None
        assert m.text == "jane.doe@example.com"
        assert m.start == 9

    def test_phone_formats(self):
        for phone in ("(555) 123-4567", "555.123.4567", "+44 20 7946 0958"):
            m = search(PHONE_RE, f"Phone {phone}")
            assert m is not None and m.text == phone, f"Expected {phone!r}, got {m}"

    def test_email_is_not_a_url(self):
        assert search(URL_RE, "jane@example.com") is None

    def test_technology_name_is_not_a_url(self):
        assert search(URL_RE, "Built with ASP.NET and C#") is None

    def test_bare_domain_url(self):
        m = search(URL_RE, "Code: github.com/jane/app")
        assert m is not None and m.text == "github.com/jane/app"

    def test_github_profile(self):
        m = search(GITHUB_RE, "Code at https://github.com/jane-doe/ledger")
        assert m is not None and m.text == "https://github.com/jane-doe"
        assert search(GITHUB_RE, "linkedin.com/in/janedoe") is None

    def test_email_scan_is_linear_on_long_runs(self):
        """A long run of word characters with no "@" must not backtrack quadratically."""
        started = time.perf_counter()
        assert EMAIL_RE.search("a" * 100000) is None
        assert time.perf_counter() - started < 0.5

    def test_email_local_part_starts_at_token_boundary(self):
        m = search(EMAIL_RE, "Email:jane.doe@example.com")
        assert m is not None and m.text == "jane.doe@example.com"


class TestDatePatterns:

    def test_shape_order(self):
        names = [shape.name for shape in DATE_SHAPES]
        assert names == [
            "month_name_range",
            "quarter_range",
            "month_present",
            "numeric_range",
            "abbrev_month_range",
            "season_range",
            "year_range",
        ]

    def test_date_line(self):
        assert is_date_line("Jan 2020 - Present")
        assert is_date_line("2016 - 2018")
        assert not is_date_line("Senior Engineer, Jan 2020 - Present")
        assert not is_date_line("Senior Engineer")

    def test_find_all_dates_in_order(self):
        dates = [d.text for d in find_all_dates("Started Jan 2019, left 03/2021")]
        assert dates == ["Jan 2019", "03/2021"]


class TestBulletsAndLocations:

    def test_bullet_markers_are_stripped(self):
        assert extract_bullet_text("• Led team") == "Led team"
        assert extract_bullet_text("1. Shipped v2") == "Shipped v2"
        assert extract_bullet_text("a) Wrote docs") == "Wrote docs"
        assert extract_bullet_text("Plain line") is None

    def test_location_lines(self):
        assert is_location_line("San Francisco, CA")
        assert is_location_line("Remote")
        assert is_location_line("Hybrid (3 days)")
        assert not is_location_line("Software Engineer")

    def test_achievement_detection(self):
        assert looks_like_achievement("Increased revenue by 25%")
        assert not looks_like_achievement("Engineer")


class TestClassifiers:
    """Classifiers return the signals that fired alongside the verdict."""

    def test_compound_senior_title(self):
        result = classify_title("Senior Software Engineer")
        assert result.is_title
        for signal in ("role_noun", "seniority_prefix", "compound_title", "short_line"):
            assert signal in result.signals, f"Missing {signal} in {result.signals}"

    def test_achievement_vetoes_title(self):
        result = classify_title("Led team of 5")
        assert not result.is_title
        assert "achievement_phrase" in result.signals

    def test_role_noun_inside_sentence_is_not_title(self):
        result = classify_title("Worked with the product manager on launches")
        assert "role_noun" in result.signals
        assert not result.is_title

    def test_executive_acronym(self):
        result = classify_title("CTO")
        assert result.is_title
        assert "executive_acronym" in result.signals

    def test_company_suffix(self):
        result = classify_company("Microsoft Corporation")
        assert result.is_company
        assert result.signals == ("company_suffix",)

    def test_title_vocabulary_vetoes_company(self):
        result = classify_company("Systems Engineer")
        assert "company_suffix" in result.signals
        assert "title_vocabulary" in result.signals
        assert not result.is_company

    def test_position_comparison(self):
        assert looks_more_like_position("Principal Engineer", "Microsoft Corporation")
        assert not looks_more_like_position("Microsoft Corporation", "Principal Engineer")
