"""
Tests for personal/contact information extraction.
"""

from resume_engine.core.personal_parser import extract_personal_info


def test_contact_line_with_separators():
    text = (
        "Jane Doe\n"
        "jane.doe@example.com | (555) 123-4567 | San Francisco, CA\n"
        "linkedin.com/in/janedoe"
    )
    info = extract_personal_info(text)

    assert info.full_name == "Jane Doe"
    assert info.email == "jane.doe@example.com"
    assert info.phone == "(555) 123-4567"
    assert info.location == "San Francisco, CA"
    assert info.linkedin == "linkedin.com/in/janedoe"
    assert info.summary == ""


def test_title_line_is_not_the_name():
    info = extract_personal_info("Senior Software Engineer\nJane Doe\njane@example.com")
    assert info.full_name == "Jane Doe"


def test_city_country_location():
    info = extract_personal_info("Jane Doe\nBerlin, Germany")
    assert info.location == "Berlin, Germany"


def test_labelled_address():
    info = extract_personal_info("Jane Doe\nAddress: 12 Main Street")
    assert info.location == "12 Main Street"


def test_inline_summary_label():
    text = "Jane Doe\nSummary: Backend engineer with eight years building payment systems."
    info = extract_personal_info(text)
    assert info.summary == "Backend engineer with eight years building payment systems."


def test_contact_details_found_in_footer():
    """E-mail and phone outside the Personal section are found in the full text."""
    full_text = "Jane Doe\nEXPERIENCE\nEngineer at Acme Inc.\n\njane@example.com | 555.123.4567"
    info = extract_personal_info("Jane Doe", full_text=full_text)
    assert info.email == "jane@example.com"
    assert info.phone == "555.123.4567"


def test_empty_text():
    info = extract_personal_info("")
    assert info.full_name == ""
    assert info.email == ""


def test_github_link_is_neither_name_nor_linkedin():
    info = extract_personal_info("github.com/janedoe\nJane Doe\njane@example.com")
    assert info.full_name == "Jane Doe"
    assert info.linkedin == ""
