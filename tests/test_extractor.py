"""
Tests for profile HTML extraction.
"""

from dataclasses import fields

from scraper.extractor import ProfileExtractor, extract_profile, COUNTER_LABELS, StatLabel
from scraper.models import ProfileCounts

from conftest import PROFILE_HTML


def test_extract_full_profile():
    record = extract_profile(PROFILE_HTML)

    assert record.profile_image_url == "/faces/javax.faces.resource/profile/440943.png"
    assert record.name == "JANE DOE"
    assert record.identifier == "SEC23AD073"
    assert record.department == "ARTIFICIAL INTELLIGENCE AND DATA SCIENCE"
    assert record.institution == "SRI SAIRAM ENGINEERING COLLEGE"
    assert record.cohort_year == "2027"
    assert record.gender == "FEMALE"
    assert record.markup_detected is True


def test_extract_counters():
    counts = extract_profile(PROFILE_HTML).counts
    assert counts == ProfileCounts(
        rank=1234, level=7, gold=12, silver=5, bronze=3, programs_solved=640,
        code_test=15, code_track=470, daily_challenge=25, daily_test=30, code_tutor=100,
    )


def test_extract_total_points():
    assert extract_profile(PROFILE_HTML).total_points == 2040


def test_extract_language_usage_skips_empty_and_zero_entries():
    record = extract_profile(PROFILE_HTML)
    assert record.language_usage == {"JAVA": 320, "PYTHON3": 250}
    assert list(record.language_usage) == ["JAVA", "PYTHON3"]


def test_extract_certificates_with_partial_fields():
    certificates = extract_profile(PROFILE_HTML).certificates
    assert len(certificates) == 2

    first, second = certificates
    assert first.title == "Python Programming Certificate"
    assert first.issued_at == "15-08-2024 10:30"
    assert first.verification_link == "https://www.skillrack.com/faces/certificate.xhtml?id=A1"

    assert second.title == "Data Structures"
    assert second.issued_at == ""
    assert second.verification_link == ""


def test_document_without_statistics_yields_defaults():
    record = extract_profile("<html><body><p>Nothing to see here</p></body></html>")
    assert record.counts == ProfileCounts()
    assert record.counts.is_empty()
    assert record.language_usage == {}
    assert record.certificates == []
    assert record.name == ""
    assert record.identifier == ""
    assert record.institution == ""
    assert record.profile_image_url is None
    assert record.total_points == 0
    assert record.markup_detected is False


def test_empty_and_missing_documents_do_not_raise():
    assert extract_profile("").counts.is_empty()
    assert extract_profile(None).counts.is_empty()
    assert extract_profile("<div class='statistic'><div class='label'>DT").counts.daily_test == 0


def test_first_matching_label_wins():
    html = """
    <div class="statistic"><div class="value">11</div><div class="label">DT</div></div>
    <div class="statistic"><div class="value">99</div><div class="label">DT</div></div>
    <div class="statistic"><div class="value">5</div><div class="label"> DC </div></div>
    """
    counts = extract_profile(html).counts
    assert counts.daily_test == 11
    assert counts.daily_challenge == 5


def test_label_matching_is_case_sensitive():
    html = '<div class="statistic"><div class="value">8</div><div class="label">Code Track</div></div>'
    assert extract_profile(html).counts.code_track == 0


def test_value_without_digits_defaults_to_zero():
    html = '<div class="statistic"><div class="value">N/A</div><div class="label">RANK</div></div>'
    record = extract_profile(html)
    assert record.counts.rank == 0
    assert record.markup_detected is True


def test_institution_requires_department_to_reappear():
    extractor = ProfileExtractor()
    text = "\n ECE\n ABC COLLEGE\n (BE 2026)\n"
    assert extractor.extract_institution(text, "ECE") == "ABC COLLEGE"
    assert extractor.extract_institution(text, "ECE.") == ""
    assert extractor.extract_institution(text, "") == ""


def test_institution_tolerates_regex_characters_in_department():
    extractor = ProfileExtractor()
    text = "\n B.E (CSE\n XYZ INSTITUTE\n (BE 2025)\n"
    assert extractor.extract_institution(text, "B.E (CSE") == "XYZ INSTITUTE"


def test_language_table_needs_second_statistics_group():
    html = """
    <div class="ui six small statistics">
      <div class="statistic"><div class="value">3</div><div class="label">JAVA</div></div>
    </div>
    """
    assert extract_profile(html).language_usage == {}


def test_counter_table_covers_every_field():
    assert set(COUNTER_LABELS) == {f.name for f in fields(ProfileCounts)}
    assert set(COUNTER_LABELS.values()) == set(StatLabel)
