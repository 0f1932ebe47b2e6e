"""
Tests for text helpers: HTML conversion, type/level inference, timestamps.

Run: python3 -m pytest utils/__tests__/test_text.py -v
"""
from datetime import datetime, timezone

import pytest

from utils.text import (
    company_logo_url,
    html_to_structured_text,
    normalize_experience_level,
    normalize_job_type,
    parse_experience_level,
    parse_job_type,
    parse_timestamp,
    strip_html,
)

NEW_YEAR_2024 = datetime(2024, 1, 1, tzinfo=timezone.utc)


class TestHtml:

    def test_strip_html(self):
        assert strip_html("<p>Design  <b>systems</b></p>") == "Design systems"
        assert strip_html("") == ""

    def test_structure_is_kept(self):
        text = html_to_structured_text(
            "<h2>About</h2><p>We design.</p><ul><li>Figma</li><li>Sketch</li></ul>"
        )
        assert text.startswith("## About")
        assert "We design." in text
        assert "• Figma\n• Sketch" in text

    def test_entity_encoded_feed(self):
        assert html_to_structured_text("&lt;p&gt;Hello &amp;amp; welcome&lt;/p&gt;") == "Hello & welcome"

    def test_no_runs_of_blank_lines(self):
        text = html_to_structured_text("<p>a</p><p></p><p></p><p>b</p>")
        assert "\n\n\n" not in text


class TestJobType:

    @pytest.mark.parametrize("text,expected", [
        ("Contract Product Designer", "contract"),
        ("Part-time UI Designer", "part-time"),
        ("Freelance Illustrator", "freelance"),
        ("Design Internship", "internship"),
        ("Temporary Visual Designer", "contract"),
        ("Product Designer", "full-time"),
        ("", "full-time"),
    ])
    def test_parse_job_type(self, text, expected):
        assert parse_job_type(text) == expected

    @pytest.mark.parametrize("value,expected", [
        ("FULLTIME", "full-time"),
        ("full_time", "full-time"),
        ("Contractor", "contract"),
        ("PARTTIME", "part-time"),
        ("INTERN", "internship"),
    ])
    def test_normalize_job_type(self, value, expected):
        assert normalize_job_type(value) == expected

    def test_unknown_value_falls_back_to_text(self):
        assert normalize_job_type("OTHER", "Part-time designer") == "part-time"
        assert normalize_job_type(None, "Designer") == "full-time"


class TestExperienceLevel:

    @pytest.mark.parametrize("title,expected", [
        ("Senior Product Designer", "senior"),
        ("Sr. UX Designer", "senior"),
        ("Lead Designer", "senior"),
        ("Junior Graphic Designer", "entry"),
        ("Entry Level Designer", "entry"),
        ("Staff Designer", "lead"),
        ("Principal Designer", "lead"),
        ("Product Designer", "mid"),
    ])
    def test_parse(self, title, expected):
        assert parse_experience_level(title) == expected

    def test_normalize_upstream_labels(self):
        assert normalize_experience_level("Senior") == "senior"
        assert normalize_experience_level("junior") == "entry"
        assert normalize_experience_level("Any", "Senior Designer") == "mid"
        assert normalize_experience_level(None, "Staff Designer") == "lead"


class TestTimestamps:

    @pytest.mark.parametrize("value", [
        "2024-01-01T00:00:00Z",
        "2024-01-01T00:00:00+00:00",
        "2024-01-01",
        1704067200,
        1704067200000,
        "1704067200",
        "Mon, 01 Jan 2024 00:00:00 GMT",
    ])
    def test_formats(self, value):
        assert parse_timestamp(value) == NEW_YEAR_2024

    def test_result_is_utc(self):
        parsed = parse_timestamp("2024-01-01T02:00:00+02:00")
        assert parsed == NEW_YEAR_2024
        assert parsed.tzinfo is not None

    @pytest.mark.parametrize("value", [None, "", "not a date", True, {"a": 1}])
    def test_unparseable_is_none(self, value):
        assert parse_timestamp(value) is None


class TestCompanyLogo:

    def test_clearbit_url(self):
        assert company_logo_url("Acme Inc") == "https://logo.clearbit.com/acmeinc.com"

    @pytest.mark.parametrize("name", [None, "", "Unknown Company", "!!!"])
    def test_no_logo(self, name):
        assert company_logo_url(name) is None
