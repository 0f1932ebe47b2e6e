"""
Tests for skill extraction against the design vocabulary.

Run: python3 -m pytest utils/__tests__/test_skills.py -v
"""
from utils.skills import build_skills, extract_skills, filter_skills, skills_from_tags


class TestExtractSkills:

    def test_only_vocabulary_terms(self):
        assert build_skills("Senior Figma Designer needed, remote") == ["Figma"]

    def test_case_insensitive(self):
        assert extract_skills("experience with FIGMA and adobe xd") == ["Figma", "Adobe XD"]

    def test_empty(self):
        assert extract_skills(None) == []
        assert extract_skills("") == []


class TestFilterSkills:

    def test_drops_generic_terms(self):
        assert filter_skills(["Design", "Remote", "Figma", "Senior"]) == ["Figma"]

    def test_dedupes_case_insensitively(self):
        assert filter_skills(["Figma", "figma", " Figma "]) == ["Figma"]


class TestTags:

    def test_aliases_map_into_vocabulary(self):
        assert skills_from_tags(["ux", "Branding", "reactjs"]) == ["UX Design", "Brand Design", "React"]

    def test_unknown_tags_dropped(self):
        assert skills_from_tags(["digital nomad", "crypto", 42]) == []

    def test_tags_first_then_text(self):
        assert build_skills("We use Sketch daily", ["figma"]) == ["Figma", "Sketch"]
