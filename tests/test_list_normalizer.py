"""
Tests for list normalization.
"""

import pytest

from app.core.list_normalizer import (
    ListNormalizer,
    clean_paragraph,
    list_normalizer,
    name_normalizer,
    split_fragments,
    strip_markdown,
)


class TestStripMarkdown:
    """Test markdown removal."""

    @pytest.mark.parametrize("raw,expected", [
        ("**Bold** text", "Bold text"),
        ("*italic* and `code`", "italic and code"),
        ("## Heading", "Heading"),
        ("See [the leaflet](https://example.com/leaflet)", "See the leaflet"),
        ("", ""),
    ])
    def test_strip(self, raw, expected):
        assert strip_markdown(raw) == expected


class TestSplitFragments:
    """Test splitting section text into candidate items."""

    def test_lines_always_split(self):
        assert split_fragments("a\nb") == ["a", "b"]

    def test_inline_bullets_split_on_bullet_lines(self):
        assert split_fragments("- Nausea - Headache") == ["- Nausea", "Headache"]

    def test_dot_glyph_lines_split(self):
        assert split_fragments("Nausea • Headache • Rash") == ["Nausea", "Headache", "Rash"]

    def test_hyphenated_prose_not_split(self):
        """Dashes inside a plain sentence are kept."""
        line = "Take 1-2 tablets - with water"
        assert split_fragments(line) == [line]


class TestListNormalizer:
    """Test list item cleanup."""

    def test_basic_items(self):
        text = "- rest well\n* **drink** fluids\n• avoid alcohol"
        assert list_normalizer.normalize(text) == [
            "Rest well.",
            "Drink fluids.",
            "Avoid alcohol.",
        ]

    def test_existing_terminal_punctuation_kept(self):
        assert list_normalizer.normalize("- Call a doctor!\n- Is it serious?") == [
            "Call a doctor!",
            "Is it serious?",
        ]

    def test_boilerplate_dropped(self):
        text = "- Rest\nDisclaimer: not medical advice\n- NOTE: ask your doctor\n- Hydrate"
        assert list_normalizer.normalize(text) == ["Rest.", "Hydrate."]

    def test_decoration_only_lines_dropped(self):
        assert list_normalizer.normalize("-\n•\n***\n- Sleep") == ["Sleep."]

    def test_whitespace_collapsed(self):
        assert list_normalizer.normalize("-   take   with   food  ") == ["Take with food."]

    def test_duplicates_preserved_in_order(self):
        assert list_normalizer.normalize("- Rest\n- Hydrate\n- Rest") == ["Rest.", "Hydrate.", "Rest."]

    def test_empty_input(self):
        assert list_normalizer.normalize("") == []
        assert list_normalizer.normalize(None) == []

    def test_idempotent(self):
        """Normalizing already clean output changes nothing."""
        raw = "- **fever** - chills\n• muscle aches\n- Call 112 if confused!\nNote: general info"
        once = list_normalizer.normalize(raw)
        twice = list_normalizer.normalize("\n".join(once))

        assert once == twice
        assert once == ["Fever.", "Chills.", "Muscle aches.", "Call 112 if confused!"]

    def test_items_satisfy_invariants(self):
        raw = "1) *first* item\n- `second`\n## third\n- disclaimer applies"
        for item in list_normalizer.normalize(raw):
            assert item
            assert item[0] == item[0].upper()
            assert item.endswith((".", "!", "?"))
            assert not any(mark in item for mark in ("*", "`", "#"))
            assert "disclaimer" not in item.lower()

    def test_without_terminal_punctuation(self):
        assert name_normalizer.normalize("- influenza\n- common cold") == ["Influenza", "Common cold"]

    def test_custom_boilerplate(self):
        normalizer = ListNormalizer(boilerplate=("sponsored",))
        assert normalizer.normalize("- Rest\n- Sponsored link\n- Note: keep") == ["Rest.", "Note: keep."]


class TestCleanParagraph:
    """Test paragraph cleanup."""

    def test_cleans_markdown_and_spacing(self):
        text = "**ibuprofen**   is an  NSAID\n\n\n-\nused for pain"
        assert clean_paragraph(text) == "Ibuprofen is an NSAID\nused for pain."

    def test_empty(self):
        assert clean_paragraph("") is None
        assert clean_paragraph(None) is None
        assert clean_paragraph("**\n-\n") is None
