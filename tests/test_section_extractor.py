"""
Tests for the section extractor.
"""

from app.core.prompts import DRUG_MARKERS, MEDICINE_MARKERS, SYMPTOM_MARKERS
from app.core.section_extractor import (
    MarkerStyle,
    SectionExtractor,
    SectionMarker,
    marker_table,
)


NUMERIC_TABLE = marker_table([
    ("1.", "conditions"),
    ("2.", "severity"),
    ("3.", "recommendations"),
    ("4.", "urgent"),
])


class TestNumericMarkers:
    """Numbered headings matched anywhere in a line."""

    def test_every_label_present(self):
        """Labels that received nothing map to empty strings."""
        bodies = SectionExtractor(NUMERIC_TABLE).extract("1. Conditions\n- Flu")

        assert set(bodies) == {"conditions", "severity", "recommendations", "urgent"}
        assert bodies["conditions"] == "- Flu"
        assert bodies["severity"] == ""

    def test_leading_text_dropped(self):
        """Text before the first heading belongs to no section."""
        text = "Sure, here is the analysis.\n1. Conditions\nMigraine"
        bodies = SectionExtractor(NUMERIC_TABLE).extract(text)

        assert "Sure" not in " ".join(bodies.values())
        assert bodies["conditions"] == "Migraine"

    def test_heading_text_not_in_body(self):
        bodies = SectionExtractor(NUMERIC_TABLE).extract("1. Possible conditions\nFlu\n2. Severity\nLow")

        assert bodies["conditions"] == "Flu"
        assert bodies["severity"] == "Low"

    def test_marker_found_mid_line(self):
        """Numeric markers are not anchored to the line start."""
        text = "**1. Conditions**\nFlu\nSection 3. Recommended actions\nRest"
        bodies = SectionExtractor(NUMERIC_TABLE).extract(text)

        assert bodies["conditions"] == "Flu"
        assert bodies["recommendations"] == "Rest"

    def test_first_marker_in_table_order_wins(self):
        """A line holding two markers goes to the earlier table entry."""
        bodies = SectionExtractor(NUMERIC_TABLE).extract("See 2. and 1. below\nbody")

        assert bodies["conditions"] == "body"
        assert bodies["severity"] == ""

    def test_repeated_heading_continues_section(self):
        text = "1. Conditions\nFlu\n2. Severity\nHigh\n1. Conditions\nCold"
        bodies = SectionExtractor(NUMERIC_TABLE).extract(text)

        assert bodies["conditions"] == "Flu\nCold"

    def test_blank_lines_skipped_and_trimmed(self):
        bodies = SectionExtractor(NUMERIC_TABLE).extract("1. Conditions\n\n   Flu   \n\n")

        assert bodies["conditions"] == "Flu"

    def test_boilerplate_dropped_without_changing_section(self):
        """A disclaimer containing a marker never opens a section."""
        text = "1. Conditions\nFlu\nDisclaimer: see section 3. for details\nCold"
        bodies = SectionExtractor(NUMERIC_TABLE).extract(text)

        assert bodies["conditions"] == "Flu\nCold"
        assert bodies["recommendations"] == ""

    def test_empty_and_none_input(self):
        for text in ("", None):
            sections = SectionExtractor(NUMERIC_TABLE).extract_sections(text)
            assert sections.is_empty()
            assert all(body == "" for body in sections.bodies.values())

    def test_no_heading_matched(self):
        sections = SectionExtractor(NUMERIC_TABLE).extract_sections("Just some prose without numbers")
        assert sections.is_empty()


class TestHeadingContent:
    """Content written on the heading line itself."""

    def test_content_after_numeric_marker(self):
        text = "1. Fever\n2. High\n3. Rest and hydrate\n4. Seek care if breathing worsens"
        sections = SectionExtractor(NUMERIC_TABLE).extract_sections(text)

        assert sections.text_for("conditions") == "Fever"
        assert sections.text_for("severity") == "High"
        assert sections.get("conditions") == ""

    def test_content_after_colon(self):
        sections = SectionExtractor(SYMPTOM_MARKERS).extract_sections("2. Severity level: Moderate")
        assert sections.text_for("severity") == "Moderate"

    def test_repeated_title_is_not_content(self):
        sections = SectionExtractor(SYMPTOM_MARKERS).extract_sections("1. **Possible conditions**\n- Flu")

        assert sections.inline["conditions"] == ""
        assert sections.text_for("conditions") == "- Flu"

    def test_inline_content_precedes_body(self):
        sections = SectionExtractor(NUMERIC_TABLE).extract_sections("1. Fever\nCough")
        assert sections.text_for("conditions") == "Fever\nCough"


class TestKeywordMarkers:
    """Keyword headings matched at the start of a cleaned line."""

    def test_numbered_bold_headings(self):
        text = (
            "**1. Drug Overview:** Pain reliever.\n"
            "**2. Active Ingredients:**\n"
            "- Ibuprofen\n"
            "## Side Effects\n"
            "- Nausea"
        )
        sections = SectionExtractor(DRUG_MARKERS).extract_sections(text)

        assert sections.text_for("overview") == "Pain reliever."
        assert sections.get("ingredients") == "- Ibuprofen"
        assert sections.get("side_effects") == "- Nausea"

    def test_keyword_is_case_insensitive(self):
        sections = SectionExtractor(DRUG_MARKERS).extract_sections("COMMON USES\n- Headache")
        assert sections.get("uses") == "- Headache"

    def test_keyword_must_lead_the_line(self):
        """A keyword in the middle of a sentence is ordinary body text."""
        text = "Precautions\n- Check for interactions with alcohol"
        sections = SectionExtractor(DRUG_MARKERS).extract_sections(text)

        assert sections.get("precautions") == "- Check for interactions with alcohol"
        assert sections.get("interactions") == ""

    def test_bulleted_line_starting_with_keyword_is_body(self):
        text = (
            "Warnings and precautions:\n"
            "* Side effects are more likely in the elderly\n"
            "* Avoid alcohol"
        )
        sections = SectionExtractor(MEDICINE_MARKERS).extract_sections(text)

        assert sections.get("warnings") == (
            "* Side effects are more likely in the elderly\n* Avoid alcohol"
        )
        assert sections.get("side_effects") == ""

    def test_plain_line_starting_with_keyword_is_body(self):
        text = "Drug Overview:\nAn NSAID.\nInteractions with alcohol are common."
        sections = SectionExtractor(DRUG_MARKERS).extract_sections(text)

        assert sections.get("overview") == "An NSAID.\nInteractions with alcohol are common."
        assert sections.get("interactions") == ""

    def test_unnumbered_heading_needs_colon_or_nothing_after(self):
        marker = SectionMarker("Side effects", "side_effects", MarkerStyle.KEYWORD)

        assert marker.match("Side effects") == ""
        assert marker.match("**Side effects:** rare") == ": rare"
        assert marker.match("3. Side effects include rash") == " include rash"
        assert marker.match("* Side effects are rare") is None

    def test_custom_table(self):
        markers = [SectionMarker("Summary", "summary", MarkerStyle.KEYWORD)]
        extractor = SectionExtractor(markers, boilerplate=("ignore me",))

        bodies = extractor.extract("Summary\nkeep\nplease ignore me\nDisclaimer kept")

        assert extractor.labels == ["summary"]
        assert bodies["summary"] == "keep\nDisclaimer kept"
