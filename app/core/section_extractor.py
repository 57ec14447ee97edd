"""
Section extraction for numbered, semi-structured model answers.

Splits an answer into named buckets using a caller-supplied marker table.
Numeric markers ("1.", "2.") match anywhere in a line because model output
is not reliably left-anchored; keyword markers ("Drug Overview") match at
the start of a line once numbering and emphasis are removed, and only
when the line was numbered or the keyword stands alone or before a colon.

Known fragility: a sentence that happens to contain a numeral followed by
a period ("take 1. then...") switches sections under a numeric table.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from app.core.list_normalizer import is_boilerplate, strip_markdown

DEFAULT_BOILERPLATE = ("disclaimer", "note:", "important:")

_LEADING_NUMBER = re.compile(r"^\s*\d+\s*[.)]\s*")


class MarkerStyle(str, Enum):
    """How a marker is matched against a line."""
    NUMERIC = "numeric"
    KEYWORD = "keyword"


@dataclass(frozen=True)
class SectionMarker:
    """One row of a section marker table."""

    marker: str
    label: str
    style: MarkerStyle = MarkerStyle.NUMERIC
    title: Optional[str] = None

    def match(self, line: str) -> Optional[str]:
        """
        Match a line against this marker.

        Returns the text following the marker when the line is a heading
        for this section, otherwise None.
        """
        if self.style == MarkerStyle.NUMERIC:
            position = line.lower().find(self.marker.lower())
            if position == -1:
                return None
            return line[position + len(self.marker):]

        cleaned = strip_markdown(line).strip()
        numbered = _LEADING_NUMBER.match(cleaned) is not None
        candidate = _LEADING_NUMBER.sub("", cleaned).strip()
        if not candidate.lower().startswith(self.marker.lower()):
            return None

        remainder = candidate[len(self.marker):]
        # unnumbered keyword lines are headings only as "Keyword" or "Keyword:"
        if numbered or not remainder.strip() or remainder.lstrip().startswith(":"):
            return remainder
        return None

    def heading_content(self, remainder: str) -> str:
        """
        Content written on the heading line itself.

        "Severity level: High" keeps "High"; a bare repeat of the heading
        title keeps nothing; anything else is kept whole ("1. Fever").
        """
        remainder = strip_markdown(remainder).strip()
        if ":" in remainder:
            return remainder.split(":", 1)[1].strip()
        if self.title and remainder.lower().startswith(self.title.lower()):
            return ""
        if self.style == MarkerStyle.KEYWORD:
            # the keyword itself is the title
            return ""
        return remainder


MarkerTable = Sequence[SectionMarker]


def marker_table(pairs: Sequence[Tuple[str, str]]) -> List[SectionMarker]:
    """Build a numeric marker table from plain (marker, label) pairs."""
    return [SectionMarker(marker=marker, label=label) for marker, label in pairs]


@dataclass
class ExtractedSections:
    """Section bodies plus any content found on heading lines."""

    bodies: Dict[str, str]
    inline: Dict[str, str] = field(default_factory=dict)

    def get(self, label: str) -> str:
        return self.bodies.get(label, "")

    def text_for(self, label: str) -> str:
        """Heading-line content followed by the section body."""
        parts = [self.inline.get(label, ""), self.bodies.get(label, "")]
        return "\n".join(part for part in parts if part)

    def is_empty(self) -> bool:
        return not any(self.text_for(label) for label in self.bodies)


class SectionExtractor:
    """
    Partitions raw answer text into labelled sections.

    Rules:
    - Lines are trimmed; blank lines are skipped
    - Boilerplate lines are discarded before anything else and never
      change the current section
    - The first marker (in table order) matching a line makes it a heading
    - Text before the first heading belongs to no section and is dropped
    - A repeated heading continues the same section
    """

    def __init__(
        self,
        markers: MarkerTable,
        boilerplate: Sequence[str] = DEFAULT_BOILERPLATE
    ):
        self.markers = list(markers)
        self.boilerplate = tuple(p.lower() for p in boilerplate)

    @property
    def labels(self) -> List[str]:
        seen: List[str] = []
        for marker in self.markers:
            if marker.label not in seen:
                seen.append(marker.label)
        return seen

    def extract(self, text: Optional[str]) -> Dict[str, str]:
        """
        Map every configured label to its accumulated body text.

        Labels that received no lines map to an empty string.
        """
        return self.extract_sections(text).bodies

    def extract_sections(self, text: Optional[str]) -> ExtractedSections:
        """Scan the text once, collecting bodies and heading-line content."""
        bodies: Dict[str, List[str]] = {label: [] for label in self.labels}
        inline: Dict[str, List[str]] = {label: [] for label in self.labels}
        current: Optional[str] = None

        for raw_line in (text or "").splitlines():
            line = raw_line.strip()
            if not line:
                continue
            if is_boilerplate(line, self.boilerplate):
                continue

            heading = self._match_heading(line)
            if heading is not None:
                marker, remainder = heading
                current = marker.label
                content = marker.heading_content(remainder)
                if content:
                    inline[current].append(content)
                continue

            if current is not None:
                bodies[current].append(line)

        return ExtractedSections(
            bodies={label: "\n".join(lines) for label, lines in bodies.items()},
            inline={label: "\n".join(lines) for label, lines in inline.items()},
        )

    def _match_heading(self, line: str) -> Optional[Tuple[SectionMarker, str]]:
        for marker in self.markers:
            remainder = marker.match(line)
            if remainder is not None:
                return marker, remainder
        return None
