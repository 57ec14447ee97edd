"""
Drug interaction parsing.

Decomposes the bulleted "Interactions" section of a drug analysis into
records of (substance, severity, description, recommendation). Entries
the parser cannot read are still returned, filled with placeholders, so
that a warning is never silently lost.
"""

import re
from typing import Dict, List, Optional, Tuple

from app.core.list_normalizer import strip_markdown
from app.models.schemas import InteractionRecord, SeverityLevel

SUBSTANCE_LABEL = "Drug/Substance:"

# Sub-field label -> record attribute, in matching order
FIELD_LABELS: Tuple[Tuple[str, str], ...] = (
    (SUBSTANCE_LABEL, "substance"),
    ("Severity:", "severity"),
    ("Description:", "description"),
    ("Recommendation:", "recommendation"),
)

_BULLET = re.compile(r"^\s*(?:[-•*]|\d+[.)]\s)")
_DECORATION = re.compile(r"^(?:[-•\s]|\d+[.)]\s)+")


def normalize_severity(text: Optional[str]) -> SeverityLevel:
    """
    Map free-text severity onto the closed scale.

    "high" anywhere wins, then "low"; everything else, including explicit
    "medium"/"moderate" and missing text, is Medium.
    """
    lowered = (text or "").lower()
    if "high" in lowered:
        return SeverityLevel.HIGH
    if "low" in lowered:
        return SeverityLevel.LOW
    return SeverityLevel.MEDIUM


def match_field(line: str) -> Optional[Tuple[str, str]]:
    """
    Find the sub-field a line assigns.

    Returns (attribute, value) for the first matching label, after the
    leading bullet decoration and emphasis are removed.
    """
    content = _DECORATION.sub("", strip_markdown(line)).strip()
    for label, attribute in FIELD_LABELS:
        if content.startswith(label):
            return attribute, content[len(label):].strip()
    return None


class InteractionRecordParser:
    """
    Parses an interactions section into InteractionRecord entries.

    One bulleted entry becomes one record. Sub-fields may be written on
    indented bullet lines, plain continuation lines, or bulleted at the
    same level as the entry itself.
    """

    def parse(self, text: Optional[str]) -> List[InteractionRecord]:
        """
        Parse interaction records from section text.

        Args:
            text: Raw interactions section (may be None or empty)

        Returns:
            One record per entry, in source order
        """
        return [self.parse_block(block) for block in self.split_blocks(text)]

    def split_blocks(self, text: Optional[str]) -> List[List[str]]:
        """Group section lines into one block per interaction entry."""
        blocks: List[List[str]] = []
        current: List[str] = []
        assigned: set = set()

        for raw_line in (text or "").splitlines():
            line = raw_line.rstrip()
            if not line.strip():
                continue

            found = match_field(line)
            bulleted = _BULLET.match(line) is not None
            if not current and not bulleted and found is None:
                # introductory text before the first entry
                continue
            if current and bulleted and self._starts_entry(found, assigned):
                blocks.append(current)
                current, assigned = [], set()

            current.append(line.strip())
            if found is not None:
                assigned.add(found[0])

        if current:
            blocks.append(current)
        return blocks

    @staticmethod
    def _starts_entry(found: Optional[Tuple[str, str]], assigned: set) -> bool:
        if found is None:
            return True
        attribute = found[0]
        return attribute == "substance" or attribute in assigned

    def parse_block(self, lines: List[str]) -> InteractionRecord:
        """Build a record from one block, defaulting unread fields."""
        values: Dict[str, str] = {}
        for line in lines:
            found = match_field(line)
            if found is None:
                continue
            attribute, value = found
            values.setdefault(attribute, value)

        record = InteractionRecord()
        if values.get("substance"):
            record.substance = values["substance"]
        if "severity" in values:
            record.severity = normalize_severity(values["severity"])
        if values.get("description"):
            record.description = values["description"]
        if values.get("recommendation"):
            record.recommendation = values["recommendation"]
        return record


interaction_parser = InteractionRecordParser()
