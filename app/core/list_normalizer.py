"""
List normalization for free-text service answers.

Turns a section of model output into clean, display-ready bullet items:
markdown removed, boilerplate dropped, each item capitalized and ending
in sentence punctuation.
"""

import re
from typing import Iterable, List, Optional, Sequence

LIST_BOILERPLATE = ("disclaimer", "note:")

BULLET_CHARS = "-•*"

_LINK = re.compile(r"\[(.*?)\]\(.*?\)")
_HEADING_MARKS = re.compile(r"#+\s*")
_EMPHASIS = re.compile(r"\*\*|[*`_]")
_LEADING_BULLET = re.compile(r"^[-•\s]+")
_BULLET_LINE = re.compile(r"^\s*[-•*]\s")
_INLINE_BULLET = re.compile(r"\s+[-•*]\s+(?=\S)")
_SPACES = re.compile(r"[ \t]{2,}")
_ALNUM = re.compile(r"\w", re.UNICODE)
_TERMINAL = (".", "!", "?")


def strip_markdown(text: str) -> str:
    """Remove emphasis, code ticks, heading marks and link targets."""
    if not text:
        return ""
    text = _LINK.sub(r"\1", text)
    text = _HEADING_MARKS.sub("", text)
    return _EMPHASIS.sub("", text)


def is_boilerplate(text: str, patterns: Iterable[str]) -> bool:
    """Case-insensitive substring test against disclaimer-like patterns."""
    lowered = text.lower()
    return any(pattern in lowered for pattern in patterns)


def capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def ensure_terminal_punctuation(text: str) -> str:
    if text.endswith(_TERMINAL):
        return text
    return text + "."


def split_fragments(text: str) -> List[str]:
    """
    Split section text into candidate items.

    Lines are always split. A line that is itself a bullet, or that uses
    the `•` glyph, is further split where another bullet marker appears
    mid-line ("- Nausea - Headache").
    """
    fragments = []
    for line in text.splitlines():
        if _BULLET_LINE.match(line) or "•" in line:
            fragments.extend(_INLINE_BULLET.split(line))
        else:
            fragments.append(line)
    return fragments


class ListNormalizer:
    """
    Normalizes a section of free text into an ordered list of items.

    Output items are never empty, carry no markdown emphasis, never match
    a boilerplate pattern, start with a capital and (by default) end with
    `.`, `!` or `?`. Repeated items are kept in order. Running the
    normalizer over its own output returns the same list.
    """

    def __init__(
        self,
        boilerplate: Sequence[str] = LIST_BOILERPLATE,
        terminal_punctuation: bool = True
    ):
        self.boilerplate = tuple(p.lower() for p in boilerplate)
        self.terminal_punctuation = terminal_punctuation

    def normalize(self, text: Optional[str]) -> List[str]:
        """
        Normalize section text into list items.

        Args:
            text: Raw accumulated section text (may be None or empty)

        Returns:
            Cleaned items, empty when nothing survives filtering
        """
        if not text:
            return []

        items = []
        for fragment in split_fragments(text):
            item = self.clean_item(fragment)
            if item is not None:
                items.append(item)
        return items

    def clean_item(self, fragment: str) -> Optional[str]:
        """Clean one fragment, or return None when it should be dropped."""
        item = strip_markdown(fragment)
        item = _LEADING_BULLET.sub("", item)
        item = " ".join(item.split())

        if not item or not _ALNUM.search(item):
            return None
        if is_boilerplate(item, self.boilerplate):
            return None

        item = capitalize_first(item)
        if self.terminal_punctuation:
            item = ensure_terminal_punctuation(item)
        return item


def clean_paragraph(text: Optional[str]) -> Optional[str]:
    """
    Clean a free-text answer kept as a single paragraph.

    Markdown is removed, blank lines and repeated spaces collapsed and bare
    bullet lines dropped. The result is capitalized and ends in sentence
    punctuation; None when nothing is left.
    """
    if not text or not isinstance(text, str):
        return None

    cleaned = strip_markdown(text)
    cleaned = re.sub(r"\n{2,}", "\n", cleaned)
    cleaned = _SPACES.sub(" ", cleaned)

    lines = [
        line.strip() for line in cleaned.split("\n")
        if line.strip() and not re.match(r"^[-*•]\s*$", line.strip())
    ]
    cleaned = "\n".join(lines).strip()

    if not cleaned:
        return None
    return ensure_terminal_punctuation(capitalize_first(cleaned))


# Shared instances for the common cases
list_normalizer = ListNormalizer()
name_normalizer = ListNormalizer(terminal_punctuation=False)
