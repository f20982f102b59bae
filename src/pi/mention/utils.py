"""Terminal text utilities: grapheme segmentation, width measurement, truncation."""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth


# ---------------------------------------------------------------------------
# Grapheme segmentation
# ---------------------------------------------------------------------------


def graphemes(text: str) -> list[str]:
    """Split *text* into user-perceived characters."""
    return list(grapheme.graphemes(text))


def last_grapheme_length(text: str) -> int:
    """Length in code points of the last grapheme of *text* (0 when empty)."""
    if not text:
        return 0
    parts = graphemes(text)
    return len(parts[-1]) if parts else 1


def first_grapheme_length(text: str) -> int:
    """Length in code points of the first grapheme of *text* (0 when empty)."""
    if not text:
        return 0
    parts = graphemes(text)
    return len(parts[0]) if parts else 1


# ---------------------------------------------------------------------------
# Width measurement
# ---------------------------------------------------------------------------

_STRIP_RE = re.compile(r"\x1b\[[0-9;]*[mGKHJ]|\x1b_[^\x07\x1b]*(?:\x07|\x1b\\)")


def _grapheme_width(g: str) -> int:
    if not g:
        return 0
    cp = ord(g[0])
    if cp < 0x20 or (0x7F <= cp <= 0x9F):
        return 0
    if len(g) > 1:
        if "\ufe0f" in g or "\u200d" in g or cp >= 0x1F000:
            return 2
        if unicodedata.category(g[0]).startswith("M"):
            return 0
    return max(_wcwidth.wcwidth(g[0]), 0)


def visible_width(text: str) -> int:
    """Visible terminal width of *text*, ignoring ANSI sequences."""
    stripped = _STRIP_RE.sub("", text)
    if stripped.isascii():
        return sum(1 for ch in stripped if ch.isprintable())
    return sum(_grapheme_width(g) for g in graphemes(stripped))


def truncate_to_width(text: str, max_width: int, ellipsis: str = "...") -> str:
    """Truncate *text* to *max_width* visible columns, appending *ellipsis*.

    ANSI sequences are only expected around, not inside, the text; callers
    style after truncating.
    """
    if max_width <= 0:
        return ""
    if visible_width(text) <= max_width:
        return text

    target = max_width - visible_width(ellipsis)
    if target <= 0:
        return ellipsis[:max_width]

    result: list[str] = []
    cols = 0
    for g in graphemes(text):
        w = _grapheme_width(g)
        if cols + w > target:
            break
        result.append(g)
        cols += w
    return "".join(result) + ellipsis


# ---------------------------------------------------------------------------
# Character classification
# ---------------------------------------------------------------------------


def is_whitespace_char(char: str) -> bool:
    """Return ``True`` if *char* is a whitespace character."""
    return char in (" ", "\t", "\n", "\r", "\f", "\v", "\u00a0")
