"""Terminal text utilities: width measurement, grapheme handling, clipping.

Provides functions for measuring the visible terminal width of text, splitting
text into grapheme clusters, clipping text to a column budget and removing
control sequences that would corrupt the rendered output.
"""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth

# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

_STRIP_RE = re.compile(
    r"\x1b\[[0-9;]*[mGKHJ]"        # CSI
    r"|\x1b\]8;;[^\x07]*\x07"       # OSC 8
    r"|\x1b_[^\x07\x1b]*(?:\x07|\x1b\\)"  # APC
)

# C0 / C1 control characters other than tab and newline
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b-\x1f\x7f-\x9f]")

TAB_WIDTH = 3
_TAB = " " * TAB_WIDTH

# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


# ---------------------------------------------------------------------------
# Grapheme width
# ---------------------------------------------------------------------------


def split_graphemes(text: str) -> list[str]:
    """Split *text* into user-perceived characters (grapheme clusters)."""
    return list(grapheme.graphemes(text))


def grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster.

    Rules:
    1. Zero-width characters (control, combining marks, etc.) -> 0
    2. Emoji (multi-codepoint, contains VS16 U+FE0F, ZWJ sequences, etc.) -> 2
    3. Otherwise delegate to wcwidth for the first meaningful codepoint.
    """
    if not g:
        return 0

    # Single codepoint fast path
    if len(g) == 1:
        cp = ord(g)
        if g == "\t":
            return TAB_WIDTH
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    codepoints = list(g)

    for ch in codepoints:
        cp = ord(ch)
        if cp == 0xFE0F:  # VS16
            return 2
        if cp == 0x200D:  # ZWJ
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF:  # Skin tone modifiers
            return 2
        if 0x1F1E6 <= cp <= 0x1F1FF:  # Regional indicators
            return 2

    first_cp = ord(codepoints[0])
    if first_cp >= 0x1F000:
        return 2
    if 0x2600 <= first_cp <= 0x27BF:
        return 2

    cat = unicodedata.category(codepoints[0])
    if cat.startswith("M") or cat == "Cf":
        return 0

    return max(_wcwidth.wcwidth(codepoints[0]), 0)


# ---------------------------------------------------------------------------
# visible_width
# ---------------------------------------------------------------------------


def visible_width(text: str) -> int:
    """Calculate the visible terminal width of *text*.

    * Strips ANSI escape sequences.
    * Treats tabs as 3 spaces.
    * Uses a fast ASCII path when possible.
    * Caches results for non-ASCII strings.
    """
    if not text:
        return 0

    stripped = _STRIP_RE.sub("", text)
    if not stripped:
        return 0

    stripped = stripped.replace("\t", _TAB)

    if stripped.isascii() and stripped.isprintable():
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    total = 0
    for g in grapheme.graphemes(stripped):
        total += grapheme_width(g)

    return _cache_width(stripped, total)


def sanitize_text(text: str) -> str:
    """Make document text safe to paint: expand tabs, drop control characters.

    Newlines are kept; callers decide what a newline means.
    """
    if not text:
        return text
    return _CONTROL_RE.sub("", text.replace("\t", _TAB))


# ---------------------------------------------------------------------------
# Column clipping
# ---------------------------------------------------------------------------


def take_columns(text: str, max_cols: int) -> tuple[str, int]:
    """Return the longest grapheme prefix of *text* fitting in *max_cols*.

    Wide characters are never split; the second element is the width of the
    returned prefix, which may be one column short of *max_cols* when a wide
    character did not fit.
    """
    if max_cols <= 0 or not text:
        return ("", 0)

    if text.isascii() and text.isprintable():
        head = text[:max_cols]
        return (head, len(head))

    parts: list[str] = []
    cols = 0
    for g in grapheme.graphemes(text):
        w = grapheme_width(g)
        if cols + w > max_cols:
            break
        parts.append(g)
        cols += w
    return ("".join(parts), cols)


def pad_to_width(text: str, width: int) -> str:
    """Right-pad *text* with spaces to exactly *width* columns (clipping first)."""
    clipped, cols = take_columns(text, width)
    return clipped + " " * (width - cols)

