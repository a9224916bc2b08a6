"""Word and character counts shown in the status bar."""

from __future__ import annotations

MARKDOWN_SYMBOLS = "*_`<>?![]()=~#+"

_STRIP_SYMBOLS = str.maketrans("", "", MARKDOWN_SYMBOLS)


def word_count(text: str) -> int:
    """Count whitespace-separated words once Markdown symbols are removed.

    ``"- [x] Done"`` counts three words (``-``, ``x`` and ``Done``).
    """
    return len(text.translate(_STRIP_SYMBOLS).split())


def char_count(text: str) -> int:
    """Count every code point, whitespace and markup included."""
    return len(text)
