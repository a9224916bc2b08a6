"""Styled terminal lines produced by the renderer.

A :class:`StyledLine` is a tuple of :class:`Span` objects. Each span keeps the
inline styles it was rendered from and the terminal attributes they resolved
to, so a compositor can either paint the attributes directly or serialise the
line with :meth:`StyledLine.to_ansi`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterator

from vaultview.markdown.nodes import NO_STYLE
from vaultview.utils import take_columns, visible_width

# ---------------------------------------------------------------------------
# ANSI helpers
# ---------------------------------------------------------------------------

_RESET = "\x1b[0m"
_BOLD = "\x1b[1m"
_DIM = "\x1b[2m"
_ITALIC = "\x1b[3m"
_UNDERLINE = "\x1b[4m"
_STRIKETHROUGH = "\x1b[9m"


# ---------------------------------------------------------------------------
# TextAttrs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TextAttrs:
    """Resolved terminal attributes of a span.

    ``fg`` and ``bg`` hold complete SGR sequences (``"\\x1b[38;5;75m"``) or
    ``None`` for the terminal default.
    """

    fg: str | None = None
    bg: str | None = None
    bold: bool = False
    dim: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False

    def sgr(self) -> str:
        """Return the escape sequence that switches these attributes on."""
        parts: list[str] = []
        if self.fg:
            parts.append(self.fg)
        if self.bg:
            parts.append(self.bg)
        if self.bold:
            parts.append(_BOLD)
        if self.dim:
            parts.append(_DIM)
        if self.italic:
            parts.append(_ITALIC)
        if self.underline:
            parts.append(_UNDERLINE)
        if self.strikethrough:
            parts.append(_STRIKETHROUGH)
        return "".join(parts)

    def merge(self, **changes: object) -> TextAttrs:
        return replace(self, **changes)


PLAIN_ATTRS = TextAttrs()

# ---------------------------------------------------------------------------
# Span
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Span:
    text: str
    attrs: TextAttrs = PLAIN_ATTRS
    styles: frozenset = NO_STYLE

    @property
    def width(self) -> int:
        return visible_width(self.text)

    def with_text(self, text: str) -> Span:
        return Span(text, self.attrs, self.styles)

    def same_style(self, other: Span) -> bool:
        return self.attrs == other.attrs and self.styles == other.styles


def push_span(spans: list[Span], span: Span) -> None:
    """Append *span*, merging it into the last span when styles match."""
    if not span.text:
        return
    if spans and spans[-1].same_style(span):
        spans[-1] = spans[-1].with_text(spans[-1].text + span.text)
    else:
        spans.append(span)


# ---------------------------------------------------------------------------
# StyledLine
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StyledLine:
    """One terminal row of styled spans."""

    spans: tuple[Span, ...] = ()

    def __iter__(self) -> Iterator[Span]:
        return iter(self.spans)

    @property
    def width(self) -> int:
        return sum(span.width for span in self.spans)

    @property
    def plain(self) -> str:
        return "".join(span.text for span in self.spans)

    def clip(self, width: int) -> StyledLine:
        """Return the line cut to at most *width* columns."""
        if self.width <= width:
            return self
        kept: list[Span] = []
        remaining = max(width, 0)
        for span in self.spans:
            if remaining <= 0:
                break
            head, cols = take_columns(span.text, remaining)
            if head:
                kept.append(span.with_text(head))
            remaining -= cols
            if cols < span.width:
                break
        return StyledLine(tuple(kept))

    def to_ansi(self) -> str:
        parts: list[str] = []
        for span in self.spans:
            sgr = span.attrs.sgr()
            if sgr:
                parts.append(f"{sgr}{span.text}{_RESET}")
            else:
                parts.append(span.text)
        return "".join(parts)
