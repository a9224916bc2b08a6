"""Word wrapping over styled spans.

Lines break at spaces only, so a word made of several style runs (``**bold**ly``)
stays on one line. A word wider than a whole line is split between grapheme
clusters as a last resort. ``"\\n"`` inside span text forces a line break.
Spaces at a break are dropped.
"""

from __future__ import annotations

import re
from typing import Iterator, Sequence

from vaultview.render.lines import Span, push_span
from vaultview.utils import grapheme_width, split_graphemes

_SEGMENT_RE = re.compile(r"\n| +|[^ \n]+")

_WORD = "word"
_SPACE = "space"
_BREAK = "break"


def _segments(spans: Sequence[Span]) -> Iterator[tuple[str, list[Span]]]:
    """Group span text into words, space runs and hard breaks."""
    word: list[Span] = []
    for span in spans:
        for match in _SEGMENT_RE.finditer(span.text):
            seg = match.group()
            if seg[0] not in " \n":
                word.append(span.with_text(seg))
                continue
            if word:
                yield _WORD, word
                word = []
            if seg == "\n":
                yield _BREAK, []
            else:
                yield _SPACE, [span.with_text(seg)]
    if word:
        yield _WORD, word


class _LineFiller:
    """Greedy line filling state."""

    def __init__(self, first_width: int, rest_width: int) -> None:
        self.lines: list[list[Span]] = []
        self.current: list[Span] = []
        self.used = 0
        self.limit = first_width
        self.rest_width = rest_width
        self.gap: list[Span] = []
        self.gap_width = 0

    def break_line(self) -> None:
        self.lines.append(self.current)
        self.current = []
        self.used = 0
        self.gap = []
        self.gap_width = 0
        self.limit = self.rest_width

    def add_space(self, pieces: list[Span]) -> None:
        # Leading spaces of a line are dropped
        if not self.current:
            return
        for piece in pieces:
            self.gap.append(piece)
            self.gap_width += piece.width

    def add_word(self, pieces: list[Span]) -> None:
        width = sum(piece.width for piece in pieces)
        if self.current and self.used + self.gap_width + width > self.limit:
            self.break_line()

        if self.used + self.gap_width + width <= self.limit:
            for piece in self.gap:
                push_span(self.current, piece)
            for piece in pieces:
                push_span(self.current, piece)
            self.used += self.gap_width + width
            self.gap = []
            self.gap_width = 0
            return

        self._split_word(pieces)

    def _split_word(self, pieces: list[Span]) -> None:
        for piece in pieces:
            for g in split_graphemes(piece.text):
                w = grapheme_width(g)
                if self.current and self.used + w > self.limit:
                    self.break_line()
                push_span(self.current, piece.with_text(g))
                self.used += w

    def finish(self) -> list[list[Span]]:
        if self.current:
            self.lines.append(self.current)
            self.current = []
        return self.lines


def wrap_spans(
    spans: Sequence[Span], first_width: int, rest_width: int | None = None
) -> list[list[Span]]:
    """Wrap *spans* into lines of at most *first_width* / *rest_width* columns.

    The first line gets *first_width* columns and every following line
    *rest_width* (defaulting to *first_width*). Widths below 1 count as 1.
    Returns a list of span lists; empty input gives an empty list.
    """
    if rest_width is None:
        rest_width = first_width
    filler = _LineFiller(max(1, first_width), max(1, rest_width))

    for kind, pieces in _segments(spans):
        if kind == _WORD:
            filler.add_word(pieces)
        elif kind == _SPACE:
            filler.add_space(pieces)
        else:
            filler.break_line()

    return filler.finish()
