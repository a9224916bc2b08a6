"""Terminal renderer -- lays out a document tree as width-bounded styled lines.

``render(nodes, width)`` returns a :class:`RenderedLines`, which re-runs the
layout lazily each time it is iterated. Layout walks the tree with an explicit
work stack, so nesting depth is limited by memory rather than by the Python
call stack.

Every line starts with the prefixes ("gutters") of the containers it sits
in. A block quote gutter is ``"┃" * depth + " "``; a quote directly inside
another quote deepens the existing gutter instead of adding a second one. A
list item gutter shows the item marker on the item's first line and a fixed
two-column indent on every later line.
"""

from __future__ import annotations

import itertools
import logging
from functools import lru_cache
from typing import Iterable, Iterator, Sequence

from vaultview.markdown.nodes import (
    BlockQuote,
    CodeBlock,
    Heading,
    Link,
    ListBlock,
    ListItem,
    Node,
    Paragraph,
    StyledText,
    Stylized,
    TextNode,
)
from vaultview.render.lines import PLAIN_ATTRS, Span, StyledLine, TextAttrs, push_span
from vaultview.render.theme import (
    BULLET_MARKER,
    CALLOUT_TITLES,
    CHECKED_BOX,
    CODE_FRAME,
    QUOTE_MARKER,
    UNCHECKED_BOX,
    MarkdownTheme,
    heading_style,
)
from vaultview.render.wrap import wrap_spans
from vaultview.stylized_text import FontVariant, stylize
from vaultview.utils import pad_to_width, sanitize_text, visible_width

logger = logging.getLogger(__name__)

CONTINUATION_INDENT = "  "
CONTINUATION_INDENT_WIDTH = len(CONTINUATION_INDENT)
_INDENT_SPAN = Span(CONTINUATION_INDENT)

# ---------------------------------------------------------------------------
# Gutters
# ---------------------------------------------------------------------------


@lru_cache(maxsize=256)
def quote_prefix(depth: int) -> str:
    """Prefix string of a block quote nested *depth* levels deep."""
    return QUOTE_MARKER * depth + " "


class _QuoteGutter:
    __slots__ = ("depth", "span", "width")

    def __init__(self, depth: int, attrs: TextAttrs) -> None:
        self.depth = depth
        self.span = Span(quote_prefix(depth), attrs)
        self.width = depth + 1

    def first_width(self) -> int:
        return self.width

    def rest_width(self) -> int:
        return self.width

    def take(self) -> list[Span]:
        return [self.span]


class _MarkerGutter:
    """Shows *marker* on the first line it prefixes, then the indent."""

    __slots__ = ("marker", "marker_width", "used")

    def __init__(self, marker: list[Span]) -> None:
        self.marker = marker
        self.marker_width = sum(span.width for span in marker)
        self.used = False

    def first_width(self) -> int:
        return CONTINUATION_INDENT_WIDTH if self.used else self.marker_width

    def rest_width(self) -> int:
        return CONTINUATION_INDENT_WIDTH

    def take(self) -> list[Span]:
        if self.used:
            return [_INDENT_SPAN]
        self.used = True
        return self.marker


Gutters = tuple  # tuple[_QuoteGutter | _MarkerGutter, ...]

# ---------------------------------------------------------------------------
# Work items
# ---------------------------------------------------------------------------

_NODE = 0  # (_NODE, node, gutters, separator_base | None)
_ITEM = 1  # (_ITEM, item, gutters)
_QUOTE_END = 2  # (_QUOTE_END, gutters, start_count)
_MARKER_END = 3  # (_MARKER_END, marker_gutter, gutters)


# ---------------------------------------------------------------------------
# RenderedLines
# ---------------------------------------------------------------------------


class RenderedLines:
    """Lazy, restartable sequence of rendered lines.

    Each iteration lays the document out again from the start. ``total_height``
    counts the lines one iteration yields and is computed once.
    """

    def __init__(
        self, nodes: Sequence[Node], width: int, theme: MarkdownTheme | None = None
    ) -> None:
        self._nodes = list(nodes)
        self._width = max(1, int(width))
        self._theme = theme or MarkdownTheme()
        self._height: int | None = None

    @property
    def width(self) -> int:
        return self._width

    def __iter__(self) -> Iterator[StyledLine]:
        return _Layout(self._width, self._theme).run(self._nodes)

    @property
    def total_height(self) -> int:
        if self._height is None:
            self._height = sum(1 for _ in self)
        return self._height

    def __len__(self) -> int:
        return self.total_height

    def window(self, offset: int, height: int) -> list[StyledLine]:
        """Return up to *height* lines starting at line *offset*."""
        start = max(0, offset)
        stop = start + max(0, height)
        return list(itertools.islice(iter(self), start, stop))

    def __repr__(self) -> str:
        return f"RenderedLines(nodes={len(self._nodes)}, width={self._width})"


def render(
    nodes: Iterable[Node], width: int, theme: MarkdownTheme | None = None
) -> RenderedLines:
    """Lay out *nodes* for a viewport *width* columns wide."""
    return RenderedLines(list(nodes), width, theme)


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------


class _Layout:
    """One pass over the tree. Not reusable; :class:`RenderedLines` makes a new one."""

    def __init__(self, width: int, theme: MarkdownTheme) -> None:
        self.width = width
        self.theme = theme
        self.emitted = 0
        self.pending: Gutters | None = None

    def run(self, nodes: list[Node]) -> Iterator[StyledLine]:
        stack: list[tuple] = [(_NODE, node, (), 0) for node in reversed(nodes)]

        while stack:
            item = stack.pop()
            tag = item[0]

            if tag == _QUOTE_END:
                _, gutters, start = item
                # A separator requested inside the quote must not leak out of it
                if self.pending is gutters:
                    self.pending = None
                # An empty quote still shows its marker
                if self.emitted == start:
                    yield from self._emit(gutters, [])
                continue

            if tag == _MARKER_END:
                _, marker, gutters = item
                if not marker.used:
                    yield from self._emit(gutters, [])
                continue

            if tag == _ITEM:
                _, list_item, gutters = item
                children = list_item.children if isinstance(list_item, ListItem) else [list_item]
                stack.append((_MARKER_END, gutters[-1], gutters))
                for child in reversed(children):
                    stack.append((_NODE, child, gutters, None))
                continue

            _, node, gutters, separator_base = item
            if separator_base is not None and self.emitted > separator_base:
                self.pending = gutters

            if isinstance(node, Paragraph):
                yield from self._text_block(gutters, self._inline(node.text, self._base_attrs()))
            elif isinstance(node, Heading):
                yield from self._heading(node, gutters)
            elif isinstance(node, CodeBlock):
                yield from self._code_block(node, gutters)
            elif isinstance(node, TextNode):
                yield from self._text_block(gutters, self._plain(node.text))
            elif isinstance(node, BlockQuote):
                yield from self._block_quote(node, gutters, stack)
            elif isinstance(node, ListBlock):
                self._push_list(node.items, node.ordered, node.start_index, gutters, stack)
            elif isinstance(node, ListItem):
                self._push_list([node], False, None, gutters, stack)
            else:
                yield from self._unknown(node, gutters)

    # -- emission -----------------------------------------------------------

    def _emit(self, gutters: Gutters, body: list[Span]) -> list[StyledLine]:
        out: list[StyledLine] = []
        if self.pending is not None:
            out.append(self._line(self.pending, []))
            self.pending = None
        out.append(self._line(gutters, body))
        self.emitted += len(out)
        return out

    def _line(self, gutters: Gutters, body: list[Span]) -> StyledLine:
        spans: list[Span] = []
        for gutter in gutters:
            spans.extend(gutter.take())
        spans.extend(body)
        return StyledLine(tuple(spans)).clip(self.width)

    def _available(self, gutters: Gutters) -> tuple[int, int]:
        first = self.width - sum(g.first_width() for g in gutters)
        rest = self.width - sum(g.rest_width() for g in gutters)
        return max(1, first), max(1, rest)

    def _text_block(self, gutters: Gutters, spans: list[Span]) -> list[StyledLine]:
        first, rest = self._available(gutters)
        out: list[StyledLine] = []
        for body in wrap_spans(spans, first, rest):
            out.extend(self._emit(gutters, body))
        return out

    # -- blocks -------------------------------------------------------------

    def _heading(self, node: Heading, gutters: Gutters) -> list[StyledLine]:
        style = heading_style(node.level)
        color = self.theme.heading_color
        glyph = _MarkerGutter([Span(style.glyph + " ", TextAttrs(fg=color))])
        attrs = TextAttrs(fg=color, bold=style.bold, underline=style.underline)
        spans = self._inline(node.text, attrs, style.variant)

        inner = (*gutters, glyph)
        out = self._text_block(inner, spans)
        if not out:
            out = self._emit(inner, [])
        return out

    def _code_block(self, node: CodeBlock, gutters: Gutters) -> list[StyledLine]:
        theme = self.theme
        frame_attrs = TextAttrs(fg=theme.code_frame_color)
        code_attrs = TextAttrs(fg=theme.code_fg, bg=theme.code_bg)
        out: list[StyledLine] = []

        avail, _rest = self._available(gutters)
        if node.language:
            label = f"{CODE_FRAME * 2} {sanitize_text(node.language)} "
            top = label + CODE_FRAME * max(0, avail - visible_width(label))
        else:
            top = CODE_FRAME * avail
        out.extend(self._emit(gutters, [Span(top, frame_attrs)]))

        _first, avail = self._available(gutters)
        for code_line in node.lines:
            text = pad_to_width(sanitize_text(code_line), avail)
            out.extend(self._emit(gutters, [Span(text, code_attrs)]))

        out.extend(self._emit(gutters, [Span(CODE_FRAME * avail, frame_attrs)]))
        return out

    def _block_quote(
        self, node: BlockQuote, gutters: Gutters, stack: list[tuple]
    ) -> list[StyledLine]:
        theme = self.theme
        color = theme.callout_color(node.kind) if node.kind else theme.quote_color
        attrs = TextAttrs(fg=color)

        if gutters and isinstance(gutters[-1], _QuoteGutter):
            inner = (*gutters[:-1], _QuoteGutter(gutters[-1].depth + 1, attrs))
        else:
            inner = (*gutters, _QuoteGutter(1, attrs))

        start = self.emitted
        out: list[StyledLine] = []
        if node.kind:
            title = CALLOUT_TITLES.get(node.kind, node.kind.title())
            out.extend(self._emit(inner, [Span(title, TextAttrs(fg=color, bold=True))]))

        stack.append((_QUOTE_END, inner, start))
        base = self.emitted
        for child in reversed(node.children):
            stack.append((_NODE, child, inner, base))
        return out

    def _push_list(
        self,
        items: Sequence[ListItem],
        ordered: bool,
        start_index: int | None,
        gutters: Gutters,
        stack: list[tuple],
    ) -> None:
        theme = self.theme
        marker_attrs = TextAttrs(fg=theme.list_marker_color)
        first_number = start_index if start_index is not None else 1

        work = []
        for idx, list_item in enumerate(items):
            marker: list[Span] = []
            if ordered:
                marker.append(Span(f"{first_number + idx}. ", marker_attrs))
            task = list_item.task if isinstance(list_item, ListItem) else None
            if task is not None:
                if task == "unchecked":
                    marker.append(Span(UNCHECKED_BOX, TextAttrs(fg=theme.checkbox_color)))
                else:
                    marker.append(Span(CHECKED_BOX, TextAttrs(fg=theme.checked_color)))
            elif not ordered:
                marker.append(Span(BULLET_MARKER, marker_attrs))
            work.append((_ITEM, list_item, (*gutters, _MarkerGutter(marker))))

        stack.extend(reversed(work))

    def _unknown(self, node: object, gutters: Gutters) -> list[StyledLine]:
        text = getattr(node, "text", None)
        if isinstance(text, StyledText):
            text = text.text
        if not isinstance(text, str) or not text:
            logger.debug("skipping unrenderable node %r", type(node).__name__)
            return []
        logger.debug("rendering unknown node %r as plain text", type(node).__name__)
        return self._text_block(gutters, self._plain(text))

    # -- inline -------------------------------------------------------------

    def _base_attrs(self) -> TextAttrs:
        return TextAttrs(fg=self.theme.text_color) if self.theme.text_color else PLAIN_ATTRS

    def _plain(self, text: str) -> list[Span]:
        return [Span(sanitize_text(text), self._base_attrs())]

    def _inline(
        self, text: StyledText, base: TextAttrs, variant: FontVariant | None = None
    ) -> list[Span]:
        """Resolve style runs into spans, appending link URLs where shown."""
        theme = self.theme
        spans: list[Span] = []
        link: Link | None = None
        link_text: list[str] = []

        for run in text.runs:
            run_link = next((s for s in run.styles if isinstance(s, Link)), None)
            if run_link != link:
                self._close_link(spans, link, link_text)
                link = run_link
                link_text = []

            content = sanitize_text(run.text)
            run_variant = variant
            attrs = base
            for style in run.styles:
                if isinstance(style, Stylized):
                    run_variant = style.variant
                elif isinstance(style, Link):
                    attrs = attrs.merge(fg=theme.link_color or attrs.fg, underline=True)
                elif style == "bold":
                    attrs = attrs.merge(bold=True)
                elif style == "italic":
                    attrs = attrs.merge(italic=True)
                elif style == "strikethrough":
                    attrs = attrs.merge(strikethrough=True)
            # Background styles last so they win over link colours
            if "highlight" in run.styles:
                attrs = attrs.merge(
                    fg=theme.highlight_fg or attrs.fg, bg=theme.highlight_bg or attrs.bg
                )
            if "code" in run.styles:
                attrs = attrs.merge(
                    fg=theme.inline_code_fg or attrs.fg, bg=theme.inline_code_bg or attrs.bg
                )
            if run_variant is not None:
                content = stylize(content, run_variant)

            push_span(spans, Span(content, attrs, run.styles))
            if link is not None:
                link_text.append(run.text)

        self._close_link(spans, link, link_text)
        return spans

    def _close_link(self, spans: list[Span], link: Link | None, link_text: list[str]) -> None:
        if link is None or not link.url or not self.theme.show_link_urls:
            return
        shown = "".join(link_text)
        url = link.url
        if url in (shown, f"mailto:{shown}"):
            return
        push_span(spans, Span(f" ({sanitize_text(url)})", TextAttrs(dim=True)))
