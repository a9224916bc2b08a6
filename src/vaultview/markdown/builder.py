"""AST builder: assembles tokenizer events into the document tree.

The builder keeps an explicit stack of in-progress frames instead of
recursing, so the Python stack does not grow with the nesting depth of the
document. It is total: any event sequence, including truncated or
out-of-order ones, produces a tree.

Degradation rules:

- a ``BlockEnd`` closes the nearest open frame of the same kind, implicitly
  closing frames above it; a ``BlockEnd`` matching nothing is dropped
- ``InlineEnd`` without a matching ``InlineStart`` is dropped
- text outside a heading/paragraph/code block becomes a :class:`TextNode`
- a block opened inside a heading or paragraph closes that text block first
- list items outside a list get an implicit bullet list, and other blocks
  placed directly in a list get an implicit list item
- frames still open at the end of the stream are closed
"""

from __future__ import annotations

import logging
import re
from typing import Iterable

from vaultview.markdown.events import (
    BlockEnd,
    BlockStart,
    Event,
    InlineEnd,
    InlineStart,
    InlineText,
)
from vaultview.markdown.nodes import (
    CALLOUT_KINDS,
    BlockQuote,
    CodeBlock,
    Heading,
    InlineStyle,
    ListBlock,
    ListItem,
    Node,
    Paragraph,
    SourceRange,
    StyledText,
    StyleRun,
    TaskState,
    TextNode,
)
from vaultview.markdown.tokenizer import tokenize

logger = logging.getLogger(__name__)

_TASK_MARKER_RE = re.compile(r"\[([^\]\n])\](?:[ \t]+|$)")
_CALLOUT_MARKER_RE = re.compile(r"\[!([A-Za-z]+)\][ \t]*")

CHECKED_MARKERS = frozenset({"x", "X"})

_TEXT_KINDS = frozenset({"heading", "paragraph"})
_LIST_KINDS = frozenset({"bullet_list", "ordered_list"})
_KNOWN_KINDS = _TEXT_KINDS | _LIST_KINDS | {"block_quote", "list_item", "code_block"}


# ---------------------------------------------------------------------------
# Frames
# ---------------------------------------------------------------------------


class _Frame:
    """A block under construction."""

    __slots__ = (
        "kind",
        "start",
        "source_range",
        "children",
        "text",
        "text_start",
        "styles",
        "raw",
    )

    def __init__(self, start: BlockStart, source_range: SourceRange) -> None:
        self.kind = start.kind
        self.start = start
        self.source_range = source_range
        self.children: list[Node] = []
        self.text = StyledText()
        self.text_start = source_range.start
        self.styles: list[InlineStyle] = []
        self.raw: list[str] = []

    @property
    def is_text(self) -> bool:
        return self.kind in _TEXT_KINDS

    @property
    def is_known(self) -> bool:
        return self.kind in _KNOWN_KINDS

    def finish(self) -> list[Node]:
        """Turn the frame into nodes (unknown kinds dissolve into their content)."""
        kind = self.kind
        rng = self.source_range

        if kind == "heading":
            level = min(max(self.start.level, 1), 6)
            return [Heading(level, self.text, source_range=rng)]
        if kind == "paragraph":
            return [Paragraph(self.text, source_range=rng)]
        if kind == "code_block":
            lines = _code_lines("".join(self.raw))
            return [CodeBlock(lines, self.start.info or None, source_range=rng)]
        if kind == "block_quote":
            return [_finish_quote(self.children, rng)]
        if kind in _LIST_KINDS:
            items = [_as_list_item(child) for child in self.children]
            if kind == "ordered_list":
                start = self.start.start if self.start.start is not None else 1
                return [ListBlock(items, ordered=True, start_index=start, source_range=rng)]
            return [ListBlock(items, ordered=False, start_index=None, source_range=rng)]
        if kind == "list_item":
            return [_finish_item(self.children, rng)]

        logger.debug("unsupported block kind %r kept as plain text", kind)
        self.flush_text(rng.end)
        return self.children

    def flush_text(self, end: int) -> None:
        """Close loose text gathered in an unknown block into a TextNode child."""
        if self.text:
            end = max(end, self.text_start)
            loose = TextNode(self.text.text, source_range=SourceRange(self.text_start, end))
            self.children.append(loose)
            self.text = StyledText()


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class AstBuilder:
    """Consumes events one at a time; :meth:`finish` returns the tree."""

    def __init__(self) -> None:
        self._root: list[Node] = []
        self._stack: list[_Frame] = []
        self._offset = 0

    # -- event dispatch -----------------------------------------------------

    def feed(self, event: Event) -> None:
        if isinstance(event, BlockStart):
            self._block_start(event)
        elif isinstance(event, BlockEnd):
            self._block_end(event)
        elif isinstance(event, InlineText):
            self._text(event)
        elif isinstance(event, InlineStart):
            self._inline_start(event)
        elif isinstance(event, InlineEnd):
            self._inline_end(event)
        else:
            logger.debug("ignoring unknown event %r", event)

    def finish(self) -> list[Node]:
        while self._stack:
            self._pop()
        return self._root

    # -- blocks -------------------------------------------------------------

    def _block_start(self, event: BlockStart) -> None:
        # Headings and paragraphs cannot contain blocks
        while self._stack and (self._stack[-1].is_text or self._stack[-1].kind == "code_block"):
            logger.debug("closing %s implicitly before %s", self._stack[-1].kind, event.kind)
            self._pop()

        source_range = event.source_range or SourceRange(self._offset, self._offset)
        if self._stack and not self._stack[-1].is_known:
            self._stack[-1].flush_text(max(self._offset, source_range.start))
        self._offset = max(self._offset, source_range.start)
        self._stack.append(_Frame(event, source_range))

    def _block_end(self, event: BlockEnd) -> None:
        for depth in range(len(self._stack) - 1, -1, -1):
            if self._stack[depth].kind == event.kind:
                while len(self._stack) > depth:
                    self._pop()
                return
        logger.debug("dropping unmatched end of %s", event.kind)

    def _pop(self) -> None:
        frame = self._stack.pop()
        for node in frame.finish():
            self._offset = max(self._offset, node.source_range.end)
            self._attach(node)

    def _attach(self, node: Node) -> None:
        if not self._stack:
            if isinstance(node, ListItem):
                node = ListBlock([node], source_range=node.source_range)
            self._root.append(node)
            return

        parent = self._stack[-1]
        if parent.kind in _LIST_KINDS:
            if not isinstance(node, ListItem):
                node = ListItem([node], source_range=node.source_range)
        elif isinstance(node, ListItem):
            node = ListBlock([node], source_range=node.source_range)
        parent.children.append(node)

    # -- inline -------------------------------------------------------------

    def _inline_start(self, event: InlineStart) -> None:
        if self._stack and self._stack[-1].is_text:
            self._stack[-1].styles.append(event.style)
        else:
            logger.debug("dropping inline start %r outside a text block", event.style)

    def _inline_end(self, event: InlineEnd) -> None:
        if self._stack and self._stack[-1].is_text:
            styles = self._stack[-1].styles
            for idx in range(len(styles) - 1, -1, -1):
                if styles[idx] == event.style:
                    del styles[idx]
                    return
        logger.debug("dropping unmatched inline end %r", event.style)

    def _text(self, event: InlineText) -> None:
        if not event.text:
            return

        top = self._stack[-1] if self._stack else None
        if top is not None and top.is_text:
            top.text.append(event.text, (*top.styles, *event.styles))
            return
        if top is not None and top.kind == "code_block":
            top.raw.append(event.text)
            return
        if top is not None and not top.is_known:
            if not top.text:
                top.text_start = event.source_range.start if event.source_range else self._offset
            top.text.append(event.text)
            return

        source_range = event.source_range or SourceRange(self._offset, self._offset)
        self._offset = max(self._offset, source_range.end)
        self._attach(TextNode(event.text, source_range=source_range))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def build(events: Iterable[Event]) -> list[Node]:
    """Build the document tree from a tokenizer event stream."""
    builder = AstBuilder()
    for event in events:
        builder.feed(event)
    return builder.finish()


def parse(text: str) -> list[Node]:
    """Parse Markdown *text* into a list of nodes.

    ``parse("# My Heading\\n\\nSome text.")`` gives a level-1 :class:`Heading`
    followed by a :class:`Paragraph`.
    """
    return build(tokenize(text))


# ---------------------------------------------------------------------------
# Finishing helpers
# ---------------------------------------------------------------------------


def _code_lines(content: str) -> list[str]:
    if not content:
        return []
    if content.endswith("\r\n"):
        content = content[:-2]
    elif content.endswith("\n"):
        content = content[:-1]
    return content.split("\n")


def _as_list_item(node: Node) -> ListItem:
    if isinstance(node, ListItem):
        return node
    return ListItem([node], source_range=node.source_range)


def _finish_item(children: list[Node], rng: SourceRange) -> ListItem:
    task: TaskState | None = None
    if children and isinstance(children[0], Paragraph):
        first = children[0]
        match = _TASK_MARKER_RE.match(first.text.text)
        if match is not None:
            task = classify_task_marker(match.group(1))
            if task is not None:
                body = _drop_prefix(first.text, match.end())
                children = [Paragraph(body, source_range=first.source_range), *children[1:]]
    return ListItem(children, task=task, source_range=rng)


def _finish_quote(children: list[Node], rng: SourceRange) -> BlockQuote:
    if children and isinstance(children[0], Paragraph):
        first = children[0]
        match = _CALLOUT_MARKER_RE.match(first.text.text)
        if match is not None and match.group(1).lower() in CALLOUT_KINDS:
            body = _drop_prefix(first.text, match.end())
            rest = children[1:]
            if body:
                rest = [Paragraph(body, source_range=first.source_range), *rest]
            return BlockQuote(rest, kind=match.group(1).lower(), source_range=rng)
    return BlockQuote(children, source_range=rng)


def classify_task_marker(marker: str) -> TaskState | None:
    """Classify the character between a task item's brackets."""
    if marker == " ":
        return "unchecked"
    if marker in CHECKED_MARKERS:
        return "checked"
    if marker.strip():
        return "loosely_checked"
    return None


def _drop_prefix(text: StyledText, count: int) -> StyledText:
    """Remove the first *count* characters from *text*, keeping run styles."""
    result = StyledText()
    remaining = count
    for run in text.runs:
        if remaining >= len(run.text):
            remaining -= len(run.text)
            continue
        result.runs.append(StyleRun(run.text[remaining:], run.styles))
        remaining = 0
    return result
