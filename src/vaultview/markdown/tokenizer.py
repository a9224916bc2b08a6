"""Tokenizer adapter: ``markdown-it-py`` tokens to builder events.

markdown-it-py already produces a flat open/close token stream
(``heading_open`` / ``heading_close``, ``bullet_list_open`` ...), with inline
content in ``token.children`` of ``inline`` tokens. This module walks that
stream and re-emits it as :mod:`vaultview.markdown.events`, converting the
line maps of block tokens into UTF-8 byte ranges.

Constructs the document tree does not model (tables, thematic breaks, HTML
blocks) are emitted as a single :class:`InlineText` carrying their source, so
they survive as plain text.
"""

from __future__ import annotations

import logging
import re
from typing import Iterator

from markdown_it import MarkdownIt
from markdown_it.token import Token

from vaultview.markdown.events import (
    BlockEnd,
    BlockStart,
    Event,
    InlineEnd,
    InlineStart,
    InlineText,
)
from vaultview.markdown.mark import mark_plugin
from vaultview.markdown.nodes import Link, SourceRange

logger = logging.getLogger(__name__)

# Block nesting limit. markdown-it's block rules recurse, so this bounds the
# Python stack. A container opened at the limit gets no child tokens; its
# source lines are re-emitted as text instead.
MAX_NESTING = 100

_CONTAINER_TOKENS = frozenset({"blockquote", "bullet_list", "ordered_list", "list_item"})

_CONTAINER_PREFIX_RE = re.compile(r"^[ \t>]*")
_ITEM_MARKER_RE = re.compile(r"^(?:[-+*]|\d{1,9}[.)])(?:[ \t]+|$)")

# ---------------------------------------------------------------------------
# markdown-it singleton (GFM tables, strikethrough, linkify + ==mark==)
# ---------------------------------------------------------------------------

_md_parser = MarkdownIt("gfm-like", {"maxNesting": MAX_NESTING}).use(mark_plugin)

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")

_BLOCK_TOKENS: dict[str, str] = {
    "paragraph": "paragraph",
    "blockquote": "block_quote",
    "bullet_list": "bullet_list",
    "ordered_list": "ordered_list",
    "list_item": "list_item",
}

_INLINE_STYLES: dict[str, str] = {
    "strong": "bold",
    "em": "italic",
    "s": "strikethrough",
    "mark": "highlight",
}

_CODE_STYLE = frozenset({"code"})

# ---------------------------------------------------------------------------
# Line map -> byte offsets
# ---------------------------------------------------------------------------


class _SourceIndex:
    """Byte offsets of line starts in the UTF-8 encoding of the source."""

    def __init__(self, text: str) -> None:
        self._source = text.encode("utf-8", "surrogatepass")
        starts = [0]
        byte_pos = 0
        char_pos = 0
        for match in _LINE_BREAK_RE.finditer(text):
            chunk = text[char_pos : match.end()]
            byte_pos += len(chunk.encode("utf-8", "surrogatepass"))
            char_pos = match.end()
            starts.append(byte_pos)
        self._line_starts = starts

    def offset(self, line: int) -> int:
        if line < 0:
            return 0
        if line >= len(self._line_starts):
            return len(self._source)
        return self._line_starts[line]

    def range(self, token: Token) -> SourceRange | None:
        if not token.map:
            return None
        start_line, end_line = token.map[0], token.map[1]
        start = self.offset(start_line)
        return SourceRange(start, max(start, self.offset(end_line)))

    def text(self, source_range: SourceRange) -> str:
        raw = self._source[source_range.start : source_range.end]
        return raw.decode("utf-8", "replace").rstrip("\r\n")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def tokenize(text: str) -> Iterator[Event]:
    """Tokenize *text* and yield builder events in document order."""
    if not text:
        return

    index = _SourceIndex(text)
    tokens = _md_parser.parse(text)
    i = 0
    n = len(tokens)

    while i < n:
        tok = tokens[i]
        t = tok.type

        if t == "heading_open":
            level = int(tok.tag[1]) if len(tok.tag) == 2 and tok.tag[0] == "h" else 1
            yield BlockStart("heading", index.range(tok), level=level)
            i += 1
            continue
        if t == "heading_close":
            yield BlockEnd("heading")
            i += 1
            continue

        if t.endswith("_open") and t[:-5] in _BLOCK_TOKENS:
            name = t[:-5]
            if name == "ordered_list":
                yield BlockStart("ordered_list", index.range(tok), start=_list_start(tok))
            else:
                yield BlockStart(_BLOCK_TOKENS[name], index.range(tok))

            # Container at the nesting limit: its content was never tokenized
            if name in _CONTAINER_TOKENS and tok.level >= MAX_NESTING - 1:
                yield from _overflow_text(tok, index)
                i = _find_matching_close(tokens, i, t, name + "_close")
                continue
            i += 1
            continue
        if t.endswith("_close") and t[:-6] in _BLOCK_TOKENS:
            yield BlockEnd(_BLOCK_TOKENS[t[:-6]])
            i += 1
            continue

        if t == "inline":
            yield from _inline_events(tok.children or [])
            i += 1
            continue

        # Fenced and indented code
        if t in ("fence", "code_block"):
            info = tok.info.strip().split()[0] if tok.info and tok.info.strip() else ""
            yield BlockStart("code_block", index.range(tok), info=info)
            if tok.content:
                yield InlineText(tok.content)
            yield BlockEnd("code_block")
            i += 1
            continue

        # Table -- kept as its source text
        if t == "table_open":
            close_idx = _find_matching_close(tokens, i, "table_open", "table_close")
            source_range = index.range(tok)
            if source_range is not None:
                yield InlineText(index.text(source_range), source_range=source_range)
            i = close_idx + 1
            continue

        if t == "hr":
            source_range = index.range(tok)
            if source_range is not None:
                yield InlineText(index.text(source_range), source_range=source_range)
            i += 1
            continue

        if t == "html_block":
            content = tok.content.rstrip("\n")
            if content:
                yield InlineText(content, source_range=index.range(tok))
            i += 1
            continue

        # Anything else with content is passed through as text
        if tok.content:
            logger.debug("passing unsupported token %r through as text", t)
            yield InlineText(tok.content, source_range=index.range(tok))
        i += 1


# ---------------------------------------------------------------------------
# Inline tokens
# ---------------------------------------------------------------------------


def _inline_events(children: list[Token]) -> Iterator[Event]:
    link_stack: list[Link] = []

    for child in children:
        ct = child.type

        if ct == "text":
            if child.content:
                yield InlineText(child.content)
            continue

        if ct == "softbreak":
            yield InlineText(" ")
            continue
        if ct == "hardbreak":
            yield InlineText("\n")
            continue

        if ct.endswith("_open") and ct[:-5] in _INLINE_STYLES:
            yield InlineStart(_INLINE_STYLES[ct[:-5]])
            continue
        if ct.endswith("_close") and ct[:-6] in _INLINE_STYLES:
            yield InlineEnd(_INLINE_STYLES[ct[:-6]])
            continue

        if ct == "link_open":
            href = child.attrs.get("href", "")
            link = Link(str(href) if href else "")
            link_stack.append(link)
            yield InlineStart(link)
            continue
        if ct == "link_close":
            if link_stack:
                yield InlineEnd(link_stack.pop())
            continue

        if ct == "code_inline":
            yield InlineText(child.content, styles=_CODE_STYLE)
            continue

        # Images contribute their alt text
        if ct == "image":
            if child.content:
                yield InlineText(child.content)
            continue

        # html_inline and anything unknown: keep the literal content
        if child.content:
            yield InlineText(child.content)


# ---------------------------------------------------------------------------
# Token navigation helpers
# ---------------------------------------------------------------------------


def _overflow_text(tok: Token, index: _SourceIndex) -> Iterator[Event]:
    """Source lines of a container too deep to tokenize, minus outer markers."""
    source_range = index.range(tok)
    if source_range is None:
        return
    raw_lines = _LINE_BREAK_RE.split(index.text(source_range))
    lines = [_CONTAINER_PREFIX_RE.sub("", line) for line in raw_lines]
    if tok.type == "list_item_open" and lines:
        lines[0] = _ITEM_MARKER_RE.sub("", lines[0], count=1)
    text = "\n".join(line for line in lines if line.strip())
    if text:
        logger.debug("nesting limit reached at level %d, keeping source as text", tok.level)
        yield InlineText(text, source_range=source_range)


def _list_start(tok: Token) -> int:
    start_attr = tok.attrs.get("start")
    if start_attr is None:
        return 1
    try:
        return int(start_attr)
    except (ValueError, TypeError):
        return 1


def _find_matching_close(
    tokens: list[Token], start: int, open_type: str, close_type: str
) -> int:
    """Find the matching close token for a given open token, respecting nesting."""
    depth = 0
    i = start
    while i < len(tokens):
        if tokens[i].type == open_type:
            depth += 1
        elif tokens[i].type == close_type:
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return len(tokens) - 1
