"""Event interface between a Markdown tokenizer and the AST builder.

A tokenizer is adapted to the builder by turning its output into a flat
sequence of events of four kinds: block start/end, inline style start/end
and text. Nothing else crosses the boundary, so a different CommonMark tokenizer
can be plugged in by writing another adapter.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union

from vaultview.markdown.nodes import NO_STYLE, InlineStyle, SourceRange

BlockKind = Literal[
    "heading",
    "paragraph",
    "block_quote",
    "bullet_list",
    "ordered_list",
    "list_item",
    "code_block",
]


@dataclass(frozen=True)
class BlockStart:
    """Opens a block.

    ``level`` applies to headings, ``start`` to ordered lists (the first
    item's numeral) and ``info`` to code blocks (the fence info string).
    """

    kind: str
    source_range: SourceRange | None = None
    level: int = 1
    start: int | None = None
    info: str = ""


@dataclass(frozen=True)
class BlockEnd:
    kind: str


@dataclass(frozen=True)
class InlineStart:
    style: InlineStyle


@dataclass(frozen=True)
class InlineEnd:
    style: InlineStyle


@dataclass(frozen=True)
class InlineText:
    """Literal text.

    ``styles`` are applied on top of the styles opened by :class:`InlineStart`
    (inline code uses this). ``source_range`` is set when the text stands for a
    whole unsupported block.
    """

    text: str
    styles: frozenset = NO_STYLE
    source_range: SourceRange | None = None


Event = Union[BlockStart, BlockEnd, InlineStart, InlineEnd, InlineText]
