"""Document tree for rendered Markdown notes.

A parsed note is a ``list[Node]`` in document order. Each node is a plain
dataclass; container nodes (:class:`BlockQuote`, :class:`ListBlock`,
:class:`ListItem`) hold their children in lists and may nest arbitrarily deep.
Inline content is a :class:`StyledText`, an ordered list of style runs.

Every node records the half-open UTF-8 byte range of the source it came from.
Source ranges are left out of equality so that trees can be compared
structurally; compare ``node.source_range`` directly when positions matter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Literal, NamedTuple, Union

from vaultview.stylized_text import FontVariant

# ---------------------------------------------------------------------------
# Inline styles
# ---------------------------------------------------------------------------

TextStyle = Literal["bold", "italic", "strikethrough", "highlight", "code"]


@dataclass(frozen=True)
class Link:
    """Hyperlink style carrying its destination."""

    url: str


@dataclass(frozen=True)
class Stylized:
    """Font substitution style (Fraktur or double-struck letters)."""

    variant: FontVariant


InlineStyle = Union[TextStyle, Link, Stylized]

NO_STYLE: frozenset = frozenset()


@dataclass(frozen=True)
class StyleRun:
    """A maximal span of text sharing one exact set of inline styles."""

    text: str
    styles: frozenset = NO_STYLE


@dataclass
class StyledText:
    """Ordered style runs covering a piece of inline text without gaps."""

    runs: list[StyleRun] = field(default_factory=list)

    @classmethod
    def plain(cls, text: str) -> StyledText:
        styled = cls()
        styled.append(text)
        return styled

    def append(self, text: str, styles: Iterable[InlineStyle] = ()) -> None:
        """Append *text*, merging into the last run when styles are identical."""
        if not text:
            return
        style_set = frozenset(styles)
        if self.runs and self.runs[-1].styles == style_set:
            last = self.runs[-1]
            self.runs[-1] = StyleRun(last.text + text, style_set)
        else:
            self.runs.append(StyleRun(text, style_set))

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)

    def __bool__(self) -> bool:
        return bool(self.runs)


# ---------------------------------------------------------------------------
# Source ranges
# ---------------------------------------------------------------------------


class SourceRange(NamedTuple):
    """Half-open byte interval ``[start, end)`` into the source document."""

    start: int
    end: int

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end

    def encloses(self, other: SourceRange) -> bool:
        return self.start <= other.start and other.end <= self.end


EMPTY_RANGE = SourceRange(0, 0)

# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------

TaskState = Literal["unchecked", "checked", "loosely_checked"]
CalloutKind = Literal["note", "tip", "important", "warning", "caution"]

CALLOUT_KINDS: tuple[str, ...] = ("note", "tip", "important", "warning", "caution")


def _range_field() -> SourceRange:
    return field(default=EMPTY_RANGE, compare=False)


@dataclass
class Heading:
    level: int
    text: StyledText
    source_range: SourceRange = _range_field()


@dataclass
class Paragraph:
    text: StyledText
    source_range: SourceRange = _range_field()


@dataclass
class BlockQuote:
    """A quoted block; ``kind`` is set for callouts such as ``> [!tip]``."""

    children: list[Node] = field(default_factory=list)
    kind: CalloutKind | None = None
    source_range: SourceRange = _range_field()


@dataclass
class ListItem:
    children: list[Node] = field(default_factory=list)
    task: TaskState | None = None
    source_range: SourceRange = _range_field()


@dataclass
class ListBlock:
    """Ordered or bullet list.

    ``start_index`` is the first displayed number of an ordered list and
    ``None`` for bullet lists. Item numbers are derived from it when rendering.
    """

    items: list[ListItem] = field(default_factory=list)
    ordered: bool = False
    start_index: int | None = None
    source_range: SourceRange = _range_field()


@dataclass
class CodeBlock:
    """Fenced or indented code, one entry per source line, kept verbatim."""

    lines: list[str] = field(default_factory=list)
    language: str | None = None
    source_range: SourceRange = _range_field()


@dataclass
class TextNode:
    """Fallback for constructs the builder does not model; text kept as-is."""

    text: str
    source_range: SourceRange = _range_field()


Node = Union[Heading, Paragraph, BlockQuote, ListBlock, ListItem, CodeBlock, TextNode]

# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


def child_nodes(node: Node) -> list[Node]:
    """Return the direct children of *node* (empty for leaf nodes)."""
    if isinstance(node, (BlockQuote, ListItem)):
        return node.children
    if isinstance(node, ListBlock):
        return list(node.items)
    return []


def walk(nodes: Iterable[Node]) -> Iterator[tuple[Node, int]]:
    """Yield ``(node, depth)`` pairs in pre-order without recursion."""
    stack: list[tuple[Node, int]] = [(node, 0) for node in reversed(list(nodes))]
    while stack:
        node, depth = stack.pop()
        yield node, depth
        children = child_nodes(node)
        for child in reversed(children):
            stack.append((child, depth + 1))


def find_node_at(nodes: Iterable[Node], offset: int) -> Node | None:
    """Return the innermost node whose source range contains *offset*."""
    found: Node | None = None
    candidates = list(nodes)
    while candidates:
        match = next((n for n in candidates if n.source_range.contains(offset)), None)
        if match is None:
            break
        found = match
        candidates = child_nodes(match)
    return found
