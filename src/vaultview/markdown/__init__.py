"""Markdown parsing: tokenizer events and the document tree."""

from vaultview.markdown.builder import AstBuilder, build, classify_task_marker, parse
from vaultview.markdown.events import BlockEnd, BlockStart, Event, InlineEnd, InlineStart, InlineText
from vaultview.markdown.nodes import (
    BlockQuote,
    CodeBlock,
    Heading,
    Link,
    ListBlock,
    ListItem,
    Node,
    Paragraph,
    SourceRange,
    StyledText,
    StyleRun,
    Stylized,
    TextNode,
    child_nodes,
    find_node_at,
    walk,
)
from vaultview.markdown.tokenizer import tokenize

__all__ = [
    "AstBuilder",
    "BlockEnd",
    "BlockQuote",
    "BlockStart",
    "CodeBlock",
    "Event",
    "Heading",
    "InlineEnd",
    "InlineStart",
    "InlineText",
    "Link",
    "ListBlock",
    "ListItem",
    "Node",
    "Paragraph",
    "SourceRange",
    "StyleRun",
    "StyledText",
    "Stylized",
    "TextNode",
    "build",
    "child_nodes",
    "classify_task_marker",
    "find_node_at",
    "parse",
    "tokenize",
    "walk",
]
