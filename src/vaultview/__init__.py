"""vaultview: Markdown note parsing and terminal rendering."""

# Components
from vaultview.components import MarkdownView

# Document tree and parsing
from vaultview.markdown import (
    BlockQuote,
    CodeBlock,
    Heading,
    ListBlock,
    ListItem,
    Node,
    Paragraph,
    SourceRange,
    StyledText,
    TextNode,
    build,
    parse,
    tokenize,
)

# Rendering
from vaultview.render import MarkdownTheme, RenderedLines, StyledLine, render

# Stylized fonts
from vaultview.stylized_text import stylize

# Status bar counts
from vaultview.text_counts import char_count, word_count

# Utilities
from vaultview.utils import visible_width

__all__ = [
    "BlockQuote",
    "CodeBlock",
    "Heading",
    "ListBlock",
    "ListItem",
    "MarkdownTheme",
    "MarkdownView",
    "Node",
    "Paragraph",
    "RenderedLines",
    "SourceRange",
    "StyledLine",
    "StyledText",
    "TextNode",
    "build",
    "char_count",
    "parse",
    "render",
    "stylize",
    "tokenize",
    "visible_width",
    "word_count",
]
