"""Terminal rendering of the document tree."""

from vaultview.render.lines import Span, StyledLine, TextAttrs
from vaultview.render.renderer import RenderedLines, render
from vaultview.render.theme import HEADING_STYLES, HeadingStyle, MarkdownTheme
from vaultview.render.wrap import wrap_spans

__all__ = [
    "HEADING_STYLES",
    "HeadingStyle",
    "MarkdownTheme",
    "RenderedLines",
    "Span",
    "StyledLine",
    "TextAttrs",
    "render",
    "wrap_spans",
]
