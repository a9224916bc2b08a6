"""MarkdownView component -- a scrollable, cached view of one note.

Wraps the parse and render stages for the surrounding UI: the note is parsed
once per :meth:`MarkdownView.set_text`, rendered once per width, and exposed
as padded ANSI strings plus a scroll window.
"""

from __future__ import annotations

import logging

from vaultview.markdown.builder import parse
from vaultview.markdown.nodes import Node, find_node_at
from vaultview.render.lines import StyledLine
from vaultview.render.renderer import RenderedLines, render
from vaultview.render.theme import MarkdownTheme

logger = logging.getLogger(__name__)


class MarkdownView:
    """Renders a markdown note to terminal lines and tracks its scroll offset."""

    def __init__(
        self,
        text: str = "",
        *,
        padding_x: int = 1,
        theme: MarkdownTheme | None = None,
    ) -> None:
        self._text = text
        self._padding_x = max(0, padding_x)
        self._theme = theme or MarkdownTheme()
        self._nodes: list[Node] = parse(text)
        self._scroll = 0

        # Rendering cache
        self._cached_text: str | None = None
        self._cached_width: int | None = None
        self._cached_rendered: RenderedLines | None = None
        self._cached_lines: list[str] | None = None

    # -- public API ---------------------------------------------------------

    @property
    def text(self) -> str:
        return self._text

    @property
    def nodes(self) -> list[Node]:
        return self._nodes

    @property
    def scroll_offset(self) -> int:
        return self._scroll

    def set_text(self, text: str) -> None:
        if text != self._text:
            self._text = text
            self._nodes = parse(text)
            self._invalidate_cache()
            logger.debug("reparsed note: %d top-level nodes", len(self._nodes))

    def set_theme(self, theme: MarkdownTheme) -> None:
        self._theme = theme
        self._invalidate_cache()

    def invalidate(self) -> None:
        self._invalidate_cache()

    def render(self, width: int) -> list[str]:
        """Return the note as ANSI strings, each padded to *width* columns."""
        if (
            self._cached_lines is not None
            and self._cached_text == self._text
            and self._cached_width == width
        ):
            return self._cached_lines

        lines = [self._pad(line, width) for line in self._rendered(width)]
        self._cached_lines = lines
        return lines

    def total_height(self, width: int) -> int:
        return self._rendered(width).total_height

    def styled_lines(self, width: int) -> RenderedLines:
        """The underlying styled lines for the content area of *width*."""
        return self._rendered(width)

    # -- scrolling ----------------------------------------------------------

    def scroll_down(self, amount: int, width: int, height: int) -> None:
        self._scroll = self._clamp(self._scroll + amount, width, height)

    def scroll_up(self, amount: int, width: int, height: int) -> None:
        self._scroll = self._clamp(self._scroll - amount, width, height)

    def reset_scroll(self) -> None:
        self._scroll = 0

    def visible_lines(self, width: int, height: int) -> list[str]:
        """The *height* padded lines currently scrolled into view."""
        self._scroll = self._clamp(self._scroll, width, height)
        lines = self.render(width)
        return lines[self._scroll : self._scroll + max(0, height)]

    def node_at(self, offset: int) -> Node | None:
        """Innermost node whose source range contains byte *offset*."""
        return find_node_at(self._nodes, offset)

    # -- internals ----------------------------------------------------------

    def _content_width(self, width: int) -> int:
        return max(1, width - self._padding_x * 2)

    def _rendered(self, width: int) -> RenderedLines:
        if (
            self._cached_rendered is not None
            and self._cached_text == self._text
            and self._cached_width == width
        ):
            return self._cached_rendered

        rendered = render(self._nodes, self._content_width(width), self._theme)
        self._cached_text = self._text
        self._cached_width = width
        self._cached_rendered = rendered
        self._cached_lines = None
        return rendered

    def _pad(self, line: StyledLine, width: int) -> str:
        width = max(0, width)
        left = min(self._padding_x, width)
        line = line.clip(width - left)
        right_padding = max(0, width - left - line.width)
        return " " * left + line.to_ansi() + " " * right_padding

    def _clamp(self, offset: int, width: int, height: int) -> int:
        max_offset = max(0, self.total_height(width) - max(0, height))
        return min(max(offset, 0), max_offset)

    def _invalidate_cache(self) -> None:
        self._cached_text = None
        self._cached_width = None
        self._cached_rendered = None
        self._cached_lines = None
