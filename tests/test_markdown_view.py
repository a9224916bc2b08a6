"""Tests for the MarkdownView component."""

from __future__ import annotations

import re

from vaultview.components.markdown_view import MarkdownView
from vaultview.markdown.nodes import Heading, Paragraph
from vaultview.render.theme import MarkdownTheme
from vaultview.utils import visible_width

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def _strip_ansi(text: str) -> str:
    """Remove all ANSI escape codes from text."""
    return _ANSI_RE.sub("", text)


def _plain_lines(view: MarkdownView, width: int = 40) -> list[str]:
    return [_strip_ansi(line).rstrip() for line in view.render(width)]


LONG_NOTE = "\n\n".join(f"paragraph {n}" for n in range(10))


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class TestRender:
    def test_empty_text_renders_nothing(self) -> None:
        assert MarkdownView("").render(40) == []

    def test_lines_padded_to_width(self) -> None:
        view = MarkdownView("# Title\n\nbody")
        for line in view.render(30):
            assert visible_width(line) == 30

    def test_width_narrower_than_padding_never_overflows(self) -> None:
        view = MarkdownView("a", padding_x=1)
        assert view.render(1) == [" "]
        assert view.render(2) == [" a"]
        view = MarkdownView("# Title\n\nsome body text", padding_x=3)
        for width in (1, 2, 4, 6, 7):
            for line in view.render(width):
                assert visible_width(line) == width

    def test_left_padding(self) -> None:
        view = MarkdownView("body", padding_x=2)
        assert _plain_lines(view) == ["  body"]

    def test_no_padding(self) -> None:
        view = MarkdownView("body", padding_x=0)
        assert _plain_lines(view) == ["body"]

    def test_content_wraps_inside_padding(self) -> None:
        view = MarkdownView("aaaa bbbb", padding_x=1)
        assert _plain_lines(view, 8) == [" aaaa", " bbbb"]

    def test_styles_serialised_as_ansi(self) -> None:
        view = MarkdownView("**bold**", padding_x=0)
        assert "\x1b[1m" in view.render(20)[0]

    def test_total_height(self) -> None:
        view = MarkdownView(LONG_NOTE)
        assert view.total_height(40) == 19
        assert len(view.render(40)) == 19


class TestCache:
    def test_same_width_returns_cached_lines(self) -> None:
        view = MarkdownView("hello")
        assert view.render(20) is view.render(20)

    def test_width_change_rerenders(self) -> None:
        view = MarkdownView("hello")
        first = view.render(20)
        assert view.render(30) is not first
        assert visible_width(view.render(30)[0]) == 30

    def test_set_text_reparses(self) -> None:
        view = MarkdownView("# Old")
        view.render(20)
        view.set_text("new body")
        assert len(view.nodes) == 1
        assert isinstance(view.nodes[0], Paragraph)
        assert _plain_lines(view, 20) == [" new body"]

    def test_set_same_text_keeps_cache(self) -> None:
        view = MarkdownView("same")
        lines = view.render(20)
        view.set_text("same")
        assert view.render(20) is lines

    def test_set_theme_invalidates(self) -> None:
        view = MarkdownView("[a](https://x.example)", padding_x=0)
        assert _plain_lines(view) == ["a (https://x.example)"]
        view.set_theme(MarkdownTheme(show_link_urls=False))
        assert _plain_lines(view) == ["a"]

    def test_invalidate(self) -> None:
        view = MarkdownView("x")
        lines = view.render(20)
        view.invalidate()
        assert view.render(20) is not lines


# ---------------------------------------------------------------------------
# Scrolling
# ---------------------------------------------------------------------------


class TestScrolling:
    def test_visible_lines_from_top(self) -> None:
        view = MarkdownView(LONG_NOTE, padding_x=0)
        visible = [_strip_ansi(line).rstrip() for line in view.visible_lines(40, 3)]
        assert visible == ["paragraph 0", "", "paragraph 1"]

    def test_scroll_down_and_up(self) -> None:
        view = MarkdownView(LONG_NOTE, padding_x=0)
        view.scroll_down(2, 40, 3)
        assert view.scroll_offset == 2
        assert _strip_ansi(view.visible_lines(40, 3)[0]).rstrip() == "paragraph 1"
        view.scroll_up(1, 40, 3)
        assert view.scroll_offset == 1

    def test_scroll_clamped_to_content(self) -> None:
        view = MarkdownView(LONG_NOTE, padding_x=0)
        view.scroll_down(1000, 40, 5)
        assert view.scroll_offset == 19 - 5
        view.scroll_up(1000, 40, 5)
        assert view.scroll_offset == 0

    def test_short_note_does_not_scroll(self) -> None:
        view = MarkdownView("one line")
        view.scroll_down(3, 40, 10)
        assert view.scroll_offset == 0

    def test_reset_scroll(self) -> None:
        view = MarkdownView(LONG_NOTE)
        view.scroll_down(4, 40, 3)
        view.reset_scroll()
        assert view.scroll_offset == 0


# ---------------------------------------------------------------------------
# Cursor lookup
# ---------------------------------------------------------------------------


class TestNodeAt:
    def test_node_under_offset(self) -> None:
        view = MarkdownView("# Title\n\nbody")
        assert isinstance(view.node_at(0), Heading)
        assert isinstance(view.node_at(10), Paragraph)

    def test_offset_in_blank_line(self) -> None:
        view = MarkdownView("# Title\n\nbody")
        assert view.node_at(8) is None
