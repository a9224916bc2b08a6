"""Tests for the markdown-it-py event adapter."""

from __future__ import annotations

import pytest

from vaultview.markdown.events import BlockEnd, BlockStart, InlineEnd, InlineStart, InlineText
from vaultview.markdown.nodes import Link, SourceRange
from vaultview.markdown.tokenizer import MAX_NESTING, tokenize


def _events(text: str) -> list:
    return list(tokenize(text))


def _kinds(text: str) -> list[str]:
    """Block start kinds in document order."""
    return [e.kind for e in tokenize(text) if isinstance(e, BlockStart)]


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------


class TestBlockEvents:
    def test_empty_text_yields_nothing(self) -> None:
        assert _events("") == []

    def test_heading_and_paragraph(self) -> None:
        assert _events("# My Heading\n\nSome text.") == [
            BlockStart("heading", SourceRange(0, 13), level=1),
            InlineText("My Heading"),
            BlockEnd("heading"),
            BlockStart("paragraph", SourceRange(14, 24)),
            InlineText("Some text."),
            BlockEnd("paragraph"),
        ]

    def test_heading_level(self) -> None:
        starts = [e for e in _events("### Three") if isinstance(e, BlockStart)]
        assert starts[0].level == 3

    def test_nested_quotes(self) -> None:
        assert _kinds("> > nested") == ["block_quote", "block_quote", "paragraph"]

    def test_bullet_list(self) -> None:
        assert _kinds("- a\n- b") == [
            "bullet_list",
            "list_item",
            "paragraph",
            "list_item",
            "paragraph",
        ]

    def test_ordered_list_start(self) -> None:
        starts = [e for e in _events("3. a\n4. b") if isinstance(e, BlockStart)]
        assert starts[0].kind == "ordered_list"
        assert starts[0].start == 3

    def test_ordered_list_default_start(self) -> None:
        starts = [e for e in _events("1. a") if isinstance(e, BlockStart)]
        assert starts[0].start == 1

    def test_deep_quote_is_not_truncated(self) -> None:
        text = "> " * 60 + "deep"
        kinds = _kinds(text)
        assert kinds.count("block_quote") == 60
        assert kinds[-1] == "paragraph"

    def test_quote_past_nesting_limit_keeps_its_text(self) -> None:
        events = _events("> " * 150 + "secret")
        kinds = [e.kind for e in events if isinstance(e, BlockStart)]
        assert kinds == ["block_quote"] * MAX_NESTING
        texts = [e for e in events if isinstance(e, InlineText)]
        assert texts == [InlineText("secret", source_range=SourceRange(0, 306))]

    def test_list_past_nesting_limit_keeps_its_text(self) -> None:
        text = "\n".join("  " * n + f"- l{n}" for n in range(120))
        texts = [e.text for e in _events(text) if isinstance(e, InlineText)]
        assert texts[:49] == [f"l{n}" for n in range(49)]
        overflow = texts[-1].split("\n")
        assert overflow[0] == "l49"
        assert overflow[1:] == [f"- l{n}" for n in range(50, 120)]


class TestCodeEvents:
    def test_fenced_code_with_language(self) -> None:
        assert _events("```python\nx = 1\n```") == [
            BlockStart("code_block", SourceRange(0, 19), info="python"),
            InlineText("x = 1\n"),
            BlockEnd("code_block"),
        ]

    def test_info_string_keeps_first_word(self) -> None:
        start = _events("```rust ignore\nfn x() {}\n```")[0]
        assert start.info == "rust"

    def test_indented_code(self) -> None:
        events = _events("    indented\n")
        assert events[0] == BlockStart("code_block", SourceRange(0, 13))
        assert events[1] == InlineText("indented\n")


class TestUnsupportedBlocks:
    def test_table_passes_source_through(self) -> None:
        text = "| a | b |\n| - | - |\n| 1 | 2 |"
        events = _events(text)
        assert events == [InlineText(text, source_range=SourceRange(0, len(text)))]

    def test_thematic_break_passes_source_through(self) -> None:
        events = _events("a\n\n***\n\nb")
        texts = [e for e in events if isinstance(e, InlineText)]
        assert InlineText("***", source_range=SourceRange(3, 7)) in texts

    @pytest.mark.parametrize("rule", ["* * *", "- - -", "___", "*****"])
    def test_thematic_break_text_matches_source(self, rule: str) -> None:
        assert _events(rule) == [
            InlineText(rule, source_range=SourceRange(0, len(rule))),
        ]


# ---------------------------------------------------------------------------
# Inline
# ---------------------------------------------------------------------------


class TestInlineEvents:
    def _inline(self, text: str) -> list:
        return [
            e
            for e in tokenize(text)
            if isinstance(e, (InlineStart, InlineEnd, InlineText))
        ]

    def test_strong(self) -> None:
        assert self._inline("**bold** text") == [
            InlineStart("bold"),
            InlineText("bold"),
            InlineEnd("bold"),
            InlineText(" text"),
        ]

    def test_emphasis_and_strikethrough(self) -> None:
        events = self._inline("*it* ~~gone~~")
        assert InlineStart("italic") in events
        assert InlineStart("strikethrough") in events

    def test_highlight(self) -> None:
        assert self._inline("==hi==") == [
            InlineStart("highlight"),
            InlineText("hi"),
            InlineEnd("highlight"),
        ]

    def test_highlight_inside_sentence(self) -> None:
        assert self._inline("a ==b== c") == [
            InlineText("a "),
            InlineStart("highlight"),
            InlineText("b"),
            InlineEnd("highlight"),
            InlineText(" c"),
        ]

    def test_unclosed_highlight_stays_text(self) -> None:
        events = self._inline("==open")
        assert all(isinstance(e, InlineText) for e in events)
        assert "".join(e.text for e in events) == "==open"

    def test_single_equals_is_text(self) -> None:
        assert self._inline("a = b") == [InlineText("a = b")]

    def test_inline_code_carries_code_style(self) -> None:
        assert self._inline("`x`") == [InlineText("x", styles=frozenset({"code"}))]

    def test_link(self) -> None:
        assert self._inline("[t](https://a.example)") == [
            InlineStart(Link("https://a.example")),
            InlineText("t"),
            InlineEnd(Link("https://a.example")),
        ]

    def test_soft_break_becomes_space(self) -> None:
        assert self._inline("a\nb") == [InlineText("a"), InlineText(" "), InlineText("b")]

    def test_hard_break_becomes_newline(self) -> None:
        assert InlineText("\n") in self._inline("a  \nb")

    def test_image_uses_alt_text(self) -> None:
        assert self._inline("![alt text](img.png)") == [InlineText("alt text")]


# ---------------------------------------------------------------------------
# Byte ranges
# ---------------------------------------------------------------------------


class TestByteRanges:
    def test_multibyte_text_shifts_offsets(self) -> None:
        starts = [e for e in _events("é\n\nb") if isinstance(e, BlockStart)]
        assert starts[0].source_range == SourceRange(0, 3)
        assert starts[1].source_range == SourceRange(4, 5)

    def test_crlf_line_endings(self) -> None:
        starts = [e for e in _events("a\r\n\r\nb") if isinstance(e, BlockStart)]
        assert starts[1].source_range == SourceRange(5, 6)

    def test_parent_range_contains_child(self) -> None:
        starts = [e for e in _events("> a\n> b\n") if isinstance(e, BlockStart)]
        quote, para = starts
        assert quote.source_range.encloses(para.source_range)
