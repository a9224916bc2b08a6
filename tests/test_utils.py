"""Tests for vaultview.utils -- terminal text utilities."""

from __future__ import annotations

from vaultview.utils import (
    grapheme_width,
    pad_to_width,
    sanitize_text,
    split_graphemes,
    take_columns,
    visible_width,
)

# ---------------------------------------------------------------------------
# visible_width
# ---------------------------------------------------------------------------


class TestVisibleWidth:
    """Measure the visible terminal width of text."""

    def test_plain_ascii(self) -> None:
        assert visible_width("hello") == 5

    def test_empty_string(self) -> None:
        assert visible_width("") == 0

    def test_ansi_codes_do_not_count(self) -> None:
        text = "\x1b[1mhi\x1b[0m"
        assert visible_width(text) == 2

    def test_wide_cjk_characters_count_as_two(self) -> None:
        assert visible_width("世") == 2

    def test_mixed_ascii_and_wide(self) -> None:
        assert visible_width("A世B") == 4

    def test_tab_counts_as_three_spaces(self) -> None:
        assert visible_width("\t") == 3

    def test_combining_mark_is_zero_width(self) -> None:
        # "e" + COMBINING ACUTE ACCENT is one column
        assert visible_width("e\u0301") == 1

    def test_stylized_letters_are_single_width(self) -> None:
        assert visible_width("\U0001d56c\U0001d586") == 2


class TestGraphemes:
    def test_split_keeps_combining_sequence_together(self) -> None:
        assert split_graphemes("e\u0301x") == ["e\u0301", "x"]

    def test_emoji_with_vs16_is_wide(self) -> None:
        assert grapheme_width("\u2764\ufe0f") == 2

    def test_control_character_is_zero_width(self) -> None:
        assert grapheme_width("\x07") == 0


# ---------------------------------------------------------------------------
# take_columns / pad_to_width
# ---------------------------------------------------------------------------


class TestTakeColumns:
    def test_ascii_prefix(self) -> None:
        assert take_columns("hello world", 5) == ("hello", 5)

    def test_zero_columns(self) -> None:
        assert take_columns("hello", 0) == ("", 0)

    def test_never_splits_wide_character(self) -> None:
        head, cols = take_columns("a世b", 2)
        assert head == "a"
        assert cols == 1

    def test_pad_fills_exact_width(self) -> None:
        assert pad_to_width("hi", 5) == "hi   "

    def test_pad_clips_long_text(self) -> None:
        assert pad_to_width("abcdefgh", 4) == "abcd"

    def test_pad_fills_gap_left_by_wide_character(self) -> None:
        padded = pad_to_width("a世", 2)
        assert padded == "a "
        assert visible_width(padded) == 2


# ---------------------------------------------------------------------------
# sanitize
# ---------------------------------------------------------------------------


class TestSanitize:
    def test_tabs_become_three_spaces(self) -> None:
        assert sanitize_text("\tx") == "   x"

    def test_control_characters_removed(self) -> None:
        assert sanitize_text("a\x1b[31mb\x07") == "a[31mb"

    def test_newlines_kept(self) -> None:
        assert sanitize_text("a\nb") == "a\nb"
