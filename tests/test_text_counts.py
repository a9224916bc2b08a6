"""Tests for status bar word and character counts."""

from __future__ import annotations

import pytest

from vaultview.text_counts import char_count, word_count

HEADINGS = """# Heading 1

## Heading 2

### Heading 3

#### Heading 4

##### Heading 5

###### Heading 6"""

TASKS = """## Tasks

- [ ] Task

- [x] Completed task

- [?] Completed task"""

QUOTES = """## Quotes

You _can_ quote text by adding a `>` symbols before the text.

> Human beings face ever more complex and urgent problems, and their effectiveness in dealing with these problems is a matter that is critical to the stability and continued progress of society.
>
>- Doug Engelbart, 1961"""


class TestTextCounts:
    @pytest.mark.parametrize(
        ("text", "words", "chars"),
        [
            (HEADINGS, 12, 91),
            (TASKS, 10, 64),
            (QUOTES, 47, 294),
        ],
    )
    def test_sample_notes(self, text: str, words: int, chars: int) -> None:
        assert word_count(text) == words
        assert char_count(text) == chars

    def test_empty(self) -> None:
        assert word_count("") == 0
        assert char_count("") == 0

    def test_symbols_alone_are_not_words(self) -> None:
        assert word_count("** __ ## ==") == 0

    def test_chars_count_code_points(self) -> None:
        assert char_count("世界\n") == 3
