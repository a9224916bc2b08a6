"""``==highlight==`` inline rule for markdown-it-py.

Works like the built-in ``~~strikethrough~~`` rule: each ``==`` run is pushed
as a text token and registered as a delimiter, then the post-processing pass
turns matched delimiter pairs into ``mark_open`` / ``mark_close`` tokens.
"""

from __future__ import annotations

from markdown_it import MarkdownIt
from markdown_it.rules_inline.state_inline import Delimiter, StateInline

_MARKER = "="
_MARKER_CODE = ord(_MARKER)


def mark_plugin(md: MarkdownIt) -> None:
    md.inline.ruler.before("emphasis", "mark", _tokenize)
    md.inline.ruler2.before("emphasis", "mark", _post_process)


def _tokenize(state: StateInline, silent: bool) -> bool:
    """Push each ``==`` as a text token and add it to the delimiter list."""
    start = state.pos
    if silent or state.src[start] != _MARKER:
        return False

    scanned = state.scanDelims(start, True)
    length = scanned.length
    if length < 2:
        return False

    if length % 2:
        token = state.push("text", "", 0)
        token.content = _MARKER
        length -= 1

    for _ in range(0, length, 2):
        token = state.push("text", "", 0)
        token.content = _MARKER * 2
        state.delimiters.append(
            Delimiter(
                marker=_MARKER_CODE,
                length=0,
                token=len(state.tokens) - 1,
                end=-1,
                open=scanned.can_open,
                close=scanned.can_close,
            )
        )

    state.pos += scanned.length
    return True


def _pair_delimiters(state: StateInline, delimiters: list[Delimiter]) -> None:
    lone_markers: list[int] = []

    for delim in delimiters:
        if delim.marker != _MARKER_CODE or delim.end == -1:
            continue
        end_delim = delimiters[delim.end]

        token = state.tokens[delim.token]
        token.type = "mark_open"
        token.tag = "mark"
        token.nesting = 1
        token.markup = "=="
        token.content = ""

        token = state.tokens[end_delim.token]
        token.type = "mark_close"
        token.tag = "mark"
        token.nesting = -1
        token.markup = "=="
        token.content = ""

        previous = state.tokens[end_delim.token - 1]
        if previous.type == "text" and previous.content == _MARKER:
            lone_markers.append(end_delim.token - 1)

    # An odd run like "=====" leaves a single "=" in front; move it past the
    # mark_close tokens that follow so it stays inside the text.
    while lone_markers:
        i = lone_markers.pop()
        j = i + 1
        while j < len(state.tokens) and state.tokens[j].type == "mark_close":
            j += 1
        j -= 1
        if i != j:
            state.tokens[i], state.tokens[j] = state.tokens[j], state.tokens[i]


def _post_process(state: StateInline) -> None:
    """Replace matched ``==`` text tokens with mark tags."""
    _pair_delimiters(state, state.delimiters)
    for meta in state.tokens_meta:
        if meta and "delimiters" in meta:
            _pair_delimiters(state, meta["delimiters"])
