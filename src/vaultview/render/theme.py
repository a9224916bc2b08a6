"""Colour and glyph theme for the terminal renderer.

Colours are raw ANSI SGR strings (e.g. ``"\\x1b[38;5;75m"``) so a theme can be
built from any palette the host application uses. ``None`` leaves the
terminal default in place.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from typing import Any, Mapping

from vaultview.stylized_text import FontVariant

# ---------------------------------------------------------------------------
# Heading styles
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HeadingStyle:
    """Glyph and attributes of one heading level."""

    glyph: str
    bold: bool = False
    underline: bool = False
    variant: FontVariant | None = None


# Block-density glyphs, heaviest for level 1.
HEADING_STYLES: dict[int, HeadingStyle] = {
    1: HeadingStyle("█", bold=True, underline=True),
    2: HeadingStyle("▓", bold=True),
    3: HeadingStyle("▒", bold=True),
    4: HeadingStyle("░", bold=True),
    5: HeadingStyle("▖", variant="fraktur"),
    6: HeadingStyle("▁", variant="double_struck"),
}


def heading_style(level: int) -> HeadingStyle:
    return HEADING_STYLES[min(max(level, 1), 6)]


# ---------------------------------------------------------------------------
# Glyphs
# ---------------------------------------------------------------------------

QUOTE_MARKER = "┃"
BULLET_MARKER = "- "
UNCHECKED_BOX = "□ "
CHECKED_BOX = "■ "
CODE_FRAME = "─"

CALLOUT_TITLES: dict[str, str] = {
    "note": "Note",
    "tip": "Tip",
    "important": "Important",
    "warning": "Warning",
    "caution": "Caution",
}


def _default_callout_colors() -> dict[str, str]:
    return {
        "note": "\x1b[38;5;75m",
        "tip": "\x1b[38;5;114m",
        "important": "\x1b[38;5;176m",
        "warning": "\x1b[38;5;179m",
        "caution": "\x1b[38;5;203m",
    }


# ---------------------------------------------------------------------------
# MarkdownTheme
# ---------------------------------------------------------------------------


@dataclass
class MarkdownTheme:
    """Colour / style theme for the markdown renderer."""

    heading_color: str | None = "\x1b[38;5;75m"
    text_color: str | None = None
    quote_color: str | None = "\x1b[38;5;244m"
    list_marker_color: str | None = "\x1b[38;5;244m"
    checkbox_color: str | None = "\x1b[38;5;244m"
    checked_color: str | None = "\x1b[38;5;114m"
    code_fg: str | None = None
    code_bg: str | None = "\x1b[48;5;236m"
    code_frame_color: str | None = "\x1b[38;5;240m"
    inline_code_fg: str | None = "\x1b[38;5;180m"
    inline_code_bg: str | None = None
    link_color: str | None = "\x1b[38;5;75m"
    highlight_fg: str | None = "\x1b[38;5;16m"
    highlight_bg: str | None = "\x1b[48;5;179m"
    callout_colors: dict[str, str] = field(default_factory=_default_callout_colors)
    show_link_urls: bool = True

    @classmethod
    def plain(cls) -> MarkdownTheme:
        """A theme without colours (attributes such as bold still apply)."""
        return cls(
            heading_color=None,
            quote_color=None,
            list_marker_color=None,
            checkbox_color=None,
            checked_color=None,
            code_bg=None,
            code_frame_color=None,
            inline_code_fg=None,
            link_color=None,
            highlight_fg=None,
            highlight_bg=None,
            callout_colors={},
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MarkdownTheme:
        """Build a theme from settings data.

        Keys may be camelCase (``"headingColor"``) or snake_case; the
        camelCase spelling wins when both are present. Unknown keys are
        ignored.
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _snake_case(key)
            if name not in known:
                continue
            if name in kwargs and key == name:
                continue
            kwargs[name] = value

        callouts = kwargs.get("callout_colors")
        if callouts is not None:
            merged = _default_callout_colors()
            merged.update({str(k).lower(): v for k, v in dict(callouts).items()})
            kwargs["callout_colors"] = merged
        if "show_link_urls" in kwargs:
            kwargs["show_link_urls"] = bool(kwargs["show_link_urls"])
        return cls(**kwargs)

    def callout_color(self, kind: str) -> str | None:
        return self.callout_colors.get(kind) or self.quote_color


_CAMEL_RE = re.compile(r"(?<=[a-z0-9])([A-Z])")


def _snake_case(key: str) -> str:
    return _CAMEL_RE.sub(r"_\1", key).lower()
