"""Text stylizing through the Unicode mathematical alphanumeric blocks.

``stylize("My Heading", "fraktur")`` maps each Latin letter to its bold
Fraktur code point; ``"double_struck"`` maps to the blackboard-bold letters.
Only ``A-Z`` and ``a-z`` are covered: digits, punctuation and every other
character pass through unchanged.
"""

from __future__ import annotations

from typing import Literal

FontVariant = Literal["fraktur", "double_struck"]

# Bold Fraktur has no holes in the mathematical alphanumeric block.
_FRAKTUR_UPPER = 0x1D56C
_FRAKTUR_LOWER = 0x1D586

_DOUBLE_STRUCK_UPPER = 0x1D538
_DOUBLE_STRUCK_LOWER = 0x1D552

# Double-struck capitals that predate the mathematical block live in
# Letterlike Symbols; their slots in the block are unassigned.
_DOUBLE_STRUCK_EXCEPTIONS = {
    "C": "ℂ",
    "H": "ℍ",
    "N": "ℕ",
    "P": "ℙ",
    "Q": "ℚ",
    "R": "ℝ",
    "Z": "ℤ",
}


def _build_table(upper: int, lower: int, exceptions: dict[str, str]) -> dict[int, str]:
    table: dict[int, str] = {}
    for offset in range(26):
        cap = chr(ord("A") + offset)
        small = chr(ord("a") + offset)
        table[ord(cap)] = exceptions.get(cap, chr(upper + offset))
        table[ord(small)] = chr(lower + offset)
    return table


_TABLES: dict[str, dict[int, str]] = {
    "fraktur": _build_table(_FRAKTUR_UPPER, _FRAKTUR_LOWER, {}),
    "double_struck": _build_table(
        _DOUBLE_STRUCK_UPPER, _DOUBLE_STRUCK_LOWER, _DOUBLE_STRUCK_EXCEPTIONS
    ),
}


def stylize(text: str, variant: FontVariant) -> str:
    """Transliterate *text* into the given font *variant*.

    Unknown variants return the text unchanged.
    """
    table = _TABLES.get(variant)
    if table is None or not text:
        return text
    return text.translate(table)
