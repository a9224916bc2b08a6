"""UI components."""

from vaultview.components.markdown_view import MarkdownView

__all__ = [
    "MarkdownView",
]
