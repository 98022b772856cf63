"""Schema definitions for pdf-tilecut.

Options live in schemas.options and are imported from there directly.
"""

from .page import Page, Rect

__all__ = [
    "Page",
    "Rect",
]
