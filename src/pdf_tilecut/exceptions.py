"""Custom exceptions for tile cutting."""


class TileCutError(Exception):
    """Base exception for all tile cutting errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class MalformedPageError(TileCutError):
    """Raised when a single page object cannot be extracted.

    Not fatal: the page is logged and skipped.
    """

    def __init__(self, message: str, page_number: int | None = None, *args, **kwargs):
        self.page_number = page_number
        super().__init__(message, *args, **kwargs)


class StructuralAnchorNotFoundError(TileCutError):
    """Raised when a document-wide anchor (page tree, xref, trailer) is missing."""

    def __init__(self, anchor: str, message: str | None = None):
        self.anchor = anchor
        super().__init__(message or f"cannot find {anchor}")


class ConfigurationError(TileCutError):
    """Raised for an invalid tile size, title or other option."""

    pass


class ExternalLibraryError(TileCutError):
    """Raised when the PDF library fails to read or write a document."""

    pass


class UnsupportedGlyphError(TileCutError):
    """Raised when a label contains a character the vector font cannot draw."""

    def __init__(self, char: str, message: str | None = None):
        self.char = char
        super().__init__(message or f"unsupported character {char!r} in label")
