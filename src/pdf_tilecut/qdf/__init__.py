"""Reading and editing the QDF text form of a PDF."""

from .document import QDFDocument, QDFObject
from .lexer import Name, PdfDict, PdfSyntaxError, Reference, parse_dict
from .objects import (
    extract_page,
    find_next_free_object_id,
    find_root_page_tree_id,
    serialize_page,
    serialize_stream,
)

__all__ = [
    "Name",
    "PdfDict",
    "PdfSyntaxError",
    "QDFDocument",
    "QDFObject",
    "Reference",
    "extract_page",
    "find_next_free_object_id",
    "find_root_page_tree_id",
    "parse_dict",
    "serialize_page",
    "serialize_stream",
]
