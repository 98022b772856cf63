"""Conversion between page objects in QDF text and Page records."""

import logging
import re
from typing import Any

from pdf_tilecut.exceptions import MalformedPageError, StructuralAnchorNotFoundError
from schemas.page import Page, Rect

from .document import QDFDocument
from .lexer import Name, Parser, PdfDict, PdfSyntaxError, Reference, parse_dict

logger = logging.getLogger(__name__)

BOX_KEYS = ("MediaBox", "CropBox", "BleedBox", "TrimBox", "ArtBox")
EXTRACTED_KEYS = frozenset(BOX_KEYS + ("Contents", "Parent"))

OBJECT_HEADER_RE = re.compile(r"^(\d+) (\d+) obj\b", re.MULTILINE)
XREF_HEADER_RE = re.compile(r"^xref\s+\d+\s+(\d+)", re.MULTILINE)
TRAILER_RE = re.compile(r"^trailer\b", re.MULTILINE)


def _resolve(value: Any, document: QDFDocument | None, key: str, number: int) -> Any:
    """Replace an indirect reference by the value of the object it points to."""
    if not isinstance(value, Reference) or document is None:
        return value
    obj = document.get(value.obj_id)
    if obj is None:
        raise MalformedPageError(
            f"/{key} refers to missing object {value.obj_id}", page_number=number
        )
    try:
        resolved, _, _ = Parser(obj.body).parse_value()
    except PdfSyntaxError as e:
        raise MalformedPageError(
            f"cannot parse /{key} object {value.obj_id}: {e}", page_number=number
        ) from e
    return resolved


def _read_box(
    entries: PdfDict, key: str, number: int, document: QDFDocument | None = None
) -> Rect | None:
    if key not in entries:
        return None
    value = _resolve(entries[key], document, key, number)
    if (
        not isinstance(value, list)
        or len(value) != 4
        or not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in value)
    ):
        raise MalformedPageError(f"/{key} is not an array of four numbers", page_number=number)
    return Rect.from_sequence(value)


def _read_contents(
    entries: PdfDict, number: int, document: QDFDocument | None = None
) -> list[int]:
    if "Contents" not in entries:
        raise MalformedPageError("cannot find /Contents", page_number=number)
    value = entries["Contents"]
    if isinstance(value, Reference):
        # a stream, or an indirect array of streams
        resolved = _resolve(value, document, "Contents", number)
        if not isinstance(resolved, list):
            return [value.obj_id]
        value = resolved
    if isinstance(value, list) and all(isinstance(v, Reference) for v in value):
        return [v.obj_id for v in value]
    raise MalformedPageError("/Contents is not a reference or array of references", page_number=number)


def extract_page(raw_body: str, number: int, document: QDFDocument | None = None) -> Page:
    """Build a Page from the dictionary text of a page object.

    Missing boxes default along the chain crop <- media, bleed <- crop and
    trim <- crop. Entries other than the boxes, /Contents and /Parent are
    kept verbatim as the page's residue. Indirect boxes and an indirect
    /Contents array are resolved through document when one is given.

    Args:
        raw_body: Object body, starting at the page dictionary
        number: 1-based page number in the original document
        document: Document holding the objects the page refers to

    Returns:
        Page with geometry, content ids and residue

    Raises:
        MalformedPageError: If /Contents or /MediaBox is missing, a box is
            not four numbers, or a box is invalid after defaulting
    """
    try:
        entries = parse_dict(raw_body)
    except PdfSyntaxError as e:
        raise MalformedPageError(f"cannot parse page dictionary: {e}", page_number=number) from e

    content_ids = _read_contents(entries, number, document)

    media_box = _read_box(entries, "MediaBox", number, document)
    if media_box is None:
        raise MalformedPageError("cannot find /MediaBox", page_number=number)
    crop_box = _read_box(entries, "CropBox", number, document) or media_box
    bleed_box = _read_box(entries, "BleedBox", number, document) or crop_box
    trim_box = _read_box(entries, "TrimBox", number, document) or crop_box

    for name, box in (
        ("MediaBox", media_box),
        ("CropBox", crop_box),
        ("BleedBox", bleed_box),
        ("TrimBox", trim_box),
    ):
        if not box.is_valid():
            raise MalformedPageError(
                f"invalid /{name} [{box.llx:g} {box.lly:g} {box.urx:g} {box.ury:g}]",
                page_number=number,
            )

    residue = [
        "  " + raw_body[span.key_start:span.value_end]
        for key, span in entries.spans.items()
        if key not in EXTRACTED_KEYS
    ]

    parent = entries.get("Parent")
    return Page(
        number=number,
        media_box=media_box,
        crop_box=crop_box,
        bleed_box=bleed_box,
        trim_box=trim_box,
        content_ids=content_ids,
        raw="\n".join(residue),
        parent_id=parent.obj_id if isinstance(parent, Reference) else None,
    )


def _format_box(box: Rect) -> str:
    return f"[ {box.llx:f} {box.lly:f} {box.urx:f} {box.ury:f} ]"


def serialize_page(page: Page) -> str:
    """Serialize a page as a complete indirect object.

    All four boxes are written explicitly, followed by the content
    references, the parent reference and the residue.

    Raises:
        ValueError: If the page has no id or parent id yet
    """
    if page.id is None or page.parent_id is None:
        raise ValueError(f"page {page.number} needs an id and a parent id before serializing")

    contents = "".join(f" {cid} 0 R " for cid in page.content_ids)
    return (
        f"\n{page.id} 0 obj\n<<\n"
        f"  /MediaBox {_format_box(page.media_box)}\n"
        f"  /CropBox {_format_box(page.crop_box)}\n"
        f"  /BleedBox {_format_box(page.bleed_box)}\n"
        f"  /TrimBox {_format_box(page.trim_box)}\n"
        f"  /Contents [ {contents} ]\n"
        f"  /Parent {page.parent_id} 0 R\n"
        f"{page.raw}\n>>\nendobj\n"
    )


def serialize_stream(obj_id: int, data: str) -> str:
    """Serialize a stream object with a direct /Length."""
    length = len(data.encode("latin-1"))
    return f"{obj_id} 0 obj\n<< /Length {length} >>\nstream\n{data}\nendstream\nendobj\n"


def _object_dict(document_text: str, obj_id: int) -> PdfDict | None:
    match = re.search(rf"^{obj_id} \d+ obj\b", document_text, re.MULTILINE)
    if match is None:
        return None
    try:
        return parse_dict(document_text, match.end())
    except PdfSyntaxError:
        return None


def _find_catalog_pages(document_text: str) -> int | None:
    for match in OBJECT_HEADER_RE.finditer(document_text):
        try:
            entries = parse_dict(document_text, match.end())
        except PdfSyntaxError:
            continue
        if entries.get("Type") == Name("Catalog") and isinstance(entries.get("Pages"), Reference):
            return entries["Pages"].obj_id
    return None


def find_root_page_tree_id(document_text: str) -> int:
    """Find the object id of the root page tree node.

    Follows the trailer's /Root to the catalog and its /Pages reference,
    falling back to the first /Type /Catalog object in the body.

    Raises:
        StructuralAnchorNotFoundError: If no page tree can be found
    """
    trailers = list(TRAILER_RE.finditer(document_text))
    if trailers:
        try:
            trailer = parse_dict(document_text, trailers[-1].end())
        except PdfSyntaxError:
            trailer = None
        root = trailer.get("Root") if trailer is not None else None
        if isinstance(root, Reference):
            catalog = _object_dict(document_text, root.obj_id)
            if catalog is not None and isinstance(catalog.get("Pages"), Reference):
                return catalog["Pages"].obj_id

    logger.debug("Trailer /Root did not lead to a page tree, scanning for the catalog")
    page_tree_id = _find_catalog_pages(document_text)
    if page_tree_id is None:
        raise StructuralAnchorNotFoundError("root page tree")
    return page_tree_id


def find_next_free_object_id(document_text: str) -> int:
    """Return the first object id not used by the document.

    The object count of the xref section header is the primary source; the
    result is never lower than the highest defined object id + 1.

    Raises:
        StructuralAnchorNotFoundError: If there is no xref section
    """
    match = XREF_HEADER_RE.search(document_text)
    if match is None:
        raise StructuralAnchorNotFoundError("the next free object id")
    count = int(match.group(1))
    highest = max((int(m.group(1)) for m in OBJECT_HEADER_RE.finditer(document_text)), default=0)
    return max(count, highest + 1)
