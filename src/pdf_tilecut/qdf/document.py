"""In-memory arena of the indirect objects of a QDF document.

The document is held as text. Each object keeps its verbatim chunk (the
comment lines qpdf writes before it, its header, body and endobj), so
serializing an unmodified document reproduces the input exactly. New objects
are emitted after the existing ones and before the cross-reference section.

The cross-reference table is not rewritten. qpdf detects the stale offsets on
the next read and rebuilds the table by scanning the objects.
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

from pdf_tilecut.exceptions import StructuralAnchorNotFoundError

from .lexer import EntrySpan, Name, PdfSyntaxError, parse_dict

logger = logging.getLogger(__name__)

OBJECT_HEADER_RE = re.compile(r"^(\d+) (\d+) obj\n", re.MULTILINE)
END_OBJ_RE = re.compile(r"^endobj[ \t\r]*\n?", re.MULTILINE)
STREAM_RE = re.compile(r"^stream\r?\n", re.MULTILINE)
END_STREAM_RE = re.compile(r"\r?\nendstream", re.MULTILINE)
XREF_RE = re.compile(r"^xref[ \t\r]*$", re.MULTILINE)
PAGE_COMMENT_RE = re.compile(r"^%% Page (\d+)\s*$", re.MULTILINE)
COMMENT_LINE_RE = re.compile(r"(?:^%%[^\n]*\n)+\Z", re.MULTILINE)


@dataclass
class QDFObject:
    """One indirect object and its verbatim text.

    Attributes:
        obj_id: Object number
        generation: Generation number
        chunk: Text from the end of the previous object through endobj
        header_start: Offset of the "N G obj" line within chunk
        body_start: Offset just past the header line within chunk
        body_end: Offset of the "endobj" keyword within chunk
    """

    obj_id: int
    generation: int
    chunk: str
    header_start: int
    body_start: int
    body_end: int

    @property
    def body(self) -> str:
        return self.chunk[self.body_start:self.body_end]

    @property
    def page_number(self) -> int | None:
        """Page number from a preceding "%% Page N" comment, if any."""
        match = PAGE_COMMENT_RE.search(self.chunk, 0, self.header_start)
        return int(match.group(1)) if match else None


class QDFDocument:
    """Arena of indirect objects parsed from QDF text."""

    def __init__(self, header: str, objects: list[QDFObject], gap: str, tail: str):
        self.header = header
        self.gap = gap
        self.tail = tail
        self._objects: dict[int, QDFObject] = {}
        self._order: list[int] = []
        for obj in objects:
            self._objects[obj.obj_id] = obj
            self._order.append(obj.obj_id)
        self._added: list[tuple[int, str]] = []

    @classmethod
    def parse(cls, text: str) -> "QDFDocument":
        """Split QDF text into header, object chunks and cross-reference tail.

        Raises:
            StructuralAnchorNotFoundError: If there is no xref section or an
                object has no endobj
        """
        xrefs = list(XREF_RE.finditer(text))
        if not xrefs:
            raise StructuralAnchorNotFoundError("xref section")
        tail_start = xrefs[-1].start()

        objects = []
        header_end = None
        position = 0
        while True:
            match = OBJECT_HEADER_RE.search(text, position, tail_start)
            if match is None:
                break
            if header_end is None:
                # comment lines before the first object belong to it
                leading = COMMENT_LINE_RE.search(text, 0, match.start())
                header_end = leading.start() if leading else match.start()
                position = header_end

            end = cls._object_end(text, match, tail_start)
            end_match = END_OBJ_RE.match(text, end)
            objects.append(QDFObject(
                obj_id=int(match.group(1)),
                generation=int(match.group(2)),
                chunk=text[position:end_match.end()],
                header_start=match.start() - position,
                body_start=match.end() - position,
                body_end=end - position,
            ))
            position = end_match.end()

        if header_end is None:
            header_end = tail_start
            position = tail_start

        logger.debug(f"Parsed {len(objects)} objects from QDF text")
        return cls(
            header=text[:header_end],
            objects=objects,
            gap=text[position:tail_start],
            tail=text[tail_start:],
        )

    @staticmethod
    def _object_end(text: str, header: re.Match, limit: int) -> int:
        """Offset of the endobj keyword closing the object after header."""
        obj_id = header.group(1)
        end = END_OBJ_RE.search(text, header.end(), limit)
        search_from = header.end()
        stream = STREAM_RE.search(text, header.end(), end.start() if end else limit)
        if stream is not None:
            end_stream = END_STREAM_RE.search(text, stream.end(), limit)
            if end_stream is None:
                raise StructuralAnchorNotFoundError(f"endstream of object {obj_id}")
            search_from = end_stream.end()
            end = END_OBJ_RE.search(text, search_from, limit)
        if end is None:
            raise StructuralAnchorNotFoundError(f"endobj of object {obj_id}")
        return end.start()

    def __contains__(self, obj_id: int) -> bool:
        return obj_id in self._objects or any(i == obj_id for i, _ in self._added)

    def __len__(self) -> int:
        return len(self._objects) + len(self._added)

    @property
    def max_object_id(self) -> int:
        """Highest object id defined, including added objects (0 if none)."""
        ids = list(self._objects) + [obj_id for obj_id, _ in self._added]
        return max(ids, default=0)

    def get(self, obj_id: int) -> QDFObject | None:
        return self._objects.get(obj_id)

    def pages(self) -> list[tuple[int, QDFObject]]:
        """Return (page number, object) for every page object, in document order."""
        result = []
        for obj_id in self._order:
            obj = self._objects[obj_id]
            number = obj.page_number
            if number is not None:
                result.append((number, obj))
        return result

    def add_object(self, obj_id: int, text: str) -> None:
        """Append a serialized object, emitted before the xref section.

        Raises:
            ValueError: If obj_id is already defined
        """
        if obj_id in self:
            raise ValueError(f"object {obj_id} is already defined")
        self._added.append((obj_id, text))

    def find_entries(self, obj_id: int, keys: Iterable[str]) -> dict[str, EntrySpan]:
        """Locate dictionary entries of an object without changing it.

        Returns:
            Source spans by key, relative to the object body

        Raises:
            StructuralAnchorNotFoundError: If the object, its dictionary or
                any of the keys is missing
        """
        obj = self._objects.get(obj_id)
        if obj is None:
            raise StructuralAnchorNotFoundError(f"object {obj_id}")
        try:
            entries = parse_dict(obj.body)
        except PdfSyntaxError as e:
            raise StructuralAnchorNotFoundError(
                f"dictionary of object {obj_id}", f"cannot parse object {obj_id}: {e}"
            ) from e

        spans = {}
        for key in keys:
            if key not in entries:
                raise StructuralAnchorNotFoundError(f"/{key} in object {obj_id}")
            spans[key] = entries.spans[Name(key)]
        return spans

    def replace_entries(self, obj_id: int, values: dict[str, str]) -> None:
        """Replace the values of existing dictionary entries in place.

        Args:
            obj_id: Object to edit
            values: Replacement value text by key name (without the slash)

        Raises:
            StructuralAnchorNotFoundError: If the object, its dictionary or
                any of the keys is missing
        """
        found = self.find_entries(obj_id, values)
        obj = self._objects[obj_id]
        body = obj.body
        spans = [(found[key], value) for key, value in values.items()]

        for span, value in sorted(spans, key=lambda s: s[0].value_start, reverse=True):
            body = body[:span.value_start] + value + body[span.value_end:]

        obj.chunk = obj.chunk[:obj.body_start] + body + obj.chunk[obj.body_end:]
        obj.body_end = obj.body_start + len(body)

    def serialize(self) -> str:
        parts = [self.header]
        parts.extend(self._objects[obj_id].chunk for obj_id in self._order)
        parts.extend(text for _, text in self._added)
        parts.append(self.gap)
        parts.append(self.tail)
        return "".join(parts)
