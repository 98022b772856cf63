"""Tests for the QDF document arena."""

import pytest

from pdf_tilecut.exceptions import StructuralAnchorNotFoundError
from pdf_tilecut.qdf.document import QDFDocument
from pdf_tilecut.qdf.lexer import parse_dict


class TestQDFDocumentParse:
    """Tests for QDFDocument.parse."""

    def test_round_trip_is_exact(self, sample_qdf_text):
        """An unmodified document serializes to its input."""
        document = QDFDocument.parse(sample_qdf_text)

        assert document.serialize() == sample_qdf_text

    def test_objects_found(self, sample_qdf_text):
        """Every indirect object is in the arena."""
        document = QDFDocument.parse(sample_qdf_text)

        assert len(document) == 9
        assert all(obj_id in document for obj_id in range(1, 10))
        assert document.max_object_id == 9

    def test_header_and_tail(self, sample_qdf_text):
        """The header stops before the first object's comments; the tail starts at xref."""
        document = QDFDocument.parse(sample_qdf_text)

        assert document.header.endswith("%QDF-1.0\n\n")
        assert document.tail.startswith("xref\n0 10\n")
        assert document.tail.endswith("%%EOF\n")

    def test_object_body(self, sample_qdf_text):
        """An object's body runs from its header line to endobj."""
        document = QDFDocument.parse(sample_qdf_text)

        body = document.get(1).body

        assert body == "<<\n  /Pages 2 0 R\n  /Type /Catalog\n>>\n"

    def test_stream_data_is_skipped(self):
        """Object headers inside stream data do not start new objects."""
        text = (
            "%PDF-1.3\n%QDF-1.0\n\n"
            "1 0 obj\n<< /Length 2 0 R >>\nstream\n3 0 obj\nendobj\n\nendstream\nendobj\n\n"
            "2 0 obj\n14\nendobj\n\n"
            "xref\n0 3\ntrailer << /Size 3 >>\nstartxref\n0\n%%EOF\n"
        )

        document = QDFDocument.parse(text)

        assert len(document) == 2
        assert 3 not in document
        assert document.serialize() == text

    def test_missing_xref(self):
        """A document without an xref section cannot be parsed."""
        with pytest.raises(StructuralAnchorNotFoundError):
            QDFDocument.parse("%PDF-1.3\n1 0 obj\n<< >>\nendobj\n")

    def test_missing_endobj(self):
        """An object without endobj is reported."""
        with pytest.raises(StructuralAnchorNotFoundError, match="endobj of object 1"):
            QDFDocument.parse("%PDF-1.3\n1 0 obj\n<< >>\nxref\n0 2\n%%EOF\n")


class TestQDFDocumentPages:
    """Tests for QDFDocument.pages."""

    def test_pages_in_document_order(self, sample_qdf_text):
        """Page objects are found through their %% Page comments."""
        document = QDFDocument.parse(sample_qdf_text)

        pages = document.pages()

        assert [(number, obj.obj_id) for number, obj in pages] == [(1, 3), (2, 4)]

    def test_content_comments_are_not_pages(self, sample_qdf_text):
        """"%% Contents for page N" comments do not mark pages."""
        document = QDFDocument.parse(sample_qdf_text)

        assert document.get(5).page_number is None
        assert document.get(3).page_number == 1


class TestQDFDocumentEditing:
    """Tests for adding objects and replacing entries."""

    def test_added_objects_precede_xref(self, sample_qdf_text):
        """New objects are emitted after the existing ones, before xref."""
        document = QDFDocument.parse(sample_qdf_text)
        document.add_object(10, "10 0 obj\n<< /Length 1 >>\nstream\nq\nendstream\nendobj\n")

        text = document.serialize()

        assert text.index("10 0 obj") > text.index("9 0 obj")
        assert text.index("10 0 obj") < text.index("xref\n")
        assert 10 in document
        assert document.max_object_id == 10

    def test_add_existing_id_rejected(self, sample_qdf_text):
        """An id already in the arena cannot be added again."""
        document = QDFDocument.parse(sample_qdf_text)

        with pytest.raises(ValueError):
            document.add_object(3, "3 0 obj\nnull\nendobj\n")

    def test_replace_entries(self, sample_qdf_text):
        """Values are replaced in place, leaving other entries untouched."""
        document = QDFDocument.parse(sample_qdf_text)

        document.replace_entries(2, {"Count": "1", "Kids": "[\n    20 0 R\n  ]"})

        body = document.get(2).body
        entries = parse_dict(body)
        assert entries["Count"] == 1
        assert [ref.obj_id for ref in entries["Kids"]] == [20]
        assert "  /Type /Pages\n>>\n" in body
        assert "%% Original object ID: 2 0\n2 0 obj\n<<\n  /Count 1\n" in document.serialize()

    def test_find_entries(self, sample_qdf_text):
        """Entry spans point at the values without changing the object."""
        document = QDFDocument.parse(sample_qdf_text)
        body = document.get(2).body

        spans = document.find_entries(2, ("Count", "Kids"))

        assert body[spans["Count"].value_start:spans["Count"].value_end] == "2"
        assert body[spans["Kids"].key_start:spans["Kids"].value_start].startswith("/Kids")
        assert document.serialize() == sample_qdf_text

    def test_replace_missing_key(self, sample_qdf_text):
        """Replacing a key the object lacks is fatal."""
        document = QDFDocument.parse(sample_qdf_text)

        with pytest.raises(StructuralAnchorNotFoundError, match="/Kids in object 1"):
            document.replace_entries(1, {"Kids": "[ ]"})

    def test_replace_missing_object(self, sample_qdf_text):
        """Replacing entries of an undefined object is fatal."""
        document = QDFDocument.parse(sample_qdf_text)

        with pytest.raises(StructuralAnchorNotFoundError, match="object 42"):
            document.replace_entries(42, {"Count": "0"})
