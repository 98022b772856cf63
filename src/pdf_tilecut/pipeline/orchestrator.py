"""Pipeline orchestrator for end-to-end PDF → tiled PDF processing.

Normalizes the input to QDF text with qpdf, rewrites the object graph so
every page is replaced by its tiles, and lets qpdf write the final optimized
file.
"""

import logging
import shutil
import tempfile
from pathlib import Path

import fitz  # PyMuPDF
from pydantic import BaseModel, Field

from pdf_tilecut.exceptions import ExternalLibraryError, MalformedPageError
from pdf_tilecut.normalizer import ObjectStreamMode, PdfNormalizer, StreamDataMode
from pdf_tilecut.overlay import OverlayGenerator
from pdf_tilecut.qdf.document import QDFDocument
from pdf_tilecut.qdf.objects import extract_page, find_root_page_tree_id
from pdf_tilecut.reassembler import Reassembler
from pdf_tilecut.tiling import cut_page_to_tiles
from schemas.options import TileCutOptions
from schemas.page import Page

logger = logging.getLogger(__name__)

# qpdf text is 8-bit clean under latin-1
QDF_ENCODING = "latin-1"


class TileCutResult(BaseModel):
    """Summary of one tile cutting run.

    Attributes:
        pages_found: Page objects found in the document
        pages_skipped: Pages that could not be extracted
        tiles_written: Tile pages in the output
        output_path: Written file, None when only text was processed
        skipped_pages: One message per skipped page
    """

    pages_found: int = 0
    pages_skipped: int = 0
    tiles_written: int = 0
    output_path: Path | None = None
    skipped_pages: list[str] = Field(default_factory=list)


class Orchestrator:
    """End-to-end tile cutting orchestrator.

    Attributes:
        options: Validated run options
        overlay_generator: Builds the print marks of every tile
    """

    def __init__(self, options: TileCutOptions):
        self.options = options
        self.overlay_generator = OverlayGenerator(
            long_trim_marks=options.long_trim_marks,
            hide_logo=options.hide_logo,
            title=options.title,
        )

    def run(self, input_path: Path, output_path: Path) -> TileCutResult:
        """Tile-cut a PDF file.

        Temp files are removed on every exit path unless options.debug is
        set, in which case their directory is logged and kept.

        Args:
            input_path: PDF to read
            output_path: Where to write the tiled PDF

        Returns:
            Run summary

        Raises:
            TileCutError: On any fatal error
        """
        work_dir = Path(tempfile.mkdtemp(prefix="pdf-tilecut-"))
        qdf_path = work_dir / "normalized.pdf"
        tiled_path = work_dir / "tiled.pdf"

        try:
            self._normalize(input_path, qdf_path)
            text = qdf_path.read_bytes().decode(QDF_ENCODING)

            tiled_text, result = self.process_qdf(text)
            if result.tiles_written:
                tiled_path.write_bytes(tiled_text.encode(QDF_ENCODING))
                del text, tiled_text
                self._optimize(tiled_path, output_path)
            else:
                # qpdf cannot recover a rewritten file with an empty page tree
                logger.warning(f"No tiles cut from {input_path}, writing an empty document")
                self._write_empty(output_path)
            self._verify(output_path, result.tiles_written)
        finally:
            if self.options.debug:
                logger.info(f"Keeping temp files in {work_dir}")
            else:
                shutil.rmtree(work_dir, ignore_errors=True)

        result.output_path = output_path
        logger.info(
            f"Wrote {result.tiles_written} tiles from {result.pages_found} pages to {output_path}"
        )
        return result

    def process_qdf(self, text: str) -> tuple[str, TileCutResult]:
        """Replace every page of a QDF document by its tiles.

        Args:
            text: QDF document text

        Returns:
            (rewritten QDF text, run summary)

        Raises:
            StructuralAnchorNotFoundError: If the page tree or xref section
                cannot be found
        """
        document = QDFDocument.parse(text)
        page_tree_id = find_root_page_tree_id(text)

        result = TileCutResult()
        pages = self._extract_pages(document, result)

        tile_w = self.options.tile_width_pt
        tile_h = self.options.tile_height_pt
        tiles = []
        for page in pages:
            tiles.extend(cut_page_to_tiles(page, tile_w, tile_h))

        Reassembler(document, self.overlay_generator).reassemble(tiles, page_tree_id)
        result.tiles_written = len(tiles)
        return document.serialize(), result

    def _extract_pages(self, document: QDFDocument, result: TileCutResult) -> list[Page]:
        """Extract all well-formed pages, sorted by page number."""
        pages = []
        for number, obj in document.pages():
            result.pages_found += 1
            try:
                pages.append(extract_page(obj.body, number, document))
            except MalformedPageError as e:
                message = f"page {number}: {e.message}"
                logger.warning(f"Skipping {message}")
                result.pages_skipped += 1
                result.skipped_pages.append(message)

        pages.sort(key=lambda p: p.number)
        logger.debug(f"Extracted {len(pages)} of {result.pages_found} pages")
        return pages

    def _normalize(self, input_path: Path, qdf_path: Path) -> None:
        with PdfNormalizer({
            "normalize": True,
            "object_stream_mode": ObjectStreamMode.DISABLE,
            "stream_data_mode": StreamDataMode.PRESERVE,
            "compress_streams": False,
            "suppress_warnings": not self.options.debug,
        }) as normalizer:
            normalizer.read(input_path)
            normalizer.write(qdf_path)

    def _optimize(self, tiled_path: Path, output_path: Path) -> None:
        with PdfNormalizer({
            "object_stream_mode": ObjectStreamMode.GENERATE,
            "stream_data_mode": StreamDataMode.PRESERVE,
            "compress_streams": True,
            "suppress_warnings": not self.options.debug,
        }) as normalizer:
            normalizer.read(tiled_path)
            normalizer.write(output_path)

    def _write_empty(self, output_path: Path) -> None:
        with PdfNormalizer({
            "object_stream_mode": ObjectStreamMode.GENERATE,
            "compress_streams": True,
        }) as normalizer:
            normalizer.create_empty()
            normalizer.write(output_path)

    def _verify(self, output_path: Path, expected_pages: int) -> None:
        """Check the written file has one page per tile.

        Raises:
            ExternalLibraryError: If the file cannot be opened or the page
                count differs
        """
        try:
            doc = fitz.open(str(output_path))
        except (RuntimeError, OSError) as e:
            raise ExternalLibraryError(f"cannot open written file {output_path}: {e}") from e
        page_count = len(doc)
        doc.close()

        if page_count != expected_pages:
            raise ExternalLibraryError(
                f"{output_path} has {page_count} pages, expected {expected_pages}"
            )
