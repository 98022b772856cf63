"""Splicing tile pages back into the document object graph."""

import logging

from pdf_tilecut.overlay import OverlayGenerator
from pdf_tilecut.qdf.document import QDFDocument
from pdf_tilecut.qdf.objects import find_next_free_object_id, serialize_page, serialize_stream
from schemas.page import Page

logger = logging.getLogger(__name__)

SAVE_STATE = "q"
RESTORE_STATE = "Q"
PAGE_TREE_KEYS = ("Count", "Kids")


class IdAllocator:
    """Hands out sequential object ids, never reusing one."""

    def __init__(self, next_id: int):
        if next_id < 1:
            raise ValueError(f"object ids start at 1, got {next_id}")
        self._next_id = next_id

    @property
    def next_id(self) -> int:
        return self._next_id

    def allocate(self) -> int:
        obj_id = self._next_id
        self._next_id += 1
        return obj_id


class Reassembler:
    """Add tile pages to a document and make them its only pages.

    Allocates ids in the order the objects are emitted: the two shared
    graphics state wrapper streams, one overlay per tile, then one page
    object per tile. The root page tree is rewritten to list exactly the
    tiles, so any intermediate page tree nodes are dropped.
    """

    def __init__(self, document: QDFDocument, overlay_generator: OverlayGenerator):
        self.document = document
        self.overlay_generator = overlay_generator
        self.allocator: IdAllocator | None = None

    def reassemble(self, tiles: list[Page], page_tree_id: int) -> list[Page]:
        """Add tiles to the document and point the root page tree at them.

        Args:
            tiles: Tile pages in output order
            page_tree_id: Object id of the root page tree node

        Returns:
            The tiles, with ids and parent ids assigned

        Raises:
            StructuralAnchorNotFoundError: If the xref section, the page tree
                or its /Count or /Kids entry is missing
        """
        # nothing is added unless the page tree can be rewritten
        self.document.find_entries(page_tree_id, PAGE_TREE_KEYS)

        # the xref header lives in the tail, object headers in the arena
        self.allocator = IdAllocator(
            max(find_next_free_object_id(self.document.tail), self.document.max_object_id + 1)
        )

        save_id = self.allocator.allocate()
        restore_id = self.allocator.allocate()
        self.document.add_object(save_id, serialize_stream(save_id, SAVE_STATE))
        self.document.add_object(restore_id, serialize_stream(restore_id, RESTORE_STATE))
        for tile in tiles:
            tile.content_ids = [save_id] + tile.content_ids + [restore_id]

        for tile in tiles:
            overlay_id = self.allocator.allocate()
            self.document.add_object(
                overlay_id, self.overlay_generator.create_overlay(overlay_id, tile)
            )

        for tile in tiles:
            tile.id = self.allocator.allocate()
            tile.parent_id = page_tree_id
            self.document.add_object(tile.id, serialize_page(tile))

        kids = "".join(f"    {tile.id} 0 R\n" for tile in tiles)
        self.document.replace_entries(
            page_tree_id,
            {"Count": str(len(tiles)), "Kids": f"[\n{kids}  ]"},
        )

        logger.info(
            f"Added {len(tiles)} tile pages as objects "
            f"{save_id}-{self.allocator.next_id - 1}"
        )
        return tiles
