"""Cutting pages into a grid of equally sized tiles."""

import logging
import math

from pdf_tilecut.config import BLEED_MARGIN, TRIM_MARGIN
from schemas.page import Page, Rect

logger = logging.getLogger(__name__)


def cut_page_to_tiles(
    page: Page,
    tile_w: float,
    tile_h: float,
    bleed_margin: float = BLEED_MARGIN,
    trim_margin: float = TRIM_MARGIN,
) -> list[Page]:
    """Slice a page into tiles, setting the boxes of each tile.

    The grid is sized to the page's trim box, then the tile size is shrunk so
    every tile in the grid has exactly the same dimensions. Tiles are returned
    row by row starting at the bottom row, left to right within a row.

    Args:
        page: Source page
        tile_w: Maximum tile trim width in pt
        tile_h: Maximum tile trim height in pt
        bleed_margin: Distance from media box to bleed box in pt
        trim_margin: Distance from bleed box to trim box in pt

    Returns:
        Tiles carrying the source page's number, content ids and residue

    Raises:
        ValueError: If tile_w or tile_h is not positive
    """
    if tile_w <= 0 or tile_h <= 0:
        raise ValueError(f"tile size must be positive, got {tile_w} x {tile_h}")

    page_w = page.trim_box.width
    page_h = page.trim_box.height
    if page_w <= 0 or page_h <= 0:
        logger.warning(f"Page {page.number} has an empty trim box, no tiles cut")
        return []

    h_tiles = math.ceil(page_w / tile_w)
    v_tiles = math.ceil(page_h / tile_h)
    tile_w = page_w / h_tiles
    tile_h = page_h / v_tiles

    tiles = []
    for y in range(v_tiles):
        lly = page.trim_box.lly + y * tile_h
        for x in range(h_tiles):
            llx = page.trim_box.llx + x * tile_w
            trim_box = Rect(llx, lly, llx + tile_w, lly + tile_h)
            bleed_box = trim_box.expand(trim_margin)
            media_box = bleed_box.expand(bleed_margin)
            tiles.append(Page(
                number=page.number,
                media_box=media_box,
                crop_box=media_box,
                bleed_box=bleed_box,
                trim_box=trim_box,
                content_ids=list(page.content_ids),
                raw=page.raw,
                tile_x=x,
                tile_y=y,
            ))

    logger.debug(
        f"Page {page.number}: {h_tiles} x {v_tiles} tiles of {tile_w:.2f} x {tile_h:.2f} pt"
    )
    return tiles
