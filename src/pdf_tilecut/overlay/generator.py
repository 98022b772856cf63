"""Overlay content streams carrying the print marks of each tile.

Every tile gets one extra content stream, drawn after the original content:

1. an opaque white margin masking content that spills past the bleed box
2. trim marks (corner or long)
3. the tile reference: row letters and column number at the top-right corner
4. the page reference at the top-left corner
5. the title at the bottom-left corner
6. the logo, unless hidden
"""

import logging

from pdf_tilecut.config import BLEED_MARGIN, TRIM_MARGIN, TRIM_MARK_LINE_WIDTH
from pdf_tilecut.qdf.objects import serialize_stream
from schemas.page import Page

from .logo import LOGO_COMMANDS, LOGO_DIM
from .vecfont import VEC_CHAR_HEIGHT, str_to_vec_chars

logger = logging.getLogger(__name__)


def num_to_alpha(n: int) -> str:
    """Encode a zero-based index as letters: A, B, ..., Z, AA, AB, ...

    Args:
        n: Zero-based index

    Returns:
        Letter label
    """
    if n < 0:
        raise ValueError(f"cannot encode negative index {n}")
    label = ""
    n += 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        label = chr(ord("A") + rem) + label
    return label


class OverlayGenerator:
    """Build overlay streams for tile pages.

    Attributes:
        long_trim_marks: Draw full-length trim lines instead of corner marks
        hide_logo: Skip the logo
        title: Upper-cased title printed below each tile
        bleed_margin: Distance from media box to bleed box, in pt
        trim_margin: Distance from bleed box to trim box, in pt
    """

    def __init__(
        self,
        long_trim_marks: bool = False,
        hide_logo: bool = False,
        title: str = "",
        bleed_margin: float = BLEED_MARGIN,
        trim_margin: float = TRIM_MARGIN,
    ):
        self.long_trim_marks = long_trim_marks
        self.hide_logo = hide_logo
        self.title = title.upper()
        self.bleed_margin = bleed_margin
        self.trim_margin = trim_margin

    def create_overlay(self, overlay_id: int, page: Page) -> str:
        """Create the overlay stream object for a tile.

        Appends overlay_id to page.content_ids so the overlay renders on top
        of the original content.

        Args:
            overlay_id: Object id for the new stream
            page: Tile page to draw marks for

        Returns:
            Serialized stream object
        """
        stream = self.build_stream(page)
        page.content_ids.append(overlay_id)
        logger.debug(
            f"Overlay {overlay_id} for page {page.number} tile "
            f"{num_to_alpha(page.tile_y)}{page.tile_x + 1}"
        )
        return serialize_stream(overlay_id, stream)

    def build_stream(self, page: Page) -> str:
        """Build the overlay drawing operators for a tile."""
        if not page.is_tile:
            raise ValueError(f"page {page.number} has no tile position")

        parts = [
            self._margin_fill(page),
            self._trim_marks(page),
            self._tile_reference(page),
            self._page_reference(page),
            self._title(page),
        ]
        if not self.hide_logo:
            parts.append(self._logo(page))
        return "".join(parts)

    def _margin_fill(self, page: Page) -> str:
        mb, bb = page.media_box, page.bleed_box
        # media box is grown by 1 pt so no seam shows at the sheet edge
        return (
            f" q\n"
            f"    1 1 1 rg {mb.llx - 1:f} {mb.lly - 1:f} m {mb.llx - 1:f} {mb.ury + 1:f} l "
            f"{mb.urx + 1:f} {mb.ury + 1:f} l {mb.urx + 1:f} {mb.lly - 1:f} l h\n"
            f"    {bb.llx:f} {bb.lly:f} m {bb.urx:f} {bb.lly:f} l "
            f"{bb.urx:f} {bb.ury:f} l {bb.llx:f} {bb.ury:f} l h f\n"
            f"  Q "
        )

    def _trim_marks(self, page: Page) -> str:
        mb, bb, tb = page.media_box, page.bleed_box, page.trim_box
        if self.long_trim_marks:
            segments = [
                (mb.llx - 1, tb.lly, mb.urx + 1, tb.lly),  # bottom
                (mb.llx - 1, tb.ury, mb.urx + 1, tb.ury),  # top
                (tb.llx, mb.lly - 1, tb.llx, mb.ury + 1),  # left
                (tb.urx, mb.lly - 1, tb.urx, mb.ury + 1),  # right
            ]
        else:
            segments = [
                (mb.llx - 1, tb.lly, bb.llx, tb.lly),
                (mb.llx - 1, tb.ury, bb.llx, tb.ury),
                (tb.llx, mb.ury + 1, tb.llx, bb.ury),
                (tb.urx, mb.ury + 1, tb.urx, bb.ury),
                (bb.urx, tb.ury, mb.urx + 1, tb.ury),
                (bb.urx, tb.lly, mb.urx + 1, tb.lly),
                (tb.llx, bb.lly, tb.llx, mb.lly - 1),
                (tb.urx, bb.lly, tb.urx, mb.lly - 1),
            ]
        lines = "".join(
            f"      {x1:f} {y1:f} m {x2:f} {y2:f} l S\n" for x1, y1, x2, y2 in segments
        )
        return f" q\n    0 0 0 RG {TRIM_MARK_LINE_WIDTH:f} w\n{lines}    Q "

    def _tile_reference(self, page: Page) -> str:
        bb = page.bleed_box
        vch = VEC_CHAR_HEIGHT
        row_label = str_to_vec_chars(num_to_alpha(page.tile_y), -1, 1)
        col_label = str_to_vec_chars(str(page.tile_x + 1), 1, -1)
        return (
            f"\n    q 0 0 0 rg\n"
            f"      q 1 0 0 1 {bb.urx:f} {bb.ury + vch / 2:f} cm {row_label} Q\n"
            f"      q 1 0 0 1 {bb.urx + vch / 2:f} {bb.ury:f} cm {col_label} Q\n"
            f"    Q\n"
            f"    q\n"
            f"      0 0 0 rg 0 0 0 RG {TRIM_MARK_LINE_WIDTH:f} w 2 J\n"
            f"      {bb.urx + vch / 2:f} {bb.ury + vch / 2:f} m {bb.urx + vch / 2:f} {bb.ury + vch * 1.5:f} l S\n"
            f"      {bb.urx + vch / 2:f} {bb.ury + vch / 2:f} m {bb.urx + vch * 1.5:f} {bb.ury + vch / 2:f} l S\n"
            f"      {bb.urx + vch / 4:f} {bb.ury + vch * 1.5:f} m {bb.urx + vch * 3 / 4:f} {bb.ury + vch * 1.5:f} l "
            f"{bb.urx + vch / 2:f} {bb.ury + vch * 2:f} l h f\n"
            f"      {bb.urx + vch * 1.5:f} {bb.ury + vch / 4:f} m {bb.urx + vch * 1.5:f} {bb.ury + vch * 3 / 4:f} l "
            f"{bb.urx + vch * 2:f} {bb.ury + vch / 2:f} l h f\n"
            f"    Q\n  "
        )

    def _page_reference(self, page: Page) -> str:
        bb, tb = page.bleed_box, page.trim_box
        vch = VEC_CHAR_HEIGHT
        number_label = str_to_vec_chars(str(page.number), -1, 1)
        word_label = str_to_vec_chars("PAGE", -1, -1)
        return (
            f" q 0 0 0 rg\n"
            f"    q 1 0 0 1 {tb.llx - vch / 2:f} {bb.ury + vch / 2:f} cm {number_label} Q\n"
            f"    q 1 0 0 1 {bb.llx - vch / 2:f} {bb.ury:f} cm {word_label} Q\n"
            f"  Q "
        )

    def _title(self, page: Page) -> str:
        bb, tb = page.bleed_box, page.trim_box
        vch = VEC_CHAR_HEIGHT
        title_label = str_to_vec_chars(self.title, 1, -1)
        return (
            f" q 0 0 0 rg q 1 0 0 1 {tb.llx + vch / 2:f} {bb.lly - vch / 2:f} cm "
            f"{title_label} Q Q "
        )

    def _logo(self, page: Page) -> str:
        bb = page.bleed_box
        logo_scale = (self.trim_margin + self.bleed_margin) / (4 * LOGO_DIM)
        logo_size = LOGO_DIM * logo_scale
        return (
            f" q 0 0 0 rg q 1 0 0 1 {bb.llx - logo_size:f} {bb.lly - logo_size:f} cm "
            f"q {logo_scale:f} 0 0 {logo_scale:f} 0 0 cm {LOGO_COMMANDS} Q Q Q "
        )
