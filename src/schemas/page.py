"""Page geometry domain objects."""

from collections.abc import Sequence
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Rect:
    """A rectangle in PDF user space (points, origin at the bottom-left).

    Attributes:
        llx: Lower-left x
        lly: Lower-left y
        urx: Upper-right x
        ury: Upper-right y
    """

    llx: float
    lly: float
    urx: float
    ury: float

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "Rect":
        if len(values) != 4:
            raise ValueError(f"rectangle needs 4 values, got {len(values)}")
        llx, lly, urx, ury = (float(v) for v in values)
        return cls(llx, lly, urx, ury)

    @property
    def width(self) -> float:
        return self.urx - self.llx

    @property
    def height(self) -> float:
        return self.ury - self.lly

    def is_valid(self) -> bool:
        return self.llx <= self.urx and self.lly <= self.ury

    def expand(self, margin: float) -> "Rect":
        """Grow the rectangle outward by margin on every side."""
        return Rect(
            self.llx - margin,
            self.lly - margin,
            self.urx + margin,
            self.ury + margin,
        )

    def contains(self, other: "Rect") -> bool:
        return (
            self.llx <= other.llx
            and self.lly <= other.lly
            and self.urx >= other.urx
            and self.ury >= other.ury
        )


@dataclass
class Page:
    """A source page or a tile derived from one.

    Attributes:
        number: 1-based ordinal of the original page (shared by its tiles)
        media_box: Full physical sheet
        crop_box: Visible region
        bleed_box: Region kept after trimming plus bleed
        trim_box: Intended cut line
        content_ids: Content stream object ids, rendered in order
        raw: Unrecognized dictionary entries of the page object, verbatim
        id: Object id in the rewritten document, assigned on reassembly
        parent_id: Page tree node the page belongs to
        tile_x: Zero-based column of a tile within its page
        tile_y: Zero-based row of a tile within its page (row 0 at the bottom)
    """

    number: int
    media_box: Rect
    crop_box: Rect
    bleed_box: Rect
    trim_box: Rect
    content_ids: list[int] = field(default_factory=list)
    raw: str = ""
    id: int | None = None
    parent_id: int | None = None
    tile_x: int | None = None
    tile_y: int | None = None

    @property
    def is_tile(self) -> bool:
        return self.tile_x is not None and self.tile_y is not None
