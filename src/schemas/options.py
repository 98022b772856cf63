"""Tile cutting options.

Options are validated once at startup, before any document is read, so that
an unusable tile size or title never reaches the rewriting engine.
"""

import re
import unicodedata

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from reportlab.lib import pagesizes

from pdf_tilecut.config import (
    BLEED_MARGIN,
    DEFAULT_TILE_SIZE,
    MIN_TILE_DIMENSION_MM,
    MM_IN_CM,
    MM_IN_INCH,
    PTS_IN_INCH,
    TRIM_MARGIN,
    mm_to_pt,
    pt_to_mm,
)
from pdf_tilecut.exceptions import ConfigurationError
from pdf_tilecut.overlay.vecfont import is_supported

DIMENSION_RE = re.compile(
    r"^\s*(\d+(?:\.\d+)?)\s*(mm|cm|in|pt)\s*x\s*(\d+(?:\.\d+)?)\s*(mm|cm|in|pt)\s*$"
)

UNITS_TO_MM = {
    "mm": 1.0,
    "cm": MM_IN_CM,
    "in": MM_IN_INCH,
    "pt": MM_IN_INCH / PTS_IN_INCH,
}


def _errors_to_message(error: ValidationError) -> str:
    messages = []
    for err in error.errors():
        msg = err["msg"]
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        messages.append(msg)
    return "; ".join(messages)


def lookup_paper_size(name: str) -> tuple[float, float] | None:
    """Look up a named paper size.

    Args:
        name: Paper size name such as "A4" or "letter" (case-insensitive)

    Returns:
        (width, height) in millimetres, or None if the name is unknown
    """
    size = getattr(pagesizes, name.strip().upper(), None)
    if not isinstance(size, tuple) or len(size) != 2:
        return None
    width, height = size
    return pt_to_mm(width), pt_to_mm(height)


class TileSize(BaseModel):
    """Maximum size of a printed tile, margins included.

    Attributes:
        name: Paper size name or the dimension text as given
        width_mm: Tile width in millimetres
        height_mm: Tile height in millimetres
        is_dim: True when given as explicit dimensions rather than a name
    """

    name: str
    width_mm: float
    height_mm: float
    is_dim: bool = False

    @model_validator(mode="after")
    def check_minimum_dimension(self) -> "TileSize":
        if self.width_mm < MIN_TILE_DIMENSION_MM or self.height_mm < MIN_TILE_DIMENSION_MM:
            raise ValueError(
                f"min. tile dimension is {MIN_TILE_DIMENSION_MM:f}mm x {MIN_TILE_DIMENSION_MM:f}mm"
            )
        return self

    @classmethod
    def parse(cls, text: str) -> "TileSize":
        """Parse a paper size name or a "W<unit> x H<unit>" dimension.

        Args:
            text: e.g. "A5", "letter", "6cm x 12in"

        Returns:
            Validated TileSize

        Raises:
            ConfigurationError: If the text is not understood or the size is
                below the minimum tile dimension
        """
        paper = lookup_paper_size(text)
        try:
            if paper is not None:
                return cls(name=text.strip().upper(), width_mm=paper[0], height_mm=paper[1])

            parts = DIMENSION_RE.match(text)
            if parts is None:
                raise ConfigurationError(f"invalid tile size: {text!r}")
            width, width_unit, height, height_unit = parts.groups()
            return cls(
                name=f"{width}{width_unit}x{height}{height_unit}",
                width_mm=float(width) * UNITS_TO_MM[width_unit],
                height_mm=float(height) * UNITS_TO_MM[height_unit],
                is_dim=True,
            )
        except ValidationError as e:
            raise ConfigurationError(_errors_to_message(e)) from e

    def __str__(self) -> str:
        if self.is_dim:
            return f"{self.width_mm:.0f}mm x {self.height_mm:.0f}mm"
        return f"{self.name} ({self.width_mm:.0f}mm x {self.height_mm:.0f}mm)"


def title_from_filename(filename: str) -> str:
    """Derive a drawable title from a file name.

    Accents are folded to ASCII and characters the vector font cannot draw
    are dropped.
    """
    folded = unicodedata.normalize("NFKD", filename)
    folded = folded.encode("ascii", "ignore").decode("ascii").upper()
    return "".join(c for c in folded if is_supported(c))


class TileCutOptions(BaseModel):
    """Options for one tile cutting run.

    Attributes:
        tile_size: Maximum printed tile size, margins included
        title: Title printed on the margin of every tile (upper-cased)
        debug: Keep temp files and surface library warnings
        long_trim_marks: Draw full-length trim lines instead of corner marks
        hide_logo: Do not draw the logo
    """

    tile_size: TileSize = Field(default_factory=lambda: TileSize.parse(DEFAULT_TILE_SIZE))
    title: str = ""
    debug: bool = False
    long_trim_marks: bool = False
    hide_logo: bool = False

    @field_validator("title")
    @classmethod
    def check_title(cls, value: str) -> str:
        value = value.upper()
        unsupported = sorted({c for c in value if not is_supported(c)})
        if unsupported:
            raise ValueError(
                f"title contains characters that cannot be drawn: {''.join(unsupported)!r}"
            )
        return value

    @property
    def tile_width_pt(self) -> float:
        """Tile content width in points, net of bleed and trim margins."""
        return mm_to_pt(self.tile_size.width_mm) - (BLEED_MARGIN + TRIM_MARGIN) * 2

    @property
    def tile_height_pt(self) -> float:
        """Tile content height in points, net of bleed and trim margins."""
        return mm_to_pt(self.tile_size.height_mm) - (BLEED_MARGIN + TRIM_MARGIN) * 2


def build_options(
    tile_size: str = DEFAULT_TILE_SIZE,
    title: str = "",
    debug: bool = False,
    long_trim_marks: bool = False,
    hide_logo: bool = False,
) -> TileCutOptions:
    """Build validated options from raw values.

    Raises:
        ConfigurationError: If any option is invalid
    """
    size = TileSize.parse(tile_size)
    try:
        return TileCutOptions(
            tile_size=size,
            title=title,
            debug=debug,
            long_trim_marks=long_trim_marks,
            hide_logo=hide_logo,
        )
    except ValidationError as e:
        raise ConfigurationError(_errors_to_message(e)) from e
