"""Shared print geometry constants and unit conversions."""

PTS_IN_INCH = 72.0
MM_IN_INCH = 25.4
MM_IN_CM = 10.0

# in pt from media box to bleed box
BLEED_MARGIN = PTS_IN_INCH * 5 / 6
# in pt from bleed box to trim box
TRIM_MARGIN = PTS_IN_INCH / 6
TRIM_MARK_LINE_WIDTH = 0.5

MIN_TILE_DIMENSION_MM = (BLEED_MARGIN + TRIM_MARGIN + TRIM_MARK_LINE_WIDTH) * 2 * MM_IN_INCH / PTS_IN_INCH

DEFAULT_TILE_SIZE = "A4"


def mm_to_pt(value: float) -> float:
    return value * PTS_IN_INCH / MM_IN_INCH


def pt_to_mm(value: float) -> float:
    return value * MM_IN_INCH / PTS_IN_INCH
