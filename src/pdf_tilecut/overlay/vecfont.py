"""Minimal stroked vector font for print-mark labels.

Labels are drawn as line art rather than text so that tile pages carry no font
resources at all. Each glyph is a list of polylines on a 4x6 unit grid with
the origin at the glyph's bottom-left corner.
"""

from pdf_tilecut.exceptions import UnsupportedGlyphError

# in pt
VEC_CHAR_HEIGHT = 8.0

GLYPH_WIDTH = 4
GLYPH_HEIGHT = 6
GLYPH_ADVANCE = 6

Polyline = list[tuple[float, float]]

GLYPHS: dict[str, list[Polyline]] = {
    " ": [],
    "0": [[(0, 0), (4, 0), (4, 6), (0, 6), (0, 0)], [(0, 0), (4, 6)]],
    "1": [[(1, 5), (2, 6), (2, 0)], [(1, 0), (3, 0)]],
    "2": [[(0, 6), (4, 6), (4, 3), (0, 3), (0, 0), (4, 0)]],
    "3": [[(0, 6), (4, 6), (4, 0), (0, 0)], [(1, 3), (4, 3)]],
    "4": [[(0, 6), (0, 3), (4, 3)], [(4, 6), (4, 0)]],
    "5": [[(4, 6), (0, 6), (0, 3), (3, 3), (4, 2), (4, 0), (0, 0)]],
    "6": [[(4, 6), (0, 6), (0, 0), (4, 0), (4, 3), (0, 3)]],
    "7": [[(0, 6), (4, 6), (1, 0)]],
    "8": [[(0, 0), (4, 0), (4, 6), (0, 6), (0, 0)], [(0, 3), (4, 3)]],
    "9": [[(4, 3), (0, 3), (0, 6), (4, 6), (4, 0), (0, 0)]],
    "A": [[(0, 0), (0, 4), (2, 6), (4, 4), (4, 0)], [(0, 3), (4, 3)]],
    "B": [
        [(0, 0), (0, 6), (3, 6), (4, 5), (4, 4), (3, 3), (0, 3)],
        [(3, 3), (4, 2), (4, 1), (3, 0), (0, 0)],
    ],
    "C": [[(4, 6), (0, 6), (0, 0), (4, 0)]],
    "D": [[(0, 0), (0, 6), (2, 6), (4, 4), (4, 2), (2, 0), (0, 0)]],
    "E": [[(4, 6), (0, 6), (0, 0), (4, 0)], [(0, 3), (3, 3)]],
    "F": [[(4, 6), (0, 6), (0, 0)], [(0, 3), (3, 3)]],
    "G": [[(4, 6), (0, 6), (0, 0), (4, 0), (4, 3), (2, 3)]],
    "H": [[(0, 6), (0, 0)], [(4, 6), (4, 0)], [(0, 3), (4, 3)]],
    "I": [[(1, 6), (3, 6)], [(2, 6), (2, 0)], [(1, 0), (3, 0)]],
    "J": [[(4, 6), (4, 0), (0, 0), (0, 2)]],
    "K": [[(0, 6), (0, 0)], [(4, 6), (0, 3), (4, 0)]],
    "L": [[(0, 6), (0, 0), (4, 0)]],
    "M": [[(0, 0), (0, 6), (2, 3), (4, 6), (4, 0)]],
    "N": [[(0, 0), (0, 6), (4, 0), (4, 6)]],
    "O": [[(0, 0), (0, 6), (4, 6), (4, 0), (0, 0)]],
    "P": [[(0, 0), (0, 6), (4, 6), (4, 3), (0, 3)]],
    "Q": [[(3, 0), (0, 0), (0, 6), (4, 6), (4, 1), (3, 0)], [(2, 2), (4, 0)]],
    "R": [[(0, 0), (0, 6), (4, 6), (4, 3), (0, 3)], [(1, 3), (4, 0)]],
    "S": [[(4, 5), (3, 6), (1, 6), (0, 5), (0, 4), (4, 2), (4, 1), (3, 0), (1, 0), (0, 1)]],
    "T": [[(0, 6), (4, 6)], [(2, 6), (2, 0)]],
    "U": [[(0, 6), (0, 0), (4, 0), (4, 6)]],
    "V": [[(0, 6), (2, 0), (4, 6)]],
    "W": [[(0, 6), (1, 0), (2, 3), (3, 0), (4, 6)]],
    "X": [[(0, 6), (4, 0)], [(0, 0), (4, 6)]],
    "Y": [[(0, 6), (2, 3), (4, 6)], [(2, 3), (2, 0)]],
    "Z": [[(0, 6), (4, 6), (0, 0), (4, 0)]],
    ".": [[(2, 0), (2, 0.5)]],
    ",": [[(2, 1), (1, -1)]],
    "-": [[(1, 3), (3, 3)]],
    "_": [[(0, 0), (4, 0)]],
    ":": [[(2, 1), (2, 1.5)], [(2, 4), (2, 4.5)]],
    "/": [[(0, 0), (4, 6)]],
    "(": [[(3, 6), (1, 4), (1, 2), (3, 0)]],
    ")": [[(1, 6), (3, 4), (3, 2), (1, 0)]],
    "+": [[(0, 3), (4, 3)], [(2, 5), (2, 1)]],
    "!": [[(2, 6), (2, 2)], [(2, 0), (2, 0.5)]],
    "?": [[(0, 5), (1, 6), (3, 6), (4, 5), (4, 4), (2, 3), (2, 2)], [(2, 0), (2, 0.5)]],
    "'": [[(2, 6), (2, 4)]],
    "#": [[(1, 0), (1, 6)], [(3, 0), (3, 6)], [(0, 2), (4, 2)], [(0, 4), (4, 4)]],
    "&": [[(4, 0), (1, 4), (1, 5), (2, 6), (3, 5), (3, 4), (0, 2), (0, 1), (1, 0), (3, 0), (4, 2)]],
    "@": [[(3, 2), (3, 4), (1, 4), (1, 2), (4, 2), (4, 6), (0, 6), (0, 0), (4, 0)]],
    "=": [[(0, 2), (4, 2)], [(0, 4), (4, 4)]],
    "[": [[(3, 6), (1, 6), (1, 0), (3, 0)]],
    "]": [[(1, 6), (3, 6), (3, 0), (1, 0)]],
}


def is_supported(char: str) -> bool:
    return char in GLYPHS


def text_width(text: str) -> float:
    """Width in points of text rendered at VEC_CHAR_HEIGHT."""
    if not text:
        return 0.0
    scale = VEC_CHAR_HEIGHT / GLYPH_HEIGHT
    return (len(text) * GLYPH_ADVANCE - (GLYPH_ADVANCE - GLYPH_WIDTH)) * scale


def str_to_vec_chars(text: str, x_dir: int, y_dir: int) -> str:
    """Render text as stroked PDF path operators relative to the current origin.

    The direction pair picks the quadrant the label occupies around the
    origin, so one renderer serves labels anchored at any corner of a box.

    Args:
        text: Label to draw
        x_dir: 1 to extend the label right of the origin, -1 to end it at the origin
        y_dir: 1 to sit the glyphs above the origin, -1 to hang them below it

    Returns:
        Content stream operators (empty for empty text)

    Raises:
        UnsupportedGlyphError: If text contains a character without a glyph
    """
    if x_dir not in (1, -1) or y_dir not in (1, -1):
        raise ValueError(f"direction must be +/-1, got ({x_dir}, {y_dir})")
    if not text:
        return ""

    for char in text:
        if char not in GLYPHS:
            raise UnsupportedGlyphError(char)

    scale = VEC_CHAR_HEIGHT / GLYPH_HEIGHT
    x0 = 0.0 if x_dir > 0 else -text_width(text)
    y0 = 0.0 if y_dir > 0 else -VEC_CHAR_HEIGHT

    parts = [f"0 0 0 RG {VEC_CHAR_HEIGHT / 8:f} w 1 J 1 j"]
    for i, char in enumerate(text):
        gx = x0 + i * GLYPH_ADVANCE * scale
        for polyline in GLYPHS[char]:
            ops = []
            for j, (x, y) in enumerate(polyline):
                op = "m" if j == 0 else "l"
                ops.append(f"{gx + x * scale:f} {y0 + y * scale:f} {op}")
            parts.append(" ".join(ops) + " S")
    return "\n".join(parts)
