"""Print marks drawn on top of every tile."""

from .generator import OverlayGenerator, num_to_alpha
from .logo import LOGO_COMMANDS, LOGO_DIM
from .vecfont import VEC_CHAR_HEIGHT, is_supported, str_to_vec_chars, text_width

__all__ = [
    "LOGO_COMMANDS",
    "LOGO_DIM",
    "OverlayGenerator",
    "VEC_CHAR_HEIGHT",
    "is_supported",
    "num_to_alpha",
    "str_to_vec_chars",
    "text_width",
]
