"""Logo drawn in the bottom-left margin of every tile.

Four tiles separated by cut lines, drawn on a LOGO_DIM x LOGO_DIM unit square.
"""

LOGO_DIM = 100

LOGO_COMMANDS = " ".join([
    "0 0 0 rg",
    "4 4 40 40 re 56 4 40 40 re 4 56 40 40 re 56 56 40 40 re f",
    "0 0 0 RG 3 w 0 J",
    "50 0 m 50 100 l S",
    "0 50 m 100 50 l S",
])
