"""Tests for the overlay content generator."""

import pytest

from pdf_tilecut.config import TRIM_MARK_LINE_WIDTH
from pdf_tilecut.exceptions import UnsupportedGlyphError
from pdf_tilecut.overlay import LOGO_COMMANDS, OverlayGenerator, num_to_alpha, str_to_vec_chars
from pdf_tilecut.tiling import cut_page_to_tiles


@pytest.fixture
def tiles(sample_page):
    """Four 300 x 450 pt tiles of the sample page."""
    return cut_page_to_tiles(sample_page, 560, 810)


def trim_mark_lines(stream: str) -> list[str]:
    """Return the stroked segments of the trim mark block."""
    block = stream.split(f"0 0 0 RG {TRIM_MARK_LINE_WIDTH:f} w\n", 1)[1]
    block = block.split("    Q", 1)[0]
    return block.strip().splitlines()


class TestNumToAlpha:
    """Tests for num_to_alpha."""

    @pytest.mark.parametrize("n, label", [
        (0, "A"),
        (1, "B"),
        (25, "Z"),
        (26, "AA"),
        (27, "AB"),
        (701, "ZZ"),
        (702, "AAA"),
    ])
    def test_labels(self, n, label):
        """Rows are labelled A..Z, then AA, AB, ..."""
        assert num_to_alpha(n) == label

    def test_negative(self):
        """Negative indexes cannot be encoded."""
        with pytest.raises(ValueError):
            num_to_alpha(-1)


class TestCreateOverlay:
    """Tests for OverlayGenerator.create_overlay."""

    def test_registers_overlay_on_tile(self, tiles):
        """The overlay id is appended after the tile's content."""
        tile = tiles[0]

        OverlayGenerator().create_overlay(12, tile)

        assert tile.content_ids == [5, 12]

    def test_stream_object(self, tiles):
        """The overlay is a stream object whose /Length matches its data."""
        generator = OverlayGenerator(title="T")
        text = generator.create_overlay(12, tiles[0])

        data = generator.build_stream(tiles[0])
        assert text.startswith(f"12 0 obj\n<< /Length {len(data)} >>\nstream\n")
        assert text.endswith(f"{data}\nendstream\nendobj\n")

    def test_requires_tile(self, sample_page):
        """Only tiles get overlays."""
        with pytest.raises(ValueError):
            OverlayGenerator().build_stream(sample_page)


class TestOverlayContent:
    """Tests for the drawing operators of an overlay."""

    def test_margin_fill_comes_first(self, tiles):
        """The stream starts by painting the white margin outside the bleed box."""
        stream = OverlayGenerator().build_stream(tiles[0])

        assert stream.startswith(
            " q\n    1 1 1 rg -73.000000 -73.000000 m -73.000000 523.000000 l "
        )
        assert "-12.000000 -12.000000 m 312.000000 -12.000000 l" in stream

    def test_corner_trim_marks(self, tiles):
        """Corner mode draws eight short segments."""
        stream = OverlayGenerator().build_stream(tiles[0])

        lines = trim_mark_lines(stream)
        assert len(lines) == 8
        assert "-73.000000 0.000000 m -12.000000 0.000000 l S" in lines[0]

    def test_long_trim_marks(self, tiles):
        """Long mode draws four lines across the whole sheet."""
        stream = OverlayGenerator(long_trim_marks=True).build_stream(tiles[0])

        lines = trim_mark_lines(stream)
        assert len(lines) == 4
        assert "-73.000000 0.000000 m 373.000000 0.000000 l S" in lines[0]

    def test_tile_reference(self, tiles):
        """Row letters and the 1-based column number label the tile."""
        tile = tiles[3]
        stream = OverlayGenerator().build_stream(tile)

        assert (tile.tile_x, tile.tile_y) == (1, 1)
        assert str_to_vec_chars("B", -1, 1) in stream
        assert str_to_vec_chars("2", 1, -1) in stream

    def test_page_reference(self, tiles):
        """The page number and the word PAGE are drawn."""
        stream = OverlayGenerator().build_stream(tiles[0])

        assert str_to_vec_chars("1", -1, 1) in stream
        assert str_to_vec_chars("PAGE", -1, -1) in stream

    def test_title(self, tiles):
        """The title is upper-cased and drawn below the bleed box."""
        stream = OverlayGenerator(title="poster").build_stream(tiles[0])

        assert str_to_vec_chars("POSTER", 1, -1) in stream
        assert "q 1 0 0 1 4.000000 -16.000000 cm" in stream

    def test_logo_shown_by_default(self, tiles):
        """The logo is drawn unless hidden."""
        stream = OverlayGenerator().build_stream(tiles[0])

        assert LOGO_COMMANDS in stream
        assert "q 0.180000 0 0 0.180000 0 0 cm" in stream

    def test_hide_logo(self, tiles):
        """hide_logo leaves the logo out."""
        stream = OverlayGenerator(hide_logo=True).build_stream(tiles[0])

        assert LOGO_COMMANDS not in stream

    def test_unsupported_title(self, tiles):
        """A title the font cannot draw fails when the overlay is built."""
        with pytest.raises(UnsupportedGlyphError):
            OverlayGenerator(title="~").create_overlay(12, tiles[0])
