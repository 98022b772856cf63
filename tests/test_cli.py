"""Tests for the CLI module."""

import io
import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import pikepdf

from pdf_tilecut.cli import default_title, main
from pdf_tilecut.exceptions import ExternalLibraryError
from pdf_tilecut.pipeline import TileCutResult


class TestDefaultTitle:
    """Tests for the title used when --title is not given."""

    def test_stdin(self):
        """Reading from stdin titles the tiles STDIN."""
        assert default_title("-") == "STDIN"

    def test_file_name(self):
        """The input file name is upper-cased and folded to drawable characters."""
        assert default_title("/tmp/posters/café poster.pdf") == "CAFE POSTER.PDF"


class TestCLIOptions:
    """Tests for option validation."""

    def test_invalid_tile_size(self, sample_pdf, caplog):
        """An unknown tile size fails before anything is read."""
        result = main(["-i", str(sample_pdf), "-t", "huge"])

        assert result == 1
        assert "invalid tile size" in caplog.text

    def test_tile_size_below_minimum(self, sample_pdf, caplog):
        """A tile too small to hold the margins is rejected."""
        result = main(["-i", str(sample_pdf), "-t", "10mm x 10mm"])

        assert result == 1
        assert "min. tile dimension" in caplog.text

    def test_undrawable_title(self, sample_pdf, caplog):
        """A title the vector font cannot draw is rejected."""
        result = main(["-i", str(sample_pdf), "--title", "a~b"])

        assert result == 1
        assert "cannot be drawn" in caplog.text

    def test_missing_input(self, tmp_path, caplog):
        """A missing input file is reported."""
        result = main(["-i", str(tmp_path / "missing.pdf"), "-o", str(tmp_path / "out.pdf")])

        assert result == 1
        assert "Input file not found" in caplog.text

    def test_options_checked_before_input(self, tmp_path, caplog):
        """A bad tile size is reported even when the input is also missing."""
        result = main(["-i", str(tmp_path / "missing.pdf"), "-t", "huge"])

        assert result == 1
        assert "invalid tile size" in caplog.text
        assert "Input file not found" not in caplog.text


class TestCLITileCut:
    """Tests for running the tile cutter from the command line."""

    @patch("pdf_tilecut.cli.Orchestrator")
    def test_options_passed_to_orchestrator(self, mock_orchestrator_class, sample_pdf, tmp_path):
        """Parsed arguments become the run options."""
        mock_orchestrator_class.return_value.run.return_value = TileCutResult(tiles_written=4)
        output_path = tmp_path / "out.pdf"

        result = main([
            "-i", str(sample_pdf),
            "-o", str(output_path),
            "-t", "a5",
            "--long-trim-marks",
            "--hide-logo",
        ])

        assert result == 0
        options = mock_orchestrator_class.call_args.args[0]
        assert options.title == "SAMPLE.PDF"
        assert options.tile_size.name == "A5"
        assert options.long_trim_marks is True
        assert options.hide_logo is True
        assert options.debug is False
        mock_orchestrator_class.return_value.run.assert_called_once_with(
            Path(sample_pdf), output_path
        )

    @patch("pdf_tilecut.cli.Orchestrator")
    def test_explicit_title(self, mock_orchestrator_class, sample_pdf, tmp_path):
        """--title replaces the file name."""
        mock_orchestrator_class.return_value.run.return_value = TileCutResult()

        main(["-i", str(sample_pdf), "-o", str(tmp_path / "out.pdf"), "--title", "Poster 1"])

        assert mock_orchestrator_class.call_args.args[0].title == "POSTER 1"

    @patch("pdf_tilecut.cli.Orchestrator")
    def test_skipped_pages_reported(self, mock_orchestrator_class, sample_pdf, tmp_path, caplog):
        """Skipped pages are listed as warnings."""
        mock_orchestrator_class.return_value.run.return_value = TileCutResult(
            pages_found=2,
            pages_skipped=1,
            tiles_written=4,
            skipped_pages=["page 2: cannot find /MediaBox"],
        )

        result = main(["-i", str(sample_pdf), "-o", str(tmp_path / "out.pdf")])

        assert result == 0
        assert "Skipped pages: 1" in caplog.text
        assert "page 2: cannot find /MediaBox" in caplog.text

    @patch("pdf_tilecut.cli.Orchestrator")
    def test_run_failure(self, mock_orchestrator_class, sample_pdf, tmp_path, caplog):
        """Fatal errors are logged and give exit code 1."""
        mock_orchestrator_class.return_value.run.side_effect = ExternalLibraryError("boom")

        result = main(["-i", str(sample_pdf), "-o", str(tmp_path / "out.pdf")])

        assert result == 1
        assert "Tile cutting failed: boom" in caplog.text

    def test_files(self, sample_pdf, tmp_path):
        """A real run writes the tiled file."""
        output_path = tmp_path / "out.pdf"

        result = main(["-i", str(sample_pdf), "-o", str(output_path)])

        assert result == 0
        with pikepdf.open(output_path) as pdf:
            assert len(pdf.pages) == 8

    def test_stdin_to_stdout(self, sample_pdf, monkeypatch):
        """With no files given the PDF is read from stdin and written to stdout."""
        stdin = SimpleNamespace(buffer=io.BytesIO(sample_pdf.read_bytes()))
        stdout = SimpleNamespace(buffer=io.BytesIO())
        monkeypatch.setattr(sys, "stdin", stdin)
        monkeypatch.setattr(sys, "stdout", stdout)

        result = main([])

        assert result == 0
        data = stdout.buffer.getvalue()
        assert data.startswith(b"%PDF-")
        with pikepdf.open(io.BytesIO(data)) as pdf:
            assert len(pdf.pages) == 8
