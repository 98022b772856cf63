"""Command-line interface for pdf-tilecut."""

import argparse
import logging
import shutil
import sys
import tempfile
from pathlib import Path

from pdf_tilecut.config import DEFAULT_TILE_SIZE
from pdf_tilecut.exceptions import TileCutError
from pdf_tilecut.pipeline.orchestrator import Orchestrator
from schemas.options import build_options, title_from_filename

STDIO = "-"
STDIN_TITLE = "stdin"


def setup_logging(debug: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def default_title(input_file: str) -> str:
    """Title used when none is given: the input file name, or "stdin"."""
    if input_file == STDIO:
        return STDIN_TITLE.upper()
    return title_from_filename(Path(input_file).name)


def tile_cut(args: argparse.Namespace) -> int:
    """Execute a tile cutting run.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.debug)
    logger = logging.getLogger(__name__)

    try:
        options = build_options(
            tile_size=args.tile_size,
            title=args.title if args.title is not None else default_title(args.input),
            debug=args.debug,
            long_trim_marks=args.long_trim_marks,
            hide_logo=args.hide_logo,
        )
        logger.debug(f"Tile size: {options.tile_size}")

        if args.input != STDIO and not Path(args.input).exists():
            logger.error(f"Input file not found: {args.input}")
            return 1

        with tempfile.TemporaryDirectory(prefix="pdf-tilecut-io-") as staging:
            input_path = Path(args.input)
            if args.input == STDIO:
                input_path = Path(staging) / "stdin.pdf"
                with open(input_path, "wb") as f:
                    shutil.copyfileobj(sys.stdin.buffer, f)

            output_path = Path(args.output)
            if args.output == STDIO:
                output_path = Path(staging) / "stdout.pdf"

            result = Orchestrator(options).run(input_path, output_path)

            if args.output == STDIO:
                with open(output_path, "rb") as f:
                    shutil.copyfileobj(f, sys.stdout.buffer)
                sys.stdout.buffer.flush()

        if result.pages_skipped:
            logger.warning(f"  Skipped pages: {result.pages_skipped}")
            for message in result.skipped_pages:
                logger.warning(f"    - {message}")

        return 0

    except TileCutError as e:
        logger.error(f"Tile cutting failed: {e.message}")
        return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        prog="pdf-tilecut",
        description="Cut the pages of a PDF into smaller tiles with trim marks for printing",
    )
    parser.add_argument(
        "-i", "--input",
        type=str,
        default=STDIO,
        help="Input PDF (default: stdin)",
    )
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=STDIO,
        help="Output PDF (default: stdout)",
    )
    parser.add_argument(
        "-t", "--tile-size",
        type=str,
        default=DEFAULT_TILE_SIZE,
        help=(
            "Maximum tile size: a standard paper size (e.g. A5, letter) or "
            f"width x height with a unit of mm, cm, in or pt (e.g. 6cm x 12in) (default: {DEFAULT_TILE_SIZE})"
        ),
    )
    parser.add_argument(
        "--title",
        type=str,
        default=None,
        help="Title to show on the margin of each tile (default: input file name)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output and keep temp files",
    )
    parser.add_argument(
        "--long-trim-marks",
        action="store_true",
        help="Use full width/height trim marks",
    )
    parser.add_argument(
        "--hide-logo",
        action="store_true",
        help="Hide the logo",
    )

    args = parser.parse_args(argv)
    return tile_cut(args)


if __name__ == "__main__":
    sys.exit(main())
