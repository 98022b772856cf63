"""Thin wrapper around pikepdf for reading and writing whole documents."""

import logging
from enum import Enum
from pathlib import Path

import pikepdf

from pdf_tilecut.exceptions import ExternalLibraryError

logger = logging.getLogger(__name__)


class ObjectStreamMode(Enum):
    DISABLE = "disable"
    PRESERVE = "preserve"
    GENERATE = "generate"


class StreamDataMode(Enum):
    UNCOMPRESS = "uncompress"
    PRESERVE = "preserve"
    COMPRESS = "compress"


_OBJECT_STREAM_MODES = {
    ObjectStreamMode.DISABLE: pikepdf.ObjectStreamMode.disable,
    ObjectStreamMode.PRESERVE: pikepdf.ObjectStreamMode.preserve,
    ObjectStreamMode.GENERATE: pikepdf.ObjectStreamMode.generate,
}

_STREAM_DECODE_LEVELS = {
    StreamDataMode.UNCOMPRESS: pikepdf.StreamDecodeLevel.generalized,
    StreamDataMode.PRESERVE: pikepdf.StreamDecodeLevel.none,
    StreamDataMode.COMPRESS: pikepdf.StreamDecodeLevel.generalized,
}


class PdfNormalizer:
    """Read a PDF and write it back with qpdf's output options.

    Provides a lazily opened pikepdf.Pdf with context manager support and
    setters for the output options via dict config.

    Config keys:
        normalize: Write QDF, the normalized text form (default: False)
        object_stream_mode: ObjectStreamMode (default: PRESERVE)
        stream_data_mode: StreamDataMode (default: PRESERVE)
        compress_streams: Compress streams that are written uncompressed (default: True)
        suppress_warnings: Hide recoverable damage warnings (default: True)
    """

    def __init__(self, config: dict | None = None):
        config = dict(config or {})
        self._normalize = bool(config.get("normalize", False))
        self._object_stream_mode = ObjectStreamMode(
            config.get("object_stream_mode", ObjectStreamMode.PRESERVE)
        )
        self._stream_data_mode = StreamDataMode(
            config.get("stream_data_mode", StreamDataMode.PRESERVE)
        )
        self._compress_streams = bool(config.get("compress_streams", True))
        self._suppress_warnings = bool(config.get("suppress_warnings", True))
        self._pdf: pikepdf.Pdf | None = None

    @property
    def pdf(self) -> pikepdf.Pdf:
        """The open document."""
        if self._pdf is None:
            raise ExternalLibraryError("no document has been read")
        return self._pdf

    @property
    def page_count(self) -> int:
        return len(self.pdf.pages)

    def set_normalize_mode(self, enabled: bool) -> None:
        self._normalize = enabled

    def set_object_stream_mode(self, mode: ObjectStreamMode) -> None:
        self._object_stream_mode = ObjectStreamMode(mode)

    def set_stream_data_mode(self, mode: StreamDataMode) -> None:
        self._stream_data_mode = StreamDataMode(mode)

    def set_compress_streams(self, enabled: bool) -> None:
        self._compress_streams = enabled

    def set_suppress_warnings(self, enabled: bool) -> None:
        self._suppress_warnings = enabled

    def read(self, path: Path) -> None:
        """Open a document, pushing inherited page attributes down to the pages.

        Raises:
            ExternalLibraryError: If the file cannot be opened or parsed
        """
        self.close()
        try:
            self._pdf = pikepdf.Pdf.open(
                path,
                suppress_warnings=self._suppress_warnings,
                attempt_recovery=True,
                inherit_page_attributes=True,
            )
        except (pikepdf.PdfError, OSError) as e:
            raise ExternalLibraryError(f"cannot read {path}: {e}") from e

        if not self._suppress_warnings:
            for warning in self._pdf.get_warnings():
                logger.warning(f"{path}: {warning}")
        logger.debug(f"Read {path} ({len(self._pdf.pages)} pages)")

    def create_empty(self) -> None:
        """Start a new document with no pages in place of the open one."""
        self.close()
        self._pdf = pikepdf.new()

    def write(self, path: Path) -> None:
        """Write the open document with the current output options.

        Raises:
            ExternalLibraryError: If nothing was read or the write fails
        """
        pdf = self.pdf
        compress = self._compress_streams
        if self._stream_data_mode is StreamDataMode.UNCOMPRESS:
            compress = False
        elif self._stream_data_mode is StreamDataMode.COMPRESS:
            compress = True

        try:
            pdf.save(
                path,
                qdf=self._normalize,
                object_stream_mode=_OBJECT_STREAM_MODES[self._object_stream_mode],
                stream_decode_level=_STREAM_DECODE_LEVELS[self._stream_data_mode],
                compress_streams=compress,
            )
        except (pikepdf.PdfError, OSError) as e:
            raise ExternalLibraryError(f"cannot write {path}: {e}") from e
        logger.debug(
            f"Wrote {path} (qdf={self._normalize}, "
            f"object streams={self._object_stream_mode.value}, "
            f"stream data={self._stream_data_mode.value})"
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def close(self) -> None:
        """Close the open document, if any."""
        if self._pdf is not None:
            self._pdf.close()
            self._pdf = None
