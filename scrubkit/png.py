# scrubkit/png.py
"""
PNG scrubber.

Text chunks (tEXt, zTXt, iTXt) are reported as metadata. Scrubbing decodes
the image and writes a brand-new PNG from its pixels, so no ancillary chunk
survives.
"""

from __future__ import annotations

from typing import List

from . import png_codec
from .errors import ParsingError, UnsupportedFileType
from .models import MetadataEntry, ScrubResult
from .scrubber import Scrubber

TEXT_CHUNK_CATEGORY = "text chunk"


class PngScrubber(Scrubber):
    format_name = "PNG"

    def __init__(self, file_bytes: bytes):
        if file_bytes[:8] != png_codec.PNG_SIGNATURE:
            raise UnsupportedFileType("Not a valid PNG file")
        try:
            png_codec.verify_png(file_bytes)
        except ParsingError as e:
            raise UnsupportedFileType(f"Not a valid PNG file: {e.message}") from e
        super().__init__(file_bytes)

    def view_metadata(self) -> List[MetadataEntry]:
        return [
            MetadataEntry(category=TEXT_CHUNK_CATEGORY, key=keyword, value=text)
            for keyword, text in png_codec.read_text_chunks(self._file_bytes)
        ]

    def scrub(self) -> ScrubResult:
        metadata_removed = self.view_metadata()
        if not metadata_removed:
            return ScrubResult(bytes(self._file_bytes), [])

        decoded = png_codec.decode_png(self._file_bytes)
        cleaned = png_codec.encode_png(decoded)
        return ScrubResult(cleaned, metadata_removed)
