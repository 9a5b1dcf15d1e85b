# scrubkit/jpeg.py
"""
JPEG scrubber.

A JPEG is a stream of 0xFF-prefixed markers. Most markers carry a 2-byte
big-endian length (which counts itself) followed by a payload; RSTn and TEM
stand alone. EXIF lives in an APP1 segment whose payload starts with
b"Exif\\0\\0". Scrubbing cuts that one segment out and leaves every other byte
exactly where it was.

The EXIF decoder is handed only the payload of the segment the scanner
found, not the whole file, so viewing and scrubbing always agree on which
block is the metadata. piexif's own JPEG walk is never used.
"""

from __future__ import annotations

import struct
from typing import List, Optional, Tuple

from .errors import UnsupportedFileType
from .exif_reader import read_exif_entries
from .models import MetadataEntry, ScrubResult
from .scrubber import Scrubber

SOI = b"\xff\xd8"
APP1 = 0xE1
SOS = 0xDA
EOI = 0xD9
EXIF_HEADER = b"Exif\x00\x00"


def _is_standalone(marker: int) -> bool:
    return 0xD0 <= marker <= 0xD7 or marker == 0x01


def find_exif_segment(data: bytes) -> Optional[Tuple[int, int]]:
    """
    Locate the first EXIF APP1 segment.

    Returns (start, length) where start is the offset of the 0xFF marker byte
    and length spans marker, length field and payload. Returns None when
    there is no such segment before the image data, or when the marker
    stream is malformed before one is reached.
    """
    offset = len(SOI)
    size = len(data)
    while offset + 4 <= size:
        if data[offset] != 0xFF:
            return None

        marker = data[offset + 1]
        if _is_standalone(marker):
            offset += 2
            continue
        if marker in (SOS, EOI):
            return None

        (length,) = struct.unpack(">H", data[offset + 2:offset + 4])
        if length < 2 or offset + 2 + length > size:
            return None

        if (marker == APP1 and length >= 8
                and data[offset + 4:offset + 10] == EXIF_HEADER):
            return offset, 2 + length

        offset += 2 + length
    return None


class JpegScrubber(Scrubber):
    format_name = "JPEG"

    def __init__(self, file_bytes: bytes):
        if len(file_bytes) < 2 or file_bytes[:2] != SOI:
            raise UnsupportedFileType("Not a valid JPEG file")
        super().__init__(file_bytes)

    def view_metadata(self) -> List[MetadataEntry]:
        segment = find_exif_segment(self._file_bytes)
        if segment is None:
            return []
        start, length = segment
        # skip marker and length field, keep the Exif header for the decoder
        payload = self._file_bytes[start + 4:start + length]
        return read_exif_entries(payload)

    def scrub(self) -> ScrubResult:
        metadata_removed = self.view_metadata()

        segment = find_exif_segment(self._file_bytes)
        if segment is None:
            return ScrubResult(bytes(self._file_bytes), metadata_removed)

        start, length = segment
        cleaned = self._file_bytes[:start] + self._file_bytes[start + length:]
        return ScrubResult(cleaned, metadata_removed)
