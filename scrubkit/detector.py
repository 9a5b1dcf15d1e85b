# scrubkit/detector.py
from __future__ import annotations

from typing import Union

from .errors import UnsupportedFileType
from .jpeg import SOI, JpegScrubber
from .png import PngScrubber
from .png_codec import PNG_SIGNATURE

AnyScrubber = Union[JpegScrubber, PngScrubber]


def detect_format(file_bytes: bytes) -> str:
    """Name the format implied by the leading bytes, or raise UnsupportedFileType."""
    if len(file_bytes) > len(PNG_SIGNATURE) and file_bytes[:8] == PNG_SIGNATURE:
        return PngScrubber.format_name
    if len(file_bytes) > len(SOI) and file_bytes[:2] == SOI:
        return JpegScrubber.format_name
    raise UnsupportedFileType("Could not determine file type.")


def scrubber_for_bytes(file_bytes: bytes) -> AnyScrubber:
    """
    Pick and build the scrubber matching the file signature.

    This is the main entry point of the library. Errors raised while the
    chosen scrubber validates the buffer propagate unchanged.
    """
    fmt = detect_format(file_bytes)
    if fmt == PngScrubber.format_name:
        return PngScrubber(file_bytes)
    return JpegScrubber(file_bytes)


detect_and_construct = scrubber_for_bytes
