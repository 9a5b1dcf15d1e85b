"""Inspect and strip embedded metadata from JPEG and PNG images."""

from .detector import detect_and_construct, detect_format, scrubber_for_bytes
from .errors import IoError, ParsingError, ScrubError, UnsupportedFileType
from .jpeg import JpegScrubber
from .models import MetadataEntry, ScrubResult
from .png import PngScrubber
from .scrubber import Scrubber

__version__ = "0.1.0"

__all__ = [
    "IoError",
    "JpegScrubber",
    "MetadataEntry",
    "ParsingError",
    "PngScrubber",
    "ScrubError",
    "ScrubResult",
    "Scrubber",
    "UnsupportedFileType",
    "detect_and_construct",
    "detect_format",
    "scrubber_for_bytes",
]
