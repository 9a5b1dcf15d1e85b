# scrubkit/scrubber.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from .models import MetadataEntry, ScrubResult


class Scrubber(ABC):
    """
    Common contract for every supported container format.

    Subclasses validate the buffer in __init__ and raise UnsupportedFileType
    when it is not theirs. The stored bytes are never modified afterwards, so
    an instance can be shared freely and scrub() can be called any number of
    times with the same result.
    """

    format_name = ""

    def __init__(self, file_bytes: bytes):
        self._file_bytes = bytes(file_bytes)

    @property
    def file_bytes(self) -> bytes:
        return self._file_bytes

    @abstractmethod
    def view_metadata(self) -> List[MetadataEntry]:
        """Return every metadata entry found, without changing anything."""

    @abstractmethod
    def scrub(self) -> ScrubResult:
        """Return a cleaned copy of the file and what was removed from it."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self._file_bytes)} bytes)"
