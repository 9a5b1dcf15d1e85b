# scrubkit/errors.py
"""
Error taxonomy shared by every scrubber. Callers can catch ScrubError to
handle any failure the library reports.
"""


class ScrubError(Exception):
    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(message)


class UnsupportedFileType(ScrubError):
    """The signature matched no known format, or structural validation failed."""


class ParsingError(ScrubError):
    """A decoder or encoder failed on an otherwise recognized format."""


class IoError(ScrubError):
    """Reading or writing a file failed. Raised by the file layer only."""
