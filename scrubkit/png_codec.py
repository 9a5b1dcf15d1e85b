# scrubkit/png_codec.py
"""
Bridge to the PNG codecs.

Pillow checks the stream (every chunk CRC up to IEND). pypng walks the
chunks in order and round-trips the pixels at their stored bit depth, which
Pillow cannot do for 16-bit colour or 2/4-bit greyscale.

Every codec failure is re-raised as ParsingError so callers only ever see
the scrubkit error taxonomy.
"""

from __future__ import annotations

import io
import struct
import zlib
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import png
from PIL import Image, PngImagePlugin

from .errors import ParsingError

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
TEXT_CHUNK_TYPES = (b"tEXt", b"zTXt", b"iTXt")

# IHDR colour type bits
COLOR_PALETTE = 1
COLOR_RGB = 2
COLOR_ALPHA = 4

_PIL_ERRORS = (
    OSError,
    SyntaxError,
    ValueError,
    EOFError,
    struct.error,
    Image.DecompressionBombError,
)

_PNG_ERRORS = (png.Error, ValueError, zlib.error, struct.error)


@dataclass
class DecodedPng:
    width: int
    height: int
    bit_depth: int
    color_type: int
    rows: List = field(default_factory=list)
    palette: Optional[list] = None
    transparent: Optional[object] = None


def read_header(data: bytes) -> Tuple[int, int, int, int]:
    """Return (width, height, bit_depth, color_type) from the IHDR chunk."""
    if data[:8] != PNG_SIGNATURE or data[12:16] != b"IHDR":
        raise ParsingError("PNG stream does not start with an IHDR chunk")
    return struct.unpack(">IIBB", data[16:26])


def verify_png(data: bytes) -> None:
    """Walk every chunk up to IEND, checking CRCs. Raises ParsingError."""
    try:
        with Image.open(io.BytesIO(data), formats=["PNG"]) as im:
            im.verify()
    except _PIL_ERRORS as e:
        raise ParsingError(f"Invalid PNG stream: {e}") from e


def _inflate(compressed: bytes) -> bytes:
    # same ceiling Pillow applies to compressed text
    inflater = zlib.decompressobj()
    text = inflater.decompress(compressed, PngImagePlugin.MAX_TEXT_CHUNK)
    if inflater.unconsumed_tail:
        raise ParsingError("Compressed text chunk is too large")
    return text


def _split_keyword(body: bytes) -> Tuple[str, bytes]:
    keyword, sep, rest = body.partition(b"\0")
    if not sep:
        return keyword.decode("latin-1"), b""
    return keyword.decode("latin-1"), rest


def decode_text_chunk(chunk_type: bytes, body: bytes) -> Tuple[str, str]:
    """Decode one tEXt, zTXt or iTXt body into (keyword, text)."""
    keyword, rest = _split_keyword(body)
    if chunk_type == b"tEXt":
        return keyword, rest.decode("latin-1")

    if chunk_type == b"zTXt":
        if rest[:1] != b"\0":
            raise ParsingError(f"Unknown compression method in zTXt chunk {keyword!r}")
        return keyword, _inflate(rest[1:]).decode("latin-1")

    # iTXt: flag, method, language\0, translated keyword\0, text
    if len(rest) < 2:
        raise ParsingError(f"Truncated iTXt chunk {keyword!r}")
    compressed, method = rest[0], rest[1]
    _lang, _, rest = rest[2:].partition(b"\0")
    _tkey, _, text = rest.partition(b"\0")
    if compressed:
        if method != 0:
            raise ParsingError(f"Unknown compression method in iTXt chunk {keyword!r}")
        text = _inflate(text)
    try:
        return keyword, text.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParsingError(f"iTXt chunk {keyword!r} is not UTF-8") from e


def read_text_chunks(data: bytes) -> List[Tuple[str, str]]:
    """Return (keyword, text) for every tEXt, zTXt and iTXt chunk, in stream order."""
    try:
        return [
            decode_text_chunk(chunk_type, body)
            for chunk_type, body in png.Reader(bytes=data).chunks()
            if chunk_type in TEXT_CHUNK_TYPES
        ]
    except _PNG_ERRORS as e:
        raise ParsingError(f"Could not decode PNG chunks: {e}") from e


def decode_png(data: bytes) -> DecodedPng:
    """Decode pixel rows at the stored bit depth, plus palette and tRNS."""
    width, height, bit_depth, color_type = read_header(data)
    try:
        _, _, rows, info = png.Reader(bytes=data).read()
        rows = list(rows)
    except _PNG_ERRORS as e:
        raise ParsingError(f"Could not decode PNG image: {e}") from e

    return DecodedPng(
        width=width,
        height=height,
        bit_depth=bit_depth,
        color_type=color_type,
        rows=rows,
        palette=info.get("palette"),
        transparent=info.get("transparent"),
    )


def encode_png(decoded: DecodedPng) -> bytes:
    """
    Write a fresh PNG holding only the pixel data of ``decoded``.

    The writer is only given geometry, pixels, palette and transparency, so
    no ancillary chunk of the source (text, EXIF, ICC profile, timestamps)
    can reach the output. Palette and tRNS are kept because they are needed
    to render the pixels.
    """
    palette_based = bool(decoded.color_type & COLOR_PALETTE)
    try:
        writer = png.Writer(
            decoded.width,
            decoded.height,
            greyscale=not decoded.color_type & COLOR_RGB,
            alpha=bool(decoded.color_type & COLOR_ALPHA),
            bitdepth=decoded.bit_depth,
            palette=decoded.palette if palette_based else None,
            transparent=decoded.transparent,
        )
        buf = io.BytesIO()
        writer.write(buf, decoded.rows)
    except _PNG_ERRORS as e:
        raise ParsingError(f"Could not encode PNG image: {e}") from e
    return buf.getvalue()
