# scrubkit/exif_reader.py
"""
Bridge to piexif: turns an APP1 "Exif\\0\\0" payload into MetadataEntry rows.

A payload piexif cannot decode is reported as having no metadata rather than
raising, so a damaged EXIF block is never confused with a broken image.
"""

import struct
from typing import List

import piexif

from .models import MetadataEntry

# piexif IFD name -> group label shown to users
IFD_LABELS = {
    "0th": "IFD0",
    "Exif": "ExifIFD",
    "GPS": "GPS",
    "Interop": "InteropIFD",
    "1st": "IFD1",
}

_EXIF_HEADER = b"Exif\x00\x00"

_RATIONAL_TYPES = (piexif.TYPES.Rational, piexif.TYPES.SRational)

# TIFF field type -> bytes per value
_TYPE_SIZES = {
    1: 1, 2: 1, 3: 2, 4: 4, 5: 8, 6: 1,
    7: 1, 8: 2, 9: 4, 10: 8, 11: 4, 12: 8,
}

_SUB_IFD_TAGS = {
    piexif.ImageIFD.ExifTag,
    piexif.ImageIFD.GPSTag,
    piexif.ExifIFD.InteroperabilityTag,
}

# offsets to sub-IFDs, structure rather than metadata
_POINTER_TAGS = {
    ("0th", piexif.ImageIFD.ExifTag),
    ("0th", piexif.ImageIFD.GPSTag),
    ("Exif", piexif.ExifIFD.InteroperabilityTag),
}


def _format_bytes(raw: bytes) -> str:
    stripped = raw.rstrip(b"\x00")
    try:
        text = stripped.decode("utf-8")
    except UnicodeDecodeError:
        text = None
    if text is None or not text.isprintable():
        return f"<binary data, {len(raw)} bytes>"
    return text


def _format_rational(pair) -> str:
    num, den = pair
    return f"{num}/{den}"


def format_exif_value(value, tag_type=None) -> str:
    """Render a decoded piexif value as readable text."""
    if isinstance(value, bytes):
        return _format_bytes(value)
    if tag_type in _RATIONAL_TYPES:
        if len(value) == 2 and all(isinstance(v, int) for v in value):
            return _format_rational(value)
        return ", ".join(_format_rational(v) for v in value)
    if isinstance(value, (tuple, list)):
        return ", ".join(format_exif_value(v) for v in value)
    return str(value)


def _entry_sizes_fit(tiff: bytes) -> bool:
    """
    Check each IFD entry's declared size against the TIFF block.

    piexif trusts entry counts and builds a struct format as long as the
    count, so one corrupt count can exhaust memory before anything fails.
    Only IFD0, its sub-IFDs and IFD1 are walked, the same ones piexif reads.
    """
    if tiff[:2] == b"II":
        order = "<"
    elif tiff[:2] == b"MM":
        order = ">"
    else:
        return False
    if len(tiff) < 8:
        return False

    (first,) = struct.unpack(order + "I", tiff[4:8])
    pending = [(first, True)]
    seen = set()
    while pending:
        offset, follow_next = pending.pop()
        if offset == 0 or offset in seen:
            continue
        seen.add(offset)
        if offset + 2 > len(tiff):
            return False
        (count,) = struct.unpack(order + "H", tiff[offset:offset + 2])
        end = offset + 2 + 12 * count
        if end > len(tiff):
            return False

        for pos in range(offset + 2, end, 12):
            tag, kind, n, value = struct.unpack(order + "HHII", tiff[pos:pos + 12])
            if n * _TYPE_SIZES.get(kind, 1) > len(tiff):
                return False
            if tag in _SUB_IFD_TAGS:
                pending.append((value, False))

        if follow_next and end + 4 <= len(tiff):
            (next_ifd,) = struct.unpack(order + "I", tiff[end:end + 4])
            pending.append((next_ifd, False))
    return True


def _load(payload: bytes):
    if payload[:6] != _EXIF_HEADER or not _entry_sizes_fit(payload[6:]):
        return None
    try:
        return piexif.load(payload)
    except (piexif.InvalidImageDataError, ValueError, struct.error, IndexError):
        return None


def read_exif_entries(payload: bytes) -> List[MetadataEntry]:
    """
    Decode an EXIF payload (starting with b"Exif\\0\\0").

    Entries follow IFD order (0th, Exif, GPS, Interop, 1st) and, within an
    IFD, the order piexif decoded the tags in.
    """
    exif_dict = _load(payload)
    if not exif_dict:
        return []

    entries: List[MetadataEntry] = []
    for ifd, label in IFD_LABELS.items():
        tags = exif_dict.get(ifd) or {}
        for tag, value in tags.items():
            info = piexif.TAGS[ifd].get(tag)
            if info is None or (ifd, tag) in _POINTER_TAGS:
                continue
            entries.append(MetadataEntry(
                category=label,
                key=info["name"],
                value=format_exif_value(value, info["type"]),
            ))

    thumbnail = exif_dict.get("thumbnail")
    if thumbnail:
        entries.append(MetadataEntry(
            category=IFD_LABELS["1st"],
            key="JPEGThumbnail",
            value=f"<binary data, {len(thumbnail)} bytes>",
        ))
    return entries
