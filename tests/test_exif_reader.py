import struct

import piexif
import pytest

from scrubkit import JpegScrubber
from scrubkit.exif_reader import format_exif_value, read_exif_entries


@pytest.mark.parametrize("value, tag_type, expected", [
    (b"Test Model", piexif.TYPES.Ascii, "Test Model"),
    (b"Test Model\x00\x00", piexif.TYPES.Ascii, "Test Model"),
    (b"0230", piexif.TYPES.Undefined, "0230"),
    (b"\x00\x01\xfe\xff", piexif.TYPES.Undefined, "<binary data, 4 bytes>"),
    ((72, 1), piexif.TYPES.Rational, "72/1"),
    (((1, 2), (3, 4)), piexif.TYPES.Rational, "1/2, 3/4"),
    ((-1, 3), piexif.TYPES.SRational, "-1/3"),
    (6, piexif.TYPES.Short, "6"),
    ((2, 2, 0, 0), piexif.TYPES.Byte, "2, 2, 0, 0"),
])
def test_format_exif_value(value, tag_type, expected):
    assert format_exif_value(value, tag_type) == expected


def test_ifd_labels_and_pointer_tags_skipped():
    payload = piexif.dump({
        "0th": {piexif.ImageIFD.Artist: b"Jane"},
        "Exif": {piexif.ExifIFD.LensModel: b"50mm"},
    })
    entries = read_exif_entries(payload)
    assert [(e.category, e.key, e.value) for e in entries] == [
        ("IFD0", "Artist", "Jane"),
        ("ExifIFD", "LensModel", "50mm"),
    ]


def test_thumbnail_reported(plain_jpeg):
    payload = piexif.dump({
        "0th": {piexif.ImageIFD.Model: b"Cam"},
        "1st": {piexif.ImageIFD.XResolution: (72, 1)},
        "thumbnail": plain_jpeg,
    })
    entries = read_exif_entries(payload)
    thumb = [e for e in entries if e.key == "JPEGThumbnail"]
    assert len(thumb) == 1
    assert thumb[0].category == "IFD1"
    stored = piexif.load(payload)["thumbnail"]
    assert thumb[0].value == f"<binary data, {len(stored)} bytes>"


@pytest.mark.parametrize("payload", [
    b"Exif\x00\x00",
    b"Exif\x00\x00MM\x00\x2a",
    b"Exif\x00\x00MM\x00\x2a\xff\xff\xff\xff",
])
def test_undecodable_payload_is_empty(payload):
    assert read_exif_entries(payload) == []


def _with_oversized_count(payload):
    # rewrite XResolution in IFD0 as a SHORT array claiming 0x10000000 values
    tiff = bytearray(payload[6:])
    (entries,) = struct.unpack(">H", tiff[8:10])
    for i in range(entries):
        pos = 10 + 12 * i
        (tag,) = struct.unpack(">H", tiff[pos:pos + 2])
        if tag == piexif.ImageIFD.XResolution:
            tiff[pos + 2:pos + 8] = struct.pack(">HI", piexif.TYPES.Short, 0x10000000)
            return payload[:6] + bytes(tiff)
    raise AssertionError("XResolution entry not found")


def test_oversized_entry_count_is_empty():
    payload = piexif.dump({"0th": {
        piexif.ImageIFD.Model: b"Cam",
        piexif.ImageIFD.XResolution: (72, 1),
    }})
    assert read_exif_entries(_with_oversized_count(payload)) == []


def test_oversized_entry_count_in_jpeg(plain_jpeg):
    payload = _with_oversized_count(piexif.dump({"0th": {
        piexif.ImageIFD.XResolution: (72, 1),
    }}))
    app1 = b"\xff\xe1" + struct.pack(">H", len(payload) + 2) + payload
    data = plain_jpeg[:2] + app1 + plain_jpeg[2:]

    scrubber = JpegScrubber(data)
    assert scrubber.view_metadata() == []
    assert scrubber.scrub().cleaned_file_bytes == plain_jpeg
