import io
import struct

import piexif
import png
import pytest
from PIL import Image, PngImagePlugin


def _plain_jpeg(size=(2, 2), color="white"):
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="JPEG")
    return buf.getvalue()


def _app1(exif_bytes):
    return b"\xff\xe1" + struct.pack(">H", len(exif_bytes) + 2) + exif_bytes


def _exif(model="Test Model", make="Test Camera", gps=None):
    exif_dict = {"0th": {
        piexif.ImageIFD.Make: make.encode(),
        piexif.ImageIFD.Model: model.encode(),
    }}
    if gps:
        exif_dict["GPS"] = gps
    return piexif.dump(exif_dict)


@pytest.fixture
def plain_jpeg():
    return _plain_jpeg()


@pytest.fixture
def make_exif_jpeg():
    """Build (jpeg_with_exif, jpeg_without_exif); they differ only by the APP1 segment."""
    def factory(model="Test Model", make="Test Camera", gps=None):
        clean = _plain_jpeg()
        tagged = clean[:2] + _app1(_exif(model, make, gps)) + clean[2:]
        return tagged, clean
    return factory


@pytest.fixture
def exif_app1():
    def factory(model="Test Model", make="Test Camera"):
        return _app1(_exif(model, make))
    return factory


@pytest.fixture
def make_png():
    """Build a PNG; text is a list of (kind, keyword, value) with kind tEXt/zTXt/iTXt."""
    def factory(text=(), mode="RGBA", size=(1, 1), color=None, **save_params):
        im = Image.new(mode, size, color if color is not None else 0)
        info = None
        if text:
            info = PngImagePlugin.PngInfo()
            for kind, key, value in text:
                if kind == "iTXt":
                    info.add_itxt(key, value, lang="en", tkey=key)
                else:
                    info.add_text(key, value, zip=(kind == "zTXt"))
        buf = io.BytesIO()
        im.save(buf, format="PNG", pnginfo=info, **save_params)
        return buf.getvalue()
    return factory


@pytest.fixture
def make_raw_png():
    """
    Build a PNG with pypng, for depths Pillow cannot write. text is a list of
    (keyword, value) tEXt chunks; after_idat puts them between IDAT and IEND.
    """
    def factory(rows, text=(), after_idat=False, **writer_params):
        buf = io.BytesIO()
        if not writer_params.get("palette"):
            # pypng defaults to greyscale when the flag is omitted; _planes assumes RGB.
            writer_params.setdefault("greyscale", False)
        png.Writer(len(rows[0]) // _planes(writer_params), len(rows), **writer_params).write(buf, rows)
        chunks = list(png.Reader(bytes=buf.getvalue()).chunks())
        extra = [(b"tEXt", key.encode("latin-1") + b"\0" + value.encode("latin-1"))
                 for key, value in text]
        at = len(chunks) - 1 if after_idat else 1
        chunks[at:at] = extra
        out = io.BytesIO()
        png.write_chunks(out, chunks)
        return out.getvalue()
    return factory


def _planes(writer_params):
    if writer_params.get("palette"):
        return 1
    planes = 1 if writer_params.get("greyscale") else 3
    return planes + (1 if writer_params.get("alpha") else 0)
