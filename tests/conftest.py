"""Pytest configuration and fixtures."""

import logging
import os
import struct
import tempfile
import zlib
from pathlib import Path

import pytest
from PIL import Image

# JPEG start-of-image + end-of-image markers, nothing else
MINIMAL_JPEG = b"\xff\xd8\xff\xd9"


def build_exif(date_time_original: str) -> bytes:
    """Build a little-endian EXIF APP1 payload holding only DateTimeOriginal."""
    value = date_time_original.encode("ascii") + b"\x00"
    ifd0_offset = 8
    exif_ifd_offset = ifd0_offset + 2 + 12 + 4
    data_offset = exif_ifd_offset + 2 + 12 + 4

    tiff = b"II*\x00" + struct.pack("<I", ifd0_offset)
    # IFD0: pointer to the Exif sub-IFD
    tiff += struct.pack("<H", 1)
    tiff += struct.pack("<HHII", 0x8769, 4, 1, exif_ifd_offset)
    tiff += struct.pack("<I", 0)
    # Exif IFD: DateTimeOriginal (ASCII)
    tiff += struct.pack("<H", 1)
    tiff += struct.pack("<HHII", 0x9003, 2, len(value), data_offset)
    tiff += struct.pack("<I", 0)
    tiff += value
    return b"Exif\x00\x00" + tiff


def build_png_header(width: int, height: int) -> bytes:
    """Build a PNG holding only IHDR and IEND chunks, with no pixel data."""

    def chunk(cid: bytes, data: bytes) -> bytes:
        return struct.pack(">I", len(data)) + cid + data + struct.pack(">I", zlib.crc32(cid + data))

    ihdr = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    return b"\x89PNG\r\n\x1a\n" + chunk(b"IHDR", ihdr) + chunk(b"IEND", b"")


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_image(temp_dir):
    """Factory writing a real image file of the given size and format."""

    def _make(name: str, size=(32, 24), fmt: str | None = None, exif: bytes | None = None) -> Path:
        path = temp_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        img = Image.new("RGB", size, color=(200, 80, 40))
        kwargs = {"exif": exif} if exif else {}
        img.save(path, format=fmt, **kwargs)
        return path

    return _make


@pytest.fixture
def sample_png(make_image):
    return make_image("sample.png", size=(40, 30))


@pytest.fixture
def sample_jpeg_with_exif(make_image):
    return make_image("photo.jpg", size=(64, 48), exif=build_exif("2021:06:01 10:20:30"))


@pytest.fixture
def garbage_jpg(temp_dir):
    """A file with a .jpg extension that does not contain an image."""
    path = temp_dir / "garbage.jpg"
    path.write_bytes(b"this is definitely not an image")
    return path


@pytest.fixture
def minimal_jpg(temp_dir):
    path = temp_dir / "test.jpg"
    path.write_bytes(MINIMAL_JPEG)
    return path


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging so they do not outlive a test."""
    yield
    logger = logging.getLogger("imgcatalog")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("IMGCATALOG_DATABASE", "ENRICHMENT_API_URL", "ENRICHMENT_MODEL", "ENRICHMENT_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def large_png(temp_dir):
    """A 20000x10000 PNG header, above Pillow's default pixel limit."""
    path = temp_dir / "panorama.png"
    path.write_bytes(build_png_header(20000, 10000))
    return path


@pytest.fixture
def non_utf8_png(temp_dir):
    """A real PNG whose file name is not valid UTF-8 (b"caf\\xe9.png")."""
    path = Path(os.fsdecode(os.fsencode(temp_dir) + b"/caf\xe9.png"))
    Image.new("RGB", (8, 8)).save(path, format="PNG")
    return path
