"""Shared fixtures: tiny images built from raw bytes."""

import struct
import zlib

import pytest

# pixels per metre for a given dpi, as stored in a PNG pHYs chunk
_PPM_PER_DPI = 1 / 0.0254


def _chunk(kind: bytes, data: bytes) -> bytes:
    crc = zlib.crc32(kind + data) & 0xFFFFFFFF
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", crc)


def make_png(width: int, height: int, dpi: int | None = None) -> bytes:
    """A solid red RGB PNG of ``width`` x ``height`` pixels."""
    header = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    rows = b"".join(b"\x00" + b"\xff\x00\x00" * width for _ in range(height))
    chunks = [_chunk(b"IHDR", header)]
    if dpi is not None:
        ppm = int(round(dpi * _PPM_PER_DPI))
        chunks.append(_chunk(b"pHYs", struct.pack(">IIB", ppm, ppm, 1)))
    chunks.append(_chunk(b"IDAT", zlib.compress(rows)))
    chunks.append(_chunk(b"IEND", b""))
    return b"\x89PNG\r\n\x1a\n" + b"".join(chunks)


@pytest.fixture
def png_factory():
    return make_png


@pytest.fixture
def png_bytes():
    """A 4 x 2 pixel PNG (2:1 aspect ratio) at the default 72 dpi."""
    return make_png(4, 2)
