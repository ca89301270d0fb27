"""Uncompressed 24-bit BMP decoder.

Only the layout produced by ordinary image editors for true-color images is
accepted: ``BM`` signature, BITMAPINFOHEADER (or later) info header, 24 bits
per pixel, ``BI_RGB`` (no compression, no color table in use). Anything else
raises :class:`FormatError` instead of being decoded into garbage.

Header fields are assembled from individual bytes in little-endian order so
the result does not depend on host byte order or buffer alignment.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from common.errors import FormatError
from common.frame import RasterImage

_LOG = logging.getLogger(__name__)

SIGNATURE = b"BM"
FILE_HEADER_SIZE = 14
INFO_HEADER_MIN = 40
HEADER_SIZE = FILE_HEADER_SIZE + INFO_HEADER_MIN  # 54

# byte offsets inside the combined header
OFF_PIXEL_DATA = 10
OFF_INFO_SIZE = 14
OFF_WIDTH = 18
OFF_HEIGHT = 22
OFF_BPP = 28
OFF_COMPRESSION = 30

BI_RGB = 0


def _le_u16(buf: bytes, off: int) -> int:
    return buf[off] | (buf[off + 1] << 8)


def _le_u32(buf: bytes, off: int) -> int:
    return buf[off] | (buf[off + 1] << 8) | (buf[off + 2] << 16) | (buf[off + 3] << 24)


def _le_i32(buf: bytes, off: int) -> int:
    v = _le_u32(buf, off)
    return v - (1 << 32) if v & 0x8000_0000 else v


def row_stride(width: int) -> int:
    """Bytes per stored row: 3 bytes per pixel, padded to a 4-byte boundary."""
    return (3 * width + 3) & ~3


def parse_bmp(data: bytes) -> RasterImage:
    """Decode an in-memory BMP into a top-to-bottom RGB :class:`RasterImage`."""
    if len(data) < HEADER_SIZE:
        raise FormatError(f"truncated header: {len(data)} bytes, need {HEADER_SIZE}")
    if data[0:2] != SIGNATURE:
        raise FormatError(f"bad signature {bytes(data[0:2])!r} (expected {SIGNATURE!r})")

    pixel_offset = _le_u32(data, OFF_PIXEL_DATA)
    info_size = _le_u32(data, OFF_INFO_SIZE)
    width = _le_i32(data, OFF_WIDTH)
    raw_height = _le_i32(data, OFF_HEIGHT)
    bpp = _le_u16(data, OFF_BPP)
    compression = _le_u32(data, OFF_COMPRESSION)

    if info_size < INFO_HEADER_MIN:
        raise FormatError(f"unsupported info header size {info_size} (need >= {INFO_HEADER_MIN})")
    if bpp != 24:
        raise FormatError(f"unsupported bit depth {bpp} (only 24-bit BGR is supported)")
    if compression != BI_RGB:
        raise FormatError(f"unsupported compression type {compression} (only BI_RGB)")
    if width <= 0 or raw_height == 0:
        raise FormatError(f"invalid dimensions {width}x{raw_height}")

    # negative height marks a top-down image
    top_down = raw_height < 0
    height = -raw_height if top_down else raw_height

    stride = row_stride(width)
    needed = stride * height
    if pixel_offset < HEADER_SIZE:
        raise FormatError(f"pixel data offset {pixel_offset} overlaps the header")
    if pixel_offset + needed > len(data):
        raise FormatError(
            f"pixel array ({height} rows x {stride} bytes at offset {pixel_offset}) "
            f"exceeds file size {len(data)}"
        )

    rows = np.frombuffer(data, dtype=np.uint8, count=needed, offset=pixel_offset).reshape(
        height, stride
    )
    bgr = rows[:, : width * 3].reshape(height, width, 3)
    if not top_down:
        # stored bottom-to-top: stored row r lands at output row height-1-r
        bgr = bgr[::-1]
    # BGR -> RGB, single final copy detaches from the input buffer
    rgb = bgr[:, :, ::-1].copy(order="C")
    return RasterImage(width=width, height=height, pixels=rgb)


def decode_bmp(path: str | Path) -> RasterImage:
    """Read and decode the BMP file at ``path``.

    Raises
    ------
    FormatError
        If the file cannot be opened or is not a supported 24-bit BMP.
    """
    p = Path(path)
    try:
        data = p.read_bytes()
    except OSError as exc:
        raise FormatError(f"cannot open raster image {p}: {exc}") from exc
    img = parse_bmp(data)
    _LOG.info("Decoded %s: %dx%d", p, img.width, img.height)
    return img
