"""Raster image decoding and color-space conversion."""

from .bmp import decode_bmp, parse_bmp, row_stride
from .colorspace import convert, rgb_to_yuv_packed

__all__ = ["decode_bmp", "parse_bmp", "row_stride", "convert", "rgb_to_yuv_packed"]
