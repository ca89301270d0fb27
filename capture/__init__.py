# capture/__init__.py
"""Capture package: raw YUV 4:2:0 frame reader."""

from .yuv_reader import ReaderStats, YuvFrameReader, plane_sizes, read_exact

__all__ = [
    "YuvFrameReader",
    "ReaderStats",
    "plane_sizes",
    "read_exact",
]

__version__ = "0.1.0"
