# common/__init__.py
"""Shared types, errors, configuration and the chunked worker pool."""

from .config import OverlayConfig, load_config, parse_config
from .errors import (
    ConfigError,
    FormatError,
    OverlayBoundsError,
    OverlayError,
    StreamCorruptionError,
)
from .frame import PlanarYUVImage, RasterImage, YuvFrame
from .parallel import ChunkedMap, default_workers, partition_range

__all__ = [
    "OverlayConfig",
    "load_config",
    "parse_config",
    "OverlayError",
    "FormatError",
    "StreamCorruptionError",
    "OverlayBoundsError",
    "ConfigError",
    "RasterImage",
    "PlanarYUVImage",
    "YuvFrame",
    "ChunkedMap",
    "default_workers",
    "partition_range",
]

__version__ = "0.1.0"
