from __future__ import annotations


class OverlayError(Exception):
    """Base class for errors that abort an overlay run."""


class FormatError(OverlayError):
    """The raster image is unreadable, truncated or in an unsupported layout."""


class StreamCorruptionError(OverlayError):
    """A frame's luma plane was read but one of its chroma planes is short."""


class OverlayBoundsError(OverlayError, ValueError):
    """The overlay does not fit inside the destination frame."""


class ConfigError(OverlayError):
    """Missing or malformed run configuration."""
