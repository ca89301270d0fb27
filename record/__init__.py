"""Raw YUV 4:2:0 frame output."""

from .yuv_writer import YuvFrameWriter

__all__ = ["YuvFrameWriter"]
