"""Per-frame read / composite / write loop.

The loop has two states. In ``READING_FRAME`` it pulls one frame from the
input, composites the overlay and writes the frame out, then stays in
``READING_FRAME``. An empty or short luma read moves it to ``DONE``; that is
the only normal way out. Short chroma reads and I/O failures raise and
abort the run; nothing is retried.
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional

from capture.yuv_reader import YuvFrameReader
from common.config import OverlayConfig
from common.frame import PlanarYUVImage
from common.parallel import ChunkedMap
from compose.overlay import check_bounds, composite
from imaging.bmp import decode_bmp
from imaging.colorspace import convert
from record.yuv_writer import YuvFrameWriter

_LOG = logging.getLogger(__name__)


class PipelineState(enum.Enum):
    READING_FRAME = "reading_frame"
    DONE = "done"


@dataclass
class PipelineStats:
    frames: int = 0
    bytes_in: int = 0
    bytes_out: int = 0
    trailing_bytes: int = 0
    elapsed_s: float = 0.0


class FramePipeline:
    def __init__(self, frame_width: int, frame_height: int) -> None:
        self.frame_width = frame_width
        self.frame_height = frame_height
        self.state = PipelineState.READING_FRAME

    def run(
        self,
        input_stream: BinaryIO,
        output_stream: BinaryIO,
        overlay: PlanarYUVImage,
    ) -> PipelineStats:
        """Composite ``overlay`` onto every frame of ``input_stream``.

        Returns once the input is exhausted. The overlay is validated against
        the frame size before any frame is read.
        """
        check_bounds(overlay, self.frame_width, self.frame_height)
        reader = YuvFrameReader(input_stream, self.frame_width, self.frame_height)
        writer = YuvFrameWriter(fh=output_stream)
        t0 = time.perf_counter()
        self.state = PipelineState.READING_FRAME

        with writer:
            while self.state is PipelineState.READING_FRAME:
                frame = reader.read()
                if frame is None:
                    self.state = PipelineState.DONE
                    break
                composite(frame, overlay, self.frame_width, self.frame_height)
                writer.write(frame)
                if frame.frame_id and frame.frame_id % 100 == 0:
                    _LOG.debug("Processed %d frames", frame.frame_id)

        rstats = reader.stats()
        stats = PipelineStats(
            frames=writer.frames_out,
            bytes_in=rstats.bytes_in,
            bytes_out=writer.bytes_out,
            trailing_bytes=rstats.trailing_bytes,
            elapsed_s=time.perf_counter() - t0,
        )
        _LOG.info(
            "Wrote %d frames (%d bytes) in %.2f s",
            stats.frames,
            stats.bytes_out,
            stats.elapsed_s,
        )
        return stats


def run(
    input_stream: BinaryIO,
    output_stream: BinaryIO,
    overlay: PlanarYUVImage,
    frame_width: int,
    frame_height: int,
) -> PipelineStats:
    return FramePipeline(frame_width, frame_height).run(input_stream, output_stream, overlay)


def prepare_overlay(
    image_path: str | Path,
    workers: Optional[int] = None,
    mapper: Optional[ChunkedMap] = None,
) -> PlanarYUVImage:
    """Decode the BMP at ``image_path`` and convert it to 4:2:0 once."""
    raster = decode_bmp(image_path)
    t0 = time.perf_counter()
    overlay = convert(raster, workers=workers, mapper=mapper)
    _LOG.info(
        "Converted overlay %dx%d to YUV 4:2:0 in %.1f ms",
        overlay.width,
        overlay.height,
        (time.perf_counter() - t0) * 1000.0,
    )
    return overlay


def run_overlay_job(cfg: OverlayConfig) -> PipelineStats:
    """Run one complete pass described by ``cfg``.

    The overlay is prepared (and checked against the frame size) before the
    output file is created, so a bad image never leaves an empty output behind.
    """
    cfg.validate()
    overlay = prepare_overlay(cfg.overlay_image, workers=cfg.workers or None)
    check_bounds(overlay, cfg.frame_width, cfg.frame_height)

    _LOG.info(
        "Overlaying onto %s (%dx%d) -> %s",
        cfg.input_video,
        cfg.frame_width,
        cfg.frame_height,
        cfg.output_video,
    )
    Path(cfg.output_video).parent.mkdir(parents=True, exist_ok=True)
    with open(cfg.input_video, "rb") as src, open(cfg.output_video, "wb") as dst:
        return FramePipeline(cfg.frame_width, cfg.frame_height).run(src, dst, overlay)
