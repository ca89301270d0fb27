"""Frame loop that composites a still overlay onto a raw YUV 4:2:0 stream."""

from __future__ import annotations

from .frame_pipeline import (
    FramePipeline,
    PipelineState,
    PipelineStats,
    prepare_overlay,
    run,
    run_overlay_job,
)

__all__ = [
    "FramePipeline",
    "PipelineState",
    "PipelineStats",
    "prepare_overlay",
    "run",
    "run_overlay_job",
]
