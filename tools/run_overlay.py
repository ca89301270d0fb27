#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging
import time
from typing import Optional

from common.config import OverlayConfig, load_config
from common.errors import ConfigError, OverlayError
from pipeline.frame_pipeline import run_overlay_job

__version__ = "0.1.0"

_LOG = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="run_overlay",
        description="Overlay a 24-bit BMP onto every frame of a raw YUV 4:2:0 stream.",
    )
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    ap.add_argument(
        "-c",
        "--config",
        type=str,
        default=None,
        help="key=value config file (input_video, output_video, overlay_image, "
        "frame_width, frame_height, workers). Missing keys use defaults.",
    )
    ap.add_argument("--input", dest="input_video", type=str, default=None, help="Input .yuv path.")
    ap.add_argument(
        "--output", dest="output_video", type=str, default=None, help="Output .yuv path."
    )
    ap.add_argument(
        "--overlay", dest="overlay_image", type=str, default=None, help="Overlay .bmp path."
    )
    ap.add_argument("--width", dest="frame_width", type=int, default=None, help="Frame width.")
    ap.add_argument("--height", dest="frame_height", type=int, default=None, help="Frame height.")
    ap.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Color conversion threads (0 = one per CPU).",
    )
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return ap


def resolve_config(args: argparse.Namespace) -> OverlayConfig:
    """Defaults, then the config file (if any), then command-line overrides."""
    cfg = load_config(args.config) if args.config else OverlayConfig()
    return cfg.with_overrides(
        {
            "input_video": args.input_video,
            "output_video": args.output_video,
            "overlay_image": args.overlay_image,
            "frame_width": args.frame_width,
            "frame_height": args.frame_height,
            "workers": args.workers,
        }
    )


def main(argv: Optional[list[str]] = None) -> int:
    ap = build_arg_parser()
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    t0 = time.perf_counter()
    _LOG.info("Starting overlay run")

    try:
        cfg = resolve_config(args)
    except ConfigError as exc:
        _LOG.error("Configuration error: %s", exc)
        return 2

    try:
        stats = run_overlay_job(cfg)
    except (OverlayError, OSError) as exc:
        _LOG.error("Overlay run failed: %s", exc)
        return 1

    _LOG.info(
        "Processed %d frames in %.2f s (total %.2f s)",
        stats.frames,
        stats.elapsed_s,
        time.perf_counter() - t0,
    )
    _LOG.info("Program finished successfully.")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
