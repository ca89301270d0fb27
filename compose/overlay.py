from __future__ import annotations

import numpy as np

from common.errors import OverlayBoundsError
from common.frame import PlanarYUVImage, YuvFrame


def check_bounds(overlay: PlanarYUVImage, frame_width: int, frame_height: int) -> None:
    """Raise :class:`OverlayBoundsError` unless the overlay fits in the frame."""
    if overlay.width > frame_width or overlay.height > frame_height:
        raise OverlayBoundsError(
            f"overlay {overlay.width}x{overlay.height} does not fit in "
            f"frame {frame_width}x{frame_height}"
        )


def _check_plane(name: str, plane: np.ndarray, shape: tuple[int, int]) -> None:
    if plane.shape != shape:
        raise OverlayBoundsError(f"{name} plane has shape {plane.shape}, expected {shape}")


def composite(
    frame: YuvFrame,
    overlay: PlanarYUVImage,
    frame_width: int,
    frame_height: int,
) -> None:
    """Copy ``overlay`` onto the top-left corner of ``frame`` in place.

    Luma is copied pixel for pixel. Chroma is copied per 2x2 block, for the
    blocks the overlay fully covers (``width // 2`` x ``height // 2``).
    The overlay itself is never modified.
    """
    check_bounds(overlay, frame_width, frame_height)
    _check_plane("Y", frame.y, (frame_height, frame_width))
    _check_plane("U", frame.u, (frame_height // 2, frame_width // 2))
    _check_plane("V", frame.v, (frame_height // 2, frame_width // 2))

    oh, ow = overlay.height, overlay.width
    if oh == 0 or ow == 0:
        return
    frame.y[:oh, :ow] = overlay.y

    # Overlay chroma only holds complete 2x2 blocks; for an odd width or
    # height the frame keeps its own chroma in the partial edge block.
    ch, cw = oh // 2, ow // 2
    if ch and cw:
        frame.u[:ch, :cw] = overlay.u
        frame.v[:ch, :cw] = overlay.v
