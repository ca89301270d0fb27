"""RGB -> Y/U/V conversion (JPEG-style full-range coefficients).

Each output sample is rounded half-up and then clamped to [0, 255]; chroma
gets its +128 bias after rounding. The flat pixel range is split across a
:class:`common.parallel.ChunkedMap`, each chunk writing its own slice of the
preallocated output, so the result is the same for any worker count.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from common.frame import PlanarYUVImage, RasterImage
from common.parallel import ChunkedMap

# Coefficients scaled by YUV_SCALE so the sums stay exact in integers;
# rows: Y, U, V; columns: R, G, B
YUV_SCALE = 100_000
YUV_MATRIX = np.array(
    [
        [29_900, 58_700, 11_400],
        [-16_874, -33_126, 50_000],
        [50_000, -41_869, -8_131],
    ],
    dtype=np.int64,
)
YUV_OFFSET = np.array([0, 128, 128], dtype=np.int64)


def _convert_slice(rgb: np.ndarray, out: np.ndarray) -> None:
    """Convert an (N, 3) RGB slice into the matching (N, 3) Y/U/V slice of ``out``."""
    if rgb.shape[0] == 0:
        return
    acc = rgb.astype(np.int64) @ YUV_MATRIX.T
    # floor division rounds half-up for negative sums too
    vals = (acc + YUV_SCALE // 2) // YUV_SCALE + YUV_OFFSET
    np.clip(vals, 0, 255, out=vals)
    out[:] = vals.astype(np.uint8)


def rgb_to_yuv_packed(
    pixels: np.ndarray,
    workers: Optional[int] = None,
    mapper: Optional[ChunkedMap] = None,
) -> np.ndarray:
    """Convert an (H, W, 3) RGB array into a packed (H, W, 3) Y/U/V array.

    Pass ``mapper`` to reuse an existing pool; otherwise a temporary one with
    ``workers`` threads is created and shut down before returning.
    """
    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ValueError(f"expected an (H, W, 3) array, got shape {pixels.shape}")
    h, w = int(pixels.shape[0]), int(pixels.shape[1])
    src = np.ascontiguousarray(pixels, dtype=np.uint8).reshape(h * w, 3)
    dst = np.empty((h * w, 3), dtype=np.uint8)

    def _work(start: int, stop: int) -> None:
        _convert_slice(src[start:stop], dst[start:stop])

    if mapper is not None:
        mapper.run(h * w, _work)
    else:
        with ChunkedMap(workers) as own:
            own.run(h * w, _work)
    return dst.reshape(h, w, 3)


def convert(
    image: RasterImage,
    workers: Optional[int] = None,
    mapper: Optional[ChunkedMap] = None,
) -> PlanarYUVImage:
    """Convert a decoded raster image into a 4:2:0 :class:`PlanarYUVImage`."""
    packed = rgb_to_yuv_packed(image.pixels, workers=workers, mapper=mapper)
    return PlanarYUVImage.from_packed(packed)
