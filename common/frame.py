from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class RasterImage:
    """Decoded still image.

    ``pixels`` is an (H, W, 3) uint8 array in RGB order, rows top-to-bottom.
    """

    width: int
    height: int
    pixels: np.ndarray  # RGB (H,W,3), uint8


@dataclass(frozen=True)
class PlanarYUVImage:
    """4:2:0 planar image: full-size luma, chroma at half size in both axes."""

    width: int
    height: int
    y: np.ndarray  # (H,W), uint8
    u: np.ndarray  # (H//2,W//2), uint8
    v: np.ndarray  # (H//2,W//2), uint8

    @classmethod
    def from_packed(cls, packed: np.ndarray) -> PlanarYUVImage:
        """Split an (H, W, 3) packed Y/U/V array into planes.

        Chroma keeps the sample at the top-left of every complete 2x2 block;
        odd rows and columns are dropped.
        """
        h, w = int(packed.shape[0]), int(packed.shape[1])
        ch, cw = h // 2, w // 2
        y = np.ascontiguousarray(packed[:, :, 0])
        u = np.ascontiguousarray(packed[0 : ch * 2 : 2, 0 : cw * 2 : 2, 1])
        v = np.ascontiguousarray(packed[0 : ch * 2 : 2, 0 : cw * 2 : 2, 2])
        return cls(width=w, height=h, y=y, u=u, v=v)


@dataclass
class YuvFrame:
    y: np.ndarray  # (H,W), uint8, writable
    u: np.ndarray  # (H//2,W//2), uint8, writable
    v: np.ndarray  # (H//2,W//2), uint8, writable
    frame_id: int

    @property
    def width(self) -> int:
        return int(self.y.shape[1])

    @property
    def height(self) -> int:
        return int(self.y.shape[0])
