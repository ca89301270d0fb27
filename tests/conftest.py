# tests/conftest.py
from __future__ import annotations

import os
import sys
from pathlib import Path

import numpy as np
import pytest

# make the flat top-level packages importable without an install
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
pp = os.getenv("PYTHONPATH")
if pp:
    for p in pp.split(os.pathsep):
        if p:
            sys.path.insert(0, p)


def _le(value: int, size: int) -> bytes:
    return int(value).to_bytes(size, "little", signed=value < 0)


def make_bmp(
    rows_bottom_up: list[list[tuple[int, int, int]]],
    *,
    bpp: int = 24,
    compression: int = 0,
    signature: bytes = b"BM",
    extra_gap: int = 0,
    top_down: bool = False,
) -> bytes:
    """Build a BMP from RGB rows in storage order (bottom row first unless top_down)."""
    height = len(rows_bottom_up)
    width = len(rows_bottom_up[0]) if height else 0
    stride = (3 * width + 3) & ~3
    pixel_offset = 54 + extra_gap
    body = bytearray()
    for row in rows_bottom_up:
        raw = bytearray()
        for r, g, b in row:
            raw += bytes([b, g, r])
        raw += b"\x00" * (stride - len(raw))
        body += raw
    header = bytearray()
    header += signature
    header += _le(pixel_offset + len(body), 4)
    header += b"\x00\x00\x00\x00"
    header += _le(pixel_offset, 4)
    header += _le(40, 4)
    header += _le(width, 4)
    header += _le(-height if top_down else height, 4)
    header += _le(1, 2)
    header += _le(bpp, 2)
    header += _le(compression, 4)
    header += _le(len(body), 4)
    header += _le(2835, 4) + _le(2835, 4)
    header += _le(0, 4) + _le(0, 4)
    assert len(header) == 54
    return bytes(header) + b"\x00" * extra_gap + bytes(body)


def make_frame_bytes(width: int, height: int, y: int, u: int, v: int) -> bytes:
    c = (width // 2) * (height // 2)
    return bytes([y]) * (width * height) + bytes([u]) * c + bytes([v]) * c


@pytest.fixture
def bmp_factory(tmp_path: Path):
    def _write(name: str, data: bytes) -> Path:
        p = tmp_path / name
        p.write_bytes(data)
        return p

    return _write


@pytest.fixture
def solid_rgb():
    def _make(width: int, height: int, rgb: tuple[int, int, int]) -> np.ndarray:
        arr = np.empty((height, width, 3), dtype=np.uint8)
        arr[:, :] = rgb
        return arr

    return _make
