from __future__ import annotations

import io
from pathlib import Path

import numpy as np
import pytest
from conftest import make_frame_bytes

from capture.yuv_reader import YuvFrameReader, plane_sizes, read_exact
from common.errors import StreamCorruptionError
from record.yuv_writer import YuvFrameWriter


class _TrickleStream(io.RawIOBase):
    """Returns at most ``chunk`` bytes per readinto, like a pipe."""

    def __init__(self, data: bytes, chunk: int = 3) -> None:
        self._buf = io.BytesIO(data)
        self._chunk = chunk

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        data = self._buf.read(min(len(b), self._chunk))
        b[: len(data)] = data
        return len(data)


def test_plane_sizes_floor_odd_dimensions():
    assert plane_sizes(4, 2) == (8, 2)
    assert plane_sizes(5, 3) == (15, 2)


def test_read_exact_survives_partial_reads():
    buf = bytearray(10)
    assert read_exact(_TrickleStream(bytes(range(10))), buf) == 10
    assert bytes(buf) == bytes(range(10))


def test_reads_frames_then_eos():
    data = make_frame_bytes(4, 2, 1, 2, 3) + make_frame_bytes(4, 2, 4, 5, 6)
    reader = YuvFrameReader(io.BytesIO(data), 4, 2)
    f0 = reader.read()
    f1 = reader.read()
    assert reader.read() is None
    assert (f0.frame_id, f1.frame_id) == (0, 1)
    assert f0.y.shape == (2, 4) and f0.u.shape == (1, 2)
    assert int(f1.y[0, 0]) == 4 and int(f1.u[0, 0]) == 5 and int(f1.v[0, 1]) == 6
    # planes are writable for in-place compositing
    f0.y[0, 0] = 99
    assert reader.stats().frames_in == 2
    assert reader.stats().bytes_in == 2 * reader.frame_bytes


def test_empty_stream_is_eos():
    assert YuvFrameReader(io.BytesIO(b""), 4, 2).read() is None


def test_short_luma_is_eos_not_error():
    reader = YuvFrameReader(io.BytesIO(b"\x00" * 5), 4, 2)
    assert reader.read() is None
    assert reader.stats().trailing_bytes == 5


@pytest.mark.parametrize("cut", [1, 3])
def test_short_chroma_is_corruption(cut):
    data = make_frame_bytes(4, 2, 1, 2, 3)[:-cut]
    with pytest.raises(StreamCorruptionError):
        YuvFrameReader(io.BytesIO(data), 4, 2).read()


def test_writer_plane_order(tmp_path: Path):
    reader = YuvFrameReader(io.BytesIO(make_frame_bytes(4, 2, 1, 2, 3)), 4, 2)
    frame = reader.read()
    frame.u[:] = np.array([[7, 8]], dtype=np.uint8)
    out = tmp_path / "sub" / "out.yuv"
    with YuvFrameWriter(out) as w:
        w.write(frame)
    assert out.read_bytes() == bytes([1] * 8 + [7, 8] + [3, 3])
    assert w.frames_out == 1 and w.bytes_out == 12


def test_writer_leaves_borrowed_stream_open():
    buf = io.BytesIO()
    frame = YuvFrameReader(io.BytesIO(make_frame_bytes(2, 2, 9, 8, 7)), 2, 2).read()
    with YuvFrameWriter(fh=buf) as w:
        w.write(frame)
    assert not buf.closed
    assert buf.getvalue() == bytes([9, 9, 9, 9, 8, 7])


def test_writer_requires_exactly_one_target():
    with pytest.raises(ValueError):
        YuvFrameWriter()
    with pytest.raises(ValueError):
        YuvFrameWriter(path="x.yuv", fh=io.BytesIO())


def test_writer_cannot_reopen_closed_borrowed_stream():
    w = YuvFrameWriter(fh=io.BytesIO())
    w.close()
    with pytest.raises(RuntimeError, match="closed"):
        w.open()
