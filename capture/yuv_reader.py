from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import BinaryIO, Optional

import numpy as np

from common.errors import StreamCorruptionError
from common.frame import YuvFrame

_LOG = logging.getLogger(__name__)


def plane_sizes(width: int, height: int) -> tuple[int, int]:
    """(luma bytes, bytes per chroma plane) for one 4:2:0 frame."""
    return width * height, (width // 2) * (height // 2)


def read_exact(fh: BinaryIO, buf: bytearray) -> int:
    """Fill ``buf`` from ``fh``; return the number of bytes actually read.

    Keeps reading after partial reads (pipes, sockets) until the buffer is
    full or the stream reports EOF.
    """
    view = memoryview(buf)
    got = 0
    while got < len(buf):
        n = fh.readinto(view[got:])
        if not n:
            break
        got += n
    return got


@dataclass
class ReaderStats:
    frames_in: int = 0
    bytes_in: int = 0
    trailing_bytes: int = 0


class YuvFrameReader:
    """Reads consecutive Y, U, V planes of fixed-size 4:2:0 frames from a binary stream."""

    def __init__(self, fh: BinaryIO, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"invalid frame size {width}x{height}")
        self._fh = fh
        self.width, self.height = width, height
        self._y_size, self._c_size = plane_sizes(width, height)
        self._frame_id = 0
        self._stats = ReaderStats()

    @property
    def frame_bytes(self) -> int:
        return self._y_size + 2 * self._c_size

    def read(self) -> Optional[YuvFrame]:
        """Return the next frame, or None at end of stream.

        Raises
        ------
        StreamCorruptionError
            If the luma plane was complete but a chroma plane is short.
        """
        y_buf = bytearray(self._y_size)
        got = read_exact(self._fh, y_buf)
        if got < self._y_size:
            if got:
                self._stats.trailing_bytes = got
                _LOG.warning(
                    "Ignoring %d trailing bytes (less than one %d-byte luma plane)",
                    got,
                    self._y_size,
                )
            return None

        planes = [y_buf]
        for name in ("U", "V"):
            c_buf = bytearray(self._c_size)
            got = read_exact(self._fh, c_buf)
            if got < self._c_size:
                raise StreamCorruptionError(
                    f"frame {self._frame_id}: short {name} plane "
                    f"({got} of {self._c_size} bytes)"
                )
            planes.append(c_buf)

        ch, cw = self.height // 2, self.width // 2
        frame = YuvFrame(
            y=np.frombuffer(planes[0], dtype=np.uint8).reshape(self.height, self.width),
            u=np.frombuffer(planes[1], dtype=np.uint8).reshape(ch, cw),
            v=np.frombuffer(planes[2], dtype=np.uint8).reshape(ch, cw),
            frame_id=self._frame_id,
        )
        self._frame_id += 1
        self._stats.frames_in += 1
        self._stats.bytes_in += self.frame_bytes
        return frame

    def stats(self) -> ReaderStats:
        return self._stats
