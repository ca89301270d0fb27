# ruff: noqa: UP007  # keep Optional[...] for Py3.9; don't force X | Y
from __future__ import annotations

import os
from contextlib import suppress
from pathlib import Path
from typing import BinaryIO, Optional

import numpy as np

from common.frame import YuvFrame


class YuvFrameWriter:
    """Writes 4:2:0 frames as Y, then U, then V, each one contiguous write.

    Wraps either an already open binary stream (``fh``) or a ``path`` that is
    opened on :meth:`open` and closed on :meth:`close`.
    """

    def __init__(self, path: Optional[str | Path] = None, fh: Optional[BinaryIO] = None):
        if (path is None) == (fh is None):
            raise ValueError("pass exactly one of path or fh")
        self.path = Path(path) if path is not None else None
        self._fh: Optional[BinaryIO] = fh
        self._owns_fh = fh is None
        self.frames_out = 0
        self.bytes_out = 0

    def __enter__(self) -> YuvFrameWriter:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def open(self) -> None:
        if self._fh is not None:
            return
        if self.path is None:
            raise RuntimeError("YuvFrameWriter stream was closed and has no path to reopen")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self.path.open("wb")

    def _write_plane(self, plane: np.ndarray) -> None:
        data = np.ascontiguousarray(plane, dtype=np.uint8).tobytes()
        n = self._fh.write(data)
        # raw / unbuffered streams may accept fewer bytes than offered
        if n is not None and n != len(data):
            raise OSError(f"short write: {n} of {len(data)} bytes")
        self.bytes_out += len(data)

    def write(self, frame: YuvFrame) -> None:
        if not self._fh:
            raise RuntimeError("YuvFrameWriter is not open")
        self._write_plane(frame.y)
        self._write_plane(frame.u)
        self._write_plane(frame.v)
        self.frames_out += 1

    def flush(self) -> None:
        if self._fh:
            self._fh.flush()

    def close(self) -> None:
        if self._fh is None:
            return
        if not self._owns_fh:
            self._fh.flush()
            self._fh = None
            return
        self._fh.flush()
        # Best-effort durability; harmless if underlying file doesn't support fileno()
        with suppress(OSError, ValueError):
            os.fsync(self._fh.fileno())
        self._fh.close()
        self._fh = None
