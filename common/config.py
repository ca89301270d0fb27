from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

from .errors import ConfigError

_LOG = logging.getLogger(__name__)

_INT_KEYS = ("frame_width", "frame_height", "workers")
_PATH_KEYS = ("input_video", "output_video", "overlay_image")


@dataclass(frozen=True)
class OverlayConfig:
    """Run configuration for one overlay pass.

    Parameters
    ----------
    input_video, output_video:
        Raw planar YUV 4:2:0 streams (read / written).
    overlay_image:
        Uncompressed 24-bit BMP composited onto every frame.
    frame_width, frame_height:
        Fixed frame size of the input stream, in luma pixels.
    workers:
        Color conversion threads; 0 means one per CPU.
    """

    input_video: Path = Path("input.yuv")
    output_video: Path = Path("output.yuv")
    overlay_image: Path = Path("input.bmp")
    frame_width: int = 1920
    frame_height: int = 1080
    workers: int = 0

    def validate(self) -> OverlayConfig:
        if self.frame_width <= 0 or self.frame_height <= 0:
            raise ConfigError(
                f"frame size must be positive (got {self.frame_width}x{self.frame_height})"
            )
        if self.workers < 0:
            raise ConfigError(f"workers must be >= 0 (got {self.workers})")
        return self

    def with_overrides(self, overrides: Mapping[str, Any]) -> OverlayConfig:
        """Return a copy with every non-None entry of ``overrides`` applied."""
        known = {f.name for f in fields(self)}
        changes = {k: _coerce(k, v) for k, v in overrides.items() if v is not None and k in known}
        return replace(self, **changes).validate()


def _coerce(key: str, value: Any) -> Any:
    if key in _INT_KEYS:
        try:
            return int(str(value).strip())
        except ValueError:
            raise ConfigError(f"{key}: expected an integer, got {value!r}") from None
    if key in _PATH_KEYS:
        return Path(str(value))
    return value


def parse_config(text: str, base: Optional[OverlayConfig] = None) -> OverlayConfig:
    """Parse ``key=value`` lines on top of ``base`` (defaults when omitted).

    Blank lines and ``#`` comments are skipped. Unknown keys are logged and
    ignored; absent keys keep their default.
    """
    cfg = base or OverlayConfig()
    known = {f.name for f in fields(cfg)}
    values: dict[str, Any] = {}
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            raise ConfigError(f"line {lineno}: expected key=value, got {raw!r}")
        key, value = (part.strip() for part in line.split("=", 1))
        if key not in known:
            _LOG.warning("Ignoring unknown config key %r on line %d", key, lineno)
            continue
        values[key] = value
    return cfg.with_overrides(values)


def load_config(path: str | Path, base: Optional[OverlayConfig] = None) -> OverlayConfig:
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read config file {p}: {exc}") from exc
    cfg = parse_config(text, base=base)
    _LOG.info("Loaded config from %s", p)
    return cfg
