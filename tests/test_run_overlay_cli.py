from __future__ import annotations

import subprocess
import sys
from pathlib import Path

from conftest import make_bmp, make_frame_bytes

from tools.run_overlay import main

ROOT = Path(__file__).resolve().parents[1]


def test_help_exits_zero():
    proc = subprocess.run(
        [sys.executable, "-m", "tools.run_overlay", "--help"],
        capture_output=True,
        text=True,
        cwd=ROOT,
    )
    assert proc.returncode == 0
    assert "usage" in proc.stdout.lower()


def test_config_file_with_cli_override(tmp_path: Path):
    bmp = tmp_path / "logo.bmp"
    bmp.write_bytes(make_bmp([[(255, 255, 255)] * 2] * 2))
    src = tmp_path / "in.yuv"
    src.write_bytes(make_frame_bytes(4, 4, 0, 0, 0) * 2)
    out = tmp_path / "out.yuv"
    cfg = tmp_path / "run.cfg"
    cfg.write_text(
        f"input_video={src}\noutput_video={out}\noverlay_image={bmp}\n"
        "frame_width=4\nframe_height=2\n",
        encoding="utf-8",
    )

    rc = main(["--config", str(cfg), "--height", "4", "--workers", "2"])

    assert rc == 0
    data = out.read_bytes()
    assert len(data) == 2 * (16 + 4 + 4)
    assert data[:2] == b"\xff\xff" and data[2:4] == b"\x00\x00"
    assert data[16] == 128 and data[17] == 0


def test_bad_config_exit_code(tmp_path: Path):
    cfg = tmp_path / "bad.cfg"
    cfg.write_text("frame_width=wide\n", encoding="utf-8")
    assert main(["--config", str(cfg)]) == 2


def test_missing_input_exit_code(tmp_path: Path):
    bmp = tmp_path / "logo.bmp"
    bmp.write_bytes(make_bmp([[(0, 0, 0)]]))
    rc = main(
        [
            "--input",
            str(tmp_path / "missing.yuv"),
            "--output",
            str(tmp_path / "out.yuv"),
            "--overlay",
            str(bmp),
            "--width",
            "4",
            "--height",
            "2",
        ]
    )
    assert rc == 1
