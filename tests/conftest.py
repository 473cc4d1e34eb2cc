from pathlib import Path

import pytest
from PIL import Image


def make_jpeg(path: Path, size=(40, 20), color=(200, 30, 30)) -> Path:
    """Write a small solid-color JPEG, creating parent folders."""
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color).save(path, "JPEG")
    return path


class RecordingResizer:
    """Stand-in for the Pillow resizer: records calls and writes a marker file."""

    def __init__(self, fail_on=()):
        self.calls = []
        self.fail_on = set(fail_on)

    def __call__(self, src: Path, dst: Path, mode) -> None:
        self.calls.append((src, dst, mode))
        if src.name in self.fail_on:
            raise OSError(f"simulated failure for {src.name}")
        dst.write_bytes(src.read_bytes())


@pytest.fixture
def src_dir(tmp_path):
    d = tmp_path / "src"
    d.mkdir()
    return d


@pytest.fixture
def dst_dir(tmp_path):
    return tmp_path / "dst"


@pytest.fixture
def resizer():
    return RecordingResizer()
