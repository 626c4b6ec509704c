"""Test configuration and fixtures for create_thumbnail.

This module provides:
- Pytest configuration (dependency checks)
- Function-scoped fixtures generating test media with Pillow
- A recording video encoder so the animated path runs without ffmpeg
"""

import shutil
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest
from PIL import Image, ImageDraw

from create_thumbnail.algo.orientation import EXIF_ORIENTATION_TAG
from create_thumbnail.common.schemas import AnimationFrame, ResolvedDimensions

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_runtest_setup(item):
    """Check dependencies before running tests - FAIL if missing (not skip)."""
    if item.get_closest_marker("requires_ffmpeg") and not shutil.which("ffmpeg"):
        pytest.fail(
            "FFmpeg not installed. "
            "Install: brew install ffmpeg (macOS) or apt-get install ffmpeg (Linux)\n"
            "Or exclude with: pytest -m 'not requires_ffmpeg'",
            pytrace=False,
        )


# ============================================================================
# Media Fixtures
# ============================================================================

ImageFactory = Callable[..., Path]


def draw_pattern(size: tuple[int, int], mode: str = "RGB") -> Image.Image:
    """Image with a distinct top-left marker so rotations are observable."""
    color = (73, 109, 137, 255) if mode == "RGBA" else (73, 109, 137)
    img = Image.new(mode, size, color=color)
    draw = ImageDraw.Draw(img)
    marker = (max(1, size[0] // 4), max(1, size[1] // 4))
    draw.rectangle([0, 0, marker[0], marker[1]], fill=(255, 0, 0))
    return img


@pytest.fixture
def make_image(tmp_path: Path) -> ImageFactory:
    """Factory writing a still test image and returning its path."""
    source_dir = tmp_path / "source"
    source_dir.mkdir(exist_ok=True)

    def _make(
        name: str = "sample.jpg",
        size: tuple[int, int] = (1200, 800),
        fmt: str = "JPEG",
        mode: str = "RGB",
        orientation: int | None = None,
    ) -> Path:
        output_path = source_dir / name
        img = draw_pattern(size, mode)
        save_kwargs: dict[str, object] = {}
        if orientation is not None:
            exif = Image.Exif()
            exif[EXIF_ORIENTATION_TAG] = orientation
            save_kwargs["exif"] = exif.tobytes()
        img.save(output_path, fmt, **save_kwargs)
        return output_path

    return _make


FRAME_COLORS = [(255, 0, 0), (0, 255, 0), (0, 0, 255)]


@pytest.fixture
def make_animated_gif(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing an animated GIF with one solid colour per frame."""
    source_dir = tmp_path / "source"
    source_dir.mkdir(exist_ok=True)

    def _make(
        name: str = "animated.gif",
        size: tuple[int, int] = (101, 101),
        colors: Sequence[tuple[int, int, int]] = FRAME_COLORS,
        durations: Sequence[int] = (100, 200, 300),
    ) -> Path:
        output_path = source_dir / name
        frames = [Image.new("RGB", size, color=color) for color in colors]
        frames[0].save(
            output_path,
            "GIF",
            save_all=True,
            append_images=frames[1:],
            duration=list(durations),
            loop=0,
        )
        return output_path

    return _make


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    """Output directory (not created; the pipeline creates it)."""
    return tmp_path / "thumbnails"


@pytest.fixture
def mp3_file(tmp_path: Path) -> Path:
    """A minimal MP3: ID3v2 header followed by an MPEG audio frame header."""
    path = tmp_path / "song.mp3"
    id3_header = b"ID3\x03\x00\x00\x00\x00\x00\x00"
    frame_header = b"\xff\xfb\x90\x64"
    _ = path.write_bytes(id3_header + frame_header + b"\x00" * 413)
    return path


# ============================================================================
# Encoder Fixtures
# ============================================================================


class RecordingVideoEncoder:
    """VideoEncoder stand-in that records what it was asked to encode."""

    def __init__(self, payload: bytes = b"\x00\x00\x00\x18ftypisom-fake-video") -> None:
        self.payload: bytes = payload
        self.calls: list[tuple[list[AnimationFrame], ResolvedDimensions]] = []

    def encode(self, frames: Sequence[AnimationFrame], dimensions: ResolvedDimensions) -> bytes:
        self.calls.append((list(frames), dimensions))
        return self.payload


class FailingVideoEncoder:
    """VideoEncoder stand-in that always fails."""

    def __init__(self, error: Exception) -> None:
        self.error: Exception = error

    def encode(self, frames: Sequence[AnimationFrame], dimensions: ResolvedDimensions) -> bytes:
        raise self.error


@pytest.fixture
def recording_encoder() -> RecordingVideoEncoder:
    return RecordingVideoEncoder()


@pytest.fixture
def failing_encoder() -> Callable[[Exception], FailingVideoEncoder]:
    return FailingVideoEncoder
