"""Tests for container detection and source classification."""

from pathlib import Path

import pytest
from PIL import Image

from create_thumbnail.common.errors import DecodeError, UnsupportedFormat
from create_thumbnail.utils.media_types import (
    ContainerKind,
    SourceImage,
    classify_image,
    detect_mime,
)

# ============================================================================
# Test Class 1: ContainerKind Enum
# ============================================================================


class TestContainerKind:
    def test_values(self) -> None:
        """Test the closed set of container kinds."""
        assert {kind.value for kind in ContainerKind} == {
            "jpeg",
            "png",
            "tiff",
            "webp",
            "static_gif",
            "animated_gif",
        }

    def test_only_animated_gif_is_animated(self) -> None:
        """Test is_animated is true for animated GIF only."""
        assert [kind for kind in ContainerKind if kind.is_animated] == [ContainerKind.ANIMATED_GIF]

    def test_pillow_format(self) -> None:
        """Test the Pillow save format of each kind."""
        assert ContainerKind.JPEG.pillow_format == "JPEG"
        assert ContainerKind.STATIC_GIF.pillow_format == "GIF"
        assert ContainerKind.TIFF.pillow_format == "TIFF"

    def test_output_suffix(self) -> None:
        """Test only animated GIFs change their suffix."""
        assert ContainerKind.ANIMATED_GIF.output_suffix(".gif") == ".mp4"
        assert ContainerKind.JPEG.output_suffix(".jpeg") == ".jpeg"
        assert ContainerKind.STATIC_GIF.output_suffix(".gif") == ".gif"


# ============================================================================
# Test Class 2: Classification
# ============================================================================


class TestClassifyImage:
    @pytest.mark.parametrize(
        ("name", "fmt", "expected"),
        [
            ("photo.jpg", "JPEG", ContainerKind.JPEG),
            ("photo.png", "PNG", ContainerKind.PNG),
            ("photo.tiff", "TIFF", ContainerKind.TIFF),
            ("photo.webp", "WEBP", ContainerKind.WEBP),
            ("photo.gif", "GIF", ContainerKind.STATIC_GIF),
        ],
    )
    def test_still_formats(self, make_image, name: str, fmt: str, expected: ContainerKind) -> None:
        """Test each supported still container is recognised with its size."""
        path = make_image(name=name, size=(64, 32), fmt=fmt)

        source = classify_image(path)

        assert isinstance(source, SourceImage)
        assert source.kind is expected
        assert (source.width, source.height) == (64, 32)
        assert source.frame_count == 1
        assert source.path == path

    def test_animated_gif(self, make_animated_gif) -> None:
        """Test a GIF with several frames is animated."""
        source = classify_image(make_animated_gif())

        assert source.kind is ContainerKind.ANIMATED_GIF
        assert source.frame_count == 3

    def test_content_not_extension(self, make_image) -> None:
        """Test a PNG named .jpg is still classified as PNG."""
        path = make_image(name="misnamed.jpg", fmt="PNG")

        assert classify_image(path).kind is ContainerKind.PNG

    def test_orientation_read(self, make_image) -> None:
        """Test EXIF orientation is captured and swaps the displayed size."""
        path = make_image(size=(200, 100), orientation=6)

        source = classify_image(path)

        assert source.orientation == 6
        assert (source.width, source.height) == (200, 100)
        assert source.oriented_size == (100, 200)

    def test_mp3_unsupported(self, mp3_file: Path) -> None:
        """Test an MP3 file is rejected with its MIME type."""
        with pytest.raises(UnsupportedFormat) as exc_info:
            _ = classify_image(mp3_file)

        assert exc_info.value.path == mp3_file
        assert exc_info.value.mime.startswith("audio/")

    def test_text_unsupported(self, tmp_path: Path) -> None:
        """Test plain text is rejected."""
        path = tmp_path / "notes.png"
        _ = path.write_text("definitely not an image\n")

        with pytest.raises(UnsupportedFormat):
            _ = classify_image(path)

    def test_unsupported_image_format(self, tmp_path: Path) -> None:
        """Test a real image outside the supported set is rejected."""
        path = tmp_path / "picture.bmp"
        Image.new("RGB", (8, 8)).save(path, "BMP")

        with pytest.raises(UnsupportedFormat):
            _ = classify_image(path)

    def test_corrupt_jpeg(self, tmp_path: Path) -> None:
        """Test a JPEG signature followed by garbage fails to decode."""
        path = tmp_path / "broken.jpg"
        _ = path.write_bytes(b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x13\x37" * 64)

        with pytest.raises(DecodeError) as exc_info:
            _ = classify_image(path)

        assert exc_info.value.path == path

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing source raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            _ = classify_image(tmp_path / "missing.png")


def test_detect_mime_png(make_image) -> None:
    """Test MIME sniffing of a PNG."""
    assert detect_mime(make_image(name="a.png", fmt="PNG")) == "image/png"
