"""Container detection for thumbnail sources."""

from enum import StrEnum
from pathlib import Path
from typing import ClassVar

import magic
from loguru import logger
from PIL import Image, UnidentifiedImageError
from pydantic import BaseModel, ConfigDict, Field

from ..algo.orientation import oriented_size, read_orientation
from ..common.errors import DecodeError, UnsupportedFormat

# libmagic needs only the leading bytes to recognise an image signature
SNIFF_BYTES = 8192


class ContainerKind(StrEnum):
    JPEG = "jpeg"
    PNG = "png"
    TIFF = "tiff"
    WEBP = "webp"
    STATIC_GIF = "static_gif"
    ANIMATED_GIF = "animated_gif"

    @property
    def is_animated(self) -> bool:
        return self is ContainerKind.ANIMATED_GIF

    @property
    def pillow_format(self) -> str:
        """Format name Pillow uses to save this container."""
        match self:
            case ContainerKind.JPEG:
                return "JPEG"
            case ContainerKind.PNG:
                return "PNG"
            case ContainerKind.TIFF:
                return "TIFF"
            case ContainerKind.WEBP:
                return "WEBP"
            case ContainerKind.STATIC_GIF | ContainerKind.ANIMATED_GIF:
                return "GIF"

    def output_suffix(self, source_suffix: str) -> str:
        if self.is_animated:
            return ".mp4"
        return source_suffix


MIME_TO_CONTAINER: dict[str, ContainerKind] = {
    "image/jpeg": ContainerKind.JPEG,
    "image/png": ContainerKind.PNG,
    "image/tiff": ContainerKind.TIFF,
    "image/webp": ContainerKind.WEBP,
    "image/gif": ContainerKind.STATIC_GIF,
}


class SourceImage(BaseModel):
    """A classified source image.

    Attributes:
        path: Location of the source file
        kind: Detected container
        width: Stored pixel width (before orientation)
        height: Stored pixel height (before orientation)
        orientation: EXIF orientation code (1 = identity)
        frame_count: Number of frames in the file
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    path: Path
    kind: ContainerKind
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    orientation: int = Field(default=1, ge=0, le=8)
    frame_count: int = Field(default=1, ge=1)

    @property
    def oriented_size(self) -> tuple[int, int]:
        return oriented_size(self.width, self.height, self.orientation)


def detect_mime(path: str | Path) -> str:
    """Sniff the MIME type of ``path`` from its content."""
    with open(path, "rb") as f:
        head = f.read(SNIFF_BYTES)

    mime = magic.Magic(mime=True)
    file_type = mime.from_buffer(head)
    if not file_type:
        file_type = "application/octet-stream"
    return file_type


def classify_image(path: str | Path) -> SourceImage:
    """
    Identify the container of ``path`` and read its basic geometry.

    Args:
        path: Path to the source file

    Returns:
        SourceImage describing the file

    Raises:
        FileNotFoundError: If the file does not exist
        UnsupportedFormat: If the content is not JPEG, PNG, TIFF, WEBP or GIF
        DecodeError: If the container is recognised but cannot be read
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Input file not found: {path}")

    mime = detect_mime(path)
    kind = MIME_TO_CONTAINER.get(mime)
    if kind is None:
        raise UnsupportedFormat(path, mime)

    try:
        with Image.open(path) as img:
            width, height = img.size
            orientation = read_orientation(img)
            frame_count = getattr(img, "n_frames", 1)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, EOFError, SyntaxError) as exc:
        raise DecodeError(path, str(exc)) from exc

    if kind is ContainerKind.STATIC_GIF and frame_count > 1:
        kind = ContainerKind.ANIMATED_GIF

    logger.debug(f"{path}: {mime} -> {kind} {width}x{height} orientation={orientation} frames={frame_count}")

    return SourceImage(
        path=path,
        kind=kind,
        width=width,
        height=height,
        orientation=orientation,
        frame_count=frame_count,
    )
