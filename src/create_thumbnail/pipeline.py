"""Thumbnail pipeline: classify, orient, size, encode, write."""

import os
import stat
import tempfile
from pathlib import Path

from loguru import logger
from PIL import Image, UnidentifiedImageError

from .algo.animated_thumbnail import FFmpegVideoEncoder, VideoEncoder, read_frames, resize_frames
from .algo.dimensions import resolve_dimensions
from .algo.orientation import apply_orientation
from .algo.still_thumbnail import encode_still
from .common.errors import DecodeError, SameInputOutputPath
from .common.schemas import BoundingConstraint, ResolvedDimensions, ThumbnailSettings
from .utils.media_types import ContainerKind, SourceImage, classify_image
from .utils.profiling import timed


def thumbnail_path_for(source_path: str | Path, out_dir: str | Path, kind: ContainerKind) -> Path:
    """Destination of the thumbnail for ``source_path`` inside ``out_dir``."""
    source_path = Path(source_path)
    name = Path(source_path.name)
    return Path(out_dir) / name.with_suffix(kind.output_suffix(name.suffix))


def _artifact_mode(destination: Path) -> int:
    """Permission bits for a written thumbnail: keep an existing file's, else honour the umask."""
    try:
        return stat.S_IMODE(destination.stat().st_mode)
    except FileNotFoundError:
        pass
    # umask can only be read by setting it
    umask = os.umask(0)
    _ = os.umask(umask)
    return 0o666 & ~umask


def write_artifact(data: bytes, destination: Path) -> Path:
    """Write ``data`` to ``destination`` atomically.

    The bytes go to a hidden temporary file beside the destination which is
    then renamed over it, so a failure never leaves a truncated thumbnail.
    """
    mode = _artifact_mode(destination)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{destination.name}.", suffix=".tmp", dir=destination.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            _ = f.write(data)
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, destination)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    return destination


def _render_still(source: SourceImage, constraint: BoundingConstraint) -> tuple[bytes, ResolvedDimensions]:
    try:
        with Image.open(source.path) as img:
            img.load()
            upright = apply_orientation(img, source.orientation)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, EOFError, SyntaxError) as exc:
        raise DecodeError(source.path, str(exc)) from exc
    logger.debug(f"{source.path}: orientation {source.orientation} normalized -> {upright.size}")

    dimensions = resolve_dimensions(upright.size, constraint)
    logger.debug(f"{source.path}: resolved {dimensions.width}x{dimensions.height}")

    return encode_still(upright, dimensions, source.kind), dimensions


def _render_animated(
    source: SourceImage,
    constraint: BoundingConstraint,
    settings: ThumbnailSettings,
    video_encoder: VideoEncoder,
) -> tuple[bytes, ResolvedDimensions]:
    try:
        with Image.open(source.path) as img:
            frames = read_frames(img, source.orientation, settings.default_frame_duration_ms)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, EOFError, SyntaxError) as exc:
        raise DecodeError(source.path, str(exc)) from exc
    logger.debug(f"{source.path}: decoded {len(frames)} frames, orientation {source.orientation} normalized")

    dimensions = resolve_dimensions(source.oriented_size, constraint, even=True)
    logger.debug(f"{source.path}: resolved {dimensions.width}x{dimensions.height} (even)")

    resized = resize_frames(frames, dimensions)
    return video_encoder.encode(resized, dimensions), dimensions


@timed
def create_thumbnail(
    source_path: str | Path,
    out_dir: str | Path,
    width: int | None = None,
    height: int | None = None,
    *,
    settings: ThumbnailSettings | None = None,
    video_encoder: VideoEncoder | None = None,
) -> Path:
    """
    Create a thumbnail of ``source_path`` inside ``out_dir``.

    Still images keep their container; animated GIFs become MP4 videos.
    ``out_dir`` is created when missing.

    Args:
        source_path: Image to thumbnail
        out_dir: Directory the thumbnail is written to
        width: Maximum thumbnail width
        height: Maximum thumbnail height
        settings: Runtime configuration (defaults to ThumbnailSettings())
        video_encoder: Encoder for animated sources (defaults to FFmpeg)

    Returns:
        Path of the written thumbnail

    Raises:
        InvalidConstraint: If neither width nor height is a positive integer
        FileNotFoundError: If the source does not exist
        UnsupportedFormat: If the source is not a supported image
        DecodeError: If the source cannot be decoded
        EncodeError: If a still thumbnail cannot be encoded
        EncoderUnavailable: If ffmpeg is missing for an animated source
        TranscodeError: If ffmpeg fails
        SameInputOutputPath: If the thumbnail would overwrite the source
    """
    constraint = BoundingConstraint.from_values(width, height)
    settings = settings or ThumbnailSettings()

    source = classify_image(source_path)
    logger.debug(f"{source.path}: classified as {source.kind}")

    destination = thumbnail_path_for(source.path, out_dir, source.kind)
    if destination.resolve() == source.path.resolve():
        raise SameInputOutputPath(destination)

    if source.kind.is_animated:
        encoder = video_encoder or FFmpegVideoEncoder(settings)
        data, dimensions = _render_animated(source, constraint, settings, encoder)
    else:
        data, dimensions = _render_still(source, constraint)

    destination.parent.mkdir(parents=True, exist_ok=True)
    _ = write_artifact(data, destination)

    logger.info(f"Created {dimensions.width}x{dimensions.height} thumbnail {destination}")
    return destination
