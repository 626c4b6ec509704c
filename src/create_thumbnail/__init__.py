"""create_thumbnail - resize images into thumbnails, animated GIFs into MP4."""

from .algo.animated_thumbnail import FFmpegVideoEncoder, VideoEncoder
from .algo.dimensions import resolve_dimensions
from .algo.orientation import apply_orientation, inverse_orientation
from .common.errors import (
    DecodeError,
    EncodeError,
    EncoderUnavailable,
    InvalidConstraint,
    SameInputOutputPath,
    ThumbnailError,
    TranscodeError,
    UnsupportedFormat,
)
from .common.schemas import BoundingConstraint, ResolvedDimensions, ThumbnailSettings
from .pipeline import create_thumbnail, thumbnail_path_for
from .utils.media_types import ContainerKind, SourceImage, classify_image

__version__ = "1.1.0"

__all__ = [
    "BoundingConstraint",
    "ContainerKind",
    "DecodeError",
    "EncodeError",
    "EncoderUnavailable",
    "FFmpegVideoEncoder",
    "InvalidConstraint",
    "ResolvedDimensions",
    "SameInputOutputPath",
    "SourceImage",
    "ThumbnailError",
    "ThumbnailSettings",
    "TranscodeError",
    "UnsupportedFormat",
    "VideoEncoder",
    "__version__",
    "apply_orientation",
    "classify_image",
    "create_thumbnail",
    "inverse_orientation",
    "resolve_dimensions",
    "thumbnail_path_for",
]
