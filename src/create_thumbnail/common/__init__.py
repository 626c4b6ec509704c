"""Shared data model and errors."""

from .errors import (
    DecodeError,
    EncodeError,
    EncoderUnavailable,
    InvalidConstraint,
    SameInputOutputPath,
    ThumbnailError,
    TranscodeError,
    UnsupportedFormat,
)
from .schemas import (
    AnimationFrame,
    BoundingConstraint,
    ResolvedDimensions,
    ThumbnailSettings,
)

__all__ = [
    "AnimationFrame",
    "BoundingConstraint",
    "DecodeError",
    "EncodeError",
    "EncoderUnavailable",
    "InvalidConstraint",
    "ResolvedDimensions",
    "SameInputOutputPath",
    "ThumbnailError",
    "ThumbnailSettings",
    "TranscodeError",
    "UnsupportedFormat",
]
