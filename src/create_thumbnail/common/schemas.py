"""Value types shared by the thumbnail pipeline."""

from dataclasses import dataclass
from typing import ClassVar

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .errors import InvalidConstraint


class BoundingConstraint(BaseModel):
    """Maximum width and/or height the thumbnail must fit within.

    Attributes:
        max_width: Maximum output width in pixels (None = unconstrained)
        max_height: Maximum output height in pixels (None = unconstrained)
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    max_width: int | None = Field(default=None, gt=0, strict=True)
    max_height: int | None = Field(default=None, gt=0, strict=True)

    @model_validator(mode="after")
    def validate_has_bound(self) -> "BoundingConstraint":
        """Ensure at least one of width or height is given."""
        if self.max_width is None and self.max_height is None:
            raise ValueError("At least one of width or height must be given")
        return self

    @classmethod
    def from_values(cls, width: object = None, height: object = None) -> "BoundingConstraint":
        """Build a constraint from raw caller values.

        Raises:
            InvalidConstraint: If the values are not integers, both are
                missing, or either is zero or negative
        """
        try:
            return cls(max_width=width, max_height=height)  # pyright: ignore[reportArgumentType]
        except ValidationError as exc:
            raise InvalidConstraint(str(exc)) from exc


class ResolvedDimensions(BaseModel):
    """Final output size in pixels."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    width: int = Field(gt=0)
    height: int = Field(gt=0)

    def as_tuple(self) -> tuple[int, int]:
        return (self.width, self.height)


@dataclass(frozen=True)
class AnimationFrame:
    """One decoded frame of an animation and how long it is shown."""

    image: Image.Image
    duration_ms: int


class ThumbnailSettings(BaseModel):
    """Runtime configuration for the thumbnail pipeline.

    Attributes:
        ffmpeg_binary: Name or path of the ffmpeg executable
        transcode_timeout: Seconds to wait for ffmpeg (None = wait forever)
        default_frame_duration_ms: Duration used for GIF frames that declare none
    """

    ffmpeg_binary: str = "ffmpeg"
    transcode_timeout: float | None = Field(default=None, gt=0)
    default_frame_duration_ms: int = Field(default=100, gt=0)
