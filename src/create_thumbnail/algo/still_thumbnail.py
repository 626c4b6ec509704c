"""Still image thumbnail encoding."""

from io import BytesIO

from PIL import Image

from ..common.errors import EncodeError
from ..common.schemas import ResolvedDimensions
from ..utils.media_types import ContainerKind

# Formats Pillow can embed an ICC profile into
_ICC_FORMATS = frozenset({"JPEG", "PNG", "TIFF", "WEBP"})


def _prepare_mode(image: Image.Image, kind: ContainerKind) -> Image.Image:
    """Convert ``image`` to a mode LANCZOS can filter and ``kind`` can store."""
    has_alpha = image.mode in ("RGBA", "LA", "PA") or (
        image.mode == "P" and "transparency" in image.info
    )

    if kind is ContainerKind.JPEG:
        if image.mode in ("RGB", "L", "CMYK"):
            return image
        return image.convert("RGB")

    if image.mode in ("1", "P", "PA"):
        return image.convert("RGBA" if has_alpha else "RGB")

    return image


def encode_still(
    image: Image.Image,
    dimensions: ResolvedDimensions,
    kind: ContainerKind,
) -> bytes:
    """
    Resize an orientation-normalised image and encode it in its own container.

    Args:
        image: Decoded, upright source pixels
        dimensions: Target size
        kind: Container of the source, reused for the output

    Returns:
        Encoded thumbnail bytes

    Raises:
        EncodeError: If the image cannot be resized or encoded as ``kind``
    """
    if kind.is_animated:
        raise EncodeError(f"{kind} cannot be encoded as a still image")

    icc_profile = image.info.get("icc_profile")

    try:
        prepared = _prepare_mode(image, kind)
        thumbnail = prepared.resize(dimensions.as_tuple(), Image.Resampling.LANCZOS)

        save_kwargs: dict[str, object] = {}
        if icc_profile and kind.pillow_format in _ICC_FORMATS:
            save_kwargs["icc_profile"] = icc_profile

        buffer = BytesIO()
        thumbnail.save(buffer, format=kind.pillow_format, **save_kwargs)
    except (OSError, ValueError, KeyError) as exc:
        raise EncodeError(f"Failed to encode {kind} thumbnail at {dimensions.width}x{dimensions.height}: {exc}") from exc

    return buffer.getvalue()
