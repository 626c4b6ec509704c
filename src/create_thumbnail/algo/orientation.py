"""EXIF orientation normalisation (pure functions)."""

from PIL import ExifTags, Image

EXIF_ORIENTATION_TAG = ExifTags.Base.Orientation

# EXIF orientation code -> transpose that makes the pixels display upright
_TRANSPOSE_FOR_CODE: dict[int, Image.Transpose] = {
    2: Image.Transpose.FLIP_LEFT_RIGHT,
    3: Image.Transpose.ROTATE_180,
    4: Image.Transpose.FLIP_TOP_BOTTOM,
    5: Image.Transpose.TRANSPOSE,
    6: Image.Transpose.ROTATE_270,
    7: Image.Transpose.TRANSVERSE,
    8: Image.Transpose.ROTATE_90,
}

# Rotations by 90/270 degrees
_SWAPS_AXES = frozenset({5, 6, 7, 8})


def read_orientation(image: Image.Image) -> int:
    """Return the EXIF orientation code of ``image``, 1 when absent or unreadable."""
    try:
        value = image.getexif().get(EXIF_ORIENTATION_TAG, 1)
    except (AttributeError, OSError, SyntaxError, ValueError):
        # Malformed EXIF blocks raise any of these
        return 1
    return value if isinstance(value, int) and 0 <= value <= 8 else 1


def apply_orientation(image: Image.Image, code: int | None) -> Image.Image:
    """Return a copy of ``image`` transformed so orientation ``code`` becomes identity.

    Codes 0, 1, None and unknown values leave the pixels unchanged.
    The input image is never modified.
    """
    method = _TRANSPOSE_FOR_CODE.get(code or 1)
    if method is None:
        return image.copy()
    return image.transpose(method)


def inverse_orientation(code: int) -> int:
    """Return the code whose transform undoes the transform of ``code``."""
    return {6: 8, 8: 6}.get(code, code)


def oriented_size(width: int, height: int, code: int | None) -> tuple[int, int]:
    """Size of a ``width`` x ``height`` image once orientation ``code`` is applied."""
    if code in _SWAPS_AXES:
        return (height, width)
    return (width, height)
