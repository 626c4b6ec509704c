"""Resolve a partial bounding box into concrete thumbnail dimensions."""

from ..common.errors import InvalidConstraint
from ..common.schemas import BoundingConstraint, ResolvedDimensions


def _round_ratio(numerator: int, denominator: int) -> int:
    """Round ``numerator / denominator`` half-up using integer arithmetic."""
    return (2 * numerator + denominator) // (2 * denominator)


def _force_even(value: int) -> int:
    return max(2, value - value % 2)


def resolve_dimensions(
    size: tuple[int, int],
    constraint: BoundingConstraint,
    *,
    even: bool = False,
) -> ResolvedDimensions:
    """
    Compute the output size for an image of ``size`` under ``constraint``.

    With a single bound the bounded axis takes the constraint exactly and the
    other axis is scaled to preserve the aspect ratio. With both bounds the
    smaller of the two scale factors wins, so the result fits inside the box
    with one axis tight. Constraints larger than the source enlarge it.

    Args:
        size: (width, height) of the source after orientation is applied
        constraint: Maximum width and/or height
        even: Force both sides to even values (video output)

    Returns:
        ResolvedDimensions for the thumbnail

    Raises:
        InvalidConstraint: If the constraint has no bound (validation bypassed)
        ValueError: If the source size is not positive
    """
    original_width, original_height = size
    if original_width <= 0 or original_height <= 0:
        raise ValueError(f"Source dimensions must be positive, got {original_width}x{original_height}")

    match (constraint.max_width, constraint.max_height):
        case (int() as max_width, None):
            width, height = max_width, _round_ratio(original_height * max_width, original_width)
        case (None, int() as max_height):
            width, height = _round_ratio(original_width * max_height, original_height), max_height
        # Width-limited when max_width / w <= max_height / h
        case (int() as max_width, int() as max_height) if (
            max_width * original_height <= max_height * original_width
        ):
            width, height = max_width, _round_ratio(original_height * max_width, original_width)
        case (int(), int() as max_height):
            width, height = _round_ratio(original_width * max_height, original_height), max_height
        case _:
            raise InvalidConstraint("At least one of width or height must be given")

    width = max(1, width)
    height = max(1, height)

    if even:
        width = _force_even(width)
        height = _force_even(height)

    return ResolvedDimensions(width=width, height=height)
