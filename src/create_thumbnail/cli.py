"""Command line entry point: ``create-thumbnail PATH --out-dir DIR --width N``."""

import argparse
import sys
from pathlib import Path

from loguru import logger

from . import __version__
from .common.errors import ThumbnailError
from .common.schemas import ThumbnailSettings
from .pipeline import create_thumbnail


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid positive integer: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {number}")
    return number


def positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-thumbnail",
        description="Create a thumbnail of an image. Animated GIFs become MP4 videos.",
    )
    _ = parser.add_argument("path", type=Path, help="Path to the image to be thumbnailed")
    _ = parser.add_argument("--out-dir", type=Path, required=True, help="Directory to save the thumbnail in")
    _ = parser.add_argument("--width", type=positive_int, help="Maximum width of the thumbnail")
    _ = parser.add_argument("--height", type=positive_int, help="Maximum height of the thumbnail")
    _ = parser.add_argument("--ffmpeg", default="ffmpeg", help="ffmpeg executable for animated GIFs")
    _ = parser.add_argument("--timeout", type=positive_float, default=None, help="Seconds to wait for ffmpeg")
    _ = parser.add_argument("-v", "--verbose", action="store_true", help="Log each pipeline step")
    _ = parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.width is None and args.height is None:
        parser.error("at least one of --width or --height is required")

    logger.remove()
    _ = logger.add(sys.stderr, level="DEBUG" if args.verbose else "WARNING")

    settings = ThumbnailSettings(ffmpeg_binary=args.ffmpeg, transcode_timeout=args.timeout)

    try:
        thumbnail_path = create_thumbnail(
            args.path,
            args.out_dir,
            width=args.width,
            height=args.height,
            settings=settings,
        )
    except (ThumbnailError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(thumbnail_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
