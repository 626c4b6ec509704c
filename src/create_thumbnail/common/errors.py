"""Error taxonomy for thumbnail generation.

Every failure is terminal to a single invocation. Filesystem problems
(missing source, unwritable output directory) surface as the built-in
``OSError`` family and are not wrapped here.
"""

from pathlib import Path
from typing import override


class ThumbnailError(Exception):
    """Base class for every thumbnailing failure."""

    def __init__(self, message: str = "Thumbnail generation failed"):
        self.message: str = message
        super().__init__(self.message)

    @override
    def __str__(self):
        return self.message


class UnsupportedFormat(ThumbnailError):
    """Raised when file content matches none of the supported containers."""

    def __init__(self, path: str | Path, mime: str):
        self.path: Path = Path(path)
        self.mime: str = mime
        super().__init__(
            f"Unsupported format for {self.path}: detected {mime}, "
            "expected one of JPEG, PNG, TIFF, WEBP, GIF"
        )


class InvalidConstraint(ThumbnailError):
    """Raised when the bounding box is missing or not strictly positive."""


class DecodeError(ThumbnailError):
    """Raised when a recognised container cannot be decoded."""

    def __init__(self, path: str | Path, reason: str):
        self.path: Path = Path(path)
        super().__init__(f"Failed to decode {self.path}: {reason}")


class EncodeError(ThumbnailError):
    """Raised when resizing or re-encoding a still image fails."""


class EncoderUnavailable(ThumbnailError):
    """Raised when the external video encoder cannot be located."""

    def __init__(self, binary: str):
        self.binary: str = binary
        super().__init__(f"Video encoder not found on PATH: {binary}")


class TranscodeError(ThumbnailError):
    """Raised when the external video encoder fails."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        self.returncode: int | None = returncode
        self.stderr: str = stderr
        details = [message]
        if returncode is not None:
            details.append(f"exit code: {returncode}")
        if stderr:
            details.append(stderr.strip())
        super().__init__("\n".join(details))


class SameInputOutputPath(ThumbnailError):
    """Raised when the thumbnail would overwrite its own source."""

    def __init__(self, path: str | Path):
        self.path: Path = Path(path)
        super().__init__(f"Cannot write thumbnail to the same path as the original image: {self.path}")
