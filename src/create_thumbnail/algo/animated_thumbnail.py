"""Animated GIF to MP4 transcoding using FFmpeg."""

import shutil
import subprocess
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from loguru import logger
from PIL import Image, ImageSequence

from ..common.errors import EncoderUnavailable, TranscodeError
from ..common.schemas import AnimationFrame, ResolvedDimensions, ThumbnailSettings
from .orientation import apply_orientation

VIDEO_SUFFIX = ".mp4"


class VideoEncoder(Protocol):
    """Turns an ordered, already resized frame sequence into video bytes."""

    def encode(self, frames: Sequence[AnimationFrame], dimensions: ResolvedDimensions) -> bytes: ...


def read_frames(
    image: Image.Image,
    orientation: int = 1,
    default_duration_ms: int = 100,
) -> list[AnimationFrame]:
    """Decode every frame of ``image`` in order, upright, with its duration.

    Frames are never reordered, dropped or merged.
    """
    frames: list[AnimationFrame] = []
    for frame in ImageSequence.Iterator(image):
        duration = frame.info.get("duration") or default_duration_ms
        upright = apply_orientation(frame.convert("RGB"), orientation)
        frames.append(AnimationFrame(image=upright, duration_ms=int(duration)))
    return frames


def resize_frames(
    frames: Sequence[AnimationFrame],
    dimensions: ResolvedDimensions,
) -> list[AnimationFrame]:
    """Resize every frame to exactly ``dimensions``, keeping durations."""
    size = dimensions.as_tuple()
    return [
        AnimationFrame(
            image=frame.image.resize(size, Image.Resampling.LANCZOS),
            duration_ms=frame.duration_ms,
        )
        for frame in frames
    ]


class FFmpegVideoEncoder:
    """Encodes frames to H.264 MP4 by running ffmpeg as a child process."""

    def __init__(self, settings: ThumbnailSettings | None = None) -> None:
        self.settings: ThumbnailSettings = settings or ThumbnailSettings()

    def locate_binary(self) -> str:
        binary = shutil.which(self.settings.ffmpeg_binary)
        if binary is None:
            raise EncoderUnavailable(self.settings.ffmpeg_binary)
        return binary

    def _write_concat_list(self, frames: Sequence[AnimationFrame], work_dir: Path) -> Path:
        """Write frames as PNGs plus an ffmpeg concat list with per-frame durations."""
        entries: list[str] = []
        frame_name = ""
        for index, frame in enumerate(frames):
            frame_name = f"frame_{index:06d}.png"
            frame.image.save(work_dir / frame_name, format="PNG")
            entries.append(f"file '{frame_name}'")
            entries.append(f"duration {frame.duration_ms / 1000:.6f}")

        # The concat demuxer ignores the duration of the final entry unless
        # the file is listed once more.
        entries.append(f"file '{frame_name}'")

        concat_file = work_dir / "frames.txt"
        _ = concat_file.write_text("\n".join(entries) + "\n", encoding="utf-8")
        return concat_file

    def build_command(
        self,
        binary: str,
        concat_file: Path,
        output_path: Path,
        frame_count: int,
    ) -> list[str]:
        # The repeated final concat entry would otherwise become an extra frame
        return [
            binary,
            "-loglevel",
            "error",
            "-y",
            "-f",
            "concat",
            "-safe",
            "0",
            "-i",
            str(concat_file),
            "-c:v",
            "libx264",
            "-pix_fmt",
            "yuv420p",
            "-movflags",
            "+faststart",
            "-fps_mode",
            "vfr",
            "-frames:v",
            str(frame_count),
            "-an",
            str(output_path),
        ]

    def encode(self, frames: Sequence[AnimationFrame], dimensions: ResolvedDimensions) -> bytes:
        """
        Encode ``frames`` into an MP4 of ``dimensions``.

        Args:
            frames: Ordered frames, all already resized to ``dimensions``
            dimensions: Video size, both sides even

        Returns:
            MP4 file content

        Raises:
            EncoderUnavailable: If ffmpeg is not on PATH
            TranscodeError: If ffmpeg fails, times out or produces no output
        """
        if not frames:
            raise TranscodeError("No frames to encode")

        size = dimensions.as_tuple()
        for index, frame in enumerate(frames):
            if frame.image.size != size:
                raise TranscodeError(f"Frame {index} is {frame.image.size}, expected {size}")

        binary = self.locate_binary()

        with tempfile.TemporaryDirectory(prefix="create_thumbnail_") as tmp:
            work_dir = Path(tmp)
            concat_file = self._write_concat_list(frames, work_dir)
            output_path = work_dir / f"thumbnail{VIDEO_SUFFIX}"
            command = self.build_command(binary, concat_file, output_path, len(frames))

            logger.debug(" ".join(command))

            # subprocess.run kills the child if we are interrupted while waiting
            try:
                process = subprocess.run(
                    command,
                    cwd=work_dir,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    text=True,
                    check=False,
                    timeout=self.settings.transcode_timeout,
                )
            except subprocess.TimeoutExpired as exc:
                raise TranscodeError(
                    f"FFmpeg timed out after {self.settings.transcode_timeout}s"
                ) from exc
            except (OSError, ValueError, subprocess.SubprocessError) as exc:
                raise TranscodeError(f"Failed to start ffmpeg: {exc}") from exc

            if process.returncode != 0:
                logger.error(f"FFmpeg exited with {process.returncode}: {process.stderr}")
                raise TranscodeError(
                    "FFmpeg command failed",
                    returncode=process.returncode,
                    stderr=process.stderr,
                )

            if not output_path.exists():
                raise TranscodeError(f"FFmpeg did not create {output_path.name}", stderr=process.stderr)

            return output_path.read_bytes()
