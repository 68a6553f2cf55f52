"""Audio format gating, FFmpeg conversion and upload size checks."""

from __future__ import annotations

from contextlib import contextmanager
import logging
import os
from pathlib import Path, PurePath
import shutil
import subprocess
import tempfile
from typing import Iterator, Union


# Containers the transcription API accepts without conversion.
NATIVE_FORMATS = frozenset(
    {"flac", "m4a", "mp3", "mp4", "mpeg", "mpga", "oga", "ogg", "wav", "webm"}
)

MAX_UPLOAD_BYTES = 25 * 1024 * 1024

logger = logging.getLogger("pindar")


class MediaError(RuntimeError):
    """Base error for media handling failures."""


class ConverterUnavailableError(MediaError):
    """Raised when FFmpeg is not available on PATH."""


class ConversionFailedError(MediaError):
    """Raised when an FFmpeg command fails."""


class FileTooLargeError(MediaError):
    """Raised when the file to upload exceeds the API size limit."""


def file_extension(name: Union[str, PurePath]) -> str:
    """Return the lower-cased text after the last dot of the base name ("" if none)."""

    base = PurePath(name).name
    _, dot, ext = base.rpartition(".")
    return ext.lower() if dot else ""


def is_supported_media(name: Union[str, PurePath]) -> bool:
    """Return True if the transcription API accepts the file as-is."""

    return file_extension(name) in NATIVE_FORMATS


def find_ffmpeg() -> str:
    """Return the FFmpeg executable path (or raise if missing)."""

    ffmpeg = shutil.which("ffmpeg")
    if not ffmpeg:
        raise ConverterUnavailableError(
            "FFmpeg not found on PATH. Install FFmpeg to convert unsupported audio formats."
        )
    return ffmpeg


def convert_to_mp4(input_path: Path, output_path: Path) -> None:
    """Re-encode the audio stream of a file into AAC (128 kbit/s) in an MP4 container.

    Args:
        input_path: Source media file in any format FFmpeg can read.
        output_path: Output .mp4 path.

    Raises:
        ConverterUnavailableError: If ffmpeg is not found.
        ConversionFailedError: If ffmpeg returns a non-zero exit code.
    """

    ffmpeg = find_ffmpeg()
    cmd = [
        ffmpeg,
        "-hide_banner",
        "-nostdin",
        "-loglevel",
        "error",
        "-y",
        "-i",
        str(input_path),
        "-vn",
        "-c:a",
        "aac",
        "-b:a",
        "128k",
        str(output_path),
    ]

    try:
        subprocess.run(
            cmd,
            check=True,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
        )
    except subprocess.CalledProcessError as exc:
        details = (exc.stderr or "").strip()
        hint = f"FFmpeg failed to convert the file (exit code {exc.returncode})."
        extra = f"\n\nDetails:\n{details}" if details else ""
        raise ConversionFailedError(f"{hint}\n\nCommand: {' '.join(cmd)}{extra}") from exc


def convert_for_upload(input_path: Path) -> Path:
    """Convert a file into a private temporary directory and return the new path.

    The caller owns the returned file and its parent directory and must remove
    them once the upload is done. On failure nothing is left behind.
    """

    tmpdir = Path(tempfile.mkdtemp(prefix="pindar-"))
    output_path = tmpdir / f"{Path(input_path).stem}_converted.mp4"
    logger.info("Converting %s to MP4 format...", input_path)
    try:
        convert_to_mp4(input_path, output_path)
    except BaseException:
        shutil.rmtree(tmpdir, ignore_errors=True)
        raise
    logger.info("Converted to: %s", output_path)
    return output_path


@contextmanager
def prepared_audio(input_path: Path) -> Iterator[Path]:
    """Yield a path the transcription API accepts, cleaning up any conversion output.

    Natively supported files are yielded unchanged; anything else is converted to
    a temporary MP4 that is removed when the block exits, however it exits.
    """

    if is_supported_media(input_path):
        yield input_path
        return

    converted = convert_for_upload(input_path)
    try:
        yield converted
    finally:
        shutil.rmtree(converted.parent, ignore_errors=True)


def check_upload_size(path: Path, limit: int = MAX_UPLOAD_BYTES) -> int:
    """Return the file size, raising if it is over the upload limit.

    Raises:
        FileTooLargeError: If the file is larger than ``limit`` bytes.
    """

    size = os.stat(path).st_size
    if size > limit:
        raise FileTooLargeError(
            f"File size ({size / (1024 * 1024):.1f} MB) exceeds the "
            f"{limit // (1024 * 1024)} MB limit of the OpenAI API."
        )
    return size
