"""Output file naming."""

from __future__ import annotations

from pathlib import PurePath
from typing import Optional, Union


DEFAULT_EXTENSION = ".txt"

FORMAT_EXTENSIONS = {
    "text": ".txt",
    "srt": ".srt",
    "vtt": ".vtt",
    "verbose_json": ".json",
}


def normalize_extension(ext: Optional[str]) -> Optional[str]:
    """Return ``ext`` with exactly one leading dot, or None if it is blank."""

    if ext is None:
        return None
    bare = ext.strip().lstrip(".")
    if not bare:
        return None
    return f".{bare}"


def output_extension(output_format: str, output_ext: Optional[str] = None) -> str:
    """Return the transcript file extension.

    An explicit ``output_ext`` always wins; otherwise the extension follows the
    output format, with unknown formats written as ``.txt``.
    """

    override = normalize_extension(output_ext)
    if override is not None:
        return override
    return FORMAT_EXTENSIONS.get(str(output_format).lower(), DEFAULT_EXTENSION)


def strip_extension(name: Union[str, PurePath]) -> str:
    """Return the base name without the text from its last dot on (``.mp3`` -> ``""``)."""

    base = PurePath(name).name
    head, dot, _ = base.rpartition(".")
    return head if dot else base


def output_file_name(
    input_path: Union[str, PurePath],
    output_format: str,
    output_ext: Optional[str] = None,
) -> str:
    """Return the transcript file name for an input file, e.g. ``song.mp3`` -> ``song.srt``."""

    return strip_extension(input_path) + output_extension(output_format, output_ext)
