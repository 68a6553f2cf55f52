"""Transcript file output."""

from __future__ import annotations

from pathlib import Path


def write_text_file(output_path: Path, text: str) -> None:
    """Write transcript text to disk exactly as given.

    Args:
        output_path: Destination path; missing parent directories are created.
        text: Transcript content.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text, encoding="utf-8", newline="")
