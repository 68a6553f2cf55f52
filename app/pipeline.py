"""Transcription pipeline: format gate, conversion, size check, API call, output."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Optional

from .config import DEFAULT_MODEL
from engine.base import TranscriptionEngine
from media.audio import check_upload_size, prepared_audio
from output.formats import DETAILED_FORMATS, render_transcript
from output.naming import output_file_name
from output.text import write_text_file


logger = logging.getLogger("pindar")


@dataclass(frozen=True, slots=True)
class TranscribeRequest:
    """Input data required to run a transcription."""

    input_path: Path
    model: str = DEFAULT_MODEL
    language: Optional[str] = None
    prompt: Optional[str] = None
    output_format: str = "text"
    output_dir: Optional[Path] = None
    output_ext: Optional[str] = None
    temperature: float = 0.0


@dataclass(frozen=True, slots=True)
class TranscriptionResult:
    """Rendered transcript and the file it was written to (None for stdout)."""

    content: str
    output_path: Optional[Path] = None


def output_path_for(request: TranscribeRequest) -> Optional[Path]:
    """Return the destination path, or None when the transcript goes to stdout."""

    if request.output_dir is None:
        return None
    name = output_file_name(request.input_path, request.output_format, request.output_ext)
    return request.output_dir / name


def run_transcription(request: TranscribeRequest, engine: TranscriptionEngine) -> TranscriptionResult:
    """Run the transcription pipeline for one file.

    Unsupported containers are converted first; the size limit applies to the
    file that is actually uploaded. Nothing is written unless the API call
    succeeds.
    """

    with prepared_audio(request.input_path) as audio_path:
        size = check_upload_size(audio_path)
        logger.info("Transcribing: %s (%d bytes)", request.input_path.name, size)
        transcription = engine.transcribe(
            audio_path,
            language=request.language,
            prompt=request.prompt,
            temperature=request.temperature,
            timestamps=request.output_format in DETAILED_FORMATS,
        )

    content = render_transcript(transcription, request.output_format)

    output_path = output_path_for(request)
    if output_path is not None:
        write_text_file(output_path, content)
    return TranscriptionResult(content=content, output_path=output_path)
