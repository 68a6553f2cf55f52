"""Transcript rendering for the supported output formats."""

from __future__ import annotations

from enum import Enum
import json
import logging

from engine.base import Segment, Transcription


logger = logging.getLogger("pindar")


class OutputFormat(str, Enum):
    """Output formats accepted by ``--format``."""

    TEXT = "text"
    SRT = "srt"
    VTT = "vtt"
    VERBOSE_JSON = "verbose_json"


TIMED_FORMATS = {OutputFormat.SRT.value, OutputFormat.VTT.value}

# Formats that want the most detailed response the model can give.
DETAILED_FORMATS = TIMED_FORMATS | {OutputFormat.VERBOSE_JSON.value}


def format_timestamp(seconds: float, separator: str = ",") -> str:
    """Format seconds as ``HH:MM:SS,mmm`` (SRT) or ``HH:MM:SS.mmm`` (WebVTT)."""

    total_ms = max(0, int(round(seconds * 1000)))
    hours, rest = divmod(total_ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    secs, millis = divmod(rest, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}{separator}{millis:03d}"


def render_srt(segments: tuple[Segment, ...]) -> str:
    """Render segments as SubRip cues (1-based indices)."""

    blocks = []
    for index, segment in enumerate(segments, 1):
        start = format_timestamp(segment.start)
        end = format_timestamp(segment.end)
        blocks.append(f"{index}\n{start} --> {end}\n{segment.text}\n")
    return "\n".join(blocks)


def render_vtt(segments: tuple[Segment, ...]) -> str:
    """Render segments as a WebVTT document."""

    blocks = ["WEBVTT\n"]
    for segment in segments:
        start = format_timestamp(segment.start, ".")
        end = format_timestamp(segment.end, ".")
        blocks.append(f"{start} --> {end}\n{segment.text}\n")
    return "\n".join(blocks)


def render_transcript(transcription: Transcription, output_format: str) -> str:
    """Render a transcription in the requested output format.

    Subtitle formats need segment timings; when the service returned none, the
    plain text is used instead and a warning is logged.
    """

    fmt = str(getattr(output_format, "value", output_format)).lower()

    if fmt == OutputFormat.VERBOSE_JSON.value:
        raw = transcription.raw or {"text": transcription.text}
        return json.dumps(raw, indent=2, ensure_ascii=False)

    if fmt in TIMED_FORMATS:
        if not transcription.segments:
            logger.warning(
                "The transcription contains no timing data; writing plain text instead of %s.",
                fmt,
            )
            return transcription.text
        if fmt == OutputFormat.SRT.value:
            return render_srt(transcription.segments)
        return render_vtt(transcription.segments)

    return transcription.text
