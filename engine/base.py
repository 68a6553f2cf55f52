"""Base interfaces for transcription engines."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional


class EngineError(RuntimeError):
    """Base error for transcription engine failures."""


class TranscriptionServiceError(EngineError):
    """Raised when the transcription service call fails or returns an error."""


@dataclass(frozen=True, slots=True)
class Segment:
    """A timed piece of the transcript (seconds from the start of the audio)."""

    start: float
    end: float
    text: str


@dataclass(frozen=True, slots=True)
class Transcription:
    """Result of a transcription call."""

    text: str
    segments: tuple[Segment, ...] = ()
    language: Optional[str] = None
    duration: Optional[float] = None
    raw: dict[str, Any] = field(default_factory=dict)


class TranscriptionEngine(ABC):
    """Interface for speech-to-text engines."""

    @abstractmethod
    def transcribe(
        self,
        audio_path: Path,
        language: Optional[str] = None,
        prompt: Optional[str] = None,
        temperature: float = 0.0,
        timestamps: bool = False,
    ) -> Transcription:
        """Transcribe an audio file.

        Args:
            audio_path: Path to an audio file in a natively supported format.
            language: Optional language code (e.g. "en"). When None, auto-detect.
            prompt: Optional text to guide the style or continue a previous segment.
            temperature: Sampling temperature between 0 and 1.
            timestamps: Ask for the detailed response (segment timings, language,
                duration) when the engine can provide it.

        Returns:
            The transcript; ``segments`` is empty when no timings are available.
        """
