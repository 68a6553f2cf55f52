"""OpenAI speech-to-text engine implementation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import openai

from .base import Segment, Transcription, TranscriptionEngine, TranscriptionServiceError


logger = logging.getLogger("pindar")


def supports_segments(model: str) -> bool:
    """Return True if the model can return ``verbose_json`` with segment timings."""

    return model.strip().lower().startswith("whisper")


class OpenAIEngine(TranscriptionEngine):
    """Transcription engine backed by the OpenAI audio transcriptions API."""

    def __init__(self, model: str, api_key: str, client: Any = None) -> None:
        """Create an OpenAIEngine.

        Args:
            model: Transcription model name (e.g. "gpt-4o-transcribe", "whisper-1").
            api_key: OpenAI API key.
            client: Optional pre-built client (anything exposing
                ``audio.transcriptions.create``).
        """

        self._model = model
        self._api_key = api_key
        self._client = client

    def transcribe(
        self,
        audio_path: Path,
        language: Optional[str] = None,
        prompt: Optional[str] = None,
        temperature: float = 0.0,
        timestamps: bool = False,
    ) -> Transcription:
        """Send the audio file to the API and return its transcript."""

        client = self._get_client()
        params: dict[str, Any] = {
            "model": self._model,
            "response_format": "json",
            "temperature": temperature,
        }
        if timestamps and supports_segments(self._model):
            params["response_format"] = "verbose_json"
            params["timestamp_granularities"] = ["segment"]
        if language:
            params["language"] = language
        if prompt:
            params["prompt"] = prompt

        logger.debug("Transcription request: %s", params)
        with audio_path.open("rb") as audio_file:
            try:
                response = client.audio.transcriptions.create(file=audio_file, **params)
            except openai.OpenAIError as exc:
                raise TranscriptionServiceError(f"Transcription request failed: {exc}") from exc

        return _to_transcription(response)

    def _get_client(self):
        """Lazily construct the underlying OpenAI client."""

        if self._client is None:
            # No retries: every failure is reported to the user as-is.
            self._client = openai.OpenAI(api_key=self._api_key, max_retries=0)
        return self._client


def _to_transcription(response: Any) -> Transcription:
    """Convert an API response object into a Transcription."""

    if isinstance(response, str):
        return Transcription(text=response, raw={"text": response})

    raw = _dump(response)
    text = getattr(response, "text", None)
    if not isinstance(text, str):
        raise TranscriptionServiceError("Transcription response did not contain any text.")

    segments = []
    for segment in getattr(response, "segments", None) or []:
        start = getattr(segment, "start", None)
        end = getattr(segment, "end", None)
        seg_text = getattr(segment, "text", "")
        if start is None or end is None or not isinstance(seg_text, str):
            continue
        segments.append(Segment(start=float(start), end=float(end), text=seg_text.strip()))

    duration = getattr(response, "duration", None)
    return Transcription(
        text=text,
        segments=tuple(segments),
        language=getattr(response, "language", None),
        duration=float(duration) if duration is not None else None,
        raw=raw,
    )


def _dump(response: Any) -> dict[str, Any]:
    """Return the response as a JSON-compatible dict."""

    model_dump = getattr(response, "model_dump", None)
    if callable(model_dump):
        return model_dump(mode="json", exclude_none=True)
    return {"text": getattr(response, "text", "")}
