"""Transcription engine factory and exports."""

from __future__ import annotations

from app.config import EngineConfig

from .base import EngineError, Segment, Transcription, TranscriptionEngine, TranscriptionServiceError
from .openai_api import OpenAIEngine


def create_engine(config: EngineConfig) -> TranscriptionEngine:
    """Create a transcription engine from configuration.

    This factory allows adding future engines without changing CLI logic.
    """

    backend = (config.backend or "").strip().lower()
    if backend == "openai":
        return OpenAIEngine(model=config.model, api_key=config.api_key)
    raise ValueError(f"Unsupported engine backend: {config.backend!r}")


__all__ = [
    "EngineError",
    "OpenAIEngine",
    "Segment",
    "Transcription",
    "TranscriptionEngine",
    "TranscriptionServiceError",
    "create_engine",
]
