"""OpenAI API key resolution.

The key is taken from the first non-blank source, in order:

1. the ``--api-key`` argument
2. the ``OPENAI_API_KEY`` environment variable
3. the persisted config record
4. an interactive prompt, whose answer is saved to the config record
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import sys
from typing import Callable, Mapping, Optional

import typer

from .config import ConfigError, ConfigStore, CredentialRecord


API_KEY_ENV_VAR = "OPENAI_API_KEY"
DISCLOSURE = "No OpenAI API key found in arguments, environment, or config file."
PROMPT = "Please enter your OpenAI API key"

logger = logging.getLogger("pindar")

SecretReader = Callable[[str], str]


class CredentialError(RuntimeError):
    """Base error for API key resolution failures."""


class EmptySecretError(CredentialError):
    """Raised when the interactively entered key is blank."""


@dataclass(frozen=True, slots=True)
class ResolvedApiKey:
    """The API key for this run and where it came from."""

    value: str
    source: str
    saved_to: Optional[Path] = None
    save_error: Optional[str] = None

    def __repr__(self) -> str:
        return f"ResolvedApiKey(source={self.source!r}, saved_to={self.saved_to!r})"


def read_masked(prompt: str) -> str:
    """Read a line from the terminal without echoing it."""

    return typer.prompt(prompt, hide_input=True, default="", show_default=False, err=True)


def read_line(prompt: str) -> str:
    """Read a plain line from stdin (used when stdin is not a terminal)."""

    typer.echo(f"{prompt}: ", nl=False, err=True)
    return sys.stdin.readline()


def select_secret_reader() -> SecretReader:
    """Pick the masked reader for terminals and the plain reader otherwise."""

    stdin = sys.stdin
    if stdin is not None and stdin.isatty():
        return _masked_with_fallback
    return read_line


def _masked_with_fallback(prompt: str) -> str:
    try:
        return read_masked(prompt)
    except OSError as exc:
        logger.debug("Masked input unavailable (%s); falling back to plain input.", exc)
        typer.echo("Falling back to regular input.", err=True)
        return read_line(prompt)


def prompt_for_api_key(read_secret: Optional[SecretReader] = None) -> str:
    """Ask the user for an API key.

    Raises:
        EmptySecretError: If the trimmed answer is empty.
    """

    typer.echo(DISCLOSURE, err=True)
    reader = read_secret or select_secret_reader()
    api_key = (reader(PROMPT) or "").strip()
    if not api_key:
        raise EmptySecretError("API key cannot be empty.")
    return api_key


def resolve_api_key(
    explicit: Optional[str],
    env: Mapping[str, str],
    store: ConfigStore,
    read_secret: Optional[SecretReader] = None,
) -> ResolvedApiKey:
    """Resolve the API key for this run.

    Args:
        explicit: Value passed on the command line, if any.
        env: Environment mapping to look up ``OPENAI_API_KEY`` in.
        store: Config store used for the persisted record.
        read_secret: Optional reader for the interactive prompt. When None, one
            is chosen by probing whether stdin is a terminal.

    Raises:
        EmptySecretError: If the prompt answer is blank.
        ConfigError: If the persisted record cannot be loaded.
    """

    if explicit and explicit.strip():
        return ResolvedApiKey(value=explicit.strip(), source="argument")

    env_value = env.get(API_KEY_ENV_VAR, "")
    if env_value and env_value.strip():
        return ResolvedApiKey(value=env_value.strip(), source="environment")

    record = store.load()
    if record.openai_api_key.strip():
        return ResolvedApiKey(value=record.openai_api_key.strip(), source="config")

    api_key = prompt_for_api_key(read_secret)
    try:
        saved_to = store.save(CredentialRecord(openai_api_key=api_key))
    except ConfigError as exc:
        logger.warning("Failed to save API key to config file: %s", exc)
        return ResolvedApiKey(value=api_key, source="prompt", save_error=str(exc))
    return ResolvedApiKey(value=api_key, source="prompt", saved_to=saved_to)
