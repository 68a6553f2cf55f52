"""CLI commands for pindar."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import typer

from .config import DEFAULT_MODEL, ConfigError, ConfigStore, EngineConfig
from .credentials import CredentialError, resolve_api_key
from .logging import configure_logging
from .pipeline import TranscribeRequest, run_transcription
from engine import EngineError, create_engine
from media.audio import MediaError
from output.formats import OutputFormat


def create_cli_app() -> typer.Typer:
    """Create the Typer CLI app (kept as a factory to avoid global state)."""

    app = typer.Typer(
        add_completion=False,
        help="Transcribe audio files with the OpenAI speech-to-text API.",
        no_args_is_help=True,
    )

    @app.command("transcribe")
    def transcribe(
        input_file: Path = typer.Argument(
            ...,
            exists=True,
            readable=True,
            dir_okay=False,
            help="Path to the audio file to transcribe.",
        ),
        model: str = typer.Option(
            DEFAULT_MODEL,
            "--model",
            help="OpenAI model to use for transcription.",
        ),
        language: Optional[str] = typer.Option(
            None,
            "--language",
            help="Language of the audio file (e.g. en).",
        ),
        prompt: Optional[str] = typer.Option(
            None,
            "--prompt",
            help="Text to guide the model's style or continue a previous audio segment.",
        ),
        output_format: OutputFormat = typer.Option(
            OutputFormat.TEXT,
            "--format",
            case_sensitive=False,
            help="Output format.",
        ),
        output_dir: Optional[Path] = typer.Option(
            None,
            "--output-dir",
            "-o",
            file_okay=False,
            dir_okay=True,
            help="Directory to save the transcription to (prints to stdout when omitted).",
        ),
        output_ext: Optional[str] = typer.Option(
            None,
            "--output-ext",
            help="Extension for the output file (defaults to one matching --format).",
        ),
        api_key: Optional[str] = typer.Option(
            None,
            "--api-key",
            help="OpenAI API key (overrides OPENAI_API_KEY and the saved key).",
        ),
        temperature: float = typer.Option(
            0.0,
            "--temperature",
            min=0.0,
            max=1.0,
            help="Sampling temperature between 0 and 1 (higher is more random).",
        ),
        verbose: bool = typer.Option(
            False,
            "--verbose",
            help="Enable debug logging.",
        ),
    ) -> None:
        """Transcribe a single audio file to text or subtitles."""

        configure_logging(verbose=verbose)
        logger = logging.getLogger("pindar")

        try:
            resolved = resolve_api_key(api_key, os.environ, ConfigStore())
        except ConfigError as exc:
            typer.secho(f"Config error: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=2) from exc
        except CredentialError as exc:
            typer.secho(f"Error getting API key: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=2) from exc

        if resolved.saved_to is not None:
            typer.echo(f"API key saved to: {resolved.saved_to}", err=True)
        elif resolved.save_error is not None:
            typer.secho(
                "You may need to provide the API key again next time.",
                fg=typer.colors.YELLOW,
                err=True,
            )
        logger.debug("Using API key from %s", resolved.source)

        request = TranscribeRequest(
            input_path=input_file,
            model=model,
            language=language,
            prompt=prompt,
            output_format=output_format.value,
            output_dir=output_dir,
            output_ext=output_ext,
            temperature=temperature,
        )

        try:
            engine = create_engine(EngineConfig(model=model, api_key=resolved.value))
            result = run_transcription(request, engine)
        except MediaError as exc:
            typer.secho(f"Media error: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=2) from exc
        except EngineError as exc:
            typer.secho(f"Error during transcription: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1) from exc
        except OSError as exc:
            typer.secho(f"I/O error: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1) from exc

        if result.output_path is not None:
            typer.echo(f"Transcription saved to: {result.output_path}")
        else:
            typer.echo(result.content)

    return app
