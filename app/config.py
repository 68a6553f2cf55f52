"""Configuration handling for pindar.

pindar persists a single JSON record holding the OpenAI API key in an
OS-specific location:

- Linux: $XDG_CONFIG_HOME/pindar/config.json (or ~/.config/pindar/config.json)
- macOS: ~/Library/Application Support/pindar/config.json
- Windows: %APPDATA%\\pindar\\config.json
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import os
from pathlib import Path
import platform
import tempfile
from typing import Any, Optional


APP_NAME = "pindar"
CONFIG_FILENAME = "config.json"
DEFAULT_MODEL = "gpt-4o-transcribe"


class ConfigError(RuntimeError):
    """Base error for configuration failures."""


class StorageUnavailableError(ConfigError):
    """Raised when the config location cannot be determined, created or written."""


class CorruptConfigError(ConfigError):
    """Raised when the config file exists but cannot be parsed."""


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Configuration for the transcription engine."""

    backend: str = "openai"
    model: str = DEFAULT_MODEL
    api_key: str = field(default="", repr=False)


@dataclass(frozen=True, slots=True)
class CredentialRecord:
    """The persisted credential record."""

    openai_api_key: str = ""


def get_config_dir() -> Path:
    """Return the per-user configuration directory for the current OS.

    Raises:
        StorageUnavailableError: If the base directory cannot be determined.
    """

    system = platform.system().lower()
    if system == "windows":
        appdata = os.environ.get("APPDATA")
        if not appdata:
            raise StorageUnavailableError("%APPDATA% is not defined.")
        return Path(appdata) / APP_NAME

    try:
        home = Path.home()
    except RuntimeError as exc:
        raise StorageUnavailableError("Could not determine the home directory.") from exc

    if system == "darwin":
        return home / "Library" / "Application Support" / APP_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME", "")
    if xdg and Path(xdg).is_absolute():
        return Path(xdg) / APP_NAME
    return home / ".config" / APP_NAME


def get_config_path() -> Path:
    """Return the default configuration file path for the current OS."""

    return get_config_dir() / CONFIG_FILENAME


class ConfigStore:
    """Reads and writes the credential record.

    Args:
        path: Optional explicit config path. When None, uses the OS default.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path

    def locate(self) -> Path:
        """Return the config file path, creating its directory if needed.

        Raises:
            StorageUnavailableError: If the directory cannot be created.
        """

        config_path = (self._path or get_config_path()).absolute()
        config_dir = config_path.parent
        if config_dir.is_dir():
            return config_path

        try:
            config_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
            os.chmod(config_dir, 0o700)
        except OSError as exc:
            raise StorageUnavailableError(
                f"Failed to create config directory {config_dir}: {exc}"
            ) from exc
        return config_path

    def load(self) -> CredentialRecord:
        """Load the credential record, returning an empty one if the file is missing.

        Raises:
            CorruptConfigError: If the file is not a valid record.
            StorageUnavailableError: If the file exists but cannot be read.
        """

        config_path = self._path or get_config_path()
        if not config_path.exists():
            return CredentialRecord()

        try:
            content = config_path.read_bytes()
        except OSError as exc:
            raise StorageUnavailableError(f"Failed to read {config_path}: {exc}") from exc

        try:
            raw = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise CorruptConfigError(f"Invalid config {config_path}: {exc}") from exc

        return CredentialRecord(openai_api_key=_get_str(raw, "openai_api_key", config_path))

    def save(self, record: CredentialRecord) -> Path:
        """Persist the record with owner-only permissions.

        The record is written to a temporary file next to the target and renamed
        over it, so an interrupted write leaves the previous file intact.

        Returns:
            The path that was written.

        Raises:
            StorageUnavailableError: On any I/O failure.
        """

        config_path = self.locate()
        data = json.dumps({"openai_api_key": record.openai_api_key}, indent=2) + "\n"

        tmp_name = None
        try:
            # mkstemp creates the file with 0600 permissions.
            fd, tmp_name = tempfile.mkstemp(
                prefix=".config-", suffix=".tmp", dir=config_path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, config_path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageUnavailableError(
                f"Failed to write config file {config_path}: {exc}"
            ) from exc
        return config_path


def _get_str(raw: Any, key: str, config_path: Path) -> str:
    """Internal helper to get an optional string field from a JSON object."""

    if not isinstance(raw, dict):
        raise CorruptConfigError(f"Invalid config {config_path}: expected a JSON object.")
    value = raw.get(key)
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    raise CorruptConfigError(f"Invalid config {config_path}: {key} must be a string.")
