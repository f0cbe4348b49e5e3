"""Configuration management using Pydantic settings with optional file persistence."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# --- Paths ---

APP_NAME = "recipe-export"


def get_config_dir() -> Path:
    """Get the configuration directory (e.g. ~/.config/recipe-export)."""
    if os.name == "nt":
        base = Path(os.environ.get("APPDATA", Path.home() / ".config")).expanduser()
    else:
        base = Path("~/.config").expanduser()

    return base / APP_NAME


def get_default_storage_dir() -> Path:
    """Get the default directory for saved recipes."""
    return get_config_dir() / "storage"


def get_default_download_dir() -> Path:
    """Get the default directory exports are saved into."""
    base = Path("~/Downloads").expanduser()
    if not base.exists():
        base = Path.home()
    return base


CONFIG_FILE = get_config_dir() / "config.json"


def load_config_file(path: Path = CONFIG_FILE) -> dict[str, Any]:
    """Load settings from the JSON config file if it exists."""
    if not path.exists():
        return {}

    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning(f"Ignoring invalid config file {path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring config file {path}: expected a JSON object")
        return {}
    return data


def save_config_file(config_data: dict[str, Any], path: Path = CONFIG_FILE) -> None:
    """Save settings to the JSON config file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config_data, indent=2), encoding="utf-8")


StorageBackend = Literal["file", "memory"]


class StorageSettings(BaseSettings):
    """Saved-recipe storage configuration."""

    model_config = SettingsConfigDict(env_prefix="RECIPE_STORAGE_")

    backend: StorageBackend = Field(default="file", description="Storage backend: file or memory")
    directory: Optional[str] = Field(default=None, description="Directory for the file backend (default: ~/.config/recipe-export/storage)")


class ExportSettings(BaseSettings):
    """Export configuration."""

    model_config = SettingsConfigDict(env_prefix="RECIPE_EXPORT_")

    directory: Optional[str] = Field(default=None, description="Directory exports are saved into (default: ~/Downloads)")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="RECIPE_LOG_")

    level: str = Field(default="WARNING")
    json_output: bool = Field(default=True, description="Render JSON log lines instead of console output")


class AppSettings(BaseSettings):
    """Root application settings.

    The config file is the base. Environment variables fill in any section the file does not set.
    """

    model_config = SettingsConfigDict(env_prefix="RECIPE_", extra="ignore")

    storage: StorageSettings = Field(default_factory=StorageSettings)
    export: ExportSettings = Field(default_factory=ExportSettings)
    log: LoggingSettings = Field(default_factory=LoggingSettings)

    def save(self, path: Path = CONFIG_FILE) -> Path:
        """Save current configuration to file."""
        save_config_file(self.model_dump(mode="json", exclude_none=True), path)
        return path

    def get_storage_dir(self) -> Path:
        """Get the storage directory."""
        if self.storage.directory:
            return Path(self.storage.directory).expanduser()
        return get_default_storage_dir()

    def get_download_dir(self) -> Path:
        """Get the export directory, creating if needed."""
        if self.export.directory:
            path = Path(self.export.directory).expanduser()
        else:
            path = get_default_download_dir()
        path.mkdir(parents=True, exist_ok=True)
        return path


def _load_settings() -> AppSettings:
    """Load settings with file config as base, env vars overlay."""
    file_data = load_config_file()
    return AppSettings(**file_data)


settings = _load_settings()
