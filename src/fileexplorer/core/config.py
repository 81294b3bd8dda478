"""Configuration models for fileexplorer.

Defines Pydantic v2 models loaded from a YAML file: logging, the shell
console used to run commands, and relaunch defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

DEFAULT_CONFIG_PATH = Path.home() / ".fileexplorer" / "config.yaml"


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or validated."""


class LogConfig(BaseModel):
    """Logging settings, passed to configure_logging()."""

    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Minimum log level to capture.",
    )
    format: Literal["json", "console", "both"] = Field(
        default="console",
        description="Log output format. 'both' requires file_path.",
    )
    file_path: Path | None = Field(
        default=None,
        description="Optional log file (rotated).",
    )


class ConsoleConfig(BaseModel):
    """Shell console settings.

    The elevation command is run once when the user agrees to relaunch with
    privileges; afterwards every command is prefixed with the privileged
    prefix. Both must work without a terminal for the prefix case, hence the
    default ``sudo -n``.
    """

    model_config = ConfigDict(extra="forbid")

    elevate_command: list[str] = Field(
        default_factory=lambda: ["sudo", "-v"],
        description="Command that obtains privileges; exit status 0 means success.",
    )
    privileged_prefix: list[str] = Field(
        default_factory=lambda: ["sudo", "-n"],
        description="Prefix prepended to commands once the console is privileged.",
    )
    command_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Default timeout for a single command.",
    )
    elevate_timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        description="Timeout for the elevation command (it may prompt for a password).",
    )

    @field_validator("elevate_command", "privileged_prefix")
    @classmethod
    def _non_empty(cls, value: list[str]) -> list[str]:
        if not value or not value[0]:
            raise ValueError("command must name an executable")
        return value


class RelaunchConfig(BaseModel):
    """Defaults for how failures are handled."""

    model_config = ConfigDict(extra="forbid")

    ask_user: bool = Field(
        default=True,
        description="Offer a privileged relaunch for failures that support it.",
    )
    quiet: bool = Field(
        default=False,
        description="Suppress toasts and dialogs (failures are still logged).",
    )


class ExplorerConfig(BaseModel):
    """Top-level fileexplorer configuration."""

    model_config = ConfigDict(extra="forbid")

    logging: LogConfig = Field(default_factory=LogConfig)
    console: ConsoleConfig = Field(default_factory=ConsoleConfig)
    relaunch: RelaunchConfig = Field(default_factory=RelaunchConfig)
    mounts_path: Path = Field(
        default=Path("/proc/mounts"),
        description="Mount table to read mount points from.",
    )
    free_space_warning_percent: int = Field(
        default=95,
        ge=0,
        le=100,
        description="Disk usage (percent used) at which free space is shown as low.",
    )

    @classmethod
    def from_yaml(cls, path: Path) -> ExplorerConfig:
        """Load configuration from a YAML file.

        Raises:
            ConfigError: If the file cannot be read, parsed, or validated.
        """
        try:
            with open(path, encoding="utf-8") as f:
                text = f.read()
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        return cls.from_yaml_string(text)

    @classmethod
    def from_yaml_string(cls, yaml_str: str) -> ExplorerConfig:
        """Load configuration from a YAML string. An empty document gives defaults."""
        try:
            data = yaml.safe_load(yaml_str) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a mapping")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(str(e)) from e


def load_config(path: Path | None = None) -> ExplorerConfig:
    """Load configuration, falling back to defaults when no file exists.

    An explicitly given path must exist; the default path is optional.
    """
    if path is not None:
        return ExplorerConfig.from_yaml(path)
    if DEFAULT_CONFIG_PATH.exists():
        return ExplorerConfig.from_yaml(DEFAULT_CONFIG_PATH)
    return ExplorerConfig()
