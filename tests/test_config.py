"""Tests for fileexplorer.core.config."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from fileexplorer.core.config import (
    ConfigError,
    ConsoleConfig,
    ExplorerConfig,
    LogConfig,
    RelaunchConfig,
    load_config,
)


class TestDefaults:
    def test_default_config(self):
        config = ExplorerConfig()
        assert config.logging.level == "WARNING"
        assert config.logging.format == "console"
        assert config.logging.file_path is None
        assert config.console.elevate_command == ["sudo", "-v"]
        assert config.console.privileged_prefix == ["sudo", "-n"]
        assert config.console.command_timeout_seconds == 30.0
        assert config.relaunch.ask_user is True
        assert config.relaunch.quiet is False
        assert config.mounts_path == Path("/proc/mounts")
        assert config.free_space_warning_percent == 95


class TestValidation:
    def test_level_validation(self):
        with pytest.raises(ValidationError):
            LogConfig(level="VERBOSE")  # type: ignore[arg-type]

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            ConsoleConfig(command_timeout_seconds=0)

    def test_empty_elevate_command_rejected(self):
        with pytest.raises(ValidationError, match="must name an executable"):
            ConsoleConfig(elevate_command=[])

    @pytest.mark.parametrize("percent", [-1, 101])
    def test_warning_percent_range(self, percent: int):
        with pytest.raises(ValidationError):
            ExplorerConfig(free_space_warning_percent=percent)

    def test_unknown_keys_rejected(self):
        with pytest.raises(ValidationError):
            RelaunchConfig(ask=False)  # type: ignore[call-arg]


class TestYamlLoading:
    def test_from_yaml_string(self):
        config = ExplorerConfig.from_yaml_string(
            "logging:\n"
            "  level: DEBUG\n"
            "relaunch:\n"
            "  quiet: true\n"
            "console:\n"
            "  privileged_prefix: [doas]\n"
            "mounts_path: /etc/fstab\n"
        )
        assert config.logging.level == "DEBUG"
        assert config.relaunch.quiet is True
        assert config.console.privileged_prefix == ["doas"]
        assert config.mounts_path == Path("/etc/fstab")

    def test_empty_document_gives_defaults(self):
        assert ExplorerConfig.from_yaml_string("") == ExplorerConfig()

    def test_invalid_yaml(self):
        with pytest.raises(ConfigError, match="Invalid YAML"):
            ExplorerConfig.from_yaml_string("logging: [unclosed")

    def test_non_mapping(self):
        with pytest.raises(ConfigError, match="mapping"):
            ExplorerConfig.from_yaml_string("- a\n- b\n")

    def test_validation_error_wrapped(self):
        with pytest.raises(ConfigError):
            ExplorerConfig.from_yaml_string("relaunch:\n  quiet: maybe\n")

    def test_from_yaml_file(self, config_file: Path, mounts_file: Path):
        config = ExplorerConfig.from_yaml(config_file)
        assert config.mounts_path == mounts_file
        assert config.console.elevate_command == ["true"]

    def test_from_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="Cannot read"):
            ExplorerConfig.from_yaml(tmp_path / "missing.yaml")


class TestLoadConfig:
    def test_explicit_path(self, config_file: Path):
        assert load_config(config_file).console.privileged_prefix == ["env"]

    def test_explicit_path_must_exist(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "missing.yaml")

    def test_defaults_without_file(self, tmp_path: Path):
        with patch("fileexplorer.core.config.DEFAULT_CONFIG_PATH", tmp_path / "none.yaml"):
            assert load_config() == ExplorerConfig()

    def test_default_path_used(self, config_file: Path):
        with patch("fileexplorer.core.config.DEFAULT_CONFIG_PATH", config_file):
            assert load_config().console.elevate_command == ["true"]
