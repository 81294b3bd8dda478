"""Tests for fileexplorer CLI commands."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from fileexplorer import __version__
from fileexplorer.cli import app
from fileexplorer.cli.helpers import EXIT_CANCELLED, EXIT_FAILED, EXIT_OK, OutcomeRecorder
from fileexplorer.console.shell import ShellConsole
from fileexplorer.mounts import DiskUsage
from fileexplorer.relaunch.listener import RelaunchOutcome

runner = CliRunner()


def _completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> MagicMock:
    completed = MagicMock()
    completed.returncode = returncode
    completed.stdout = stdout
    completed.stderr = stderr
    return completed


@pytest.fixture
def not_root() -> Generator[None, None, None]:
    with patch.object(ShellConsole, "_is_root", return_value=False):
        yield


class FakeSubprocess:
    """Stands in for subprocess.run: ``mount`` is denied until run through ``env``."""

    def __init__(self) -> None:
        self.argvs: list[list[str]] = []

    def __call__(self, argv: list[str], **kwargs: Any) -> MagicMock:
        self.argvs.append(list(argv))
        if argv == ["true"]:
            return _completed(0)
        if argv[0] == "env":
            return _completed(0, stdout="done\n")
        return _completed(32, stderr="mount: only root can use \"--options\" option")


class TestVersionCommand:
    def test_version_shows_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"fileexplorer v{__version__}" in result.output


class TestConfigOption:
    def test_invalid_config(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.yaml"
        bad.write_text("relaunch:\n  quiet: maybe\n")
        result = runner.invoke(app, ["--config", str(bad), "mounts"])
        assert result.exit_code == 2
        assert "Configuration error" in result.output

    def test_missing_config(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["--config", str(tmp_path / "nope.yaml"), "mounts"])
        assert result.exit_code == 2


class TestLogFormatOption:
    def test_unknown_format_rejected(self, config_file: Path) -> None:
        result = runner.invoke(
            app, ["--log-format", "xml", "--config", str(config_file), "mounts"]
        )
        assert result.exit_code == 2

    def test_format_is_case_insensitive(self, config_file: Path) -> None:
        result = runner.invoke(
            app, ["--log-format", "JSON", "--config", str(config_file), "mounts"]
        )
        assert result.exit_code == 0
        assert "/mnt/data" in result.output


class TestMountsCommand:
    def test_lists_mount_points(self, config_file: Path) -> None:
        result = runner.invoke(app, ["--config", str(config_file), "mounts"])
        assert result.exit_code == 0
        assert "/mnt/data" in result.output
        assert "/proc" in result.output
        assert "ext4" in result.output

    def test_unreadable_mount_table(self, tmp_path: Path) -> None:
        config = tmp_path / "config.yaml"
        config.write_text(f"mounts_path: {tmp_path / 'missing'}\n")
        result = runner.invoke(app, ["--config", str(config), "mounts"])
        assert result.exit_code == EXIT_FAILED
        assert "Cannot read mount table" in result.output


class TestInfoCommand:
    def test_shows_mount_for_path(self, config_file: Path) -> None:
        result = runner.invoke(app, ["--config", str(config_file), "info", "/mnt/data/photos"])
        assert result.exit_code == 0
        assert "Filesystem info" in result.output
        assert "/dev/sdb1" in result.output
        assert "ro,relatime" in result.output

    def test_no_mount_point(self, tmp_path: Path) -> None:
        mounts = tmp_path / "mounts"
        mounts.write_text("/dev/sdb1 /mnt/data ext4 rw 0 0\n")
        config = tmp_path / "config.yaml"
        config.write_text(f"mounts_path: {mounts}\n")

        result = runner.invoke(app, ["--config", str(config), "info", "/srv/x"])
        assert result.exit_code == EXIT_FAILED
        assert "No mount point found" in result.output

    def test_low_space_is_flagged(self, config_file: Path) -> None:
        usage = DiskUsage(total=1000, used=970, free=30)
        with patch.object(DiskUsage, "for_path", return_value=usage):
            result = runner.invoke(app, ["--config", str(config_file), "info", "/mnt/data"])
        assert result.exit_code == 0
        assert "low on space" in result.output

    def test_warning_level_from_config(self, tmp_path: Path, mounts_file: Path) -> None:
        config = tmp_path / "config.yaml"
        config.write_text(f"mounts_path: {mounts_file}\nfree_space_warning_percent: 99\n")
        usage = DiskUsage(total=1000, used=970, free=30)
        with patch.object(DiskUsage, "for_path", return_value=usage):
            result = runner.invoke(app, ["--config", str(config), "info", "/mnt/data"])
        assert result.exit_code == 0
        assert "low on space" not in result.output


class TestRemountCommand:
    def test_pseudo_filesystem(self, config_file: Path) -> None:
        result = runner.invoke(app, ["--config", str(config_file), "remount", "/proc"])
        assert result.exit_code == EXIT_FAILED
        assert "cannot be remounted" in result.output

    def test_direct_success(self, config_file: Path, not_root: None) -> None:
        with patch(
            "fileexplorer.console.shell.subprocess.run", return_value=_completed(0)
        ) as run:
            result = runner.invoke(
                app, ["--config", str(config_file), "remount", "/mnt/data", "--rw"]
            )

        assert result.exit_code == EXIT_OK
        assert "remounted read-write" in result.output
        assert run.call_args.args[0] == ["mount", "-o", "remount,rw", "/mnt/data"]

    def test_relaunch_with_yes(self, config_file: Path, not_root: None) -> None:
        fake = FakeSubprocess()
        with patch("fileexplorer.console.shell.subprocess.run", side_effect=fake):
            result = runner.invoke(
                app, ["--config", str(config_file), "remount", "/mnt/data", "--yes"]
            )

        assert result.exit_code == EXIT_OK
        assert "remounted read-write" in result.output
        assert fake.argvs == [
            ["mount", "-o", "remount,rw", "/mnt/data"],
            ["true"],
            ["env", "mount", "-o", "remount,rw", "/mnt/data"],
        ]

    def test_relaunch_declined(self, config_file: Path, not_root: None) -> None:
        fake = FakeSubprocess()
        with (
            patch("fileexplorer.console.shell.subprocess.run", side_effect=fake),
            patch("fileexplorer.ui.presenter.Confirm.ask", return_value=False),
        ):
            result = runner.invoke(
                app, ["--config", str(config_file), "remount", "/mnt/data", "--ro"]
            )

        assert result.exit_code == EXIT_CANCELLED
        assert fake.argvs == [["mount", "-o", "remount,ro", "/mnt/data"]]

    def test_no_ask_reports_failure(self, config_file: Path, not_root: None) -> None:
        fake = FakeSubprocess()
        with patch("fileexplorer.console.shell.subprocess.run", side_effect=fake):
            result = runner.invoke(
                app, ["--config", str(config_file), "remount", "/mnt/data", "--no-ask"]
            )

        assert result.exit_code == EXIT_FAILED
        assert "Insufficient permissions" in result.output
        assert len(fake.argvs) == 1

    def test_quiet_hides_message(self, config_file: Path, not_root: None) -> None:
        fake = FakeSubprocess()
        with patch("fileexplorer.console.shell.subprocess.run", side_effect=fake):
            result = runner.invoke(
                app,
                ["--config", str(config_file), "remount", "/mnt/data", "--no-ask", "--quiet"],
            )

        assert result.exit_code == EXIT_FAILED
        assert "Insufficient permissions to complete" not in result.output


class TestRunCommand:
    def test_success_prints_output(self, config_file: Path, not_root: None) -> None:
        with patch(
            "fileexplorer.console.shell.subprocess.run",
            return_value=_completed(0, stdout="hello\n"),
        ):
            result = runner.invoke(app, ["--config", str(config_file), "run", "--", "echo", "hello"])

        assert result.exit_code == EXIT_OK
        assert "hello" in result.output

    def test_relaunch_prints_rerun_output(self, config_file: Path, not_root: None) -> None:
        fake = FakeSubprocess()
        with patch("fileexplorer.console.shell.subprocess.run", side_effect=fake):
            result = runner.invoke(
                app, ["--config", str(config_file), "run", "--yes", "--", "mount", "-a"]
            )

        assert result.exit_code == EXIT_OK
        assert "done" in result.output
        assert fake.argvs[-1] == ["env", "mount", "-a"]

    def test_missing_file_is_a_dialog(self, config_file: Path, not_root: None) -> None:
        with patch(
            "fileexplorer.console.shell.subprocess.run",
            return_value=_completed(2, stderr="ls: cannot access '/x': No such file or directory"),
        ):
            result = runner.invoke(app, ["--config", str(config_file), "run", "--", "ls", "/x"])

        assert result.exit_code == EXIT_FAILED
        assert "The file or directory was not found." in result.output

    def test_binary_not_found(self, config_file: Path, not_root: None) -> None:
        with patch(
            "fileexplorer.console.shell.subprocess.run",
            side_effect=FileNotFoundError("nope"),
        ):
            result = runner.invoke(app, ["--config", str(config_file), "run", "--", "nope"])

        assert result.exit_code == EXIT_FAILED
        assert "not available" in result.output


class TestOutcomeRecorder:
    def test_exit_codes(self) -> None:
        recorder = OutcomeRecorder()
        assert recorder.exit_code() == EXIT_FAILED

        recorder.on_failed()
        assert recorder.exit_code() == EXIT_FAILED

        recorder.on_cancelled()
        assert recorder.final == RelaunchOutcome.CANCELLED
        assert recorder.exit_code() == EXIT_CANCELLED

    def test_success_after_failure(self) -> None:
        recorder = OutcomeRecorder()
        recorder.on_failed()
        recorder.on_success()
        assert recorder.outcomes == [RelaunchOutcome.FAILED, RelaunchOutcome.SUCCESS]
        assert recorder.exit_code() == EXIT_OK

    def test_abandoned_is_failure(self) -> None:
        recorder = OutcomeRecorder()
        recorder.on_abandoned()
        assert recorder.exit_code() == EXIT_FAILED
