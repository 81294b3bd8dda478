"""Pytest fixtures for fileexplorer tests."""

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog

from fileexplorer.relaunch.handler import FailureHandler
from fileexplorer.ui.executor import UiExecutor
from tests.helpers import FakeConsole, FakePresenter


@pytest.fixture(autouse=True)
def reset_logging_state() -> Generator[None, None, None]:
    """Reset logging and CLI state before and after each test.

    This ensures test isolation for logging configuration.
    """
    from fileexplorer.cli import helpers as cli_helpers

    cli_helpers.reset_state()

    # Reset structlog to default state
    structlog.reset_defaults()

    # Clear all handlers from root logger
    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers[:]
    original_level = root_logger.level
    for handler in original_handlers:
        root_logger.removeHandler(handler)

    yield

    cli_helpers.reset_state()
    structlog.reset_defaults()

    # Restore original handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in original_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(original_level)


@pytest.fixture
def calls() -> list[str]:
    """Shared call log for test doubles."""
    return []


@pytest.fixture
def ui() -> Generator[UiExecutor, None, None]:
    """A UI executor, drained and shut down after the test."""
    executor = UiExecutor(name="test-ui")
    yield executor
    if not executor.closed:
        executor.join(timeout=5)
        executor.shutdown()


@pytest.fixture
def fake_console(calls: list[str]) -> FakeConsole:
    return FakeConsole(calls)


@pytest.fixture
def presenter() -> FakePresenter:
    """Presenter that answers "Yes" to every question."""
    return FakePresenter(auto_answer=True)


@pytest.fixture
def handler(fake_console: FakeConsole, ui: UiExecutor, presenter: FakePresenter) -> FailureHandler:
    return FailureHandler(fake_console, ui, presenter)


@pytest.fixture
def mounts_file(tmp_path: Path) -> Path:
    """A mount table with a real filesystem, a pseudo filesystem, and a nested mount."""
    path = tmp_path / "mounts"
    path.write_text(
        "/dev/sda1 / ext4 rw,relatime 0 0\n"
        "proc /proc proc rw,nosuid,nodev,noexec 0 0\n"
        "/dev/sdb1 /mnt/data ext4 ro,relatime 0 2\n"
        "/dev/sdc1 /mnt/my\\040disk vfat rw 0 0\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def config_file(tmp_path: Path, mounts_file: Path) -> Path:
    """A config file pointing the CLI at ``mounts_file``."""
    path = tmp_path / "config.yaml"
    path.write_text(
        f"mounts_path: {mounts_file}\n"
        "console:\n"
        "  elevate_command: [\"true\"]\n"
        "  privileged_prefix: [\"env\"]\n",
        encoding="utf-8",
    )
    return path
