"""Relaunch listener protocol and outcome notification helpers."""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable

from fileexplorer.core.logging import get_logger

_logger = get_logger("relaunch.listener")


class RelaunchOutcome(str, Enum):
    """Terminal notifications a relaunch can deliver."""

    SUCCESS = "success"
    CANCELLED = "cancelled"
    FAILED = "failed"
    ABANDONED = "abandoned"


@runtime_checkable
class RelaunchListener(Protocol):
    """Receives the outcome of a relaunch.

    ``on_failed`` is first delivered when the confirmation prompt is shown,
    meaning "the original attempt failed"; the relaunch then reports its own
    outcome with one more callback.
    """

    def on_success(self) -> None:
        """All commands were re-run successfully."""
        ...

    def on_cancelled(self) -> None:
        """The user declined the relaunch."""
        ...

    def on_failed(self) -> None:
        """The operation failed."""
        ...


@runtime_checkable
class AbandonAwareListener(RelaunchListener, Protocol):
    """A listener that also wants to know when a pending prompt is torn down."""

    def on_abandoned(self) -> None:
        """The prompt was dismissed without an answer (UI teardown)."""
        ...


def notify(listener: RelaunchListener | None, outcome: RelaunchOutcome) -> None:
    """Deliver an outcome to a listener, if any.

    A listener that raises is logged; the relaunch still terminates.
    """
    if listener is None:
        return
    if outcome == RelaunchOutcome.ABANDONED:
        callback = getattr(listener, "on_abandoned", None)
        if callback is None:
            return
    else:
        callback = getattr(listener, f"on_{outcome.value}")
    try:
        callback()
    except Exception:
        _logger.exception("relaunch.listener_failed", outcome=outcome.value)
