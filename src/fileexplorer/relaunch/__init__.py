"""Privileged relaunch of failed commands.

Public exports:
- FailureHandler: entry point, ``handle(failure, quiet, ask_user, listener)``
- RelaunchCoordinator / RelaunchSession / RelaunchState: the retry state machine
- OutcomeReporter: audit log plus toast/dialog presentation
- RelaunchListener / AbandonAwareListener / RelaunchOutcome: outcome callbacks
"""

from fileexplorer.relaunch.coordinator import RelaunchCoordinator, RelaunchSession, RelaunchState
from fileexplorer.relaunch.handler import FailureHandler
from fileexplorer.relaunch.listener import (
    AbandonAwareListener,
    RelaunchListener,
    RelaunchOutcome,
    notify,
)
from fileexplorer.relaunch.reporter import OutcomeReporter

__all__ = [
    "AbandonAwareListener",
    "FailureHandler",
    "OutcomeReporter",
    "RelaunchCoordinator",
    "RelaunchListener",
    "RelaunchOutcome",
    "RelaunchSession",
    "RelaunchState",
    "notify",
]
