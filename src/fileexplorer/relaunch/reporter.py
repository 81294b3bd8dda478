"""Outcome reporter: audit every failure, then surface it to the user.

The audit record is written on the calling thread, before anything is
scheduled, and regardless of quiet mode. Presentation always happens on
the UI thread.
"""

from __future__ import annotations

from fileexplorer.core.errors.codes import PresentationMode
from fileexplorer.core.errors.models import Classification
from fileexplorer.core.logging import get_logger
from fileexplorer.core.messages import get_message
from fileexplorer.ui.executor import UiExecutor
from fileexplorer.ui.presenter import Presenter

_logger = get_logger("relaunch.reporter")


class OutcomeReporter:
    """Surfaces classified failures as toasts or dialogs."""

    def __init__(self, ui: UiExecutor, presenter: Presenter) -> None:
        self._ui = ui
        self._presenter = presenter

    def report(
        self,
        failure: BaseException,
        classification: Classification,
        quiet: bool = False,
    ) -> None:
        """Audit a failure and, unless quiet, present its message.

        Args:
            failure: The raw failure, recorded in the audit log.
            classification: Kind, presentation mode, and message id.
            quiet: Suppress the user-visible message (audit still happens).
        """
        _logger.error(
            "failure_detected",
            kind=classification.kind.value,
            message_id=classification.message_id.value,
            failure_type=type(failure).__name__,
            quiet=quiet,
            exc_info=failure,
        )
        if quiet:
            return
        self._ui.run_on_ui_thread(
            self._present, classification.mode, get_message(classification.message_id)
        )

    def _present(self, mode: PresentationMode, message: str) -> None:
        try:
            if mode == PresentationMode.TOAST:
                self._presenter.show_toast(message)
            else:
                self._presenter.show_dialog(message)
        except Exception:
            _logger.exception("reporter.presentation_failed", mode=mode.value)
