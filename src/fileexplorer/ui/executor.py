"""Single-threaded executor standing in for the UI-owning thread.

Everything user-facing (toasts, dialogs, prompts) and every relaunch step
is submitted here, whichever thread detected the failure. Work runs in
submission order on one worker thread.
"""

from __future__ import annotations

import contextvars
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, TypeVar

from fileexplorer.core.logging import get_logger

_logger = get_logger("ui.executor")

T = TypeVar("T")


class UiExecutorShutdownError(RuntimeError):
    """Raised when work is submitted after the UI executor was shut down."""


class UiExecutor:
    """Runs closures on a dedicated UI thread.

    Example:
        ui = UiExecutor()
        ui.run_on_ui_thread(presenter.show_toast, "Done")
        ui.join()
        ui.shutdown()
    """

    def __init__(self, name: str = "ui") -> None:
        self._name = name
        self._executor = ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix=name,
            initializer=self._remember_thread,
        )
        self._thread_id: int | None = None
        self._lock = threading.Lock()
        self._pending = 0
        self._closed = False

    def _remember_thread(self) -> None:
        self._thread_id = threading.get_ident()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        """Number of submitted closures that have not finished yet."""
        with self._lock:
            return self._pending

    def is_ui_thread(self) -> bool:
        """Whether the caller is running on the UI thread."""
        return self._thread_id is not None and threading.get_ident() == self._thread_id

    def run_on_ui_thread(
        self, fn: Callable[..., T], *args: Any, **kwargs: Any
    ) -> Future[T]:
        """Schedule ``fn(*args, **kwargs)`` on the UI thread.

        ``fn`` runs in a copy of the caller's context, so an OperationContext
        set with ``with_context`` follows the work onto the UI thread.
        Exceptions raised by ``fn`` are logged and stored on the returned
        future; they never kill the UI thread.

        Raises:
            UiExecutorShutdownError: If the executor was shut down.
        """
        with self._lock:
            if self._closed:
                raise UiExecutorShutdownError(f"UI executor '{self._name}' is shut down")
            self._pending += 1
        ctx = contextvars.copy_context()

        def _run() -> T:
            try:
                return ctx.run(fn, *args, **kwargs)
            except Exception:
                _logger.exception("ui.task_failed", task=getattr(fn, "__qualname__", repr(fn)))
                raise
            finally:
                with self._lock:
                    self._pending -= 1

        try:
            return self._executor.submit(_run)
        except RuntimeError as e:
            with self._lock:
                self._pending -= 1
            raise UiExecutorShutdownError(str(e)) from e

    def join(self, timeout: float | None = None) -> bool:
        """Wait until no scheduled work remains.

        Work scheduled by running work is waited for too. Must not be called
        from the UI thread.

        Returns:
            True if the queue drained, False on timeout.
        """
        if self.is_ui_thread():
            raise RuntimeError("join() called from the UI thread would deadlock")
        while True:
            marker = self.run_on_ui_thread(lambda: None)
            try:
                marker.result(timeout=timeout)
            except TimeoutError:
                return False
            # The marker ran last among what was queued before it; anything
            # still pending was queued after it.
            if self.pending == 0:
                return True

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work; optionally wait for queued work to finish."""
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=wait)
