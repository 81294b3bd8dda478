"""UI boundary: the UI-thread executor and presenters."""

from fileexplorer.ui.executor import UiExecutor, UiExecutorShutdownError
from fileexplorer.ui.presenter import AnswerCallback, ConsolePresenter, Presenter

__all__ = [
    "AnswerCallback",
    "ConsolePresenter",
    "Presenter",
    "UiExecutor",
    "UiExecutorShutdownError",
]
