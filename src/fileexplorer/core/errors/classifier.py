"""Table-driven failure classifier.

Maps a captured failure to a FailureKind and its presentation by walking an
ordered table of concrete types. Matching is by exact type: a subclass of a
listed type does not match, so ``PermissionError`` (an ``OSError``
subclass) classifies as UNKNOWN rather than IO_FAILURE.
"""

from __future__ import annotations

from collections.abc import Sequence

from fileexplorer.console.exceptions import (
    CommandNotFoundError,
    ConsoleAllocError,
    ExecutionError,
    HandlerNotFoundError,
    InsufficientPermissionsError,
    InvalidCommandDefinitionError,
    NoSuchFileOrDirectoryError,
    OperationTimeoutError,
    ParseError,
    ReadOnlyFilesystemError,
)

from .codes import FailureKind
from .models import Classification, KnownFailure

# Order is significant only for the first-match rule; every type is listed
# once, so the result never depends on it.
KNOWN_FAILURES: tuple[KnownFailure, ...] = (
    KnownFailure(FileNotFoundError, FailureKind.NOT_FOUND),
    KnownFailure(OSError, FailureKind.IO_FAILURE),
    KnownFailure(InvalidCommandDefinitionError, FailureKind.COMMAND_NOT_FOUND),
    KnownFailure(ConsoleAllocError, FailureKind.CONSOLE_ALLOCATION_FAILURE),
    KnownFailure(NoSuchFileOrDirectoryError, FailureKind.NOT_FOUND),
    KnownFailure(ReadOnlyFilesystemError, FailureKind.READ_ONLY_FILESYSTEM),
    KnownFailure(InsufficientPermissionsError, FailureKind.INSUFFICIENT_PERMISSIONS),
    KnownFailure(CommandNotFoundError, FailureKind.COMMAND_NOT_FOUND),
    KnownFailure(OperationTimeoutError, FailureKind.OPERATION_TIMEOUT),
    KnownFailure(ExecutionError, FailureKind.EXECUTION_FAILURE),
    KnownFailure(ParseError, FailureKind.PARSE_FAILURE),
    KnownFailure(HandlerNotFoundError, FailureKind.HANDLER_NOT_FOUND),
)


def validate_known_failures(table: Sequence[KnownFailure]) -> None:
    """Reject tables that list the same concrete type twice.

    Raises:
        ValueError: On a duplicated type, or an entry mapping to UNKNOWN.
    """
    seen: set[type[BaseException]] = set()
    for entry in table:
        if entry.failure_type in seen:
            raise ValueError(f"Failure type listed twice: {entry.type_name}")
        if entry.kind == FailureKind.UNKNOWN:
            raise ValueError(f"{entry.type_name} cannot be mapped to UNKNOWN explicitly")
        seen.add(entry.failure_type)


class FailureClassifier:
    """Classifies failures against an ordered table of known types.

    Example:
        classifier = FailureClassifier()
        kind, mode = classifier.classify(ReadOnlyFilesystemError("ro"))
    """

    def __init__(self, table: Sequence[KnownFailure] = KNOWN_FAILURES) -> None:
        validate_known_failures(table)
        self._table = tuple(table)

    def classify(self, failure: BaseException) -> Classification:
        """Classify a failure; unknown types yield (UNKNOWN, DIALOG)."""
        failure_type = type(failure)
        for entry in self._table:
            if entry.failure_type is failure_type:
                return Classification.for_kind(entry.kind)
        return Classification.for_kind(FailureKind.UNKNOWN)


_default_classifier = FailureClassifier()


def classify(failure: BaseException) -> Classification:
    """Classify a failure with the default table."""
    return _default_classifier.classify(failure)
