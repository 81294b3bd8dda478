"""Failure kinds, presentation modes, and message identifiers.

Failure Kind Taxonomy
=====================

Every failure detected while running a filesystem command resolves to
exactly one FailureKind. Each kind is bound to a message and to the way the
message is surfaced to the user:

    | Kind                        | Message                   | Mode   |
    |-----------------------------|---------------------------|--------|
    | NOT_FOUND                   | FILE_NOT_FOUND            | DIALOG |
    | IO_FAILURE                  | IO_FAILED                 | DIALOG |
    | COMMAND_NOT_FOUND           | COMMAND_NOT_FOUND         | DIALOG |
    | CONSOLE_ALLOCATION_FAILURE  | CONSOLE_ALLOC_FAILURE     | DIALOG |
    | READ_ONLY_FILESYSTEM        | READ_ONLY_FILESYSTEM      | TOAST  |
    | INSUFFICIENT_PERMISSIONS    | INSUFFICIENT_PERMISSIONS  | TOAST  |
    | OPERATION_TIMEOUT           | OPERATION_TIMEOUT         | TOAST  |
    | EXECUTION_FAILURE           | OPERATION_FAILURE         | TOAST  |
    | PARSE_FAILURE               | OPERATION_FAILURE         | TOAST  |
    | HANDLER_NOT_FOUND           | NOT_REGISTERED_APP        | DIALOG |
    | UNKNOWN                     | UNKNOWN                   | DIALOG |

Toasts are short transient notifications; dialogs are modal and must be
dismissed by the user.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import NamedTuple


class FailureKind(str, Enum):
    """Closed set of failure categories."""

    NOT_FOUND = "not_found"
    IO_FAILURE = "io_failure"
    COMMAND_NOT_FOUND = "command_not_found"
    CONSOLE_ALLOCATION_FAILURE = "console_allocation_failure"
    READ_ONLY_FILESYSTEM = "read_only_filesystem"
    INSUFFICIENT_PERMISSIONS = "insufficient_permissions"
    OPERATION_TIMEOUT = "operation_timeout"
    EXECUTION_FAILURE = "execution_failure"
    PARSE_FAILURE = "parse_failure"
    HANDLER_NOT_FOUND = "handler_not_found"
    UNKNOWN = "unknown"


class PresentationMode(str, Enum):
    """How a terminal failure is surfaced when not suppressed."""

    TOAST = "toast"
    DIALOG = "dialog"


class MessageId(str, Enum):
    """Identifiers of user-visible messages and confirmation questions."""

    FILE_NOT_FOUND = "msgs_file_not_found"
    IO_FAILED = "msgs_io_failed"
    COMMAND_NOT_FOUND = "msgs_command_not_found"
    CONSOLE_ALLOC_FAILURE = "msgs_console_alloc_failure"
    READ_ONLY_FILESYSTEM = "msgs_read_only_filesystem"
    INSUFFICIENT_PERMISSIONS = "msgs_insufficient_permissions"
    OPERATION_TIMEOUT = "msgs_operation_timeout"
    OPERATION_FAILURE = "msgs_operation_failure"
    NOT_REGISTERED_APP = "msgs_not_registered_app"
    UNKNOWN = "msgs_unknown"

    # Confirmation questions
    RELAUNCH_PRIVILEGED = "question_relaunch_privileged"


class FailurePresentation(NamedTuple):
    """Message and presentation mode bound to a FailureKind."""

    message_id: MessageId
    mode: PresentationMode


PRESENTATIONS: Mapping[FailureKind, FailurePresentation] = {
    FailureKind.NOT_FOUND: FailurePresentation(
        MessageId.FILE_NOT_FOUND, PresentationMode.DIALOG
    ),
    FailureKind.IO_FAILURE: FailurePresentation(
        MessageId.IO_FAILED, PresentationMode.DIALOG
    ),
    FailureKind.COMMAND_NOT_FOUND: FailurePresentation(
        MessageId.COMMAND_NOT_FOUND, PresentationMode.DIALOG
    ),
    FailureKind.CONSOLE_ALLOCATION_FAILURE: FailurePresentation(
        MessageId.CONSOLE_ALLOC_FAILURE, PresentationMode.DIALOG
    ),
    FailureKind.READ_ONLY_FILESYSTEM: FailurePresentation(
        MessageId.READ_ONLY_FILESYSTEM, PresentationMode.TOAST
    ),
    FailureKind.INSUFFICIENT_PERMISSIONS: FailurePresentation(
        MessageId.INSUFFICIENT_PERMISSIONS, PresentationMode.TOAST
    ),
    FailureKind.OPERATION_TIMEOUT: FailurePresentation(
        MessageId.OPERATION_TIMEOUT, PresentationMode.TOAST
    ),
    FailureKind.EXECUTION_FAILURE: FailurePresentation(
        MessageId.OPERATION_FAILURE, PresentationMode.TOAST
    ),
    FailureKind.PARSE_FAILURE: FailurePresentation(
        MessageId.OPERATION_FAILURE, PresentationMode.TOAST
    ),
    FailureKind.HANDLER_NOT_FOUND: FailurePresentation(
        MessageId.NOT_REGISTERED_APP, PresentationMode.DIALOG
    ),
    FailureKind.UNKNOWN: FailurePresentation(
        MessageId.UNKNOWN, PresentationMode.DIALOG
    ),
}


def validate_presentation_table(
    table: Mapping[FailureKind, FailurePresentation],
) -> None:
    """Check that every FailureKind has a presentation entry.

    Raises:
        ValueError: If a kind is missing from the table.
    """
    missing = [kind.name for kind in FailureKind if kind not in table]
    if missing:
        raise ValueError(f"No presentation bound to failure kinds: {', '.join(missing)}")


validate_presentation_table(PRESENTATIONS)
