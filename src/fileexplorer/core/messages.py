"""User-visible message text.

Messages are referenced by MessageId everywhere else so presenters never
see raw exception text.
"""

from __future__ import annotations

from fileexplorer.core.errors.codes import MessageId

MESSAGES: dict[MessageId, str] = {
    MessageId.FILE_NOT_FOUND: "The file or directory was not found.",
    MessageId.IO_FAILED: "An I/O error occurred while accessing the filesystem.",
    MessageId.COMMAND_NOT_FOUND: "The command is not available on this system.",
    MessageId.CONSOLE_ALLOC_FAILURE: "Could not allocate a console to run the command.",
    MessageId.READ_ONLY_FILESYSTEM: "The filesystem is mounted read-only.",
    MessageId.INSUFFICIENT_PERMISSIONS: "Insufficient permissions to complete the operation.",
    MessageId.OPERATION_TIMEOUT: "The operation timed out.",
    MessageId.OPERATION_FAILURE: "The operation failed.",
    MessageId.NOT_REGISTERED_APP: "No application is registered to open this file.",
    MessageId.UNKNOWN: "An unknown error occurred.",
    MessageId.RELAUNCH_PRIVILEGED: (
        "The operation requires elevated privileges. "
        "Switch to a privileged console and try again?"
    ),
}


def get_message(message_id: MessageId | str) -> str:
    """Return the text for a message id, falling back to the id itself."""
    try:
        return MESSAGES[MessageId(message_id)]
    except (KeyError, ValueError):
        return str(message_id)
