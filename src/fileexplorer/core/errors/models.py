"""Data models for failure classification."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from .codes import PRESENTATIONS, FailureKind, MessageId, PresentationMode


@dataclass(frozen=True)
class KnownFailure:
    """One row of the classification table: a concrete type and its kind."""

    failure_type: type[BaseException]
    kind: FailureKind

    @property
    def type_name(self) -> str:
        """Fully qualified name of the concrete failure type."""
        return f"{self.failure_type.__module__}.{self.failure_type.__qualname__}"


@dataclass(frozen=True)
class Classification:
    """Result of classifying a failure.

    Unpacks as ``(kind, mode)``; the message id is available as an attribute.
    """

    kind: FailureKind
    mode: PresentationMode
    message_id: MessageId

    @classmethod
    def for_kind(cls, kind: FailureKind) -> Classification:
        presentation = PRESENTATIONS[kind]
        return cls(kind=kind, mode=presentation.mode, message_id=presentation.message_id)

    @property
    def is_toast(self) -> bool:
        return self.mode == PresentationMode.TOAST

    def __iter__(self) -> Iterator[FailureKind | PresentationMode]:
        yield self.kind
        yield self.mode
