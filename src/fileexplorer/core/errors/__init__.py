"""Failure taxonomy: kinds, presentation modes, and classification models.

The classifier itself lives in ``fileexplorer.core.errors.classifier`` since
it depends on the console exception hierarchy.
"""

from fileexplorer.core.errors.codes import (
    PRESENTATIONS,
    FailureKind,
    FailurePresentation,
    MessageId,
    PresentationMode,
    validate_presentation_table,
)
from fileexplorer.core.errors.models import Classification, KnownFailure

__all__ = [
    "PRESENTATIONS",
    "Classification",
    "FailureKind",
    "FailurePresentation",
    "KnownFailure",
    "MessageId",
    "PresentationMode",
    "validate_presentation_table",
]
