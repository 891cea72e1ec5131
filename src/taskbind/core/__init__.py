"""Taskbind Core -- shared primitives for the execution layer.

Architecture::

    errors.py          Structured error hierarchy (TaskbindError, TaskError)
    logging.py         Structured logging (structlog)
    settings.py        TaskbindSettings (pydantic-settings, TASKBIND_ env)
    timestamps.py      ULID generation + UTC helpers (stdlib-only)
"""

from taskbind.core.errors import (
    ArgumentMismatchError,
    DescriptorError,
    DuplicateRegistrationError,
    ErrorCategory,
    ErrorContext,
    InstantiationError,
    MethodResolutionError,
    ResolutionError,
    TaskbindError,
    TaskError,
    categorize_error,
    is_retryable,
)
from taskbind.core.timestamps import generate_ulid, utc_now

__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "TaskbindError",
    "TaskError",
    "DescriptorError",
    "DuplicateRegistrationError",
    "ResolutionError",
    "MethodResolutionError",
    "InstantiationError",
    "ArgumentMismatchError",
    "categorize_error",
    "is_retryable",
    "generate_ulid",
    "utc_now",
]
