"""
Structured error types for taskbind.

Every failure the dispatch core can produce is a typed error carrying a
category, a retry flag and structured context about the task that failed.
The worker loop that calls into the core decides whether to log,
dead-letter or escalate; the core itself never retries and never swallows.

Manifesto:
    - **Typed Error Hierarchy:** One class per failure mode
    - **Explicit Retry Semantics:** Dispatch failures are permanent
    - **Rich Context:** Errors name the library, type and method involved
    - **Error Chaining:** The original exception is kept as ``cause``

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                      TaskbindError                           │
        │  (category, retryable, context, cause)                       │
        ├─────────────────────────────────────────────────────────────┤
        │                                                              │
        │  DescriptorError          DuplicateRegistrationError         │
        │  (VALIDATION)             (CONFIG)                           │
        │                                                              │
        │  TaskError (DISPATCH, retryable=False)                       │
        │     │                                                        │
        │     ├── ResolutionError         library / type not found     │
        │     ├── MethodResolutionError   no static or instance method │
        │     ├── InstantiationError      no zero-arg constructor      │
        │     └── ArgumentMismatchError   args do not fit signature    │
        └─────────────────────────────────────────────────────────────┘

Examples:
    >>> error = ResolutionError("Type not found: core.Missing")
    >>> error.retryable
    False
    >>> error.with_context(library="core", type_name="Missing").context.library
    'core'

Guardrails:
    ❌ DON'T: Catch TaskError and retry by re-resolving the same descriptor
    ✅ DO: Hand permanent failures to the dead-letter path

    ❌ DON'T: Swallow the original exception
    ✅ DO: Pass it as cause= for error chaining

Tags:
    error-handling, exception-hierarchy, dispatch, taskbind

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification and routing.

    Attributes:
        VALIDATION: Malformed descriptor or wire payload
        CONFIG: Registry or settings misconfiguration
        DISPATCH: Target resolution and invocation failures
        INTERNAL: Bugs, unexpected state
        UNKNOWN: Uncategorized errors
    """

    VALIDATION = "VALIDATION"     # Malformed descriptor, bad wire payload
    CONFIG = "CONFIG"             # Duplicate registration, bad settings
    DISPATCH = "DISPATCH"         # Resolve / instantiate / invoke failures

    INTERNAL = "INTERNAL"         # Bugs, unexpected state
    UNKNOWN = "UNKNOWN"           # Uncategorized errors


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Typed fields cover what identifies a task; anything else goes in
    ``metadata``. ``to_dict()`` drops unset fields so log lines stay short.

    Examples:
        >>> ctx = ErrorContext(task_id="01J...", library="core", method="Add")
        >>> ctx.to_dict()
        {'task_id': '01J...', 'library': 'core', 'method': 'Add'}

    Attributes:
        task_id: Descriptor id (tracing only)
        library: Library / module identifier from the descriptor
        type_name: Type identifier from the descriptor
        method: Method name from the descriptor
        metadata: Additional key-value pairs
    """

    task_id: str | None = None
    library: str | None = None
    type_name: str | None = None
    method: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["task_id", "library", "type_name", "method"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class TaskbindError(Exception):
    """
    Base exception for all taskbind errors.

    All TaskbindError instances carry:
    - **category:** ErrorCategory enum for classification and routing
    - **retryable:** Whether the same work could succeed if tried again
    - **context:** ErrorContext with structured metadata
    - **cause:** Optional underlying exception for chaining

    Subclasses set ``default_category`` and ``default_retryable``.

    Examples:
        >>> error = TaskbindError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.to_dict()["retryable"]
        False
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> TaskbindError:
        """
        Add context to this error (fluent API).

        Usage:
            raise ResolutionError("Type not found").with_context(
                library="core",
                type_name="MathOps",
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# DESCRIPTOR / REGISTRY ERRORS
# =============================================================================


class DescriptorError(TaskbindError):
    """Descriptor fields or wire payload are malformed."""

    default_category = ErrorCategory.VALIDATION
    default_retryable = False


class DuplicateRegistrationError(TaskbindError):
    """A registry key is already bound to a different target."""

    default_category = ErrorCategory.CONFIG
    default_retryable = False

    def __init__(self, key: str, existing: Any, attempted: Any):
        self.key = key
        self.existing = existing
        self.attempted = attempted
        super().__init__(
            f"Target key {key!r} is already registered to {existing!r}; "
            f"refusing to rebind it to {attempted!r}"
        )


# =============================================================================
# DISPATCH ERRORS (permanent)
# =============================================================================


class TaskError(TaskbindError):
    """Base for failures while resolving or invoking a task.

    These are permanent for the descriptor that produced them: resolving
    the same names again yields the same failure.
    """

    default_category = ErrorCategory.DISPATCH
    default_retryable = False


class ResolutionError(TaskError):
    """Named library could not be located, or the type does not exist in it."""


class MethodResolutionError(TaskError):
    """No static or instance callable on the target matches the method name."""


class InstantiationError(TaskError):
    """Instance dispatch needs a receiver but the target cannot be built without arguments."""


class ArgumentMismatchError(TaskError):
    """The resolved callable's signature does not accept the descriptor's args."""


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def is_retryable(error: Exception) -> bool:
    """Check if an error is retryable."""
    if isinstance(error, TaskbindError):
        return error.retryable
    return isinstance(error, (ConnectionError, TimeoutError))


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, TaskbindError):
        return error.category
    if isinstance(error, (TypeError, ValueError)):
        return ErrorCategory.VALIDATION
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "TaskbindError",
    "DescriptorError",
    "DuplicateRegistrationError",
    "TaskError",
    "ResolutionError",
    "MethodResolutionError",
    "InstantiationError",
    "ArgumentMismatchError",
    "is_retryable",
    "categorize_error",
]
