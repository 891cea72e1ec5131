"""
Taskbind - Late-bound task descriptors for distributed job dispatch.

A producer captures a call as a :class:`TaskDescriptor` (library, type,
method, positional args, creation time). A worker on another process
checks the descriptor against a TTL and, if still fresh, resolves the
named target and invokes it.

- taskbind.core: errors, logging, settings, timestamps
- taskbind.execution: descriptor, expiration guard, registry, resolver, invoker
"""

__version__ = "0.1.0"

from taskbind.core.errors import (
    ArgumentMismatchError,
    DescriptorError,
    DuplicateRegistrationError,
    InstantiationError,
    MethodResolutionError,
    ResolutionError,
    TaskbindError,
    TaskError,
)
from taskbind.execution import (
    ModuleRef,
    TargetHandle,
    TargetRegistry,
    TargetResolver,
    TaskDescriptor,
    TaskExecutor,
    TaskOutcome,
    describe,
    execute_task,
    invoke,
    is_expired,
    register_target,
    resolve,
)

__all__ = [
    "__version__",
    # Errors
    "TaskbindError",
    "TaskError",
    "DescriptorError",
    "DuplicateRegistrationError",
    "ResolutionError",
    "MethodResolutionError",
    "InstantiationError",
    "ArgumentMismatchError",
    # Descriptor
    "ModuleRef",
    "TaskDescriptor",
    "describe",
    # Dispatch
    "TargetHandle",
    "TargetRegistry",
    "TargetResolver",
    "register_target",
    "resolve",
    "invoke",
    # Entry points
    "is_expired",
    "execute_task",
    "TaskExecutor",
    "TaskOutcome",
]
