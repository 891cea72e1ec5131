"""Taskbind Execution -- descriptor, guard, resolution and dispatch.

Flow::

    producer                      transport (external)        worker
    ────────                      ────────────────────        ──────
    describe(func, *args)  ──▶  to_wire() ... from_wire() ──▶ is_expired(d, ttl)?
                                                              ├─ yes → drop
                                                              └─ no  → execute_task(d)
                                                                       resolve(module_ref)
                                                                       invoke(handle, method, args)
"""

from taskbind.execution.descriptor import ModuleRef, TaskDescriptor, describe
from taskbind.execution.executor import TaskExecutor, TaskOutcome, TaskStatus, execute_task
from taskbind.execution.expiration import age, is_expired
from taskbind.execution.invoker import find_method, invoke
from taskbind.execution.registry import (
    TargetHandle,
    TargetRegistry,
    get_default_registry,
    register_target,
    reset_default_registry,
)
from taskbind.execution.resolver import TargetResolver, resolve

__all__ = [
    "ModuleRef",
    "TaskDescriptor",
    "describe",
    "age",
    "is_expired",
    "TargetHandle",
    "TargetRegistry",
    "get_default_registry",
    "reset_default_registry",
    "register_target",
    "TargetResolver",
    "resolve",
    "find_method",
    "invoke",
    "execute_task",
    "TaskExecutor",
    "TaskOutcome",
    "TaskStatus",
]
