"""Executor entry points — what the external worker loop calls.

WHY
───
The worker loop owns polling, retries and dead-lettering. It needs two
things from this package: "is this task still worth running?" and
"run it". Everything else (resolution, dispatch) stays behind these calls.

ARCHITECTURE
────────────
::

    is_expired(descriptor, ttl)        ─ pure staleness check
    execute_task(descriptor)           ─ resolve + invoke, raises TaskError

    TaskExecutor(resolver, ttl)
      ├── .is_expired(descriptor)      ─ uses the configured TTL
      ├── .execute(descriptor)         ─ same as execute_task
      └── .run(descriptor)             ─ guard + execute → TaskOutcome

Usage::

    executor = TaskExecutor(ttl=timedelta(hours=1))
    for payload in queue:                       # external
        outcome = executor.run(TaskDescriptor.from_wire(payload))
        if outcome.status is TaskStatus.FAILED:
            dead_letter(payload, outcome.error)  # external

Related modules:
    expiration.py — is_expired
    resolver.py   — TargetResolver
    invoker.py    — invoke
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any

from taskbind.core.errors import TaskError
from taskbind.core.logging import LogContext, ensure_configured, get_logger
from taskbind.core.settings import get_settings
from taskbind.execution.descriptor import TaskDescriptor
from taskbind.execution.expiration import as_timedelta, is_expired
from taskbind.execution.invoker import invoke
from taskbind.execution.resolver import TargetResolver

logger = get_logger(__name__)


def execute_task(descriptor: TaskDescriptor, *, resolver: TargetResolver | None = None) -> Any:
    """Resolve the descriptor's target and invoke its method with its args.

    Raises:
        ResolutionError, MethodResolutionError, InstantiationError,
        ArgumentMismatchError: permanent dispatch failures.
        Any exception raised by the target itself, unchanged.
    """
    ensure_configured()
    resolver = resolver or TargetResolver()
    with LogContext(task_id=descriptor.id):
        try:
            handle = resolver.resolve(descriptor.module_ref)
            logger.debug("task.resolved", target=handle.key, method=descriptor.method)
            return invoke(handle, descriptor.method, descriptor.args)
        except TaskError as e:
            e.with_context(task_id=descriptor.id, method=descriptor.method)
            raise


class TaskStatus(str, Enum):
    """Terminal outcome of one descriptor."""

    EXPIRED = "expired"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class TaskOutcome:
    """What happened to one descriptor in :meth:`TaskExecutor.run`."""

    task_id: str
    status: TaskStatus
    result: Any = None
    error: TaskError | None = None

    @property
    def ok(self) -> bool:
        return self.status is TaskStatus.SUCCEEDED


class TaskExecutor:
    """Object form of the entry points, for worker loops.

    Parameters
    ----------
    resolver : TargetResolver | None
        Resolver to use (defaults to a settings-driven one).
    ttl : timedelta | float | None
        Time-to-live; ``None`` reads ``TaskbindSettings.default_ttl_seconds``,
        and if that is unset too, tasks never expire.
    """

    def __init__(
        self,
        resolver: TargetResolver | None = None,
        *,
        ttl: timedelta | float | None = None,
    ) -> None:
        ensure_configured()
        self.resolver = resolver or TargetResolver()
        if ttl is None:
            ttl = get_settings().default_ttl_seconds
        self.ttl = as_timedelta(ttl) if ttl is not None else None

    def is_expired(self, descriptor: TaskDescriptor) -> bool:
        if self.ttl is None:
            return False
        return is_expired(descriptor, self.ttl)

    def execute(self, descriptor: TaskDescriptor) -> Any:
        return execute_task(descriptor, resolver=self.resolver)

    def run(self, descriptor: TaskDescriptor) -> TaskOutcome:
        """Apply the expiration guard, then execute.

        Dispatch failures become a FAILED outcome carrying the error.
        Exceptions raised by the target itself are not dispatch failures
        and propagate to the caller.
        """
        if self.is_expired(descriptor):
            return TaskOutcome(task_id=descriptor.id, status=TaskStatus.EXPIRED)
        try:
            result = self.execute(descriptor)
        except TaskError as e:
            return TaskOutcome(task_id=descriptor.id, status=TaskStatus.FAILED, error=e)
        return TaskOutcome(task_id=descriptor.id, status=TaskStatus.SUCCEEDED, result=result)


__all__ = ["execute_task", "is_expired", "TaskExecutor", "TaskOutcome", "TaskStatus"]
