"""Task descriptor - what to run, captured as strings.

This module defines TaskDescriptor, the record a producer enqueues and a
worker later executes. It names its target only by strings (library,
type, method) so it can cross a process boundary with no reference to the
code that created it.

Manifesto:
    A descriptor is inert data. Nothing in it is resolved until a worker
    asks for it, which is what lets the producer and the worker run
    different processes, or different machines, sharing only code.

ARCHITECTURE
────────────
::

    TaskDescriptor (frozen)
      ├── id              ─ ULID, tracing/dedup only
      ├── library         ─ ┐ module_ref: who owns the callable
      ├── type_name       ─ ┘
      ├── method          ─ callable name on the owner
      ├── args            ─ positional args (tuple, fixed length)
      └── created_at_utc  ─ aware UTC datetime, fixed at creation

    describe(func, *args)      ─ build from a Python callable
    .to_wire() / .from_wire()  ─ {id, library, type, method, args, createdAtUtc}

Related modules:
    expiration.py — age / TTL check over a descriptor
    resolver.py   — turns module_ref into a TargetHandle
    executor.py   — execute_task(descriptor)

Tags:
    taskbind, execution, descriptor, work-spec, wire-shape

Doc-Types:
    api-reference
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any, NamedTuple

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from taskbind.core.errors import DescriptorError
from taskbind.core.timestamps import ensure_utc, generate_ulid, to_iso8601, utc_now


class ModuleRef(NamedTuple):
    """(library, type) pair naming the owner of a callable.

    ``type_name`` is empty when the owner is the library (module) itself.
    """

    library: str
    type_name: str

    def __str__(self) -> str:
        return f"{self.library}:{self.type_name}"


@dataclass(frozen=True)
class TaskDescriptor:
    """Immutable record identifying one unit of deferred work.

    Example:
        >>> d = TaskDescriptor.create("core", "MathOps", "Add", [2, 3])
        >>> d.module_ref
        ModuleRef(library='core', type_name='MathOps')
        >>> d.args
        (2, 3)
    """

    id: str
    """Unique id assigned at creation. Never used for dispatch."""

    library: str
    """Library / module identifier of the owner."""

    type_name: str
    """Type identifier inside the library ('' for module-level functions)."""

    method: str
    """Name of the callable to invoke."""

    args: tuple[Any, ...]
    """Positional arguments, validated against the target at invocation time."""

    created_at_utc: datetime
    """Timezone-aware UTC creation instant."""

    def __post_init__(self) -> None:
        if not self.id:
            raise DescriptorError("Descriptor id must be a non-empty string")
        if not self.library:
            raise DescriptorError("Descriptor library must be a non-empty string").with_context(
                task_id=self.id
            )
        if not self.method:
            raise DescriptorError("Descriptor method must be a non-empty string").with_context(
                task_id=self.id, library=self.library
            )
        if self.type_name is None:
            object.__setattr__(self, "type_name", "")
        if not isinstance(self.created_at_utc, datetime):
            raise DescriptorError(
                f"created_at_utc must be a datetime, got {type(self.created_at_utc).__name__}"
            ).with_context(task_id=self.id)
        try:
            created = ensure_utc(self.created_at_utc)
        except ValueError as e:
            raise DescriptorError(str(e), cause=e).with_context(task_id=self.id) from e
        object.__setattr__(self, "created_at_utc", created)
        if isinstance(self.args, (str, bytes)) or not isinstance(self.args, Sequence):
            raise DescriptorError(
                f"args must be a sequence of values, got {type(self.args).__name__}"
            ).with_context(task_id=self.id)
        object.__setattr__(self, "args", tuple(self.args))

    @classmethod
    def create(
        cls,
        library: str,
        type_name: str,
        method: str,
        args: Sequence[Any] = (),
        *,
        task_id: str | None = None,
        created_at_utc: datetime | None = None,
    ) -> TaskDescriptor:
        """Build a descriptor, generating id and timestamp when omitted."""
        return cls(
            id=task_id or generate_ulid(),
            library=library,
            type_name=type_name,
            method=method,
            args=tuple(args),
            created_at_utc=created_at_utc or utc_now(),
        )

    @property
    def module_ref(self) -> ModuleRef:
        return ModuleRef(self.library, self.type_name)

    # === WIRE SHAPE ===

    def to_wire(self) -> dict[str, Any]:
        """Return the transport-facing mapping.

        Argument values are passed through as-is; encoding them is up to
        whatever serializer the transport uses.
        """
        return {
            "id": self.id,
            "library": self.library,
            "type": self.type_name,
            "method": self.method,
            "args": list(self.args),
            "createdAtUtc": to_iso8601(self.created_at_utc),
        }

    @classmethod
    def from_wire(cls, payload: Mapping[str, Any]) -> TaskDescriptor:
        """Rebuild a descriptor from the mapping produced by :meth:`to_wire`.

        Raises:
            DescriptorError: If required fields are missing or malformed.
        """
        try:
            wire = _WireDescriptor.model_validate(payload)
        except PydanticValidationError as e:
            raise DescriptorError(f"Malformed task payload: {e.error_count()} error(s)", cause=e) from e
        return cls(
            id=wire.id,
            library=wire.library,
            type_name=wire.type,
            method=wire.method,
            args=tuple(wire.args),
            created_at_utc=wire.created_at_utc,
        )


class _WireDescriptor(BaseModel):
    """Validation model for the wire mapping."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(min_length=1)
    library: str = Field(min_length=1)
    type: str = ""
    method: str = Field(min_length=1)
    args: list[Any] = Field(default_factory=list)
    created_at_utc: AwareDatetime = Field(alias="createdAtUtc")


def describe(func: Callable[..., Any], *args: Any, task_id: str | None = None) -> TaskDescriptor:
    """Capture a call to ``func`` with ``args`` as a descriptor.

    - Module-level function → ``type_name=""``, dispatched as a free function.
    - Function/staticmethod/classmethod looked up on a class → that class.
    - Bound method → the receiver's class. Only the class travels; the
      worker builds its own receiver.

    Example:
        >>> describe(MathOps.add, 2, 3).module_ref
        ModuleRef(library='myapp.ops', type_name='MathOps')

    Raises:
        DescriptorError: For classes, lambdas, nested functions, and other
            callables that cannot be addressed by module and qualified name.
    """
    if inspect.isclass(func):
        raise DescriptorError(
            f"{func.__qualname__} is a class; describe one of its methods instead"
        ).with_context(library=func.__module__, type_name=func.__qualname__)
    if inspect.ismethod(func):
        owner = func.__self__
        cls = owner if isinstance(owner, type) else type(owner)
        library, type_name, method = cls.__module__, cls.__qualname__, func.__name__
    else:
        qualname = getattr(func, "__qualname__", None)
        library = getattr(func, "__module__", None)
        if not callable(func) or not qualname or not library:
            raise DescriptorError(f"Cannot address {func!r} by module and name")
        type_name, _, method = qualname.rpartition(".")

    if "<locals>" in type_name or "<lambda>" in method or "<locals>" in method:
        raise DescriptorError(
            f"{library}.{type_name}.{method} is not importable by name"
        ).with_context(library=library, type_name=type_name, method=method)

    return TaskDescriptor.create(library, type_name, method, args, task_id=task_id)


__all__ = ["ModuleRef", "TaskDescriptor", "describe"]
