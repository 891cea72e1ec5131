"""Target Registry — explicit ``library:type`` → target lookup.

Manifesto:
The resolver needs to turn ``("core", "MathOps")`` into something it can
dispatch on. Registering targets at startup makes that a deterministic
dictionary lookup with one well-defined "not found" outcome, while the
descriptor keeps carrying the same string pair on the wire.

ARCHITECTURE
────────────
::

    TargetRegistry
      ├── .register(library, type_name, target, factory=None)
      ├── .get(library, type_name)      ─ TargetHandle or None
      ├── .has(library, type_name)      ─ existence check
      ├── .unregister(library, type_name)
      ├── .list_targets()               ─ all registered keys
      └── .clear()

    register_target(library, type_name=None)  ─ class decorator (global registry)
    get_default_registry()                    ─ module-level singleton
    reset_default_registry()                  ─ clear for testing

One target per key: rebinding a key to a different target raises
DuplicateRegistrationError. Repeating an identical registration is a no-op.

BEST PRACTICES
──────────────
- Register during process startup, before the worker loop starts.
- Pass an explicit ``TargetRegistry`` in tests; call
  ``reset_default_registry()`` in fixtures.

Related modules:
    resolver.py — TargetResolver consults the registry first
    invoker.py  — uses TargetHandle.factory for instance dispatch

Tags:
    taskbind, execution, registry, target-registry, lookup

Doc-Types:
    api-reference
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from types import ModuleType
from typing import Any

from taskbind.core.errors import DuplicateRegistrationError
from taskbind.core.logging import ensure_configured, get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class TargetHandle:
    """A resolved dispatch target.

    ``target`` is a class (methods dispatch static-then-instance) or a
    module (functions dispatch as free functions). ``factory``, when set,
    builds receivers for instance dispatch instead of calling the class
    with no arguments.
    """

    library: str
    type_name: str
    target: type | ModuleType
    factory: Callable[[], Any] | None = None

    @property
    def is_module(self) -> bool:
        return isinstance(self.target, ModuleType)

    @property
    def key(self) -> str:
        return _key(self.library, self.type_name)

    @property
    def display_name(self) -> str:
        return f"{self.library}.{self.type_name}" if self.type_name else self.library


def _key(library: str, type_name: str) -> str:
    return f"{library}:{type_name}"


class TargetRegistry:
    """Injectable, thread-safe target registry.

    Example:
        >>> registry = TargetRegistry()
        >>> registry.register("core", "MathOps", MathOps)
        >>> registry.get("core", "MathOps").target is MathOps
        True
    """

    def __init__(self) -> None:
        self._targets: dict[str, TargetHandle] = {}
        self._lock = threading.RLock()

    def register(
        self,
        library: str,
        type_name: str,
        target: type | ModuleType,
        *,
        factory: Callable[[], Any] | None = None,
    ) -> TargetHandle:
        """Register a target under ``library:type_name``.

        Args:
            library: Library identifier carried by descriptors
            type_name: Type identifier carried by descriptors ('' for a module)
            target: Class or module that owns the callables
            factory: Zero-argument callable building receivers for instance dispatch

        Raises:
            TypeError: If target is neither a class nor a module
            DuplicateRegistrationError: If the key is bound to a different target
        """
        if not isinstance(target, (type, ModuleType)):
            raise TypeError(f"Target must be a class or module, got {type(target).__name__}")
        if factory is not None and not callable(factory):
            raise TypeError(f"Factory must be callable, got {type(factory).__name__}")

        handle = TargetHandle(library=library, type_name=type_name, target=target, factory=factory)
        key = handle.key
        with self._lock:
            existing = self._targets.get(key)
            if existing is not None:
                if existing.target is target and existing.factory is factory:
                    return existing
                raise DuplicateRegistrationError(key, existing.target, target)
            self._targets[key] = handle
        ensure_configured()
        logger.debug("registry.registered", key=key, target=getattr(target, "__qualname__", repr(target)))
        return handle

    def get(self, library: str, type_name: str) -> TargetHandle | None:
        """Get a registered handle, or None."""
        with self._lock:
            return self._targets.get(_key(library, type_name))

    def has(self, library: str, type_name: str) -> bool:
        """Check if a target is registered."""
        with self._lock:
            return _key(library, type_name) in self._targets

    def unregister(self, library: str, type_name: str) -> bool:
        """Remove a target. Returns True if it was registered."""
        with self._lock:
            return self._targets.pop(_key(library, type_name), None) is not None

    def list_targets(self, library: str | None = None) -> list[tuple[str, str]]:
        """List registered (library, type_name) pairs, optionally for one library."""
        with self._lock:
            handles = list(self._targets.values())
        return sorted(
            (h.library, h.type_name) for h in handles if library is None or h.library == library
        )

    def clear(self) -> None:
        """Clear all targets (for testing)."""
        with self._lock:
            self._targets.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._targets)


# === GLOBAL DEFAULT REGISTRY ===

_default_registry: TargetRegistry | None = None
_default_lock = threading.Lock()


def get_default_registry() -> TargetRegistry:
    """Get the global default registry, creating it on first access."""
    global _default_registry
    with _default_lock:
        if _default_registry is None:
            _default_registry = TargetRegistry()
        return _default_registry


def reset_default_registry() -> None:
    """Reset the global registry (for testing)."""
    global _default_registry
    with _default_lock:
        _default_registry = None


# === DECORATOR API ===


def register_target(
    library: str,
    type_name: str | None = None,
    *,
    registry: TargetRegistry | None = None,
    factory: Callable[[], Any] | None = None,
):
    """Class decorator registering the class as a dispatch target.

    Args:
        library: Library identifier descriptors will carry
        type_name: Type identifier (defaults to the class ``__qualname__``)
        registry: Optional registry (uses global if None)
        factory: Optional receiver factory for instance dispatch

    Example:
        >>> @register_target("core", "Greeter")
        ... class Greeter:
        ...     def Greet(self, name):
        ...         print(f"Hello {name}")
    """

    def decorator(cls: type) -> type:
        target = registry if registry is not None else get_default_registry()
        target.register(library, type_name or cls.__qualname__, cls, factory=factory)
        return cls

    return decorator


__all__ = [
    "TargetHandle",
    "TargetRegistry",
    "get_default_registry",
    "reset_default_registry",
    "register_target",
]
