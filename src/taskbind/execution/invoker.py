"""Invoker — static-or-instance dispatch on a resolved target.

Manifesto:
A descriptor only says "call ``method`` on ``library:type`` with these
args". Whether that means calling a function directly or building a
receiver first is decided here, from what the target actually defines.

DISPATCH ORDER
──────────────
::

    invoke(handle, "Add", (2, 3))
      │
      ├─ 1. static lookup      module function / staticmethod / classmethod
      │      found → call(*args)                       (no instance built)
      │
      ├─ 2. instance lookup    plain function on the class or its bases
      │      found → receiver = factory() or cls()     (exactly one)
      │              receiver.method(*args)
      │
      └─ 3. neither            MethodResolutionError

Lookup is exact-match on the name and sees underscore-prefixed members.
A ``__private`` name is also tried in its mangled ``_Class__private``
form for every class in the MRO.

Failures:
    MethodResolutionError  ─ nothing callable under that name
    InstantiationError     ─ receiver needed, no zero-arg constructor / abstract
    ArgumentMismatchError  ─ args do not bind to the callable's signature

Exceptions raised by the target itself (including its constructor or
factory) propagate unchanged.

Invocation is synchronous. A target returning an awaitable is run to
completion on a fresh event loop before ``invoke`` returns.

Related modules:
    resolver.py — produces the TargetHandle
    executor.py — execute_task() = resolve + invoke

Tags:
    taskbind, execution, invoker, dispatch, reflection

Doc-Types:
    api-reference
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from taskbind.core.errors import (
    ArgumentMismatchError,
    InstantiationError,
    MethodResolutionError,
)
from taskbind.core.logging import get_logger
from taskbind.execution.registry import TargetHandle

logger = get_logger(__name__)

STATIC = "static"
INSTANCE = "instance"


def _candidate_names(cls: type, method_name: str) -> list[tuple[type, str]]:
    """(owner, attribute name) pairs to try, in MRO order."""
    if method_name.startswith("__") and not method_name.endswith("__"):
        return [(klass, f"_{klass.__name__.lstrip('_')}{method_name}") for klass in cls.__mro__]
    return [(cls, method_name)]


def _classify(raw: Any) -> str | None:
    if isinstance(raw, (staticmethod, classmethod)):
        return STATIC
    if inspect.isclass(raw):
        return None
    if inspect.isfunction(raw):
        return INSTANCE
    if inspect.ismethoddescriptor(raw) and callable(raw):
        return INSTANCE
    if callable(raw) and not hasattr(raw, "__get__"):
        return STATIC
    return None


def find_method(handle: TargetHandle, method_name: str) -> tuple[str, str] | None:
    """Locate ``method_name`` on the target.

    Returns:
        ``(mode, attribute_name)`` where mode is ``"static"`` or
        ``"instance"``, or None when nothing callable matches.
    """
    target = handle.target
    if handle.is_module:
        obj = getattr(target, method_name, None)
        if obj is not None and callable(obj) and not inspect.isclass(obj):
            return STATIC, method_name
        return None

    for owner, attr in _candidate_names(target, method_name):
        raw = _lookup_static(owner, attr)
        if raw is _MISSING:
            continue
        mode = _classify(raw)
        if mode is not None:
            return mode, attr
    return None


_MISSING = object()


def _lookup_static(cls: type, attr: str) -> Any:
    """Raw class attribute from the MRO, without descriptor binding or metaclass members."""
    for klass in cls.__mro__:
        namespace = vars(klass)
        if attr in namespace:
            return namespace[attr]
    return _MISSING


def _construct(handle: TargetHandle) -> Any:
    if handle.factory is not None:
        return handle.factory()

    cls = handle.target
    if inspect.isabstract(cls):
        raise InstantiationError(
            f"{handle.display_name} is abstract and cannot be instantiated"
        ).with_context(library=handle.library, type_name=handle.type_name)

    try:
        sig = inspect.signature(cls)
    except (TypeError, ValueError):
        sig = None
    if sig is not None:
        try:
            sig.bind()
        except TypeError as e:
            raise InstantiationError(
                f"{handle.display_name} has no zero-argument constructor (signature {sig})",
                cause=e,
            ).with_context(library=handle.library, type_name=handle.type_name) from e

    return cls()


def _check_arguments(
    func: Callable[..., Any], args: Sequence[Any], handle: TargetHandle, method_name: str
) -> None:
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        # builtins without introspectable signatures are checked by the call itself
        return
    try:
        sig.bind(*args)
    except TypeError as e:
        raise ArgumentMismatchError(
            f"{handle.display_name}.{method_name}{sig} does not accept {len(args)} positional arg(s): {e}",
            cause=e,
        ).with_context(
            library=handle.library,
            type_name=handle.type_name,
            method=method_name,
            arg_count=len(args),
        ) from e


def _run_awaitable(awaitable: Awaitable[Any]) -> Any:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        pass
    else:
        if inspect.iscoroutine(awaitable):
            awaitable.close()
        raise RuntimeError(
            "invoke() is synchronous and cannot drive an async target from inside a running "
            "event loop; call it from a worker thread"
        )

    async def _await() -> Any:
        return await awaitable

    return asyncio.run(_await())


def invoke(target: TargetHandle, method_name: str, args: Sequence[Any] = ()) -> Any:
    """Dispatch ``method_name`` on ``target`` with positional ``args``.

    Returns:
        Whatever the target returns.

    Raises:
        MethodResolutionError: No static or instance callable is named ``method_name``.
        InstantiationError: Instance dispatch needed and no zero-arg constructor exists.
        ArgumentMismatchError: ``args`` do not fit the callable's signature.
    """
    args = tuple(args)
    found = find_method(target, method_name)
    if found is None:
        raise MethodResolutionError(
            f"No static or instance method {method_name!r} on {target.display_name}"
        ).with_context(library=target.library, type_name=target.type_name, method=method_name)

    mode, attr = found
    if mode == STATIC:
        func = getattr(target.target, attr)
    else:
        receiver = _construct(target)
        func = getattr(receiver, attr)

    _check_arguments(func, args, target, method_name)
    logger.debug("task.dispatch", target=target.key, method=method_name, mode=mode)

    result = func(*args)
    if inspect.isawaitable(result):
        result = _run_awaitable(result)
    return result


__all__ = ["STATIC", "INSTANCE", "find_method", "invoke"]
