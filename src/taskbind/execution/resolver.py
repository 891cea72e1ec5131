"""Resolver — turn a descriptor's (library, type) pair into a TargetHandle.

Resolution order:

1. The :class:`~taskbind.execution.registry.TargetRegistry`. A hit is final.
2. When import resolution is enabled (off by default), ``library`` is
   imported as a dotted module path and ``type_name`` is walked as a
   dotted attribute path inside it (nested classes allowed). An empty
   ``type_name`` addresses the module itself. ``allowed_libraries``
   limits which module prefixes may be imported at all, since
   descriptors arrive from a transport.

Either way the result must be a class or a module; anything else is a
:class:`~taskbind.core.errors.ResolutionError`.

Resolution holds no state of its own. Imports go through ``sys.modules``,
so resolving the same pair twice imports at most once and returns the same
target.
"""

from __future__ import annotations

import importlib
from collections.abc import Iterable
from types import ModuleType

from taskbind.core.errors import ResolutionError
from taskbind.core.logging import get_logger
from taskbind.core.settings import get_settings
from taskbind.execution.descriptor import ModuleRef
from taskbind.execution.registry import TargetHandle, TargetRegistry, get_default_registry

logger = get_logger(__name__)


class TargetResolver:
    """Resolve module references against a registry, then (optionally) imports.

    Parameters
    ----------
    registry : TargetRegistry | None
        Registry to consult first (defaults to the global registry).
    allow_imports : bool | None
        Fall back to importing ``library`` as a Python module. ``None``
        reads ``TaskbindSettings.allow_import_resolution``.
    allowed_libraries : Iterable[str] | None
        Module prefixes import resolution may touch; empty means any.
        ``None`` reads ``TaskbindSettings.allowed_libraries``.
    """

    def __init__(
        self,
        registry: TargetRegistry | None = None,
        *,
        allow_imports: bool | None = None,
        allowed_libraries: Iterable[str] | None = None,
    ) -> None:
        settings = get_settings()
        self._registry = registry
        self._allow_imports = (
            settings.allow_import_resolution if allow_imports is None else allow_imports
        )
        self._allowed_libraries = tuple(
            settings.allowed_libraries if allowed_libraries is None else allowed_libraries
        )

    @property
    def registry(self) -> TargetRegistry:
        return self._registry if self._registry is not None else get_default_registry()

    def resolve(self, module_ref: ModuleRef | tuple[str, str]) -> TargetHandle:
        """Resolve ``(library, type_name)`` to a :class:`TargetHandle`.

        Raises:
            ResolutionError: If the library cannot be located or the type
                does not exist in it.
        """
        library, type_name = module_ref
        handle = self.registry.get(library, type_name)
        if handle is not None:
            return handle

        if not self._allow_imports:
            available = self.registry.list_targets(library)
            raise ResolutionError(
                f"No target registered for {library}:{type_name}. "
                f"Registered in {library!r}: {[t for _, t in available] or 'none'}"
            ).with_context(library=library, type_name=type_name)

        return self._import_target(library, type_name)

    # ── Import fallback ──────────────────────────────────────────────

    def _library_allowed(self, library: str) -> bool:
        if not self._allowed_libraries:
            return True
        return any(
            library == prefix or library.startswith(prefix + ".")
            for prefix in self._allowed_libraries
        )

    def _import_target(self, library: str, type_name: str) -> TargetHandle:
        if library.startswith("."):
            raise ResolutionError(
                f"Relative library names are not resolvable: {library!r}"
            ).with_context(library=library, type_name=type_name)
        if not self._library_allowed(library):
            raise ResolutionError(
                f"Library {library!r} is outside the allowed libraries {list(self._allowed_libraries)}"
            ).with_context(library=library, type_name=type_name)

        try:
            obj: object = importlib.import_module(library)
        except ImportError as e:
            raise ResolutionError(f"Library not found: {library}", cause=e).with_context(
                library=library, type_name=type_name
            ) from e

        if type_name:
            for part in type_name.split("."):
                try:
                    obj = getattr(obj, part)
                except AttributeError as e:
                    raise ResolutionError(
                        f"Type not found: {type_name} in {library}", cause=e
                    ).with_context(library=library, type_name=type_name) from e

        if not isinstance(obj, (type, ModuleType)):
            raise ResolutionError(
                f"{library}.{type_name} is a {type(obj).__name__}, not a class or module"
            ).with_context(library=library, type_name=type_name)

        logger.debug("resolver.imported", library=library, type_name=type_name)
        return TargetHandle(library=library, type_name=type_name, target=obj)


def resolve(
    module_ref: ModuleRef | tuple[str, str],
    *,
    resolver: TargetResolver | None = None,
) -> TargetHandle:
    """Resolve with ``resolver`` or a settings-driven resolver over the global registry."""
    return (resolver or TargetResolver()).resolve(module_ref)


__all__ = ["TargetHandle", "TargetResolver", "resolve"]
