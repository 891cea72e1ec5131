"""
Centralized settings for taskbind.

:class:`TaskbindSettings` is the single validated source for the knobs a
worker process sets once at startup: the default TTL, whether descriptors
may name importable Python modules, and logging.

All fields can be set via ``TASKBIND_*`` environment variables (e.g.
``TASKBIND_DEFAULT_TTL_SECONDS=3600``) or a ``.env`` file. List fields take
JSON: ``TASKBIND_ALLOWED_LIBRARIES='["myapp.jobs", "core"]'``.

Tags:
    taskbind, configuration, settings, pydantic, caching, validation

Doc-Types:
    api-reference
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TaskbindSettings(BaseSettings):
    """Taskbind worker-side configuration.

    Fields
    ──────
    default_ttl_seconds      : Age after which a queued task is dropped (None = never)
    allow_import_resolution  : Resolve unregistered libraries by importing them (off by default)
    allowed_libraries        : Module prefixes import resolution may touch (empty = any)
    log_level                : Structlog log level
    log_format               : ``json`` or ``console``
    """

    model_config = SettingsConfigDict(
        env_prefix="TASKBIND_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Expiration ───────────────────────────────────────────────
    default_ttl_seconds: float | None = Field(default=None, ge=0)

    # ── Resolution ───────────────────────────────────────────────
    allow_import_resolution: bool = Field(default=False)
    allowed_libraries: list[str] = Field(default_factory=list)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("log_format")
    @classmethod
    def _known_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("json", "console"):
            raise ValueError(f"log_format must be 'json' or 'console', got {value!r}")
        return value


_settings_cache: dict[str, TaskbindSettings] = {}


def get_settings(*, _force_reload: bool = False) -> TaskbindSettings:
    """Load, validate, and cache a :class:`TaskbindSettings` instance."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]
    settings = TaskbindSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()


__all__ = ["TaskbindSettings", "get_settings", "clear_settings_cache"]
