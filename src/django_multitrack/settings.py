"""Typed configuration for django-multitrack.

Reads a single ``DJANGO_MULTITRACK`` dict from Django settings and exposes it
as composed, frozen dataclasses with sensible defaults.

Usage::

    from django_multitrack.settings import get_config

    config = get_config()
    config.sessionize.base_url
    config.sessionize.atomic
    config.event_code_length
"""

import functools
from collections.abc import Mapping
from dataclasses import dataclass, field

from django.conf import settings
from django.test.signals import setting_changed

# Width of the ``Event.code`` column.
MAX_EVENT_CODE_LENGTH = 16


@dataclass(frozen=True, slots=True)
class SessionizeConfig:
    """Sessionize schedule import configuration.

    Attributes:
        base_url: Root URL of the Sessionize API host.
        timeout: Upper bound in seconds for a single HTTP request.
        import_timeout: Deadline in seconds for a whole schedule import,
            covering the fetch and every database write.
        atomic: When ``True`` the wipe-and-rebuild runs inside one database
            transaction and rolls back on failure.  The default keeps each
            write as its own unit of work.
        lock_timeout: Expiry in seconds of the cache-based per-event import
            lock used on databases without advisory locks.
    """

    base_url: str = "https://sessionize.com"
    timeout: float = 30
    import_timeout: float = 30
    atomic: bool = False
    lock_timeout: int = 600


@dataclass(frozen=True, slots=True)
class MultitrackConfig:
    """Top-level django-multitrack configuration."""

    sessionize: SessionizeConfig = field(default_factory=SessionizeConfig)
    event_code_length: int = 4


@functools.lru_cache(maxsize=1)
def get_config() -> MultitrackConfig:
    """Build and return the multitrack configuration.

    Reads ``settings.DJANGO_MULTITRACK`` (a plain dict) and returns a frozen
    :class:`MultitrackConfig`.  The result is cached; the cache is cleared
    automatically when Django's ``setting_changed`` signal fires (e.g. inside
    ``override_settings``).
    """
    raw = getattr(settings, "DJANGO_MULTITRACK", {})
    if not isinstance(raw, Mapping):
        msg = "DJANGO_MULTITRACK must be a mapping (dict-like object)"
        raise TypeError(msg)
    raw_data = dict(raw)

    sessionize_data = raw_data.pop("sessionize", {})
    if not isinstance(sessionize_data, Mapping):
        msg = "DJANGO_MULTITRACK['sessionize'] must be a mapping (dict-like object)"
        raise TypeError(msg)

    config = MultitrackConfig(
        sessionize=SessionizeConfig(**dict(sessionize_data)),
        **raw_data,
    )
    _validate_multitrack_config(config)
    return config


def _validate_multitrack_config(config: MultitrackConfig) -> None:
    """Validate high-impact configuration values with clear error messages."""
    if not isinstance(config.event_code_length, int) or not 0 < config.event_code_length <= MAX_EVENT_CODE_LENGTH:
        msg = f"DJANGO_MULTITRACK['event_code_length'] must be an integer between 1 and {MAX_EVENT_CODE_LENGTH}"
        raise ValueError(msg)
    if not isinstance(config.sessionize.base_url, str) or not config.sessionize.base_url.strip():
        msg = "DJANGO_MULTITRACK['sessionize']['base_url'] must be a non-empty string"
        raise ValueError(msg)
    if not isinstance(config.sessionize.timeout, (int, float)) or config.sessionize.timeout <= 0:
        msg = "DJANGO_MULTITRACK['sessionize']['timeout'] must be a positive number"
        raise ValueError(msg)
    if not isinstance(config.sessionize.import_timeout, (int, float)) or config.sessionize.import_timeout <= 0:
        msg = "DJANGO_MULTITRACK['sessionize']['import_timeout'] must be a positive number"
        raise ValueError(msg)
    if not isinstance(config.sessionize.atomic, bool):
        msg = "DJANGO_MULTITRACK['sessionize']['atomic'] must be a boolean"
        raise TypeError(msg)
    if not isinstance(config.sessionize.lock_timeout, int) or config.sessionize.lock_timeout <= 0:
        msg = "DJANGO_MULTITRACK['sessionize']['lock_timeout'] must be a positive integer"
        raise ValueError(msg)
    if config.sessionize.lock_timeout < config.sessionize.import_timeout:
        msg = (
            "DJANGO_MULTITRACK['sessionize']['lock_timeout'] must be at least "
            "DJANGO_MULTITRACK['sessionize']['import_timeout'] so the import lock outlives the import"
        )
        raise ValueError(msg)


def _clear_config_cache(*, setting: str, **kwargs: object) -> None:  # noqa: ARG001
    """Clear the cached config when Django settings change during tests."""
    if setting == "DJANGO_MULTITRACK":
        get_config.cache_clear()


setting_changed.connect(_clear_config_cache, dispatch_uid="django_multitrack.settings.clear_config_cache")
