"""Per-event locking for schedule imports.

Two imports of the same event must not interleave their wipe and rebuild
steps.  :func:`event_import_lock` takes a non-blocking lock keyed by event:
a PostgreSQL advisory lock when the default database is PostgreSQL
(transaction-level inside an atomic block, session-level otherwise),
otherwise an entry in the default Django cache created with the atomic
``cache.add``.
"""

from __future__ import annotations

import contextlib
import logging
from typing import TYPE_CHECKING
from uuid import uuid4

from django.core.cache import cache
from django.db import connection

from django_multitrack.sessionize.exceptions import ImportInProgressError
from django_multitrack.settings import get_config

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

# First key of the two-key advisory lock, reserved for schedule imports.
_ADVISORY_NAMESPACE = 0x4D54
_INT4_MAX = 2**31 - 1


def _cache_key(event_id: int) -> str:
    return f"django_multitrack:sessionize-import:{event_id}"


def _try_advisory_lock(function: str, event_id: int, key: int) -> None:
    with connection.cursor() as cursor:
        cursor.execute(f"SELECT {function}(%s, %s)", [_ADVISORY_NAMESPACE, key])
        (acquired,) = cursor.fetchone()
    if not acquired:
        msg = f"A schedule import is already running for event {event_id}"
        raise ImportInProgressError(msg)


@contextlib.contextmanager
def _advisory_lock(event_id: int) -> Iterator[None]:
    key = event_id % _INT4_MAX
    if connection.in_atomic_block:
        # Released by the enclosing transaction on commit or rollback.
        _try_advisory_lock("pg_try_advisory_xact_lock", event_id, key)
        yield
        return

    _try_advisory_lock("pg_try_advisory_lock", event_id, key)
    try:
        yield
    finally:
        with connection.cursor() as cursor:
            cursor.execute("SELECT pg_advisory_unlock(%s, %s)", [_ADVISORY_NAMESPACE, key])


@contextlib.contextmanager
def _cache_lock(event_id: int) -> Iterator[None]:
    key = _cache_key(event_id)
    token = uuid4().hex
    if not cache.add(key, token, timeout=get_config().sessionize.lock_timeout):
        msg = f"A schedule import is already running for event {event_id}"
        raise ImportInProgressError(msg)
    try:
        yield
    finally:
        if cache.get(key) == token:
            cache.delete(key)


@contextlib.contextmanager
def event_import_lock(event_id: int) -> Iterator[None]:
    """Hold the import lock for *event_id* for the duration of the block.

    The lock is not re-entrant and never waits.

    Raises:
        ImportInProgressError: If another import already holds the lock.
    """
    lock = _advisory_lock if connection.vendor == "postgresql" else _cache_lock
    with lock(event_id):
        logger.debug("Acquired import lock for event %s", event_id)
        yield
    logger.debug("Released import lock for event %s", event_id)
