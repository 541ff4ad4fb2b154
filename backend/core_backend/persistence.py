"""
Bounded persistence calls.

Every service talks to the database inside `bounded_call(timeout)`: one
transaction, a deadline enforced by the database itself, and translation of
driver errors into PersistenceError. Mutations inside the block are a single
transaction, so a timeout or failure leaves nothing half-written.
"""

import logging
import time
from contextlib import contextmanager

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS, DatabaseError, connections, transaction

from .exceptions import PersistenceError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = object()

# How many SQLite virtual machine instructions run between deadline checks.
SQLITE_PROGRESS_INTERVAL = 1000


def resolve_timeout(timeout):
    if timeout is DEFAULT_TIMEOUT:
        return getattr(settings, "PERSISTENCE_TIMEOUT_SECONDS", None)
    return timeout


def _apply_deadline(connection, timeout):
    """Install a per-call deadline and return a callable that removes it."""
    if timeout is None:
        return lambda: None

    if connection.vendor == "postgresql":
        with connection.cursor() as cursor:
            # LOCAL scopes the setting to the current transaction.
            cursor.execute(
                "SET LOCAL statement_timeout = %s", [max(1, int(timeout * 1000))]
            )
        return lambda: None

    if connection.vendor == "sqlite":
        connection.ensure_connection()
        raw = connection.connection
        deadline = time.monotonic() + timeout

        def _expired():
            return 1 if time.monotonic() > deadline else 0

        raw.set_progress_handler(_expired, SQLITE_PROGRESS_INTERVAL)
        return lambda: raw.set_progress_handler(None, 0)

    logger.debug(f"No statement deadline support for vendor {connection.vendor}")
    return lambda: None


@contextmanager
def bounded_call(timeout=DEFAULT_TIMEOUT, using=DEFAULT_DB_ALIAS):
    """
    Run the enclosed ORM calls as one transaction bounded by `timeout` seconds.

    `timeout=None` disables the deadline; the default comes from
    settings.PERSISTENCE_TIMEOUT_SECONDS. A non-positive timeout means the
    caller's deadline has already passed and the store is never touched.
    """
    timeout = resolve_timeout(timeout)
    if timeout is not None and timeout <= 0:
        raise PersistenceError("Deadline expired before the data store was called.")

    connection = connections[using]
    try:
        with transaction.atomic(using=using):
            remove_deadline = _apply_deadline(connection, timeout)
            try:
                yield connection
            finally:
                remove_deadline()
    except DatabaseError as exc:
        logger.error(f"Persistence call failed: {exc}", exc_info=True)
        raise PersistenceError(f"Persistence call failed: {exc}") from exc
