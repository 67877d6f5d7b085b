"""Advisory per-database locking.

Every fetch-and-resolve against a database path runs under an exclusive lock on
a sibling ``<database>.lock`` file, so concurrent processes sharing a pinned
database never interleave writes to the same object store.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import structlog
from filelock import FileLock, Timeout

from sourcebinder.git._internal.constants import LOCK_SUFFIX
from sourcebinder.git.errors import DatabaseLockedError

logger = structlog.get_logger()


def lock_path_for(db_path: Path) -> Path:
    return db_path.with_name(db_path.name + LOCK_SUFFIX)


@contextmanager
def database_lock(db_path: Path, *, timeout: float = -1) -> Iterator[Path]:
    """Hold the exclusive lock for ``db_path`` for the duration of the block.

    Args:
        db_path: Database directory (need not exist yet).
        timeout: Seconds to wait; -1 waits forever.

    Raises:
        DatabaseLockedError: If the lock is not acquired within ``timeout``.
    """
    lock_file = lock_path_for(db_path)
    lock_file.parent.mkdir(parents=True, exist_ok=True)
    lock = FileLock(str(lock_file), timeout=timeout)
    try:
        lock.acquire()
    except Timeout as e:
        raise DatabaseLockedError(str(db_path), timeout) from e

    logger.debug("database locked", database=str(db_path))
    try:
        yield lock_file
    finally:
        lock.release()
        logger.debug("database unlocked", database=str(db_path))
