"""Internal components for git database access - not part of public API."""

from sourcebinder.git._internal.errors import ErrorMapper, fetch_operation
from sourcebinder.git._internal.locking import database_lock, lock_path_for

__all__ = [
    "ErrorMapper",
    "database_lock",
    "fetch_operation",
    "lock_path_for",
]
