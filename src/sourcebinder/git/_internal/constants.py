"""Internal pygit2 constants - keeps trivia out of public modules."""

from __future__ import annotations

from pygit2.enums import FileMode

# Tree entry modes
MODE_TREE = FileMode.TREE
MODE_BLOB = FileMode.BLOB
MODE_BLOB_EXECUTABLE = FileMode.BLOB_EXECUTABLE
MODE_LINK = FileMode.LINK
MODE_GITLINK = FileMode.COMMIT

# Permission bits written for extracted blobs
PERM_EXECUTABLE = 0o755
PERM_REGULAR = 0o644

LOCK_SUFFIX = ".lock"
