"""Where a remote repository is extracted to, and who owns that directory.

``PathDestination`` is caller-owned and never deleted. ``EphemeralDestination``
is system-owned: its directory is created under the temporary root when
allocated and removed when the allocation scope exits, on success or failure.
"""

from __future__ import annotations

import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import assert_never

import structlog

from sourcebinder.errors import ResolutionError

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class PathDestination:
    """Caller-supplied directory that outlives the operation."""

    path: Path

    @property
    def directory(self) -> Path:
        return self.path

    @contextmanager
    def allocate(self) -> Iterator[Path]:
        yield self.path


class EphemeralDestination:
    """Temporary directory named after the remote, deleted when its scope ends."""

    __slots__ = ("prefix", "parent", "_current")

    def __init__(self, prefix: str, parent: Path | None = None) -> None:
        self.prefix = prefix
        self.parent = parent
        self._current: Path | None = None

    def __repr__(self) -> str:
        return f"EphemeralDestination(prefix={self.prefix!r}, current={self._current!r})"

    @property
    def directory(self) -> Path:
        """The allocated directory; only valid inside ``allocate()``."""
        if self._current is None:
            raise ResolutionError(self.prefix, "ephemeral destination is not allocated")
        return self._current

    @contextmanager
    def allocate(self) -> Iterator[Path]:
        if self._current is not None:
            raise ResolutionError(self.prefix, "ephemeral destination is already allocated")
        tmp = tempfile.TemporaryDirectory(prefix=f"{self.prefix}-", dir=self.parent)
        self._current = Path(tmp.name)
        logger.debug("ephemeral destination allocated", path=tmp.name)
        try:
            yield self._current
        finally:
            self._current = None
            tmp.cleanup()
            logger.debug("ephemeral destination removed", path=tmp.name)


RepositoryDestination = PathDestination | EphemeralDestination


def describe_destination(dest: RepositoryDestination) -> str:
    match dest:
        case PathDestination(path=path):
            return str(path)
        case EphemeralDestination():
            return f"<ephemeral {dest.prefix}>"
        case _:
            assert_never(dest)
