"""Remote repository description and its immutable builder."""

from __future__ import annotations

import re
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, replace
from pathlib import Path
from urllib.parse import urlparse

import structlog

from sourcebinder.errors import ResolutionError
from sourcebinder.git import (
    Branch,
    DefaultBranch,
    ExtractionSummary,
    GitReference,
    GitRemote,
    Rev,
    Tag,
)
from sourcebinder.source.destination import (
    EphemeralDestination,
    PathDestination,
    RepositoryDestination,
    describe_destination,
)

logger = structlog.get_logger()

_SUPPORTED_SCHEMES = frozenset({"http", "https", "ssh", "git", "file"})
# user@host:path/to/repo.git
_SCP_LIKE = re.compile(r"^[\w.-]+@[\w.-]+:[^/].*$")


def validate_url(url: str) -> str:
    """Return ``url`` unchanged if it names a fetchable remote.

    Raises:
        ResolutionError: Malformed or unsupported URL.
    """
    if _SCP_LIKE.match(url):
        return url
    parsed = urlparse(url)
    if parsed.scheme not in _SUPPORTED_SCHEMES:
        raise ResolutionError(url, f"unsupported URL scheme {parsed.scheme!r}")
    if parsed.scheme == "file":
        if not parsed.path:
            raise ResolutionError(url, "file URL has no path")
    elif not parsed.netloc:
        raise ResolutionError(url, "URL has no host")
    return url


def looks_like_url(value: str) -> bool:
    return "://" in value or bool(_SCP_LIKE.match(value))


@dataclass(frozen=True, slots=True)
class Repository:
    """A remote repository to check out: what, at which reference, where to."""

    remote: GitRemote
    reference: GitReference
    db_path: Path | None
    dest: RepositoryDestination

    def checkout(self, into: Path | None = None) -> ExtractionSummary:
        """Fetch the reference and extract its tree into ``into`` (default: ``dest``).

        Without a pinned ``db_path`` the database lives in a temporary
        directory that is removed once this call returns or raises.
        """
        target = into if into is not None else self.dest.directory
        if self.db_path is not None:
            return self._checkout_with(self.db_path, target)

        with tempfile.TemporaryDirectory(prefix="sourcebinder-db-") as tmp:
            return self._checkout_with(Path(tmp) / self.remote.name, target)

    def _checkout_with(self, db_path: Path, target: Path) -> ExtractionSummary:
        database, oid = self.remote.checkout(db_path, self.reference)
        try:
            return database.extract(oid, target)
        finally:
            database.close()

    @contextmanager
    def materialize(self) -> Iterator[Path]:
        """Allocate the destination, check out into it, and yield its directory.

        Ephemeral destinations are removed when the block exits.
        """
        logger.info(
            "materializing repository",
            url=self.remote.url,
            reference=str(self.reference),
            dest=describe_destination(self.dest),
        )
        with self.dest.allocate() as directory:
            self.checkout(directory)
            yield directory


@dataclass(frozen=True, slots=True)
class RepositoryBuilder:
    """Immutable builder: every setter returns a new builder.

    Reference setters are mutually exclusive; the last one called wins.
    """

    remote: GitRemote
    reference: GitReference = DefaultBranch()
    dest_path: Path | None = None
    db_path: Path | None = None

    @classmethod
    def new(
        cls,
        url: str,
        *,
        lock_timeout: float = -1,
        use_credential_helper: bool = True,
    ) -> RepositoryBuilder:
        """Start a builder for ``url``.

        Raises:
            ResolutionError: Malformed URL.
        """
        remote = GitRemote(
            validate_url(url),
            lock_timeout=lock_timeout,
            use_credential_helper=use_credential_helper,
        )
        return cls(remote)

    def branch(self, name: str) -> RepositoryBuilder:
        """Check out the tip of branch ``name``."""
        return replace(self, reference=Branch(name))

    def tag(self, name: str) -> RepositoryBuilder:
        """Check out tag ``name``."""
        return replace(self, reference=Tag(name))

    def rev(self, rev: str) -> RepositoryBuilder:
        """Check out a specific commit (full or abbreviated id, or revision expression)."""
        return replace(self, reference=Rev(rev))

    def dest(self, path: str | Path) -> RepositoryBuilder:
        """Extract into a persistent, caller-owned directory."""
        return replace(self, dest_path=Path(path))

    def database(self, path: str | Path) -> RepositoryBuilder:
        """Pin the git database to ``path`` so it is reused across checkouts.

        Without this a temporary database is used and removed after each checkout.
        """
        return replace(self, db_path=Path(path))

    def build(self) -> Repository:
        """Assemble the repository description. Performs no disk or network I/O."""
        dest: RepositoryDestination
        if self.dest_path is not None:
            dest = PathDestination(self.dest_path)
        else:
            dest = EphemeralDestination(self.remote.name)
        return Repository(self.remote, self.reference, self.db_path, dest)
