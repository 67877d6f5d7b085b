"""Remote handle: maintains a reusable on-disk object database per remote URL.

A database is a bare repository with no configured remotes. Every fetch goes
through an anonymous remote built from the URL, so any number of handles with
the same URL can share one database. Fetching only ever adds objects and
moves tracking refs; previously cached objects are never discarded.
"""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import assert_never

import pygit2
import structlog

from sourcebinder.git._internal.errors import fetch_operation
from sourcebinder.git._internal.locking import database_lock
from sourcebinder.git.credentials import FetchCallbacks
from sourcebinder.git.database import GitDatabase, has_reference
from sourcebinder.git.errors import (
    AuthRequiredError,
    FetchError,
    NotADatabaseError,
    ObjectNotFoundError,
    ReferenceNotFoundError,
)
from sourcebinder.git.reference import (
    ALL_REFSPECS,
    Branch,
    DefaultBranch,
    GitReference,
    Rev,
    Tag,
    is_full_oid,
    refspecs,
    resolution_query,
)

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class FetchOutcome:
    """Transfer statistics for one fetch; ``skipped`` means no network I/O happened."""

    skipped: bool
    received_objects: int = 0
    received_bytes: int = 0
    indexed_objects: int = 0
    local_objects: int = 0

    @classmethod
    def from_pygit2(cls, stats: pygit2.remotes.TransferProgress) -> FetchOutcome:
        return cls(
            skipped=False,
            received_objects=stats.received_objects,
            received_bytes=stats.received_bytes,
            indexed_objects=stats.indexed_objects,
            local_objects=stats.local_objects,
        )


@dataclass(frozen=True, slots=True)
class GitRemote:
    """A remote repository location. Equality and hashing use the URL only."""

    url: str
    lock_timeout: float = field(default=-1, compare=False)
    use_credential_helper: bool = field(default=True, compare=False)

    @property
    def name(self) -> str:
        """Last path segment of the URL, for naming temporary directories."""
        return url_last_segment(self.url)

    # =========================================================================
    # Database Cache
    # =========================================================================

    def open_database(self, db_path: Path) -> pygit2.Repository:
        """Open the database at ``db_path``, creating an empty one if absent.

        Raises:
            NotADatabaseError: ``db_path`` holds something other than a git database.
        """
        if db_path.exists() and any(db_path.iterdir()):
            try:
                return pygit2.Repository(str(db_path))
            except pygit2.GitError as e:
                raise NotADatabaseError(str(db_path)) from e

        db_path.mkdir(parents=True, exist_ok=True)
        logger.debug("database created", database=str(db_path), url=self.url)
        return pygit2.init_repository(str(db_path), bare=True)

    def fetch(
        self,
        db_path: Path,
        reference: GitReference,
        *,
        locked_rev: str | None = None,
    ) -> FetchOutcome:
        """Ensure the database at ``db_path`` can resolve ``reference``.

        Holds the database lock for the whole fetch.

        Raises:
            NetworkError, AuthRequiredError, ReferenceNotFoundError: see FetchError.
            ObjectNotFoundError: ``locked_rev`` is still absent after fetching.
        """
        with database_lock(db_path, timeout=self.lock_timeout):
            repo = self.open_database(db_path)
            return self._fetch_into(repo, db_path, reference, locked_rev)

    def _fetch_into(
        self,
        repo: pygit2.Repository,
        db_path: Path,
        reference: GitReference,
        locked_rev: str | None,
    ) -> FetchOutcome:
        log = logger.bind(url=self.url, reference=str(reference), database=str(db_path))

        if self._is_satisfied(repo, reference, locked_rev):
            log.info("fetch skipped", reason="already in database")
            return FetchOutcome(skipped=True)

        outcome = self._fetch_with_fallback(repo, reference)
        log.info(
            "fetch complete",
            received_objects=outcome.received_objects,
            received_bytes=outcome.received_bytes,
            local_objects=outcome.local_objects,
        )

        self._verify_fetched(repo, reference)
        if locked_rev is not None and locked_rev not in repo:
            raise ObjectNotFoundError(locked_rev)
        return outcome

    def _fetch_with_fallback(
        self, repo: pygit2.Repository, reference: GitReference
    ) -> FetchOutcome:
        by_oid = isinstance(reference, Rev) and is_full_oid(reference.rev)
        try:
            outcome = self._transfer(repo, reference, refspecs(reference))
        except AuthRequiredError:
            raise
        except FetchError:
            # Servers may refuse to serve a bare object id; fetch everything instead
            if not by_oid:
                raise
            logger.debug("oid fetch refused, fetching all refs", url=self.url)
            return self._transfer(repo, reference, list(ALL_REFSPECS))

        if by_oid and resolution_query(reference) not in repo:
            logger.debug("oid not advertised, fetching all refs", url=self.url)
            return self._transfer(repo, reference, list(ALL_REFSPECS))
        return outcome

    def _transfer(
        self, repo: pygit2.Repository, reference: GitReference, specs: list[str]
    ) -> FetchOutcome:
        """The only place that talks to the network."""
        remote = repo.remotes.create_anonymous(self.url)
        callbacks = FetchCallbacks(use_credential_helper=self.use_credential_helper)
        with fetch_operation(self.url, str(reference)):
            stats = remote.fetch(refspecs=specs, callbacks=callbacks)
        return FetchOutcome.from_pygit2(stats)

    @staticmethod
    def _is_satisfied(
        repo: pygit2.Repository, reference: GitReference, locked_rev: str | None
    ) -> bool:
        if locked_rev is not None and locked_rev in repo:
            return True
        match reference:
            case Rev(rev=rev) if is_full_oid(rev):
                return rev.lower() in repo
            case Tag():
                # Tags are treated as immutable once cached
                return has_reference(repo, resolution_query(reference))
            case Branch() | Rev() | DefaultBranch():
                # Branches move; always ask the remote
                return False
            case _:
                assert_never(reference)

    def _verify_fetched(self, repo: pygit2.Repository, reference: GitReference) -> None:
        match reference:
            case Branch() | Tag() | DefaultBranch():
                if not has_reference(repo, resolution_query(reference)):
                    raise ReferenceNotFoundError(self.url, str(reference))
            case Rev():
                pass
            case _:
                assert_never(reference)

    # =========================================================================
    # Checkout Resolver
    # =========================================================================

    def checkout(
        self,
        db_path: Path,
        reference: GitReference,
        locked_rev: str | None = None,
    ) -> tuple[GitDatabase, pygit2.Oid]:
        """Fetch ``reference`` into ``db_path`` if needed and resolve it to one commit.

        Args:
            db_path: Database directory; created when absent.
            reference: What to resolve.
            locked_rev: Known commit id; skips the fetch when already cached and
                is returned instead of resolving ``reference``.

        Returns:
            (database handle, commit id)

        Raises:
            FetchError: Propagated from the fetch.
            AmbiguousReferenceError, ObjectNotFoundError: Resolution failed.
        """
        with database_lock(db_path, timeout=self.lock_timeout):
            repo = self.open_database(db_path)
            self._fetch_into(repo, db_path, reference, locked_rev)
            database = GitDatabase(self.url, db_path, repo)
            if locked_rev is not None:
                oid = pygit2.Oid(hex=locked_rev)
            else:
                oid = database.resolve(reference)

        logger.info("checkout resolved", url=self.url, reference=str(reference), oid=str(oid))
        return database, oid


def url_last_segment(url: str) -> str:
    """``https://github.com/org/repo.git/`` -> ``repo.git``; scp-style URLs too."""
    segment = re.split(r"[/:]", url.rstrip("/"))[-1]
    return segment or "repository"


def database_path_for(url: str, root: Path) -> Path:
    """Stable database directory for ``url`` under ``root``.

    Keyed by URL identity so every handle for the same remote reuses one cache.
    """
    digest = hashlib.sha256(url.encode()).hexdigest()[:16]
    return root / f"{url_last_segment(url)}-{digest}"
