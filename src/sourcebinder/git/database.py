"""Bound database handle: resolves references and extracts trees as plain files."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import pygit2
import structlog

from sourcebinder.git._internal.constants import (
    MODE_BLOB_EXECUTABLE,
    MODE_GITLINK,
    MODE_LINK,
    MODE_TREE,
    PERM_EXECUTABLE,
    PERM_REGULAR,
)
from sourcebinder.git.errors import (
    AmbiguousReferenceError,
    ExtractionError,
    ExtractionIOError,
    IdentifierNotInDatabaseError,
    ObjectNotFoundError,
)
from sourcebinder.git.reference import GitReference, ambiguity_candidates, resolution_query

logger = structlog.get_logger()


@dataclass(slots=True)
class ExtractionSummary:
    """What one ``extract`` call wrote into its destination."""

    oid: str
    destination: Path
    files: int = 0
    links: int = 0
    skipped_submodules: list[str] = field(default_factory=list)


class GitDatabase:
    """Handle bound to one on-disk object database fetched from ``url``."""

    def __init__(self, url: str, path: Path, repo: pygit2.Repository) -> None:
        self._url = url
        self._path = path
        self._repo = repo

    def __repr__(self) -> str:
        return f"GitDatabase(url={self._url!r}, path={str(self._path)!r})"

    @property
    def url(self) -> str:
        return self._url

    @property
    def path(self) -> Path:
        return self._path

    @property
    def repo(self) -> pygit2.Repository:
        """
        Direct access to the underlying pygit2 Repository.

        Escape hatch for advanced consumers; bypasses error mapping.
        """
        return self._repo

    def close(self) -> None:
        """Release file handles on the database so its directory can be removed."""
        self._repo.free()

    def contains(self, oid: pygit2.Oid | str) -> bool:
        """True if the object is present in this database."""
        try:
            return _as_oid(oid) in self._repo
        except ValueError:
            return False

    # =========================================================================
    # Resolution
    # =========================================================================

    def resolve(self, reference: GitReference) -> pygit2.Oid:
        """Resolve ``reference`` to exactly one commit id within this database.

        Raises:
            AmbiguousReferenceError: More than one candidate commit.
            ObjectNotFoundError: Nothing in the database matches.
        """
        targets: dict[str, pygit2.Oid] = {}
        for refname in ambiguity_candidates(reference):
            if has_reference(self._repo, refname):
                targets[refname] = self._peel_commit(refname, reference).id
        if len(set(targets.values())) > 1:
            raise AmbiguousReferenceError(str(reference), sorted(targets))
        if targets:
            return next(iter(targets.values()))

        return self._peel_commit(resolution_query(reference), reference).id

    def _peel_commit(self, spec: str, reference: GitReference) -> pygit2.Commit:
        try:
            obj = self._repo.revparse_single(spec)
        except KeyError as e:
            raise ObjectNotFoundError(str(reference)) from e
        except ValueError as e:
            # libgit2 GIT_EAMBIGUOUS (short hash prefix) surfaces as ValueError
            if "ambiguous" in str(e).lower():
                raise AmbiguousReferenceError(str(reference), [spec]) from e
            raise ObjectNotFoundError(str(reference)) from e
        except pygit2.GitError as e:
            raise ObjectNotFoundError(str(reference)) from e

        try:
            return obj.peel(pygit2.Commit)
        except (ValueError, pygit2.GitError) as e:
            raise ObjectNotFoundError(f"{reference} (not a commit)") from e

    # =========================================================================
    # Extraction
    # =========================================================================

    def extract(self, oid: pygit2.Oid | str, destination: Path) -> ExtractionSummary:
        """Write every file of the tree at ``oid`` into ``destination``.

        Extraction is additive: files in ``destination`` that are not part of
        the tree are left in place, files that are part of it are overwritten.
        No ``.git`` directory or other history metadata is written. Submodule
        entries are skipped.

        Raises:
            IdentifierNotInDatabaseError: ``oid`` is not in this database.
            ExtractionIOError: Writing to ``destination`` failed.
        """
        if not self.contains(oid):
            raise IdentifierNotInDatabaseError(str(oid), str(self._path))

        obj = self._repo[_as_oid(oid)]
        try:
            tree = obj.peel(pygit2.Tree)
        except (ValueError, pygit2.GitError) as e:
            raise ExtractionError(f"Object {oid} does not name a tree") from e

        summary = ExtractionSummary(oid=str(obj.id), destination=destination)
        try:
            destination.mkdir(parents=True, exist_ok=True)
            self._write_tree(tree, destination, "", summary)
        except OSError as e:
            raise ExtractionIOError(str(e.filename or destination), e.strerror or str(e)) from e

        logger.info(
            "tree extracted",
            oid=summary.oid,
            destination=str(destination),
            files=summary.files,
            links=summary.links,
            skipped_submodules=len(summary.skipped_submodules),
        )
        return summary

    def _write_tree(
        self, tree: pygit2.Tree, directory: Path, prefix: str, summary: ExtractionSummary
    ) -> None:
        for entry in tree:
            name = entry.name
            if not name:
                raise ExtractionError(f"Tree entry {entry.id} under {directory} has no name")
            target = directory / name
            rel = f"{prefix}{name}"
            mode = entry.filemode

            if mode == MODE_TREE:
                if target.is_symlink() or (target.exists() and not target.is_dir()):
                    raise ExtractionIOError(str(target), "exists and is not a directory")
                target.mkdir(exist_ok=True)
                self._write_tree(self._repo[entry.id], target, f"{rel}/", summary)
            elif mode == MODE_GITLINK:
                logger.debug("submodule skipped", path=rel)
                summary.skipped_submodules.append(rel)
            elif mode == MODE_LINK:
                _clear_file_slot(target)
                os.symlink(os.fsdecode(self._repo[entry.id].data), target)
                summary.links += 1
            else:
                _clear_file_slot(target)
                target.write_bytes(self._repo[entry.id].data)
                target.chmod(PERM_EXECUTABLE if mode == MODE_BLOB_EXECUTABLE else PERM_REGULAR)
                summary.files += 1


def _clear_file_slot(target: Path) -> None:
    """Free ``target`` for a new file or link; directories are never replaced."""
    if target.is_symlink() or target.is_file():
        target.unlink()
    elif target.exists():
        raise ExtractionIOError(str(target), "exists and is not a file")


def has_reference(repo: pygit2.Repository, refname: str) -> bool:
    """True if ``refname`` exists; names that cannot be refs at all are simply absent."""
    try:
        return refname in repo.references
    except ValueError:
        return False


def _as_oid(oid: pygit2.Oid | str) -> pygit2.Oid:
    if isinstance(oid, pygit2.Oid):
        return oid
    return pygit2.Oid(hex=oid)
