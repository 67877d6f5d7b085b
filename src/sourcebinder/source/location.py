"""Where to find the source project: a local directory or a remote repository."""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import assert_never

from sourcebinder.errors import ResolutionError
from sourcebinder.source.destination import EphemeralDestination
from sourcebinder.source.repository import Repository, RepositoryBuilder, looks_like_url


@dataclass(frozen=True, slots=True)
class LocalSource:
    path: Path


@dataclass(frozen=True, slots=True)
class RemoteSource:
    repository: Repository


SourceLocation = LocalSource | RemoteSource
SourceLike = SourceLocation | Repository | RepositoryBuilder | str | os.PathLike[str]


def source_location(value: SourceLike) -> SourceLocation:
    """Coerce ``value`` into a SourceLocation.

    - ``LocalSource`` / ``RemoteSource``: unchanged
    - ``Repository`` / ``RepositoryBuilder``: remote
    - ``str`` that looks like a URL (``scheme://...`` or ``user@host:path``): remote,
      default branch, ephemeral destination
    - any other ``str`` or path: local

    Raises:
        ResolutionError: A URL-like string is malformed.
    """
    match value:
        case LocalSource() | RemoteSource():
            return value
        case Repository():
            return RemoteSource(value)
        case RepositoryBuilder():
            return RemoteSource(value.build())
        case str() if looks_like_url(value):
            return RemoteSource(RepositoryBuilder.new(value).build())
        case _:
            return LocalSource(Path(value))


def is_ephemeral(location: SourceLocation) -> bool:
    """True if the root ``open_source`` yields is removed when its block exits."""
    match location:
        case RemoteSource(repository=Repository(dest=EphemeralDestination())):
            return True
        case LocalSource() | RemoteSource():
            return False
        case _:
            assert_never(location)


def describe_source(location: SourceLocation) -> str:
    match location:
        case LocalSource(path=path):
            return str(path)
        case RemoteSource(repository=repo):
            return f"{repo.remote.url} ({repo.reference})"
        case _:
            assert_never(location)


@contextmanager
def open_source(location: SourceLocation) -> Iterator[Path]:
    """Yield the project root for ``location``.

    Local sources are validated and yielded as-is. Remote sources are checked
    out and extracted; an ephemeral destination is removed when the block exits.

    Raises:
        ResolutionError: Local path missing or not a directory.
        FetchError, CheckoutError, ExtractionError: Remote checkout failed.
    """
    match location:
        case LocalSource(path=path):
            if not path.exists():
                raise ResolutionError(str(path), "path does not exist")
            if not path.is_dir():
                raise ResolutionError(str(path), "path is not a directory")
            yield path
        case RemoteSource(repository=repo):
            with repo.materialize() as root:
                yield root
        case _:
            assert_never(location)


def resolve_source(location: SourceLocation) -> Path:
    """Resolve ``location`` to a directory that outlives this call.

    Only valid for local sources and remote sources with a persistent
    destination; ephemeral destinations need ``open_source``.
    """
    match location:
        case LocalSource():
            with open_source(location) as root:
                return root
        case RemoteSource(repository=Repository(dest=EphemeralDestination())):
            raise ResolutionError(
                describe_source(location),
                "ephemeral destination would be removed on return; use open_source()",
            )
        case RemoteSource():
            with open_source(location) as root:
                return root
        case _:
            assert_never(location)
