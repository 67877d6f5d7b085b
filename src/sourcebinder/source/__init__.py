"""Source resolution: local directories and remote repositories."""

from sourcebinder.source.destination import (
    EphemeralDestination,
    PathDestination,
    RepositoryDestination,
)
from sourcebinder.source.location import (
    LocalSource,
    RemoteSource,
    SourceLike,
    SourceLocation,
    is_ephemeral,
    open_source,
    resolve_source,
    source_location,
)
from sourcebinder.source.repository import Repository, RepositoryBuilder

__all__ = [
    "EphemeralDestination",
    "LocalSource",
    "PathDestination",
    "RemoteSource",
    "Repository",
    "RepositoryBuilder",
    "RepositoryDestination",
    "SourceLike",
    "SourceLocation",
    "is_ephemeral",
    "open_source",
    "resolve_source",
    "source_location",
]
