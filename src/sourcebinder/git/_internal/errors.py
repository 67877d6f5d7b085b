"""Centralized error mapping for pygit2 exceptions raised while talking to a remote."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager

import pygit2

from sourcebinder.git.errors import AuthRequiredError, NetworkError, ReferenceNotFoundError

_AUTH_MARKERS = (
    "authentication",
    "credential",
    "401",
    "403",
    "permission denied",
)
_MISSING_MARKERS = (
    "couldn't find remote ref",
    "not our ref",
    "no match for id",
    "object not found",
)


class ErrorMapper:
    """Maps pygit2 fetch exceptions to FetchError subclasses."""

    @staticmethod
    @contextmanager
    def guard(url: str, reference: str) -> Iterator[None]:
        """Context manager for consistent exception translation."""
        try:
            yield
        except KeyError as e:
            # libgit2 GIT_ENOTFOUND surfaces as KeyError
            raise ReferenceNotFoundError(url, reference) from e
        except ValueError as e:
            # Malformed refspec: the name cannot exist on any remote
            raise ReferenceNotFoundError(url, reference) from e
        except pygit2.GitError as e:
            msg = str(e).lower()
            if any(marker in msg for marker in _AUTH_MARKERS):
                raise AuthRequiredError(url) from e
            if any(marker in msg for marker in _MISSING_MARKERS):
                raise ReferenceNotFoundError(url, reference) from e
            raise NetworkError(url, str(e)) from e


def fetch_operation(url: str, reference: str) -> AbstractContextManager[None]:
    """Shorthand for ``ErrorMapper.guard`` at call sites."""
    return ErrorMapper.guard(url, reference)
