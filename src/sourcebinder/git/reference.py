"""Symbolic references and how they map onto refspecs and database refs.

A reference is one of ``Branch``, ``Tag``, ``Rev`` or ``DefaultBranch``. The
functions here are pure: they tell the remote what to fetch and the database
where to look afterwards, without touching disk or network.

``DefaultBranch`` follows the remote's ``HEAD`` symbolic ref, i.e. whatever
branch the remote server advertises as its default.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import assert_never

REMOTE_PREFIX = "refs/remotes/origin/"
# Tags keep their own namespace; no branch refspec maps into it
TAG_PREFIX = "refs/tags/"
REMOTE_HEAD = "refs/remotes/origin/HEAD"
COMMIT_PREFIX = "refs/commit/"

# SHA-1 and SHA-256 object ids
_FULL_OID = re.compile(r"^(?:[0-9a-f]{40}|[0-9a-f]{64})$")

ALL_REFSPECS = (
    f"+refs/heads/*:{REMOTE_PREFIX}*",
    f"+{TAG_PREFIX}*:{TAG_PREFIX}*",
    f"+HEAD:{REMOTE_HEAD}",
)


@dataclass(frozen=True, slots=True)
class Branch:
    name: str

    def __str__(self) -> str:
        return f"branch {self.name!r}"


@dataclass(frozen=True, slots=True)
class Tag:
    name: str

    def __str__(self) -> str:
        return f"tag {self.name!r}"


@dataclass(frozen=True, slots=True)
class Rev:
    rev: str

    def __str__(self) -> str:
        return f"revision {self.rev!r}"


@dataclass(frozen=True, slots=True)
class DefaultBranch:
    def __str__(self) -> str:
        return "default branch (HEAD)"


GitReference = Branch | Tag | Rev | DefaultBranch


def is_full_oid(rev: str) -> bool:
    """True if ``rev`` is a complete hex object id rather than a revision expression."""
    return bool(_FULL_OID.match(rev.lower()))


def refspecs(reference: GitReference) -> list[str]:
    """Refspecs to fetch so that ``reference`` becomes resolvable locally."""
    match reference:
        case Branch(name=name):
            return [f"+refs/heads/{name}:{REMOTE_PREFIX}{name}"]
        case Tag(name=name):
            return [f"+{TAG_PREFIX}{name}:{TAG_PREFIX}{name}"]
        case Rev(rev=rev) if is_full_oid(rev):
            return [f"+{rev.lower()}:{COMMIT_PREFIX}{rev.lower()}"]
        case Rev():
            # Short hashes and revision expressions can point anywhere
            return list(ALL_REFSPECS)
        case DefaultBranch():
            return [f"+HEAD:{REMOTE_HEAD}"]
        case _:
            assert_never(reference)


def resolution_query(reference: GitReference) -> str:
    """Ref name (or revision expression) to resolve in the database after fetching."""
    match reference:
        case Branch(name=name):
            return f"{REMOTE_PREFIX}{name}"
        case Tag(name=name):
            return f"{TAG_PREFIX}{name}"
        case Rev(rev=rev):
            return rev.lower() if is_full_oid(rev) else rev
        case DefaultBranch():
            return REMOTE_HEAD
        case _:
            assert_never(reference)


def ambiguity_candidates(reference: GitReference) -> list[str]:
    """Ref names that could all match ``reference``; more than one distinct target is ambiguous."""
    match reference:
        case Rev(rev=rev) if not is_full_oid(rev):
            return [f"{REMOTE_PREFIX}{rev}", f"{TAG_PREFIX}{rev}"]
        case Branch() | Tag() | Rev() | DefaultBranch():
            return []
        case _:
            assert_never(reference)
