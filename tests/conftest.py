"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages, and
provides a throwaway bare repository that tests use as a fetchable remote.
"""

from __future__ import annotations

import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

import pygit2
import pytest
from pygit2.enums import FileMode, ObjectType

# Insert local src directory at the beginning of sys.path
# This ensures that the local sourcebinder package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

SIG = pygit2.Signature("Test User", "test@example.com")


@dataclass(frozen=True)
class Executable:
    data: bytes


@dataclass(frozen=True)
class Symlink:
    target: str


@dataclass(frozen=True)
class Gitlink:
    oid: pygit2.Oid


# Values: bytes, Executable, Symlink, Gitlink, or a nested mapping for a directory
TreeSpec = Mapping[str, object]


def build_tree(repo: pygit2.Repository, entries: TreeSpec) -> pygit2.Oid:
    """Write a tree from a nested mapping of names to contents."""
    builder = repo.TreeBuilder()
    for name, value in entries.items():
        match value:
            case bytes():
                builder.insert(name, repo.create_blob(value), FileMode.BLOB)
            case Executable(data=data):
                builder.insert(name, repo.create_blob(data), FileMode.BLOB_EXECUTABLE)
            case Symlink(target=target):
                builder.insert(name, repo.create_blob(target.encode()), FileMode.LINK)
            case Gitlink(oid=oid):
                builder.insert(name, oid, FileMode.COMMIT)
            case _:
                builder.insert(name, build_tree(repo, value), FileMode.TREE)
    return builder.write()


@dataclass
class RemoteRepo:
    """A bare repository reachable through a file:// URL."""

    path: Path
    repo: pygit2.Repository
    commits: dict[str, str] = field(default_factory=dict)

    @property
    def url(self) -> str:
        return self.path.as_uri()

    def commit(
        self,
        branch: str,
        files: TreeSpec,
        message: str,
        parents: list[str] | None = None,
    ) -> str:
        """Create a commit on ``branch`` and return its hex id."""
        tree = build_tree(self.repo, files)
        parent_ids = [pygit2.Oid(hex=p) for p in parents or []]
        oid = self.repo.create_commit(f"refs/heads/{branch}", SIG, SIG, message, tree, parent_ids)
        return str(oid)

    def lightweight_tag(self, name: str, target: str) -> None:
        self.repo.references.create(f"refs/tags/{name}", pygit2.Oid(hex=target))

    def annotated_tag(self, name: str, target: str) -> None:
        target_id = pygit2.Oid(hex=target)
        self.repo.create_tag(name, target_id, ObjectType.COMMIT, SIG, f"Release {name}")


INITIAL_FILES: dict[str, object] = {
    "README.md": b"# Project\n",
    "link-to-readme": Symlink("README.md"),
    "bin": {"run.sh": Executable(b"#!/bin/sh\necho run\n")},
    "docs": {"guide.md": b"guide\n"},
}


@pytest.fixture
def remote_repo(tmp_path: Path) -> RemoteRepo:
    """Bare remote with history.

    - main: initial -> second (HEAD points at main)
    - feature: initial -> feature commit
    - release (branch) -> second, release (tag) -> initial: ambiguous name
    - with-submodule: initial tree plus a gitlink entry
    - tags v1.0 (lightweight, initial), v2.0 (annotated, second)
    """
    path = tmp_path / "remote" / "project.git"
    repo = pygit2.init_repository(str(path), bare=True, initial_head="main")
    remote = RemoteRepo(path=path, repo=repo)

    initial = remote.commit("main", INITIAL_FILES, "Initial commit")
    second = remote.commit(
        "main",
        {**INITIAL_FILES, "README.md": b"# Project v2\n", "src": {"lib.txt": b"lib\n"}},
        "Second commit",
        [initial],
    )
    feature = remote.commit(
        "feature", {**INITIAL_FILES, "feature.txt": b"feature\n"}, "Feature", [initial]
    )
    submodule = remote.commit(
        "with-submodule",
        {**INITIAL_FILES, "vendor": {"dep": Gitlink(pygit2.Oid(hex=initial))}},
        "Add submodule",
        [initial],
    )
    repo.references.create("refs/heads/release", pygit2.Oid(hex=second))
    remote.lightweight_tag("release", initial)
    remote.lightweight_tag("v1.0", initial)
    remote.annotated_tag("v2.0", second)

    remote.commits.update(initial=initial, second=second, feature=feature, submodule=submodule)
    return remote


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "cache" / "project-db"
