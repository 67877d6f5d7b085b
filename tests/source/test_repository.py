"""Tests for source/repository.py and source/destination.py."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from sourcebinder.errors import ResolutionError
from sourcebinder.git import Branch, DefaultBranch, ReferenceNotFoundError, Rev, Tag
from sourcebinder.source import (
    EphemeralDestination,
    PathDestination,
    RepositoryBuilder,
)
from sourcebinder.source.repository import looks_like_url, validate_url

if TYPE_CHECKING:
    from tests.conftest import RemoteRepo

URL = "https://example.com/org/project.git"


@pytest.fixture
def temp_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirect the system temporary directory so leftovers can be inspected."""
    root = tmp_path / "tmp"
    root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(root))
    return root


class TestRepositoryBuilder:
    def test_defaults(self) -> None:
        repo = RepositoryBuilder.new(URL).build()

        assert repo.remote.url == URL
        assert repo.reference == DefaultBranch()
        assert repo.db_path is None
        assert isinstance(repo.dest, EphemeralDestination)
        assert repo.dest.prefix == "project.git"

    def test_last_reference_wins(self) -> None:
        builder = RepositoryBuilder.new(URL)

        assert builder.branch("a").tag("b").build().reference == Tag("b")
        assert builder.tag("b").branch("a").build().reference == Branch("a")
        assert builder.branch("a").rev("abc123").build().reference == Rev("abc123")

    def test_setters_return_new_builders(self) -> None:
        base = RepositoryBuilder.new(URL)
        derived = base.branch("dev").dest("/tmp/out").database("/tmp/db")

        assert base.reference == DefaultBranch()
        assert base.dest_path is None
        assert base.db_path is None
        assert derived.reference == Branch("dev")

    def test_build_performs_no_io(self, tmp_path: Path) -> None:
        dest = tmp_path / "dest"
        db = tmp_path / "db"

        repo = RepositoryBuilder.new(URL).dest(dest).database(db).build()

        assert repo.dest == PathDestination(dest)
        assert repo.db_path == db
        assert not dest.exists()
        assert not db.exists()

    def test_options_reach_remote(self) -> None:
        repo = RepositoryBuilder.new(URL, lock_timeout=3, use_credential_helper=False).build()
        assert repo.remote.lock_timeout == 3
        assert repo.remote.use_credential_helper is False

    @pytest.mark.parametrize("url", ["ftp://example.com/repo.git", "not a url", "https://"])
    def test_malformed_url(self, url: str) -> None:
        with pytest.raises(ResolutionError):
            RepositoryBuilder.new(url)


class TestUrlValidation:
    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/org/repo.git",
            "ssh://git@host/repo.git",
            "git://host/repo",
            "file:///srv/repo.git",
            "git@github.com:org/repo.git",
        ],
    )
    def test_accepted(self, url: str) -> None:
        assert validate_url(url) == url

    def test_looks_like_url(self) -> None:
        assert looks_like_url("https://host/repo")
        assert looks_like_url("git@host:repo.git")
        assert not looks_like_url("./project")
        assert not looks_like_url("/abs/path")


class TestRepositoryCheckout:
    def test_persistent_destination_survives(
        self, remote_repo: RemoteRepo, tmp_path: Path, temp_root: Path
    ) -> None:
        dest = tmp_path / "checkout"
        repo = RepositoryBuilder.new(remote_repo.url).tag("v1.0").dest(dest).build()

        summary = repo.checkout()

        assert summary.oid == remote_repo.commits["initial"]
        assert (dest / "README.md").read_bytes() == b"# Project\n"
        # Temporary database removed, destination kept
        assert list(temp_root.iterdir()) == []

    def test_pinned_database_reused(self, remote_repo: RemoteRepo, tmp_path: Path) -> None:
        db = tmp_path / "db"
        builder = RepositoryBuilder.new(remote_repo.url).tag("v2.0").database(db)

        first = builder.dest(tmp_path / "a").build().checkout()
        second = builder.dest(tmp_path / "b").build().checkout()

        assert first.oid == second.oid == remote_repo.commits["second"]
        assert (db / "HEAD").exists()

    def test_checkout_into_override(self, remote_repo: RemoteRepo, tmp_path: Path) -> None:
        builder = RepositoryBuilder.new(remote_repo.url).branch("feature")
        repo = builder.dest(tmp_path / "a").build()

        repo.checkout(tmp_path / "other")

        assert (tmp_path / "other" / "feature.txt").exists()
        assert not (tmp_path / "a").exists()


class TestMaterialize:
    def test_ephemeral_removed_after_success(
        self, remote_repo: RemoteRepo, temp_root: Path
    ) -> None:
        repo = RepositoryBuilder.new(remote_repo.url).build()

        with repo.materialize() as root:
            assert (root / "src" / "lib.txt").exists()
            assert root.parent == temp_root
            assert root.name.startswith("project.git-")

        assert not root.exists()
        assert list(temp_root.iterdir()) == []

    def test_ephemeral_removed_when_block_raises(
        self, remote_repo: RemoteRepo, temp_root: Path
    ) -> None:
        repo = RepositoryBuilder.new(remote_repo.url).build()

        with pytest.raises(RuntimeError), repo.materialize() as root:
            raise RuntimeError("pipeline failed")

        assert not root.exists()
        assert list(temp_root.iterdir()) == []

    def test_ephemeral_removed_when_checkout_fails(
        self, remote_repo: RemoteRepo, temp_root: Path
    ) -> None:
        repo = RepositoryBuilder.new(remote_repo.url).branch("missing").build()

        with pytest.raises(ReferenceNotFoundError), repo.materialize():
            pass

        assert list(temp_root.iterdir()) == []

    def test_persistent_destination_kept(self, remote_repo: RemoteRepo, tmp_path: Path) -> None:
        dest = tmp_path / "kept"
        repo = RepositoryBuilder.new(remote_repo.url).dest(dest).build()

        with repo.materialize() as root:
            assert root == dest

        assert (dest / "README.md").exists()


class TestEphemeralDestination:
    def test_directory_only_valid_while_allocated(self, temp_root: Path) -> None:
        dest = EphemeralDestination("repo")

        with pytest.raises(ResolutionError):
            _ = dest.directory

        with dest.allocate() as directory:
            assert dest.directory == directory
            assert directory.is_dir()

        with pytest.raises(ResolutionError):
            _ = dest.directory

    def test_double_allocation_rejected(self, temp_root: Path) -> None:
        dest = EphemeralDestination("repo")
        with dest.allocate(), pytest.raises(ResolutionError), dest.allocate():
            pass

    def test_custom_parent(self, tmp_path: Path) -> None:
        dest = EphemeralDestination("repo", parent=tmp_path)
        with dest.allocate() as directory:
            assert directory.parent == tmp_path
        assert list(tmp_path.iterdir()) == []


class TestPathDestination:
    def test_allocate_yields_path_without_creating_it(self, tmp_path: Path) -> None:
        dest = PathDestination(tmp_path / "nested" / "out")

        with dest.allocate() as directory:
            assert directory == tmp_path / "nested" / "out"
            assert not directory.exists()

    def test_checkout_creates_missing_parents(
        self, remote_repo: RemoteRepo, tmp_path: Path
    ) -> None:
        dest = tmp_path / "nested" / "out"

        RepositoryBuilder.new(remote_repo.url).tag("v1.0").dest(dest).build().checkout()

        assert (dest / "README.md").is_file()
