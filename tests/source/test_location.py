"""Tests for source/location.py."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from sourcebinder.errors import ResolutionError
from sourcebinder.git import DefaultBranch, Tag
from sourcebinder.source import (
    LocalSource,
    RemoteSource,
    RepositoryBuilder,
    is_ephemeral,
    open_source,
    resolve_source,
    source_location,
)
from sourcebinder.source.location import describe_source

if TYPE_CHECKING:
    from tests.conftest import RemoteRepo

URL = "https://example.com/org/project.git"


class TestSourceLocation:
    """Coercion of user input into a SourceLocation."""

    def test_plain_path_is_local(self) -> None:
        assert source_location("./project") == LocalSource(Path("./project"))
        assert source_location(Path("/abs")) == LocalSource(Path("/abs"))

    def test_url_string_is_remote_default_branch(self) -> None:
        location = source_location(URL)

        assert isinstance(location, RemoteSource)
        assert location.repository.remote.url == URL
        assert location.repository.reference == DefaultBranch()

    def test_scp_url_is_remote(self) -> None:
        assert isinstance(source_location("git@github.com:org/repo.git"), RemoteSource)

    def test_builder_is_built(self) -> None:
        location = source_location(RepositoryBuilder.new(URL).tag("v1"))
        assert isinstance(location, RemoteSource)
        assert location.repository.reference == Tag("v1")

    def test_repository_wrapped(self) -> None:
        repo = RepositoryBuilder.new(URL).build()
        assert source_location(repo) == RemoteSource(repo)

    def test_location_unchanged(self) -> None:
        local = LocalSource(Path("x"))
        assert source_location(local) is local

    def test_malformed_url(self) -> None:
        with pytest.raises(ResolutionError):
            source_location("ftp://example.com/repo.git")

    def test_describe(self) -> None:
        assert describe_source(LocalSource(Path("proj"))) == "proj"
        assert URL in describe_source(source_location(URL))


class TestOpenSource:
    def test_local_directory(self, tmp_path: Path) -> None:
        with open_source(LocalSource(tmp_path)) as root:
            assert root == tmp_path

    def test_local_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ResolutionError) as exc_info, open_source(LocalSource(tmp_path / "no")):
            pass
        assert "does not exist" in exc_info.value.reason

    def test_local_file(self, tmp_path: Path) -> None:
        file = tmp_path / "file.txt"
        file.write_text("x")
        with pytest.raises(ResolutionError), open_source(LocalSource(file)):
            pass

    def test_remote_ephemeral(self, remote_repo: RemoteRepo) -> None:
        location = source_location(remote_repo.url)

        with open_source(location) as root:
            assert (root / "README.md").read_bytes() == b"# Project v2\n"

        assert not root.exists()


class TestResolveSource:
    def test_local(self, tmp_path: Path) -> None:
        assert resolve_source(LocalSource(tmp_path)) == tmp_path

    def test_remote_persistent(self, remote_repo: RemoteRepo, tmp_path: Path) -> None:
        dest = tmp_path / "dest"
        location = source_location(RepositoryBuilder.new(remote_repo.url).tag("v1.0").dest(dest))

        assert resolve_source(location) == dest
        assert (dest / "README.md").read_bytes() == b"# Project\n"

    def test_remote_ephemeral_rejected(self) -> None:
        with pytest.raises(ResolutionError):
            resolve_source(source_location(URL))


class TestIsEphemeral:
    def test_local_is_kept(self, tmp_path: Path) -> None:
        assert is_ephemeral(LocalSource(tmp_path)) is False

    def test_remote_without_destination(self) -> None:
        assert is_ephemeral(source_location(URL)) is True

    def test_remote_with_destination(self, tmp_path: Path) -> None:
        location = source_location(RepositoryBuilder.new(URL).dest(tmp_path / "dest"))
        assert is_ephemeral(location) is False
