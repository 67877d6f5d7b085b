"""Test fixtures for git module."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from sourcebinder.git import GitRemote

if TYPE_CHECKING:
    from tests.conftest import RemoteRepo


@pytest.fixture
def transfer_calls(monkeypatch: pytest.MonkeyPatch) -> list[list[str]]:
    """Record the refspecs of every network transfer GitRemote makes."""
    calls: list[list[str]] = []
    original = GitRemote._transfer

    def recording(self, repo, reference, specs):  # type: ignore[no-untyped-def]
        calls.append(list(specs))
        return original(self, repo, reference, specs)

    monkeypatch.setattr(GitRemote, "_transfer", recording)
    return calls


@pytest.fixture
def git_remote(remote_repo: RemoteRepo) -> GitRemote:
    return GitRemote(remote_repo.url, lock_timeout=5)
