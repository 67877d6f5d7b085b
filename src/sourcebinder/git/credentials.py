"""Credential handling for fetching from remotes."""

from __future__ import annotations

import os
import subprocess
from typing import TYPE_CHECKING
from urllib.parse import urlparse

import pygit2
import structlog

if TYPE_CHECKING:
    from pygit2.enums import CredentialType

logger = structlog.get_logger()

# libgit2 re-invokes the credentials callback after every rejection
_MAX_ATTEMPTS = 2


class FetchCallbacks(pygit2.RemoteCallbacks):
    """
    RemoteCallbacks for database fetches.

    Supports:
    - SSH via the system SSH agent
    - HTTPS via ``git credential fill`` (credential managers, stored tokens)

    Gives up after a bounded number of attempts so a rejected credential
    surfaces as an authentication error instead of an endless retry loop.
    """

    def __init__(self, *, use_credential_helper: bool = True) -> None:
        super().__init__()
        self._use_helper = use_credential_helper
        self._attempts = 0

    def credentials(  # type: ignore[override]
        self,
        url: str,
        username_from_url: str | None,
        allowed_types: CredentialType,
    ) -> pygit2.Username | pygit2.UserPass | pygit2.Keypair | None:
        """Provide credentials for the fetch, or None to let libgit2 fail."""
        self._attempts += 1
        if not self._use_helper or self._attempts > _MAX_ATTEMPTS:
            logger.debug("credentials exhausted", url=url, attempts=self._attempts)
            return None

        if allowed_types & pygit2.enums.CredentialType.SSH_KEY:
            return pygit2.KeypairFromAgent(username_from_url or "git")

        if allowed_types & pygit2.enums.CredentialType.USERPASS_PLAINTEXT:
            creds = query_credential_helper(url)
            if creds:
                return pygit2.UserPass(creds["username"], creds["password"])

        if allowed_types & pygit2.enums.CredentialType.USERNAME and username_from_url:
            return pygit2.Username(username_from_url)

        return None


def query_credential_helper(url: str) -> dict[str, str] | None:
    """
    Ask the configured git credential helper for a username/password.

    Invokes: git credential fill
    See: https://git-scm.com/docs/git-credential
    """
    parsed = urlparse(url)
    lines = [f"protocol={parsed.scheme}", f"host={parsed.hostname or parsed.netloc}"]
    if parsed.port is not None:
        lines.append(f"port={parsed.port}")
    if parsed.path:
        lines.append(f"path={parsed.path.lstrip('/')}")
    lines.append("")

    try:
        result = subprocess.run(
            ["git", "credential", "fill"],
            input="\n".join(lines),
            capture_output=True,
            text=True,
            timeout=30,
            check=False,
            env={**os.environ, "GIT_TERMINAL_PROMPT": "0"},
        )
    except (subprocess.TimeoutExpired, OSError) as e:
        logger.debug("credential helper unavailable", url=url, error=str(e))
        return None

    if result.returncode != 0:
        return None

    creds = dict(line.split("=", 1) for line in result.stdout.splitlines() if "=" in line)
    if "username" in creds and "password" in creds:
        return creds
    return None
