"""Process execution for hook commands."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol


class ProcessExecutor(Protocol):
    """Runs one command to completion and returns its exit status.

    Implementations raise ``OSError`` when the program cannot be started.
    """

    def run(self, argv: Sequence[str], *, cwd: Path) -> int: ...


class SubprocessExecutor:
    """Runs commands with stdout/stderr inherited from the calling process."""

    def run(self, argv: Sequence[str], *, cwd: Path) -> int:
        result = subprocess.run(list(argv), cwd=cwd, check=False)
        return result.returncode
