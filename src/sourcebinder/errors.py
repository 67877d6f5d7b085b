"""Pipeline error types raised by source resolution and ``Binder.generate``.

Git-level failures (fetch, checkout, extraction) keep their own types from
``sourcebinder.git.errors`` and propagate unchanged.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from sourcebinder.core.errors import ErrorCode, SourceBinderError

if TYPE_CHECKING:
    from sourcebinder.binder.collaborators import CompileOutput, Diagnostic


class BinderError(SourceBinderError):
    """Base error for the bindings pipeline."""

    code = ErrorCode.PIPELINE_ERROR


class ResolutionError(BinderError):
    """Source location cannot be resolved (bad local path, malformed URL)."""

    code = ErrorCode.RESOLUTION_FAILED

    def __init__(self, location: str, reason: str) -> None:
        super().__init__(f"Cannot resolve source {location!r}: {reason}")
        self.location = location
        self.reason = reason


# =============================================================================
# Hook Command Errors
# =============================================================================


class HookCommandError(BinderError):
    """A hook command could not run or did not succeed."""

    code = ErrorCode.HOOK_FAILED

    def __init__(self, argv: Sequence[str], message: str) -> None:
        super().__init__(message)
        self.argv = list(argv)


class EmptyHookCommandError(HookCommandError):
    """Hook command has no program to run."""

    code = ErrorCode.HOOK_EMPTY

    def __init__(self, index: int) -> None:
        super().__init__([], f"Hook command #{index} is empty")
        self.index = index


class HookSpawnError(HookCommandError):
    """Hook command could not be started."""

    code = ErrorCode.HOOK_SPAWN_FAILED

    def __init__(self, argv: Sequence[str], reason: str) -> None:
        super().__init__(argv, f"Failed to start hook command {list(argv)!r}: {reason}")
        self.reason = reason


class HookExitError(HookCommandError):
    """Hook command exited with a non-zero status."""

    code = ErrorCode.HOOK_EXIT_NONZERO

    def __init__(self, argv: Sequence[str], exit_code: int) -> None:
        super().__init__(argv, f"Hook command {list(argv)!r} exited with status {exit_code}")
        self.exit_code = exit_code


# =============================================================================
# Compile / Generate / Write Errors
# =============================================================================


class CompileError(BinderError):
    """Compilation failed; carries the full diagnostics list."""

    code = ErrorCode.COMPILE_FAILED

    def __init__(self, message: str, diagnostics: Sequence[Diagnostic] = ()) -> None:
        super().__init__(message)
        self.diagnostics = list(diagnostics)

    @classmethod
    def from_output(cls, output: CompileOutput) -> CompileError:
        return cls(f"Compiled with errors:\n{output.format_diagnostics()}", output.diagnostics)


class BindingGenerationError(BinderError):
    """The binding generator failed."""

    code = ErrorCode.BINDING_GENERATION_FAILED

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to generate bindings: {reason}")
        self.reason = reason


class WriteError(BinderError):
    """Writing the generated bindings failed."""

    code = ErrorCode.WRITE_FAILED

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to write bindings to {path}: {reason}")
        self.path = path
        self.reason = reason
