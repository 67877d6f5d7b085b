"""Bindings pipeline orchestration and its collaborator interfaces."""

from sourcebinder.binder.collaborators import (
    BindingGenerator,
    BindingsBundle,
    CompileOutput,
    CompilerConfig,
    Diagnostic,
    ProjectCompiler,
)
from sourcebinder.binder.executor import ProcessExecutor, SubprocessExecutor
from sourcebinder.binder.orchestrator import (
    DEFAULT_BINDINGS_DIR,
    Binder,
    GenerateResult,
    Stage,
)

__all__ = [
    "DEFAULT_BINDINGS_DIR",
    "Binder",
    "BindingGenerator",
    "BindingsBundle",
    "CompileOutput",
    "CompilerConfig",
    "Diagnostic",
    "GenerateResult",
    "ProcessExecutor",
    "ProjectCompiler",
    "Stage",
    "SubprocessExecutor",
]
