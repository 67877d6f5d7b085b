"""SourceBinder - versioned source resolution feeding a bindings pipeline."""

from sourcebinder.binder import (
    Binder,
    BindingGenerator,
    BindingsBundle,
    CompileOutput,
    CompilerConfig,
    Diagnostic,
    GenerateResult,
    ProjectCompiler,
)
from sourcebinder.errors import (
    BinderError,
    BindingGenerationError,
    CompileError,
    HookCommandError,
    ResolutionError,
    WriteError,
)
from sourcebinder.source import (
    LocalSource,
    RemoteSource,
    Repository,
    RepositoryBuilder,
    open_source,
    source_location,
)

__version__ = "0.1.0"

__all__ = [
    # Pipeline
    "Binder",
    "BindingGenerator",
    "BindingsBundle",
    "CompileOutput",
    "CompilerConfig",
    "Diagnostic",
    "GenerateResult",
    "ProjectCompiler",
    # Sources
    "LocalSource",
    "RemoteSource",
    "Repository",
    "RepositoryBuilder",
    "open_source",
    "source_location",
    # Errors
    "BinderError",
    "BindingGenerationError",
    "CompileError",
    "HookCommandError",
    "ResolutionError",
    "WriteError",
]
