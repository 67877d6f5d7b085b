"""Interfaces of the external compiler and binding generator.

``Binder`` drives these; it never compiles or generates code itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Protocol

from pydantic import BaseModel, ConfigDict, Field

Severity = Literal["error", "warning", "info"]


class CompilerConfig(BaseModel):
    """Settings handed to the project compiler.

    ``root`` is always replaced with the resolved project root before compiling.
    """

    model_config = ConfigDict(frozen=True)

    root: Path = Field(default=Path("."), description="Project root directory.")
    src: str = Field(default="src", description="Sources directory, relative to root.")
    artifacts: Path | None = Field(
        default=None,
        description="Artifact output directory. Unset means a temporary directory "
        "that is removed after bindings are generated.",
    )
    settings: dict[str, Any] = Field(
        default_factory=dict,
        description="Compiler-specific options passed through untouched.",
    )


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """One compiler message."""

    severity: Severity
    message: str
    file: str | None = None
    line: int | None = None
    column: int | None = None
    code: str | None = None

    def __str__(self) -> str:
        location = ""
        if self.file:
            location = self.file
            if self.line is not None:
                location += f":{self.line}"
                if self.column is not None:
                    location += f":{self.column}"
            location += ": "
        code = f" [{self.code}]" if self.code else ""
        return f"{self.severity}{code}: {location}{self.message}"


@dataclass(frozen=True, slots=True)
class CompileOutput:
    """Result of compiling a project."""

    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def has_compiler_errors(self) -> bool:
        return any(d.severity == "error" for d in self.diagnostics)

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.severity == "warning")

    def format_diagnostics(self) -> str:
        """All diagnostics, one per line, in compiler order."""
        return "\n".join(str(d) for d in self.diagnostics)


class ProjectCompiler(Protocol):
    def compile(self, config: CompilerConfig) -> CompileOutput: ...


class BindingsBundle(Protocol):
    def write_to(self, directory: Path) -> None: ...


class BindingGenerator(Protocol):
    def generate(self, artifacts_dir: Path, *, deployable: bool) -> BindingsBundle: ...
