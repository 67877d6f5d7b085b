"""Bindings pipeline: resolve source, run hooks, compile, generate, write.

``Binder`` is an immutable configuration value; every setter returns a new
``Binder``. ``generate()`` runs the stages in order and stops at the first
failure:

    resolve -> hooks -> compile -> diagnostics -> generate -> write

Ephemeral resources (remote checkouts without a persistent destination, the
default artifacts directory) are released on every exit path.
"""

from __future__ import annotations

import tempfile
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from enum import StrEnum
from pathlib import Path

import structlog

from sourcebinder.binder.collaborators import (
    BindingGenerator,
    BindingsBundle,
    CompileOutput,
    CompilerConfig,
    ProjectCompiler,
)
from sourcebinder.binder.executor import ProcessExecutor, SubprocessExecutor
from sourcebinder.core.errors import SourceBinderError
from sourcebinder.core.logging import run_scope
from sourcebinder.errors import (
    BinderError,
    BindingGenerationError,
    CompileError,
    EmptyHookCommandError,
    HookExitError,
    HookSpawnError,
    WriteError,
)
from sourcebinder.source.location import (
    SourceLike,
    SourceLocation,
    describe_source,
    is_ephemeral,
    open_source,
    source_location,
)

logger = structlog.get_logger()

DEFAULT_BINDINGS_DIR = Path("src/contracts")


class Stage(StrEnum):
    RESOLVE = "resolve"
    HOOKS = "hooks"
    COMPILE = "compile"
    DIAGNOSTICS = "diagnostics"
    GENERATE = "generate"
    WRITE = "write"


@dataclass(frozen=True, slots=True)
class GenerateResult:
    """Outcome of a successful ``Binder.generate`` call.

    ``root`` is None when the source was checked out into an ephemeral
    directory, which no longer exists once ``generate`` returns.
    """

    root: Path | None
    bindings_dir: Path
    artifacts_dir: Path | None
    hooks_run: int
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Binder:
    """Bindings pipeline configuration.

    Example::

        result = (
            Binder.new("./project", compiler=compiler, generator=generator)
            .command(["npm", "install"])
            .set_deployable(False)
            .generate()
        )
    """

    location: SourceLocation
    compiler: ProjectCompiler
    generator: BindingGenerator
    deployable: bool = True
    artifacts_dir: Path | None = None
    commands: tuple[tuple[str, ...], ...] = ()
    compiler_config: CompilerConfig | None = None
    bindings_dir: Path | None = None
    executor: ProcessExecutor = field(default_factory=SubprocessExecutor)

    @classmethod
    def new(
        cls,
        location: SourceLike,
        *,
        compiler: ProjectCompiler,
        generator: BindingGenerator,
        executor: ProcessExecutor | None = None,
    ) -> Binder:
        """Create a binder for a local path, URL, ``Repository`` or builder.

        Raises:
            ResolutionError: ``location`` is a malformed URL.
        """
        return cls(
            location=source_location(location),
            compiler=compiler,
            generator=generator,
            executor=executor if executor is not None else SubprocessExecutor(),
        )

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def command(self, argv: Sequence[str]) -> Binder:
        """Append a hook command, run in the project root before compiling."""
        return replace(self, commands=(*self.commands, tuple(argv)))

    def set_deployable(self, deployable: bool) -> Binder:
        """Include deployable bytecode in generated bindings."""
        return replace(self, deployable=deployable)

    def keep_artifacts(self, directory: str | Path) -> Binder:
        """Write compiler artifacts to ``directory`` and keep them afterwards."""
        return replace(self, artifacts_dir=Path(directory))

    def bindings(self, directory: str | Path) -> Binder:
        """Write generated bindings to ``directory`` instead of ``src/contracts``."""
        return replace(self, bindings_dir=Path(directory))

    def config(self, config: CompilerConfig) -> Binder:
        """Compiler configuration; its ``root`` is replaced with the resolved root."""
        return replace(self, compiler_config=config)

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    def generate(self) -> GenerateResult:
        """Run the pipeline.

        Raises:
            ResolutionError, FetchError, CheckoutError, ExtractionError: resolve stage.
            HookCommandError: A hook was empty, could not start, or exited non-zero.
            CompileError: The compiler raised or reported errors.
            BindingGenerationError: The generator raised.
            WriteError: The bundle could not be written.
        """
        log = logger.bind(source=describe_source(self.location))
        with run_scope() as run_id:
            return self._generate_in_run(log, run_id)

    def _generate_in_run(self, log: structlog.stdlib.BoundLogger, run_id: str) -> GenerateResult:
        try:
            log.info("generate started", stage=Stage.RESOLVE, run_id=run_id)
            with open_source(self.location) as root:
                log.info("source resolved", root=str(root))
                hooks_run = self._run_hooks(root)
                with self._artifacts_scope() as artifacts:
                    output = self._compile(root, artifacts)
                    warnings = self._check_diagnostics(output)
                    bundle = self._generate(artifacts)
                    out_dir = self._write(bundle)
            result = GenerateResult(
                root=None if is_ephemeral(self.location) else root,
                bindings_dir=out_dir,
                artifacts_dir=self._retained_artifacts(),
                hooks_run=hooks_run,
                warnings=warnings,
            )
            log.info("generate complete", bindings_dir=str(out_dir), warnings=len(warnings))
            return result
        except SourceBinderError as e:
            log.error(
                "generate failed", error=str(e), error_type=type(e).__name__, code=e.code.value
            )
            raise

    def _run_hooks(self, root: Path) -> int:
        for index, argv in enumerate(self.commands):
            if not argv:
                raise EmptyHookCommandError(index)
            logger.info("running hook", stage=Stage.HOOKS, index=index, argv=list(argv))
            try:
                exit_code = self.executor.run(argv, cwd=root)
            except OSError as e:
                raise HookSpawnError(argv, str(e)) from e
            if exit_code != 0:
                raise HookExitError(argv, exit_code)
        return len(self.commands)

    def _retained_artifacts(self) -> Path | None:
        if self.artifacts_dir is not None:
            return self.artifacts_dir
        if self.compiler_config is not None:
            return self.compiler_config.artifacts
        return None

    @contextmanager
    def _artifacts_scope(self) -> Iterator[Path]:
        """Yield the artifacts directory; a temporary one is removed on exit."""
        retained = self._retained_artifacts()
        if retained is not None:
            try:
                retained.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise CompileError(f"Cannot create artifacts directory {retained}: {e}") from e
            yield retained
            return

        with tempfile.TemporaryDirectory(prefix="sourcebinder-artifacts-") as tmp:
            yield Path(tmp)

    def _compile(self, root: Path, artifacts: Path) -> CompileOutput:
        base = self.compiler_config or CompilerConfig()
        config = base.model_copy(update={"root": root, "artifacts": artifacts})
        logger.info("compiling", stage=Stage.COMPILE, root=str(root), artifacts=str(artifacts))
        try:
            return self.compiler.compile(config)
        except BinderError:
            raise
        except Exception as e:
            raise CompileError(f"Compiler failed: {e}") from e

    def _check_diagnostics(self, output: CompileOutput) -> tuple[str, ...]:
        if output.has_compiler_errors:
            raise CompileError.from_output(output)
        warnings = tuple(str(w) for w in output.warnings)
        for warning in warnings:
            logger.warning("compiler warning", stage=Stage.DIAGNOSTICS, diagnostic=warning)
        return warnings

    def _generate(self, artifacts: Path) -> BindingsBundle:
        logger.info("generating bindings", stage=Stage.GENERATE, deployable=self.deployable)
        try:
            return self.generator.generate(artifacts, deployable=self.deployable)
        except BinderError:
            raise
        except Exception as e:
            raise BindingGenerationError(str(e)) from e

    def _write(self, bundle: BindingsBundle) -> Path:
        out_dir = self.bindings_dir if self.bindings_dir is not None else DEFAULT_BINDINGS_DIR
        logger.info("writing bindings", stage=Stage.WRITE, path=str(out_dir))
        try:
            out_dir.mkdir(parents=True, exist_ok=True)
            bundle.write_to(out_dir)
        except BinderError:
            raise
        except Exception as e:
            raise WriteError(str(out_dir), str(e)) from e
        return out_dir
