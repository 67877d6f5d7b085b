"""Structured logging for pipeline runs.

Each ``Binder.generate`` call opens a run scope; every event logged inside it
carries the same ``run_id`` so interleaved runs can be told apart in a shared
log file. Outputs are configured independently (destination, format, level).
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from sourcebinder.config.models import LoggingConfig, LogOutputConfig

_run_id: ContextVar[str | None] = ContextVar("run_id", default=None)

# Third-party loggers that are noisy below WARNING
_QUIET_LOGGERS = ("filelock",)


def get_run_id() -> str | None:
    return _run_id.get()


@contextmanager
def run_scope(run_id: str | None = None) -> Iterator[str]:
    """Tag every event logged inside the block with one run ID.

    The previous ID (if any) is restored on exit, so scopes nest.
    """
    rid = run_id or uuid4().hex[:12]
    token = _run_id.set(rid)
    try:
        yield rid
    finally:
        _run_id.reset(token)


def _add_run_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if rid := get_run_id():
        event_dict.setdefault("run_id", rid)
    return event_dict


def _to_level(name: str | None, fallback: int = logging.INFO) -> int:
    if not name:
        return fallback
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else fallback


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
        _add_run_id,  # type: ignore[list-item]
    ]


def _handler_for(
    output: LogOutputConfig,
    default_level: int,
    pre_chain: list[structlog.types.Processor],
) -> logging.Handler:
    handler: logging.Handler
    match output.destination:
        case "stderr":
            handler = logging.StreamHandler(sys.stderr)
        case "stdout":
            handler = logging.StreamHandler(sys.stdout)
        case path:
            log_file = Path(path)
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(log_file, mode="a")

    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        stream = getattr(handler, "stream", None)
        renderer = structlog.dev.ConsoleRenderer(
            colors=bool(stream is not None and stream.isatty()),
            pad_event_to=0,
            pad_level=False,
        )

    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)
    )
    handler.setLevel(_to_level(output.level, default_level))
    return handler


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """Route structlog events through stdlib handlers, one per configured output.

    Args:
        config: Full logging configuration. Wins over the simple params.
        json_format: Single stderr output rendered as JSON (simple setup).
        level: Level for the simple setup.
    """
    from sourcebinder.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,  # type: ignore[arg-type]
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    default_level = _to_level(config.level)
    processors = _shared_processors()

    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(default_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfiguration (CLI --verbose, tests) must take effect immediately
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(default_level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    for output in config.outputs:
        root.addHandler(_handler_for(output, default_level, processors))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]
