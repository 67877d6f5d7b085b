"""Core module exports."""

from sourcebinder.core.errors import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigParseError,
    ConfigValueError,
    ErrorCode,
    SourceBinderError,
)
from sourcebinder.core.logging import (
    configure_logging,
    get_logger,
    get_run_id,
    run_scope,
)
from sourcebinder.core.progress import spinner, status

__all__ = [
    # Errors
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigParseError",
    "ConfigValueError",
    "ErrorCode",
    "SourceBinderError",
    # Logging
    "configure_logging",
    "get_logger",
    "get_run_id",
    "run_scope",
    # Progress
    "spinner",
    "status",
]
