"""Root error type and the numeric codes that classify every sourcebinder failure.

Error code ranges:
- 1xxx: Source database (lock, fetch, checkout, extraction)
- 2xxx: Config
- 3xxx: Pipeline (resolution, hooks, compile, generate, write)

Each concrete error class pins its ``code``; callers that only care about the
family can catch ``GitError``, ``BinderError`` or ``ConfigError``, while the CLI
reports any of them through ``SourceBinderError.summary``.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import IntEnum
from typing import Any, ClassVar


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Database (10xx)
    GIT_ERROR = 1000
    NOT_A_DATABASE = 1001
    DATABASE_LOCKED = 1002

    # Fetch (11xx)
    FETCH_FAILED = 1100
    NETWORK_ERROR = 1101
    AUTH_REQUIRED = 1102
    REFERENCE_NOT_FOUND = 1103

    # Checkout (12xx)
    CHECKOUT_FAILED = 1200
    AMBIGUOUS_REFERENCE = 1201
    OBJECT_NOT_FOUND = 1202

    # Extraction (13xx)
    EXTRACTION_FAILED = 1300
    IDENTIFIER_NOT_IN_DATABASE = 1301
    EXTRACTION_IO_ERROR = 1302

    # Config (2xxx)
    CONFIG_ERROR = 2000
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Pipeline (3xxx)
    PIPELINE_ERROR = 3000
    RESOLUTION_FAILED = 3001
    HOOK_FAILED = 3100
    HOOK_EMPTY = 3101
    HOOK_SPAWN_FAILED = 3102
    HOOK_EXIT_NONZERO = 3103
    COMPILE_FAILED = 3200
    BINDING_GENERATION_FAILED = 3300
    WRITE_FAILED = 3400

    @property
    def family(self) -> str:
        match self.value // 1000:
            case 1:
                return "git"
            case 2:
                return "config"
            case _:
                return "pipeline"


class SourceBinderError(Exception):
    """Base of every error raised by sourcebinder.

    ``str(error)`` is the plain message; ``summary`` prefixes it with the code.
    """

    code: ClassVar[ErrorCode]

    def __init__(self, message: str, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = dict(details or {})

    @property
    def error_name(self) -> str:
        return self.code.name

    @property
    def summary(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "family": self.code.family,
            "message": self.message,
            "details": self.details,
        }


# =============================================================================
# Config Errors
# =============================================================================


class ConfigError(SourceBinderError):
    """Configuration could not be loaded."""

    code = ErrorCode.CONFIG_ERROR


class ConfigParseError(ConfigError):
    """A YAML config file is malformed."""

    code = ErrorCode.CONFIG_PARSE_ERROR

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            f"Failed to parse config at {path}: {reason}", {"path": path, "reason": reason}
        )


class ConfigValueError(ConfigError):
    """A setting failed validation."""

    code = ErrorCode.CONFIG_INVALID_VALUE

    def __init__(self, field: str, value: Any, reason: str) -> None:
        super().__init__(
            f"Invalid value for '{field}': {reason}",
            {"field": field, "value": str(value), "reason": reason},
        )


class ConfigFileNotFoundError(ConfigError):
    """An explicitly requested config file is missing."""

    code = ErrorCode.CONFIG_FILE_NOT_FOUND

    def __init__(self, path: str) -> None:
        super().__init__(f"Config file not found: {path}", {"path": path})
