"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (SOURCEBINDER__SECTION__KEY)
3. Explicit YAML file passed to load_config()
4. Global YAML (~/.config/sourcebinder/config.yaml)
5. Built-in defaults (this file)

Examples:
    SOURCEBINDER__LOGGING__LEVEL=DEBUG
    SOURCEBINDER__GIT__LOCK_TIMEOUT_SEC=30
    SOURCEBINDER__CACHE__DATABASE_ROOT=/var/cache/sourcebinder
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        SOURCEBINDER__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG includes per-file extraction events.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class GitConfig(BaseModel):
    """Git database access configuration.

    Env vars:
        SOURCEBINDER__GIT__LOCK_TIMEOUT_SEC: Max wait for a database lock (-1 waits forever)
        SOURCEBINDER__GIT__USE_CREDENTIAL_HELPER: Query ssh-agent / git credential helpers
    """

    lock_timeout_sec: float = Field(
        default=600.0,
        description="How long to wait for another process fetching into the same database. "
        "-1 waits forever.",
    )
    use_credential_helper: bool = Field(
        default=True,
        description="Provide credentials from the ssh agent and `git credential fill`.",
    )

    @field_validator("lock_timeout_sec")
    @classmethod
    def validate_lock_timeout(cls, v: float) -> float:
        if v < 0 and v != -1:
            raise ValueError(f"lock_timeout_sec must be >= 0 or -1, got {v}")
        return v


class CacheConfig(BaseModel):
    """Persistent database cache configuration.

    Env vars:
        SOURCEBINDER__CACHE__DATABASE_ROOT: Directory holding one database per remote URL
    """

    database_root: str | None = Field(
        default=None,
        description="When set, remote databases are pinned under this directory and reused "
        "across invocations. When unset, each checkout uses a throwaway database.",
    )

    @field_validator("database_root")
    @classmethod
    def expand_database_root(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return str(Path(v).expanduser())


class SourceBinderConfig(BaseModel):
    """Root configuration for SourceBinder."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    git: GitConfig = Field(default_factory=GitConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
