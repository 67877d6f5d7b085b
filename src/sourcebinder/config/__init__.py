"""Config module exports."""

from sourcebinder.config.loader import load_config
from sourcebinder.config.models import (
    CacheConfig,
    GitConfig,
    LoggingConfig,
    LogOutputConfig,
    SourceBinderConfig,
)

__all__ = [
    "load_config",
    "CacheConfig",
    "GitConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "SourceBinderConfig",
]
