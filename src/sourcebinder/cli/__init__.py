"""SourceBinder CLI."""

from sourcebinder.cli.main import cli

__all__ = ["cli"]
