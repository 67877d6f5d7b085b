"""User-facing status output for CLI operations.

Usage::

    from sourcebinder.core.progress import status, spinner

    status("Checked out 1a2b3c4", style="success")  # ✓ Checked out 1a2b3c4

    with spinner("Fetching https://github.com/org/repo"):
        do_work()
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console

_console = Console(stderr=True)

_STYLES = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
    "none": "",
}


def _is_tty() -> bool:
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print a styled status message to stderr."""
    prefix = _STYLES.get(style, "")
    padding = " " * indent
    _console.print(f"{padding}{prefix}{message}", highlight=False)


@contextmanager
def spinner(message: str) -> Iterator[None]:
    """Show a spinner while the block runs (plain status line when not a TTY)."""
    if not _is_tty():
        status(message)
        yield
        return
    with _console.status(message, spinner="dots"):
        yield
