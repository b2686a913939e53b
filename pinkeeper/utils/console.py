"""
Terminal output for pinkeeper, built on Rich.

Pinning progress has two display levels: regular lines from
:func:`print_status` and muted lines (``style=MUTED``) for packages
where nothing changes. Messages are printed with markup disabled, since
requirement names such as ``uvicorn[standard]`` would otherwise be read
as Rich tags.
"""

from __future__ import annotations

import os
import sys
import threading
from typing import Any, Dict, List, Optional

from rich.table import Table
from rich.theme import Theme
from rich.console import Console

PINKEEPER_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "dim": "dim",
        "highlight": "bold magenta",
    }
)

#: Style hint for "nothing to do" progress lines.
MUTED = "dim"

_UPDATE_TYPE_COLORS = {
    "major": "red",
    "minor": "yellow",
    "patch": "green",
    "new": "cyan",
    "downgrade": "red",
}

_console: Optional[Console] = None
_console_lock = threading.Lock()


def _should_use_color() -> bool:
    """Color only on an interactive stdout, and never under NO_COLOR or CI."""
    if os.environ.get("NO_COLOR") or os.environ.get("CI"):
        return False
    isatty = getattr(sys.stdout, "isatty", None)
    try:
        return bool(isatty and isatty())
    except OSError:
        return False


def _get_console() -> Console:
    global _console

    with _console_lock:
        if _console is None:
            _console = Console(
                theme=PINKEEPER_THEME,
                no_color=not _should_use_color(),
                highlight=False,
            )
        return _console


def reconfigure_console() -> None:
    """Forget the current console so the next print re-reads the environment.

    The CLI calls this after ``--color/--no-color`` has updated ``NO_COLOR``.
    """
    global _console
    with _console_lock:
        _console = None


def print_status(message: str, *, style: Optional[str] = None) -> None:
    """Print one progress line, optionally with a display hint such as :data:`MUTED`."""
    _get_console().print(message, style=style, markup=False)


def _print_tagged(tag: str, message: str, style: str) -> None:
    _get_console().print(f"{tag} {message}", style=style, markup=False)


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    _print_tagged(prefix, message, "success")


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    _print_tagged(prefix, message, "error")


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    _print_tagged(prefix, message, "warning")


def print_table(
    data: List[Dict[str, Any]],
    *,
    headers: Optional[List[str]] = None,
    title: Optional[str] = None,
    column_styles: Optional[Dict[str, Dict[str, Any]]] = None,
) -> None:
    """Print rows as a Rich table; nothing is printed for an empty list.

    Args:
        data: One dictionary per row. Cell values may contain Rich markup.
        headers: Column order; defaults to the keys of the first row.
        title: Caption above the table.
        column_styles: ``{header: {"style": ..., "justify": ..., "no_wrap": ...}}``.
    """
    if not data:
        return

    columns = headers or list(data[0])
    styles = column_styles or {}

    table = Table(title=title, header_style="bold")
    for column in columns:
        options = styles.get(column, {})
        table.add_column(
            column,
            style=options.get("style"),
            justify=options.get("justify", "default"),
            no_wrap=options.get("no_wrap", False),
        )
    for row in data:
        table.add_row(*[str(row.get(column, "")) for column in columns])

    _get_console().print(table)


def colorize_update_type(update_type: str) -> str:
    """Wrap an update type (``"major"``, ``"patch"``, ...) in Rich color markup."""
    color = _UPDATE_TYPE_COLORS.get(update_type.lower())
    if color is None:
        return update_type
    return f"[{color}]{update_type}[/{color}]"
