"""
Rich console helpers for portkeeper commands.

Everything the operator is meant to read goes through here: status
messages, the plain report lines of ``update``/``list``/``search``, the
update table and the ``deleteall`` confirmation. Diagnostics belong to
:mod:`portkeeper.utils.logger` instead.

Report lines are printed verbatim (no markup, no highlighting, no
wrapping) because package names such as ``p5-Foo[bar]`` must survive
untouched. Errors and warnings go to stderr so that report output on
stdout stays pipeable.
"""

from __future__ import annotations

import os
import sys
import threading
from typing import Any, Dict, List, Optional

from rich.table import Table
from rich.theme import Theme
from rich.console import Console

PORTKEEPER_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "dim": "dim",
        "highlight": "bold magenta",
        "package": "bold cyan",
    }
)

_UPDATE_TYPE_COLORS = {
    "major": "red",
    "minor": "yellow",
    "patch": "green",
    "revision": "cyan",
    "rebuild": "magenta",
    "downgrade": "red",
    "update": "yellow",
}

_YES = frozenset({"y", "yes"})
_NO = frozenset({"n", "no"})

# stderr flag -> console; emptied by reconfigure_console()
_consoles: Dict[bool, Console] = {}
_console_lock = threading.Lock()


def _should_use_color() -> bool:
    """Color only on an interactive stdout with neither NO_COLOR nor CI set."""
    if os.environ.get("NO_COLOR") or os.environ.get("CI"):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, OSError):
        return False


def _console_for(stderr: bool) -> Console:
    with _console_lock:
        console = _consoles.get(stderr)
        if console is None:
            use_color = _should_use_color()
            console = Console(
                theme=PORTKEEPER_THEME,
                no_color=not use_color,
                highlight=use_color,
                stderr=stderr,
            )
            _consoles[stderr] = console
        return console


def _get_console() -> Console:
    """Return the stdout console."""
    return _console_for(stderr=False)


def _get_err_console() -> Console:
    """Return the stderr console used for errors and warnings."""
    return _console_for(stderr=True)


def get_raw_console() -> Console:
    """Return the stdout console for callers that print Rich objects."""
    return _get_console()


def reconfigure_console() -> None:
    """Forget both consoles so the next print re-reads NO_COLOR and the streams."""
    with _console_lock:
        _consoles.clear()


def _status(console: Console, prefix: str, message: str, style: str) -> None:
    console.print(f"{prefix} {message}", style=style, markup=False, soft_wrap=True)


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    _status(_get_console(), prefix, message, "success")


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    _status(_get_err_console(), prefix, message, "error")


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    _status(_get_err_console(), prefix, message, "warning")


def print_line(text: str = "") -> None:
    """Print one report line on stdout exactly as given."""
    _get_console().print(text, markup=False, highlight=False, soft_wrap=True)


def print_table(
    data: List[Dict[str, Any]],
    *,
    headers: Optional[List[str]] = None,
    title: Optional[str] = None,
    column_styles: Optional[Dict[str, Dict[str, Any]]] = None,
) -> None:
    """Render rows of ``{column: value}`` as a Rich table.

    Args:
        data: Rows; a row lacking a column renders an empty cell.
        headers: Columns to show, in order. Defaults to the first row's keys.
        title: Table title.
        column_styles: ``{column: {"style", "justify", "no_wrap"}}``.

    Nothing is printed for an empty *data*.
    """
    if not data:
        return

    columns = headers if headers is not None else list(data[0])
    styles = column_styles or {}

    table = Table(title=title, show_header=True, header_style="bold")
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


def confirm(message: str, *, default: bool = False) -> bool:
    """Ask a yes/no question on stdout and read the answer from stdin.

    ``y``/``yes`` and ``n``/``no`` are accepted in any case; anything else
    (including an empty line) gives *default*. Ctrl+C or EOF declines.
    """
    console = _get_console()
    console.print(
        f"{message} {'[Y/n]' if default else '[y/N]'}: ",
        end="",
        style="info",
        markup=False,
    )

    try:
        answer = input().strip().lower()
    except (KeyboardInterrupt, EOFError):
        console.print()
        return False

    if answer in _YES:
        return True
    if answer in _NO:
        return False
    return default


def colorize_update_type(update_type: str) -> str:
    """Wrap an update classification in Rich color markup.

    Unknown classifications are returned unchanged.
    """
    color = _UPDATE_TYPE_COLORS.get(update_type.lower())
    if color is None:
        return update_type
    return f"[{color}]{update_type}[/{color}]"
