"""
Executable module for portkeeper.

Running:
    python -m portkeeper

is equivalent to:
    portkeeper
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: ImportError) -> None:
    """Explain on stderr why the CLI could not be imported."""
    lines = ["portkeeper CLI could not be loaded.", f"Python version : {sys.version}"]
    try:
        from portkeeper.__version__ import __version__

        lines.append(f"portkeeper version: {__version__}")
    except ImportError:
        lines.append("portkeeper version: <unknown>")
    lines.append("")
    lines.append(f"ImportError: {exc}")
    sys.stderr.write("\n".join(lines) + "\n")


def main() -> int:
    """
    Main entrypoint when executing `python -m portkeeper`.

    Returns:
        Exit code returned by the CLI, or 1 if it cannot be imported.
    """
    try:
        # Import lazily so dependencies are only loaded during CLI use
        from portkeeper.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
