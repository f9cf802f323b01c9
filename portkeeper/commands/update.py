"""Update command implementation for portkeeper.

Reports installed packages that are stale against the index: either the
index carries a newer version, or the package was built for an older OS
release than the running system. Packages that vanished from the index are
reported as no longer available.

The command runs the :class:`~portkeeper.core.UpdateDiffEngine` over the
process-wide store; it never changes anything.

Typical usage::

    # Every installed package
    $ portkeeper update

    # Only these packages, with the OS release each was built for
    $ portkeeper update -v nginx pcre2

    # Machine-readable output
    $ portkeeper update --format json
"""

from __future__ import annotations

import sys
import json
from typing import Any, Dict, List, Tuple

import click

from portkeeper.models import UpdateReport
from portkeeper.core import UpdateDiffEngine
from portkeeper.exceptions import PackageNotFoundError, PortKeeperError, StoreError
from portkeeper.context import pass_context, PortKeeperContext
from portkeeper.constants import (
    EXIT_INDEX_UNAVAILABLE,
    UNAVAILABLE_LINE_FORMAT,
    UPDATE_LINE_FORMAT,
    UPDATE_LINE_VERBOSE_FORMAT,
)
from portkeeper.utils import (
    get_logger,
    print_error,
    print_line,
    print_table,
    colorize_update_type,
)

logger = get_logger("commands.update")


@click.command()
@click.argument("names", nargs=-1)
@click.option(
    "--verbose",
    "-v",
    "show_os_release",
    is_flag=True,
    help="Show the OS release each package was built for.",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["simple", "table", "json"], case_sensitive=False),
    default="simple",
    help="Output format.",
)
@pass_context
def update(
    ctx: PortKeeperContext,
    names: Tuple[str, ...],
    show_os_release: bool,
    format: str,
) -> None:
    """Show installed packages with available updates.

    A package is listed once for every index entry that is newer than it,
    and also when it was built for an older OS release than the running
    system. With NAMES, only those installed packages are checked.

    Exits:
        0 when the diff ran, 1 when a named package is not installed (the
        other names are still diffed) or the store cannot be read, 4 when
        the index cannot be loaded.
    """
    missing: List[str] = []

    store = ctx.get_store()
    try:
        store.load_index()
    except StoreError as e:
        print_error(f"Unable to load the package index: {e}")
        sys.exit(EXIT_INDEX_UNAVAILABLE)

    try:
        engine = UpdateDiffEngine(store)
        if names:
            packages = []
            for name in names:
                try:
                    packages.extend(engine.select_packages([name]))
                except PackageNotFoundError as e:
                    print_error(f"{e.message}")
                    missing.append(name)
        else:
            packages = engine.select_packages()
        report = engine.diff_packages(packages)
    except PortKeeperError as e:
        print_error(f"{e}")
        sys.exit(1)

    render_report(report, format=format, show_os_release=show_os_release)
    if missing:
        logger.info("Not installed: %s", ", ".join(missing))
        sys.exit(1)
    sys.exit(0)


# ---------------------------------------------------------------------------
# Display renderers
# ---------------------------------------------------------------------------


def render_report(
    report: UpdateReport, *, format: str = "simple", show_os_release: bool = False
) -> None:
    """Print *report* in the requested format."""
    if format == "json":
        print(json.dumps(report.to_json(), indent=2))
    elif format == "table":
        _display_table(report)
    else:
        _display_simple(report, show_os_release)


def format_report_lines(report: UpdateReport, show_os_release: bool = False) -> List[str]:
    """Return the plain-text lines of *report*.

    Example::

        nginx             1.24.0  <  1.26.1
        oldtool            0.9.1 is no longer available.
    """
    lines: List[str] = []
    template = UPDATE_LINE_VERBOSE_FORMAT if show_os_release else UPDATE_LINE_FORMAT

    for finding in report.findings:
        lines.append(
            template.format(
                name=finding.package.name,
                version=finding.package.version or "-",
                os_release=finding.package.os_release or "-",
                available=finding.entry.version or "-",
            ).rstrip()
        )

    for pkg in report.unavailable:
        lines.append(
            UNAVAILABLE_LINE_FORMAT.format(name=pkg.name, version=pkg.version or "-")
        )
    return lines


def _display_simple(report: UpdateReport, show_os_release: bool) -> None:
    for line in format_report_lines(report, show_os_release):
        print_line(line)


def _display_table(report: UpdateReport) -> None:
    """Render the report as a Rich table, one row per finding."""
    if report.is_empty:
        print_line("All packages are up to date.")
        return

    data: List[Dict[str, Any]] = []
    for finding in report.findings:
        data.append(
            {
                "Package": finding.package.name,
                "Installed": finding.package.version or "-",
                "Built For": finding.package.os_release or "-",
                "Available": finding.entry.version or "-",
                "Update Type": colorize_update_type(finding.update_type),
            }
        )
    for pkg in report.unavailable:
        data.append(
            {
                "Package": pkg.name,
                "Installed": pkg.version or "-",
                "Built For": pkg.os_release or "-",
                "Available": "[dim]-[/dim]",
                "Update Type": "[red]unavailable[/red]",
            }
        )

    column_styles: Dict[str, Dict[str, Any]] = {
        "Package": {"style": "bold cyan", "no_wrap": True},
        "Installed": {"justify": "center", "style": "dim"},
        "Built For": {"justify": "center", "style": "dim"},
        "Available": {"justify": "center", "style": "bold green"},
        "Update Type": {"justify": "center"},
    }

    print_table(
        data,
        title=f"Updates (OS release {report.os_release})",
        column_styles=column_styles,
    )
