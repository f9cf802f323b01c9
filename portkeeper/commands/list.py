"""List command implementation for portkeeper.

Prints the installed packages in one of several plain-text layouts. The
``updates`` mode prints the same lines as ``portkeeper update``.

Typical usage::

    $ portkeeper list                # name-version
    $ portkeeper list -v             # name-version, os_release, comment
    $ portkeeper list prime          # explicitly installed names
    $ portkeeper list -q -o          # origins
    $ portkeeper list -l             # locked packages
    $ portkeeper list updates -v     # stale packages
"""

from __future__ import annotations

import sys
from typing import List, Optional

import click

from portkeeper.commands.update import format_report_lines
from portkeeper.constants import (
    EXIT_LIST_INDEX_UNAVAILABLE,
    EXIT_NOTHING_INSTALLED,
    LIST_NAME_VERSION_WIDTH,
    LIST_VERBOSE_FORMAT,
    RESULT_FAILED,
)
from portkeeper.core import UpdateDiffEngine
from portkeeper.exceptions import PortKeeperError, StoreError
from portkeeper.models import InstalledPackage
from portkeeper.context import pass_context, PortKeeperContext
from portkeeper.utils import get_logger, print_error, print_line, print_warning

logger = get_logger("commands.list")

_MODES = {"updates": "updates", "up": "updates", "prime": "prime"}


@click.command(name="list")
@click.argument(
    "mode",
    required=False,
    type=click.Choice(sorted(_MODES), case_sensitive=False),
)
@click.option("--quiet", "-q", is_flag=True, help="Print names only.")
@click.option("--origin", "-o", is_flag=True, help="Print port origins.")
@click.option("--locks", "-l", is_flag=True, help="Print locked packages only.")
@click.option(
    "--verbose",
    "-v",
    "detailed",
    is_flag=True,
    help="Print OS release and comment too.",
)
@pass_context
def list_packages(
    ctx: PortKeeperContext,
    mode: Optional[str],
    quiet: bool,
    origin: bool,
    locks: bool,
    detailed: bool,
) -> None:
    """List installed packages.

    MODE is ``updates`` (or ``up``) for stale packages, or ``prime`` for
    packages installed on request rather than as a dependency.

    Exits:
        0 on success, 3 when nothing is installed, 8 when the index for an
        updates listing cannot be loaded, 1 on other store errors.
    """
    store = ctx.get_store()
    mode = _MODES.get(mode.lower()) if mode else None

    if mode == "updates":
        try:
            store.load_index()
        except StoreError as e:
            print_error(f"Unable to load updates index, {e}")
            sys.exit(EXIT_LIST_INDEX_UNAVAILABLE)

    try:
        packages = store.list_installed()
    except PortKeeperError as e:
        print_error(f"{e}")
        sys.exit(RESULT_FAILED)

    if not packages:
        if not quiet:
            print_warning("No packages installed matching.")
        sys.exit(EXIT_NOTHING_INSTALLED)

    if mode == "updates":
        try:
            report = UpdateDiffEngine(store).diff_packages(packages)
        except PortKeeperError as e:
            print_error(f"{e}")
            sys.exit(RESULT_FAILED)
        lines = format_report_lines(report, show_os_release=detailed)
    else:
        lines = format_listing(
            packages,
            prime=mode == "prime",
            quiet=quiet,
            origin=origin,
            locks=locks,
            detailed=detailed,
        )

    for line in lines:
        print_line(line)
    sys.exit(0)


def format_listing(
    packages: List[InstalledPackage],
    *,
    prime: bool = False,
    quiet: bool = False,
    origin: bool = False,
    locks: bool = False,
    detailed: bool = False,
) -> List[str]:
    """Render the non-update listing layouts.

    The first matching layout wins, in this order: detailed, prime,
    quiet names, quiet origins, origin blocks, locked, plain.
    """
    lines: List[str] = []

    for pkg in packages:
        if detailed:
            lines.append(_detailed_line(pkg))
        elif prime:
            if not pkg.automatic:
                lines.append(pkg.name)
        elif quiet:
            lines.append(pkg.origin if origin else pkg.name)
        elif origin:
            lines.extend(
                [f"Information for {pkg.name_version}:", "", "Origin:", pkg.origin, ""]
            )
        elif locks:
            if pkg.locked:
                lines.append(pkg.name_version)
        else:
            lines.append(pkg.name_version)

    return lines


def _detailed_line(pkg: InstalledPackage) -> str:
    name_version = pkg.name_version[: LIST_NAME_VERSION_WIDTH - 1]
    return LIST_VERBOSE_FORMAT.format(
        name_version=name_version,
        os_release=pkg.os_release or "",
        comment=pkg.comment.replace("\\", ""),
    )
