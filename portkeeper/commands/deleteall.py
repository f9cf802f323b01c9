"""Deleteall command implementation for portkeeper.

Removes every installed package with the
:class:`~portkeeper.core.BulkRemover`, which deletes leaves first and
repeats until nothing is left. A dependency cycle stops the run with a
dedicated exit code instead of hanging.

Typical usage::

    $ portkeeper deleteall
    $ portkeeper deleteall -y
"""

from __future__ import annotations

import sys

import click

from portkeeper.constants import EXIT_UNREMOVABLE, RESULT_FAILED, RESULT_OK
from portkeeper.core import BulkRemover
from portkeeper.exceptions import (
    PortKeeperError,
    RemovalInterruptedError,
    UnremovableSetError,
)
from portkeeper.models import InstalledPackage
from portkeeper.context import pass_context, PortKeeperContext
from portkeeper.utils import (
    confirm,
    get_logger,
    print_error,
    print_line,
    print_warning,
)

logger = get_logger("commands.deleteall")


@click.command()
@click.option(
    "--yes",
    "-y",
    is_flag=True,
    help="Skip confirmation prompt.",
)
@pass_context
def deleteall(ctx: PortKeeperContext, yes: bool) -> None:
    """Delete every installed package in dependency order.

    Exits:
        0 when everything was deleted, 1 on any deletion error or when
        nothing is installed, 3 when the remaining packages can never be
        removed (dependency cycle).
    """
    store = ctx.get_store()

    try:
        installed = store.list_installed()
    except PortKeeperError as e:
        print_error(f"{e}")
        sys.exit(RESULT_FAILED)

    if not installed:
        print_warning("No packages installed.")
        sys.exit(RESULT_FAILED)

    if not yes and not confirm(
        f"Delete all {len(installed)} installed packages?", default=False
    ):
        logger.info("deleteall cancelled by user")
        sys.exit(RESULT_OK)

    def _report(pkg: InstalledPackage, code: int) -> None:
        print_error(f"Error deleting {pkg.name_version} (code {code})")

    remover = BulkRemover(store, on_failure=_report)

    try:
        summary = remover.remove_all()
    except UnremovableSetError as e:
        print_error(e.message)
        print_line(f"Remaining: {', '.join(e.remaining)}")
        if e.summary is not None:
            for line in str(e.summary).splitlines():
                print_line(line)
        sys.exit(EXIT_UNREMOVABLE)
    except RemovalInterruptedError as e:
        print_error(f"{e}")
        if e.summary is not None:
            for line in str(e.summary).splitlines():
                print_line(line)
        sys.exit(RESULT_FAILED)
    except PortKeeperError as e:
        print_error(f"{e}")
        sys.exit(RESULT_FAILED)

    for line in str(summary).splitlines():
        print_line(line)

    sys.exit(RESULT_FAILED if summary.has_errors else RESULT_OK)
