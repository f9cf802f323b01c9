"""Info command implementation for portkeeper.

Prints what the store knows about one package: its installed record, the
packages that still depend on it, and the newest version the index offers.
A package that is only in the index is described from its newest entry.

Typical usage::

    $ portkeeper info nginx
"""

from __future__ import annotations

import sys
from typing import List, Optional

import click

from portkeeper.constants import (
    EXIT_INDEX_UNAVAILABLE,
    EXIT_NOT_FOUND,
    INFO_LINE_FORMAT,
    RESULT_FAILED,
)
from portkeeper.exceptions import PortKeeperError, StoreError
from portkeeper.models import IndexEntry, InstalledPackage
from portkeeper.context import pass_context, PortKeeperContext
from portkeeper.utils import get_logger, print_error, print_line

logger = get_logger("commands.info")


@click.command()
@click.argument("name")
@pass_context
def info(ctx: PortKeeperContext, name: str) -> None:
    """Show details for the package NAME.

    Exits:
        0 on success, 4 when NAME is neither installed nor in the index or
        when the index cannot be loaded, 1 on other store errors.
    """
    store = ctx.get_store()
    try:
        store.load_index()
    except StoreError as e:
        print_error(f"Unable to load the package index: {e}")
        sys.exit(EXIT_INDEX_UNAVAILABLE)

    try:
        pkg = store.get_installed(name)
        newest = store.newest_entry(name)
        dependents = store.get_up_dependencies(pkg) if pkg is not None else []
    except PortKeeperError as e:
        print_error(f"{e}")
        sys.exit(RESULT_FAILED)

    if pkg is None and newest is None:
        print_error(f"Package {name} not found.")
        sys.exit(EXIT_NOT_FOUND)

    for line in format_info(pkg, newest, [dep.name for dep in dependents]):
        print_line(line)
    sys.exit(0)


def format_info(
    pkg: Optional[InstalledPackage],
    newest: Optional[IndexEntry],
    required_by: List[str],
) -> List[str]:
    """Return the ``label: value`` lines describing one package.

    Nothing is returned when both *pkg* and *newest* are ``None``.
    """
    if pkg is not None:
        fields = [
            ("Name", pkg.name),
            ("Version", pkg.version or "-"),
            ("OS release", pkg.os_release or "-"),
            ("Origin", pkg.origin or "-"),
            ("Comment", pkg.comment or "-"),
            ("Installed", "yes (automatic)" if pkg.automatic else "yes"),
            ("Locked", "yes" if pkg.locked else "no"),
            ("Depends on", ", ".join(pkg.depends) or "-"),
            ("Required by", ", ".join(required_by) or "-"),
            ("Latest", newest.version if newest is not None else "not in index"),
        ]
        header = pkg.name_version
    elif newest is not None:
        fields = [
            ("Name", newest.pkgname),
            ("Version", newest.version or "-"),
            ("OS release", newest.os_release or "-"),
            ("Comment", newest.comment or "-"),
            ("Installed", "no"),
            ("Depends on", ", ".join(newest.depends) or "-"),
        ]
        header = newest.name_version
    else:
        return []

    return [header] + [
        INFO_LINE_FORMAT.format(label=label, value=value) for label, value in fields
    ]
