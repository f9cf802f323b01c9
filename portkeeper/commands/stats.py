"""Stats command implementation for portkeeper.

Prints how many packages are installed and how many the index offers.

Typical usage::

    $ portkeeper stats
    $ portkeeper stats --format json
"""

from __future__ import annotations

import sys
import json
from typing import List

import click

from portkeeper.constants import EXIT_INDEX_UNAVAILABLE, RESULT_FAILED
from portkeeper.exceptions import PortKeeperError, StoreError
from portkeeper.context import pass_context, PortKeeperContext
from portkeeper.utils import get_logger, print_error, print_line

logger = get_logger("commands.stats")


@click.command()
@click.option(
    "--format",
    "-f",
    type=click.Choice(["simple", "json"], case_sensitive=False),
    default="simple",
    help="Output format.",
)
@pass_context
def stats(ctx: PortKeeperContext, format: str) -> None:
    """Show installed and available package counts.

    Exits:
        0 on success, 4 when the index cannot be loaded, 1 when the
        installed database cannot be read.
    """
    store = ctx.get_store()
    try:
        store.load_index()
    except StoreError as e:
        print_error(f"Unable to load the package index: {e}")
        sys.exit(EXIT_INDEX_UNAVAILABLE)

    try:
        installed = len(store.list_installed())
        available = store.index_size()
    except PortKeeperError as e:
        print_error(f"{e}")
        sys.exit(RESULT_FAILED)

    logger.debug("stats: %d installed, %d available", installed, available)

    if format == "json":
        print(json.dumps({"installed": installed, "available": available}, indent=2))
    else:
        for line in format_stats(installed, available):
            print_line(line)
    sys.exit(0)


def format_stats(installed: int, available: int) -> List[str]:
    return [
        "Local package database:",
        f"\tInstalled packages: {installed}",
        "",
        "Remote package database:",
        f"\tPackages available: {available}",
    ]
