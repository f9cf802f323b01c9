"""Search command implementation for portkeeper.

Prints every index entry whose name or comment matches one of the terms,
as tab-separated ``name``, ``version`` and ``comment``.

Typical usage::

    $ portkeeper search nginx
    $ portkeeper search 'py3*-requests' 'web server'
"""

from __future__ import annotations

import sys
from typing import Tuple

import click

from portkeeper.constants import EXIT_INDEX_UNAVAILABLE, RESULT_FAILED
from portkeeper.exceptions import StoreError
from portkeeper.context import pass_context, PortKeeperContext
from portkeeper.utils import get_logger, print_error, print_line

logger = get_logger("commands.search")


@click.command()
@click.argument("terms", nargs=-1)
@pass_context
def search(ctx: PortKeeperContext, terms: Tuple[str, ...]) -> None:
    """Search the index by name or comment.

    A TERM with glob characters must match a whole name or comment; a plain
    TERM matches anywhere inside one.
    """
    if not terms:
        print_error("Search terms required")
        sys.exit(RESULT_FAILED)

    store = ctx.get_store()
    try:
        store.load_index()
    except StoreError as e:
        print_error(f"Unable to load the package index: {e}")
        sys.exit(EXIT_INDEX_UNAVAILABLE)

    for term in terms:
        try:
            entries = store.search_index(term)
        except StoreError as e:
            print_error(f"{e}")
            sys.exit(RESULT_FAILED)

        logger.debug("%d match(es) for %r", len(entries), term)
        for entry in entries:
            print_line(f"{entry.pkgname}\t{entry.version or ''}\t{entry.comment}")

    sys.exit(0)
