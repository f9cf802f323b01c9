"""Install command implementation for portkeeper.

Resolves each specifier (``name`` or ``name-version``) against the index
with the :class:`~portkeeper.core.InstallResolver` and installs the chosen
entry as an explicitly requested package. When a specifier matches several
index entries the operator picks one from a numbered list.

Typical usage::

    $ portkeeper install nginx
    $ portkeeper install py311-setuptools-63.1.0 pcre2
"""

from __future__ import annotations

import sys
from typing import Tuple

import click

from portkeeper.constants import EXIT_INDEX_UNAVAILABLE, RESULT_OK
from portkeeper.core import ConsolePrompter, InstallResolver
from portkeeper.exceptions import StoreError
from portkeeper.context import pass_context, PortKeeperContext
from portkeeper.utils import get_logger, print_error, print_success

logger = get_logger("commands.install")


@click.command()
@click.argument("specifiers", nargs=-1, required=True)
@pass_context
def install(ctx: PortKeeperContext, specifiers: Tuple[str, ...]) -> None:
    """Install packages from the index.

    Every SPECIFIER is attempted even when an earlier one fails.

    Exits:
        0 when every specifier installed, otherwise the code of the last
        failure (4 when a specifier is not in the index).
    """
    store = ctx.get_store()

    try:
        store.load_index()
    except StoreError as e:
        print_error(f"Unable to load the package index: {e}")
        sys.exit(EXIT_INDEX_UNAVAILABLE)

    resolver = InstallResolver(store, ConsolePrompter())

    def _report(specifier: str, exc: Exception) -> None:
        print_error(f"{specifier}: {exc}")

    result = resolver.install_all(list(specifiers), on_error=_report)
    if result == RESULT_OK:
        print_success(f"Installed {len(specifiers)} package(s).")
    else:
        logger.info("install finished with code %d", result)
    sys.exit(result)
