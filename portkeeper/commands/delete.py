"""Delete command implementation for portkeeper.

Deletes the named packages one at a time. The store refuses to delete a
package that is locked or that another installed package still needs.

Typical usage::

    $ portkeeper delete nginx pcre2
"""

from __future__ import annotations

import sys
from typing import Tuple

import click

from portkeeper.constants import RESULT_OK
from portkeeper.context import pass_context, PortKeeperContext
from portkeeper.utils import get_logger, print_error

logger = get_logger("commands.delete")


@click.command()
@click.argument("names", nargs=-1, required=True)
@pass_context
def delete(ctx: PortKeeperContext, names: Tuple[str, ...]) -> None:
    """Delete installed packages by name.

    Every NAME is attempted even when an earlier one fails.

    Exits:
        0 when every package was deleted, otherwise the code of the last
        failed deletion.
    """
    store = ctx.get_store()
    result = RESULT_OK

    for name in names:
        code = store.delete_package(name)
        if code != RESULT_OK:
            print_error(f"Error deleting {name} (code {code})")
            result = code

    sys.exit(result)
