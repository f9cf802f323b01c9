"""Vercmp command implementation for portkeeper.

Prints how two version strings order under the port version rules:
``<``, ``=`` or ``>``.

Typical usage::

    $ portkeeper vercmp 1.2_1 1.2_3
    <
"""

from __future__ import annotations

import sys

import click

from portkeeper.utils import print_line
from portkeeper.utils.version_utils import VersionOrder, compare_versions

_SYMBOLS = {
    VersionOrder.LESS: "<",
    VersionOrder.EQUAL: "=",
    VersionOrder.GREATER: ">",
}


@click.command()
@click.argument("left")
@click.argument("right")
def vercmp(left: str, right: str) -> None:
    """Compare version LEFT with version RIGHT."""
    print_line(_SYMBOLS[compare_versions(left, right)])
    sys.exit(0)
