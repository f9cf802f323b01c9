"""
Command-line interface for portkeeper.

This module provides the main CLI entry point and handles global options,
configuration loading, and command registration.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from portkeeper.config import load_config
from portkeeper.__version__ import __version__
from portkeeper.context import PortKeeperContext
from portkeeper.constants import ENV_CONFIG
from portkeeper.exceptions import ConfigError, PortKeeperError
from portkeeper.utils.logger import get_logger, level_for_verbosity, setup_logging
from portkeeper.utils.console import print_error, print_warning, reconfigure_console

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar=ENV_CONFIG,
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="PORTKEEPER_COLOR",
)
@click.option(
    "--database",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Installed-package database (overrides config).",
)
@click.option(
    "--index",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Downloaded package index (overrides config).",
)
@click.option(
    "--os-release",
    help="OS release of the running system (overrides config).",
)
@click.version_option(
    version=__version__,
    prog_name="portkeeper",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
    database: Optional[Path],
    index: Optional[Path],
    os_release: Optional[str],
) -> None:
    """portkeeper: update, install and remove binary packages.

    \b
    Available commands:
      portkeeper update            Show packages with available updates
      portkeeper install           Install packages from the index
      portkeeper delete            Delete packages by name
      portkeeper deleteall         Delete every installed package
      portkeeper list              List installed packages
      portkeeper search            Search the index
      portkeeper info              Show details for one package
      portkeeper stats             Show package counts
      portkeeper vercmp            Compare two versions

    \b
    Examples:
      portkeeper update
      portkeeper install nginx
      portkeeper -v deleteall -y

    Use ``portkeeper COMMAND --help`` for command-specific options.
    """
    _configure_logging(verbose)

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    # CLI options sit on top of file and environment settings
    if database is not None:
        loaded_config.database_path = database
    if index is not None:
        loaded_config.index_path = index
    if os_release:
        loaded_config.os_release = os_release

    portkeeper_ctx = PortKeeperContext()
    portkeeper_ctx.config_path = config or loaded_config.source_path
    portkeeper_ctx.color = color
    portkeeper_ctx.verbose = verbose
    portkeeper_ctx.config = loaded_config
    ctx.obj = portkeeper_ctx

    # Respect NO_COLOR for downstream libraries
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    logger.debug("portkeeper v%s", __version__)
    logger.debug("Config path: %s", portkeeper_ctx.config_path)
    logger.debug("Effective configuration: %s", loaded_config.to_log_dict())
    logger.debug("Verbosity: %s | Color: %s", verbose, color)


def _configure_logging(verbose: int) -> None:
    """Configure logging level based on verbosity flags."""
    level = level_for_verbosity(verbose)
    setup_logging(level=level, verbose=verbose >= 2)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))


# Register CLI subcommands
from portkeeper.commands.delete import delete  # noqa: E402
from portkeeper.commands.deleteall import deleteall  # noqa: E402
from portkeeper.commands.info import info  # noqa: E402
from portkeeper.commands.install import install  # noqa: E402
from portkeeper.commands.list import list_packages  # noqa: E402
from portkeeper.commands.search import search  # noqa: E402
from portkeeper.commands.stats import stats  # noqa: E402
from portkeeper.commands.update import update  # noqa: E402
from portkeeper.commands.vercmp import vercmp  # noqa: E402

cli.add_command(update)
cli.add_command(install)
cli.add_command(delete)
cli.add_command(deleteall)
cli.add_command(list_packages)
cli.add_command(search)
cli.add_command(info)
cli.add_command(stats)
cli.add_command(vercmp)


def main() -> int:
    """Main entry point for the portkeeper CLI.

    Returns:
        Exit code:
            0   Success
            1   Unhandled or application error
            2   Usage error (Click)
            3+  Command-specific failures (see each command)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        cli(standalone_mode=False)
        return 0

    except SystemExit as exc:
        if exc.code is None:
            return 0
        if isinstance(exc.code, int):
            return exc.code
        return 1

    except click.exceptions.Abort:
        print_warning("\nOperation cancelled by user")
        return 130

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except PortKeeperError as exc:
        print_error(str(exc))
        logger.debug(
            "PortKeeperError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return 1

    except KeyboardInterrupt:
        print_warning("\nOperation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
