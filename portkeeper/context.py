"""
Shared context object for portkeeper CLI commands.

This module defines the Click context object used to share configuration,
runtime options and the package store across CLI subcommands.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from portkeeper.config import PortKeeperConfig
from portkeeper.core.json_store import JsonPackageStore
from portkeeper.core.store import PackageStore
from portkeeper.utils.logger import get_logger

logger = get_logger("context")


class PortKeeperContext:
    """Global context object for portkeeper CLI commands.

    An instance of this class is created once per CLI invocation and
    passed to commands using Click's context mechanism. It owns the one
    package store of the process; commands borrow it through
    :meth:`get_store`.

    Attributes:
        config_path: Path to the portkeeper configuration file, if any.
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG).
        color: Whether colored terminal output is enabled.
        config: Effective configuration (file, environment and CLI options).
    """

    __slots__ = ("config_path", "verbose", "color", "config", "_store")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.verbose: int = 0
        self.color: bool = True
        self.config: PortKeeperConfig = PortKeeperConfig()
        self._store: Optional[PackageStore] = None

    def get_store(self) -> PackageStore:
        """Return the process-wide store, creating it on first use."""
        if self._store is None:
            cfg = self.config
            logger.debug(
                "Opening store: database=%s index=%s",
                cfg.database_path,
                cfg.index_path,
            )
            self._store = JsonPackageStore(
                cfg.database_path,
                cfg.index_path,
                os_release=cfg.os_release,
                delete_command=cfg.delete_command,
                backup=cfg.backup,
            )
        return self._store

    def set_store(self, store: PackageStore) -> None:
        """Use *store* instead of the configured one."""
        self._store = store


#: Click decorator for injecting :class:`PortKeeperContext` into commands.
pass_context = click.make_pass_decorator(PortKeeperContext, ensure=True)
