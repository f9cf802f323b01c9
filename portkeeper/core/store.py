"""Package store contract for portkeeper.

The orchestration algorithms never touch the package database or index
directly. They drive a :class:`PackageStore`, which is created once per
process and injected into every algorithm that needs it.

Queries return fresh snapshots on every call and raise
:class:`~portkeeper.exceptions.StoreError` when they fail. Commands
(``install_explicit``, ``delete_package``) return an integer result code,
``0`` meaning success, because a failing command is an expected per-item
outcome that batch callers aggregate rather than abort on.
"""

from __future__ import annotations

import abc
from functools import cmp_to_key
from typing import List, Optional

from portkeeper.models import IndexEntry, InstalledPackage
from portkeeper.utils.version_utils import VersionOrder, compare_versions

__all__ = ["PackageStore"]


class PackageStore(abc.ABC):
    """Query/command interface over installed packages and the index."""

    # ------------------------------------------------------------------
    # Installed packages
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def list_installed(self) -> List[InstalledPackage]:
        """Return a snapshot of every installed package."""

    def get_installed(self, name: str) -> Optional[InstalledPackage]:
        """Return the installed package called *name*, if any."""
        for pkg in self.list_installed():
            if pkg.name == name:
                return pkg
        return None

    @abc.abstractmethod
    def get_up_dependencies(self, pkg: InstalledPackage) -> List[InstalledPackage]:
        """Return installed packages that depend on *pkg*.

        Evaluated against the live state on every call. An empty list
        means nothing installed still needs *pkg*, so it can be removed
        without breaking another package.
        """

    # ------------------------------------------------------------------
    # Index
    # ------------------------------------------------------------------

    def load_index(self) -> None:
        """Make the index available for lookups.

        Stores that always have their index ready may keep this no-op.
        """

    @abc.abstractmethod
    def lookup_index(self, name: str) -> List[IndexEntry]:
        """Return every index entry whose ``pkgname`` equals *name*.

        Order is the index's own order; callers rely on it for numbered
        selection lists and for "top match" semantics.
        """

    @abc.abstractmethod
    def search_index(self, term: str) -> List[IndexEntry]:
        """Return entries whose name or comment matches the glob *term*."""

    def index_size(self) -> int:
        """Return the number of entries in the index."""
        return len(self.search_index("*"))

    def newest_entry(self, name: str) -> Optional[IndexEntry]:
        """Return the entry for *name* with the highest version, if any."""
        candidates = [e for e in self.lookup_index(name) if e.version is not None]
        if not candidates:
            return None

        def _cmp(a: IndexEntry, b: IndexEntry) -> int:
            return int(self.compare_versions(a.version, b.version))

        return max(candidates, key=cmp_to_key(_cmp))

    # ------------------------------------------------------------------
    # System
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def os_release(self) -> str:
        """Return the OS release of the running system."""

    def compare_versions(self, left: str, right: str) -> VersionOrder:
        """Order two version strings or OS-release tags."""
        return compare_versions(left, right)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def install_explicit(self, pkgname: str, version: Optional[str]) -> int:
        """Install *pkgname* at *version* plus its missing dependencies.

        The package is marked as explicitly requested; dependencies pulled
        in along the way are marked automatic.
        """

    @abc.abstractmethod
    def delete_package(self, name: str) -> int:
        """Remove one installed package.

        Implementations refuse (non-zero) to remove a package that other
        installed packages still depend on.
        """
