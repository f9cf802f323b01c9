"""File-backed package store for portkeeper.

:class:`JsonPackageStore` implements :class:`~portkeeper.core.store.PackageStore`
on top of two JSON documents:

- the **database** of installed packages, rewritten atomically on every
  install or delete::

      {"packages": [{"name": "nginx", "version": "1.24.0_2",
                     "os_release": "13.2", "origin": "www/nginx",
                     "comment": "Robust web server", "locked": false,
                     "automatic": false, "depends": ["pcre2"]}]}

- the already downloaded **index** of available packages, read-only::

      {"entries": [{"pkgname": "nginx", "version": "1.26.1",
                    "os_release": "13.2", "comment": "Robust web server",
                    "depends": ["pcre2"]}]}

The installed set is cached in memory and kept in sync with every write,
so dependency queries always see the effect of the previous deletion.
When ``delete_command`` is configured, deletions are delegated to that
external program and the cache is dropped afterwards so the next query
re-reads whatever the program left behind.

Typical usage::

    store = JsonPackageStore(Path("installed.json"), Path("index.json"))
    store.load_index()
    for entry in store.lookup_index("nginx"):
        print(entry.name_version)
"""

from __future__ import annotations

import json
import shlex
import fnmatch
import platform
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from portkeeper.constants import RESULT_FAILED, RESULT_OK
from portkeeper.core.store import PackageStore
from portkeeper.exceptions import FileOperationError, StoreError
from portkeeper.models import IndexEntry, InstalledPackage
from portkeeper.utils.filesystem import safe_read_file, safe_write_file
from portkeeper.utils.logger import get_logger

logger = get_logger("core.json_store")

__all__ = ["JsonPackageStore"]

_GLOB_CHARS = frozenset("*?[")


class JsonPackageStore(PackageStore):
    """Package store persisted as JSON documents on local disk.

    Args:
        database_path: Installed-package database. A missing file means
            nothing is installed.
        index_path: Downloaded index.
        os_release: Override for the running system's OS release.
        delete_command: External program run as ``<command> <name>`` to
            delete a package. ``None`` edits the database directly.
        backup: Keep a timestamped copy of the database before each write.
    """

    def __init__(
        self,
        database_path: Path,
        index_path: Path,
        *,
        os_release: Optional[str] = None,
        delete_command: Optional[str] = None,
        backup: bool = False,
    ) -> None:
        self.database_path = Path(database_path)
        self.index_path = Path(index_path)
        self.delete_command = delete_command
        self.backup = backup
        self._os_release = os_release

        # name -> package, in database order; None until first read
        self._packages: Optional[Dict[str, InstalledPackage]] = None
        self._index: Optional[List[IndexEntry]] = None

    # ------------------------------------------------------------------
    # Installed packages
    # ------------------------------------------------------------------

    def list_installed(self) -> List[InstalledPackage]:
        return list(self._installed().values())

    def get_installed(self, name: str) -> Optional[InstalledPackage]:
        return self._installed().get(name)

    def get_up_dependencies(self, pkg: InstalledPackage) -> List[InstalledPackage]:
        return [
            other
            for other in self._installed().values()
            if other.name != pkg.name and pkg.name in other.depends
        ]

    # ------------------------------------------------------------------
    # Index
    # ------------------------------------------------------------------

    def load_index(self) -> None:
        """Read the index document.

        Raises:
            StoreError: The index is missing, unreadable or malformed.
        """
        raw = self._read_document(self.index_path, operation="load_index")
        records = raw.get("entries", [])
        if not isinstance(records, list):
            raise StoreError(
                "Index 'entries' must be a list",
                operation="load_index",
            )

        try:
            self._index = [IndexEntry.from_dict(record) for record in records]
        except (KeyError, TypeError, AttributeError) as exc:
            raise StoreError(
                f"Malformed index entry in {self.index_path}: {exc}",
                operation="load_index",
            ) from exc

        logger.info(
            "Loaded %d index entries from %s", len(self._index), self.index_path
        )

    def lookup_index(self, name: str) -> List[IndexEntry]:
        return [entry for entry in self._entries() if entry.pkgname == name]

    def index_size(self) -> int:
        return len(self._entries())

    def search_index(self, term: str) -> List[IndexEntry]:
        """Match *term* against entry names and comments.

        A term containing glob characters (``*``, ``?``, ``[``) must match
        the whole name or comment; a plain term matches anywhere inside.
        """
        pattern = term if _GLOB_CHARS & set(term) else f"*{term}*"
        return [
            entry
            for entry in self._entries()
            if fnmatch.fnmatchcase(entry.pkgname, pattern)
            or fnmatch.fnmatchcase(entry.comment, pattern)
        ]

    # ------------------------------------------------------------------
    # System
    # ------------------------------------------------------------------

    def os_release(self) -> str:
        """Return the configured OS release, else the kernel release.

        A kernel release such as ``13.2-RELEASE-p4`` is cut at the first
        hyphen, giving ``13.2``.
        """
        if self._os_release:
            return self._os_release
        return platform.release().split("-", 1)[0]

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def install_explicit(self, pkgname: str, version: Optional[str]) -> int:
        entry = self._find_entry(pkgname, version)
        if entry is None:
            logger.error("No index entry for %s-%s", pkgname, version)
            return RESULT_FAILED

        current = self.get_installed(pkgname)
        if current is not None and current.locked:
            logger.error("Package %s is locked", pkgname)
            return RESULT_FAILED

        # Work on a copy so a failed dependency leaves the database untouched
        packages = dict(self._installed())
        try:
            self._add_dependencies(entry, packages, visiting={entry.pkgname})
        except StoreError as exc:
            logger.error("Cannot install %s: %s", entry.name_version, exc)
            return RESULT_FAILED

        packages[entry.pkgname] = self._package_from_entry(
            entry, automatic=False, previous=current
        )

        try:
            self._write_database(packages)
        except StoreError as exc:
            logger.error("Cannot install %s: %s", entry.name_version, exc)
            return RESULT_FAILED

        logger.info("Installed %s", entry.name_version)
        return RESULT_OK

    def delete_package(self, name: str) -> int:
        pkg = self.get_installed(name)
        if pkg is None:
            logger.error("Package %s is not installed", name)
            return RESULT_FAILED

        if pkg.locked:
            logger.error("Package %s is locked", name)
            return RESULT_FAILED

        dependents = self.get_up_dependencies(pkg)
        if dependents:
            logger.error(
                "Package %s is still required by %s",
                name,
                ", ".join(dep.name for dep in dependents),
            )
            return RESULT_FAILED

        if self.delete_command:
            return self._run_delete_command(name)

        packages = dict(self._installed())
        del packages[name]
        try:
            self._write_database(packages)
        except StoreError as exc:
            logger.error("Cannot delete %s: %s", name, exc)
            return RESULT_FAILED

        logger.info("Deleted %s", pkg.name_version)
        return RESULT_OK

    # ------------------------------------------------------------------
    # Install helpers (private)
    # ------------------------------------------------------------------

    def _find_entry(self, pkgname: str, version: Optional[str]) -> Optional[IndexEntry]:
        for entry in self.lookup_index(pkgname):
            if entry.version == version:
                return entry
        return None

    def _add_dependencies(
        self,
        entry: IndexEntry,
        packages: Dict[str, InstalledPackage],
        visiting: Set[str],
    ) -> None:
        """Add every missing transitive dependency of *entry* to *packages*.

        Raises:
            StoreError: A dependency has no usable index entry.
        """
        for dep_name in entry.depends:
            if dep_name in packages or dep_name in visiting:
                continue

            dep_entry = self.newest_entry(dep_name)
            if dep_entry is None:
                raise StoreError(
                    f"Dependency {dep_name} of {entry.pkgname} not found in the index",
                    operation="install",
                    package=entry.pkgname,
                )

            visiting.add(dep_name)
            self._add_dependencies(dep_entry, packages, visiting)
            packages[dep_name] = self._package_from_entry(dep_entry, automatic=True)
            logger.debug("Pulling in dependency %s", dep_entry.name_version)

    def _package_from_entry(
        self,
        entry: IndexEntry,
        *,
        automatic: bool,
        previous: Optional[InstalledPackage] = None,
    ) -> InstalledPackage:
        return InstalledPackage(
            name=entry.pkgname,
            version=entry.version,
            os_release=entry.os_release or self.os_release(),
            origin=previous.origin if previous else "",
            comment=entry.comment,
            locked=False,
            automatic=automatic,
            depends=entry.depends,
        )

    def _run_delete_command(self, name: str) -> int:
        argv = shlex.split(self.delete_command or "") + [name]
        logger.debug("Running %s", " ".join(shlex.quote(arg) for arg in argv))

        try:
            result = subprocess.run(argv, check=False)
        except OSError as exc:
            logger.error("Cannot run delete command %s: %s", argv[0], exc)
            return RESULT_FAILED
        finally:
            # The external program owns the database now
            self._packages = None

        if result.returncode != 0:
            logger.error("Delete command exited %d for %s", result.returncode, name)
        return result.returncode

    # ------------------------------------------------------------------
    # Persistence (private)
    # ------------------------------------------------------------------

    def _installed(self) -> Dict[str, InstalledPackage]:
        if self._packages is None:
            self._packages = self._read_database()
        return self._packages

    def _entries(self) -> List[IndexEntry]:
        if self._index is None:
            self.load_index()
        return self._index or []

    def _read_database(self) -> Dict[str, InstalledPackage]:
        if not self.database_path.exists():
            logger.debug("No database at %s, nothing installed", self.database_path)
            return {}

        raw = self._read_document(self.database_path, operation="list_installed")
        records = raw.get("packages", [])
        if not isinstance(records, list):
            raise StoreError(
                "Database 'packages' must be a list",
                operation="list_installed",
            )

        packages: Dict[str, InstalledPackage] = {}
        for record in records:
            try:
                pkg = InstalledPackage.from_dict(record)
            except (KeyError, TypeError, AttributeError) as exc:
                raise StoreError(
                    f"Malformed package record in {self.database_path}: {exc}",
                    operation="list_installed",
                ) from exc

            if pkg.name in packages:
                raise StoreError(
                    f"Duplicate package {pkg.name} in {self.database_path}",
                    operation="list_installed",
                    package=pkg.name,
                )
            packages[pkg.name] = pkg

        return packages

    def _write_database(self, packages: Dict[str, InstalledPackage]) -> None:
        document = {"packages": [pkg.to_dict() for pkg in packages.values()]}
        try:
            safe_write_file(
                self.database_path,
                json.dumps(document, indent=2) + "\n",
                backup=self.backup,
            )
        except FileOperationError as exc:
            raise StoreError(
                str(exc), operation="write_database"
            ) from exc

        self._packages = packages

    @staticmethod
    def _read_document(path: Path, *, operation: str) -> Dict[str, Any]:
        try:
            raw = json.loads(safe_read_file(path))
        except FileOperationError as exc:
            raise StoreError(exc.message, operation=operation) from exc
        except json.JSONDecodeError as exc:
            raise StoreError(
                f"Invalid JSON in {path}: {exc}", operation=operation
            ) from exc

        if not isinstance(raw, dict):
            raise StoreError(
                f"Expected a JSON object in {path}", operation=operation
            )
        return raw

