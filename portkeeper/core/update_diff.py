"""Update diff engine for portkeeper.

Compares every installed package with the index entries that share its
name and reports which packages are stale. A package is stale against an
entry when:

- the entry's version is newer than the installed version, or
- the package was built for an older OS release than the running system.

The second rule is checked independently of versions: after an OS upgrade
every package built for the previous release needs a rebuild even when its
version string is unchanged.

The diff is a read-only pass over the store.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from portkeeper.core.store import PackageStore
from portkeeper.exceptions import PackageNotFoundError
from portkeeper.models import (
    IndexEntry,
    InstalledPackage,
    UpdateFinding,
    UpdateReport,
)
from portkeeper.utils.logger import get_logger
from portkeeper.utils.version_utils import VersionOrder

logger = get_logger("core.update_diff")

__all__ = ["UpdateDiffEngine"]


class UpdateDiffEngine:
    """Diff installed packages against the store's index.

    Args:
        store: Package store providing both sides of the diff.
        os_release: The running system's OS release. Defaults to
            :meth:`PackageStore.os_release`.
    """

    def __init__(self, store: PackageStore, os_release: Optional[str] = None) -> None:
        self.store = store
        self.os_release = os_release if os_release is not None else store.os_release()

    def diff(self, names: Optional[Iterable[str]] = None) -> UpdateReport:
        """Build the update report.

        Args:
            names: Restrict the diff to these installed packages. ``None``
                diffs everything installed.

        Returns:
            An :class:`UpdateReport` in installed-list order.

        Raises:
            PackageNotFoundError: A requested name is not installed.
                Nothing is diffed in that case.
            StoreError: A store query failed.
        """
        packages = self.select_packages(names)
        return self.diff_packages(packages)

    def select_packages(
        self, names: Optional[Iterable[str]] = None
    ) -> List[InstalledPackage]:
        """Return the installed packages a diff should cover.

        Raises:
            PackageNotFoundError: The first requested name that is not
                installed.
        """
        installed = self.store.list_installed()
        if names is None:
            return installed

        by_name = {pkg.name: pkg for pkg in installed}
        selected: List[InstalledPackage] = []
        for name in names:
            pkg = by_name.get(name)
            if pkg is None:
                raise PackageNotFoundError(
                    f"Package {name} is not installed.", specifier=name
                )
            selected.append(pkg)
        return selected

    def diff_packages(self, packages: Iterable[InstalledPackage]) -> UpdateReport:
        """Diff an explicit list of installed packages."""
        report = UpdateReport(os_release=self.os_release)

        for pkg in packages:
            entries = self.store.lookup_index(pkg.name)

            if not entries:
                logger.debug("%s is no longer in the index", pkg.name)
                report.unavailable.append(pkg)
                continue

            for entry in entries:
                finding = self.check(pkg, entry)
                if finding is not None:
                    report.findings.append(finding)

        logger.info(
            "Update diff: %d finding(s), %d unavailable",
            len(report.findings),
            len(report.unavailable),
        )
        return report

    def check(self, pkg: InstalledPackage, entry: IndexEntry) -> Optional[UpdateFinding]:
        """Compare one installed package with one index entry.

        Each comparison is skipped when either of its operands is missing,
        so the comparator never sees absent data.

        Returns:
            A finding when either rule fires, else ``None``.
        """
        version_outdated = (
            pkg.version is not None
            and entry.version is not None
            and self.store.compare_versions(pkg.version, entry.version)
            is VersionOrder.LESS
        )
        os_outdated = (
            pkg.os_release is not None
            and bool(self.os_release)
            and self.store.compare_versions(pkg.os_release, self.os_release)
            is VersionOrder.LESS
        )

        if not (version_outdated or os_outdated):
            return None

        return UpdateFinding(
            package=pkg,
            entry=entry,
            version_outdated=version_outdated,
            os_outdated=os_outdated,
        )
