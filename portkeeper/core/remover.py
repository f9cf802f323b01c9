"""Dependency-ordered bulk removal for portkeeper.

Removes every installed package without building a dependency graph, by
peeling leaves: each pass deletes the packages nothing else installed
depends on, which turns their own dependencies into leaves for the next
pass. Dependents are re-queried for every package on every pass, since each
deletion changes the answer.

A pass that defers packages without deleting anything can never make
progress again, so the remover stops with
:class:`~portkeeper.exceptions.UnremovableSetError` instead of looping.
"""

from __future__ import annotations

from typing import Callable, List, Optional

from portkeeper.constants import RESULT_OK
from portkeeper.core.store import PackageStore
from portkeeper.exceptions import (
    RemovalInterruptedError,
    StoreError,
    UnremovableSetError,
)
from portkeeper.models import InstalledPackage, RemovalSummary
from portkeeper.utils.logger import get_logger

logger = get_logger("core.remover")

__all__ = ["BulkRemover"]

FailureReporter = Callable[[InstalledPackage, int], None]


class BulkRemover:
    """Delete the whole installed set in dependency order.

    Args:
        store: Package store to query and delete from.
        on_failure: Called with ``(package, result_code)`` for every failed
            deletion. Failures never stop the current pass.
    """

    def __init__(
        self,
        store: PackageStore,
        on_failure: Optional[FailureReporter] = None,
    ) -> None:
        self.store = store
        self.on_failure = on_failure

    def remove_all(self) -> RemovalSummary:
        """Run passes until nothing is deferred.

        Returns:
            Counters for the whole run. Packages whose deletion failed on
            the last pass stay installed.

        Raises:
            UnremovableSetError: A pass deferred packages but deleted none.
            RemovalInterruptedError: The installed list could not be read;
                the error carries the summary of the passes already run.
        """
        summary = RemovalSummary()

        while True:
            snapshot = self._list_installed(summary)
            if not snapshot:
                break

            summary.passes += 1
            deleted_before = summary.deleted
            deferred = self._run_pass(snapshot, summary)

            logger.info(
                "Pass %d: %d deleted, %d deferred",
                summary.passes,
                summary.deleted - deleted_before,
                len(deferred),
            )

            if not deferred:
                break

            if summary.deleted == deleted_before:
                remaining = [pkg.name for pkg in self._list_installed(summary)]
                raise UnremovableSetError(
                    f"No package could be removed on pass {summary.passes}; "
                    f"{len(remaining)} remain, likely a dependency cycle",
                    pass_number=summary.passes,
                    remaining=remaining,
                    summary=summary,
                )

        return summary

    def _list_installed(self, summary: RemovalSummary) -> List[InstalledPackage]:
        try:
            return self.store.list_installed()
        except StoreError as exc:
            logger.error(
                "Installed list unreadable after %d pass(es): %s", summary.passes, exc
            )
            raise RemovalInterruptedError(
                f"Could not read the installed packages after pass {summary.passes}",
                pass_number=summary.passes,
                summary=summary,
                original_error=exc,
            ) from exc

    def _run_pass(
        self, snapshot: List[InstalledPackage], summary: RemovalSummary
    ) -> List[InstalledPackage]:
        """Delete every current leaf in *snapshot*; return the deferred ones."""
        deferred: List[InstalledPackage] = []

        for pkg in snapshot:
            try:
                dependents = self.store.get_up_dependencies(pkg)
            except StoreError as exc:
                logger.warning("Cannot query dependents of %s: %s", pkg.name, exc)
                deferred.append(pkg)
                continue

            if dependents:
                logger.debug(
                    "Deferring %s, needed by %s",
                    pkg.name,
                    ", ".join(dep.name for dep in dependents),
                )
                deferred.append(pkg)
                continue

            code = self.store.delete_package(pkg.name)
            if code == RESULT_OK:
                summary.record_deleted()
                logger.debug("Deleted %s", pkg.name_version)
            else:
                summary.record_failed(pkg.name)
                logger.error("Error deleting %s (code %d)", pkg.name_version, code)
                if self.on_failure is not None:
                    self.on_failure(pkg, code)

        return deferred
