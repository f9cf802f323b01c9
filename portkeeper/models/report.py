"""
Update report models for portkeeper.

An :class:`UpdateReport` is the result of diffing the installed packages
against the index. It holds one :class:`UpdateFinding` per (installed
package, index entry) pair that makes the package stale, and the packages
that have dropped out of the index entirely.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from portkeeper.models.package import IndexEntry, InstalledPackage
from portkeeper.utils.version_utils import get_update_type


@dataclass(frozen=True)
class UpdateFinding:
    """
    One stale (package, index entry) pair.

    Attributes:
        package: The installed package.
        entry: The index entry it was compared with.
        version_outdated: The entry's version is newer than the installed one.
        os_outdated: The package was built for an older OS release than the
            running system, whatever the versions say.
    """

    package: InstalledPackage
    entry: IndexEntry
    version_outdated: bool = False
    os_outdated: bool = False

    @property
    def update_type(self) -> str:
        """Classify the change for display.

        Returns ``"rebuild"`` when only the OS release is stale, otherwise
        the version-change kind from
        :func:`~portkeeper.utils.version_utils.get_update_type`.
        """
        if not self.version_outdated:
            return "rebuild"
        return get_update_type(self.package.version, self.entry.version)

    def to_json(self) -> Dict[str, Any]:
        reasons: List[str] = []
        if self.version_outdated:
            reasons.append("version")
        if self.os_outdated:
            reasons.append("os_release")

        return {
            "name": self.package.name,
            "installed": self.package.version,
            "os_release": self.package.os_release,
            "available": self.entry.version,
            "update_type": self.update_type,
            "reasons": reasons,
        }


@dataclass
class UpdateReport:
    """
    Result of one update diff run.

    Attributes:
        os_release: The running system's OS release used for the diff.
        findings: Stale pairs in installed-list order, then index order.
        unavailable: Installed packages with no index entry, each once.
    """

    os_release: str
    findings: List[UpdateFinding] = field(default_factory=list)
    unavailable: List[InstalledPackage] = field(default_factory=list)

    @property
    def has_updates(self) -> bool:
        return bool(self.findings)

    @property
    def is_empty(self) -> bool:
        """True when nothing is stale and nothing dropped out of the index."""
        return not self.findings and not self.unavailable

    def outdated_names(self) -> List[str]:
        """Names of stale packages, de-duplicated, in report order."""
        seen: Dict[str, None] = {}
        for finding in self.findings:
            seen.setdefault(finding.package.name, None)
        return list(seen)

    def to_json(self) -> Dict[str, Any]:
        return {
            "os_release": self.os_release,
            "updates": [finding.to_json() for finding in self.findings],
            "unavailable": [
                {"name": pkg.name, "installed": pkg.version}
                for pkg in self.unavailable
            ],
        }
