"""
Package data models for portkeeper.

Two records describe everything the orchestration algorithms see:

- :class:`InstalledPackage`: one row of the installed-package database.
- :class:`IndexEntry`: one available package in the remote index. Several
  entries may share a ``pkgname`` (different versions or builds).

Both are frozen: a list returned by the store is a snapshot, and the store
stays the only owner of the live state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple


def _optional_str(value: Any) -> Optional[str]:
    """Coerce a JSON value to ``str`` while keeping ``None`` as absent."""
    if value is None:
        return None
    return str(value)


def _names(value: Any) -> Tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(item) for item in value)


@dataclass(frozen=True)
class InstalledPackage:
    """
    A package recorded in the installed-package database.

    Attributes:
        name: Unique package name within a snapshot.
        version: Installed version, or None when the database lacks it.
        os_release: OS release the package was built for, or None.
        origin: Port origin, e.g. ``www/nginx``.
        comment: One-line description.
        locked: Whether the package is locked against changes.
        automatic: True when installed only to satisfy a dependency.
        depends: Names of packages this package requires.
    """

    name: str
    version: Optional[str] = None
    os_release: Optional[str] = None
    origin: str = ""
    comment: str = ""
    locked: bool = False
    automatic: bool = False
    depends: Tuple[str, ...] = field(default=(), compare=False)

    @property
    def name_version(self) -> str:
        """Return ``name-version`` as printed in listings."""
        return f"{self.name}-{self.version}"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InstalledPackage":
        """Build a package from one database record.

        Raises:
            KeyError: The record has no ``name``.
        """
        return cls(
            name=str(data["name"]),
            version=_optional_str(data.get("version")),
            os_release=_optional_str(data.get("os_release")),
            origin=str(data.get("origin") or ""),
            comment=str(data.get("comment") or ""),
            locked=bool(data.get("locked", False)),
            automatic=bool(data.get("automatic", False)),
            depends=_names(data.get("depends")),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a database record."""
        return {
            "name": self.name,
            "version": self.version,
            "os_release": self.os_release,
            "origin": self.origin,
            "comment": self.comment,
            "locked": self.locked,
            "automatic": self.automatic,
            "depends": list(self.depends),
        }

    def __str__(self) -> str:
        return self.name_version


@dataclass(frozen=True)
class IndexEntry:
    """
    A package available in the remote index.

    Attributes:
        pkgname: Package name; not unique across the index.
        version: Available version.
        os_release: OS release the entry was built for, if recorded.
        comment: One-line description.
        depends: Names of packages this entry requires.
    """

    pkgname: str
    version: Optional[str] = None
    os_release: Optional[str] = None
    comment: str = ""
    depends: Tuple[str, ...] = field(default=(), compare=False)

    @property
    def name_version(self) -> str:
        """Return ``pkgname-version`` as shown in selection lists."""
        return f"{self.pkgname}-{self.version}"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IndexEntry":
        """Build an entry from one index record.

        Raises:
            KeyError: The record has no ``pkgname``.
        """
        return cls(
            pkgname=str(data["pkgname"]),
            version=_optional_str(data.get("version")),
            os_release=_optional_str(data.get("os_release")),
            comment=str(data.get("comment") or ""),
            depends=_names(data.get("depends")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pkgname": self.pkgname,
            "version": self.version,
            "os_release": self.os_release,
            "comment": self.comment,
            "depends": list(self.depends),
        }

    def __str__(self) -> str:
        return self.name_version
