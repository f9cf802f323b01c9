"""
Unified data model exports for portkeeper.

This module re-exports all core data models to provide a stable and
convenient public API. Users can import models directly from
``portkeeper.models`` instead of individual submodules.

Example:
    >>> from portkeeper.models import InstalledPackage, IndexEntry
"""

from __future__ import annotations

from portkeeper.models.package import IndexEntry, InstalledPackage
from portkeeper.models.removal import RemovalSummary
from portkeeper.models.report import UpdateFinding, UpdateReport

__all__ = [
    "InstalledPackage",
    "IndexEntry",
    "RemovalSummary",
    "UpdateFinding",
    "UpdateReport",
]
