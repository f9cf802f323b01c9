"""
Bulk removal summary model for portkeeper.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class RemovalSummary:
    """
    Counters accumulated across all passes of a bulk removal.

    ``total`` counts every attempted deletion, including retries of a
    package that failed on an earlier pass, so ``deleted + errored == total``
    always holds.

    Attributes:
        deleted: Successful deletions.
        errored: Failed deletions.
        total: Attempted deletions.
        passes: Number of passes started.
        failures: Names whose deletion failed, once per failure.
    """

    deleted: int = 0
    errored: int = 0
    total: int = 0
    passes: int = 0
    failures: List[str] = field(default_factory=list)

    def record_deleted(self) -> None:
        self.deleted += 1
        self.total += 1

    def record_failed(self, name: str) -> None:
        self.errored += 1
        self.total += 1
        self.failures.append(name)

    @property
    def has_errors(self) -> bool:
        return self.errored > 0

    def to_json(self) -> Dict[str, Any]:
        return {
            "deleted": self.deleted,
            "errored": self.errored,
            "total": self.total,
            "passes": self.passes,
            "failures": list(self.failures),
        }

    def __str__(self) -> str:
        return (
            f"Packages deleted: {self.deleted}\n"
            f"Errors: {self.errored}\n"
            f"Total: {self.total}"
        )
