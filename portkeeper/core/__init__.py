"""
Core functionality exports for portkeeper.

The package store contract, its JSON-backed implementation, and the three
orchestration algorithms that drive it:

    from portkeeper.core import JsonPackageStore, UpdateDiffEngine

Every algorithm receives the store it works on through its constructor.
"""

from __future__ import annotations

from portkeeper.core.store import PackageStore
from portkeeper.core.json_store import JsonPackageStore
from portkeeper.core.prompt import ConsolePrompter, Prompter, ScriptedPrompter
from portkeeper.core.remover import BulkRemover
from portkeeper.core.resolver import InstallResolver, PackageSpecifier, parse_specifier
from portkeeper.core.update_diff import UpdateDiffEngine

__all__ = [
    "PackageStore",
    "JsonPackageStore",
    "Prompter",
    "ConsolePrompter",
    "ScriptedPrompter",
    "InstallResolver",
    "PackageSpecifier",
    "parse_specifier",
    "UpdateDiffEngine",
    "BulkRemover",
]
