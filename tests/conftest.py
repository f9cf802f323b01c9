"""Shared fixtures for the portkeeper test suite."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

import pytest

from portkeeper.constants import RESULT_FAILED, RESULT_OK
from portkeeper.core.store import PackageStore
from portkeeper.models import IndexEntry, InstalledPackage
from portkeeper.utils.console import reconfigure_console
from portkeeper.utils.logger import disable_logging


def make_pkg(
    name: str,
    version: Optional[str] = "1.0",
    os_release: Optional[str] = "13.2",
    depends: Sequence[str] = (),
    **kwargs,
) -> InstalledPackage:
    return InstalledPackage(
        name=name,
        version=version,
        os_release=os_release,
        depends=tuple(depends),
        **kwargs,
    )


def make_entry(
    pkgname: str,
    version: Optional[str] = "1.0",
    os_release: Optional[str] = "13.2",
    comment: str = "",
    depends: Sequence[str] = (),
) -> IndexEntry:
    return IndexEntry(
        pkgname=pkgname,
        version=version,
        os_release=os_release,
        comment=comment,
        depends=tuple(depends),
    )


class MemoryStore(PackageStore):
    """In-memory store that records every command it receives."""

    def __init__(
        self,
        installed: Iterable[InstalledPackage] = (),
        index: Iterable[IndexEntry] = (),
        *,
        release: str = "13.2",
        failing_deletes: Iterable[str] = (),
    ) -> None:
        self.packages: Dict[str, InstalledPackage] = {p.name: p for p in installed}
        self.index: List[IndexEntry] = list(index)
        self.release = release
        self.failing_deletes = set(failing_deletes)
        self.deleted: List[str] = []
        self.installed_calls: List[tuple] = []
        self.dependency_queries = 0

    def list_installed(self) -> List[InstalledPackage]:
        return list(self.packages.values())

    def get_up_dependencies(self, pkg: InstalledPackage) -> List[InstalledPackage]:
        self.dependency_queries += 1
        return [
            other
            for other in self.packages.values()
            if other.name != pkg.name and pkg.name in other.depends
        ]

    def lookup_index(self, name: str) -> List[IndexEntry]:
        return [e for e in self.index if e.pkgname == name]

    def search_index(self, term: str) -> List[IndexEntry]:
        return [e for e in self.index if term in e.pkgname or term in e.comment]

    def index_size(self) -> int:
        return len(self.index)

    def os_release(self) -> str:
        return self.release

    def install_explicit(self, pkgname: str, version: Optional[str]) -> int:
        self.installed_calls.append((pkgname, version))
        return RESULT_OK

    def delete_package(self, name: str) -> int:
        if name in self.failing_deletes or name not in self.packages:
            return RESULT_FAILED
        del self.packages[name]
        self.deleted.append(name)
        return RESULT_OK


def write_database(path: Path, packages: Iterable[InstalledPackage]) -> Path:
    path.write_text(
        json.dumps({"packages": [p.to_dict() for p in packages]}), encoding="utf-8"
    )
    return path


def write_index(path: Path, entries: Iterable[IndexEntry]) -> Path:
    path.write_text(
        json.dumps({"entries": [e.to_dict() for e in entries]}), encoding="utf-8"
    )
    return path


@pytest.fixture(autouse=True)
def _isolate_output(monkeypatch: pytest.MonkeyPatch):
    """Plain console output and no leftover log handlers between tests."""
    monkeypatch.setenv("NO_COLOR", "1")
    for var in (
        "PORTKEEPER_CONFIG",
        "PORTKEEPER_DATABASE",
        "PORTKEEPER_INDEX",
        "PORTKEEPER_OS_RELEASE",
        "PORTKEEPER_COLOR",
    ):
        monkeypatch.delenv(var, raising=False)
    reconfigure_console()
    yield
    disable_logging()
    reconfigure_console()


@pytest.fixture
def store_files(tmp_path: Path):
    """Return a function writing a database and index under ``tmp_path``."""

    def _write(
        installed: Iterable[InstalledPackage] = (),
        index: Iterable[IndexEntry] = (),
    ):
        database = write_database(tmp_path / "installed.json", installed)
        index_path = write_index(tmp_path / "index.json", index)
        return database, index_path

    return _write


@pytest.fixture
def run_cli(store_files):
    """Invoke the CLI against a freshly written database and index.

    Returns ``(result, database_path)``.
    """
    from click.testing import CliRunner

    from portkeeper.cli import cli

    def _run(
        args: Sequence[str],
        installed: Iterable[InstalledPackage] = (),
        index: Iterable[IndexEntry] = (),
        *,
        input: Optional[str] = None,
        os_release: str = "13.2",
    ):
        database, index_path = store_files(installed, index)
        result = CliRunner().invoke(
            cli,
            [
                "--database",
                str(database),
                "--index",
                str(index_path),
                "--os-release",
                os_release,
                *args,
            ],
            input=input,
        )
        return result, database

    return _run
