"""Unit tests for portkeeper.models.package.

Test Coverage:
- InstalledPackage and IndexEntry construction and defaults
- Record parsing (missing keys, null values, depends coercion)
- Serialization back to records
- Immutability and equality semantics
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from portkeeper.models import IndexEntry, InstalledPackage


@pytest.mark.unit
class TestInstalledPackage:
    """Tests for InstalledPackage."""

    def test_defaults(self) -> None:
        pkg = InstalledPackage(name="nginx")

        assert pkg.version is None
        assert pkg.os_release is None
        assert pkg.origin == ""
        assert pkg.comment == ""
        assert pkg.locked is False
        assert pkg.automatic is False
        assert pkg.depends == ()

    def test_name_version(self) -> None:
        pkg = InstalledPackage(name="py311-setuptools", version="63.1.0")

        assert pkg.name_version == "py311-setuptools-63.1.0"
        assert str(pkg) == "py311-setuptools-63.1.0"

    def test_from_dict_full_record(self) -> None:
        pkg = InstalledPackage.from_dict(
            {
                "name": "nginx",
                "version": "1.24.0_2",
                "os_release": "13.2",
                "origin": "www/nginx",
                "comment": "Robust web server",
                "locked": True,
                "automatic": False,
                "depends": ["pcre2", "openssl"],
            }
        )

        assert pkg.name == "nginx"
        assert pkg.version == "1.24.0_2"
        assert pkg.os_release == "13.2"
        assert pkg.origin == "www/nginx"
        assert pkg.locked is True
        assert pkg.depends == ("pcre2", "openssl")

    def test_from_dict_minimal_record(self) -> None:
        pkg = InstalledPackage.from_dict({"name": "a"})

        assert pkg == InstalledPackage(name="a")

    def test_from_dict_keeps_null_as_none(self) -> None:
        pkg = InstalledPackage.from_dict({"name": "a", "version": None, "comment": None})

        assert pkg.version is None
        assert pkg.comment == ""

    def test_from_dict_numeric_version_becomes_string(self) -> None:
        pkg = InstalledPackage.from_dict({"name": "a", "version": 2, "os_release": 13.2})

        assert pkg.version == "2"
        assert pkg.os_release == "13.2"

    def test_from_dict_single_dependency_string(self) -> None:
        pkg = InstalledPackage.from_dict({"name": "a", "depends": "pcre2"})

        assert pkg.depends == ("pcre2",)

    def test_from_dict_requires_name(self) -> None:
        with pytest.raises(KeyError):
            InstalledPackage.from_dict({"version": "1.0"})

    def test_to_dict_round_trips(self) -> None:
        pkg = InstalledPackage(
            name="b",
            version="1.0",
            os_release="13.2",
            origin="misc/b",
            automatic=True,
            depends=("a",),
        )

        record = pkg.to_dict()

        assert record["depends"] == ["a"]
        assert InstalledPackage.from_dict(record) == pkg

    def test_frozen(self) -> None:
        pkg = InstalledPackage(name="a")

        with pytest.raises(FrozenInstanceError):
            pkg.version = "2.0"  # type: ignore[misc]

    def test_depends_not_part_of_equality(self) -> None:
        assert InstalledPackage(name="a", depends=("x",)) == InstalledPackage(
            name="a", depends=("y",)
        )


@pytest.mark.unit
class TestIndexEntry:
    """Tests for IndexEntry."""

    def test_name_version(self) -> None:
        entry = IndexEntry(pkgname="nginx", version="1.26.1")

        assert entry.name_version == "nginx-1.26.1"
        assert str(entry) == "nginx-1.26.1"

    def test_from_dict(self) -> None:
        entry = IndexEntry.from_dict(
            {
                "pkgname": "nginx",
                "version": "1.26.1",
                "os_release": "13.2",
                "comment": "Robust web server",
                "depends": ["pcre2"],
            }
        )

        assert entry == IndexEntry(
            pkgname="nginx",
            version="1.26.1",
            os_release="13.2",
            comment="Robust web server",
        )
        assert entry.depends == ("pcre2",)

    def test_from_dict_requires_pkgname(self) -> None:
        with pytest.raises(KeyError):
            IndexEntry.from_dict({"name": "nginx"})

    def test_to_dict(self) -> None:
        entry = IndexEntry(pkgname="a", version="1.0", depends=("b", "c"))

        assert entry.to_dict() == {
            "pkgname": "a",
            "version": "1.0",
            "os_release": None,
            "comment": "",
            "depends": ["b", "c"],
        }

    def test_hashable(self) -> None:
        entries = {IndexEntry(pkgname="a", version="1"), IndexEntry(pkgname="a", version="1")}

        assert len(entries) == 1
