from __future__ import annotations

import pytest

from conftest import make_entry
from portkeeper.constants import EXIT_INDEX_UNAVAILABLE

INDEX = [
    make_entry("nginx", "1.26.1", comment="Robust web server"),
    make_entry("lighttpd", "1.4.76", comment="Secure and fast web server"),
    make_entry("vim", "9.1", comment="Improved vi"),
]


@pytest.mark.integration
class TestSearchCommand:
    """Tests for ``portkeeper search``."""

    def test_plain_term(self, run_cli) -> None:
        result, _ = run_cli(["search", "web"], index=INDEX)

        assert result.exit_code == 0
        rows = [line.split(None, 2) for line in result.output.splitlines()]
        assert rows == [
            ["nginx", "1.26.1", "Robust web server"],
            ["lighttpd", "1.4.76", "Secure and fast web server"],
        ]

    def test_glob_term(self, run_cli) -> None:
        result, _ = run_cli(["search", "v*"], index=INDEX)

        assert [line.split()[0] for line in result.output.splitlines()] == ["vim"]

    def test_several_terms(self, run_cli) -> None:
        result, _ = run_cli(["search", "vim", "nginx"], index=INDEX)

        assert [line.split()[0] for line in result.output.splitlines()] == [
            "vim",
            "nginx",
        ]

    def test_no_match(self, run_cli) -> None:
        result, _ = run_cli(["search", "emacs"], index=INDEX)

        assert result.exit_code == 0
        assert result.output == ""

    def test_terms_required(self, run_cli) -> None:
        result, _ = run_cli(["search"], index=INDEX)

        assert result.exit_code == 1
        assert "Search terms required" in result.output

    def test_index_unavailable(self, run_cli, tmp_path) -> None:
        result, _ = run_cli(["--index", str(tmp_path / "nope.json"), "search", "x"])

        assert result.exit_code == EXIT_INDEX_UNAVAILABLE
