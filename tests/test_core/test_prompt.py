from __future__ import annotations

from unittest.mock import patch

import pytest

from conftest import make_entry
from portkeeper.core.prompt import ConsolePrompter, ScriptedPrompter, parse_choice
from portkeeper.exceptions import InvalidSelectionError, PortKeeperError


@pytest.mark.unit
class TestParseChoice:
    """Tests for parse_choice."""

    @pytest.mark.parametrize("answer,expected", [("0", 0), ("2", 2), (" 1 \n", 1)])
    def test_valid(self, answer: str, expected: int) -> None:
        assert parse_choice(answer, 3) == expected

    @pytest.mark.parametrize("answer", ["3", "-1", "abc", "", "1.5"])
    def test_invalid(self, answer: str) -> None:
        with pytest.raises(InvalidSelectionError) as exc_info:
            parse_choice(answer, 3)

        assert exc_info.value.answer == answer


@pytest.mark.unit
class TestSelectOne:
    """Tests for the shared selection loop."""

    def test_lists_candidates_zero_based(self) -> None:
        prompter = ScriptedPrompter(["1"])
        candidates = [make_entry("foo", "1.0"), make_entry("foo", "2.0")]

        choice = prompter.select_one(candidates)

        assert choice == 1
        assert prompter.transcript == [
            "Multiple packages found. Please select one:",
            "0. foo-1.0",
            "1. foo-2.0",
        ]
        assert prompter.warnings == []

    def test_reprompts_until_valid(self) -> None:
        prompter = ScriptedPrompter(["5", "x", "0"])
        candidates = [make_entry("foo", "1.0"), make_entry("foo", "2.0")]

        assert prompter.select_one(candidates) == 0
        assert prompter.warnings == ["Please select an entry 0 - 1"] * 2

    def test_candidate_list_shown_once(self) -> None:
        prompter = ScriptedPrompter(["9", "1"])

        prompter.select_one([make_entry("a", "1"), make_entry("a", "2")])

        assert len(prompter.transcript) == 3

    def test_no_candidates_rejected(self) -> None:
        with pytest.raises(ValueError):
            ScriptedPrompter(["0"]).select_one([])

    def test_scripted_answers_exhausted(self) -> None:
        prompter = ScriptedPrompter(["7"])

        with pytest.raises(PortKeeperError, match="No scripted answers left"):
            prompter.select_one([make_entry("a", "1"), make_entry("a", "2")])


@pytest.mark.unit
class TestConsolePrompter:
    """Tests for ConsolePrompter."""

    def test_reads_from_input(self, capsys: pytest.CaptureFixture) -> None:
        with patch("builtins.input", side_effect=["nope", "1"]):
            choice = ConsolePrompter().select_one(
                [make_entry("foo", "1.0"), make_entry("foo", "2.0")]
            )

        out = capsys.readouterr().out
        assert choice == 1
        assert "Multiple packages found. Please select one:" in out
        assert "0. foo-1.0" in out
        assert "Please select an entry 0 - 1" in out

    def test_eof_aborts(self) -> None:
        with patch("builtins.input", side_effect=EOFError):
            with pytest.raises(PortKeeperError, match="Input closed"):
                ConsolePrompter().select_one(
                    [make_entry("foo", "1.0"), make_entry("foo", "2.0")]
                )
