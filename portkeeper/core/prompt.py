"""Operator prompts for choosing one index entry among several.

:class:`Prompter` owns the selection loop: show the numbered candidates,
read an answer, and keep asking until the answer is an integer in
``[0, count)``. Subclasses only decide where answers come from and where
messages go, so the interactive console prompt and scripted prompts used by
automation share exactly the same validation.
"""

from __future__ import annotations

import abc
from typing import Iterable, Iterator, List, Optional, Sequence

from portkeeper.exceptions import InvalidSelectionError, PortKeeperError
from portkeeper.models import IndexEntry
from portkeeper.utils.console import get_raw_console
from portkeeper.utils.logger import get_logger

logger = get_logger("core.prompt")

__all__ = ["Prompter", "ConsolePrompter", "ScriptedPrompter", "parse_choice"]


def parse_choice(answer: str, count: int) -> int:
    """Turn an operator answer into a 0-based candidate index.

    Args:
        answer: Raw text typed by the operator.
        count: Number of candidates shown.

    Returns:
        An index ``i`` with ``0 <= i < count``.

    Raises:
        InvalidSelectionError: The answer is not an integer or is out of
            range.

    Example::

        >>> parse_choice(" 1 ", 3)
        1
    """
    text = answer.strip()
    try:
        choice = int(text)
    except ValueError:
        raise InvalidSelectionError(
            f"Not a number: {text!r}", answer=answer
        ) from None

    if not 0 <= choice < count:
        raise InvalidSelectionError(
            f"Selection {choice} out of range", answer=answer
        )
    return choice


class Prompter(abc.ABC):
    """Blocking selection of one candidate out of several."""

    def select_one(self, candidates: Sequence[IndexEntry]) -> int:
        """Return the 0-based index of the candidate the operator picked.

        Candidates are listed in the given order as ``"{i}. {name}-{version}"``.
        Invalid answers trigger a hint and another read; there is no
        timeout.
        """
        count = len(candidates)
        if count == 0:
            raise ValueError("select_one() needs at least one candidate")

        self.show("Multiple packages found. Please select one:")
        for position, entry in enumerate(candidates):
            self.show(f"{position}. {entry.name_version}")

        while True:
            answer = self.read_answer()
            try:
                choice = parse_choice(answer, count)
            except InvalidSelectionError as exc:
                logger.debug("Rejected selection: %s", exc)
                self.warn(f"Please select an entry 0 - {count - 1}")
                continue

            logger.debug("Selected %s", candidates[choice].name_version)
            return choice

    @abc.abstractmethod
    def read_answer(self) -> str:
        """Block until the operator supplies one answer."""

    @abc.abstractmethod
    def show(self, message: str) -> None:
        """Display one line of the selection list."""

    @abc.abstractmethod
    def warn(self, message: str) -> None:
        """Display a hint after an invalid answer."""


class ConsolePrompter(Prompter):
    """Interactive prompter reading answers from standard input."""

    def read_answer(self) -> str:
        try:
            return input()
        except EOFError:
            raise PortKeeperError(
                "Input closed before a package was selected"
            ) from None

    def show(self, message: str) -> None:
        get_raw_console().print(message, markup=False, highlight=False)

    def warn(self, message: str) -> None:
        get_raw_console().print(message, style="warning", markup=False)


class ScriptedPrompter(Prompter):
    """Prompter that replays pre-recorded answers.

    Messages are collected in :attr:`transcript` instead of printed.

    Args:
        answers: Answers returned in order by :meth:`read_answer`.
    """

    def __init__(self, answers: Iterable[str]) -> None:
        self._answers: Iterator[str] = iter(answers)
        self.transcript: List[str] = []
        self.warnings: List[str] = []

    def read_answer(self) -> str:
        answer: Optional[str] = next(self._answers, None)
        if answer is None:
            raise PortKeeperError("No scripted answers left for selection prompt")
        return answer

    def show(self, message: str) -> None:
        self.transcript.append(message)

    def warn(self, message: str) -> None:
        self.warnings.append(message)
