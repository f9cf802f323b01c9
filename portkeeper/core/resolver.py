"""Install resolver for portkeeper.

Maps a user-supplied specifier to exactly one index entry and asks the
store to install it as an explicit (operator-requested) package.

Resolution rules:

1. The specifier is first looked up verbatim as a package name.
2. When nothing matches, the specifier is split on its **rightmost**
   hyphen into ``name`` and ``version`` (``foo-bar-1.2`` -> ``foo-bar`` /
   ``1.2``) and the name is looked up instead. The index's top match for
   that name must carry exactly the embedded version, otherwise the
   specifier is not found. Entries of other versions are dropped.
3. One remaining entry is installed directly; several are offered to the
   operator through a :class:`~portkeeper.core.prompt.Prompter`.

Typical usage::

    resolver = InstallResolver(store, ConsolePrompter())
    result = resolver.install_all(["nginx", "pcre2-10.42"])
"""

from __future__ import annotations

from typing import Callable, List, NamedTuple, Optional, Sequence

from portkeeper.constants import EXIT_NOT_FOUND, RESULT_FAILED, RESULT_OK
from portkeeper.core.prompt import Prompter
from portkeeper.core.store import PackageStore
from portkeeper.exceptions import (
    PackageNotFoundError,
    StoreError,
    VersionMismatchError,
)
from portkeeper.models import IndexEntry
from portkeeper.utils.logger import get_logger

logger = get_logger("core.resolver")

__all__ = ["InstallResolver", "PackageSpecifier", "parse_specifier"]


class PackageSpecifier(NamedTuple):
    """A ``name-version`` specifier split into its two fields."""

    name: str
    version: str


def parse_specifier(specifier: str) -> Optional[PackageSpecifier]:
    """Split *specifier* on its rightmost hyphen.

    Returns ``None`` when there is no hyphen, or when the only hyphen is
    the first character (an empty name is never produced). The version
    part may be empty (``"foo-"``).

    Examples::

        >>> parse_specifier("py-setuptools-63.1.0")
        PackageSpecifier(name='py-setuptools', version='63.1.0')
        >>> parse_specifier("nginx") is None
        True
    """
    position = specifier.rfind("-")
    if position <= 0:
        return None
    return PackageSpecifier(specifier[:position], specifier[position + 1 :])


ErrorReporter = Callable[[str, Exception], None]


class InstallResolver:
    """Resolve specifiers against the index and install the result.

    Args:
        store: Package store to query and install into.
        prompter: Used when a specifier matches several index entries.
    """

    def __init__(self, store: PackageStore, prompter: Prompter) -> None:
        self.store = store
        self.prompter = prompter

    def resolve(self, specifier: str) -> IndexEntry:
        """Return the single index entry *specifier* designates.

        Raises:
            PackageNotFoundError: No entry matches.
            VersionMismatchError: The ``name-version`` fallback found the
                name but the top match has a different version.
            StoreError: An index lookup failed.
        """
        entries = self.store.lookup_index(specifier)

        if not entries:
            parsed = parse_specifier(specifier)
            if parsed is not None:
                logger.debug(
                    "No entry named %s, trying %s at version %s",
                    specifier,
                    parsed.name,
                    parsed.version,
                )
                entries = self.store.lookup_index(parsed.name)
                if entries and entries[0].version != parsed.version:
                    raise VersionMismatchError(
                        f"Package {specifier} not found in the index.",
                        specifier=specifier,
                        requested=parsed.version,
                        available=entries[0].version,
                    )
                # Only builds of the requested version stay selectable
                entries = [e for e in entries if e.version == parsed.version]

        if not entries:
            raise PackageNotFoundError(
                f"Package {specifier} not found in the index.",
                specifier=specifier,
            )

        if len(entries) == 1:
            return entries[0]

        return entries[self.prompter.select_one(entries)]

    def install(self, specifier: str) -> int:
        """Resolve *specifier* and install it explicitly.

        Returns:
            The store's install result code.

        Raises:
            PackageNotFoundError: See :meth:`resolve`.
            StoreError: See :meth:`resolve`.
        """
        entry = self.resolve(specifier)
        logger.info("Installing %s", entry.name_version)
        return self.store.install_explicit(entry.pkgname, entry.version)

    def install_all(
        self,
        specifiers: Sequence[str],
        on_error: Optional[ErrorReporter] = None,
    ) -> int:
        """Install every specifier, continuing past failures.

        Args:
            specifiers: Specifiers in the order given by the operator.
            on_error: Called with ``(specifier, exception)`` for each
                specifier that could not be resolved or installed.

        Returns:
            ``0`` when every specifier installed, otherwise the code of the
            last failure (``EXIT_NOT_FOUND`` for unresolved specifiers).
        """
        result = RESULT_OK
        failed: List[str] = []

        for specifier in specifiers:
            try:
                code = self.install(specifier)
            except PackageNotFoundError as exc:
                code = EXIT_NOT_FOUND
                self._report(on_error, specifier, exc)
            except StoreError as exc:
                code = exc.code or RESULT_FAILED
                self._report(on_error, specifier, exc)
            else:
                if code != RESULT_OK:
                    self._report(
                        on_error,
                        specifier,
                        StoreError(
                            f"Installation of {specifier} failed",
                            operation="install",
                            package=specifier,
                            code=code,
                        ),
                    )

            if code != RESULT_OK:
                result = code
                failed.append(specifier)

        if failed:
            logger.info("Failed specifiers: %s", ", ".join(failed))
        return result

    @staticmethod
    def _report(
        on_error: Optional[ErrorReporter], specifier: str, exc: Exception
    ) -> None:
        logger.debug("Cannot install %s: %s", specifier, exc)
        if on_error is not None:
            on_error(specifier, exc)
