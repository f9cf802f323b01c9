"""
Custom exception hierarchy for portkeeper.

This module defines structured exception types used across portkeeper.
All exceptions inherit from :class:`PortKeeperError` and support optional
structured metadata via the ``details`` attribute to improve diagnostics
and logging.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, MutableMapping, Optional, Sequence

if TYPE_CHECKING:
    from portkeeper.models.removal import RemovalSummary


class PortKeeperError(Exception):
    """Base exception for all portkeeper errors.

    All portkeeper-specific exceptions should inherit from this class.
    It supports structured metadata via ``details`` for richer error
    reporting and debugging.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        # Internally normalize to a mutable dict
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate_names(names: Sequence[str], limit: int = 10) -> str:
    """Join package names for error details, eliding long lists."""
    shown = ", ".join(names[:limit])
    if len(names) > limit:
        shown += f", ... ({len(names) - limit} more)"
    return shown


class ConfigError(PortKeeperError):
    """Raised when a configuration file is missing, malformed or invalid.

    Args:
        message: Error description.
        config_path: Path of the offending configuration file.
        option: Name of the invalid option, if any.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option


class FileOperationError(PortKeeperError):
    """Raised when file system operations fail.

    Args:
        message: Error description.
        file_path: Path to the file involved.
        operation: Operation being performed (read/write/delete).
        original_error: Original exception that triggered this error.
    """

    __slots__ = ("file_path", "operation", "original_error")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)
        _add_if(details, "operation", operation)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error


class StoreError(PortKeeperError):
    """Raised when a package store query or command fails.

    Args:
        message: Error description.
        operation: Store operation that failed (e.g. ``lookup_index``).
        package: Package name involved, if any.
        code: Result code reported by the store, if any.
    """

    __slots__ = ("operation", "package", "code")

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        package: Optional[str] = None,
        code: Optional[int] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "operation", operation)
        _add_if(details, "package", package)
        _add_if(details, "code", code)

        super().__init__(message, details)

        self.operation = operation
        self.package = package
        self.code = code


class PackageNotFoundError(PortKeeperError):
    """Raised when a specifier or name has no match in the index or store.

    Args:
        message: Error description.
        specifier: The user-supplied specifier or package name.
    """

    __slots__ = ("specifier",)

    def __init__(self, message: str, *, specifier: Optional[str] = None) -> None:
        super().__init__(message)
        self.specifier = specifier


class VersionMismatchError(PackageNotFoundError):
    """Raised when a ``name-version`` specifier names a version the index lacks.

    Treated exactly like :class:`PackageNotFoundError` by callers.

    Args:
        message: Error description.
        specifier: The original ``name-version`` specifier.
        requested: Version embedded in the specifier.
        available: Version of the index's top match for the name.
    """

    __slots__ = ("requested", "available")

    def __init__(
        self,
        message: str,
        *,
        specifier: Optional[str] = None,
        requested: Optional[str] = None,
        available: Optional[str] = None,
    ) -> None:
        super().__init__(message, specifier=specifier)
        _add_if(self.details, "requested", requested)
        _add_if(self.details, "available", available)

        self.requested = requested
        self.available = available


class InvalidSelectionError(PortKeeperError):
    """Raised when an operator's answer to a selection prompt is unusable.

    Always recovered by re-prompting; never escapes the prompter.

    Args:
        message: Error description.
        answer: Raw answer that was rejected.
    """

    __slots__ = ("answer",)

    def __init__(self, message: str, *, answer: Optional[str] = None) -> None:
        super().__init__(message)
        self.answer = answer


class UnremovableSetError(PortKeeperError):
    """Raised when bulk removal makes no progress on a non-empty set.

    This happens on dependency cycles or when every removable package
    fails to delete, so further passes could never shrink the set.

    Args:
        message: Error description.
        pass_number: 1-based pass that made no progress.
        remaining: Names still installed after that pass.
        summary: Counts accumulated before the stall.
    """

    __slots__ = ("pass_number", "remaining", "summary")

    def __init__(
        self,
        message: str,
        *,
        pass_number: int,
        remaining: Sequence[str],
        summary: Optional["RemovalSummary"] = None,
    ) -> None:
        super().__init__(
            message,
            {"pass": pass_number, "remaining": _truncate_names(list(remaining))},
        )

        self.pass_number = pass_number
        self.remaining = list(remaining)
        self.summary = summary


class RemovalInterruptedError(StoreError):
    """Raised when bulk removal cannot re-read the installed list.

    Carries the progress made so far; packages deleted before the failure
    stay deleted.

    Args:
        message: Error description.
        pass_number: Number of passes completed before the failure.
        summary: Counts accumulated before the failure.
        original_error: Store error that interrupted the run.
    """

    __slots__ = ("pass_number", "summary", "original_error")

    def __init__(
        self,
        message: str,
        *,
        pass_number: int,
        summary: Optional["RemovalSummary"] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(message, operation="list_installed")
        self.details["pass"] = pass_number
        _add_if(
            self.details,
            "original_error",
            str(original_error) if original_error else None,
        )

        self.pass_number = pass_number
        self.summary = summary
        self.original_error = original_error
