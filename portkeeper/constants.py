"""
Centralized constants for portkeeper.

This module defines immutable configuration values used across portkeeper,
including default store locations, result codes, output formats, and
logging formats. All values are intended to be treated as read-only.
"""

from typing import Final

# ---------------------------------------------------------------------------
# Store locations
# ---------------------------------------------------------------------------

#: Default location of the installed-package database.
DEFAULT_DATABASE_PATH: Final[str] = "/var/db/portkeeper/installed.json"

#: Default location of the downloaded package index.
DEFAULT_INDEX_PATH: Final[str] = "/var/db/portkeeper/index.json"

#: Config file name looked up in the current directory.
CONFIG_FILE_NAME: Final[str] = "portkeeper.toml"

#: Keep a timestamped copy of the database before rewriting it.
DEFAULT_BACKUP: Final[bool] = False

# ---------------------------------------------------------------------------
# Environment variables
# ---------------------------------------------------------------------------

ENV_CONFIG: Final[str] = "PORTKEEPER_CONFIG"
ENV_DATABASE: Final[str] = "PORTKEEPER_DATABASE"
ENV_INDEX: Final[str] = "PORTKEEPER_INDEX"
ENV_OS_RELEASE: Final[str] = "PORTKEEPER_OS_RELEASE"

# ---------------------------------------------------------------------------
# Result and exit codes
# ---------------------------------------------------------------------------

#: Store command succeeded.
RESULT_OK: Final[int] = 0

#: Generic store command failure.
RESULT_FAILED: Final[int] = 1

#: Specifier or package name missing from the index.
EXIT_NOT_FOUND: Final[int] = 4

#: Bulk removal stalled on packages that can never become leaves.
EXIT_UNREMOVABLE: Final[int] = 3

#: Index could not be loaded.
EXIT_INDEX_UNAVAILABLE: Final[int] = 4

#: Listing found nothing installed.
EXIT_NOTHING_INSTALLED: Final[int] = 3

#: Listing could not load the index for an updates listing.
EXIT_LIST_INDEX_UNAVAILABLE: Final[int] = 8

# ---------------------------------------------------------------------------
# Output formats
# ---------------------------------------------------------------------------

#: Update line: name, installed version, index version.
UPDATE_LINE_FORMAT: Final[str] = "{name:<15} {version:>8}  <  {available:<8}"

#: Verbose update line including the installed os_release.
UPDATE_LINE_VERBOSE_FORMAT: Final[str] = (
    "{name:<15} {version:>8} ({os_release})  <  {available}"
)

#: Line printed for packages that dropped out of the index.
UNAVAILABLE_LINE_FORMAT: Final[str] = "{name:<15} {version:>8} is no longer available."

#: Width of the ``name-version`` column in verbose listings.
LIST_NAME_VERSION_WIDTH: Final[int] = 30

#: Verbose listing line: name-version, os_release, comment.
LIST_VERBOSE_FORMAT: Final[str] = "{name_version:<30}\t{os_release:>6}\t{comment}"

#: One ``label: value`` line of ``portkeeper info``.
INFO_LINE_FORMAT: Final[str] = "{label:<16}: {value}"

# ---------------------------------------------------------------------------
# Security constraints
# ---------------------------------------------------------------------------

#: Maximum allowed file size (in bytes) when reading store documents.
MAX_FILE_SIZE: Final[int] = 64 * 1024 * 1024  # 64 MB

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
