"""
Utility helpers for portkeeper.

This package provides reusable utilities used across portkeeper, including:

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Atomic file helpers for the store documents
- Port version comparison

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Filesystem utilities
# ---------------------------------------------------------------------------

from portkeeper.utils.filesystem import (
    create_backup,
    safe_read_file,
    safe_write_file,
)

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from portkeeper.utils.logger import (
    disable_logging,
    get_logger,
    is_logging_configured,
    level_for_verbosity,
    setup_logging,
)

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from portkeeper.utils.console import (
    colorize_update_type,
    confirm,
    get_raw_console,
    print_error,
    print_line,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)

# ---------------------------------------------------------------------------
# Version utilities
# ---------------------------------------------------------------------------

from portkeeper.utils.version_utils import (
    VersionOrder,
    compare_versions,
    get_update_type,
)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    # Console
    "confirm",
    "print_error",
    "print_line",
    "print_table",
    "print_success",
    "print_warning",
    "get_raw_console",
    "reconfigure_console",
    "colorize_update_type",
    # Logging
    "get_logger",
    "setup_logging",
    "disable_logging",
    "is_logging_configured",
    "level_for_verbosity",
    # Filesystem
    "safe_read_file",
    "safe_write_file",
    "create_backup",
    # Version utilities
    "VersionOrder",
    "compare_versions",
    "get_update_type",
]
