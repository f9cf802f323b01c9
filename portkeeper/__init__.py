"""
portkeeper: orchestration front end for a binary package manager.

portkeeper drives a package store (installed database plus downloaded
index) through three operations:

    • Update diff: which installed packages have a newer build, or were
      built for an older OS release
    • Install: resolve ``name`` or ``name-version`` to one index entry,
      asking the operator when several match
    • Delete all: remove every installed package in dependency order
"""

from __future__ import annotations

from portkeeper.__version__ import __version__

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "portkeeper Contributors"
__license__ = "BSD-2-Clause"
__description__ = "Update, install and bulk-removal orchestration for binary packages."

__all__ = ["__version__"]
