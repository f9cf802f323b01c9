"""
portkeeper version information.

Single source of truth for the package version, following Semantic
Versioning (``MAJOR.MINOR.PATCH``); keep it in step with ``pyproject.toml``.
"""

from __future__ import annotations

__version__ = "0.1.0"
