"""
File helpers for the JSON documents behind the package store.

The installed-package database is rewritten in place after every install
or delete, so a crash must never leave a half-written file behind: writes
go to a sibling temporary file which is then renamed over the target.
Every ``OSError`` surfaces as :class:`~portkeeper.exceptions.FileOperationError`.
"""

from __future__ import annotations

import os
import stat
import shutil
import tempfile
from pathlib import Path
from datetime import datetime
from typing import Optional, Union

from portkeeper.utils.logger import get_logger
from portkeeper.exceptions import FileOperationError
from portkeeper.constants import MAX_FILE_SIZE

logger = get_logger("filesystem")

PathLike = Union[str, Path]

_BACKUP_STAMP = "%Y%m%d_%H%M%S_%f"


def _read_error(
    path: Path, message: str, exc: Optional[Exception] = None
) -> FileOperationError:
    return FileOperationError(
        message, file_path=str(path), operation="read", original_error=exc
    )


def safe_read_file(
    file_path: PathLike,
    *,
    max_size: Optional[int] = MAX_FILE_SIZE,
    encoding: str = "utf-8",
) -> str:
    """Return the text of a regular file.

    Args:
        file_path: File to read.
        max_size: Largest accepted size in bytes; ``None`` accepts any size.
        encoding: Text encoding.

    Raises:
        FileOperationError: The file is missing, is not a regular file, is
            larger than *max_size* or cannot be decoded.
    """
    path = Path(file_path)

    try:
        info = path.stat()
    except FileNotFoundError as exc:
        raise _read_error(path, f"File not found: {path}", exc) from exc
    except OSError as exc:
        raise _read_error(path, f"Failed to read file: {exc}", exc) from exc

    if not stat.S_ISREG(info.st_mode):
        raise _read_error(path, f"Not a file: {path}")
    if max_size is not None and info.st_size > max_size:
        raise _read_error(
            path, f"File too large: {info.st_size} bytes (max {max_size})"
        )

    try:
        with open(path, "r", encoding=encoding) as fh:
            return fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise _read_error(path, f"Failed to read file: {exc}", exc) from exc


def _atomic_write(target: Path, content: str) -> None:
    """Write *content* to a temporary sibling of *target*, then rename it."""
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(
        dir=str(target.parent), prefix=f".{target.name}.", suffix=".tmp"
    )

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(content)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(temp_name, target)
    except OSError as exc:
        try:
            os.unlink(temp_name)
        except FileNotFoundError:
            pass
        except OSError as cleanup_exc:
            logger.warning("Could not remove %s: %s", temp_name, cleanup_exc)

        raise FileOperationError(
            f"Atomic write failed: {exc}",
            file_path=str(target),
            operation="write",
            original_error=exc,
        ) from exc


def create_backup(path: Path) -> Path:
    """Copy *path* to ``<name>.<timestamp>.backup`` in the same directory."""
    stamp = datetime.now().strftime(_BACKUP_STAMP)
    backup_path = path.parent / f"{path.name}.{stamp}.backup"

    try:
        shutil.copy2(path, backup_path)
    except OSError as exc:
        raise FileOperationError(
            f"Failed to create backup: {exc}",
            file_path=str(path),
            operation="backup",
            original_error=exc,
        ) from exc

    logger.debug("Backed up %s to %s", path, backup_path)
    return backup_path


def safe_write_file(
    file_path: PathLike,
    content: str,
    *,
    backup: bool = False,
) -> Optional[Path]:
    """Atomically replace the content of *file_path*.

    With *backup*, an existing file is first copied aside with
    :func:`create_backup`; the copy's path is returned.
    """
    path = Path(file_path)
    backup_path = create_backup(path) if backup and path.is_file() else None
    _atomic_write(path, content)
    return backup_path
