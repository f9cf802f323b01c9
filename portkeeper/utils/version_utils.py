"""
Version comparison utilities for portkeeper.

Package versions follow the ports convention ``MAIN[_REVISION][,EPOCH]``,
e.g. ``1.2.3``, ``1.2.3_1`` or ``2.0_3,1``. OS-release tags such as ``13.2``
or ``0.4`` are compared with the same rules.

Ordering is decided by epoch first, then the main version, then the port
revision. Main versions are grouped by their leading numeric release; inside
a release PEP 440 versions compare as such and sort below free-form versions,
which are split into numeric and alphabetic segments and compared segment by
segment.
"""

from __future__ import annotations

import re
from enum import IntEnum
from typing import Any, List, Optional, Tuple

from packaging.version import InvalidVersion, Version

_SEGMENT_RE = re.compile(r"\d+|[A-Za-z]+")
_RELEASE_RE = re.compile(r"\d+(?:\.\d+)*")


class VersionOrder(IntEnum):
    """Ordering verdict returned by :func:`compare_versions`."""

    LESS = -1
    EQUAL = 0
    GREATER = 1


def compare_versions(left: str, right: str) -> VersionOrder:
    """Compare two version-like strings.

    Args:
        left: First version (or OS-release tag).
        right: Second version (or OS-release tag).

    Returns:
        :attr:`VersionOrder.LESS` if ``left`` is older than ``right``,
        :attr:`VersionOrder.GREATER` if newer, :attr:`VersionOrder.EQUAL`
        otherwise.

    Examples:
        >>> compare_versions("1.2", "1.10")
        <VersionOrder.LESS: -1>
        >>> compare_versions("1.2_1", "1.2")
        <VersionOrder.GREATER: 1>
        >>> compare_versions("1.0,1", "9.9")
        <VersionOrder.GREATER: 1>
    """
    if left == right:
        return VersionOrder.EQUAL

    left_epoch, left_main, left_revision = split_port_version(left)
    right_epoch, right_main, right_revision = split_port_version(right)

    if left_epoch != right_epoch:
        return _order(left_epoch, right_epoch)

    main = _compare_main(left_main, right_main)
    if main is not VersionOrder.EQUAL:
        return main

    return _order(left_revision, right_revision)


def split_port_version(value: str) -> Tuple[int, str, int]:
    """Split ``MAIN[_REVISION][,EPOCH]`` into its three parts.

    Missing revision and epoch default to ``0``. Suffixes that are not
    purely numeric are left inside the main version.

    Examples:
        >>> split_port_version("2.0_3,1")
        (1, '2.0', 3)
        >>> split_port_version("1.0_beta")
        (0, '1.0_beta', 0)
    """
    epoch = 0
    revision = 0
    main = value.strip()

    head, sep, tail = main.rpartition(",")
    if sep and tail.isdigit():
        epoch = int(tail)
        main = head

    head, sep, tail = main.rpartition("_")
    if sep and tail.isdigit():
        revision = int(tail)
        main = head

    return epoch, main, revision


def _compare_main(left: str, right: str) -> VersionOrder:
    """Compare the main version parts of two port versions."""
    return _order(_main_key(left), _main_key(right))


def _main_key(value: str) -> Tuple[Any, ...]:
    """Sort key for a main version part.

    Keys compare on the leading numeric release first (trailing zeros
    dropped, so ``1.0`` and ``1`` group together). Inside a release, PEP 440
    versions sort below free-form ones; PEP 440 versions then compare with
    :class:`~packaging.version.Version` and free-form ones by segments.
    The resulting order is total over both kinds of version.
    """
    match = _RELEASE_RE.match(value)
    release = [int(part) for part in match.group(0).split(".")] if match else []
    while release and release[-1] == 0:
        release.pop()

    parsed = _parse_pep440(value)
    if parsed is not None:
        return (tuple(release), 0, parsed)
    return (tuple(release), 1, _segment_key(value))


def _parse_pep440(value: str) -> Optional[Version]:
    try:
        return Version(value)
    except InvalidVersion:
        return None


def _segment_key(value: str) -> Tuple[Tuple[int, Any], ...]:
    # numeric segments sort above alphabetic ones
    return tuple(
        (1, int(segment)) if segment.isdigit() else (0, segment)
        for segment in _SEGMENT_RE.findall(value)
    )


def _compare_segments(left: str, right: str) -> VersionOrder:
    """Segment-wise comparison for versions that are not PEP 440.

    Numeric segments compare numerically and always sort above alphabetic
    ones; alphabetic segments compare lexically. When one side runs out of
    segments first, the side with more segments is newer.
    """
    return _order(_segment_key(left), _segment_key(right))


def _order(left, right) -> VersionOrder:
    if left < right:
        return VersionOrder.LESS
    if left > right:
        return VersionOrder.GREATER
    return VersionOrder.EQUAL


def get_update_type(
    current_version: Optional[str],
    target_version: Optional[str],
) -> str:
    """Determine the kind of change between two port versions.

    Args:
        current_version: Installed version, or ``None`` if not installed.
        target_version: Version available in the index.

    Returns:
        One of:
            - ``"new"``       : No current version exists
            - ``"same"``      : Versions compare equal
            - ``"downgrade"`` : Target version is lower than current
            - ``"major"``     : Major version change
            - ``"minor"``     : Minor version change
            - ``"patch"``     : Patch-level change
            - ``"revision"``  : Only the port revision or epoch changed
            - ``"update"``    : Update that cannot be classified further
            - ``"unknown"``   : Target version missing

    Examples:
        >>> get_update_type("1.0.0", "2.0.0")
        'major'
        >>> get_update_type("1.2.3", "1.2.3_1")
        'revision'
        >>> get_update_type(None, "1.0.0")
        'new'
    """
    if target_version is None:
        return "unknown"

    if current_version is None:
        return "new"

    order = compare_versions(current_version, target_version)
    if order is VersionOrder.EQUAL:
        return "same"
    if order is VersionOrder.GREATER:
        return "downgrade"

    _, current_main, _ = split_port_version(current_version)
    _, target_main, _ = split_port_version(target_version)

    if _compare_main(current_main, target_main) is VersionOrder.EQUAL:
        return "revision"

    current_release = _normalize_release(current_main)
    target_release = _normalize_release(target_main)

    for kind, current_part, target_part in zip(
        ("major", "minor", "patch"), current_release, target_release
    ):
        if current_part != target_part:
            return kind

    # Covers pre-release -> release and non-numeric suffix changes
    return "update"


def _normalize_release(main: str) -> Tuple[int, int, int]:
    """Normalize the leading numeric segments to (major, minor, patch)."""
    numbers: List[int] = []
    for segment in main.split("."):
        match = re.match(r"\d+", segment)
        if not match:
            break
        numbers.append(int(match.group()))

    numbers.extend([0, 0, 0])
    return numbers[0], numbers[1], numbers[2]
