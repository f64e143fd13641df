"""Discover typecheck test files under a directory.

Matches file paths (relative to the searched directory, ``/`` separated)
against include and exclude glob patterns with ``wcmatch``: ``**``,
``{a,b}`` alternatives and the ``?(a|b)``-style extended groups used by
the default typecheck include pattern are all supported, nested or not.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from wcmatch import glob

GLOB_FLAGS = glob.GLOBSTAR | glob.BRACE | glob.EXTGLOB


def matches_any(relative_path: str, patterns: list[str]) -> bool:
    """Whether *relative_path* matches at least one glob pattern."""
    if not patterns:
        return False
    return glob.globmatch(relative_path, patterns, flags=GLOB_FLAGS)


def discover_test_files(
    directory: Path,
    include: list[str],
    exclude: list[str] | None = None,
) -> list[str]:
    """Find test files under *directory* matching *include* but not *exclude*.

    Args:
        directory: Directory to search recursively.
        include: Glob patterns a file must match.
        exclude: Glob patterns that remove a file from the result.

    Returns:
        Sorted list of matching file paths, or an empty list when
        *directory* is not a directory.
    """
    if not directory.is_dir():
        print(
            f"Collect: {directory} is not a directory, nothing to discover",
            file=sys.stderr,
        )
        return []

    exclude = list(exclude or [])

    found: list[str] = []
    for dirpath, dirnames, filenames in os.walk(directory):
        rel_dir = Path(dirpath).relative_to(directory).as_posix()
        dirnames.sort()
        for filename in filenames:
            rel = _join(rel_dir, filename)
            if not matches_any(rel, include):
                continue
            if matches_any(rel, exclude):
                continue
            found.append(str(Path(dirpath) / filename))

    return sorted(found)


def _join(rel_dir: str, name: str) -> str:
    if rel_dir in ("", "."):
        return name
    return f"{rel_dir}/{name}"
