"""Static collection of test files into suite/test trees.

``collect_tests`` loads and parses one file, classifies its declaration
calls, folds them into a tree and finalizes the tree's ids and modes
without executing any of the file's code.  ``collect_files`` does the same
for many files concurrently.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from collector.config import CollectorConfig
from collector.parsing.call_sites import CallSite, collect_call_sites
from collector.parsing.source import TransformResult, parse_ast, transform_request
from collector.tree.builder import build_tree
from collector.tree.modes import (
    calculate_suite_hash,
    generate_hash,
    interpret_task_modes,
    some_tasks_are_only,
)
from collector.tree.tasks import MODE_RUN, FileNode

Transform = Callable[[str], Awaitable["TransformResult | None"]]


@dataclass
class ParsedFileResult:
    """Collected tree for one file plus what is needed to map positions back."""

    file: FileNode
    filepath: str
    parsed: str
    map: dict[str, Any] | None
    definitions: list[CallSite] = field(default_factory=list)


def relative_test_path(filepath: str, root: Path) -> str:
    """Path of *filepath* relative to *root*, with ``/`` separators."""
    try:
        rel = os.path.relpath(os.path.abspath(filepath), os.path.abspath(root))
    except ValueError:
        # different drive on Windows
        rel = filepath
    return Path(rel).as_posix()


def create_file_node(filepath: str, config: CollectorConfig, end: int) -> FileNode:
    """Root suite for *filepath* spanning ``[0, end]``."""
    test_filepath = relative_test_path(filepath, config.root)
    return FileNode(
        name=test_filepath,
        mode=MODE_RUN,
        start=0,
        end=end,
        id=generate_hash(f"{test_filepath}{config.subproject_name}"),
        filepath=filepath,
        project_name=config.project_name,
    )


async def collect_tests(
    filepath: str,
    config: CollectorConfig | None = None,
    transform: Transform | None = None,
) -> ParsedFileResult | None:
    """Collect the suite/test tree of *filepath* statically.

    Args:
        filepath: Test file to collect.
        config: Collector configuration (defaults when *None*).
        transform: Coroutine producing the source to parse; defaults to
            ``transform_request``.

    Returns:
        The parsed file result, or *None* when the source could not be
        loaded.
    """
    if config is None:
        config = CollectorConfig(None)
    if transform is None:
        transform = transform_request

    request = await transform(filepath)
    if request is None:
        return None

    root = await parse_ast(request.code, filepath)
    source = request.code.encode("utf-8")

    file = create_file_node(filepath, config, len(source))
    definitions = collect_call_sites(root, source)
    build_tree(file, definitions)

    calculate_suite_hash(file)
    has_only = some_tasks_are_only(file)
    interpret_task_modes(
        file,
        config.test_name_pattern,
        has_only,
        False,
        config.allow_only,
    )

    return ParsedFileResult(
        file=file,
        filepath=filepath,
        parsed=request.code,
        map=request.map,
        definitions=definitions,
    )


async def collect_files(
    filepaths: list[str],
    config: CollectorConfig | None = None,
    transform: Transform | None = None,
) -> list[ParsedFileResult | None]:
    """Collect many files concurrently, preserving input order.

    At most ``config.max_parallel`` files (CPU count when unset) are loaded
    and parsed at the same time.
    """
    if config is None:
        config = CollectorConfig(None)
    max_parallel = config.max_parallel or os.cpu_count() or 1
    semaphore = asyncio.Semaphore(max_parallel)

    async def collect_one(filepath: str) -> ParsedFileResult | None:
        async with semaphore:
            return await collect_tests(filepath, config, transform)

    return list(await asyncio.gather(*(collect_one(f) for f in filepaths)))


def collect_files_sync(
    filepaths: list[str],
    config: CollectorConfig | None = None,
) -> list[ParsedFileResult | None]:
    """Synchronous wrapper around ``collect_files``."""
    return asyncio.run(collect_files(filepaths, config))
