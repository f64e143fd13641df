"""Fold classified call sites into a suite/test tree.

Nesting cannot be read from a scope stack without executing the file, so
it is recovered from offset containment: call sites are visited in start
order and each one is attached to the innermost suite whose range is still
open at its start offset.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from collector.tree.tasks import (
    MODE_SKIP,
    MODE_TODO,
    TYPE_SUITE,
    FileNode,
    SuiteNode,
    TaskNode,
    TestNode,
)

if TYPE_CHECKING:
    from collector.parsing.call_sites import CallSite

# Suite modes that every descendant inherits at build time.
INHERITED_MODES = frozenset({MODE_SKIP, MODE_TODO})


def _enclosing_suite(cursor: SuiteNode, offset: int) -> SuiteNode:
    """Walk up from *cursor* until a suite whose range is still open at *offset*."""
    while cursor.suite is not None and cursor.end < offset:
        cursor = cursor.suite
    return cursor


def build_tree(file: FileNode, call_sites: list[CallSite]) -> FileNode:
    """Attach a node for every call site to *file*, nested by containment.

    Call sites are sorted in place by start offset.  Each one is linked to
    the node created for it through ``call_site.task``.

    Returns:
        The same *file*, now populated.
    """
    call_sites.sort(key=lambda c: c.start)

    cursor: SuiteNode = file
    for call_site in call_sites:
        parent = _enclosing_suite(cursor, call_site.start)
        mode = call_site.mode
        if parent.mode in INHERITED_MODES:
            mode = parent.mode

        task: TaskNode
        if call_site.type == TYPE_SUITE:
            task = SuiteNode(
                name=call_site.name,
                mode=mode,
                start=call_site.start,
                end=call_site.end,
                location=call_site.location,
            )
        else:
            task = TestNode(
                name=call_site.name,
                mode=mode,
                start=call_site.start,
                end=call_site.end,
                location=call_site.location,
            )
        parent.add_task(task)
        call_site.task = task

        if isinstance(task, SuiteNode):
            cursor = task
        else:
            cursor = parent

    return file
