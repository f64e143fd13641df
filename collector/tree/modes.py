"""Finalization of collected trees: node ids, exclusivity and final modes.

Run once per file after the tree is built.  The modes written here are
terminal; the tree is not rebuilt afterwards.
"""

from __future__ import annotations

import re

from collector.tree.tasks import (
    MODE_ONLY,
    MODE_RUN,
    MODE_SKIP,
    MODE_TODO,
    TYPE_TEST,
    SuiteNode,
    TaskNode,
    TaskResult,
)

ONLY_NOT_ALLOWED_MESSAGE = (
    "[collector] Unexpected .only modifier. "
    "Remove it or pass --allow-only argument to bypass this error"
)


def generate_hash(text: str) -> str:
    """Deterministic 32-bit string hash rendered as a signed decimal."""
    value = 0
    # UTF-16 code units, as charCodeAt sees them
    data = text.encode("utf-16-le", errors="surrogatepass")
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        value = ((value << 5) - value + unit) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return str(value)


def calculate_suite_hash(parent: SuiteNode) -> None:
    """Assign ``<parent id>_<index>`` ids to every descendant of *parent*."""
    for index, task in enumerate(parent.tasks):
        task.id = f"{parent.id}_{index}"
        if isinstance(task, SuiteNode):
            calculate_suite_hash(task)


def some_tasks_are_only(suite: SuiteNode) -> bool:
    """Whether any descendant of *suite* is marked ``only``."""
    return any(
        task.mode == MODE_ONLY
        or (isinstance(task, SuiteNode) and some_tasks_are_only(task))
        for task in suite.tasks
    )


def _mark_all_tasks(suite: SuiteNode, mode: str) -> None:
    for task in suite.tasks:
        if task.mode == MODE_RUN:
            task.mode = mode
            if isinstance(task, SuiteNode):
                _mark_all_tasks(task, mode)


def skip_all_tasks(suite: SuiteNode) -> None:
    """Mark every still-running descendant of *suite* as skipped."""
    _mark_all_tasks(suite, MODE_SKIP)


def todo_all_tasks(suite: SuiteNode) -> None:
    """Mark every still-running descendant of *suite* as todo."""
    _mark_all_tasks(suite, MODE_TODO)


def _check_allow_only(task: TaskNode, allow_only: bool) -> None:
    if allow_only:
        return
    task.result = TaskResult(state="fail", errors=[ONLY_NOT_ALLOWED_MESSAGE])


def interpret_task_modes(
    suite: SuiteNode,
    name_pattern: str | re.Pattern[str] | None = None,
    only_mode: bool = False,
    parent_is_only: bool = False,
    allow_only: bool = False,
) -> None:
    """Rewrite declared modes into final run decisions.

    Args:
        suite: Suite (usually the file) whose descendants are rewritten.
        name_pattern: Regex searched in each test's full name; tests that
            do not match are skipped.
        only_mode: True when any task in the file is marked ``only``.
        parent_is_only: True when an ancestor of *suite* is marked ``only``.
        allow_only: When False, every ``only`` task gets a failed result.
    """
    if isinstance(name_pattern, str):
        name_pattern = re.compile(name_pattern)

    suite_is_only = parent_is_only or suite.mode == MODE_ONLY

    for task in suite.tasks:
        include_task = suite_is_only or task.mode == MODE_ONLY
        if only_mode:
            if isinstance(task, SuiteNode) and (include_task or some_tasks_are_only(task)):
                if task.mode == MODE_ONLY:
                    _check_allow_only(task, allow_only)
                    task.mode = MODE_RUN
            elif task.mode == MODE_RUN and not include_task:
                task.mode = MODE_SKIP
            elif task.mode == MODE_ONLY:
                _check_allow_only(task, allow_only)
                task.mode = MODE_RUN

        if task.type == TYPE_TEST:
            if name_pattern is not None and not name_pattern.search(task.full_name):
                task.mode = MODE_SKIP
        elif isinstance(task, SuiteNode):
            if task.mode == MODE_SKIP:
                skip_all_tasks(task)
            elif task.mode == MODE_TODO:
                todo_all_tasks(task)
            else:
                interpret_task_modes(task, name_pattern, only_mode, include_task, allow_only)

    # a running suite with nothing left to run is skipped as a whole
    if suite.mode == MODE_RUN:
        if suite.tasks and all(task.mode != MODE_RUN for task in suite.tasks):
            suite.mode = MODE_SKIP
