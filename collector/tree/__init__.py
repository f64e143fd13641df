"""Suite/test tree: node types, containment builder and mode finalization."""

from collector.tree.builder import build_tree
from collector.tree.modes import (
    calculate_suite_hash,
    generate_hash,
    interpret_task_modes,
    some_tasks_are_only,
)
from collector.tree.tasks import FileNode, SuiteNode, TaskResult, TestNode

__all__ = [
    "FileNode",
    "SuiteNode",
    "TaskResult",
    "TestNode",
    "build_tree",
    "calculate_suite_hash",
    "generate_hash",
    "interpret_task_modes",
    "some_tasks_are_only",
]
