"""Task tree data structures for statically collected test files.

Provides FileNode (the root suite for one source file), SuiteNode and
TestNode.  Nodes keep a non-owning ``suite`` back-reference to their
parent; only the parent's ``tasks`` list owns children.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

MODE_RUN = "run"
MODE_SKIP = "skip"
MODE_ONLY = "only"
MODE_TODO = "todo"

VALID_MODES = frozenset({MODE_RUN, MODE_SKIP, MODE_ONLY, MODE_TODO})

TYPE_SUITE = "suite"
TYPE_TEST = "test"


@dataclass
class TaskResult:
    """Outcome attached to a node by mode interpretation."""

    state: str
    errors: list[str] = field(default_factory=list)


@dataclass(eq=False)
class TaskNode:
    """Fields shared by suites and tests."""

    name: str
    mode: str
    start: int
    end: int
    id: str = ""
    location: tuple[int, int] | None = None
    suite: SuiteNode | None = field(default=None, repr=False)
    file: FileNode | None = field(default=None, repr=False)
    result: TaskResult | None = None
    meta: dict[str, Any] = field(default_factory=lambda: {"typecheck": True})

    type = ""

    def __post_init__(self) -> None:
        if self.mode not in VALID_MODES:
            raise ValueError(f"Unknown task mode: {self.mode}")

    @property
    def full_name(self) -> str:
        """Names of all ancestors (file included) and this node, space separated."""
        if self.suite is None:
            return self.name
        return f"{self.suite.full_name} {self.name}"


@dataclass(eq=False)
class TestNode(TaskNode):
    """A single ``it``/``test`` declaration."""

    type = TYPE_TEST


@dataclass(eq=False)
class SuiteNode(TaskNode):
    """A ``describe``/``suite`` declaration grouping other tasks."""

    tasks: list[TaskNode] = field(default_factory=list)

    type = TYPE_SUITE

    def add_task(self, task: TaskNode) -> None:
        """Append *task* as the last child and point it back at this suite."""
        task.suite = self
        task.file = self.file
        self.tasks.append(task)

    def iter_tasks(self):
        """Yield every descendant in source order (depth first)."""
        for task in self.tasks:
            yield task
            if isinstance(task, SuiteNode):
                yield from task.iter_tasks()


@dataclass(eq=False)
class FileNode(SuiteNode):
    """Root suite covering a whole source file."""

    filepath: str = ""
    project_name: str = ""

    def __post_init__(self) -> None:
        super().__post_init__()
        self.file = self
