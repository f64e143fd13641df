"""Report generation for statically collected test trees.

Generates JSON and YAML reports mirroring each file's suite/test tree, a
one-line summary of collected, skipped and todo tests, and a plain-text
tree listing with ``>``-joined full names.
"""

from __future__ import annotations

import datetime
import json
from pathlib import Path
from typing import Any

import yaml

from collector.collect import ParsedFileResult
from collector.tree.tasks import MODE_RUN, MODE_SKIP, MODE_TODO, SuiteNode, TaskNode, TestNode

# Marker printed in front of each node in the tree listing
MODE_MARKERS = {
    MODE_RUN: "✓",
    MODE_SKIP: "↓",
    MODE_TODO: "…",
}
FAIL_MARKER = "×"


class Reporter:
    """Collects parsed file results and generates reports.

    The reporter accepts ParsedFileResult objects and produces a structured
    report containing every file's tree with ids, modes and source
    locations, plus summary counts.
    """

    def __init__(self) -> None:
        self.results: list[ParsedFileResult] = []

    def add_result(self, result: ParsedFileResult) -> None:
        """Add a single file result.

        Args:
            result: The collected file to include in the report.
        """
        self.results.append(result)

    def add_results(self, results: list[ParsedFileResult]) -> None:
        """Add multiple file results.

        Args:
            results: List of collected files to include in the report.
        """
        self.results.extend(results)

    def generate_report(self) -> dict[str, Any]:
        """Generate the report dict.

        Returns:
            Dict with ``report`` key holding ``generated_at``, ``summary``
            and a nested entry per file.
        """
        return {
            "report": {
                "generated_at": datetime.datetime.now(
                    datetime.timezone.utc
                ).isoformat(),
                "summary": self._compute_summary(),
                "files": [self._build_node(r.file) for r in self.results],
            }
        }

    def write_report(self, path: Path) -> None:
        """Write the report as a JSON file.

        Args:
            path: File path to write the JSON report to.
        """
        report = self.generate_report()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(report, f, indent=2)

    def write_yaml(self, path: Path) -> None:
        """Write the report as a YAML file.

        Args:
            path: File path to write the YAML report to.
        """
        report = self.generate_report()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.dump(
                report,
                f,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
            )

    def format_summary(self) -> str:
        """One-line summary such as ``Tests  5 collected | 2 skipped``."""
        summary = self._compute_summary()
        parts = [f"{summary['tests']} collected"]
        if summary["failed"]:
            parts.append(f"{summary['failed']} failed")
        if summary["skipped"]:
            parts.append(f"{summary['skipped']} skipped")
        if summary["todo"]:
            parts.append(f"{summary['todo']} todo")
        return "Tests  " + " | ".join(parts)

    def format_tree(self) -> str:
        """Plain-text listing of every node, one per line."""
        lines: list[str] = []
        for result in self.results:
            lines.append(f"{_marker(result.file)} {result.file.name}")
            for task in result.file.iter_tasks():
                lines.append(f"  {_marker(task)} {_display_name(task)}")
        return "\n".join(lines)

    def _build_node(self, task: TaskNode) -> dict[str, Any]:
        """Recursively build a report node for *task*."""
        node: dict[str, Any] = {
            "id": task.id,
            "name": task.name,
            "type": task.type,
            "mode": task.mode,
        }
        if task.location is not None:
            line, column = task.location
            node["location"] = {"line": line, "column": column}
        if task.result is not None:
            node["state"] = task.result.state
            node["errors"] = list(task.result.errors)
        if isinstance(task, SuiteNode):
            node["tasks"] = [self._build_node(t) for t in task.tasks]
        return node

    def _compute_summary(self) -> dict[str, int]:
        """Compute counts over all collected files."""
        summary = {
            "files": len(self.results),
            "suites": 0,
            "tests": 0,
            "run": 0,
            "skipped": 0,
            "todo": 0,
            "failed": 0,
        }
        for result in self.results:
            if result.file.result is not None:
                summary["failed"] += 1
            for task in result.file.iter_tasks():
                if task.result is not None:
                    summary["failed"] += 1
                if not isinstance(task, TestNode):
                    summary["suites"] += 1
                    continue
                summary["tests"] += 1
                if task.mode == MODE_RUN:
                    summary["run"] += 1
                elif task.mode in (MODE_SKIP, MODE_TODO):
                    # todo tests count as skipped, like the runner's summary
                    summary["skipped"] += 1
                    if task.mode == MODE_TODO:
                        summary["todo"] += 1
        return summary


def _marker(task: TaskNode) -> str:
    if task.result is not None:
        return FAIL_MARKER
    return MODE_MARKERS.get(task.mode, MODE_MARKERS[MODE_RUN])


def _display_name(task: TaskNode) -> str:
    """Full name below the file, joined with `` > ``."""
    names = [task.name]
    parent = task.suite
    while parent is not None and parent.suite is not None:
        names.append(parent.name)
        parent = parent.suite
    return " > ".join(reversed(names))
