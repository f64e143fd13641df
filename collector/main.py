"""Entry point for the static test collector.

Parses command-line arguments, discovers typecheck test files, collects
their suite/test trees without executing them and writes the reports.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from collector.collect import ParsedFileResult, collect_files_sync
from collector.config import CollectorConfig
from collector.discovery.files import discover_test_files
from collector.reporting.reporter import Reporter


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Static test collector - builds suite/test trees without running tests"
    )
    parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        help="Test files or directories to collect (default: discover under --root)",
    )
    parser.add_argument(
        "--root",
        type=str,
        default=None,
        help="Project root; file names are reported relative to it",
    )
    parser.add_argument(
        "--project-name",
        type=str,
        default=None,
        help="Project name used to discriminate file ids",
    )
    parser.add_argument(
        "-t", "--test-name-pattern",
        type=str,
        default=None,
        help="Only run tests whose full name matches this regex",
    )
    parser.add_argument(
        "--allow-only",
        action="store_true",
        default=None,
        help="Allow .only modifiers without failing the collection",
    )
    parser.add_argument(
        "--config-file",
        type=Path,
        default=None,
        help="Path to the .collector_config JSON file",
    )
    parser.add_argument(
        "--max-parallel",
        type=int,
        default=None,
        help="Maximum number of files collected at once (default: CPU count)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Path to write the JSON report file",
    )
    parser.add_argument(
        "--yaml-output",
        type=Path,
        default=None,
        help="Path to write the YAML report file",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        default=False,
        help="Only print the summary line",
    )
    return parser.parse_args(argv)


def _resolve_files(paths: list[Path], config: CollectorConfig) -> list[str]:
    """Expand directories into discovered test files, keep files as given."""
    if not paths:
        paths = [config.root]

    files: list[str] = []
    for path in paths:
        if path.is_dir():
            files.extend(
                discover_test_files(path, config.include, config.exclude)
            )
        else:
            files.append(str(path))
    return files


def _has_errors(result: ParsedFileResult) -> bool:
    if result.file.result is not None:
        return True
    return any(task.result is not None for task in result.file.iter_tasks())


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    config = CollectorConfig(args.config_file)
    config.set_config(
        root=args.root,
        project_name=args.project_name,
        test_name_pattern=args.test_name_pattern,
        allow_only=args.allow_only,
        max_parallel=args.max_parallel,
    )

    try:
        config.test_name_pattern
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if config.max_parallel is not None and config.max_parallel < 1:
        print("Error: --max-parallel must be at least 1", file=sys.stderr)
        return 1

    files = _resolve_files(args.paths, config)
    if not files:
        print("Error: no test files found", file=sys.stderr)
        return 1

    results = collect_files_sync(files, config)

    exit_code = 0
    reporter = Reporter()
    for filepath, result in zip(files, results):
        if result is None:
            print(f"Error: could not collect {filepath}", file=sys.stderr)
            exit_code = 1
            continue
        if _has_errors(result):
            exit_code = 1
        reporter.add_result(result)

    if not args.quiet:
        tree = reporter.format_tree()
        if tree:
            print(tree)
    print(reporter.format_summary())

    if args.output is not None:
        reporter.write_report(args.output)
    if args.yaml_output is not None:
        reporter.write_yaml(args.yaml_output)

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
