"""Unit tests for test file discovery."""

from __future__ import annotations

import tempfile
from pathlib import Path

from collector.config import DEFAULT_EXCLUDE, DEFAULT_INCLUDE
from collector.discovery.files import discover_test_files, matches_any


def _touch(root: str, rel: str) -> None:
    path = Path(root) / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("")


class TestMatchesAny:
    """Tests for glob pattern matching."""

    def test_default_include_matches_typecheck_files(self):
        """The default pattern matches every typecheck file flavour."""
        for name in (
            "a.test-d.ts",
            "a.spec-d.ts",
            "src/a.test-d.tsx",
            "deep/dir/a.test-d.mts",
            "a.test-d.cjs",
            "a.spec-d.js",
        ):
            assert matches_any(name, DEFAULT_INCLUDE), name

    def test_default_include_rejects_runtime_tests(self):
        """Ordinary test files are not typecheck files."""
        for name in ("a.test.ts", "a-d.ts", "a.test-d.py", "a.test-d.tss"):
            assert not matches_any(name, DEFAULT_INCLUDE), name

    def test_single_star_stays_in_segment(self):
        """``*`` does not cross directory separators."""
        assert matches_any("a.ts", ["*.ts"])
        assert not matches_any("dir/a.ts", ["*.ts"])

    def test_double_star_directory(self):
        """``**/`` matches zero or more directories."""
        patterns = ["**/node_modules/**"]
        assert matches_any("node_modules/pkg/a.ts", patterns)
        assert matches_any("packages/x/node_modules/a.ts", patterns)
        assert not matches_any("src/a.ts", patterns)

    def test_negated_class(self):
        """``[!...]`` negates a character class."""
        assert matches_any("b.ts", ["[!a]*.ts"])
        assert not matches_any("a.ts", ["[!a]*.ts"])

    def test_nested_braces(self):
        """Brace alternatives may nest."""
        patterns = ["**/*.{ts,{m,c}js}"]
        assert matches_any("a/b.mjs", patterns)
        assert matches_any("b.cjs", patterns)
        assert matches_any("b.ts", patterns)
        assert not matches_any("b.js", patterns)

    def test_nested_extended_groups(self):
        """Extended groups may nest."""
        patterns = ["*.@(ts|+(j|x)s)"]
        assert matches_any("a.jjs", patterns)
        assert matches_any("a.xs", patterns)
        assert matches_any("a.ts", patterns)
        assert not matches_any("a.s", patterns)

    def test_no_patterns(self):
        """An empty pattern list matches nothing."""
        assert not matches_any("a.test-d.ts", [])


class TestDiscoverTestFiles:
    """Tests for walking a directory."""

    def test_finds_matching_files_sorted(self):
        """Matching files are returned sorted."""
        with tempfile.TemporaryDirectory() as tmpdir:
            _touch(tmpdir, "b.test-d.ts")
            _touch(tmpdir, "a/a.spec-d.ts")
            _touch(tmpdir, "a/runtime.test.ts")
            found = discover_test_files(Path(tmpdir), DEFAULT_INCLUDE, DEFAULT_EXCLUDE)
            assert found == sorted([
                str(Path(tmpdir) / "a" / "a.spec-d.ts"),
                str(Path(tmpdir) / "b.test-d.ts"),
            ])

    def test_excluded_directories_pruned(self):
        """Files under excluded directories are skipped."""
        with tempfile.TemporaryDirectory() as tmpdir:
            _touch(tmpdir, "node_modules/pkg/x.test-d.ts")
            _touch(tmpdir, "dist/x.test-d.ts")
            _touch(tmpdir, "src/x.test-d.ts")
            found = discover_test_files(Path(tmpdir), DEFAULT_INCLUDE, DEFAULT_EXCLUDE)
            assert found == [str(Path(tmpdir) / "src" / "x.test-d.ts")]

    def test_missing_directory(self, capsys):
        """A missing directory gives no files and a note on stderr."""
        with tempfile.TemporaryDirectory() as tmpdir:
            found = discover_test_files(Path(tmpdir) / "missing", DEFAULT_INCLUDE)
            assert found == []
        assert "not a directory" in capsys.readouterr().err
