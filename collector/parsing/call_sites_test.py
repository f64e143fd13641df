"""Unit tests for declaration call classification."""

from __future__ import annotations

from collector.parsing.call_sites import collect_call_sites
from collector.parsing.source import parse_source, unwrap_identity_calls


def _classify(code: str) -> list[tuple[str, str, str]]:
    """Return (type, mode, name) for every declaration in *code*."""
    call_sites = collect_call_sites(parse_source(code), code.encode("utf-8"))
    return [(c.type, c.mode, c.name) for c in call_sites]


class TestDeclarationShapes:
    """Tests for recognizing test and suite declarations."""

    def test_plain_test(self):
        """``test(name, fn)`` declares a running test."""
        assert _classify("test('a', () => {})") == [("test", "run", "a")]

    def test_it_alias(self):
        """``it`` is a test alias."""
        assert _classify("it('a', () => {})") == [("test", "run", "a")]

    def test_describe_and_suite_aliases(self):
        """``describe`` and ``suite`` declare suites."""
        code = "describe('d', () => {})\nsuite('s', () => {})"
        assert _classify(code) == [("suite", "run", "d"), ("suite", "run", "s")]

    def test_skip_modifier(self):
        """``test.skip`` declares a skipped test."""
        assert _classify("test.skip('a', () => {})") == [("test", "skip", "a")]

    def test_only_modifier_on_suite(self):
        """``describe.only`` declares an exclusive suite."""
        assert _classify("describe.only('d', () => {})") == [("suite", "only", "d")]

    def test_todo_modifier(self):
        """``it.todo`` declares a todo test without a body."""
        assert _classify("it.todo('later')") == [("test", "todo", "later")]

    def test_other_modifiers_run(self):
        """Modifiers that do not change the mode declare a running task."""
        assert _classify("test.concurrent('a', () => {})") == [("test", "run", "a")]

    def test_unrelated_calls_ignored(self):
        """Calls to other functions are not declarations."""
        code = "expect(1).toBe(1)\nconsole.log('x')\nfoo.test('a')"
        assert _classify(code) == []

    def test_nameless_declaration_dropped(self):
        """``test()`` without a name argument is not collected."""
        assert _classify("test()") == []


class TestWrappedDeclarations:
    """Tests for parameterized and guarded declarations."""

    def test_each_wrapper_not_classified(self):
        """Only the call applying ``test.each(...)`` is a declaration."""
        code = "test.each([1, 2])('adds %i', (n) => {})"
        assert _classify(code) == [("test", "run", "adds %i")]

    def test_each_start_is_after_wrapper(self):
        """Chained declarations start where the wrapper call ends."""
        code = "test.each([1, 2])('adds %i', (n) => {})"
        call_sites = collect_call_sites(parse_source(code), code.encode())
        assert len(call_sites) == 1
        assert call_sites[0].start == len("test.each([1, 2])")
        assert call_sites[0].end == len(code)

    def test_skip_if_wrapper(self):
        """``test.skipIf(cond)(name, fn)`` declares one running test."""
        assert _classify("test.skipIf(isCI)('a', () => {})") == [("test", "run", "a")]

    def test_run_if_wrapper(self):
        """``describe.runIf(cond)(name, fn)`` declares one suite."""
        assert _classify("describe.runIf(ok)('d', () => {})") == [("suite", "run", "d")]

    def test_for_wrapper(self):
        """``test.for(cases)(name, fn)`` declares one test."""
        assert _classify("test.for([1])('case %i', () => {})") == [("test", "run", "case %i")]

    def test_modifier_before_wrapper_dropped(self):
        """``test.skip.each(...)(name, fn)`` resolves to ``skip`` and is not collected."""
        assert _classify("test.skip.each([1])('n %i', () => {})") == []

    def test_tagged_template_each(self):
        """Tagged template tables start one character after the tag ends."""
        code = "test.each`\n  a | b\n  ${1} | ${2}\n`('sum $a', () => {})"
        call_sites = collect_call_sites(parse_source(code), code.encode())
        assert [(c.type, c.mode, c.name) for c in call_sites] == [("test", "run", "sum $a")]
        tag_end = code.index("`(") + 1
        assert call_sites[0].start == tag_end + 1


class TestGeneratedNamespaces:
    """Tests for calls through generated module namespaces."""

    def test_namespace_member_call(self):
        """``__vite_ssr_import_0__.test`` resolves to ``test``."""
        code = "__vite_ssr_import_0__.test('a', () => {})"
        assert _classify(code) == [("test", "run", "a")]

    def test_namespace_member_with_modifier(self):
        """``__vite_ssr_import_0__.describe.skip`` is a skipped suite."""
        code = "__vite_ssr_import_0__.describe.skip('d', () => {})"
        assert _classify(code) == [("suite", "skip", "d")]

    def test_identity_wrapper_unwrapped(self):
        """Identity wrappers are replaced without shifting offsets."""
        code = "__vite_ssr_identity__(__vite_ssr_import_0__.it)('a', () => {})"
        unwrapped = unwrap_identity_calls(code)
        assert len(unwrapped) == len(code)
        assert _classify(unwrapped) == [("test", "run", "a")]

    def test_ordinary_namespace_not_unwrapped(self):
        """Only generated namespace identifiers are unwrapped."""
        assert _classify("vitest.test('a', () => {})") == []


class TestLocations:
    """Tests for call site positions."""

    def test_offsets_cover_call(self):
        """Plain declarations span the whole call expression."""
        code = "  it('a', () => {})"
        call_sites = collect_call_sites(parse_source(code), code.encode())
        assert call_sites[0].start == 2
        assert call_sites[0].end == len(code)

    def test_location_is_one_based_line(self):
        """Locations carry a 1-based line and 0-based column."""
        code = "\n\n    it('a', () => {})"
        call_sites = collect_call_sites(parse_source(code), code.encode())
        assert call_sites[0].location == (3, 4)

    def test_nested_calls_all_visited(self):
        """Declarations inside callbacks are classified too."""
        code = "describe('s', () => {\n  it('a', () => {})\n  it.skip('b', () => {})\n})"
        assert _classify(code) == [
            ("suite", "run", "s"),
            ("test", "run", "a"),
            ("test", "skip", "b"),
        ]
