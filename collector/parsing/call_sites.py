"""Classification of call expressions as test and suite declarations.

Every call expression in a parsed test file is inspected on its own.  A
call declares a test when its callee resolves to ``it``/``test`` and a
suite when it resolves to ``describe``/``suite``; the accessed modifier
(``.skip``, ``.only``, ``.todo``) gives the declared mode.  Calls that only
build a declaration (``.each``, ``.skipIf``, ``.runIf``, ``.for``) are left
alone: the call applying their result is visited separately.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import tree_sitter as ts

from collector.parsing.names import node_as_string, node_text
from collector.tree.tasks import MODE_ONLY, MODE_RUN, MODE_SKIP, MODE_TODO, TYPE_SUITE, TYPE_TEST

if TYPE_CHECKING:
    from collector.tree.tasks import TaskNode

TEST_KEYWORDS = frozenset({"it", "test"})
SUITE_KEYWORDS = frozenset({"describe", "suite"})
DECLARATION_KEYWORDS = TEST_KEYWORDS | SUITE_KEYWORDS

DECLARED_MODES = frozenset({MODE_SKIP, MODE_ONLY, MODE_TODO})

# Modifiers returning a function that declares the task when called again.
WRAPPER_MODIFIERS = frozenset({"each", "skipIf", "runIf", "for"})

# Identifiers of module namespaces generated by the SSR transform, e.g.
# ``__vite_ssr_import_0__.test(...)``.
GENERATED_NAMESPACE_PREFIX = "__vite_ssr_"


@dataclass(eq=False)
class CallSite:
    """One classified declaration, before it is linked into a tree."""

    start: int
    end: int
    name: str
    type: str
    mode: str
    location: tuple[int, int] | None = None
    task: TaskNode | None = None


def is_tagged_template(node: ts.Node | None) -> bool:
    """Whether *node* is a tagged template such as ``test.each`table```."""
    if node is None or node.type != "call_expression":
        return False
    arguments = node.child_by_field_name("arguments")
    return arguments is not None and arguments.type == "template_string"


def _is_generated_namespace(node: ts.Node, source: bytes) -> bool:
    return node.type == "identifier" and node_text(node, source).startswith(
        GENERATED_NAMESPACE_PREFIX
    )


def unwrap_parentheses(node: ts.Node | None) -> ts.Node | None:
    """Strip ``(...)`` around an expression; parentheses carry no meaning here."""
    while node is not None and node.type == "parenthesized_expression":
        inner = [c for c in node.named_children if c.type != "comment"]
        if not inner:
            return None
        node = inner[0]
    return node


def callee_base_name(callee: ts.Node | None, source: bytes) -> str | None:
    """Resolve the identifier a callee is ultimately built from.

    ``test`` and ``test.skip`` resolve to ``test``; chained calls and
    tagged templates resolve through their own callee.  For member
    expressions on a generated namespace the member itself is the base
    (``ns.test`` resolves to ``test``), and one more level is unwrapped
    when the object is a member expression (``ns.test.skip``).
    """
    callee = unwrap_parentheses(callee)
    if callee is None:
        return None
    if callee.type in ("identifier", "property_identifier"):
        return node_text(callee, source)
    if callee.type == "call_expression":
        return callee_base_name(callee.child_by_field_name("function"), source)
    if callee.type == "member_expression":
        obj = unwrap_parentheses(callee.child_by_field_name("object"))
        if obj is None:
            return None
        if obj.type == "identifier":
            if _is_generated_namespace(obj, source):
                return callee_base_name(callee.child_by_field_name("property"), source)
            return node_text(obj, source)
        if obj.type == "member_expression":
            return callee_base_name(obj.child_by_field_name("property"), source)
    return None


def declared_mode(callee: ts.Node, base_name: str, source: bytes) -> str | None:
    """Mode declared by the callee's modifier, or *None* for wrapper modifiers."""
    prop = None
    if callee.type == "member_expression":
        prop_node = callee.child_by_field_name("property")
        if prop_node is not None:
            prop = node_text(prop_node, source)
    if prop is None or prop == base_name:
        return MODE_RUN
    if prop in WRAPPER_MODIFIERS:
        return None
    if prop in DECLARED_MODES:
        return prop
    # concurrent, sequential, fails and friends run normally
    return MODE_RUN


def _first_argument(node: ts.Node) -> ts.Node | None:
    arguments = node.child_by_field_name("arguments")
    if arguments is None:
        return None
    for child in arguments.named_children:
        if child.type != "comment":
            return child
    return None


def classify_call(node: ts.Node, source: bytes) -> CallSite | None:
    """Classify one ``call_expression`` node.

    Returns:
        A CallSite when the call declares a named test or suite, otherwise
        *None*.  Declarations without a name argument (``test()``) are
        dropped here.
    """
    if node.type != "call_expression" or is_tagged_template(node):
        return None
    callee = unwrap_parentheses(node.child_by_field_name("function"))
    if callee is None:
        return None
    name = callee_base_name(callee, source)
    if name not in DECLARATION_KEYWORDS:
        return None
    mode = declared_mode(callee, name, source)
    if mode is None:
        return None

    if is_tagged_template(callee):
        start = callee.end_byte + 1
        row, column = callee.end_point
        column += 1
    elif callee.type == "call_expression":
        start = callee.end_byte
        row, column = callee.end_point
    else:
        start = node.start_byte
        row, column = node.start_point

    message_node = _first_argument(node)
    if message_node is None:
        return None

    return CallSite(
        start=start,
        end=node.end_byte,
        name=node_as_string(message_node, source),
        type=TYPE_TEST if name in TEST_KEYWORDS else TYPE_SUITE,
        mode=mode,
        location=(row + 1, column),
    )


def collect_call_sites(root: ts.Node, source: bytes) -> list[CallSite]:
    """Classify every call expression under *root*, in pre-order."""
    call_sites: list[CallSite] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "call_expression":
            call_site = classify_call(node, source)
            if call_site is not None:
                call_sites.append(call_site)
        stack.extend(reversed(node.children))
    return call_sites
