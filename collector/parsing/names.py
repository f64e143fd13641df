"""Display names for test and suite declarations.

Turns the name argument of a declaration call into the string the runner
would show.  Literals are stringified, identifiers keep their own name, and
template literals are rebuilt with interpolations rendered as source text
because their runtime values are unknowable without executing the file.
"""

from __future__ import annotations

import math
from decimal import Decimal

import tree_sitter as ts

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

_KEYWORD_LITERALS = frozenset({"true", "false", "null", "undefined"})

_RADIX_PREFIXES = {"0x": 16, "0o": 8, "0b": 2}

_OCTAL_DIGITS = frozenset("01234567")


def node_text(node: ts.Node, source: bytes) -> str:
    """Verbatim source text of *node*."""
    return source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def _decode_escape(escape: str) -> str:
    body = escape[1:]
    if not body:
        return ""
    if body[0] in _SIMPLE_ESCAPES and not (body[0] == "0" and len(body) > 1):
        return _SIMPLE_ESCAPES[body[0]]
    if body[0] in "xu":
        digits = body[1:].strip("{}")
        try:
            return chr(int(digits, 16))
        except ValueError:
            return body
    if body[0] in "\r\n\u2028\u2029":
        # line continuation
        return ""
    if body.isdigit() and all(d in _OCTAL_DIGITS for d in body):
        return chr(int(body, 8))
    # \8 and \9 are the digit itself
    return body


def string_value(node: ts.Node, source: bytes) -> str:
    """Value of a ``string`` literal with escape sequences decoded."""
    parts: list[str] = []
    for child in node.named_children:
        text = node_text(child, source)
        if child.type == "escape_sequence":
            parts.append(_decode_escape(text))
        else:
            parts.append(text)
    return "".join(parts)


def _format_float(value: float) -> str:
    """Lay out the shortest round-trip digits of *value* like ``Number#toString``."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    k = len(digits)
    # value is 0.<digits> * 10**n
    n = exponent + k
    if k <= n <= 21:
        return sign + digits + "0" * (n - k)
    if 0 < n <= 21:
        return f"{sign}{digits[:n]}.{digits[n:]}"
    if -6 < n <= 0:
        return f"{sign}0.{'0' * -n}{digits}"
    e = n - 1
    mantissa = digits if k == 1 else f"{digits[0]}.{digits[1:]}"
    return f"{sign}{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"


def number_value(text: str) -> str:
    """Format a numeric literal the way ``String(value)`` would.

    Anything that cannot be read as a number is returned verbatim.
    """
    raw = text
    text = text.replace("_", "")
    if text.endswith("n"):
        # BigInt literals stringify without the suffix
        text = text[:-1]
    lowered = text.lower()
    try:
        radix = _RADIX_PREFIXES.get(lowered[:2])
        if radix is not None:
            return str(int(lowered[2:], radix))
        if (
            len(lowered) > 1
            and lowered.startswith("0")
            and lowered.isdigit()
            and all(d in _OCTAL_DIGITS for d in lowered)
        ):
            # legacy octal; 08 and 09 are plain decimals
            return str(int(lowered, 8))
        value = float(lowered)
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return _format_float(value)
    except (ValueError, ArithmeticError):
        return raw


def merge_template_literal(node: ts.Node, source: bytes) -> str:
    """Rebuild a template literal with interpolations as ``${...}`` source.

    Nested template literals are merged recursively and wrapped in
    backticks; every other interpolated expression is kept verbatim.
    """
    result: list[str] = []
    # skip the opening and closing backticks
    cursor = node.start_byte + 1
    for child in node.named_children:
        if child.type != "template_substitution":
            continue
        result.append(source[cursor:child.start_byte].decode("utf-8", errors="replace"))
        cursor = child.end_byte
        expressions = [c for c in child.named_children if c.type != "comment"]
        if not expressions:
            result.append("${}")
            continue
        expression = expressions[0]
        if expression.type == "template_string":
            result.append(f"${{`{merge_template_literal(expression, source)}`}}")
        else:
            result.append(f"${{{node_text(expression, source)}}}")
    result.append(source[cursor:node.end_byte - 1].decode("utf-8", errors="replace"))
    return "".join(result)


def node_as_string(node: ts.Node, source: bytes) -> str:
    """Display string for a declaration's name argument."""
    if node.type == "string":
        return string_value(node, source)
    if node.type == "number":
        return number_value(node_text(node, source))
    if node.type in _KEYWORD_LITERALS:
        return node.type
    if node.type == "identifier":
        return node_text(node, source)
    if node.type == "template_string":
        return merge_template_literal(node, source)
    return node_text(node, source)
