"""Source loading and syntax tree parsing for test files.

``transform_request`` reads a test file and prepares its source for
parsing; ``parse_ast`` turns that source into a tree-sitter syntax tree.
Both are coroutines: the blocking work runs in the event loop's default
executor so that many files can be collected concurrently.
"""

from __future__ import annotations

import asyncio
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tree_sitter as ts
import tree_sitter_typescript as tsts

TS_LANGUAGE = ts.Language(tsts.language_typescript())
TSX_LANGUAGE = ts.Language(tsts.language_tsx())

TSX_SUFFIXES = frozenset({".tsx", ".jsx"})

# Generated identity wrappers hide the member expression from the classifier.
# The replacement keeps the same length so byte offsets stay valid.
IDENTITY_WRAPPER = "__vite_ssr_identity__"
_IDENTITY_RE = re.compile(IDENTITY_WRAPPER + r"\((\w+\.\w+)\)")


@dataclass
class TransformResult:
    """Transformed source text ready for parsing."""

    code: str
    map: dict[str, Any] | None = None


def unwrap_identity_calls(code: str) -> str:
    """Replace ``__vite_ssr_identity__(ns.member)`` with ``(<pad>ns.member)``."""
    padding = " " * len(IDENTITY_WRAPPER)
    return _IDENTITY_RE.sub(lambda m: f"({padding}{m.group(1)})", code)


def _read_source(filepath: str) -> TransformResult | None:
    try:
        code = Path(filepath).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Collect: cannot read {filepath} ({e}), skipping", file=sys.stderr)
        return None
    return TransformResult(code=unwrap_identity_calls(code))


async def transform_request(filepath: str) -> TransformResult | None:
    """Load *filepath* and return its transformed source.

    Returns:
        The transform result, or *None* if the file could not be read.
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, _read_source, filepath)


def language_for(filepath: str) -> ts.Language:
    """Pick the grammar for *filepath* by extension."""
    if Path(filepath).suffix in TSX_SUFFIXES:
        return TSX_LANGUAGE
    return TS_LANGUAGE


def parse_source(code: str, filepath: str = "") -> ts.Node:
    """Parse *code* synchronously and return the root ``program`` node."""
    parser = ts.Parser(language_for(filepath))
    tree = parser.parse(code.encode("utf-8"))
    return tree.root_node


async def parse_ast(code: str, filepath: str = "") -> ts.Node:
    """Parse *code* in the default executor and return the root node."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, parse_source, code, filepath)
