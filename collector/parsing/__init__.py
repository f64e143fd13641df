"""Source parsing: file loading, declaration call classification and names."""

from collector.parsing.call_sites import CallSite, classify_call, collect_call_sites
from collector.parsing.names import node_as_string
from collector.parsing.source import TransformResult, parse_ast, transform_request

__all__ = [
    "CallSite",
    "TransformResult",
    "classify_call",
    "collect_call_sites",
    "node_as_string",
    "parse_ast",
    "transform_request",
]
