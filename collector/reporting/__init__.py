"""Collection reporting: JSON and YAML reports, summary and tree listing."""

from collector.reporting.reporter import Reporter

__all__ = [
    "Reporter",
]
