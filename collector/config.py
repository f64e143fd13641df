"""Collector configuration file management.

Reads the .collector_config JSON file holding the project root,
subproject name, name filter, exclusivity setting and discovery patterns.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

DEFAULT_INCLUDE = ["**/*.{test,spec}-d.?(c|m)[jt]s?(x)"]
DEFAULT_EXCLUDE = ["**/node_modules/**", "**/dist/**"]

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    "root": None,
    "project_name": "",
    "test_name_pattern": None,
    "allow_only": False,
    "include": DEFAULT_INCLUDE,
    "exclude": DEFAULT_EXCLUDE,
    "max_parallel": None,
}


class CollectorConfig:
    """Manages the .collector_config JSON configuration file."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self._data: dict[str, Any] = dict(DEFAULT_CONFIG)
        if path is not None and path.exists():
            self._load()

    def _load(self) -> None:
        """Load config from the file."""
        assert self.path is not None
        try:
            text = self.path.read_text()
            data = json.loads(text)
            if isinstance(data, dict):
                self._data = {**DEFAULT_CONFIG, **data}
        except (json.JSONDecodeError, OSError):
            self._data = dict(DEFAULT_CONFIG)

    @property
    def config(self) -> dict[str, Any]:
        """Get the full configuration dict."""
        return dict(self._data)

    @property
    def root(self) -> Path:
        """Get the project root (defaults to the working directory)."""
        val = self._data.get("root")
        return Path(val) if val else Path.cwd()

    @property
    def project_name(self) -> str:
        """Get the subproject name used to discriminate file ids."""
        return str(self._data.get("project_name") or "")

    @property
    def test_name_pattern(self) -> re.Pattern[str] | None:
        """Get the compiled test name filter (None = no filter).

        Raises:
            ValueError: If the stored pattern is not a valid regex.
        """
        val = self._data.get("test_name_pattern")
        if not val:
            return None
        try:
            return re.compile(val)
        except re.error as e:
            raise ValueError(f"Invalid test_name_pattern {val!r}: {e}") from e

    @property
    def allow_only(self) -> bool:
        """Get whether ``.only`` is allowed without failing the task."""
        return bool(self._data.get("allow_only", DEFAULT_CONFIG["allow_only"]))

    @property
    def include(self) -> list[str]:
        """Get the discovery include patterns."""
        return list(self._data.get("include") or DEFAULT_INCLUDE)

    @property
    def exclude(self) -> list[str]:
        """Get the discovery exclude patterns."""
        return list(self._data.get("exclude") or [])

    @property
    def max_parallel(self) -> int | None:
        """Get the max concurrent file collections (None = CPU count)."""
        val = self._data.get("max_parallel", DEFAULT_CONFIG["max_parallel"])
        return int(val) if val is not None else None

    def set_config(
        self,
        root: str | None = None,
        project_name: str | None = None,
        test_name_pattern: str | None = None,
        allow_only: bool | None = None,
        max_parallel: int | None = None,
    ) -> None:
        """Update configuration values."""
        if root is not None:
            self._data["root"] = root
        if project_name is not None:
            self._data["project_name"] = project_name
        if test_name_pattern is not None:
            self._data["test_name_pattern"] = test_name_pattern
        if allow_only is not None:
            self._data["allow_only"] = allow_only
        if max_parallel is not None:
            self._data["max_parallel"] = max_parallel

    @property
    def subproject_name(self) -> str:
        """Get the discriminator mixed into file ids."""
        if self.project_name:
            return f"{self.project_name}:__typecheck__"
        return "__typecheck__"
