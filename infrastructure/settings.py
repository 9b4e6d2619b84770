"""Application settings read from a JSON file.

Example ``settings.json``::

    {
      "store": {"path": "~/.slideshow/preferences.json"},
      "logging": {"dir": "~/.slideshow/logs", "level": "INFO"},
      "labels": {"ordering": {"random": "Shuffle"}}
    }
"""

from __future__ import annotations

from enum import Enum
import json
from pathlib import Path
from typing import Any

from loguru import logger

from core.models import Ordering, TagFilterMode, TooWideImagesRule

_LABEL_SECTIONS: dict[str, type[Enum]] = {
    "ordering": Ordering,
    "too_wide_images_rule": TooWideImagesRule,
    "tag_filter_mode": TagFilterMode,
}


class JsonSettings:
    """JSON settings reader with dotted-key access."""

    def __init__(self, settings_path: str | Path) -> None:
        self._path = Path(settings_path)
        if not self._path.exists():
            raise FileNotFoundError(f"settings.json not found: {self._path}")
        with self._path.open("r", encoding="utf-8") as f:
            self._data = json.load(f)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> JsonSettings:
        """Build settings from an in-memory mapping (no file)."""
        obj = cls.__new__(cls)
        obj._path = None
        obj._data = data
        return obj

    @property
    def path(self) -> Path | None:
        return self._path

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        node: Any = self._data
        for part in key.split("."):
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    def get_path(self, key: str, default: str | Path | None = None) -> Path | None:
        """Return dotted `key` as an expanded `Path`, or `default`."""
        value = self.get(key, default)
        if value is None:
            return None
        return Path(str(value)).expanduser()

    def labels(self) -> dict[Enum, str]:
        """Label overrides from the ``labels`` section, keyed by enum member."""
        result: dict[Enum, str] = {}
        for section, enum_type in _LABEL_SECTIONS.items():
            entries = self.get(f"labels.{section}", {})
            if not isinstance(entries, dict):
                continue
            for value, label in entries.items():
                member = next((m for m in enum_type if m.value == value), None)
                if member is None:
                    logger.warning("Unknown label key labels.{}.{}", section, value)
                    continue
                result[member] = str(label)
        return result
