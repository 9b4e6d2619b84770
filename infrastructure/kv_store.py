"""Key-value store adapters.

`InMemoryKeyValueStore` keeps values in a dict. `JsonFileKeyValueStore` does
the same and writes the whole document to disk after every change.
"""

from __future__ import annotations

from collections.abc import Iterable
import json
import os
from pathlib import Path
import threading
from typing import Any

from loguru import logger


class InMemoryKeyValueStore:
    """Dict-backed implementation of `KeyValueStore`."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = {}
        self._lock = threading.RLock()
        for key, value in (initial or {}).items():
            self._data[key] = set(value) if isinstance(value, (list, tuple, set)) else value

    def _get(self, key: str, default: Any, accepts: tuple[type, ...]) -> Any:
        with self._lock:
            if key not in self._data:
                return default
            value = self._data[key]
        # bool is an int subclass; keep the two apart
        mismatch = not isinstance(value, accepts) or (
            isinstance(value, bool) and bool not in accepts
        )
        if mismatch:
            logger.warning(
                "Preference {} holds {}, expected {}; using default",
                key,
                type(value).__name__,
                "/".join(t.__name__ for t in accepts),
            )
            return default
        return value

    def _put(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value
            self._commit()

    def _commit(self) -> None:
        """Hook called with the lock held after every change."""

    def get_string(self, key: str, default: str | None = None) -> str | None:
        return self._get(key, default, (str,))

    def put_string(self, key: str, value: str) -> None:
        self._put(key, str(value))

    def get_int(self, key: str, default: int = 0) -> int:
        return self._get(key, default, (int,))

    def put_int(self, key: str, value: int) -> None:
        self._put(key, int(value))

    # Python ints are unbounded, so longs share the int representation.
    def get_long(self, key: str, default: int = 0) -> int:
        return self._get(key, default, (int,))

    def put_long(self, key: str, value: int) -> None:
        self._put(key, int(value))

    def get_bool(self, key: str, default: bool = False) -> bool:
        return self._get(key, default, (bool,))

    def put_bool(self, key: str, value: bool) -> None:
        self._put(key, bool(value))

    def get_string_set(self, key: str, default: set[str] | None = None) -> set[str] | None:
        value = self._get(key, None, (set, frozenset, list, tuple))
        if value is None:
            return set(default) if default is not None else None
        return set(value)

    def put_string_set(self, key: str, value: Iterable[str]) -> None:
        self._put(key, {str(v) for v in value})

    def remove(self, key: str) -> None:
        with self._lock:
            if key in self._data:
                del self._data[key]
                self._commit()

    def contains(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._data)


class JsonFileKeyValueStore(InMemoryKeyValueStore):
    """Key-value store persisted as a single JSON object.

    The file is read once at construction; a missing or unreadable file
    starts an empty store. String sets are written as sorted JSON arrays.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        super().__init__(self._read(self._path))

    @property
    def path(self) -> Path:
        return self._path

    @staticmethod
    def _read(path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as ex:
            logger.error("Cannot read preference file {}: {}", path, ex)
            return {}
        if not isinstance(data, dict):
            logger.error("Preference file {} is not a JSON object; ignoring it", path)
            return {}
        return data

    def _commit(self) -> None:
        payload = {
            key: sorted(value) if isinstance(value, (set, frozenset)) else value
            for key, value in self._data.items()
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(self._path.name + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2, sort_keys=True)
        os.replace(tmp, self._path)
