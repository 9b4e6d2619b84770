"""Core service interfaces.

The engine never talks to a concrete storage backend or platform API; it is
handed objects implementing these protocols. Infrastructure adapters live in
`infrastructure/`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Protocol

TagsOf = Callable[[str], Iterable[str]]


class KeyValueStore(Protocol):
    """Persisted mapping from string keys to primitive values.

    Writes are applied immediately and last write wins per key. There is no
    atomicity across keys. Getters return `default` when the key is missing.
    """

    def get_string(self, key: str, default: str | None = None) -> str | None:
        raise NotImplementedError

    def put_string(self, key: str, value: str) -> None:
        raise NotImplementedError

    def get_int(self, key: str, default: int = 0) -> int:
        raise NotImplementedError

    def put_int(self, key: str, value: int) -> None:
        raise NotImplementedError

    def get_long(self, key: str, default: int = 0) -> int:
        raise NotImplementedError

    def put_long(self, key: str, value: int) -> None:
        raise NotImplementedError

    def get_bool(self, key: str, default: bool = False) -> bool:
        raise NotImplementedError

    def put_bool(self, key: str, value: bool) -> None:
        raise NotImplementedError

    def get_string_set(self, key: str, default: set[str] | None = None) -> set[str] | None:
        """Return a copy of the stored set; callers may mutate it freely."""
        raise NotImplementedError

    def put_string_set(self, key: str, value: Iterable[str]) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError

    def contains(self, key: str) -> bool:
        raise NotImplementedError


class NameResolver(Protocol):
    """Maps a reference to a human-readable, device-stable display name."""

    def resolve_display_name(self, reference: str) -> str | None:
        """Return the display name, or None when it cannot be determined."""
        raise NotImplementedError
