"""Persistence of the ordered media reference list.

The list is stored as one string value with entries joined by ``;``.
References therefore must not contain a semicolon; this is not validated.
"""

from __future__ import annotations

from collections.abc import Iterable
import threading

from loguru import logger

from core.services.interfaces import KeyValueStore
from core.uris import same_identity
from infrastructure import keys


def _parse(value: str | None) -> list[str]:
    if not value:
        return []
    return value.split(keys.URI_SEPARATOR)


def _has_same_identity(existing: Iterable[str], reference: str) -> bool:
    return any(same_identity(reference, other) for other in existing)


class ReferenceListStore:
    """Ordered, deduplicated list of media references.

    Deduplication uses the derived identity (last path segment), while
    removal and lookup use exact string equality. Every read goes to the
    backing store; every mutation persists the full list immediately.
    """

    def __init__(self, store: KeyValueStore, key: str = keys.URI_LIST) -> None:
        self._store = store
        self._key = key
        # Held across read-modify-write so concurrent callers cannot
        # interleave partial list writes.
        self._lock = threading.RLock()

    def references(self) -> list[str]:
        """Return all references in insertion order."""
        return _parse(self._store.get_string(self._key, None))

    def count(self) -> int:
        return len(self.references())

    def contains(self, reference: str) -> bool:
        return reference in self.references()

    def add(self, reference: str) -> bool:
        """Append `reference` unless one with the same identity exists."""
        with self._lock:
            current = self.references()
            if _has_same_identity(current, reference):
                logger.debug("Skip duplicate reference {}", reference)
                return False
            current.append(reference)
            self._save(current)
            return True

    def add_all(self, references: Iterable[str]) -> bool:
        """Append each new reference; persist once. Return True if any was added."""
        with self._lock:
            current = self.references()
            changed = False
            for ref in references:
                if not _has_same_identity(current, ref):
                    current.append(ref)
                    changed = True
            if changed:
                self._save(current)
            return changed

    def remove(self, reference: str) -> None:
        """Remove the first entry equal to `reference`, if any."""
        with self._lock:
            current = self.references()
            if reference in current:
                current.remove(reference)
                self._save(current)

    def remove_all(self, references: Iterable[str]) -> None:
        """Remove every entry equal to any of `references`."""
        targets = set(references)
        if not targets:
            return
        with self._lock:
            current = self.references()
            kept = [ref for ref in current if ref not in targets]
            if len(kept) != len(current):
                self._save(kept)

    def replace(self, old: str, new: str) -> None:
        """Swap `old` for `new` in place, or add `new` if `old` is absent."""
        with self._lock:
            current = self.references()
            try:
                index = current.index(old)
            except ValueError:
                self.add(new)
                return
            current[index] = new
            self._save(current)

    def _save(self, references: list[str]) -> None:
        with self._lock:
            self._store.put_string(self._key, keys.URI_SEPARATOR.join(references))
        logger.debug("Saved reference list ({} entries)", len(references))
