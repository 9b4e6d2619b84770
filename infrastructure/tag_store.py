"""Tag catalog, per-reference tag sets and tag filter preferences.

Each reference's tags live under their own key (``tags_<reference>``); the
catalog and the active/hidden filter sets are plain string-set values. The
cascading operations (`remove_from_catalog`, `rename`) are sequences of
independent key writes and are not atomic: a reader may observe an
intermediate state, and re-running the operation completes it.
"""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from core.models import RESERVED_TAGS, TagFilterMode
from core.services.interfaces import KeyValueStore
from infrastructure import keys
from infrastructure.reference_store import ReferenceListStore


class TagStore:
    """Tag state over a `KeyValueStore`."""

    def __init__(self, store: KeyValueStore, references: ReferenceListStore) -> None:
        self._store = store
        self._references = references

    # -- per-reference tags -------------------------------------------------

    def tags_of(self, reference: str) -> set[str]:
        """Return the tags of `reference` (empty set if none)."""
        return self._store.get_string_set(keys.tags_key(reference), None) or set()

    def add_tag(self, reference: str, tag: str) -> None:
        """Tag `reference` with `tag` and make sure `tag` is in the catalog."""
        if not tag:
            logger.warning("Ignoring empty tag for {}", reference)
            return
        tags = self.tags_of(reference)
        tags.add(tag)
        self._store.put_string_set(keys.tags_key(reference), tags)
        self.add_to_catalog(tag)

    def remove_tag(self, reference: str, tag: str) -> None:
        """Untag `reference`; drop its key entirely once no tags remain."""
        key = keys.tags_key(reference)
        tags = self._store.get_string_set(key, None)
        if not tags or tag not in tags:
            return
        tags.discard(tag)
        if tags:
            self._store.put_string_set(key, tags)
        else:
            self._store.remove(key)

    def assignments(self) -> dict[str, set[str]]:
        """Map each listed reference that has tags to its tag set."""
        result: dict[str, set[str]] = {}
        for ref in self._references.references():
            tags = self.tags_of(ref)
            if tags:
                result[ref] = tags
        return result

    # -- catalog ------------------------------------------------------------

    def catalog(self) -> set[str]:
        """Stored catalog plus the reserved tags."""
        result = self._store.get_string_set(keys.TAG_CATALOG, None) or set()
        result.update(RESERVED_TAGS)
        return result

    def add_to_catalog(self, tag: str) -> None:
        if not tag or tag in RESERVED_TAGS:
            return
        stored = self._store.get_string_set(keys.TAG_CATALOG, None) or set()
        if tag not in stored:
            stored.add(tag)
            self._store.put_string_set(keys.TAG_CATALOG, stored)

    def remove_from_catalog(self, tag: str) -> None:
        """Delete `tag` from the catalog, every listed reference and both filter sets."""
        if tag in RESERVED_TAGS:
            logger.info("Tag {} is reserved and cannot be removed", tag)
            return

        stored = self._store.get_string_set(keys.TAG_CATALOG, None) or set()
        if tag in stored:
            stored.discard(tag)
            self._store.put_string_set(keys.TAG_CATALOG, stored)

        for ref in self._references.references():
            self.remove_tag(ref, tag)

        active = self.active_tags()
        if tag in active:
            active.discard(tag)
            self.set_active_tags(active)

        hidden = self.hidden_tags()
        if tag in hidden:
            hidden.discard(tag)
            self.set_hidden_tags(hidden)
        logger.info("Removed tag {} from catalog", tag)

    def rename(self, old: str, new: str) -> None:
        """Rename `old` to `new` in the catalog, on references and in filter sets."""
        if old == new:
            return
        if old in RESERVED_TAGS:
            logger.info("Tag {} is reserved and cannot be renamed", old)
            return
        if not new:
            logger.warning("Refusing to rename {} to an empty tag", old)
            return

        stored = self._store.get_string_set(keys.TAG_CATALOG, None) or set()
        if old in stored:
            stored.discard(old)
            if new not in RESERVED_TAGS:
                stored.add(new)
            self._store.put_string_set(keys.TAG_CATALOG, stored)

        for ref in self._references.references():
            if old in self.tags_of(ref):
                self.remove_tag(ref, old)
                self.add_tag(ref, new)

        active = self.active_tags()
        if old in active:
            active.discard(old)
            active.add(new)
            self.set_active_tags(active)

        hidden = self.hidden_tags()
        if old in hidden:
            hidden.discard(old)
            hidden.add(new)
            self.set_hidden_tags(hidden)
        logger.info("Renamed tag {} -> {}", old, new)

    # -- filter preferences -------------------------------------------------

    def active_tags(self) -> set[str]:
        return self._store.get_string_set(keys.ACTIVE_TAGS, None) or set()

    def set_active_tags(self, tags: Iterable[str]) -> None:
        self._store.put_string_set(keys.ACTIVE_TAGS, tags)

    def hidden_tags(self) -> set[str]:
        return self._store.get_string_set(keys.HIDDEN_TAGS, None) or set()

    def set_hidden_tags(self, tags: Iterable[str]) -> None:
        self._store.put_string_set(keys.HIDDEN_TAGS, tags)

    def filter_mode(self) -> TagFilterMode:
        return TagFilterMode.from_value(self._store.get_string(keys.TAG_FILTER_MODE, None))

    def set_filter_mode(self, mode: TagFilterMode) -> None:
        self._store.put_string(keys.TAG_FILTER_MODE, mode.value)

    def auto_tag_enabled(self) -> bool:
        return self._store.get_bool(keys.AUTO_TAG_ENABLED, False)

    def set_auto_tag_enabled(self, enabled: bool) -> None:
        self._store.put_bool(keys.AUTO_TAG_ENABLED, enabled)
