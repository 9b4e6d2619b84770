"""Preference facade used by the renderer and the view-models.

`PreferencesManager` bundles the reference list, the tag store, the filter
and ordering services and the scalar slideshow settings over one
`KeyValueStore`. Reads always go to the store; nothing is cached.
"""

from __future__ import annotations

from enum import Enum

from loguru import logger

from core.models import (
    DEFAULT_LABELS,
    ImportSummary,
    Ordering,
    TagExportData,
    TooWideImagesRule,
)
from core.services.filter_service import TagFilterService
from core.services.interfaces import KeyValueStore, NameResolver
from core.services.ordering_service import OrderingService
from core.services.tag_transfer_service import TagTransferService
from infrastructure import keys
from infrastructure.reference_store import ReferenceListStore
from infrastructure.tag_store import TagStore


class PreferencesManager:
    """Read/write API over the persisted slideshow state."""

    def __init__(
        self,
        store: KeyValueStore,
        resolver: NameResolver | None = None,
        labels: dict[Enum, str] | None = None,
        ordering_service: OrderingService | None = None,
        filter_service: TagFilterService | None = None,
    ) -> None:
        """Create the manager.

        Args:
            store: Backing key-value store.
            resolver: Display name lookup used by tag export/import.
            labels: Human labels per enum member, merged over the defaults.
            ordering_service: Ordering service (defaults to `OrderingService`).
            filter_service: Filter service (defaults to `TagFilterService`).
        """
        self._store = store
        self.references = ReferenceListStore(store)
        self.tags = TagStore(store, self.references)
        self._resolver = resolver
        self._labels: dict[Enum, str] = {**DEFAULT_LABELS, **(labels or {})}
        self._ordering = ordering_service or OrderingService()
        self._filter = filter_service or TagFilterService()

    @property
    def store(self) -> KeyValueStore:
        return self._store

    @property
    def resolver(self) -> NameResolver | None:
        return self._resolver

    # -- filtered / ordered views ------------------------------------------

    def filtered_references(self) -> list[str]:
        """References visible under the current active/hidden tags and mode."""
        return self._filter.visible_references(
            self.references.references(),
            self.tags.tags_of,
            self.tags.active_tags(),
            self.tags.hidden_tags(),
            self.tags.filter_mode(),
        )

    def display_references(self) -> list[str]:
        """Filtered references in the configured display order."""
        return self._ordering.display_order(self.filtered_references(), self.ordering())

    def filtered_count(self) -> int:
        return len(self.filtered_references())

    def reference_at(self, index: int) -> str | None:
        """Filtered reference at `index`, or None when out of range."""
        visible = self.filtered_references()
        if index < 0 or index >= len(visible):
            return None
        return visible[index]

    def current_index(self) -> int:
        """Last shown index wrapped into the filtered list; 0 when it is empty."""
        index = self._store.get_int(keys.LAST_INDEX, 0)
        count = self.filtered_count()
        if count == 0 or index < 0:
            return 0
        return index % count

    def set_current_index(self, index: int) -> None:
        self._store.put_int(keys.LAST_INDEX, index)

    # -- slideshow settings -------------------------------------------------

    def ordering(self) -> Ordering:
        return Ordering.from_value(self._store.get_string(keys.ORDERING, None))

    def set_ordering(self, ordering: Ordering) -> None:
        self._store.put_string(keys.ORDERING, ordering.value)

    def last_update(self) -> int:
        return self._store.get_long(keys.LAST_UPDATE, 0)

    def set_last_update(self, value: int) -> None:
        self._store.put_long(keys.LAST_UPDATE, value)

    def _int_from_string(self, key: str, default: int) -> int:
        raw = self._store.get_string(key, None)
        if raw is None:
            return default
        try:
            return int(raw)
        except ValueError:
            logger.warning("Invalid number for {}: {!r}; using {}", key, raw, default)
            return default

    def seconds_between_images(self) -> int:
        return self._int_from_string(keys.SECONDS_BETWEEN, keys.DEFAULT_SECONDS_BETWEEN)

    def set_seconds_between_images(self, value: int) -> None:
        self._store.put_string(keys.SECONDS_BETWEEN, str(int(value)))

    def transition_duration(self) -> int:
        """Transition length in milliseconds."""
        return self._int_from_string(
            keys.TRANSITION_DURATION, keys.DEFAULT_TRANSITION_DURATION_MS
        )

    def set_transition_duration(self, value: int) -> None:
        self._store.put_string(keys.TRANSITION_DURATION, str(int(value)))

    def too_wide_images_rule(self) -> TooWideImagesRule:
        return TooWideImagesRule.from_value(
            self._store.get_string(keys.TOO_WIDE_IMAGES_RULE, None)
        )

    def set_too_wide_images_rule(self, rule: TooWideImagesRule) -> None:
        self._store.put_string(keys.TOO_WIDE_IMAGES_RULE, rule.value)

    def anti_alias(self) -> bool:
        return self._store.get_bool(keys.ANTI_ALIAS, True)

    def set_anti_alias(self, value: bool) -> None:
        self._store.put_bool(keys.ANTI_ALIAS, value)

    def anti_alias_while_scrolling(self) -> bool:
        return self._store.get_bool(keys.ANTI_ALIAS_WHILE_SCROLLING, True)

    def set_anti_alias_while_scrolling(self, value: bool) -> None:
        self._store.put_bool(keys.ANTI_ALIAS_WHILE_SCROLLING, value)

    def swipe_to_change(self) -> bool:
        return self._store.get_bool(keys.SWIPE, True)

    def set_swipe_to_change(self, value: bool) -> None:
        self._store.put_bool(keys.SWIPE, value)

    def mute_videos(self) -> bool:
        return self._store.get_bool(keys.MUTE_VIDEOS, True)

    def set_mute_videos(self, value: bool) -> None:
        self._store.put_bool(keys.MUTE_VIDEOS, value)

    def describe(self, member: Enum) -> str:
        """Human label for an enum member; its stored value if no label is known."""
        label = self._labels.get(member)
        if label is None:
            return str(member.value)
        return label

    # -- tag backup ---------------------------------------------------------

    def _transfer(self) -> TagTransferService:
        return TagTransferService(self.references, self.tags, self._resolver)

    def export_tag_data(self) -> TagExportData:
        return self._transfer().export_snapshot()

    def import_tag_data(self, data: TagExportData | None) -> ImportSummary:
        return self._transfer().import_snapshot(data)
