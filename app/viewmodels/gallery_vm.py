"""ViewModel for the media gallery: the filtered list, selection and bulk tag edits."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from loguru import logger

from core.models import VIDEOS_TAG, GallerySortOption, MediaFilter
from core.services.auto_tag_service import AutoTagService
from core.services.tag_transfer_service import resolve_display_name
from infrastructure.preferences import PreferencesManager


@dataclass
class MediaItem:
    """One gallery row."""

    reference: str
    name: str = ""
    is_video: bool = False
    tags: list[str] = field(default_factory=list)


def sort_items(items: list[MediaItem], option: GallerySortOption | None) -> list[MediaItem]:
    """Return `items` sorted by `option`; None keeps list order."""
    if option is None:
        return list(items)
    if option is GallerySortOption.NAME_ASC:
        return sorted(items, key=lambda m: m.name.lower())
    if option is GallerySortOption.NAME_DESC:
        return sorted(items, key=lambda m: m.name.lower(), reverse=True)
    if option is GallerySortOption.TAG_COUNT_ASC:
        return sorted(items, key=lambda m: len(m.tags))
    return sorted(items, key=lambda m: len(m.tags), reverse=True)


class GalleryVM:
    """Gallery view-model.

    `items` mirrors the tag-filtered reference list, narrowed by the media
    filter and ordered by the sort option. References added while
    auto-tagging is enabled are queued in `pending_auto_tag` until
    `perform_auto_tag` runs or `dismiss_auto_tag` discards them.
    """

    def __init__(self, prefs: PreferencesManager) -> None:
        self._prefs = prefs
        self._auto = AutoTagService(prefs.tags, prefs.resolver)
        self.items: list[MediaItem] = []
        self.selected: set[str] = set()
        self.pending_auto_tag: list[str] = []
        self.media_filter = MediaFilter.ALL
        self.sort_option: GallerySortOption | None = None
        self.load_items()

    def _row(self, reference: str) -> MediaItem:
        tags = sorted(self._prefs.tags.tags_of(reference))
        return MediaItem(
            reference=reference,
            name=resolve_display_name(self._prefs.resolver, reference) or "",
            is_video=VIDEOS_TAG in tags or self._auto.media_type_tag(reference) == VIDEOS_TAG,
            tags=tags,
        )

    def _shown(self, item: MediaItem) -> bool:
        if self.media_filter is MediaFilter.IMAGES_ONLY:
            return not item.is_video
        if self.media_filter is MediaFilter.VIDEOS_ONLY:
            return item.is_video
        return True

    def load_items(self, preserve_selection: bool = False) -> None:
        """Rebuild rows from the filtered list."""
        rows = [self._row(ref) for ref in self._prefs.filtered_references()]
        self.items = sort_items([row for row in rows if self._shown(row)], self.sort_option)
        if preserve_selection:
            self.selected &= {row.reference for row in self.items}
        else:
            self.selected = set()

    def set_filter(self, media_filter: MediaFilter) -> None:
        """Show only `media_filter` items; clears the selection."""
        self.media_filter = media_filter
        self.load_items()

    def set_sort_option(self, option: GallerySortOption) -> None:
        self.sort_option = option
        self.items = sort_items(self.items, option)

    def add_references(self, references: Iterable[str]) -> list[str]:
        """Add new references; return the ones actually inserted."""
        before = set(self._prefs.references.references())
        self._prefs.references.add_all(references)
        added = [ref for ref in self._prefs.references.references() if ref not in before]
        for ref in added:
            self._auto.apply_media_type_tag(ref)
        if added and self._prefs.tags.auto_tag_enabled():
            self.pending_auto_tag = added
        logger.info("Added {} references", len(added))
        self.load_items()
        return added

    def remove_references(self, references: Iterable[str]) -> None:
        self._prefs.references.remove_all(references)
        self.load_items(preserve_selection=True)

    def replace_media(self, old: str, new: str) -> None:
        """Put `new` in place of `old` in the list, then clear the selection."""
        self._prefs.references.replace(old, new)
        logger.info("Replaced {} with {}", old, new)
        self.load_items()

    def dismiss_auto_tag(self) -> None:
        self.pending_auto_tag = []

    def perform_auto_tag(self, references: Iterable[str] | None = None) -> int:
        """Auto-tag `references` (default: the pending queue); return tags added."""
        targets = list(references) if references is not None else self.pending_auto_tag
        if not targets:
            return 0
        added = self._auto.auto_tag(targets)
        self.pending_auto_tag = []
        self.load_items(preserve_selection=True)
        return added

    def set_auto_tag_enabled(self, enabled: bool) -> None:
        self._prefs.tags.set_auto_tag_enabled(enabled)

    def toggle_tag_filter(self, tag: str) -> None:
        """Add or drop `tag` from the active filter; clears the selection."""
        active = self._prefs.tags.active_tags()
        if tag in active:
            active.discard(tag)
        else:
            active.add(tag)
        self._prefs.tags.set_active_tags(active)
        self.load_items()

    def clear_tag_filters(self) -> None:
        self._prefs.tags.set_active_tags(set())
        self.load_items()

    def toggle_selection(self, reference: str) -> None:
        if reference in self.selected:
            self.selected.discard(reference)
        else:
            self.selected.add(reference)

    def select_all(self) -> None:
        self.selected = {item.reference for item in self.items}

    def deselect_all(self) -> None:
        self.selected = set()

    def add_tag_to_selected(self, tag: str) -> None:
        for ref in self.selected:
            self._prefs.tags.add_tag(ref, tag)
        self.load_items(preserve_selection=True)

    def remove_tag_from_selected(self, tag: str) -> None:
        for ref in self.selected:
            self._prefs.tags.remove_tag(ref, tag)
        self.load_items(preserve_selection=True)
