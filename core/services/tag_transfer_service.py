"""Export of tag state to a portable snapshot and merge of a snapshot back in.

References are not stable between devices, so exported assignments are keyed
by display name. On import each name is resolved against the current list in
three passes:

1. display name of a current reference;
2. the full reference string (backups made before display names existed);
3. for URI keys, the filename carried in the URI, looked up as a display name.

Catalog and assignments are merged; filter preferences are replaced.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from loguru import logger

from core.models import RESERVED_TAGS, ImportSummary, TagExportData, TagFilterMode
from core.services.interfaces import NameResolver
from core.uris import filename_from_uri, last_path_segment


class _ReferenceSource(Protocol):
    """Read access to the current reference list."""

    def references(self) -> list[str]:
        raise NotImplementedError


class _TagState(Protocol):
    """The subset of tag store operations the transfer needs."""

    def tags_of(self, reference: str) -> set[str]:
        raise NotImplementedError

    def add_tag(self, reference: str, tag: str) -> None:
        raise NotImplementedError

    def catalog(self) -> set[str]:
        raise NotImplementedError

    def add_to_catalog(self, tag: str) -> None:
        raise NotImplementedError

    def active_tags(self) -> set[str]:
        raise NotImplementedError

    def set_active_tags(self, tags: Iterable[str]) -> None:
        raise NotImplementedError

    def hidden_tags(self) -> set[str]:
        raise NotImplementedError

    def set_hidden_tags(self, tags: Iterable[str]) -> None:
        raise NotImplementedError

    def filter_mode(self) -> TagFilterMode:
        raise NotImplementedError

    def set_filter_mode(self, mode: TagFilterMode) -> None:
        raise NotImplementedError

    def auto_tag_enabled(self) -> bool:
        raise NotImplementedError

    def set_auto_tag_enabled(self, enabled: bool) -> None:
        raise NotImplementedError


def resolve_display_name(resolver: NameResolver | None, reference: str) -> str | None:
    """Ask `resolver` for a display name, falling back to the last path segment."""
    name: str | None = None
    if resolver is not None:
        try:
            name = resolver.resolve_display_name(reference)
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.debug("Display name lookup failed for {}: {}", reference, ex)
            name = None
    return name or last_path_segment(reference)


class TagTransferService:
    """Builds and applies `TagExportData` snapshots."""

    def __init__(
        self,
        references: _ReferenceSource,
        tags: _TagState,
        resolver: NameResolver | None = None,
    ) -> None:
        self._references = references
        self._tags = tags
        self._resolver = resolver

    def display_name(self, reference: str) -> str | None:
        return resolve_display_name(self._resolver, reference)

    def export_snapshot(self) -> TagExportData:
        """Capture catalog, filter preferences and name-keyed assignments."""
        mappings: dict[str, list[str]] = {}
        for ref in self._references.references():
            tags = self._tags.tags_of(ref)
            if not tags:
                continue
            name = self.display_name(ref)
            if name is None:
                logger.debug("No display name for {}; not exported", ref)
                continue
            mappings[name] = sorted(tags)

        catalog = self._tags.catalog()
        catalog.update(RESERVED_TAGS)
        snapshot = TagExportData(
            catalog=catalog,
            mappings=mappings,
            active_tags=self._tags.active_tags(),
            hidden_tags=self._tags.hidden_tags(),
            filter_mode=self._tags.filter_mode(),
            auto_tag_enabled=self._tags.auto_tag_enabled(),
        )
        logger.info("Exported {} tag mappings, {} catalog tags", len(mappings), len(catalog))
        return snapshot

    def _names_to_references(self) -> dict[str, list[str]]:
        by_name: dict[str, list[str]] = {}
        for ref in self._references.references():
            name = self.display_name(ref)
            if name is not None:
                by_name.setdefault(name, []).append(ref)
        return by_name

    def _resolve_targets(
        self, key: str, by_name: dict[str, list[str]], current: list[str]
    ) -> list[str]:
        targets = by_name.get(key)
        if targets:
            return targets
        if key in current:
            return [key]
        if "://" in key:
            name = filename_from_uri(key)
            if name is not None:
                return by_name.get(name, [])
        return []

    def import_snapshot(self, data: TagExportData | None) -> ImportSummary:
        """Merge `data` into the current tag state.

        Mapping entries that match no current reference are skipped without
        error; their names are listed in the returned summary.
        """
        summary = ImportSummary()
        if data is None:
            return summary

        for tag in data.catalog or ():
            self._tags.add_to_catalog(tag)

        if data.mappings:
            by_name = self._names_to_references()
            current = self._references.references()
            for key, tags in data.mappings.items():
                targets = self._resolve_targets(key, by_name, current)
                if not targets:
                    logger.debug("No reference matches imported name {}", key)
                    summary.unmatched.append(key)
                    continue
                for ref in targets:
                    for tag in tags:
                        self._tags.add_tag(ref, tag)
                summary.matched.append(key)

        if data.active_tags is not None:
            self._tags.set_active_tags(data.active_tags)
        if data.hidden_tags is not None:
            self._tags.set_hidden_tags(data.hidden_tags)
        if data.filter_mode is not None:
            self._tags.set_filter_mode(data.filter_mode)
        if data.auto_tag_enabled is not None:
            self._tags.set_auto_tag_enabled(data.auto_tag_enabled)

        logger.info(
            "Imported tags: {} names matched, {} unmatched",
            len(summary.matched),
            len(summary.unmatched),
        )
        return summary
