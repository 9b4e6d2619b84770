"""ViewModel for the tag catalog: counts, sorting, CRUD, auto-tagging and backups."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from core.models import RESERVED_TAGS, ImportSummary, TagInfo, TagSortOption
from core.services.auto_tag_service import AutoTagService
from infrastructure import tag_backup
from infrastructure.preferences import PreferencesManager


def sort_tags(tags: list[TagInfo], option: TagSortOption) -> list[TagInfo]:
    """Return `tags` ordered by `option`; names compare case-insensitively."""
    if option is TagSortOption.NAME_ASC:
        return sorted(tags, key=lambda t: t.name.lower())
    if option is TagSortOption.NAME_DESC:
        return sorted(tags, key=lambda t: t.name.lower(), reverse=True)
    if option is TagSortOption.COUNT_ASC:
        return sorted(tags, key=lambda t: t.count)
    return sorted(tags, key=lambda t: t.count, reverse=True)


class TagCatalogVM:
    """Tag catalog view-model.

    Exposes `tags` as `TagInfo` rows and reloads them after every mutation.
    """

    def __init__(
        self,
        prefs: PreferencesManager,
        sort_option: TagSortOption = TagSortOption.NAME_ASC,
    ) -> None:
        self._prefs = prefs
        self._auto = AutoTagService(prefs.tags, prefs.resolver)
        self.sort_option = sort_option
        self.tags: list[TagInfo] = []
        self.load_tags()

    def load_tags(self) -> None:
        """Rebuild rows: every catalog tag with the number of listed references carrying it."""
        catalog = self._prefs.tags.catalog()
        assignments = self._prefs.tags.assignments()
        counts = {tag: 0 for tag in catalog}
        for tags in assignments.values():
            for tag in tags:
                if tag in counts:
                    counts[tag] += 1
        rows = [
            TagInfo(name=name, count=count, is_system_tag=name in RESERVED_TAGS)
            for name, count in counts.items()
        ]
        self.tags = sort_tags(rows, self.sort_option)

    def set_sort_option(self, option: TagSortOption) -> None:
        self.sort_option = option
        self.tags = sort_tags(self.tags, option)

    def add_tag(self, name: str) -> None:
        self._prefs.tags.add_to_catalog(name)
        self.load_tags()

    def rename_tag(self, old_name: str, new_name: str) -> None:
        self._prefs.tags.rename(old_name, new_name)
        self.load_tags()

    def delete_tag(self, name: str) -> None:
        self._prefs.tags.remove_from_catalog(name)
        self.load_tags()

    def perform_auto_tag(
        self, target_tag: str | None = None, target_reference: str | None = None
    ) -> int:
        """Run auto-tagging.

        Args:
            target_tag: Only check this tag (default: the whole catalog).
            target_reference: Only check this reference (default: every listed one).

        Returns:
            Number of tags added.
        """
        references = (
            [target_reference]
            if target_reference is not None
            else self._prefs.references.references()
        )
        candidates = [target_tag] if target_tag is not None else None
        added = self._auto.auto_tag(references, candidates)
        self.load_tags()
        return added

    def export_tags(self, path: str | Path) -> bool:
        return tag_backup.export_tags(path, self._prefs.export_tag_data())

    def import_tags(self, path: str | Path) -> ImportSummary | None:
        """Merge the backup at `path`; None if it could not be read."""
        data = tag_backup.import_tags(path)
        if data is None:
            logger.warning("Nothing imported from {}", path)
            return None
        summary = self._prefs.import_tag_data(data)
        self.load_tags()
        return summary
