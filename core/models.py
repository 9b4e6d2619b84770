"""Core domain models for media references, tags and exported tag state."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

IMAGES_TAG = "Images"
VIDEOS_TAG = "Videos"
RESERVED_TAGS: frozenset[str] = frozenset({IMAGES_TAG, VIDEOS_TAG})


class TagFilterMode(Enum):
    """How a reference's tags are combined with the active tag set."""

    AND = "and"
    OR = "or"
    XAND = "xand"
    XOR = "xor"

    @classmethod
    def from_value(cls, value: str | None) -> TagFilterMode:
        """Return the mode stored as `value`, defaulting to OR."""
        for mode in cls:
            if mode.value == value:
                return mode
        return cls.OR


class Ordering(Enum):
    """Display order of the filtered list."""

    SELECTION = "selection"
    RANDOM = "random"

    @classmethod
    def from_value(cls, value: str | None) -> Ordering:
        for ordering in cls:
            if ordering.value == value:
                return ordering
        return cls.SELECTION


class TooWideImagesRule(Enum):
    """What the renderer does with images wider than the screen."""

    SCROLL_FORWARD = "scroll_forward"
    SCROLL_BACKWARD = "scroll_backward"
    SCALE_DOWN = "scale_down"
    SCALE_UP = "scale_up"

    @classmethod
    def from_value(cls, value: str | None) -> TooWideImagesRule:
        for rule in cls:
            if rule.value == value:
                return rule
        return cls.SCALE_DOWN


# Default human labels; callers may inject their own table keyed by member.
DEFAULT_LABELS: dict[Enum, str] = {
    Ordering.SELECTION: "In order of selection",
    Ordering.RANDOM: "Random order",
    TooWideImagesRule.SCROLL_FORWARD: "Scroll forward",
    TooWideImagesRule.SCROLL_BACKWARD: "Scroll backward",
    TooWideImagesRule.SCALE_DOWN: "Scale down",
    TooWideImagesRule.SCALE_UP: "Scale up",
    TagFilterMode.AND: "All selected tags",
    TagFilterMode.OR: "Any selected tag",
    TagFilterMode.XAND: "Not all selected tags",
    TagFilterMode.XOR: "Exactly one selected tag",
}


class TagSortOption(Enum):
    NAME_ASC = "name_asc"
    NAME_DESC = "name_desc"
    COUNT_ASC = "count_asc"
    COUNT_DESC = "count_desc"


class MediaFilter(Enum):
    """Media kind shown in the gallery."""

    ALL = "all"
    IMAGES_ONLY = "images_only"
    VIDEOS_ONLY = "videos_only"


class GallerySortOption(Enum):
    NAME_ASC = "name_asc"
    NAME_DESC = "name_desc"
    TAG_COUNT_DESC = "tag_count_desc"
    TAG_COUNT_ASC = "tag_count_asc"


@dataclass
class TagInfo:
    """A catalog row: tag name and how many listed references carry it."""

    name: str
    count: int
    is_system_tag: bool = False


@dataclass
class TagExportData:
    """Portable snapshot of tag state.

    `mappings` is keyed by display name rather than by reference, since raw
    references differ between devices and sessions. Fields left as None were
    absent from the source document.
    """

    catalog: set[str] | None = None
    mappings: dict[str, list[str]] | None = None
    active_tags: set[str] | None = None
    hidden_tags: set[str] | None = None
    filter_mode: TagFilterMode | None = None
    auto_tag_enabled: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready dict using the backup file field names."""
        data: dict[str, Any] = {}
        if self.catalog is not None:
            data["catalog"] = sorted(self.catalog)
        if self.mappings is not None:
            data["mappings"] = {name: list(tags) for name, tags in self.mappings.items()}
        if self.active_tags is not None:
            data["activeTags"] = sorted(self.active_tags)
        if self.hidden_tags is not None:
            data["hiddenTags"] = sorted(self.hidden_tags)
        if self.filter_mode is not None:
            data["tagFilterMode"] = self.filter_mode.value
        if self.auto_tag_enabled is not None:
            data["autoTagEnabled"] = self.auto_tag_enabled
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TagExportData:
        """Build a snapshot from a decoded backup document.

        Raises:
            ValueError: If `data` is not a JSON object, or a tag field or
                mapping value is not a list.
        """
        if not isinstance(data, dict):
            raise ValueError(f"tag backup must be a JSON object, got {type(data).__name__}")

        def _tag_list(raw: Any, where: str) -> list[str]:
            if not isinstance(raw, list):
                raise ValueError(f"{where} must be a list of tags, got {type(raw).__name__}")
            return [str(t) for t in raw]

        def _tag_set(key: str) -> set[str] | None:
            raw = data.get(key)
            if raw is None:
                return None
            return set(_tag_list(raw, key))

        mappings: dict[str, list[str]] | None = None
        raw_mappings = data.get("mappings")
        if raw_mappings is not None:
            if not isinstance(raw_mappings, dict):
                raise ValueError(
                    f"mappings must be a JSON object, got {type(raw_mappings).__name__}"
                )
            mappings = {
                str(name): _tag_list(tags if tags is not None else [], f"mappings[{name!r}]")
                for name, tags in raw_mappings.items()
            }

        raw_mode = data.get("tagFilterMode")
        raw_auto = data.get("autoTagEnabled")
        return cls(
            catalog=_tag_set("catalog"),
            mappings=mappings,
            active_tags=_tag_set("activeTags"),
            hidden_tags=_tag_set("hiddenTags"),
            filter_mode=TagFilterMode.from_value(raw_mode) if raw_mode is not None else None,
            auto_tag_enabled=bool(raw_auto) if raw_auto is not None else None,
        )


@dataclass
class ImportSummary:
    """Which snapshot mapping names were matched to current references."""

    matched: list[str] = field(default_factory=list)
    unmatched: list[str] = field(default_factory=list)
