"""Key names used in the key-value store.

Values are part of the persisted format and must not change.
"""

from __future__ import annotations

ORDERING: str = "ordering"
LAST_UPDATE: str = "last_update"
LAST_INDEX: str = "last_index"
URI_LIST: str = "pick_images"
SECONDS_BETWEEN: str = "seconds"
TOO_WIDE_IMAGES_RULE: str = "too_wide_images_rule"
ANTI_ALIAS: str = "anti_alias"
ANTI_ALIAS_WHILE_SCROLLING: str = "anti_alias_scrolling"
SWIPE: str = "swipe"
MUTE_VIDEOS: str = "mute_videos"
TRANSITION_DURATION: str = "transition_duration"
TAG_MAP: str = "tag_map"  # reserved, not written
ACTIVE_TAGS: str = "active_tags"
TAG_FILTER_MODE: str = "tag_filter_mode"
HIDDEN_TAGS: str = "hidden_tags"
AUTO_TAG_ENABLED: str = "auto_tag_enabled"
TAG_CATALOG: str = "tag_catalog"

TAGS_PREFIX: str = "tags_"

URI_SEPARATOR: str = ";"

DEFAULT_SECONDS_BETWEEN: int = 15
DEFAULT_TRANSITION_DURATION_MS: int = 1000


def tags_key(reference: str) -> str:
    """Per-reference key holding that reference's tag set."""
    return TAGS_PREFIX + reference
