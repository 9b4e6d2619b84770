"""Filename-based tagging decoupled from any storage backend.

A catalog tag is applied to a reference when the tag, reduced to lowercase
letters and digits, occurs in the reference's display name reduced the same
way. "Summer Trip" therefore matches ``IMG_summer-trip_004.jpg``.
"""

from __future__ import annotations

from collections.abc import Iterable
import mimetypes
from typing import Protocol

from loguru import logger

from core.models import IMAGES_TAG, VIDEOS_TAG
from core.services.interfaces import NameResolver
from core.services.tag_transfer_service import resolve_display_name
from core.uris import normalize_for_match


class _TagAccessor(Protocol):
    """Abstracts the tag store used for reading and writing tags."""

    def tags_of(self, reference: str) -> set[str]:
        raise NotImplementedError

    def add_tag(self, reference: str, tag: str) -> None:
        raise NotImplementedError

    def catalog(self) -> set[str]:
        raise NotImplementedError


class AutoTagService:
    """Applies catalog tags and media type tags based on display names."""

    def __init__(self, tags: _TagAccessor, resolver: NameResolver | None = None) -> None:
        self._tags = tags
        self._resolver = resolver

    def _name_of(self, reference: str) -> str:
        return resolve_display_name(self._resolver, reference) or "Unknown"

    def auto_tag(self, references: Iterable[str], tags: Iterable[str] | None = None) -> int:
        """Tag each reference with every candidate tag found in its name.

        Args:
            references: References to examine.
            tags: Candidate tags; the whole catalog when None.

        Returns:
            Number of tags newly added.
        """
        candidates = list(tags) if tags is not None else sorted(self._tags.catalog())
        normalized = [(tag, normalize_for_match(tag)) for tag in candidates]
        added = 0
        for ref in references:
            display_name = self._name_of(ref)
            name_key = normalize_for_match(display_name)
            current = self._tags.tags_of(ref)
            for tag, tag_key in normalized:
                if not tag_key or tag_key not in name_key:
                    continue
                if tag in current:
                    continue
                logger.debug(
                    "Auto-tag {} with {} ({} contains {})", display_name, tag, name_key, tag_key
                )
                self._tags.add_tag(ref, tag)
                current.add(tag)
                added += 1
        logger.info("Auto-tagging added {} tags", added)
        return added

    def media_type_tag(self, reference: str) -> str:
        """Return `Videos` for names with a video MIME type, `Images` otherwise."""
        mime, _ = mimetypes.guess_type(self._name_of(reference), strict=False)
        if mime is not None and mime.startswith("video/"):
            return VIDEOS_TAG
        return IMAGES_TAG

    def apply_media_type_tag(self, reference: str) -> str:
        """Ensure `reference` carries its media type tag; return that tag."""
        tag = self.media_type_tag(reference)
        if tag not in self._tags.tags_of(reference):
            self._tags.add_tag(reference, tag)
        return tag
