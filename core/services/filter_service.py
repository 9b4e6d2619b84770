"""Tag filtering of the reference list.

The service is a pure function of its inputs: it never reads or writes
persisted state and always returns a new list in the input order.
"""

from __future__ import annotations

from collections.abc import Iterable, Set

from core.models import TagFilterMode
from core.services.interfaces import TagsOf


def matches_active_tags(tags: Set[str], active_tags: Set[str], mode: TagFilterMode) -> bool:
    """Evaluate `mode` for one reference's `tags` against `active_tags`.

    XAND and XOR are not the textbook set operations: XAND is "not all active
    tags present" and XOR is "exactly one active tag present".
    """
    if mode is TagFilterMode.AND:
        return active_tags <= tags
    if mode is TagFilterMode.OR:
        return not active_tags.isdisjoint(tags)
    if mode is TagFilterMode.XAND:
        return not active_tags <= tags
    if mode is TagFilterMode.XOR:
        return len(active_tags & tags) == 1
    raise ValueError(f"Unknown filter mode: {mode!r}")


class TagFilterService:
    """Computes the visible subset of references."""

    def visible_references(
        self,
        references: Iterable[str],
        tags_of: TagsOf,
        active_tags: Iterable[str],
        hidden_tags: Iterable[str],
        mode: TagFilterMode,
    ) -> list[str]:
        """Return references passing the hidden-tag veto and the active filter.

        Args:
            references: All references in list order.
            tags_of: Callable returning the tags of one reference.
            active_tags: Tags the user filters by; empty means no filter.
            hidden_tags: Any reference carrying one of these is excluded,
                whatever `mode` is.
            mode: Combination rule for `active_tags`.
        """
        active = frozenset(active_tags)
        hidden = frozenset(hidden_tags)

        visible: list[str] = []
        for ref in references:
            tags = frozenset(tags_of(ref))
            if not hidden.isdisjoint(tags):
                continue
            if not active or matches_active_tags(tags, active, mode):
                visible.append(ref)
        return visible
