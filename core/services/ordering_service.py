"""Display ordering for the filtered reference list.

Ordering affects only the sequence handed to the renderer, never which
references are in it.
"""

from __future__ import annotations

from collections.abc import Iterable
import random

from core.models import Ordering


class OrderingService:
    """Produces the display order of references."""

    def __init__(self, rng: random.Random | None = None) -> None:
        """Create the service.

        Args:
            rng: Random source for shuffling (defaults to a fresh `random.Random`).
        """
        self._rng = rng or random.Random()

    def display_order(self, references: Iterable[str], ordering: Ordering) -> list[str]:
        """Return a new list: input order for SELECTION, a fresh shuffle for RANDOM."""
        result = list(references)
        if ordering is Ordering.RANDOM:
            self._rng.shuffle(result)
        return result
