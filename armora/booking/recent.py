"""Bounded most-recent-first list of destinations.

Advisory input for the location-entry collaborator. Not part of a draft's
validity.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from armora.config import settings


class RecentDestinations:
    """Most-recent-first destinations, deduplicated by exact match."""

    def __init__(self, initial: Iterable[str] = (), limit: int | None = None) -> None:
        self._limit = settings.booking.recent_destinations_limit if limit is None else limit
        self._items: list[str] = []
        # Seeded lists arrive most-recent-first; replay oldest first.
        for destination in reversed(list(initial)):
            self.record(destination)

    def record(self, destination: str) -> list[str]:
        """Move (or insert) a destination to the front and trim to the limit."""
        cleaned = destination.strip()
        if not cleaned:
            return self.items
        self._items = [cleaned, *(d for d in self._items if d != cleaned)][: self._limit]
        return self.items

    @property
    def items(self) -> list[str]:
        return list(self._items)

    @property
    def limit(self) -> int:
        return self._limit

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)
