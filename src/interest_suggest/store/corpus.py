"""Deduplicated union of every fetched suggestion."""

from collections.abc import Iterable

from interest_suggest.interests import Interest, contains_interest
from interest_suggest.query import matches, normalize


class CorpusAccumulator:
    """Running union of fetched interests, deduplicated by identity."""

    def __init__(self) -> None:
        self._items: list[Interest] = []

    def merge(self, results: Iterable[Interest]) -> int:
        """
        Add interests not seen before.

        Returns:
            Number of newly added interests.
        """
        added = 0
        for interest in results:
            if not contains_interest(self._items, interest):
                self._items.append(interest)
                added += 1
        return added

    def items(self) -> list[Interest]:
        """All interests in first-seen order."""
        return list(self._items)

    def search(self, query: str) -> list[Interest]:
        """Auxiliary lookup over everything fetched so far."""
        q = normalize(query)
        if not q:
            return self.items()
        return [i for i in self._items if matches(i, q)]

    def __contains__(self, interest: object) -> bool:
        return isinstance(interest, Interest) and contains_interest(self._items, interest)

    def __len__(self) -> int:
        return len(self._items)
