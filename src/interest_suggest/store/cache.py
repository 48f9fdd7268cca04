"""In-memory suggestion cache keyed by normalized query."""

import logging

from interest_suggest.interests import Interest

logger = logging.getLogger(__name__)


class SuggestionCache:
    """
    Mapping from normalized query to the result set resolved for it.

    Entries live for the whole session; there is no eviction and no TTL.
    """

    def __init__(self) -> None:
        self._entries: dict[str, list[Interest]] = {}

    def get(self, key: str) -> list[Interest] | None:
        """
        Exact lookup.

        Args:
            key: Normalized query.

        Returns:
            The cached result set (possibly empty), or None if absent.
        """
        return self._entries.get(key)

    def put(self, key: str, results: list[Interest]) -> None:
        """Insert or overwrite the entry for a normalized query."""
        self._entries[key] = list(results)
        logger.debug(f"Cached {len(results)} results for '{key}'")

    def longest_ancestor(self, key: str) -> tuple[str, list[Interest]] | None:
        """
        Find the most specific cached query that is a prefix of key.

        Args:
            key: Normalized query.

        Returns:
            (ancestor_key, results) for the longest stored prefix, or None.
        """
        best: str | None = None
        for candidate in self._entries:
            if key.startswith(candidate) and (best is None or len(candidate) > len(best)):
                best = candidate
        if best is None:
            return None
        return best, self._entries[best]

    def keys(self) -> list[str]:
        """Return all cached keys."""
        return list(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        """String representation."""
        return f"SuggestionCache(entries={len(self._entries)})"
