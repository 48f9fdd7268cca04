"""Local resolution of queries from previously fetched result sets."""

import logging
from dataclasses import dataclass
from enum import Enum

from interest_suggest.interests import Interest, exclude_selected
from interest_suggest.query import filter_matching, is_extension, normalize
from interest_suggest.store.cache import SuggestionCache
from interest_suggest.types import ResolutionState

logger = logging.getLogger(__name__)


class Source(str, Enum):
    """Where a local answer came from."""

    EMPTY_QUERY = "empty_query"
    EXACT = "exact"
    FALLBACK_FILTER = "fallback_filter"
    ANCESTOR_FILTER = "ancestor_filter"


@dataclass(frozen=True)
class Resolution:
    """
    A local answer plus the side effects the caller should apply.

    cache_write: store results under query in the cache.
    promote: make (query, results) the new fallback.
    """

    query: str
    results: list[Interest]
    source: Source
    cache_write: bool = False
    promote: bool = False


class LocalResolver:
    """Answers queries without network I/O when cached data allows it."""

    def resolve(
        self,
        query: str,
        cache: SuggestionCache,
        state: ResolutionState,
    ) -> Resolution | None:
        """
        Try to answer a query from the cache and the fallback state.

        Never mutates the cache or the state.

        Args:
            query: Raw query text.
            cache: Session cache.
            state: Current resolution state (fallback and selection).

        Returns:
            Resolution on success, None on a cache miss.
        """
        q = normalize(query)
        selected = state.selected

        if not q:
            return Resolution(
                query=q,
                results=exclude_selected(state.last_valid_results, selected),
                source=Source.EMPTY_QUERY,
            )

        hit = cache.get(q)
        if hit is not None:
            results = exclude_selected(hit, selected)
            logger.debug(f"Exact cache hit for '{q}' ({len(results)} results)")
            return Resolution(query=q, results=results, source=Source.EXACT, promote=bool(results))

        if is_extension(q, state.last_valid_query) and state.last_valid_results:
            results = exclude_selected(filter_matching(state.last_valid_results, q), selected)
            if results:
                logger.debug(
                    f"Filtered '{state.last_valid_query}' fallback down to {len(results)} for '{q}'"
                )
                return Resolution(
                    query=q,
                    results=results,
                    source=Source.FALLBACK_FILTER,
                    cache_write=True,
                    promote=True,
                )

        resolution = self.filter_from_ancestor(q, cache, selected)
        if resolution is not None:
            return resolution

        logger.debug(f"Cache miss for '{q}'")
        return None

    def filter_from_ancestor(
        self,
        q: str,
        cache: SuggestionCache,
        selected: list[Interest],
    ) -> Resolution | None:
        """Filter the longest cached ancestor of a normalized query."""
        found = cache.longest_ancestor(q)
        if found is None:
            return None

        ancestor, entry = found
        if not entry:
            return None

        results = exclude_selected(filter_matching(entry, q), selected)
        if not results:
            return None

        logger.debug(f"Filtered ancestor '{ancestor}' down to {len(results)} for '{q}'")
        return Resolution(
            query=q,
            results=results,
            source=Source.ANCESTOR_FILTER,
            cache_write=True,
            promote=True,
        )
