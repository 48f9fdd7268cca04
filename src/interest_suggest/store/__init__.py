"""Session-scoped stores for fetched suggestions."""

from interest_suggest.store.cache import SuggestionCache
from interest_suggest.store.corpus import CorpusAccumulator

__all__ = ["SuggestionCache", "CorpusAccumulator"]
