"""Interest Suggest - incremental autocomplete cache for interest search."""

from interest_suggest.sdk import SuggestionSession

__all__ = ["SuggestionSession"]
__version__ = "0.1.0"
