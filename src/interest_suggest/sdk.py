"""Session facade for interest suggestions."""

import logging
from collections.abc import Callable
from typing import Any

from interest_suggest.config import Settings
from interest_suggest.controller import Listener, ResolutionController
from interest_suggest.fetchers.base import InterestFetcher
from interest_suggest.fetchers.http_fetcher import HttpInterestFetcher
from interest_suggest.interests import Interest
from interest_suggest.types import SuggestionView

logger = logging.getLogger(__name__)


class SuggestionSession:
    """One interactive search session: fetcher, cache, corpus and state."""

    def __init__(
        self,
        fetcher: InterestFetcher | None = None,
        settings: Settings | None = None,
    ):
        """
        Initialize the session.

        Args:
            fetcher: Remote fetcher. Defaults to HTTP against the configured endpoint.
            settings: Settings to use. Defaults to the global settings.
        """
        from interest_suggest.config import settings as default_settings

        self.settings = settings or default_settings

        if fetcher is None:
            self.fetcher = HttpInterestFetcher(
                base_url=self.settings.api_base_url,
                path=self.settings.autocomplete_path,
                api_key=self.settings.api_key,
                page_size=self.settings.page_size,
                timeout_seconds=self.settings.request_timeout,
                response_field=self.settings.response_field,
            )
        else:
            self.fetcher = fetcher

        self.controller = ResolutionController(
            fetcher=self.fetcher,
            debounce_short=self.settings.debounce_short_ms / 1000,
            debounce_extend=self.settings.debounce_extend_ms / 1000,
            debounce_default=self.settings.debounce_default_ms / 1000,
            suppression_lookahead=self.settings.suppression_lookahead,
            preload_letters=self.settings.preload_letters,
        )

        logger.info("SuggestionSession initialized")

    def on_query_changed(self, raw: str) -> None:
        """Feed a text-input change through the debounce path."""
        self.controller.on_query_changed(raw)

    async def suggest(self, query: str) -> list[Interest]:
        """
        Resolve a query immediately.

        Args:
            query: Raw query text.

        Returns:
            Suggestions for the query (empty on fetch failure; see view()).
        """
        return await self.controller.resolve(query)

    async def preload(self) -> int:
        """Warm the cache with the configured letters."""
        return await self.controller.preload()

    async def wait_idle(self) -> None:
        """Wait for pending debounced work to settle."""
        await self.controller.wait_idle()

    def select(self, interest: Interest) -> None:
        """Select an interest."""
        self.controller.select(interest)

    def deselect(self, interest: Interest) -> None:
        """Remove an interest from the selection."""
        self.controller.deselect(interest)

    def create_custom_interest(self, text: str) -> Interest:
        """Create and select a custom interest from free text."""
        return self.controller.create_custom_interest(text)

    @property
    def selected(self) -> list[Interest]:
        """Currently selected interests."""
        return list(self.controller.state.selected)

    def search_corpus(self, query: str) -> list[Interest]:
        """Search everything fetched during this session."""
        return self.controller.corpus.search(query)

    def view(self) -> SuggestionView:
        """Current suggestion view."""
        return self.controller.view()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for view changes."""
        return self.controller.subscribe(listener)

    async def aclose(self) -> None:
        """Cancel pending work and release the fetcher."""
        await self.controller.aclose()
        await self.fetcher.aclose()

    def __repr__(self) -> str:
        """String representation."""
        return f"SuggestionSession(fetcher={self.fetcher}, cache={self.controller.cache})"

    async def __aenter__(self) -> "SuggestionSession":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.aclose()
