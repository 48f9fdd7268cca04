"""Debounced resolution controller for interest suggestions."""

import asyncio
import logging
from collections.abc import Callable, Sequence

from interest_suggest.errors import FetchError
from interest_suggest.fetchers.base import InterestFetcher
from interest_suggest.interests import (
    Interest,
    contains_interest,
    exclude_selected,
    parse_custom_interest,
    same_interest,
)
from interest_suggest.query import is_extension, normalize
from interest_suggest.resolver import LocalResolver, Resolution
from interest_suggest.store.cache import SuggestionCache
from interest_suggest.store.corpus import CorpusAccumulator
from interest_suggest.types import Phase, ResolutionState, SuggestionView

logger = logging.getLogger(__name__)

Listener = Callable[[SuggestionView], None]

DEFAULT_PRELOAD_LETTERS = ("a", "b", "c", "d", "e", "g", "m", "s", "t")


class ResolutionController:
    """
    Decides, per query change, between local resolution and a remote fetch.

    Every query change or direct resolve issues a new intent token. Only
    the latest intent may touch the cache, the corpus or the state; a
    completion carrying an older token is dropped on arrival.
    """

    def __init__(
        self,
        fetcher: InterestFetcher,
        cache: SuggestionCache | None = None,
        corpus: CorpusAccumulator | None = None,
        resolver: LocalResolver | None = None,
        debounce_short: float = 0.1,
        debounce_extend: float = 0.8,
        debounce_default: float = 0.3,
        suppression_lookahead: int = 3,
        preload_letters: Sequence[str] | None = None,
    ):
        """
        Initialize the controller.

        Args:
            fetcher: Remote fetcher.
            cache: Suggestion cache. A fresh one is created if omitted.
            corpus: Corpus accumulator. A fresh one is created if omitted.
            resolver: Local resolver.
            debounce_short: Delay in seconds for queries of at most one character.
            debounce_extend: Delay for queries extending the last valid query.
            debounce_default: Delay for any other query.
            suppression_lookahead: Max extra characters past an empty cached
                prefix for which the fetch is skipped.
            preload_letters: Letters fetched by preload().
        """
        self.fetcher = fetcher
        self.cache = cache if cache is not None else SuggestionCache()
        self.corpus = corpus if corpus is not None else CorpusAccumulator()
        self.resolver = resolver or LocalResolver()
        self.state = ResolutionState()

        self.debounce_short = debounce_short
        self.debounce_extend = debounce_extend
        self.debounce_default = debounce_default
        self.suppression_lookahead = suppression_lookahead
        self.preload_letters = list(
            DEFAULT_PRELOAD_LETTERS if preload_letters is None else preload_letters
        )

        self._intent = 0
        self._task: asyncio.Task | None = None
        self._listeners: list[Listener] = []
        self._preloaded = False

    # Input

    def on_query_changed(self, raw: str) -> None:
        """
        Handle a text-input change.

        Queries the cache can answer are shown at once. Otherwise the
        debounce timer is restarted and the fetch waits behind it; must be
        called from a running event loop.
        """
        token = self._next_intent(raw)
        q = normalize(raw)
        delay = self.debounce_delay(q)
        if self._resolve_locally(raw):
            return

        self.state.phase = Phase.DEBOUNCING
        logger.debug(f"Debouncing '{q}' for {delay:.3f}s (intent {token})")
        self._task = asyncio.get_running_loop().create_task(self._debounced(raw, token, delay))
        self._emit()

    async def resolve(self, raw: str) -> list[Interest]:
        """
        Resolve a query immediately, without debouncing.

        Returns:
            The current results once this intent settles.
        """
        token = self._next_intent(raw)
        if not self._resolve_locally(raw):
            await self._resolve_remotely(raw, normalize(raw), token)
        return list(self.state.current_results)

    def debounce_delay(self, q: str) -> float:
        """Debounce interval in seconds for a normalized query."""
        if len(q) <= 1:
            return self.debounce_short
        if is_extension(q, self.state.last_valid_query, strict=True):
            return self.debounce_extend
        return self.debounce_default

    async def wait_idle(self) -> None:
        """Wait until no debounced or in-flight resolution is pending."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})

    # Selection

    def select(self, interest: Interest) -> None:
        """
        Commit an interest; it is excluded from every later result.

        Clears the live query and drops back to the last valid results, so
        the next search starts from an empty field.
        """
        if not contains_interest(self.state.selected, interest):
            self.state.selected.append(interest)
            logger.info(f"Selected interest '{interest.name}'")
        self._next_intent("")
        self._show(
            exclude_selected(self.state.last_valid_results, self.state.selected),
            Phase.RESOLVED_LOCAL,
        )

    def deselect(self, interest: Interest) -> None:
        """Remove an interest from the selection."""
        remaining = [s for s in self.state.selected if not same_interest(s, interest)]
        if len(remaining) == len(self.state.selected):
            return
        self.state.selected = remaining
        logger.info(f"Removed interest '{interest.name}'")
        self._emit()

    def create_custom_interest(self, text: str) -> Interest:
        """Parse free text into a custom interest and select it."""
        interest = parse_custom_interest(text)
        self.select(interest)
        return interest

    # Warm start

    async def preload(self) -> int:
        """
        Fetch the preload letters sequentially, once per session.

        Failures are logged and skipped.

        Returns:
            Number of letters loaded into the cache.
        """
        if self._preloaded:
            return 0
        self._preloaded = True

        loaded = 0
        for letter in self.preload_letters:
            key = normalize(letter)
            if not key or key in self.cache:
                continue
            try:
                results = await self.fetcher.fetch(letter, list(self.state.selected))
            except FetchError as e:
                logger.warning(f"Failed to preload data for letter {letter}: {e}")
                continue

            # A user query may have filled this key while we were waiting
            if key in self.cache:
                continue

            results = exclude_selected(results, self.state.selected)
            self.cache.put(key, results)
            self.corpus.merge(results)
            loaded += 1

            if results and not self.state.last_valid_query:
                self._promote(key, results)
                if not normalize(self.state.query) and not self.state.loading:
                    self.state.current_results = list(results)
                self._emit()

        logger.info(f"Preloaded {loaded} of {len(self.preload_letters)} letters")
        return loaded

    # Presentation

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for state changes.

        Returns:
            A callable that unregisters the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def view(self) -> SuggestionView:
        """Snapshot of what the presentation layer should render."""
        state = self.state
        if state.last_valid_query and state.last_valid_results:
            placeholder = f'Search interests (last: "{state.last_valid_query}")'
        else:
            placeholder = "Search interests"
        return {
            "query": state.query,
            "suggestions": list(state.current_results),
            "loading": state.loading,
            "error": state.error,
            "placeholder": placeholder,
            "selected": list(state.selected),
        }

    async def aclose(self) -> None:
        """Cancel any pending resolution (teardown)."""
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            await asyncio.wait({task})
        self.state.loading = False
        self.state.phase = Phase.IDLE

    # Internals

    def _next_intent(self, raw: str) -> int:
        if self._task is not None and not self._task.done():
            self._task.cancel()
            self.state.loading = False
        self._task = None
        self._intent += 1
        self.state.query = raw
        return self._intent

    def _is_current(self, token: int) -> bool:
        return token == self._intent

    def _resolve_locally(self, raw: str) -> bool:
        resolution = self.resolver.resolve(raw, self.cache, self.state)
        if resolution is None:
            return False
        self._apply(resolution)
        return True

    async def _debounced(self, raw: str, token: int, delay: float) -> None:
        await asyncio.sleep(delay)
        if not self._is_current(token):
            return

        # Preload may have filled an ancestor while the timer was running
        q = normalize(raw)
        resolution = self.resolver.filter_from_ancestor(q, self.cache, self.state.selected)
        if resolution is not None:
            self._apply(resolution)
            return

        await self._resolve_remotely(raw, q, token)

    async def _resolve_remotely(self, raw: str, q: str, token: int) -> None:
        if self._should_suppress(q):
            logger.debug(f"Suppressed fetch for '{q}': a shorter prefix returned nothing")
            self._show([], Phase.RESOLVED_LOCAL)
            return
        await self._fetch(raw, q, token)

    def _should_suppress(self, q: str) -> bool:
        state = self.state
        if not is_extension(q, state.last_valid_query) or state.last_valid_results:
            return False
        for key in self.cache.keys():
            if (
                q.startswith(key)
                and self.cache.get(key) == []
                and len(q) - len(key) <= self.suppression_lookahead
            ):
                return True
        return False

    async def _fetch(self, raw: str, q: str, token: int) -> None:
        self.state.loading = True
        self.state.error = None
        self.state.phase = Phase.FETCHING
        self._emit()

        try:
            results = await self.fetcher.fetch(raw, list(self.state.selected))
        except FetchError as e:
            if not self._is_current(token):
                logger.debug(f"Discarding stale failure for '{q}'")
                return
            logger.warning(f"Error fetching suggestions for '{q}': {e}")
            self.state.current_results = []
            self.state.error = e.user_message
            self.state.loading = False
            self.state.phase = Phase.FAILED
            self._emit()
            return

        if not self._is_current(token):
            logger.debug(f"Discarding stale response for '{q}'")
            return

        # The selection may have changed while the request was in flight
        results = exclude_selected(results, self.state.selected)
        self.cache.put(q, results)
        added = self.corpus.merge(results)
        logger.debug(f"Corpus grew by {added} to {len(self.corpus)}")
        if results:
            self._promote(q, results)
        self._show(results, Phase.RESOLVED_REMOTE)

    def _apply(self, resolution: Resolution) -> None:
        if resolution.cache_write:
            self.cache.put(resolution.query, resolution.results)
        if resolution.promote:
            self._promote(resolution.query, resolution.results)
        self._show(resolution.results, Phase.RESOLVED_LOCAL)

    def _promote(self, q: str, results: list[Interest]) -> None:
        self.state.last_valid_query = q
        self.state.last_valid_results = list(results)

    def _show(self, results: list[Interest], phase: Phase) -> None:
        self.state.current_results = list(results)
        self.state.error = None
        self.state.loading = False
        self.state.phase = phase
        self._emit()

    def _emit(self) -> None:
        if not self._listeners:
            return
        view = self.view()
        for listener in list(self._listeners):
            try:
                listener(view)
            except Exception:
                logger.exception("Suggestion listener failed")
