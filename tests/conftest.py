"""Pytest configuration and fixtures."""

import asyncio

import pytest

from interest_suggest.controller import ResolutionController
from interest_suggest.interests import Interest, exclude_selected


class FakeFetcher:
    """In-memory stand-in for the remote autocomplete service."""

    def __init__(self, responses=None, errors=None, delays=None):
        self.responses = responses or {}
        self.errors = errors or {}
        self.delays = delays or {}
        self.calls: list[str] = []
        self.closed = False

    async def fetch(self, query, selected=()):
        self.calls.append(query)
        # The service matches case-insensitively
        key = query.strip().lower()
        delay = self.delays.get(key, 0)
        if delay:
            await asyncio.sleep(delay)
        if key in self.errors:
            raise self.errors[key]
        items = [Interest.model_validate(item) for item in self.responses.get(key, [])]
        return exclude_selected(items, selected)

    async def aclose(self):
        self.closed = True


@pytest.fixture
def sample_responses():
    """Sample autocomplete responses keyed by normalized query."""
    return {
        "m": [
            {"id": "1", "name": "Music", "secondary_term": "Rock"},
            {"id": "2", "name": "Movies"},
        ],
        "t": [
            {"id": "10", "name": "Tango [Berlin]", "emoji": "💃"},
            {"id": "11", "name": "Tennis"},
            {"id": "12", "name": "Travel", "secondary_term": "Backpacking"},
        ],
        "tr": [],
        "ba": [
            {"id": "12", "name": "Travel", "secondary_term": "Backpacking"},
            {"id": "30", "name": "Basketball"},
        ],
        "s": [
            {"id": "20", "name": "Surfing"},
            {"id": "21", "name": "Skiing"},
        ],
    }


@pytest.fixture
def fake_fetcher(sample_responses):
    """Fake fetcher serving the sample responses."""
    return FakeFetcher(responses=sample_responses)


@pytest.fixture
def controller(fake_fetcher):
    """Controller with short debounce intervals."""
    return ResolutionController(
        fetcher=fake_fetcher,
        debounce_short=0.01,
        debounce_extend=0.03,
        debounce_default=0.02,
        preload_letters=["m", "t", "s"],
    )


@pytest.fixture
def fetcher_factory():
    """Build fake fetchers with custom responses, errors or delays."""
    return FakeFetcher
