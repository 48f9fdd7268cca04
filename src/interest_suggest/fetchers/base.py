"""Base protocol for remote interest fetchers."""

from collections.abc import Sequence
from typing import Protocol

from interest_suggest.interests import Interest


class InterestFetcher(Protocol):
    """Protocol for remote autocomplete fetchers."""

    async def fetch(self, query: str, selected: Sequence[Interest] = ()) -> list[Interest]:
        """
        Fetch candidate interests for a raw query.

        Args:
            query: Raw (non-normalized) query text.
            selected: Interests to exclude from the result.

        Returns:
            Candidates in the order received.

        Raises:
            NetworkError: Transport failure or non-2xx status.
            BadFormatError: 2xx response that does not match the contract.
        """
        ...

    async def aclose(self) -> None:
        """Release network resources."""
        ...
