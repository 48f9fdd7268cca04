"""HTTP fetcher for the remote autocomplete service."""

import logging
from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import ValidationError

from interest_suggest.errors import BadFormatError, NetworkError
from interest_suggest.interests import Interest, exclude_selected

logger = logging.getLogger(__name__)


class HttpInterestFetcher:
    """
    Fetcher that calls the autocomplete endpoint over HTTP.

    One GET per call, no retries. The httpx client is created lazily and
    reused for connection pooling.
    """

    def __init__(
        self,
        base_url: str,
        path: str = "/autocomplete/interests",
        api_key: str | None = None,
        page_size: int = 20,
        timeout_seconds: float = 10.0,
        response_field: str = "autocomplete",
    ):
        """
        Initialize the HTTP fetcher.

        Args:
            base_url: Base URL of the autocomplete service.
            path: Autocomplete path.
            api_key: Token sent as the Authorization header.
            page_size: Fixed page size sent as ``limit``.
            timeout_seconds: Timeout for each request.
            response_field: Body field holding the candidate list.
        """
        self._base_url = base_url.rstrip("/")
        self._path = path
        self._api_key = api_key
        self._page_size = page_size
        self._timeout_seconds = timeout_seconds
        self._response_field = response_field

        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self._api_key:
                headers["Authorization"] = self._api_key

            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=headers,
                timeout=httpx.Timeout(self._timeout_seconds),
            )
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch(self, query: str, selected: Sequence[Interest] = ()) -> list[Interest]:
        """
        Fetch candidates for a raw query.

        Args:
            query: Raw query text, sent as-is.
            selected: Interests to exclude from the result.

        Returns:
            Candidates not already selected, in the order received.
        """
        params = {"q": query, "limit": self._page_size, "from": 0}
        logger.info(f"Fetching suggestions for '{query}'")

        client = await self._get_client()
        try:
            response = await client.get(self._path, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Request for '{query}' failed: {e}")
            raise NetworkError(f"Request failed: {e}") from e

        if not response.is_success:
            logger.error(f"Autocomplete returned {response.status_code} for '{query}'")
            raise NetworkError(
                f"Network response was not ok: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise BadFormatError(f"Response body is not JSON: {e}") from e

        candidates = self._parse(data)
        results = exclude_selected(candidates, selected)
        logger.info(f"Fetched {len(candidates)} suggestions for '{query}' ({len(results)} kept)")
        return results

    def _parse(self, data: Any) -> list[Interest]:
        """Shape a decoded response body into interests."""
        if not isinstance(data, dict):
            logger.error(f"Unexpected API response format: {data!r}")
            raise BadFormatError("Response body is not an object")

        raw = data.get(self._response_field)
        if not isinstance(raw, list):
            logger.error(f"Unexpected API response format: {data!r}")
            raise BadFormatError(f"Response field '{self._response_field}' is missing or not a list")

        try:
            return [Interest.model_validate(item) for item in raw]
        except ValidationError as e:
            raise BadFormatError(f"Malformed candidate: {e}") from e

    def __repr__(self) -> str:
        """String representation."""
        return f"HttpInterestFetcher(base_url={self._base_url}, page_size={self._page_size})"
