"""Unit tests for the HTTP fetcher (with mocks)."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from interest_suggest.errors import BadFormatError, NetworkError
from interest_suggest.fetchers.http_fetcher import HttpInterestFetcher
from interest_suggest.interests import PLACEHOLDER_NAME, Interest


def _response(status_code=200, body=None, raw=None):
    response = MagicMock()
    response.status_code = status_code
    response.is_success = 200 <= status_code < 300
    if raw is not None:
        response.json.side_effect = json.JSONDecodeError("Expecting value", raw, 0)
    else:
        response.json.return_value = body
    return response


class TestHttpInterestFetcher:
    """Test suite for HttpInterestFetcher."""

    def setup_method(self):
        """Set up test fixtures."""
        self.fetcher = HttpInterestFetcher(
            base_url="https://api.example.com/",
            api_key="secret-token",
            page_size=20,
        )

    def _client(self, response):
        mock_client = AsyncMock()
        mock_client.get = AsyncMock(return_value=response)
        return mock_client

    @pytest.mark.asyncio
    async def test_fetch_happy_path(self):
        """Candidates are shaped into interests in order."""
        mock_client = self._client(
            _response(
                body={
                    "autocomplete": [
                        {"id": 1, "name": "Music", "secondary_term": "Rock", "popularity": 9},
                        {"id": "2", "emoji": "🎬"},
                    ]
                }
            )
        )

        with patch.object(self.fetcher, "_get_client", return_value=mock_client):
            results = await self.fetcher.fetch("Mu")

        assert results == [
            Interest(id="1", name="Music", secondary_term="Rock", popularity=9),
            Interest(id="2", name=PLACEHOLDER_NAME, emoji="🎬"),
        ]

    @pytest.mark.asyncio
    async def test_fetch_sends_raw_query_and_page(self):
        """The raw query is sent with the fixed page size and offset."""
        mock_client = self._client(_response(body={"autocomplete": []}))

        with patch.object(self.fetcher, "_get_client", return_value=mock_client):
            await self.fetcher.fetch("  Rock Music ")

        mock_client.get.assert_called_once_with(
            "/autocomplete/interests",
            params={"q": "  Rock Music ", "limit": 20, "from": 0},
        )

    @pytest.mark.asyncio
    async def test_fetch_excludes_selected(self):
        """Already-selected interests are removed."""
        mock_client = self._client(
            _response(
                body={"autocomplete": [{"id": "42", "name": "Music"}, {"id": "2", "name": "Movies"}]}
            )
        )

        with patch.object(self.fetcher, "_get_client", return_value=mock_client):
            results = await self.fetcher.fetch("m", selected=[Interest(id="42", name="Music")])

        assert [r.name for r in results] == ["Movies"]

    @pytest.mark.asyncio
    async def test_non_2xx_is_network_error(self):
        mock_client = self._client(_response(status_code=503, body={"autocomplete": []}))

        with patch.object(self.fetcher, "_get_client", return_value=mock_client):
            with pytest.raises(NetworkError) as exc_info:
                await self.fetcher.fetch("m")

        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_transport_failure_is_network_error(self):
        mock_client = AsyncMock()
        mock_client.get = AsyncMock(side_effect=httpx.ConnectError("connection refused"))

        with patch.object(self.fetcher, "_get_client", return_value=mock_client):
            with pytest.raises(NetworkError, match="Request failed"):
                await self.fetcher.fetch("m")

    @pytest.mark.asyncio
    async def test_missing_field_is_bad_format(self):
        mock_client = self._client(_response(body={"results": []}))

        with patch.object(self.fetcher, "_get_client", return_value=mock_client):
            with pytest.raises(BadFormatError):
                await self.fetcher.fetch("m")

    @pytest.mark.asyncio
    async def test_field_not_a_list_is_bad_format(self):
        mock_client = self._client(_response(body={"autocomplete": {"name": "Music"}}))

        with patch.object(self.fetcher, "_get_client", return_value=mock_client):
            with pytest.raises(BadFormatError):
                await self.fetcher.fetch("m")

    @pytest.mark.asyncio
    async def test_body_not_an_object_is_bad_format(self):
        mock_client = self._client(_response(body=[{"name": "Music"}]))

        with patch.object(self.fetcher, "_get_client", return_value=mock_client):
            with pytest.raises(BadFormatError):
                await self.fetcher.fetch("m")

    @pytest.mark.asyncio
    async def test_invalid_json_is_bad_format(self):
        mock_client = self._client(_response(raw="<html>"))

        with patch.object(self.fetcher, "_get_client", return_value=mock_client):
            with pytest.raises(BadFormatError):
                await self.fetcher.fetch("m")

    @pytest.mark.asyncio
    async def test_malformed_candidate_is_bad_format(self):
        mock_client = self._client(_response(body={"autocomplete": ["Music"]}))

        with patch.object(self.fetcher, "_get_client", return_value=mock_client):
            with pytest.raises(BadFormatError):
                await self.fetcher.fetch("m")

    @pytest.mark.asyncio
    async def test_client_headers(self):
        """The API key is sent verbatim alongside Accept."""
        client = await self.fetcher._get_client()
        try:
            assert client.headers["Authorization"] == "secret-token"
            assert client.headers["Accept"] == "application/json"
            assert client.base_url.host == "api.example.com"
        finally:
            await self.fetcher.aclose()

    @pytest.mark.asyncio
    async def test_close_resets_client(self):
        first = await self.fetcher._get_client()
        await self.fetcher.aclose()
        assert self.fetcher._client is None

        second = await self.fetcher._get_client()
        assert second is not first
        await self.fetcher.aclose()

    @pytest.mark.asyncio
    async def test_round_trip_through_transport(self):
        """Exercise the real httpx client against a mock transport."""

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/autocomplete/interests"
            assert request.url.params["q"] == "tan go"
            assert request.url.params["limit"] == "20"
            assert request.url.params["from"] == "0"
            return httpx.Response(200, json={"autocomplete": [{"name": "Tango [Berlin]"}]})

        self.fetcher._client = httpx.AsyncClient(
            base_url="https://api.example.com",
            transport=httpx.MockTransport(handler),
        )
        try:
            results = await self.fetcher.fetch("tan go")
        finally:
            await self.fetcher.aclose()

        assert results == [Interest(name="Tango [Berlin]")]
