"""Unit tests for the CLI."""

from unittest.mock import patch

from typer.testing import CliRunner

from interest_suggest.cli import app
from interest_suggest.config import settings
from interest_suggest.errors import BadFormatError
from interest_suggest.sdk import SuggestionSession

runner = CliRunner()


def _session_factory(fetcher):
    def build(**kwargs):
        return SuggestionSession(fetcher=fetcher, settings=kwargs.get("settings"))

    return build


class TestCLI:
    """Test CLI commands."""

    def test_info(self):
        result = runner.invoke(app, ["info"])

        assert result.exit_code == 0
        assert "Page size" in result.output
        assert "Preload letters" in result.output

    def test_suggest(self, fake_fetcher):
        with patch("interest_suggest.sdk.SuggestionSession", side_effect=_session_factory(fake_fetcher)):
            result = runner.invoke(app, ["suggest", "--query", "t"])

        assert result.exit_code == 0
        assert "3 suggestions" in result.output
        assert "💃 Tango (Berlin)" in result.output
        assert "Travel - Backpacking" in result.output
        assert fake_fetcher.closed is True

    def test_suggest_no_matches(self, fake_fetcher):
        with patch("interest_suggest.sdk.SuggestionSession", side_effect=_session_factory(fake_fetcher)):
            result = runner.invoke(app, ["suggest", "--query", "zzz"])

        assert result.exit_code == 0
        assert "No matches found" in result.output

    def test_suggest_error(self, fetcher_factory):
        fetcher = fetcher_factory(errors={"m": BadFormatError("no list")})
        with patch("interest_suggest.sdk.SuggestionSession", side_effect=_session_factory(fetcher)):
            result = runner.invoke(app, ["suggest", "--query", "m"])

        assert result.exit_code == 1
        assert "Invalid response format from server" in result.output

    def test_serve_binds_configured_address(self):
        with patch("uvicorn.run") as mock_run:
            result = runner.invoke(app, ["serve"])

        assert result.exit_code == 0
        _, kwargs = mock_run.call_args
        assert kwargs["host"] == settings.host
        assert kwargs["port"] == settings.port

    def test_serve_options_override_settings(self):
        with patch("uvicorn.run") as mock_run:
            result = runner.invoke(app, ["serve", "--host", "127.0.0.1", "--port", "9000"])

        assert result.exit_code == 0
        mock_run.assert_called_once_with(
            "interest_suggest.api.app:app",
            host="127.0.0.1",
            port=9000,
            reload=False,
            log_level="info",
        )
