"""CLI for interest suggestions."""

import asyncio
import logging
import sys

import typer

from interest_suggest.config import settings
from interest_suggest.interests import Interest, split_name_and_location

# Initialize logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Create Typer app
app = typer.Typer(
    name="interest-suggest",
    help="Interest Suggest CLI",
    add_completion=False,
)


def _print_interests(interests: list[Interest]) -> None:
    for i, interest in enumerate(interests, 1):
        main, location = split_name_and_location(interest.name)
        label = f"{interest.emoji} {main}" if interest.emoji else main
        if location:
            label = f"{label} ({location})"
        if interest.secondary_term:
            label = f"{label} - {interest.secondary_term}"
        print(f"  {i}. {label}")


class _CountingFetcher:
    """Wraps a fetcher and counts network calls."""

    def __init__(self, inner):
        self.inner = inner
        self.calls: list[str] = []

    async def fetch(self, query, selected=()):
        self.calls.append(query)
        return await self.inner.fetch(query, selected)

    async def aclose(self) -> None:
        await self.inner.aclose()


@app.command()
def serve(
    host: str = typer.Option(settings.host, "--host", "-H", help="Host to bind"),
    port: int = typer.Option(settings.port, "--port", "-p", help="Port to bind"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
) -> None:
    """
    Start the FastAPI server.

    Example:
        interest-suggest serve --host 0.0.0.0 --port 8080
    """
    import uvicorn

    logger.info(f"Starting server on {host}:{port}")
    uvicorn.run(
        "interest_suggest.api.app:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


@app.command()
def suggest(
    query: str = typer.Option(..., "--query", "-q", help="Query text"),
    preload: bool = typer.Option(False, "--preload", help="Warm the cache first"),
) -> None:
    """
    Resolve a single query.

    Example:
        interest-suggest suggest --query "tango"
    """
    from interest_suggest.sdk import SuggestionSession

    async def _run() -> int:
        async with SuggestionSession(settings=settings) as session:
            if preload:
                await session.preload()
            results = await session.suggest(query)
            view = session.view()

        if view["error"]:
            print(f"✗ {view['error']}")
            return 1
        if results:
            print(f"✓ {len(results)} suggestions for '{query}':\n")
            _print_interests(results)
        else:
            print(f"✗ No matches found for '{query}'")
        return 0

    try:
        sys.exit(asyncio.run(_run()))
    except Exception as e:
        logger.error(f"Error resolving query: {e}")
        sys.exit(1)


@app.command("type")
def type_text(
    text: str = typer.Option(..., "--text", "-t", help="Text to type one character at a time"),
    interval_ms: int = typer.Option(
        150,
        "--interval",
        "-i",
        help="Milliseconds between keystrokes",
    ),
) -> None:
    """
    Simulate typing through the debounce path and report network usage.

    Example:
        interest-suggest type --text "music" --interval 120
    """
    from interest_suggest.fetchers.http_fetcher import HttpInterestFetcher
    from interest_suggest.sdk import SuggestionSession

    async def _run() -> None:
        fetcher = _CountingFetcher(
            HttpInterestFetcher(
                base_url=settings.api_base_url,
                path=settings.autocomplete_path,
                api_key=settings.api_key,
                page_size=settings.page_size,
                timeout_seconds=settings.request_timeout,
                response_field=settings.response_field,
            )
        )
        async with SuggestionSession(fetcher=fetcher, settings=settings) as session:
            for i in range(1, len(text) + 1):
                session.on_query_changed(text[:i])
                await asyncio.sleep(interval_ms / 1000)
            await session.wait_idle()
            view = session.view()

        print(f"Typed {len(text)} keystrokes, {len(fetcher.calls)} network calls")
        for call in fetcher.calls:
            print(f"  → q={call!r}")
        if view["error"]:
            print(f"✗ {view['error']}")
        elif view["suggestions"]:
            print(f"\n✓ {len(view['suggestions'])} suggestions for '{text}':\n")
            _print_interests(view["suggestions"])
        else:
            print(f"✗ No matches found for '{text}'")

    try:
        asyncio.run(_run())
    except Exception as e:
        logger.error(f"Error simulating typing: {e}")
        sys.exit(1)


@app.command()
def info() -> None:
    """Display configuration information."""
    print(f"Endpoint: {settings.api_base_url}{settings.autocomplete_path}")
    print(f"API key set: {bool(settings.api_key)}")
    print(f"Page size: {settings.page_size}")
    print(
        "Debounce (ms): "
        f"short={settings.debounce_short_ms} "
        f"extend={settings.debounce_extend_ms} "
        f"default={settings.debounce_default_ms}"
    )
    print(f"Suppression lookahead: {settings.suppression_lookahead}")
    print(f"Preload letters: {' '.join(settings.preload_letters)}")


if __name__ == "__main__":
    app()
