"""FastAPI application for interest suggestions."""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from interest_suggest.config import settings
from interest_suggest.interests import Interest
from interest_suggest.sdk import SuggestionSession
from interest_suggest.types import SuggestionView

logger = logging.getLogger(__name__)

# Global session instance
_session: SuggestionSession | None = None


def get_session() -> SuggestionSession:
    """Get or create the session instance."""
    global _session
    if _session is None:
        _session = SuggestionSession(settings=settings)
    return _session


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown."""
    # Startup
    logger.info("Starting interest suggestion API")
    session = get_session()
    preload_task = None
    if settings.preload_on_start:
        preload_task = asyncio.create_task(session.preload())
        logger.info("Preload scheduled")

    yield

    # Shutdown
    logger.info("Shutting down interest suggestion API")
    if preload_task is not None and not preload_task.done():
        preload_task.cancel()
        await asyncio.wait({preload_task})
    global _session
    if _session:
        await _session.aclose()
        _session = None


# Initialize FastAPI app with lifespan
app = FastAPI(
    title="Interest Suggest API",
    description="Incremental autocomplete cache for interest search",
    version="0.1.0",
    lifespan=lifespan,
)


# Pydantic models
class SuggestionViewModel(BaseModel):
    """Response model for the suggestion list."""

    query: str = Field(..., description="Query the suggestions belong to")
    suggestions: list[Interest] = Field(..., description="Ordered suggestions")
    loading: bool = Field(..., description="A remote fetch is in flight")
    error: str | None = Field(default=None, description="User-facing error message")
    placeholder: str = Field(..., description="Search input placeholder")
    selected: list[Interest] = Field(..., description="Selected interests")


class CustomInterestRequest(BaseModel):
    """Request model for creating a custom interest."""

    text: str = Field(..., description="Free text, optionally 'Primary: Secondary'")


class SelectionResponse(BaseModel):
    """Response model for selection endpoints."""

    selected: list[Interest] = Field(..., description="Selected interests")
    count: int = Field(..., description="Number of selected interests")


class CorpusResponse(BaseModel):
    """Response model for corpus search."""

    interests: list[Interest] = Field(..., description="Matching interests")
    count: int = Field(..., description="Number of matches")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Status")
    cached_queries: int = Field(..., description="Number of cached queries")
    corpus_size: int = Field(..., description="Number of distinct fetched interests")


def _view_model(view: SuggestionView) -> SuggestionViewModel:
    return SuggestionViewModel(**view)


def _selection_response(session: SuggestionSession) -> SelectionResponse:
    selected = session.selected
    return SelectionResponse(selected=selected, count=len(selected))


# API endpoints
@app.get("/suggestions", response_model=SuggestionViewModel, tags=["Suggestions"])
async def suggest(q: str = Query("", description="Raw query text")) -> SuggestionViewModel:
    """
    Resolve a query immediately.

    Served from the cache when possible, otherwise fetched remotely.
    Fetch failures are reported in the error field, not as HTTP errors.
    """
    try:
        session = get_session()
        await session.suggest(q)
        return _view_model(session.view())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error resolving suggestions: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/suggestions/state", response_model=SuggestionViewModel, tags=["Suggestions"])
async def suggestion_state() -> SuggestionViewModel:
    """Current suggestion view without resolving anything."""
    return _view_model(get_session().view())


@app.get("/selection", response_model=SelectionResponse, tags=["Selection"])
async def list_selection() -> SelectionResponse:
    """List selected interests."""
    return _selection_response(get_session())


@app.post("/selection", response_model=SelectionResponse, tags=["Selection"])
async def select_interest(interest: Interest) -> SelectionResponse:
    """Select an interest."""
    session = get_session()
    session.select(interest)
    return _selection_response(session)


@app.post("/selection/remove", response_model=SelectionResponse, tags=["Selection"])
async def deselect_interest(interest: Interest) -> SelectionResponse:
    """Remove an interest from the selection."""
    session = get_session()
    session.deselect(interest)
    return _selection_response(session)


@app.post("/selection/custom", response_model=SelectionResponse, tags=["Selection"])
async def create_custom_interest(request: CustomInterestRequest) -> SelectionResponse:
    """
    Create a custom interest and select it.

    "Music: Rock" becomes name "Music" with secondary term "Rock".
    """
    try:
        session = get_session()
        session.create_custom_interest(request.text)
        return _selection_response(session)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/corpus", response_model=CorpusResponse, tags=["Suggestions"])
async def search_corpus(q: str = Query("", description="Raw query text")) -> CorpusResponse:
    """Search every interest fetched during this session."""
    interests = get_session().search_corpus(q)
    return CorpusResponse(interests=interests, count=len(interests))


@app.get("/healthz", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    controller = get_session().controller
    return HealthResponse(
        status="ok",
        cached_queries=len(controller.cache),
        corpus_size=len(controller.corpus),
    )


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "name": "Interest Suggest API",
        "version": "0.1.0",
        "status": "ok",
    }
