"""The Science Brief API - feed aggregation endpoints."""

import logging
import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from sciencebrief import __version__
from sciencebrief.core import now_iso
from sciencebrief.models import AggregationSummary, FeedDescriptor, FeedResult
from sciencebrief.registry import FeedRegistry, RegistryError, load_registry
from sciencebrief.S2_fetch import custom_descriptor, fetch
from sciencebrief.S3_aggregate import EmptyFeedListError, aggregate, resolve_descriptors
from sciencebrief.S4_score import score_articles, sort_articles

load_dotenv()

# ─────────────────────────────────────────────────────────────
# Logging
# ─────────────────────────────────────────────────────────────

def setup_api_logging():
    """Configure logging for API process."""
    log_dir = Path(os.environ.get("SCIENCEBRIEF_LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / "api.log"

    # File handler
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)
    root_logger.addHandler(file_handler)

    return log_file


_log_file = setup_api_logging()
logger = logging.getLogger(__name__)


app = FastAPI(
    title="The Science Brief API",
    description="Journal feed aggregation with pitch scoring",
    version=__version__,
)


class PreflightCORSMiddleware(CORSMiddleware):
    """CORS middleware answering accepted preflights with 204 and no body."""

    def preflight_response(self, request_headers):
        response = super().preflight_response(request_headers)
        if response.status_code != 200:
            return response
        headers = {
            k: v for k, v in response.headers.items()
            if k not in ("content-length", "content-type")
        }
        return Response(status_code=204, headers=headers)


# Permissive CORS (browser frontend on another origin)
app.add_middleware(
    PreflightCORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ─────────────────────────────────────────────────────────────
# Request models
# ─────────────────────────────────────────────────────────────

class FetchFeedRequest(BaseModel):
    """Single ad-hoc feed."""
    url: Optional[str] = None
    name: Optional[str] = None
    id: Optional[str] = None


class FetchFeedsRequest(BaseModel):
    """Explicit feed list."""
    feeds: Optional[list[FeedDescriptor]] = None


SortKey = Literal["date", "score"]


# ─────────────────────────────────────────────────────────────
# Dependencies
# ─────────────────────────────────────────────────────────────

def get_registry() -> FeedRegistry:
    """Default feed registry (loaded once, cached)."""
    return load_registry()


def get_fetcher():
    """Single-feed fetch function used by the aggregator."""
    return fetch


# ─────────────────────────────────────────────────────────────
# Error handling
# ─────────────────────────────────────────────────────────────

def _client_error(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ())]
        field = ".".join(loc[1:]) or ".".join(loc)
        parts.append(f"{field}: {err.get('msg')}")
    return _client_error("Invalid request: " + ("; ".join(parts) or "malformed input"))


@app.exception_handler(EmptyFeedListError)
async def empty_feed_list_handler(request: Request, exc: EmptyFeedListError):
    return _client_error(str(exc))


@app.exception_handler(RegistryError)
async def registry_error_handler(request: Request, exc: RegistryError):
    logger.error(f"Feed registry error: {exc}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Feed registry unavailable", "message": str(exc)},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Server error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error", "message": str(exc)},
    )


def _scored(summary: AggregationSummary, sort: str = "date") -> AggregationSummary:
    """Apply pitch scoring to every article, then order them."""
    articles = sort_articles(score_articles(summary.articles), by=sort)
    return summary.model_copy(update={"articles": articles})


# ─────────────────────────────────────────────────────────────
# Endpoints
# ─────────────────────────────────────────────────────────────

@app.get("/api/health")
def health_check():
    """Health check."""
    return {
        "status": "ok",
        "timestamp": now_iso(),
        "version": __version__,
    }


@app.get("/api/feeds")
def list_feeds(registry: FeedRegistry = Depends(get_registry)):
    """Default feeds, grouped by category."""
    return {"success": True, "feeds": registry.to_dict()}


@app.post("/api/fetch-feed", response_model=FeedResult)
def fetch_single_feed(
    body: Optional[FetchFeedRequest] = None,
    fetcher=Depends(get_fetcher),
):
    """Fetch one feed by URL."""
    if body is None or not body.url:
        return _client_error("Feed URL is required")

    result = fetcher(custom_descriptor(body.url, name=body.name, feed_id=body.id))
    if result.success:
        result = result.model_copy(update={"articles": score_articles(result.articles)})
    return result


@app.post("/api/fetch-feeds", response_model=AggregationSummary)
def fetch_feeds(
    body: Optional[FetchFeedsRequest] = None,
    sort: SortKey = Query("date", description="date or score"),
    fetcher=Depends(get_fetcher),
):
    """Fetch an explicit list of feeds at once."""
    if body is None or not body.feeds:
        return _client_error("Array of feed configurations is required")

    logger.info(f"Fetching {len(body.feeds)} feeds...")
    summary = aggregate(body.feeds, fetcher=fetcher)
    return _scored(summary, sort)


@app.get("/api/fetch-all", response_model=AggregationSummary)
def fetch_all(
    categories: Optional[str] = Query(None, description="Comma-separated categories, default all"),
    sort: SortKey = Query("date", description="date or score"),
    registry: FeedRegistry = Depends(get_registry),
    fetcher=Depends(get_fetcher),
):
    """Fetch the enabled default feeds, optionally limited to some categories."""
    descriptors = resolve_descriptors(registry, categories=categories)
    logger.info(f"Fetching {len(descriptors)} feeds from {categories or 'all'} categories...")

    summary = aggregate(descriptors, fetcher=fetcher)
    return _scored(summary, sort)


# ─────────────────────────────────────────────────────────────
# Startup
# ─────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", "3001")))
