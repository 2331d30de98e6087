"""
Venue Search - FastAPI application

HTTP surface over the in-process search engine:
- Keyword-weighted venue search with district/feature filters
- Baseline-score recommendations
- Keyword autocomplete
- Depth-weighted content tree scoring
- Keyword listing and tier statistics

The engine is built once at startup from JSON data files (see
engine_factory for configuration).
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import List, Optional

# Load environment variables from .env.local (local dev) or .env (production)
from dotenv import load_dotenv

env_local = Path(__file__).parent.parent / ".env.local"
env_file = Path(__file__).parent.parent / ".env"

if env_local.exists():
    load_dotenv(env_local, override=True)
elif env_file.exists():
    load_dotenv(env_file, override=True)

from src.logging_config import setup_logging

log_level = os.getenv("LOG_LEVEL", "INFO").upper()
console_level = getattr(logging, log_level, logging.INFO)
setup_logging(
    log_file=os.getenv("LOG_FILE", "logs/venue-search.log"),
    console_level=console_level,
    file_level=logging.DEBUG
)

logger = logging.getLogger(__name__)


from fastapi import Depends, FastAPI, HTTPException, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .engine_factory import SearchEngineFactory
from .ranking import SearchResult
from .search_engine import SearchEngine

PORT = int(os.getenv("PORT", "8080"))

APP_VERSION = "0.1.0"
APP_START_TIME = datetime.utcnow().isoformat() + "Z"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the search engine on startup"""
    logger.info("Loading search engine...")
    SearchEngineFactory.create()
    logger.info("Search engine ready")

    yield

    logger.info("Shutting down...")
    SearchEngineFactory.cleanup()


app = FastAPI(
    title="Venue Search API",
    description="Keyword-weighted cafe search with dynamic boosting and baseline recommendations",
    version=APP_VERSION,
    lifespan=lifespan,
)


def get_engine() -> SearchEngine:
    return SearchEngineFactory.create()


# Pydantic models
class HealthResponse(BaseModel):
    status: str
    version: str
    started_at: str
    uptime_seconds: float


class VenueResult(BaseModel):
    id: str
    name: str
    url: str
    district: str
    address: str
    features: List[str]
    hashtags: str
    score: float = Field(..., description="Normalized score (0-100) or baseline score")


class SearchResponse(BaseModel):
    query: str
    results: List[VenueResult]
    total: int


class SuggestionResponse(BaseModel):
    query: str
    suggestions: List[str]


class TreeScoreResponse(BaseModel):
    venue_id: str
    max_depth: int
    score: float
    nodes: int


class KeywordItem(BaseModel):
    name: str
    weight: float
    original_weight: float
    tier: str
    category: str


class KeywordStatsResponse(BaseModel):
    total_keywords: int
    core_count: int
    secondary_count: int
    reference_count: int
    average_weight: float


class StatsResponse(BaseModel):
    total_venues: int
    total_keywords: int
    content_trees_built: int
    average_baseline_score: float
    dynamic_weight_adjustment: bool


def _to_item(result: SearchResult) -> VenueResult:
    venue = result.venue
    return VenueResult(
        id=venue.id,
        name=venue.name,
        url=venue.url,
        district=venue.district,
        address=venue.address,
        features=sorted(venue.features),
        hashtags=venue.hashtags,
        score=round(result.score, 4),
    )


# Routes
@app.get("/", response_model=dict)
async def root():
    """Root endpoint"""
    return {
        "service": "Venue Search API",
        "version": APP_VERSION,
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health", response_model=HealthResponse)
async def health():
    start_time = datetime.fromisoformat(APP_START_TIME.rstrip('Z'))
    uptime = (datetime.utcnow() - start_time).total_seconds()

    return HealthResponse(
        status="healthy",
        version=APP_VERSION,
        started_at=APP_START_TIME,
        uptime_seconds=round(uptime, 2),
    )


@app.get("/v1/search", response_model=SearchResponse)
def search(
    q: str = Query("", description="Free-text query"),
    district: Optional[List[str]] = Query(None, description="Allowed districts (repeatable)"),
    feature: Optional[List[str]] = Query(None, description="Required features (repeatable)"),
    engine: SearchEngine = Depends(get_engine),
):
    """
    Search venues.

    Irrelevant or blank queries return an empty list, not an error.
    """
    results = engine.search(q, district, feature)
    logger.info(f"Search {q!r} (districts={district}, features={feature}): {len(results)} results")
    return SearchResponse(
        query=q,
        results=[_to_item(r) for r in results],
        total=len(results),
    )


@app.get("/v1/recommendations", response_model=List[VenueResult])
def recommendations(
    limit: int = Query(10, ge=1, le=50),
    engine: SearchEngine = Depends(get_engine),
):
    return [_to_item(r) for r in engine.get_recommendations(limit)]


@app.get("/v1/suggestions", response_model=SuggestionResponse)
def suggestions(
    q: str = Query("", description="Partial query"),
    engine: SearchEngine = Depends(get_engine),
):
    return SuggestionResponse(query=q, suggestions=engine.get_search_suggestions(q))


@app.post("/v1/venues/{venue_id}/tree", response_model=TreeScoreResponse)
def build_tree(
    venue_id: str,
    max_depth: int = Query(3, ge=0, le=10),
    engine: SearchEngine = Depends(get_engine),
):
    """Build (or rebuild) a venue's content tree and return its score"""
    venue = engine.get_venue_by_id(venue_id)
    if venue is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Venue {venue_id} not found",
        )

    score = engine.build_content_tree(venue, max_depth)
    tree = engine.content_trees.get(venue_id)
    return TreeScoreResponse(
        venue_id=venue_id,
        max_depth=max_depth,
        score=score,
        nodes=len(tree),
    )


@app.get("/v1/keywords", response_model=List[KeywordItem])
def keywords(engine: SearchEngine = Depends(get_engine)):
    """All registered keywords in registry order"""
    return [KeywordItem(**k.to_dict()) for k in engine.get_keywords()]


@app.get("/v1/keywords/stats", response_model=KeywordStatsResponse)
def keyword_stats(engine: SearchEngine = Depends(get_engine)):
    return KeywordStatsResponse(**engine.get_keyword_statistics())


@app.get("/v1/stats", response_model=StatsResponse)
def stats(engine: SearchEngine = Depends(get_engine)):
    return StatsResponse(**engine.get_statistics())


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    logger.error(f"Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": str(exc),
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=PORT,
        reload=True,  # Development only
    )
