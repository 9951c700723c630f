"""
FastAPI server exposing the movie search API.
Endpoints:
- GET /health: basic health check
- GET /movies?q=...: discover list (empty q) or search results; tracks successful searches
- GET /trending?limit=N: most searched terms (default TRENDING_LIMIT)

Startup builds the TMDB client and the search tracker from environment settings
unless they were injected through create_app().
"""

# Import standard libraries for timing
import time  # measure startup and request latencies
from typing import List, Optional  # precise typing for clarity

# Import FastAPI for building the web API and Pydantic for response models
from fastapi import FastAPI, Query, Request  # FastAPI primitives
from pydantic import BaseModel  # response schema definitions

# Import our internal modules
from movie_finder.config import DEFAULT_TRENDING_LIMIT, Settings, configure_logging, load_settings  # env settings + logging
from movie_finder.models import MovieSummary, SearchRecord  # domain records
from movie_finder.search_controller import SearchController  # search flow
from movie_finder.search_store import SearchStore  # MongoDB counters
from movie_finder.search_tracker import SearchTracker  # track + trending
from movie_finder.tmdb_client import TMDBClient  # metadata API

# Import loguru for simple, structured console logging
from loguru import logger  # convenient console logger


# Pydantic model that describes the shape of a single movie in responses
class MovieOut(BaseModel):
	id: int  # TMDB id
	title: str  # display title
	vote_average: Optional[float] = None  # raw rating
	rating_label: str  # "7.3" or "N/A"
	original_language: Optional[str] = None  # language code
	release_year: str  # "2008" or "N/A"
	poster_url: Optional[str] = None  # full poster URL if any

	@classmethod
	def from_movie(cls, m: MovieSummary) -> "MovieOut":
		return cls(
			id=m.id,
			title=m.title,
			vote_average=m.vote_average,
			rating_label=m.rating_label,
			original_language=m.original_language,
			release_year=m.release_year,
			poster_url=m.poster_url,
		)


# Pydantic model for the complete search response payload
class MoviesResponse(BaseModel):
	query: str  # query as received
	status: str  # "success" or "error"
	error_message: str  # static message when status is "error"
	elapsed_ms: float  # server-side time in ms
	results: List[MovieOut]  # movies to show


# Pydantic model for a single trending entry
class TrendingOut(BaseModel):
	id: str  # store id
	search_term: str  # term as typed
	count: int  # number of tracked searches
	movie_id: Optional[int] = None  # first result when created
	poster_url: Optional[str] = None  # poster of that result

	@classmethod
	def from_record(cls, r: SearchRecord) -> "TrendingOut":
		return cls(id=r.id, search_term=r.search_term, count=r.count, movie_id=r.movie_id, poster_url=r.poster_url)


class TrendingResponse(BaseModel):
	limit: int  # requested size
	results: List[TrendingOut]  # ordered by count descending


def create_app(
	settings: Optional[Settings] = None,
	client: Optional[TMDBClient] = None,
	tracker: Optional[SearchTracker] = None,
) -> FastAPI:
	"""Build the app; collaborators not injected here are created at startup from settings."""
	app = FastAPI(title="Movie Finder API", version="1.0.0")  # web app
	app.state.settings = settings  # may be None until startup
	app.state.client = client  # TMDB client
	app.state.tracker = tracker  # search tracker
	app.state.startup_seconds = 0.0  # measured at startup

	# FastAPI startup hook to initialize collaborators once
	@app.on_event("startup")
	async def startup_event():
		"""Create missing collaborators from environment settings."""
		if app.state.client is not None and app.state.tracker is not None:
			return  # everything injected
		start = time.time()  # start timer for startup latency
		if app.state.settings is None:
			app.state.settings = load_settings()  # raises ConfigError when incomplete
		cfg: Settings = app.state.settings
		configure_logging(cfg.log_level)
		logger.info("[API] Startup: creating TMDB client and search tracker...")
		if app.state.client is None:
			app.state.client = TMDBClient(cfg.tmdb_api_key, base_url=cfg.tmdb_base_url, timeout_s=cfg.tmdb_timeout_s)
		if app.state.tracker is None:
			app.state.tracker = SearchTracker(SearchStore.from_settings(cfg))
		app.state.startup_seconds = time.time() - start
		logger.info(f"[API] Startup complete in {app.state.startup_seconds:.2f}s")

	# Simple health endpoint for readiness checks
	@app.get("/health")
	def health(request: Request):
		"""Return minimal health info for liveness/readiness probes."""
		state = request.app.state
		tracker: Optional[SearchTracker] = state.tracker
		return {
			"status": "ok",  # constant indicator
			"tmdb_configured": state.client is not None,  # TMDB client built
			"store_ready": tracker is not None and tracker.store.ping(),  # MongoDB answers a ping
		}

	# Search endpoint; blocking I/O so it runs in FastAPI's threadpool
	@app.get("/movies", response_model=MoviesResponse)
	def movies(request: Request, q: str = Query("", description="Search text; empty returns popular movies")):
		"""Run one search through the controller and return its settled state."""
		state = request.app.state
		start = time.time()  # start timer
		debounce_ms = state.settings.search_debounce_ms if state.settings else 500
		controller = SearchController(state.client, state.tracker, debounce_ms=debounce_ms)  # one flow per request
		result = controller.search_now(q)  # Loading -> Success/Error
		elapsed_ms = (time.time() - start) * 1000  # compute ms
		logger.info(f"[API] /movies q='{q}' -> {result.status.value} ({len(result.results)} movies) in {elapsed_ms:.2f} ms")
		return MoviesResponse(
			query=q,
			status=result.status.value,
			error_message=result.error_message,
			elapsed_ms=round(elapsed_ms, 2),
			results=[MovieOut.from_movie(m) for m in result.results],
		)

	# Trending endpoint
	@app.get("/trending", response_model=TrendingResponse)
	def trending(request: Request, limit: Optional[int] = Query(None, ge=1, le=50)):
		"""Most searched terms, highest count first; the default size comes from settings."""
		if limit is None:
			limit = request.app.state.settings.trending_limit if request.app.state.settings else DEFAULT_TRENDING_LIMIT
		tracker: Optional[SearchTracker] = request.app.state.tracker
		records = tracker.get_trending(limit) if tracker is not None else []
		return TrendingResponse(limit=limit, results=[TrendingOut.from_record(r) for r in records])

	return app


# Module-level app for `uvicorn api:app`
app = create_app()
