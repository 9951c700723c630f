"""
Search box controller.
Drives the Idle -> Loading -> Success/Error flow: debounces keystrokes, fetches movies,
and reports the first result of each successful search to the tracker.
"""

import asyncio  # event loop and worker threads
from typing import List, Optional  # type hints

from loguru import logger  # console logger

from .models import MovieSummary, SearchState, SearchStatus  # UI state
from .errors import MetadataAPIError  # every metadata failure kind
from .debounce import Debouncer  # keystroke collapsing
from .tmdb_client import TMDBClient  # movie fetches
from .search_tracker import SearchTracker  # popularity counters


# Static messages shown in the Error state
FETCH_ERROR_MESSAGE = "Error fetching movies. Please try again later."
NO_RESULTS_MESSAGE = "No movies found. Try another search."


class SearchController:
	"""
	Owns the SearchState rendered by a UI.
	Each search gets a generation number and only the newest one may settle the state,
	so a slow response for an old term cannot overwrite a newer result.
	"""

	def __init__(
		self,
		client: TMDBClient,  # metadata API
		tracker: Optional[SearchTracker] = None,  # None disables tracking
		debounce_ms: int = 500,  # quiet period before fetching
	):
		self.client = client
		self.tracker = tracker
		self.state = SearchState()  # starts Idle
		self._generation = 0  # bumped on every search
		self._debouncer = Debouncer(debounce_ms, self._on_settled_input)
		self._task: Optional[asyncio.Future] = None  # last debounced search

	# ------------------------------------------------------------------
	# Keystroke path (async UI)
	# ------------------------------------------------------------------
	def on_input(self, term: str) -> None:
		"""Update the raw term now; fetch only after the quiet period."""
		self.state.raw_term = term  # no network effect
		self._debouncer.push(term)

	def _on_settled_input(self, term: str) -> None:
		logger.debug(f"[Controller] Debounced term promoted: '{term}'")
		self._task = asyncio.ensure_future(self.search(term))

	async def wait_for_search(self) -> SearchState:
		"""Wait for the most recent debounced search to finish."""
		if self._task is not None:
			await self._task
		return self.state

	def cancel_pending(self) -> None:
		self._debouncer.cancel()

	# ------------------------------------------------------------------
	# Search execution
	# ------------------------------------------------------------------
	async def search(self, term: str) -> SearchState:
		"""Fetch in a worker thread and settle the state on the loop."""
		generation = self._begin(term)
		try:
			movies = await asyncio.to_thread(self.client.fetch_movies, term)
		except MetadataAPIError as e:
			self._fail(generation, term, e)
			return self.state
		top = self._settle(generation, term, movies)
		if top is not None:
			await asyncio.to_thread(self.tracker.track_search, term, top)
		return self.state

	def search_now(self, term: str) -> SearchState:
		"""Synchronous search for callers whose input is already settled (HTTP API, Streamlit)."""
		generation = self._begin(term)
		try:
			movies = self.client.fetch_movies(term)
		except MetadataAPIError as e:
			self._fail(generation, term, e)
			return self.state
		top = self._settle(generation, term, movies)
		if top is not None:
			self.tracker.track_search(term, top)
		return self.state

	def _begin(self, term: str) -> int:
		self._generation += 1
		self.state.active_term = term
		self.state.status = SearchStatus.LOADING
		self.state.error_message = ""  # entering Loading clears the previous error
		logger.info(f"[Controller] Searching '{term}' (generation {self._generation})")
		return self._generation

	def _is_stale(self, generation: int, term: str) -> bool:
		if generation != self._generation:
			logger.debug(f"[Controller] Dropping stale result for '{term}' (generation {generation})")
			return True
		return False

	def _fail(self, generation: int, term: str, error: MetadataAPIError) -> None:
		if self._is_stale(generation, term):
			return
		logger.error(f"[Controller] Error fetching movies for '{term}': {error}")
		self._to_error(FETCH_ERROR_MESSAGE)

	def _settle(self, generation: int, term: str, movies: List[MovieSummary]) -> Optional[MovieSummary]:
		"""Apply a finished fetch; return the movie to track, if any."""
		if self._is_stale(generation, term):
			return None
		if not movies:
			self._to_error(NO_RESULTS_MESSAGE)
			return None
		self.state.status = SearchStatus.SUCCESS
		self.state.results = list(movies)
		logger.info(f"[Controller] '{term}' -> {len(movies)} movies")
		# The discover list (empty term) is not a user search
		if self.tracker is not None and term.strip():
			return movies[0]
		return None

	def _to_error(self, message: str) -> None:
		self.state.status = SearchStatus.ERROR
		self.state.results = []
		self.state.error_message = message
