"""
TMDB metadata API client.
Fetches the popularity-sorted discover list or search results and validates the response shape.
"""

# HTTP client for the TMDB REST API
import requests  # web requests
# Typing helpers for public method contracts
from typing import Any, Dict, List, Optional  # type hints

# Console logging
from loguru import logger  # console logger

# Project types and error taxonomy
from .models import MovieSummary  # validated result entry
from .errors import MalformedResponseError, MetadataHTTPError, MetadataTransportError  # failure kinds
from .config import DEFAULT_TMDB_BASE_URL  # default API root


class TMDBClient:
	"""
	Thin wrapper around the TMDB v3 discover and search endpoints.
	Authenticates with a bearer token and returns validated MovieSummary lists.
	"""

	def __init__(
		self,
		api_key: str,  # TMDB read access token
		base_url: str = DEFAULT_TMDB_BASE_URL,  # API root
		timeout_s: float = 10.0,  # per-request timeout
		session: Optional[requests.Session] = None,  # injectable HTTP session
	):
		self.base_url = base_url.rstrip('/')  # avoid double slashes when joining paths
		self.timeout_s = timeout_s  # stored for every request
		self.session = session or requests.Session()  # reuse connections
		# Headers sent on every call
		self.session.headers.update({
			'accept': 'application/json',
			'Authorization': f"Bearer {api_key}",
		})

	def fetch_movies(self, query: str = "") -> List[MovieSummary]:
		"""Discover list for an empty query, search results otherwise."""
		if not query or not query.strip():  # nothing typed yet
			return self.discover_movies()  # popularity-sorted list
		return self.search_movies(query)  # query passed exactly as typed

	def discover_movies(self) -> List[MovieSummary]:
		"""Return the popularity-sorted discover list."""
		return self._get_results('/discover/movie', {'sort_by': 'popularity.desc'})

	def search_movies(self, query: str) -> List[MovieSummary]:
		"""Return movies matching the free-text query."""
		return self._get_results('/search/movie', {'query': query})

	def _get_results(self, path: str, params: Dict[str, Any]) -> List[MovieSummary]:
		"""GET an endpoint and parse its `results` array."""
		url = f"{self.base_url}{path}"  # full endpoint
		logger.debug(f"[TMDB] GET {path} params={params}")  # trace
		try:
			response = self.session.get(url, params=params, timeout=self.timeout_s)  # perform request
		except requests.RequestException as e:  # DNS, connect, timeout, ...
			logger.warning(f"[TMDB] Transport failure on {path}: {e}")
			raise MetadataTransportError(f"Request to {path} failed: {e}") from e

		if not response.ok:  # non-2xx
			logger.warning(f"[TMDB] {path} answered HTTP {response.status_code}")
			raise MetadataHTTPError(response.status_code)

		try:
			payload = response.json()  # decode body
		except ValueError as e:  # not JSON
			raise MalformedResponseError(f"Response from {path} is not JSON") from e

		movies = self._parse_results(payload)  # validate shape
		logger.info(f"[TMDB] {path} returned {len(movies)} movies")  # summary
		return movies

	@staticmethod
	def _parse_results(payload: Any) -> List[MovieSummary]:
		"""Validate the top-level body and each entry of `results`."""
		if not isinstance(payload, dict) or not isinstance(payload.get('results'), list):
			raise MalformedResponseError("Response body has no `results` list")
		return [MovieSummary.from_payload(item) for item in payload['results']]
