"""
Data models for Movie Finder.
Defines the records exchanged between the metadata client, the tracker, and the UI flow.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass, field  # auto-generates __init__, __repr__, etc.
# Enum gives the UI flow a closed set of states
from enum import Enum  # search status values
# Import typing helpers for precise and self-documenting types
from typing import Any, Dict, List, Optional  # lists, optional values, raw payloads

# Import the boundary error raised when a payload does not match the expected shape
from .errors import MalformedResponseError, StoreError  # distinct error kinds for bad shapes


# Base URL for TMDB poster images (w500 rendition)
TMDB_IMAGE_BASE_URL = "https://image.tmdb.org/t/p/w500"


def build_poster_url(poster_path: Optional[str]) -> Optional[str]:
	"""Turn a TMDB poster path into a full image URL, or None when there is no poster."""
	if not poster_path or not str(poster_path).strip():  # null, empty, or blank
		return None  # never build a half URL
	return f"{TMDB_IMAGE_BASE_URL}/{str(poster_path).strip().lstrip('/')}"  # single slash join


@dataclass
class MovieSummary:
	"""
	One movie as returned in the `results` array of the TMDB discover/search endpoints.
	Only the fields the UI and tracker need are kept.
	"""
	id: int  # TMDB movie id
	title: str  # display title
	vote_average: Optional[float] = None  # 0..10 rating
	original_language: Optional[str] = None  # ISO 639-1 code such as "en"
	release_date: Optional[str] = None  # "YYYY-MM-DD" or empty
	poster_path: Optional[str] = None  # relative poster path such as "/abc.jpg"

	@classmethod
	def from_payload(cls, data: Any) -> "MovieSummary":
		"""
		Validate one raw result entry and build a MovieSummary.
		Raises MalformedResponseError when required fields are missing or mistyped.
		"""
		if not isinstance(data, dict):
			raise MalformedResponseError(f"Result entry is not an object: {type(data).__name__}")
		movie_id = data.get('id')  # required integer id
		title = data.get('title')  # required title
		if isinstance(movie_id, bool) or not isinstance(movie_id, int):
			raise MalformedResponseError(f"Result entry has invalid id: {movie_id!r}")
		if not isinstance(title, str):
			raise MalformedResponseError(f"Result entry {movie_id} has invalid title: {title!r}")

		vote = data.get('vote_average')  # may be int, float, or absent
		if vote is not None and (isinstance(vote, bool) or not isinstance(vote, (int, float))):
			raise MalformedResponseError(f"Result entry {movie_id} has invalid vote_average: {vote!r}")

		return cls(
			id=movie_id,
			title=title,
			vote_average=float(vote) if vote is not None else None,
			original_language=data.get('original_language') or None,
			release_date=data.get('release_date') or None,
			poster_path=data.get('poster_path') or None,
		)

	@property
	def poster_url(self) -> Optional[str]:
		return build_poster_url(self.poster_path)

	@property
	def rating_label(self) -> str:
		"""Rating with one decimal place, or "N/A" when TMDB has no votes."""
		return f"{self.vote_average:.1f}" if self.vote_average else "N/A"

	@property
	def release_year(self) -> str:
		return self.release_date.split('-')[0] if self.release_date else "N/A"


@dataclass
class SearchRecord:
	"""
	Counter record kept in the document store, one per distinct search term.
	The term is stored exactly as typed (no case or whitespace normalization).
	"""
	id: str  # store-assigned identifier, immutable
	search_term: str  # the query as the user typed it
	count: int  # number of tracked searches for this exact term
	movie_id: Optional[int] = None  # id of the first result when the record was created
	poster_url: Optional[str] = None  # poster of that first result, if any

	@classmethod
	def from_document(cls, doc: Dict[str, Any]) -> "SearchRecord":
		"""Build a SearchRecord from a raw store document. Raises StoreError on a bad shape."""
		if not isinstance(doc.get('searchTerm'), str):
			raise StoreError(f"Store document {doc.get('_id')!r} has no searchTerm")
		count = doc.get('count')
		if isinstance(count, bool) or not isinstance(count, int):
			raise StoreError(f"Store document {doc.get('_id')!r} has invalid count: {count!r}")
		return cls(
			id=str(doc['_id']),  # ObjectId -> str
			search_term=doc['searchTerm'],
			count=count,
			movie_id=doc.get('movie_id'),
			poster_url=doc.get('poster_url'),
		)


class SearchStatus(str, Enum):
	"""States of the search box flow."""
	IDLE = "idle"  # nothing requested yet
	LOADING = "loading"  # a fetch is in flight
	SUCCESS = "success"  # results on screen
	ERROR = "error"  # static error message on screen


@dataclass
class SearchState:
	"""Snapshot of everything the UI renders for the search section."""
	status: SearchStatus = SearchStatus.IDLE  # current state
	raw_term: str = ""  # what is in the input box right now
	active_term: Optional[str] = None  # debounced term that triggered the last fetch
	results: List[MovieSummary] = field(default_factory=list)  # movies to show
	error_message: str = ""  # static message shown in ERROR

	@property
	def is_loading(self) -> bool:
		return self.status is SearchStatus.LOADING
