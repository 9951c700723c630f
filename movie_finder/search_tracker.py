"""
Search tracking and trending.
Counts how often each exact search term produced results and reads back the most popular terms.
"""

import threading  # per-term serialization
from contextlib import contextmanager  # scoped term locks
from typing import Dict, Iterator, List  # type hints

from loguru import logger  # console logger

from .models import MovieSummary, SearchRecord  # input and output types
from .errors import DuplicateTermError  # lost create race
from .search_store import SearchStore  # counter persistence
from .config import DEFAULT_TRENDING_LIMIT  # default trending size


class _TermLock:
	"""A lock plus the number of callers currently holding or waiting on it."""

	def __init__(self):
		self.lock = threading.Lock()
		self.users = 0


class SearchTracker:
	"""
	Best-effort counter updates on top of a SearchStore.
	Neither method ever raises; failures are logged and turned into "nothing happened".
	"""

	def __init__(self, store: SearchStore):
		self.store = store  # injected store
		self._locks: Dict[str, _TermLock] = {}  # terms currently being tracked
		self._locks_guard = threading.Lock()  # protects the lock table

	@contextmanager
	def _term_lock(self, term: str) -> Iterator[None]:
		"""Serialize work on one term; the table entry is dropped when its last user leaves."""
		with self._locks_guard:
			entry = self._locks.get(term)
			if entry is None:
				entry = self._locks[term] = _TermLock()
			entry.users += 1
		try:
			with entry.lock:
				yield
		finally:
			with self._locks_guard:
				entry.users -= 1
				if entry.users == 0:
					del self._locks[term]

	def track_search(self, term: str, top_result: MovieSummary) -> None:
		"""
		Record one successful search for `term`.
		Increments the existing record, or creates one with count 1 pointing at `top_result`.
		"""
		try:
			with self._term_lock(term):  # read-then-write must not interleave for the same term
				record = self.store.find_by_term(term)
				if record is not None:
					self.store.increment_count(record.id)
					logger.info(f"[Tracker] '{term}' count -> {record.count + 1}")
					return
				try:
					self.store.create_record(term, movie_id=top_result.id, poster_url=top_result.poster_url)
					logger.info(f"[Tracker] '{term}' tracked for the first time (movie {top_result.id})")
				except DuplicateTermError:
					# Another process created it between our read and write
					existing = self.store.find_by_term(term)
					if existing is None:
						raise
					self.store.increment_count(existing.id)
					logger.info(f"[Tracker] '{term}' created concurrently; incremented instead")
		except Exception as e:
			logger.error(f"[Tracker] Failed to track search '{term}': {e}")

	def get_trending(self, limit: int = DEFAULT_TRENDING_LIMIT) -> List[SearchRecord]:
		"""Top `limit` records by count, or an empty list when unavailable."""
		if limit < 1:
			return []
		try:
			records = self.store.top_by_count(limit)
		except Exception as e:
			logger.error(f"[Tracker] Failed to load trending searches: {e}")
			return []
		logger.debug(f"[Tracker] Loaded {len(records)} trending records")
		return records[:limit]
