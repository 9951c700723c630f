"""
In-memory test doubles for the TMDB HTTP session and the MongoDB collection.
Only the calls the package actually makes are implemented.
"""

import threading
import time
from types import SimpleNamespace

import requests
from bson import ObjectId
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError


NOT_JSON = object()  # marker payload: response body is not JSON


class FakeResponse:
	def __init__(self, status_code=200, payload=None):
		self.status_code = status_code
		self._payload = payload

	@property
	def ok(self):
		return 200 <= self.status_code < 300

	def json(self):
		if self._payload is NOT_JSON:
			raise ValueError("Expecting value: line 1 column 1 (char 0)")
		return self._payload


class FakeSession:
	"""Stands in for requests.Session; returns queued responses and records every call."""

	def __init__(self, response=None, error=None):
		self.headers = {}
		self.calls = []  # (url, params, timeout)
		self.response = response or FakeResponse(200, {"results": []})
		self.error = error  # exception to raise instead of answering

	def get(self, url, params=None, timeout=None):
		self.calls.append((url, dict(params or {}), timeout))
		if self.error is not None:
			raise self.error
		return self.response


def movie_payload(movie_id, title, poster_path="/poster.jpg", **extra):
	data = {
		"id": movie_id,
		"title": title,
		"vote_average": 7.5,
		"original_language": "en",
		"release_date": "2008-07-16",
		"poster_path": poster_path,
	}
	data.update(extra)
	return data


def _matches(doc, flt):
	return all(doc.get(k) == v for k, v in (flt or {}).items())


class FakeCursor:
	def __init__(self, docs):
		self.docs = list(docs)

	def sort(self, key, direction):
		# list.sort is stable, so ties keep insertion order like a natural scan
		self.docs.sort(key=lambda d: d.get(key, 0), reverse=direction == DESCENDING)
		return self

	def limit(self, n):
		if n:
			self.docs = self.docs[:n]
		return self

	def __iter__(self):
		return iter(self.docs)


class FakeAdmin:
	def __init__(self, collection):
		self.collection = collection

	def command(self, name):
		self.collection._maybe_fail(name)
		return {"ok": 1.0}


class FakeCollection:
	"""Minimal pymongo Collection: find_one, find, insert_one, update_one, create_index."""

	def __init__(self):
		self.docs = []
		self.unique_fields = set()
		self.indexes = []
		self.fail_on = set()  # operation names that raise PyMongoError
		self._mutex = threading.Lock()
		self.database = SimpleNamespace(client=SimpleNamespace(admin=FakeAdmin(self)))  # reached by SearchStore.ping

	def _maybe_fail(self, op):
		if op in self.fail_on:
			raise PyMongoError(f"{op} failed")

	def create_index(self, keys, unique=False, name=None):
		self._maybe_fail('create_index')
		self.indexes.append((keys, unique, name))
		if unique and isinstance(keys, str):
			self.unique_fields.add(keys)
		return name

	def find_one(self, flt):
		self._maybe_fail('find_one')
		with self._mutex:
			for doc in self.docs:
				if _matches(doc, flt):
					return dict(doc)
		return None

	def find(self, flt=None):
		self._maybe_fail('find')
		with self._mutex:
			return FakeCursor(dict(d) for d in self.docs if _matches(d, flt))

	def insert_one(self, doc):
		self._maybe_fail('insert_one')
		with self._mutex:
			for field in self.unique_fields:
				if any(d.get(field) == doc.get(field) for d in self.docs):
					raise DuplicateKeyError(f"E11000 duplicate key error: {field}")
			stored = dict(doc)
			stored['_id'] = ObjectId()
			self.docs.append(stored)
		return SimpleNamespace(inserted_id=stored['_id'])

	def update_one(self, flt, update):
		self._maybe_fail('update_one')
		with self._mutex:
			for doc in self.docs:
				if _matches(doc, flt):
					for key, amount in update.get('$inc', {}).items():
						doc[key] = doc.get(key, 0) + amount
					return SimpleNamespace(matched_count=1, modified_count=1)
		return SimpleNamespace(matched_count=0, modified_count=0)

	def add(self, term, count, movie_id=1, poster_url=None):
		"""Seed a record directly."""
		doc = {'_id': ObjectId(), 'searchTerm': term, 'count': count, 'movie_id': movie_id, 'poster_url': poster_url}
		self.docs.append(doc)
		return doc


class FakeMovieClient:
	"""Stands in for TMDBClient.fetch_movies with canned answers per term."""

	def __init__(self, results=None, errors=None, delays=None):
		self.results = results or {}  # term -> list of MovieSummary
		self.errors = errors or {}  # term -> exception to raise
		self.delays = delays or {}  # term -> seconds to sleep first
		self.calls = []

	def fetch_movies(self, query=""):
		self.calls.append(query)
		if query in self.delays:
			time.sleep(self.delays[query])
		if query in self.errors:
			raise self.errors[query]
		return list(self.results.get(query, []))


class SpyTracker:
	def __init__(self):
		self.calls = []

	def track_search(self, term, top_result):
		self.calls.append((term, top_result.id))

	def get_trending(self, limit=5):
		return []


def transport_error():
	return requests.ConnectionError("connection refused")
