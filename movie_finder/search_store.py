"""
Document store for search counters.
Wraps a MongoDB collection holding one document per distinct search term.
"""

# Typing helpers for clarity of public API
from typing import Any, List, Optional  # type hints

# MongoDB driver and its error types
from pymongo import DESCENDING, MongoClient  # client and sort order
from pymongo.collection import Collection  # collection handle type
from pymongo.errors import DuplicateKeyError, PyMongoError  # driver failures
from bson import ObjectId  # store-assigned ids

# Console logging
from loguru import logger  # console logger

from .models import SearchRecord  # typed record
from .errors import DuplicateTermError, StoreError  # store failure kinds
from .config import Settings  # connection settings


class SearchStore:
	"""
	CRUD over the search counter collection.
	Every driver failure is re-raised as StoreError so callers handle one error type.
	"""

	def __init__(self, collection: Collection):
		self.collection = collection  # injected collection (real or test double)

	@classmethod
	def from_settings(cls, settings: Settings, client: Optional[MongoClient] = None) -> "SearchStore":
		"""Open the configured collection. MongoClient connects lazily on first use."""
		client = client or MongoClient(settings.mongodb_uri, serverSelectionTimeoutMS=5000)
		logger.info(f"[Store] Using collection {settings.mongodb_database}.{settings.mongodb_collection}")
		return cls(client[settings.mongodb_database][settings.mongodb_collection])

	def ensure_indexes(self) -> None:
		"""Create the unique term index and the count index used for trending."""
		try:
			self.collection.create_index('searchTerm', unique=True, name='searchTerm_unique')
			self.collection.create_index([('count', DESCENDING)], name='count_desc')
		except PyMongoError as e:
			raise StoreError(f"Failed to create indexes: {e}") from e
		logger.info("[Store] Indexes ensured (searchTerm unique, count desc)")

	def ping(self) -> bool:
		"""True when the server answers a ping."""
		try:
			self.collection.database.client.admin.command('ping')
			return True
		except PyMongoError as e:
			logger.warning(f"[Store] Ping failed: {e}")
			return False

	def find_by_term(self, term: str) -> Optional[SearchRecord]:
		"""Exact, case-sensitive lookup of the record for a search term."""
		try:
			doc = self.collection.find_one({'searchTerm': term})
		except PyMongoError as e:
			raise StoreError(f"Lookup of term {term!r} failed: {e}") from e
		return SearchRecord.from_document(doc) if doc else None

	def create_record(self, term: str, movie_id: int, poster_url: Optional[str]) -> SearchRecord:
		"""Insert a new record with count 1."""
		doc = {
			'searchTerm': term,
			'count': 1,
			'movie_id': movie_id,
			'poster_url': poster_url,
		}
		try:
			result = self.collection.insert_one(doc)
		except DuplicateKeyError as e:
			raise DuplicateTermError(f"Record for term {term!r} already exists") from e
		except PyMongoError as e:
			raise StoreError(f"Create for term {term!r} failed: {e}") from e
		logger.debug(f"[Store] Created record {result.inserted_id} for term {term!r}")
		return SearchRecord(
			id=str(result.inserted_id),
			search_term=term,
			count=1,
			movie_id=movie_id,
			poster_url=poster_url,
		)

	def increment_count(self, record_id: str) -> None:
		"""Atomically add one to a record's count."""
		try:
			result = self.collection.update_one({'_id': self._to_object_id(record_id)}, {'$inc': {'count': 1}})
		except PyMongoError as e:
			raise StoreError(f"Increment of record {record_id} failed: {e}") from e
		if result.matched_count == 0:
			raise StoreError(f"Record {record_id} not found for increment")

	def top_by_count(self, limit: int) -> List[SearchRecord]:
		"""Records ordered by count descending; ties keep the server's native order."""
		try:
			docs = list(self.collection.find({}).sort('count', DESCENDING).limit(limit))
		except PyMongoError as e:
			raise StoreError(f"Trending query failed: {e}") from e
		records: List[SearchRecord] = []  # valid records only
		for doc in docs:
			try:
				records.append(SearchRecord.from_document(doc))
			except StoreError as e:
				logger.warning(f"[Store] Skipping malformed record: {e}")  # keep the rest
		return records

	@staticmethod
	def _to_object_id(record_id: str) -> Any:
		return ObjectId(record_id) if ObjectId.is_valid(record_id) else record_id
