"""
Error types for Movie Finder.
Each failure kind the app can observe gets its own exception so call sites can log it precisely.
"""

from typing import Optional


class MovieFinderError(Exception):
	"""Base class for all errors raised by this package."""


class ConfigError(MovieFinderError):
	"""Required configuration values are missing."""


class MetadataAPIError(MovieFinderError):
	"""Any failure while talking to the movie metadata API."""


class MetadataTransportError(MetadataAPIError):
	"""The request never produced an HTTP response (DNS, connect, timeout)."""


class MetadataHTTPError(MetadataAPIError):
	"""The API answered with a non-2xx status code."""

	def __init__(self, status_code: int, message: Optional[str] = None):
		self.status_code = status_code  # HTTP status for logging and tests
		super().__init__(message or f"Metadata API returned HTTP {status_code}")


class MalformedResponseError(MetadataAPIError):
	"""A response or stored document does not have the expected shape."""


class StoreError(MovieFinderError):
	"""A document store operation failed."""


class DuplicateTermError(StoreError):
	"""A record for this search term already exists (unique index violation)."""
