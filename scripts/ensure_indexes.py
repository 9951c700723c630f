"""
Prepare the MongoDB collection used for search counters.

This script:
1) Loads settings from the environment / .env
2) Pings the MongoDB server
3) Creates the unique `searchTerm` index and the `count` index

Usage:
    python -m scripts.ensure_indexes

Run it once per environment; the unique index is what stops two processes
from creating duplicate records for the same term.
"""

import sys  # exit codes

from loguru import logger  # console logging

from movie_finder.config import configure_logging, load_settings  # env settings
from movie_finder.errors import MovieFinderError  # config/store failures
from movie_finder.search_store import SearchStore  # MongoDB counters


def main() -> int:
	# Headline banner for visibility in console
	logger.info("=" * 60)
	logger.info("Ensure Search Counter Indexes")
	logger.info("=" * 60)

	try:
		# 1) Settings
		logger.info("[1/3] Loading settings...")
		settings = load_settings()
		configure_logging(settings.log_level)

		# 2) Connectivity
		logger.info(f"[2/3] Pinging {settings.mongodb_database}.{settings.mongodb_collection}...")
		store = SearchStore.from_settings(settings)
		if not store.ping():
			logger.error("[FAIL] MongoDB did not answer the ping")
			return 1

		# 3) Indexes
		logger.info("[3/3] Creating indexes...")
		store.ensure_indexes()
	except MovieFinderError as e:
		logger.error(f"[FAIL] {e}")
		return 1

	logger.info("[OK] Indexes ready.")
	logger.info("=" * 60)
	return 0


if __name__ == '__main__':
	sys.exit(main())  # invoke
