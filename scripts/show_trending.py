"""
Print the most searched terms.

Usage:
    python -m scripts.show_trending [limit]
"""

import sys  # argv and exit codes

from loguru import logger  # console logging

from movie_finder.config import configure_logging, load_settings  # env settings
from movie_finder.errors import ConfigError  # missing settings
from movie_finder.search_store import SearchStore  # MongoDB counters
from movie_finder.search_tracker import SearchTracker  # trending reader


def main(argv=None) -> int:
	argv = sys.argv[1:] if argv is None else argv
	try:
		settings = load_settings()
	except ConfigError as e:
		logger.error(f"[FAIL] {e}")
		return 1
	configure_logging(settings.log_level)
	limit = int(argv[0]) if argv else settings.trending_limit  # CLI override

	tracker = SearchTracker(SearchStore.from_settings(settings))
	records = tracker.get_trending(limit)
	if not records:
		logger.info("No trending searches yet.")
		return 0

	logger.info(f"Top {len(records)} searches:")
	for rank, r in enumerate(records, start=1):
		logger.info(f"  {rank}. {r.search_term!r} x{r.count} (movie {r.movie_id})")
	return 0


if __name__ == '__main__':
	sys.exit(main())
