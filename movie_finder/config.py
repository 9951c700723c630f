"""
Configuration and logging setup.
Reads settings from the environment (and an optional .env file) into one immutable object
that is created at startup and handed to every component that needs it.
"""

import os  # environment access
import sys  # stderr sink for loguru
from dataclasses import dataclass  # immutable settings container
from pathlib import Path  # .env lookup
from typing import List, Mapping, Optional  # type hints

from dotenv import load_dotenv  # .env support
from loguru import logger  # console logger

from .errors import ConfigError  # raised on missing required values


DEFAULT_TMDB_BASE_URL = "https://api.themoviedb.org/3"
DEFAULT_TRENDING_LIMIT = 5


@dataclass(frozen=True)
class Settings:
	"""All runtime configuration. Presence of required values is the only validation."""
	tmdb_api_key: str  # bearer token for TMDB
	mongodb_uri: str  # connection string for the document store
	mongodb_database: str  # database holding the counters
	mongodb_collection: str = "metrics"  # collection holding one document per search term
	tmdb_base_url: str = DEFAULT_TMDB_BASE_URL  # API root
	tmdb_timeout_s: float = 10.0  # per-request timeout
	search_debounce_ms: int = 500  # quiet period before a keystroke triggers a fetch
	trending_limit: int = DEFAULT_TRENDING_LIMIT  # number of trending terms to show
	log_level: str = "INFO"  # loguru level name


# Environment variable -> Settings field for required values
REQUIRED_VARS = {
	'TMDB_API_KEY': 'tmdb_api_key',
	'MONGODB_URI': 'mongodb_uri',
	'MONGODB_DATABASE': 'mongodb_database',
}


def load_settings(env: Optional[Mapping[str, str]] = None, env_file: Optional[str] = None) -> Settings:
	"""
	Build Settings from a mapping (defaults to os.environ).
	When reading os.environ, a .env file is loaded first without overriding real variables.
	Raises ConfigError listing every missing required variable.
	"""
	if env is None:
		load_dotenv(env_file or Path.cwd() / '.env', override=False)  # fill from .env if present
		env = os.environ  # live environment

	missing: List[str] = [name for name in REQUIRED_VARS if not (env.get(name) or '').strip()]
	if missing:
		raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

	values = {field_name: env[name].strip() for name, field_name in REQUIRED_VARS.items()}
	return Settings(
		**values,
		mongodb_collection=env.get('MONGODB_COLLECTION') or 'metrics',
		tmdb_base_url=(env.get('TMDB_BASE_URL') or DEFAULT_TMDB_BASE_URL).rstrip('/'),
		tmdb_timeout_s=float(env.get('TMDB_TIMEOUT_S') or 10.0),
		search_debounce_ms=int(env.get('SEARCH_DEBOUNCE_MS') or 500),
		trending_limit=int(env.get('TRENDING_LIMIT') or DEFAULT_TRENDING_LIMIT),
		log_level=(env.get('LOG_LEVEL') or 'INFO').upper(),
	)


def configure_logging(level: str = "INFO") -> None:
	"""Replace loguru's default sink with a stderr sink at the given level."""
	logger.remove()  # drop default handler
	logger.add(sys.stderr, level=level, format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}")
	logger.debug(f"[Config] Logging configured at level {level}")
