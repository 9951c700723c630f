"""
Streamlit UI for Movie Finder.
Calls the local FastAPI server at http://localhost:8000 for searches and trending terms,
or runs the search controller in-process when the API is unreachable.

Run API (optional):   uvicorn api:app --reload
Run UI:                streamlit run streamlit_app.py
"""

# HTTP client to call the API when running in API mode
import requests  # make web requests to the FastAPI server
# Streamlit framework to build a simple interactive UI
import streamlit as st  # UI primitives
# Typing to make function signatures clearer
from typing import Dict, List, Optional, Tuple  # type hints

# Local imports for fallback/local mode (when API isn't used)
from movie_finder.config import Settings, load_settings  # env settings
from movie_finder.search_controller import FETCH_ERROR_MESSAGE, SearchController  # search flow
from movie_finder.search_store import SearchStore  # MongoDB counters
from movie_finder.search_tracker import SearchTracker  # track + trending
from movie_finder.tmdb_client import TMDBClient  # metadata API

# Default URL where the FastAPI server is expected to run locally
DEFAULT_API_URL = "http://localhost:8000"  # default API base URL
# Shown when a movie has no poster
NO_POSTER_URL = "https://placehold.co/500x750?text=No+Poster"  # placeholder image

# Configure Streamlit page (title and layout width)
st.set_page_config(page_title="Movie Finder", layout="wide")  # wide layout

# Main page header
st.title("🎬 Find Movies You'll Enjoy Without the Hassle")  # friendly header


# Cache local collaborators so they are built once per session
@st.cache_resource(show_spinner=True)
def init_local_services() -> Optional[Tuple[TMDBClient, SearchTracker, Settings]]:
	"""Create the TMDB client and tracker from environment settings."""
	try:
		settings = load_settings()  # read env / .env
		client = TMDBClient(settings.tmdb_api_key, base_url=settings.tmdb_base_url, timeout_s=settings.tmdb_timeout_s)
		tracker = SearchTracker(SearchStore.from_settings(settings))
		return client, tracker, settings  # success
	except Exception as e:
		# Show an error in the UI so users know local mode failed
		st.error(f"Failed to initialize local services: {e}")
		return None  # signal failure


def movie_dict(m) -> Dict:
	"""Convert a MovieSummary into the same dict shape the API returns."""
	return {
		"id": m.id,
		"title": m.title,
		"rating_label": m.rating_label,
		"original_language": m.original_language,
		"release_year": m.release_year,
		"poster_url": m.poster_url,
	}


def trending_dict(r) -> Dict:
	return {"search_term": r.search_term, "count": r.count, "poster_url": r.poster_url}


# Sidebar contains configuration controls
with st.sidebar:
	st.header("Settings")  # section label
	api_url = st.text_input("API URL", DEFAULT_API_URL)  # where the API lives
	use_local = st.toggle("Use local services", value=False, help="If enabled or API is unreachable, the app talks to TMDB and MongoDB directly.")

# If not forcing local, check quickly whether the API is reachable
api_available = False  # default assumption
if not use_local:
	try:
		h = requests.get(f"{api_url}/health", timeout=3)  # ping API health endpoint
		api_available = h.ok  # True if server responded 200 OK
	except requests.RequestException:
		api_available = False  # probe failed
		st.sidebar.info("API not reachable; will use local services.")  # inform user

# Initialize local services only when needed
local_services: Optional[Tuple[TMDBClient, SearchTracker, Settings]] = None  # placeholder
if use_local or not api_available:
	local_services = init_local_services()
	if local_services is not None:
		st.sidebar.success("Local services ready.")  # success note
	else:
		st.sidebar.error("Local services failed to initialize.")  # error note

# Search box; Streamlit submits on Enter so the term is already settled
search_term = st.text_input("Search", placeholder="Search through thousands of movies")

# ---- Trending ----------------------------------------------------------
trending: List[Dict] = []  # ranked terms
try:
	if local_services is not None:
		trending = [trending_dict(r) for r in local_services[1].get_trending(local_services[2].trending_limit)]
	elif api_available:
		resp = requests.get(f"{api_url}/trending", timeout=10)  # server applies its configured limit
		resp.raise_for_status()
		trending = resp.json().get("results", [])
except requests.RequestException as e:
	st.sidebar.warning(f"Trending unavailable: {e}")  # nothing to show is not fatal

if trending:
	st.subheader("Trending Movies")
	cols = st.columns(len(trending))
	for rank, (col, item) in enumerate(zip(cols, trending), start=1):
		with col:
			st.markdown(f"### {rank}")
			st.image(item.get("poster_url") or NO_POSTER_URL, width='stretch')

# ---- All movies --------------------------------------------------------
def load_movies(term: str) -> Tuple[str, str, List[Dict]]:
	"""Return (status, error_message, movies) for a term from local services or the API."""
	try:
		if local_services is not None:
			client, tracker, _ = local_services
			state = SearchController(client, tracker).search_now(term)  # Loading -> Success/Error
			return state.status.value, state.error_message, [movie_dict(m) for m in state.results]
		if api_available:
			resp = requests.get(f"{api_url}/movies", params={"q": term}, timeout=30)
			resp.raise_for_status()  # raise error if server responded with an error code
			payload = resp.json()
			return payload["status"], payload["error_message"], payload["results"]
	except requests.RequestException as e:
		st.sidebar.warning(f"API request failed: {e}")  # network/API errors
	return "error", FETCH_ERROR_MESSAGE, []


st.subheader("All Movies")
# Reuse the last result while the term is unchanged so each search is tracked once
last = st.session_state.get("last_search")
if last is not None and last[0] == search_term:
	status, error_message, movies = last[1]
else:
	with st.spinner("Loading movies..."):
		status, error_message, movies = load_movies(search_term)
	st.session_state["last_search"] = (search_term, (status, error_message, movies))

if status == "error":
	st.error(error_message)  # static message
else:
	# Render results in a four-column grid
	for row_start in range(0, len(movies), 4):
		row = st.columns(4)
		for col, movie in zip(row, movies[row_start:row_start + 4]):
			with col:
				st.image(movie.get("poster_url") or NO_POSTER_URL, width='stretch')  # poster
				st.markdown(f"**{movie['title']}**")  # title
				st.caption(f"⭐ {movie['rating_label']} • {movie.get('original_language') or 'N/A'} • {movie['release_year']}")

# Show a footer indicator of current mode
st.sidebar.markdown("---")  # separator
if local_services is not None:
	st.sidebar.caption("Mode: Local services (TMDB + MongoDB)")  # mode label
else:
	st.sidebar.caption("Mode: API client (ensure uvicorn api:app --reload is running)")  # mode label
