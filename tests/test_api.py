"""
API tests for the FastAPI app with injected collaborators.
Run: python tests/test_api.py
"""

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from fastapi.testclient import TestClient

from api import create_app
from movie_finder.config import load_settings
from movie_finder.errors import MetadataHTTPError
from movie_finder.models import MovieSummary
from movie_finder.search_store import SearchStore
from movie_finder.search_tracker import SearchTracker

from doubles import FakeCollection, FakeMovieClient


def assert_equal(actual, expected, msg):
	if actual != expected:
		raise AssertionError(f"{msg} | expected={expected}, actual={actual}")


def assert_true(cond, msg):
	if not cond:
		raise AssertionError(msg)


def build(settings=None):
	collection = FakeCollection()
	client = FakeMovieClient(
		results={
			"": [MovieSummary(id=1, title="Popular", vote_average=8.123, release_date="2024-03-01", poster_path="/p.jpg")],
			"batman": [MovieSummary(id=268, title="Batman", poster_path=None, original_language="en")],
		},
		errors={"down": MetadataHTTPError(500)},
	)
	app = create_app(settings=settings, client=client, tracker=SearchTracker(SearchStore(collection)))
	return TestClient(app), collection


def test_health():
	http, _ = build()
	body = http.get("/health").json()
	assert_equal(body, {"status": "ok", "tmdb_configured": True, "store_ready": True}, "health payload")


def test_health_reports_unreachable_store():
	http, collection = build()
	collection.fail_on.add("ping")
	body = http.get("/health").json()
	assert_equal(body["status"], "ok", "service itself is up")
	assert_equal(body["store_ready"], False, "failed ping reported")


def test_health_without_collaborators():
	http = TestClient(create_app())  # startup not run without a context manager
	body = http.get("/health").json()
	assert_equal(body["tmdb_configured"], False, "no TMDB client yet")
	assert_equal(body["store_ready"], False, "no store yet")


def test_discover_list():
	http, collection = build()
	resp = http.get("/movies")
	assert_equal(resp.status_code, 200, "discover status code")
	body = resp.json()
	assert_equal(body["status"], "success", "discover status")
	first = body["results"][0]
	assert_equal(first["rating_label"], "8.1", "rating label")
	assert_equal(first["release_year"], "2024", "release year")
	assert_equal(first["poster_url"], "https://image.tmdb.org/t/p/w500/p.jpg", "poster url")
	assert_equal(collection.docs, [], "discover list not tracked")


def test_search_tracks_and_trends():
	http, _ = build()
	for _ in range(2):
		body = http.get("/movies", params={"q": "batman"}).json()
		assert_equal(body["status"], "success", "search status")
		assert_true(body["results"][0]["poster_url"] is None, "missing poster stays null")
	trending = http.get("/trending", params={"limit": 5}).json()
	assert_equal(trending["limit"], 5, "echoed limit")
	assert_equal(len(trending["results"]), 1, "one tracked term")
	top = trending["results"][0]
	assert_equal(top["search_term"], "batman", "tracked term")
	assert_equal(top["count"], 2, "tracked count")
	assert_equal(top["movie_id"], 268, "first result id")
	assert_true(top["poster_url"] is None, "stored poster is null")


def test_trending_default_limit_from_settings():
	settings = load_settings(env={
		"TMDB_API_KEY": "token",
		"MONGODB_URI": "mongodb://localhost:27017",
		"MONGODB_DATABASE": "movies",
		"TRENDING_LIMIT": "2",
	})
	http, collection = build(settings)
	for term, count in [("a", 3), ("b", 2), ("c", 1)]:
		collection.add(term, count)
	body = http.get("/trending").json()
	assert_equal(body["limit"], 2, "configured default limit")
	assert_equal([r["search_term"] for r in body["results"]], ["a", "b"], "top two terms")

	body = TestClient(create_app(client=FakeMovieClient(), tracker=SearchTracker(SearchStore(collection)))).get("/trending").json()
	assert_equal(body["limit"], 5, "built-in default limit")


def test_upstream_failure_is_reported_in_body():
	http, collection = build()
	resp = http.get("/movies", params={"q": "down"})
	assert_equal(resp.status_code, 200, "failures still answer 200")
	body = resp.json()
	assert_equal(body["status"], "error", "error status")
	assert_equal(body["error_message"], "Error fetching movies. Please try again later.", "fetch error message")
	assert_equal(body["results"], [], "no results on error")
	assert_equal(collection.docs, [], "failed search not tracked")


def test_no_results_message():
	http, _ = build()
	body = http.get("/movies", params={"q": "qwertyuiop"}).json()
	assert_equal(body["status"], "error", "empty result is an error")
	assert_equal(body["error_message"], "No movies found. Try another search.", "no results message")


def test_trending_limit_validation():
	http, _ = build()
	assert_equal(http.get("/trending", params={"limit": 0}).status_code, 422, "limit below 1 rejected")


def main():
	print("Running API tests...")
	test_health()
	test_health_reports_unreachable_store()
	test_health_without_collaborators()
	test_discover_list()
	test_search_tracks_and_trends()
	test_trending_default_limit_from_settings()
	test_upstream_failure_is_reported_in_body()
	test_no_results_message()
	test_trending_limit_validation()
	print("All API tests passed!")


if __name__ == '__main__':
	main()
