"""Unit tests for source fetchers."""

from unittest.mock import MagicMock, Mock, patch

import pytest
import requests

from jobhonter.config.models import AdvancedConfig, AppConfig, SourceConfig
from jobhonter.domain.models import SearchMode
from jobhonter.sources import (
    RedditFetcher,
    RemoteOKFetcher,
    SourceConfigurationError,
    SourceHTTPError,
    SourceResponseError,
    SourceTimeoutError,
    build_fetchers,
    build_search_queries,
    get_fetcher,
    time_filter_for,
)
from jobhonter.utils.cancellation import CancellationToken


# ============================================================================
# Fixtures
# ============================================================================


class FakeClock:
    """Monotonic clock that only advances when sleep() is called."""

    def __init__(self):
        self.now = 100.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def reddit_listing(*posts):
    return {
        "kind": "Listing",
        "data": {"children": [{"kind": "t3", "data": post} for post in posts]},
    }


def reddit_post(post_id, title="WordPress developer needed", **extra):
    post = {
        "id": post_id,
        "title": title,
        "selftext": "Looking for a WP dev",
        "created_utc": 1772452800,
        "ups": 5,
        "num_comments": 2,
        "permalink": f"/r/forhire/comments/{post_id}/post/",
    }
    post.update(extra)
    return post


@pytest.fixture
def reddit():
    """Reddit fetcher with throttling disabled."""
    return RedditFetcher("reddit", subreddits=["forhire"], min_request_delay=0)


@pytest.fixture
def remoteok():
    """RemoteOK fetcher with throttling disabled."""
    return RemoteOKFetcher("remoteok", min_request_delay=0)


@pytest.fixture
def remoteok_response():
    return [
        {"legal": "API Terms of Service"},
        {
            "id": "1001",
            "position": "WordPress Developer",
            "company": "Acme",
            "description": "<p>Build &amp; ship themes</p><br>Daily standups",
            "location": "",
            "tags": ["wordpress", "php"],
            "salary_min": 60000,
            "salary_max": 90000,
            "epoch": 1772452800,
            "url": "https://remoteok.com/remote-jobs/1001",
        },
        {"position": "No id, skipped"},
    ]


# ============================================================================
# BaseSourceFetcher
# ============================================================================


class TestBaseSourceFetcher:
    """Tests for shared fetcher behaviour (via RemoteOKFetcher)."""

    def test_invalid_timeout(self):
        with pytest.raises(SourceConfigurationError, match="Timeout"):
            RemoteOKFetcher("remoteok", timeout=0)

    def test_empty_user_agent(self):
        with pytest.raises(SourceConfigurationError, match="user_agent"):
            RemoteOKFetcher("remoteok", user_agent="  ")

    def test_negative_delay(self):
        with pytest.raises(SourceConfigurationError):
            RemoteOKFetcher("remoteok", min_request_delay=-1)

    def test_user_agent_header_set(self):
        fetcher = RemoteOKFetcher("remoteok", user_agent="TestAgent/2.0")
        assert fetcher._session.headers["User-Agent"] == "TestAgent/2.0"

    def test_http_error_status(self):
        session = MagicMock()
        session.request.return_value = Mock(status_code=404, reason="Not Found")
        fetcher = RemoteOKFetcher("remoteok", session=session, min_request_delay=0)

        with pytest.raises(SourceHTTPError) as exc_info:
            fetcher._make_request("https://example.com/api")

        assert exc_info.value.status_code == 404
        assert exc_info.value.source_name == "remoteok"

    def test_timeout_translated(self):
        session = MagicMock()
        session.request.side_effect = requests.exceptions.Timeout("slow")
        fetcher = RemoteOKFetcher("remoteok", session=session, min_request_delay=0)

        with pytest.raises(SourceTimeoutError):
            fetcher._make_request("https://example.com/api")

    def test_connection_error_translated(self):
        session = MagicMock()
        session.request.side_effect = requests.exceptions.ConnectionError("refused")
        fetcher = RemoteOKFetcher("remoteok", session=session, min_request_delay=0)

        with pytest.raises(SourceHTTPError) as exc_info:
            fetcher._make_request("https://example.com/api")

        assert exc_info.value.status_code == 0

    def test_invalid_json_translated(self):
        response = Mock(status_code=200)
        response.json.side_effect = ValueError("Expecting value")
        session = MagicMock()
        session.request.return_value = response
        fetcher = RemoteOKFetcher("remoteok", session=session, min_request_delay=0)

        with pytest.raises(SourceResponseError):
            fetcher._make_request("https://example.com/api")

    def test_throttle_enforces_min_delay(self):
        clock = FakeClock()
        session = MagicMock()
        session.request.return_value = Mock(status_code=200, json=Mock(return_value=[]))
        fetcher = RemoteOKFetcher(
            "remoteok", session=session, min_request_delay=1.5, sleep=clock.sleep, clock=clock
        )

        fetcher._make_request("https://example.com/a")
        clock.now += 0.5
        fetcher._make_request("https://example.com/b")
        fetcher._make_request("https://example.com/c")

        assert clock.sleeps == [pytest.approx(1.0), pytest.approx(1.5)]

    def test_clean_html(self, remoteok):
        text = remoteok._clean_html("<p>Hello &amp; welcome</p><p>Second<br/>line</p>")
        assert text == "Hello & welcome\n\nSecond\nline"

    def test_truncate_items(self):
        fetcher = RemoteOKFetcher("remoteok", max_items=2)
        assert fetcher._truncate_items([1, 2, 3]) == [1, 2]
        fetcher.max_items = 0
        assert fetcher._truncate_items([1, 2, 3]) == [1, 2, 3]


# ============================================================================
# RedditFetcher
# ============================================================================


class TestRedditQueries:
    """Tests for per-mode query building."""

    def test_strict_quotes_phrase(self):
        assert build_search_queries("WordPress  Developer", SearchMode.STRICT) == [
            '"wordpress developer" hiring',
            '"wordpress developer" job',
        ]

    def test_moderate_variants(self):
        queries = build_search_queries("php", SearchMode.MODERATE)
        assert queries == ["php hiring", "php job", "php position", "php freelance"]

    def test_loose_is_broadest(self):
        loose = build_search_queries("php", SearchMode.LOOSE)
        assert len(loose) > len(build_search_queries("php", SearchMode.MODERATE))

    @pytest.mark.parametrize(
        "days,expected", [(1, "day"), (7, "week"), (14, "month"), (31, "month"), (90, "year")]
    )
    def test_time_filter(self, days, expected):
        assert time_filter_for(days) == expected


class TestRedditFetcher:
    """Tests for RedditFetcher.fetch."""

    def test_fetch_transforms_posts(self, reddit):
        with patch.object(reddit, "_make_request", return_value=reddit_listing(reddit_post("a1"))):
            candidates = reddit.fetch(["WordPress developer"], mode=SearchMode.STRICT)

        assert len(candidates) == 1
        candidate = candidates[0]
        assert candidate.id == "a1"
        assert candidate.source_name == "reddit"
        assert candidate.body == "Looking for a WP dev"
        assert candidate.upvote_count == 5
        assert candidate.comment_count == 2
        assert candidate.source_url == "https://www.reddit.com/r/forhire/comments/a1/post/"
        assert candidate.created_at.year == 2026

    def test_requests_site_wide_and_subreddits(self, reddit):
        with patch.object(reddit, "_make_request", return_value=reddit_listing()) as mock_request:
            reddit.fetch(["WordPress developer"], max_age_days=7, mode=SearchMode.STRICT)

        urls = [c.args[0] for c in mock_request.call_args_list]
        assert urls == [
            "https://www.reddit.com/search.json",
            "https://www.reddit.com/r/forhire/search.json",
        ] * 2
        params = mock_request.call_args_list[1].kwargs["params"]
        assert params["restrict_sr"] == "1"
        assert params["t"] == "week"
        assert params["q"] == '"wordpress developer" hiring'

    def test_duplicate_posts_across_queries_kept_once(self, reddit):
        listing = reddit_listing(reddit_post("a1"), reddit_post("a2"))
        with patch.object(reddit, "_make_request", return_value=listing):
            candidates = reddit.fetch(["WordPress developer"], mode=SearchMode.STRICT)

        assert [c.id for c in candidates] == ["a1", "a2"]

    def test_failed_request_is_skipped(self, reddit):
        side_effect = [
            SourceHTTPError("HTTP 503", status_code=503, url="u", source_name="reddit"),
            reddit_listing(reddit_post("a1")),
            reddit_listing(),
            reddit_listing(),
        ]
        with patch.object(reddit, "_make_request", side_effect=side_effect):
            candidates = reddit.fetch(["WordPress developer"], mode=SearchMode.STRICT)

        assert [c.id for c in candidates] == ["a1"]

    def test_all_requests_failing_raises(self, reddit):
        error = SourceTimeoutError("timed out", url="u", source_name="reddit")
        with patch.object(reddit, "_make_request", side_effect=error):
            with pytest.raises(SourceTimeoutError):
                reddit.fetch(["WordPress developer"], mode=SearchMode.STRICT)

    def test_malformed_listing_counts_as_failure(self, reddit):
        with patch.object(reddit, "_make_request", return_value={"unexpected": True}):
            with pytest.raises(SourceResponseError):
                reddit.fetch(["php"], mode=SearchMode.STRICT)

    def test_malformed_post_skipped(self, reddit):
        listing = reddit_listing(reddit_post("a1", created_utc="not-a-number"), reddit_post("a2"))
        with patch.object(reddit, "_make_request", return_value=listing):
            candidates = reddit.fetch(["php"], mode=SearchMode.STRICT)

        assert [c.id for c in candidates] == ["a2"]

    def test_cancelled_before_first_request(self, reddit):
        token = CancellationToken()
        token.cancel()
        with patch.object(reddit, "_make_request") as mock_request:
            assert reddit.fetch(["php"], cancellation=token) == []

        mock_request.assert_not_called()

    def test_stops_when_max_items_reached(self):
        fetcher = RedditFetcher("reddit", subreddits=["forhire"], min_request_delay=0, max_items=1)
        listing = reddit_listing(reddit_post("a1"), reddit_post("a2"))
        with patch.object(fetcher, "_make_request", return_value=listing) as mock_request:
            candidates = fetcher.fetch(["php"], mode=SearchMode.LOOSE)

        assert [c.id for c in candidates] == ["a1"]
        assert mock_request.call_count == 1

    def test_subreddit_names_cleaned(self):
        fetcher = RedditFetcher("reddit", subreddits=["r/forhire", "/remotejs", " "])
        assert fetcher.subreddits == ["forhire", "remotejs"]


# ============================================================================
# RemoteOKFetcher
# ============================================================================


class TestRemoteOKFetcher:
    """Tests for RemoteOKFetcher.fetch."""

    def test_fetch_transforms_postings(self, remoteok, remoteok_response):
        with patch.object(remoteok, "_make_request", return_value=remoteok_response):
            candidates = remoteok.fetch(["WordPress developer"])

        assert len(candidates) == 1
        candidate = candidates[0]
        assert candidate.id == "1001"
        assert candidate.title == "WordPress Developer at Acme"
        assert "Build & ship themes" in candidate.body
        assert "Location: Remote" in candidate.body
        assert "Tags: wordpress, php" in candidate.body
        assert "Salary: $60,000 - $90,000" in candidate.body
        assert candidate.source_url == "https://remoteok.com/remote-jobs/1001"

    def test_non_list_response(self, remoteok):
        with patch.object(remoteok, "_make_request", return_value={"error": "rate limited"}):
            with pytest.raises(SourceResponseError):
                remoteok.fetch(["php"])

    def test_http_error_propagates(self, remoteok):
        error = SourceHTTPError("HTTP 500", status_code=500, url="u", source_name="remoteok")
        with patch.object(remoteok, "_make_request", side_effect=error):
            with pytest.raises(SourceHTTPError):
                remoteok.fetch(["php"])

    def test_cancelled(self, remoteok):
        token = CancellationToken()
        token.cancel()
        with patch.object(remoteok, "_make_request") as mock_request:
            assert remoteok.fetch(["php"], cancellation=token) == []
        mock_request.assert_not_called()

    def test_max_items(self, remoteok_response):
        fetcher = RemoteOKFetcher("remoteok", min_request_delay=0, max_items=1)
        postings = remoteok_response + [dict(remoteok_response[1], id="1002")]
        with patch.object(fetcher, "_make_request", return_value=postings):
            assert [c.id for c in fetcher.fetch(["php"])] == ["1001"]


# ============================================================================
# Factory
# ============================================================================


class TestFactory:
    """Tests for get_fetcher and build_fetchers."""

    def test_get_fetcher_applies_config(self):
        source = SourceConfig(
            name="reddit-jobs", type="reddit", timeout="30s", min_request_delay=2.0, max_items=50,
            subreddits=["forhire"],
        )
        advanced = AdvancedConfig(http_request_timeout=10, user_agent="Test/1.0")

        fetcher = get_fetcher(source, advanced)

        assert isinstance(fetcher, RedditFetcher)
        assert fetcher.name == "reddit-jobs"
        assert fetcher.timeout == 10
        assert fetcher.fetch_timeout == 30.0
        assert fetcher.min_request_delay == 2.0
        assert fetcher.max_items == 50
        assert fetcher.subreddits == ["forhire"]
        assert fetcher.user_agent == "Test/1.0"

    def test_build_fetchers_keeps_order_and_skips_disabled(self):
        config = AppConfig(
            sources=[
                SourceConfig(name="remoteok", type="remoteok"),
                SourceConfig(name="disabled", type="reddit", enabled=False),
                SourceConfig(name="reddit", type="reddit"),
            ]
        )

        fetchers = build_fetchers(config)

        assert [f.name for f in fetchers] == ["remoteok", "reddit"]
        assert isinstance(fetchers[0], RemoteOKFetcher)
