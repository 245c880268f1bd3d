"""Reddit public search fetcher."""

from typing import Any, Dict, List, Optional, Sequence

from jobhonter.domain.models import CandidateItem, SearchMode
from jobhonter.logging import get_logger
from jobhonter.utils.cancellation import CancellationToken
from jobhonter.utils.timestamps import unix_to_timestamp

from .base import BaseSourceFetcher
from .exceptions import SourceFetchError, SourceResponseError

logger = get_logger(__name__, component="source")

DEFAULT_SUBREDDITS = ["forhire", "remotejs", "RemoteJobs", "jobbit", "hiring", "freelance_forhire"]

_QUERY_SUFFIXES = {
    SearchMode.STRICT: ("hiring", "job"),
    SearchMode.MODERATE: ("hiring", "job", "position", "freelance"),
    SearchMode.LOOSE: ("hiring", "job", "work", "position", "opportunity", "looking for"),
}


def build_search_queries(keyword: str, mode: SearchMode) -> List[str]:
    """Search queries issued for one keyword, narrowest mode first.

    Strict quotes the phrase so Reddit's own search requires it verbatim;
    moderate and loose send the bare phrase with progressively more job
    related variants.

    Example:
        >>> build_search_queries("WordPress developer", SearchMode.STRICT)
        ['"wordpress developer" hiring', '"wordpress developer" job']
    """
    mode = SearchMode(mode)
    phrase = " ".join(keyword.lower().split())
    if mode == SearchMode.STRICT:
        phrase = f'"{phrase}"'
    suffixes = _QUERY_SUFFIXES[mode]
    return [f"{phrase} {suffix}" for suffix in suffixes]


def time_filter_for(max_age_days: int) -> str:
    """Map a maximum age to Reddit's coarse ``t`` search parameter."""
    if max_age_days <= 1:
        return "day"
    if max_age_days <= 7:
        return "week"
    if max_age_days <= 31:
        return "month"
    return "year"


class RedditFetcher(BaseSourceFetcher):
    """Fetcher for Reddit's public JSON search API.

    Every query is sent twice: once site-wide and once restricted to the
    configured job subreddits (as one combined ``r/a+b+c`` search). Posts
    are returned in the order first seen, each post id once.

    API Details:
        Endpoint: https://www.reddit.com/search.json
                  https://www.reddit.com/r/{sub+sub}/search.json
        Method: GET
        Authentication: None (public, rate limited by User-Agent)
        Response: Listing object with 'data.children[].data' posts
    """

    SOURCE_TYPE = "reddit"
    BASE_URL = "https://www.reddit.com"
    PAGE_SIZE = 50

    def __init__(self, name: str = "reddit", subreddits: Optional[Sequence[str]] = None, **kwargs: Any) -> None:
        super().__init__(name, **kwargs)
        cleaned = [s.strip().lstrip("/").removeprefix("r/") for s in (subreddits or DEFAULT_SUBREDDITS)]
        self.subreddits = [s for s in cleaned if s]

    def _search_urls(self) -> List[Dict[str, Any]]:
        targets = [{"url": f"{self.BASE_URL}/search.json", "params": {}}]
        if self.subreddits:
            joined = "+".join(self.subreddits)
            targets.append(
                {"url": f"{self.BASE_URL}/r/{joined}/search.json", "params": {"restrict_sr": "1"}}
            )
        return targets

    def fetch(
        self,
        keywords: Sequence[str],
        location: Optional[str] = None,
        max_age_days: int = 7,
        mode: SearchMode = SearchMode.MODERATE,
        cancellation: Optional[CancellationToken] = None,
    ) -> List[CandidateItem]:
        """Search Reddit for each keyword and return posts as candidates.

        Stops issuing requests once max_items posts are collected or the
        cancellation token fires. Individual failed requests are logged and
        skipped; the fetch only fails when every request failed.

        Raises:
            SourceFetchError: If no request succeeded
        """
        time_filter = time_filter_for(max_age_days)
        candidates: List[CandidateItem] = []
        seen_ids = set()
        attempted = 0
        succeeded = 0
        last_error: Optional[SourceFetchError] = None

        logger.info(
            "Fetching posts from Reddit",
            extra={
                "event": "source.fetch.started",
                "source_name": self.name,
                "keyword_count": len(keywords),
                "mode": SearchMode(mode).value,
                "time_filter": time_filter,
            },
        )

        for keyword in keywords:
            for query in build_search_queries(keyword, mode):
                for target in self._search_urls():
                    if self._is_cancelled(cancellation):
                        logger.info(
                            "Reddit fetch cancelled",
                            extra={"event": "source.fetch.cancelled", "source_name": self.name},
                        )
                        return self._truncate_items(candidates)
                    if self.max_items > 0 and len(candidates) >= self.max_items:
                        return self._truncate_items(candidates)

                    params = {
                        "q": query,
                        "sort": "new",
                        "t": time_filter,
                        "limit": str(self.PAGE_SIZE),
                        "raw_json": "1",
                        **target["params"],
                    }
                    attempted += 1
                    try:
                        posts = self._extract_posts(self._make_request(target["url"], params=params))
                    except SourceFetchError as e:
                        last_error = e
                        logger.warning(
                            "Reddit search request failed, continuing",
                            extra={
                                "event": "source.fetch.request_failed",
                                "source_name": self.name,
                                "query": query,
                                "error": str(e),
                            },
                        )
                        continue
                    succeeded += 1

                    for post in posts:
                        post_id = post.get("id")
                        if not post_id or post_id in seen_ids:
                            continue
                        try:
                            candidate = self._transform_post(post)
                        except (KeyError, ValueError, TypeError) as e:
                            logger.warning(
                                "Failed to transform Reddit post",
                                extra={"source_name": self.name, "post_id": post_id, "error": str(e)},
                            )
                            continue
                        seen_ids.add(post_id)
                        candidates.append(candidate)

        if attempted and not succeeded and last_error is not None:
            raise last_error

        logger.info(
            "Successfully fetched posts from Reddit",
            extra={
                "event": "source.fetch.completed",
                "source_name": self.name,
                "count": len(candidates),
                "requests": attempted,
                "failed_requests": attempted - succeeded,
            },
        )
        return self._truncate_items(candidates)

    def _extract_posts(self, response: Any) -> List[Dict[str, Any]]:
        """Pull post payloads out of a Listing response."""
        if not isinstance(response, dict):
            raise SourceResponseError(
                f"Expected JSON object response, got {type(response).__name__}", source_name=self.name
            )
        children = (response.get("data") or {}).get("children")
        if not isinstance(children, list):
            raise SourceResponseError("Expected 'data.children' to be an array", source_name=self.name)
        return [
            child.get("data") or {}
            for child in children
            if isinstance(child, dict) and child.get("kind", "t3") == "t3"
        ]

    def _transform_post(self, post: Dict[str, Any]) -> CandidateItem:
        created_utc = post.get("created_utc")
        permalink = post.get("permalink") or ""
        return CandidateItem(
            id=str(post["id"]),
            title=post.get("title") or "",
            body=post.get("selftext") or "",
            source_name=self.name,
            created_at=unix_to_timestamp(float(created_utc)) if created_utc is not None else None,
            upvote_count=post.get("ups", post.get("score")),
            comment_count=post.get("num_comments"),
            source_url=f"{self.BASE_URL}{permalink}" if permalink else post.get("url") or "",
            stable_id=True,
        )
