"""Source fetchers that turn external job feeds into candidate items.

Use the factory to build fetchers from configuration:
    from jobhonter.sources import build_fetchers
    fetchers = build_fetchers(app_config)

Or instantiate directly:
    from jobhonter.sources import RedditFetcher, RemoteOKFetcher
"""

from .base import BaseSourceFetcher, SourceFetcher
from .exceptions import (
    SourceConfigurationError,
    SourceFetchError,
    SourceHTTPError,
    SourceResponseError,
    SourceTimeoutError,
)
from .factory import build_fetchers, get_fetcher
from .reddit import RedditFetcher, build_search_queries, time_filter_for
from .remoteok import RemoteOKFetcher

__all__ = [
    "BaseSourceFetcher",
    "SourceFetcher",
    "build_fetchers",
    "get_fetcher",
    "RedditFetcher",
    "RemoteOKFetcher",
    "build_search_queries",
    "time_filter_for",
    "SourceFetchError",
    "SourceHTTPError",
    "SourceTimeoutError",
    "SourceResponseError",
    "SourceConfigurationError",
]
