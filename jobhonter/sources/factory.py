"""Factory functions for instantiating source fetchers."""

from typing import Dict, List, Type

from jobhonter.config.models import AdvancedConfig, AppConfig, SourceConfig
from jobhonter.logging import get_logger

from .base import BaseSourceFetcher
from .exceptions import SourceConfigurationError
from .reddit import RedditFetcher
from .remoteok import RemoteOKFetcher

logger = get_logger(__name__, component="source")

FETCHER_TYPES: Dict[str, Type[BaseSourceFetcher]] = {
    "reddit": RedditFetcher,
    "remoteok": RemoteOKFetcher,
}


def get_fetcher(source_config: SourceConfig, advanced_config: AdvancedConfig) -> BaseSourceFetcher:
    """Instantiate the fetcher for one configured source.

    Args:
        source_config: Source configuration (type, name, limits)
        advanced_config: HTTP timeout and User-Agent settings

    Returns:
        Fetcher instance for the source type

    Raises:
        SourceConfigurationError: If the type is unknown or settings are invalid

    Example:
        >>> source = SourceConfig(name="reddit", type="reddit")
        >>> fetcher = get_fetcher(source, AdvancedConfig())
    """
    source_type = str(getattr(source_config.type, "value", source_config.type)).lower()
    fetcher_class = FETCHER_TYPES.get(source_type)

    if fetcher_class is None:
        supported = ", ".join(sorted(FETCHER_TYPES))
        raise SourceConfigurationError(
            f"Unknown source type: {source_config.type}. Supported types: {supported}",
            source_name=source_config.name,
        )

    kwargs = {
        "timeout": advanced_config.http_request_timeout,
        "fetch_timeout": float(source_config.timeout_seconds),
        "user_agent": advanced_config.user_agent,
        "min_request_delay": source_config.min_request_delay,
        "max_items": source_config.max_items,
    }
    if fetcher_class is RedditFetcher and source_config.subreddits:
        kwargs["subreddits"] = source_config.subreddits

    logger.debug(
        "Creating fetcher instance",
        extra={
            "source_type": source_type,
            "source_name": source_config.name,
            "fetcher_class": fetcher_class.__name__,
        },
    )

    try:
        return fetcher_class(source_config.name, **kwargs)
    except SourceConfigurationError:
        raise
    except (TypeError, ValueError) as e:
        raise SourceConfigurationError(
            f"Failed to create {source_type} fetcher: {e}", source_name=source_config.name
        ) from e


def build_fetchers(app_config: AppConfig) -> List[BaseSourceFetcher]:
    """Fetchers for every enabled source, in configured priority order."""
    return [get_fetcher(source, app_config.advanced) for source in app_config.get_enabled_sources()]
