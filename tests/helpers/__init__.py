"""Test helper utilities for JobHonter tests."""

from .fixture_fetcher import (
    FIXTURE_NOW,
    FIXTURES_DIR,
    BlockingFetcher,
    FailingFetcher,
    FixtureFetcher,
    load_fixture_candidates,
    make_candidate,
)

__all__ = [
    "FIXTURE_NOW",
    "FIXTURES_DIR",
    "BlockingFetcher",
    "FailingFetcher",
    "FixtureFetcher",
    "load_fixture_candidates",
    "make_candidate",
]
