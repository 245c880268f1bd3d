"""Deduplication of candidates merged from several sources."""

import re
from typing import Iterable, List, Optional, Set, Tuple, TypeVar, Union

from jobhonter.domain.models import CandidateItem, ScoredItem
from jobhonter.logging import get_logger

logger = get_logger(__name__, component="dedup")

T = TypeVar("T", CandidateItem, ScoredItem)

_NON_WORD = re.compile(r"[^\w\s]")


def normalize_title(title: Optional[str]) -> str:
    """Lower-case, drop punctuation and collapse whitespace.

    Example:
        >>> normalize_title("  Senior PHP Developer!! ")
        'senior php developer'
    """
    if not title:
        return ""
    return " ".join(_NON_WORD.sub(" ", title.lower()).split())


class Deduplicator:
    """Drop repeated postings, keeping the first one seen.

    An item's identity keys are its normalized title and, when the source
    guarantees id stability, its ``source_name:id``. An item is a duplicate
    when any of its keys was already seen. Input order decides the winner,
    so callers merge sources in priority order first.

    Titles are compared across sources unless ``title_scope_per_source`` is
    set, in which case the source name becomes part of the title key.
    """

    def __init__(self, title_scope_per_source: bool = False):
        """
        Initialize deduplicator.

        Args:
            title_scope_per_source: Only treat equal titles as duplicates
                within the same source
        """
        self.title_scope_per_source = title_scope_per_source

    def identity_keys(self, item: Union[CandidateItem, ScoredItem]) -> List[Tuple[str, ...]]:
        """Identity keys of an item. Empty titles produce no title key."""
        candidate = item.candidate if isinstance(item, ScoredItem) else item
        keys: List[Tuple[str, ...]] = []

        title = normalize_title(candidate.title)
        if title:
            if self.title_scope_per_source:
                keys.append(("title", candidate.source_name.lower(), title))
            else:
                keys.append(("title", title))

        if candidate.stable_id:
            keys.append(("id", candidate.dedup_id))

        return keys

    def deduplicate(self, items: Iterable[T]) -> List[T]:
        """
        Remove duplicates in a single O(n) pass.

        Only surviving items record their keys, so running the result
        through deduplicate() again returns it unchanged.

        Args:
            items: Candidates or scored items in priority order

        Returns:
            Surviving items in input order
        """
        seen: Set[Tuple[str, ...]] = set()
        unique: List[T] = []
        dropped = 0

        for item in items:
            keys = self.identity_keys(item)
            if any(key in seen for key in keys):
                dropped += 1
                continue
            seen.update(keys)
            unique.append(item)

        if dropped:
            logger.debug(
                "Duplicates removed",
                extra={"event": "dedup.completed", "kept": len(unique), "dropped": dropped},
            )
        return unique
