"""Cross-source deduplication."""

from .deduplicator import Deduplicator, normalize_title

__all__ = ["Deduplicator", "normalize_title"]
