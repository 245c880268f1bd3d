"""Text normalization helpers for building search corpora and keyword words."""

from .text import (
    SKIP_WORD_MAX_LENGTH,
    build_corpus,
    keyword_words,
    normalize_keyword,
    qualifying_words,
)

__all__ = [
    "SKIP_WORD_MAX_LENGTH",
    "build_corpus",
    "normalize_keyword",
    "keyword_words",
    "qualifying_words",
]
