"""Vocabulary table and expansion of keyword words.

This module provides:
- VocabularyEntry / VocabularyTable: immutable synonym and category sets
- VocabularyExpander: case-insensitive exact lookups
- DEFAULT_VOCABULARY and load_vocabulary() for startup loading
"""

from .defaults import DEFAULT_VOCABULARY, build_default_vocabulary
from .expander import VocabularyExpander
from .loader import load_vocabulary
from .models import VocabularyEntry, VocabularyTable

__all__ = [
    "VocabularyEntry",
    "VocabularyTable",
    "VocabularyExpander",
    "DEFAULT_VOCABULARY",
    "build_default_vocabulary",
    "load_vocabulary",
]
