"""Load vocabulary tables from YAML files.

File format::

    wordpress:
      synonyms: [wp, woocommerce]
      categories: [cms, php]
    developer:
      synonyms: [dev, programmer]
"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from jobhonter.config.exceptions import ConfigurationError
from jobhonter.logging import get_logger

from .defaults import DEFAULT_VOCABULARY
from .models import VocabularyEntry, VocabularyTable

logger = get_logger(__name__, component="vocabulary")


def _parse_entries(data: Dict[str, Any], source: Path) -> Dict[str, VocabularyEntry]:
    entries: Dict[str, VocabularyEntry] = {}
    errors = []

    for term, raw_entry in data.items():
        if not isinstance(term, str) or not term.strip():
            errors.append(f"Invalid term key: {term!r}")
            continue
        if raw_entry is None:
            raw_entry = {}
        if not isinstance(raw_entry, dict):
            errors.append(f"{term}: expected mapping with 'synonyms' and/or 'categories'")
            continue

        unknown = set(raw_entry) - {"synonyms", "categories"}
        if unknown:
            errors.append(f"{term}: unknown keys {sorted(unknown)}")
            continue

        synonyms = raw_entry.get("synonyms") or []
        categories = raw_entry.get("categories") or []
        if not isinstance(synonyms, list) or not isinstance(categories, list):
            errors.append(f"{term}: 'synonyms' and 'categories' must be lists")
            continue

        entries[term] = VocabularyEntry.of(
            [str(s) for s in synonyms], [str(c) for c in categories]
        )

    if errors:
        raise ConfigurationError(
            f"Invalid vocabulary file: {source}",
            errors=errors,
            suggestions=["Each term maps to {synonyms: [...], categories: [...]}"],
        )

    return entries


def load_vocabulary(
    path: Optional[Path] = None, merge_with_defaults: bool = True
) -> VocabularyTable:
    """Load a vocabulary table.

    Args:
        path: YAML file to load. None returns the built-in table.
        merge_with_defaults: Layer the file on top of the built-in table
            instead of replacing it

    Returns:
        Read-only VocabularyTable

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    if path is None:
        return DEFAULT_VOCABULARY

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(
            f"Vocabulary file not found: {path}",
            suggestions=["Check vocabulary_path in your config file"],
        )
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse vocabulary YAML: {e}",
            suggestions=["Check YAML syntax and indentation in the vocabulary file"],
        )

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Vocabulary file must contain a mapping at the top level: {path}"
        )

    entries = _parse_entries(data, path)
    table = DEFAULT_VOCABULARY.layered(entries) if merge_with_defaults else VocabularyTable(entries)

    logger.info(
        "Vocabulary loaded",
        extra={
            "event": "vocabulary.loaded",
            "path": str(path),
            "file_terms": len(entries),
            "total_terms": len(table),
            "merged": merge_with_defaults,
        },
    )
    return table
