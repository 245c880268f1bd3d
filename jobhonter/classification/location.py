"""Remote-work detection and requested-location matching.

Remote terms are plain substrings of the lower-cased corpus, so "remote"
also catches "remotely" and "remote-first". Location names and aliases are
matched on word boundaries, so "la" does not match "platform".
"""

import re
from typing import Dict, Iterable, List, Mapping, Optional, Pattern, Set

from jobhonter.config.models import DEFAULT_LOCATION_ALIASES, DEFAULT_REMOTE_TERMS


def _term_pattern(terms: Iterable[str]) -> Optional[Pattern[str]]:
    """Compile one word-bounded alternation regex for terms, longest first."""
    cleaned = sorted({t.strip().lower() for t in terms if t and t.strip()}, key=lambda t: (-len(t), t))
    if not cleaned:
        return None
    alternation = "|".join(re.escape(term) for term in cleaned)
    return re.compile(rf"(?<!\w)(?:{alternation})(?!\w)")


class LocationClassifier:
    """Classifies a corpus as remote and/or matching a requested location.

    Alias groups are bidirectional: asking for "nyc" also accepts
    "new york" and every other alias registered under "new york".
    """

    def __init__(
        self,
        remote_terms: Optional[Iterable[str]] = None,
        location_aliases: Optional[Mapping[str, Iterable[str]]] = None,
    ):
        terms = remote_terms if remote_terms is not None else DEFAULT_REMOTE_TERMS
        self.remote_terms = tuple(t.strip().lower() for t in terms if t and t.strip())

        aliases = location_aliases if location_aliases is not None else DEFAULT_LOCATION_ALIASES
        self._groups: Dict[str, Set[str]] = {}
        for base, names in aliases.items():
            group = {base.strip().lower()} | {n.strip().lower() for n in names if n and n.strip()}
            group.discard("")
            for term in list(group):
                self._groups.setdefault(term, set()).update(group)

        self._location_patterns: Dict[str, Optional[Pattern[str]]] = {}

    def is_remote(self, corpus: str) -> bool:
        """True if the corpus contains any remote-signal term."""
        lowered = corpus.lower()
        return any(term in lowered for term in self.remote_terms)

    def is_remote_term(self, text: Optional[str]) -> bool:
        """True if text is itself a remote term, e.g. a location of "Remote"."""
        if not text:
            return False
        return " ".join(text.lower().split()) in self.remote_terms

    def remote_requested(self, remote_only: bool, location: Optional[str]) -> bool:
        """A request asks for remote work via remote_only or a remote location."""
        return remote_only or self.is_remote_term(location)

    def location_terms(self, location: str) -> List[str]:
        """The requested location plus every alias in its group, sorted."""
        key = " ".join(location.lower().split())
        return sorted(self._groups.get(key, set()) | {key})

    def matches_location(self, corpus: str, location: str) -> bool:
        """True if the corpus names the location or one of its aliases."""
        key = " ".join(location.lower().split())
        if not key:
            return False
        if key not in self._location_patterns:
            self._location_patterns[key] = _term_pattern(self.location_terms(key))
        pattern = self._location_patterns[key]
        return pattern is not None and pattern.search(corpus.lower()) is not None

    def location_match(self, corpus: str, location: Optional[str], is_remote: bool) -> Optional[bool]:
        """Location verdict recorded on a scored item.

        Returns None when no location was requested or when a remote item
        is checked against a place name. A location that is itself a remote
        term, such as "Remote", is satisfied only by remote items.
        """
        if not location:
            return None
        if self.is_remote_term(location):
            return is_remote
        if is_remote:
            return None
        return self.matches_location(corpus, location)
