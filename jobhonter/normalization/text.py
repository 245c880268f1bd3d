"""Text normalization for matching.

The corpus is deliberately minimal: lower-case ``title + " " + body`` with no
stemming or punctuation stripping, so multi-word vocabulary phrases and
tokens like "c++" or "node.js" survive intact.
"""

from typing import Optional, Tuple

# Words of this length or shorter carry no discriminative signal ("of", "to").
SKIP_WORD_MAX_LENGTH = 2


def build_corpus(title: Optional[str], body: Optional[str]) -> str:
    """Flatten a title/body pair into a single lower-cased search corpus.

    Never raises; None values are treated as empty strings.

    Example:
        >>> build_corpus("PHP Dev", None)
        'php dev '
    """
    return f"{title or ''} {body or ''}".lower()


def normalize_keyword(keyword: str) -> str:
    """Lower-case a keyword phrase and collapse internal whitespace."""
    return " ".join(keyword.lower().split())


def keyword_words(keyword: str) -> Tuple[str, ...]:
    """Split a keyword phrase into lower-cased words."""
    return tuple(normalize_keyword(keyword).split())


def qualifying_words(keyword: str) -> Tuple[str, ...]:
    """Words of the keyword longer than SKIP_WORD_MAX_LENGTH characters.

    Order is preserved and repeated words are kept once.
    """
    seen = set()
    words = []
    for word in keyword_words(keyword):
        if len(word) > SKIP_WORD_MAX_LENGTH and word not in seen:
            seen.add(word)
            words.append(word)
    return tuple(words)
