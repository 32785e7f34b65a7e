"""Query tokenization and term normalization.

Terms in a Sphinx search index are lowercased, stopword-filtered and
Porter-stemmed by the English search language. Queries must go through the
same steps or their postings are never found.
"""

from __future__ import annotations

import re
import threading
from typing import Iterable, List, NamedTuple, Optional

import snowballstemmer

STEMMER_ALGORITHM = "porter"

# Sphinx English stopword list.
STOPWORDS = frozenset(
    """
    a and are as at
    be but by
    for
    if in into is it
    near no not
    of on or
    such
    that the their then there these they this to
    was will with
    """.split()
)

_WORD_RE = re.compile(r"\w+")
_local = threading.local()


class QueryTerms(NamedTuple):
    """Normalized terms of a query, split by intent."""

    required: tuple[str, ...]
    excluded: tuple[str, ...]


def _stemmer():
    # Snowball stemmers keep per-call state, so each thread gets its own.
    stemmer = getattr(_local, "stemmer", None)
    if stemmer is None:
        stemmer = snowballstemmer.stemmer(STEMMER_ALGORITHM)
        _local.stemmer = stemmer
    return stemmer


def normalize_word(word: str) -> Optional[str]:
    """Return the index term for ``word``, or ``None`` when it is not searchable."""
    lowered = word.strip().lower()
    if not lowered or lowered in STOPWORDS:
        return None
    stemmed = _stemmer().stemWord(lowered)
    if len(stemmed) < 3 and len(lowered) >= 3:
        return lowered
    return stemmed


def split_words(text: str) -> List[str]:
    """Split text on runs of non-word characters."""
    return _WORD_RE.findall(text)


def _dedupe(terms: Iterable[str]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for term in terms:
        seen.setdefault(term, None)
    return tuple(seen)


def split_query(query: str) -> QueryTerms:
    """Normalize a free-text query.

    Whitespace separated chunks starting with ``-`` mark every word they
    contain as excluded. Everything else is required.
    """
    required: List[str] = []
    excluded: List[str] = []
    for chunk in (query or "").split():
        target = excluded if chunk.startswith("-") else required
        for word in split_words(chunk):
            term = normalize_word(word)
            if term is not None:
                target.append(term)
    return QueryTerms(required=_dedupe(required), excluded=_dedupe(excluded))
