"""Term lookup over the loaded search index."""

from __future__ import annotations

import logging
from typing import FrozenSet, List, Optional, Set, Union

from doclookup.index.store import IndexRegistry, SearchIndex
from doclookup.models import Document, SearchHit
from doclookup.utils.text import split_query

LOGGER = logging.getLogger(__name__)

MATCH_ALL = "all"
MATCH_ANY = "any"
MATCH_MODES = (MATCH_ALL, MATCH_ANY)
DEFAULT_MATCH = MATCH_ALL


def _matching(index: SearchIndex, term: str) -> FrozenSet[int]:
    return frozenset(index.get_postings(term)) | frozenset(index.get_title_postings(term))


class Searcher:
    """High-level API to query the current search index.

    ``match="all"`` keeps documents containing every query term, ``"any"``
    keeps documents containing at least one.
    """

    def __init__(
        self,
        source: Union[IndexRegistry, SearchIndex],
        *,
        match: str = DEFAULT_MATCH,
    ) -> None:
        if isinstance(source, SearchIndex):
            registry = IndexRegistry()
            registry.install(source)
            source = registry
        self.registry = source
        self.match = _check_match(match)

    def search(self, query: str, *, match: Optional[str] = None) -> List[SearchHit]:
        mode = _check_match(match) if match is not None else self.match
        terms = split_query(query)
        if not terms.required:
            return []

        # One snapshot per query, even if a reload happens meanwhile.
        index = self.registry.current()
        LOGGER.debug(
            "Searching %s of %s, excluding %s", mode, terms.required, terms.excluded
        )

        candidates = [_matching(index, term) for term in terms.required]
        matched: Set[int] = set(candidates[0])
        for found in candidates[1:]:
            if mode == MATCH_ALL:
                matched &= found
            else:
                matched |= found
        for term in terms.excluded:
            matched -= _matching(index, term)

        return [SearchHit.from_document(index.get_document(i)) for i in sorted(matched)]

    def get_document(self, index: int) -> Document:
        return self.registry.current().get_document(index)


def _check_match(match: str) -> str:
    mode = match.strip().lower()
    if mode not in MATCH_MODES:
        raise ValueError(f"Unknown match mode {match!r}, expected one of {MATCH_MODES}")
    return mode
