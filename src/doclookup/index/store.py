"""Immutable search index and the process-wide registry holding it."""

from __future__ import annotations

import hashlib
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError

from doclookup.errors import IndexNotLoadedError, MalformedIndexError, NotFoundError
from doclookup.index.jsindex import decode, read_index_file
from doclookup.models import Document

LOGGER = logging.getLogger(__name__)

Postings = Mapping[str, Tuple[int, ...]]

_EMPTY: Tuple[int, ...] = ()


class _RawIndex(BaseModel):
    """Shape of the generated index. Unknown keys are kept as metadata."""

    model_config = ConfigDict(extra="allow")

    docnames: List[StrictStr]
    filenames: List[StrictStr]
    titles: List[StrictStr]
    terms: Dict[StrictStr, Union[StrictInt, List[StrictInt]]]
    titleterms: Dict[StrictStr, Union[StrictInt, List[StrictInt]]] = Field(default_factory=dict)


_STRUCTURAL_FIELDS = frozenset(_RawIndex.model_fields)


@dataclass(frozen=True, slots=True)
class SearchIndex:
    """Validated, read-only view of a generated search index."""

    documents: Tuple[Document, ...]
    terms: Postings
    titleterms: Postings
    metadata: Mapping[str, Any]

    def __len__(self) -> int:
        return len(self.documents)

    def get_document(self, index: int) -> Document:
        if isinstance(index, bool) or not isinstance(index, int):
            raise NotFoundError(f"Invalid document index: {index!r}")
        if not 0 <= index < len(self.documents):
            raise NotFoundError(
                f"Document index {index} out of range ({len(self.documents)} documents)"
            )
        return self.documents[index]

    def get_postings(self, term: str) -> Tuple[int, ...]:
        """Document indices whose body contains ``term`` exactly."""
        return self.terms.get(term, _EMPTY)

    def get_title_postings(self, term: str) -> Tuple[int, ...]:
        """Document indices with ``term`` in a page or section title."""
        return self.titleterms.get(term, _EMPTY)

    def stats(self) -> Dict[str, int]:
        return {
            "document_count": len(self.documents),
            "term_count": len(self.terms),
            "title_term_count": len(self.titleterms),
        }


def _freeze(value: Any) -> Any:
    """Copy generator metadata into read-only mappings and tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _describe(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "<root>"
    return f"{location}: {first['msg']} ({exc.error_count()} error(s))"


def _build_postings(
    field_name: str,
    raw: Mapping[str, Union[int, List[int]]],
    document_count: int,
) -> Postings:
    postings: Dict[str, Tuple[int, ...]] = {}
    for term, value in raw.items():
        # Sphinx writes single-document postings as a bare integer.
        indices = [value] if isinstance(value, int) else value
        for index in indices:
            if not 0 <= index < document_count:
                raise MalformedIndexError(
                    f"{field_name}[{term!r}] references document index {index}, "
                    f"but the index holds {document_count} documents"
                )
        postings[term] = tuple(sorted(set(indices)))
    return MappingProxyType(postings)


def load(raw: Mapping[str, Any]) -> SearchIndex:
    """Validate a raw index mapping into an immutable :class:`SearchIndex`."""
    if not isinstance(raw, Mapping):
        raise MalformedIndexError(f"Search index must be a mapping, got {type(raw).__name__}")
    try:
        parsed = _RawIndex.model_validate(dict(raw))
    except ValidationError as exc:
        raise MalformedIndexError(f"Invalid search index: {_describe(exc)}") from exc

    lengths = {len(parsed.docnames), len(parsed.filenames), len(parsed.titles)}
    if len(lengths) != 1:
        raise MalformedIndexError(
            "docnames, filenames and titles differ in length: "
            f"{len(parsed.docnames)}, {len(parsed.filenames)}, {len(parsed.titles)}"
        )

    documents = tuple(
        Document(index=index, docname=docname, title=title, filename=filename)
        for index, (docname, title, filename) in enumerate(
            zip(parsed.docnames, parsed.titles, parsed.filenames)
        )
    )
    metadata = {key: _freeze(value) for key, value in raw.items() if key not in _STRUCTURAL_FIELDS}
    return SearchIndex(
        documents=documents,
        terms=_build_postings("terms", parsed.terms, len(documents)),
        titleterms=_build_postings("titleterms", parsed.titleterms, len(documents)),
        metadata=MappingProxyType(metadata),
    )


def load_file(path: Path) -> SearchIndex:
    """Read, parse and validate a search index file."""
    index = load(read_index_file(path))
    LOGGER.info(
        "Loaded %s: %d documents, %d terms", path, len(index), len(index.terms)
    )
    return index


@dataclass(frozen=True, slots=True)
class _Snapshot:
    index: SearchIndex
    source: Optional[Path]
    digest: Optional[str]


class IndexRegistry:
    """Holder of the current index.

    Readers grab the current snapshot without locking. Loads validate the
    new index completely before swapping the single snapshot reference, so
    a failed load leaves the previous index serving.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot: Optional[_Snapshot] = None

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    @property
    def source(self) -> Optional[Path]:
        snapshot = self._snapshot
        return snapshot.source if snapshot is not None else None

    @property
    def digest(self) -> Optional[str]:
        snapshot = self._snapshot
        return snapshot.digest if snapshot is not None else None

    def current(self) -> SearchIndex:
        snapshot = self._snapshot
        if snapshot is None:
            raise IndexNotLoadedError("No search index loaded")
        return snapshot.index

    def install(
        self,
        index: SearchIndex,
        *,
        source: Optional[Path] = None,
        digest: Optional[str] = None,
    ) -> str:
        """Make an already validated index current."""
        with self._lock:
            status = "reloaded" if self._snapshot is not None else "loaded"
            self._snapshot = _Snapshot(index=index, source=source, digest=digest)
        return status

    def load(self, raw: Mapping[str, Any], *, source: Optional[Path] = None) -> SearchIndex:
        index = load(raw)
        self.install(index, source=source)
        return index

    def load_file(self, path: Path) -> str:
        """Load ``path`` and return ``loaded``, ``reloaded`` or ``unchanged``."""
        path = Path(path)
        data = path.read_bytes()
        digest = hashlib.sha256(data).hexdigest()

        snapshot = self._snapshot
        if snapshot is not None and snapshot.source == path and snapshot.digest == digest:
            LOGGER.debug("Index %s unchanged (sha256 %s)", path, digest[:12])
            return "unchanged"

        try:
            index = load(decode(data))
        except MalformedIndexError as exc:
            LOGGER.error("Rejected search index %s: %s", path, exc)
            raise

        status = self.install(index, source=path, digest=digest)
        LOGGER.info(
            "Search index %s %s: %d documents, %d terms",
            path,
            status,
            len(index),
            len(index.terms),
        )
        return status
