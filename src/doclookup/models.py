"""Core DocLookup data models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Document:
    """One page of the generated documentation."""

    index: int
    docname: str
    title: str
    filename: str


@dataclass(frozen=True, slots=True)
class SearchHit:
    """A document matched by a query, as rendered by a search widget."""

    index: int
    docname: str
    title: str
    filename: str

    @classmethod
    def from_document(cls, document: Document) -> "SearchHit":
        return cls(
            index=document.index,
            docname=document.docname,
            title=document.title,
            filename=document.filename,
        )
