"""Exceptions raised by DocLookup."""

from __future__ import annotations


class DocLookupError(Exception):
    """Base class for all DocLookup errors."""


class MalformedIndexError(DocLookupError, ValueError):
    """The search index failed structural validation and was not loaded."""


class NotFoundError(DocLookupError, LookupError):
    """A requested document does not exist in the loaded index."""


class IndexNotLoadedError(NotFoundError):
    """No search index has been loaded yet."""
