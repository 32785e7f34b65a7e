"""Utility helpers for locating search index files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, Optional

INDEX_FILENAMES = ("searchindex.js", "searchindex.json")


def iter_index_paths(inputs: Iterable[Path]) -> Iterator[Path]:
    """Yield search index files from input paths, descending into directories."""
    for item in inputs:
        if item.is_dir():
            yield from iter_index_paths(
                sorted(child for name in INDEX_FILENAMES for child in item.rglob(name))
            )
        elif item.is_file() and item.name.lower() in INDEX_FILENAMES:
            yield item


def find_index_file(path: Path) -> Optional[Path]:
    """Return ``path`` if it is a file, else the shallowest index found below it."""
    if path.is_file():
        return path
    if not path.is_dir():
        return None
    candidates = list(iter_index_paths([path]))
    if not candidates:
        return None
    return min(candidates, key=lambda candidate: (len(candidate.parts), str(candidate)))
