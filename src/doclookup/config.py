"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from doclookup.index.search import DEFAULT_MATCH

# Usual Sphinx HTML build locations, relative to the working directory.
_INDEX_CANDIDATES = (
    Path("_build/html/searchindex.js"),
    Path("build/html/searchindex.js"),
    Path("docs/_build/html/searchindex.js"),
)


def _get_default_index_path() -> Path:
    """Get the default search index path for the current working directory."""
    for candidate in _INDEX_CANDIDATES:
        if candidate.exists():
            return candidate
    return Path("searchindex.js")


@dataclass(slots=True)
class AppConfig:
    index_path: Path | None = None
    match: str = DEFAULT_MATCH
    max_results: int = 50

    def __post_init__(self) -> None:
        if self.index_path is None:
            self.index_path = _get_default_index_path()

    def resolve_index_path(self, base_dir: Path | None = None) -> Path:
        if self.index_path is None:
            self.index_path = _get_default_index_path()
        if Path(self.index_path).is_absolute() or base_dir is None:
            return Path(self.index_path)
        return base_dir / self.index_path
