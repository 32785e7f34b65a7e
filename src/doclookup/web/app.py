"""FastAPI application backing the DocLookup search widget."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from doclookup.config import AppConfig
from doclookup.errors import MalformedIndexError, NotFoundError
from doclookup.index.search import Searcher
from doclookup.index.store import IndexRegistry
from doclookup.models import Document, SearchHit
from doclookup.utils.files import find_index_file
from doclookup.web.frontend import router as frontend_router

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="DocLookup Web", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(frontend_router)

registry = IndexRegistry()


class SearchPayload(BaseModel):
    query: str
    index: Path | None = None
    match: str | None = None


class ReloadPayload(BaseModel):
    index: Path | None = None


def _resolve_index_path(index: Path | None) -> Path:
    if index is None:
        index = getattr(app.state, "index_path", None)
    config = AppConfig(index_path=index if index is not None else AppConfig().index_path)
    resolved = config.resolve_index_path(Path.cwd())
    return find_index_file(resolved) or resolved


def _load(index_path: Path) -> str:
    if not index_path.is_file():
        raise HTTPException(
            status_code=404,
            detail=f"Search index not found at {index_path}. "
            "Build the documentation with Sphinx first.",
        )
    try:
        return registry.load_file(index_path)
    except MalformedIndexError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except OSError as exc:
        LOGGER.error("Unable to read %s: %s", index_path, exc)
        raise HTTPException(status_code=500, detail=f"Unable to read search index: {exc}") from exc


def _ensure_loaded(index: Path | None) -> IndexRegistry:
    index_path = _resolve_index_path(index)
    if not registry.is_loaded or registry.source != index_path:
        _load(index_path)
    return registry


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@app.post("/search")
async def search_documents(payload: SearchPayload) -> dict[str, Any]:
    query = payload.query.strip()
    if not query:
        return {"results": [], "total": 0}

    config = AppConfig()
    try:
        searcher = Searcher(_ensure_loaded(payload.index), match=payload.match or config.match)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    results: List[SearchHit] = searcher.search(query)
    return {"results": results[: config.max_results], "total": len(results)}


@app.get("/documents")
async def list_documents(index: Path | None = None) -> dict[str, Any]:
    """List all documents of the search index."""
    loaded = _ensure_loaded(index).current()
    return {"documents": list(loaded.documents), "stats": loaded.stats()}


@app.get("/documents/{doc_index}")
async def get_document(doc_index: int, index: Path | None = None) -> Document:
    """Return one document by its index."""
    loaded = _ensure_loaded(index).current()
    try:
        return loaded.get_document(doc_index)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@app.post("/reload")
async def reload_index(payload: ReloadPayload) -> dict[str, Any]:
    """Reload the search index; a malformed file keeps the previous one serving."""
    index_path = _resolve_index_path(payload.index)
    status = _load(index_path)
    return {"status": status, "index": str(index_path), "stats": registry.current().stats()}
