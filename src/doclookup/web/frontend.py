"""Search page served at the web root."""

from __future__ import annotations

from functools import lru_cache
from html import escape
from importlib.resources import files

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from doclookup.config import AppConfig
from doclookup.index.search import MATCH_ALL, MATCH_MODES

router = APIRouter()

_MATCH_LABELS = {MATCH_ALL: "all words"}


@lru_cache(maxsize=1)
def _load_template() -> str:
    template = files("doclookup.web").joinpath("templates", "index.html")
    return template.read_text(encoding="utf-8")


def _match_options(selected: str) -> str:
    options = []
    for mode in MATCH_MODES:
        label = _MATCH_LABELS.get(mode, f"{mode} word")
        marker = " selected" if mode == selected else ""
        options.append(f'      <option value="{escape(mode)}"{marker}>{escape(label)}</option>')
    return "\n".join(options)


def render_page(config: AppConfig | None = None) -> str:
    """Fill the search page with the configured match modes."""
    config = config or AppConfig()
    return _load_template().replace("{{ match_options }}", _match_options(config.match))


@router.get("/", response_class=HTMLResponse)
async def index() -> HTMLResponse:
    return HTMLResponse(content=render_page())
