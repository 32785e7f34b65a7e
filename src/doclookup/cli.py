"""Command line interface for DocLookup."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from doclookup.config import AppConfig
from doclookup.errors import MalformedIndexError, NotFoundError
from doclookup.index.search import Searcher
from doclookup.index.store import IndexRegistry
from doclookup.utils.files import find_index_file
from doclookup.web.app import app as web_app


console = Console()
app = typer.Typer(help="DocLookup - term search over Sphinx search indexes")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _resolve_index(index: Path | None) -> Path:
    config = AppConfig(index_path=index if index is not None else AppConfig().index_path)
    resolved = config.resolve_index_path(Path.cwd())
    found = find_index_file(resolved)
    if found is None:
        raise typer.BadParameter(f"Search index not found: {resolved}")
    return found


def _open_searcher(index_path: Path, match: str) -> Searcher:
    registry = IndexRegistry()
    try:
        registry.load_file(index_path)
    except MalformedIndexError as exc:
        console.print(f"[red]Malformed search index:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    try:
        return Searcher(registry, match=match)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command()
def search(
    query: str = typer.Argument(..., help="Query text"),
    index: Path = typer.Option(None, "--index", help="searchindex.js file or HTML build directory"),
    match: str = typer.Option(AppConfig().match, help="Combine terms with 'all' or 'any'"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Search the index for documents matching a query."""
    _setup_logging(verbose)
    searcher = _open_searcher(_resolve_index(index), match)

    results = searcher.search(query)
    if not results:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#")
    table.add_column("Title")
    table.add_column("File")

    for result in results:
        table.add_row(str(result.index), escape(result.title), escape(result.filename))

    console.print(table)


@app.command()
def documents(
    index: Path = typer.Option(None, "--index", help="searchindex.js file or HTML build directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """List every document in the index."""
    _setup_logging(verbose)
    searcher = _open_searcher(_resolve_index(index), AppConfig().match)
    loaded = searcher.registry.current()

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#")
    table.add_column("Name")
    table.add_column("Title")
    table.add_column("File")
    for document in loaded.documents:
        table.add_row(
            str(document.index),
            escape(document.docname),
            escape(document.title),
            escape(document.filename),
        )
    console.print(table)
    console.print(f"{len(loaded)} documents, {len(loaded.terms)} terms.")


@app.command()
def show(
    document: int = typer.Argument(..., help="Document index"),
    index: Path = typer.Option(None, "--index", help="searchindex.js file or HTML build directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Show a single document by its index."""
    _setup_logging(verbose)
    searcher = _open_searcher(_resolve_index(index), AppConfig().match)
    try:
        found = searcher.get_document(document)
    except NotFoundError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc

    console.print(f"[bold]{escape(found.title)}[/bold]")
    console.print(f"Name: {escape(found.docname)}")
    console.print(f"File: {escape(found.filename)}")


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
    index: Path = typer.Option(None, "--index", help="searchindex.js file or HTML build directory"),
) -> None:
    """Start the web interface."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    config = AppConfig(index_path=index if index is not None else AppConfig().index_path)
    resolved = config.resolve_index_path(Path.cwd())
    found = find_index_file(resolved)
    if found is None:
        console.print("[yellow]Warning: search index not found, searches might fail.[/yellow]")
    else:
        web_app.state.index_path = found
        resolved = found

    console.print(f"Starting web interface on http://{host}:{port} (index: {resolved})")
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
