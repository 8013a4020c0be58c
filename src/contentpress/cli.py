"""Command line interface for ContentPress."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from contentpress.config import AppConfig
from contentpress.content.collections import ContentCollection, default_collections
from contentpress.errors import ComponentSyntaxError, DocumentNotFoundError, UnregisteredComponentError
from contentpress.index.datasets import DATASETS, dataset_path, load_dataset
from contentpress.index.indexer import IndexStats
from contentpress.index.search import ListingState, apply_listing
from contentpress.web.app import app as web_app

console = Console()
app = typer.Typer(help="ContentPress - MDX content pipeline for the media site")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _get_collection(name: str, content_root: Optional[Path]) -> ContentCollection:
    config = AppConfig(content_root=content_root)
    collections = default_collections(config, Path.cwd())
    if name not in collections:
        raise typer.BadParameter(
            f"Unknown collection '{name}'. Choose one of: {', '.join(collections)}"
        )
    return collections[name]


@app.command()
def index(
    collection: str = typer.Argument(..., help="Collection name (articles, topics, guides)."),
    content_root: Path = typer.Option(None, "--content-root", help="Directory holding the collections"),
    as_json: bool = typer.Option(False, "--json", help="Print the index as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Show the date-sorted metadata index of a collection."""
    _setup_logging(verbose)
    target = _get_collection(collection, content_root)
    stats = IndexStats()
    records = target.index(stats)

    if as_json:
        typer.echo(json.dumps([record.to_dict() for record in records], ensure_ascii=False, indent=2, default=str))
        return

    if not records:
        console.print(f"[yellow]No documents found under {target.root}.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Date")
    table.add_column("Slug")
    table.add_column("Title")
    table.add_column("Category")
    table.add_column("Tags")
    for record in records:
        table.add_row(record.date, record.slug, record.title, record.category or "", ", ".join(record.tags))
    console.print(table)
    console.print(f"Indexed: {stats.indexed}, failed: {stats.failed}")


@app.command()
def show(
    collection: str = typer.Argument(..., help="Collection name"),
    slug: str = typer.Argument(..., help="Document slug, e.g. guide/first-steps"),
    content_root: Path = typer.Option(None, "--content-root", help="Directory holding the collections"),
    html: bool = typer.Option(False, "--html", help="Print the rendered HTML"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Compile a single document and print its outline or HTML."""
    _setup_logging(verbose)
    target = _get_collection(collection, content_root)
    try:
        document, compiled, rendered = target.render(slug)
    except DocumentNotFoundError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)
    except (UnregisteredComponentError, ComponentSyntaxError) as exc:
        console.print(f"[red]Compilation failed: {exc}[/red]")
        raise typer.Exit(code=2)

    if html:
        typer.echo(rendered)
        return

    console.print(f"[bold]{document.frontmatter.get('title', slug)}[/bold] ({document.path})")
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Level")
    table.add_column("Heading")
    table.add_column("Anchor")
    for heading in compiled.headings:
        table.add_row(f"h{heading.level}", heading.text, f"#{heading.id}")
    console.print(table)
    if compiled.components:
        console.print("Components: " + ", ".join(call.name for call in compiled.components))


@app.command()
def listing(
    dataset: str = typer.Argument(..., help=f"Dataset name ({', '.join(DATASETS)})"),
    q: str = typer.Option("", "--q", help="Search text"),
    cat: str = typer.Option("", "--cat", help="Category filter"),
    page: int = typer.Option(1, "--page", help="1-indexed page number"),
    data_dir: Path = typer.Option(None, "--data-dir", help="Directory holding the JSON datasets"),
    page_size: int = typer.Option(AppConfig().page_size, help="Items per page"),
) -> None:
    """Search, filter and paginate a static listing dataset."""
    config = AppConfig(data_dir=data_dir, page_size=page_size)
    path = dataset_path(config.resolve_data_dir(Path.cwd()), dataset)
    result = load_dataset(path)
    if result.error:
        console.print(f"[yellow]{result.error}[/yellow]")

    state = ListingState.from_params(q=q, cat=cat, page=page)
    current = apply_listing(result.items, state, config.page_size)
    if not current.items:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Date")
    table.add_column("Slug")
    table.add_column("Title")
    table.add_column("Category")
    for item in current.items:
        table.add_row(item.date or "", item.slug, item.title, item.category or "")
    console.print(table)
    console.print(f"Page {current.page} / {current.total_pages} ({current.total} items)")


@app.command()
def web(
    host: str = typer.Option(AppConfig().host, help="Host interface"),
    port: int = typer.Option(AppConfig().port, help="Server port"),
) -> None:
    """Start the web server."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    console.print(f"Starting web server on http://{host}:{port}")
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
