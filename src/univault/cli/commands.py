"""CLI command implementations"""

import json
import logging
from typing import Annotated, Optional

import typer

from univault.config import Settings, load_config
from univault.core.export import export_site
from univault.core.listing import collection_files, filter_by_tag, get_item, list_items
from univault.core.render import render_markdown


LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output")] = False,
    ):
    """Configure logging before any command runs."""
    level = "DEBUG" if verbose else _settings().log_level
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)


def build_cmd(
    content: Annotated[Optional[str], typer.Option("--content-dir", help="Markdown content root")] = None,
    public: Annotated[Optional[str], typer.Option("--public-dir", help="Static asset root")] = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    site_url: Annotated[Optional[str], typer.Option("--site-url", help="Absolute base URL for the sitemap")] = None,
    templates: Annotated[Optional[str], typer.Option("--templates-dir", help="Templates overriding the bundled ones")] = None,
    ):
    """Export the whole site: pages, collection indexes, tag pages, and sitemap."""
    settings = _settings(overrides={
        "content_dir": content, "public_dir": public, "output_dir": out,
        "site_url": site_url, "templates_dir": templates,
    })
    try:
        report = export_site(settings)
    except ValueError as e:
        _fail(str(e))
    except Exception as e:
        _fail("Export failed", e)

    for name, count in report.items.items():
        typer.echo(f"  {name}: {count} item(s)")
    for url in report.skipped:
        typer.echo(f"  skipped: {url}", err=True)
    typer.echo(f"Exported {len(report.pages)} page(s) to {report.output_dir}/")


def list_cmd(
    collection: Annotated[str, typer.Argument(help="Collection name, e.g. posts or theory")],
    tag: Annotated[Optional[str], typer.Option("--tag", help="Only items carrying this tag")] = None,
    ):
    """List a collection newest first: date, slug, title."""
    settings = _settings()
    try:
        items = list_items(collection, settings)
    except KeyError as e:
        _fail(e.args[0])
    if tag:
        items = filter_by_tag(items, tag)
    if not items:
        typer.echo("No items found.")
        raise typer.Exit(1)
    for item in items:
        typer.echo(f"{item.date_str or '----------'}  {item.slug}  {item.title}")


def show_cmd(
    collection: Annotated[str, typer.Argument(help="Collection name")],
    slug: Annotated[str, typer.Argument(help="Item slug (nested collections: dir/name)")],
    html: Annotated[bool, typer.Option("--html", help="Print the rendered body instead of metadata")] = False,
    ):
    """Print one item's normalized metadata as JSON."""
    settings = _settings()
    try:
        item = get_item(collection, slug, settings)
    except KeyError as e:
        _fail(e.args[0])
    if item is None:
        _fail(f"No '{collection}' item with slug '{slug}'")

    if html:
        typer.echo(render_markdown(item.body, settings.words_per_minute).html)
    else:
        typer.echo(json.dumps(item.metadata(), indent=2, ensure_ascii=False))


def check_cmd():
    """Load every collection and report files that fail to load."""
    settings = _settings()
    failed = 0
    for name in settings.collections:
        files = collection_files(name, settings)
        loaded = len(list_items(name, settings))
        failed += len(files) - loaded
        typer.echo(f"  {name}: {loaded}/{len(files)} loaded")
    if failed:
        typer.echo(f"{failed} file(s) failed to load; see the warnings above.", err=True)
        raise typer.Exit(1)
    typer.echo("All content loaded.")
