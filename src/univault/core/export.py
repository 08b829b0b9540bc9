"""Static export: render collections through Jinja2 templates into a trailing-slash HTML tree"""

import logging
import shutil
from datetime import date
from pathlib import Path
from typing import Optional

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, TemplateError, TemplateNotFound, select_autoescape

from univault.config import Settings
from univault.core.listing import group_by_subdirectory, latest, list_items, tag_index
from univault.core.models import ContentItem, ExportReport
from univault.core.pages import summarize_page
from univault.core.render import render_markdown
from univault.core.utils.slug import slugify
from univault.core.utils.urls import absolute, route, route_file


logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / 'templates'


def make_env(settings: Settings, build_date: date) -> Environment:
    """Jinja2 environment over the bundled templates, user templates_dir first."""
    loaders = []
    if settings.templates_dir:
        loaders.append(FileSystemLoader(settings.templates_dir))
    loaders.append(FileSystemLoader(TEMPLATES_DIR))
    env = Environment(
        loader=ChoiceLoader(loaders),
        autoescape=select_autoescape(['html', 'xml']),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.globals.update(
        site_name=settings.site_name,
        site_url=settings.site_url,
        nav=settings.nav,
        footer_links=settings.footer_links,
        year=build_date.year,
        item_url=lambda item: item_url(item, settings),
        tag_url=tag_url,
    )
    env.filters['longdate'] = longdate
    return env


def longdate(value: date) -> str:
    return f"{value:%B} {value.day}, {value.year}"


def item_url(item: ContentItem, settings: Settings) -> str:
    return route(settings.collection(item.collection).url_prefix, item.slug)


def tag_url(tag: str) -> str:
    return route('tags', slugify(tag) or 'tag')


def _prepare_output(settings: Settings) -> Path:
    """Empty the output directory and copy static assets into it."""
    output_dir = Path(settings.output_dir)
    resolved = output_dir.resolve()
    protected = [Path.cwd().resolve(), Path(settings.content_dir).resolve(), Path(settings.public_dir).resolve()]
    if any(resolved == p or resolved in p.parents for p in protected):
        raise ValueError(f"Refusing to export into {output_dir}: it contains the working, content, or asset directory")

    if output_dir.exists():
        shutil.rmtree(output_dir)
    output_dir.mkdir(parents=True)

    public_dir = Path(settings.public_dir)
    if public_dir.is_dir():
        shutil.copytree(public_dir, output_dir, dirs_exist_ok=True)
    else:
        logger.warning("Public asset directory not found: %s", public_dir)
    return output_dir


def _tag_pages(items: list[ContentItem]) -> dict[str, tuple[str, list[ContentItem]]]:
    """Group items by tag route; tags differing only in case share a page."""
    pages: dict[str, tuple[str, list[ContentItem]]] = {}
    for tag, tagged in tag_index(items).items():
        url = tag_url(tag)
        if url in pages:
            label, existing = pages[url]
            merged = existing + [i for i in tagged if i not in existing]
            pages[url] = (label, merged)
        else:
            pages[url] = (tag, list(tagged))
    return pages


class _Writer:
    """Renders templates to route files and records the outcome."""

    def __init__(self, env: Environment, report: ExportReport):
        self.env = env
        self.report = report
        self.lastmod: dict[str, Optional[date]] = {}

    def write(self, url: str, template: str, lastmod: Optional[date] = None, **context) -> None:
        if url in self.lastmod:
            logger.error("Route %s is already taken; skipping its %s page", url, template)
            self.report.skipped.append(url)
            return
        try:
            html = self.env.get_template(template).render(page_url=url, **context)
        except TemplateNotFound:
            raise
        except TemplateError as e:
            logger.error("Failed to render %s with %s: %s", url, template, e)
            self.report.skipped.append(url)
            return
        path = route_file(self.report.output_dir, url)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(html, encoding='utf-8')
        self.report.pages.append(url)
        self.lastmod[url] = lastmod


def export_site(settings: Settings, build_date: Optional[date] = None) -> ExportReport:
    """Build the complete static site into settings.output_dir.

    Returns an ExportReport listing every route written and every route
    skipped because its template failed to render or its route was taken.
    """
    build_date = build_date or date.today()
    output_dir = _prepare_output(settings)
    report = ExportReport(output_dir=output_dir)
    env = make_env(settings, build_date)
    writer = _Writer(env, report)

    collections = {name: list_items(name, settings) for name in settings.collections}
    report.items = {name: len(items) for name, items in collections.items()}
    listed = [
        item for name, items in collections.items()
        if name != settings.pages_collection
        for item in items
    ]

    writer.write(
        route(), 'home.html',
        latest_items=latest(collections.get(settings.home_collection, []), settings.home_posts),
        collections={n: settings.collections[n] for n in collections if n != settings.pages_collection},
    )

    for name, items in collections.items():
        if name == settings.pages_collection:
            continue
        spec = settings.collections[name]
        writer.write(
            route(spec.url_prefix), 'collection.html',
            spec=spec, items=items,
            groups=group_by_subdirectory(items) if spec.nested else {'': items},
        )
        for i, item in enumerate(items):
            writer.write(
                item_url(item, settings), 'item.html', item.date,
                item=item, spec=spec,
                doc=render_markdown(item.body, settings.words_per_minute),
                newer=items[i - 1] if i > 0 else None,
                older=items[i + 1] if i + 1 < len(items) else None,
            )

    tag_pages = _tag_pages(listed)
    writer.write(route('tags'), 'tags.html', tags=[(url, label, len(tagged)) for url, (label, tagged) in tag_pages.items()])
    for url, (label, tagged) in tag_pages.items():
        writer.write(url, 'tag.html', tag=label, items=tagged)

    # Standalone pages last: on a route clash the generated page is kept.
    for item in collections.get(settings.pages_collection, []):
        writer.write(
            item_url(item, settings), 'page.html', item.date,
            item=item, doc=render_markdown(item.body, settings.words_per_minute),
            summary=summarize_page(item.body, item.frontmatter),
        )

    sitemap = env.get_template('sitemap.xml').render(entries=[
        (absolute(settings.site_url, url), (writer.lastmod.get(url) or build_date).isoformat())
        for url in report.pages
    ])
    (output_dir / 'sitemap.xml').write_text(sitemap, encoding='utf-8')

    logger.info("Exported %d page(s) to %s (%d skipped)", len(report.pages), output_dir, len(report.skipped))
    return report
