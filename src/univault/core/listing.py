"""Content lister: enumerate, sort, look up, and group items of a collection"""

import logging
from collections import defaultdict
from datetime import date
from pathlib import Path, PurePosixPath
from typing import Iterable, Optional

from univault.config import Settings
from univault.core.loader import load_item
from univault.core.models import ContentItem
from univault.core.parse import MD_EXTENSIONS, discover_files


logger = logging.getLogger(__name__)


def _sort_key(item: ContentItem) -> tuple:
    # Undated items sort first; ties fall back to slug so listings are stable.
    ordinal = item.date.toordinal() if item.date else date.max.toordinal() + 1
    return (-ordinal, item.slug)


def sort_items(items: Iterable[ContentItem]) -> list[ContentItem]:
    """Sort by date descending, undated items first."""
    return sorted(items, key=_sort_key)


def collection_files(collection: str, settings: Settings) -> list[Path]:
    """Return the markdown files of a collection; [] (with a warning) if its directory is missing."""
    spec = settings.collection(collection)
    root = settings.collection_dir(collection)
    if not root.is_dir():
        logger.warning("Content directory for '%s' not found: %s", collection, root)
        return []
    return discover_files(root, recursive=spec.nested)


def list_items(collection: str, settings: Settings) -> list[ContentItem]:
    """Load every item of a collection, skipping unloadable files and duplicate slugs."""
    items: dict[str, ContentItem] = {}
    for path in collection_files(collection, settings):
        item = load_item(path, collection, settings)
        if item is None:
            continue
        if item.slug in items:
            logger.error(
                "Duplicate slug '%s' in %s: %s ignored (already defined by %s)",
                item.slug, collection, path, items[item.slug].source_path,
            )
            continue
        items[item.slug] = item
    return sort_items(items.values())


def list_slugs(collection: str, settings: Settings) -> list[str]:
    return [item.slug for item in list_items(collection, settings)]


def get_item(collection: str, slug: str, settings: Settings) -> Optional[ContentItem]:
    """Load one item by slug, or None if no such file exists."""
    rel = PurePosixPath(slug)
    nested = settings.collection(collection).nested
    if not slug or rel.is_absolute() or '..' in rel.parts or (len(rel.parts) > 1 and not nested):
        logger.warning("Rejected slug %r for '%s'", slug, collection)
        return None
    root = settings.collection_dir(collection)
    for ext in sorted(MD_EXTENSIONS):
        path = root / f"{slug}{ext}"
        if path.is_file():
            return load_item(path, collection, settings)
    logger.warning("No '%s' item with slug '%s' under %s", collection, slug, root)
    return None


def filter_by_tag(items: Iterable[ContentItem], tag: str) -> list[ContentItem]:
    """Items carrying tag (case-insensitive), in their existing order."""
    needle = tag.strip().casefold()
    return [item for item in items if any(t.casefold() == needle for t in item.tags)]


def tag_index(items: Iterable[ContentItem]) -> dict[str, list[ContentItem]]:
    """Map each tag to the items carrying it, tags sorted by item count then name."""
    index: dict[str, list[ContentItem]] = defaultdict(list)
    for item in items:
        for tag in item.tags:
            index[tag].append(item)
    return dict(sorted(index.items(), key=lambda kv: (-len(kv[1]), kv[0].casefold())))


def group_by_subdirectory(items: Iterable[ContentItem]) -> dict[str, list[ContentItem]]:
    """Group nested-collection items by their first path segment ('' for top-level files)."""
    groups: dict[str, list[ContentItem]] = defaultdict(list)
    for item in items:
        head, _, rest = item.slug.partition('/')
        groups[head if rest else ''].append(item)
    return dict(groups)


def latest(items: Iterable[ContentItem], n: int) -> list[ContentItem]:
    """The n most recent dated items."""
    return [item for item in sort_items(items) if item.date][:n]
