"""Content loader: one markdown file -> one normalized ContentItem"""

import logging
from pathlib import Path
from typing import Optional

from univault.config import Settings
from univault.core.models import ContentItem
from univault.core.normalize import (
    asset_url,
    first_paragraph,
    normalize_tags,
    parse_date,
    rewrite_image_paths,
    rewrite_math_delimiters,
    truncate,
)
from univault.core.parse import parse_file, slug_for


logger = logging.getLogger(__name__)


def _title_from_path(path: Path) -> str:
    return path.stem.replace('-', ' ').replace('_', ' ').title()


def _optional_str(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _json_safe(value):
    """Convert YAML-native dates nested in frontmatter to ISO strings."""
    if isinstance(value, dict):
        return {str(k): _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    if hasattr(value, 'isoformat'):
        return value.isoformat()
    return value


def load_item(path: Path, collection: str, settings: Settings) -> Optional[ContentItem]:
    """Load and normalize a single content file.

    Returns None (and logs a warning) when the file is missing, unreadable,
    or has malformed frontmatter. A bad date or a missing image only nulls
    that field; the item still loads.
    """
    spec = settings.collection(collection)
    root = settings.collection_dir(collection)
    public_dir = Path(settings.public_dir)

    try:
        parsed = parse_file(path)
    except FileNotFoundError:
        logger.warning("Content file not found: %s", path)
        return None
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read %s: %s", path, e)
        return None
    except ValueError as e:
        logger.warning("Skipping %s: %s", path, e)
        return None

    fm = dict(parsed.frontmatter)

    try:
        item_date = parse_date(fm.get('date'))
    except ValueError:
        logger.warning("Invalid date %r in %s; leaving it unset", fm.get('date'), path)
        item_date = None
    fm['date'] = item_date.isoformat() if item_date else None

    image = None
    if raw_image := _optional_str(fm.get('image')):
        image = asset_url(raw_image, public_dir)
        if image is None:
            logger.warning("Image %r in %s not found under %s", raw_image, path, public_dir)
    fm['image'] = image

    tags = normalize_tags(fm.get('tags'))
    fm['tags'] = tags

    def _missing_embedded(ref: str) -> None:
        logger.warning("Embedded image %r in %s not found under %s", ref, path, public_dir)

    body = rewrite_image_paths(parsed.body, public_dir, on_missing=_missing_embedded)
    body = rewrite_math_delimiters(body)

    excerpt = _optional_str(fm.get('excerpt')) or _optional_str(fm.get('description'))
    if excerpt is None:
        excerpt = truncate(first_paragraph(body), settings.excerpt_length)

    try:
        slug = slug_for(path, root, nested=spec.nested)
    except ValueError:
        slug = path.stem              # file outside the collection root

    return ContentItem(
        collection=collection,
        slug=slug,
        title=_optional_str(fm.get('title')) or _title_from_path(path),
        date=item_date,
        excerpt=excerpt,
        author=_optional_str(fm.get('author')),
        image=image,
        tags=tags,
        frontmatter=_json_safe(fm),
        body=body,
        source_path=path.as_posix(),
    )
