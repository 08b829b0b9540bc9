"""Structured summaries of standalone pages (about, declaration)"""

import logging
import re
from typing import Optional

from univault.config import Settings
from univault.core.listing import get_item
from univault.core.models import PageSummary
from univault.core.normalize import first_paragraph


logger = logging.getLogger(__name__)

BULLET_RE = re.compile(r'^[ \t]*[-*][ \t]+(.+?)[ \t]*$', re.MULTILINE)
VISION_RE = re.compile(r'^##[ \t]+Vision[ \t]*\n(.*?)(?=^##[ \t]|\Z)', re.MULTILINE | re.DOTALL)


def _as_list(value) -> list:
    if value is None:
        return []
    return list(value) if isinstance(value, (list, tuple)) else [value]


def summarize_page(body: str, frontmatter: dict) -> PageSummary:
    """Pull introduction, bullet lists, and the Vision section out of a page body."""
    vision = VISION_RE.search(body)
    return PageSummary(
        introduction=first_paragraph(body),
        challenges=BULLET_RE.findall(body),
        features=_as_list(frontmatter.get('features')),
        vision=BULLET_RE.findall(vision.group(1)) if vision else [],
        research=_as_list(frontmatter.get('research')),
        metadata=frontmatter,
    )


def load_page_summary(name: str, settings: Settings, collection: str = 'pages') -> Optional[PageSummary]:
    """Load content/pages/<name> and summarize it; None if the page is missing."""
    item = get_item(collection, name, settings)
    if item is None:
        return None
    return summarize_page(item.body, item.frontmatter)
