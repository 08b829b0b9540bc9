"""Slug generation for tag routes and heading anchors"""

import re
import unicodedata


def slugify(text: str) -> str:
    """Lowercase, hyphen-separated slug usable as a URL segment or an HTML id.

    Accents are folded ('Über' -> 'uber'); letters without an ASCII form
    (CJK, Greek, ...) are kept as is.
    """
    text = unicodedata.normalize('NFKD', text)
    text = ''.join(c for c in text if not unicodedata.combining(c)).casefold()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')


def unique_slug(text: str, seen: dict[str, int], fallback: str = 'section') -> str:
    """Slugify text, suffixing -1, -2, ... for repeats tracked in seen."""
    base = slugify(text) or fallback
    count = seen.get(base, 0)
    seen[base] = count + 1
    return base if count == 0 else f"{base}-{count}"
