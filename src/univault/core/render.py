"""Markdown + math serialization with markdown-it"""

import math
import re
from functools import lru_cache

from markdown_it import MarkdownIt
from mdit_py_plugins.dollarmath import dollarmath_plugin

from univault.core.models import Heading, RenderedDoc
from univault.core.utils.slug import unique_slug
from univault.core.utils.tokens import heading_level, inline_text


WORD_RE = re.compile(r'\w+')


@lru_cache(maxsize=None)
def make_parser(preset: str = 'commonmark') -> MarkdownIt:
    """Build a MarkdownIt instance with tables, strikethrough, and $/$$ math."""
    return (
        MarkdownIt(preset, {"html": True, "linkify": False})
        .enable('table')
        .enable('strikethrough')
        .use(dollarmath_plugin, double_inline=True)
    )


def render_markdown(body: str, words_per_minute: int = 200) -> RenderedDoc:
    """Render a normalized markdown body to HTML and collect its headings.

    Headings get slugified id anchors, de-duplicated in document order.
    """
    md = make_parser()
    env: dict = {}
    tokens = md.parse(body, env)

    headings: list[Heading] = []
    seen: dict[str, int] = {}
    words = 0
    for i, tok in enumerate(tokens):
        if tok.type == 'inline':
            words += len(WORD_RE.findall(inline_text(tok)))
            continue
        level = heading_level(tok)
        if level is None or i + 1 >= len(tokens):
            continue
        text = inline_text(tokens[i + 1]).strip()
        anchor = unique_slug(text, seen)
        tok.attrSet('id', anchor)
        headings.append(Heading(level=level, text=text, anchor=anchor))

    html = md.renderer.render(tokens, md.options, env)
    return RenderedDoc(
        html=html,
        headings=headings,
        word_count=words,
        reading_time=max(1, math.ceil(words / words_per_minute)),
    )
