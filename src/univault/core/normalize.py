"""Frontmatter and body normalization: dates, tags, asset paths, math delimiters, excerpts"""

import re
from datetime import date, datetime
from itertools import groupby
from pathlib import Path, PurePosixPath
from typing import Any, Callable, Optional

from univault.core.render import make_parser


DATE_FORMATS = (
    '%Y-%m-%d',
    '%Y/%m/%d',
    '%Y.%m.%d',
    '%B %d, %Y',
    '%b %d, %Y',
    '%B %d %Y',
    '%d %B %Y',
    '%d %b %Y',
)

REMOTE_PREFIXES = ('http://', 'https://', '//', 'data:')

# Inline code spans are never rewritten; code blocks are found by the markdown parser.
CODE_SPAN_RE = re.compile(r'(?P<ticks>`+)[^`\n]+?(?P=ticks)')
CODE_BLOCK_TOKENS = ('fence', 'code_block')
MD_IMAGE_RE = re.compile(r'(!\[[^\]]*\]\(\s*<?)([^)\s>]+)(>?(?:\s+"[^"]*")?\s*\))')
HTML_IMG_RE = re.compile(r'(<img\b[^>]*?\bsrc=)(["\'])(.*?)\2', re.IGNORECASE)

MATH_DELIMITERS = (
    ('\\[', '$$'),
    ('\\]', '$$'),
    ('\\(', '$'),
    ('\\)', '$'),
)


# --- dates ---

def parse_date(value: Any) -> Optional[date]:
    """Return a calendar date for a frontmatter value; None when unset.

    Raises ValueError for values that are set but not a recognizable date.
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"not a date: {value!r}")

    text = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text.replace('Z', '+00:00')).date()
    except ValueError:
        raise ValueError(f"not a date: {value!r}") from None


# --- tags ---

def normalize_tags(value: Any) -> list[str]:
    """Return ordered unique non-empty tags from a list or comma-separated string."""
    if value is None:
        return []
    if isinstance(value, str):
        raw = value.split(',')
    elif isinstance(value, (list, tuple, set)):
        raw = [str(v) for v in value if v is not None]
    else:
        raw = [str(value)]
    return list(dict.fromkeys(t.strip() for t in raw if t.strip()))


# --- assets ---

def is_remote(ref: str) -> bool:
    return ref.lower().startswith(REMOTE_PREFIXES)


def asset_url(ref: str, public_dir: Path) -> Optional[str]:
    """Map an asset reference to a site-absolute URL if the file exists under public_dir.

    '/images/a.png', 'images/a.png' and '../../public/images/a.png' all map
    to '/images/a.png'. Remote URLs are returned unchanged. Returns None when
    the file is missing or the reference escapes public_dir.
    """
    ref = ref.strip()
    if not ref:
        return None
    if is_remote(ref):
        return ref

    path = re.split(r'[?#]', ref.replace('\\', '/'), maxsplit=1)[0]
    if 'public/' in path:
        path = path.rsplit('public/', 1)[1]
    rel = PurePosixPath(path.lstrip('/'))
    if not rel.parts or '..' in rel.parts:
        return None

    root = public_dir.resolve()
    candidate = (root / rel).resolve()
    if not candidate.is_relative_to(root) or not candidate.is_file():
        return None
    return '/' + rel.as_posix()


def _code_block_lines(text: str) -> set[int]:
    """Line numbers covered by fenced or indented code blocks, at any nesting depth."""
    lines: set[int] = set()
    for tok in make_parser().parse(text):
        if tok.type in CODE_BLOCK_TOKENS and tok.map:
            lines.update(range(*tok.map))
    return lines


def _outside_spans(text: str, transform: Callable[[str], str]) -> str:
    out = []
    last = 0
    for m in CODE_SPAN_RE.finditer(text):
        out.append(transform(text[last:m.start()]))
        out.append(m.group(0))
        last = m.end()
    out.append(transform(text[last:]))
    return ''.join(out)


def _outside_code(text: str, transform: Callable[[str], str]) -> str:
    """Apply transform to every stretch of text that is not a code block or code span."""
    code = _code_block_lines(text)
    chunks = []
    for is_code, group in groupby(enumerate(text.split('\n')), key=lambda pair: pair[0] in code):
        chunk = '\n'.join(line for _, line in group)
        chunks.append(chunk if is_code else _outside_spans(chunk, transform))
    return '\n'.join(chunks)


def rewrite_image_paths(body: str, public_dir: Path, on_missing: Callable[[str], None] = None) -> str:
    """Rewrite local markdown/HTML image references to site-absolute URLs.

    Missing local images are reported through on_missing and left as written.
    """
    def _resolve(ref: str) -> str:
        if is_remote(ref):
            return ref
        url = asset_url(ref, public_dir)
        if url is None:
            if on_missing:
                on_missing(ref)
            return ref
        return url

    def _transform(chunk: str) -> str:
        chunk = MD_IMAGE_RE.sub(lambda m: m.group(1) + _resolve(m.group(2)) + m.group(3), chunk)
        return HTML_IMG_RE.sub(lambda m: f'{m.group(1)}{m.group(2)}{_resolve(m.group(3))}{m.group(2)}', chunk)

    return _outside_code(body, _transform)


# --- math ---

def rewrite_math_delimiters(body: str) -> str:
    """Convert \\( \\) and \\[ \\] math escapes to the $ and $$ delimiters the renderer reads."""
    def _transform(chunk: str) -> str:
        for old, new in MATH_DELIMITERS:
            chunk = chunk.replace(old, new)
        return chunk

    return _outside_code(body, _transform)


# --- excerpts ---

_STRIP_INLINE = (
    (re.compile(r'!\[[^\]]*\]\([^)]*\)'), ''),           # images
    (re.compile(r'\[([^\]]*)\]\([^)]*\)'), r'\1'),       # links -> text
    (re.compile(r'<[^>]+>'), ''),                        # inline html / jsx
    (re.compile(r'[*_~`]+'), ''),                        # emphasis and code marks
    (re.compile(r'\s+'), ' '),
)
_NON_PROSE = ('#', '```', '~~~', '<', '>', '|', '- ', '* ', '+ ', 'import ', 'export ', '$$', '---')


def first_paragraph(body: str) -> str:
    """Return the first prose paragraph of a markdown body as plain text, or ''."""
    code = _code_block_lines(body)
    text = '\n'.join('' if n in code else line for n, line in enumerate(body.split('\n')))
    for block in re.split(r'\n\s*\n', text):
        block = block.strip()
        if not block or block.startswith(_NON_PROSE) or re.match(r'\d+\.\s', block):
            continue
        for pattern, repl in _STRIP_INLINE:
            block = pattern.sub(repl, block)
        block = block.strip()
        if block:
            return block
    return ''


def truncate(text: str, length: int) -> str:
    """Cut text to at most length characters on a word boundary, adding an ellipsis."""
    if len(text) <= length:
        return text
    cut = text[:length - 1].rsplit(' ', 1)[0].rstrip(' ,.;:')
    return f"{cut}…"
