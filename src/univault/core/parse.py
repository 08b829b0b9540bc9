"""File discovery and frontmatter extraction"""

import re
from pathlib import Path
from typing import Any

import yaml

from univault.core.models import ParsedDoc


FRONTMATTER_RE = re.compile(r'^\ufeff?---[ \t]*\r?\n(?:(.*?)\r?\n)??---[ \t]*(?:\r?\n|$)', re.DOTALL)
MD_EXTENSIONS = {'.md', '.mdx'}


class FrontmatterLoader(yaml.SafeLoader):
    """SafeLoader that keeps impossible dates (2024-02-30) as plain strings."""


def _construct_timestamp(loader: FrontmatterLoader, node: yaml.ScalarNode):
    try:
        return loader.construct_yaml_timestamp(node)
    except ValueError:
        return loader.construct_scalar(node)


FrontmatterLoader.add_constructor('tag:yaml.org,2002:timestamp', _construct_timestamp)


def _strip_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with YAML header removed."""
    m = FRONTMATTER_RE.match(text)
    if m:
        try:
            fm = yaml.load(m.group(1) or '', Loader=FrontmatterLoader) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML frontmatter: {e}") from e
        if not isinstance(fm, dict):
            raise ValueError(f"Invalid YAML frontmatter: expected a mapping, got {type(fm).__name__}")
        return fm, text[m.end():]
    return {}, text


def discover_files(path: Path, recursive: bool = True) -> list[Path]:
    """Return sorted .md/.mdx files under path, or [path] if a single file."""
    if path.is_file():
        return [path] if path.suffix in MD_EXTENSIONS else []
    if not path.is_dir():
        return []
    pattern = path.rglob('*') if recursive else path.glob('*')
    return sorted(p for p in pattern if p.is_file() and p.suffix in MD_EXTENSIONS)


def slug_for(path: Path, root: Path, nested: bool = False) -> str:
    """Derive a slug 1:1 from the filename; nested collections keep subdirectories."""
    if nested:
        return path.relative_to(root).with_suffix('').as_posix()
    return path.stem


def parse_file(path: Path) -> ParsedDoc:
    """Read a markdown file and split it into frontmatter and body.

    Raises OSError if the file cannot be read and ValueError if the
    frontmatter is not a YAML mapping.
    """
    raw = path.read_text(encoding='utf-8')
    frontmatter, body = _strip_frontmatter(raw)
    return ParsedDoc(path=path, raw=raw, body=body, frontmatter=frontmatter)
