"""Data models for the load, render, and export pipeline"""

from dataclasses import dataclass, field
import datetime as dt
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class ContentItem(BaseModel):
    """A normalized content file. Built once per build and never mutated."""
    model_config = ConfigDict(frozen=True)

    collection:  str
    slug:        str                # filename stem, or relative path for nested collections
    title:       str
    date:        Optional[dt.date] = None
    excerpt:     str = ""
    author:      Optional[str] = None
    image:       Optional[str] = None   # site-absolute URL path, remote URL, or None
    tags:        list[str] = []
    frontmatter: dict[str, Any] = {}
    body:        str                # markdown with image paths and math delimiters rewritten
    source_path: str

    @property
    def date_str(self) -> Optional[str]:
        return self.date.isoformat() if self.date else None

    def metadata(self) -> dict[str, Any]:
        """JSON-safe metadata (everything but the body)."""
        return self.model_dump(mode="json", exclude={"body"})


class Heading(BaseModel):
    level:  int
    text:   str
    anchor: str


class RenderedDoc(BaseModel):
    """Serialized body ready for a page template."""
    html:         str
    headings:     list[Heading] = []
    word_count:   int = 0
    reading_time: int = 1           # minutes, never below 1


class PageSummary(BaseModel):
    """Structured sections pulled out of a standalone page (about, declaration)."""
    introduction: str = ""
    challenges:   list[str] = []
    features:     list[Any] = []
    vision:       list[str] = []
    research:     list[Any] = []
    metadata:     dict[str, Any] = {}


@dataclass
class ParsedDoc:
    """Raw file split into frontmatter and body; not yet normalized."""
    path:        Path
    raw:         str            # full file content (includes frontmatter)
    body:        str            # frontmatter stripped
    frontmatter: dict[str, Any]


@dataclass
class ExportReport:
    """Summary of one static export run."""
    output_dir: Path
    pages:      list[str] = field(default_factory=list)   # routes written
    skipped:    list[str] = field(default_factory=list)   # routes that failed to render
    items:      dict[str, int] = field(default_factory=dict)  # collection -> item count
