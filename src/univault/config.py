"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "UNIVAULT_"


class CollectionSpec(BaseModel):
    """One content type: a directory of markdown files published under a URL prefix."""
    directory:  str
    url_prefix: str
    title:      str = ""
    nested:     bool = Field(default=False, description="Slugs keep subdirectories (catch-all routes)")


class NavLink(BaseModel):
    label: str
    href:  str


DEFAULT_COLLECTIONS: dict[str, CollectionSpec] = {
    "posts": CollectionSpec(directory="posts", url_prefix="updates", title="Updates"),
    "inspiration": CollectionSpec(
        directory="paiTraining/Inspiration", url_prefix="paiTraining/Inspiration", title="Inspiration",
    ),
    "resources": CollectionSpec(
        directory="paiTraining/Resources", url_prefix="paiTraining/Resources", title="Resources",
    ),
    "theory": CollectionSpec(
        directory="paiTraining/Theory", url_prefix="paiTraining/Theory", title="Theory", nested=True,
    ),
    "exercises": CollectionSpec(
        directory="paiTraining/Exercises", url_prefix="paiTraining/Exercises", title="Exercises", nested=True,
    ),
    "programming_language": CollectionSpec(
        directory="paiTraining/Programming_Language",
        url_prefix="paiTraining/Programming_Language",
        title="Programming Languages",
        nested=True,
    ),
    "pages": CollectionSpec(directory="pages", url_prefix="", title="Pages"),
}

DEFAULT_NAV = [
    NavLink(label="Home", href="/"),
    NavLink(label="About", href="/about/"),
    NavLink(label="Declaration", href="/declaration/"),
    NavLink(label="Updates", href="/updates/"),
]


class Settings(BaseModel):
    site_name:      str = "Univault"
    site_url:       str = Field(default="https://univault.org", description="Absolute base URL for the sitemap")
    content_dir:    str = Field(default="content", description="Root of the markdown content store")
    public_dir:     str = Field(default="public",  description="Static asset root; images resolve here")
    output_dir:     str = Field(default="out",     description="Directory for the static export")
    templates_dir:  Optional[str] = Field(default=None, description="Optional directory overriding bundled templates")
    excerpt_length: int = Field(default=200, ge=20, description="Max characters of a derived excerpt")
    home_posts:     int = Field(default=6,   ge=0,  description="Latest posts shown on the home page")
    words_per_minute: int = Field(default=200, ge=1)
    log_level:      str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    collections:    dict[str, CollectionSpec] = Field(default_factory=lambda: dict(DEFAULT_COLLECTIONS))
    pages_collection: str = Field(default="pages", description="Collection rendered as top-level standalone pages")
    home_collection:  str = Field(default="posts", description="Collection whose latest items lead the home page")
    nav:            list[NavLink] = Field(default_factory=lambda: list(DEFAULT_NAV))
    footer_links:   list[NavLink] = Field(default_factory=lambda: [
        NavLink(label="About", href="/about/"),
        NavLink(label="Declaration", href="/declaration/"),
        NavLink(label="GitHub", href="https://github.com/Univault-org"),
    ])

    def collection(self, name: str) -> CollectionSpec:
        """Return the named collection spec; KeyError lists the known names."""
        try:
            return self.collections[name]
        except KeyError:
            known = ", ".join(sorted(self.collections))
            raise KeyError(f"Unknown collection '{name}' (known: {known})") from None

    def collection_dir(self, name: str) -> Path:
        return Path(self.content_dir) / self.collection(name).directory


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then UNIVAULT_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name, field in Settings.model_fields.items():
        if field.annotation not in (str, int, Optional[str]):
            continue                # structured fields come from config.yaml only
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
