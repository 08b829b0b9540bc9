"""Route and URL helpers for trailing-slash static export"""

from pathlib import Path


def route(*parts: str) -> str:
    """Join path segments into a '/a/b/' route; empty segments are dropped."""
    segments = [s.strip('/') for s in parts if s and s.strip('/')]
    return '/' + ''.join(f"{s}/" for s in segments)


def route_file(output_dir: Path, url: str) -> Path:
    """Output file for a route: '/a/b/' -> output_dir/a/b/index.html."""
    return output_dir.joinpath(*[p for p in url.split('/') if p], 'index.html')


def absolute(site_url: str, url: str) -> str:
    return site_url.rstrip('/') + url
