"""Integration tests for the static export"""

import logging
from datetime import date

import pytest

from univault.core.export import export_site


BUILD_DATE = date(2026, 1, 2)


@pytest.fixture(name="report")
def report_fixture(settings):
    return export_site(settings, build_date=BUILD_DATE)


def test_export_writes_every_route(site, report):
    """Home, collection indexes, items, pages, and tags all land as index.html files."""
    out = site / "out"
    expected = [
        "index.html",
        "updates/index.html",
        "updates/first-light/index.html",
        "updates/second-post/index.html",
        "updates/undated/index.html",
        "paiTraining/Theory/index.html",
        "paiTraining/Theory/Foundations/harmonic-basics/index.html",
        "about/index.html",
        "tags/index.html",
        "tags/research/index.html",
        "tags/math/index.html",
    ]
    for rel in expected:
        assert (out / rel).is_file(), rel
    assert report.skipped == []
    assert report.items["posts"] == 3
    assert report.items["exercises"] == 0


def test_export_copies_public_assets(site, report):
    assert (site / "out/images/cover.png").read_text() == "png"


def test_export_item_page_content(site, report):
    """Item pages carry title, date, image, rendered math, tags, and the nav/footer chrome."""
    html = (site / "out/updates/first-light/index.html").read_text()
    assert "<h1>First Light</h1>" in html
    assert 'datetime="2024-01-05"' in html
    assert "January 5, 2024" in html
    assert 'src="/images/cover.png"' in html
    assert 'class="math inline"' in html
    assert 'href="/tags/research/"' in html
    assert 'href="/declaration/"' in html
    assert "2026 Univault" in html


def test_export_collection_index_order(site, report):
    """The posts index lists undated first, then newest to oldest."""
    html = (site / "out/updates/index.html").read_text()
    positions = [html.index(t) for t in ("Undated Draft", "Second Post", "First Light")]
    assert positions == sorted(positions)


def test_export_home_shows_latest_dated_posts(site, report):
    html = (site / "out/index.html").read_text()
    assert "Second Post" in html
    assert "Undated Draft" not in html


def test_export_page_summary(site, report):
    html = (site / "out/about/index.html").read_text()
    assert "Open research" in html
    assert "Main Question" in html


def test_export_sitemap(site, report):
    """The sitemap lists every written route under the site URL."""
    xml = (site / "out/sitemap.xml").read_text()
    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert xml.count("<url>") == len(report.pages)
    assert "<loc>https://example.org/updates/first-light/</loc>" in xml
    assert "<lastmod>2024-01-05</lastmod>" in xml
    assert "<lastmod>2026-01-02</lastmod>" in xml


def test_export_cleans_previous_output(site, settings):
    stale = site / "out/stale.html"
    stale.parent.mkdir(parents=True)
    stale.write_text("old")
    export_site(settings, build_date=BUILD_DATE)
    assert not stale.exists()


def test_export_refuses_dangerous_output_dir(site, settings):
    """Exporting over the working or content directory is refused."""
    for target in (site, site / "content"):
        with pytest.raises(ValueError, match="Refusing to export"):
            export_site(settings.model_copy(update={"output_dir": str(target)}))
    assert (site / "content/posts/first-light.md").exists()


def test_export_user_template_override(site, settings):
    """A template in templates_dir replaces the bundled one."""
    templates = site / "templates"
    templates.mkdir()
    (templates / "tag.html").write_text("custom tag page: {{ tag }}")
    export_site(settings.model_copy(update={"templates_dir": str(templates)}), build_date=BUILD_DATE)
    assert (site / "out/tags/math/index.html").read_text() == "custom tag page: math"


def test_export_skips_page_with_broken_template(site, settings):
    """A template that fails at render time skips its routes without stopping the build."""
    templates = site / "templates"
    templates.mkdir()
    (templates / "tag.html").write_text("{{ items.nope.deeper }}")
    report = export_site(settings.model_copy(update={"templates_dir": str(templates)}), build_date=BUILD_DATE)
    assert "/tags/math/" in report.skipped
    assert (site / "out/updates/first-light/index.html").is_file()


def test_export_page_clashing_with_generated_route(site, settings, caplog):
    """A standalone page whose slug matches a generated route is skipped; the generated page stays."""
    (site / "content/pages/tags.md").write_text("---\ntitle: Shadow Tags\n---\nShadow.\n")
    (site / "content/pages/updates.md").write_text("---\ntitle: Shadow Updates\n---\nShadow.\n")
    with caplog.at_level(logging.ERROR):
        report = export_site(settings, build_date=BUILD_DATE)
    assert report.skipped == ["/tags/", "/updates/"]
    assert report.pages.count("/tags/") == 1
    assert "Shadow" not in (site / "out/tags/index.html").read_text()
    assert "Second Post" in (site / "out/updates/index.html").read_text()
    assert "Route /tags/ is already taken" in caplog.text
    assert (site / "out/about/index.html").is_file()
