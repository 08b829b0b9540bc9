"""Unit tests for core/utils/slug.py and core/utils/urls.py"""

from pathlib import Path

import pytest

from univault.core.utils.slug import slugify, unique_slug
from univault.core.utils.urls import absolute, route, route_file


@pytest.mark.parametrize("text,expected", [
    ("Hello World", "hello-world"),
    ("my_file_name", "my-file-name"),
    ("  leading and trailing  ", "leading-and-trailing"),
    ("multiple---hyphens", "multiple-hyphens"),
    ("Special! Ch@rs#", "special-chrs"),
    ("Café Über", "cafe-uber"),
    ("Straße", "strasse"),
    ("数学 入门", "数学-入门"),
    ("ﬁle Ⅻ", "file-xii"),
    ("", ""),
])
def test_slugify_basic(text, expected):
    """slugify converts text to lowercase hyphenated slug."""
    assert slugify(text) == expected


def test_unique_slug_suffixes_repeats():
    seen = {}
    assert [unique_slug("A b", seen) for _ in range(3)] == ["a-b", "a-b-1", "a-b-2"]
    assert unique_slug("!!!", seen) == "section"


@pytest.mark.parametrize("parts,expected", [
    ((), "/"),
    (("updates", "first-light"), "/updates/first-light/"),
    (("", "about"), "/about/"),
    (("paiTraining/Theory/", "Foundations/x"), "/paiTraining/Theory/Foundations/x/"),
])
def test_route(parts, expected):
    assert route(*parts) == expected


def test_route_file_and_absolute():
    assert route_file(Path("out"), "/") == Path("out/index.html")
    assert route_file(Path("out"), "/updates/a/") == Path("out/updates/a/index.html")
    assert absolute("https://example.org/", "/updates/") == "https://example.org/updates/"
