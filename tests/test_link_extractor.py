# File: tests/test_link_extractor.py
import pytest

from site_crawler.crawler.link_extractor import (
    is_parseable_url,
    normalize_links,
    remove_unparseable_urls,
    resolve_url,
)
from site_crawler.utils import document_id, extract_host, redact_password, remove_duplicates, strip_fragment


def test_relative_link_round_trip():
    links = normalize_links(["../c?x=1#frag"], "https://example.com/a/b")
    assert links == ["https://example.com/c?x=1"]


def test_remove_duplicates_keeps_first_occurrence_order():
    assert remove_duplicates(["/b", "/a", "/b", "/c", "/a"]) == ["/b", "/a", "/c"]


def test_normalize_links_deduplicates_in_order():
    links = normalize_links(["/x", "/y", "/x", "/z", "/y"], "https://a.test/")
    assert links == ["https://a.test/x", "https://a.test/y", "https://a.test/z"]


@pytest.mark.parametrize(
    "url",
    [
        "https://a.test/logo.png",
        "https://a.test/LOGO.PNG",
        "https://a.test/logo.png?size=large",
        "/img/photo.JPG?v=2",
        "https://a.test/files/report.pdf",
        "https://a.test/wp-login.php",
        "https://a.test/blog/wp-admin",
        "",
    ],
)
def test_unparseable_urls_are_dropped(url):
    assert not is_parseable_url(url)
    assert remove_unparseable_urls([url]) == []


@pytest.mark.parametrize(
    "url",
    [
        "https://a.test/",
        "https://a.test/page.html",
        "https://a.test/search?file=logo.png",
        "https://example.so",
        "/docs/intro",
    ],
)
def test_parseable_urls_are_kept(url):
    assert is_parseable_url(url)


def test_png_never_survives_normalisation():
    links = normalize_links(["/a.png", "/b.PNG?x=1", "/c"], "https://a.test/")
    assert links == ["https://a.test/c"]


@pytest.mark.parametrize(
    "link,parent,expected",
    [
        ("/page2", "https://a.test", "https://a.test/page2"),
        ("page2", "https://a.test/dir/index.html", "https://a.test/dir/page2"),
        ("//cdn.test/x", "https://a.test/", "https://cdn.test/x"),
        ("http://b.test/y", "https://a.test/", "http://b.test/y"),
        ("/z#top", "https://a.test/", "https://a.test/z"),
    ],
)
def test_resolve_url(link, parent, expected):
    assert resolve_url(link, parent) == expected


def test_strip_fragment():
    assert strip_fragment("/a#b#c") == "/a"
    assert strip_fragment("/a") == "/a"


def test_extract_host_keeps_port_and_drops_credentials():
    assert extract_host("https://user:pw@a.test:8080/x") == "a.test:8080"
    assert extract_host("/relative") == ""


def test_document_id_drops_scheme():
    assert document_id("https://a.test/x?y=1") == "a.test/x?y=1"


def test_redact_password():
    assert redact_password("mongodb://root:secret@db:27017/admin") == "mongodb://root:***@db:27017/admin"
    assert redact_password("mongodb://db:27017") == "mongodb://db:27017"
    assert redact_password(None) == ""
