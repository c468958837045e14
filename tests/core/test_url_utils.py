# tests/core/test_url_utils.py
from urllib.parse import urlparse, urlsplit

import pytest

from html_inspect.errors import (
    ConstructionError,
    EmptyReference,
    InvalidBase,
    NormalizationError,
    UnresolvableReference,
)
from html_inspect.utils.url_utils import UrlUtils

RFC_BASE = "http://a/b/c/d;p?q"


@pytest.mark.parametrize("reference, expected", [
    # RFC 3986 section 5.4.1, normal examples
    ("g", "http://a/b/c/g"),
    ("./g", "http://a/b/c/g"),
    ("g/", "http://a/b/c/g/"),
    ("/g", "http://a/g"),
    ("//g", "http://g/"),
    ("?y", "http://a/b/c/d;p?y"),
    ("g?y", "http://a/b/c/g?y"),
    ("#s", "http://a/b/c/d;p?q#s"),
    ("g#s", "http://a/b/c/g#s"),
    (";x", "http://a/b/c/;x"),
    (".", "http://a/b/c/"),
    ("./", "http://a/b/c/"),
    ("..", "http://a/b/"),
    ("../g", "http://a/b/g"),
    ("../..", "http://a/"),
    ("../../g", "http://a/g"),
    # Section 5.4.2, abnormal examples
    ("../../../g", "http://a/g"),
    ("/./g", "http://a/g"),
    ("g.", "http://a/b/c/g."),
    ("./g/.", "http://a/b/c/g/"),
    ("g;x=1/../y", "http://a/b/c/y"),
    ("g?y/./x", "http://a/b/c/g?y/./x"),
    # An empty query replaces the base query; "d;p?" is canonically "d;p".
    ("?", "http://a/b/c/d;p"),
    ("?#s", "http://a/b/c/d;p#s"),
])
def test_resolves_rfc3986_examples(reference, expected):
    """Relative references resolve as described in RFC 3986."""
    assert UrlUtils.normalize_url(reference, RFC_BASE) == expected


@pytest.mark.parametrize("raw, expected", [
    ("HTTP://Example.COM:80/a/./b/../c", "http://example.com/a/c"),
    ("https://example.com:443", "https://example.com/"),
    ("https://example.com:8443/x", "https://example.com:8443/x"),
    ("ftp://FTP.Example.com:21/pub/", "ftp://ftp.example.com/pub/"),
    ("http://example.com/a b", "http://example.com/a%20b"),
    ("http://example.com/%7euser/%2f", "http://example.com/~user/%2F"),
    ("http://example.com/100%", "http://example.com/100%25"),
    ("http://example.com/ümlaut", "http://example.com/%C3%BCmlaut"),
    ("http://bücher.de/", "http://xn--bcher-kva.de/"),
    ("http://example.com/?q=a b&c=d", "http://example.com/?q=a%20b&c=d"),
    ("http://User:Pw@Example.com/", "http://User:Pw@example.com/"),
    ("http://[::1]:8080/x", "http://[::1]:8080/x"),
    ("  \n http://example.com/x \t", "http://example.com/x"),
    ("http://exa\nmple.com/", "http://example.com/"),
    ("file:///etc/hosts", "file:///etc/hosts"),
])
def test_canonicalizes_absolute_urls(raw, expected):
    """Scheme and host are lower-cased; the path is escaped, not case-folded."""
    assert UrlUtils.normalize_url(raw, "https://ignored.example/") == expected


@pytest.mark.parametrize("raw, expected", [
    ("MAILTO:someone@Example.com", "mailto:someone@Example.com"),
    ("tel:+31 20 123", "tel:+31%2020%20123"),
    ("mailto:J%c3%b6rg@example.com?subject=hi there", "mailto:J%C3%B6rg@example.com?subject=hi%20there"),
    ("urn:isbn:0451450523#p1", "urn:isbn:0451450523#p1"),
    ("data:image/png;base64,AAAA", "data:image/png;base64,AAAA"),
    ("javascript:void(0)", "javascript:void(0)"),
])
def test_opaque_schemes_keep_their_text_escaped(raw, expected):
    """Only the scheme is lower-cased; unsafe characters are percent-encoded."""
    assert UrlUtils.normalize_url(raw) == expected


def test_absolute_reference_does_not_need_a_base():
    assert UrlUtils.normalize_url("https://example.com/x") == "https://example.com/x"


def test_protocol_relative_reference_takes_base_scheme():
    assert UrlUtils.normalize_url("//cdn.example.com/app.js", "https://example.com/") \
        == "https://cdn.example.com/app.js"


def test_path_case_is_preserved():
    assert UrlUtils.normalize_url("/Docs/Index.HTML", "https://example.com/") \
        == "https://example.com/Docs/Index.HTML"


@pytest.mark.parametrize("raw", ["", "   ", "\t\n", None])
def test_empty_reference(raw):
    with pytest.raises(EmptyReference):
        UrlUtils.normalize_url(raw, "https://example.com/")


@pytest.mark.parametrize("base", [None, "", "not a url", "relative/path", "mailto:me@example.com"])
def test_relative_reference_needs_a_valid_base(base):
    with pytest.raises(InvalidBase):
        UrlUtils.normalize_url("page.html", base)


@pytest.mark.parametrize("raw", [
    "http://",
    "//",
    "///x",
    "http:page.html",
    "http://exa mple.com/",
    "http://example.com:99999/",
    "http://example.com:port/",
    "javascript:",
])
def test_unresolvable_reference(raw):
    with pytest.raises(UnresolvableReference):
        UrlUtils.normalize_url(raw, "https://example.com/")


def test_error_hierarchy():
    """InvalidBase is both a normalization and a construction failure."""
    assert issubclass(InvalidBase, NormalizationError)
    assert issubclass(InvalidBase, ConstructionError)
    assert issubclass(EmptyReference, ValueError)

    with pytest.raises(EmptyReference) as info:
        UrlUtils.normalize_url(" ", "https://example.com/")
    assert info.value.reference == " "


def test_normalization_is_deterministic_and_idempotent():
    raw, base = "../img/Logo Big.PNG?v=1#top", "https://Example.com/a/b/"
    first = UrlUtils.normalize_url(raw, base)
    assert first == UrlUtils.normalize_url(raw, base)
    assert first == "https://example.com/a/img/Logo%20Big.PNG?v=1#top"
    assert UrlUtils.normalize_url(first) == first


def test_absolute_url_returns_none_on_failure():
    assert UrlUtils.absolute_url("", "https://example.com/") is None
    assert UrlUtils.absolute_url("http://exa mple.com/", "https://example.com/") is None
    assert UrlUtils.absolute_url("x.html", "https://example.com/d/") == "https://example.com/d/x.html"


def test_normalize_base():
    assert UrlUtils.normalize_base("https://ex.com/sub/") == "https://ex.com/sub/"
    assert UrlUtils.normalize_base("/sub/", "https://ex.com/a/") == "https://ex.com/sub/"

    with pytest.raises(InvalidBase):
        UrlUtils.normalize_base("not a url", "https://ex.com/a/")
    with pytest.raises(InvalidBase):
        UrlUtils.normalize_base("mailto:me@ex.com")
    with pytest.raises(InvalidBase):
        UrlUtils.normalize_base("")


@pytest.mark.parametrize("url, expected", [
    ("https://example.com/", True),
    ("mailto:me@example.com", True),
    ("file:///tmp/x", True),
    ("http:/example.com", False),
    ("/relative", False),
    ("page.html", False),
])
def test_is_absolute_url(url, expected):
    assert UrlUtils.is_absolute_url(url) is expected


@pytest.mark.parametrize("path, expected", [
    ("/a/b/c/./../../g", "/a/g"),
    ("mid/content=5/../6", "mid/6"),
    ("/a/b/", "/a/b/"),
    ("/..", "/"),
    ("/a/..", "/"),
    ("/a//b/../c", "/a//c"),
])
def test_remove_dot_segments(path, expected):
    assert UrlUtils.remove_dot_segments(path) == expected


def test_url_scheme():
    assert UrlUtils.url_scheme("HTTPS://example.com") == "https"
    assert UrlUtils.url_scheme("mailto:x@y") == "mailto"
    assert UrlUtils.url_scheme("/x:y") is None


def test_empty_query_clears_base_query():
    assert UrlUtils.normalize_url("?", "https://ex.com/search?q=x") == "https://ex.com/search"
    assert UrlUtils.normalize_url("?page=2", "https://ex.com/search?q=x") == "https://ex.com/search?page=2"


def test_parsed_url_objects_are_accepted():
    base = urlsplit("https://Ex.com/d/")
    assert UrlUtils.url_text(base) == "https://Ex.com/d/"
    assert UrlUtils.normalize_url("p.html", base) == "https://ex.com/d/p.html"
    assert UrlUtils.normalize_base(urlparse("https://ex.com/a/")) == "https://ex.com/a/"
