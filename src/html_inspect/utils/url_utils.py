# src/html_inspect/utils/url_utils.py
import logging
import re
from functools import lru_cache
from typing import Any, Optional
from urllib.parse import quote, urljoin, urlsplit, urlunsplit

from html_inspect.errors import (
    EmptyReference,
    InvalidBase,
    NormalizationError,
    UnresolvableReference,
)

logger = logging.getLogger(__name__)

SCHEME_PATTERN = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")

# Schemes with an authority component; everything else is treated as opaque.
HIERARCHICAL_SCHEMES = frozenset({"http", "https", "ftp", "ws", "wss", "file"})

DEFAULT_PORTS = {"http": 80, "https": 443, "ftp": 21, "ws": 80, "wss": 443}

# Characters which may appear unescaped in each component (RFC 3986 section 3).
_SUB_DELIMS = "!$&'()*+,;="
_USERINFO_SAFE = _SUB_DELIMS + ":"
_PATH_SAFE = _SUB_DELIMS + ":@/"
_QUERY_SAFE = _PATH_SAFE + "?"
_OPAQUE_SAFE = _QUERY_SAFE + "#"
_UNRESERVED = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-._~")

_TRIM_PATTERN = re.compile(r"^[\x00-\x20\x7f\s]+|[\x00-\x20\x7f\s]+$")
_EMBEDDED_BREAKS = re.compile(r"[\t\r\n]")
_PERCENT_ESCAPE = re.compile(r"%([0-9A-Fa-f]{2})")
_INVALID_HOST_CHARS = re.compile(r"[\x00-\x20\x7f\"#%/<>?@\\^`{|}]")
_INVALID_BASE_CHARS = re.compile(r"[\s<>\"]")


class UrlUtils:
    """A collection of static methods for URL normalization and resolution."""

    @staticmethod
    def clean_reference(raw: Optional[str]) -> str:
        """
        Strips surrounding whitespace and control characters and removes the
        tabs and line breaks browsers ignore inside attribute values.
        """
        if raw is None:
            return ""
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")
        return _EMBEDDED_BREAKS.sub("", _TRIM_PATTERN.sub("", UrlUtils.url_text(raw)))

    @staticmethod
    def url_text(url: Any) -> str:
        """
        Returns the text of a URL given as a string or as a parsed URL object,
        e.g. the result of urlsplit() or urlparse().
        """
        if url is None:
            return ""
        geturl = getattr(url, "geturl", None)
        if callable(geturl):
            return geturl()
        return str(url)

    @staticmethod
    def url_scheme(url: str) -> Optional[str]:
        """Returns the lower-cased scheme of a URL, or None for a relative reference."""
        match = SCHEME_PATTERN.match(url)
        return match.group(1).lower() if match else None

    @staticmethod
    def normalize_url(raw: str, base: Optional[str] = None) -> str:
        """
        Converts a (possibly relative) reference into an absolute, canonical URL.

        A reference carrying a scheme is canonicalized on its own; anything
        else is resolved against `base` following RFC 3986 section 5.2.

        Raises:
            EmptyReference: The reference is blank.
            InvalidBase: A relative reference has no usable base.
            UnresolvableReference: The result is not a valid URL.
        """
        reference = UrlUtils.clean_reference(raw)
        if not reference:
            raise EmptyReference(raw, "empty reference")

        if UrlUtils.url_scheme(reference) is None:
            if not base:
                raise InvalidBase(base, f"no base to resolve {reference!r} against")
            reference = _resolve(_checked_base(UrlUtils.url_text(base)), reference)

        return _canonical(reference)

    @staticmethod
    def absolute_url(raw: Optional[str], base: str) -> Optional[str]:
        """
        Like normalize_url(), but returns None instead of raising.
        Used by the collectors, where one bad attribute must not abort a scan.
        """
        try:
            return UrlUtils.normalize_url(raw, base)
        except NormalizationError as e:
            logger.debug("Skipping reference %r: %s", raw, e.reason)
            return None

    @staticmethod
    def normalize_base(href: str, location: Optional[str] = None) -> str:
        """
        Validates a candidate base URL (a page location or a <base href>) and
        returns its normalized, absolute form.

        Stricter than normalize_url(): embedded whitespace is rejected rather
        than escaped, and the result must use a hierarchical scheme.
        """
        candidate = UrlUtils.clean_reference(href)
        if not candidate:
            raise InvalidBase(href, "empty base")
        if _INVALID_BASE_CHARS.search(candidate):
            raise InvalidBase(href, "base contains illegal characters")

        try:
            url = UrlUtils.normalize_url(candidate, location)
        except NormalizationError as e:
            raise InvalidBase(href, e.reason) from e

        if UrlUtils.url_scheme(url) not in HIERARCHICAL_SCHEMES:
            raise InvalidBase(href, "base must use a hierarchical scheme")
        return url

    @staticmethod
    def is_absolute_url(url: str) -> bool:
        """
        Checks that a URL has a scheme and, for hierarchical schemes, an authority.
        """
        scheme = UrlUtils.url_scheme(url)
        if scheme is None:
            return False
        if scheme not in HIERARCHICAL_SCHEMES:
            return True
        return url[len(scheme) + 1:].startswith("//")

    @staticmethod
    def remove_dot_segments(path: str) -> str:
        """Collapses '.' and '..' segments as described in RFC 3986 section 5.2.4."""
        if "." not in path:
            return path

        rooted = path.startswith("/")
        segments = path.split("/")[1:] if rooted else path.split("/")
        last = len(segments) - 1
        output = []

        for i, segment in enumerate(segments):
            if segment in (".", ".."):
                if segment == ".." and output:
                    output.pop()
                # A trailing dot segment still denotes a directory.
                if i == last:
                    output.append("")
                continue
            output.append(segment)

        resolved = "/".join(output)
        return "/" + resolved if rooted else resolved


@lru_cache(maxsize=256)
def _checked_base(base: str) -> str:
    """Normalizes a base once; every reference in a document shares it."""
    try:
        url = _canonical(UrlUtils.clean_reference(base))
    except NormalizationError as e:
        raise InvalidBase(base, e.reason) from e
    if UrlUtils.url_scheme(url) not in HIERARCHICAL_SCHEMES:
        raise InvalidBase(base, "base must use a hierarchical scheme")
    return url


def _resolve(base: str, reference: str) -> str:
    """Resolves a scheme-less reference against a canonical base (RFC 3986 section 5.2.2)."""
    if reference.startswith("//"):
        if not urlsplit(reference).netloc:
            raise UnresolvableReference(reference, "empty authority")
    elif reference.startswith("?"):
        # urljoin() keeps the base query when the reference's query is empty.
        parts = urlsplit(base)
        ref = urlsplit(reference)
        return urlunsplit((parts.scheme, parts.netloc, parts.path, ref.query, ref.fragment))
    return urljoin(base, reference)


def _canonical(url: str) -> str:
    scheme = UrlUtils.url_scheme(url)
    if scheme is None:
        raise UnresolvableReference(url, "missing scheme")

    if scheme not in HIERARCHICAL_SCHEMES:
        opaque = url[len(scheme) + 1:]
        if not opaque:
            raise UnresolvableReference(url, f"empty {scheme} reference")
        return f"{scheme}:{_quote_component(opaque, _OPAQUE_SAFE)}"

    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError as e:
        raise UnresolvableReference(url, str(e)) from e

    host = _canonical_host(url, parts.hostname or "")
    if not host and scheme != "file":
        raise UnresolvableReference(url, f"{scheme} URL without host")

    netloc = host
    if parts.username is not None:
        userinfo = _quote_component(parts.username, _USERINFO_SAFE)
        if parts.password is not None:
            userinfo += ":" + _quote_component(parts.password, _USERINFO_SAFE)
        netloc = f"{userinfo}@{netloc}"
    if port is not None and port != DEFAULT_PORTS.get(scheme):
        netloc = f"{netloc}:{port}"

    path = UrlUtils.remove_dot_segments(_quote_component(parts.path, _PATH_SAFE)) or "/"
    query = _quote_component(parts.query, _QUERY_SAFE)
    fragment = _quote_component(parts.fragment, _QUERY_SAFE)

    return urlunsplit((scheme, netloc, path, query, fragment))


def _canonical_host(url: str, hostname: str) -> str:
    # urlsplit() already lower-cases the hostname and strips IPv6 brackets.
    if ":" in hostname:
        return f"[{hostname}]"
    if _INVALID_HOST_CHARS.search(hostname):
        raise UnresolvableReference(url, f"illegal host {hostname!r}")
    if hostname.isascii():
        return hostname
    try:
        return hostname.encode("idna").decode("ascii")
    except UnicodeError as e:
        raise UnresolvableReference(url, f"illegal host {hostname!r}") from e


def _normalize_escape(match: re.Match) -> str:
    char = chr(int(match.group(1), 16))
    if char in _UNRESERVED:
        return char
    return "%" + match.group(1).upper()


def _quote_component(value: str, safe: str) -> str:
    """
    Percent-encodes unsafe characters as UTF-8 while keeping valid escapes,
    which are normalized to upper-case hex (or decoded when unreserved).
    """
    parts = []
    position = 0
    for match in _PERCENT_ESCAPE.finditer(value):
        parts.append(quote(value[position:match.start()], safe=safe))
        parts.append(_normalize_escape(match))
        position = match.end()
    parts.append(quote(value[position:], safe=safe))
    return "".join(parts)
