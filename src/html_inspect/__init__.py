"""
Inspect an HTML document: link relations, <meta> records, OpenGraph facts and
references, with every URL-valued field normalized to an absolute URL.

    ctx = DocumentContext(html, location="https://example.com/doc")
    collect_meta_classic(ctx)
    collect_references_for(ctx, "img", "src", http_only=True)
"""
from html_inspect.dom.collectors.links import collect_links
from html_inspect.dom.collectors.meta import collect_meta, collect_meta_classic, collect_meta_names
from html_inspect.dom.collectors.opengraph import collect_opengraph
from html_inspect.dom.collectors.references import collect_references, collect_references_for
from html_inspect.dom.document import DocumentContext
from html_inspect.errors import (
    ConstructionError,
    EmptyReference,
    InspectError,
    InvalidBase,
    NormalizationError,
    NotHtml,
    UnresolvableReference,
)
from html_inspect.inspector import inspect_document
from html_inspect.model import ReferenceFilter
from html_inspect.utils.url_utils import UrlUtils

normalize_url = UrlUtils.normalize_url
absolute_url = UrlUtils.absolute_url

__all__ = [
    "DocumentContext",
    "ReferenceFilter",
    "UrlUtils",
    "normalize_url",
    "absolute_url",
    "inspect_document",
    "collect_links",
    "collect_meta",
    "collect_meta_classic",
    "collect_meta_names",
    "collect_opengraph",
    "collect_references",
    "collect_references_for",
    "InspectError",
    "ConstructionError",
    "NormalizationError",
    "EmptyReference",
    "InvalidBase",
    "NotHtml",
    "UnresolvableReference",
]
