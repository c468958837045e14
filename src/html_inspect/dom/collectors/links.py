# src/html_inspect/dom/collectors/links.py
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List

from html_inspect.dom.core import CollectorDefinition
from html_inspect.utils.url_utils import UrlUtils

if TYPE_CHECKING:
    from html_inspect.dom.document import DocumentContext

logger = logging.getLogger(__name__)

LinkTable = Dict[str, List[Dict[str, str]]]


def collect_links(ctx: DocumentContext) -> LinkTable:
    """
    Collects all <link> relations, grouped by their `rel` value.

    Each record holds the remaining attributes of one element, with `href`
    replaced by its absolute form. A `rel` carrying several tokens
    ("stylesheet preload") is used as one key; it is not split.
    """
    return ctx.memoized("links", lambda: _build_link_table(ctx))


def _build_link_table(ctx: DocumentContext) -> LinkTable:
    links: LinkTable = {}
    for element in ctx.find_all("link", "rel"):
        attrs = ctx.attributes(element)
        rel = attrs.pop("rel")
        if not rel:
            continue

        if "href" in attrs:
            href = UrlUtils.absolute_url(attrs.pop("href"), ctx.base)
            if href is not None:
                attrs["href"] = href
            else:
                logger.debug("Dropped unusable href of <link rel=%r> in %s", rel, ctx.location)

        links.setdefault(rel, []).append(attrs)
    return links


DEFINITION = CollectorDefinition(name="links", collect=collect_links)
