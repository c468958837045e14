# src/html_inspect/dom/collectors/references.py
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple, Union

from html_inspect.dom.core import CollectorDefinition
from html_inspect.managers.config_manager import config_manager
from html_inspect.model import ReferenceFilter
from html_inspect.utils.url_utils import UrlUtils

if TYPE_CHECKING:
    from html_inspect.dom.document import DocumentContext

logger = logging.getLogger(__name__)

FilterLike = Union[ReferenceFilter, Mapping[str, Any], None]

# Used when settings.json does not provide 'references.pairs'.
DEFAULT_REFERENCE_PAIRS = (
    ("a", "href"), ("area", "href"), ("base", "href"), ("link", "href"),
    ("img", "src"), ("script", "src"), ("iframe", "src"), ("frame", "src"),
    ("embed", "src"), ("source", "src"), ("form", "action"),
)


def reference_pairs() -> List[Tuple[str, str]]:
    """The (tag, attribute) pairs scanned by collect_references()."""
    pairs = config_manager.get_nested("references.pairs", DEFAULT_REFERENCE_PAIRS)
    return [(tag.lower(), attribute.lower()) for tag, attribute in pairs]


def collect_references_for(
        ctx: DocumentContext,
        tag: str,
        attribute: str,
        ref_filter: FilterLike = None,
        **options: Any,
) -> List[str]:
    """
    Returns the unique absolute URLs found in `attribute` of every `tag`
    element, in order of first appearance. Values which do not normalize
    are skipped.

    Filter options (`http_only`, `mailto_only`, `maximum_set`, `matching`) are
    applied to a copy; the memoized full list is unaffected.
    """
    criteria = ReferenceFilter.coerce(ref_filter, **options)
    tag, attribute = tag.lower(), attribute.lower()
    urls = ctx.memoized(
        f"references:{tag}_{attribute}",
        lambda: _unique_references(ctx, tag, attribute),
    )
    return criteria.apply(urls)


def collect_references(ctx: DocumentContext, ref_filter: FilterLike = None, **options: Any) -> Dict[str, List[str]]:
    """
    Collects the references for every configured tag/attribute pair, keyed
    as "tag_attribute", e.g. 'img_src'.
    """
    criteria = ReferenceFilter.coerce(ref_filter, **options)
    table = ctx.memoized("references", lambda: {
        f"{tag}_{attribute}": collect_references_for(ctx, tag, attribute)
        for tag, attribute in reference_pairs()
    })
    if criteria.is_noop:
        return table
    return {key: criteria.apply(urls) for key, urls in table.items()}


def _unique_references(ctx: DocumentContext, tag: str, attribute: str) -> List[str]:
    seen = set()
    found: List[str] = []
    skipped = 0

    for element in ctx.find_all(tag, attribute):
        url = UrlUtils.absolute_url(ctx.attributes(element).get(attribute), ctx.base)
        if url is None:
            skipped += 1
            continue
        if url in seen:
            continue
        seen.add(url)
        found.append(url)

    if skipped:
        logger.debug("Skipped %d unusable %s/@%s references in %s", skipped, tag, attribute, ctx.location)
    return found


DEFINITIONS = [
    CollectorDefinition(name="references", collect=collect_references),
    CollectorDefinition(name="references_for", collect=collect_references_for, in_report=False),
]
