# src/html_inspect/dom/collectors/opengraph.py
from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Tuple, Union

from html_inspect.dom.core import CollectorDefinition
from html_inspect.managers.config_manager import config_manager

if TYPE_CHECKING:
    from html_inspect.dom.document import DocumentContext

OpenGraphMapping = Dict[str, Union[str, List[str]]]

DEFAULT_PREFIXES = ("og:",)


def opengraph_prefixes() -> Tuple[str, ...]:
    prefixes = config_manager.get_nested("opengraph.prefixes", DEFAULT_PREFIXES)
    return tuple(prefix.lower() for prefix in prefixes)


def collect_opengraph(ctx: DocumentContext) -> OpenGraphMapping:
    """
    Returns the OpenGraph facts of the document, keyed by property.

    A property seen once maps to its content; a repeated property (e.g. several
    og:image records) maps to a list in document order.

    Note: values are reported as found. URL-valued properties such as og:url
    and og:image are NOT made absolute, unlike the link and reference output.
    """
    return ctx.memoized("opengraph", lambda: _build_graph(ctx, opengraph_prefixes()))


def _build_graph(ctx: DocumentContext, prefixes: Tuple[str, ...]) -> OpenGraphMapping:
    graph: OpenGraphMapping = {}
    for element in ctx.find_all("meta", "property"):
        attrs = ctx.attributes(element)
        prop = attrs.get("property", "").lower()
        if prop in prefixes or not prop.startswith(prefixes) or "content" not in attrs:
            continue

        content = attrs["content"]
        if prop not in graph:
            graph[prop] = content
        elif isinstance(graph[prop], list):
            graph[prop].append(content)
        else:
            graph[prop] = [graph[prop], content]
    return graph


DEFINITION = CollectorDefinition(name="opengraph", collect=collect_opengraph)
