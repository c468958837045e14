# src/html_inspect/dom/collectors/meta.py
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, FrozenSet, List

from html_inspect.dom.core import CollectorDefinition
from html_inspect.managers.config_manager import config_manager

if TYPE_CHECKING:
    from html_inspect.dom.document import DocumentContext

# Used when settings.json does not provide 'meta.classic_names'.
DEFAULT_CLASSIC_NAMES = (
    "application-name", "author", "description", "generator", "keywords", "robots", "viewport",
)


def classic_names() -> FrozenSet[str]:
    """The meta names reported by collect_meta_classic()."""
    names = config_manager.get_nested("meta.classic_names", DEFAULT_CLASSIC_NAMES)
    return frozenset(name.lower() for name in names)


def collect_meta(ctx: DocumentContext) -> List[Dict[str, str]]:
    """
    Returns the attributes of every <meta> element, in document order.
    Meta records come in many shapes and may be order dependent, so nothing
    is filtered or merged here.
    """
    return ctx.memoized("meta", lambda: [ctx.attributes(e) for e in ctx.find_all("meta")])


def collect_meta_classic(ctx: DocumentContext) -> Dict[str, Any]:
    """
    Returns the traditional <meta> information: the first `charset`, all
    `http-equiv` records and the recognized subset of names.

        {'charset': 'UTF-8',
         'http-equiv': {'content-type': 'text/html'},
         'name': {'author': 'John Smith'}}
    """
    return ctx.memoized("meta_classic", lambda: _classify(collect_meta(ctx), classic_names()))


def collect_meta_names(ctx: DocumentContext) -> Dict[str, str]:
    """
    Returns name -> content for every <meta> with both attributes,
    whatever the name. The first occurrence of a name wins.
    """
    return ctx.memoized("meta_names", lambda: _names(collect_meta(ctx)))


def _classify(records: List[Dict[str, str]], recognized: FrozenSet[str]) -> Dict[str, Any]:
    classic: Dict[str, Any] = {"http-equiv": {}, "name": {}}

    for record in records:
        charset = record.get("charset")
        if charset and "charset" not in classic:
            classic["charset"] = charset

        if "content" not in record:
            continue
        content = record["content"]

        equiv = record.get("http-equiv", "").lower()
        if equiv:
            classic["http-equiv"].setdefault(equiv, content)

        name = record.get("name", "").lower()
        if name in recognized:
            classic["name"].setdefault(name, content)

    return classic


def _names(records: List[Dict[str, str]]) -> Dict[str, str]:
    names: Dict[str, str] = {}
    for record in records:
        name = record.get("name", "").lower()
        if name and "content" in record:
            names.setdefault(name, record["content"])
    return names


DEFINITIONS = [
    CollectorDefinition(name="meta", collect=collect_meta),
    CollectorDefinition(name="meta_classic", collect=collect_meta_classic),
    CollectorDefinition(name="meta_names", collect=collect_meta_names),
]
