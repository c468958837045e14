# src/html_inspect/inspector.py
import logging
from typing import Any, Dict, Union

from html_inspect.dom.document import DocumentContext
from html_inspect.utils.url_utils import UrlUtils

logger = logging.getLogger(__name__)


def inspect_document(html: Union[str, bytes], location: Any) -> Dict[str, Any]:
    """
    Builds a DocumentContext and runs every registered collector on it.

    Returns a plain, serializable report:
        {'location': ..., 'base': ..., 'warnings': [...],
         'links': {...}, 'meta': [...], 'meta_classic': {...}, ...}

    Raises the ConstructionError of DocumentContext unchanged.
    """
    ctx = DocumentContext(html, location)
    report: Dict[str, Any] = {
        "location": UrlUtils.url_text(location),
        "base": ctx.base,
    }
    report.update(ctx.collect_all())
    report["warnings"] = ctx.warnings
    logger.debug("Inspected %s: %s", location, ", ".join(k for k in report if k not in ("location", "base")))
    return report
