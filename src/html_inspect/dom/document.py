# src/html_inspect/dom/document.py
import copy
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Union

from bs4 import BeautifulSoup, Tag, UnicodeDammit

from html_inspect.errors import InvalidBase, NormalizationError, NotHtml
from html_inspect.utils.url_utils import UrlUtils
from .registry import CollectorRegistry

logger = logging.getLogger(__name__)

_LOOKS_LIKE_HTML = re.compile(r"<\s*/?\s*\w+")


class DocumentContext:
    """
    Wraps one parsed HTML document and its effective base URL.

    The tree and the base never change after construction. Collector results
    are memoized per document under the collector's name, so repeated calls
    are cheap and return equal values.

    Args:
        html: The (possibly troublesome) HTML, as text or undecoded bytes.
        location: Absolute URL where the HTML was found, as text or a parsed
            URL object (urlsplit()/urlparse() result). Used as the base for
            relative references unless the document declares a valid <base href>.

    Raises:
        NotHtml: The input contains no markup.
        InvalidBase: The location is not a usable absolute URL.
    """

    def __init__(self, html: Union[str, bytes], location: Any):
        markup = self._check_markup(html)

        self._location = location
        self._warnings: List[str] = []
        self._cache: Dict[str, Any] = {}

        try:
            page_base = UrlUtils.normalize_base(UrlUtils.url_text(location))
        except NormalizationError as e:
            raise InvalidBase(location, f"illegal page location: {e.reason}") from e

        # lxml recovers from broken markup and never touches the network.
        # Keep 'rel' and 'class' as the plain strings found in the document.
        self._soup = BeautifulSoup(markup, "lxml", multi_valued_attributes=None)
        self._base = self._establish_base(page_base)

    @staticmethod
    def _check_markup(html: Union[str, bytes]) -> str:
        """Returns the document as text; bytes are decoded the way bs4 would."""
        if not html:
            raise NotHtml(html)
        markup = html
        if isinstance(html, bytes):
            markup = UnicodeDammit(html, is_html=True).unicode_markup
            if markup is None:
                raise NotHtml(html[:20])
        if not _LOOKS_LIKE_HTML.search(markup):
            raise NotHtml(html[:20])
        return markup

    def _establish_base(self, page_base: str) -> str:
        """Returns the <base href> when present and valid, else the page location."""
        base_elem = self._soup.find("base", href=True)
        if base_elem is None:
            return page_base

        href = base_elem.get("href")
        try:
            return UrlUtils.normalize_base(href, page_base)
        except InvalidBase as e:
            self.warn(f"Illegal base href '{href}' in {UrlUtils.url_text(self._location)}: {e.reason}")
            return page_base

    # -------- Accessors --------

    @property
    def location(self) -> Any:
        """The location as passed by the caller, unresolved."""
        return self._location

    @property
    def base(self) -> str:
        """The absolute, normalized URL used to resolve relative references."""
        return self._base

    @property
    def root(self) -> BeautifulSoup:
        return self._soup

    @property
    def warnings(self) -> List[str]:
        """Advisory diagnostics collected while building this context."""
        return list(self._warnings)

    def warn(self, message: str) -> None:
        logger.warning(message)
        self._warnings.append(message)

    # -------- Query primitives --------

    def select(self, selector: str) -> List[Tag]:
        """Finds elements with a CSS selector, in document order."""
        return self._soup.select(selector)

    def find_all(self, tag: str, attribute: Optional[str] = None) -> List[Tag]:
        """Finds all elements of `tag` (which carry `attribute`, when given)."""
        attrs = {attribute.lower(): True} if attribute else {}
        return self._soup.find_all(tag.lower(), attrs=attrs)

    @staticmethod
    def attributes(element: Tag) -> Dict[str, str]:
        """
        Returns a fresh Attribute Record for the element: names lower-cased,
        values stripped. The first of two case-variant names wins.
        """
        record: Dict[str, str] = {}
        for name, value in element.attrs.items():
            if isinstance(value, (list, tuple)):
                value = " ".join(value)
            record.setdefault(name.lower(), (value or "").strip())
        return record

    # -------- Collectors --------

    def memoized(self, key: str, compute: Callable[[], Any]) -> Any:
        """
        Computes a collector result once per document. Callers receive a copy,
        so mutating a result never alters the cached value.
        """
        if key not in self._cache:
            self._cache[key] = compute()
        return copy.deepcopy(self._cache[key])

    def collect(self, name: str, *args: Any, **options: Any) -> Any:
        """Runs the registered collector called `name` on this document."""
        defn = CollectorRegistry.get(name)
        if defn is None:
            raise KeyError(f"Unknown collector '{name}'. Known: {', '.join(CollectorRegistry.names())}")
        return defn.collect(self, *args, **options)

    def collect_all(self) -> Dict[str, Any]:
        """Runs every registered collector which needs no arguments."""
        return {
            defn.name: defn.collect(self)
            for defn in CollectorRegistry.get_all()
            if defn.in_report
        }

    def __repr__(self) -> str:
        return f"DocumentContext(location={UrlUtils.url_text(self._location)!r}, base={self._base!r})"
