# src/html_inspect/model.py
from __future__ import annotations

from re import Pattern
from typing import Any, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, PositiveInt, model_validator

from html_inspect.utils.url_utils import UrlUtils


class ReferenceFilter(BaseModel):
    """
    Post-hoc projection over a list of collected references.

    All options combine with a logical AND. Scheme and pattern filters are
    applied first; `maximum_set` truncates what remains.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    http_only: bool = False
    mailto_only: bool = False
    maximum_set: Optional[PositiveInt] = None
    matching: Optional[Pattern[str]] = None

    @model_validator(mode="before")
    @classmethod
    def drop_unset(cls, data: Any) -> Any:
        # Callers pass options straight through, e.g. matching=None.
        if isinstance(data, Mapping):
            return {k: v for k, v in data.items() if v is not None}
        return data

    @classmethod
    def coerce(
            cls,
            ref_filter: Union[ReferenceFilter, Mapping[str, Any], None] = None,
            **options: Any,
    ) -> ReferenceFilter:
        """Builds a filter from an existing filter, a mapping and/or keyword options."""
        if isinstance(ref_filter, ReferenceFilter):
            if not options:
                return ref_filter
            ref_filter = ref_filter.model_dump(exclude_defaults=True)
        return cls(**{**dict(ref_filter or {}), **options})

    @property
    def is_noop(self) -> bool:
        return self == ReferenceFilter()

    def accepts(self, url: str) -> bool:
        scheme = UrlUtils.url_scheme(url)
        if self.http_only and scheme not in ("http", "https"):
            return False
        if self.mailto_only and scheme != "mailto":
            return False
        if self.matching is not None and not self.matching.search(url):
            return False
        return True

    def apply(self, urls: List[str]) -> List[str]:
        """Returns a new list; the input is never modified."""
        selected = [url for url in urls if self.accepts(url)]
        if self.maximum_set is not None:
            selected = selected[:self.maximum_set]
        return selected
