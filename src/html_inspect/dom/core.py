# src/html_inspect/dom/core.py
from typing import Any, Callable, Optional


class CollectorDefinition:
    """
    Configuration object binding a collector name to its collect function.
    Collector modules expose one as DEFINITION (or several as DEFINITIONS).
    """

    def __init__(
            self,
            name: str,
            collect: Callable[..., Any],
            description: Optional[str] = None,
            in_report: bool = True,
    ):
        self.name = name
        self.collect = collect
        doc_lines = (collect.__doc__ or "").strip().splitlines()
        self.description = description or (doc_lines[0] if doc_lines else name)
        # Collectors which need arguments (e.g. a tag) stay out of full reports.
        self.in_report = in_report

    def __repr__(self) -> str:
        return f"CollectorDefinition(name={self.name!r})"
