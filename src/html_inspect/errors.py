# src/html_inspect/errors.py
from typing import Any, Optional


class InspectError(Exception):
    """Root of all errors raised by html_inspect."""


class ConstructionError(InspectError):
    """A DocumentContext could not be created; the caller must handle this."""


class NormalizationError(InspectError, ValueError):
    """
    A reference could not be turned into an absolute, canonical URL.

    Attributes:
        reference: The raw value which failed to normalize.
        reason: A short, human readable explanation.
    """

    def __init__(self, reference: Any, reason: Optional[str] = None):
        self.reference = reference
        self.reason = reason or self.__class__.__name__
        super().__init__(f"{self.reason}: {reference!r}")


class EmptyReference(NormalizationError):
    """The reference is empty or contains only whitespace."""


class UnresolvableReference(NormalizationError):
    """The reference (or its resolved form) is not a valid URL."""


class InvalidBase(NormalizationError, ConstructionError):
    """The base URL is missing or unusable; fatal when it is the page location."""


class NotHtml(ConstructionError):
    """The input does not look like markup at all."""

    def __init__(self, sample: Any):
        self.sample = sample
        super().__init__(f"Not HTML: {sample!r}")
