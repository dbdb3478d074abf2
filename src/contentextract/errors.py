"""
Error taxonomy for content extraction.

Every failure raised by the extraction pipeline derives from ``ExtractionError``
and carries a stable ``kind`` string so callers can map it to their own
transport-level response without matching on class names.
"""

from __future__ import annotations

from typing import Optional


class ExtractionError(Exception):
    """Base class for all extraction failures."""

    kind = "extraction_error"


class InvalidInputError(ExtractionError, ValueError):
    """Raised when a URL is malformed, uses a disallowed scheme, or targets a blocked host."""

    kind = "invalid_input"


class FetchFailedError(ExtractionError):
    """Raised on a non-2xx response or a transport-level failure (including timeouts)."""

    kind = "fetch_failed"

    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class ContentTooLargeError(ExtractionError):
    """Raised when a declared or actual payload exceeds the configured ceiling."""

    kind = "content_too_large"

    def __init__(self, message: str, *, limit: Optional[int] = None) -> None:
        super().__init__(message)
        self.limit = limit


class ExtractionFailedError(ExtractionError):
    """Raised when the target was reachable but yielded no usable content."""

    kind = "extraction_failed"


class NoItemsFoundError(ExtractionFailedError):
    """Raised when a feed parsed successfully but contained no entries."""

    kind = "no_items_found"


__all__ = [
    "ExtractionError",
    "InvalidInputError",
    "FetchFailedError",
    "ContentTooLargeError",
    "ExtractionFailedError",
    "NoItemsFoundError",
]
