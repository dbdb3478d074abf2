"""
Protocols for pluggable extraction strategies and their upstream providers.
"""

from __future__ import annotations

from typing import List, Protocol, runtime_checkable

from .models import ExtractionResult


@runtime_checkable
class ExtractionStrategy(Protocol):
    """Turns one URL into an ExtractionResult."""

    name: str

    async def extract(self, url: str) -> ExtractionResult:
        """Extract content from a validated URL.

        Args:
            url: The URL to extract, already validated

        Returns:
            ExtractionResult with plain-text content

        Raises:
            ExtractionError: Any failure; nothing is retried
        """
        ...


@runtime_checkable
class TranscriptProvider(Protocol):
    """Source of caption text for a video."""

    async def fetch_segments(self, video_id: str) -> List[str]:
        """Return the caption segments of a video in playback order."""
        ...
