"""
Data models for extraction results.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class SourceType(str, Enum):
    """Kind of source a result was produced from."""

    YOUTUBE = "youtube"
    ARTICLE = "article"
    PODCAST = "podcast"


@dataclass(slots=True, frozen=True)
class ExtractionMetadata:
    """Optional, strategy-specific details about the source."""

    author: Optional[str] = None
    site_name: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        """Serialize present fields only; absent fields are omitted rather than null."""
        fields = {
            "author": self.author,
            "siteName": self.site_name,
            "description": self.description,
        }
        return {key: value for key, value in fields.items() if value}


@dataclass(slots=True, frozen=True)
class ExtractionResult:
    """Plain-text document extracted from one URL."""

    title: str
    content: str
    content_length: int  # length before the truncation marker was applied
    source_type: SourceType
    source_url: str
    metadata: ExtractionMetadata = field(default_factory=ExtractionMetadata)

    def __post_init__(self) -> None:
        """Validate the result."""
        if not self.title or not self.title.strip():
            raise ValueError("title must not be empty")
        if self.content_length < 0:
            raise ValueError("content_length must not be negative")

    def to_dict(self) -> Dict[str, Any]:
        """Boundary representation handed to the calling layer."""
        return {
            "title": self.title,
            "content": self.content,
            "contentLength": self.content_length,
            "sourceType": self.source_type.value,
            "sourceUrl": self.source_url,
            "metadata": self.metadata.to_dict(),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)
