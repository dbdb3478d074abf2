"""
contentextract - turns an arbitrary URL into a plain-text document for LLM prompts.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config
from .errors import (
    ContentTooLargeError,
    ExtractionError,
    ExtractionFailedError,
    FetchFailedError,
    InvalidInputError,
    NoItemsFoundError,
)
from .extractor import ExtractionResult, ExtractorManager, SourceType, classify_url, extract_content, truncate_content
from .security import validate_url

__all__ = [
    "__version__",
    "Config",
    "ContentTooLargeError",
    "ExtractionError",
    "ExtractionFailedError",
    "ExtractionResult",
    "ExtractorManager",
    "FetchFailedError",
    "InvalidInputError",
    "NoItemsFoundError",
    "SourceType",
    "classify_url",
    "extract_content",
    "truncate_content",
    "validate_url",
]
