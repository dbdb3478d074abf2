"""
Content extraction strategies and the dispatcher that selects between them.

1. YouTube: caption transcript plus oEmbed title/author
2. Article: readability-lxml main-content extraction
3. Feed: RSS/Atom entries formatted as markdown-style sections

Every strategy returns an ExtractionResult whose content is bounded by the
truncator.
"""

from .classifier import UrlKind, classify_url
from .feed_extractor import FeedExtractor, parse_feed
from .manager import ExtractorManager, extract_content
from .models import ExtractionMetadata, ExtractionResult, SourceType
from .protocols import ExtractionStrategy, TranscriptProvider
from .readability_extractor import ArticleExtractor
from .truncation import TRUNCATION_MARKER, truncate_content
from .youtube_extractor import YouTubeExtractor, YouTubeTranscriptApiProvider, extract_video_id

__all__ = [
    "ArticleExtractor",
    "ExtractionMetadata",
    "ExtractionResult",
    "ExtractionStrategy",
    "ExtractorManager",
    "FeedExtractor",
    "SourceType",
    "TRUNCATION_MARKER",
    "TranscriptProvider",
    "UrlKind",
    "YouTubeExtractor",
    "YouTubeTranscriptApiProvider",
    "classify_url",
    "extract_content",
    "extract_video_id",
    "parse_feed",
    "truncate_content",
]
