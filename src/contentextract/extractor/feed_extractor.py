"""
RSS / Atom / podcast feed extractor.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, List, Optional

import structlog
from bs4 import BeautifulSoup, Tag

from ..config.config import ExtractionSettings, FetchConfig
from ..crawler.http_client import HttpClient
from ..errors import ExtractionFailedError, NoItemsFoundError
from .models import ExtractionMetadata, ExtractionResult, SourceType
from .truncation import truncate_content

logger = structlog.get_logger(__name__)

DEFAULT_FEED_TITLE = "RSS Feed"
DEFAULT_ENTRY_TITLE = "Untitled"
_BODY_TAGS = ("description", "content", "summary")


@dataclass(frozen=True)
class ParsedFeed:
    title: str
    entries: List[str]  # formatted "## title\ntext" blocks, capped
    total_items: int


def _unprefixed(*names: str) -> Callable[[Tag], bool]:
    """Match elements by name, skipping namespaced extensions such as ``itunes:title``."""
    return lambda tag: tag.name in names and not tag.prefix


def _text_of(tag: Optional[Tag]) -> str:
    if tag is None:
        return ""
    return tag.get_text().strip()


def strip_markup(fragment: str) -> str:
    """Reduce an HTML fragment (e.g. an item description) to plain text."""
    if not fragment:
        return ""
    return BeautifulSoup(fragment, "html.parser").get_text().strip()


def parse_feed(xml: bytes | str, *, max_items: int = 20) -> ParsedFeed:
    """Parse a feed document leniently and format its first ``max_items`` entries."""
    # lxml's XML builder runs in recover mode, so malformed feeds still parse.
    soup = BeautifulSoup(xml, "xml")

    container = soup.find(_unprefixed("channel", "feed"))
    title = DEFAULT_FEED_TITLE
    if container is not None:
        title = _text_of(container.find(_unprefixed("title"), recursive=False)) or DEFAULT_FEED_TITLE

    items = soup.find_all(_unprefixed("item", "entry"))
    if not items:
        raise NoItemsFoundError("No items found in feed")

    entries = []
    for item in items[:max_items]:
        entry_title = _text_of(item.find(_unprefixed("title"))) or DEFAULT_ENTRY_TITLE
        body = ""
        for tag_name in _BODY_TAGS:
            body = _text_of(item.find(_unprefixed(tag_name)))
            if body:
                break
        entries.append(f"## {entry_title}\n{strip_markup(body)}")

    return ParsedFeed(title=title, entries=entries, total_items=len(items))


class FeedExtractor:
    """Extraction strategy for RSS and Atom feeds."""

    name = "feed"

    def __init__(
        self,
        http_client: HttpClient,
        *,
        fetch_config: Optional[FetchConfig] = None,
        settings: Optional[ExtractionSettings] = None,
    ) -> None:
        self.http_client = http_client
        self.fetch_config = fetch_config or http_client.config
        self.settings = settings or ExtractionSettings()
        self.logger = logger.bind(component="FeedExtractor")

    async def extract(self, url: str) -> ExtractionResult:
        document = await self.http_client.fetch(
            url,
            timeout=self.fetch_config.feed_timeout,
            accept=self.fetch_config.feed_accept,
            resource="feed",
        )

        loop = asyncio.get_running_loop()
        feed = await loop.run_in_executor(
            None,
            lambda: parse_feed(document.body, max_items=self.settings.max_feed_items),
        )

        content = "\n\n".join(feed.entries)
        if len(content.strip()) < self.settings.min_content_chars:
            self.logger.info("Feed content below minimum", url=url, content_length=len(content))
            raise ExtractionFailedError("Feed content too short to extract meaningful data")

        self.logger.info(
            "Feed extracted",
            url=url,
            total_items=feed.total_items,
            included_items=len(feed.entries),
            content_length=len(content),
        )

        return ExtractionResult(
            title=feed.title,
            content=truncate_content(
                content,
                self.settings.max_chars,
                paragraph_break_ratio=self.settings.paragraph_break_ratio,
            ),
            content_length=len(content),
            source_type=SourceType.PODCAST,
            source_url=url,
            metadata=ExtractionMetadata(description=f"RSS feed with {feed.total_items} items"),
        )
