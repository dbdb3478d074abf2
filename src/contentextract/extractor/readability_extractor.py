"""
Readability-based article extractor.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import urlsplit

import structlog
from lxml import html as lxml_html
from lxml.etree import ParserError
from readability import Document
from readability.readability import Unparseable
from selectolax.parser import HTMLParser

from ..config.config import ExtractionSettings, FetchConfig
from ..crawler.http_client import HttpClient
from ..errors import ExtractionFailedError
from .models import ExtractionMetadata, ExtractionResult, SourceType
from .truncation import truncate_content

logger = structlog.get_logger(__name__)

# readability-lxml's placeholder when the page has no <title>
_NO_TITLE = "[no-title]"

_BLOCK_TAGS = frozenset(
    ["p", "h1", "h2", "h3", "h4", "h5", "h6", "li", "pre", "blockquote", "td", "th", "dd", "dt", "figcaption"]
)


@dataclass(frozen=True)
class ParsedArticle:
    title: Optional[str]
    text: str
    metadata: ExtractionMetadata


class ArticleExtractor:
    """Extraction strategy for ordinary web pages, using readability-lxml."""

    name = "readability"

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
        self.config = {
            "min_text_length": 25,
            "retry_length": 250,
        }
        self.logger = logger.bind(component="ArticleExtractor")

    async def extract(self, url: str) -> ExtractionResult:
        document = await self.http_client.fetch(
            url,
            timeout=self.fetch_config.article_timeout,
            accept=self.fetch_config.html_accept,
            max_bytes=self.settings.max_article_bytes,
            resource="URL",
        )

        # Run readability in thread pool since it's CPU-intensive
        loop = asyncio.get_running_loop()
        article = await loop.run_in_executor(None, self.parse, document.text(), url)

        text = article.text.strip()
        if len(text) < self.settings.min_content_chars:
            self.logger.info("Readable text below minimum", url=url, text_length=len(text))
            raise ExtractionFailedError("Could not extract readable content from this URL")

        self.logger.info("Article extracted", url=url, text_length=len(text), title=article.title)

        return ExtractionResult(
            title=article.title or urlsplit(url).hostname or url,
            content=truncate_content(
                text,
                self.settings.max_chars,
                paragraph_break_ratio=self.settings.paragraph_break_ratio,
            ),
            content_length=len(text),
            source_type=SourceType.ARTICLE,
            source_url=url,
            metadata=article.metadata,
        )

    def parse(self, html: str, url: Optional[str] = None) -> ParsedArticle:
        """Run readability over an HTML page and collect its text, title and meta tags."""
        if not html.strip():
            raise ExtractionFailedError("Could not extract readable content from this URL")

        try:
            doc = Document(
                html,
                url=url,
                min_text_length=self.config["min_text_length"],
                retry_length=self.config["retry_length"],
            )
            title = doc.short_title() or doc.title()
            content_html = doc.summary(html_partial=True)
        except (Unparseable, ParserError, ValueError) as e:
            raise ExtractionFailedError(f"Could not extract readable content from this URL: {e}") from e

        if title == _NO_TITLE or not title or not title.strip():
            title = None

        return ParsedArticle(
            title=title.strip() if title else None,
            text=self._html_to_text(content_html),
            metadata=self._extract_meta(html),
        )

    def _html_to_text(self, html: str) -> str:
        """Convert readability's summary HTML to plain text, one paragraph per block."""
        if not html or not html.strip():
            return ""

        try:
            root = lxml_html.fromstring(html)
        except (ParserError, ValueError):
            return ""

        paragraphs: List[str] = []
        for element in root.iter(*_BLOCK_TAGS):
            if any(ancestor.tag in _BLOCK_TAGS for ancestor in element.iterancestors()):
                continue
            text = " ".join(element.text_content().split())
            if text:
                paragraphs.append(text)

        if not paragraphs:
            return " ".join(root.text_content().split())
        return "\n\n".join(paragraphs)

    def _extract_meta(self, html: str) -> ExtractionMetadata:
        """Byline, site name and excerpt from the page's meta tags."""
        parser = HTMLParser(html)

        def meta(*selectors: str) -> Optional[str]:
            for selector in selectors:
                node = parser.css_first(selector)
                if node is None:
                    continue
                content = (node.attributes.get("content") or "").strip()
                if content:
                    return content
            return None

        return ExtractionMetadata(
            author=meta('meta[name="author"]', 'meta[property="article:author"]'),
            site_name=meta('meta[property="og:site_name"]', 'meta[name="application-name"]'),
            description=meta('meta[name="description"]', 'meta[property="og:description"]'),
        )
