"""
ExtractorManager: routes a URL to exactly one extraction strategy.
"""

from __future__ import annotations

import dataclasses
import time
from typing import Dict, Optional, cast

import structlog

from ..config.config import Config, settings
from ..crawler.http_client import HttpClient
from ..errors import ExtractionError, InvalidInputError
from ..observability import histogram, increment
from ..security.validation import InputValidator
from .classifier import UrlKind, classify_url
from .feed_extractor import FeedExtractor
from .models import ExtractionResult
from .protocols import ExtractionStrategy, TranscriptProvider
from .readability_extractor import ArticleExtractor
from .youtube_extractor import YouTubeExtractor

logger = structlog.get_logger(__name__)


class ExtractorManager:
    """
    Validates, classifies and dispatches URLs to their extraction strategy.

    There is no fallback between strategies: when the selected strategy fails
    its error reaches the caller unchanged.
    """

    def __init__(
        self,
        http_client: HttpClient,
        config: Optional[Config] = None,
        *,
        transcript_provider: Optional[TranscriptProvider] = None,
        strategies: Optional[Dict[UrlKind, ExtractionStrategy]] = None,
    ) -> None:
        """
        Initialize the ExtractorManager.

        Args:
            http_client: Open HTTP client shared by the strategies
            config: Application configuration (defaults if omitted)
            transcript_provider: Override for the YouTube caption source
            strategies: Override for individual strategies, keyed by UrlKind
        """
        self.config = config or Config()
        self.http_client = http_client
        self.validator = InputValidator(self.config.security)
        self.logger = logger.bind(component="ExtractorManager")

        self._strategies: Dict[UrlKind, ExtractionStrategy] = {
            UrlKind.YOUTUBE: YouTubeExtractor(
                http_client,
                fetch_config=self.config.fetch,
                settings=self.config.extraction,
                transcript_provider=transcript_provider,
            ),
            UrlKind.RSS: FeedExtractor(http_client, fetch_config=self.config.fetch, settings=self.config.extraction),
            UrlKind.ARTICLE: ArticleExtractor(
                http_client, fetch_config=self.config.fetch, settings=self.config.extraction
            ),
        }
        if strategies:
            self._strategies.update(strategies)

    def strategy_for(self, kind: UrlKind) -> ExtractionStrategy:
        return self._strategies[kind]

    async def extract(self, url: str) -> ExtractionResult:
        """
        Extract plain-text content from a URL.

        Raises:
            InvalidInputError: URL rejected before any network access
            ExtractionError: Any failure of the selected strategy
        """
        try:
            parsed = self.validator.validate_url(url)
        except InvalidInputError as e:
            increment("url_rejections_total")
            self.logger.info("URL rejected", url=url, reason=str(e))
            raise

        kind = classify_url(parsed)
        strategy = self._strategies[kind]
        self.logger.info("Starting extraction", url=url, url_kind=kind.value, strategy=strategy.name)

        start_time = time.time()
        outcome = "success"
        try:
            with structlog.contextvars.bound_contextvars(request_url=url):
                # Strategies fetch the validated form; the caller's input is echoed back as-is.
                result = await strategy.extract(parsed.geturl())
        except ExtractionError as e:
            outcome = e.kind
            self.logger.warning(
                "Extraction failed",
                url=url,
                url_kind=kind.value,
                error=str(e),
                error_kind=e.kind,
            )
            raise
        except Exception:
            outcome = "unexpected_error"
            raise
        finally:
            elapsed = time.time() - start_time
            increment("extractions_total", labels={"url_kind": kind.value, "outcome": outcome})
            histogram("extraction_duration_seconds", elapsed, labels={"url_kind": kind.value})

        self.logger.info(
            "Extraction completed",
            url=url,
            url_kind=kind.value,
            source_type=result.source_type.value,
            content_length=result.content_length,
            extraction_time=elapsed,
        )
        if result.source_url != url:
            result = dataclasses.replace(result, source_url=url)
        return result


async def extract_content(
    url: str,
    *,
    config: Optional[Config] = None,
    transcript_provider: Optional[TranscriptProvider] = None,
) -> ExtractionResult:
    """Extract one URL with an HTTP session owned by this call."""
    config = config or cast(Config, settings)
    async with HttpClient(config.fetch) as http_client:
        manager = ExtractorManager(http_client, config, transcript_provider=transcript_provider)
        return await manager.extract(url)
