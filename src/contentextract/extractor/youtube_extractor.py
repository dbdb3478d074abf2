"""
YouTube transcript extractor.

Captions come from ``youtube-transcript-api``; title and channel name come from
YouTube's oEmbed endpoint. Both are fetched concurrently and a failed oEmbed
lookup only costs the metadata.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import List, Optional, Sequence
from urllib.parse import parse_qs, urlencode, urlsplit

import requests
import structlog
from youtube_transcript_api import (
    CouldNotRetrieveTranscript,
    RequestBlocked,
    YouTubeRequestFailed,
    YouTubeTranscriptApi,
)

from ..config.config import ExtractionSettings, FetchConfig
from ..crawler.http_client import HttpClient
from ..errors import ExtractionError, ExtractionFailedError, FetchFailedError
from .models import ExtractionMetadata, ExtractionResult, SourceType
from .protocols import TranscriptProvider
from .truncation import truncate_content

logger = structlog.get_logger(__name__)

_SHORT_LINK_HOSTS = ("youtu.be",)
_ID_PATH_PREFIXES = ("shorts", "embed", "live")


def extract_video_id(url: str) -> Optional[str]:
    """Return the video id of a YouTube URL, or None if it has none."""
    parsed = urlsplit(url)
    hostname = (parsed.hostname or "").lower()
    segments = [segment for segment in parsed.path.split("/") if segment]

    if any(host in hostname for host in _SHORT_LINK_HOSTS):
        return segments[0] if segments else None

    video_ids = parse_qs(parsed.query).get("v")
    if video_ids and video_ids[0]:
        return video_ids[0]

    if len(segments) >= 2 and segments[0] in _ID_PATH_PREFIXES:
        return segments[1]
    return None


class YouTubeTranscriptApiProvider(TranscriptProvider):
    """TranscriptProvider backed by youtube-transcript-api."""

    def __init__(self, languages: Sequence[str] = ("en",), api: Optional[YouTubeTranscriptApi] = None) -> None:
        self.languages = tuple(languages)
        self._api = api or YouTubeTranscriptApi()

    async def fetch_segments(self, video_id: str) -> List[str]:
        # The library is synchronous; keep it off the event loop.
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._fetch_sync, video_id)

    def _fetch_sync(self, video_id: str) -> List[str]:
        try:
            fetched = self._api.fetch(video_id, languages=self.languages)
        except (YouTubeRequestFailed, RequestBlocked) as e:
            # Subclasses of CouldNotRetrieveTranscript, but the video was never reached.
            raise FetchFailedError(f"Failed to fetch YouTube transcript ({video_id}): {type(e).__name__}") from e
        except CouldNotRetrieveTranscript as e:
            raise ExtractionFailedError(f"No captions available for this YouTube video ({video_id})") from e
        except requests.RequestException as e:
            raise FetchFailedError(f"Failed to fetch YouTube transcript: {e}") from e
        return [snippet.text for snippet in fetched]


@dataclass(frozen=True)
class VideoMetadata:
    title: Optional[str] = None
    author: Optional[str] = None


class YouTubeExtractor:
    """Extraction strategy for YouTube watch pages and short links."""

    name = "youtube"

    def __init__(
        self,
        http_client: HttpClient,
        *,
        fetch_config: Optional[FetchConfig] = None,
        settings: Optional[ExtractionSettings] = None,
        transcript_provider: Optional[TranscriptProvider] = None,
    ) -> None:
        self.http_client = http_client
        self.fetch_config = fetch_config or http_client.config
        self.settings = settings or ExtractionSettings()
        self.transcript_provider = transcript_provider or YouTubeTranscriptApiProvider(
            languages=self.settings.transcript_languages
        )
        self.logger = logger.bind(component="YouTubeExtractor")

    async def extract(self, url: str) -> ExtractionResult:
        video_id = extract_video_id(url)
        if not video_id:
            raise ExtractionFailedError("Could not extract YouTube video ID from URL")

        metadata_task = asyncio.ensure_future(self.fetch_metadata(url))
        try:
            segments = await self.transcript_provider.fetch_segments(video_id)
        except BaseException:
            metadata_task.cancel()
            raise
        metadata = await metadata_task

        if not segments:
            raise ExtractionFailedError("No captions available for this YouTube video")

        content = " ".join(segments)
        self.logger.info(
            "Transcript extracted",
            video_id=video_id,
            segments=len(segments),
            content_length=len(content),
            has_metadata=metadata.title is not None,
        )

        return ExtractionResult(
            title=metadata.title or f"YouTube Video {video_id}",
            content=truncate_content(
                content,
                self.settings.max_chars,
                paragraph_break_ratio=self.settings.paragraph_break_ratio,
            ),
            content_length=len(content),
            source_type=SourceType.YOUTUBE,
            source_url=url,
            metadata=ExtractionMetadata(author=metadata.author),
        )

    async def fetch_metadata(self, url: str) -> VideoMetadata:
        """Look up title and author via oEmbed; any failure yields empty metadata."""
        oembed_url = f"{self.fetch_config.oembed_endpoint}?{urlencode({'url': url, 'format': 'json'})}"
        try:
            data = await self.http_client.fetch_json(
                oembed_url,
                timeout=self.fetch_config.oembed_timeout,
                resource="oEmbed metadata",
            )
        except ExtractionError as e:
            self.logger.debug("oEmbed lookup failed", url=url, error=str(e))
            return VideoMetadata()

        if not isinstance(data, dict):
            return VideoMetadata()
        title = data.get("title")
        author = data.get("author_name")
        return VideoMetadata(
            title=title.strip() if isinstance(title, str) and title.strip() else None,
            author=author if isinstance(author, str) and author else None,
        )
