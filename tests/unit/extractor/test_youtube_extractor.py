"""
Unit tests for the YouTube transcript extractor.
"""

import asyncio
import re
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
import requests
from aioresponses import aioresponses
from youtube_transcript_api import IpBlocked, RequestBlocked, TranscriptsDisabled, YouTubeRequestFailed

from contentextract.errors import ExtractionFailedError, FetchFailedError
from contentextract.extractor.models import SourceType
from contentextract.extractor.truncation import TRUNCATION_MARKER
from contentextract.extractor.youtube_extractor import (
    YouTubeExtractor,
    YouTubeTranscriptApiProvider,
    extract_video_id,
)

OEMBED = re.compile(r"^https://www\.youtube\.com/oembed\?.*$")


class TestExtractVideoId:
    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://youtu.be/abc123", "abc123"),
            ("https://youtu.be/abc123?t=42", "abc123"),
            ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
            ("https://www.youtube.com/watch?feature=share&v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
            ("https://m.youtube.com/watch?v=xyz", "xyz"),
            ("https://www.youtube.com/shorts/short1", "short1"),
            ("https://www.youtube.com/embed/emb1", "emb1"),
            ("https://www.youtube.com/live/live1", "live1"),
        ],
    )
    def test_parses_ids(self, url, expected):
        assert extract_video_id(url) == expected

    @pytest.mark.parametrize(
        "url",
        ["https://youtu.be/", "https://www.youtube.com/", "https://www.youtube.com/watch", "https://www.youtube.com/@channel"],
    )
    def test_missing_id(self, url):
        assert extract_video_id(url) is None


class TestYouTubeExtractor:
    @pytest.mark.asyncio
    async def test_joins_segments_with_spaces(self, http_client, transcript_provider):
        provider = transcript_provider(["Hello", "world"])
        extractor = YouTubeExtractor(http_client, transcript_provider=provider)

        with aioresponses() as m:
            m.get(OEMBED, payload={"title": "Battle of Hastings", "author_name": "History Channel"})
            result = await extractor.extract("https://youtu.be/abc123")

        assert provider.requested == ["abc123"]
        assert result.content == "Hello world"
        assert result.content_length == len("Hello world")
        assert result.title == "Battle of Hastings"
        assert result.metadata.author == "History Channel"
        assert result.source_type is SourceType.YOUTUBE
        assert result.source_url == "https://youtu.be/abc123"

    @pytest.mark.asyncio
    async def test_title_fallback_when_oembed_fails(self, http_client, transcript_provider):
        extractor = YouTubeExtractor(http_client, transcript_provider=transcript_provider(["Hello", "world"]))

        with aioresponses() as m:
            m.get(OEMBED, status=404)
            result = await extractor.extract("https://youtu.be/abc123")

        assert result.title == "YouTube Video abc123"
        assert result.metadata.author is None
        assert result.to_dict()["metadata"] == {}

    @pytest.mark.asyncio
    async def test_title_fallback_when_oembed_unreachable(self, http_client, transcript_provider):
        extractor = YouTubeExtractor(http_client, transcript_provider=transcript_provider(["Hi"]))

        # No registered response: aioresponses raises a connection error
        with aioresponses():
            result = await extractor.extract("https://www.youtube.com/watch?v=vid42")

        assert result.title == "YouTube Video vid42"

    @pytest.mark.asyncio
    async def test_title_fallback_when_oembed_omits_title(self, http_client, transcript_provider):
        extractor = YouTubeExtractor(http_client, transcript_provider=transcript_provider(["Hi"]))

        with aioresponses() as m:
            m.get(OEMBED, payload={"author_name": "Someone"})
            result = await extractor.extract("https://youtu.be/abc123")

        assert result.title == "YouTube Video abc123"
        assert result.metadata.author == "Someone"

    @pytest.mark.asyncio
    async def test_oembed_invalid_json_tolerated(self, http_client, transcript_provider):
        extractor = YouTubeExtractor(http_client, transcript_provider=transcript_provider(["Hi"]))

        with aioresponses() as m:
            m.get(OEMBED, body="<html>not json</html>", content_type="text/html")
            result = await extractor.extract("https://youtu.be/abc123")

        assert result.title == "YouTube Video abc123"

    @pytest.mark.asyncio
    async def test_zero_segments_fails(self, http_client, transcript_provider):
        extractor = YouTubeExtractor(http_client, transcript_provider=transcript_provider([]))

        with aioresponses() as m:
            m.get(OEMBED, payload={"title": "Silent film"})
            with pytest.raises(ExtractionFailedError, match="No captions available"):
                await extractor.extract("https://youtu.be/abc123")

    @pytest.mark.asyncio
    async def test_provider_error_propagates(self, http_client, transcript_provider, captions_unavailable):
        extractor = YouTubeExtractor(http_client, transcript_provider=transcript_provider(error=captions_unavailable))

        with aioresponses() as m:
            m.get(OEMBED, payload={"title": "Silent film"})
            with pytest.raises(ExtractionFailedError) as exc_info:
                await extractor.extract("https://youtu.be/abc123")

        assert exc_info.value is captions_unavailable

    @pytest.mark.asyncio
    async def test_missing_video_id_fails_without_fetching(self, http_client, transcript_provider):
        provider = transcript_provider(["unused"])
        extractor = YouTubeExtractor(http_client, transcript_provider=provider)

        with aioresponses() as m:
            with pytest.raises(ExtractionFailedError, match="Could not extract YouTube video ID"):
                await extractor.extract("https://www.youtube.com/")
            assert m.requests == {}

        assert provider.requested == []

    @pytest.mark.asyncio
    async def test_long_transcript_truncated(self, http_client, transcript_provider, test_config):
        test_config.extraction.max_chars = 50
        segments = ["word"] * 100
        extractor = YouTubeExtractor(
            http_client, settings=test_config.extraction, transcript_provider=transcript_provider(segments)
        )

        with aioresponses() as m:
            m.get(OEMBED, status=500)
            result = await extractor.extract("https://youtu.be/abc123")

        full = " ".join(segments)
        assert result.content_length == len(full)
        assert result.content == full[:50] + TRUNCATION_MARKER

    @pytest.mark.asyncio
    async def test_transcript_and_metadata_fetched_concurrently(self, http_client):
        started = asyncio.Event()

        class WaitingProvider:
            async def fetch_segments(self, video_id):
                # Completes only once the oEmbed request has been issued
                await asyncio.wait_for(started.wait(), timeout=5)
                return ["Hello"]

        extractor = YouTubeExtractor(http_client, transcript_provider=WaitingProvider())

        async def fake_metadata(url):
            started.set()
            return await original(url)

        original = extractor.fetch_metadata
        extractor.fetch_metadata = fake_metadata

        with aioresponses() as m:
            m.get(OEMBED, payload={"title": "Concurrent"})
            result = await extractor.extract("https://youtu.be/abc123")

        assert result.title == "Concurrent"


class TestYouTubeTranscriptApiProvider:
    @pytest.mark.asyncio
    async def test_returns_snippet_texts(self):
        api = MagicMock()
        api.fetch.return_value = [SimpleNamespace(text="Hello", start=0.0), SimpleNamespace(text="world", start=1.2)]
        provider = YouTubeTranscriptApiProvider(languages=["en", "de"], api=api)

        segments = await provider.fetch_segments("abc123")

        assert segments == ["Hello", "world"]
        api.fetch.assert_called_once_with("abc123", languages=("en", "de"))

    @pytest.mark.asyncio
    async def test_captions_disabled(self):
        api = MagicMock()
        api.fetch.side_effect = TranscriptsDisabled("abc123")
        provider = YouTubeTranscriptApiProvider(api=api)

        with pytest.raises(ExtractionFailedError, match="No captions available"):
            await provider.fetch_segments("abc123")

    @pytest.mark.asyncio
    async def test_transport_error(self):
        api = MagicMock()
        api.fetch.side_effect = requests.ConnectionError("connection reset")
        provider = YouTubeTranscriptApiProvider(api=api)

        with pytest.raises(FetchFailedError, match="connection reset"):
            await provider.fetch_segments("abc123")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            YouTubeRequestFailed("abc123", requests.HTTPError("503 Server Error: Service Unavailable")),
            RequestBlocked("abc123"),
            IpBlocked("abc123"),
        ],
        ids=["request_failed", "request_blocked", "ip_blocked"],
    )
    async def test_youtube_unreachable_is_fetch_failure(self, error):
        api = MagicMock()
        api.fetch.side_effect = error
        provider = YouTubeTranscriptApiProvider(api=api)

        with pytest.raises(FetchFailedError, match="Failed to fetch YouTube transcript") as exc_info:
            await provider.fetch_segments("abc123")

        assert exc_info.value.kind == "fetch_failed"
        assert exc_info.value.__cause__ is error
