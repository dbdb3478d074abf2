"""
Shared test configuration for contentextract.

Provides an open HTTP client, a scripted transcript provider, and sample
article / feed documents. All outbound HTTP in tests goes through
aioresponses; nothing touches the network.
"""

# Standard library imports
from typing import AsyncGenerator, Callable, List, Optional

# Third-party imports
import pytest
import pytest_asyncio

# Local imports
from contentextract.config import Config, ExtractionSettings
from contentextract.crawler.http_client import HttpClient
from contentextract.errors import ExtractionFailedError

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Tests spanning the dispatcher and strategies")
    config.addinivalue_line("markers", "security: URL validation and SSRF tests")


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def test_config() -> Config:
    """Default configuration, independent of environment files."""
    return Config()


@pytest.fixture
def extraction_settings(test_config) -> ExtractionSettings:
    return test_config.extraction


# ============================================================================
# HTTP Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def http_client(test_config) -> AsyncGenerator[HttpClient, None]:
    """Open HTTP client; pair with aioresponses to stub responses."""
    client = HttpClient(test_config.fetch)
    await client.initialize()
    try:
        yield client
    finally:
        await client.close()


@pytest.fixture
def idle_http_client(test_config) -> HttpClient:
    """Unopened client for tests that never reach the network."""
    return HttpClient(test_config.fetch)


# ============================================================================
# Transcript Provider Fixtures
# ============================================================================


class ScriptedTranscriptProvider:
    """TranscriptProvider returning canned segments and recording requests."""

    def __init__(self, segments: Optional[List[str]] = None, error: Optional[Exception] = None) -> None:
        self.segments = segments if segments is not None else []
        self.error = error
        self.requested: List[str] = []

    async def fetch_segments(self, video_id: str) -> List[str]:
        self.requested.append(video_id)
        if self.error is not None:
            raise self.error
        return list(self.segments)


@pytest.fixture
def transcript_provider() -> Callable[..., ScriptedTranscriptProvider]:
    """Factory for scripted transcript providers."""

    def _make(segments: Optional[List[str]] = None, error: Optional[Exception] = None) -> ScriptedTranscriptProvider:
        return ScriptedTranscriptProvider(segments=segments, error=error)

    return _make


@pytest.fixture
def captions_unavailable() -> ExtractionFailedError:
    return ExtractionFailedError("No captions available for this YouTube video (abc123)")


# ============================================================================
# Document Fixtures
# ============================================================================

ARTICLE_PARAGRAPHS = [
    "The Congress of Vienna opened in September 1814 with the aim of redrawing the map of Europe "
    "after the defeat of Napoleon. Delegates from more than two hundred states attended.",
    "Metternich, Castlereagh, Talleyrand and Tsar Alexander dominated the negotiations, which took "
    "place largely in private meetings rather than in formal plenary sessions of the congress.",
    "The Final Act, signed in June 1815, created the German Confederation, restored many of the old "
    "dynasties, and established a balance of power that held for much of the following century.",
]


@pytest.fixture
def article_paragraphs() -> List[str]:
    return list(ARTICLE_PARAGRAPHS)


@pytest.fixture
def sample_article_html() -> str:
    """A readable article page with navigation chrome and meta tags."""
    paragraphs = "\n".join(f"<p>{text}</p>" for text in ARTICLE_PARAGRAPHS)
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <title>The Congress of Vienna</title>
        <meta name="author" content="Jane Historian">
        <meta property="og:site_name" content="History Weekly">
        <meta name="description" content="How Europe was redrawn in 1815.">
    </head>
    <body>
        <nav class="menu"><a href="/">Home</a> <a href="/about">About</a></nav>
        <article class="post-content">
            <h1>The Congress of Vienna</h1>
            {paragraphs}
        </article>
        <footer class="footer">Copyright History Weekly</footer>
    </body>
    </html>
    """


def build_rss(item_count: int, *, title: str = "History Podcast", body_chars: int = 60) -> str:
    """Build an RSS 2.0 document with ``item_count`` numbered items."""
    filler = "the past " * (body_chars // 9)
    items = "\n".join(
        f"""
        <item>
            <title>Episode {i}</title>
            <description><![CDATA[<p>Episode {i} covers {filler}</p>]]></description>
        </item>
        """
        for i in range(1, item_count + 1)
    )
    return f"""<?xml version="1.0" encoding="UTF-8"?>
    <rss version="2.0">
      <channel>
        <title>{title}</title>
        <link>https://example.com/</link>
        <description>A show about history</description>
        {items}
      </channel>
    </rss>
    """


def build_atom(entry_count: int, *, title: str = "History Blog") -> str:
    """Build an Atom feed whose entries carry summaries."""
    entries = "\n".join(
        f"""
        <entry>
            <title>Post {i}</title>
            <summary type="html">&lt;p&gt;Post {i} is about the Hanseatic League and its trading cities.&lt;/p&gt;</summary>
        </entry>
        """
        for i in range(1, entry_count + 1)
    )
    return f"""<?xml version="1.0" encoding="utf-8"?>
    <feed xmlns="http://www.w3.org/2005/Atom">
      <title>{title}</title>
      {entries}
    </feed>
    """


@pytest.fixture
def rss_factory() -> Callable[..., str]:
    return build_rss


@pytest.fixture
def atom_factory() -> Callable[..., str]:
    return build_atom
