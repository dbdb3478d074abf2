"""
Async HTTP client used by the extraction strategies.

Each request gets its own timeout and an optional body-size ceiling. There is
no retry policy: a failed request surfaces immediately as ``FetchFailedError``
and the caller decides whether to try again.
"""

from __future__ import annotations

import asyncio
import json
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import aiohttp
import structlog

from contentextract.config.config import FetchConfig
from contentextract.errors import ContentTooLargeError, FetchFailedError

logger = structlog.get_logger(__name__)

_CHUNK_SIZE = 64 * 1024


@dataclass
class FetchedDocument:
    """Response body with the request timing and the URL it was finally served from."""

    status: int
    headers: Dict[str, str]
    body: bytes
    charset: Optional[str]
    start_ts: float
    end_ts: float
    url: str
    final_url: str

    def text(self) -> str:
        """Decode the body using the declared charset, falling back to UTF-8."""
        encoding = self.charset or "utf-8"
        try:
            return self.body.decode(encoding, errors="replace")
        except LookupError:
            return self.body.decode("utf-8", errors="replace")


class HttpClient:
    """Thin aiohttp wrapper enforcing per-request timeouts and size limits."""

    def __init__(self, config: Optional[FetchConfig] = None):
        self.config = config or FetchConfig()
        self.session: Optional[aiohttp.ClientSession] = None

    async def initialize(self) -> None:
        """Open the underlying client session."""
        if self.session is None:
            self.session = aiohttp.ClientSession(headers={"User-Agent": self.config.user_agent})
            logger.debug("HTTP client session initialized", user_agent=self.config.user_agent)

    async def close(self) -> None:
        """Close the client session."""
        if self.session is not None:
            await self.session.close()
            self.session = None
            logger.debug("HTTP client closed")

    async def __aenter__(self) -> "HttpClient":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def fetch(
        self,
        url: str,
        *,
        timeout: float,
        accept: Optional[str] = None,
        max_bytes: Optional[int] = None,
        resource: str = "URL",
    ) -> FetchedDocument:
        """
        GET a URL and read its body.

        Args:
            url: URL to fetch
            timeout: Total request timeout in seconds
            accept: Optional Accept header
            max_bytes: Optional ceiling on the declared and actual body size
            resource: Noun used in error messages ("URL", "feed", ...)

        Raises:
            FetchFailedError: Non-2xx status, transport failure or timeout
            ContentTooLargeError: Body exceeds ``max_bytes``
        """
        if self.session is None:
            raise RuntimeError("HTTP client not initialized. Call initialize() first.")

        headers = {"Accept": accept} if accept else None
        start_time = time.time()

        try:
            async with self.session.get(
                url,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as response:
                if not 200 <= response.status < 300:
                    raise FetchFailedError(
                        f"Failed to fetch {resource}: HTTP {response.status}",
                        status=response.status,
                    )

                self._check_declared_length(response, max_bytes)
                body = await self._read_body(response, max_bytes)
                end_time = time.time()

                logger.debug(
                    "Fetched document",
                    url=url,
                    final_url=str(response.url),
                    status=response.status,
                    bytes=len(body),
                    elapsed=end_time - start_time,
                )

                return FetchedDocument(
                    status=response.status,
                    headers=dict(response.headers),
                    body=body,
                    charset=response.charset,
                    start_ts=start_time,
                    end_ts=end_time,
                    url=url,
                    final_url=str(response.url),
                )
        except asyncio.TimeoutError as e:
            logger.warning("Request timed out", url=url, timeout=timeout)
            raise FetchFailedError(f"Failed to fetch {resource}: timed out after {timeout:g}s") from e
        except aiohttp.ClientError as e:
            logger.warning("Request failed", url=url, error=str(e), error_type=type(e).__name__)
            raise FetchFailedError(f"Failed to fetch {resource}: {e}") from e

    async def fetch_json(self, url: str, *, timeout: float, resource: str = "URL") -> Any:
        """GET a URL and decode its body as JSON."""
        document = await self.fetch(url, timeout=timeout, accept="application/json", resource=resource)
        try:
            return json.loads(document.text())
        except json.JSONDecodeError as e:
            raise FetchFailedError(f"Failed to decode {resource} response as JSON: {e}") from e

    @staticmethod
    def _check_declared_length(response: aiohttp.ClientResponse, max_bytes: Optional[int]) -> None:
        if max_bytes is None:
            return
        declared = response.headers.get("Content-Length")
        if declared is None:
            return
        try:
            declared_bytes = int(declared)
        except ValueError:
            return
        if declared_bytes > max_bytes:
            raise ContentTooLargeError(
                f"Content too large (max {_format_bytes(max_bytes)})",
                limit=max_bytes,
            )

    @staticmethod
    async def _read_body(response: aiohttp.ClientResponse, max_bytes: Optional[int]) -> bytes:
        if max_bytes is None:
            return await response.read()

        chunks = []
        received = 0
        async for chunk in response.content.iter_chunked(_CHUNK_SIZE):
            received += len(chunk)
            if received > max_bytes:
                raise ContentTooLargeError(
                    f"Content too large (max {_format_bytes(max_bytes)})",
                    limit=max_bytes,
                )
            chunks.append(chunk)
        return b"".join(chunks)


def _format_bytes(size: int) -> str:
    if size % (1024 * 1024) == 0:
        return f"{size // (1024 * 1024)}MB"
    if size % 1024 == 0:
        return f"{size // 1024}KB"
    return f"{size} bytes"
