"""
URL classification: picks the extraction strategy for a URL.

Rules are evaluated in order and the first match wins. Anything unmatched is
treated as an article.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, List, Tuple, Union
from urllib.parse import SplitResult, urlsplit


class UrlKind(str, Enum):
    """Extraction strategy selected for a URL."""

    YOUTUBE = "youtube"
    RSS = "rss"
    ARTICLE = "article"


def _is_youtube_host(url: SplitResult) -> bool:
    hostname = (url.hostname or "").lower()
    return "youtube.com" in hostname or "youtu.be" in hostname


def _is_feed_path(url: SplitResult) -> bool:
    path = url.path.lower()
    return "/rss" in path or "/feed" in path or path.endswith((".xml", ".rss"))


CLASSIFICATION_RULES: List[Tuple[Callable[[SplitResult], bool], UrlKind]] = [
    (_is_youtube_host, UrlKind.YOUTUBE),
    (_is_feed_path, UrlKind.RSS),
]


def classify_url(url: Union[str, SplitResult]) -> UrlKind:
    """Return the UrlKind for a URL string or an already split URL."""
    parsed = urlsplit(url) if isinstance(url, str) else url
    for predicate, kind in CLASSIFICATION_RULES:
        if predicate(parsed):
            return kind
    return UrlKind.ARTICLE
