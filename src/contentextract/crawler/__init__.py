"""
HTTP transport for the extraction strategies.
"""

from .http_client import FetchedDocument, HttpClient

__all__ = ["FetchedDocument", "HttpClient"]
