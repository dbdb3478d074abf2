"""
URL validation for outbound fetches.

Rejects malformed URLs, non-HTTP schemes, local hostnames and private IPv4
addresses before any network access happens. IPv4 hosts are compared in their
canonical dotted-quad form, so legacy spellings such as ``2130706433``,
``0x7f.1`` or ``10.0.0.5.`` (trailing dot) are caught as well.

Known gaps, left as-is on purpose:

- Hostnames are never resolved. A public name that resolves to a private
  address (DNS rebinding) passes validation.
- Redirect targets followed by the HTTP client are not re-validated.
"""

from __future__ import annotations

import ipaddress
import socket
from typing import List, Optional
from urllib.parse import SplitResult, urlsplit

from pydantic import BaseModel, Field, field_validator

from contentextract.errors import InvalidInputError


class URLValidationRules(BaseModel):
    """Rules for URL validation."""

    allowed_schemes: List[str] = Field(default_factory=lambda: ["http", "https"])
    blocked_hosts: List[str] = Field(
        default_factory=lambda: [
            "localhost",
            "127.0.0.1",
            "::1",
            "0.0.0.0",
        ]
    )
    blocked_suffixes: List[str] = Field(default_factory=lambda: [".local"])
    private_networks: List[str] = Field(
        default_factory=lambda: [
            "10.0.0.0/8",
            "172.16.0.0/12",
            "192.168.0.0/16",
            "169.254.0.0/16",
        ]
    )

    @field_validator("allowed_schemes")
    @classmethod
    def validate_schemes(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("allowed_schemes must contain at least one scheme")
        return [scheme.lower() for scheme in v]

    @field_validator("private_networks")
    @classmethod
    def validate_networks(cls, v: List[str]) -> List[str]:
        for network in v:
            ipaddress.IPv4Network(network)
        return v


class InputValidator:
    """Validates user-supplied URLs against a set of SSRF rules."""

    def __init__(self, url_rules: Optional[URLValidationRules] = None):
        self.url_rules = url_rules or URLValidationRules()
        self._networks = [ipaddress.IPv4Network(network) for network in self.url_rules.private_networks]

    def validate_url(self, url: str) -> SplitResult:
        """
        Validate a URL and return its parsed form.

        Raises:
            InvalidInputError: If the URL is malformed or targets a disallowed host
        """
        parsed = self._parse(url)

        if parsed.scheme not in self.url_rules.allowed_schemes:
            raise InvalidInputError("Only HTTP and HTTPS URLs are supported")

        if not parsed.netloc or not parsed.hostname:
            raise InvalidInputError("Invalid URL format")

        hostname = parsed.hostname
        host = canonical_host(hostname)
        if host in self.url_rules.blocked_hosts or host.endswith(tuple(self.url_rules.blocked_suffixes)):
            raise InvalidInputError(f"Local URLs are not allowed: {hostname}")

        if self._is_private_ipv4(host):
            raise InvalidInputError(f"Private IP addresses are not allowed: {hostname}")

        return parsed

    def _parse(self, url: str) -> SplitResult:
        if not isinstance(url, str) or not url.strip():
            raise InvalidInputError("Invalid URL format")
        try:
            parsed = urlsplit(url.strip())
            # Accessing .port validates the netloc's port component.
            parsed.port
        except ValueError as e:
            raise InvalidInputError(f"Invalid URL format: {e}") from e

        if not parsed.scheme:
            raise InvalidInputError("Invalid URL format")
        return parsed

    def _is_private_ipv4(self, hostname: str) -> bool:
        try:
            ip = ipaddress.IPv4Address(hostname)
        except ValueError:
            # Not an IPv4 literal
            return False
        return any(ip in network for network in self._networks)


def canonical_host(hostname: str) -> str:
    """
    Normalize a hostname the way the system resolver will read it.

    One trailing dot is dropped. Anything ``inet_aton`` accepts as an IPv4
    address (decimal, octal or hex parts, fewer than four parts) is rewritten
    as a dotted quad; other names are returned unchanged.
    """
    host = hostname[:-1] if hostname.endswith(".") else hostname
    try:
        packed = socket.inet_aton(host)
    except (OSError, ValueError):
        return host
    return socket.inet_ntoa(packed)


# Convenience function
_default_validator = InputValidator()


def validate_url(url: str) -> SplitResult:
    """Validate a URL using the default validator."""
    return _default_validator.validate_url(url)
