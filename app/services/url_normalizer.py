"""URL parsing, canonical domain derivation and reference resolution"""

import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urljoin, urlparse

from app.core.config import settings
from app.exceptions.metadata import InvalidURLException

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = ("http", "https")


@dataclass(frozen=True)
class NormalizedURL:
    """A validated absolute URL together with its canonical display domain"""
    url: str
    domain: str
    host: str


def _strip_www(host: str) -> str:
    return host[4:] if host.startswith("www.") else host


def normalize_url(raw: Optional[str]) -> NormalizedURL:
    """
    Validate a raw string as an absolute http(s) URL.

    Args:
        raw: Arbitrary user supplied string

    Returns:
        NormalizedURL with the trimmed URL and its canonical domain

    Raises:
        InvalidURLException: If the string is not an absolute http(s) URL
    """
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidURLException(str(raw or ""), "empty URL")

    url = raw.strip()
    try:
        parsed = urlparse(url)
        if parsed.scheme.lower() not in ALLOWED_SCHEMES:
            raise InvalidURLException(url, "unsupported scheme")
        host = (parsed.hostname or "").lower()
        if not host:
            raise InvalidURLException(url, "missing host")
        # Raises ValueError for out-of-range ports
        parsed.port
    except ValueError as e:
        raise InvalidURLException(url, str(e))

    return NormalizedURL(url=url, domain=_strip_www(host), host=host)


def url_host(raw: Optional[str]) -> Optional[str]:
    """Lowercased host of an absolute URL of any scheme, or None"""
    if not isinstance(raw, str):
        return None
    try:
        parsed = urlparse(raw.strip())
        # Raises ValueError for out-of-range ports
        parsed.port
    except ValueError:
        return None
    if not parsed.scheme or not parsed.hostname:
        return None
    return parsed.hostname.lower()


def get_domain(url: Optional[str]) -> str:
    """Canonical domain for a URL, or an empty string when it has no host"""
    host = url_host(url)
    return _strip_www(host) if host else ""


def is_absolute(url: Optional[str]) -> bool:
    if not url:
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme.lower() in ALLOWED_SCHEMES and bool(parsed.netloc)


def resolve_url(base: str, reference: Optional[str]) -> Optional[str]:
    """
    Resolve a possibly relative reference against a page URL.

    Returns None instead of raising when the reference is empty or cannot be
    turned into an absolute http(s) URL.
    """
    if not reference:
        return None
    reference = reference.strip()
    if is_absolute(reference):
        return reference
    try:
        resolved = urljoin(base, reference)
    except ValueError as e:
        logger.debug(f"Failed to resolve '{reference}' against {base}: {e}")
        return None
    return resolved if is_absolute(resolved) else None


def default_favicon(domain: str) -> str:
    """Generated favicon-service URL for a domain"""
    return settings.favicon_service_url.format(domain=domain)
