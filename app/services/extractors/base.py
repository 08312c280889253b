import logging
from abc import ABC, abstractmethod
from typing import Optional

from app.core.models import LinkMetadata
from app.services.url_normalizer import NormalizedURL, default_favicon
from app.services.web_fetcher import WebFetcherInterface

logger = logging.getLogger(__name__)


def fallback_metadata(url: str, domain: str) -> LinkMetadata:
    """Minimal metadata record that can always be built, even for garbage input"""
    return LinkMetadata(
        url=url,
        title=domain,
        description=None,
        image_url=None,
        favicon=default_favicon(domain),
        domain=domain,
    )


def truncate(text: Optional[str], limit: int) -> Optional[str]:
    if not text:
        return text
    text = text.strip()
    if len(text) <= limit:
        return text
    return text[:limit - 3].rstrip() + "..."


class MetadataExtractorInterface(ABC):
    """Interface shared by all platform extraction strategies"""

    def __init__(self, web_fetcher: WebFetcherInterface):
        self.web_fetcher = web_fetcher

    @abstractmethod
    async def extract(self, target: NormalizedURL) -> LinkMetadata:
        """
        Extract preview metadata for a validated URL.

        Args:
            target: The normalized URL to extract from

        Returns:
            LinkMetadata for the URL

        Raises:
            AppException: Extractors without their own fallback let fetch,
                parse and platform errors propagate to the caller
        """
        pass
