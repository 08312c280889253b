import logging
from typing import Dict

from app.core.models import LinkMetadata
from .extractors import MetadataExtractorInterface, fallback_metadata
from .platform_detector import PlatformDetectorInterface, Strategy
from .url_normalizer import get_domain, normalize_url

logger = logging.getLogger(__name__)


class MetadataService:
    """
    Single entry point for metadata resolution: normalizes, classifies and
    dispatches to the matching extractor
    """

    def __init__(
        self,
        platform_detector: PlatformDetectorInterface,
        extractors: Dict[Strategy, MetadataExtractorInterface],
    ):
        self.platform_detector = platform_detector
        self.extractors = extractors

    async def extract(self, url: str) -> LinkMetadata:
        """
        Extract metadata for a URL, letting extractor errors propagate.

        Args:
            url: The URL to extract metadata from

        Returns:
            LinkMetadata produced by the matching extractor

        Raises:
            AppException: If the URL is invalid or the extractor fails
                without a fallback of its own
        """
        target = normalize_url(url)
        strategy = self.platform_detector.classify(target.url)
        extractor = self.extractors.get(strategy) or self.extractors[Strategy.GENERIC]

        logger.info(f"Extracting metadata for URL {target.url} with {strategy.value} strategy")
        return await extractor.extract(target)

    async def resolve(self, url: str) -> LinkMetadata:
        """
        Resolve metadata for a URL. Never raises.

        Any failure produces a fallback record titled with the URL's domain
        (an empty string when the URL cannot be parsed).
        """
        logger.info(f"Getting metadata for URL: {url}")
        try:
            return await self.extract(url)
        except Exception as e:
            logger.warning(f"Using fallback metadata for URL {url}: {e}")
            return fallback_metadata(url if isinstance(url, str) else "", get_domain(url))
