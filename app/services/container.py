from typing import Dict, Optional, Type, TypeVar

import httpx

from app.core.config import settings
from .url_validator import URLValidator, URLValidatorInterface
from .web_fetcher import WebFetcher, WebFetcherInterface
from .platform_detector import PlatformDetector, PlatformDetectorInterface, Strategy
from .extractors import (
    ForumDiscussionExtractor,
    GenericExtractor,
    SocialShortFormExtractor,
    VideoHostExtractor,
)
from .link_store import BufferedLinkWriter, InMemoryLinkStore, LinkStoreInterface
from .metadata_service import MetadataService
from .metadata_refresher import MetadataRefresher

T = TypeVar('T')


class ServiceContainer:
    """Container for managing service dependencies with dependency injection"""

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        link_store: Optional[LinkStoreInterface] = None,
    ):
        self._services: Dict[Type, object] = {}
        self._transport = transport
        self._link_store = link_store

        # Register services in dependency order
        self._register_services()

    def _register_services(self) -> None:
        """Register all services with proper dependency injection"""
        self._services[URLValidatorInterface] = URLValidator(settings.block_private_hosts)
        self._services[PlatformDetectorInterface] = PlatformDetector()

        # Services with dependencies
        web_fetcher = WebFetcher(self._services[URLValidatorInterface], transport=self._transport)
        self._services[WebFetcherInterface] = web_fetcher

        extractors = {
            Strategy.GENERIC: GenericExtractor(web_fetcher),
            Strategy.VIDEO_HOST: VideoHostExtractor(web_fetcher),
            Strategy.FORUM_DISCUSSION: ForumDiscussionExtractor(web_fetcher),
            Strategy.SOCIAL_SHORT_FORM: SocialShortFormExtractor(web_fetcher),
        }
        metadata_service = MetadataService(self._services[PlatformDetectorInterface], extractors)
        self._services[MetadataService] = metadata_service

        writer = BufferedLinkWriter(self._link_store or InMemoryLinkStore())
        self._services[LinkStoreInterface] = writer
        self._services[BufferedLinkWriter] = writer

        # Refresh uses strict extraction so failures reach the retry loop
        self._services[MetadataRefresher] = MetadataRefresher(metadata_service.extract, writer)

    def get_metadata_service(self) -> MetadataService:
        """Get the metadata service instance"""
        return self._services[MetadataService]  # type: ignore

    def get_metadata_refresher(self) -> MetadataRefresher:
        return self._services[MetadataRefresher]  # type: ignore

    def get_service(self, interface: Type[T]) -> T:
        """Generic method to retrieve a service by its interface"""
        service = self._services.get(interface)
        if service is None:
            raise ValueError(f"Service for interface {interface.__name__} not found")
        return service  # type: ignore


container = ServiceContainer()
