import logging

from app.core.models import LinkMetadata
from app.services.html_parser import HTMLParser
from app.services.url_normalizer import NormalizedURL, default_favicon, resolve_url

from .base import MetadataExtractorInterface

logger = logging.getLogger(__name__)


class GenericExtractor(MetadataExtractorInterface):
    """
    Extracts metadata from any HTML page following Open Graph, Twitter card
    and plain HTML conventions
    """

    async def extract(self, target: NormalizedURL) -> LinkMetadata:
        """Fetch the page and extract metadata, letting fetch errors propagate"""
        html = await self.web_fetcher.fetch_html(target.url)

        logger.info(f"Extracting metadata from HTML for URL: {target.url}")
        html_parser = HTMLParser(html, target.url)

        title = html_parser.get_title() or target.domain
        description = html_parser.get_description()

        image_url = resolve_url(target.url, html_parser.get_image())
        favicon = resolve_url(target.url, html_parser.get_favicon()) or default_favicon(target.domain)

        metadata = LinkMetadata(
            url=target.url,
            title=title.strip(),
            description=description.strip() if description else None,
            image_url=image_url,
            favicon=favicon,
            domain=target.domain,
        )
        logger.info(f"Successfully extracted metadata for URL: {target.url}")
        return metadata
