import logging

from app.core.config import settings
from app.core.models import LinkMetadata
from app.exceptions.metadata import InvalidURLException, PlatformAPIErrorException
from app.services.url_normalizer import NormalizedURL, is_absolute
from app.utils.youtube_parser import extract_youtube_id

from .base import MetadataExtractorInterface

logger = logging.getLogger(__name__)

YOUTUBE_OEMBED_URL = "https://www.youtube.com/oembed"
YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
YOUTUBE_FAVICON = "https://www.youtube.com/favicon.ico"
YOUTUBE_DOMAIN = "youtube.com"


class VideoHostExtractor(MetadataExtractorInterface):
    """Builds video metadata from the platform's oEmbed endpoint"""

    async def extract(self, target: NormalizedURL) -> LinkMetadata:
        video_id = extract_youtube_id(target.url)
        if not video_id:
            raise InvalidURLException(target.url, "no video ID in URL")

        watch_url = YOUTUBE_WATCH_URL.format(video_id=video_id)
        logger.info(f"Fetching oEmbed metadata for video ID: {video_id}")
        data = await self.web_fetcher.fetch_json(
            YOUTUBE_OEMBED_URL,
            params={"url": watch_url, "format": "json"},
            timeout=settings.fetch_timeout,
        )

        title = (data.get("title") or "").strip()
        if not title:
            raise PlatformAPIErrorException("YouTube", target.url, "oEmbed response has no title")

        author = (data.get("author_name") or "").strip()
        thumbnail = data.get("thumbnail_url")

        return LinkMetadata(
            url=target.url,
            title=title,
            description=f"Video by {author}" if author else None,
            image_url=thumbnail if is_absolute(thumbnail) else None,
            favicon=YOUTUBE_FAVICON,
            domain=YOUTUBE_DOMAIN,
        )
