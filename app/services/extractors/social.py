import logging
import re
from dataclasses import dataclass
from typing import Optional

from bs4 import BeautifulSoup

from app.core.config import settings
from app.core.models import LinkMetadata
from app.exceptions.metadata import InvalidURLException, PlatformAPIErrorException
from app.services.html_parser import HTMLParser
from app.services.url_normalizer import NormalizedURL, default_favicon, is_absolute

from .base import MetadataExtractorInterface, truncate

logger = logging.getLogger(__name__)

TWITTER_OEMBED_URL = "https://publish.twitter.com/oembed"
TWITTER_FAVICON = "https://abs.twimg.com/favicons/twitter.3.ico"
SOCIAL_POST_PATTERN = re.compile(
    r"(?:twitter\.com|x\.com)/([^/?#]+)(?:/status(?:es)?/(\d+))?",
    re.IGNORECASE,
)

SHORT_LINK_PATTERN = re.compile(r"https?://t\.co/\S+")
# Entities that survive one round of decoding in embed markup
HTML_ENTITIES = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&#x27;": "'",
    "&nbsp;": " ",
}

TITLE_LIMIT = 100


@dataclass(frozen=True)
class SocialPost:
    handle: str
    post_id: Optional[str]


def parse_social_url(url: str) -> Optional[SocialPost]:
    match = SOCIAL_POST_PATTERN.search(url)
    if not match:
        return None
    return SocialPost(handle=match.group(1), post_id=match.group(2))


def clean_embed_text(embed_html: str) -> str:
    """Plain text of the first paragraph of oEmbed markup"""
    soup = BeautifulSoup(embed_html or "", "lxml")
    paragraph = soup.find("p")
    if paragraph is None:
        return ""

    for br in paragraph.find_all("br"):
        br.replace_with(" ")
    text = paragraph.get_text()

    text = SHORT_LINK_PATTERN.sub("", text)
    text = re.sub(r"[\r\n]+", " ", text)
    for entity, char in HTML_ENTITIES.items():
        text = text.replace(entity, char)
    return re.sub(r"\s+", " ", text).strip()


class SocialShortFormExtractor(MetadataExtractorInterface):
    """
    Builds post metadata from the public oEmbed endpoint, recovering the
    preview image from the post page when it can
    """

    async def extract(self, target: NormalizedURL) -> LinkMetadata:
        post = parse_social_url(target.url)
        if post is None or not post.post_id:
            raise InvalidURLException(target.url, "no post ID in URL")

        try:
            data = await self.web_fetcher.fetch_json(
                TWITTER_OEMBED_URL,
                params={"url": target.url, "omit_script": "true", "dnt": "true"},
                timeout=settings.fetch_timeout,
            )
            if not data.get("html"):
                raise PlatformAPIErrorException("Twitter", target.url, "oEmbed response has no html")
        except Exception as e:
            logger.warning(f"Falling back to synthesized metadata for @{post.handle} post {post.post_id}: {e}")
            return self._fallback(target, post)

        text = clean_embed_text(data["html"])
        author = (data.get("author_name") or "").strip() or f"@{post.handle}"

        if text:
            title = truncate(text, TITLE_LIMIT)
            description = text if author.lower() in text.lower() else f"{text} - {author}"
        else:
            title = f"Post by {author}"
            description = f"Post by {author}"

        image_url = await self._find_image(target)

        return LinkMetadata(
            url=target.url,
            title=title,
            description=description,
            image_url=image_url,
            favicon=TWITTER_FAVICON,
            domain=target.domain,
        )

    async def _find_image(self, target: NormalizedURL) -> Optional[str]:
        """Best-effort image lookup on the post page; failures only mean no image"""
        try:
            html = await self.web_fetcher.fetch_html(target.url, timeout=settings.fetch_timeout)
            image = HTMLParser(html, target.url).get_image()
        except Exception as e:
            logger.debug(f"No image recovered for {target.url}: {e}")
            return None
        return image if is_absolute(image) else None

    def _fallback(self, target: NormalizedURL, post: SocialPost) -> LinkMetadata:
        return LinkMetadata(
            url=target.url,
            title=f"Post by @{post.handle}",
            description=f"View this post by @{post.handle}",
            image_url=None,
            favicon=default_favicon(target.domain),
            domain=target.domain,
        )
