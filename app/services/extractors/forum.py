import logging
import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

from app.core.config import settings
from app.core.models import LinkMetadata
from app.exceptions.metadata import InvalidURLException
from app.services.html_parser import HTMLParser
from app.services.url_normalizer import NormalizedURL, default_favicon, resolve_url

from .base import MetadataExtractorInterface, truncate

logger = logging.getLogger(__name__)

REDDIT_DOMAIN = "reddit.com"
REDDIT_POST_PATTERN = re.compile(
    r"reddit\.com/r/([^/?#]+)(?:/comments/([^/?#]+)(?:/[^/?#]*/([^/?#]+))?)?",
    re.IGNORECASE,
)

GENERIC_HEADINGS = (
    "reddit",
    "reddit - dive into anything",
    "reddit - the heart of the internet",
)

POST_BODY_SELECTORS = (
    'shreddit-post div[slot="text-body"]',
    '[data-test-id="post-content"] [data-click-id="text"]',
    'div[data-click-id="text"]',
    ".usertext-body .md",
    "div.md",
)

# Query parameters the image CDN uses to serve resized variants
RESIZE_PARAMS = {"width", "height", "format", "auto", "crop", "blur"}

DESCRIPTION_LIMIT = 300


@dataclass(frozen=True)
class ForumPost:
    community: str
    post_id: Optional[str]
    # Parsed for comment permalinks but not used to change extraction
    comment_id: Optional[str] = None


def parse_forum_url(url: str) -> Optional[ForumPost]:
    match = REDDIT_POST_PATTERN.search(url)
    if not match:
        return None
    return ForumPost(community=match.group(1), post_id=match.group(2), comment_id=match.group(3))


def normalize_image_url(page_url: str, raw: Optional[str]) -> Optional[str]:
    """Make an image reference absolute and drop CDN resize parameters"""
    if not raw:
        return None
    raw = raw.strip()
    if raw.startswith("//"):
        raw = "https:" + raw
    resolved = resolve_url(page_url, raw)
    if not resolved:
        return None

    parsed = urlparse(resolved)
    host = (parsed.hostname or "").lower()
    if host == "redd.it" or host.endswith(".redd.it"):
        query = [(key, value) for key, value in parse_qsl(parsed.query) if key.lower() not in RESIZE_PARAMS]
        resolved = urlunparse(parsed._replace(query=urlencode(query)))
    return resolved


class ForumDiscussionExtractor(MetadataExtractorInterface):
    """
    Scrapes discussion pages with browser-like headers.

    Scraping these pages fails often, so any failure on the fetch/parse path
    yields a community-specific fallback instead of an error.
    """

    def _headers(self) -> dict:
        return {
            "User-Agent": settings.browser_user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
        }

    async def extract(self, target: NormalizedURL) -> LinkMetadata:
        post = parse_forum_url(target.url)
        if post is None or not post.post_id:
            raise InvalidURLException(target.url, "no post ID in URL")

        try:
            html = await self.web_fetcher.fetch_html(
                target.url,
                headers=self._headers(),
                timeout=settings.forum_fetch_timeout,
            )
            return self._parse(html, target, post)
        except Exception as e:
            logger.warning(f"Falling back to synthesized metadata for r/{post.community} post {post.post_id}: {e}")
            return self._fallback(target, post)

    def _title(self, parser: HTMLParser, post: ForumPost) -> str:
        title = parser.get_meta_content("og:title") or \
            parser.get_meta_content("twitter:title") or \
            parser.get_first_heading(ignore=GENERIC_HEADINGS)
        if title:
            return title

        page_title = parser.get_document_title()
        if page_title:
            page_title = re.sub(
                rf"\s*:\s*r/{re.escape(post.community)}\s*$", "", page_title, flags=re.IGNORECASE
            )
            page_title = re.sub(r"\s*[-:|]\s*reddit\s*$", "", page_title, flags=re.IGNORECASE).strip()
            if page_title and page_title.lower() not in GENERIC_HEADINGS:
                return page_title

        return f"r/{post.community} Post"

    def _parse(self, html: str, target: NormalizedURL, post: ForumPost) -> LinkMetadata:
        parser = HTMLParser(html, target.url)

        description = truncate(parser.select_text(POST_BODY_SELECTORS), DESCRIPTION_LIMIT) or \
            parser.get_description()

        image_url = normalize_image_url(target.url, parser.get_image())

        return LinkMetadata(
            url=target.url,
            title=self._title(parser, post).strip(),
            description=description.strip() if description else None,
            image_url=image_url,
            favicon=default_favicon(REDDIT_DOMAIN),
            domain=REDDIT_DOMAIN,
        )

    def _fallback(self, target: NormalizedURL, post: ForumPost) -> LinkMetadata:
        return LinkMetadata(
            url=target.url,
            title=f"r/{post.community} Post",
            description=f"Discussion on r/{post.community}",
            image_url=None,
            favicon=default_favicon(REDDIT_DOMAIN),
            domain=REDDIT_DOMAIN,
        )
