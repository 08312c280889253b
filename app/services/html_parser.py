"""HTML parsing utilities for metadata extraction"""

import logging
from typing import Iterable, Optional

from bs4 import BeautifulSoup


logger = logging.getLogger(__name__)

FAVICON_RELS = ("icon", "shortcut icon", "apple-touch-icon")


class HTMLParser:
    """Encapsulates HTML parsing functionality"""

    def __init__(self, html: str, url: str):
        """
        Initialize the HTML parser

        Args:
            html: HTML content to parse
            url: URL the content was fetched from
        """
        self.html = html
        self.url = url
        self.soup = BeautifulSoup(html, "lxml")

    @staticmethod
    def _clean(value) -> Optional[str]:
        if isinstance(value, list):
            value = value[0] if value else None
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    def get_meta_content(self, tag: str) -> Optional[str]:
        """Extract a meta tag's content, matching either its property or name attribute"""
        el = self.soup.find("meta", attrs={"property": tag}) or self.soup.find("meta", attrs={"name": tag})
        if el:
            return self._clean(el.get("content"))
        return None

    def get_document_title(self) -> Optional[str]:
        """Text of the <title> element"""
        if self.soup.title:
            return self._clean(self.soup.title.get_text())
        return None

    def get_title(self) -> Optional[str]:
        """Extract title from Open Graph, Twitter card or the <title> element"""
        return self.get_meta_content("og:title") or \
            self.get_meta_content("twitter:title") or \
            self.get_document_title()

    def get_description(self) -> Optional[str]:
        """Extract description from multiple possible sources"""
        return self.get_meta_content("og:description") or \
            self.get_meta_content("twitter:description") or \
            self.get_meta_content("description")

    def get_image(self) -> Optional[str]:
        """Extract the raw image reference from Open Graph or Twitter card meta"""
        return self.get_meta_content("og:image") or \
            self.get_meta_content("twitter:image")

    def get_favicon(self) -> Optional[str]:
        """Raw href of the first favicon link, by rel priority"""
        links = self.soup.find_all("link", href=True)
        for wanted in FAVICON_RELS:
            for link in links:
                rel = link.get("rel") or []
                if isinstance(rel, str):
                    rel = rel.split()
                if " ".join(rel).lower() == wanted:
                    href = self._clean(link.get("href"))
                    if href:
                        return href
        return None

    def get_first_heading(self, ignore: Iterable[str] = ()) -> Optional[str]:
        """First <h1> whose text is not in the ignore list (case-insensitive)"""
        ignored = {value.lower() for value in ignore}
        for heading in self.soup.find_all("h1"):
            text = self._clean(heading.get_text(" "))
            if text and text.lower() not in ignored:
                return text
        return None

    def select_text(self, selectors: Iterable[str]) -> Optional[str]:
        """Whitespace-collapsed text of the first selector that yields any"""
        for selector in selectors:
            elements = self.soup.select(selector)
            parts = [" ".join(el.get_text(" ").split()) for el in elements]
            text = " ".join(part for part in parts if part)
            if text:
                return text
        return None
