from abc import ABC, abstractmethod
from enum import Enum
from typing import Tuple
from urllib.parse import urlparse


class Strategy(str, Enum):
    """Extraction strategy families"""
    GENERIC = "generic"
    VIDEO_HOST = "video_host"
    FORUM_DISCUSSION = "forum_discussion"
    SOCIAL_SHORT_FORM = "social_short_form"


class PlatformDetectorInterface(ABC):
    """Interface for platform classification following the Dependency Inversion Principle"""

    @abstractmethod
    def classify(self, url: str) -> Strategy:
        """
        Classify a URL into exactly one extraction strategy.

        Args:
            url: A validated absolute URL

        Returns:
            The Strategy used to extract metadata for the URL
        """
        pass


class PlatformDetector(PlatformDetectorInterface):
    """
    Maps URLs to extraction strategies by host.
    Rules are checked in order and the first match wins; new platforms are
    added by extending the table.
    """

    # Order matters: video and forum hosts take priority over social.
    platform_rules: Tuple[Tuple[Strategy, Tuple[str, ...]], ...] = (
        (Strategy.VIDEO_HOST, ("youtube.com", "youtu.be")),
        (Strategy.FORUM_DISCUSSION, ("reddit.com",)),
        (Strategy.SOCIAL_SHORT_FORM, ("twitter.com", "x.com")),
    )

    def classify(self, url: str) -> Strategy:
        """
        Classify based on the URL host.

        Args:
            url: A validated absolute URL

        Returns:
            The matching Strategy, or Strategy.GENERIC if no rule matches
        """
        host = (urlparse(url).hostname or "").lower()

        for strategy, domains in self.platform_rules:
            for domain in domains:
                if host == domain or host.endswith("." + domain):
                    return strategy

        return Strategy.GENERIC
