import re
from urllib.parse import urlparse
from abc import ABC, abstractmethod


class URLValidatorInterface(ABC):
    """Interface for checking that a URL is safe to fetch"""

    @abstractmethod
    def validate(self, url: str) -> bool:
        """
        Validate a URL to check if it's safe and properly formatted.

        Args:
            url: The URL string to validate

        Returns:
            True if the URL is valid and safe, False otherwise
        """
        pass


class URLValidator(URLValidatorInterface):
    """
    Validates URLs and prevents SSRF attacks.
    The fetcher consults it before any outbound request.
    """

    private_patterns = [
        r"^127\.",
        r"^localhost",
        r"^0\.0\.0\.0$",
        r"^10\.",
        r"^172\.(1[6-9]|2[0-9]|3[0-1])\.",
        r"^192\.168\.",
        r"^169\.254\.",
        r"^::1$",
    ]

    def __init__(self, block_private_hosts: bool = True):
        self.block_private_hosts = block_private_hosts

    def validate(self, url: str) -> bool:
        """
        Validate URL and check for potential SSRF attacks.

        Args:
            url: The URL string to validate

        Returns:
            True if the URL is valid and safe, False otherwise
        """
        try:
            parsed = urlparse(url)
            if not parsed.scheme or parsed.scheme not in ["http", "https"]:
                return False
            if not parsed.netloc:
                return False

            # Check port validity
            if parsed.port is not None:
                if parsed.port < 1 or parsed.port > 65535:
                    return False

            hostname = parsed.hostname or ""
            if not hostname:
                return False

            if self.block_private_hosts:
                for pattern in self.private_patterns:
                    if re.match(pattern, hostname):
                        return False

            return True
        except ValueError:
            return False
