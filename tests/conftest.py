import os

# Keep test runs from writing log files
os.environ.setdefault("LOG_TO_FILE", "false")

import httpx  # noqa: E402
import pytest  # noqa: E402

from app.services.url_validator import URLValidator  # noqa: E402
from app.services.web_fetcher import WebFetcher  # noqa: E402


@pytest.fixture
def make_fetcher():
    """Build a WebFetcher whose requests are answered by the given handler"""
    def _make(handler) -> WebFetcher:
        return WebFetcher(URLValidator(), transport=httpx.MockTransport(handler))
    return _make
