import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from app.core.config import settings
from app.exceptions.metadata import (
    FetchException,
    FetchHTTPErrorException,
    FetchTimeoutException,
    InvalidURLException,
    ParseErrorException,
)
from app.services.url_validator import URLValidatorInterface

logger = logging.getLogger(__name__)


class WebFetcherInterface(ABC):
    """Interface for fetching web content following the Dependency Inversion Principle"""

    @abstractmethod
    async def fetch_html(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> str:
        pass

    @abstractmethod
    async def fetch_json(
        self,
        url: str,
        params: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        pass


class WebFetcher(WebFetcherInterface):
    """
    Fetches remote content with a bounded timeout.

    Transport failures are mapped onto the fetch exception taxonomy so callers
    never see raw httpx errors.
    """

    def __init__(
        self,
        url_validator: URLValidatorInterface,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url_validator = url_validator
        self.transport = transport

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=settings.fetch_follow_redirects,
            transport=self.transport,
        )

    async def _get(
        self,
        url: str,
        headers: Dict[str, str],
        params: Optional[Dict[str, str]],
        timeout: float,
    ) -> httpx.Response:
        if not self.url_validator.validate(url):
            logger.warning(f"Invalid or unsafe URL provided: {url}")
            raise InvalidURLException(url, "URL is not safe to fetch")

        try:
            # Deadline covers the whole request, body included
            return await asyncio.wait_for(self._request(url, headers, params, timeout), timeout)
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            logger.warning(f"Timed out after {timeout}s fetching URL {url}: {e!r}")
            raise FetchTimeoutException(url, timeout)
        except httpx.HTTPStatusError as e:
            logger.warning(f"HTTP error occurred while fetching URL {url}: {e.response.status_code}")
            raise FetchHTTPErrorException(url, e.response.status_code)
        except httpx.RequestError as e:
            logger.warning(f"Request error occurred while fetching URL {url}: {str(e)}")
            raise FetchException(url, str(e) or e.__class__.__name__)

    async def _request(
        self,
        url: str,
        headers: Dict[str, str],
        params: Optional[Dict[str, str]],
        timeout: float,
    ) -> httpx.Response:
        async with self._client(timeout) as client:
            res = await client.get(url, headers=headers, params=params)
            res.raise_for_status()
            return res

    async def fetch_html(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> str:
        """Fetch a page body with the identifying user agent unless headers are given"""
        logger.info(f"Fetching HTML content from URL: {url}")
        res = await self._get(
            url,
            headers or {"User-Agent": settings.fetch_user_agent},
            None,
            timeout or settings.fetch_timeout,
        )
        logger.info(f"Successfully fetched HTML content from URL: {url}")
        return res.text

    async def fetch_json(
        self,
        url: str,
        params: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Fetch and decode a JSON object, e.g. an oEmbed response"""
        logger.info(f"Fetching JSON from URL: {url}")
        res = await self._get(
            url,
            {"User-Agent": settings.fetch_user_agent, "Accept": "application/json"},
            params,
            timeout or settings.fetch_timeout,
        )
        try:
            data = res.json()
        except ValueError as e:
            raise ParseErrorException(url, f"invalid JSON: {e}")
        if not isinstance(data, dict):
            raise ParseErrorException(url, "expected a JSON object")
        return data
