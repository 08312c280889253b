import asyncio

import httpx
import pytest

from app.exceptions.metadata import (
    FetchException,
    FetchHTTPErrorException,
    FetchTimeoutException,
    InvalidURLException,
    ParseErrorException,
)

from helpers import html_response


class SlowBody(httpx.AsyncByteStream):
    """Response body that trickles out one byte at a time"""

    def __init__(self, chunks: int, interval: float):
        self.chunks = chunks
        self.interval = interval

    async def __aiter__(self):
        for _ in range(self.chunks):
            await asyncio.sleep(self.interval)
            yield b"x"


class TestWebFetcher:
    """Unit tests for WebFetcher"""

    @pytest.mark.asyncio
    async def test_slow_body_hits_overall_deadline(self, make_fetcher):
        """Test that a body dripping in under the read timeout still times out as a whole."""
        # Arrange
        fetcher = make_fetcher(lambda request: httpx.Response(200, stream=SlowBody(chunks=8, interval=0.1)))
        loop = asyncio.get_running_loop()
        started = loop.time()

        # Act
        with pytest.raises(FetchTimeoutException) as exc_info:
            await fetcher.fetch_html("https://slow.example.com/", timeout=0.3)

        # Assert
        assert loop.time() - started < 0.7
        assert exc_info.value.timeout == 0.3
        assert exc_info.value.status_code == 504

    @pytest.mark.asyncio
    async def test_slow_body_within_deadline(self, make_fetcher):
        fetcher = make_fetcher(lambda request: httpx.Response(200, stream=SlowBody(chunks=3, interval=0.01)))

        assert await fetcher.fetch_html("https://slow.example.com/", timeout=2) == "xxx"

    @pytest.mark.asyncio
    async def test_transport_timeout(self, make_fetcher):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(FetchTimeoutException):
            await make_fetcher(handler).fetch_html("https://example.com/")

    @pytest.mark.asyncio
    async def test_http_error_status(self, make_fetcher):
        fetcher = make_fetcher(lambda request: html_response("gone", status_code=410))

        with pytest.raises(FetchHTTPErrorException) as exc_info:
            await fetcher.fetch_html("https://example.com/")
        assert exc_info.value.http_status == 410

    @pytest.mark.asyncio
    async def test_connection_error(self, make_fetcher):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(FetchException):
            await make_fetcher(handler).fetch_html("https://example.com/")

    @pytest.mark.asyncio
    async def test_private_host_is_not_requested(self, make_fetcher):
        requests = []

        def handler(request):
            requests.append(request)
            return html_response("<html></html>")

        with pytest.raises(InvalidURLException):
            await make_fetcher(handler).fetch_html("http://192.168.1.1/")
        assert requests == []

    @pytest.mark.asyncio
    async def test_fetch_json_object(self, make_fetcher):
        def handler(request):
            assert request.headers["accept"] == "application/json"
            assert request.url.params["format"] == "json"
            return httpx.Response(200, json={"title": "Hello"})

        data = await make_fetcher(handler).fetch_json("https://example.com/oembed", params={"format": "json"})

        assert data == {"title": "Hello"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [
        httpx.Response(200, text="not json"),
        httpx.Response(200, json=["a", "list"]),
    ])
    async def test_fetch_json_rejects_unexpected_shape(self, make_fetcher, response):
        with pytest.raises(ParseErrorException):
            await make_fetcher(lambda request: response).fetch_json("https://example.com/oembed")
