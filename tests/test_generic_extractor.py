import httpx
import pytest

from app.exceptions.metadata import FetchException, FetchHTTPErrorException, FetchTimeoutException
from app.services.extractors.generic import GenericExtractor
from app.services.url_normalizer import default_favicon, normalize_url

from helpers import html_response


class TestGenericExtractor:
    """Unit tests for GenericExtractor"""

    @pytest.mark.asyncio
    async def test_og_title_without_image(self, make_fetcher):
        """Test the basic article case: og:title, no image, generated favicon."""
        # Arrange
        html = '<html><head><meta property="og:title" content="Example Article"></head></html>'
        extractor = GenericExtractor(make_fetcher(lambda request: html_response(html)))

        # Act
        result = await extractor.extract(normalize_url("https://example.com/article"))

        # Assert
        assert result.title == "Example Article"
        assert result.image_url is None
        assert result.description is None
        assert result.favicon == default_favicon("example.com")
        assert result.domain == "example.com"
        assert result.url == "https://example.com/article"

    @pytest.mark.asyncio
    async def test_full_metadata_with_relative_references(self, make_fetcher):
        """Test that relative image and favicon references are made absolute."""
        html = """
        <html><head>
            <title>Fallback title</title>
            <meta property="og:title" content="  Spaced Title  ">
            <meta property="og:description" content="  An article about things.  ">
            <meta property="og:image" content="/images/cover.png">
            <link rel="shortcut icon" href="favicon.ico">
        </head></html>
        """
        extractor = GenericExtractor(make_fetcher(lambda request: html_response(html)))

        result = await extractor.extract(normalize_url("https://www.example.com/blog/post"))

        assert result.title == "Spaced Title"
        assert result.description == "An article about things."
        assert result.image_url == "https://www.example.com/images/cover.png"
        assert result.favicon == "https://www.example.com/blog/favicon.ico"
        assert result.domain == "example.com"

    @pytest.mark.asyncio
    async def test_twitter_card_fallbacks(self, make_fetcher):
        """Test that Twitter card tags are used when Open Graph is missing."""
        html = """
        <html><head>
            <meta name="twitter:title" content="Card Title">
            <meta name="twitter:description" content="Card description">
            <meta name="twitter:image" content="https://cdn.example.com/card.jpg">
        </head></html>
        """
        extractor = GenericExtractor(make_fetcher(lambda request: html_response(html)))

        result = await extractor.extract(normalize_url("https://example.com/"))

        assert result.title == "Card Title"
        assert result.description == "Card description"
        assert result.image_url == "https://cdn.example.com/card.jpg"

    @pytest.mark.asyncio
    async def test_title_falls_back_to_domain(self, make_fetcher):
        """Test that a page without any title uses the domain."""
        extractor = GenericExtractor(make_fetcher(lambda request: html_response("<html><body>hi</body></html>")))

        result = await extractor.extract(normalize_url("https://www.example.org/page"))

        assert result.title == "example.org"

    @pytest.mark.asyncio
    async def test_unresolvable_image_is_dropped(self, make_fetcher):
        """Test that a bad image reference degrades to no image instead of failing."""
        html = """
        <html><head>
            <meta property="og:title" content="Title">
            <meta property="og:image" content="javascript:alert(1)">
            <link rel="icon" href="data:image/png;base64,AAAA">
        </head></html>
        """
        extractor = GenericExtractor(make_fetcher(lambda request: html_response(html)))

        result = await extractor.extract(normalize_url("https://example.com/"))

        assert result.image_url is None
        assert result.favicon == default_favicon("example.com")

    @pytest.mark.asyncio
    async def test_sends_identifying_user_agent(self, make_fetcher):
        """Test that the descriptive user agent is sent."""
        seen = {}

        def handler(request):
            seen["user_agent"] = request.headers["user-agent"]
            return html_response("<html></html>")

        extractor = GenericExtractor(make_fetcher(handler))

        await extractor.extract(normalize_url("https://example.com/"))

        assert "LinkCanvas/1.0" in seen["user_agent"]

    @pytest.mark.asyncio
    async def test_non_2xx_raises_fetch_http_error(self, make_fetcher):
        """Test that non-2xx responses propagate as FetchHTTPErrorException."""
        extractor = GenericExtractor(make_fetcher(lambda request: html_response("gone", status_code=404)))

        with pytest.raises(FetchHTTPErrorException) as exc_info:
            await extractor.extract(normalize_url("https://example.com/missing"))
        assert exc_info.value.http_status == 404

    @pytest.mark.asyncio
    async def test_timeout_raises_fetch_timeout(self, make_fetcher):
        """Test that timeouts propagate as FetchTimeoutException."""
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        extractor = GenericExtractor(make_fetcher(handler))

        with pytest.raises(FetchTimeoutException):
            await extractor.extract(normalize_url("https://example.com/slow"))

    @pytest.mark.asyncio
    async def test_connection_error_raises_fetch_exception(self, make_fetcher):
        """Test that unreachable hosts propagate as FetchException."""
        def handler(request):
            raise httpx.ConnectError("name resolution failed", request=request)

        extractor = GenericExtractor(make_fetcher(handler))

        with pytest.raises(FetchException):
            await extractor.extract(normalize_url("https://no-such-host.invalid/"))
