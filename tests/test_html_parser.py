import pytest
from app.services.html_parser import HTMLParser


class TestHTMLParser:
    """Unit tests for HTMLParser"""

    def test_get_title_from_og_title(self):
        """Test extracting title from og:title meta tag."""
        # Arrange
        html = """
        <html>
        <head>
            <meta name="twitter:title" content="Twitter Title">
            <meta property="og:title" content="Open Graph Title">
            <title>Regular Title</title>
        </head>
        <body></body>
        </html>
        """
        parser = HTMLParser(html, "https://example.com")

        # Act
        result = parser.get_title()

        # Assert
        assert result == "Open Graph Title"

    def test_get_title_from_twitter_title(self):
        """Test that twitter:title is used before the <title> element."""
        html = """
        <html><head>
            <meta name="twitter:title" content="Twitter Title">
            <title>Regular Title</title>
        </head></html>
        """
        parser = HTMLParser(html, "https://example.com")

        assert parser.get_title() == "Twitter Title"

    def test_get_title_from_regular_title(self):
        """Test extracting title from regular title tag, trimmed."""
        html = "<html><head><title>\n   Regular Title  \n</title></head></html>"
        parser = HTMLParser(html, "https://example.com")

        assert parser.get_title() == "Regular Title"

    def test_get_title_missing(self):
        """Test that a page without any title source returns None."""
        parser = HTMLParser("<html><head><title>   </title></head></html>", "https://example.com")

        assert parser.get_title() is None

    @pytest.mark.parametrize("head,expected", [
        ('<meta property="og:description" content="OG"><meta name="description" content="Meta">', "OG"),
        ('<meta name="twitter:description" content="Card"><meta name="description" content="Meta">', "Card"),
        ('<meta name="description" content="  Meta  ">', "Meta"),
        ("", None),
    ])
    def test_get_description(self, head, expected):
        """Test description priority: Open Graph, Twitter card, then meta description."""
        parser = HTMLParser(f"<html><head>{head}</head></html>", "https://example.com")

        assert parser.get_description() == expected

    def test_get_image_prefers_og_image(self):
        """Test extracting image from og:image before twitter:image."""
        html = """
        <html><head>
            <meta name="twitter:image" content="https://example.com/card.jpg">
            <meta property="og:image" content="/og.jpg">
        </head></html>
        """
        parser = HTMLParser(html, "https://example.com")

        # The raw reference is returned; extractors resolve it
        assert parser.get_image() == "/og.jpg"

    def test_get_image_ignores_body_images(self):
        """Test that <img> tags are not used as a preview image."""
        html = '<html><body><img src="/path/to/image.jpg"></body></html>'
        parser = HTMLParser(html, "https://example.com")

        assert parser.get_image() is None

    def test_get_favicon_rel_priority(self):
        """Test icon is preferred over shortcut icon and apple-touch-icon regardless of order."""
        html = """
        <html><head>
            <link rel="apple-touch-icon" href="/apple.png">
            <link rel="shortcut icon" href="/shortcut.ico">
            <link rel="icon" href="/icon.png">
        </head></html>
        """
        parser = HTMLParser(html, "https://example.com")

        assert parser.get_favicon() == "/icon.png"

    def test_get_favicon_shortcut_icon(self):
        """Test shortcut icon is used when there is no plain icon link."""
        html = """
        <html><head>
            <link rel="apple-touch-icon" href="/apple.png">
            <link rel="Shortcut Icon" href="/shortcut.ico">
        </head></html>
        """
        parser = HTMLParser(html, "https://example.com")

        assert parser.get_favicon() == "/shortcut.ico"

    def test_get_favicon_missing(self):
        """Test that pages without icon links return None."""
        html = '<html><head><link rel="stylesheet" href="/site.css"></head></html>'
        parser = HTMLParser(html, "https://example.com")

        assert parser.get_favicon() is None

    def test_get_first_heading_skips_ignored(self):
        """Test that generic headings are skipped."""
        html = "<html><body><h1>Reddit</h1><h1>  </h1><h1>Actual heading</h1></body></html>"
        parser = HTMLParser(html, "https://example.com")

        assert parser.get_first_heading(ignore=["reddit"]) == "Actual heading"

    def test_select_text_first_matching_selector(self):
        """Test that the first selector with text wins and whitespace is collapsed."""
        html = """
        <html><body>
            <div class="empty"></div>
            <div class="body"><p>First   line</p>
            <p>Second line</p></div>
        </body></html>
        """
        parser = HTMLParser(html, "https://example.com")

        assert parser.select_text([".missing", ".empty", ".body p"]) == "First line Second line"
