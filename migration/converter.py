"""Convert exported Google Docs HTML into MediaWiki markup."""
import logging
from pathlib import Path
from urllib.parse import parse_qs, urlparse

import pypandoc
from bs4 import BeautifulSoup

from errors import ConversionError

logger = logging.getLogger(__name__)

# Elements that carry no content for the wiki page
REMOVED_ELEMENTS = ["head", "title", "meta", "link", "style", "script"]

# Google Docs styles everything through generated classes and inline styles
STRIPPED_ATTRIBUTES = ["class", "id", "style"]

GOOGLE_REDIRECT_HOSTS = {"www.google.com", "google.com"}


class HTMLToWikiConverter:
    """Convert HTML to wiki markup with pandoc after cleaning it with BeautifulSoup."""

    def __init__(self, target_format: str = "mediawiki"):
        """
        Initialize converter.

        Args:
            target_format: pandoc output format (default: mediawiki)
        """
        self.parser = "lxml"
        self.target_format = target_format

    def convert_file(self, path: str) -> str:
        """
        Convert a staged HTML file.

        Raises:
            ConversionError: If the file cannot be read or converted
        """
        try:
            html_content = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConversionError(f"Could not read staged file {path}: {e}") from e

        return self.convert(html_content)

    def convert(self, html_content: str) -> str:
        """
        Convert HTML to wiki markup.

        Args:
            html_content: HTML document or fragment

        Returns:
            Wiki markup text

        Raises:
            ConversionError: If pandoc fails
        """
        cleaned = self.clean_html(html_content)
        if not cleaned:
            logger.warning("Document has no content to convert")
            return ""

        try:
            markup = pypandoc.convert_text(cleaned, self.target_format, format="html")
        except (RuntimeError, OSError) as e:
            raise ConversionError(f"pandoc conversion to {self.target_format} failed: {e}") from e

        logger.debug(f"Converted {len(cleaned)} characters of HTML to {len(markup)} characters of markup")
        return markup.strip()

    def clean_html(self, html_content: str) -> str:
        """
        Strip export noise from Google Docs HTML.

        Removes head/style/script elements, styling attributes, empty
        bookmark anchors and bare spans, and replaces Google redirect links
        with their targets.

        Returns:
            Body markup of the cleaned document
        """
        if not html_content or not html_content.strip():
            return ""

        soup = BeautifulSoup(html_content, self.parser)

        for element in soup(REMOVED_ELEMENTS):
            element.decompose()

        for anchor in soup.find_all("a"):
            href = anchor.get("href")
            if href:
                anchor["href"] = self.unwrap_redirect(href)
            elif not anchor.get_text(strip=True):
                anchor.decompose()

        for tag in soup.find_all(True):
            for attribute in STRIPPED_ATTRIBUTES:
                if attribute in tag.attrs:
                    del tag[attribute]

        for span in soup.find_all("span"):
            if not span.attrs:
                span.unwrap()

        body = soup.body or soup
        return body.decode_contents().strip()

    @staticmethod
    def unwrap_redirect(url: str) -> str:
        """
        Replace a Google redirect link with its target.

        Example:
            >>> unwrap_redirect('https://www.google.com/url?q=https://example.com/&sa=D')
            'https://example.com/'
        """
        parsed = urlparse(url)
        if parsed.netloc in GOOGLE_REDIRECT_HOSTS and parsed.path == "/url":
            target = parse_qs(parsed.query).get("q")
            if target:
                return target[0]
        return url
