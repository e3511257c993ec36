"""MediaWiki client for reading and writing wiki pages."""
import logging
from typing import Any, Dict, Optional

import mwclient
import requests
from mwclient.errors import LoginError, MwClientError

from errors import AuthenticationError, WikiError

logger = logging.getLogger(__name__)


class MediaWikiClient:
    """Client for a MediaWiki site, used as the migration target."""

    def __init__(
        self,
        host: str,
        path: str = "/w/",
        scheme: str = "https",
        username: Optional[str] = None,
        password: Optional[str] = None,
        user_agent: str = "GoogleDocMigration/1.0",
    ):
        """
        Initialize MediaWiki client.

        The connection is opened on first use, so commands that never touch
        the wiki work without it.

        Args:
            host: Wiki host name (e.g., 'localhost' or 'wiki.example.com')
            path: Script path of the wiki, where api.php lives
            scheme: 'http' or 'https'
            username: Wiki (bot) username, anonymous if not set
            password: Wiki (bot) password
            user_agent: User agent sent with every request

        Example:
            wiki = MediaWikiClient(host="localhost", path="/wiki/", scheme="http",
                                   username="MigrationBot", password="secret")
            page = wiki.get_page("CloudHealth")
        """
        self.host = host
        self.path = path
        self.scheme = scheme
        self.username = username
        self.password = password
        self.user_agent = user_agent

        self.session: Optional[requests.Session] = None
        self._site = None

    @property
    def endpoint(self) -> str:
        return f"{self.scheme}://{self.host}{self.path}"

    @property
    def site(self) -> mwclient.Site:
        """Connected (and logged in) site, created on first access."""
        if self._site is None:
            self.login()
        return self._site

    def login(self) -> None:
        """
        Connect to the wiki and log in if credentials are configured.

        Raises:
            AuthenticationError: If the wiki rejects the credentials
            WikiError: If the wiki cannot be reached
        """
        logger.info(f"Connecting to wiki: {self.endpoint}")

        self.session = requests.Session()
        try:
            site = mwclient.Site(
                self.host,
                path=self.path,
                scheme=self.scheme,
                pool=self.session,
                clients_useragent=self.user_agent,
            )
            if self.username:
                logger.info(f"Logging in to wiki as {self.username}")
                site.login(self.username, self.password)
        except LoginError as e:
            self.close()
            raise AuthenticationError(f"Wiki login failed for {self.username}: {e}") from e
        except (MwClientError, requests.exceptions.RequestException) as e:
            self.close()
            raise WikiError(f"Could not connect to wiki {self.endpoint}: {e}") from e

        self._site = site
        logger.info("✅ Connected to wiki")

    def get_page(self, title: str) -> Dict[str, Any]:
        """
        Read a wiki page.

        Args:
            title: Page title

        Returns:
            Dictionary with 'title', 'text' (empty if the page does not
            exist) and 'exists'
        """
        logger.debug(f"Reading wiki page: {title}")
        try:
            page = self.site.pages[title]
            return {
                "title": page.name,
                "text": page.text() if page.exists else "",
                "exists": page.exists,
            }
        except (MwClientError, requests.exceptions.RequestException) as e:
            raise WikiError(f"Could not read wiki page '{title}': {e}") from e

    def save_page(self, title: str, text: str, summary: str = "") -> Dict[str, Any]:
        """
        Create or overwrite a wiki page.

        Args:
            title: Page title
            text: Full page text
            summary: Edit summary

        Returns:
            Edit result returned by the API
        """
        logger.info(f"Saving wiki page: {title}")
        try:
            page = self.site.pages[title]
            return page.edit(text, summary=summary)
        except (MwClientError, requests.exceptions.RequestException) as e:
            raise WikiError(f"Could not save wiki page '{title}': {e}") from e

    def close(self) -> None:
        """Close the HTTP session."""
        if self.session is not None:
            self.session.close()
            self.session = None
        self._site = None

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
